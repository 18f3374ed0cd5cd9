"""Caller identity and the mutation access rules."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from sellerservice.dao.base import CompanyNotFoundError
from sellerservice.dao.company_dao import CompanyDAO
from sellerservice.services import (
    AccessDeniedError,
    NotFoundError,
    SuperuserRequiredError,
)

ROLE_SUPERUSER = "superuser"


@dataclass(frozen=True)
class Caller:
    """Identity resolved upstream and forwarded in ``X-User-ID`` / ``X-User-Role``."""

    user_id: int
    role: str

    @property
    def is_superuser(self) -> bool:
        return self.role == ROLE_SUPERUSER


def require_superuser(caller: Caller) -> None:
    if not caller.is_superuser:
        raise SuperuserRequiredError("superuser role required")


async def require_manager(
    session: AsyncSession,
    company_dao: CompanyDAO,
    caller: Caller,
    company_id: int,
) -> None:
    """Allow superusers and managers of *company_id*.

    Raises :class:`NotFoundError` if the company does not exist and
    :class:`AccessDeniedError` if the caller is not one of its managers.
    """
    if caller.is_superuser:
        return
    try:
        allowed = await company_dao.is_manager(session, company_id, caller.user_id)
    except CompanyNotFoundError as exc:
        raise NotFoundError("company not found") from exc
    if not allowed:
        raise AccessDeniedError("access denied: user is not a manager of this company")
