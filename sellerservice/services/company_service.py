"""CompanyService — company CRUD behind the superuser / manager access rules."""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from sellerservice.dao.base import CompanyNotFoundError
from sellerservice.dao.company_dao import CompanyDAO
from sellerservice.schemas.company import (
    CompanyFilterRequest,
    CompanyListResponse,
    CompanyResponse,
    CreateCompanyRequest,
    UpdateCompanyRequest,
)
from sellerservice.services import NotFoundError, internal_errors
from sellerservice.services.access import Caller, require_manager, require_superuser

log = structlog.get_logger(__name__)


class CompanyService:
    """Stateless service for company aggregates.

    Reads are public. Create and delete need the superuser role; update
    needs a superuser or one of the company's managers.
    """

    def __init__(self, company_dao: CompanyDAO) -> None:
        self._company_dao = company_dao

    async def create(
        self,
        session: AsyncSession,
        caller: Caller,
        request: CreateCompanyRequest,
    ) -> CompanyResponse:
        """Raises :class:`SuperuserRequiredError` for non-superusers."""
        require_superuser(caller)
        with internal_errors("company.create"):
            company = await self._company_dao.create(session, request.to_domain())
        log.info("company.created", company_id=company.id, user_id=caller.user_id)
        return CompanyResponse.from_domain(company)

    async def get(self, session: AsyncSession, company_id: int) -> CompanyResponse:
        """Raises :class:`NotFoundError` if the company does not exist."""
        with internal_errors("company.get"):
            try:
                company = await self._company_dao.get_by_id(session, company_id)
            except CompanyNotFoundError as exc:
                raise NotFoundError("company not found") from exc
        return CompanyResponse.from_domain(company)

    async def list(
        self, session: AsyncSession, request: CompanyFilterRequest
    ) -> CompanyListResponse:
        with internal_errors("company.list"):
            companies, pagination = await self._company_dao.list(session, request.to_domain())
        return CompanyListResponse.from_domain(companies, pagination)

    async def update(
        self,
        session: AsyncSession,
        caller: Caller,
        company_id: int,
        request: UpdateCompanyRequest,
    ) -> CompanyResponse:
        """Raises :class:`NotFoundError` or :class:`AccessDeniedError`."""
        with internal_errors("company.update"):
            await require_manager(session, self._company_dao, caller, company_id)
            try:
                company = await self._company_dao.update(session, company_id, request.to_domain())
            except CompanyNotFoundError as exc:
                raise NotFoundError("company not found") from exc
        log.info("company.updated", company_id=company_id, user_id=caller.user_id)
        return CompanyResponse.from_domain(company)

    async def delete(self, session: AsyncSession, caller: Caller, company_id: int) -> None:
        """Raises :class:`SuperuserRequiredError` or :class:`NotFoundError`."""
        require_superuser(caller)
        with internal_errors("company.delete"):
            try:
                await self._company_dao.delete(session, company_id)
            except CompanyNotFoundError as exc:
                raise NotFoundError("company not found") from exc
        log.info("company.deleted", company_id=company_id, user_id=caller.user_id)
