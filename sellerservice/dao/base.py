"""Shared DAO plumbing: store errors, counting and offset paging."""

from typing import Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy import exists as sa_exists
from sqlalchemy.ext.asyncio import AsyncSession

from sellerservice.core.database import Base

ModelT = TypeVar("ModelT", bound=Base)


class StoreError(Exception):
    """Base store exception."""


class CompanyNotFoundError(StoreError):
    """No company row with the requested id."""

    def __init__(self, company_id: int) -> None:
        self.company_id = company_id
        super().__init__(f"company {company_id} not found")


class ServiceNotFoundError(StoreError):
    """No service row with the requested (company_id, service_id) pair."""

    def __init__(self, company_id: int, service_id: int) -> None:
        self.company_id = company_id
        self.service_id = service_id
        super().__init__(f"service {service_id} not found in company {company_id}")


class BaseDAO(Generic[ModelT]):
    """Base data-access object. Subclasses set ``model`` class attribute.

    Reads select table columns (``Model.__table__``) rather than ORM
    entities, so results never come from a stale identity map after a Core
    ``UPDATE`` in the same session.
    """

    model: type[ModelT]

    async def exists(self, session: AsyncSession, pk: int) -> bool:
        """Check existence without loading the row."""
        table = self.model.__table__
        stmt = select(sa_exists().where(table.c.id == pk))
        result = await session.execute(stmt)
        return result.scalar_one()

    async def count(self, session: AsyncSession, query: Select | None = None) -> int:
        """Return the row count for *query*, or total rows if query is None."""
        if query is None:
            query = select(func.count()).select_from(self.model.__table__)
        else:
            query = select(func.count()).select_from(query.subquery())

        result = await session.execute(query)
        return result.scalar_one()

    @staticmethod
    def paginate_offset(query: Select, page: int, limit: int) -> Select:
        """Apply 1-based ``page`` / ``limit`` to *query*."""
        return query.offset((page - 1) * limit).limit(limit)
