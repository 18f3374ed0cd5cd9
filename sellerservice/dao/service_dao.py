"""ServiceDAO — services and service_addresses tables.

Every operation is scoped by ``(company_id, service_id)``: a service looked
up under the wrong company is simply not found. Address links are stored as
given; checking that they belong to the company is the caller's job.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from sellerservice import domain
from sellerservice.dao.base import BaseDAO, ServiceNotFoundError
from sellerservice.models.service import Service, ServiceAddress

_services = Service.__table__
_links = ServiceAddress.__table__

_UPDATABLE = ("name", "description", "average_duration")


def _service_from_row(row: Row, address_ids: list[int]) -> domain.Service:
    return domain.Service(
        id=row.id,
        company_id=row.company_id,
        name=row.name,
        description=row.description,
        average_duration=row.average_duration,
        address_ids=address_ids,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class ServiceDAO(BaseDAO[Service]):
    model = Service

    # ── read ──────────────────────────────────────────────────────────────

    async def get_by_id(
        self, session: AsyncSession, company_id: int, service_id: int
    ) -> domain.Service:
        stmt = select(_services).where(
            _services.c.id == service_id,
            _services.c.company_id == company_id,
        )
        row = (await session.execute(stmt)).one_or_none()
        if row is None:
            raise ServiceNotFoundError(company_id, service_id)
        links = await self._address_ids(session, [service_id])
        return _service_from_row(row, links.get(service_id, []))

    async def list_by_company(self, session: AsyncSession, company_id: int) -> list[domain.Service]:
        """All services of a company, newest first."""
        stmt = (
            select(_services)
            .where(_services.c.company_id == company_id)
            .order_by(_services.c.created_at.desc(), _services.c.id.desc())
        )
        rows = (await session.execute(stmt)).all()
        links = await self._address_ids(session, [r.id for r in rows])
        return [_service_from_row(r, links.get(r.id, [])) for r in rows]

    # ── write ─────────────────────────────────────────────────────────────

    async def create(
        self,
        session: AsyncSession,
        company_id: int,
        data: domain.CreateServiceInput,
    ) -> domain.Service:
        """Insert the service and one link row per address id."""
        async with session.begin_nested():
            stmt = (
                insert(_services)
                .values(
                    company_id=company_id,
                    name=data.name,
                    description=data.description,
                    average_duration=data.average_duration,
                )
                .returning(_services.c.id, _services.c.created_at, _services.c.updated_at)
            )
            row = (await session.execute(stmt)).one()
            await self._link(session, row.id, data.address_ids)

        return domain.Service(
            id=row.id,
            company_id=company_id,
            name=data.name,
            description=data.description,
            average_duration=data.average_duration,
            address_ids=sorted(set(data.address_ids)),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    async def update(
        self,
        session: AsyncSession,
        company_id: int,
        service_id: int,
        data: domain.UpdateServiceInput,
    ) -> domain.Service:
        """Partial update; a supplied ``address_ids`` replaces every link.

        Raises :class:`ServiceNotFoundError` if no row matched.
        """
        values: dict[str, Any] = {
            key: getattr(data, key) for key in _UPDATABLE if getattr(data, key) is not None
        }
        values["updated_at"] = func.now()

        async with session.begin_nested():
            result = await session.execute(
                update(_services)
                .where(_services.c.id == service_id, _services.c.company_id == company_id)
                .values(**values)
            )
            if result.rowcount == 0:
                raise ServiceNotFoundError(company_id, service_id)

            if data.address_ids is not None:
                await session.execute(delete(_links).where(_links.c.service_id == service_id))
                await self._link(session, service_id, data.address_ids)

        return await self.get_by_id(session, company_id, service_id)

    async def delete(self, session: AsyncSession, company_id: int, service_id: int) -> None:
        """Delete the service; its links go by ``ON DELETE CASCADE``."""
        result = await session.execute(
            delete(_services).where(
                _services.c.id == service_id,
                _services.c.company_id == company_id,
            )
        )
        if result.rowcount == 0:
            raise ServiceNotFoundError(company_id, service_id)

    # ── internal ──────────────────────────────────────────────────────────

    async def _link(self, session: AsyncSession, service_id: int, address_ids: list[int]) -> None:
        if not address_ids:
            return
        await session.execute(
            insert(_links),
            [{"service_id": service_id, "address_id": aid} for aid in sorted(set(address_ids))],
        )

    async def _address_ids(
        self, session: AsyncSession, service_ids: list[int]
    ) -> dict[int, list[int]]:
        """Linked address ids per service, in one query."""
        if not service_ids:
            return {}
        stmt = (
            select(_links.c.service_id, _links.c.address_id)
            .where(_links.c.service_id.in_(service_ids))
            .order_by(_links.c.service_id, _links.c.address_id)
        )
        grouped: dict[int, list[int]] = defaultdict(list)
        for row in (await session.execute(stmt)).all():
            grouped[row.service_id].append(row.address_id)
        return grouped
