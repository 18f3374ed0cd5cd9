"""CompanyDAO — companies, addresses and working_hours tables.

A company is stored as one aggregate: the ``companies`` row, its
``addresses`` rows and exactly one ``working_hours`` row. Composite writes
run inside a SAVEPOINT so a failure at any step leaves no partial aggregate.
"""

from __future__ import annotations

from datetime import time
from typing import Any

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from sellerservice import domain
from sellerservice.dao.base import BaseDAO, CompanyNotFoundError
from sellerservice.models.address import Address
from sellerservice.models.company import Company
from sellerservice.models.working_hours import WorkingHours

_companies = Company.__table__
_addresses = Address.__table__
_working_hours = WorkingHours.__table__

_UPDATABLE_SCALARS = ("name", "logo", "description")
_UPDATABLE_ARRAYS = ("tags", "manager_ids")


def _parse_time(value: str | None) -> time | None:
    return time.fromisoformat(value) if value is not None else None


def _format_time(value: time | None) -> str | None:
    return value.strftime("%H:%M") if value is not None else None


def _working_hours_values(hours: domain.WorkingHours) -> dict[str, Any]:
    """Flatten a 7-day schedule into ``<day>_is_open`` / ``_open_time`` / ``_close_time``."""
    values: dict[str, Any] = {}
    for day, schedule in hours.days():
        values[f"{day}_is_open"] = schedule.is_open
        values[f"{day}_open_time"] = _parse_time(schedule.open_time)
        values[f"{day}_close_time"] = _parse_time(schedule.close_time)
    return values


def _working_hours_from_row(row: Row) -> domain.WorkingHours:
    m = row._mapping
    return domain.WorkingHours(
        **{
            day: domain.DaySchedule(
                is_open=m[f"{day}_is_open"],
                open_time=_format_time(m[f"{day}_open_time"]),
                close_time=_format_time(m[f"{day}_close_time"]),
            )
            for day in domain.WEEKDAYS
        }
    )


def _address_from_row(row: Row) -> domain.Address:
    return domain.Address(
        id=row.id,
        company_id=row.company_id,
        city=row.city,
        street=row.street,
        building=row.building,
        coordinates=domain.Coordinates(latitude=row.latitude, longitude=row.longitude),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class CompanyDAO(BaseDAO[Company]):
    model = Company

    # ── read ──────────────────────────────────────────────────────────────

    async def get_by_id(self, session: AsyncSession, company_id: int) -> domain.Company:
        """Return the full aggregate.

        Raises :class:`CompanyNotFoundError` if the company row is absent.
        A missing working-hours row is not expected and surfaces as
        ``NoResultFound``.
        """
        stmt = select(_companies).where(_companies.c.id == company_id)
        row = (await session.execute(stmt)).one_or_none()
        if row is None:
            raise CompanyNotFoundError(company_id)
        return await self._assemble(session, row)

    async def list(
        self,
        session: AsyncSession,
        company_filter: domain.CompanyFilter,
    ) -> tuple[list[domain.Company], domain.PaginationResult | None]:
        """Filtered company list, newest first.

        ``tags`` matches on array overlap, ``city`` matches when any of the
        company's addresses is in that city. Pagination is applied only when
        both ``page`` and ``limit`` are set; the total then counts the
        filtered set.
        """
        query = select(_companies)
        if company_filter.tags:
            query = query.where(_companies.c.tags.overlap(company_filter.tags))
        if company_filter.city:
            city_subq = select(_addresses.c.company_id).where(
                _addresses.c.city == company_filter.city
            )
            query = query.where(_companies.c.id.in_(city_subq))

        pagination: domain.PaginationResult | None = None
        if company_filter.paginated:
            total = await self.count(session, query)
            pagination = domain.PaginationResult(
                page=company_filter.page, limit=company_filter.limit, total=total
            )
            query = self.paginate_offset(query, company_filter.page, company_filter.limit)

        query = query.order_by(_companies.c.created_at.desc(), _companies.c.id.desc())
        rows = (await session.execute(query)).all()

        # Enriched one by one: addresses + working hours per company.
        companies = [await self._assemble(session, row) for row in rows]
        return companies, pagination

    async def is_manager(self, session: AsyncSession, company_id: int, user_id: int) -> bool:
        """True if *user_id* is in the company's ``manager_ids``.

        Raises :class:`CompanyNotFoundError` if the company row is absent.
        """
        stmt = select(_companies.c.manager_ids).where(_companies.c.id == company_id)
        row = (await session.execute(stmt)).one_or_none()
        if row is None:
            raise CompanyNotFoundError(company_id)
        return user_id in (row.manager_ids or [])

    async def owned_address_ids(
        self,
        session: AsyncSession,
        company_id: int,
        address_ids: list[int],
    ) -> set[int]:
        """Return the subset of *address_ids* that belong to *company_id*."""
        if not address_ids:
            return set()
        stmt = select(_addresses.c.id).where(
            _addresses.c.company_id == company_id,
            _addresses.c.id.in_(address_ids),
        )
        result = await session.execute(stmt)
        return set(result.scalars().all())

    # ── write ─────────────────────────────────────────────────────────────

    async def create(
        self, session: AsyncSession, data: domain.CreateCompanyInput
    ) -> domain.Company:
        """Insert company, addresses and working hours as one unit.

        Returns the assembled aggregate without re-reading it.
        """
        async with session.begin_nested():
            stmt = (
                insert(_companies)
                .values(
                    name=data.name,
                    logo=data.logo,
                    description=data.description,
                    tags=list(data.tags),
                    manager_ids=list(data.manager_ids),
                )
                .returning(_companies.c.id, _companies.c.created_at, _companies.c.updated_at)
            )
            row = (await session.execute(stmt)).one()

            addresses = [
                await self._insert_address(session, row.id, address)
                for address in data.addresses
            ]
            await session.execute(
                insert(_working_hours).values(
                    company_id=row.id, **_working_hours_values(data.working_hours)
                )
            )

        return domain.Company(
            id=row.id,
            name=data.name,
            logo=data.logo,
            description=data.description,
            tags=list(data.tags),
            addresses=addresses,
            working_hours=data.working_hours,
            manager_ids=list(data.manager_ids),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    async def update(
        self,
        session: AsyncSession,
        company_id: int,
        data: domain.UpdateCompanyInput,
    ) -> domain.Company:
        """Apply a partial update and return the re-read aggregate.

        ``None`` leaves a field unchanged. A supplied ``addresses`` list
        replaces the whole address set (fresh ids); supplied
        ``working_hours`` overwrite all seven days.

        Raises :class:`CompanyNotFoundError` before any child row is touched.
        """
        values: dict[str, Any] = {}
        for key in _UPDATABLE_SCALARS + _UPDATABLE_ARRAYS:
            val = getattr(data, key)
            if val is not None:
                values[key] = list(val) if key in _UPDATABLE_ARRAYS else val
        values["updated_at"] = func.now()

        async with session.begin_nested():
            result = await session.execute(
                update(_companies).where(_companies.c.id == company_id).values(**values)
            )
            if result.rowcount == 0:
                raise CompanyNotFoundError(company_id)

            if data.addresses is not None:
                await session.execute(
                    delete(_addresses).where(_addresses.c.company_id == company_id)
                )
                for address in data.addresses:
                    await self._insert_address(session, company_id, address)

            if data.working_hours is not None:
                await session.execute(
                    update(_working_hours)
                    .where(_working_hours.c.company_id == company_id)
                    .values(**_working_hours_values(data.working_hours))
                )

        return await self.get_by_id(session, company_id)

    async def delete(self, session: AsyncSession, company_id: int) -> None:
        """Delete the company; children go by ``ON DELETE CASCADE``.

        Raises :class:`CompanyNotFoundError` if nothing was deleted.
        """
        result = await session.execute(delete(_companies).where(_companies.c.id == company_id))
        if result.rowcount == 0:
            raise CompanyNotFoundError(company_id)

    # ── internal ──────────────────────────────────────────────────────────

    async def _insert_address(
        self,
        session: AsyncSession,
        company_id: int,
        address: domain.AddressInput,
    ) -> domain.Address:
        stmt = (
            insert(_addresses)
            .values(
                company_id=company_id,
                city=address.city,
                street=address.street,
                building=address.building,
                latitude=address.coordinates.latitude,
                longitude=address.coordinates.longitude,
            )
            .returning(_addresses)
        )
        row = (await session.execute(stmt)).one()
        return _address_from_row(row)

    async def _assemble(self, session: AsyncSession, row: Row) -> domain.Company:
        addr_stmt = (
            select(_addresses)
            .where(_addresses.c.company_id == row.id)
            .order_by(_addresses.c.id)
        )
        addresses = [_address_from_row(r) for r in (await session.execute(addr_stmt)).all()]

        hours_stmt = select(_working_hours).where(_working_hours.c.company_id == row.id)
        hours_row = (await session.execute(hours_stmt)).one()

        return domain.Company(
            id=row.id,
            name=row.name,
            logo=row.logo,
            description=row.description,
            tags=list(row.tags or []),
            addresses=addresses,
            working_hours=_working_hours_from_row(hours_row),
            manager_ids=list(row.manager_ids or []),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
