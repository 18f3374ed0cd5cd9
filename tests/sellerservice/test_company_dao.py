"""Tests for CompanyDAO (PostgreSQL)."""

import pytest
from builders import address, closed_day, company_input, open_day, week
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from sellerservice import domain
from sellerservice.dao.base import CompanyNotFoundError
from sellerservice.models.address import Address
from sellerservice.models.company import Company
from sellerservice.models.working_hours import WorkingHours


async def _count(session, model) -> int:
    return (await session.execute(select(func.count()).select_from(model.__table__))).scalar_one()


# ── create / get_by_id ────────────────────────────────────────────────────


class TestCreate:
    async def test_returns_full_aggregate(self, company_dao, session):
        data = company_input(
            addresses=[address(building="1"), address(city="Kazan", building="2")],
            working_hours=week(sunday=open_day("10:00", "16:00")),
        )
        company = await company_dao.create(session, data)

        assert company.id > 0
        assert company.created_at is not None
        assert [(a.city, a.building) for a in company.addresses] == [
            ("Moscow", "1"),
            ("Kazan", "2"),
        ]
        assert all(a.company_id == company.id for a in company.addresses)
        assert company.working_hours == data.working_hours
        assert company.tags == ["wash"]
        assert company.manager_ids == [100]

    async def test_get_by_id_matches_create(self, company_dao, session):
        created = await company_dao.create(
            session, company_input(addresses=[address(), address(building="7")])
        )
        fetched = await company_dao.get_by_id(session, created.id)
        assert fetched == created

    async def test_seven_day_schedule_round_trip(self, company_dao, session):
        hours = week(
            monday=open_day("08:30", "20:15"),
            wednesday=closed_day(),
            saturday=open_day("00:00", "23:59"),
        )
        created = await company_dao.create(session, company_input(working_hours=hours))
        fetched = await company_dao.get_by_id(session, created.id)

        assert len(fetched.working_hours.days()) == 7
        assert fetched.working_hours.monday == domain.DaySchedule(True, "08:30", "20:15")
        assert fetched.working_hours.wednesday == domain.DaySchedule(False, None, None)
        assert fetched.working_hours.saturday.open_time == "00:00"

    async def test_without_addresses(self, company_dao, session):
        created = await company_dao.create(session, company_input(addresses=[]))
        fetched = await company_dao.get_by_id(session, created.id)
        assert fetched.addresses == []

    async def test_get_missing(self, company_dao, session):
        with pytest.raises(CompanyNotFoundError):
            await company_dao.get_by_id(session, 999_999)

    async def test_failed_address_leaves_no_company(self, company_dao, session):
        before = await _count(session, Company)
        addresses_before = await _count(session, Address)

        bad = address(building="2")
        bad.city = None
        with pytest.raises(IntegrityError):
            await company_dao.create(session, company_input(addresses=[address(), bad]))

        assert await _count(session, Company) == before
        assert await _count(session, Address) == addresses_before
        assert await _count(session, WorkingHours) == before


# ── list ──────────────────────────────────────────────────────────────────


class TestList:
    async def test_no_filter_no_pagination(self, company_dao, make_company, session):
        for i in range(3):
            await make_company(name=f"c{i}")
        companies, pagination = await company_dao.list(session, domain.CompanyFilter())
        assert len(companies) == 3
        assert pagination is None

    async def test_newest_first(self, company_dao, make_company, session):
        first = await make_company(name="first")
        second = await make_company(name="second")
        companies, _ = await company_dao.list(session, domain.CompanyFilter())
        assert [c.id for c in companies] == [second.id, first.id]

    async def test_tags_overlap(self, company_dao, make_company, session):
        wash = await make_company(tags=["wash", "premium"])
        tyres = await make_company(tags=["tyres"])
        await make_company(tags=[])

        companies, _ = await company_dao.list(
            session, domain.CompanyFilter(tags=["premium", "tyres"])
        )
        assert {c.id for c in companies} == {wash.id, tyres.id}

    async def test_city_filter(self, company_dao, make_company, session):
        kazan = await make_company(addresses=[address(), address(city="Kazan")])
        await make_company(addresses=[address()])

        companies, _ = await company_dao.list(session, domain.CompanyFilter(city="Kazan"))
        assert [c.id for c in companies] == [kazan.id]
        # the whole address set comes back, not just the matching one
        assert len(companies[0].addresses) == 2

    async def test_pagination(self, company_dao, make_company, session):
        for i in range(25):
            await make_company(name=f"c{i}")

        companies, pagination = await company_dao.list(
            session, domain.CompanyFilter(page=2, limit=10)
        )
        assert len(companies) == 10
        assert pagination.total == 25
        assert pagination.total_pages == 3

        last, _ = await company_dao.list(session, domain.CompanyFilter(page=3, limit=10))
        assert len(last) == 5

    async def test_pagination_total_counts_filtered_set(
        self, company_dao, make_company, session
    ):
        for _ in range(3):
            await make_company(tags=["wash"])
        for _ in range(4):
            await make_company(tags=["tyres"])

        companies, pagination = await company_dao.list(
            session, domain.CompanyFilter(tags=["wash"], page=1, limit=2)
        )
        assert len(companies) == 2
        assert pagination.total == 3
        assert pagination.total_pages == 2

    async def test_page_without_limit_is_not_paginated(
        self, company_dao, make_company, session
    ):
        for _ in range(3):
            await make_company()
        companies, pagination = await company_dao.list(session, domain.CompanyFilter(page=1))
        assert len(companies) == 3
        assert pagination is None


# ── update ────────────────────────────────────────────────────────────────


class TestUpdate:
    async def test_nil_fields_unchanged(self, company_dao, make_company, session):
        created = await make_company()
        updated = await company_dao.update(session, created.id, domain.UpdateCompanyInput())

        assert updated.name == created.name
        assert updated.logo == created.logo
        assert updated.tags == created.tags
        assert updated.addresses == created.addresses
        assert updated.working_hours == created.working_hours
        assert updated.manager_ids == created.manager_ids

    async def test_scalar_fields(self, company_dao, make_company, session):
        created = await make_company()
        updated = await company_dao.update(
            session,
            created.id,
            domain.UpdateCompanyInput(name="Renamed", description="New text"),
        )
        assert updated.name == "Renamed"
        assert updated.description == "New text"
        assert updated.logo == created.logo

    async def test_addresses_replaced(self, company_dao, make_company, session):
        created = await make_company(addresses=[address(), address(building="2")])
        old_ids = {a.id for a in created.addresses}

        updated = await company_dao.update(
            session,
            created.id,
            domain.UpdateCompanyInput(addresses=[address(city="Sochi", building="9")]),
        )
        assert len(updated.addresses) == 1
        assert updated.addresses[0].city == "Sochi"
        assert updated.addresses[0].id not in old_ids

    async def test_empty_collections_clear(self, company_dao, make_company, session):
        created = await make_company(tags=["a", "b"], manager_ids=[1, 2])
        updated = await company_dao.update(
            session,
            created.id,
            domain.UpdateCompanyInput(tags=[], manager_ids=[], addresses=[]),
        )
        assert updated.tags == []
        assert updated.manager_ids == []
        assert updated.addresses == []

    async def test_absent_collections_kept(self, company_dao, make_company, session):
        created = await make_company(tags=["a", "b"])
        updated = await company_dao.update(
            session, created.id, domain.UpdateCompanyInput(name="x")
        )
        assert updated.tags == ["a", "b"]
        assert updated.addresses == created.addresses

    async def test_working_hours_overwritten(self, company_dao, make_company, session):
        created = await make_company()
        all_closed = domain.WorkingHours(**{day: closed_day() for day in domain.WEEKDAYS})
        updated = await company_dao.update(
            session, created.id, domain.UpdateCompanyInput(working_hours=all_closed)
        )
        assert updated.working_hours == all_closed

    async def test_missing(self, company_dao, session):
        with pytest.raises(CompanyNotFoundError):
            await company_dao.update(session, 999_999, domain.UpdateCompanyInput(name="x"))

    async def test_failed_address_keeps_old_aggregate(self, company_dao, make_company, session):
        created = await make_company(addresses=[address(), address(building="2")])

        bad = address(building="9")
        bad.city = None
        with pytest.raises(IntegrityError):
            await company_dao.update(
                session,
                created.id,
                domain.UpdateCompanyInput(name="Renamed", addresses=[address(city="Sochi"), bad]),
            )

        fetched = await company_dao.get_by_id(session, created.id)
        assert fetched.name == created.name
        assert fetched.addresses == created.addresses


# ── delete ────────────────────────────────────────────────────────────────


class TestDelete:
    async def test_delete(self, company_dao, make_company, session):
        created = await make_company()
        await company_dao.delete(session, created.id)
        with pytest.raises(CompanyNotFoundError):
            await company_dao.get_by_id(session, created.id)

    async def test_missing(self, company_dao, session):
        with pytest.raises(CompanyNotFoundError):
            await company_dao.delete(session, 999_999)


# ── is_manager / owned_address_ids ────────────────────────────────────────


class TestIsManager:
    async def test_manager(self, company_dao, make_company, session):
        created = await make_company(manager_ids=[7, 8])
        assert await company_dao.is_manager(session, created.id, 8) is True

    async def test_not_manager(self, company_dao, make_company, session):
        created = await make_company(manager_ids=[7])
        assert await company_dao.is_manager(session, created.id, 9) is False

    async def test_missing_company(self, company_dao, session):
        with pytest.raises(CompanyNotFoundError):
            await company_dao.is_manager(session, 999_999, 1)


class TestOwnedAddressIds:
    async def test_filters_foreign_ids(self, company_dao, make_company, session):
        mine = await make_company(addresses=[address(), address(building="2")])
        other = await make_company()
        my_ids = [a.id for a in mine.addresses]

        owned = await company_dao.owned_address_ids(
            session, mine.id, my_ids + [other.addresses[0].id]
        )
        assert owned == set(my_ids)

    async def test_empty_input(self, company_dao, session):
        assert await company_dao.owned_address_ids(session, 1, []) == set()
