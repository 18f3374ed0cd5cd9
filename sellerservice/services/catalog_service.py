"""CatalogService — services offered by a company, enriched with prices on read."""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from sellerservice.dao.base import ServiceNotFoundError
from sellerservice.dao.company_dao import CompanyDAO
from sellerservice.dao.service_dao import ServiceDAO
from sellerservice.integrations import price_client as pricing
from sellerservice.schemas.service import (
    CreateServiceRequest,
    ServiceListResponse,
    ServiceResponse,
    UpdateServiceRequest,
)
from sellerservice.services import (
    InvalidReferenceError,
    NotFoundError,
    PricesNotFoundError,
    internal_errors,
)
from sellerservice.services.access import Caller, require_manager

log = structlog.get_logger(__name__)


class CatalogService:
    """Service CRUD scoped to a company.

    Mutations need a superuser or a manager of the owning company. Reads are
    public; the optional caller user id only personalizes prices.
    """

    def __init__(
        self,
        service_dao: ServiceDAO,
        company_dao: CompanyDAO,
        price_client: pricing.PriceClient,
    ) -> None:
        self._service_dao = service_dao
        self._company_dao = company_dao
        self._price_client = price_client

    # ── write ─────────────────────────────────────────────────────────────

    async def create(
        self,
        session: AsyncSession,
        caller: Caller,
        company_id: int,
        request: CreateServiceRequest,
    ) -> ServiceResponse:
        """Raises :class:`NotFoundError`, :class:`AccessDeniedError` or
        :class:`InvalidReferenceError`."""
        with internal_errors("service.create"):
            await self._check_access(session, caller, company_id)
            await self._check_addresses(session, company_id, request.address_ids)
            service = await self._service_dao.create(session, company_id, request.to_domain())
        log.info(
            "service.created", company_id=company_id, service_id=service.id, user_id=caller.user_id
        )
        return ServiceResponse.from_domain(service)

    async def update(
        self,
        session: AsyncSession,
        caller: Caller,
        company_id: int,
        service_id: int,
        request: UpdateServiceRequest,
    ) -> ServiceResponse:
        with internal_errors("service.update"):
            await self._check_access(session, caller, company_id)
            if request.address_ids is not None:
                await self._check_addresses(session, company_id, request.address_ids)
            try:
                service = await self._service_dao.update(
                    session, company_id, service_id, request.to_domain()
                )
            except ServiceNotFoundError as exc:
                raise NotFoundError("service not found") from exc
        log.info(
            "service.updated", company_id=company_id, service_id=service_id, user_id=caller.user_id
        )
        return ServiceResponse.from_domain(service)

    async def delete(
        self,
        session: AsyncSession,
        caller: Caller,
        company_id: int,
        service_id: int,
    ) -> None:
        with internal_errors("service.delete"):
            await self._check_access(session, caller, company_id)
            try:
                await self._service_dao.delete(session, company_id, service_id)
            except ServiceNotFoundError as exc:
                raise NotFoundError("service not found") from exc
        log.info(
            "service.deleted", company_id=company_id, service_id=service_id, user_id=caller.user_id
        )

    # ── read ──────────────────────────────────────────────────────────────

    async def get(
        self,
        session: AsyncSession,
        company_id: int,
        service_id: int,
        user_id: int | None = None,
    ) -> ServiceResponse:
        """Return one service, with prices when the price service answers.

        Raises :class:`NotFoundError` for an unknown ``(company_id,
        service_id)`` pair and :class:`PricesNotFoundError` when the price
        service reports no prices.
        """
        with internal_errors("service.get"):
            try:
                service = await self._service_dao.get_by_id(session, company_id, service_id)
            except ServiceNotFoundError as exc:
                raise NotFoundError("service not found") from exc

        response = ServiceResponse.from_domain(service)
        await self._enrich(company_id, user_id, [response])
        return response

    async def list_by_company(
        self,
        session: AsyncSession,
        company_id: int,
        user_id: int | None = None,
    ) -> ServiceListResponse:
        with internal_errors("service.list"):
            services = await self._service_dao.list_by_company(session, company_id)

        response = ServiceListResponse.from_domain(services)
        await self._enrich(company_id, user_id, response.services)
        return response

    # ── internal ──────────────────────────────────────────────────────────

    async def _check_access(self, session: AsyncSession, caller: Caller, company_id: int) -> None:
        await require_manager(session, self._company_dao, caller, company_id)
        # Superusers skip the manager lookup, so the company may still be missing.
        if caller.is_superuser and not await self._company_dao.exists(session, company_id):
            raise NotFoundError("company not found")

    async def _check_addresses(
        self,
        session: AsyncSession,
        company_id: int,
        address_ids: list[int],
    ) -> None:
        """Raise :class:`InvalidReferenceError` unless every id is one of the company's addresses."""
        if not address_ids:
            return
        owned = await self._company_dao.owned_address_ids(session, company_id, address_ids)
        foreign = sorted(set(address_ids) - owned)
        if foreign:
            raise InvalidReferenceError(
                f"address ids {foreign} do not belong to company {company_id}"
            )

    async def _enrich(
        self,
        company_id: int,
        user_id: int | None,
        services: list[ServiceResponse],
    ) -> None:
        """Merge prices into *services* in place; leave them bare if pricing is degraded."""
        if not services:
            return

        request = pricing.CalculatePricesRequest(
            company_id=company_id,
            user_id=user_id,
            service_ids=[s.id for s in services],
        )
        try:
            result = await self._price_client.calculate_prices_with_graceful_degradation(request)
        except pricing.PriceServiceDegradedError as exc:
            log.warning("prices.degraded", company_id=company_id, error=str(exc.cause))
            return
        except pricing.PricesNotFoundError as exc:
            raise PricesNotFoundError("prices not found for services") from exc

        by_service = {p.service_id: p for p in result.prices}
        for service in services:
            price = by_service.get(service.id)
            if price is not None:
                service.enrich_with_price(price)
