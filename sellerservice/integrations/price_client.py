"""Async client for the remote price-calculation service."""

from __future__ import annotations

import os

import httpx
import structlog
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

log = structlog.get_logger(__name__)

_DEFAULT_BASE_URL = "http://localhost:8082/api/v1"
_DEFAULT_TIMEOUT = 10.0  # seconds
_CALCULATE_PATH = "/prices/calculate"


class PriceClientError(Exception):
    """Base price client exception (transport failure or unusable reply)."""


class InvalidPriceResponseError(PriceClientError):
    """The price service answered with 400, an unexpected status or a malformed body."""


class PricesNotFoundError(PriceClientError):
    """The price service has no prices for the requested services (HTTP 404)."""

    def __init__(self, message: str = "prices not found for services") -> None:
        super().__init__(message)


class PriceServiceDegradedError(PriceClientError):
    """The price service is unusable; callers should answer without prices.

    The original failure is kept on ``cause`` (and ``__cause__``).
    """

    def __init__(self, company_id: int, cause: BaseException) -> None:
        self.company_id = company_id
        self.cause = cause
        super().__init__(f"price service unavailable for company_id={company_id}: {cause}")


class CalculatePricesRequest(BaseModel):
    company_id: int
    user_id: int | None = None
    service_ids: list[int]


class ServicePrice(BaseModel):
    service_id: int
    price: float | None = None
    currency: str | None = None
    pricing_type: str | None = None
    vehicle_class: str | None = None
    applied_multiplier: float | None = None


class CalculatePricesResponse(BaseModel):
    prices: list[ServicePrice] = Field(default_factory=list)

    @field_validator("prices", mode="before")
    @classmethod
    def _null_prices_as_empty(cls, v: object) -> object:
        # ``"prices": null`` is a healthy reply with nothing priced
        return [] if v is None else v


class PriceClient:
    """Thin async wrapper around ``POST /prices/calculate``.

    One shared :class:`httpx.AsyncClient` with a fixed timeout; nothing is
    retried.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        resolved_url = base_url or os.environ.get(
            "SELLERSERVICE_PRICE_SERVICE_URL", _DEFAULT_BASE_URL
        )
        if timeout is None:
            timeout = float(
                os.environ.get("SELLERSERVICE_PRICE_SERVICE_TIMEOUT", str(_DEFAULT_TIMEOUT))
            )
        self.base_url = resolved_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> PriceClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    async def calculate_prices(self, request: CalculatePricesRequest) -> CalculatePricesResponse:
        """Call the price service once.

        Raises :class:`PricesNotFoundError` on 404,
        :class:`InvalidPriceResponseError` on 400, any other non-200 status
        or an undecodable body, and :class:`PriceClientError` on transport
        failure (including timeouts).
        """
        try:
            resp = await self._client.post(
                _CALCULATE_PATH, content=request.model_dump_json(exclude_none=True)
            )
        except httpx.HTTPError as exc:
            raise PriceClientError(f"failed to execute request: {exc}") from exc

        if resp.status_code == 404:
            raise PricesNotFoundError()
        if resp.status_code == 400:
            raise InvalidPriceResponseError("bad request")
        if resp.status_code != 200:
            raise InvalidPriceResponseError(
                f"unexpected status code {resp.status_code}: {resp.text}"
            )

        try:
            return CalculatePricesResponse.model_validate_json(resp.content)
        except PydanticValidationError as exc:
            raise InvalidPriceResponseError(f"failed to decode response: {exc}") from exc

    async def calculate_prices_with_graceful_degradation(
        self, request: CalculatePricesRequest
    ) -> CalculatePricesResponse:
        """Like :meth:`calculate_prices`, but collapse failures into one signal.

        :class:`PricesNotFoundError` is re-raised unchanged; every other
        :class:`PriceClientError` becomes :class:`PriceServiceDegradedError`.
        """
        log.info(
            "prices.calculate",
            company_id=request.company_id,
            user_id=request.user_id,
            service_ids=request.service_ids,
        )
        try:
            response = await self.calculate_prices(request)
        except PricesNotFoundError:
            log.info(
                "prices.not_found",
                company_id=request.company_id,
                service_ids=request.service_ids,
            )
            raise
        except PriceClientError as exc:
            log.error("prices.unavailable", company_id=request.company_id, error=str(exc))
            raise PriceServiceDegradedError(request.company_id, exc) from exc

        log.info("prices.calculated", company_id=request.company_id, count=len(response.prices))
        return response
