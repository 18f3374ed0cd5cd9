"""Tests for PriceClient status mapping and graceful degradation."""

import asyncio
import json
from unittest.mock import MagicMock

import httpx
import pytest

from sellerservice.integrations import price_client
from sellerservice.integrations.price_client import (
    CalculatePricesRequest,
    InvalidPriceResponseError,
    PriceClient,
    PriceClientError,
    PricesNotFoundError,
    PriceServiceDegradedError,
)

BASE_URL = "http://prices.test/api/v1"


def _client(handler) -> PriceClient:
    return PriceClient(base_url=BASE_URL, timeout=1.0, transport=httpx.MockTransport(handler))


def _request(**overrides) -> CalculatePricesRequest:
    defaults = {"company_id": 1, "user_id": 42, "service_ids": [1, 2]}
    defaults.update(overrides)
    return CalculatePricesRequest(**defaults)


# ---------------------------------------------------------------------------
# calculate_prices
# ---------------------------------------------------------------------------


class TestCalculatePrices:
    async def test_ok(self):
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "prices": [
                        {"service_id": 1, "price": 1500.0, "currency": "RUB"},
                        {"service_id": 2},
                    ]
                },
            )

        async with _client(handler) as client:
            result = await client.calculate_prices(_request())

        assert seen["method"] == "POST"
        assert seen["url"] == f"{BASE_URL}/prices/calculate"
        assert seen["body"] == {"company_id": 1, "user_id": 42, "service_ids": [1, 2]}
        assert result.prices[0].price == 1500.0
        assert result.prices[1].price is None

    async def test_user_id_omitted_when_absent(self):
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"prices": []})

        async with _client(handler) as client:
            await client.calculate_prices(_request(user_id=None))

        assert "user_id" not in seen["body"]

    @pytest.mark.parametrize(
        ("status", "exc_type"),
        [
            (400, InvalidPriceResponseError),
            (404, PricesNotFoundError),
            (500, InvalidPriceResponseError),
            (503, InvalidPriceResponseError),
        ],
    )
    async def test_status_mapping(self, status, exc_type):
        async with _client(lambda r: httpx.Response(status, json={"error": "x"})) as client:
            with pytest.raises(exc_type):
                await client.calculate_prices(_request())

    @pytest.mark.parametrize("body", [{"prices": None}, {}])
    async def test_null_or_missing_prices_is_empty(self, body):
        async with _client(lambda r: httpx.Response(200, json=body)) as client:
            result = await client.calculate_prices(_request())
        assert result.prices == []

    async def test_malformed_body(self):
        async with _client(lambda r: httpx.Response(200, content=b"not json")) as client:
            with pytest.raises(InvalidPriceResponseError):
                await client.calculate_prices(_request())

    async def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(PriceClientError) as exc_info:
                await client.calculate_prices(_request())
        assert type(exc_info.value) is PriceClientError

    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        async with _client(handler) as client:
            with pytest.raises(PriceClientError):
                await client.calculate_prices(_request())


# ---------------------------------------------------------------------------
# calculate_prices_with_graceful_degradation
# ---------------------------------------------------------------------------


class TestGracefulDegradation:
    async def test_success_passthrough(self):
        async with _client(
            lambda r: httpx.Response(200, json={"prices": [{"service_id": 1, "price": 10}]})
        ) as client:
            result = await client.calculate_prices_with_graceful_degradation(_request())
        assert result.prices[0].price == 10

    async def test_null_prices_not_degraded(self, monkeypatch):
        log = MagicMock()
        monkeypatch.setattr(price_client, "log", log)

        async with _client(lambda r: httpx.Response(200, json={"prices": None})) as client:
            result = await client.calculate_prices_with_graceful_degradation(_request())

        assert result.prices == []
        log.error.assert_not_called()

    async def test_not_found_reraised_as_is(self):
        async with _client(lambda r: httpx.Response(404)) as client:
            with pytest.raises(PricesNotFoundError):
                await client.calculate_prices_with_graceful_degradation(_request())

    @pytest.mark.parametrize("status", [400, 500, 502])
    async def test_bad_status_degrades(self, status):
        async with _client(lambda r: httpx.Response(status)) as client:
            with pytest.raises(PriceServiceDegradedError) as exc_info:
                await client.calculate_prices_with_graceful_degradation(_request())
        assert isinstance(exc_info.value.cause, InvalidPriceResponseError)
        assert exc_info.value.company_id == 1

    async def test_transport_failure_degrades(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(PriceServiceDegradedError) as exc_info:
                await client.calculate_prices_with_graceful_degradation(_request())
        assert exc_info.value.__cause__ is exc_info.value.cause

    async def test_malformed_body_degrades(self):
        async with _client(lambda r: httpx.Response(200, json={"prices": "nope"})) as client:
            with pytest.raises(PriceServiceDegradedError):
                await client.calculate_prices_with_graceful_degradation(_request())

    async def test_cancellation_propagates(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise asyncio.CancelledError()

        async with _client(handler) as client:
            with pytest.raises(asyncio.CancelledError):
                await client.calculate_prices_with_graceful_degradation(_request())


class TestConfig:
    def test_env_defaults(self, monkeypatch):
        monkeypatch.setenv("SELLERSERVICE_PRICE_SERVICE_URL", "http://env.test/api/v1/")
        monkeypatch.setenv("SELLERSERVICE_PRICE_SERVICE_TIMEOUT", "3.5")
        client = PriceClient()
        assert client.base_url == "http://env.test/api/v1"
        assert client._client.timeout.read == 3.5
