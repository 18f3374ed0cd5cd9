"""Dependency injection — session, caller identity, and service singletons."""

from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Header
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from sellerservice.core.database import create_engine, create_session_factory
from sellerservice.core.instrumentation import LoggingInterceptor, instrument_engine
from sellerservice.dao.company_dao import CompanyDAO
from sellerservice.dao.service_dao import ServiceDAO
from sellerservice.integrations.price_client import PriceClient
from sellerservice.services import AuthenticationError
from sellerservice.services.access import Caller
from sellerservice.services.catalog_service import CatalogService
from sellerservice.services.company_service import CompanyService

# ---------------------------------------------------------------------------
# DAO / client singletons
# ---------------------------------------------------------------------------
_company_dao = CompanyDAO()
_service_dao = ServiceDAO()
_price_client = PriceClient()

# ---------------------------------------------------------------------------
# Service singletons
# ---------------------------------------------------------------------------
_company_service = CompanyService(_company_dao)
_catalog_service = CatalogService(_service_dao, _company_dao, _price_client)

# ---------------------------------------------------------------------------
# Engine / session factory (initialised by app lifespan)
# ---------------------------------------------------------------------------
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_session_factory(database_url: str | None = None) -> async_sessionmaker[AsyncSession]:
    """Create the instrumented async engine and session factory. Called once at startup."""
    global _engine, _session_factory  # noqa: PLW0603
    _engine = create_engine(database_url)
    instrument_engine(_engine, LoggingInterceptor())
    _session_factory = create_session_factory(_engine)
    return _session_factory


async def dispose_engine() -> None:
    """Dispose the async engine, closing all pooled connections."""
    global _engine  # noqa: PLW0603
    if _engine is not None:
        await _engine.dispose()
        _engine = None


async def close_price_client() -> None:
    await _price_client.close()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a per-request session with automatic commit/rollback."""
    if _session_factory is None:
        raise RuntimeError("call init_session_factory() before handling requests")
    async with _session_factory() as session:
        async with session.begin():
            yield session


# ---------------------------------------------------------------------------
# Caller identity (validated upstream, forwarded as headers)
# ---------------------------------------------------------------------------


async def get_caller(
    x_user_id: str | None = Header(None),
    x_user_role: str | None = Header(None),
) -> Caller:
    """Required identity for mutations."""
    if not x_user_id or not x_user_role:
        raise AuthenticationError("missing authentication headers")
    try:
        user_id = int(x_user_id)
    except ValueError:
        raise AuthenticationError("invalid user ID") from None
    return Caller(user_id=user_id, role=x_user_role)


async def get_optional_user_id(x_user_id: str | None = Header(None)) -> int | None:
    """Optional user id for price personalization; unusable values are ignored."""
    if not x_user_id:
        return None
    try:
        user_id = int(x_user_id)
    except ValueError:
        return None
    return user_id if user_id > 0 else None


# ---------------------------------------------------------------------------
# Service getters (for Depends())
# ---------------------------------------------------------------------------


def get_company_service() -> CompanyService:
    return _company_service


def get_catalog_service() -> CatalogService:
    return _catalog_service
