"""Declarative base, timestamp mixin, and engine / schema helpers.

The API (``api.deps``), the seed script and the store tests all build their
engines here, so pool settings and table creation live in one place.
"""

from __future__ import annotations

import os
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, MetaData, func
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

DEFAULT_DATABASE_URL = "postgresql+asyncpg://localhost/sellerservice"

_POOL_OPTIONS: dict[str, Any] = {
    "pool_pre_ping": True,
    "pool_size": 10,
    "max_overflow": 20,
    "pool_recycle": 1800,
}

# PostgreSQL's own default constraint names (companies_pkey, addresses_company_id_fkey, ...)
convention = {
    "ix": "idx_%(table_name)s_%(column_0_name)s",
    "uq": "%(table_name)s_%(column_0_name)s_key",
    "ck": "%(table_name)s_%(constraint_name)s_check",
    "fk": "%(table_name)s_%(column_0_name)s_fkey",
    "pk": "%(table_name)s_pkey",
}


class Base(AsyncAttrs, DeclarativeBase):
    """Base class for all ORM models."""

    metadata = MetaData(naming_convention=convention)


class TimestampMixin:
    """``created_at`` / ``updated_at`` for companies, addresses and services.

    Both default to ``now()`` on insert. There is no trigger: every DAO
    UPDATE sets ``updated_at=func.now()`` itself.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


# ── engine / session ──────────────────────────────────────────────────────


def database_url() -> str:
    """``SELLERSERVICE_DATABASE_URL``, or a local default."""
    return os.environ.get("SELLERSERVICE_DATABASE_URL", DEFAULT_DATABASE_URL)


def create_engine(url: str | None = None, **options: Any) -> AsyncEngine:
    """Async engine with the service pool settings; *options* override them."""
    return create_async_engine(url or database_url(), **{**_POOL_OPTIONS, **options})


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_schema(conn: AsyncConnection, *, drop_first: bool = False) -> None:
    """Create every table (and its cascading FKs) on *conn*.

    With ``drop_first`` the existing tables are dropped before creation.
    """
    import sellerservice.models  # noqa: F401  (registers tables on Base.metadata)

    if drop_first:
        await conn.run_sync(Base.metadata.drop_all)
    await conn.run_sync(Base.metadata.create_all)
