"""Statement interception for any SQLAlchemy engine.

Interceptors are attached through engine events, so the DAOs never know
whether (or how) the executor underneath them is observed::

    engine = create_async_engine(url)
    instrument_engine(engine, LoggingInterceptor(slow_ms=200))
"""

from __future__ import annotations

import os
import re
import time
from typing import Protocol

import structlog
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine

log = structlog.get_logger(__name__)

_TABLE_RE = re.compile(r"\b(?:FROM|INTO|UPDATE)\s+\"?([A-Za-z_][A-Za-z0-9_]*)", re.IGNORECASE)
_START_KEY = "sellerservice_query_start"


def parse_statement(statement: str) -> tuple[str, str]:
    """Return ``(operation, table)`` for a SQL statement.

    ``operation`` is the lower-cased leading keyword, ``table`` the first
    table named after FROM / INTO / UPDATE, or ``"unknown"``.
    """
    stripped = statement.lstrip()
    operation = stripped.split(None, 1)[0].lower() if stripped else "unknown"
    match = _TABLE_RE.search(stripped)
    table = match.group(1).lower() if match else "unknown"
    return operation, table


class QueryInterceptor(Protocol):
    """Receives one callback per executed statement."""

    def on_query(
        self,
        operation: str,
        table: str,
        duration: float,
        error: BaseException | None,
    ) -> None: ...


class LoggingInterceptor:
    """Log statements via structlog; slow or failed ones at warning level."""

    def __init__(self, slow_ms: float | None = None) -> None:
        if slow_ms is None:
            slow_ms = float(os.environ.get("SELLERSERVICE_SLOW_QUERY_MS", "200"))
        self.slow_ms = slow_ms

    def on_query(
        self,
        operation: str,
        table: str,
        duration: float,
        error: BaseException | None,
    ) -> None:
        duration_ms = round(duration * 1000, 1)
        if error is not None:
            log.warning(
                "db.query_failed",
                operation=operation,
                table=table,
                duration_ms=duration_ms,
                error=type(error).__name__,
            )
        elif duration_ms >= self.slow_ms:
            log.warning("db.query_slow", operation=operation, table=table, duration_ms=duration_ms)
        else:
            log.debug("db.query", operation=operation, table=table, duration_ms=duration_ms)


def instrument_engine(engine: Engine | AsyncEngine, *interceptors: QueryInterceptor) -> None:
    """Attach *interceptors* to *engine* (sync or async)."""
    sync_engine = engine.sync_engine if isinstance(engine, AsyncEngine) else engine

    def _notify(statement: str, duration: float, error: BaseException | None) -> None:
        operation, table = parse_statement(statement)
        for interceptor in interceptors:
            interceptor.on_query(operation, table, duration, error)

    @event.listens_for(sync_engine, "before_cursor_execute")
    def _before(conn, cursor, statement, parameters, context, executemany):  # noqa: ANN001
        conn.info.setdefault(_START_KEY, []).append(time.perf_counter())

    @event.listens_for(sync_engine, "after_cursor_execute")
    def _after(conn, cursor, statement, parameters, context, executemany):  # noqa: ANN001
        starts = conn.info.get(_START_KEY)
        if not starts:
            return
        _notify(statement, time.perf_counter() - starts.pop(), None)

    @event.listens_for(sync_engine, "handle_error")
    def _error(exception_context):  # noqa: ANN001
        conn = exception_context.connection
        starts = conn.info.get(_START_KEY) if conn is not None else None
        if not starts or exception_context.statement is None:
            return
        _notify(
            exception_context.statement,
            time.perf_counter() - starts.pop(),
            exception_context.original_exception,
        )
