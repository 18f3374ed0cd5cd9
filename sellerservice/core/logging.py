"""structlog over stdlib logging, shared by the API process and the seed script.

Environment variables (explicit ``setup_logging`` arguments win):
    SELLERSERVICE_LOG_LEVEL        business log level (default: INFO)
    SELLERSERVICE_LOG_FORMAT       console | json (default: console)
    SELLERSERVICE_QUERY_LOG_LEVEL  level of the per-statement query log (default: INFO)
"""

from __future__ import annotations

import logging
import logging.config
import os
from typing import Any

import structlog

LOG_FORMATS = ("console", "json")

# Third-party loggers kept quiet regardless of the business level.
_LIBRARY_LEVELS = {
    "uvicorn.access": "WARNING",
    "uvicorn.error": "INFO",
    "sqlalchemy.engine": "WARNING",
    "asyncpg": "WARNING",
    "httpx": "WARNING",
}


def _env(name: str, default: str) -> str:
    return os.environ.get(f"SELLERSERVICE_{name}", default)


def shared_processors() -> list[structlog.types.Processor]:
    """Processors applied to both structlog and foreign (stdlib) records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def build_renderer(log_format: str) -> structlog.types.Processor:
    """Raises ``ValueError`` for a format outside :data:`LOG_FORMATS`."""
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    if log_format == "console":
        return structlog.dev.ConsoleRenderer()
    raise ValueError(f"unknown log format {log_format!r}, expected one of {LOG_FORMATS}")


def logger_levels(log_level: str, query_level: str) -> dict[str, dict[str, str]]:
    """Per-logger levels: the service, its query interceptor, and noisy libraries."""
    levels = {name: {"level": level} for name, level in _LIBRARY_LEVELS.items()}
    levels["sellerservice"] = {"level": log_level}
    # LoggingInterceptor emits one debug line per statement
    levels["sellerservice.core.instrumentation"] = {"level": query_level}
    return levels


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Configure structlog and route every stdlib record through its formatter to stdout."""
    log_level = (level or _env("LOG_LEVEL", "INFO")).upper()
    fmt = (log_format or _env("LOG_FORMAT", "console")).lower()
    query_level = _env("QUERY_LOG_LEVEL", "INFO").upper()

    processors = shared_processors()
    renderer = build_renderer(fmt)

    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structlog": {
                "()": structlog.stdlib.ProcessorFormatter,
                "foreign_pre_chain": processors,
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    renderer,
                ],
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": "structlog",
            },
        },
        "root": {"handlers": ["default"], "level": log_level},
        "loggers": logger_levels(log_level, query_level),
    }
    logging.config.dictConfig(config)
