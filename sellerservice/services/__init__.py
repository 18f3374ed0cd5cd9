"""Service layer — business logic orchestration."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from sqlalchemy.exc import SQLAlchemyError

from sellerservice.dao.base import StoreError

log = structlog.get_logger(__name__)


class ServiceError(Exception):
    """Base service exception."""


class NotFoundError(ServiceError):
    """Resource not found (-> HTTP 404)."""


class PricesNotFoundError(NotFoundError):
    """The price service has no prices for the requested services (-> HTTP 404)."""


class AccessDeniedError(ServiceError):
    """Caller may not mutate this company (-> HTTP 403)."""


class SuperuserRequiredError(AccessDeniedError):
    """Operation restricted to the superuser role (-> HTTP 403)."""


class ValidationError(ServiceError):
    """Input validation error (-> HTTP 422)."""


class InvalidReferenceError(ValidationError):
    """A referenced address does not belong to the target company (-> HTTP 422)."""


class AuthenticationError(ServiceError):
    """Missing or malformed caller identity (-> HTTP 401)."""


class InternalError(ServiceError):
    """Unexpected storage failure (-> HTTP 500)."""


@contextmanager
def internal_errors(operation: str) -> Iterator[None]:
    """Wrap storage failures that were not translated explicitly as :class:`InternalError`."""
    try:
        yield
    except (SQLAlchemyError, StoreError) as exc:
        log.error("storage.failed", operation=operation, error=str(exc))
        raise InternalError(f"{operation}: storage error") from exc
