"""Service aggregate: a service and the company addresses it is offered at."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Service:
    id: int
    company_id: int
    name: str
    description: str | None = None
    average_duration: int | None = None
    address_ids: list[int] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class CreateServiceInput:
    name: str
    description: str | None = None
    average_duration: int | None = None
    address_ids: list[int] = field(default_factory=list)


@dataclass
class UpdateServiceInput:
    """Partial update; ``address_ids=None`` keeps links, ``[]`` removes them all."""

    name: str | None = None
    description: str | None = None
    average_duration: int | None = None
    address_ids: list[int] | None = None
