"""Company aggregate: company, addresses, weekly working hours."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime

WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


@dataclass
class Coordinates:
    latitude: float
    longitude: float


@dataclass
class AddressInput:
    """Address fields supplied on create / replace."""

    city: str
    street: str
    building: str
    coordinates: Coordinates


@dataclass
class Address:
    id: int
    company_id: int
    city: str
    street: str
    building: str
    coordinates: Coordinates
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class DaySchedule:
    """One weekday. Times are ``"HH:MM"``; ``None`` means not applicable."""

    is_open: bool
    open_time: str | None = None
    close_time: str | None = None


@dataclass
class WorkingHours:
    """Fixed seven-day schedule, one :class:`DaySchedule` per weekday."""

    monday: DaySchedule
    tuesday: DaySchedule
    wednesday: DaySchedule
    thursday: DaySchedule
    friday: DaySchedule
    saturday: DaySchedule
    sunday: DaySchedule

    def days(self) -> list[tuple[str, DaySchedule]]:
        """Return ``(weekday, schedule)`` pairs in calendar order."""
        return [(day, getattr(self, day)) for day in WEEKDAYS]


@dataclass
class Company:
    id: int
    name: str
    working_hours: WorkingHours
    logo: str | None = None
    description: str | None = None
    tags: list[str] = field(default_factory=list)
    addresses: list[Address] = field(default_factory=list)
    manager_ids: list[int] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class CreateCompanyInput:
    name: str
    working_hours: WorkingHours
    logo: str | None = None
    description: str | None = None
    tags: list[str] = field(default_factory=list)
    addresses: list[AddressInput] = field(default_factory=list)
    manager_ids: list[int] = field(default_factory=list)


@dataclass
class UpdateCompanyInput:
    """Partial update.

    Scalars: ``None`` leaves the stored value unchanged.
    Collections: ``None`` leaves them unchanged, ``[]`` clears them and a
    non-empty list replaces them (addresses are deleted and re-inserted).
    """

    name: str | None = None
    logo: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    addresses: list[AddressInput] | None = None
    working_hours: WorkingHours | None = None
    manager_ids: list[int] | None = None


@dataclass
class CompanyFilter:
    tags: list[str] = field(default_factory=list)
    city: str | None = None
    page: int | None = None
    limit: int | None = None

    @property
    def paginated(self) -> bool:
        return self.page is not None and self.limit is not None


@dataclass
class PaginationResult:
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return math.ceil(self.total / self.limit)
