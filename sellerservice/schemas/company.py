"""Company request/response schemas."""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from sellerservice import domain
from sellerservice.schemas.common import PaginationResult

_HHMM_RE = re.compile(r"^(?:[01]\d|2[0-3]):[0-5]\d$")


class Coordinates(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class AddressInput(BaseModel):
    city: str = Field(min_length=1)
    street: str = Field(min_length=1)
    building: str = Field(min_length=1)
    coordinates: Coordinates

    def to_domain(self) -> domain.AddressInput:
        return domain.AddressInput(
            city=self.city,
            street=self.street,
            building=self.building,
            coordinates=domain.Coordinates(
                latitude=self.coordinates.latitude,
                longitude=self.coordinates.longitude,
            ),
        )


class AddressUpdateInput(AddressInput):
    """Address in an update body. ``id`` is accepted but ignored: the set is replaced."""

    id: int | None = None


class DaySchedule(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_open: bool = Field(alias="isOpen")
    open_time: str | None = Field(None, alias="openTime")
    close_time: str | None = Field(None, alias="closeTime")

    @field_validator("open_time", "close_time")
    @classmethod
    def _check_hhmm(cls, value: str | None) -> str | None:
        if value is not None and not _HHMM_RE.match(value):
            raise ValueError("time must be in HH:MM format")
        return value

    @model_validator(mode="after")
    def _check_consistency(self) -> DaySchedule:
        if self.is_open and (self.open_time is None or self.close_time is None):
            raise ValueError("an open day needs both openTime and closeTime")
        if not self.is_open and (self.open_time is not None or self.close_time is not None):
            raise ValueError("a closed day must not carry openTime or closeTime")
        return self

    def to_domain(self) -> domain.DaySchedule:
        return domain.DaySchedule(
            is_open=self.is_open, open_time=self.open_time, close_time=self.close_time
        )

    @classmethod
    def from_domain(cls, day: domain.DaySchedule) -> DaySchedule:
        return cls(is_open=day.is_open, open_time=day.open_time, close_time=day.close_time)


class WorkingHours(BaseModel):
    monday: DaySchedule
    tuesday: DaySchedule
    wednesday: DaySchedule
    thursday: DaySchedule
    friday: DaySchedule
    saturday: DaySchedule
    sunday: DaySchedule

    def to_domain(self) -> domain.WorkingHours:
        return domain.WorkingHours(
            **{day: getattr(self, day).to_domain() for day in domain.WEEKDAYS}
        )

    @classmethod
    def from_domain(cls, hours: domain.WorkingHours) -> WorkingHours:
        return cls(**{day: DaySchedule.from_domain(sched) for day, sched in hours.days()})


class CreateCompanyRequest(BaseModel):
    name: str = Field(min_length=1)
    logo: str | None = None
    description: str | None = None
    tags: list[str] = Field(default_factory=list)
    addresses: list[AddressInput] = Field(default_factory=list)
    working_hours: WorkingHours
    manager_ids: list[int] = Field(default_factory=list)

    def to_domain(self) -> domain.CreateCompanyInput:
        return domain.CreateCompanyInput(
            name=self.name,
            logo=self.logo,
            description=self.description,
            tags=list(self.tags),
            addresses=[a.to_domain() for a in self.addresses],
            working_hours=self.working_hours.to_domain(),
            manager_ids=list(self.manager_ids),
        )


class UpdateCompanyRequest(BaseModel):
    """Partial update. Omitted (or null) fields are left unchanged.

    For ``tags``, ``addresses`` and ``manager_ids`` an explicit ``[]`` clears
    the collection.
    """

    name: str | None = Field(None, min_length=1)
    logo: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    addresses: list[AddressUpdateInput] | None = None
    working_hours: WorkingHours | None = None
    manager_ids: list[int] | None = None

    def to_domain(self) -> domain.UpdateCompanyInput:
        return domain.UpdateCompanyInput(
            name=self.name,
            logo=self.logo,
            description=self.description,
            tags=list(self.tags) if self.tags is not None else None,
            addresses=(
                [a.to_domain() for a in self.addresses] if self.addresses is not None else None
            ),
            working_hours=self.working_hours.to_domain() if self.working_hours else None,
            manager_ids=list(self.manager_ids) if self.manager_ids is not None else None,
        )


class CompanyFilterRequest(BaseModel):
    tags: list[str] = Field(default_factory=list)
    city: str | None = None
    page: int | None = Field(None, ge=1)
    limit: int | None = Field(None, ge=1, le=100)

    def to_domain(self) -> domain.CompanyFilter:
        return domain.CompanyFilter(
            tags=[t for t in self.tags if t],
            city=self.city or None,
            page=self.page,
            limit=self.limit,
        )


class AddressResponse(BaseModel):
    id: int
    city: str
    street: str
    building: str
    coordinates: Coordinates

    @classmethod
    def from_domain(cls, address: domain.Address) -> AddressResponse:
        return cls(
            id=address.id,
            city=address.city,
            street=address.street,
            building=address.building,
            coordinates=Coordinates(
                latitude=address.coordinates.latitude,
                longitude=address.coordinates.longitude,
            ),
        )


class CompanyResponse(BaseModel):
    id: int
    name: str
    logo: str | None = None
    description: str | None = None
    tags: list[str]
    addresses: list[AddressResponse]
    working_hours: WorkingHours
    manager_ids: list[int]
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, company: domain.Company) -> CompanyResponse:
        return cls(
            id=company.id,
            name=company.name,
            logo=company.logo,
            description=company.description,
            tags=list(company.tags),
            addresses=[AddressResponse.from_domain(a) for a in company.addresses],
            working_hours=WorkingHours.from_domain(company.working_hours),
            manager_ids=list(company.manager_ids),
            created_at=company.created_at,
            updated_at=company.updated_at,
        )


class CompanyListResponse(BaseModel):
    companies: list[CompanyResponse]
    pagination: PaginationResult | None = None

    @classmethod
    def from_domain(
        cls,
        companies: list[domain.Company],
        pagination: domain.PaginationResult | None,
    ) -> CompanyListResponse:
        return cls(
            companies=[CompanyResponse.from_domain(c) for c in companies],
            pagination=PaginationResult.from_domain(pagination) if pagination else None,
        )
