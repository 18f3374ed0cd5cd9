"""Service request/response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from sellerservice import domain
from sellerservice.integrations.price_client import ServicePrice


class CreateServiceRequest(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    average_duration: int | None = Field(None, ge=0)
    address_ids: list[int] = Field(default_factory=list)

    def to_domain(self) -> domain.CreateServiceInput:
        return domain.CreateServiceInput(
            name=self.name,
            description=self.description,
            average_duration=self.average_duration,
            address_ids=list(self.address_ids),
        )


class UpdateServiceRequest(BaseModel):
    """Partial update; ``address_ids: []`` unlinks every address."""

    name: str | None = Field(None, min_length=1)
    description: str | None = None
    average_duration: int | None = Field(None, ge=0)
    address_ids: list[int] | None = None

    def to_domain(self) -> domain.UpdateServiceInput:
        return domain.UpdateServiceInput(
            name=self.name,
            description=self.description,
            average_duration=self.average_duration,
            address_ids=list(self.address_ids) if self.address_ids is not None else None,
        )


class ServiceResponse(BaseModel):
    id: int
    company_id: int
    name: str
    description: str | None = None
    average_duration: int | None = None
    address_ids: list[int]
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # Filled only when the price service answered for this service.
    price: float | None = None
    currency: str | None = None
    pricing_type: str | None = None
    vehicle_class: str | None = None
    applied_multiplier: float | None = None

    @classmethod
    def from_domain(cls, service: domain.Service) -> ServiceResponse:
        return cls(
            id=service.id,
            company_id=service.company_id,
            name=service.name,
            description=service.description,
            average_duration=service.average_duration,
            address_ids=list(service.address_ids),
            created_at=service.created_at,
            updated_at=service.updated_at,
        )

    def enrich_with_price(self, price: ServicePrice) -> None:
        self.price = price.price
        self.currency = price.currency
        self.pricing_type = price.pricing_type
        self.vehicle_class = price.vehicle_class
        self.applied_multiplier = price.applied_multiplier


class ServiceListResponse(BaseModel):
    services: list[ServiceResponse]

    @classmethod
    def from_domain(cls, services: list[domain.Service]) -> ServiceListResponse:
        return cls(services=[ServiceResponse.from_domain(s) for s in services])
