"""Domain aggregates shared by the stores and the application services."""

from sellerservice.domain.company import (
    WEEKDAYS,
    Address,
    AddressInput,
    Company,
    CompanyFilter,
    Coordinates,
    CreateCompanyInput,
    DaySchedule,
    PaginationResult,
    UpdateCompanyInput,
    WorkingHours,
)
from sellerservice.domain.service import CreateServiceInput, Service, UpdateServiceInput

__all__ = [
    "WEEKDAYS",
    "Address",
    "AddressInput",
    "Company",
    "CompanyFilter",
    "Coordinates",
    "CreateCompanyInput",
    "CreateServiceInput",
    "DaySchedule",
    "PaginationResult",
    "Service",
    "UpdateCompanyInput",
    "UpdateServiceInput",
    "WorkingHours",
]
