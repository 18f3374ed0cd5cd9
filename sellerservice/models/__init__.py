"""SQLAlchemy ORM models — one file per table."""

from sellerservice.models.address import Address
from sellerservice.models.company import Company
from sellerservice.models.service import Service, ServiceAddress
from sellerservice.models.working_hours import WorkingHours

__all__ = [
    "Company",
    "Address",
    "WorkingHours",
    "Service",
    "ServiceAddress",
]
