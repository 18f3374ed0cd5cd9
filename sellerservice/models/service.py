"""services and service_addresses tables."""

from typing import Optional

from sqlalchemy import BigInteger, ForeignKey, Index, Integer, Text, desc
from sqlalchemy.orm import Mapped, mapped_column

from sellerservice.core.database import Base, TimestampMixin


class Service(TimestampMixin, Base):
    __tablename__ = "services"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    # minutes
    average_duration: Mapped[Optional[int]] = mapped_column(Integer)

    __table_args__ = (
        Index("idx_services_company_created", "company_id", desc("created_at")),
    )


class ServiceAddress(Base):
    """Link between a service and one of its company's addresses."""

    __tablename__ = "service_addresses"

    service_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("services.id", ondelete="CASCADE"),
        primary_key=True,
    )
    address_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("addresses.id", ondelete="CASCADE"),
        primary_key=True,
    )

    __table_args__ = (Index("idx_service_addresses_address", "address_id"),)
