"""working_hours table — exactly one row per company, three columns per weekday."""

import datetime
from typing import Optional

from sqlalchemy import BigInteger, Boolean, ForeignKey, Time, text
from sqlalchemy.orm import Mapped, mapped_column

from sellerservice.core.database import Base


class WorkingHours(Base):
    __tablename__ = "working_hours"

    company_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("companies.id", ondelete="CASCADE"),
        primary_key=True,
    )

    monday_is_open: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))
    monday_open_time: Mapped[Optional[datetime.time]] = mapped_column(Time)
    monday_close_time: Mapped[Optional[datetime.time]] = mapped_column(Time)

    tuesday_is_open: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))
    tuesday_open_time: Mapped[Optional[datetime.time]] = mapped_column(Time)
    tuesday_close_time: Mapped[Optional[datetime.time]] = mapped_column(Time)

    wednesday_is_open: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    wednesday_open_time: Mapped[Optional[datetime.time]] = mapped_column(Time)
    wednesday_close_time: Mapped[Optional[datetime.time]] = mapped_column(Time)

    thursday_is_open: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    thursday_open_time: Mapped[Optional[datetime.time]] = mapped_column(Time)
    thursday_close_time: Mapped[Optional[datetime.time]] = mapped_column(Time)

    friday_is_open: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))
    friday_open_time: Mapped[Optional[datetime.time]] = mapped_column(Time)
    friday_close_time: Mapped[Optional[datetime.time]] = mapped_column(Time)

    saturday_is_open: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    saturday_open_time: Mapped[Optional[datetime.time]] = mapped_column(Time)
    saturday_close_time: Mapped[Optional[datetime.time]] = mapped_column(Time)

    sunday_is_open: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))
    sunday_open_time: Mapped[Optional[datetime.time]] = mapped_column(Time)
    sunday_close_time: Mapped[Optional[datetime.time]] = mapped_column(Time)
