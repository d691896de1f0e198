from typing import Optional
from datetime import date, datetime
from sqlalchemy import Boolean, Date, DateTime, Enum as SQLEnum, ForeignKey, Index, Integer, func, String
from sqlalchemy.orm import Mapped, mapped_column

from shiftguard.db.database import Base
from shiftguard.db.models.employees import _enum_values
from shiftguard.services.scheduling.types import LeaveStatus, LeaveType, HalfDayType


class TimeOffRequests(Base):
    __tablename__ = "time_off_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    employee_id: Mapped[int] = mapped_column(Integer, ForeignKey("employees.id"), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[LeaveStatus] = mapped_column(SQLEnum(LeaveStatus, name="time_off_request_status_enum", values_callable=_enum_values), nullable=False, default=LeaveStatus.PENDING)
    request_type: Mapped[LeaveType] = mapped_column(SQLEnum(LeaveType, name="time_off_request_type_enum", values_callable=_enum_values), nullable=False)
    reason: Mapped[str] = mapped_column(String(500), nullable=False)
    is_half_day: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    half_day_type: Mapped[Optional[HalfDayType]] = mapped_column(SQLEnum(HalfDayType, name="half_day_type_enum", values_callable=_enum_values), nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_time_off_employee_status", "employee_id", "status"),
        Index("ix_time_off_status_dates", "status", "start_date", "end_date"),
    )

    @property
    def total_days(self) -> int:
        return (self.end_date - self.start_date).days + 1
