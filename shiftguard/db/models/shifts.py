from sqlalchemy import Integer, String, Float, Date, DateTime, JSON, ForeignKey, Enum as SQLEnum, Index, func
import datetime as dt
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from typing import Optional
from shiftguard.db.database import Base
from shiftguard.db.models.employees import _enum_values
from shiftguard.services.scheduling.types import Role, ShiftStatus
from shiftguard.services.scheduling.intervals import is_overnight, shift_duration_hours


class Shifts(Base):
    __tablename__ = "shifts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    # HH:MM; overnight is derived from the pair on every read, never stored
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    role_requirement: Mapped[Role] = mapped_column(SQLEnum(Role, name="shift_role_enum", values_callable=_enum_values), nullable=False)
    skill_requirements: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    assigned_employee_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("employees.id"), nullable=True)
    location: Mapped[str] = mapped_column(String(100), nullable=False)
    team: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[ShiftStatus] = mapped_column(SQLEnum(ShiftStatus, name="shift_status_enum", values_callable=_enum_values), nullable=False, default=ShiftStatus.SCHEDULED)
    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    break_duration: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    hourly_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    # optimistic lock: a concurrent write to the same row raises StaleDataError
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    __table_args__ = (
        Index("ix_shifts_date_location", "date", "location"),
        Index("ix_shifts_date_team", "date", "team"),
        Index("ix_shifts_employee_date", "assigned_employee_id", "date"),
        Index("ix_shifts_status_date", "status", "date"),
    )

    @property
    def is_overnight(self) -> bool:
        return is_overnight(self.start_time, self.end_time)

    @property
    def duration(self) -> float:
        return shift_duration_hours(self.start_time, self.end_time)

    @property
    def total_cost(self) -> float:
        return round(self.duration * self.hourly_rate, 2)
