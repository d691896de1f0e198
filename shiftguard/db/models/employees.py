from sqlalchemy import Integer, String, Float, DateTime, Boolean, JSON, func, Enum as SQLEnum, Index
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from shiftguard.db.database import Base
from shiftguard.services.scheduling.types import Role, EmploymentType


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Employees(Base):
    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    role: Mapped[Role] = mapped_column(SQLEnum(Role, name="employee_role_enum", values_callable=_enum_values), nullable=False, default=Role.EMPLOYEE)
    skills: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    team: Mapped[str] = mapped_column(String(100), nullable=False)
    location: Mapped[str] = mapped_column(String(100), nullable=False)
    # {"monday": {"start": "09:00", "end": "17:00", "available": true}, ...}
    availability: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    employment_type: Mapped[EmploymentType] = mapped_column(SQLEnum(EmploymentType, name="employment_type_enum", values_callable=_enum_values), nullable=False, default=EmploymentType.FULL_TIME)
    max_hours_per_week: Mapped[float] = mapped_column(Float, nullable=False, default=40)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_employees_location_team_active", "location", "team", "is_active"),
    )
