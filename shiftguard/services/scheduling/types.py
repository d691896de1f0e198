"""
Internal data types for conflict and coverage logic.
decoupled from SQLAlchemy models for cleaner logic.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from .intervals import is_overnight, shift_duration_hours


WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class Role(str, Enum):
    MANAGER = "manager"
    SUPERVISOR = "supervisor"
    EMPLOYEE = "employee"
    ADMIN = "admin"


class ShiftStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class LeaveType(str, Enum):
    VACATION = "vacation"
    SICK_LEAVE = "sick-leave"
    PERSONAL = "personal"
    BEREAVEMENT = "bereavement"
    JURY_DUTY = "jury-duty"
    OTHER = "other"


class HalfDayType(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"


class EmploymentType(str, Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    TEMPORARY = "temporary"


# Shifts that still occupy the employee's time
ACTIVE_SHIFT_STATUSES = frozenset({ShiftStatus.SCHEDULED, ShiftStatus.IN_PROGRESS})
# Shifts that count towards coverage, workload and utilization
REPORTABLE_SHIFT_STATUSES = frozenset({
    ShiftStatus.SCHEDULED,
    ShiftStatus.IN_PROGRESS,
    ShiftStatus.COMPLETED,
})


class InvalidDateRangeError(ValueError):
    pass


@dataclass
class DayAvailability:
    available: bool = True
    start_time: Optional[str] = None
    end_time: Optional[str] = None


def default_availability() -> dict[str, DayAvailability]:
    """Mon-Fri available, weekends off."""
    return {
        day: DayAvailability(available=day not in ("saturday", "sunday"))
        for day in WEEKDAYS
    }


@dataclass
class Employee:
    id: int
    role: Role
    team: str
    location: str
    name: str = ""
    email: str = ""
    skills: frozenset[str] = frozenset()
    availability: dict[str, DayAvailability] = field(default_factory=default_availability)
    employment_type: EmploymentType = EmploymentType.FULL_TIME
    max_hours_per_week: float = 40
    is_active: bool = True

    def is_available_on_day(self, day_of_week: str) -> bool:
        day = self.availability.get(day_of_week.lower())
        return bool(day and day.available)


@dataclass
class Shift:
    """A shift record (persisted or proposed)."""
    id: Optional[int]
    date: date
    start_time: str  # HH:MM
    end_time: str
    role_requirement: Role
    location: str
    team: str
    assigned_employee_id: Optional[int] = None
    skill_requirements: frozenset[str] = frozenset()
    status: ShiftStatus = ShiftStatus.SCHEDULED
    break_duration: float = 0
    hourly_rate: float = 0
    notes: Optional[str] = None

    @property
    def is_overnight(self) -> bool:
        # always derived from the two times, never cached
        return is_overnight(self.start_time, self.end_time)

    @property
    def duration_hours(self) -> float:
        return shift_duration_hours(self.start_time, self.end_time)

    @property
    def is_weekend(self) -> bool:
        return self.date.weekday() >= 5

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_SHIFT_STATUSES


@dataclass
class LeaveRecord:
    id: Optional[int]
    employee_id: int
    start_date: date
    end_date: date  # inclusive
    status: LeaveStatus = LeaveStatus.PENDING
    request_type: LeaveType = LeaveType.OTHER
    is_half_day: bool = False
    half_day_type: Optional[HalfDayType] = None

    @property
    def total_days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    @property
    def is_approved(self) -> bool:
        return self.status == LeaveStatus.APPROVED

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def overlaps_range(self, start: date, end: date) -> bool:
        return self.start_date <= end and self.end_date >= start


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar date range."""
    start: date
    end: date

    def __post_init__(self):
        if self.start is None or self.end is None:
            raise InvalidDateRangeError("Start date and end date are required")
        if self.start > self.end:
            raise InvalidDateRangeError("Start date must be before end date")

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    @property
    def weeks(self) -> int:
        return math.ceil(self.days / 7)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class ReportFilters:
    location: Optional[str] = None
    team: Optional[str] = None
    role: Optional[Role] = None  # workload report only

    def matches(self, location: str, team: str) -> bool:
        if self.location and location != self.location:
            return False
        if self.team and team != self.team:
            return False
        return True


@dataclass
class ReportContext:
    """Record snapshot needed to build the analytics reports for one range."""
    date_range: DateRange
    filters: ReportFilters
    shifts: list[Shift]
    employees: dict[int, Employee]  # every employee referenced by a shift or leave, active or not
    active_employees: list[Employee] = field(default_factory=list)
    leave_records: list[LeaveRecord] = field(default_factory=list)
    # active shifts of employees on leave, spanning each leave's own dates and
    # ignoring the window and location/team filters
    leave_shifts: list[Shift] = field(default_factory=list)
