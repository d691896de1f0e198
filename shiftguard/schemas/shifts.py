from pydantic import BaseModel, Field, field_validator
import datetime as dt
from datetime import date, datetime
from typing import List, Optional
from shiftguard.services.scheduling.types import Role, ShiftStatus
from shiftguard.services.scheduling.eligibility import VerdictReason
from shiftguard.services.scheduling.intervals import normalize_time_of_day

TIME_PATTERN = r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$"


class ShiftBase(BaseModel):
    date: date
    start_time: str = Field(pattern=TIME_PATTERN)
    end_time: str = Field(pattern=TIME_PATTERN)
    role_requirement: Role
    skill_requirements: List[str] = []
    location: str = Field(min_length=1, max_length=100)
    team: str = Field(min_length=1, max_length=100)
    notes: Optional[str] = Field(default=None, max_length=500)
    break_duration: float = Field(default=0, ge=0, le=24)
    hourly_rate: float = Field(default=0, ge=0)

    @field_validator("start_time", "end_time")
    @classmethod
    def pad_time(cls, value):
        return normalize_time_of_day(value)


class ShiftCreate(ShiftBase):
    assigned_employee_id: Optional[int] = None


class ShiftUpdate(BaseModel):
    date: Optional[dt.date] = None
    start_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    role_requirement: Optional[Role] = None
    skill_requirements: Optional[List[str]] = None
    assigned_employee_id: Optional[int] = None
    location: Optional[str] = Field(default=None, min_length=1, max_length=100)
    team: Optional[str] = Field(default=None, min_length=1, max_length=100)
    status: Optional[ShiftStatus] = None
    notes: Optional[str] = Field(default=None, max_length=500)
    break_duration: Optional[float] = Field(default=None, ge=0, le=24)
    hourly_rate: Optional[float] = Field(default=None, ge=0)

    @field_validator("start_time", "end_time")
    @classmethod
    def pad_time(cls, value):
        return normalize_time_of_day(value) if value is not None else value


class ShiftAssign(BaseModel):
    employee_id: int


class ShiftValidate(ShiftBase):
    """Dry-run payload; shift_id excludes an existing shift from the conflict scan."""
    employee_id: int
    shift_id: Optional[int] = None


class ShiftResponse(ShiftBase):
    id: int
    assigned_employee_id: Optional[int]
    status: ShiftStatus
    duration: float
    is_overnight: bool
    total_cost: float
    version_id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ConflictingShiftOut(BaseModel):
    id: Optional[int]
    date: date
    start_time: str
    end_time: str


class VerdictResponse(BaseModel):
    eligible: bool
    reason: VerdictReason
    message: str
    conflicts: List[ConflictingShiftOut] = []
    leave_id: Optional[int] = None
