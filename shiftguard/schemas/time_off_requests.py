from pydantic import BaseModel, Field, model_validator
from datetime import date, datetime
from typing import Optional
from shiftguard.services.scheduling.types import LeaveStatus, LeaveType, HalfDayType


class TimeOffRequestBase(BaseModel):
    employee_id: int
    start_date: date
    end_date: date
    request_type: LeaveType
    reason: str = Field(min_length=10, max_length=500)
    is_half_day: bool = False
    half_day_type: Optional[HalfDayType] = None


class TimeOffRequestCreate(TimeOffRequestBase):
    @model_validator(mode="after")
    def check_half_day(self):
        if self.is_half_day and self.half_day_type is None:
            raise ValueError("half_day_type is required for half-day requests")
        return self


class TimeOffRequestUpdate(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    request_type: Optional[LeaveType] = None
    reason: Optional[str] = Field(default=None, min_length=10, max_length=500)
    is_half_day: Optional[bool] = None
    half_day_type: Optional[HalfDayType] = None


class TimeOffStatusUpdate(BaseModel):
    status: LeaveStatus
    rejection_reason: Optional[str] = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def check_status(self):
        if self.status not in (LeaveStatus.APPROVED, LeaveStatus.REJECTED):
            raise ValueError("status must be approved or rejected")
        if self.status == LeaveStatus.REJECTED and not self.rejection_reason:
            raise ValueError("rejection_reason is required when rejecting a request")
        return self


class TimeOffRequestResponse(TimeOffRequestBase):
    id: int
    status: LeaveStatus
    total_days: int
    rejection_reason: Optional[str]
    approved_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
