import logging
from datetime import date, datetime, timezone
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from shiftguard.api.deps import get_db, get_or_404
from shiftguard.db.models.employees import Employees
from shiftguard.db.models.time_off_requests import TimeOffRequests
from shiftguard.schemas.time_off_requests import (
    TimeOffRequestCreate,
    TimeOffRequestResponse,
    TimeOffRequestUpdate,
    TimeOffStatusUpdate,
)
from shiftguard.services.scheduling.conflicts import check_leave_request
from shiftguard.services.scheduling.data_loader import leave_from_row, load_active_shifts_for_employees, load_approved_leave
from shiftguard.services.scheduling.lifecycle import LifecycleError, ensure_leave_editable, ensure_leave_transition
from shiftguard.services.scheduling.types import (
    DateRange,
    InvalidDateRangeError,
    LeaveStatus,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/time-off-requests", tags=["time-off-requests"])


def _transition(request: TimeOffRequests, new_status: LeaveStatus) -> None:
    try:
        ensure_leave_transition(leave_from_row(request), new_status, date.today())
    except LifecycleError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"code": e.code, "message": e.message})


def _ensure_dates_free(
    db: Session,
    employee_id: int,
    start_date: date,
    end_date: date,
    exclude_leave_id: Optional[int] = None,
) -> None:
    """Reject a reversed or past range, or one that clashes with active shifts or approved leave."""
    try:
        DateRange(start_date, end_date)
    except InvalidDateRangeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"code": "INVALID_DATE_RANGE", "message": str(e)})

    if start_date < date.today():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "PAST_DATE_NOT_ALLOWED", "message": "Cannot request time off for past dates"},
        )

    shifts = load_active_shifts_for_employees(db, [employee_id], start_date, end_date)
    leave = load_approved_leave(db, start_date, end_date, employee_id=employee_id)
    check = check_leave_request(employee_id, start_date, end_date, shifts, leave, exclude_leave_id=exclude_leave_id)

    if check.shift_conflicts:
        logger.info(f"Time off for employee {employee_id} clashes with {len(check.shift_conflicts)} shift(s)")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "code": "TIMEOFF_CONFLICT",
                "message": "Time off request conflicts with existing shifts",
                "conflicts": [
                    {"id": s.id, "date": s.date.isoformat(), "startTime": s.start_time, "endTime": s.end_time}
                    for s in check.shift_conflicts
                ],
            },
        )
    if check.leave_conflicts:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "code": "TIMEOFF_CONFLICT",
                "message": "Time off request overlaps with existing approved time off",
                "conflicts": [
                    {"id": r.id, "startDate": r.start_date.isoformat(), "endDate": r.end_date.isoformat()}
                    for r in check.leave_conflicts
                ],
            },
        )


@router.post("", response_model=TimeOffRequestResponse, status_code=status.HTTP_201_CREATED)
def create_time_off_request(
    payload: TimeOffRequestCreate,
    db: Session = Depends(get_db),
):
    """Create a pending request; rejected when it clashes with active shifts or approved leave."""
    get_or_404(db, Employees, payload.employee_id, "Employee")
    _ensure_dates_free(db, payload.employee_id, payload.start_date, payload.end_date)

    request = TimeOffRequests(**payload.model_dump(), status=LeaveStatus.PENDING)
    db.add(request)
    db.commit()
    db.refresh(request)
    return request


@router.get("", response_model=List[TimeOffRequestResponse])
def list_time_off_requests(
    employee_id: Optional[int] = None,
    request_status: Optional[LeaveStatus] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    stmt = select(TimeOffRequests)
    if employee_id:
        stmt = stmt.where(TimeOffRequests.employee_id == employee_id)
    if request_status:
        stmt = stmt.where(TimeOffRequests.status == request_status)

    stmt = stmt.order_by(TimeOffRequests.start_date).offset(skip).limit(limit)
    return db.execute(stmt).scalars().all()


@router.get("/{request_id}", response_model=TimeOffRequestResponse)
def get_time_off_request(
    request_id: int,
    db: Session = Depends(get_db),
):
    return get_or_404(db, TimeOffRequests, request_id, "Time off request")


@router.put("/{request_id}", response_model=TimeOffRequestResponse)
def update_time_off_request(
    request_id: int,
    payload: TimeOffRequestUpdate,
    db: Session = Depends(get_db),
):
    """Edit a pending request; new dates are re-checked, ignoring the request itself."""
    request = get_or_404(db, TimeOffRequests, request_id, "Time off request")
    try:
        ensure_leave_editable(request.status)
    except LifecycleError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"code": e.code, "message": e.message})

    update_data = payload.model_dump(exclude_unset=True, exclude_none=True)

    if "start_date" in update_data or "end_date" in update_data:
        _ensure_dates_free(
            db,
            request.employee_id,
            update_data.get("start_date", request.start_date),
            update_data.get("end_date", request.end_date),
            exclude_leave_id=request.id,
        )

    is_half_day = update_data.get("is_half_day", request.is_half_day)
    if is_half_day and update_data.get("half_day_type", request.half_day_type) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "HALF_DAY_TYPE_REQUIRED", "message": "half_day_type is required for half-day requests"},
        )
    if "is_half_day" in update_data and not is_half_day:
        update_data["half_day_type"] = None

    for field, value in update_data.items():
        setattr(request, field, value)

    db.commit()
    db.refresh(request)
    return request


@router.put("/{request_id}/status", response_model=TimeOffRequestResponse)
def review_time_off_request(
    request_id: int,
    payload: TimeOffStatusUpdate,
    db: Session = Depends(get_db),
):
    """Approve or reject a pending request."""
    request = get_or_404(db, TimeOffRequests, request_id, "Time off request")
    _transition(request, payload.status)

    request.status = payload.status
    if payload.status == LeaveStatus.APPROVED:
        request.approved_at = datetime.now(timezone.utc)
    else:
        request.rejection_reason = payload.rejection_reason

    db.commit()
    db.refresh(request)
    return request


@router.put("/{request_id}/cancel", response_model=TimeOffRequestResponse)
def cancel_time_off_request(
    request_id: int,
    db: Session = Depends(get_db),
):
    """Pending requests can always be cancelled; approved ones only before they start."""
    request = get_or_404(db, TimeOffRequests, request_id, "Time off request")
    _transition(request, LeaveStatus.CANCELLED)

    request.status = LeaveStatus.CANCELLED
    db.commit()
    db.refresh(request)
    return request
