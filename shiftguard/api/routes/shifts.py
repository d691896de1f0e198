import dataclasses
import logging
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select, and_
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from shiftguard.api.deps import get_db, get_or_404
from shiftguard.db.models.shifts import Shifts
from shiftguard.schemas.shifts import (
    ConflictingShiftOut,
    ShiftAssign,
    ShiftCreate,
    ShiftResponse,
    ShiftUpdate,
    ShiftValidate,
    VerdictResponse,
)
from shiftguard.services.scheduling.assignment import check_assignment
from shiftguard.services.scheduling.data_loader import shift_from_row
from shiftguard.services.scheduling.eligibility import Verdict, VerdictReason
from shiftguard.services.scheduling.lifecycle import (
    LifecycleError,
    ensure_shift_assignable,
    ensure_shift_deletable,
    ensure_shift_transition,
)
from shiftguard.services.scheduling.types import Shift, ShiftStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shifts", tags=["shifts"])

# changes to these fields re-run the assignment checks
_SCHEDULE_FIELDS = {"date", "start_time", "end_time", "assigned_employee_id", "skill_requirements", "role_requirement"}
_NULLABLE_FIELDS = {"assigned_employee_id", "notes"}


def _verdict_response(verdict: Verdict) -> VerdictResponse:
    return VerdictResponse(
        eligible=verdict.eligible,
        reason=verdict.reason,
        message=verdict.message,
        conflicts=[
            ConflictingShiftOut(id=s.id, date=s.date, start_time=s.start_time, end_time=s.end_time)
            for s in verdict.conflicts
        ],
        leave_id=verdict.leave.id if verdict.leave is not None else None,
    )


def _raise_for_verdict(verdict: Verdict) -> None:
    if verdict.eligible:
        return
    status_code = (
        status.HTTP_409_CONFLICT
        if verdict.reason == VerdictReason.CONFLICTING_SHIFTS
        else status.HTTP_400_BAD_REQUEST
    )
    body = _verdict_response(verdict)
    raise HTTPException(
        status_code=status_code,
        detail={
            "code": verdict.reason.value,
            "message": verdict.message,
            "conflicts": [c.model_dump(mode="json") for c in body.conflicts],
        },
    )


def _lifecycle_error(e: LifecycleError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"code": e.code, "message": e.message})


def _commit(db: Session, shift_id: int) -> None:
    """Commit a shift write; a concurrent write to the same row is a 409."""
    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        logger.info(f"Concurrent modification of shift {shift_id}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": "CONCURRENT_MODIFICATION", "message": "Shift was modified by another request"},
        )


def _proposal(payload, shift_id: Optional[int] = None, employee_id: Optional[int] = None) -> Shift:
    return Shift(
        id=shift_id,
        date=payload.date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        role_requirement=payload.role_requirement,
        location=payload.location,
        team=payload.team,
        assigned_employee_id=employee_id,
        skill_requirements=frozenset(payload.skill_requirements),
        break_duration=payload.break_duration,
        hourly_rate=payload.hourly_rate,
        notes=payload.notes,
    )


@router.post("", response_model=ShiftResponse, status_code=status.HTTP_201_CREATED)
def create_shift(
    payload: ShiftCreate,
    db: Session = Depends(get_db),
):
    if payload.assigned_employee_id is not None:
        proposal = _proposal(payload, employee_id=payload.assigned_employee_id)
        _raise_for_verdict(check_assignment(db, proposal, payload.assigned_employee_id))

    shift = Shifts(**payload.model_dump(), status=ShiftStatus.SCHEDULED)
    db.add(shift)
    db.commit()
    db.refresh(shift)
    return shift


@router.get("/unassigned", response_model=List[ShiftResponse])
def list_unassigned_shifts(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    location: Optional[str] = None,
    team: Optional[str] = None,
    skip: int = 0,
    limit: int = Query(100, le=500),
    db: Session = Depends(get_db),
):
    conditions = [
        Shifts.assigned_employee_id.is_(None),
        Shifts.status == ShiftStatus.SCHEDULED,
    ]
    if start_date:
        conditions.append(Shifts.date >= start_date)
    if end_date:
        conditions.append(Shifts.date <= end_date)
    if location:
        conditions.append(Shifts.location == location)
    if team:
        conditions.append(Shifts.team == team)

    stmt = (
        select(Shifts)
        .where(and_(*conditions))
        .order_by(Shifts.date, Shifts.start_time)
        .offset(skip)
        .limit(limit)
    )
    return db.execute(stmt).scalars().all()


@router.post("/validate", response_model=VerdictResponse)
def validate_shift_assignment(
    payload: ShiftValidate,
    db: Session = Depends(get_db),
):
    """Dry run: the verdict an assignment would get, without writing anything."""
    proposal = _proposal(payload, shift_id=payload.shift_id, employee_id=payload.employee_id)
    return _verdict_response(check_assignment(db, proposal, payload.employee_id))


@router.get("/{shift_id}", response_model=ShiftResponse)
def get_shift(
    shift_id: int,
    db: Session = Depends(get_db),
):
    return get_or_404(db, Shifts, shift_id, "Shift")


@router.put("/{shift_id}", response_model=ShiftResponse)
def update_shift(
    shift_id: int,
    payload: ShiftUpdate,
    db: Session = Depends(get_db),
):
    shift = get_or_404(db, Shifts, shift_id, "Shift")
    update_data = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field in _NULLABLE_FIELDS
    }

    try:
        # the assignee is frozen once the shift has started, finished or been cancelled
        if "assigned_employee_id" in update_data and update_data["assigned_employee_id"] != shift.assigned_employee_id:
            ensure_shift_assignable(shift.status)
        if update_data.get("status") is not None:
            ensure_shift_transition(shift.status, update_data["status"])
    except LifecycleError as e:
        raise _lifecycle_error(e)

    changes = dict(update_data)
    if "skill_requirements" in changes:
        changes["skill_requirements"] = frozenset(changes["skill_requirements"] or ())
    updated = dataclasses.replace(shift_from_row(shift), **changes)

    if updated.assigned_employee_id is not None and _SCHEDULE_FIELDS & update_data.keys():
        _raise_for_verdict(
            check_assignment(db, updated, updated.assigned_employee_id, exclude_shift_id=shift.id)
        )

    for field, value in update_data.items():
        setattr(shift, field, value)

    _commit(db, shift.id)
    db.refresh(shift)
    return shift


@router.put("/{shift_id}/assign", response_model=ShiftResponse)
def assign_shift(
    shift_id: int,
    payload: ShiftAssign,
    db: Session = Depends(get_db),
):
    shift = get_or_404(db, Shifts, shift_id, "Shift")
    try:
        ensure_shift_assignable(shift.status)
    except LifecycleError as e:
        raise _lifecycle_error(e)

    proposal = dataclasses.replace(shift_from_row(shift), assigned_employee_id=payload.employee_id)
    _raise_for_verdict(check_assignment(db, proposal, payload.employee_id, exclude_shift_id=shift.id))

    shift.assigned_employee_id = payload.employee_id
    _commit(db, shift.id)
    db.refresh(shift)
    return shift


@router.delete("/{shift_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_shift(
    shift_id: int,
    db: Session = Depends(get_db),
):
    shift = get_or_404(db, Shifts, shift_id, "Shift")
    try:
        ensure_shift_deletable(shift.status)
    except LifecycleError as e:
        raise _lifecycle_error(e)

    db.delete(shift)
    _commit(db, shift_id)
