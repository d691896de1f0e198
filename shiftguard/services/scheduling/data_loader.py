"""
Data loader for conflict and analytics logic.
Fetches shifts, employees and leave from the database and converts them to internal types.
"""

from datetime import date, timedelta
from typing import Iterable, Optional
from sqlalchemy import select, and_
from sqlalchemy.orm import Session

from shiftguard.db.models.employees import Employees
from shiftguard.db.models.shifts import Shifts
from shiftguard.db.models.time_off_requests import TimeOffRequests

from .types import (
    ACTIVE_SHIFT_STATUSES,
    REPORTABLE_SHIFT_STATUSES,
    DateRange,
    DayAvailability,
    Employee,
    LeaveRecord,
    LeaveStatus,
    ReportContext,
    ReportFilters,
    Shift,
    ShiftStatus,
    WEEKDAYS,
    default_availability,
)


def _availability_from_json(raw: Optional[dict]) -> dict[str, DayAvailability]:
    if not raw:
        return default_availability()

    availability = {}
    for day in WEEKDAYS:
        entry = raw.get(day)
        if entry is None:
            availability[day] = DayAvailability(available=False)
            continue
        availability[day] = DayAvailability(
            available=bool(entry.get("available", True)),
            start_time=entry.get("start"),
            end_time=entry.get("end"),
        )
    return availability


def employee_from_row(row: Employees) -> Employee:
    return Employee(
        id=row.id,
        name=row.name,
        email=row.email,
        role=row.role,
        team=row.team,
        location=row.location,
        skills=frozenset(row.skills or ()),
        availability=_availability_from_json(row.availability),
        employment_type=row.employment_type,
        max_hours_per_week=row.max_hours_per_week,
        is_active=row.is_active,
    )


def shift_from_row(row: Shifts) -> Shift:
    return Shift(
        id=row.id,
        date=row.date,
        start_time=row.start_time,
        end_time=row.end_time,
        role_requirement=row.role_requirement,
        location=row.location,
        team=row.team,
        assigned_employee_id=row.assigned_employee_id,
        skill_requirements=frozenset(row.skill_requirements or ()),
        status=row.status,
        break_duration=row.break_duration,
        hourly_rate=row.hourly_rate,
        notes=row.notes,
    )


def leave_from_row(row: TimeOffRequests) -> LeaveRecord:
    return LeaveRecord(
        id=row.id,
        employee_id=row.employee_id,
        start_date=row.start_date,
        end_date=row.end_date,
        status=row.status,
        request_type=row.request_type,
        is_half_day=row.is_half_day,
        half_day_type=row.half_day_type,
    )


def load_employee(db: Session, employee_id: int) -> Optional[Employee]:
    row = db.get(Employees, employee_id)
    return employee_from_row(row) if row is not None else None


def load_employees_by_ids(db: Session, employee_ids: Iterable[int]) -> dict[int, Employee]:
    """Employees keyed by id, including inactive ones."""
    employee_ids = sorted(set(employee_ids))
    if not employee_ids:
        return {}

    stmt = select(Employees).where(Employees.id.in_(employee_ids))
    rows = db.execute(stmt).scalars().all()
    return {r.id: employee_from_row(r) for r in rows}


def load_active_employees(
    db: Session,
    location: Optional[str] = None,
    team: Optional[str] = None,
) -> list[Employee]:
    """Active employees, optionally narrowed to a location and/or team."""
    conditions = [Employees.is_active == True]
    if location:
        conditions.append(Employees.location == location)
    if team:
        conditions.append(Employees.team == team)

    stmt = select(Employees).where(and_(*conditions)).order_by(Employees.id)
    rows = db.execute(stmt).scalars().all()
    return [employee_from_row(r) for r in rows]


def load_shifts_in_range(
    db: Session,
    start: date,
    end: date,
    location: Optional[str] = None,
    team: Optional[str] = None,
    statuses: Iterable[ShiftStatus] = REPORTABLE_SHIFT_STATUSES,
) -> list[Shift]:
    """Shifts dated within [start, end] (inclusive) in the given statuses."""
    conditions = [
        Shifts.date >= start,
        Shifts.date <= end,
        Shifts.status.in_(list(statuses)),
    ]
    if location:
        conditions.append(Shifts.location == location)
    if team:
        conditions.append(Shifts.team == team)

    stmt = select(Shifts).where(and_(*conditions)).order_by(Shifts.date, Shifts.start_time, Shifts.id)
    rows = db.execute(stmt).scalars().all()
    return [shift_from_row(r) for r in rows]


def load_shifts_for_employee_on_date(
    db: Session,
    employee_id: int,
    day: date,
    statuses: Iterable[ShiftStatus] = ACTIVE_SHIFT_STATUSES,
    exclude_id: Optional[int] = None,
    span_midnight: bool = False,
) -> list[Shift]:
    """
    The employee's shifts that could clash with a shift on `day`.
    With span_midnight the neighbouring dates are included too.
    """
    start, end = day, day
    if span_midnight:
        start, end = day - timedelta(days=1), day + timedelta(days=1)

    conditions = [
        Shifts.assigned_employee_id == employee_id,
        Shifts.date >= start,
        Shifts.date <= end,
        Shifts.status.in_(list(statuses)),
    ]
    if exclude_id is not None:
        conditions.append(Shifts.id != exclude_id)

    stmt = select(Shifts).where(and_(*conditions)).order_by(Shifts.date, Shifts.start_time)
    rows = db.execute(stmt).scalars().all()
    return [shift_from_row(r) for r in rows]


def load_active_shifts_for_employees(
    db: Session,
    employee_ids: Iterable[int],
    start: date,
    end: date,
) -> list[Shift]:
    """Scheduled/in-progress shifts of the given employees within [start, end], any location."""
    employee_ids = sorted(set(employee_ids))
    if not employee_ids:
        return []

    conditions = [
        Shifts.assigned_employee_id.in_(employee_ids),
        Shifts.date >= start,
        Shifts.date <= end,
        Shifts.status.in_(list(ACTIVE_SHIFT_STATUSES)),
    ]
    stmt = select(Shifts).where(and_(*conditions)).order_by(Shifts.date, Shifts.start_time, Shifts.id)
    rows = db.execute(stmt).scalars().all()
    return [shift_from_row(r) for r in rows]


def load_approved_leave(
    db: Session,
    start: date,
    end: date,
    employee_id: Optional[int] = None,
) -> list[LeaveRecord]:
    """Approved leave that overlaps [start, end]."""
    conditions = [
        TimeOffRequests.status == LeaveStatus.APPROVED,
        TimeOffRequests.start_date <= end,
        TimeOffRequests.end_date >= start,
    ]
    if employee_id is not None:
        conditions.append(TimeOffRequests.employee_id == employee_id)

    stmt = select(TimeOffRequests).where(and_(*conditions)).order_by(TimeOffRequests.start_date)
    rows = db.execute(stmt).scalars().all()
    return [leave_from_row(r) for r in rows]


def load_report_context(db: Session, date_range: DateRange, filters: ReportFilters) -> ReportContext:
    """
    Load the record snapshot for one analytics request.

    Each report picks its own status subset from `shifts`, so every
    non-cancelled shift in the range is loaded here. Leave is matched against
    the employee's active shifts over the leave's own dates, which can run
    past the window, so those shifts are loaded separately and unfiltered.
    """
    shifts = load_shifts_in_range(
        db,
        date_range.start,
        date_range.end,
        location=filters.location,
        team=filters.team,
        statuses=REPORTABLE_SHIFT_STATUSES,
    )
    leave = load_approved_leave(db, date_range.start, date_range.end)

    leave_employee_ids = {r.employee_id for r in leave}
    leave_shifts = []
    if leave:
        leave_shifts = load_active_shifts_for_employees(
            db,
            leave_employee_ids,
            min(r.start_date for r in leave),
            max(r.end_date for r in leave),
        )

    employee_ids = {s.assigned_employee_id for s in shifts if s.assigned_employee_id is not None}
    employees = load_employees_by_ids(db, employee_ids | leave_employee_ids)

    return ReportContext(
        date_range=date_range,
        filters=filters,
        shifts=shifts,
        employees=employees,
        active_employees=load_active_employees(db, filters.location, filters.team),
        leave_records=leave,
        leave_shifts=leave_shifts,
    )
