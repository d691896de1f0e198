"""
Assignment validation against the database.
Loads the candidate, their nearby shifts and leave, then runs validate_assignment.
"""

from typing import Optional
from sqlalchemy.orm import Session

from shiftguard.core.config import settings

from .types import Shift
from .data_loader import load_approved_leave, load_employee, load_shifts_for_employee_on_date
from .eligibility import Verdict, validate_assignment


def check_assignment(
    db: Session,
    shift: Shift,
    employee_id: int,
    exclude_shift_id: Optional[int] = None,
) -> Verdict:
    """
    Verdict for putting `employee_id` on `shift`.

    `shift` may be unsaved (id None) for creation and dry-run validation;
    for updates and re-assignment its own id is excluded from the conflict scan.
    """
    if exclude_shift_id is None:
        exclude_shift_id = shift.id

    employee = load_employee(db, employee_id)
    if employee is None:
        return validate_assignment(shift, None, [], [])

    span_midnight = settings.CROSS_MIDNIGHT_CONFLICTS
    existing = load_shifts_for_employee_on_date(
        db,
        employee_id,
        shift.date,
        span_midnight=span_midnight,
        exclude_id=exclude_shift_id,
    )
    leave = load_approved_leave(db, shift.date, shift.date, employee_id=employee_id)

    return validate_assignment(
        shift,
        employee,
        leave,
        existing,
        exclude_shift_id=exclude_shift_id,
        span_midnight=span_midnight,
        enforce_role=settings.ENFORCE_ROLE_MATCH,
    )
