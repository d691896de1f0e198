"""
Availability checking utilities.
Determines whether an employee's weekday flags, skills, role and approved
leave allow them to work a given shift.
"""

from datetime import date
from typing import Iterable, Optional

from .types import (
    Employee,
    LeaveRecord,
    Role,
    WEEKDAYS,
)


def is_available_on_date(employee: Employee, day: date) -> bool:
    """Weekday availability flag for the date's weekday."""
    return employee.is_available_on_day(WEEKDAYS[day.weekday()])


def has_any_required_skill(employee: Employee, required: Iterable[str]) -> bool:
    """Any-of match: one shared skill is enough, no requirement always matches."""
    required = frozenset(required)
    if not required:
        return True
    return bool(required & frozenset(employee.skills))


def matches_role(employee: Employee, role: Role) -> bool:
    return employee.role == role


def find_blocking_leave(
    employee_id: int,
    day: date,
    leave_records: list[LeaveRecord]
) -> Optional[LeaveRecord]:
    """
    Approved leave for the employee whose range contains `day`.

    Half-day leave blocks the entire date; the half marker is informational.
    """
    for leave in leave_records:
        if leave.employee_id != employee_id or not leave.is_approved:
            continue
        if leave.covers(day):
            return leave
    return None
