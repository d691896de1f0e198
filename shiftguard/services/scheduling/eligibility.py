"""
Assignment eligibility.

validate_assignment composes the individual checks into a single verdict.
The first failing check wins, in this order: employee exists and is active,
no double-booking, weekday availability, skills, (optionally) role, leave.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .types import Employee, LeaveRecord, Shift
from .availability import (
    find_blocking_leave,
    has_any_required_skill,
    is_available_on_date,
    matches_role,
)
from .conflicts import find_conflicts


logger = logging.getLogger(__name__)


class VerdictReason(str, Enum):
    ELIGIBLE = "ELIGIBLE"
    EMPLOYEE_NOT_FOUND = "EMPLOYEE_NOT_FOUND"
    EMPLOYEE_INACTIVE = "EMPLOYEE_INACTIVE"
    CONFLICTING_SHIFTS = "SHIFT_CONFLICT"
    EMPLOYEE_UNAVAILABLE_ON_DAY = "EMPLOYEE_UNAVAILABLE"
    INSUFFICIENT_SKILLS = "INSUFFICIENT_SKILLS"
    ROLE_MISMATCH = "ROLE_MISMATCH"
    TIME_OFF_CONFLICT = "TIMEOFF_CONFLICT"


@dataclass(frozen=True)
class Verdict:
    reason: VerdictReason
    message: str = ""
    conflicts: tuple[Shift, ...] = ()
    leave: Optional[LeaveRecord] = None

    @property
    def eligible(self) -> bool:
        return self.reason == VerdictReason.ELIGIBLE

    @classmethod
    def ok(cls) -> "Verdict":
        return cls(VerdictReason.ELIGIBLE, "OK")


def validate_assignment(
    shift: Shift,
    employee: Optional[Employee],
    leave_records: list[LeaveRecord],
    shifts_for_employee: list[Shift],
    exclude_shift_id: Optional[int] = None,
    *,
    span_midnight: bool = False,
    enforce_role: bool = False,
) -> Verdict:
    """
    Decide whether `employee` may work `shift`.

    Args:
        shift: the shift being created, updated or assigned
        employee: the candidate, None when the reference did not resolve
        leave_records: leave for the employee (non-approved entries are ignored)
        shifts_for_employee: the employee's existing shifts around the shift date
        exclude_shift_id: id of the shift being re-validated in place
        span_midnight: also detect clashes across midnight
        enforce_role: require the employee's role to equal the shift's role

    Returns:
        Verdict; never raises for an ineligible assignment.
    """
    if employee is None:
        return Verdict(VerdictReason.EMPLOYEE_NOT_FOUND, "Assigned employee not found")

    if not employee.is_active:
        return Verdict(VerdictReason.EMPLOYEE_INACTIVE, "Cannot assign shift to inactive employee")

    if exclude_shift_id is None:
        exclude_shift_id = shift.id

    conflicts = find_conflicts(
        employee.id,
        shift.date,
        shift.start_time,
        shift.end_time,
        shifts_for_employee,
        exclude_id=exclude_shift_id,
        span_midnight=span_midnight,
    )
    if conflicts:
        logger.info(
            f"Employee {employee.id} has {len(conflicts)} conflicting shift(s) on {shift.date}"
        )
        return Verdict(
            VerdictReason.CONFLICTING_SHIFTS,
            "Employee has conflicting shifts",
            conflicts=tuple(conflicts),
        )

    if not is_available_on_date(employee, shift.date):
        return Verdict(
            VerdictReason.EMPLOYEE_UNAVAILABLE_ON_DAY,
            "Employee is not available on this day",
        )

    if not has_any_required_skill(employee, shift.skill_requirements):
        return Verdict(VerdictReason.INSUFFICIENT_SKILLS, "Employee does not have required skills")

    if enforce_role and not matches_role(employee, shift.role_requirement):
        return Verdict(
            VerdictReason.ROLE_MISMATCH,
            f"Shift requires role {shift.role_requirement.value}",
        )

    leave = find_blocking_leave(employee.id, shift.date, leave_records)
    if leave is not None:
        return Verdict(
            VerdictReason.TIME_OFF_CONFLICT,
            "Employee has approved time off on this date",
            leave=leave,
        )

    return Verdict.ok()
