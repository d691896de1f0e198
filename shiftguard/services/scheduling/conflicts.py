"""
Conflict scanning for shift double-booking and leave clashes.

Two forms:
- targeted: does a proposed interval clash with an employee's existing shifts
- bulk: across one employee's shifts in a window, which shifts overlap others

Conflict totals use the counterpart-overlap count: every shift contributes the
number of *other* shifts overlapping it, so a mutually overlapping pair adds 2.
The number of distinct overlapping pairs is reported next to it.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

from .types import (
    LeaveRecord,
    Shift,
)
from .intervals import EffectiveInterval, intervals_overlap, minute_span, to_effective_interval


@dataclass
class ShiftConflict:
    """A shift and the other shifts of the same employee overlapping it."""
    shift: Shift
    counterparts: list[Shift]

    @property
    def overlap_count(self) -> int:
        return len(self.counterparts)


@dataclass
class EmployeeConflicts:
    shifts: list[Shift]
    conflicts: list[ShiftConflict] = field(default_factory=list)
    conflict_pairs: int = 0

    @property
    def conflict_count(self) -> int:
        """Counterpart-overlap count (a mutual pair contributes 2)."""
        return sum(c.overlap_count for c in self.conflicts)

    @property
    def conflict_hours(self) -> float:
        return sum(c.shift.duration_hours for c in self.conflicts)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)


@dataclass
class LeaveConflict:
    leave: LeaveRecord
    shifts: list[Shift]

    @property
    def conflict_count(self) -> int:
        return len(self.shifts)


def candidate_dates(day: date, span_midnight: bool = False) -> set[date]:
    """Dates whose shifts can clash with a shift on `day`."""
    if not span_midnight:
        return {day}
    return {day - timedelta(days=1), day, day + timedelta(days=1)}


def find_conflicts(
    employee_id: int,
    day: date,
    start_time: str,
    end_time: str,
    shifts: list[Shift],
    exclude_id: Optional[int] = None,
    span_midnight: bool = False,
) -> list[Shift]:
    """
    Existing scheduled/in-progress shifts of the employee that overlap the
    proposed interval. `exclude_id` skips the shift being edited in place.
    """
    start, end = minute_span(start_time, end_time)
    proposed = EffectiveInterval(day, start, end)
    dates = candidate_dates(day, span_midnight)

    conflicts = []
    for shift in shifts:
        if shift.assigned_employee_id != employee_id:
            continue
        if exclude_id is not None and shift.id == exclude_id:
            continue
        if not shift.is_active or shift.date not in dates:
            continue
        if intervals_overlap(proposed, to_effective_interval(shift), span_midnight):
            conflicts.append(shift)
    return conflicts


def scan_conflicts(employee_shifts: list[Shift], span_midnight: bool = False) -> EmployeeConflicts:
    """Pairwise scan of one employee's shifts; order of the input is kept."""
    intervals = [to_effective_interval(s) for s in employee_shifts]
    counterparts: list[list[Shift]] = [[] for _ in employee_shifts]
    pairs = 0

    for i in range(len(employee_shifts)):
        for j in range(i + 1, len(employee_shifts)):
            if intervals_overlap(intervals[i], intervals[j], span_midnight):
                counterparts[i].append(employee_shifts[j])
                counterparts[j].append(employee_shifts[i])
                pairs += 1

    result = EmployeeConflicts(shifts=list(employee_shifts), conflict_pairs=pairs)
    for shift, others in zip(employee_shifts, counterparts):
        if others:
            result.conflicts.append(ShiftConflict(shift=shift, counterparts=others))
    return result


def scan_leave_conflicts(
    leave_records: list[LeaveRecord],
    shifts: list[Shift],
) -> list[LeaveConflict]:
    """Approved leave that falls on a day the same employee still has an active shift."""
    by_employee: dict[int, list[Shift]] = {}
    for shift in shifts:
        if shift.assigned_employee_id is None or not shift.is_active:
            continue
        by_employee.setdefault(shift.assigned_employee_id, []).append(shift)

    conflicts = []
    for leave in leave_records:
        if not leave.is_approved:
            continue
        clashing = [s for s in by_employee.get(leave.employee_id, []) if leave.covers(s.date)]
        if clashing:
            conflicts.append(LeaveConflict(leave=leave, shifts=clashing))
    return conflicts


@dataclass
class LeaveRequestCheck:
    """Outcome of checking a new leave request against shifts and other leave."""
    shift_conflicts: list[Shift] = field(default_factory=list)
    leave_conflicts: list[LeaveRecord] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.shift_conflicts and not self.leave_conflicts


def check_leave_request(
    employee_id: int,
    start_date: date,
    end_date: date,
    shifts: list[Shift],
    leave_records: list[LeaveRecord],
    exclude_leave_id: Optional[int] = None,
) -> LeaveRequestCheck:
    shift_conflicts = [
        s for s in shifts
        if s.assigned_employee_id == employee_id
        and s.is_active
        and start_date <= s.date <= end_date
    ]
    leave_conflicts = [
        leave for leave in leave_records
        if leave.employee_id == employee_id
        and leave.is_approved
        and (exclude_leave_id is None or leave.id != exclude_leave_id)
        and leave.overlaps_range(start_date, end_date)
    ]
    return LeaveRequestCheck(shift_conflicts=shift_conflicts, leave_conflicts=leave_conflicts)
