"""
Coverage, conflict, workload and utilization aggregation.

Every report is a pure function of a ReportContext snapshot. Grouped rows are
ordered by (date, location, team); inside a group, rows keep the order in
which their first record appeared. Records with an unparsable time, or
assigned to an employee missing from the snapshot, are left out of the report
and logged.
"""

import logging
from collections import defaultdict
from datetime import date
from typing import Iterable

from shiftguard.schemas.analytics import (
    CapacityRecord,
    ConflictingShift,
    ConflictRecord,
    ConflictReport,
    ConflictSummary,
    CoverageRecord,
    CoverageReport,
    CoverageRoleBreakdown,
    CoverageSummary,
    DateRangeOut,
    EmployeeSnapshot,
    FiltersOut,
    ShiftSnapshot,
    TimeOffConflictRecord,
    UtilizationRecord,
    UtilizationReport,
    UtilizationRoleBreakdown,
    UtilizationSummary,
    WorkloadRecord,
    WorkloadReport,
    WorkloadSummary,
)

from .types import (
    ACTIVE_SHIFT_STATUSES,
    REPORTABLE_SHIFT_STATUSES,
    Employee,
    ReportContext,
    Shift,
    ShiftStatus,
)
from .intervals import InvalidTimeError, to_effective_interval
from .conflicts import scan_conflicts, scan_leave_conflicts


logger = logging.getLogger(__name__)

OVER_UTILIZATION_THRESHOLD = 100.0
UNDER_UTILIZATION_THRESHOLD = 50.0


def percentage(part: float, whole: float) -> float:
    """part / whole as a percentage, with the denominator floored at 1."""
    return part / max(whole, 1) * 100


def _hours(shifts: Iterable[Shift]) -> float:
    return round(sum(s.duration_hours for s in shifts), 2)


def _is_well_formed(shift: Shift) -> bool:
    try:
        to_effective_interval(shift)
    except InvalidTimeError as e:
        logger.warning(f"Skipping shift {shift.id} on {shift.date}: {e}")
        return False
    return True


def select_shifts(
    context: ReportContext,
    statuses: frozenset[ShiftStatus],
    apply_role_filter: bool = False,
) -> list[Shift]:
    """Shifts of the snapshot inside the range, filters and statuses."""
    selected = []
    role = context.filters.role if apply_role_filter else None
    for shift in context.shifts:
        if shift.status not in statuses:
            continue
        if not context.date_range.contains(shift.date):
            continue
        if not context.filters.matches(shift.location, shift.team):
            continue
        if role is not None and shift.role_requirement != role:
            continue
        if _is_well_formed(shift):
            selected.append(shift)
    return selected


def group_by_employee(
    shifts: list[Shift],
    employees: dict[int, Employee],
) -> dict[int, list[Shift]]:
    """Assigned shifts keyed by employee id; unassigned shifts are dropped."""
    groups: dict[int, list[Shift]] = {}
    for shift in shifts:
        employee_id = shift.assigned_employee_id
        if employee_id is None:
            continue
        if employee_id not in employees:
            logger.warning(f"Shift {shift.id} references unknown employee {employee_id}")
            continue
        groups.setdefault(employee_id, []).append(shift)
    return groups


def _snapshot(shift: Shift) -> ShiftSnapshot:
    return ShiftSnapshot(
        id=shift.id,
        date=shift.date,
        start_time=shift.start_time,
        end_time=shift.end_time,
        duration=shift.duration_hours,
        location=shift.location,
        team=shift.team,
        is_overnight=shift.is_overnight,
    )


def _employee_snapshot(employee: Employee) -> EmployeeSnapshot:
    return EmployeeSnapshot(
        id=employee.id,
        name=employee.name,
        email=employee.email,
        role=employee.role,
        team=employee.team,
        location=employee.location,
        skills=sorted(employee.skills),
        max_hours_per_week=employee.max_hours_per_week,
    )


def _date_range_out(context: ReportContext) -> DateRangeOut:
    return DateRangeOut(start=context.date_range.start, end=context.date_range.end)


def _filters_out(context: ReportContext, include_role: bool = False) -> FiltersOut:
    filters = context.filters
    return FiltersOut(
        location=filters.location,
        team=filters.team,
        role=filters.role if include_role else None,
    )


def _day_groups(items: Iterable[tuple[tuple[date, str, str], object]]) -> list:
    """Order groups by their (date, location, team) key."""
    return sorted(items, key=lambda item: item[0])


# ---------- coverage ----------

def coverage_totals(shifts: list[Shift]) -> dict:
    assigned = [s for s in shifts if s.assigned_employee_id is not None]
    total_hours = _hours(shifts)
    assigned_hours = _hours(assigned)
    return {
        "total_shifts": len(shifts),
        "total_hours": total_hours,
        "assigned_shifts": len(assigned),
        "unassigned_shifts": len(shifts) - len(assigned),
        "assigned_hours": assigned_hours,
        "unassigned_hours": round(total_hours - assigned_hours, 2),
        "coverage_percentage": percentage(len(assigned), len(shifts)),
        "hours_coverage_percentage": percentage(assigned_hours, total_hours),
    }


def coverage_report(context: ReportContext) -> CoverageReport:
    shifts = select_shifts(context, REPORTABLE_SHIFT_STATUSES)

    groups: dict[tuple[date, str, str], dict] = {}
    for shift in shifts:
        key = (shift.date, shift.location, shift.team)
        groups.setdefault(key, {}).setdefault(shift.role_requirement, []).append(shift)

    daily = []
    for (day, location, team), by_role in _day_groups(groups.items()):
        roles = [
            CoverageRoleBreakdown(role=role, **coverage_totals(role_shifts))
            for role, role_shifts in by_role.items()
        ]
        day_shifts = [s for role_shifts in by_role.values() for s in role_shifts]
        daily.append(CoverageRecord(
            date=day,
            location=location,
            team=team,
            roles=roles,
            **coverage_totals(day_shifts),
        ))

    employees = [
        e for e in context.active_employees
        if e.is_active and context.filters.matches(e.location, e.team)
    ]
    summary = CoverageSummary(
        date_range=_date_range_out(context),
        total_employees=len(employees),
        active_employees=sum(1 for e in employees if e.is_active),
        **coverage_totals(shifts),
    )
    logger.debug(f"Coverage report: {len(daily)} day group(s) from {len(shifts)} shift(s)")
    return CoverageReport(
        summary=summary,
        daily_coverage=daily,
        employees=[_employee_snapshot(e) for e in employees],
        filters=_filters_out(context),
    )


# ---------- conflicts ----------

def conflict_report(context: ReportContext, span_midnight: bool = False) -> ConflictReport:
    shifts = select_shifts(context, ACTIVE_SHIFT_STATUSES)
    groups = group_by_employee(shifts, context.employees)

    records = []
    for employee_id, employee_shifts in groups.items():
        if len(employee_shifts) < 2:
            continue
        scan = scan_conflicts(employee_shifts, span_midnight=span_midnight)
        if not scan.has_conflicts:
            continue
        employee = context.employees[employee_id]
        records.append(ConflictRecord(
            employee_id=employee.id,
            employee_name=employee.name,
            employee_email=employee.email,
            employee_role=employee.role,
            shifts=[_snapshot(s) for s in employee_shifts],
            total_shifts=len(employee_shifts),
            total_hours=_hours(employee_shifts),
            conflicts=[
                ConflictingShift(
                    **_snapshot(c.shift).model_dump(),
                    overlap_count=c.overlap_count,
                )
                for c in scan.conflicts
            ],
            conflict_count=scan.conflict_count,
            conflict_pairs=scan.conflict_pairs,
            conflict_hours=round(scan.conflict_hours, 2),
        ))
    records.sort(key=lambda r: (-r.conflict_count, -r.total_hours))

    rng = context.date_range
    leave_in_range = [
        leave for leave in context.leave_records
        if leave.is_approved and leave.overlaps_range(rng.start, rng.end)
    ]
    # leave is checked over its own dates, not clipped to the window or filters
    leave_shifts = [
        s for s in context.leave_shifts
        if s.is_active and _is_well_formed(s)
    ]
    time_off = []
    for clash in scan_leave_conflicts(leave_in_range, leave_shifts):
        employee = context.employees.get(clash.leave.employee_id)
        if employee is None:
            logger.warning(f"Leave {clash.leave.id} references unknown employee {clash.leave.employee_id}")
            continue
        time_off.append(TimeOffConflictRecord(
            leave_id=clash.leave.id,
            employee_id=employee.id,
            employee_name=employee.name,
            employee_email=employee.email,
            start_date=clash.leave.start_date,
            end_date=clash.leave.end_date,
            request_type=clash.leave.request_type.value,
            total_days=clash.leave.total_days,
            conflicting_shifts=[_snapshot(s) for s in clash.shifts],
            conflict_count=clash.conflict_count,
        ))

    summary = ConflictSummary(
        date_range=_date_range_out(context),
        total_conflicts=sum(r.conflict_count for r in records),
        total_conflict_pairs=sum(r.conflict_pairs for r in records),
        total_conflict_hours=round(sum(r.conflict_hours for r in records), 2),
        employees_with_conflicts=len(records),
        time_off_conflicts=len(time_off),
        total_time_off_conflict_shifts=sum(t.conflict_count for t in time_off),
    )
    return ConflictReport(
        summary=summary,
        shift_conflicts=records,
        time_off_conflicts=time_off,
        filters=_filters_out(context),
    )


# ---------- workload ----------

def workload_report(
    context: ReportContext,
    over_threshold: float = OVER_UTILIZATION_THRESHOLD,
    under_threshold: float = UNDER_UTILIZATION_THRESHOLD,
) -> WorkloadReport:
    shifts = select_shifts(context, REPORTABLE_SHIFT_STATUSES, apply_role_filter=True)
    groups = group_by_employee(shifts, context.employees)
    weeks = context.date_range.weeks
    rng = context.date_range

    time_off_days: dict[int, int] = defaultdict(int)
    for leave in context.leave_records:
        if leave.is_approved and leave.overlaps_range(rng.start, rng.end):
            time_off_days[leave.employee_id] += leave.total_days

    records = []
    for employee_id, employee_shifts in groups.items():
        employee = context.employees[employee_id]
        total_hours = _hours(employee_shifts)
        average_per_week = total_hours / weeks
        max_hours = employee.max_hours_per_week
        records.append(WorkloadRecord(
            employee_id=employee.id,
            employee_name=employee.name,
            employee_email=employee.email,
            employee_role=employee.role,
            employee_team=employee.team,
            employee_location=employee.location,
            max_hours_per_week=max_hours,
            total_shifts=len(employee_shifts),
            total_hours=total_hours,
            average_shift_duration=total_hours / len(employee_shifts),
            overnight_shifts=sum(1 for s in employee_shifts if s.is_overnight),
            weekend_shifts=sum(1 for s in employee_shifts if s.is_weekend),
            average_hours_per_week=average_per_week,
            utilization_percentage=percentage(average_per_week, max_hours),
            adjusted_utilization_percentage=(
                min(100.0, average_per_week / max_hours * 100) if max_hours > 0 else 0.0
            ),
            total_time_off_days=time_off_days.get(employee_id, 0),
        ))
    records.sort(key=lambda r: -r.total_hours)

    total_hours = round(sum(r.total_hours for r in records), 2)
    summary = WorkloadSummary(
        date_range=_date_range_out(context),
        total_employees=len(records),
        total_hours=total_hours,
        total_shifts=sum(r.total_shifts for r in records),
        average_hours_per_employee=total_hours / len(records) if records else 0,
        employees_over_utilized=sum(1 for r in records if r.utilization_percentage > over_threshold),
        employees_under_utilized=sum(1 for r in records if r.utilization_percentage < under_threshold),
    )
    return WorkloadReport(
        summary=summary,
        employee_workloads=records,
        filters=_filters_out(context, include_role=True),
    )


# ---------- utilization ----------

def _utilization_row(role, shifts: list[Shift]) -> UtilizationRoleBreakdown:
    total_hours = _hours(shifts)
    employee_count = len({s.assigned_employee_id for s in shifts})
    return UtilizationRoleBreakdown(
        role=role,
        total_hours=total_hours,
        total_shifts=len(shifts),
        employee_count=employee_count,
        average_hours_per_employee=total_hours / employee_count if employee_count else 0,
    )


def capacity_by_group(employees: list[Employee], filters=None) -> list[CapacityRecord]:
    """Declared weekly capacity of active employees per (location, team, role)."""
    groups: dict[tuple, CapacityRecord] = {}
    for employee in employees:
        if not employee.is_active:
            continue
        if filters is not None and not filters.matches(employee.location, employee.team):
            continue
        key = (employee.location, employee.team, employee.role)
        record = groups.get(key)
        if record is None:
            record = groups[key] = CapacityRecord(
                location=employee.location, team=employee.team, role=employee.role,
            )
        record.employee_count += 1
        record.total_capacity += employee.max_hours_per_week
    return list(groups.values())


def utilization_report(context: ReportContext) -> UtilizationReport:
    shifts = select_shifts(context, REPORTABLE_SHIFT_STATUSES)
    by_employee = group_by_employee(shifts, context.employees)
    assigned = [s for s in shifts if s.assigned_employee_id in by_employee]

    groups: dict[tuple[date, str, str], dict] = {}
    for shift in assigned:
        role = context.employees[shift.assigned_employee_id].role
        key = (shift.date, shift.location, shift.team)
        groups.setdefault(key, {}).setdefault(role, []).append(shift)

    daily = []
    for (day, location, team), by_role in _day_groups(groups.items()):
        roles = [_utilization_row(role, role_shifts) for role, role_shifts in by_role.items()]
        total_hours = round(sum(r.total_hours for r in roles), 2)
        total_employees = sum(r.employee_count for r in roles)
        daily.append(UtilizationRecord(
            date=day,
            location=location,
            team=team,
            roles=roles,
            total_hours=total_hours,
            total_shifts=sum(r.total_shifts for r in roles),
            total_employees=total_employees,
            average_hours_per_employee=total_hours / total_employees if total_employees else 0,
        ))

    summary = UtilizationSummary(
        date_range=_date_range_out(context),
        total_hours=round(sum(r.total_hours for r in daily), 2),
        total_shifts=sum(r.total_shifts for r in daily),
        total_employees=sum(r.total_employees for r in daily),
        average_hours_per_employee=(
            sum(r.average_hours_per_employee for r in daily) / len(daily) if daily else 0
        ),
    )
    return UtilizationReport(
        summary=summary,
        daily_utilization=daily,
        capacity=capacity_by_group(context.active_employees, context.filters),
        filters=_filters_out(context),
    )
