"""
Report structures returned by the analytics aggregator.
Serialised with camelCase field names (totalShifts, coveragePercentage, ...).
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from shiftguard.services.scheduling.types import Role


class ReportModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DateRangeOut(ReportModel):
    start: date
    end: date


class FiltersOut(ReportModel):
    location: Optional[str] = None
    team: Optional[str] = None
    role: Optional[Role] = None


class ShiftSnapshot(ReportModel):
    id: Optional[int]
    date: date
    start_time: str
    end_time: str
    duration: float
    location: str
    team: str
    is_overnight: bool


class EmployeeSnapshot(ReportModel):
    id: int
    name: str
    email: str
    role: Role
    team: str
    location: str
    skills: List[str]
    max_hours_per_week: float


# ---------- coverage ----------

class CoverageTotals(ReportModel):
    total_shifts: int = 0
    total_hours: float = 0
    assigned_shifts: int = 0
    unassigned_shifts: int = 0
    assigned_hours: float = 0
    unassigned_hours: float = 0
    coverage_percentage: float = 0
    hours_coverage_percentage: float = 0


class CoverageRoleBreakdown(CoverageTotals):
    role: Role


class CoverageRecord(CoverageTotals):
    date: date
    location: str
    team: str
    roles: List[CoverageRoleBreakdown] = []


class CoverageSummary(CoverageTotals):
    date_range: DateRangeOut
    total_employees: int = 0
    active_employees: int = 0


class CoverageReport(ReportModel):
    summary: CoverageSummary
    daily_coverage: List[CoverageRecord]
    employees: List[EmployeeSnapshot]
    filters: FiltersOut


# ---------- conflicts ----------

class ConflictingShift(ShiftSnapshot):
    overlap_count: int


class ConflictRecord(ReportModel):
    employee_id: int
    employee_name: str
    employee_email: str
    employee_role: Role
    shifts: List[ShiftSnapshot]
    total_shifts: int
    total_hours: float
    conflicts: List[ConflictingShift]
    # counterpart-overlap count: each conflicting shift adds the number of
    # other shifts overlapping it, so one overlapping pair counts 2
    conflict_count: int
    conflict_pairs: int
    conflict_hours: float


class TimeOffConflictRecord(ReportModel):
    leave_id: Optional[int]
    employee_id: int
    employee_name: str
    employee_email: str
    start_date: date
    end_date: date
    request_type: str
    total_days: int
    conflicting_shifts: List[ShiftSnapshot]
    conflict_count: int


class ConflictSummary(ReportModel):
    date_range: DateRangeOut
    total_conflicts: int = 0
    total_conflict_pairs: int = 0
    total_conflict_hours: float = 0
    employees_with_conflicts: int = 0
    time_off_conflicts: int = 0
    total_time_off_conflict_shifts: int = 0


class ConflictReport(ReportModel):
    summary: ConflictSummary
    shift_conflicts: List[ConflictRecord]
    time_off_conflicts: List[TimeOffConflictRecord]
    filters: FiltersOut


# ---------- workload ----------

class WorkloadRecord(ReportModel):
    employee_id: int
    employee_name: str
    employee_email: str
    employee_role: Role
    employee_team: str
    employee_location: str
    max_hours_per_week: float
    total_shifts: int
    total_hours: float
    average_shift_duration: float
    overnight_shifts: int
    weekend_shifts: int
    average_hours_per_week: float
    utilization_percentage: float
    adjusted_utilization_percentage: float
    total_time_off_days: int


class WorkloadSummary(ReportModel):
    date_range: DateRangeOut
    total_employees: int = 0
    total_hours: float = 0
    total_shifts: int = 0
    average_hours_per_employee: float = 0
    employees_over_utilized: int = 0
    employees_under_utilized: int = 0


class WorkloadReport(ReportModel):
    summary: WorkloadSummary
    employee_workloads: List[WorkloadRecord]
    filters: FiltersOut


# ---------- utilization ----------

class UtilizationRoleBreakdown(ReportModel):
    role: Role
    total_hours: float = 0
    total_shifts: int = 0
    employee_count: int = 0
    average_hours_per_employee: float = 0


class UtilizationRecord(ReportModel):
    date: date
    location: str
    team: str
    roles: List[UtilizationRoleBreakdown] = []
    total_hours: float = 0
    total_shifts: int = 0
    total_employees: int = 0
    average_hours_per_employee: float = 0


class CapacityRecord(ReportModel):
    location: str
    team: str
    role: Role
    employee_count: int = 0
    total_capacity: float = 0


class UtilizationSummary(ReportModel):
    date_range: DateRangeOut
    total_hours: float = 0
    total_shifts: int = 0
    total_employees: int = 0
    average_hours_per_employee: float = 0


class UtilizationReport(ReportModel):
    summary: UtilizationSummary
    daily_utilization: List[UtilizationRecord]
    capacity: List[CapacityRecord]
    filters: FiltersOut
