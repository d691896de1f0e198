"""
Conflict and coverage analytics package.

Usage:
    from datetime import date
    from shiftguard.services.scheduling import DateRange, ReportFilters
    from shiftguard.services.scheduling.reports import build_workload_report

    # Load data and aggregate in one call
    report = build_workload_report(db, DateRange(date(2024, 1, 15), date(2024, 1, 28)), ReportFilters())

    # Or load the snapshot separately for inspection/testing
    from shiftguard.services.scheduling.data_loader import load_report_context
    from shiftguard.services.scheduling.aggregator import workload_report

    context = load_report_context(db, date_range, filters)
    report = workload_report(context)

Only the leaf modules are re-exported here; the db models import the enums
below, so this package must not pull in anything that imports the models.
"""

from .types import (
    DateRange,
    Employee,
    InvalidDateRangeError,
    LeaveRecord,
    ReportContext,
    ReportFilters,
    Shift,
)
from .intervals import InvalidTimeError, shifts_overlap

__all__ = [
    # Types
    "DateRange",
    "Employee",
    "InvalidDateRangeError",
    "InvalidTimeError",
    "LeaveRecord",
    "ReportContext",
    "ReportFilters",
    "Shift",
    # Helpers
    "shifts_overlap",
]
