"""
Report builder - main orchestration layer for analytics.

This module provides the high-level API for the four analytics reports,
combining data loading and aggregation into a single flow.
"""

import logging
from sqlalchemy.orm import Session

from shiftguard.core.config import settings
from shiftguard.schemas.analytics import (
    ConflictReport,
    CoverageReport,
    UtilizationReport,
    WorkloadReport,
)

from .aggregator import coverage_report, conflict_report, utilization_report, workload_report
from .data_loader import load_report_context
from .types import DateRange, ReportFilters


logger = logging.getLogger(__name__)


def build_coverage_report(db: Session, date_range: DateRange, filters: ReportFilters) -> CoverageReport:
    """
    Coverage per (date, location, team) with a per-role breakdown.

    Args:
        db: Database session
        date_range: inclusive reporting window
        filters: optional location / team narrowing

    Returns:
        CoverageReport with summary totals, daily rows and the active employees in scope

    Example:
        from datetime import date
        from shiftguard.services.scheduling import DateRange, ReportFilters
        from shiftguard.services.scheduling.reports import build_coverage_report

        report = build_coverage_report(
            db,
            DateRange(date(2024, 1, 15), date(2024, 1, 21)),
            ReportFilters(location="Downtown"),
        )
        print(report.summary.coverage_percentage)
    """
    context = load_report_context(db, date_range, filters)
    logger.debug(f"Building coverage report for {date_range.start}..{date_range.end}")
    return coverage_report(context)


def build_conflict_report(db: Session, date_range: DateRange, filters: ReportFilters) -> ConflictReport:
    """Per-employee double-bookings plus approved leave that still has active shifts."""
    context = load_report_context(db, date_range, filters)
    logger.debug(f"Building conflict report for {date_range.start}..{date_range.end}")
    return conflict_report(context, span_midnight=settings.CROSS_MIDNIGHT_CONFLICTS)


def build_workload_report(db: Session, date_range: DateRange, filters: ReportFilters) -> WorkloadReport:
    """Per-employee hours against max weekly hours; honours the role filter."""
    context = load_report_context(db, date_range, filters)
    logger.debug(f"Building workload report for {date_range.start}..{date_range.end}")
    return workload_report(
        context,
        over_threshold=settings.OVER_UTILIZATION_THRESHOLD,
        under_threshold=settings.UNDER_UTILIZATION_THRESHOLD,
    )


def build_utilization_report(db: Session, date_range: DateRange, filters: ReportFilters) -> UtilizationReport:
    context = load_report_context(db, date_range, filters)
    logger.debug(f"Building utilization report for {date_range.start}..{date_range.end}")
    return utilization_report(context)
