from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shiftguard.api.deps import get_db, get_date_range, get_report_filters, get_workload_filters
from shiftguard.schemas.analytics import ConflictReport, CoverageReport, UtilizationReport, WorkloadReport
from shiftguard.services.scheduling.reports import (
    build_coverage_report,
    build_conflict_report,
    build_workload_report,
    build_utilization_report,
)
from shiftguard.services.scheduling.types import DateRange, ReportFilters

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/coverage", response_model=CoverageReport, response_model_by_alias=True)
def get_coverage(
    date_range: DateRange = Depends(get_date_range),
    filters: ReportFilters = Depends(get_report_filters),
    db: Session = Depends(get_db),
):
    return build_coverage_report(db, date_range, filters)


@router.get("/conflicts", response_model=ConflictReport, response_model_by_alias=True)
def get_conflicts(
    date_range: DateRange = Depends(get_date_range),
    filters: ReportFilters = Depends(get_report_filters),
    db: Session = Depends(get_db),
):
    return build_conflict_report(db, date_range, filters)


@router.get("/workload", response_model=WorkloadReport, response_model_by_alias=True)
def get_workload(
    date_range: DateRange = Depends(get_date_range),
    filters: ReportFilters = Depends(get_workload_filters),
    db: Session = Depends(get_db),
):
    return build_workload_report(db, date_range, filters)


@router.get("/utilization", response_model=UtilizationReport, response_model_by_alias=True)
def get_utilization(
    date_range: DateRange = Depends(get_date_range),
    filters: ReportFilters = Depends(get_report_filters),
    db: Session = Depends(get_db),
):
    return build_utilization_report(db, date_range, filters)
