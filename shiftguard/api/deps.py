from datetime import date
from typing import Generator, Optional
from fastapi import HTTPException, Query, status
from sqlalchemy.orm import Session

from shiftguard.db.database import SessionLocal
from shiftguard.services.scheduling.types import DateRange, InvalidDateRangeError, ReportFilters, Role


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_date_range(
    start_date: date = Query(...),
    end_date: date = Query(...),
) -> DateRange:
    """Inclusive reporting window; a reversed range is a 400, not a 422."""
    try:
        return DateRange(start_date, end_date)
    except InvalidDateRangeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def get_report_filters(
    location: Optional[str] = None,
    team: Optional[str] = None,
) -> ReportFilters:
    return ReportFilters(location=location or None, team=team or None)


def get_workload_filters(
    location: Optional[str] = None,
    team: Optional[str] = None,
    role: Optional[Role] = None,
) -> ReportFilters:
    """Workload is the only report that narrows by the shift's role requirement."""
    return ReportFilters(location=location or None, team=team or None, role=role)


def get_or_404(db: Session, model, obj_id: int, label: str):
    obj = db.get(model, obj_id)
    if obj is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return obj
