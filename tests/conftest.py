import pytest
from datetime import date
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shiftguard.main import app
from shiftguard.api.deps import get_db
from shiftguard.db.models import Base, Employees, Shifts, TimeOffRequests
from shiftguard.services.scheduling.types import (
    DateRange,
    DayAvailability,
    Employee,
    LeaveRecord,
    LeaveStatus,
    LeaveType,
    ReportContext,
    ReportFilters,
    Role,
    Shift,
    ShiftStatus,
    WEEKDAYS,
)


# ---------- engine helpers (tests/scheduling) ----------

def get_test_monday() -> date:
    # returns a fixed Monday for deterministic tests
    return date(2024, 1, 15)


def all_week() -> dict[str, DayAvailability]:
    return {day: DayAvailability(available=True) for day in WEEKDAYS}


def make_shift(
    id,
    day,
    start="09:00",
    end="17:00",
    employee_id=None,
    role=Role.EMPLOYEE,
    location="Downtown",
    team="Front",
    status=ShiftStatus.SCHEDULED,
    skills=(),
) -> Shift:
    return Shift(
        id=id,
        date=day,
        start_time=start,
        end_time=end,
        role_requirement=role,
        location=location,
        team=team,
        assigned_employee_id=employee_id,
        skill_requirements=frozenset(skills),
        status=status,
    )


def make_employee(
    id,
    role=Role.EMPLOYEE,
    skills=("A",),
    team="Front",
    location="Downtown",
    max_hours=40,
    is_active=True,
    availability=None,
) -> Employee:
    employee = Employee(
        id=id,
        name=f"Employee {id}",
        email=f"employee{id}@example.com",
        role=role,
        team=team,
        location=location,
        skills=frozenset(skills),
        max_hours_per_week=max_hours,
        is_active=is_active,
    )
    if availability is not None:
        employee.availability = availability
    return employee


def make_leave(id, employee_id, start, end, status=LeaveStatus.APPROVED) -> LeaveRecord:
    return LeaveRecord(id=id, employee_id=employee_id, start_date=start, end_date=end, status=status)


def make_context(shifts, employees, start=None, end=None, filters=None, leave=None, leave_shifts=None) -> ReportContext:
    # leave_shifts defaults to the window's shifts, as when nothing runs past the window
    start = start or get_test_monday()
    end = end or start
    return ReportContext(
        date_range=DateRange(start, end),
        filters=filters or ReportFilters(),
        shifts=list(shifts),
        employees={e.id: e for e in employees},
        active_employees=[e for e in employees if e.is_active],
        leave_records=list(leave or []),
        leave_shifts=list(shifts if leave_shifts is None else leave_shifts),
    )


@pytest.fixture
def basic_employee() -> Employee:
    # Mon-Fri availability, skills {"A"}, 40h max
    return make_employee(1)


@pytest.fixture
def team_employees() -> list[Employee]:
    # two employees and a supervisor in Downtown/Front, one in Uptown/Back
    return [
        make_employee(1),
        make_employee(2, skills=("A", "B")),
        make_employee(3, role=Role.SUPERVISOR, max_hours=30),
        make_employee(4, location="Uptown", team="Back", max_hours=20),
    ]


# ---------- database fixtures (tests/integration) ----------

# Test database URL
TEST_DATABASE_URL = "sqlite://"

# Create test engine
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)

FULL_WEEK = {day: {"available": True} for day in WEEKDAYS}


@pytest.fixture
def db():
    """Fresh schema per test."""
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db):
    """Create test client sharing the test session"""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def add_employee(db):
    def _add(name="Alice", role=Role.EMPLOYEE, skills=("A",), team="Front", location="Downtown",
             availability=None, max_hours=40, is_active=True):
        employee = Employees(
            name=name,
            email=f"{name.lower()}@example.com",
            role=role,
            skills=list(skills),
            team=team,
            location=location,
            availability=availability or {},
            max_hours_per_week=max_hours,
            is_active=is_active,
        )
        db.add(employee)
        db.commit()
        db.refresh(employee)
        return employee
    return _add


@pytest.fixture
def add_shift(db):
    def _add(day, start="09:00", end="17:00", employee=None, role=Role.EMPLOYEE, location="Downtown",
             team="Front", status=ShiftStatus.SCHEDULED, skills=()):
        shift = Shifts(
            date=day,
            start_time=start,
            end_time=end,
            role_requirement=role,
            skill_requirements=list(skills),
            assigned_employee_id=employee.id if employee is not None else None,
            location=location,
            team=team,
            status=status,
        )
        db.add(shift)
        db.commit()
        db.refresh(shift)
        return shift
    return _add


@pytest.fixture
def add_leave(db):
    def _add(employee, start: date, end: date, status=LeaveStatus.APPROVED, request_type=LeaveType.VACATION):
        leave = TimeOffRequests(
            employee_id=employee.id,
            start_date=start,
            end_date=end,
            status=status,
            request_type=request_type,
            reason="Family holiday booked months ago",
        )
        db.add(leave)
        db.commit()
        db.refresh(leave)
        return leave
    return _add
