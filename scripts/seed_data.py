"""
Seed script for the ShiftGuard development database.
Run with: python -m scripts.seed_data
"""

import sys
from datetime import date, timedelta
from shiftguard.db.database import SessionLocal, engine
from shiftguard.db.models import Base, Employees, Shifts, TimeOffRequests
from shiftguard.services.scheduling.types import (
    EmploymentType,
    HalfDayType,
    LeaveStatus,
    LeaveType,
    Role,
    ShiftStatus,
    WEEKDAYS,
)

WEEKDAY_HOURS = {day: {"start": "06:00", "end": "23:00", "available": day not in ("saturday", "sunday")} for day in WEEKDAYS}
ALL_WEEK = {day: {"start": "00:00", "end": "23:59", "available": True} for day in WEEKDAYS}


def reset_tables():
    """Drop and recreate every table."""
    print("Resetting tables...")
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    print("Tables recreated.")


def get_current_week_monday():
    """Get the Monday of the current week."""
    today = date.today()
    monday = today - timedelta(days=today.weekday())
    return monday


def seed_employees(db):
    """Seed staff across two locations."""
    print("Seeding employees...")

    employees = [
        # Downtown / Front of house
        Employees(name="Maria Manager", email="maria@shiftguard.dev", role=Role.MANAGER,
                  skills=["tills", "keyholder"], team="Front", location="Downtown",
                  availability=WEEKDAY_HOURS, employment_type=EmploymentType.FULL_TIME, max_hours_per_week=40),
        Employees(name="Sam Supervisor", email="sam@shiftguard.dev", role=Role.SUPERVISOR,
                  skills=["tills", "stock"], team="Front", location="Downtown",
                  availability=ALL_WEEK, employment_type=EmploymentType.FULL_TIME, max_hours_per_week=40),
        Employees(name="Ellie Employee", email="ellie@shiftguard.dev", role=Role.EMPLOYEE,
                  skills=["tills"], team="Front", location="Downtown",
                  availability=ALL_WEEK, employment_type=EmploymentType.PART_TIME, max_hours_per_week=24),
        # Downtown / Warehouse
        Employees(name="Nick Nights", email="nick@shiftguard.dev", role=Role.EMPLOYEE,
                  skills=["stock", "forklift"], team="Warehouse", location="Downtown",
                  availability=ALL_WEEK, employment_type=EmploymentType.FULL_TIME, max_hours_per_week=40),
        # Uptown / Front of house
        Employees(name="Uma Uptown", email="uma@shiftguard.dev", role=Role.EMPLOYEE,
                  skills=["tills"], team="Front", location="Uptown",
                  availability=WEEKDAY_HOURS, employment_type=EmploymentType.PART_TIME, max_hours_per_week=20),
        # Left the business; still referenced by last week's shifts
        Employees(name="Fred Former", email="fred@shiftguard.dev", role=Role.EMPLOYEE,
                  skills=["tills"], team="Front", location="Uptown",
                  availability=WEEKDAY_HOURS, employment_type=EmploymentType.TEMPORARY, max_hours_per_week=16,
                  is_active=False),
    ]

    db.add_all(employees)
    db.commit()
    print(f"Seeded {len(employees)} employees.")
    return {e.email.split("@")[0]: e.id for e in employees}


def seed_shifts(db, ids):
    """Seed this week and last week, including a double-booking and unassigned gaps."""
    print("Seeding shifts...")

    monday = get_current_week_monday()
    shifts = []

    def add(day, start, end, employee_id, role, location="Downtown", team="Front",
            skills=("tills",), status=ShiftStatus.SCHEDULED, hourly_rate=12.5):
        shifts.append(Shifts(
            date=day,
            start_time=start,
            end_time=end,
            role_requirement=role,
            skill_requirements=list(skills),
            assigned_employee_id=employee_id,
            location=location,
            team=team,
            status=status,
            hourly_rate=hourly_rate,
        ))

    for day_offset in range(7):
        day = monday + timedelta(days=day_offset)

        # Opening shift - manager on weekdays, supervisor at weekends
        if day_offset < 5:
            add(day, "07:00", "15:00", ids["maria"], Role.MANAGER, skills=("keyholder",), hourly_rate=18)
        else:
            add(day, "07:00", "15:00", ids["sam"], Role.SUPERVISOR, hourly_rate=15)

        # Closing shift - part-timer Mon/Wed/Fri, otherwise left open
        add(day, "15:00", "22:00", ids["ellie"] if day_offset in (0, 2, 4) else None, Role.EMPLOYEE)

        # Warehouse nights
        if day_offset < 6:
            add(day, "22:00", "06:00", ids["nick"], Role.EMPLOYEE, team="Warehouse", skills=("stock",), hourly_rate=14)

        # Uptown weekday cover
        if day_offset < 5:
            add(day, "10:00", "16:00", ids["uma"], Role.EMPLOYEE, location="Uptown")

    # Supervisor double-booked on Tuesday
    add(monday + timedelta(days=1), "09:00", "17:00", ids["sam"], Role.SUPERVISOR, skills=("stock",))
    add(monday + timedelta(days=1), "16:00", "20:00", ids["sam"], Role.SUPERVISOR, skills=("stock",))

    # Last week, completed, including the former employee
    last_monday = monday - timedelta(days=7)
    for day_offset in range(5):
        day = last_monday + timedelta(days=day_offset)
        add(day, "10:00", "16:00", ids["fred"], Role.EMPLOYEE, location="Uptown", status=ShiftStatus.COMPLETED)
        add(day, "07:00", "15:00", ids["maria"], Role.MANAGER, skills=("keyholder",), status=ShiftStatus.COMPLETED)

    db.add_all(shifts)
    db.commit()
    print(f"Seeded {len(shifts)} shifts.")


def seed_time_off_requests(db, ids):
    """Seed approved, pending and half-day requests."""
    print("Seeding time off requests...")

    monday = get_current_week_monday()
    requests = [
        # Approved leave that still clashes with a scheduled shift (shows up in the conflict report)
        TimeOffRequests(employee_id=ids["uma"], start_date=monday + timedelta(days=3), end_date=monday + timedelta(days=4),
                        status=LeaveStatus.APPROVED, request_type=LeaveType.VACATION,
                        reason="Long weekend away booked in spring"),
        TimeOffRequests(employee_id=ids["ellie"], start_date=monday + timedelta(days=14), end_date=monday + timedelta(days=18),
                        status=LeaveStatus.PENDING, request_type=LeaveType.VACATION,
                        reason="Summer holiday with family"),
        TimeOffRequests(employee_id=ids["nick"], start_date=monday + timedelta(days=10), end_date=monday + timedelta(days=10),
                        status=LeaveStatus.APPROVED, request_type=LeaveType.PERSONAL,
                        reason="Dentist appointment in the morning",
                        is_half_day=True, half_day_type=HalfDayType.MORNING),
    ]

    db.add_all(requests)
    db.commit()
    print(f"Seeded {len(requests)} time off requests.")


def main():
    """Main seed function."""
    print("\n" + "="*50)
    print("ShiftGuard Database Seeder")
    print("="*50 + "\n")

    # Confirmation prompt
    response = input("This will DELETE ALL EXISTING DATA. Continue? (yes/no): ")
    if response.lower() != "yes":
        print("Aborted.")
        sys.exit(0)

    reset_tables()
    db = SessionLocal()

    try:
        # Seed in dependency order
        ids = seed_employees(db)
        seed_shifts(db, ids)
        seed_time_off_requests(db, ids)

        print("\n" + "="*50)
        print("Seeding complete!")
        print("="*50)
        print(f"\nTry: GET /api/v1/analytics/conflicts?start_date={get_current_week_monday()}"
              f"&end_date={get_current_week_monday() + timedelta(days=6)}")
        print("="*50 + "\n")

    except Exception as e:
        db.rollback()
        print(f"\nError during seeding: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
