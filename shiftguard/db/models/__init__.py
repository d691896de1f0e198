from shiftguard.db.database import Base

# Import models
from shiftguard.db.models.employees import Employees
from shiftguard.db.models.shifts import Shifts
from shiftguard.db.models.time_off_requests import TimeOffRequests

__all__ = [
    "Base",
    # Models
    "Employees",
    "Shifts",
    "TimeOffRequests",
]
