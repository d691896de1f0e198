"""
Status lifecycle rules for shifts and leave requests.
"""

from datetime import date

from .types import LeaveRecord, LeaveStatus, ShiftStatus


SHIFT_TRANSITIONS: dict[ShiftStatus, frozenset[ShiftStatus]] = {
    ShiftStatus.SCHEDULED: frozenset({ShiftStatus.IN_PROGRESS, ShiftStatus.CANCELLED}),
    ShiftStatus.IN_PROGRESS: frozenset({ShiftStatus.COMPLETED}),
    ShiftStatus.COMPLETED: frozenset(),
    ShiftStatus.CANCELLED: frozenset(),
}

LEAVE_TRANSITIONS: dict[LeaveStatus, frozenset[LeaveStatus]] = {
    LeaveStatus.PENDING: frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.CANCELLED}),
    LeaveStatus.APPROVED: frozenset({LeaveStatus.CANCELLED}),
    LeaveStatus.REJECTED: frozenset(),
    LeaveStatus.CANCELLED: frozenset(),
}


class LifecycleError(Exception):
    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


def ensure_shift_transition(current: ShiftStatus, new: ShiftStatus) -> None:
    if current == new:
        return
    if new not in SHIFT_TRANSITIONS[current]:
        raise LifecycleError(
            "INVALID_STATUS_TRANSITION",
            f"Cannot move shift from {current.value} to {new.value}",
        )


def ensure_shift_assignable(status: ShiftStatus) -> None:
    if status != ShiftStatus.SCHEDULED:
        raise LifecycleError("SHIFT_NOT_SCHEDULED", "Can only assign scheduled shifts")


def ensure_shift_deletable(status: ShiftStatus) -> None:
    if status in (ShiftStatus.IN_PROGRESS, ShiftStatus.COMPLETED):
        raise LifecycleError(
            "SHIFT_CANNOT_DELETE",
            "Cannot delete shift that is in progress or completed",
        )


def ensure_leave_editable(status: LeaveStatus) -> None:
    if status != LeaveStatus.PENDING:
        raise LifecycleError("CANNOT_UPDATE_APPROVED", "Can only update pending time off requests")


def ensure_leave_transition(leave: LeaveRecord, new: LeaveStatus, today: date) -> None:
    """Approved leave may only be cancelled before it starts."""
    if new not in LEAVE_TRANSITIONS[leave.status]:
        raise LifecycleError(
            "INVALID_STATUS_TRANSITION",
            f"Cannot move time off request from {leave.status.value} to {new.value}",
        )
    if leave.status == LeaveStatus.APPROVED and leave.start_date <= today:
        raise LifecycleError(
            "CANNOT_CANCEL_STARTED",
            "Cannot cancel time off that has already started",
        )
