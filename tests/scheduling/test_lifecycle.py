import pytest
from datetime import timedelta

from shiftguard.services.scheduling.types import LeaveStatus, ShiftStatus
from shiftguard.services.scheduling.lifecycle import (
    LifecycleError,
    ensure_leave_editable,
    ensure_leave_transition,
    ensure_shift_assignable,
    ensure_shift_deletable,
    ensure_shift_transition,
)

from conftest import get_test_monday, make_leave


class TestShiftTransitions:
    @pytest.mark.parametrize("current,new", [
        (ShiftStatus.SCHEDULED, ShiftStatus.IN_PROGRESS),
        (ShiftStatus.SCHEDULED, ShiftStatus.CANCELLED),
        (ShiftStatus.IN_PROGRESS, ShiftStatus.COMPLETED),
        (ShiftStatus.COMPLETED, ShiftStatus.COMPLETED),
    ])
    def test_allowed(self, current, new):
        ensure_shift_transition(current, new)

    @pytest.mark.parametrize("current,new", [
        (ShiftStatus.COMPLETED, ShiftStatus.SCHEDULED),
        (ShiftStatus.CANCELLED, ShiftStatus.SCHEDULED),
        (ShiftStatus.SCHEDULED, ShiftStatus.COMPLETED),
    ])
    def test_rejected(self, current, new):
        with pytest.raises(LifecycleError) as exc:
            ensure_shift_transition(current, new)
        assert exc.value.code == "INVALID_STATUS_TRANSITION"

    def test_only_scheduled_shifts_are_assignable(self):
        ensure_shift_assignable(ShiftStatus.SCHEDULED)
        with pytest.raises(LifecycleError) as exc:
            ensure_shift_assignable(ShiftStatus.IN_PROGRESS)
        assert exc.value.code == "SHIFT_NOT_SCHEDULED"

    def test_delete(self):
        ensure_shift_deletable(ShiftStatus.SCHEDULED)
        ensure_shift_deletable(ShiftStatus.CANCELLED)
        for status in (ShiftStatus.IN_PROGRESS, ShiftStatus.COMPLETED):
            with pytest.raises(LifecycleError) as exc:
                ensure_shift_deletable(status)
            assert exc.value.code == "SHIFT_CANNOT_DELETE"


class TestLeaveTransitions:
    def test_pending_can_be_approved_rejected_or_cancelled(self):
        today = get_test_monday()
        leave = make_leave(1, 1, today, today, status=LeaveStatus.PENDING)
        for new in (LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.CANCELLED):
            ensure_leave_transition(leave, new, today)

    def test_approved_cannot_be_approved_again(self):
        today = get_test_monday()
        leave = make_leave(1, 1, today + timedelta(days=3), today + timedelta(days=4))
        with pytest.raises(LifecycleError) as exc:
            ensure_leave_transition(leave, LeaveStatus.APPROVED, today)
        assert exc.value.code == "INVALID_STATUS_TRANSITION"

    def test_approved_cancel_before_start(self):
        today = get_test_monday()
        leave = make_leave(1, 1, today + timedelta(days=1), today + timedelta(days=2))
        ensure_leave_transition(leave, LeaveStatus.CANCELLED, today)

    def test_approved_cancel_once_started(self):
        today = get_test_monday()
        leave = make_leave(1, 1, today, today + timedelta(days=2))
        with pytest.raises(LifecycleError) as exc:
            ensure_leave_transition(leave, LeaveStatus.CANCELLED, today)
        assert exc.value.code == "CANNOT_CANCEL_STARTED"

    def test_rejected_is_final(self):
        today = get_test_monday()
        leave = make_leave(1, 1, today, today, status=LeaveStatus.REJECTED)
        with pytest.raises(LifecycleError):
            ensure_leave_transition(leave, LeaveStatus.CANCELLED, today)

    def test_only_pending_is_editable(self):
        ensure_leave_editable(LeaveStatus.PENDING)
        for status in (LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.CANCELLED):
            with pytest.raises(LifecycleError) as exc:
                ensure_leave_editable(status)
            assert exc.value.code == "CANNOT_UPDATE_APPROVED"
