from datetime import timedelta

from shiftguard.services.scheduling.types import LeaveStatus, ShiftStatus
from shiftguard.services.scheduling.conflicts import (
    candidate_dates,
    check_leave_request,
    find_conflicts,
    scan_conflicts,
    scan_leave_conflicts,
)

from conftest import get_test_monday, make_leave, make_shift


class TestFindConflicts:
    def test_finds_overlapping_shift(self):
        monday = get_test_monday()
        existing = make_shift(1, monday, "09:00", "17:00", employee_id=1)
        assert find_conflicts(1, monday, "16:00", "20:00", [existing]) == [existing]

    def test_ignores_other_employees(self):
        monday = get_test_monday()
        existing = make_shift(1, monday, employee_id=2)
        assert find_conflicts(1, monday, "09:00", "17:00", [existing]) == []

    def test_ignores_excluded_id(self):
        monday = get_test_monday()
        existing = make_shift(1, monday, employee_id=1)
        assert find_conflicts(1, monday, "09:00", "17:00", [existing], exclude_id=1) == []

    def test_ignores_cancelled_and_completed(self):
        monday = get_test_monday()
        shifts = [
            make_shift(1, monday, employee_id=1, status=ShiftStatus.CANCELLED),
            make_shift(2, monday, employee_id=1, status=ShiftStatus.COMPLETED),
        ]
        assert find_conflicts(1, monday, "09:00", "17:00", shifts) == []

    def test_in_progress_shift_conflicts(self):
        monday = get_test_monday()
        existing = make_shift(1, monday, employee_id=1, status=ShiftStatus.IN_PROGRESS)
        assert find_conflicts(1, monday, "12:00", "13:00", [existing]) == [existing]

    def test_candidate_dates(self):
        monday = get_test_monday()
        assert candidate_dates(monday) == {monday}
        assert candidate_dates(monday, span_midnight=True) == {
            monday - timedelta(days=1), monday, monday + timedelta(days=1),
        }


class TestScanConflicts:
    def test_no_conflicts(self):
        monday = get_test_monday()
        shifts = [
            make_shift(1, monday, "06:00", "12:00", employee_id=1),
            make_shift(2, monday, "12:00", "18:00", employee_id=1),
        ]
        result = scan_conflicts(shifts)
        assert result.has_conflicts is False
        assert result.conflict_count == 0
        assert result.conflict_pairs == 0

    def test_mutual_pair_counts_twice(self):
        monday = get_test_monday()
        a = make_shift(1, monday, "09:00", "17:00", employee_id=1)
        b = make_shift(2, monday, "16:00", "20:00", employee_id=1)

        result = scan_conflicts([a, b])

        assert result.conflict_count == 2
        assert result.conflict_pairs == 1
        assert [c.shift for c in result.conflicts] == [a, b]
        assert result.conflict_hours == 12

    def test_three_way_overlap(self):
        monday = get_test_monday()
        shifts = [
            make_shift(1, monday, "09:00", "17:00", employee_id=1),
            make_shift(2, monday, "10:00", "12:00", employee_id=1),
            make_shift(3, monday, "14:00", "15:00", employee_id=1),
        ]
        result = scan_conflicts(shifts)
        assert [c.overlap_count for c in result.conflicts] == [2, 1, 1]
        assert result.conflict_count == 4
        assert result.conflict_pairs == 2

    def test_different_days_do_not_conflict(self):
        monday = get_test_monday()
        shifts = [
            make_shift(1, monday, "22:00", "06:00", employee_id=1),
            make_shift(2, monday + timedelta(days=1), "05:00", "09:00", employee_id=1),
        ]
        assert scan_conflicts(shifts).has_conflicts is False
        assert scan_conflicts(shifts, span_midnight=True).conflict_pairs == 1


class TestScanLeaveConflicts:
    def test_active_shift_inside_approved_leave(self):
        monday = get_test_monday()
        leave = make_leave(1, 1, monday, monday + timedelta(days=2))
        shift = make_shift(1, monday + timedelta(days=1), employee_id=1)

        conflicts = scan_leave_conflicts([leave], [shift])

        assert len(conflicts) == 1
        assert conflicts[0].leave is leave
        assert conflicts[0].shifts == [shift]

    def test_pending_leave_and_completed_shift_ignored(self):
        monday = get_test_monday()
        pending = make_leave(1, 1, monday, monday, status=LeaveStatus.PENDING)
        approved = make_leave(2, 1, monday, monday)
        done = make_shift(1, monday, employee_id=1, status=ShiftStatus.COMPLETED)
        assert scan_leave_conflicts([pending, approved], [done]) == []


class TestCheckLeaveRequest:
    def test_clean_request(self):
        monday = get_test_monday()
        result = check_leave_request(1, monday, monday + timedelta(days=1), [], [])
        assert result.ok

    def test_shift_inside_request(self):
        monday = get_test_monday()
        shift = make_shift(1, monday + timedelta(days=1), employee_id=1)
        result = check_leave_request(1, monday, monday + timedelta(days=2), [shift], [])
        assert result.shift_conflicts == [shift]
        assert not result.ok

    def test_overlapping_approved_leave(self):
        monday = get_test_monday()
        existing = make_leave(3, 1, monday + timedelta(days=2), monday + timedelta(days=4))
        result = check_leave_request(1, monday, monday + timedelta(days=2), [], [existing])
        assert result.leave_conflicts == [existing]

    def test_excluded_leave(self):
        monday = get_test_monday()
        existing = make_leave(3, 1, monday, monday)
        result = check_leave_request(1, monday, monday, [], [existing], exclude_leave_id=3)
        assert result.ok
