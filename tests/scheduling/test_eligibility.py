from datetime import date, timedelta

from shiftguard.services.scheduling.types import DayAvailability, Role, ShiftStatus
from shiftguard.services.scheduling.eligibility import VerdictReason, validate_assignment

from conftest import all_week, get_test_monday, make_employee, make_leave, make_shift


class TestValidateAssignment:
    def test_eligible(self, basic_employee):
        shift = make_shift(None, get_test_monday(), employee_id=1)
        verdict = validate_assignment(shift, basic_employee, [], [])
        assert verdict.eligible
        assert verdict.reason == VerdictReason.ELIGIBLE

    def test_missing_employee(self):
        shift = make_shift(None, get_test_monday(), employee_id=99)
        verdict = validate_assignment(shift, None, [], [])
        assert verdict.reason == VerdictReason.EMPLOYEE_NOT_FOUND

    def test_inactive_employee(self):
        employee = make_employee(1, is_active=False)
        shift = make_shift(None, get_test_monday(), employee_id=1)
        assert validate_assignment(shift, employee, [], []).reason == VerdictReason.EMPLOYEE_INACTIVE

    def test_unavailable_weekday_without_any_conflict(self, basic_employee):
        basic_employee.availability["monday"] = DayAvailability(available=False)
        shift = make_shift(None, get_test_monday(), employee_id=1)
        verdict = validate_assignment(shift, basic_employee, [], [])
        assert verdict.reason == VerdictReason.EMPLOYEE_UNAVAILABLE_ON_DAY

    def test_empty_skill_requirement_is_eligible(self):
        employee = make_employee(1, skills=())
        shift = make_shift(None, get_test_monday(), employee_id=1, skills=())
        assert validate_assignment(shift, employee, [], []).eligible

    def test_one_matching_skill_is_sufficient(self, basic_employee):
        shift = make_shift(None, get_test_monday(), employee_id=1, skills=("A", "B"))
        assert validate_assignment(shift, basic_employee, [], []).eligible

    def test_insufficient_skills_when_none_match(self, basic_employee):
        shift = make_shift(None, get_test_monday(), employee_id=1, skills=("B", "C"))
        verdict = validate_assignment(shift, basic_employee, [], [])
        assert verdict.reason == VerdictReason.INSUFFICIENT_SKILLS

    def test_role_ignored_unless_enforced(self, basic_employee):
        shift = make_shift(None, get_test_monday(), employee_id=1, role=Role.MANAGER)
        assert validate_assignment(shift, basic_employee, [], []).eligible
        verdict = validate_assignment(shift, basic_employee, [], [], enforce_role=True)
        assert verdict.reason == VerdictReason.ROLE_MISMATCH

    def test_conflict_checked_before_availability(self, basic_employee):
        saturday = get_test_monday() + timedelta(days=5)
        existing = make_shift(5, saturday, employee_id=1)
        shift = make_shift(None, saturday, employee_id=1)
        verdict = validate_assignment(shift, basic_employee, [], [existing])
        assert verdict.reason == VerdictReason.CONFLICTING_SHIFTS

    def test_shift_excludes_itself(self, basic_employee):
        monday = get_test_monday()
        existing = make_shift(5, monday, employee_id=1)
        moved = make_shift(5, monday, "10:00", "18:00", employee_id=1)
        assert validate_assignment(moved, basic_employee, [], [existing]).eligible

    def test_completed_shift_does_not_conflict(self, basic_employee):
        monday = get_test_monday()
        done = make_shift(5, monday, employee_id=1, status=ShiftStatus.COMPLETED)
        shift = make_shift(None, monday, employee_id=1)
        assert validate_assignment(shift, basic_employee, [], [done]).eligible

    def test_cross_midnight_opt_in(self, basic_employee):
        monday = get_test_monday()
        night = make_shift(5, monday, "22:00", "06:00", employee_id=1)
        early = make_shift(None, monday + timedelta(days=1), "05:00", "09:00", employee_id=1)
        assert validate_assignment(early, basic_employee, [], [night]).eligible
        verdict = validate_assignment(early, basic_employee, [], [night], span_midnight=True)
        assert verdict.reason == VerdictReason.CONFLICTING_SHIFTS


class TestBackToBackScenario:
    def test_overlapping_request_rejected_with_conflict(self, basic_employee):
        s1 = make_shift(1, date(2024, 1, 15), "09:00", "17:00", employee_id=1)
        request = make_shift(None, date(2024, 1, 15), "16:00", "20:00", employee_id=1)

        verdict = validate_assignment(request, basic_employee, [], [s1])

        assert verdict.reason == VerdictReason.CONFLICTING_SHIFTS
        assert verdict.reason.value == "SHIFT_CONFLICT"
        assert verdict.conflicts == (s1,)

    def test_back_to_back_request_accepted(self, basic_employee):
        s1 = make_shift(1, date(2024, 1, 15), "09:00", "17:00", employee_id=1)
        request = make_shift(None, date(2024, 1, 15), "17:00", "20:00", employee_id=1)

        assert validate_assignment(request, basic_employee, [], [s1]).eligible


class TestLeaveScenario:
    def test_shift_inside_leave_rejected(self):
        employee = make_employee(1, availability=all_week())
        leave = make_leave(7, 1, date(2024, 2, 1), date(2024, 2, 5))
        request = make_shift(None, date(2024, 2, 3), employee_id=1)

        verdict = validate_assignment(request, employee, [leave], [])

        assert verdict.reason == VerdictReason.TIME_OFF_CONFLICT
        assert verdict.leave is leave

    def test_shift_after_leave_accepted(self):
        employee = make_employee(1, availability=all_week())
        leave = make_leave(7, 1, date(2024, 2, 1), date(2024, 2, 5))
        request = make_shift(None, date(2024, 2, 6), employee_id=1)

        assert validate_assignment(request, employee, [leave], []).eligible
