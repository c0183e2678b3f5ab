from datetime import date, datetime

import pytest

from src.hr_payroll.hr_payroll.attendance.hours import compute_hours, prepare_for_save, validate_record
from src.hr_payroll.hr_payroll.attendance.model import AttendanceHours, AttendanceRecord
from src.hr_payroll.hr_payroll.core.enums import AttendanceStatus
from src.hr_payroll.hr_payroll.core.exceptions import ValidationError

DAY = date(2026, 3, 2)


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 3, 2, hour, minute)


def test_full_day_splits_regular_and_overtime():
    hours = compute_hours(AttendanceStatus.PRESENT, at(8), at(18, 30))

    assert hours.total_hours == 10.5
    assert hours.regular_hours == 8
    assert hours.overtime_hours == 2.5
    assert hours.is_clock_out_pending is False


def test_only_total_is_rounded():
    hours = compute_hours(AttendanceStatus.LATE, at(9), at(9, 20))

    assert hours.total_hours == 0.33
    assert hours.regular_hours == pytest.approx(1 / 3)
    assert hours.regular_hours != 0.33
    assert hours.overtime_hours == 0


def test_exactly_eight_hours_has_no_overtime():
    hours = compute_hours(AttendanceStatus.PRESENT, at(8), at(16))
    assert (hours.total_hours, hours.regular_hours, hours.overtime_hours) == (8, 8, 0)


def test_absent_is_always_zero():
    hours = compute_hours(AttendanceStatus.ABSENT, at(8), at(18), AttendanceHours(total_hours=5))
    assert hours == AttendanceHours()


def test_clock_in_only_keeps_previous_hours_and_marks_pending():
    previous = AttendanceHours(total_hours=1.0, regular_hours=1.0)
    hours = compute_hours(AttendanceStatus.PRESENT, at(8), None, previous)

    assert hours.total_hours == 1.0
    assert hours.is_clock_out_pending is True


def test_clock_out_must_be_after_clock_in():
    record = AttendanceRecord(None, 1, DAY, AttendanceStatus.PRESENT, clock_in=at(9), clock_out=at(9))
    with pytest.raises(ValidationError):
        validate_record(record)


def test_present_requires_clock_in():
    record = AttendanceRecord(None, 1, DAY, AttendanceStatus.PRESENT)
    with pytest.raises(ValidationError):
        validate_record(record)


def test_prepare_for_save_clears_times_when_absent():
    record = AttendanceRecord(None, 1, DAY, AttendanceStatus.ABSENT, clock_in=at(8), clock_out=at(17))
    saved = prepare_for_save(record)

    assert saved.clock_in is None
    assert saved.clock_out is None
    assert saved.hours == AttendanceHours()


def test_prepare_for_save_is_stable_when_repeated():
    record = AttendanceRecord(None, 1, DAY, AttendanceStatus.PRESENT, clock_in=at(8), clock_out=at(17, 45))
    once = prepare_for_save(record)
    assert prepare_for_save(once) == once
