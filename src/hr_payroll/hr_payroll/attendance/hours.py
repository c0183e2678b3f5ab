"""Daily hours computation for attendance records.

`prepare_for_save` is the single place where derived hours are refreshed; the
service calls it right before every insert or update.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..common.numbers import round_half_up
from ..core.constants import REGULAR_DAY_HOURS
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .model import AttendanceHours, AttendanceRecord

_SECONDS_PER_HOUR = 3600


def compute_hours(
    status: AttendanceStatus,
    clock_in: Optional[datetime],
    clock_out: Optional[datetime],
    current: Optional[AttendanceHours] = None,
) -> AttendanceHours:
    """Total/regular/overtime hours for a single day.

    Assumes clock_out > clock_in when both are given (see `validate_record`).
    Regular and overtime hours use the unrounded difference; only the total
    is rounded to two decimals.
    """
    if status == AttendanceStatus.ABSENT:
        return AttendanceHours()

    if clock_in is not None and clock_out is not None:
        diff_hours = (clock_out - clock_in).total_seconds() / _SECONDS_PER_HOUR
        return AttendanceHours(
            total_hours=round_half_up(diff_hours, 2),
            regular_hours=min(diff_hours, float(REGULAR_DAY_HOURS)),
            overtime_hours=max(0.0, diff_hours - REGULAR_DAY_HOURS),
            is_clock_out_pending=False,
        )

    previous = current or AttendanceHours()
    if clock_in is not None:
        return replace(previous, is_clock_out_pending=True)
    return replace(previous, is_clock_out_pending=False)


def validate_record(record: AttendanceRecord) -> None:
    if record.status == AttendanceStatus.ABSENT:
        return
    if record.clock_in is None:
        raise ValidationError("Clock in time is required for Present/Late status")
    if record.clock_out is not None and record.clock_out <= record.clock_in:
        raise ValidationError("Clock out time must be after clock in time")


def prepare_for_save(record: AttendanceRecord) -> AttendanceRecord:
    """Validate and return a copy with derived hours recomputed.

    Absent days never carry clock times.
    """
    if record.status == AttendanceStatus.ABSENT:
        record = replace(record, clock_in=None, clock_out=None)
    validate_record(record)
    hours = compute_hours(record.status, record.clock_in, record.clock_out, record.hours)
    return replace(record, hours=hours)
