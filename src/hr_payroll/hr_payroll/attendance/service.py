from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.validators import require_enum
from ..core.enums import AttendanceStatus, NotificationType
from ..core.exceptions import ConflictError, InvalidStateError, NotFoundError, ValidationError
from ..database.errors import DuplicateKeyError
from ..notifications.service import NotificationService
from .hours import prepare_for_save
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _fmt_time(value: Optional[datetime]) -> str:
    return value.strftime("%H:%M:%S") if value else "N/A"


def _fmt_hours(value: float) -> str:
    return f"{value:g}"


class AttendanceService:
    """Daily clock-in / clock-out lifecycle.

    One record per employee per day; the day is taken from the server clock
    (`now`), not from the submitted clock-in time.
    """

    def __init__(self, attendance: AttendanceRepository, notifications: NotificationService):
        self._attendance = attendance
        self._notifications = notifications

    def clock_in(
        self,
        user_id: int,
        *,
        status: Any,
        clock_in_time: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or datetime.now()
        today = now.date()

        status = require_enum(AttendanceStatus, status)
        if status != AttendanceStatus.ABSENT and clock_in_time is None:
            raise ValidationError("Clock in time is required for Present/Late status")

        if self._attendance.get_for_user_and_date(user_id, today):
            raise ConflictError("Already clocked in today")

        record = prepare_for_save(
            AttendanceRecord(
                attendance_id=None,
                user_id=user_id,
                work_date=today,
                status=status,
                clock_in=clock_in_time if status != AttendanceStatus.ABSENT else None,
            )
        )
        try:
            attendance_id = self._attendance.create(record)
        except DuplicateKeyError:
            raise ConflictError("Already clocked in today")

        record = replace(record, attendance_id=attendance_id)
        logger.info("User %s clocked in as %s for %s", user_id, status.value, today)

        self._notifications.notify(
            recipient_id=user_id,
            title="Clock In Recorded",
            message=f'You have clocked in as "{status.value}" at {_fmt_time(record.clock_in)}.',
            type=NotificationType.ATTENDANCE,
        )
        return record

    def clock_out(
        self,
        user_id: int,
        *,
        clock_out_time: Optional[datetime],
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or datetime.now()
        today = now.date()

        if clock_out_time is None:
            raise ValidationError("Clock out time is required")

        record = self._attendance.get_for_user_and_date(user_id, today)
        if not record:
            raise NotFoundError("No clock-in record found for today")
        if record.status == AttendanceStatus.ABSENT:
            raise InvalidStateError("Cannot clock out when marked as absent")
        if record.clock_out is not None:
            raise ConflictError("Already clocked out today")

        record = prepare_for_save(replace(record, clock_out=clock_out_time))
        self._attendance.update_clock_out(record)
        logger.info("User %s clocked out for %s (%.2fh)", user_id, today, record.hours.total_hours)

        self._notifications.notify(
            recipient_id=user_id,
            title="Clock Out Recorded",
            message=(
                f"You have clocked out at {_fmt_time(record.clock_out)}. "
                f"Total hours: {_fmt_hours(record.hours.total_hours)}h "
                f"(Regular: {_fmt_hours(record.hours.regular_hours)}h, "
                f"Overtime: {_fmt_hours(record.hours.overtime_hours)}h)."
            ),
            type=NotificationType.ATTENDANCE,
        )
        return record

    def legacy_mark(
        self,
        user_id: int,
        *,
        status: Any,
        clock_in_time: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Create or replace today's record (older clients post here)."""
        now = now or datetime.now()
        today = now.date()

        status = require_enum(AttendanceStatus, status)
        existing = self._attendance.get_for_user_and_date(user_id, today)

        if existing:
            record = replace(existing, status=status)
            if status != AttendanceStatus.ABSENT and clock_in_time is not None:
                record = replace(record, clock_in=clock_in_time)
        else:
            record = AttendanceRecord(
                attendance_id=None,
                user_id=user_id,
                work_date=today,
                status=status,
                clock_in=clock_in_time if status != AttendanceStatus.ABSENT else None,
            )

        record = prepare_for_save(record)
        try:
            attendance_id = self._attendance.upsert(record)
        except DuplicateKeyError:
            raise ConflictError("Attendance already recorded")

        record = replace(record, attendance_id=attendance_id)
        logger.info("User %s marked %s for %s", user_id, status.value, today)

        self._notifications.notify(
            recipient_id=user_id,
            title="Attendance Recorded",
            message=f'Your attendance for {today.strftime("%a %b %d %Y")} has been marked as "{status.value}".',
            type=NotificationType.ATTENDANCE,
        )
        return record

    def get_today(self, user_id: int, *, now: Optional[datetime] = None) -> Optional[AttendanceRecord]:
        now = now or datetime.now()
        return self._attendance.get_for_user_and_date(user_id, now.date())

    def list_for_user(self, user_id: int, *, limit: Optional[int] = None) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_user(user_id, limit)

    def list_all(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        if (start is None) != (end is None):
            start = end = None
        if start and end and start > end:
            raise ValidationError("startDate must not be after endDate")
        return self._attendance.get_report_rows(start_date=start, end_date=end, user_id=user_id)

    def export_rows(self, *, start: Optional[date] = None, end: Optional[date] = None) -> list[dict]:
        rows = self.list_all(start=start, end=end)
        return [
            {
                "employee": r.full_name,
                "email": r.email,
                "date": r.record.work_date.strftime("%Y-%m-%d"),
                "status": r.record.status.value,
                "clock_in": _fmt_time(r.record.clock_in),
                "clock_out": _fmt_time(r.record.clock_out),
                "total_hours": r.record.hours.total_hours,
                "regular_hours": r.record.hours.regular_hours,
                "overtime_hours": r.record.hours.overtime_hours,
            }
            for r in rows
        ]
