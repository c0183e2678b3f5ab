from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceHours:
    """Derived hours for one day."""

    total_hours: float = 0.0
    regular_hours: float = 0.0
    overtime_hours: float = 0.0
    is_clock_out_pending: bool = False


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day.

    (user_id, work_date) is unique; work_date carries no time of day.
    """

    attendance_id: Optional[int]
    user_id: int
    work_date: date
    status: AttendanceStatus
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    hours: AttendanceHours = AttendanceHours()

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "user_id": self.user_id,
            "date": self.work_date.isoformat(),
            "status": self.status.value,
            "clock_in": self.clock_in.isoformat() if self.clock_in else None,
            "clock_out": self.clock_out.isoformat() if self.clock_out else None,
            "total_hours": self.hours.total_hours,
            "regular_hours": self.hours.regular_hours,
            "overtime_hours": self.hours.overtime_hours,
            "is_clock_out_pending": self.hours.is_clock_out_pending,
        }


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for admin listings and exports (record joined with employee)."""

    record: AttendanceRecord
    full_name: str
    email: str

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data["employee"] = {"user_id": self.record.user_id, "full_name": self.full_name, "email": self.email}
        return data
