from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    """Storage for daily attendance.

    Implementations must enforce uniqueness of (user_id, work_date) and raise
    DuplicateKeyError when it is violated.
    """

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user(self, user_id: int, limit: Optional[int] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user_between(self, user_id: int, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create(self, record: AttendanceRecord) -> int:
        raise NotImplementedError

    def update_clock_out(self, record: AttendanceRecord) -> bool:
        """Persist clock_out and derived hours of an existing record."""

        raise NotImplementedError

    def upsert(self, record: AttendanceRecord) -> int:
        """Insert, or replace the row already stored for (user_id, work_date)."""

        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
