from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import AttendanceHours, AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

_COLUMNS = """
    ar.attendance_id, ar.user_id, ar.work_date, ar.status, ar.clock_in, ar.clock_out,
    ar.total_hours, ar.regular_hours, ar.overtime_hours, ar.is_clock_out_pending
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        clock_in=r.get("clock_in"),
        clock_out=r.get("clock_out"),
        hours=AttendanceHours(
            total_hours=as_float(r.get("total_hours")),
            regular_hours=as_float(r.get("regular_hours")),
            overtime_hours=as_float(r.get("overtime_hours")),
            is_clock_out_pending=bool(r.get("is_clock_out_pending")),
        ),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records ar
                WHERE ar.user_id=%s AND ar.work_date=%s
                """,
                (user_id, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_user(self, user_id: int, limit: Optional[int] = None) -> Sequence[AttendanceRecord]:
        sql = f"""
            SELECT {_COLUMNS}
            FROM attendance_records ar
            WHERE ar.user_id=%s
            ORDER BY ar.work_date DESC
        """
        params: list[object] = [user_id]
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_user_between(self, user_id: int, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records ar
                WHERE ar.user_id=%s AND ar.work_date BETWEEN %s AND %s
                ORDER BY ar.work_date ASC
                """,
                (user_id, start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create(self, record: AttendanceRecord) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    user_id, work_date, status, clock_in, clock_out,
                    total_hours, regular_hours, overtime_hours, is_clock_out_pending
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.user_id,
                    record.work_date,
                    record.status.value,
                    record.clock_in,
                    record.clock_out,
                    record.hours.total_hours,
                    record.hours.regular_hours,
                    record.hours.overtime_hours,
                    int(record.hours.is_clock_out_pending),
                ),
            )
            return int(cur.lastrowid)

    def update_clock_out(self, record: AttendanceRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET clock_out=%s, total_hours=%s, regular_hours=%s, overtime_hours=%s, is_clock_out_pending=%s
                WHERE attendance_id=%s
                """,
                (
                    record.clock_out,
                    record.hours.total_hours,
                    record.hours.regular_hours,
                    record.hours.overtime_hours,
                    int(record.hours.is_clock_out_pending),
                    int(record.attendance_id),
                ),
            )
            return cur.rowcount > 0

    def upsert(self, record: AttendanceRecord) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    user_id, work_date, status, clock_in, clock_out,
                    total_hours, regular_hours, overtime_hours, is_clock_out_pending
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    attendance_id=LAST_INSERT_ID(attendance_id),
                    status=VALUES(status),
                    clock_in=VALUES(clock_in),
                    clock_out=VALUES(clock_out),
                    total_hours=VALUES(total_hours),
                    regular_hours=VALUES(regular_hours),
                    overtime_hours=VALUES(overtime_hours),
                    is_clock_out_pending=VALUES(is_clock_out_pending)
                """,
                (
                    record.user_id,
                    record.work_date,
                    record.status.value,
                    record.clock_in,
                    record.clock_out,
                    record.hours.total_hours,
                    record.hours.regular_hours,
                    record.hours.overtime_hours,
                    int(record.hours.is_clock_out_pending),
                ),
            )
            return int(cur.lastrowid)

    def get_report_rows(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["1=1"]
        params: list[object] = []

        if start_date is not None and end_date is not None:
            clauses.append("ar.work_date BETWEEN %s AND %s")
            params.extend([start_date, end_date])
        if user_id is not None:
            clauses.append("ar.user_id=%s")
            params.append(int(user_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, u.full_name, u.email
                FROM attendance_records ar
                JOIN users u ON u.user_id = ar.user_id
                WHERE {where}
                ORDER BY ar.work_date DESC, u.user_id ASC
                """,
                tuple(params),
            )
            return [
                AttendanceReportRow(record=_to_record(r), full_name=r["full_name"], email=r["email"])
                for r in fetchall(cur)
            ]
