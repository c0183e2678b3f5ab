from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest, LeaveType
from .repository import LeaveRepository

_TYPE_SELECT = """
    SELECT leave_type_id, name, description, max_days, requires_approval, created_at
    FROM leave_types
"""

_REQUEST_SELECT = """
    SELECT r.leave_request_id, r.user_id, r.leave_type_id, r.start_date, r.end_date,
           r.number_of_days, r.status, r.approver_id, r.approved_date, r.created_at,
           t.name AS leave_type_name,
           u.full_name AS employee_name, u.email AS employee_email, u.position AS employee_position,
           d.name AS department_name,
           a.full_name AS approver_name
    FROM leave_requests r
    JOIN leave_types t ON t.leave_type_id = r.leave_type_id
    JOIN users u ON u.user_id = r.user_id
    LEFT JOIN departments d ON d.dept_id = u.dept_id
    LEFT JOIN users a ON a.user_id = r.approver_id
"""

_OPEN_STATUSES = (LeaveStatus.PENDING.value, LeaveStatus.APPROVED.value)


def _to_type(r: Dict[str, Any]) -> LeaveType:
    return LeaveType(
        leave_type_id=int(r["leave_type_id"]),
        name=r["name"],
        description=r.get("description") or "",
        max_days=int(r["max_days"]),
        requires_approval=bool(r.get("requires_approval")),
        created_at=r.get("created_at"),
    )


def _to_request(r: Dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        leave_request_id=int(r["leave_request_id"]),
        user_id=int(r["user_id"]),
        leave_type_id=int(r["leave_type_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        number_of_days=int(r["number_of_days"]),
        status=LeaveStatus(r["status"]),
        approver_id=int(r["approver_id"]) if r.get("approver_id") is not None else None,
        approved_date=r.get("approved_date"),
        created_at=r.get("created_at"),
        leave_type_name=r.get("leave_type_name"),
        employee_name=r.get("employee_name"),
        employee_email=r.get("employee_email"),
        employee_position=r.get("employee_position"),
        department_name=r.get("department_name"),
        approver_name=r.get("approver_name"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_types(self) -> Sequence[LeaveType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_TYPE_SELECT + " ORDER BY name ASC")
            return [_to_type(r) for r in fetchall(cur)]

    def get_type(self, leave_type_id: int) -> Optional[LeaveType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_TYPE_SELECT + " WHERE leave_type_id=%s", (leave_type_id,))
            row = fetchone(cur)
            return _to_type(row) if row else None

    def get_type_by_name(self, name: str) -> Optional[LeaveType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_TYPE_SELECT + " WHERE name=%s", (name,))
            row = fetchone(cur)
            return _to_type(row) if row else None

    def create_type(self, *, name: str, description: str, max_days: int, requires_approval: bool) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_types(name, description, max_days, requires_approval)
                VALUES(%s,%s,%s,%s)
                """,
                (name, description, max_days, int(requires_approval)),
            )
            return int(cur.lastrowid)

    def delete_type(self, leave_type_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_types WHERE leave_type_id=%s", (leave_type_id,))
            return cur.rowcount > 0

    def count_requests_for_type(self, leave_type_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM leave_requests WHERE leave_type_id=%s", (leave_type_id,))
            return int(fetchone(cur)["n"])

    def create_request(self, request: LeaveRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(user_id, leave_type_id, start_date, end_date, number_of_days,
                                           status, approver_id, approved_date)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    request.user_id,
                    request.leave_type_id,
                    request.start_date,
                    request.end_date,
                    request.number_of_days,
                    request.status.value,
                    request.approver_id,
                    request.approved_date,
                ),
            )
            return int(cur.lastrowid)

    def get_request(self, leave_request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_REQUEST_SELECT + " WHERE r.leave_request_id=%s", (leave_request_id,))
            row = fetchone(cur)
            return _to_request(row) if row else None

    def find_open_request(self, user_id: int, leave_type_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _REQUEST_SELECT
                + " WHERE r.user_id=%s AND r.leave_type_id=%s AND r.status IN (%s,%s)"
                + " ORDER BY r.created_at DESC LIMIT 1",
                (user_id, leave_type_id, *_OPEN_STATUSES),
            )
            row = fetchone(cur)
            return _to_request(row) if row else None

    def update_request_status(
        self,
        *,
        leave_request_id: int,
        status: LeaveStatus,
        approver_id: Optional[int],
        approved_date: Optional[datetime],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approver_id=%s, approved_date=%s
                WHERE leave_request_id=%s
                """,
                (status.value, approver_id, approved_date, leave_request_id),
            )
            return cur.rowcount > 0

    def list_for_user(self, user_id: int, *, limit: Optional[int] = None, offset: int = 0) -> Sequence[LeaveRequest]:
        sql = _REQUEST_SELECT + " WHERE r.user_id=%s ORDER BY r.created_at DESC, r.leave_request_id DESC"
        params: tuple = (user_id,)
        if limit:
            sql += " LIMIT %s OFFSET %s"
            params += (int(limit), int(offset))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_request(r) for r in fetchall(cur)]

    def count_for_user(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM leave_requests WHERE user_id=%s", (user_id,))
            return int(fetchone(cur)["n"])

    def list_all(self) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_REQUEST_SELECT + " ORDER BY r.created_at DESC, r.leave_request_id DESC")
            return [_to_request(r) for r in fetchall(cur)]

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM leave_requests")
            return int(fetchone(cur)["n"])

    def count_created_between(self, start: datetime, end: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM leave_requests WHERE created_at >= %s AND created_at < %s", (start, end)
            )
            return int(fetchone(cur)["n"])

    def count_approved_overlapping(self, start_date: date, end_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n FROM leave_requests
                WHERE status=%s AND start_date <= %s AND end_date >= %s
                """,
                (LeaveStatus.APPROVED.value, end_date, start_date),
            )
            return int(fetchone(cur)["n"])
