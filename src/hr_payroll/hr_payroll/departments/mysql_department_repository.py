from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Department
from .repository import DepartmentRepository

_SELECT = """
    SELECT d.dept_id, d.name, d.description, d.created_at, COUNT(u.user_id) AS employee_count
    FROM departments d
    LEFT JOIN users u ON u.dept_id = d.dept_id
"""
_GROUP = " GROUP BY d.dept_id, d.name, d.description, d.created_at"


def _to_department(r: Dict[str, Any]) -> Department:
    return Department(
        dept_id=int(r["dept_id"]),
        name=r["name"],
        description=r.get("description") or "",
        employee_count=int(r.get("employee_count") or 0),
        created_at=r.get("created_at"),
    )


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, dept_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE d.dept_id=%s" + _GROUP, (dept_id,))
            row = fetchone(cur)
            return _to_department(row) if row else None

    def get_by_name(self, name: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE d.name=%s" + _GROUP, (name,))
            row = fetchone(cur)
            return _to_department(row) if row else None

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + _GROUP + " ORDER BY d.name ASC")
            return [_to_department(r) for r in fetchall(cur)]

    def create(self, *, name: str, description: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO departments(name, description) VALUES(%s,%s)", (name, description))
            return int(cur.lastrowid)

    def delete_by_id(self, dept_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET dept_id=NULL WHERE dept_id=%s", (dept_id,))
            cur.execute("DELETE FROM departments WHERE dept_id=%s", (dept_id,))
            return cur.rowcount > 0

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM departments")
            return int(fetchone(cur)["n"])
