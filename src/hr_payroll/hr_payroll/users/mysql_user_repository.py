from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import EmployeeStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import Employee
from .repository import UserRepository

_SELECT = """
    SELECT u.user_id, u.full_name, u.email, u.password_hash, u.role, u.employee_status,
           u.position, u.phone_number, u.basic_salary, u.dept_id, u.created_at,
           d.name AS department_name
    FROM users u
    LEFT JOIN departments d ON d.dept_id = u.dept_id
"""


def _to_employee(row: Dict[str, Any]) -> Employee:
    return Employee(
        user_id=int(row["user_id"]),
        full_name=row["full_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        employee_status=EmployeeStatus(row["employee_status"]),
        position=row["position"],
        phone_number=row["phone_number"],
        basic_salary=as_float(row.get("basic_salary")),
        department_id=int(row["dept_id"]) if row.get("dept_id") is not None else None,
        department_name=row.get("department_name"),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE u.user_id=%s", (user_id,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE u.email=%s", (email,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY u.user_id ASC")
            return [_to_employee(r) for r in fetchall(cur)]

    def create_user(
        self,
        *,
        full_name: str,
        email: str,
        password_hash: str,
        role: Role,
        employee_status: EmployeeStatus,
        position: str,
        phone_number: str,
        basic_salary: float,
        department_id: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(full_name, email, password_hash, role, employee_status,
                                  position, phone_number, basic_salary, dept_id)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    full_name,
                    email,
                    password_hash,
                    role.value,
                    employee_status.value,
                    position,
                    phone_number,
                    basic_salary,
                    department_id,
                ),
            )
            return int(cur.lastrowid)

    def update_user(self, employee: Employee) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET full_name=%s, email=%s, employee_status=%s, position=%s,
                    phone_number=%s, basic_salary=%s, dept_id=%s
                WHERE user_id=%s
                """,
                (
                    employee.full_name,
                    employee.email,
                    employee.employee_status.value,
                    employee.position,
                    employee.phone_number,
                    employee.basic_salary,
                    employee.department_id,
                    employee.user_id,
                ),
            )
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (user_id,))
            return cur.rowcount > 0

    def set_status(self, user_id: int, status: EmployeeStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET employee_status=%s WHERE user_id=%s", (status.value, user_id))
            return cur.rowcount > 0

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM users")
            return int(fetchone(cur)["n"])

    def count_created_between(self, start: datetime, end: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM users WHERE created_at >= %s AND created_at < %s", (start, end))
            return int(fetchone(cur)["n"])

    def count_by_status(self, status: EmployeeStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM users WHERE employee_status=%s", (status.value,))
            return int(fetchone(cur)["n"])

    def list_admin_ids(self) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id FROM users WHERE role=%s ORDER BY user_id ASC", (Role.ADMIN.value,))
            return [int(r["user_id"]) for r in fetchall(cur)]
