from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import EmployeeStatus, Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee account.

    Note: Plain data object, no DB access here. `basic_salary` drives payroll.
    """

    user_id: int
    full_name: str
    email: str
    password_hash: str
    role: Role
    employee_status: EmployeeStatus
    position: str
    phone_number: str
    basic_salary: float
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "full_name": self.full_name,
            "email": self.email,
            "role": self.role.value,
            "employee_status": self.employee_status.value,
            "position": self.position,
            "phone_number": self.phone_number,
            "basic_salary": self.basic_salary,
            "department": (
                {"dept_id": self.department_id, "name": self.department_name} if self.department_id else None
            ),
        }
