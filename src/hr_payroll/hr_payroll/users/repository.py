from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import EmployeeStatus, Role
from .model import Employee


class UserRepository(Protocol):
    """Repository interface for employees.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update_user(self, employee: Employee) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def set_status(self, user_id: int, status: EmployeeStatus) -> bool:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError

    def count_created_between(self, start: datetime, end: datetime) -> int:
        """Users whose account was created in [start, end)."""
        raise NotImplementedError

    def count_by_status(self, status: EmployeeStatus) -> int:
        raise NotImplementedError

    def list_admin_ids(self) -> Sequence[int]:
        raise NotImplementedError
