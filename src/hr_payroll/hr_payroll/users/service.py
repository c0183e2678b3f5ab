from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import (
    require_enum,
    require_min_length,
    require_non_empty,
    require_non_negative_number,
)
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import EmployeeStatus, NotificationType, Role
from ..core.exceptions import AuthenticationError, ConflictError, InvalidStateError, NotFoundError
from ..database.errors import DuplicateKeyError
from ..departments.model import Department
from ..departments.repository import DepartmentRepository
from ..notifications.service import NotificationService
from .model import Employee
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    full_name: str
    email: str
    role: Role
    employee_status: EmployeeStatus


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user or user.employee_status == EmployeeStatus.TERMINATED:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        return SessionUser(
            user_id=user.user_id,
            full_name=user.full_name,
            email=user.email,
            role=user.role,
            employee_status=user.employee_status,
        )


class UserService:
    """Use case: manage employees (admin) and serve the employee directory."""

    def __init__(
        self,
        users: UserRepository,
        notifications: NotificationService,
        *,
        departments: Optional[DepartmentRepository] = None,
    ):
        self._users = users
        self._notifications = notifications
        self._departments = departments

    def _resolve_department(self, name: Any) -> Optional[Department]:
        if name is None or not str(name).strip():
            return None
        department = self._departments.get_by_name(str(name).strip()) if self._departments else None
        if not department:
            raise NotFoundError("Department not found")
        return department

    def register_employee(
        self,
        *,
        actor_id: int,
        full_name: Any,
        email: Any,
        password: Any,
        position: Any,
        phone_number: Any,
        basic_salary: Any,
        employee_status: Any = EmployeeStatus.ACTIVE.value,
        role: Any = Role.EMPLOYEE.value,
        department_name: Any = None,
    ) -> Employee:
        full_name = require_non_empty(full_name, "Full name")
        email = require_non_empty(email, "Email").lower()
        position = require_non_empty(position, "Position")
        phone_number = require_non_empty(phone_number, "Phone number")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        salary = require_non_negative_number(basic_salary, "Basic salary")
        status = require_enum(EmployeeStatus, employee_status, "employee status")
        role_value = require_enum(Role, role, "role")
        department = self._resolve_department(department_name)

        if self._users.get_by_email(email):
            raise ConflictError("Email is already taken")

        try:
            user_id = self._users.create_user(
                full_name=full_name,
                email=email,
                password_hash=generate_password_hash(password),
                role=role_value,
                employee_status=status,
                position=position,
                phone_number=phone_number,
                basic_salary=salary,
                department_id=department.dept_id if department else None,
            )
        except DuplicateKeyError:
            raise ConflictError("Email is already taken")

        logger.info("User %s registered employee %s (%s)", actor_id, user_id, email)
        self._notifications.notify(
            recipient_id=user_id,
            sender_id=int(actor_id),
            title="Welcome aboard",
            message=(
                f"Hi {full_name}, your account has been set up in {department.name}."
                if department
                else f"Hi {full_name}, your account has been set up."
            ),
            type=NotificationType.SYSTEM,
        )
        return self.get_employee(user_id)

    def list_employees(self) -> Sequence[Employee]:
        return self._users.list_all()

    def get_employee(self, user_id: int) -> Employee:
        employee = self._users.get_by_id(int(user_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def update_employee(self, *, actor_id: int, user_id: int, changes: dict) -> Employee:
        employee = self.get_employee(user_id)
        updated = employee

        if "full_name" in changes:
            updated = replace(updated, full_name=require_non_empty(changes["full_name"], "Full name"))
        if "position" in changes:
            updated = replace(updated, position=require_non_empty(changes["position"], "Position"))
        if "phone_number" in changes:
            updated = replace(updated, phone_number=require_non_empty(changes["phone_number"], "Phone number"))
        if "basic_salary" in changes:
            updated = replace(
                updated, basic_salary=require_non_negative_number(changes["basic_salary"], "Basic salary")
            )
        if "employee_status" in changes:
            updated = replace(
                updated,
                employee_status=require_enum(EmployeeStatus, changes["employee_status"], "employee status"),
            )
        if "department_name" in changes:
            department = self._resolve_department(changes["department_name"])
            updated = replace(
                updated,
                department_id=department.dept_id if department else None,
                department_name=department.name if department else None,
            )
        if "email" in changes:
            email = require_non_empty(changes["email"], "Email").lower()
            other = self._users.get_by_email(email)
            if other and other.user_id != employee.user_id:
                raise ConflictError("Email is already taken")
            updated = replace(updated, email=email)

        try:
            self._users.update_user(updated)
        except DuplicateKeyError:
            raise ConflictError("Email is already taken")

        self._notifications.notify(
            recipient_id=employee.user_id,
            sender_id=int(actor_id),
            title="Profile Updated",
            message="Your profile information has been updated by an administrator.",
            type=NotificationType.SYSTEM,
        )
        return updated

    def delete_employee(self, *, actor_id: int, user_id: int) -> Employee:
        employee = self.get_employee(user_id)
        if employee.role == Role.ADMIN:
            raise InvalidStateError("Cannot delete an admin account")
        if not self._users.delete_by_id(employee.user_id):
            raise NotFoundError("Employee not found")
        logger.info("User %s deleted employee %s", actor_id, employee.user_id)
        return employee
