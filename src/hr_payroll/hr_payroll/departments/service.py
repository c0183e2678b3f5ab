from __future__ import annotations

import logging
from typing import Any, Sequence

from ..common.validators import require_non_empty
from ..core.enums import NotificationType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..database.errors import DuplicateKeyError
from ..notifications.service import NotificationService
from .model import Department
from .repository import DepartmentRepository

logger = logging.getLogger(__name__)


class DepartmentService:
    def __init__(self, departments: DepartmentRepository, notifications: NotificationService):
        self._departments = departments
        self._notifications = notifications

    def list_departments(self) -> Sequence[Department]:
        return self._departments.list_all()

    def create(self, *, actor_id: int, name: Any, description: Any) -> Department:
        try:
            name = require_non_empty(name, "Name")
            description = require_non_empty(description, "Description")
        except ValidationError:
            raise ValidationError("All fields are required")

        if self._departments.get_by_name(name):
            raise ConflictError("Department already exists")
        try:
            dept_id = self._departments.create(name=name, description=description)
        except DuplicateKeyError:
            raise ConflictError("Department already exists")

        logger.info("User %s created department %s (%s)", actor_id, dept_id, name)
        self._notifications.notify(
            recipient_id=int(actor_id),
            title="Department Created",
            message=f'Department "{name}" was created successfully.',
            type=NotificationType.SYSTEM,
        )
        return Department(dept_id=dept_id, name=name, description=description)

    def delete(self, *, actor_id: int, dept_id: int) -> Department:
        department = self._departments.get_by_id(int(dept_id))
        if not department:
            raise NotFoundError("Department not found")

        self._departments.delete_by_id(department.dept_id)
        logger.info(
            "User %s deleted department %s, %d employees unassigned",
            actor_id,
            department.dept_id,
            department.employee_count,
        )
        self._notifications.notify(
            recipient_id=int(actor_id),
            title="Department Deleted",
            message=f'Department "{department.name}" was deleted.',
            type=NotificationType.SYSTEM,
        )
        return department
