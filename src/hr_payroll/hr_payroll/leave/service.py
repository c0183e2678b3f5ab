from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Any, Optional, Sequence

from ..common.validators import require_non_empty, require_positive_int
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import EmployeeStatus, LeaveStatus, NotificationType
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from ..database.errors import DuplicateKeyError
from ..notifications.service import NotificationService
from ..users.model import Employee
from ..users.repository import UserRepository
from .model import LeaveRequest, LeaveType
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


def _day(value: date) -> str:
    return value.strftime("%a %b %d %Y")


@dataclass(frozen=True)
class LeaveToggleResult:
    """Outcome of an employee's apply/cancel toggle on one leave type."""

    action: str
    request: LeaveRequest

    @property
    def message(self) -> str:
        if self.action == "removed":
            return "Leave request removed"
        if self.request.status == LeaveStatus.APPROVED:
            return "Leave automatically approved"
        return "Leave request submitted for approval"


class LeaveService:
    """Leave types (admin), employee applications and the approval toggle."""

    def __init__(self, leaves: LeaveRepository, users: UserRepository, notifications: NotificationService):
        self._leaves = leaves
        self._users = users
        self._notifications = notifications

    def list_types(self) -> Sequence[LeaveType]:
        return self._leaves.list_types()

    def create_type(
        self,
        *,
        actor_id: int,
        name: Any,
        description: Any,
        max_days: Any,
        requires_approval: Any = True,
    ) -> LeaveType:
        if any(v is None or not str(v).strip() for v in (name, description, max_days)):
            raise ValidationError("All fields are required")
        name = require_non_empty(name, "Name")
        description = require_non_empty(description, "Description")
        days = require_positive_int(max_days, "Max days")
        if requires_approval is None:
            requires_approval = True
        if not isinstance(requires_approval, bool):
            raise ValidationError("requiresApproval must be true or false")

        if self._leaves.get_type_by_name(name):
            raise ConflictError("Leave type already exists")
        try:
            leave_type_id = self._leaves.create_type(
                name=name, description=description, max_days=days, requires_approval=requires_approval
            )
        except DuplicateKeyError:
            raise ConflictError("Leave type already exists")

        logger.info("User %s created leave type %s (%s, %d days)", actor_id, leave_type_id, name, days)
        self._notifications.notify(
            recipient_id=int(actor_id),
            title="Leave Type Created",
            message=f'Leave type "{name}" ({days} days) was created.',
            type=NotificationType.SYSTEM,
        )
        return LeaveType(
            leave_type_id=leave_type_id,
            name=name,
            description=description,
            max_days=days,
            requires_approval=requires_approval,
        )

    def delete_type(self, *, actor_id: int, leave_type_id: int) -> LeaveType:
        leave_type = self._leaves.get_type(int(leave_type_id))
        if not leave_type:
            raise NotFoundError("Leave type not found")
        if self._leaves.count_requests_for_type(leave_type.leave_type_id):
            raise InvalidStateError("Leave type is used by existing leave requests")

        self._leaves.delete_type(leave_type.leave_type_id)
        logger.info("User %s deleted leave type %s", actor_id, leave_type.leave_type_id)
        self._notifications.notify(
            recipient_id=int(actor_id),
            title="Leave Type Deleted",
            message=f'Leave type "{leave_type.name}" was deleted.',
            type=NotificationType.SYSTEM,
        )
        return leave_type

    def apply(self, *, user_id: int, leave_type_id: int, now: Optional[datetime] = None) -> LeaveToggleResult:
        """Toggle: cancel the open request for this type, or file a new one starting today."""
        now = now or datetime.now()
        user_id = int(user_id)

        existing = self._leaves.find_open_request(user_id, int(leave_type_id))
        if existing:
            return LeaveToggleResult(action="removed", request=self._cancel(existing))

        employee = self._users.get_by_id(user_id)
        if not employee:
            raise NotFoundError("Employee not found")
        if employee.employee_status != EmployeeStatus.ACTIVE:
            raise AuthorizationError("Not eligible for leave")

        leave_type = self._leaves.get_type(int(leave_type_id))
        if not leave_type:
            raise NotFoundError("Leave type not found")
        if leave_type.max_days < 1:
            raise ValidationError("Invalid leave configuration")

        start = now.date()
        auto_approved = not leave_type.requires_approval
        request = LeaveRequest(
            leave_request_id=None,
            user_id=user_id,
            leave_type_id=leave_type.leave_type_id,
            start_date=start,
            end_date=start + timedelta(days=leave_type.max_days - 1),
            number_of_days=leave_type.max_days,
            status=LeaveStatus.APPROVED if auto_approved else LeaveStatus.PENDING,
            approved_date=now if auto_approved else None,
            created_at=now,
            leave_type_name=leave_type.name,
            employee_name=employee.full_name,
            employee_email=employee.email,
            employee_position=employee.position,
            department_name=employee.department_name,
        )
        request = replace(request, leave_request_id=self._leaves.create_request(request))
        logger.info(
            "User %s applied for leave type %s (%s)", user_id, leave_type.leave_type_id, request.status.value
        )

        if auto_approved:
            self._users.set_status(user_id, EmployeeStatus.ON_LEAVE)
            self._notifications.notify(
                recipient_id=user_id,
                title="Leave Approved",
                message=(
                    f"Your {leave_type.max_days} day(s) of {leave_type.name} leave "
                    f"(from {_day(start)}) has been auto-approved."
                ),
                type=NotificationType.LEAVE,
            )
        else:
            self._notifications.notify(
                recipient_id=user_id,
                title="Leave Requested",
                message=(
                    f"Your request for {leave_type.max_days} day(s) of {leave_type.name} leave "
                    f"(from {_day(start)}) is pending approval."
                ),
                type=NotificationType.LEAVE,
            )
            self._notify_approvers(employee, leave_type)

        return LeaveToggleResult(action="created", request=request)

    def _cancel(self, request: LeaveRequest) -> LeaveRequest:
        self._leaves.update_request_status(
            leave_request_id=request.leave_request_id,
            status=LeaveStatus.CANCELLED,
            approver_id=request.approver_id,
            approved_date=request.approved_date,
        )
        if request.status == LeaveStatus.APPROVED:
            self._restore_active(request.user_id)

        logger.info("User %s cancelled leave request %s", request.user_id, request.leave_request_id)
        self._notifications.notify(
            recipient_id=request.user_id,
            title="Leave Cancelled",
            message=(
                f"Your {request.number_of_days}-day {request.leave_type_name} leave "
                f"starting {_day(request.start_date)} was cancelled."
            ),
            type=NotificationType.LEAVE,
        )
        return replace(request, status=LeaveStatus.CANCELLED)

    def _notify_approvers(self, employee: Employee, leave_type: LeaveType) -> None:
        for admin_id in self._users.list_admin_ids():
            if admin_id == employee.user_id:
                continue
            self._notifications.notify(
                recipient_id=admin_id,
                sender_id=employee.user_id,
                title="Leave Approval Needed",
                message=f"{employee.full_name} has requested {leave_type.max_days} day(s) of {leave_type.name} leave.",
                type=NotificationType.LEAVE,
            )

    def _restore_active(self, user_id: int) -> None:
        employee = self._users.get_by_id(user_id)
        if employee and employee.employee_status == EmployeeStatus.ON_LEAVE:
            self._users.set_status(user_id, EmployeeStatus.ACTIVE)

    def list_for_user(self, user_id: int) -> Sequence[LeaveRequest]:
        return self._leaves.list_for_user(int(user_id))

    def history(self, user_id: int, *, page: Any = None, limit: Any = None) -> dict:
        page = require_positive_int(page, "Page") if page is not None else 1
        limit = require_positive_int(limit, "Limit") if limit is not None else DEFAULT_PAGE_SIZE

        total = self._leaves.count_for_user(int(user_id))
        items = self._leaves.list_for_user(int(user_id), limit=limit, offset=(page - 1) * limit)
        total_pages = math.ceil(total / limit)
        return {
            "leaveRequests": [
                {
                    "id": r.leave_request_id,
                    "leaveType": r.leave_type_name,
                    "startDate": r.start_date.isoformat(),
                    "endDate": r.end_date.isoformat(),
                    "numberOfDays": r.number_of_days,
                    "status": r.status.value,
                    "approver": r.approver_name,
                    "approvedDate": r.approved_date.isoformat() if r.approved_date else None,
                    "createdAt": r.created_at.isoformat() if r.created_at else None,
                }
                for r in items
            ],
            "pagination": {
                "currentPage": page,
                "totalPages": total_pages,
                "totalRequests": total,
                "hasNext": page < total_pages,
                "hasPrev": page > 1,
            },
        }

    def list_all(self) -> Sequence[LeaveRequest]:
        return self._leaves.list_all()

    def toggle_decision(self, *, admin_id: int, leave_request_id: int, now: Optional[datetime] = None) -> LeaveRequest:
        """Approved -> Rejected, Pending/Rejected -> Approved."""
        now = now or datetime.now()
        request = self._leaves.get_request(int(leave_request_id))
        if not request:
            raise NotFoundError("Leave request not found")
        if request.status == LeaveStatus.CANCELLED:
            raise InvalidStateError("Cancelled leave requests cannot be reviewed")

        new_status = LeaveStatus.REJECTED if request.status == LeaveStatus.APPROVED else LeaveStatus.APPROVED
        approved_date = now if new_status == LeaveStatus.APPROVED else None
        self._leaves.update_request_status(
            leave_request_id=request.leave_request_id,
            status=new_status,
            approver_id=int(admin_id),
            approved_date=approved_date,
        )

        employee = self._users.get_by_id(request.user_id)
        if employee and employee.employee_status != EmployeeStatus.TERMINATED:
            target = EmployeeStatus.ON_LEAVE if new_status == LeaveStatus.APPROVED else EmployeeStatus.ACTIVE
            if employee.employee_status != target:
                self._users.set_status(employee.user_id, target)

        logger.info(
            "User %s set leave request %s %s -> %s",
            admin_id,
            request.leave_request_id,
            request.status.value,
            new_status.value,
        )
        self._notifications.notify(
            recipient_id=request.user_id,
            sender_id=int(admin_id),
            title=f"Leave {new_status.value}",
            message=f"Your leave request ({request.leave_type_name}) has been {new_status.value.lower()}.",
            type=NotificationType.LEAVE,
        )
        return replace(request, status=new_status, approver_id=int(admin_id), approved_date=approved_date)
