from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class LeaveType:
    leave_type_id: int
    name: str
    description: str
    max_days: int
    requires_approval: bool = True
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "leave_type_id": self.leave_type_id,
            "name": self.name,
            "description": self.description,
            "max_days": self.max_days,
            "requires_approval": self.requires_approval,
        }


@dataclass(frozen=True)
class LeaveRequest:
    """One application for a leave type, covering start_date..end_date inclusive."""

    leave_request_id: Optional[int]
    user_id: int
    leave_type_id: int
    start_date: date
    end_date: date
    number_of_days: int
    status: LeaveStatus = LeaveStatus.PENDING
    approver_id: Optional[int] = None
    approved_date: Optional[datetime] = None
    created_at: Optional[datetime] = None

    # read-side joins
    leave_type_name: Optional[str] = None
    employee_name: Optional[str] = None
    employee_email: Optional[str] = None
    employee_position: Optional[str] = None
    department_name: Optional[str] = None
    approver_name: Optional[str] = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> dict:
        return {
            "leave_request_id": self.leave_request_id,
            "employee": {
                "user_id": self.user_id,
                "full_name": self.employee_name,
                "email": self.employee_email,
                "position": self.employee_position,
                "department": self.department_name,
            },
            "leave_type": {"leave_type_id": self.leave_type_id, "name": self.leave_type_name},
            "start_date": _iso(self.start_date),
            "end_date": _iso(self.end_date),
            "number_of_days": self.number_of_days,
            "status": self.status.value,
            "approver": {"user_id": self.approver_id, "full_name": self.approver_name} if self.approver_id else None,
            "approved_date": _iso(self.approved_date),
            "created_at": _iso(self.created_at),
        }
