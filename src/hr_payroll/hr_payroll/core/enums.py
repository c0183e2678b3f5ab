from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for route protection."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class EmployeeStatus(str, Enum):
    ACTIVE = "Active"
    ON_LEAVE = "On Leave"
    TERMINATED = "Terminated"


class AttendanceStatus(str, Enum):
    """Daily attendance status as stored in the database."""

    PRESENT = "Present"
    LATE = "Late"
    ABSENT = "Absent"


class PayrollStatus(str, Enum):
    """Payroll workflow: Draft -> Processed -> Paid, or Cancelled."""

    DRAFT = "Draft"
    PROCESSED = "Processed"
    PAID = "Paid"
    CANCELLED = "Cancelled"


class NotificationType(str, Enum):
    LEAVE = "leave"
    ATTENDANCE = "attendance"
    PAYROLL = "payroll"
    SYSTEM = "system"


class LeaveStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    CANCELLED = "Cancelled"
