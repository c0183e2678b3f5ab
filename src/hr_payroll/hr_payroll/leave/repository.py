from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRequest, LeaveType


class LeaveRepository(Protocol):
    """Leave types and leave requests."""

    def list_types(self) -> Sequence[LeaveType]:
        raise NotImplementedError

    def get_type(self, leave_type_id: int) -> Optional[LeaveType]:
        raise NotImplementedError

    def get_type_by_name(self, name: str) -> Optional[LeaveType]:
        raise NotImplementedError

    def create_type(self, *, name: str, description: str, max_days: int, requires_approval: bool) -> int:
        raise NotImplementedError

    def delete_type(self, leave_type_id: int) -> bool:
        raise NotImplementedError

    def count_requests_for_type(self, leave_type_id: int) -> int:
        raise NotImplementedError

    def create_request(self, request: LeaveRequest) -> int:
        raise NotImplementedError

    def get_request(self, leave_request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def find_open_request(self, user_id: int, leave_type_id: int) -> Optional[LeaveRequest]:
        """The user's Pending or Approved request for this type, if any."""
        raise NotImplementedError

    def update_request_status(
        self,
        *,
        leave_request_id: int,
        status: LeaveStatus,
        approver_id: Optional[int],
        approved_date: Optional[datetime],
    ) -> bool:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, limit: Optional[int] = None, offset: int = 0) -> Sequence[LeaveRequest]:
        """Newest first."""
        raise NotImplementedError

    def count_for_user(self, user_id: int) -> int:
        raise NotImplementedError

    def list_all(self) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError

    def count_created_between(self, start: datetime, end: datetime) -> int:
        raise NotImplementedError

    def count_approved_overlapping(self, start_date: date, end_date: date) -> int:
        raise NotImplementedError
