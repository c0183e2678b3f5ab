from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PayrollStatus
from .model import PayrollRecord


class PayrollRepository(Protocol):
    """Storage for monthly payroll records.

    Implementations must enforce uniqueness of (user_id, month, year) and
    raise DuplicateKeyError when it is violated.
    """

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def get_for_user_and_period(self, user_id: int, *, month: int, year: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def create(self, record: PayrollRecord) -> int:
        raise NotImplementedError

    def update_status(
        self,
        *,
        payroll_id: int,
        status: PayrollStatus,
        paid_date: Optional[datetime],
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, payroll_id: int) -> bool:
        raise NotImplementedError

    def list_records(
        self,
        *,
        year: Optional[int] = None,
        month: Optional[int] = None,
        status: Optional[PayrollStatus] = None,
        user_id: Optional[int] = None,
    ) -> Sequence[PayrollRecord]:
        raise NotImplementedError
