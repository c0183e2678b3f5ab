from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import PayrollBreakdown


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(self, *, basic_salary: float, regular_hours: float, overtime_hours: float) -> PayrollBreakdown:
        raise NotImplementedError
