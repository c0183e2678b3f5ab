from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import PayrollStatus


@dataclass(frozen=True)
class PayPeriod:
    start_date: date
    end_date: date
    month: int
    year: int


@dataclass(frozen=True)
class AttendanceSummary:
    """Month aggregate of attendance records.

    `regular_hours` and `overtime_hours` hold the payable (capped) values;
    `total_hours_worked` is the raw sum.
    """

    total_hours_worked: float = 0.0
    regular_hours: float = 0.0
    overtime_hours: float = 0.0
    days_present: int = 0
    days_late: int = 0
    days_absent: int = 0


@dataclass(frozen=True)
class SalaryBreakdown:
    basic_salary: float
    hourly_rate: float = 0.0
    overtime_rate: float = 0.0
    regular_pay: float = 0.0
    overtime_pay: float = 0.0
    gross_pay: float = 0.0


@dataclass(frozen=True)
class Deductions:
    paye: float = 0.0
    nhif: float = 0.0
    nssf: float = 0.0
    total_deductions: float = 0.0


@dataclass(frozen=True)
class PayrollBreakdown:
    """Calculator output: everything derived from basic salary and hours."""

    salary: SalaryBreakdown
    deductions: Deductions = field(default_factory=Deductions)
    net_pay: float = 0.0


@dataclass(frozen=True)
class PayrollRecord:
    """Domain entity: one employee's payroll for one month.

    (user_id, period.month, period.year) is unique. Money fields are never set
    by callers; they come from the calculator (see PayrollService).
    """

    payroll_id: Optional[int]
    user_id: int
    period: PayPeriod
    attendance: AttendanceSummary
    breakdown: PayrollBreakdown
    status: PayrollStatus = PayrollStatus.DRAFT
    processed_by: Optional[int] = None
    processed_date: Optional[datetime] = None
    paid_date: Optional[datetime] = None
    payslip_generated: bool = False
    employee_name: Optional[str] = None
    employee_email: Optional[str] = None
    employee_position: Optional[str] = None
    processed_by_name: Optional[str] = None

    @property
    def net_pay(self) -> float:
        return self.breakdown.net_pay

    def to_dict(self) -> dict:
        salary = self.breakdown.salary
        deductions = self.breakdown.deductions
        return {
            "payroll_id": self.payroll_id,
            "employee": {
                "user_id": self.user_id,
                "full_name": self.employee_name,
                "email": self.employee_email,
                "position": self.employee_position,
            },
            "pay_period": {
                "start_date": self.period.start_date.isoformat(),
                "end_date": self.period.end_date.isoformat(),
                "month": self.period.month,
                "year": self.period.year,
            },
            "attendance_summary": {
                "total_hours_worked": self.attendance.total_hours_worked,
                "regular_hours": self.attendance.regular_hours,
                "overtime_hours": self.attendance.overtime_hours,
                "days_present": self.attendance.days_present,
                "days_late": self.attendance.days_late,
                "days_absent": self.attendance.days_absent,
            },
            "salary_breakdown": {
                "basic_salary": salary.basic_salary,
                "hourly_rate": salary.hourly_rate,
                "overtime_rate": salary.overtime_rate,
                "regular_pay": salary.regular_pay,
                "overtime_pay": salary.overtime_pay,
                "gross_pay": salary.gross_pay,
            },
            "deductions": {
                "paye": deductions.paye,
                "nhif": deductions.nhif,
                "nssf": deductions.nssf,
                "total_deductions": deductions.total_deductions,
            },
            "net_pay": self.breakdown.net_pay,
            "status": self.status.value,
            "processed_by": (
                {"user_id": self.processed_by, "full_name": self.processed_by_name} if self.processed_by else None
            ),
            "processed_date": self.processed_date.isoformat() if self.processed_date else None,
            "paid_date": self.paid_date.isoformat() if self.paid_date else None,
            "payslip_generated": self.payslip_generated,
        }
