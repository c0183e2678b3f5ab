from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Iterable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds
from ..common.numbers import round_half_up
from ..common.validators import require_enum, require_month, require_non_negative_number, require_year
from ..core.constants import MAX_OVERTIME_HOURS, STANDARD_MONTHLY_HOURS
from ..core.enums import AttendanceStatus, NotificationType, PayrollStatus
from ..core.exceptions import InvalidStateError, NotFoundError
from ..database.errors import DuplicateKeyError
from ..notifications.service import NotificationService
from ..users.model import Employee
from ..users.repository import UserRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import AttendanceSummary, PayPeriod, PayrollBreakdown, PayrollRecord
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    generated: int
    total_employees: int
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class HoursTotals:
    total_hours: float = 0.0
    regular_hours: float = 0.0
    overtime_hours: float = 0.0


def sum_hours(records: Iterable[AttendanceRecord]) -> HoursTotals:
    total = regular = overtime = 0.0
    for r in records:
        total += r.hours.total_hours
        regular += r.hours.regular_hours
        overtime += r.hours.overtime_hours
    return HoursTotals(total_hours=total, regular_hours=regular, overtime_hours=overtime)


def summarize_attendance(records: Sequence[AttendanceRecord]) -> AttendanceSummary:
    """Aggregate a month of attendance; payable hours are capped at 160 / 40."""
    totals = sum_hours(records)
    return AttendanceSummary(
        total_hours_worked=totals.total_hours,
        regular_hours=min(totals.regular_hours, float(STANDARD_MONTHLY_HOURS)),
        overtime_hours=min(totals.overtime_hours, float(MAX_OVERTIME_HOURS)),
        days_present=sum(1 for r in records if r.status == AttendanceStatus.PRESENT),
        days_late=sum(1 for r in records if r.status == AttendanceStatus.LATE),
        days_absent=sum(1 for r in records if r.status == AttendanceStatus.ABSENT),
    )


def _money(value: float) -> float:
    return round_half_up(value, 2)


class PayrollService:
    """Monthly payroll generation, status workflow and salary projection."""

    def __init__(
        self,
        payrolls: PayrollRepository,
        attendance: AttendanceRepository,
        users: UserRepository,
        notifications: NotificationService,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._payrolls = payrolls
        self._attendance = attendance
        self._users = users
        self._notifications = notifications
        self._calculator = calculator or StandardPayrollCalculator()

    def build_record(
        self,
        *,
        user_id: int,
        period: PayPeriod,
        summary: AttendanceSummary,
        basic_salary: Any,
        status: PayrollStatus = PayrollStatus.DRAFT,
        processed_by: Optional[int] = None,
        processed_date: Optional[datetime] = None,
    ) -> PayrollRecord:
        """Assemble a record whose money fields come only from salary and hours."""
        salary = require_non_negative_number(basic_salary, "Basic salary")
        breakdown = self._calculator.calculate(
            basic_salary=salary,
            regular_hours=summary.regular_hours,
            overtime_hours=summary.overtime_hours,
        )
        return PayrollRecord(
            payroll_id=None,
            user_id=int(user_id),
            period=period,
            attendance=summary,
            breakdown=breakdown,
            status=status,
            processed_by=processed_by,
            processed_date=processed_date,
        )

    def generate_for_month(
        self,
        *,
        month: Any,
        year: Any,
        actor_id: int,
        now: Optional[datetime] = None,
    ) -> GenerationResult:
        """Create one Processed record per employee; failures are collected, not raised."""
        now = now or datetime.now()
        month = require_month(month)
        year = require_year(year)
        start, end = month_bounds(year, month)
        period = PayPeriod(start_date=start, end_date=end, month=month, year=year)

        employees = self._users.list_all()
        if not employees:
            raise NotFoundError("No active employees found")

        generated = 0
        errors: list[str] = []

        for employee in employees:
            if self._payrolls.get_for_user_and_period(employee.user_id, month=month, year=year):
                errors.append(f"Payroll already exists for {employee.full_name} for {month}/{year}")
                continue

            try:
                record = self._generate_one(employee, period=period, actor_id=actor_id, now=now)
            except DuplicateKeyError:
                errors.append(f"Payroll already exists for {employee.full_name} for {month}/{year}")
                continue
            except Exception as e:
                logger.exception("Payroll generation failed for user %s (%s/%s)", employee.user_id, month, year)
                errors.append(f"Error generating payroll for {employee.full_name}: {e}")
                continue

            generated += 1
            self._notifications.notify(
                recipient_id=employee.user_id,
                sender_id=int(actor_id),
                title="Payroll Generated",
                message=f"Your payroll for {month}/{year} has been generated. Net pay: KES {record.net_pay:,.2f}",
                type=NotificationType.PAYROLL,
            )

        logger.info(
            "Payroll %s/%s by user %s: %d generated of %d employees, %d errors",
            month,
            year,
            actor_id,
            generated,
            len(employees),
            len(errors),
        )
        return GenerationResult(generated=generated, total_employees=len(employees), errors=errors)

    def _generate_one(self, employee: Employee, *, period: PayPeriod, actor_id: int, now: datetime) -> PayrollRecord:
        records = self._attendance.list_for_user_between(
            employee.user_id, start_date=period.start_date, end_date=period.end_date
        )
        record = self.build_record(
            user_id=employee.user_id,
            period=period,
            summary=summarize_attendance(records),
            basic_salary=employee.basic_salary or 0,
            status=PayrollStatus.PROCESSED,
            processed_by=int(actor_id),
            processed_date=now,
        )
        payroll_id = self._payrolls.create(record)
        return replace(record, payroll_id=payroll_id)

    def update_status(
        self,
        *,
        payroll_id: int,
        status: Any,
        actor_id: int,
        now: Optional[datetime] = None,
    ) -> PayrollRecord:
        now = now or datetime.now()
        new_status = require_enum(PayrollStatus, status)

        record = self._payrolls.get_by_id(int(payroll_id))
        if not record:
            raise NotFoundError("Payroll record not found")

        if record.status == PayrollStatus.PAID:
            if new_status != PayrollStatus.PAID:
                raise InvalidStateError("Paid payroll records cannot change status")
            return record

        paid_date = now if new_status == PayrollStatus.PAID else record.paid_date

        self._payrolls.update_status(payroll_id=record.payroll_id, status=new_status, paid_date=paid_date)
        updated = replace(record, status=new_status, paid_date=paid_date)
        logger.info(
            "Payroll %s status %s -> %s by user %s", record.payroll_id, record.status.value, new_status.value, actor_id
        )

        self._notifications.notify(
            recipient_id=record.user_id,
            sender_id=int(actor_id),
            title="Payroll Status Updated",
            message=f'Your payroll status has been updated to "{new_status.value}"',
            type=NotificationType.PAYROLL,
        )
        return updated

    def delete(self, payroll_id: int) -> PayrollRecord:
        record = self._payrolls.get_by_id(int(payroll_id))
        if not record:
            raise NotFoundError("Payroll record not found")
        if record.status == PayrollStatus.PAID:
            raise InvalidStateError("Cannot delete paid payroll records")

        self._payrolls.delete_by_id(record.payroll_id)
        logger.info("Payroll %s for user %s deleted", record.payroll_id, record.user_id)
        return record

    def list_payrolls(
        self,
        *,
        year: Optional[int] = None,
        month: Optional[int] = None,
        status: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> Sequence[PayrollRecord]:
        status_value = require_enum(PayrollStatus, status) if status else None
        return self._payrolls.list_records(year=year, month=month, status=status_value, user_id=user_id)

    def list_for_employee(
        self,
        user_id: int,
        *,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> Sequence[PayrollRecord]:
        return self._payrolls.list_records(year=year, month=month, user_id=int(user_id))

    def get_for_employee(self, *, user_id: int, payroll_id: int) -> PayrollRecord:
        record = self._payrolls.get_by_id(int(payroll_id))
        if not record or record.user_id != int(user_id):
            raise NotFoundError("Payroll record not found")
        return record

    def export_rows(self, *, year: Optional[int] = None, month: Optional[int] = None) -> list[dict]:
        rows = []
        for p in self._payrolls.list_records(year=year, month=month):
            salary = p.breakdown.salary
            deductions = p.breakdown.deductions
            rows.append(
                {
                    "employee": p.employee_name,
                    "email": p.employee_email,
                    "position": p.employee_position,
                    "period": f"{p.period.month}/{p.period.year}",
                    "basic_salary": salary.basic_salary,
                    "regular_hours": p.attendance.regular_hours,
                    "overtime_hours": p.attendance.overtime_hours,
                    "regular_pay": salary.regular_pay,
                    "overtime_pay": salary.overtime_pay,
                    "gross_pay": salary.gross_pay,
                    "paye": deductions.paye,
                    "nhif": deductions.nhif,
                    "nssf": deductions.nssf,
                    "total_deductions": deductions.total_deductions,
                    "net_pay": p.breakdown.net_pay,
                    "status": p.status.value,
                }
            )
        return rows

    def current_month_projection(self, user_id: int, *, now: Optional[datetime] = None) -> dict:
        """Pay earned so far this month, and what a full 160 h month would pay."""
        now = now or datetime.now()
        employee = self._users.get_by_id(int(user_id))
        if not employee:
            raise NotFoundError("Employee not found")

        start, end = month_bounds(now.year, now.month)
        records = self._attendance.list_for_user_between(employee.user_id, start_date=start, end_date=end)
        worked = sum_hours(records)
        basic_salary = require_non_negative_number(employee.basic_salary or 0, "Basic salary")

        current = self._calculator.calculate(
            basic_salary=basic_salary,
            regular_hours=worked.regular_hours,
            overtime_hours=worked.overtime_hours,
        )
        full_month = self._calculator.calculate(
            basic_salary=basic_salary,
            regular_hours=float(STANDARD_MONTHLY_HOURS),
            overtime_hours=worked.overtime_hours,
        )

        return {
            "currentMonth": f"{now.month}/{now.year}",
            "employee": {
                "name": employee.full_name,
                "basicSalary": employee.basic_salary,
                "hourlyRate": _money(current.salary.hourly_rate),
                "overtimeRate": _money(current.salary.overtime_rate),
            },
            "workingSummary": {
                "daysInMonth": end.day,
                "daysWorked": sum(1 for r in records if r.status != AttendanceStatus.ABSENT),
                "hoursWorked": worked.total_hours,
                "regularHours": worked.regular_hours,
                "overtimeHours": worked.overtime_hours,
                "remainingRegularHours": max(0.0, STANDARD_MONTHLY_HOURS - worked.regular_hours),
            },
            "currentEarnings": self._earnings(current, include_breakdown=True),
            "projectedFullMonth": self._earnings(full_month, include_breakdown=False),
        }

    @staticmethod
    def _earnings(breakdown: PayrollBreakdown, *, include_breakdown: bool) -> dict:
        deductions = breakdown.deductions
        if include_breakdown:
            deductions_out = {
                "paye": round_half_up(deductions.paye),
                "nhif": round_half_up(deductions.nhif),
                "nssf": round_half_up(deductions.nssf),
                "total": round_half_up(deductions.total_deductions),
            }
        else:
            deductions_out = {"total": round_half_up(deductions.total_deductions)}

        return {
            "regularPay": _money(breakdown.salary.regular_pay),
            "overtimePay": _money(breakdown.salary.overtime_pay),
            "grossPay": _money(breakdown.salary.gross_pay),
            "deductions": deductions_out,
            "netPay": _money(breakdown.net_pay),
        }
