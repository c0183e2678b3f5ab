from __future__ import annotations

from ...core.constants import MAX_OVERTIME_HOURS, OVERTIME_MULTIPLIER, STANDARD_MONTHLY_HOURS
from ..model import Deductions, PayrollBreakdown, SalaryBreakdown
from .base import PayrollCalculator
from .brackets import calculate_nhif, calculate_nssf, calculate_paye


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: salary spread over 160 h, overtime at 1.5x, statutory deductions.

    Regular hours are paid up to 160 per month and overtime up to 40,
    whatever the attendance totals are.
    """

    def calculate(self, *, basic_salary: float, regular_hours: float, overtime_hours: float) -> PayrollBreakdown:
        hourly_rate = basic_salary / STANDARD_MONTHLY_HOURS
        overtime_rate = hourly_rate * OVERTIME_MULTIPLIER

        regular_pay = min(regular_hours, STANDARD_MONTHLY_HOURS) * hourly_rate
        overtime_pay = min(overtime_hours, MAX_OVERTIME_HOURS) * overtime_rate
        gross_pay = regular_pay + overtime_pay

        salary = SalaryBreakdown(
            basic_salary=basic_salary,
            hourly_rate=hourly_rate,
            overtime_rate=overtime_rate,
            regular_pay=regular_pay,
            overtime_pay=overtime_pay,
            gross_pay=gross_pay,
        )

        if gross_pay == 0:
            return PayrollBreakdown(salary=salary, deductions=Deductions(), net_pay=0.0)

        paye = calculate_paye(gross_pay)
        nhif = calculate_nhif(gross_pay)
        nssf = calculate_nssf(gross_pay)
        total = paye + nhif + nssf

        return PayrollBreakdown(
            salary=salary,
            deductions=Deductions(paye=paye, nhif=nhif, nssf=nssf, total_deductions=total),
            net_pay=gross_pay - total,
        )
