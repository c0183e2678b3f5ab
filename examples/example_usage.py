"""Example: use the service layer directly (no Flask).

Controllers stay thin; the payroll rules live in the calculator and services.
"""

import importlib
import sys

from config import get_settings_module

from src.hr_payroll.hr_payroll.container import build_container
from src.hr_payroll.hr_payroll.payroll.calculator.standard_calculator import StandardPayrollCalculator


def main():
    breakdown = StandardPayrollCalculator().calculate(basic_salary=160_000, regular_hours=160, overtime_hours=10)
    print(f"gross={breakdown.salary.gross_pay:,.2f} deductions={breakdown.deductions.total_deductions:,.2f} "
          f"net={breakdown.net_pay:,.2f}")

    if len(sys.argv) > 1:
        settings = importlib.import_module(get_settings_module())
        container = build_container(db_config=settings.DB_CONFIG)
        print(container.payroll_service.current_month_projection(int(sys.argv[1])))


if __name__ == "__main__":
    main()
