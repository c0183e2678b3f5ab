from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import AttendanceSummary, Deductions, PayPeriod, PayrollBreakdown, PayrollRecord, SalaryBreakdown
from .repository import PayrollRepository

_SELECT = """
    SELECT p.*, u.full_name AS employee_name, u.email AS employee_email,
           u.position AS employee_position, a.full_name AS processed_by_name
    FROM payroll_records p
    JOIN users u ON u.user_id = p.user_id
    LEFT JOIN users a ON a.user_id = p.processed_by
"""


def _to_record(r: Dict[str, Any]) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        user_id=int(r["user_id"]),
        period=PayPeriod(
            start_date=r["period_start"],
            end_date=r["period_end"],
            month=int(r["period_month"]),
            year=int(r["period_year"]),
        ),
        attendance=AttendanceSummary(
            total_hours_worked=as_float(r.get("total_hours_worked")),
            regular_hours=as_float(r.get("regular_hours")),
            overtime_hours=as_float(r.get("overtime_hours")),
            days_present=int(r.get("days_present") or 0),
            days_late=int(r.get("days_late") or 0),
            days_absent=int(r.get("days_absent") or 0),
        ),
        breakdown=PayrollBreakdown(
            salary=SalaryBreakdown(
                basic_salary=as_float(r.get("basic_salary")),
                hourly_rate=as_float(r.get("hourly_rate")),
                overtime_rate=as_float(r.get("overtime_rate")),
                regular_pay=as_float(r.get("regular_pay")),
                overtime_pay=as_float(r.get("overtime_pay")),
                gross_pay=as_float(r.get("gross_pay")),
            ),
            deductions=Deductions(
                paye=as_float(r.get("paye")),
                nhif=as_float(r.get("nhif")),
                nssf=as_float(r.get("nssf")),
                total_deductions=as_float(r.get("total_deductions")),
            ),
            net_pay=as_float(r.get("net_pay")),
        ),
        status=PayrollStatus(r["status"]),
        processed_by=int(r["processed_by"]) if r.get("processed_by") is not None else None,
        processed_date=r.get("processed_date"),
        paid_date=r.get("paid_date"),
        payslip_generated=bool(r.get("payslip_generated")),
        employee_name=r.get("employee_name"),
        employee_email=r.get("employee_email"),
        employee_position=r.get("employee_position"),
        processed_by_name=r.get("processed_by_name"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.payroll_id=%s", (payroll_id,))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_user_and_period(self, user_id: int, *, month: int, year: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE p.user_id=%s AND p.period_month=%s AND p.period_year=%s",
                (user_id, month, year),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create(self, record: PayrollRecord) -> int:
        salary = record.breakdown.salary
        deductions = record.breakdown.deductions
        summary = record.attendance
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_records(
                    user_id, period_start, period_end, period_month, period_year,
                    total_hours_worked, regular_hours, overtime_hours,
                    days_present, days_late, days_absent,
                    basic_salary, hourly_rate, overtime_rate, regular_pay, overtime_pay, gross_pay,
                    paye, nhif, nssf, total_deductions, net_pay,
                    status, processed_by, processed_date, paid_date, payslip_generated
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.user_id,
                    record.period.start_date,
                    record.period.end_date,
                    record.period.month,
                    record.period.year,
                    summary.total_hours_worked,
                    summary.regular_hours,
                    summary.overtime_hours,
                    summary.days_present,
                    summary.days_late,
                    summary.days_absent,
                    salary.basic_salary,
                    salary.hourly_rate,
                    salary.overtime_rate,
                    salary.regular_pay,
                    salary.overtime_pay,
                    salary.gross_pay,
                    deductions.paye,
                    deductions.nhif,
                    deductions.nssf,
                    deductions.total_deductions,
                    record.breakdown.net_pay,
                    record.status.value,
                    record.processed_by,
                    record.processed_date,
                    record.paid_date,
                    int(record.payslip_generated),
                ),
            )
            return int(cur.lastrowid)

    def update_status(
        self,
        *,
        payroll_id: int,
        status: PayrollStatus,
        paid_date: Optional[datetime],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE payroll_records SET status=%s, paid_date=%s WHERE payroll_id=%s",
                (status.value, paid_date, payroll_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payroll_records WHERE payroll_id=%s", (payroll_id,))
            return cur.rowcount > 0

    def list_records(
        self,
        *,
        year: Optional[int] = None,
        month: Optional[int] = None,
        status: Optional[PayrollStatus] = None,
        user_id: Optional[int] = None,
    ) -> Sequence[PayrollRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if year is not None and month is not None:
            clauses.append("p.period_year=%s AND p.period_month=%s")
            params.extend([int(year), int(month)])
        if status is not None:
            clauses.append("p.status=%s")
            params.append(status.value)
        if user_id is not None:
            clauses.append("p.user_id=%s")
            params.append(int(user_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + f"""
                WHERE {where}
                ORDER BY p.period_year DESC, p.period_month DESC, p.created_at DESC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]
