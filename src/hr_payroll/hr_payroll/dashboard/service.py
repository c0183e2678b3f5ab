from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, previous_month
from ..common.numbers import round_half_up
from ..common.validators import require_positive_int
from ..core.constants import DASHBOARD_RECENT_NOTIFICATIONS, DASHBOARD_UPCOMING_LEAVES, DEFAULT_PAGE_SIZE
from ..core.enums import AttendanceStatus, EmployeeStatus, LeaveStatus
from ..core.exceptions import NotFoundError
from ..departments.repository import DepartmentRepository
from ..leave.model import LeaveRequest
from ..leave.repository import LeaveRepository
from ..notifications.service import NotificationService
from ..payroll.repository import PayrollRepository
from ..users.repository import UserRepository


def percentage_change(current: int, previous: int) -> float:
    """Change against last month; 100 when everything is new this month."""
    if previous > 0:
        return round_half_up((current - previous) / previous * 100, 2)
    return 100.0 if current > 0 else 0.0


def _start_of_day(d: date) -> datetime:
    return datetime(d.year, d.month, d.day)


def _leave_summary(request: LeaveRequest) -> dict:
    return {
        "leaveType": request.leave_type_name,
        "startDate": request.start_date.isoformat(),
        "endDate": request.end_date.isoformat(),
        "numberOfDays": request.number_of_days,
    }


def _count(records: Sequence[AttendanceRecord], status: AttendanceStatus) -> int:
    return sum(1 for r in records if r.status == status)


class DashboardService:
    """Read-only aggregates for the admin and employee home pages."""

    def __init__(
        self,
        *,
        users: UserRepository,
        attendance: AttendanceRepository,
        payrolls: PayrollRepository,
        leaves: LeaveRepository,
        departments: DepartmentRepository,
        notifications: NotificationService,
    ):
        self._users = users
        self._attendance = attendance
        self._payrolls = payrolls
        self._leaves = leaves
        self._departments = departments
        self._notifications = notifications

    def admin_stats(self, *, now: Optional[datetime] = None) -> dict:
        now = now or datetime.now()
        today = now.date()
        this_month_start, _ = month_bounds(today.year, today.month)
        last_month_start, last_month_end = month_bounds(*previous_month(today.year, today.month))
        created_window = (_start_of_day(last_month_start), _start_of_day(this_month_start))

        total_employees = self._users.count_all()
        employees_last_month = self._users.count_created_between(*created_window)

        present_today = sum(
            1
            for row in self._attendance.get_report_rows(start_date=today, end_date=today)
            if row.record.status in (AttendanceStatus.PRESENT, AttendanceStatus.LATE)
        )
        expected_today = self._users.count_by_status(EmployeeStatus.ACTIVE)
        attendance_rate = round_half_up(present_today / expected_today * 100, 2) if expected_today else 0.0

        on_leave = self._users.count_by_status(EmployeeStatus.ON_LEAVE)
        on_leave_last_month = self._leaves.count_approved_overlapping(last_month_start, last_month_end)

        total_requests = self._leaves.count_all()
        requests_last_month = self._leaves.count_created_between(*created_window)

        return {
            "totalEmployees": total_employees,
            "totalEmployeesPercentageChange": percentage_change(total_employees, employees_last_month),
            "presentToday": present_today,
            "attendanceRate": attendance_rate,
            "onLeave": on_leave,
            "onLeavePercentageChange": percentage_change(on_leave, on_leave_last_month),
            "totalDepartments": self._departments.count_all(),
            "totalLeaveRequests": total_requests,
            "leaveRequestsPercentageChange": percentage_change(total_requests, requests_last_month),
        }

    def employee_stats(self, user_id: int, *, now: Optional[datetime] = None) -> dict:
        now = now or datetime.now()
        today = now.date()
        employee = self._users.get_by_id(int(user_id))
        if not employee:
            raise NotFoundError("Employee not found")

        month_start, month_end = month_bounds(today.year, today.month)
        last_start, last_end = month_bounds(*previous_month(today.year, today.month))

        today_record = self._attendance.get_for_user_and_date(employee.user_id, today)
        month_records = self._attendance.list_for_user_between(
            employee.user_id, start_date=month_start, end_date=month_end
        )
        last_month_records = self._attendance.list_for_user_between(
            employee.user_id, start_date=last_start, end_date=last_end
        )

        present = _count(month_records, AttendanceStatus.PRESENT)
        late = _count(month_records, AttendanceStatus.LATE)
        monthly = {
            "totalDays": len(month_records),
            "presentDays": present,
            "lateDays": late,
            "absentDays": _count(month_records, AttendanceStatus.ABSENT),
            "totalHours": sum(r.hours.total_hours for r in month_records),
            "regularHours": sum(r.hours.regular_hours for r in month_records),
            "overtimeHours": sum(r.hours.overtime_hours for r in month_records),
        }
        working_days = today.day
        attendance_rate = round_half_up((present + late) / working_days * 100, 2) if working_days else 0.0

        requests = self._leaves.list_for_user(employee.user_id)
        leave_stats = {
            "totalRequests": len(requests),
            "pendingRequests": sum(1 for r in requests if r.status == LeaveStatus.PENDING),
            "approvedRequests": sum(1 for r in requests if r.status == LeaveStatus.APPROVED),
            "rejectedRequests": sum(1 for r in requests if r.status == LeaveStatus.REJECTED),
            "thisMonthRequests": sum(
                1 for r in requests if r.created_at and month_start <= r.created_at.date() <= month_end
            ),
        }
        approved = [r for r in requests if r.status == LeaveStatus.APPROVED]
        active_leave = next((r for r in approved if r.covers(today)), None)
        upcoming = sorted((r for r in approved if r.start_date > today), key=lambda r: r.start_date)

        balances = []
        for leave_type in self._leaves.list_types():
            used = sum(
                r.number_of_days
                for r in approved
                if r.leave_type_id == leave_type.leave_type_id and r.created_at and r.created_at.year == today.year
            )
            balances.append(
                {
                    "leaveType": leave_type.name,
                    "maxDays": leave_type.max_days,
                    "usedDays": used,
                    "remainingDays": leave_type.max_days - used,
                }
            )

        unread = self._notifications.unread_count(employee.user_id)
        recent = self._notifications.list_for_user(employee.user_id, limit=DASHBOARD_RECENT_NOTIFICATIONS)
        last_month_hours = sum(r.hours.total_hours for r in last_month_records)

        return {
            "employee": {
                "name": employee.full_name,
                "email": employee.email,
                "position": employee.position,
                "department": employee.department_name,
                "basicSalary": employee.basic_salary,
                "employeeStatus": employee.employee_status.value,
            },
            "todayAttendance": {
                "hasClocked": today_record is not None,
                "status": today_record.status.value if today_record else "Not Recorded",
                "clockIn": today_record.clock_in.isoformat() if today_record and today_record.clock_in else None,
                "clockOut": today_record.clock_out.isoformat() if today_record and today_record.clock_out else None,
                "totalHours": today_record.hours.total_hours if today_record else 0,
                "isClockOutPending": today_record.hours.is_clock_out_pending if today_record else False,
            },
            "monthlyAttendance": {
                **monthly,
                "attendanceRate": attendance_rate,
                "workingDaysThisMonth": working_days,
            },
            "leaveStats": leave_stats,
            "activeLeave": _leave_summary(active_leave) if active_leave else None,
            "leaveBalances": balances,
            "upcomingLeaves": [_leave_summary(r) for r in upcoming[:DASHBOARD_UPCOMING_LEAVES]],
            "latestPayroll": self._latest_payroll(employee.user_id),
            "unreadNotifications": unread,
            "recentNotifications": [
                {
                    "id": n.notification_id,
                    "title": n.title,
                    "message": n.message,
                    "type": n.type.value,
                    "isRead": n.is_read,
                    "sender": n.sender_name or "System",
                    "createdAt": n.created_at.isoformat(),
                }
                for n in recent
            ],
            "performanceComparison": {
                "hoursChange": monthly["totalHours"] - last_month_hours,
                "attendanceChange": present - _count(last_month_records, AttendanceStatus.PRESENT),
            },
            "quickStats": {
                "totalWorkingDays": working_days,
                "daysWorked": present + late,
                "hoursThisMonth": round_half_up(monthly["totalHours"], 2),
                "overtimeHours": round_half_up(monthly["overtimeHours"], 2),
                "pendingLeaveRequests": leave_stats["pendingRequests"],
                "unreadNotifications": unread,
            },
        }

    def _latest_payroll(self, user_id: int) -> Optional[dict]:
        records = self._payrolls.list_records(user_id=user_id)
        if not records:
            return None
        latest = max(records, key=lambda p: (p.period.year, p.period.month))
        return {
            "month": latest.period.month,
            "year": latest.period.year,
            "netPay": latest.net_pay,
            "grossPay": latest.breakdown.salary.gross_pay,
            "totalDeductions": latest.breakdown.deductions.total_deductions,
            "status": latest.status.value,
            "totalHoursWorked": latest.attendance.total_hours_worked,
        }

    def recent_attendance(self, user_id: int, *, limit: Any = None) -> list[dict]:
        limit = require_positive_int(limit, "Limit") if limit is not None else DEFAULT_PAGE_SIZE
        return [
            {
                "date": r.work_date.isoformat(),
                "status": r.status.value,
                "clockIn": r.clock_in.isoformat() if r.clock_in else None,
                "clockOut": r.clock_out.isoformat() if r.clock_out else None,
                "totalHours": r.hours.total_hours,
                "overtimeHours": r.hours.overtime_hours,
            }
            for r in self._attendance.list_for_user(int(user_id), limit)
        ]
