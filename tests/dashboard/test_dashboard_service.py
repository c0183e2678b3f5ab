from datetime import date, datetime, timedelta

import pytest

from src.hr_payroll.hr_payroll.attendance.hours import prepare_for_save
from src.hr_payroll.hr_payroll.attendance.model import AttendanceRecord
from src.hr_payroll.hr_payroll.core.enums import AttendanceStatus, EmployeeStatus, LeaveStatus, Role
from src.hr_payroll.hr_payroll.core.exceptions import NotFoundError, ValidationError
from src.hr_payroll.hr_payroll.dashboard.service import DashboardService, percentage_change
from src.hr_payroll.hr_payroll.departments.model import Department
from src.hr_payroll.hr_payroll.leave.model import LeaveRequest, LeaveType
from src.hr_payroll.hr_payroll.notifications.service import NotificationService
from src.hr_payroll.hr_payroll.payroll.service import PayrollService
from tests.fakes import (
    InMemoryAttendance,
    InMemoryDepartments,
    InMemoryLeaves,
    InMemoryNotifications,
    InMemoryPayrolls,
    InMemoryUsers,
    make_employee,
)

ENGINEERING = Department(dept_id=1, name="Engineering", description="Builds things")
ANNUAL = LeaveType(leave_type_id=1, name="Annual Leave", description="Yearly", max_days=10)
COMPASSIONATE = LeaveType(
    leave_type_id=2, name="Compassionate", description="Family", max_days=3, requires_approval=False
)


def day_record(user_id, day, status, minutes=None):
    clock_in = datetime.combine(day, datetime.min.time()).replace(hour=8)
    return prepare_for_save(
        AttendanceRecord(
            attendance_id=None,
            user_id=user_id,
            work_date=day,
            status=status,
            clock_in=clock_in,
            clock_out=clock_in + timedelta(minutes=minutes) if minutes else None,
        )
    )


def leave(user_id, type_, start, days, status, created_at):
    return LeaveRequest(
        leave_request_id=None,
        user_id=user_id,
        leave_type_id=type_.leave_type_id,
        start_date=start,
        end_date=start + timedelta(days=days - 1),
        number_of_days=days,
        status=status,
        created_at=created_at,
    )


@pytest.fixture
def users():
    return InMemoryUsers(
        make_employee(1, "Admin Boss", role=Role.ADMIN, created_at=datetime(2026, 1, 5, 9, 0)),
        make_employee(2, "Jane Doe", department=ENGINEERING, created_at=datetime(2026, 2, 10, 9, 0)),
        make_employee(3, "Bob Away", status=EmployeeStatus.ON_LEAVE, created_at=datetime(2026, 2, 20, 9, 0)),
    )


@pytest.fixture
def attendance(users):
    store = InMemoryAttendance(users)
    store.add(day_record(2, date(2026, 2, 27), AttendanceStatus.PRESENT, 540))
    store.add(day_record(2, date(2026, 3, 1), AttendanceStatus.LATE, 480))
    store.add(day_record(2, date(2026, 3, 2), AttendanceStatus.PRESENT))
    store.add(day_record(1, date(2026, 3, 2), AttendanceStatus.ABSENT))
    return store


@pytest.fixture
def leaves(users):
    store = InMemoryLeaves(users, ANNUAL, COMPASSIONATE)
    store.add_request(leave(3, ANNUAL, date(2026, 2, 20), 5, LeaveStatus.APPROVED, datetime(2026, 2, 19, 9, 0)))
    store.add_request(leave(2, ANNUAL, date(2026, 3, 20), 5, LeaveStatus.APPROVED, datetime(2026, 2, 25, 9, 0)))
    store.add_request(
        leave(2, COMPASSIONATE, date(2026, 3, 1), 3, LeaveStatus.APPROVED, datetime(2026, 3, 1, 8, 0))
    )
    store.add_request(leave(2, ANNUAL, date(2026, 3, 2), 10, LeaveStatus.PENDING, datetime(2026, 3, 2, 7, 0)))
    return store


@pytest.fixture
def payrolls(users):
    return InMemoryPayrolls(users)


@pytest.fixture
def notification_service(users):
    return NotificationService(InMemoryNotifications(), users)


@pytest.fixture
def service(users, attendance, payrolls, leaves, notification_service):
    return DashboardService(
        users=users,
        attendance=attendance,
        payrolls=payrolls,
        leaves=leaves,
        departments=InMemoryDepartments(users, ENGINEERING),
        notifications=notification_service,
    )


@pytest.mark.parametrize("current,previous,expected", [(3, 2, 50.0), (2, 0, 100.0), (0, 0, 0.0), (1, 4, -75.0)])
def test_percentage_change(current, previous, expected):
    assert percentage_change(current, previous) == expected


def test_admin_stats(service, fixed_now):
    assert service.admin_stats(now=fixed_now) == {
        "totalEmployees": 3,
        "totalEmployeesPercentageChange": 50.0,
        "presentToday": 1,
        "attendanceRate": 50.0,
        "onLeave": 1,
        "onLeavePercentageChange": 0.0,
        "totalDepartments": 1,
        "totalLeaveRequests": 4,
        "leaveRequestsPercentageChange": 100.0,
    }


def test_employee_stats(service, payrolls, attendance, users, notification_service, fixed_now):
    payroll = PayrollService(payrolls, attendance, users, notification_service)
    payroll.generate_for_month(month=1, year=2026, actor_id=1, now=datetime(2026, 2, 1, 9, 0))
    payroll.generate_for_month(month=2, year=2026, actor_id=1, now=datetime(2026, 3, 1, 9, 0))

    stats = service.employee_stats(2, now=fixed_now)

    assert stats["employee"]["department"] == "Engineering"
    assert stats["employee"]["employeeStatus"] == "Active"
    assert stats["todayAttendance"] == {
        "hasClocked": True,
        "status": "Present",
        "clockIn": "2026-03-02T08:00:00",
        "clockOut": None,
        "totalHours": 0.0,
        "isClockOutPending": True,
    }
    assert stats["monthlyAttendance"] == {
        "totalDays": 2,
        "presentDays": 1,
        "lateDays": 1,
        "absentDays": 0,
        "totalHours": 8.0,
        "regularHours": 8.0,
        "overtimeHours": 0.0,
        "attendanceRate": 100.0,
        "workingDaysThisMonth": 2,
    }
    assert stats["leaveStats"] == {
        "totalRequests": 3,
        "pendingRequests": 1,
        "approvedRequests": 2,
        "rejectedRequests": 0,
        "thisMonthRequests": 2,
    }
    assert stats["activeLeave"] == {
        "leaveType": "Compassionate",
        "startDate": "2026-03-01",
        "endDate": "2026-03-03",
        "numberOfDays": 3,
    }
    assert stats["leaveBalances"] == [
        {"leaveType": "Annual Leave", "maxDays": 10, "usedDays": 5, "remainingDays": 5},
        {"leaveType": "Compassionate", "maxDays": 3, "usedDays": 3, "remainingDays": 0},
    ]
    assert [u["startDate"] for u in stats["upcomingLeaves"]] == ["2026-03-20"]

    assert stats["latestPayroll"]["month"] == 2
    assert stats["latestPayroll"]["year"] == 2026
    assert stats["latestPayroll"]["status"] == "Processed"
    assert stats["latestPayroll"]["totalHoursWorked"] == 9

    assert stats["unreadNotifications"] == 2
    assert [n["title"] for n in stats["recentNotifications"]] == ["Payroll Generated", "Payroll Generated"]
    assert stats["performanceComparison"] == {"hoursChange": -1.0, "attendanceChange": 0}
    assert stats["quickStats"]["daysWorked"] == 2
    assert stats["quickStats"]["pendingLeaveRequests"] == 1


def test_employee_stats_without_activity(service, fixed_now):
    stats = service.employee_stats(1, now=fixed_now)

    assert stats["todayAttendance"]["status"] == "Absent"
    assert stats["latestPayroll"] is None
    assert stats["activeLeave"] is None
    assert stats["employee"]["department"] is None


def test_employee_stats_unknown_user(service):
    with pytest.raises(NotFoundError):
        service.employee_stats(42)


def test_recent_attendance(service):
    items = service.recent_attendance(2, limit="2")

    assert [i["date"] for i in items] == ["2026-03-02", "2026-03-01"]
    assert items[1]["totalHours"] == 8
    assert len(service.recent_attendance(2)) == 3

    with pytest.raises(ValidationError):
        service.recent_attendance(2, limit="-1")
