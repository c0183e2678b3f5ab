from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .departments.mysql_department_repository import MySQLDepartmentRepository
from .departments.service import DepartmentService
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.service import LeaveService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.service import NotificationService
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.service import PayrollService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    attendance_repo: MySQLAttendanceRepository
    payroll_repo: MySQLPayrollRepository
    notifications_repo: MySQLNotificationRepository
    departments_repo: MySQLDepartmentRepository
    leave_repo: MySQLLeaveRepository

    auth_service: AuthService
    user_service: UserService
    notification_service: NotificationService
    attendance_service: AttendanceService
    payroll_service: PayrollService
    department_service: DepartmentService
    leave_service: LeaveService
    dashboard_service: DashboardService


def build_container(*, db_config: dict) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    users_repo = MySQLUserRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    payroll_repo = MySQLPayrollRepository(conn)
    notifications_repo = MySQLNotificationRepository(conn)
    departments_repo = MySQLDepartmentRepository(conn)
    leave_repo = MySQLLeaveRepository(conn)

    notification_service = NotificationService(notifications_repo, users_repo)
    auth_service = AuthService(users_repo)
    user_service = UserService(users_repo, notification_service, departments=departments_repo)
    attendance_service = AttendanceService(attendance_repo, notification_service)
    payroll_service = PayrollService(
        payroll_repo,
        attendance_repo,
        users_repo,
        notification_service,
        calculator=StandardPayrollCalculator(),
    )
    department_service = DepartmentService(departments_repo, notification_service)
    leave_service = LeaveService(leave_repo, users_repo, notification_service)
    dashboard_service = DashboardService(
        users=users_repo,
        attendance=attendance_repo,
        payrolls=payroll_repo,
        leaves=leave_repo,
        departments=departments_repo,
        notifications=notification_service,
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        payroll_repo=payroll_repo,
        notifications_repo=notifications_repo,
        departments_repo=departments_repo,
        leave_repo=leave_repo,
        auth_service=auth_service,
        user_service=user_service,
        notification_service=notification_service,
        attendance_service=attendance_service,
        payroll_service=payroll_service,
        department_service=department_service,
        leave_service=leave_service,
        dashboard_service=dashboard_service,
    )
