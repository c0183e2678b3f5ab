"""In-memory repositories used by the service and API tests.

They enforce the same unique keys as database/schema.sql and raise
DuplicateKeyError the way the MySQL repositories do.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from werkzeug.security import generate_password_hash

from src.hr_payroll.hr_payroll.attendance.model import AttendanceRecord, AttendanceReportRow
from src.hr_payroll.hr_payroll.core.enums import EmployeeStatus, LeaveStatus, NotificationType, PayrollStatus, Role
from src.hr_payroll.hr_payroll.database.errors import DuplicateKeyError
from src.hr_payroll.hr_payroll.departments.model import Department
from src.hr_payroll.hr_payroll.leave.model import LeaveRequest, LeaveType
from src.hr_payroll.hr_payroll.notifications.model import Notification
from src.hr_payroll.hr_payroll.payroll.model import PayrollRecord
from src.hr_payroll.hr_payroll.users.model import Employee


def make_employee(
    user_id: int,
    full_name: str = "Jane Doe",
    *,
    email: Optional[str] = None,
    basic_salary: float = 160_000,
    role: Role = Role.EMPLOYEE,
    status: EmployeeStatus = EmployeeStatus.ACTIVE,
    password: str = "secret1",
    department: Optional[Department] = None,
    created_at: Optional[datetime] = None,
) -> Employee:
    return Employee(
        user_id=user_id,
        full_name=full_name,
        email=email or f"user{user_id}@example.com",
        password_hash=generate_password_hash(password),
        role=role,
        employee_status=status,
        position="Clerk",
        phone_number="+254700000000",
        basic_salary=basic_salary,
        department_id=department.dept_id if department else None,
        department_name=department.name if department else None,
        created_at=created_at or datetime(2026, 1, 5, 9, 0, 0),
    )


class InMemoryUsers:
    def __init__(self, *employees: Employee):
        self._by_id: dict[int, Employee] = {e.user_id: e for e in employees}
        self._next_id = max(self._by_id, default=0) + 1
        self.departments: Optional["InMemoryDepartments"] = None
        self.clock = datetime(2026, 3, 1, 9, 0, 0)

    def _decorate(self, employee: Employee) -> Employee:
        if employee.department_id is None or self.departments is None:
            return employee
        return replace(employee, department_name=self.departments.name_of(employee.department_id))

    def raw(self):
        return list(self._by_id.values())

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        employee = self._by_id.get(user_id)
        return self._decorate(employee) if employee else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        return next((self._decorate(e) for e in self._by_id.values() if e.email == email), None)

    def list_all(self):
        return [self._decorate(e) for e in sorted(self._by_id.values(), key=lambda e: e.user_id)]

    def create_user(
        self,
        *,
        full_name,
        email,
        password_hash,
        role,
        employee_status,
        position,
        phone_number,
        basic_salary,
        department_id=None,
    ):
        if self.get_by_email(email):
            raise DuplicateKeyError(email)
        user_id = self._next_id
        self._next_id += 1
        self._by_id[user_id] = Employee(
            user_id=user_id,
            full_name=full_name,
            email=email,
            password_hash=password_hash,
            role=role,
            employee_status=employee_status,
            position=position,
            phone_number=phone_number,
            basic_salary=basic_salary,
            department_id=department_id,
            created_at=self.clock,
        )
        return user_id

    def update_user(self, employee: Employee) -> bool:
        other = self.get_by_email(employee.email)
        if other and other.user_id != employee.user_id:
            raise DuplicateKeyError(employee.email)
        self._by_id[employee.user_id] = employee
        return True

    def delete_by_id(self, user_id: int) -> bool:
        return self._by_id.pop(user_id, None) is not None

    def set_status(self, user_id: int, status: EmployeeStatus) -> bool:
        employee = self._by_id.get(user_id)
        if not employee:
            return False
        self._by_id[user_id] = replace(employee, employee_status=status)
        return True

    def count_all(self) -> int:
        return len(self._by_id)

    def count_created_between(self, start: datetime, end: datetime) -> int:
        return sum(1 for e in self._by_id.values() if e.created_at and start <= e.created_at < end)

    def count_by_status(self, status: EmployeeStatus) -> int:
        return sum(1 for e in self._by_id.values() if e.employee_status == status)

    def list_admin_ids(self):
        return [e.user_id for e in self.list_all() if e.role == Role.ADMIN]


class InMemoryAttendance:
    def __init__(self, users: Optional[InMemoryUsers] = None):
        self._users = users
        self._by_user_date: dict[tuple[int, date], AttendanceRecord] = {}
        self._id = 0

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        """Test helper: store a prepared record directly."""
        self._id += 1
        stored = replace(record, attendance_id=self._id)
        self._by_user_date[(record.user_id, record.work_date)] = stored
        return stored

    def all(self) -> list[AttendanceRecord]:
        return list(self._by_user_date.values())

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._by_user_date.get((user_id, work_date))

    def list_for_user(self, user_id: int, limit: Optional[int] = None):
        items = sorted((r for r in self.all() if r.user_id == user_id), key=lambda r: r.work_date, reverse=True)
        return items[:limit] if limit else items

    def list_for_user_between(self, user_id: int, *, start_date: date, end_date: date):
        return [r for r in self.list_for_user(user_id) if start_date <= r.work_date <= end_date]

    def create(self, record: AttendanceRecord) -> int:
        if (record.user_id, record.work_date) in self._by_user_date:
            raise DuplicateKeyError(f"{record.user_id}/{record.work_date}")
        return self.add(record).attendance_id

    def update_clock_out(self, record: AttendanceRecord) -> bool:
        key = (record.user_id, record.work_date)
        if key not in self._by_user_date:
            return False
        self._by_user_date[key] = record
        return True

    def upsert(self, record: AttendanceRecord) -> int:
        existing = self._by_user_date.get((record.user_id, record.work_date))
        if existing:
            self._by_user_date[(record.user_id, record.work_date)] = replace(
                record, attendance_id=existing.attendance_id
            )
            return existing.attendance_id
        return self.add(record).attendance_id

    def get_report_rows(self, *, start_date=None, end_date=None, user_id=None):
        rows = []
        for r in sorted(self.all(), key=lambda r: (r.work_date, r.user_id), reverse=True):
            if start_date and end_date and not (start_date <= r.work_date <= end_date):
                continue
            if user_id is not None and r.user_id != user_id:
                continue
            employee = self._users.get_by_id(r.user_id) if self._users else None
            rows.append(
                AttendanceReportRow(
                    record=r,
                    full_name=employee.full_name if employee else "",
                    email=employee.email if employee else "",
                )
            )
        return rows


class InMemoryPayrolls:
    def __init__(self, users: Optional[InMemoryUsers] = None):
        self._users = users
        self._by_id: dict[int, PayrollRecord] = {}
        self._id = 0

    def _decorate(self, record: PayrollRecord) -> PayrollRecord:
        employee = self._users.get_by_id(record.user_id) if self._users else None
        if not employee:
            return record
        return replace(
            record,
            employee_name=employee.full_name,
            employee_email=employee.email,
            employee_position=employee.position,
        )

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        record = self._by_id.get(payroll_id)
        return self._decorate(record) if record else None

    def get_for_user_and_period(self, user_id: int, *, month: int, year: int) -> Optional[PayrollRecord]:
        for r in self._by_id.values():
            if r.user_id == user_id and r.period.month == month and r.period.year == year:
                return self._decorate(r)
        return None

    def create(self, record: PayrollRecord) -> int:
        if self.get_for_user_and_period(record.user_id, month=record.period.month, year=record.period.year):
            raise DuplicateKeyError(f"{record.user_id}/{record.period.month}/{record.period.year}")
        self._id += 1
        self._by_id[self._id] = replace(record, payroll_id=self._id)
        return self._id

    def update_status(self, *, payroll_id: int, status: PayrollStatus, paid_date: Optional[datetime]) -> bool:
        record = self._by_id.get(payroll_id)
        if not record:
            return False
        self._by_id[payroll_id] = replace(record, status=status, paid_date=paid_date)
        return True

    def delete_by_id(self, payroll_id: int) -> bool:
        return self._by_id.pop(payroll_id, None) is not None

    def list_records(self, *, year=None, month=None, status=None, user_id=None):
        items = []
        for r in self._by_id.values():
            if year is not None and r.period.year != year:
                continue
            if month is not None and r.period.month != month:
                continue
            if status is not None and r.status != status:
                continue
            if user_id is not None and r.user_id != user_id:
                continue
            items.append(self._decorate(r))
        return items


class InMemoryNotifications:
    def __init__(self, *, fail: bool = False):
        self.fail = fail
        self.items: list[Notification] = []

    def create(self, *, recipient_id, sender_id, title, message, type: NotificationType) -> int:
        if self.fail:
            raise RuntimeError("notification store unavailable")
        notification_id = len(self.items) + 1
        self.items.append(
            Notification(
                notification_id=notification_id,
                recipient_id=recipient_id,
                sender_id=sender_id,
                title=title,
                message=message,
                type=type,
                is_read=False,
                created_at=datetime(2026, 3, 1, 9, 0, 0),
            )
        )
        return notification_id

    def create_many(self, *, recipient_ids, sender_id, title, message, type) -> int:
        for rid in recipient_ids:
            self.create(recipient_id=rid, sender_id=sender_id, title=title, message=message, type=type)
        return len(recipient_ids)

    def for_user(self, recipient_id: int) -> list[Notification]:
        return [n for n in self.items if n.recipient_id == recipient_id]

    def list_for_recipient(self, recipient_id: int, *, limit: int):
        return list(reversed(self.for_user(recipient_id)))[:limit]

    def count_unread(self, recipient_id: int) -> int:
        return sum(1 for n in self.for_user(recipient_id) if not n.is_read)

    def mark_read(self, *, notification_id, recipient_id, read_at):
        for i, n in enumerate(self.items):
            if n.notification_id == notification_id and n.recipient_id == recipient_id:
                self.items[i] = replace(n, is_read=True, read_at=read_at)
                return self.items[i]
        return None

    def mark_all_read(self, *, recipient_id, read_at) -> int:
        count = 0
        for i, n in enumerate(self.items):
            if n.recipient_id == recipient_id and not n.is_read:
                self.items[i] = replace(n, is_read=True, read_at=read_at)
                count += 1
        return count


class InMemoryDepartments:
    def __init__(self, users: Optional[InMemoryUsers] = None, *departments: Department):
        self._users = users
        self._by_id: dict[int, Department] = {d.dept_id: d for d in departments}
        self._next_id = max(self._by_id, default=0) + 1
        if users is not None:
            users.departments = self

    def name_of(self, dept_id: int) -> Optional[str]:
        department = self._by_id.get(dept_id)
        return department.name if department else None

    def _with_count(self, department: Department) -> Department:
        members = [e for e in self._users.raw() if e.department_id == department.dept_id] if self._users else []
        return replace(department, employee_count=len(members))

    def get_by_id(self, dept_id: int) -> Optional[Department]:
        department = self._by_id.get(dept_id)
        return self._with_count(department) if department else None

    def get_by_name(self, name: str) -> Optional[Department]:
        return next((self._with_count(d) for d in self._by_id.values() if d.name == name), None)

    def list_all(self):
        return [self._with_count(d) for d in sorted(self._by_id.values(), key=lambda d: d.name)]

    def create(self, *, name: str, description: str) -> int:
        if any(d.name == name for d in self._by_id.values()):
            raise DuplicateKeyError(name)
        dept_id = self._next_id
        self._next_id += 1
        self._by_id[dept_id] = Department(dept_id=dept_id, name=name, description=description)
        return dept_id

    def delete_by_id(self, dept_id: int) -> bool:
        if self._users:
            for e in self._users.raw():
                if e.department_id == dept_id:
                    self._users.update_user(replace(e, department_id=None, department_name=None))
        return self._by_id.pop(dept_id, None) is not None

    def count_all(self) -> int:
        return len(self._by_id)


class InMemoryLeaves:
    def __init__(self, users: Optional[InMemoryUsers] = None, *types: LeaveType):
        self._users = users
        self._types: dict[int, LeaveType] = {t.leave_type_id: t for t in types}
        self._requests: dict[int, LeaveRequest] = {}
        self._type_id = max(self._types, default=0)
        self._request_id = 0

    def add_request(self, request: LeaveRequest) -> LeaveRequest:
        """Test helper: store a request directly."""
        self._request_id += 1
        stored = replace(request, leave_request_id=self._request_id)
        self._requests[self._request_id] = stored
        return stored

    def _decorate(self, request: LeaveRequest) -> LeaveRequest:
        leave_type = self._types.get(request.leave_type_id)
        employee = self._users.get_by_id(request.user_id) if self._users else None
        approver = self._users.get_by_id(request.approver_id) if self._users and request.approver_id else None
        return replace(
            request,
            leave_type_name=leave_type.name if leave_type else None,
            employee_name=employee.full_name if employee else None,
            employee_email=employee.email if employee else None,
            employee_position=employee.position if employee else None,
            department_name=employee.department_name if employee else None,
            approver_name=approver.full_name if approver else None,
        )

    def _newest_first(self, requests):
        return sorted(requests, key=lambda r: (r.created_at or datetime.min, r.leave_request_id), reverse=True)

    def list_types(self):
        return sorted(self._types.values(), key=lambda t: t.name)

    def get_type(self, leave_type_id: int) -> Optional[LeaveType]:
        return self._types.get(leave_type_id)

    def get_type_by_name(self, name: str) -> Optional[LeaveType]:
        return next((t for t in self._types.values() if t.name == name), None)

    def create_type(self, *, name, description, max_days, requires_approval) -> int:
        if self.get_type_by_name(name):
            raise DuplicateKeyError(name)
        self._type_id += 1
        self._types[self._type_id] = LeaveType(
            leave_type_id=self._type_id,
            name=name,
            description=description,
            max_days=max_days,
            requires_approval=requires_approval,
        )
        return self._type_id

    def delete_type(self, leave_type_id: int) -> bool:
        return self._types.pop(leave_type_id, None) is not None

    def count_requests_for_type(self, leave_type_id: int) -> int:
        return sum(1 for r in self._requests.values() if r.leave_type_id == leave_type_id)

    def create_request(self, request: LeaveRequest) -> int:
        return self.add_request(request).leave_request_id

    def get_request(self, leave_request_id: int) -> Optional[LeaveRequest]:
        request = self._requests.get(leave_request_id)
        return self._decorate(request) if request else None

    def find_open_request(self, user_id: int, leave_type_id: int) -> Optional[LeaveRequest]:
        open_statuses = (LeaveStatus.PENDING, LeaveStatus.APPROVED)
        for r in self._newest_first(self._requests.values()):
            if r.user_id == user_id and r.leave_type_id == leave_type_id and r.status in open_statuses:
                return self._decorate(r)
        return None

    def update_request_status(self, *, leave_request_id, status, approver_id, approved_date) -> bool:
        request = self._requests.get(leave_request_id)
        if not request:
            return False
        self._requests[leave_request_id] = replace(
            request, status=status, approver_id=approver_id, approved_date=approved_date
        )
        return True

    def list_for_user(self, user_id: int, *, limit=None, offset: int = 0):
        items = [self._decorate(r) for r in self._newest_first(self._requests.values()) if r.user_id == user_id]
        return items[offset : offset + limit] if limit else items[offset:]

    def count_for_user(self, user_id: int) -> int:
        return sum(1 for r in self._requests.values() if r.user_id == user_id)

    def list_all(self):
        return [self._decorate(r) for r in self._newest_first(self._requests.values())]

    def count_all(self) -> int:
        return len(self._requests)

    def count_created_between(self, start: datetime, end: datetime) -> int:
        return sum(1 for r in self._requests.values() if r.created_at and start <= r.created_at < end)

    def count_approved_overlapping(self, start_date: date, end_date: date) -> int:
        return sum(
            1
            for r in self._requests.values()
            if r.status == LeaveStatus.APPROVED and r.start_date <= end_date and r.end_date >= start_date
        )
