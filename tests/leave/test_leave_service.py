from datetime import date, datetime

import pytest

from src.hr_payroll.hr_payroll.core.enums import EmployeeStatus, LeaveStatus, NotificationType, Role
from src.hr_payroll.hr_payroll.core.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from src.hr_payroll.hr_payroll.leave.model import LeaveType
from src.hr_payroll.hr_payroll.leave.service import LeaveService
from src.hr_payroll.hr_payroll.notifications.service import NotificationService
from tests.fakes import InMemoryLeaves, InMemoryNotifications, InMemoryUsers, make_employee

ANNUAL = LeaveType(leave_type_id=1, name="Annual Leave", description="Yearly", max_days=5, requires_approval=True)
COMPASSIONATE = LeaveType(
    leave_type_id=2, name="Compassionate", description="Family", max_days=3, requires_approval=False
)


@pytest.fixture
def users():
    return InMemoryUsers(
        make_employee(1, "Admin Boss", role=Role.ADMIN),
        make_employee(2, "Jane Doe"),
        make_employee(3, "Gone Away", status=EmployeeStatus.TERMINATED),
    )


@pytest.fixture
def leaves(users):
    return InMemoryLeaves(users, ANNUAL, COMPASSIONATE)


@pytest.fixture
def notifications():
    return InMemoryNotifications()


@pytest.fixture
def service(leaves, users, notifications):
    return LeaveService(leaves, users, NotificationService(notifications, users))


def test_apply_for_approval_notifies_employee_and_admins(service, notifications, fixed_now):
    result = service.apply(user_id=2, leave_type_id=1, now=fixed_now)

    assert result.action == "created"
    assert result.message == "Leave request submitted for approval"
    request = result.request
    assert request.status == LeaveStatus.PENDING
    assert (request.start_date, request.end_date) == (date(2026, 3, 2), date(2026, 3, 6))
    assert request.number_of_days == 5
    assert request.approved_date is None

    assert [n.title for n in notifications.for_user(2)] == ["Leave Requested"]
    admin_note = notifications.for_user(1)[0]
    assert admin_note.title == "Leave Approval Needed"
    assert admin_note.sender_id == 2
    assert all(n.type == NotificationType.LEAVE for n in notifications.items)


def test_apply_without_approval_puts_employee_on_leave(service, users, notifications, fixed_now):
    result = service.apply(user_id=2, leave_type_id=2, now=fixed_now)

    assert result.message == "Leave automatically approved"
    assert result.request.status == LeaveStatus.APPROVED
    assert result.request.approved_date == fixed_now
    assert users.get_by_id(2).employee_status == EmployeeStatus.ON_LEAVE
    assert [n.title for n in notifications.for_user(2)] == ["Leave Approved"]
    assert notifications.for_user(1) == []


def test_second_apply_cancels_open_request(service, leaves, users, notifications, fixed_now):
    first = service.apply(user_id=2, leave_type_id=2, now=fixed_now).request
    again = service.apply(user_id=2, leave_type_id=2, now=fixed_now)

    assert again.action == "removed"
    assert again.message == "Leave request removed"
    assert again.request.leave_request_id == first.leave_request_id
    assert leaves.get_request(first.leave_request_id).status == LeaveStatus.CANCELLED
    assert users.get_by_id(2).employee_status == EmployeeStatus.ACTIVE
    assert notifications.for_user(2)[-1].title == "Leave Cancelled"


def test_employee_on_leave_cannot_apply_for_another_type(service, fixed_now):
    service.apply(user_id=2, leave_type_id=2, now=fixed_now)

    with pytest.raises(AuthorizationError, match="Not eligible for leave"):
        service.apply(user_id=2, leave_type_id=1, now=fixed_now)


def test_terminated_employee_not_eligible(service, fixed_now):
    with pytest.raises(AuthorizationError):
        service.apply(user_id=3, leave_type_id=1, now=fixed_now)


def test_apply_unknown_type_or_employee(service, fixed_now):
    with pytest.raises(NotFoundError, match="Leave type not found"):
        service.apply(user_id=2, leave_type_id=99, now=fixed_now)
    with pytest.raises(NotFoundError, match="Employee not found"):
        service.apply(user_id=42, leave_type_id=1, now=fixed_now)


def test_toggle_decision_approves_then_rejects(service, leaves, users, notifications, fixed_now):
    request = service.apply(user_id=2, leave_type_id=1, now=fixed_now).request
    decided_at = datetime(2026, 3, 2, 10, 0)

    approved = service.toggle_decision(admin_id=1, leave_request_id=request.leave_request_id, now=decided_at)
    assert approved.status == LeaveStatus.APPROVED
    assert approved.approver_id == 1
    assert approved.approved_date == decided_at
    assert users.get_by_id(2).employee_status == EmployeeStatus.ON_LEAVE
    assert notifications.for_user(2)[-1].title == "Leave Approved"
    assert notifications.for_user(2)[-1].sender_id == 1

    rejected = service.toggle_decision(admin_id=1, leave_request_id=request.leave_request_id)
    assert rejected.status == LeaveStatus.REJECTED
    assert rejected.approved_date is None
    assert leaves.get_request(request.leave_request_id).approver_name == "Admin Boss"
    assert users.get_by_id(2).employee_status == EmployeeStatus.ACTIVE
    assert notifications.for_user(2)[-1].title == "Leave Rejected"


def test_cancelled_request_cannot_be_reviewed(service, fixed_now):
    request = service.apply(user_id=2, leave_type_id=1, now=fixed_now).request
    service.apply(user_id=2, leave_type_id=1, now=fixed_now)

    with pytest.raises(InvalidStateError):
        service.toggle_decision(admin_id=1, leave_request_id=request.leave_request_id)


def test_toggle_missing_request(service):
    with pytest.raises(NotFoundError):
        service.toggle_decision(admin_id=1, leave_request_id=99)


def test_create_leave_type(service, notifications):
    created = service.create_type(actor_id=1, name="Study", description="Exams", max_days="4")

    assert created.max_days == 4
    assert created.requires_approval is True
    assert [t.name for t in service.list_types()] == ["Annual Leave", "Compassionate", "Study"]
    assert notifications.for_user(1)[-1].title == "Leave Type Created"


@pytest.mark.parametrize(
    "fields,error",
    [
        (dict(name="", description="x", max_days=2), "All fields are required"),
        (dict(name="Study", description="x", max_days=None), "All fields are required"),
        (dict(name="Study", description="x", max_days=0), "Max days"),
        (dict(name="Study", description="x", max_days=2.5), "Max days"),
        (dict(name="Study", description="x", max_days=2, requires_approval="yes"), "requiresApproval"),
    ],
)
def test_create_leave_type_validation(service, fields, error):
    with pytest.raises(ValidationError, match=error):
        service.create_type(actor_id=1, **fields)


def test_create_duplicate_leave_type(service):
    with pytest.raises(ConflictError):
        service.create_type(actor_id=1, name="Annual Leave", description="x", max_days=2)


def test_delete_leave_type(service, notifications, fixed_now):
    service.apply(user_id=2, leave_type_id=1, now=fixed_now)

    with pytest.raises(InvalidStateError):
        service.delete_type(actor_id=1, leave_type_id=1)

    service.delete_type(actor_id=1, leave_type_id=2)
    assert [t.name for t in service.list_types()] == ["Annual Leave"]
    assert notifications.for_user(1)[-1].title == "Leave Type Deleted"

    with pytest.raises(NotFoundError):
        service.delete_type(actor_id=1, leave_type_id=2)


def test_history_paginates_newest_first(service):
    for day in (2, 3, 4):
        service.apply(user_id=2, leave_type_id=1, now=datetime(2026, 3, day, 8, 0))
        service.apply(user_id=2, leave_type_id=1, now=datetime(2026, 3, day, 9, 0))

    page = service.history(2, page="2", limit="2")

    assert [r["startDate"] for r in page["leaveRequests"]] == ["2026-03-02"]
    assert page["leaveRequests"][0]["status"] == "Cancelled"
    assert page["pagination"] == {
        "currentPage": 2,
        "totalPages": 2,
        "totalRequests": 3,
        "hasNext": False,
        "hasPrev": True,
    }


def test_history_rejects_bad_paging(service):
    with pytest.raises(ValidationError):
        service.history(2, page="0")
