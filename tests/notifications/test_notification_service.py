from datetime import datetime

import pytest

from src.hr_payroll.hr_payroll.core.enums import NotificationType, Role
from src.hr_payroll.hr_payroll.core.exceptions import NotFoundError, ValidationError
from src.hr_payroll.hr_payroll.notifications.service import NotificationService
from tests.fakes import InMemoryNotifications, InMemoryUsers, make_employee


@pytest.fixture
def users():
    return InMemoryUsers(
        make_employee(1, "Admin Boss", role=Role.ADMIN),
        make_employee(2, "Jane Doe"),
        make_employee(3, "John Roe"),
    )


@pytest.fixture
def store():
    return InMemoryNotifications()


@pytest.fixture
def service(store, users):
    return NotificationService(store, users)


def test_notify_swallows_storage_errors(users):
    service = NotificationService(InMemoryNotifications(fail=True), users)

    result = service.notify(recipient_id=2, title="t", message="m", type=NotificationType.SYSTEM)

    assert result is None


def test_send_to_all_skips_sender(service, store):
    count = service.send(sender_id=1, recipients="all", title="Holiday", message="Office closed Friday")

    assert count == 2
    assert sorted(n.recipient_id for n in store.items) == [2, 3]
    assert all(n.type == NotificationType.SYSTEM for n in store.items)


def test_send_to_explicit_ids(service, store):
    assert service.send(sender_id=1, recipients=[3], title="Hi", message="Ping", type="payroll") == 1
    assert store.items[0].type == NotificationType.PAYROLL


@pytest.mark.parametrize("recipients", ["everyone", None, 7, ["x"]])
def test_send_rejects_bad_recipients(service, recipients):
    with pytest.raises(ValidationError, match="Recipients must be"):
        service.send(sender_id=1, recipients=recipients, title="t", message="m")


def test_send_to_unknown_user_is_rejected_before_storing(service, store):
    with pytest.raises(NotFoundError, match="Recipient not found: 42"):
        service.send(sender_id=1, recipients=[2, 42], title="Hi", message="Ping")

    assert store.items == []


def test_send_deduplicates_recipient_ids(service, store):
    assert service.send(sender_id=1, recipients=[3, "3", 2], title="Hi", message="Ping") == 2
    assert [n.recipient_id for n in store.items] == [3, 2]


def test_send_requires_someone(service):
    with pytest.raises(ValidationError, match="No recipients found"):
        service.send(sender_id=1, recipients=[], title="t", message="m")


def test_send_requires_title_and_message(service):
    with pytest.raises(ValidationError):
        service.send(sender_id=1, recipients="all", title=" ", message="m")


def test_read_tracking(service):
    for title in ("a", "b", "c"):
        service.notify(recipient_id=2, title=title, message="m", type=NotificationType.ATTENDANCE)
    service.notify(recipient_id=3, title="other", message="m", type=NotificationType.ATTENDANCE)

    assert [n.title for n in service.list_for_user(2)] == ["c", "b", "a"]
    assert service.unread_count(2) == 3

    read_at = datetime(2026, 3, 2, 12, 0)
    marked = service.mark_read(user_id=2, notification_id=1, now=read_at)
    assert marked.is_read and marked.read_at == read_at
    assert service.unread_count(2) == 2

    assert service.mark_all_read(user_id=2) == 2
    assert service.unread_count(2) == 0
    assert service.unread_count(3) == 1


def test_cannot_mark_someone_elses_notification(service):
    service.notify(recipient_id=3, title="private", message="m", type=NotificationType.SYSTEM)

    with pytest.raises(NotFoundError):
        service.mark_read(user_id=2, notification_id=1)
