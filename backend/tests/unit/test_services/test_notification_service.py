"""Notification Dispatcher"""
import pytest

from portal.domain.enums import NotificationSeverity
from portal.domain.errors import NotFoundError
from portal.services.notification_service import NotificationService
from tests.factories import HOLDER, OTHER_HOLDER


@pytest.fixture
def service(store):
    return NotificationService(store)


def test_send_stores_unread_notification(service):
    notification = service.send(HOLDER, "Application Submitted", "Pending review", application_id="APP-1")

    assert notification.severity == NotificationSeverity.INFO
    assert not notification.is_read
    assert [n.notification_id for n in service.list_for_holder(HOLDER)] == [notification.notification_id]
    assert service.unread_count(HOLDER) == 1


def test_send_never_raises(service, monkeypatch):
    def fail(notification):
        raise RuntimeError("write refused")

    monkeypatch.setattr(service.repo, "create_notification", fail)

    assert service.send(HOLDER, "Application Approved", "Ready soon") is None


def test_inbox_is_per_holder(service):
    service.send(HOLDER, "Mine", "For the holder")
    service.send(OTHER_HOLDER, "Theirs", "For someone else")

    assert [n.title for n in service.list_for_holder(HOLDER)] == ["Mine"]


def test_mark_as_read(service):
    notification = service.send(HOLDER, "Application Approved", "Ready soon")

    read = service.mark_as_read(notification.notification_id, HOLDER)

    assert read.is_read
    assert read.read_at is not None
    assert service.unread_count(HOLDER) == 0
    assert service.list_for_holder(HOLDER, unread_only=True) == []


def test_cannot_mark_another_holders_notification(service):
    notification = service.send(OTHER_HOLDER, "Application Approved", "Ready soon")

    with pytest.raises(NotFoundError):
        service.mark_as_read(notification.notification_id, HOLDER)

    assert service.unread_count(OTHER_HOLDER) == 1


def test_mark_all_as_read(service):
    for title in ("One", "Two", "Three"):
        service.send(HOLDER, title, "Message")
    service.send(OTHER_HOLDER, "Other", "Message")

    assert service.mark_all_as_read(HOLDER) == 3
    assert service.unread_count(HOLDER) == 0
    assert service.unread_count(OTHER_HOLDER) == 1
    assert service.mark_all_as_read(HOLDER) == 0
