"""Notification Repository - Data access for the citizen inbox"""
from datetime import datetime
from typing import List, Optional
from pymongo import DESCENDING

from .data_store import DataStore, get_data_store
from ..domain.models import Notification
from ..utils.logger import get_logger
from ..utils.time import format_iso

logger = get_logger(__name__)


class NotificationRepository:
    """Repository for holder notification operations"""

    TABLE = "notifications"

    def __init__(self, store: Optional[DataStore] = None):
        self._store = store or get_data_store()

    def create_notification(self, notification: Notification) -> Notification:
        """Create notification record"""
        self._store.insert(self.TABLE, notification.model_dump(mode="json"))
        return notification

    def get_notification(self, notification_id: str) -> Optional[Notification]:
        """Get notification by ID"""
        doc = self._store.find_one(self.TABLE, {"notification_id": notification_id})
        if doc:
            return Notification.model_validate(doc)
        return None

    def list_for_holder(
        self,
        holder_id: str,
        unread_only: bool = False,
        skip: int = 0,
        limit: int = 50
    ) -> List[Notification]:
        """Holder's notifications, newest first"""
        query = {"holder_id": holder_id}
        if unread_only:
            query["is_read"] = False

        docs = self._store.find_many(
            self.TABLE, query, order=[("created_at", DESCENDING)], limit=limit, skip=skip
        )
        return [Notification.model_validate(doc) for doc in docs]

    def list_for_application(self, application_id: str) -> List[Notification]:
        """Notifications about one application, newest first"""
        docs = self._store.find_many(
            self.TABLE, {"application_id": application_id}, order=[("created_at", DESCENDING)]
        )
        return [Notification.model_validate(doc) for doc in docs]

    def count_unread(self, holder_id: str) -> int:
        """Count unread notifications for a holder"""
        return self._store.count(self.TABLE, {"holder_id": holder_id, "is_read": False})

    def mark_as_read(self, notification_id: str, holder_id: str, read_at: datetime) -> bool:
        """Mark one of the holder's notifications as read"""
        matched = self._store.update(
            self.TABLE,
            {"notification_id": notification_id, "holder_id": holder_id},
            {"is_read": True, "read_at": format_iso(read_at)}
        )
        return matched > 0

    def mark_all_as_read(self, holder_id: str, read_at: datetime) -> int:
        """Mark all unread notifications for a holder as read"""
        count = self._store.update(
            self.TABLE,
            {"holder_id": holder_id, "is_read": False},
            {"is_read": True, "read_at": format_iso(read_at)}
        )
        logger.info(f"Marked {count} notifications as read", extra={"holder_id": holder_id})
        return count
