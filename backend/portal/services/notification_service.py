"""Notification Service - One-way status messages to holders

Delivery is best-effort: ``send`` never raises. A failed write is logged
and reported to the caller as ``None`` so approval and print flows can
record it without unwinding their own committed changes.
"""
from typing import List, Optional

from ..domain.models import Notification
from ..domain.enums import NotificationSeverity
from ..domain.errors import NotFoundError
from ..repositories.data_store import DataStore
from ..repositories.notification_repo import NotificationRepository
from ..utils.idgen import generate_notification_id
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)


class NotificationService:
    """Service for holder notifications"""

    def __init__(self, store: Optional[DataStore] = None):
        self.repo = NotificationRepository(store)

    # =========================================================================
    # Dispatch
    # =========================================================================

    def send(
        self,
        holder_id: Optional[str],
        title: str,
        message: str,
        severity: NotificationSeverity = NotificationSeverity.INFO,
        application_id: Optional[str] = None
    ) -> Optional[Notification]:
        """
        Record a notification for a holder.

        Returns the stored notification, or None when it could not be
        written.
        """
        try:
            notification = Notification(
                notification_id=generate_notification_id(),
                holder_id=holder_id,
                title=title,
                message=message,
                severity=severity,
                application_id=application_id,
                created_at=utc_now()
            )
            self.repo.create_notification(notification)
            logger.info(
                f"Notification sent: {title}",
                extra={
                    "notification_id": notification.notification_id,
                    "holder_id": holder_id,
                    "application_id": application_id
                }
            )
            return notification
        except Exception as e:
            logger.warning(
                f"Failed to send notification '{title}': {e}",
                extra={"holder_id": holder_id, "application_id": application_id}
            )
            return None

    # =========================================================================
    # Inbox
    # =========================================================================

    def list_for_holder(
        self,
        holder_id: str,
        unread_only: bool = False,
        skip: int = 0,
        limit: int = 50
    ) -> List[Notification]:
        return self.repo.list_for_holder(holder_id, unread_only=unread_only, skip=skip, limit=limit)

    def unread_count(self, holder_id: str) -> int:
        return self.repo.count_unread(holder_id)

    def mark_as_read(self, notification_id: str, holder_id: str) -> Notification:
        """Mark one notification read; only the owning holder may do so"""
        if not self.repo.mark_as_read(notification_id, holder_id, utc_now()):
            raise NotFoundError(
                f"Notification {notification_id} not found",
                details={"notification_id": notification_id}
            )
        return self.repo.get_notification(notification_id)

    def mark_all_as_read(self, holder_id: str) -> int:
        return self.repo.mark_all_as_read(holder_id, utc_now())
