"""Application Repository - Data access for service applications"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pymongo import DESCENDING

from .data_store import DataStore, get_data_store
from ..domain.models import Application
from ..domain.enums import ApplicationStatus
from ..domain.errors import ApplicationNotFoundError
from ..utils.logger import get_logger
from ..utils.time import format_iso

logger = get_logger(__name__)


class ApplicationRepository:
    """Repository for application operations"""

    TABLE = "applications"

    def __init__(self, store: Optional[DataStore] = None):
        self._store = store or get_data_store()

    def create_application(self, application: Application) -> Application:
        """Create application record"""
        self._store.insert(self.TABLE, application.model_dump(mode="json"))
        logger.info(
            f"Created application: {application.application_id}",
            extra={
                "application_id": application.application_id,
                "holder_id": application.holder_id
            }
        )
        return application

    def get_application(self, application_id: str) -> Optional[Application]:
        """Get application by ID"""
        doc = self._store.find_one(self.TABLE, {"application_id": application_id})
        if doc:
            return Application.model_validate(doc)
        return None

    def get_application_or_raise(self, application_id: str) -> Application:
        """Get application by ID or raise error"""
        application = self.get_application(application_id)
        if not application:
            raise ApplicationNotFoundError(
                f"Application {application_id} not found",
                details={"application_id": application_id}
            )
        return application

    def is_pending(self, application_id: str) -> bool:
        """Read the stored status fresh; True while no decision has committed"""
        return self._store.count(
            self.TABLE,
            {"application_id": application_id, "status": ApplicationStatus.PENDING.value}
        ) > 0

    def delete_application(self, application_id: str) -> int:
        """Remove an application record (used to undo a submission that failed midway)"""
        deleted = self._store.delete(self.TABLE, {"application_id": application_id})
        if deleted:
            logger.warning(
                f"Deleted application: {application_id}",
                extra={"application_id": application_id}
            )
        return deleted

    def list_applications(
        self,
        status: Optional[ApplicationStatus] = None,
        holder_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 50
    ) -> List[Application]:
        """List applications, newest first"""
        docs = self._store.find_many(
            self.TABLE,
            self._build_query(status, holder_id),
            order=[("submitted_at", DESCENDING)],
            limit=limit,
            skip=skip
        )
        return [Application.model_validate(doc) for doc in docs]

    def count_applications(
        self,
        status: Optional[ApplicationStatus] = None,
        holder_id: Optional[str] = None
    ) -> int:
        """Count applications matching filters"""
        return self._store.count(self.TABLE, self._build_query(status, holder_id))

    def decide_if_pending(
        self,
        application_id: str,
        new_status: ApplicationStatus,
        reviewer_id: str,
        reviewed_at: datetime,
        rejection_reason: Optional[str] = None
    ) -> bool:
        """
        Move a Pending application to a terminal status.

        The write only matches while the stored status is still Pending, so
        of two concurrent decisions exactly one succeeds. Returns False when
        nothing matched.
        """
        patch: Dict[str, Any] = {
            "status": ApplicationStatus(new_status).value,
            "reviewed_at": format_iso(reviewed_at),
            "reviewed_by": reviewer_id
        }
        if rejection_reason is not None:
            patch["rejection_reason"] = rejection_reason

        matched = self._store.update(
            self.TABLE,
            {"application_id": application_id, "status": ApplicationStatus.PENDING.value},
            patch
        )
        if matched:
            logger.info(
                f"Application {application_id} -> {patch['status']}",
                extra={
                    "application_id": application_id,
                    "actor_id": reviewer_id,
                    "status": patch["status"]
                }
            )
        return matched > 0

    @staticmethod
    def _build_query(
        status: Optional[ApplicationStatus],
        holder_id: Optional[str]
    ) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        if status:
            query["status"] = ApplicationStatus(status).value
        if holder_id:
            query["holder_id"] = holder_id
        return query
