"""Admin Log Repository - Append-only admin action records"""
from typing import List, Optional
from pymongo import DESCENDING

from .data_store import DataStore, get_data_store
from ..domain.models import AdminLog
from ..utils.logger import get_logger

logger = get_logger(__name__)


class AdminLogRepository:
    """Repository for admin log operations (append-only)"""

    TABLE = "admin_logs"

    def __init__(self, store: Optional[DataStore] = None):
        self._store = store or get_data_store()

    def create_entry(self, entry: AdminLog) -> AdminLog:
        """Append an admin log entry"""
        self._store.insert(self.TABLE, entry.model_dump(mode="json"))
        logger.debug(
            f"Admin log: {entry.action.value} on {entry.target_id}",
            extra={"actor_id": entry.admin_id, "action": entry.action.value}
        )
        return entry

    def list_for_target(self, target_id: str) -> List[AdminLog]:
        """Entries about one target, newest first"""
        docs = self._store.find_many(
            self.TABLE, {"target_id": target_id}, order=[("timestamp", DESCENDING)]
        )
        return [AdminLog.model_validate(doc) for doc in docs]

    def list_for_admin(self, admin_id: str, limit: int = 100) -> List[AdminLog]:
        """Entries written by one admin, newest first"""
        docs = self._store.find_many(
            self.TABLE, {"admin_id": admin_id}, order=[("timestamp", DESCENDING)], limit=limit
        )
        return [AdminLog.model_validate(doc) for doc in docs]
