"""Print Queue Repository - Data access for the physical print queue"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from .data_store import DataStore, SortSpec, get_data_store
from ..domain.models import PrintQueueItem
from ..domain.enums import PrintStatus
from ..utils.logger import get_logger
from ..utils.time import format_iso

logger = get_logger(__name__)


class PrintQueueRepository:
    """Repository for print queue operations"""

    TABLE = "print_queue"

    def __init__(self, store: Optional[DataStore] = None):
        self._store = store or get_data_store()

    def create_item(self, item: PrintQueueItem) -> PrintQueueItem:
        """Create print queue item"""
        self._store.insert(self.TABLE, item.model_dump(mode="json"))
        logger.info(
            f"Queued for printing: {item.queue_id}",
            extra={"queue_id": item.queue_id, "application_id": item.application_id}
        )
        return item

    def get_item(self, queue_id: str) -> Optional[PrintQueueItem]:
        """Get print queue item by ID"""
        doc = self._store.find_one(self.TABLE, {"queue_id": queue_id})
        if doc:
            return PrintQueueItem.model_validate(doc)
        return None

    def get_by_application(self, application_id: str) -> Optional[PrintQueueItem]:
        """Get the queue item created for an application"""
        doc = self._store.find_one(self.TABLE, {"application_id": application_id})
        if doc:
            return PrintQueueItem.model_validate(doc)
        return None

    def list_items(
        self,
        query: Optional[Dict[str, Any]] = None,
        order: Optional[SortSpec] = None
    ) -> List[PrintQueueItem]:
        """List queue items matching a query"""
        docs = self._store.find_many(self.TABLE, query or {}, order=order)
        return [PrintQueueItem.model_validate(doc) for doc in docs]

    def mark_printed_if_pending(
        self,
        queue_id: str,
        operator_id: str,
        printed_at: datetime
    ) -> bool:
        """
        Flip an item to printed.

        Only matches items still pending_print; returns False otherwise so
        the first operator's printed_at/printed_by are never overwritten.
        """
        matched = self._store.update(
            self.TABLE,
            {"queue_id": queue_id, "print_status": PrintStatus.PENDING_PRINT.value},
            {
                "print_status": PrintStatus.PRINTED.value,
                "printed_at": format_iso(printed_at),
                "printed_by": operator_id
            }
        )
        return matched > 0
