"""
Data Store - the data-access capability the portal runs on.

Repositories only talk to a ``DataStore``. Filters are Mongo-style dicts
(``{"status": "Pending"}``, ``{"queue_id": {"$in": [...]}}``) and ``update``
returns the number of matched records, which is what conditional updates
("update where status=Pending") are checked against.

``MongoDataStore`` is the production implementation on pymongo.
"""
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
from pymongo.database import Database

from ..domain.enums import ChangeEventType
from ..domain.models import ChangeEvent
from ..utils.logger import get_logger

logger = get_logger(__name__)

SortSpec = Sequence[Tuple[str, int]]
ChangeCallback = Callable[[ChangeEvent], None]


class DataStore:
    """Abstract table store with change subscriptions"""

    def __init__(self):
        self._subscribers: Dict[str, List[ChangeCallback]] = defaultdict(list)

    # =========================================================================
    # Operations
    # =========================================================================

    def find_one(
        self,
        table: str,
        filter: Dict[str, Any],
        order: Optional[SortSpec] = None
    ) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def find_many(
        self,
        table: str,
        filter: Optional[Dict[str, Any]] = None,
        order: Optional[SortSpec] = None,
        limit: Optional[int] = None,
        skip: int = 0
    ) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def count(self, table: str, filter: Optional[Dict[str, Any]] = None) -> int:
        raise NotImplementedError

    def insert(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    def insert_many(self, table: str, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def update(self, table: str, filter: Dict[str, Any], patch: Dict[str, Any]) -> int:
        raise NotImplementedError

    def delete(self, table: str, filter: Dict[str, Any]) -> int:
        raise NotImplementedError

    # =========================================================================
    # Change Subscriptions
    # =========================================================================

    def on_change(self, table: str, callback: ChangeCallback) -> Callable[[], None]:
        """
        Subscribe to changes on a table.

        Returns a function that removes the subscription. Delivery is
        best-effort and only meant for keeping views fresh.
        """
        self._subscribers[table].append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers[table]:
                self._subscribers[table].remove(callback)

        return unsubscribe

    def _emit(self, event: ChangeEvent) -> None:
        for callback in list(self._subscribers.get(event.table, [])):
            try:
                callback(event)
            except Exception as e:
                logger.warning(f"Change subscriber failed for {event.table}: {e}")


class MongoDataStore(DataStore):
    """DataStore backed by a pymongo database"""

    def __init__(self, database: Database):
        super().__init__()
        self._db = database

    @staticmethod
    def _strip(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if doc is not None:
            doc.pop("_id", None)
        return doc

    def find_one(self, table, filter, order=None):
        if order:
            cursor = self._db[table].find(filter).sort(list(order)).limit(1)
            docs = list(cursor)
            return self._strip(docs[0]) if docs else None
        return self._strip(self._db[table].find_one(filter))

    def find_many(self, table, filter=None, order=None, limit=None, skip=0):
        cursor = self._db[table].find(filter or {})
        if order:
            cursor = cursor.sort(list(order))
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return [self._strip(doc) for doc in cursor]

    def count(self, table, filter=None):
        return self._db[table].count_documents(filter or {})

    def insert(self, table, record):
        # insert_one adds _id to the dict it is given
        doc = dict(record)
        self._db[table].insert_one(doc)
        self._emit(ChangeEvent(table=table, event_type=ChangeEventType.INSERT, records=[record], affected=1))
        return record

    def insert_many(self, table, records):
        if not records:
            return []
        docs = [dict(record) for record in records]
        self._db[table].insert_many(docs)
        self._emit(ChangeEvent(
            table=table, event_type=ChangeEventType.INSERT, records=list(records), affected=len(records)
        ))
        return records

    def update(self, table, filter, patch):
        result = self._db[table].update_many(filter, {"$set": patch})
        if result.matched_count:
            self._emit(ChangeEvent(
                table=table, event_type=ChangeEventType.UPDATE,
                filter=filter, patch=patch, affected=result.matched_count
            ))
        return result.matched_count

    def delete(self, table, filter):
        result = self._db[table].delete_many(filter)
        if result.deleted_count:
            self._emit(ChangeEvent(
                table=table, event_type=ChangeEventType.DELETE,
                filter=filter, affected=result.deleted_count
            ))
        return result.deleted_count


# Global store instance
_store: Optional[DataStore] = None


def get_data_store() -> DataStore:
    """Get or create the process-wide data store"""
    global _store
    if _store is None:
        from .mongo_client import get_database
        _store = MongoDataStore(get_database())
    return _store


def set_data_store(store: Optional[DataStore]) -> None:
    """Replace the process-wide data store (None resets it)"""
    global _store
    _store = store
