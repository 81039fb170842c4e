"""MongoDB connection and index bootstrap for the portal tables"""
from typing import Any, Dict, List, Optional, Tuple, Union
from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.errors import ConnectionFailure

from ..config.settings import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)

IndexKeys = Union[str, List[Tuple[str, int]]]

# table -> [(keys, unique)]
INDEXES: Dict[str, List[Tuple[IndexKeys, bool]]] = {
    "documents": [
        ("document_id", True),
        ("document_number", True),
        ([("holder_id", ASCENDING), ("document_type", ASCENDING),
          ("status", ASCENDING), ("created_at", DESCENDING)], False),
    ],
    "applications": [
        ("application_id", True),
        ([("holder_id", ASCENDING), ("submitted_at", DESCENDING)], False),
        ([("status", ASCENDING), ("submitted_at", DESCENDING)], False),
    ],
    "uploaded_documents": [
        ("upload_id", True),
        ([("application_id", ASCENDING), ("uploaded_at", ASCENDING)], False),
    ],
    "print_queue": [
        ("queue_id", True),
        ("application_id", True),
        ([("print_status", ASCENDING), ("approval_date", ASCENDING)], False),
    ],
    "notifications": [
        ("notification_id", True),
        ([("holder_id", ASCENDING), ("is_read", ASCENDING), ("created_at", DESCENDING)], False),
        ("application_id", False),
    ],
    "services": [("service_id", True)],
    "users": [("holder_id", True)],
    "admin_logs": [
        ("log_id", True),
        ("target_id", False),
        ([("admin_id", ASCENDING), ("timestamp", DESCENDING)], False),
    ],
}

_client: Optional[MongoClient] = None
_database: Optional[Database] = None


def get_client() -> MongoClient:
    """Shared client; the first call pings the server so bad config fails fast"""
    global _client
    if _client is not None:
        return _client

    client = MongoClient(
        settings.mongo_uri,
        tz_aware=True,
        serverSelectionTimeoutMS=5000,
        connectTimeoutMS=5000,
        socketTimeoutMS=30000,
    )
    try:
        client.admin.command("ping")
    except ConnectionFailure as e:
        logger.error(f"Cannot reach MongoDB at {settings.mongo_uri}: {e}")
        client.close()
        raise

    logger.info(f"Connected to MongoDB, database {settings.mongo_db}")
    _client = client
    return _client


def get_database() -> Database:
    global _database
    if _database is None:
        _database = get_client()[settings.mongo_db]
    return _database


def close_connection() -> None:
    global _client, _database
    if _client is None:
        return
    _client.close()
    _client = None
    _database = None
    logger.info("MongoDB connection closed")


def create_indexes(db: Optional[Database] = None) -> None:
    """Create the indexes in INDEXES (idempotent)"""
    db = db if db is not None else get_database()
    for table, indexes in INDEXES.items():
        for keys, unique in indexes:
            db[table].create_index(keys, unique=unique)
    logger.info(f"Indexes ensured on {len(INDEXES)} tables")


def health_check() -> Dict[str, Any]:
    """Ping result for the /health endpoint"""
    report: Dict[str, Any] = {"database": settings.mongo_db}
    try:
        get_client().admin.command("ping")
        report["status"] = "healthy"
    except Exception as e:
        logger.error(f"MongoDB health check failed: {e}")
        report.update(status="unhealthy", error=str(e))
    return report
