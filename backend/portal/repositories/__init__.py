"""Repository modules - Data access layer"""
from .mongo_client import get_database
from .data_store import DataStore, MongoDataStore, get_data_store, set_data_store
from .document_repo import DocumentRepository
from .application_repo import ApplicationRepository
from .upload_repo import UploadRepository
from .print_queue_repo import PrintQueueRepository
from .notification_repo import NotificationRepository
from .catalog_repo import CatalogRepository
from .admin_log_repo import AdminLogRepository

__all__ = [
    "get_database",
    "DataStore",
    "MongoDataStore",
    "get_data_store",
    "set_data_store",
    "DocumentRepository",
    "ApplicationRepository",
    "UploadRepository",
    "PrintQueueRepository",
    "NotificationRepository",
    "CatalogRepository",
    "AdminLogRepository",
]
