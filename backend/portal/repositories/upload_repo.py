"""Upload Repository - Data access for citizen-uploaded evidence"""
from typing import Any, Dict, List, Optional
from pymongo import ASCENDING

from .data_store import DataStore, get_data_store
from ..domain.models import UploadedDocument
from ..domain.enums import UploadStatus
from ..domain.errors import UploadNotFoundError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class UploadRepository:
    """Repository for uploaded document operations"""

    TABLE = "uploaded_documents"

    def __init__(self, store: Optional[DataStore] = None):
        self._store = store or get_data_store()

    def create_uploads(self, uploads: List[UploadedDocument]) -> List[UploadedDocument]:
        """Insert all uploads of one submission in a single batch"""
        if not uploads:
            return []
        self._store.insert_many(self.TABLE, [u.model_dump(mode="json") for u in uploads])
        logger.info(
            f"Stored {len(uploads)} uploads",
            extra={"application_id": uploads[0].application_id}
        )
        return uploads

    def get_upload(self, upload_id: str) -> Optional[UploadedDocument]:
        """Get upload by ID"""
        doc = self._store.find_one(self.TABLE, {"upload_id": upload_id})
        if doc:
            return UploadedDocument.model_validate(doc)
        return None

    def get_upload_or_raise(self, upload_id: str) -> UploadedDocument:
        """Get upload by ID or raise error"""
        upload = self.get_upload(upload_id)
        if not upload:
            raise UploadNotFoundError(
                f"Uploaded document {upload_id} not found",
                details={"upload_id": upload_id}
            )
        return upload

    def list_for_application(self, application_id: str) -> List[UploadedDocument]:
        """All uploads of an application, oldest first"""
        docs = self._store.find_many(
            self.TABLE,
            {"application_id": application_id},
            order=[("uploaded_at", ASCENDING)]
        )
        return [UploadedDocument.model_validate(doc) for doc in docs]

    def update_if_status(
        self,
        upload_id: str,
        expected_status: UploadStatus,
        updates: Dict[str, Any]
    ) -> bool:
        """
        Apply a patch only while the stored status is still ``expected_status``.

        Returns False when another reviewer changed the upload first.
        """
        matched = self._store.update(
            self.TABLE,
            {"upload_id": upload_id, "status": UploadStatus(expected_status).value},
            updates
        )
        return matched > 0

    def delete_for_application(self, application_id: str) -> int:
        """Remove every upload of an application"""
        return self._store.delete(self.TABLE, {"application_id": application_id})
