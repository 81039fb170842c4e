"""Document Repository - Data access for issued documents (the registry)"""
from typing import List, Optional
from pymongo import DESCENDING

from .data_store import DataStore, get_data_store
from ..domain.models import Document
from ..domain.enums import DocumentType, DocumentStatus
from ..utils.logger import get_logger

logger = get_logger(__name__)


class DocumentRepository:
    """Repository for issued document operations"""

    TABLE = "documents"

    def __init__(self, store: Optional[DataStore] = None):
        self._store = store or get_data_store()

    def create_document(self, document: Document) -> Document:
        """Create issued document record"""
        self._store.insert(self.TABLE, document.model_dump(mode="json"))
        logger.info(
            f"Issued document {document.document_number}",
            extra={
                "document_id": document.document_id,
                "holder_id": document.holder_id,
                "application_id": document.application_id
            }
        )
        return document

    def get_document(self, document_id: str) -> Optional[Document]:
        """Get document by ID"""
        doc = self._store.find_one(self.TABLE, {"document_id": document_id})
        if doc:
            return Document.model_validate(doc)
        return None

    def get_by_application(self, application_id: str) -> Optional[Document]:
        """Get the document issued for an application"""
        doc = self._store.find_one(self.TABLE, {"application_id": application_id})
        if doc:
            return Document.model_validate(doc)
        return None

    def find_latest_active(
        self,
        holder_id: str,
        document_type: DocumentType
    ) -> Optional[Document]:
        """Most recently created active document of a type for a holder"""
        doc = self._store.find_one(
            self.TABLE,
            {
                "holder_id": holder_id,
                "document_type": DocumentType(document_type).value,
                "status": DocumentStatus.ACTIVE.value
            },
            order=[("created_at", DESCENDING)]
        )
        if doc:
            return Document.model_validate(doc)
        return None

    def list_active(
        self,
        holder_id: str,
        document_type: DocumentType,
        exclude_document_id: Optional[str] = None
    ) -> List[Document]:
        """All active documents of a type for a holder"""
        query = {
            "holder_id": holder_id,
            "document_type": DocumentType(document_type).value,
            "status": DocumentStatus.ACTIVE.value
        }
        if exclude_document_id:
            query["document_id"] = {"$ne": exclude_document_id}

        docs = self._store.find_many(self.TABLE, query, order=[("created_at", DESCENDING)])
        return [Document.model_validate(doc) for doc in docs]

    def list_for_holder(self, holder_id: str) -> List[Document]:
        """All documents ever issued to a holder, newest first"""
        docs = self._store.find_many(
            self.TABLE, {"holder_id": holder_id}, order=[("created_at", DESCENDING)]
        )
        return [Document.model_validate(doc) for doc in docs]

    def supersede(
        self,
        document_id: str,
        new_status: DocumentStatus,
        superseded_by: str
    ) -> bool:
        """
        Retire an active document in favour of a newer one.

        Only flips records that are still active; returns False when the
        document was already retired.
        """
        matched = self._store.update(
            self.TABLE,
            {"document_id": document_id, "status": DocumentStatus.ACTIVE.value},
            {"status": DocumentStatus(new_status).value, "superseded_by": superseded_by}
        )
        if matched:
            logger.info(
                f"Document {document_id} superseded by {superseded_by}",
                extra={"document_id": document_id, "status": DocumentStatus(new_status).value}
            )
        return matched > 0
