"""Builders for test records"""
import base64
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from portal.domain.enums import DocumentType, DocumentStatus, PrintStatus
from portal.domain.models import (
    Document, PrintQueueItem, SubmissionRequest, UploadInput
)
from portal.repositories.document_repo import DocumentRepository
from portal.repositories.print_queue_repo import PrintQueueRepository
from portal.utils.idgen import generate_document_id, generate_queue_id

HOLDER = "10000000001"
HOLDER_NAME = "Layla Haddad"
OTHER_HOLDER = "10000000002"
ADMIN = "admin-001"
OFFICE = "Amman Central"

PDF_B64 = base64.b64encode(b"%PDF-1.4 sample evidence").decode()
PNG_B64 = base64.b64encode(b"\x89PNG\r\n\x1a\n sample photo").decode()

MANIFESTS = {
    1: ["national_id", "photo"],
    2: ["birth_certificate", "photo"],
    3: ["application_form"],
    4: ["national_id", "photo", "application_form"],
}


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def upload_input(document_type: str, mime_type: Optional[str] = None, data: Optional[str] = None) -> UploadInput:
    if mime_type is None:
        mime_type = "image/png" if document_type == "photo" else "application/pdf"
    if data is None:
        data = PNG_B64 if mime_type == "image/png" else PDF_B64
    return UploadInput(
        document_type=document_type,
        file_name=f"{document_type}.{mime_type.split('/')[-1]}",
        file_data=data,
        mime_type=mime_type
    )


def submission(service_id: int = 1, uploads: Optional[List[UploadInput]] = None, **kwargs) -> SubmissionRequest:
    """Submission covering the seeded manifest of the service"""
    if uploads is None:
        uploads = [upload_input(key) for key in MANIFESTS[service_id]]
    kwargs.setdefault("office_location", OFFICE)
    return SubmissionRequest(service_id=service_id, uploads=uploads, **kwargs)


def issue_document(
    store,
    holder_id: str = HOLDER,
    document_type: DocumentType = DocumentType.PASSPORT,
    expiry_date: Optional[datetime] = None,
    status: DocumentStatus = DocumentStatus.ACTIVE,
    created_at: Optional[datetime] = None,
    document_number: Optional[str] = None
) -> Document:
    created_at = created_at or datetime.now(timezone.utc) - timedelta(days=30)
    document = Document(
        document_id=generate_document_id(),
        holder_id=holder_id,
        document_type=document_type,
        document_number=document_number or f"{document_type.value[:2].upper()}-000001-{created_at.microsecond:06d}",
        issue_date=created_at,
        expiry_date=expiry_date,
        status=status,
        verification_code="https://verify.test/seed",
        created_at=created_at
    )
    return DocumentRepository(store).create_document(document)


def queue_item(
    store,
    approval_date: datetime,
    holder_id: str = HOLDER,
    holder_full_name: str = HOLDER_NAME,
    service_type: str = "Passport",
    office_location: str = OFFICE,
    print_status: PrintStatus = PrintStatus.PENDING_PRINT,
    printed_at: Optional[datetime] = None,
    application_id: Optional[str] = None
) -> PrintQueueItem:
    queue_id = generate_queue_id()
    item = PrintQueueItem(
        queue_id=queue_id,
        application_id=application_id or f"APP-{queue_id[3:]}",
        holder_id=holder_id,
        holder_full_name=holder_full_name,
        service_type=service_type,
        approval_date=approval_date,
        print_status=print_status,
        printed_at=printed_at,
        printed_by=ADMIN if print_status == PrintStatus.PRINTED else None,
        office_location=office_location,
        document_id=generate_document_id(),
        document_number="PA-123456-654321"
    )
    return PrintQueueRepository(store).create_item(item)
