"""Domain Models - Pydantic schemas for all entities"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict

from .enums import (
    DocumentType, DocumentStatus, ApplicationStatus, UploadStatus, PrintStatus,
    PriorityLevel, NotificationSeverity, ValidationOutcome, ApprovalStep,
    ChangeEventType, AdminAuditAction
)


# ============================================================================
# Actor
# ============================================================================

class ActorContext(BaseModel):
    """Current actor as asserted by the identity layer"""
    model_config = ConfigDict(extra="forbid")

    actor_id: str = Field(..., description="National number of the acting user")
    role: str = Field(default="citizen", description="citizen or admin")

    @property
    def is_admin(self) -> bool:
        return self.role.lower() == "admin"


# ============================================================================
# Catalog (read-only tables)
# ============================================================================

class Service(BaseModel):
    """Catalog entry a holder applies against"""
    model_config = ConfigDict(extra="ignore")

    service_id: int
    service_name: str
    description: Optional[str] = None
    fee: Optional[float] = None
    processing_time: Optional[str] = None
    required_documents: List[str] = Field(default_factory=list)
    is_active: bool = True


class UserProfile(BaseModel):
    """Holder profile used for display-name snapshots"""
    model_config = ConfigDict(extra="ignore")

    holder_id: str
    full_name: str
    phone_number: Optional[str] = None
    email: Optional[str] = None


# ============================================================================
# Issued Documents
# ============================================================================

class Document(BaseModel):
    """Issued credential"""
    model_config = ConfigDict(extra="forbid")

    document_id: str
    holder_id: str
    document_type: DocumentType
    document_number: str
    issue_date: datetime
    expiry_date: Optional[datetime] = Field(None, description="None means the document never expires")
    status: DocumentStatus = DocumentStatus.ACTIVE
    verification_code: str
    application_id: Optional[str] = None
    superseded_by: Optional[str] = Field(None, description="Document that replaced this one")
    created_at: datetime


class ExistingDocumentInfo(BaseModel):
    """What the eligibility check found about a holder's current document"""
    document_id: str
    document_number: str
    issue_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    status: DocumentStatus


class DocumentStatusSnapshot(BaseModel):
    """
    Answer from a document-status lookup path.

    Same shape whether it came from the direct query or the status endpoint.
    """
    exists: bool = False
    expired: bool = False
    expiry_date: Optional[datetime] = None
    document_id: Optional[str] = None
    document_status: Optional[DocumentStatus] = None
    document_number: Optional[str] = None
    issue_date: Optional[datetime] = None

    def to_existing_info(self) -> Optional[ExistingDocumentInfo]:
        if not self.document_id:
            return None
        return ExistingDocumentInfo(
            document_id=self.document_id,
            document_number=self.document_number or "",
            issue_date=self.issue_date,
            expiry_date=self.expiry_date,
            status=self.document_status or (
                DocumentStatus.EXPIRED if self.expired else DocumentStatus.ACTIVE
            )
        )


class ValidationResult(BaseModel):
    """Outcome of the pre-submission eligibility check"""
    can_proceed: bool
    outcome: ValidationOutcome
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    warning_message: Optional[str] = None
    existing_document: Optional[ExistingDocumentInfo] = None
    is_replacement_allowed: bool = False
    degraded: bool = Field(default=False, description="True when no lookup path could verify existing documents")


# ============================================================================
# Applications & Uploads
# ============================================================================

class Application(BaseModel):
    """Citizen's request for a service"""
    model_config = ConfigDict(extra="forbid")

    application_id: str
    holder_id: str
    service_id: int
    status: ApplicationStatus = ApplicationStatus.PENDING
    submitted_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    rejection_reason: Optional[str] = None
    emergency_reason: Optional[str] = None
    is_replacement: bool = False
    replacement_reason: Optional[str] = None
    office_location: str
    invoice_number: Optional[str] = None
    required_documents: List[str] = Field(default_factory=list, description="Manifest snapshot taken at submission")
    validation_warning: Optional[str] = Field(None, description="Fail-open warning shown to the reviewer")

    @property
    def is_emergency(self) -> bool:
        return bool(self.emergency_reason)


class UploadedDocument(BaseModel):
    """Citizen-submitted evidence file attached to an application"""
    model_config = ConfigDict(extra="forbid")

    upload_id: str
    application_id: str
    document_type: str = Field(..., description="Manifest key this file satisfies")
    file_name: str
    file_data: str = Field(..., description="Base64 encoded payload")
    file_size: int
    mime_type: str
    status: UploadStatus = UploadStatus.PENDING
    rejection_reason: Optional[str] = None
    verified_by: Optional[str] = None
    verified_at: Optional[datetime] = None
    uploaded_at: datetime


class GateReport(BaseModel):
    """Verification summary for one application"""
    application_id: str
    total: int = 0
    pending: int = 0
    verified: int = 0
    rejected: int = 0
    missing_documents: List[str] = Field(default_factory=list)

    @property
    def is_approvable(self) -> bool:
        return self.pending == 0 and self.rejected == 0 and not self.missing_documents


# ============================================================================
# Submission
# ============================================================================

class UploadInput(BaseModel):
    """One evidence file in a submission"""
    model_config = ConfigDict(extra="forbid")

    document_type: str = Field(..., min_length=1, description="Manifest key this file satisfies")
    file_name: str = Field(..., min_length=1)
    file_data: str = Field(..., description="Base64 encoded payload")
    mime_type: str


class SubmissionRequest(BaseModel):
    """Citizen's application form"""
    model_config = ConfigDict(extra="forbid")

    service_id: int
    office_location: str = Field(..., min_length=1)
    is_emergency: bool = False
    emergency_reason: Optional[str] = None
    is_replacement: bool = False
    replacement_reason: Optional[str] = None
    invoice_number: Optional[str] = None
    uploads: List[UploadInput] = Field(default_factory=list)


class SubmissionResult(BaseModel):
    """Stored application plus the eligibility outcome it was accepted under"""
    application: Application
    uploads: List[UploadedDocument] = Field(default_factory=list)
    validation: ValidationResult


# ============================================================================
# Print Queue
# ============================================================================

class PrintQueueItem(BaseModel):
    """Approved document waiting for (or done with) printing"""
    model_config = ConfigDict(extra="forbid")

    queue_id: str
    application_id: str
    holder_id: str
    holder_full_name: str
    service_type: str
    approval_date: datetime
    print_status: PrintStatus = PrintStatus.PENDING_PRINT
    printed_at: Optional[datetime] = None
    printed_by: Optional[str] = None
    office_location: str
    document_id: Optional[str] = None
    document_number: Optional[str] = None


class PrintQueueView(PrintQueueItem):
    """Print queue item with fields derived at read time"""
    model_config = ConfigDict(extra="forbid")

    time_in_queue: str
    priority_level: PriorityLevel
    can_print: bool


class PrintQueueFilters(BaseModel):
    """Filters for the print desk listing"""
    status: Optional[PrintStatus] = Field(None, description="None lists every status")
    service_type: Optional[str] = None
    office_location: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    search_term: Optional[str] = Field(None, description="Matches holder name or application id")


class PrintQueueStats(BaseModel):
    """Counts for the print desk"""
    total_pending: int = 0
    total_printed_today: int = 0
    total_printed_this_week: int = 0
    urgent_pending: int = 0
    by_service_type: Dict[str, Dict[str, int]] = Field(default_factory=dict)
    by_office: Dict[str, Dict[str, int]] = Field(default_factory=dict)
    average_processing_minutes: Optional[float] = None


class BulkPrintResult(BaseModel):
    """Per-item outcome of a bulk print"""
    printed_ids: List[str] = Field(default_factory=list)
    failed: Dict[str, str] = Field(default_factory=dict, description="queue_id -> reason")

    @property
    def printed_count(self) -> int:
        return len(self.printed_ids)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def success(self) -> bool:
        return not self.failed


# ============================================================================
# Approval
# ============================================================================

class ApprovalStepFailure(BaseModel):
    """A side effect of approval that did not complete"""
    step: ApprovalStep
    message: str


class ApprovalResult(BaseModel):
    """Approval outcome: committed status plus side-effect report"""
    application: Application
    document: Optional[Document] = None
    print_item: Optional[PrintQueueItem] = None
    superseded_document_ids: List[str] = Field(default_factory=list)
    warnings: List[ApprovalStepFailure] = Field(default_factory=list)

    @property
    def fully_completed(self) -> bool:
        return not self.warnings


class ApplicationDetail(BaseModel):
    """Everything the admin review screen shows for one application"""
    application: Application
    uploads: List[UploadedDocument] = Field(default_factory=list)
    gate: GateReport
    document: Optional[Document] = None
    print_item: Optional[PrintQueueItem] = None


# ============================================================================
# Notifications
# ============================================================================

class Notification(BaseModel):
    """One-way status message to a holder"""
    model_config = ConfigDict(extra="forbid")

    notification_id: str
    holder_id: Optional[str] = Field(None, description="None is a broadcast")
    title: str
    message: str
    severity: NotificationSeverity = NotificationSeverity.INFO
    application_id: Optional[str] = None
    is_read: bool = False
    read_at: Optional[datetime] = None
    created_at: datetime


# ============================================================================
# Admin Log
# ============================================================================

class AdminLog(BaseModel):
    """Append-only record of an admin action"""
    model_config = ConfigDict(extra="forbid")

    log_id: str
    admin_id: str
    action: AdminAuditAction
    target_id: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime
    correlation_id: Optional[str] = None


# ============================================================================
# Data Store Events
# ============================================================================

class ChangeEvent(BaseModel):
    """Change notification emitted by a data store"""
    table: str
    event_type: ChangeEventType
    records: List[Dict[str, Any]] = Field(default_factory=list)
    filter: Dict[str, Any] = Field(default_factory=dict)
    patch: Dict[str, Any] = Field(default_factory=dict)
    affected: int = 0
