"""Domain Enumerations - All status and type definitions"""
from enum import Enum


class DocumentType(str, Enum):
    """Kinds of credential the portal issues"""
    PASSPORT = "passport"
    NATIONAL_ID = "national_id"
    BIRTH_CERTIFICATE = "birth_certificate"
    DRIVER_LICENSE = "driver_license"


class DocumentStatus(str, Enum):
    """Issued document status"""
    ACTIVE = "active"
    EXPIRED = "expired"
    PENDING = "pending"
    CANCELLED = "cancelled"


class ApplicationStatus(str, Enum):
    """Service application status - Approved and Rejected are terminal"""
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class UploadStatus(str, Enum):
    """Verification status of a citizen-uploaded evidence file"""
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class PrintStatus(str, Enum):
    """Print queue item status"""
    PENDING_PRINT = "pending_print"
    PRINTED = "printed"


class PriorityLevel(str, Enum):
    """Print priority derived from time since approval"""
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class NotificationSeverity(str, Enum):
    """Notification severity shown in the citizen inbox"""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class ValidationOutcome(str, Enum):
    """How an eligibility check was decided"""
    NO_EXISTING_DOCUMENT = "NO_EXISTING_DOCUMENT"
    PREVIOUS_EXPIRED = "PREVIOUS_EXPIRED"
    REPLACEMENT_ALLOWED = "REPLACEMENT_ALLOWED"
    DOCUMENT_EXISTS_VALID = "DOCUMENT_EXISTS_VALID"
    INPUT_ERROR = "INPUT_ERROR"
    UNVERIFIED = "UNVERIFIED"  # every lookup path failed, allowed with warning


class ApprovalStep(str, Enum):
    """Best-effort side effects that follow an approval"""
    ISSUE_DOCUMENT = "issue_document"
    SUPERSEDE_PREVIOUS = "supersede_previous"
    ENQUEUE_PRINT = "enqueue_print"
    NOTIFY_HOLDER = "notify_holder"
    RECHECK_UPLOADS = "recheck_uploads"


class ChangeEventType(str, Enum):
    """Data store change events"""
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class AdminAuditAction(str, Enum):
    """Admin actions written to the admin log"""
    APPROVE_APPLICATION = "APPROVE_APPLICATION"
    REJECT_APPLICATION = "REJECT_APPLICATION"
    VERIFY_UPLOAD = "VERIFY_UPLOAD"
    REJECT_UPLOAD = "REJECT_UPLOAD"
    MARK_PRINTED = "MARK_PRINTED"
    MARK_PRINTED_BULK = "MARK_PRINTED_BULK"
