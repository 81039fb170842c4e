"""Portal errors: each carries a stable code, an HTTP status and details"""
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Root of every error the API turns into an error response"""

    error_code: str = "DOMAIN_ERROR"
    http_status: int = 400

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code

    def to_dict(self) -> Dict[str, Any]:
        """Response body: {"error": {code, message, details}}"""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


# 401 / 403
class AuthenticationError(DomainError):
    """Actor identity missing"""
    error_code = "AUTHENTICATION_ERROR"
    http_status = 401


class PermissionDeniedError(DomainError):
    """Actor lacks permission for action"""
    error_code = "PERMISSION_DENIED"
    http_status = 403


# 400
class ValidationError(DomainError):
    """Caller input rejected before any write"""
    error_code = "VALIDATION_ERROR"
    http_status = 400


class MissingUserIdError(ValidationError):
    error_code = "MISSING_USER_ID"


class InvalidServiceIdError(ValidationError):
    error_code = "INVALID_SERVICE_ID"


class ReplacementReasonRequiredError(ValidationError):
    error_code = "REPLACEMENT_REASON_REQUIRED"


class RejectionReasonRequiredError(ValidationError):
    """Rejecting an application or an upload needs a reason"""
    error_code = "REJECTION_REASON_REQUIRED"


class EmergencyReasonRequiredError(ValidationError):
    error_code = "EMERGENCY_REASON_REQUIRED"


class MissingRequiredDocumentsError(ValidationError):
    """Submission does not cover the service's document manifest"""
    error_code = "MISSING_REQUIRED_DOCUMENTS"


# 400 / 413 uploads
class UploadTooLargeError(ValidationError):
    """Upload exceeds max size"""
    error_code = "ATTACHMENT_TOO_LARGE"
    http_status = 413


class InvalidMimeTypeError(ValidationError):
    """Upload mime type outside the allow-list"""
    error_code = "INVALID_MIME_TYPE"


# 404
class NotFoundError(DomainError):
    """Record does not exist"""
    error_code = "NOT_FOUND"
    http_status = 404


class ApplicationNotFoundError(NotFoundError):
    error_code = "APPLICATION_NOT_FOUND"


class UploadNotFoundError(NotFoundError):
    error_code = "UPLOAD_NOT_FOUND"


class PrintQueueItemNotFoundError(NotFoundError):
    error_code = "PRINT_QUEUE_ITEM_NOT_FOUND"


class ServiceNotFoundError(NotFoundError):
    error_code = "SERVICE_NOT_FOUND"


# 409
class ConflictError(DomainError):
    """Write refused because stored state moved on"""
    error_code = "CONFLICT"
    http_status = 409


class InvalidStateError(ConflictError):
    """Application is no longer in the state the action needs"""
    error_code = "INVALID_STATE"


class DocumentsNotVerifiedError(ConflictError):
    """Approval attempted while uploads are unresolved"""
    error_code = "DOCUMENTS_NOT_VERIFIED"


class AlreadyPrintedError(ConflictError):
    """Print queue item was printed already"""
    error_code = "ALREADY_PRINTED"


class ServiceUnavailableError(ConflictError):
    """Service is not accepting applications"""
    error_code = "SERVICE_UNAVAILABLE"


class SubmissionBlockedError(ConflictError):
    """Eligibility check denied the submission"""
    error_code = "DOCUMENT_EXISTS_VALID"


# 502
class ExternalServiceError(DomainError):
    """A dependency outside the store did not answer"""
    error_code = "EXTERNAL_SERVICE_ERROR"
    http_status = 502


class LookupUnavailableError(ExternalServiceError):
    """A document-status lookup path could not answer"""
    error_code = "LOOKUP_UNAVAILABLE"
