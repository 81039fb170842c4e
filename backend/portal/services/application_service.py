"""Application Service - Submission and read-side queries"""
import base64
import binascii
from typing import List, Optional

from ..config.settings import settings
from ..domain.models import (
    Application, ApplicationDetail, Document, Service, SubmissionRequest,
    SubmissionResult, UploadedDocument, UploadInput
)
from ..domain.enums import ApplicationStatus, NotificationSeverity, UploadStatus
from ..domain.errors import (
    SubmissionBlockedError, ServiceUnavailableError, EmergencyReasonRequiredError,
    MissingRequiredDocumentsError, UploadTooLargeError, InvalidMimeTypeError,
    ValidationError, MissingUserIdError, InvalidServiceIdError,
    ReplacementReasonRequiredError
)
from ..repositories.data_store import DataStore, get_data_store
from ..repositories.application_repo import ApplicationRepository
from ..repositories.upload_repo import UploadRepository
from ..repositories.document_repo import DocumentRepository
from ..repositories.print_queue_repo import PrintQueueRepository
from ..repositories.catalog_repo import CatalogRepository
from ..engine.validation_engine import DocumentValidationEngine
from ..engine.upload_gate import UploadVerificationGate
from .notification_service import NotificationService
from ..utils.idgen import generate_application_id, generate_upload_id
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)

INPUT_ERRORS = {
    "MISSING_USER_ID": MissingUserIdError,
    "INVALID_SERVICE_ID": InvalidServiceIdError,
    "REPLACEMENT_REASON_REQUIRED": ReplacementReasonRequiredError,
}


class ApplicationService:
    """Service for citizen applications"""

    def __init__(
        self,
        store: Optional[DataStore] = None,
        validation_engine: Optional[DocumentValidationEngine] = None
    ):
        store = store or get_data_store()
        self.application_repo = ApplicationRepository(store)
        self.upload_repo = UploadRepository(store)
        self.document_repo = DocumentRepository(store)
        self.print_queue_repo = PrintQueueRepository(store)
        self.catalog_repo = CatalogRepository(store)
        self.validation_engine = validation_engine or DocumentValidationEngine(store)
        self.upload_gate = UploadVerificationGate(store)
        self.notifications = NotificationService(store)

    # =========================================================================
    # Submission
    # =========================================================================

    def submit_application(self, holder_id: str, request: SubmissionRequest) -> SubmissionResult:
        """
        Accept a citizen's application.

        The eligibility check runs first; a denial raises
        SubmissionBlockedError with the full validation result in its
        details. Nothing is written unless every check passes.
        """
        validation = self.validation_engine.validate(
            holder_id,
            request.service_id,
            is_replacement=request.is_replacement,
            replacement_reason=request.replacement_reason
        )
        if not validation.can_proceed:
            error_class = INPUT_ERRORS.get(validation.error_code, SubmissionBlockedError)
            raise error_class(
                validation.error_message or "Application cannot be submitted",
                details={"validation": validation.model_dump(mode="json")}
            )

        service = self.catalog_repo.get_service_or_raise(request.service_id)
        if not service.is_active:
            raise ServiceUnavailableError(
                f"{service.service_name} is not accepting applications",
                details={"service_id": service.service_id}
            )

        emergency_reason = (request.emergency_reason or "").strip() or None
        if request.is_emergency and not emergency_reason:
            raise EmergencyReasonRequiredError("Please provide a reason for the emergency request")

        supplied = {upload.document_type for upload in request.uploads}
        missing = [key for key in service.required_documents if key not in supplied]
        if missing:
            raise MissingRequiredDocumentsError(
                "Please upload all required documents",
                details={"missing_documents": missing}
            )

        now = utc_now()
        application = Application(
            application_id=generate_application_id(),
            holder_id=holder_id,
            service_id=service.service_id,
            status=ApplicationStatus.PENDING,
            submitted_at=now,
            emergency_reason=emergency_reason if request.is_emergency else None,
            is_replacement=request.is_replacement,
            replacement_reason=request.replacement_reason if request.is_replacement else None,
            office_location=request.office_location,
            invoice_number=request.invoice_number,
            required_documents=list(service.required_documents),
            validation_warning=validation.warning_message if validation.degraded else None
        )
        uploads = [
            self._build_upload(application.application_id, upload, now)
            for upload in request.uploads
        ]

        self.application_repo.create_application(application)
        try:
            self.upload_repo.create_uploads(uploads)
        except Exception:
            # Without its evidence the application could never be approved
            logger.error(
                f"Storing uploads failed, withdrawing application {application.application_id}",
                extra={"application_id": application.application_id, "holder_id": holder_id}
            )
            self.upload_repo.delete_for_application(application.application_id)
            self.application_repo.delete_application(application.application_id)
            raise

        self.notifications.send(
            holder_id,
            "Application Submitted",
            f"Your application for {service.service_name} has been submitted and is "
            f"pending review. Application ID: {application.application_id}",
            NotificationSeverity.INFO,
            application_id=application.application_id
        )

        logger.info(
            f"Submitted application {application.application_id}",
            extra={
                "application_id": application.application_id,
                "holder_id": holder_id,
                "action": "submit"
            }
        )
        return SubmissionResult(application=application, uploads=uploads, validation=validation)

    def _build_upload(self, application_id: str, upload: UploadInput, now) -> UploadedDocument:
        """Check size and type of one file and wrap it for storage"""
        if upload.mime_type not in settings.allowed_mime_types_list:
            raise InvalidMimeTypeError(
                f"File type {upload.mime_type} is not allowed",
                details={
                    "file_name": upload.file_name,
                    "mime_type": upload.mime_type,
                    "allowed": settings.allowed_mime_types_list
                }
            )

        try:
            file_size = len(base64.b64decode(upload.file_data, validate=True))
        except (binascii.Error, ValueError) as e:
            raise ValidationError(
                f"File {upload.file_name} is not valid base64 data",
                details={"file_name": upload.file_name}
            ) from e

        if file_size > settings.uploads_max_bytes:
            raise UploadTooLargeError(
                f"File exceeds maximum size of {settings.uploads_max_mb}MB",
                details={
                    "file_name": upload.file_name,
                    "size_bytes": file_size,
                    "max_bytes": settings.uploads_max_bytes
                }
            )

        return UploadedDocument(
            upload_id=generate_upload_id(),
            application_id=application_id,
            document_type=upload.document_type,
            file_name=upload.file_name,
            file_data=upload.file_data,
            file_size=file_size,
            mime_type=upload.mime_type,
            status=UploadStatus.PENDING,
            uploaded_at=now
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def get_application(self, application_id: str) -> Application:
        return self.application_repo.get_application_or_raise(application_id)

    def get_application_detail(self, application_id: str) -> ApplicationDetail:
        """Application with its uploads, gate summary and issued artefacts"""
        application = self.application_repo.get_application_or_raise(application_id)
        return ApplicationDetail(
            application=application,
            uploads=self.upload_repo.list_for_application(application_id),
            gate=self.upload_gate.summarize(application_id, application),
            document=self.document_repo.get_by_application(application_id),
            print_item=self.print_queue_repo.get_by_application(application_id)
        )

    def list_applications(
        self,
        status: Optional[ApplicationStatus] = None,
        holder_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 50
    ) -> List[Application]:
        return self.application_repo.list_applications(status, holder_id, skip, limit)

    def count_applications(
        self,
        status: Optional[ApplicationStatus] = None,
        holder_id: Optional[str] = None
    ) -> int:
        return self.application_repo.count_applications(status, holder_id)

    def list_services(self, active_only: bool = True) -> List[Service]:
        return self.catalog_repo.list_services(active_only)

    def list_holder_documents(self, holder_id: str) -> List[Document]:
        return self.document_repo.list_for_holder(holder_id)
