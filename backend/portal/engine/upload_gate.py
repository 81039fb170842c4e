"""Upload Verification Gate - Per-file review of citizen evidence"""
from typing import List, Optional

from ..domain.models import Application, UploadedDocument, GateReport
from ..domain.enums import ApplicationStatus, UploadStatus
from ..domain.errors import (
    ConflictError, InvalidStateError, RejectionReasonRequiredError, ValidationError
)
from ..repositories.data_store import DataStore
from ..repositories.application_repo import ApplicationRepository
from ..repositories.upload_repo import UploadRepository
from .audit_writer import AuditWriter
from ..utils.time import utc_now, format_iso
from ..utils.logger import get_logger

logger = get_logger(__name__)


class UploadVerificationGate:
    """
    Tracks verification of uploaded evidence.

    An application can only be approved once every upload is verified and
    the uploads cover the manifest captured at submission.
    """

    def __init__(self, store: Optional[DataStore] = None):
        self.application_repo = ApplicationRepository(store)
        self.upload_repo = UploadRepository(store)
        self.audit_writer = AuditWriter(store)

    def list_documents(self, application_id: str) -> List[UploadedDocument]:
        """All uploads for an application"""
        return self.upload_repo.list_for_application(application_id)

    def set_status(
        self,
        upload_id: str,
        status: UploadStatus,
        verifier_id: str,
        reason: Optional[str] = None
    ) -> UploadedDocument:
        """
        Record a verification decision for one upload.

        Decisions can be changed while the application is Pending; once it
        is decided the uploads are frozen. The write is conditional on the
        status the upload was read with (ConflictError when another reviewer
        got there first) and is undone if the application was decided in the
        meantime.
        """
        status = UploadStatus(status)
        if status == UploadStatus.PENDING:
            raise ValidationError(
                "Upload can only be set to verified or rejected",
                details={"upload_id": upload_id}
            )

        reason = (reason or "").strip() or None
        if status == UploadStatus.REJECTED and not reason:
            raise RejectionReasonRequiredError(
                "A reason is required to reject a document",
                details={"upload_id": upload_id}
            )

        upload = self.upload_repo.get_upload_or_raise(upload_id)
        application = self.application_repo.get_application_or_raise(upload.application_id)
        if application.status != ApplicationStatus.PENDING:
            raise self._decided(application.application_id, application.status.value)

        decision = {
            "status": status.value,
            "verified_by": verifier_id,
            "verified_at": format_iso(utc_now()),
            "rejection_reason": reason if status == UploadStatus.REJECTED else None,
        }
        if not self.upload_repo.update_if_status(upload_id, upload.status, decision):
            raise ConflictError(
                f"Upload {upload_id} was changed by another reviewer",
                details={"upload_id": upload_id, "expected_status": upload.status.value}
            )

        # A decision on the application may have committed after the check above
        if not self.application_repo.is_pending(upload.application_id):
            self.upload_repo.update_if_status(upload_id, status, {
                "status": upload.status.value,
                "verified_by": upload.verified_by,
                "verified_at": format_iso(upload.verified_at) if upload.verified_at else None,
                "rejection_reason": upload.rejection_reason,
            })
            raise self._decided(upload.application_id)

        updated = self.upload_repo.get_upload_or_raise(upload_id)

        logger.info(
            f"Upload {upload_id} marked {status.value}",
            extra={
                "upload_id": upload_id,
                "application_id": upload.application_id,
                "actor_id": verifier_id,
                "status": status.value
            }
        )
        self.audit_writer.write_upload_decision(
            verifier_id, upload_id, upload.application_id,
            verified=status == UploadStatus.VERIFIED, reason=reason
        )
        return updated

    def summarize(
        self,
        application_id: str,
        application: Optional[Application] = None
    ) -> GateReport:
        """Verification counts and uncovered manifest keys"""
        if application is None:
            application = self.application_repo.get_application_or_raise(application_id)
        uploads = self.list_documents(application_id)

        report = GateReport(application_id=application_id, total=len(uploads))
        for upload in uploads:
            if upload.status == UploadStatus.VERIFIED:
                report.verified += 1
            elif upload.status == UploadStatus.REJECTED:
                report.rejected += 1
            else:
                report.pending += 1

        supplied = {upload.document_type for upload in uploads}
        report.missing_documents = [
            key for key in application.required_documents if key not in supplied
        ]
        return report

    def is_approvable(self, application_id: str) -> bool:
        """True iff every upload is verified and the manifest is covered"""
        return self.summarize(application_id).is_approvable

    @staticmethod
    def _decided(application_id: str, status: Optional[str] = None) -> InvalidStateError:
        message = (
            f"Application {application_id} is already {status}" if status
            else f"Application {application_id} was decided while the upload was being reviewed"
        )
        details = {"application_id": application_id}
        if status:
            details["status"] = status
        return InvalidStateError(message, details=details)
