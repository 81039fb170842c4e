"""
Application State Machine - Pending -> Approved | Rejected

The status write is the commit point of a decision. It is conditional on
the stored status still being Pending, so concurrent reviewers cannot both
decide the same application. Everything approval triggers afterwards
(issuing the document, retiring the previous one, queueing the print job,
notifying the holder) is best-effort: a failed step is reported in the
result and never rolls the decision back.
"""
from datetime import datetime
from typing import List, Optional, Tuple

from ..config.settings import settings
from ..domain.catalog import document_type_for_service, get_rule, service_label
from ..domain.models import (
    Application, Document, ApprovalResult, ApprovalStepFailure
)
from ..domain.enums import (
    ApplicationStatus, ApprovalStep, DocumentStatus, NotificationSeverity
)
from ..domain.errors import (
    InvalidStateError, DocumentsNotVerifiedError, RejectionReasonRequiredError
)
from ..repositories.data_store import DataStore, get_data_store
from ..repositories.application_repo import ApplicationRepository
from ..repositories.document_repo import DocumentRepository
from ..repositories.catalog_repo import CatalogRepository
from ..services.notification_service import NotificationService
from .upload_gate import UploadVerificationGate
from .print_queue import PrintQueueProjector
from .audit_writer import AuditWriter
from ..utils.idgen import (
    generate_document_id, generate_document_number, generate_random_suffix,
    generate_verification_code
)
from ..utils.time import utc_now, add_years
from ..utils.logger import get_logger

logger = get_logger(__name__)


class ApplicationStateMachine:
    """Admin decisions on applications"""

    def __init__(self, store: Optional[DataStore] = None):
        store = store or get_data_store()
        self.application_repo = ApplicationRepository(store)
        self.document_repo = DocumentRepository(store)
        self.catalog_repo = CatalogRepository(store)
        self.upload_gate = UploadVerificationGate(store)
        self.print_queue = PrintQueueProjector(store)
        self.notifications = NotificationService(store)
        self.audit_writer = AuditWriter(store)

    # =========================================================================
    # Approve
    # =========================================================================

    def approve(self, application_id: str, reviewer_id: str) -> ApprovalResult:
        """
        Approve a Pending application whose uploads are all verified.

        Raises InvalidStateError when the application is already decided
        (including by a concurrent reviewer) and DocumentsNotVerifiedError
        when the upload gate is closed. Both are raised before anything is
        written. An upload decision landing between the gate check and the
        commit is reported as a ``recheck_uploads`` warning.
        """
        application = self.application_repo.get_application_or_raise(application_id)
        self._ensure_pending(application)

        report = self.upload_gate.summarize(application_id, application)
        if not report.is_approvable:
            raise DocumentsNotVerifiedError(
                "All documents must be verified before the application can be approved",
                details={
                    "application_id": application_id,
                    "pending": report.pending,
                    "rejected": report.rejected,
                    "missing_documents": report.missing_documents
                }
            )

        now = utc_now()
        if not self.application_repo.decide_if_pending(
            application_id, ApplicationStatus.APPROVED, reviewer_id, now
        ):
            raise self._already_decided(application_id)

        application = self.application_repo.get_application_or_raise(application_id)
        result = ApprovalResult(application=application)

        # An upload decision may have landed between the gate check and the commit
        report = self.upload_gate.summarize(application_id, application)
        if not report.is_approvable:
            self._record_failure(
                result, ApprovalStep.RECHECK_UPLOADS,
                f"Uploads changed during approval: {report.pending} pending, "
                f"{report.rejected} rejected, missing {report.missing_documents or 'none'}"
            )

        # Issue the new document
        try:
            result.document = self._issue_document(application, now)
        except Exception as e:
            self._record_failure(result, ApprovalStep.ISSUE_DOCUMENT, f"Document issuance failed: {e}")

        # Retire the holder's previous document of the same type
        if result.document:
            try:
                result.superseded_document_ids = self._supersede_previous(application, result.document)
            except Exception as e:
                self._record_failure(
                    result, ApprovalStep.SUPERSEDE_PREVIOUS, f"Previous document not retired: {e}"
                )

        holder_name, service_name = self._display_names(application)

        # Queue for printing
        if result.document:
            try:
                result.print_item = self.print_queue.enqueue(
                    application, result.document, holder_name, service_name, approval_date=now
                )
            except Exception as e:
                self._record_failure(result, ApprovalStep.ENQUEUE_PRINT, f"Print queue entry failed: {e}")
        else:
            self._record_failure(
                result, ApprovalStep.ENQUEUE_PRINT, "Not queued for printing: no document was issued"
            )

        # Tell the holder
        notification = self.notifications.send(
            application.holder_id,
            "Application Approved",
            f"Your application for {service_name} has been approved. Your document will be "
            f"ready for collection at {application.office_location}.",
            NotificationSeverity.SUCCESS,
            application_id=application_id
        )
        if notification is None:
            self._record_failure(result, ApprovalStep.NOTIFY_HOLDER, "Holder notification failed")

        self.audit_writer.write_approve(
            reviewer_id,
            application_id,
            result.document.document_number if result.document else None,
            [w.message for w in result.warnings]
        )

        logger.info(
            f"Approved application {application_id}"
            f"{'' if result.fully_completed else f' with {len(result.warnings)} warning(s)'}",
            extra={"application_id": application_id, "actor_id": reviewer_id, "action": "approve"}
        )
        return result

    # =========================================================================
    # Reject
    # =========================================================================

    def reject(self, application_id: str, reviewer_id: str, reason: Optional[str]) -> Application:
        """Reject a Pending application with a reason the holder will see"""
        reason = (reason or "").strip()
        if not reason:
            raise RejectionReasonRequiredError(
                "A rejection reason is required",
                details={"application_id": application_id}
            )

        application = self.application_repo.get_application_or_raise(application_id)
        self._ensure_pending(application)

        if not self.application_repo.decide_if_pending(
            application_id, ApplicationStatus.REJECTED, reviewer_id, utc_now(),
            rejection_reason=reason
        ):
            raise self._already_decided(application_id)

        self.notifications.send(
            application.holder_id,
            "Application Rejected",
            f"Your application has been rejected. Reason: {reason}",
            NotificationSeverity.ERROR,
            application_id=application_id
        )
        self.audit_writer.write_reject(reviewer_id, application_id, reason)

        logger.info(
            f"Rejected application {application_id}",
            extra={"application_id": application_id, "actor_id": reviewer_id, "action": "reject"}
        )
        return self.application_repo.get_application_or_raise(application_id)

    # =========================================================================
    # Approval Steps
    # =========================================================================

    def _issue_document(self, application: Application, now: datetime) -> Document:
        document_type = document_type_for_service(application.service_id)
        if document_type is None:
            raise ValueError(f"service {application.service_id} does not issue a document")

        rule = get_rule(document_type)
        random_suffix = generate_random_suffix()
        document = Document(
            document_id=generate_document_id(),
            holder_id=application.holder_id,
            document_type=document_type,
            document_number=generate_document_number(rule.number_prefix, random_suffix),
            issue_date=now,
            expiry_date=add_years(now, rule.years_valid),
            status=DocumentStatus.ACTIVE,
            verification_code=generate_verification_code(
                settings.verification_base_url,
                document_type.value,
                application.application_id,
                random_suffix
            ),
            application_id=application.application_id,
            created_at=now
        )
        return self.document_repo.create_document(document)

    def _supersede_previous(self, application: Application, document: Document) -> List[str]:
        """Retire other active documents of the same type; returns their ids"""
        new_status = DocumentStatus.CANCELLED if application.is_replacement else DocumentStatus.EXPIRED
        previous = self.document_repo.list_active(
            application.holder_id, document.document_type, exclude_document_id=document.document_id
        )
        superseded = []
        for old in previous:
            if self.document_repo.supersede(old.document_id, new_status, document.document_id):
                superseded.append(old.document_id)
        return superseded

    # =========================================================================
    # Helpers
    # =========================================================================

    def _display_names(self, application: Application) -> Tuple[str, str]:
        """Holder name and service name for snapshots and messages"""
        holder_name = application.holder_id
        service_name = service_label(application.service_id)
        try:
            profile = self.catalog_repo.get_user(application.holder_id)
            if profile:
                holder_name = profile.full_name
            service = self.catalog_repo.get_service(application.service_id)
            if service:
                service_name = service.service_name
        except Exception as e:
            logger.warning(
                f"Catalog lookup failed, using fallback names: {e}",
                extra={"application_id": application.application_id}
            )
        return holder_name, service_name

    @staticmethod
    def _ensure_pending(application: Application) -> None:
        if application.status != ApplicationStatus.PENDING:
            raise InvalidStateError(
                f"Application {application.application_id} is already {application.status.value}",
                details={
                    "application_id": application.application_id,
                    "status": application.status.value
                }
            )

    @staticmethod
    def _already_decided(application_id: str) -> InvalidStateError:
        return InvalidStateError(
            f"Application {application_id} was already decided",
            details={"application_id": application_id}
        )

    @staticmethod
    def _record_failure(result: ApprovalResult, step: ApprovalStep, message: str) -> None:
        result.warnings.append(ApprovalStepFailure(step=step, message=message))
        logger.warning(
            message,
            extra={"application_id": result.application.application_id, "step": step.value}
        )
