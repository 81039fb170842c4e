"""Application submission and queries"""
import pytest

from portal.config.settings import settings
from portal.domain.enums import ApplicationStatus, UploadStatus
from portal.domain.errors import (
    EmergencyReasonRequiredError, InvalidMimeTypeError, LookupUnavailableError,
    MissingRequiredDocumentsError, MissingUserIdError, ServiceNotFoundError,
    ServiceUnavailableError, SubmissionBlockedError, UploadTooLargeError, ValidationError
)
from portal.engine.validation_engine import DocumentLookupStrategy, DocumentValidationEngine
from portal.repositories.application_repo import ApplicationRepository
from portal.repositories.catalog_repo import SERVICES_TABLE
from portal.repositories.notification_repo import NotificationRepository
from portal.repositories.upload_repo import UploadRepository
from portal.services.application_service import ApplicationService
from tests.factories import HOLDER, OFFICE, issue_document, submission, upload_input, utc


class UnavailableStrategy(DocumentLookupStrategy):
    name = "unavailable"

    def lookup(self, holder_id, document_type, now=None):
        raise LookupUnavailableError("registry offline")


@pytest.fixture
def service(seeded_store):
    return ApplicationService(seeded_store)


def _nothing_written(store):
    return ApplicationRepository(store).count_applications() == 0


# =============================================================================
# Submission
# =============================================================================

def test_submit_creates_pending_application(seeded_store, service):
    result = service.submit_application(HOLDER, submission(1, invoice_number="INV-77"))

    application = result.application
    assert application.status == ApplicationStatus.PENDING
    assert application.office_location == OFFICE
    assert application.invoice_number == "INV-77"
    assert application.required_documents == ["national_id", "photo"]
    assert application.validation_warning is None
    assert [u.status for u in result.uploads] == [UploadStatus.PENDING, UploadStatus.PENDING]
    assert all(u.file_size > 0 for u in result.uploads)

    stored = service.get_application(application.application_id)
    assert stored.holder_id == HOLDER

    notifications = NotificationRepository(seeded_store).list_for_holder(HOLDER)
    assert [n.title for n in notifications] == ["Application Submitted"]
    assert application.application_id in notifications[0].message


def test_valid_document_blocks_submission(seeded_store, service):
    issue_document(seeded_store, expiry_date=utc(2099, 1, 1))

    with pytest.raises(SubmissionBlockedError) as exc_info:
        service.submit_application(HOLDER, submission(1))

    assert exc_info.value.error_code == "DOCUMENT_EXISTS_VALID"
    assert exc_info.value.details["validation"]["can_proceed"] is False
    assert _nothing_written(seeded_store)


def test_input_errors_keep_their_codes(seeded_store, service):
    with pytest.raises(MissingUserIdError):
        service.submit_application("", submission(1))

    assert _nothing_written(seeded_store)


def test_missing_required_documents(seeded_store, service):
    with pytest.raises(MissingRequiredDocumentsError) as exc_info:
        service.submit_application(HOLDER, submission(4, uploads=[upload_input("photo")]))

    assert exc_info.value.details["missing_documents"] == ["national_id", "application_form"]
    assert _nothing_written(seeded_store)


def test_inactive_service(seeded_store, service):
    seeded_store.update(SERVICES_TABLE, {"service_id": 2}, {"is_active": False})

    with pytest.raises(ServiceUnavailableError):
        service.submit_application(HOLDER, submission(2))


def test_unseeded_catalog(store):
    with pytest.raises(ServiceNotFoundError):
        ApplicationService(store).submit_application(HOLDER, submission(1))


def test_emergency_needs_reason(seeded_store, service):
    with pytest.raises(EmergencyReasonRequiredError):
        service.submit_application(HOLDER, submission(1, is_emergency=True, emergency_reason="  "))

    result = service.submit_application(
        HOLDER, submission(1, is_emergency=True, emergency_reason="Travel for surgery")
    )
    assert result.application.emergency_reason == "Travel for surgery"


def test_disallowed_mime_type(seeded_store, service):
    uploads = [upload_input("national_id", mime_type="application/x-msdownload"), upload_input("photo")]

    with pytest.raises(InvalidMimeTypeError):
        service.submit_application(HOLDER, submission(1, uploads=uploads))

    assert _nothing_written(seeded_store)


def test_file_too_large(seeded_store, service, monkeypatch):
    monkeypatch.setattr(settings, "uploads_max_mb", 0)

    with pytest.raises(UploadTooLargeError) as exc_info:
        service.submit_application(HOLDER, submission(1))

    assert exc_info.value.error_code == "ATTACHMENT_TOO_LARGE"
    assert _nothing_written(seeded_store)


def test_invalid_base64(seeded_store, service):
    uploads = [upload_input("national_id", data="not base64!!"), upload_input("photo")]

    with pytest.raises(ValidationError):
        service.submit_application(HOLDER, submission(1, uploads=uploads))


def test_failed_upload_batch_withdraws_application(seeded_store, service, monkeypatch):
    def partial_batch(uploads):
        # First file lands, then the connection drops
        seeded_store.insert(UploadRepository.TABLE, uploads[0].model_dump(mode="json"))
        raise RuntimeError("connection reset")

    monkeypatch.setattr(service.upload_repo, "create_uploads", partial_batch)

    with pytest.raises(RuntimeError):
        service.submit_application(HOLDER, submission(1))

    assert _nothing_written(seeded_store)
    assert seeded_store.count(UploadRepository.TABLE) == 0
    assert NotificationRepository(seeded_store).list_for_holder(HOLDER) == []

    # A retry goes through as the only application
    monkeypatch.undo()
    service.submit_application(HOLDER, submission(1))
    assert ApplicationRepository(seeded_store).count_applications(holder_id=HOLDER) == 1


def test_degraded_validation_is_persisted_for_reviewer(seeded_store):
    engine = DocumentValidationEngine(strategies=[UnavailableStrategy()])
    service = ApplicationService(seeded_store, validation_engine=engine)

    result = service.submit_application(HOLDER, submission(1))

    assert result.validation.degraded
    stored = service.get_application(result.application.application_id)
    assert stored.validation_warning.startswith("Unable to verify existing Passport status.")


# =============================================================================
# Queries
# =============================================================================

def test_application_detail(service):
    result = service.submit_application(HOLDER, submission(1))

    detail = service.get_application_detail(result.application.application_id)

    assert detail.application.application_id == result.application.application_id
    assert len(detail.uploads) == 2
    assert detail.gate.pending == 2
    assert detail.document is None
    assert detail.print_item is None


def test_list_and_count(service):
    service.submit_application(HOLDER, submission(1))
    service.submit_application(HOLDER, submission(3))

    assert service.count_applications(holder_id=HOLDER) == 2
    assert service.count_applications(status=ApplicationStatus.APPROVED) == 0
    assert len(service.list_applications(status=ApplicationStatus.PENDING, holder_id=HOLDER)) == 2


def test_list_services(seeded_store, service):
    seeded_store.update(SERVICES_TABLE, {"service_id": 4}, {"is_active": False})

    assert [s.service_id for s in service.list_services()] == [1, 2, 3]
    assert len(service.list_services(active_only=False)) == 4
