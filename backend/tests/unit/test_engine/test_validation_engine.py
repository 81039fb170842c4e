"""Document Validation Engine"""
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from portal.domain.enums import DocumentType, DocumentStatus, ValidationOutcome
from portal.domain.errors import LookupUnavailableError
from portal.domain.models import DocumentStatusSnapshot
from portal.engine.validation_engine import (
    DocumentValidationEngine, DocumentLookupStrategy, DirectLookupStrategy, StatusEndpointStrategy
)
from portal.repositories.data_store import DataStore
from portal.utils.logger import set_correlation_id
from tests.factories import HOLDER, OTHER_HOLDER, issue_document, utc


class RecordingStrategy(DocumentLookupStrategy):
    name = "recording"

    def __init__(self, snapshot=None, fail=False):
        self.snapshot = snapshot or DocumentStatusSnapshot(exists=False)
        self.fail = fail
        self.calls = []

    def lookup(self, holder_id, document_type, now=None):
        self.calls.append((holder_id, document_type))
        if self.fail:
            raise LookupUnavailableError("lookup down")
        return self.snapshot


class BrokenStore(DataStore):
    def find_one(self, table, filter, order=None):
        raise RuntimeError("connection reset")


# =============================================================================
# Input checks
# =============================================================================

@pytest.mark.parametrize("holder_id", [None, "", "   "])
def test_missing_user_id_is_checked_before_any_lookup(holder_id):
    strategy = RecordingStrategy()
    result = DocumentValidationEngine(strategies=[strategy]).validate(holder_id, 1)

    assert not result.can_proceed
    assert result.outcome == ValidationOutcome.INPUT_ERROR
    assert result.error_code == "MISSING_USER_ID"
    assert strategy.calls == []


def test_missing_user_id_wins_over_invalid_service():
    result = DocumentValidationEngine(strategies=[RecordingStrategy()]).validate("", 99)
    assert result.error_code == "MISSING_USER_ID"


def test_invalid_service_id():
    strategy = RecordingStrategy()
    result = DocumentValidationEngine(strategies=[strategy]).validate(HOLDER, 99)

    assert result.error_code == "INVALID_SERVICE_ID"
    assert strategy.calls == []


@pytest.mark.parametrize("reason", [None, "", "  "])
def test_replacement_requires_reason(reason):
    result = DocumentValidationEngine(strategies=[RecordingStrategy()]).validate(
        HOLDER, 1, is_replacement=True, replacement_reason=reason
    )
    assert result.error_code == "REPLACEMENT_REASON_REQUIRED"
    assert not result.can_proceed


# =============================================================================
# Classification over the registry
# =============================================================================

def test_no_existing_document_allows(store):
    result = DocumentValidationEngine(store).validate(HOLDER, 1)

    assert result.can_proceed
    assert result.outcome == ValidationOutcome.NO_EXISTING_DOCUMENT
    assert result.warning_message == "No existing Passport found. You can proceed with your application."
    assert not result.degraded


def test_documents_of_other_holders_and_types_are_ignored(store):
    issue_document(store, holder_id=OTHER_HOLDER, expiry_date=utc(2099, 1, 1))
    issue_document(store, document_type=DocumentType.NATIONAL_ID, expiry_date=utc(2099, 1, 1))

    assert DocumentValidationEngine(store).validate(HOLDER, 1).can_proceed


def test_inactive_documents_are_ignored(store):
    issue_document(store, expiry_date=utc(2099, 1, 1), status=DocumentStatus.CANCELLED)

    result = DocumentValidationEngine(store).validate(HOLDER, 1)
    assert result.outcome == ValidationOutcome.NO_EXISTING_DOCUMENT


def test_expired_document_allows(store):
    issue_document(store, expiry_date=datetime.now(timezone.utc) - timedelta(days=1))

    result = DocumentValidationEngine(store).validate(HOLDER, 1)

    assert result.can_proceed
    assert result.outcome == ValidationOutcome.PREVIOUS_EXPIRED
    assert result.warning_message == "Your previous Passport has expired. You can apply for a new one."
    assert result.existing_document.status == DocumentStatus.EXPIRED


def test_expired_document_allows_replacement_request_too(store):
    issue_document(store, expiry_date=datetime.now(timezone.utc) - timedelta(days=1))

    result = DocumentValidationEngine(store).validate(
        HOLDER, 1, is_replacement=True, replacement_reason="lost"
    )

    assert result.can_proceed
    assert result.outcome == ValidationOutcome.PREVIOUS_EXPIRED
    assert not result.is_replacement_allowed


def test_valid_document_blocks_with_expiry_date(store):
    document = issue_document(store, expiry_date=utc(2030, 1, 1))

    result = DocumentValidationEngine(store).validate(HOLDER, 1, now=utc(2025, 6, 1))

    assert not result.can_proceed
    assert result.outcome == ValidationOutcome.DOCUMENT_EXISTS_VALID
    assert result.error_code == "DOCUMENT_EXISTS_VALID"
    assert result.error_message == (
        "You already have a valid Passport. It expires on January 01, 2030. You cannot apply "
        "for this service until it expires or you request a Lost/Damaged replacement."
    )
    assert result.existing_document.document_id == document.document_id


def test_valid_document_without_expiry_blocks(store):
    issue_document(store, document_type=DocumentType.BIRTH_CERTIFICATE, expiry_date=None)

    result = DocumentValidationEngine(store).validate(HOLDER, 3)

    assert not result.can_proceed
    assert "It does not expire." in result.error_message


def test_replacement_with_reason_is_allowed(store):
    issue_document(store, expiry_date=utc(2099, 1, 1))

    result = DocumentValidationEngine(store).validate(
        HOLDER, 1, is_replacement=True, replacement_reason="lost"
    )

    assert result.can_proceed
    assert result.is_replacement_allowed
    assert result.outcome == ValidationOutcome.REPLACEMENT_ALLOWED
    assert result.warning_message == "Replacement request for existing Passport. Reason: lost"


def test_most_recent_active_document_decides(store):
    issue_document(store, expiry_date=utc(2001, 1, 1), created_at=utc(1991, 1, 1))
    issue_document(store, expiry_date=utc(2099, 1, 1), created_at=utc(2020, 1, 1))

    assert not DocumentValidationEngine(store).validate(HOLDER, 1).can_proceed


def test_expiry_boundary_is_strict(store):
    issue_document(store, expiry_date=utc(2030, 1, 1))

    at_expiry = DocumentValidationEngine(store).validate(HOLDER, 1, now=utc(2030, 1, 1))
    after = DocumentValidationEngine(store).validate(HOLDER, 1, now=utc(2030, 1, 1, 0, 0, 1))

    assert not at_expiry.can_proceed
    assert after.outcome == ValidationOutcome.PREVIOUS_EXPIRED


# =============================================================================
# Degraded mode
# =============================================================================

def test_direct_lookup_failure_is_unavailable():
    with pytest.raises(LookupUnavailableError):
        DirectLookupStrategy(BrokenStore()).lookup(HOLDER, DocumentType.PASSPORT)


def test_falls_back_to_next_strategy():
    blocked = DocumentStatusSnapshot(
        exists=True, expired=False, expiry_date=utc(2030, 1, 1),
        document_id="DOC-1", document_number="PA-1", document_status=DocumentStatus.ACTIVE
    )
    primary = RecordingStrategy(fail=True)
    secondary = RecordingStrategy(snapshot=blocked)

    result = DocumentValidationEngine(strategies=[primary, secondary]).validate(HOLDER, 1)

    assert len(primary.calls) == 1
    assert len(secondary.calls) == 1
    assert result.outcome == ValidationOutcome.DOCUMENT_EXISTS_VALID


def test_fails_open_when_every_lookup_is_unavailable():
    engine = DocumentValidationEngine(strategies=[RecordingStrategy(fail=True), RecordingStrategy(fail=True)])

    result = engine.validate(HOLDER, 2)

    assert result.can_proceed
    assert result.degraded
    assert result.outcome == ValidationOutcome.UNVERIFIED
    assert result.error_code is None
    assert result.warning_message == (
        "Unable to verify existing National ID status. Your application will be processed, "
        "but please ensure you don't already have a valid National ID."
    )


def test_default_chain_fails_open_on_broken_store():
    result = DocumentValidationEngine(BrokenStore()).validate(HOLDER, 1)

    assert result.can_proceed
    assert result.degraded


# =============================================================================
# Status endpoint strategy
# =============================================================================

def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_status_endpoint_not_configured():
    with pytest.raises(LookupUnavailableError):
        StatusEndpointStrategy(base_url="").lookup(HOLDER, DocumentType.PASSPORT)


def test_status_endpoint_answer_is_used():
    seen = {}

    def handler(request):
        seen.update(request.url.params)
        return httpx.Response(200, json={
            "exists": True,
            "expired": True,
            "expiry_date": "2020-01-01T00:00:00Z",
            "document_id": "DOC-9",
            "document_number": "PA-000001-000001",
        })

    strategy = StatusEndpointStrategy(base_url="http://status.test/documents/status", client=_client(handler))
    result = DocumentValidationEngine(strategies=[RecordingStrategy(fail=True), strategy]).validate(HOLDER, 1)

    assert seen == {"holder_id": HOLDER, "document_type": "passport"}
    assert result.outcome == ValidationOutcome.PREVIOUS_EXPIRED
    assert result.existing_document.document_id == "DOC-9"


@pytest.mark.parametrize("response", [
    httpx.Response(500, json={"error": "boom"}),
    httpx.Response(200, content=b"not json"),
    httpx.Response(200, json={"exists": "maybe"}),
])
def test_status_endpoint_failures_are_unavailable(response):
    strategy = StatusEndpointStrategy(
        base_url="http://status.test/documents/status", client=_client(lambda request: response)
    )
    with pytest.raises(LookupUnavailableError):
        strategy.lookup(HOLDER, DocumentType.PASSPORT)


def test_status_endpoint_is_called_as_the_holder():
    seen = {}

    def handler(request):
        seen.update(request.headers)
        return httpx.Response(200, json={"exists": False})

    set_correlation_id("corr-status-1")
    try:
        StatusEndpointStrategy(
            base_url="http://status.test/documents/status", client=_client(handler)
        ).lookup(HOLDER, DocumentType.PASSPORT)
    finally:
        set_correlation_id(None)

    assert seen["x-actor-id"] == HOLDER
    assert seen["x-correlation-id"] == "corr-status-1"
