"""
Document Validation Engine - Pre-submission eligibility check

Decides whether a holder may apply for a service given the documents they
already hold. Lookups run through an ordered list of strategies; when every
strategy is unavailable the check fails open and the application proceeds
with a warning for manual review.
"""
from datetime import datetime
from typing import List, Optional
import httpx

from ..config.settings import settings
from ..domain.catalog import document_type_for_service, display_name
from ..domain.enums import DocumentType, DocumentStatus, ValidationOutcome
from ..domain.errors import LookupUnavailableError
from ..domain.models import DocumentStatusSnapshot, ValidationResult
from ..repositories.data_store import DataStore
from ..repositories.document_repo import DocumentRepository
from ..utils.time import utc_now, ensure_utc, format_long_date
from ..utils.logger import get_logger, get_correlation_id

logger = get_logger(__name__)


INPUT_ERROR_MESSAGES = {
    "MISSING_USER_ID": "User information is missing. Please log out and log back in.",
    "INVALID_SERVICE_ID": "Invalid service selected. Please refresh the page and try again.",
    "REPLACEMENT_REASON_REQUIRED": "Please provide a reason for the replacement request.",
}


# ============================================================================
# Lookup Strategies
# ============================================================================

class DocumentLookupStrategy:
    """
    One way of finding a holder's current document.

    ``lookup`` returns a snapshot or raises LookupUnavailableError; an empty
    snapshot (exists=False) is an answer, not a failure.
    """

    name = "base"

    def lookup(
        self,
        holder_id: str,
        document_type: DocumentType,
        now: Optional[datetime] = None
    ) -> DocumentStatusSnapshot:
        raise NotImplementedError


class DirectLookupStrategy(DocumentLookupStrategy):
    """Query the document registry through the data store"""

    name = "direct"

    def __init__(self, store: Optional[DataStore] = None):
        self.repo = DocumentRepository(store)

    def lookup(self, holder_id, document_type, now=None):
        try:
            document = self.repo.find_latest_active(holder_id, document_type)
        except Exception as e:
            raise LookupUnavailableError(
                f"Document query failed: {e}",
                details={"strategy": self.name}
            ) from e

        if document is None:
            return DocumentStatusSnapshot(exists=False)

        now = ensure_utc(now or utc_now())
        expired = (
            document.expiry_date is not None
            and ensure_utc(document.expiry_date) < now
        )
        return DocumentStatusSnapshot(
            exists=True,
            expired=expired,
            expiry_date=document.expiry_date,
            document_id=document.document_id,
            document_status=document.status,
            document_number=document.document_number,
            issue_date=document.issue_date
        )


class StatusEndpointStrategy(DocumentLookupStrategy):
    """Ask the document-status endpoint over HTTP"""

    name = "status_endpoint"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None
    ):
        self.base_url = settings.document_status_url if base_url is None else base_url
        self.timeout = timeout or settings.document_status_timeout_seconds
        self._client = client

    def lookup(self, holder_id, document_type, now=None):
        if not self.base_url:
            raise LookupUnavailableError(
                "Document status endpoint is not configured",
                details={"strategy": self.name}
            )

        params = {
            "holder_id": holder_id,
            "document_type": DocumentType(document_type).value,
        }
        # The endpoint only answers the holder themselves or an admin
        headers = {"X-Actor-Id": holder_id}
        correlation_id = get_correlation_id()
        if correlation_id:
            headers["X-Correlation-Id"] = correlation_id
        try:
            if self._client is not None:
                response = self._client.get(
                    self.base_url, params=params, headers=headers, timeout=self.timeout
                )
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.get(self.base_url, params=params, headers=headers)
            response.raise_for_status()
            return DocumentStatusSnapshot.model_validate(response.json())
        except httpx.HTTPError as e:
            raise LookupUnavailableError(
                f"Document status endpoint failed: {e}",
                details={"strategy": self.name}
            ) from e
        except ValueError as e:
            # Covers both bad JSON and a payload that does not fit the snapshot
            raise LookupUnavailableError(
                f"Document status endpoint returned an unusable payload: {e}",
                details={"strategy": self.name}
            ) from e


# ============================================================================
# Engine
# ============================================================================

class DocumentValidationEngine:
    """Eligibility check run before an application is accepted"""

    def __init__(
        self,
        store: Optional[DataStore] = None,
        strategies: Optional[List[DocumentLookupStrategy]] = None
    ):
        if strategies is None:
            strategies = [DirectLookupStrategy(store), StatusEndpointStrategy()]
        self.strategies = strategies

    def validate(
        self,
        holder_id: Optional[str],
        service_id: Optional[int],
        is_replacement: bool = False,
        replacement_reason: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> ValidationResult:
        """
        Decide whether the holder may apply for the service.

        Input errors come back as a result with ``outcome=INPUT_ERROR``
        rather than as exceptions, same as a business denial.
        """
        if not holder_id or not holder_id.strip():
            return self._input_error("MISSING_USER_ID")

        document_type = document_type_for_service(service_id)
        if document_type is None:
            return self._input_error("INVALID_SERVICE_ID")

        if is_replacement and not (replacement_reason or "").strip():
            return self._input_error("REPLACEMENT_REASON_REQUIRED")

        snapshot = self._lookup(holder_id, document_type, now)
        name = display_name(document_type)

        if snapshot is None:
            # Every lookup path failed - fail open
            return ValidationResult(
                can_proceed=True,
                outcome=ValidationOutcome.UNVERIFIED,
                degraded=True,
                warning_message=(
                    f"Unable to verify existing {name} status. Your application will be "
                    f"processed, but please ensure you don't already have a valid {name}."
                )
            )

        return self._classify(snapshot, name, is_replacement, replacement_reason)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _lookup(
        self,
        holder_id: str,
        document_type: DocumentType,
        now: Optional[datetime]
    ) -> Optional[DocumentStatusSnapshot]:
        """First answer from the strategy list, None if all are unavailable"""
        for strategy in self.strategies:
            try:
                return strategy.lookup(holder_id, document_type, now)
            except LookupUnavailableError as e:
                logger.warning(
                    f"Document lookup via {strategy.name} unavailable: {e.message}",
                    extra={
                        "holder_id": holder_id,
                        "strategy": strategy.name,
                        "error_code": e.error_code
                    }
                )
        return None

    @staticmethod
    def _classify(
        snapshot: DocumentStatusSnapshot,
        name: str,
        is_replacement: bool,
        replacement_reason: Optional[str]
    ) -> ValidationResult:
        existing = snapshot.to_existing_info()

        if not snapshot.exists:
            return ValidationResult(
                can_proceed=True,
                outcome=ValidationOutcome.NO_EXISTING_DOCUMENT,
                warning_message=f"No existing {name} found. You can proceed with your application."
            )

        if snapshot.expired:
            if existing:
                existing.status = DocumentStatus.EXPIRED
            return ValidationResult(
                can_proceed=True,
                outcome=ValidationOutcome.PREVIOUS_EXPIRED,
                warning_message=f"Your previous {name} has expired. You can apply for a new one.",
                existing_document=existing
            )

        if is_replacement and replacement_reason:
            return ValidationResult(
                can_proceed=True,
                outcome=ValidationOutcome.REPLACEMENT_ALLOWED,
                is_replacement_allowed=True,
                warning_message=f"Replacement request for existing {name}. Reason: {replacement_reason}",
                existing_document=existing
            )

        if snapshot.expiry_date:
            expiry_info = f" It expires on {format_long_date(snapshot.expiry_date)}."
        else:
            expiry_info = " It does not expire."

        return ValidationResult(
            can_proceed=False,
            outcome=ValidationOutcome.DOCUMENT_EXISTS_VALID,
            error_code="DOCUMENT_EXISTS_VALID",
            error_message=(
                f"You already have a valid {name}.{expiry_info} You cannot apply for this "
                f"service until it expires or you request a Lost/Damaged replacement."
            ),
            existing_document=existing
        )

    @staticmethod
    def _input_error(error_code: str) -> ValidationResult:
        return ValidationResult(
            can_proceed=False,
            outcome=ValidationOutcome.INPUT_ERROR,
            error_code=error_code,
            error_message=INPUT_ERROR_MESSAGES[error_code]
        )
