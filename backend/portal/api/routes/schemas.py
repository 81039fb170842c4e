"""Request / response schemas shared by the portal routes"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict

from ...domain.models import (
    Application, Document, PrintQueueItem, PrintQueueView, ApprovalResult,
    ApprovalStepFailure, BulkPrintResult, Notification
)


# =============================================================================
# Requests
# =============================================================================

class EligibilityCheckRequest(BaseModel):
    """Pre-submission eligibility check"""
    model_config = ConfigDict(extra="forbid")

    service_id: int
    is_replacement: bool = False
    replacement_reason: Optional[str] = None


class RejectApplicationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reason: str = Field(..., description="Shown to the holder")


class UploadDecisionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reason: Optional[str] = Field(None, description="Required when rejecting")


class BulkPrintRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    queue_ids: List[str] = Field(..., min_length=1)


# =============================================================================
# Responses
# =============================================================================

class ApplicationListResponse(BaseModel):
    items: List[Application]
    total: int
    skip: int
    limit: int


class ApprovalResponse(BaseModel):
    """Approval outcome with the side-effect report flattened in"""
    application: Application
    document: Optional[Document] = None
    print_item: Optional[PrintQueueItem] = None
    superseded_document_ids: List[str] = Field(default_factory=list)
    warnings: List[ApprovalStepFailure] = Field(default_factory=list)
    fully_completed: bool

    @classmethod
    def from_result(cls, result: ApprovalResult) -> "ApprovalResponse":
        return cls(**result.model_dump(), fully_completed=result.fully_completed)


class PrintQueueListResponse(BaseModel):
    items: List[PrintQueueView]
    total: int


class BulkPrintResponse(BaseModel):
    success: bool
    printed_count: int
    failed_count: int
    printed_ids: List[str]
    failed: Dict[str, str]

    @classmethod
    def from_result(cls, result: BulkPrintResult) -> "BulkPrintResponse":
        return cls(
            success=result.success,
            printed_count=result.printed_count,
            failed_count=result.failed_count,
            printed_ids=result.printed_ids,
            failed=result.failed
        )


class NotificationListResponse(BaseModel):
    items: List[Notification]
    unread_count: int


class UnreadCountResponse(BaseModel):
    unread_count: int


class MarkReadResponse(BaseModel):
    success: bool
    marked_count: int
