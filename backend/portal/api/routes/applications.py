"""
Application Routes

Citizens submit and follow their own applications; admins list, review,
approve and reject.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status

from ..deps import get_current_actor_dep, require_admin_dep, get_store_dep
from ...domain.enums import ApplicationStatus
from ...domain.errors import PermissionDeniedError
from ...domain.models import (
    ActorContext, Application, ApplicationDetail, SubmissionRequest, SubmissionResult,
    UploadedDocument
)
from ...engine.state_machine import ApplicationStateMachine
from ...engine.upload_gate import UploadVerificationGate
from ...repositories.data_store import DataStore
from ...services.application_service import ApplicationService
from ...utils.logger import get_logger
from .schemas import ApplicationListResponse, ApprovalResponse, RejectApplicationRequest

logger = get_logger(__name__)
router = APIRouter()


@router.post("", response_model=SubmissionResult, status_code=status.HTTP_201_CREATED)
def submit_application(
    request: SubmissionRequest,
    actor: ActorContext = Depends(get_current_actor_dep),
    store: DataStore = Depends(get_store_dep)
):
    """
    Submit an application for the current holder.

    Runs the eligibility check first; a denial is a 409 DOCUMENT_EXISTS_VALID
    carrying the validation result.
    """
    return ApplicationService(store).submit_application(actor.actor_id, request)


@router.get("", response_model=ApplicationListResponse)
def list_applications(
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    holder_id: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    actor: ActorContext = Depends(get_current_actor_dep),
    store: DataStore = Depends(get_store_dep)
):
    """Admins see every application; citizens only their own"""
    if not actor.is_admin:
        holder_id = actor.actor_id

    service = ApplicationService(store)
    return ApplicationListResponse(
        items=service.list_applications(status_filter, holder_id, skip, limit),
        total=service.count_applications(status_filter, holder_id),
        skip=skip,
        limit=limit
    )


@router.get("/{application_id}", response_model=ApplicationDetail)
def get_application(
    application_id: str,
    actor: ActorContext = Depends(get_current_actor_dep),
    store: DataStore = Depends(get_store_dep)
):
    """Application with uploads, verification summary and issued document"""
    detail = ApplicationService(store).get_application_detail(application_id)
    _ensure_can_view(actor, detail.application)
    return detail


@router.get("/{application_id}/uploads", response_model=List[UploadedDocument])
def list_uploads(
    application_id: str,
    actor: ActorContext = Depends(get_current_actor_dep),
    store: DataStore = Depends(get_store_dep)
):
    """Evidence files attached to an application"""
    application = ApplicationService(store).get_application(application_id)
    _ensure_can_view(actor, application)
    return UploadVerificationGate(store).list_documents(application_id)


@router.post("/{application_id}/approve", response_model=ApprovalResponse)
def approve_application(
    application_id: str,
    actor: ActorContext = Depends(require_admin_dep),
    store: DataStore = Depends(get_store_dep)
):
    """
    Approve a Pending application.

    The decision is final once this returns 200; ``warnings`` lists any
    follow-up step (document, print queue, notification) that did not
    complete and needs operator attention.
    """
    result = ApplicationStateMachine(store).approve(application_id, actor.actor_id)
    return ApprovalResponse.from_result(result)


@router.post("/{application_id}/reject", response_model=Application)
def reject_application(
    application_id: str,
    request: RejectApplicationRequest,
    actor: ActorContext = Depends(require_admin_dep),
    store: DataStore = Depends(get_store_dep)
):
    """Reject a Pending application with a reason"""
    return ApplicationStateMachine(store).reject(application_id, actor.actor_id, request.reason)


def _ensure_can_view(actor: ActorContext, application: Application) -> None:
    if not actor.is_admin and application.holder_id != actor.actor_id:
        raise PermissionDeniedError(
            "You can only view your own applications",
            details={"application_id": application.application_id}
        )
