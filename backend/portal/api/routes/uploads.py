"""Upload Verification Routes (admin)"""
from fastapi import APIRouter, Depends

from ..deps import require_admin_dep, get_store_dep
from ...domain.enums import UploadStatus
from ...domain.models import ActorContext, UploadedDocument
from ...engine.upload_gate import UploadVerificationGate
from ...repositories.data_store import DataStore
from .schemas import UploadDecisionRequest

router = APIRouter()


@router.post("/{upload_id}/verify", response_model=UploadedDocument)
def verify_upload(
    upload_id: str,
    actor: ActorContext = Depends(require_admin_dep),
    store: DataStore = Depends(get_store_dep)
):
    """Mark an uploaded document verified"""
    return UploadVerificationGate(store).set_status(upload_id, UploadStatus.VERIFIED, actor.actor_id)


@router.post("/{upload_id}/reject", response_model=UploadedDocument)
def reject_upload(
    upload_id: str,
    request: UploadDecisionRequest,
    actor: ActorContext = Depends(require_admin_dep),
    store: DataStore = Depends(get_store_dep)
):
    """Mark an uploaded document rejected; a reason is required"""
    return UploadVerificationGate(store).set_status(
        upload_id, UploadStatus.REJECTED, actor.actor_id, reason=request.reason
    )
