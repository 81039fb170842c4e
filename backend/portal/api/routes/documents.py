"""
Document Routes

- Eligibility check run by the application form before submission
- Document status snapshot (the secondary lookup path of the check)
- Issued documents of a holder
"""
from typing import List
from fastapi import APIRouter, Depends, Query

from ..deps import get_current_actor_dep, require_admin_dep, get_store_dep
from ...domain.enums import DocumentType
from ...domain.errors import PermissionDeniedError
from ...domain.models import ActorContext, Document, DocumentStatusSnapshot, ValidationResult
from ...engine.validation_engine import DocumentValidationEngine, DirectLookupStrategy
from ...repositories.data_store import DataStore
from ...services.application_service import ApplicationService
from .schemas import EligibilityCheckRequest

router = APIRouter()


@router.post("/eligibility", response_model=ValidationResult)
def check_eligibility(
    request: EligibilityCheckRequest,
    actor: ActorContext = Depends(get_current_actor_dep),
    store: DataStore = Depends(get_store_dep)
):
    """
    Check whether the current holder may apply for a service.

    Denials and input errors come back as a 200 with ``can_proceed=false``.
    """
    return DocumentValidationEngine(store).validate(
        actor.actor_id,
        request.service_id,
        is_replacement=request.is_replacement,
        replacement_reason=request.replacement_reason
    )


@router.get("/status", response_model=DocumentStatusSnapshot)
def get_document_status(
    holder_id: str = Query(..., min_length=1),
    document_type: DocumentType = Query(...),
    actor: ActorContext = Depends(get_current_actor_dep),
    store: DataStore = Depends(get_store_dep)
):
    """Current document of a type for a holder (LOOKUP_UNAVAILABLE on store failure)"""
    if not actor.is_admin and holder_id != actor.actor_id:
        raise PermissionDeniedError(
            "You can only look up your own documents",
            details={"holder_id": holder_id}
        )
    return DirectLookupStrategy(store).lookup(holder_id, document_type)


@router.get("/mine", response_model=List[Document])
def list_my_documents(
    actor: ActorContext = Depends(get_current_actor_dep),
    store: DataStore = Depends(get_store_dep)
):
    """Documents issued to the current holder"""
    return ApplicationService(store).list_holder_documents(actor.actor_id)


@router.get("/holders/{holder_id}", response_model=List[Document])
def list_holder_documents(
    holder_id: str,
    actor: ActorContext = Depends(require_admin_dep),
    store: DataStore = Depends(get_store_dep)
):
    """Documents issued to any holder (admin)"""
    return ApplicationService(store).list_holder_documents(holder_id)
