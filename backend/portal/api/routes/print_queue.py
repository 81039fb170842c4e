"""Print Queue Routes (admin print desk)"""
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query

from ..deps import require_admin_dep, get_store_dep
from ...domain.enums import PrintStatus
from ...domain.models import ActorContext, PrintQueueFilters, PrintQueueItem, PrintQueueStats, PrintQueueView
from ...engine.print_queue import PrintQueueProjector
from ...repositories.data_store import DataStore
from .schemas import BulkPrintRequest, BulkPrintResponse, PrintQueueListResponse

router = APIRouter()


@router.get("", response_model=PrintQueueListResponse)
def list_print_queue(
    status: Optional[PrintStatus] = Query(PrintStatus.PENDING_PRINT),
    service_type: Optional[str] = Query(None),
    office_location: Optional[str] = Query(None),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    search: Optional[str] = Query(None),
    sort_field: str = Query("approval_date"),
    sort_order: str = Query("asc", pattern="^(asc|desc)$"),
    all_statuses: bool = Query(False, description="Ignore the status filter"),
    actor: ActorContext = Depends(require_admin_dep),
    store: DataStore = Depends(get_store_dep)
):
    """Queue with time in queue and priority computed at request time"""
    filters = PrintQueueFilters(
        status=None if all_statuses else status,
        service_type=service_type,
        office_location=office_location,
        date_from=date_from,
        date_to=date_to,
        search_term=search
    )
    items = PrintQueueProjector(store).list_queue(filters, sort_field, sort_order)
    return PrintQueueListResponse(items=items, total=len(items))


@router.get("/stats", response_model=PrintQueueStats)
def get_print_queue_stats(
    actor: ActorContext = Depends(require_admin_dep),
    store: DataStore = Depends(get_store_dep)
):
    """Pending / printed counts for the print desk header"""
    return PrintQueueProjector(store).get_stats()


@router.post("/print-bulk", response_model=BulkPrintResponse)
def print_bulk(
    request: BulkPrintRequest,
    actor: ActorContext = Depends(require_admin_dep),
    store: DataStore = Depends(get_store_dep)
):
    """Mark several items printed; each id succeeds or fails on its own"""
    result = PrintQueueProjector(store).mark_printed_bulk(request.queue_ids, actor.actor_id)
    return BulkPrintResponse.from_result(result)


@router.get("/{queue_id}", response_model=PrintQueueView)
def get_print_queue_item(
    queue_id: str,
    actor: ActorContext = Depends(require_admin_dep),
    store: DataStore = Depends(get_store_dep)
):
    return PrintQueueProjector(store).get_item(queue_id)


@router.post("/{queue_id}/print", response_model=PrintQueueItem)
def mark_printed(
    queue_id: str,
    actor: ActorContext = Depends(require_admin_dep),
    store: DataStore = Depends(get_store_dep)
):
    """Mark one item printed (409 ALREADY_PRINTED if it was)"""
    return PrintQueueProjector(store).mark_printed(queue_id, actor.actor_id)
