"""Holder Notifications API - Inbox endpoints"""
from fastapi import APIRouter, Depends, Query

from ..deps import get_current_actor_dep, get_store_dep
from ...domain.models import ActorContext, Notification
from ...repositories.data_store import DataStore
from ...services.notification_service import NotificationService
from .schemas import NotificationListResponse, UnreadCountResponse, MarkReadResponse

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
def get_notifications(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    unread_only: bool = Query(False),
    actor: ActorContext = Depends(get_current_actor_dep),
    store: DataStore = Depends(get_store_dep)
):
    """Current holder's notifications, newest first"""
    service = NotificationService(store)
    return NotificationListResponse(
        items=service.list_for_holder(actor.actor_id, unread_only=unread_only, skip=skip, limit=limit),
        unread_count=service.unread_count(actor.actor_id)
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
def get_unread_count(
    actor: ActorContext = Depends(get_current_actor_dep),
    store: DataStore = Depends(get_store_dep)
):
    return UnreadCountResponse(unread_count=NotificationService(store).unread_count(actor.actor_id))


@router.post("/read-all", response_model=MarkReadResponse)
def mark_all_read(
    actor: ActorContext = Depends(get_current_actor_dep),
    store: DataStore = Depends(get_store_dep)
):
    count = NotificationService(store).mark_all_as_read(actor.actor_id)
    return MarkReadResponse(success=True, marked_count=count)


@router.post("/{notification_id}/read", response_model=Notification)
def mark_read(
    notification_id: str,
    actor: ActorContext = Depends(get_current_actor_dep),
    store: DataStore = Depends(get_store_dep)
):
    return NotificationService(store).mark_as_read(notification_id, actor.actor_id)
