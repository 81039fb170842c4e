"""Service Catalog API"""
from typing import List
from fastapi import APIRouter, Depends, Query

from ..deps import get_store_dep
from ...domain.models import Service
from ...repositories.data_store import DataStore
from ...services.application_service import ApplicationService

router = APIRouter()


@router.get("", response_model=List[Service])
def list_services(
    active_only: bool = Query(True),
    store: DataStore = Depends(get_store_dep)
):
    """Services citizens can apply for"""
    return ApplicationService(store).list_services(active_only)
