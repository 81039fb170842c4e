"""API Routes module"""
from fastapi import APIRouter

from .services import router as services_router
from .documents import router as documents_router
from .applications import router as applications_router
from .uploads import router as uploads_router
from .print_queue import router as print_queue_router
from .notifications import router as notifications_router

# Main API router
api_router = APIRouter()

api_router.include_router(services_router, prefix="/services", tags=["Services"])
api_router.include_router(documents_router, prefix="/documents", tags=["Documents"])
api_router.include_router(applications_router, prefix="/applications", tags=["Applications"])
api_router.include_router(uploads_router, prefix="/uploads", tags=["Uploads"])
api_router.include_router(print_queue_router, prefix="/print-queue", tags=["Print Queue"])
api_router.include_router(notifications_router, prefix="/notifications", tags=["Notifications"])

__all__ = ["api_router"]
