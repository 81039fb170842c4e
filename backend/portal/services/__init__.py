"""Service modules - Business logic layer"""
from .notification_service import NotificationService
from .application_service import ApplicationService

__all__ = [
    "NotificationService",
    "ApplicationService",
]
