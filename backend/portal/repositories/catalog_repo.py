"""Catalog Repository - Read access to services and holder profiles"""
from typing import List, Optional
from pymongo import ASCENDING

from .data_store import DataStore, get_data_store
from ..domain.models import Service, UserProfile
from ..domain.errors import ServiceNotFoundError

SERVICES_TABLE = "services"
USERS_TABLE = "users"


class CatalogRepository:
    """Repository for the read-only service catalog and user profiles"""

    def __init__(self, store: Optional[DataStore] = None):
        self._store = store or get_data_store()

    # =========================================================================
    # Services
    # =========================================================================

    def get_service(self, service_id: int) -> Optional[Service]:
        doc = self._store.find_one(SERVICES_TABLE, {"service_id": service_id})
        if doc:
            return Service.model_validate(doc)
        return None

    def get_service_or_raise(self, service_id: int) -> Service:
        service = self.get_service(service_id)
        if not service:
            raise ServiceNotFoundError(
                f"Service {service_id} not found",
                details={"service_id": service_id}
            )
        return service

    def list_services(self, active_only: bool = True) -> List[Service]:
        query = {"is_active": True} if active_only else {}
        docs = self._store.find_many(SERVICES_TABLE, query, order=[("service_id", ASCENDING)])
        return [Service.model_validate(doc) for doc in docs]

    def add_service(self, service: Service) -> Service:
        """Insert a catalog entry (seeding only)"""
        self._store.insert(SERVICES_TABLE, service.model_dump(mode="json"))
        return service

    # =========================================================================
    # Users
    # =========================================================================

    def get_user(self, holder_id: str) -> Optional[UserProfile]:
        doc = self._store.find_one(USERS_TABLE, {"holder_id": holder_id})
        if doc:
            return UserProfile.model_validate(doc)
        return None

    def add_user(self, user: UserProfile) -> UserProfile:
        """Insert a holder profile (seeding only)"""
        self._store.insert(USERS_TABLE, user.model_dump(mode="json"))
        return user
