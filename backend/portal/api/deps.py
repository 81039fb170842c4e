"""API Dependencies - Common dependencies for routes"""
from typing import Optional
from fastapi import Depends, Header

from ..domain.models import ActorContext
from ..domain.errors import AuthenticationError, PermissionDeniedError
from ..repositories.data_store import DataStore, get_data_store


def get_store_dep() -> DataStore:
    """Data store used by the request's services"""
    return get_data_store()


async def get_current_actor_dep(
    x_actor_id: Optional[str] = Header(None, alias="X-Actor-Id"),
    x_actor_role: Optional[str] = Header(None, alias="X-Actor-Role")
) -> ActorContext:
    """
    Dependency to get the current actor from identity headers

    The identity layer in front of this service authenticates the user and
    forwards their national number and role.

    Raises:
        AuthenticationError: if the actor header is missing
    """
    if not x_actor_id or not x_actor_id.strip():
        raise AuthenticationError("X-Actor-Id header is missing")

    return ActorContext(actor_id=x_actor_id.strip(), role=(x_actor_role or "citizen").strip().lower())


async def require_admin_dep(
    actor: ActorContext = Depends(get_current_actor_dep)
) -> ActorContext:
    """
    Dependency for admin-only routes

    Raises:
        PermissionDeniedError: if the actor is not an admin
    """
    if not actor.is_admin:
        raise PermissionDeniedError("Admin role required", details={"actor_id": actor.actor_id})
    return actor
