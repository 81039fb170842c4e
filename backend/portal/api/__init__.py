"""API module - Routes and dependencies"""
from .deps import get_current_actor_dep, require_admin_dep, get_store_dep

__all__ = ["get_current_actor_dep", "require_admin_dep", "get_store_dep"]
