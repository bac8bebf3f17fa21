"""Shared API dependencies — single import point for all routers.

Re-exports database session, authentication and cache dependencies so that
router modules can import everything they need from one place::

    from rentdesk.api.deps import get_db, get_current_active_user
"""

from rentdesk.auth.dependencies import get_current_active_user, get_current_user
from rentdesk.cache import CacheInvalidator, get_cache
from rentdesk.database import get_db

__all__ = [
    "get_db",
    "get_current_user",
    "get_current_active_user",
    "get_cache",
    "CacheInvalidator",
]
