"""TTL cache used to memoize per-user permission sets."""
from __future__ import annotations

from aumos_authz.cache.permission_cache import (
    DEFAULT_TTL_SECONDS,
    PERMISSION_TTL_SECONDS,
    USER_PERMISSIONS_PREFIX,
    CacheEntry,
    PermissionCache,
    user_permissions_key,
)

__all__ = [
    "CacheEntry",
    "DEFAULT_TTL_SECONDS",
    "PERMISSION_TTL_SECONDS",
    "PermissionCache",
    "USER_PERMISSIONS_PREFIX",
    "user_permissions_key",
]
