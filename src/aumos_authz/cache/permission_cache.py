"""In-memory key/value cache with per-entry TTL and prefix invalidation.

PermissionCache memoizes expensive lookups (typically a user's full
permission set). Entries expire lazily: an entry older than its TTL reads as
absent and is purged on that read. There is no size bound; TTL is the only
eviction.

All operations are serialised by a single lock, so the cache is safe to share
across threads.

Permission entries use the key convention ``"user_permissions_" + user_id``
so one user's entries, or every user's, can be dropped with
:meth:`PermissionCache.clear_by_prefix` without touching unrelated keys.

Example
-------
>>> cache = PermissionCache(default_ttl_seconds=600)
>>> cache.set("user_permissions_u1", {"reports": "view"}, ttl_seconds=300)
>>> cache.get("user_permissions_u1")
{'reports': 'view'}
>>> cache.clear_by_prefix("user_permissions_")
1
>>> cache.get("user_permissions_u1") is None
True
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS: float = 600.0
PERMISSION_TTL_SECONDS: float = 300.0
USER_PERMISSIONS_PREFIX: str = "user_permissions_"


def user_permissions_key(user_id: str, prefix: str = USER_PERMISSIONS_PREFIX) -> str:
    """Return the cache key holding *user_id*'s permission set."""
    return f"{prefix}{user_id}"


@dataclass(frozen=True)
class CacheEntry:
    """A stored value with its write time and optional TTL override.

    Attributes
    ----------
    value:
        The cached value.
    stored_at:
        Clock reading (seconds) when the entry was written.
    ttl_seconds:
        Per-entry TTL; ``None`` means the cache default applies.
    """

    value: Any
    stored_at: float
    ttl_seconds: float | None = None

    def is_valid(self, now: float, default_ttl: float) -> bool:
        ttl = self.ttl_seconds if self.ttl_seconds is not None else default_ttl
        return now - self.stored_at < ttl


class PermissionCache:
    """Thread-safe TTL cache keyed by strings.

    Parameters
    ----------
    default_ttl_seconds:
        TTL applied to entries written without an explicit ``ttl_seconds``.
    clock:
        Zero-argument callable returning the current time in seconds.
        Defaults to :func:`time.time`; tests inject a fake clock.
    """

    def __init__(
        self,
        default_ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._default_ttl = default_ttl_seconds
        self._clock = clock or time.time
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for *key*, or *default* if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            if entry.is_valid(self._clock(), self._default_ttl):
                return entry.value
            del self._entries[key]
            logger.debug("Cache entry expired: %s", key)
            return default

    def keys(self) -> list[str]:
        """Return the keys of all unexpired entries."""
        with self._lock:
            now = self._clock()
            return [
                key
                for key, entry in self._entries.items()
                if entry.is_valid(now, self._default_ttl)
            ]

    def __contains__(self, key: object) -> bool:
        with self._lock:
            entry = self._entries.get(key)  # type: ignore[arg-type]
            return entry is not None and entry.is_valid(self._clock(), self._default_ttl)

    def __len__(self) -> int:
        return len(self.keys())

    # ------------------------------------------------------------------
    # Write API
    # ------------------------------------------------------------------

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        """Store *value* under *key*, replacing any existing entry."""
        with self._lock:
            self._entries[key] = CacheEntry(
                value=value, stored_at=self._clock(), ttl_seconds=ttl_seconds
            )

    def delete(self, key: str) -> None:
        """Remove *key* whether or not it has expired. Missing keys are ignored."""
        with self._lock:
            self._entries.pop(key, None)

    clear = delete

    def clear_by_prefix(self, prefix: str) -> int:
        """Remove every key starting with *prefix*; ``""`` empties the cache.

        Returns
        -------
        int
            Number of entries removed.
        """
        with self._lock:
            doomed = [key for key in self._entries if key.startswith(prefix)]
            for key in doomed:
                del self._entries[key]
        logger.debug("Cleared %d cache entries with prefix %r", len(doomed), prefix)
        return len(doomed)

    @property
    def default_ttl_seconds(self) -> float:
        """TTL applied when ``set`` is called without one."""
        return self._default_ttl
