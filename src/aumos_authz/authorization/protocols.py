"""Collaborator contracts consumed by the authorization engine.

Each protocol is one narrow capability so callers can supply plain objects,
fakes in tests, or adapters over a database or session layer.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from aumos_authz.permissions.levels import PermissionLevel
from aumos_authz.permissions.matrix import Capability, PermissionMatrix, RequesterClass


@runtime_checkable
class MatrixProvider(Protocol):
    """Supplies the current permission matrix (database, config file, ...)."""

    def get_permission_matrix(self) -> PermissionMatrix:
        """Return a matrix snapshot."""
        ...


@runtime_checkable
class RequesterClassResolver(Protocol):
    """Derives the caller's classification from session or token state."""

    def get_requester_class(self) -> RequesterClass:
        """Return the current caller's class."""
        ...


@runtime_checkable
class IdentityResolver(Protocol):
    """Derives the caller's user id; ``None`` for anonymous callers."""

    def get_user_id(self) -> str | None:
        """Return the current caller's id, if any."""
        ...


@runtime_checkable
class OverrideProvider(Protocol):
    """Per-user custom permissions that replace the matrix value."""

    def get_custom_permission(
        self, user_id: str, capability: Capability
    ) -> PermissionLevel | None:
        """Return the override level, or ``None`` when no override exists."""
        ...


@runtime_checkable
class BulkPermissionLoader(Protocol):
    """Computes a user's full capability -> level map."""

    def load_user_permissions(self, user_id: str) -> Mapping[Capability, PermissionLevel]:
        """Return every capability's effective level for *user_id*."""
        ...
