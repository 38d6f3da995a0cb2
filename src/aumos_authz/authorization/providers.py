"""In-memory collaborator implementations.

These cover the common cases (a matrix held in memory or in a YAML file, an
override table, a fixed caller) and double as fakes in tests. Anything
backed by a real store implements the protocols in
:mod:`aumos_authz.authorization.protocols` directly.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Hashable, Mapping
from pathlib import Path

from aumos_authz.authorization.protocols import MatrixProvider, OverrideProvider
from aumos_authz.permissions.levels import PermissionLevel, to_permission_level
from aumos_authz.permissions.matrix import (
    Capability,
    PermissionMatrix,
    RequesterClass,
    normalize_key,
)
from aumos_authz.permissions.matrix_loader import MatrixLoader

logger = logging.getLogger(__name__)


class StaticMatrixProvider:
    """Serves a fixed matrix.

    Parameters
    ----------
    matrix:
        A :class:`PermissionMatrix` or a nested mapping to build one from.
    """

    def __init__(
        self,
        matrix: PermissionMatrix | Mapping[Capability, Mapping[RequesterClass, PermissionLevel]],
    ) -> None:
        if not isinstance(matrix, PermissionMatrix):
            matrix = PermissionMatrix(matrix)
        self._matrix = matrix

    def get_permission_matrix(self) -> PermissionMatrix:
        return self._matrix


class FileMatrixProvider:
    """Reads the matrix from a YAML file on every call.

    Edits to the file take effect on the next decision without a restart.
    Read and parse errors propagate to the caller.
    """

    def __init__(self, path: str | Path, loader: MatrixLoader | None = None) -> None:
        self._path = Path(path)
        self._loader = loader if loader is not None else MatrixLoader()

    def get_permission_matrix(self) -> PermissionMatrix:
        return self._loader.load(self._path)

    @property
    def path(self) -> Path:
        return self._path


class NoOverrideProvider:
    """Default override provider: no user has a custom permission."""

    def get_custom_permission(
        self, user_id: str, capability: Capability
    ) -> PermissionLevel | None:
        return None


class InMemoryOverrideStore:
    """Thread-safe table of per-(user, capability) override levels."""

    def __init__(self) -> None:
        self._overrides: dict[str, dict[Hashable, PermissionLevel]] = {}
        self._lock = threading.Lock()

    def set_override(
        self, user_id: str, capability: Capability, level: PermissionLevel | str
    ) -> None:
        """Record an override. An explicit ``NONE`` blocks access."""
        resolved = to_permission_level(level)
        with self._lock:
            self._overrides.setdefault(user_id, {})[normalize_key(capability)] = resolved
        logger.debug(
            "Override set: user=%s capability=%r level=%s", user_id, capability, resolved.value
        )

    def remove_override(self, user_id: str, capability: Capability) -> None:
        """Drop one override; missing entries are ignored."""
        with self._lock:
            per_user = self._overrides.get(user_id)
            if per_user is not None:
                per_user.pop(normalize_key(capability), None)
                if not per_user:
                    del self._overrides[user_id]

    def clear(self, user_id: str | None = None) -> None:
        """Drop every override for *user_id*, or for all users when ``None``."""
        with self._lock:
            if user_id is None:
                self._overrides.clear()
            else:
                self._overrides.pop(user_id, None)

    def overrides_for(self, user_id: str) -> dict[Hashable, PermissionLevel]:
        """Return a copy of *user_id*'s overrides."""
        with self._lock:
            return dict(self._overrides.get(user_id, {}))

    def get_custom_permission(
        self, user_id: str, capability: Capability
    ) -> PermissionLevel | None:
        with self._lock:
            per_user = self._overrides.get(user_id)
            if per_user is None:
                return None
            return per_user.get(normalize_key(capability))


class MatrixPermissionLoader:
    """Builds a user's full permission set from the matrix.

    Every capability in the matrix is resolved for the user's class, then
    any override for that user replaces the matrix value.

    Parameters
    ----------
    matrix_provider:
        Source of the matrix.
    class_for_user:
        Maps a user id to that user's requester class.
    override_provider:
        Optional per-user overrides.
    """

    def __init__(
        self,
        matrix_provider: MatrixProvider,
        class_for_user: Callable[[str], RequesterClass],
        override_provider: OverrideProvider | None = None,
    ) -> None:
        self._matrix_provider = matrix_provider
        self._class_for_user = class_for_user
        self._override_provider = (
            override_provider if override_provider is not None else NoOverrideProvider()
        )

    def load_user_permissions(self, user_id: str) -> dict[Capability, PermissionLevel]:
        requester_class = self._class_for_user(user_id)
        matrix = self._matrix_provider.get_permission_matrix()
        if not isinstance(matrix, PermissionMatrix):
            matrix = PermissionMatrix(matrix)
        permissions: dict[Capability, PermissionLevel] = {}
        for capability in matrix.capabilities():
            override = self._override_provider.get_custom_permission(user_id, capability)
            if override is not None:
                permissions[capability] = override
            else:
                permissions[capability] = matrix.lookup(capability, requester_class)
        logger.debug(
            "Loaded %d permissions for user=%s class=%r",
            len(permissions),
            user_id,
            requester_class,
        )
        return permissions


class StaticRequesterContext:
    """Fixed caller identity; implements both resolver protocols.

    Useful for scripts, background jobs, and tests. Attributes may be
    reassigned between calls.
    """

    def __init__(self, requester_class: RequesterClass, user_id: str | None = None) -> None:
        self.requester_class = requester_class
        self.user_id = user_id

    def get_requester_class(self) -> RequesterClass:
        return self.requester_class

    def get_user_id(self) -> str | None:
        return self.user_id
