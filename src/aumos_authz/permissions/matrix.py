"""Permission matrix: (capability, requester class) -> PermissionLevel.

The matrix is a read-only snapshot supplied by a MatrixProvider. Lookups are
closed-world: a capability that is not in the matrix, or a requester class
that has no entry for a capability, resolves to ``PermissionLevel.NONE``.

Capabilities and requester classes are opaque hashable keys. Applications
usually define their own ``str`` enum of capabilities; :class:`UserType` is
provided as a default requester classification. Enum keys are stored by
value, so ``UserType.ADMIN`` and ``"admin"`` address the same cell.

Example
-------
::

    matrix = PermissionMatrix({
        "resourceA": {
            UserType.AUTHENTICATED: PermissionLevel.VIEW,
            UserType.ADMIN: PermissionLevel.ADMIN,
        },
    })
    matrix.lookup("resourceA", UserType.ADMIN)      # PermissionLevel.ADMIN
    matrix.lookup("resourceA", UserType.GUEST)      # PermissionLevel.NONE
    matrix.lookup("unknown", UserType.ADMIN)        # PermissionLevel.NONE
"""
from __future__ import annotations

import logging
from collections.abc import Hashable, Iterator, Mapping
from enum import Enum
from types import MappingProxyType

from pydantic import BaseModel, Field

from aumos_authz.permissions.levels import PermissionLevel, is_permission_level

logger = logging.getLogger(__name__)

Capability = Hashable
RequesterClass = Hashable


class UserType(str, Enum):
    """Default classification of the caller."""

    GUEST = "guest"
    AUTHENTICATED = "authenticated"
    PREMIUM = "premium"
    ADMIN = "admin"


def normalize_key(key: Hashable) -> Hashable:
    """Return the value of an Enum key, or the key unchanged.

    Enum members hash by name, so a ``str`` enum and its string value are
    different dict keys unless normalised.
    """
    if isinstance(key, Enum):
        return key.value
    return key


def _normalize_level(value: object) -> object:
    # Unknown values are kept as-is so comparisons on them fail closed.
    if is_permission_level(value):
        return PermissionLevel(value)
    return value


class PermissionMatrix:
    """Immutable two-level mapping of capability -> requester class -> level.

    Parameters
    ----------
    grants:
        Nested mapping ``{capability: {requester_class: PermissionLevel}}``.
        The mapping is copied; later changes to *grants* are not visible.
    """

    def __init__(
        self,
        grants: Mapping[Capability, Mapping[RequesterClass, PermissionLevel]] | None = None,
    ) -> None:
        self._grants: dict[Hashable, Mapping[Hashable, PermissionLevel]] = {
            normalize_key(capability): MappingProxyType(
                {
                    normalize_key(requester_class): _normalize_level(level)
                    for requester_class, level in per_class.items()
                }
            )
            for capability, per_class in (grants or {}).items()
        }

    def lookup(
        self,
        capability: Capability,
        requester_class: RequesterClass,
    ) -> PermissionLevel:
        """Return the level granted to *requester_class* for *capability*.

        Missing entries resolve to ``NONE``; nothing is raised for unknown keys.
        """
        cap_key = normalize_key(capability)
        if cap_key not in self._grants:
            logger.debug("Capability %r not in matrix; defaulting to NONE", capability)
            return PermissionLevel.NONE
        per_class = self._grants[cap_key]
        class_key = normalize_key(requester_class)
        if class_key not in per_class:
            logger.debug(
                "No grant for %r on %r; defaulting to NONE", requester_class, capability
            )
            return PermissionLevel.NONE
        return per_class[class_key]

    def grants_for(self, capability: Capability) -> Mapping[RequesterClass, PermissionLevel]:
        """Return the read-only per-class grants for *capability* (empty if unknown)."""
        return self._grants.get(normalize_key(capability), MappingProxyType({}))

    def capabilities(self) -> list[Capability]:
        """Return all capabilities present in the matrix, in insertion order."""
        return list(self._grants)

    def requester_classes(self) -> list[RequesterClass]:
        """Return every requester class mentioned anywhere in the matrix."""
        seen: dict[RequesterClass, None] = {}
        for per_class in self._grants.values():
            for requester_class in per_class:
                seen.setdefault(requester_class, None)
        return list(seen)

    def as_dict(self) -> dict[Capability, dict[RequesterClass, PermissionLevel]]:
        """Return a mutable deep copy of the grants."""
        return {cap: dict(per_class) for cap, per_class in self._grants.items()}

    def __contains__(self, capability: object) -> bool:
        return normalize_key(capability) in self._grants  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[Capability]:
        return iter(self._grants)

    def __len__(self) -> int:
        return len(self._grants)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PermissionMatrix):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PermissionMatrix(capabilities={len(self._grants)})"


def lookup(
    matrix: PermissionMatrix | Mapping[Capability, Mapping[RequesterClass, PermissionLevel]],
    capability: Capability,
    requester_class: RequesterClass,
) -> PermissionLevel:
    """Resolve the nominal level for *requester_class* on *capability*.

    Accepts a :class:`PermissionMatrix` or a plain nested mapping.
    """
    if not isinstance(matrix, PermissionMatrix):
        matrix = PermissionMatrix(matrix)
    return matrix.lookup(capability, requester_class)


class PermissionMatrixRecord(BaseModel):
    """Stored envelope for a permission matrix.

    Attributes
    ----------
    id:
        Record identifier.
    data_type:
        Discriminator used by the backing store.
    matrix:
        Grants keyed by capability then requester class (string values).
    created:
        Creation time as a Unix timestamp.
    updated:
        Last update time as a Unix timestamp.
    """

    id: str
    data_type: str = Field(default="permission_matrix")
    matrix: dict[str, dict[str, PermissionLevel]] = Field(default_factory=dict)
    created: int = Field(default=0, ge=0)
    updated: int = Field(default=0, ge=0)

    def to_matrix(self) -> PermissionMatrix:
        """Build a PermissionMatrix from the stored grants."""
        return PermissionMatrix(self.matrix)
