"""Permission level ordering.

Five grant levels form a fixed total order. A level implies every capability
granted by the levels below it::

    NONE < VIEW < EDIT < DELETE < ADMIN

Example
-------
>>> satisfies(PermissionLevel.ADMIN, PermissionLevel.VIEW)
True
>>> satisfies(PermissionLevel.VIEW, PermissionLevel.EDIT)
False
>>> satisfies("bogus", PermissionLevel.NONE)
False
"""
from __future__ import annotations

from enum import Enum


class PermissionLevel(str, Enum):
    """Grant level a requester holds (or needs) for a capability."""

    NONE = "none"
    VIEW = "view"
    EDIT = "edit"
    DELETE = "delete"
    ADMIN = "admin"


LEVEL_HIERARCHY: tuple[PermissionLevel, ...] = (
    PermissionLevel.NONE,
    PermissionLevel.VIEW,
    PermissionLevel.EDIT,
    PermissionLevel.DELETE,
    PermissionLevel.ADMIN,
)

_RANKS: dict[PermissionLevel, int] = {
    level: index for index, level in enumerate(LEVEL_HIERARCHY)
}


def _coerce(value: object) -> PermissionLevel | None:
    if isinstance(value, PermissionLevel):
        return value
    if isinstance(value, str):
        try:
            return PermissionLevel(value)
        except ValueError:
            return None
    return None


def is_permission_level(value: object) -> bool:
    """Return True if *value* is a level or the string value of one."""
    return _coerce(value) is not None


def to_permission_level(value: object) -> PermissionLevel:
    """Convert *value* to a PermissionLevel.

    Raises
    ------
    ValueError
        If *value* is not one of the five defined levels.
    """
    level = _coerce(value)
    if level is None:
        raise ValueError(
            f"Unknown permission level {value!r}. "
            f"Valid levels: {[lvl.value for lvl in LEVEL_HIERARCHY]}."
        )
    return level


def rank(level: object) -> int | None:
    """Return the position of *level* in the hierarchy, or None if unknown."""
    coerced = _coerce(level)
    if coerced is None:
        return None
    return _RANKS[coerced]


def satisfies(user_level: object, required_level: object) -> bool:
    """Return True if *user_level* is at least *required_level*.

    Unrecognised input on either side yields False (fail closed).
    """
    user_rank = rank(user_level)
    required_rank = rank(required_level)
    if user_rank is None or required_rank is None:
        return False
    return user_rank >= required_rank
