"""Authorization error taxonomy.

Collaborator failures are deliberately absent here: whatever a provider or
resolver raises reaches the caller unchanged and is never read as a deny.
"""
from __future__ import annotations


class AuthorizationError(Exception):
    """Base class for errors raised by the authorization engine."""


class InvalidPermissionLevelError(AuthorizationError, ValueError):
    """Raised by ``validate`` when a required level is not a defined level.

    Attributes
    ----------
    level:
        The rejected value.
    """

    def __init__(self, level: object) -> None:
        self.level = level
        super().__init__(f"Invalid permission level: {level!r}")


class UnknownCapabilityError(AuthorizationError, ValueError):
    """Raised by ``validate`` when a capability is not in the known set.

    Attributes
    ----------
    capability:
        The rejected capability.
    """

    def __init__(self, capability: object) -> None:
        self.capability = capability
        super().__init__(f"Unknown capability: {capability!r}")
