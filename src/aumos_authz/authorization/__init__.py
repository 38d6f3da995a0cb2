"""Authorization engine, its collaborator contracts, and reference providers."""
from __future__ import annotations

from aumos_authz.authorization.engine import AuthorizationEngine
from aumos_authz.authorization.errors import (
    AuthorizationError,
    InvalidPermissionLevelError,
    UnknownCapabilityError,
)
from aumos_authz.authorization.protocols import (
    BulkPermissionLoader,
    IdentityResolver,
    MatrixProvider,
    OverrideProvider,
    RequesterClassResolver,
)
from aumos_authz.authorization.providers import (
    FileMatrixProvider,
    InMemoryOverrideStore,
    MatrixPermissionLoader,
    NoOverrideProvider,
    StaticMatrixProvider,
    StaticRequesterContext,
)

__all__ = [
    "AuthorizationEngine",
    # Errors
    "AuthorizationError",
    "InvalidPermissionLevelError",
    "UnknownCapabilityError",
    # Protocols
    "BulkPermissionLoader",
    "IdentityResolver",
    "MatrixProvider",
    "OverrideProvider",
    "RequesterClassResolver",
    # Providers
    "FileMatrixProvider",
    "InMemoryOverrideStore",
    "MatrixPermissionLoader",
    "NoOverrideProvider",
    "StaticMatrixProvider",
    "StaticRequesterContext",
]
