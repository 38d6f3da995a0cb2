"""aumos-authz — Feature-level authorization with a permission matrix.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import aumos_authz as authz
>>> context = authz.StaticRequesterContext(authz.UserType.AUTHENTICATED)
>>> engine = authz.AuthorizationEngine(
...     matrix_provider=authz.StaticMatrixProvider(
...         {"reports": {authz.UserType.AUTHENTICATED: authz.PermissionLevel.VIEW}}
...     ),
...     requester_resolver=context,
...     identity_resolver=context,
... )
>>> engine.authorize("reports", authz.PermissionLevel.VIEW)
True
>>> engine.authorize("reports", authz.PermissionLevel.EDIT)
False
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------
from aumos_authz.permissions.levels import (
    LEVEL_HIERARCHY,
    PermissionLevel,
    rank,
    satisfies,
)
from aumos_authz.permissions.matrix import (
    PermissionMatrix,
    PermissionMatrixRecord,
    UserType,
    lookup,
)
from aumos_authz.permissions.matrix_loader import MatrixConfigError, MatrixLoader

# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------
from aumos_authz.cache.permission_cache import PermissionCache, user_permissions_key

# ---------------------------------------------------------------------------
# Authorization
# ---------------------------------------------------------------------------
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

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------
from aumos_authz.config import AuthzConfig, ConfigLoader, build_engine

__all__ = [
    "__version__",
    # Permissions
    "LEVEL_HIERARCHY",
    "MatrixConfigError",
    "MatrixLoader",
    "PermissionLevel",
    "PermissionMatrix",
    "PermissionMatrixRecord",
    "UserType",
    "lookup",
    "rank",
    "satisfies",
    # Cache
    "PermissionCache",
    "user_permissions_key",
    # Authorization
    "AuthorizationEngine",
    "AuthorizationError",
    "BulkPermissionLoader",
    "FileMatrixProvider",
    "IdentityResolver",
    "InMemoryOverrideStore",
    "InvalidPermissionLevelError",
    "MatrixPermissionLoader",
    "MatrixProvider",
    "NoOverrideProvider",
    "OverrideProvider",
    "RequesterClassResolver",
    "StaticMatrixProvider",
    "StaticRequesterContext",
    "UnknownCapabilityError",
    # Config
    "AuthzConfig",
    "ConfigLoader",
    "build_engine",
]
