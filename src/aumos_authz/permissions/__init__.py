"""Permission levels and the permission matrix.

Example
-------
::

    from aumos_authz.permissions import (
        PermissionLevel,
        PermissionMatrix,
        UserType,
        satisfies,
    )

    matrix = PermissionMatrix({"reports": {UserType.AUTHENTICATED: PermissionLevel.VIEW}})
    level = matrix.lookup("reports", UserType.AUTHENTICATED)
    assert satisfies(level, PermissionLevel.VIEW)
"""
from __future__ import annotations

from aumos_authz.permissions.levels import (
    LEVEL_HIERARCHY,
    PermissionLevel,
    is_permission_level,
    rank,
    satisfies,
    to_permission_level,
)
from aumos_authz.permissions.matrix import (
    Capability,
    PermissionMatrix,
    PermissionMatrixRecord,
    RequesterClass,
    UserType,
    lookup,
    normalize_key,
)
from aumos_authz.permissions.matrix_loader import MatrixConfigError, MatrixLoader

__all__ = [
    # Levels
    "LEVEL_HIERARCHY",
    "PermissionLevel",
    "is_permission_level",
    "rank",
    "satisfies",
    "to_permission_level",
    # Matrix
    "Capability",
    "PermissionMatrix",
    "PermissionMatrixRecord",
    "RequesterClass",
    "UserType",
    "lookup",
    "normalize_key",
    # Loader
    "MatrixConfigError",
    "MatrixLoader",
]
