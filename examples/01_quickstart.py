#!/usr/bin/env python3
"""Example: Quickstart — aumos-authz

Minimal working example: define a permission matrix, check decisions for
different requester classes, and grant one user an override.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install aumos-authz
"""
from __future__ import annotations

import aumos_authz as authz


def main() -> None:
    print(f"aumos-authz version: {authz.__version__}")

    # Step 1: Describe who may do what
    matrix = authz.MatrixLoader().load_from_dict({
        "version": "1.0",
        "matrix": {
            "resourceA": {"guest": "none", "authenticated": "view", "admin": "admin"},
            "adminPanel": {"admin": "admin"},
        },
    })
    overrides = authz.InMemoryOverrideStore()
    context = authz.StaticRequesterContext(authz.UserType.GUEST)
    engine = authz.AuthorizationEngine(
        matrix_provider=authz.StaticMatrixProvider(matrix),
        requester_resolver=context,
        identity_resolver=context,
        override_provider=overrides,
    )

    # Step 2: Matrix decisions
    checks = [
        (authz.UserType.ADMIN, "resourceA", authz.PermissionLevel.ADMIN),
        (authz.UserType.AUTHENTICATED, "resourceA", authz.PermissionLevel.EDIT),
        (authz.UserType.GUEST, "resourceA", authz.PermissionLevel.VIEW),
    ]
    print("\nMatrix decisions:")
    for user_type, capability, level in checks:
        granted = engine.has_permission(user_type, capability, level)
        print(f"  [{'ALLOW' if granted else 'DENY'}] {user_type.value} -> {capability} ({level.value})")

    # Step 3: A per-user override beats the matrix
    overrides.set_override("u1", "adminPanel", authz.PermissionLevel.ADMIN)
    context.user_id = "u1"
    granted = engine.authorize("adminPanel", authz.PermissionLevel.ADMIN)
    print(f"\nGuest u1 with override on adminPanel: {'ALLOW' if granted else 'DENY'}")


if __name__ == "__main__":
    main()
