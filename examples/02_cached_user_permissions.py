#!/usr/bin/env python3
"""Example: Cached per-user permission sets — aumos-authz

Prefetch a user's full permission set, serve repeat reads from the cache,
and invalidate after an override changes.

Usage:
    python examples/02_cached_user_permissions.py

Requirements:
    pip install aumos-authz
"""
from __future__ import annotations

import aumos_authz as authz

_USER_CLASSES = {
    "alice": authz.UserType.ADMIN,
    "bob": authz.UserType.AUTHENTICATED,
}


def main() -> None:
    provider = authz.StaticMatrixProvider({
        "reports": {"authenticated": "view", "admin": "admin"},
        "billing": {"admin": "edit"},
    })
    overrides = authz.InMemoryOverrideStore()
    context = authz.StaticRequesterContext(authz.UserType.GUEST)
    engine = authz.AuthorizationEngine(
        matrix_provider=provider,
        requester_resolver=context,
        identity_resolver=context,
        override_provider=overrides,
        bulk_loader=authz.MatrixPermissionLoader(
            provider,
            class_for_user=lambda user_id: _USER_CLASSES.get(user_id, authz.UserType.GUEST),
            override_provider=overrides,
        ),
    )

    for user_id in _USER_CLASSES:
        permissions = engine.get_user_permissions(user_id)
        rendered = ", ".join(f"{k}={v.value}" for k, v in permissions.items())
        print(f"{user_id}: {rendered}")

    print(f"\nCached keys: {engine.cache.keys()}")

    # Changing an override does not touch the cache; invalidate explicitly.
    overrides.set_override("bob", "billing", authz.PermissionLevel.VIEW)
    print(f"bob (stale):  billing={engine.get_user_permissions('bob')['billing'].value}")
    engine.invalidate_user_permissions("bob")
    print(f"bob (fresh):  billing={engine.get_user_permissions('bob')['billing'].value}")

    removed = engine.invalidate_all_permissions()
    print(f"\nInvalidated {removed} cached permission sets")


if __name__ == "__main__":
    main()
