"""Authorization engine: renders yes/no access decisions.

Decision procedure for ``has_permission(requester_class, capability,
required_level, user_id)``:

1. When a ``user_id`` is given, ask the override provider. If it returns a
   level (an explicit ``NONE`` included) that level alone is compared with
   ``required_level``; the matrix is not consulted.
2. Otherwise the matrix level for ``(capability, requester_class)`` is
   compared, with missing entries resolving to ``NONE``.

The engine holds no per-call state. Collaborator exceptions propagate
unchanged and are never turned into a deny or a grant; there are no
retries.

A second access pattern, ``get_user_permissions``, prefetches a user's full
permission set through a bulk loader and memoizes it in a
:class:`PermissionCache` under ``"user_permissions_" + user_id``.

Example
-------
::

    engine = AuthorizationEngine(
        matrix_provider=StaticMatrixProvider({
            "resourceA": {UserType.ADMIN: PermissionLevel.ADMIN},
        }),
        requester_resolver=context,
        identity_resolver=context,
    )
    engine.has_permission(UserType.ADMIN, "resourceA", PermissionLevel.ADMIN)  # True
    engine.authorize("resourceA", PermissionLevel.VIEW)
"""
from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable

from aumos_authz.authorization.errors import (
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
from aumos_authz.authorization.providers import NoOverrideProvider
from aumos_authz.cache.permission_cache import (
    PERMISSION_TTL_SECONDS,
    USER_PERMISSIONS_PREFIX,
    PermissionCache,
    user_permissions_key,
)
from aumos_authz.permissions.levels import (
    PermissionLevel,
    is_permission_level,
    satisfies,
)
from aumos_authz.permissions.matrix import Capability, RequesterClass, lookup, normalize_key

logger = logging.getLogger(__name__)

_MISSING = object()


class AuthorizationEngine:
    """Decides whether a requester holds a capability at a required level.

    Parameters
    ----------
    matrix_provider:
        Supplies the permission matrix for each decision.
    requester_resolver:
        Resolves the current caller's class for :meth:`authorize`.
    identity_resolver:
        Resolves the current caller's user id for :meth:`authorize`.
    override_provider:
        Per-user overrides. Defaults to :class:`NoOverrideProvider`.
    bulk_loader:
        Computes a user's full permission set for
        :meth:`get_user_permissions`. Optional.
    cache:
        Cache used by :meth:`get_user_permissions`. A private
        :class:`PermissionCache` is created when omitted.
    permission_ttl_seconds:
        TTL for cached permission sets.
    cache_key_prefix:
        Prefix for permission cache keys.
    known_capabilities:
        When given, :meth:`validate` rejects capabilities outside this set.
    """

    def __init__(
        self,
        matrix_provider: MatrixProvider,
        requester_resolver: RequesterClassResolver,
        identity_resolver: IdentityResolver,
        override_provider: OverrideProvider | None = None,
        bulk_loader: BulkPermissionLoader | None = None,
        cache: PermissionCache | None = None,
        permission_ttl_seconds: float = PERMISSION_TTL_SECONDS,
        cache_key_prefix: str = USER_PERMISSIONS_PREFIX,
        known_capabilities: Iterable[Capability] | None = None,
    ) -> None:
        self._matrix_provider = matrix_provider
        self._requester_resolver = requester_resolver
        self._identity_resolver = identity_resolver
        self._override_provider = (
            override_provider if override_provider is not None else NoOverrideProvider()
        )
        self._bulk_loader = bulk_loader
        self._cache = cache if cache is not None else PermissionCache()
        self._permission_ttl = permission_ttl_seconds
        self._cache_key_prefix = cache_key_prefix
        self._known_capabilities: frozenset[Hashable] | None = (
            frozenset(normalize_key(c) for c in known_capabilities)
            if known_capabilities is not None
            else None
        )

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def effective_level(
        self,
        requester_class: RequesterClass,
        capability: Capability,
        user_id: str | None = None,
    ) -> PermissionLevel:
        """Return the level a decision would compare against the requirement.

        An override for ``(user_id, capability)`` wins outright; otherwise the
        matrix level (``NONE`` when absent) is returned.
        """
        if user_id:
            override = self._override_provider.get_custom_permission(user_id, capability)
            if override is not None:
                logger.debug(
                    "Override applied: user=%s capability=%r level=%s",
                    user_id,
                    capability,
                    getattr(override, "value", override),
                )
                return override

        matrix = self._matrix_provider.get_permission_matrix()
        return lookup(matrix, capability, requester_class)

    def has_permission(
        self,
        requester_class: RequesterClass,
        capability: Capability,
        required_level: PermissionLevel,
        user_id: str | None = None,
    ) -> bool:
        """Return True if the requester holds *capability* at *required_level*.

        Parameters
        ----------
        requester_class:
            The caller's classification (matrix column).
        capability:
            The capability being requested (matrix row).
        required_level:
            Minimum level needed.
        user_id:
            When given, a custom override for this user takes precedence
            over the matrix.
        """
        level = self.effective_level(requester_class, capability, user_id)
        granted = satisfies(level, required_level)
        logger.debug(
            "Permission %s: class=%r capability=%r required=%s held=%s user=%s",
            "GRANTED" if granted else "DENIED",
            requester_class,
            capability,
            getattr(required_level, "value", required_level),
            getattr(level, "value", level),
            user_id,
        )
        return granted

    def authorize(self, capability: Capability, required_level: PermissionLevel) -> bool:
        """Check the current caller, as resolved by the injected resolvers."""
        requester_class = self._requester_resolver.get_requester_class()
        user_id = self._identity_resolver.get_user_id()
        return self.has_permission(requester_class, capability, required_level, user_id)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self, capability: Capability, required_level: object) -> None:
        """Reject a required level outside the defined set.

        Raises
        ------
        InvalidPermissionLevelError
            If *required_level* is not one of the five levels.
        UnknownCapabilityError
            If ``known_capabilities`` was configured and *capability* is not
            in it.
        """
        if not required_level or not is_permission_level(required_level):
            raise InvalidPermissionLevelError(required_level)
        self.validate_capability(capability)

    def validate_capability(self, capability: Capability) -> None:
        """Capability check hook; subclasses may override."""
        if self._known_capabilities is None:
            return
        if normalize_key(capability) not in self._known_capabilities:
            raise UnknownCapabilityError(capability)

    # ------------------------------------------------------------------
    # Bulk permission sets (cached)
    # ------------------------------------------------------------------

    def get_user_permissions(self, user_id: str) -> dict[Capability, PermissionLevel]:
        """Return *user_id*'s full permission set, from cache when fresh.

        The returned dict is a copy; mutating it does not affect the cache.

        Raises
        ------
        RuntimeError
            If the engine was built without a bulk loader.
        """
        key = user_permissions_key(user_id, self._cache_key_prefix)
        cached = self._cache.get(key, _MISSING)
        if cached is not _MISSING:
            return dict(cached)

        if self._bulk_loader is None:
            raise RuntimeError("No bulk permission loader configured.")

        permissions = dict(self._bulk_loader.load_user_permissions(user_id))
        self._cache.set(key, dict(permissions), ttl_seconds=self._permission_ttl)
        logger.debug(
            "Cached %d permissions for user=%s (ttl=%ss)",
            len(permissions),
            user_id,
            self._permission_ttl,
        )
        return permissions

    def invalidate_user_permissions(self, user_id: str) -> int:
        """Drop every cached permission entry for *user_id*."""
        return self._cache.clear_by_prefix(
            user_permissions_key(user_id, self._cache_key_prefix)
        )

    def invalidate_all_permissions(self) -> int:
        """Drop cached permission entries for every user.

        Unrelated keys sharing the cache are left alone.
        """
        return self._cache.clear_by_prefix(self._cache_key_prefix)

    @property
    def cache(self) -> PermissionCache:
        """The cache backing :meth:`get_user_permissions`."""
        return self._cache
