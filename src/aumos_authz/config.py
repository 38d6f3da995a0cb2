"""Authorization configuration loader with Pydantic v2 validation.

Loads an ``authz.yaml`` file into a typed :class:`AuthzConfig` and wires an
:class:`AuthorizationEngine` from it. Unknown keys are allowed so newer
config files still load.

Example
-------
::

    version: "1"
    matrix_path: ./permissions.yaml
    known_capabilities: [resourceA, adminPanel]
    cache:
      default_ttl_seconds: 600
      permission_ttl_seconds: 300
"""
from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from aumos_authz.authorization.engine import AuthorizationEngine
from aumos_authz.authorization.protocols import (
    BulkPermissionLoader,
    IdentityResolver,
    MatrixProvider,
    OverrideProvider,
    RequesterClassResolver,
)
from aumos_authz.authorization.providers import FileMatrixProvider
from aumos_authz.cache.permission_cache import (
    DEFAULT_TTL_SECONDS,
    PERMISSION_TTL_SECONDS,
    USER_PERMISSIONS_PREFIX,
    PermissionCache,
)


class CacheConfig(BaseModel):
    """Configuration for the permission cache."""

    model_config = {"extra": "allow"}

    default_ttl_seconds: float = Field(default=DEFAULT_TTL_SECONDS, ge=0)
    permission_ttl_seconds: float = Field(default=PERMISSION_TTL_SECONDS, ge=0)
    key_prefix: str = Field(default=USER_PERMISSIONS_PREFIX, min_length=1)


class AuthzConfig(BaseModel):
    """Top-level authorization configuration schema."""

    model_config = {"extra": "allow"}

    version: str = Field(default="1")
    matrix_path: Path | None = Field(default=None)
    known_capabilities: list[str] | None = Field(default=None)
    cache: CacheConfig = Field(default_factory=CacheConfig)


class ConfigLoader:
    """Loads and validates authorization YAML configuration."""

    def load(self, config_path: Path) -> AuthzConfig:
        """Load and validate a YAML config file.

        Raises
        ------
        FileNotFoundError:
            When the config file does not exist.
        pydantic.ValidationError:
            When the content fails validation.
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Authorization config not found: {config_path}")

        with config_path.open("r", encoding="utf-8") as fh:
            raw: dict[str, object] = yaml.safe_load(fh) or {}

        config = AuthzConfig.model_validate(raw)
        # Relative matrix paths are resolved against the config file's directory.
        if config.matrix_path is not None and not config.matrix_path.is_absolute():
            config.matrix_path = config_path.parent / config.matrix_path
        return config

    def load_string(self, yaml_content: str) -> AuthzConfig:
        """Load and validate a YAML string directly."""
        raw: dict[str, object] = yaml.safe_load(yaml_content) or {}
        return AuthzConfig.model_validate(raw)

    def defaults(self) -> AuthzConfig:
        """Return a configuration with all defaults applied."""
        return AuthzConfig()


def build_engine(
    config: AuthzConfig,
    requester_resolver: RequesterClassResolver,
    identity_resolver: IdentityResolver,
    matrix_provider: MatrixProvider | None = None,
    override_provider: OverrideProvider | None = None,
    bulk_loader: BulkPermissionLoader | None = None,
    cache: PermissionCache | None = None,
) -> AuthorizationEngine:
    """Build an engine from *config*.

    When *matrix_provider* is omitted the config's ``matrix_path`` is served
    through a :class:`FileMatrixProvider`.

    Raises
    ------
    ValueError
        If neither *matrix_provider* nor ``config.matrix_path`` is given.
    """
    if matrix_provider is None:
        if config.matrix_path is None:
            raise ValueError("No matrix_provider given and config has no matrix_path.")
        matrix_provider = FileMatrixProvider(config.matrix_path)

    return AuthorizationEngine(
        matrix_provider=matrix_provider,
        requester_resolver=requester_resolver,
        identity_resolver=identity_resolver,
        override_provider=override_provider,
        bulk_loader=bulk_loader,
        cache=(
            cache
            if cache is not None
            else PermissionCache(default_ttl_seconds=config.cache.default_ttl_seconds)
        ),
        permission_ttl_seconds=config.cache.permission_ttl_seconds,
        cache_key_prefix=config.cache.key_prefix,
        known_capabilities=config.known_capabilities,
    )
