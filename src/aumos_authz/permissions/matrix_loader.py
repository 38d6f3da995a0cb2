"""YAML-based loader for permission matrices.

MatrixLoader reads matrix configs (files, YAML strings, or dicts) and builds
:class:`PermissionMatrix` instances. Level names are validated up front so a
typo in a config file fails loudly at load time instead of silently denying.

Schema
------
::

    version: "1.0"
    description: "Feature permissions for the web app"
    matrix:
      resourceA:
        guest: none
        authenticated: view
        premium: edit
        admin: admin
      adminPanel:
        admin: admin

Capability and requester-class keys are kept as strings. Classes omitted for
a capability resolve to ``none`` at lookup time.

Example
-------
::

    loader = MatrixLoader()
    matrix = loader.load("/etc/app/permissions.yaml")
    matrix.lookup("resourceA", "authenticated")   # PermissionLevel.VIEW
"""
from __future__ import annotations

import logging
from pathlib import Path

import yaml

from aumos_authz.permissions.levels import PermissionLevel, to_permission_level
from aumos_authz.permissions.matrix import PermissionMatrix

logger = logging.getLogger(__name__)

_SUPPORTED_VERSIONS: frozenset[str] = frozenset(["1.0", "1"])


class MatrixConfigError(ValueError):
    """Raised when a matrix config is malformed or invalid.

    Attributes
    ----------
    config_path:
        The path to the config file that caused the error, if known.
    """

    def __init__(self, message: str, config_path: str | None = None) -> None:
        self.config_path = config_path
        prefix = f"[{config_path}] " if config_path else ""
        super().__init__(f"{prefix}{message}")


class MatrixLoader:
    """Loads PermissionMatrix configurations from YAML files or dicts.

    Parameters
    ----------
    strict:
        When ``True``, unknown top-level keys are treated as an error.
        Default ``False`` (unknown keys are ignored).
    """

    _KNOWN_TOP_KEYS: frozenset[str] = frozenset(
        ["version", "matrix", "metadata", "description"]
    )

    def __init__(self, strict: bool = False) -> None:
        self._strict = strict

    def load(self, config_path: str | Path) -> PermissionMatrix:
        """Load a PermissionMatrix from a YAML file on disk.

        Raises
        ------
        FileNotFoundError
            If the config file does not exist.
        MatrixConfigError
            If the file cannot be parsed or is structurally invalid.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Permission matrix not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as fh:
                raw: dict[str, object] = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise MatrixConfigError(
                f"Failed to parse YAML: {exc}", str(config_path)
            ) from exc

        return self._build_matrix(raw, config_path=str(config_path))

    def load_from_dict(
        self,
        config: dict[str, object],
        config_path: str | None = None,
    ) -> PermissionMatrix:
        """Load a PermissionMatrix from an already-parsed config dictionary."""
        return self._build_matrix(config, config_path=config_path)

    def load_from_yaml_string(
        self,
        yaml_string: str,
        config_path: str | None = None,
    ) -> PermissionMatrix:
        """Load a PermissionMatrix from a YAML string."""
        try:
            raw: dict[str, object] = yaml.safe_load(yaml_string) or {}
        except yaml.YAMLError as exc:
            raise MatrixConfigError(
                f"Failed to parse YAML string: {exc}", config_path
            ) from exc
        return self._build_matrix(raw, config_path=config_path)

    def dump(self, matrix: PermissionMatrix) -> str:
        """Serialise *matrix* back to the YAML schema above."""
        grants = {
            str(capability): {
                str(requester_class): (
                    level.value if isinstance(level, PermissionLevel) else str(level)
                )
                for requester_class, level in per_class.items()
            }
            for capability, per_class in matrix.as_dict().items()
        }
        return yaml.safe_dump({"version": "1.0", "matrix": grants}, sort_keys=False)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_matrix(
        self,
        raw: dict[str, object],
        config_path: str | None = None,
    ) -> PermissionMatrix:
        """Validate and build a PermissionMatrix from a raw config dict."""
        self._validate_structure(raw, config_path)

        version = str(raw.get("version", "1.0"))
        if version not in _SUPPORTED_VERSIONS:
            raise MatrixConfigError(
                f"Unsupported config version {version!r}. "
                f"Supported: {sorted(_SUPPORTED_VERSIONS)}.",
                config_path,
            )

        raw_matrix: dict[object, object] = raw["matrix"] or {}  # type: ignore[assignment]
        grants: dict[str, dict[str, PermissionLevel]] = {}
        for capability, per_class in raw_matrix.items():
            if per_class is None:
                per_class = {}
            if not isinstance(per_class, dict):
                raise MatrixConfigError(
                    f"Grants for capability {capability!r} must be a mapping.",
                    config_path,
                )
            try:
                grants[str(capability)] = {
                    str(requester_class): to_permission_level(level)
                    for requester_class, level in per_class.items()
                }
            except ValueError as exc:
                raise MatrixConfigError(
                    f"Error in capability {capability!r}: {exc}", config_path
                ) from exc

        logger.info(
            "Loaded permission matrix with %d capabilities from %s",
            len(grants),
            config_path or "<dict>",
        )
        return PermissionMatrix(grants)

    def _validate_structure(
        self,
        raw: dict[str, object],
        config_path: str | None,
    ) -> None:
        """Validate top-level structure of the config dict."""
        if not isinstance(raw, dict):
            raise MatrixConfigError(
                "Matrix config must be a YAML mapping (dict).", config_path
            )

        if "matrix" not in raw:
            raise MatrixConfigError(
                "Matrix config must contain a 'matrix' mapping.", config_path
            )

        if raw["matrix"] is not None and not isinstance(raw["matrix"], dict):
            raise MatrixConfigError(
                "Matrix config 'matrix' must be a mapping.", config_path
            )

        if self._strict:
            unknown_keys = set(raw.keys()) - self._KNOWN_TOP_KEYS
            if unknown_keys:
                raise MatrixConfigError(
                    f"Unknown top-level keys: {sorted(unknown_keys)}. "
                    f"Known keys: {sorted(self._KNOWN_TOP_KEYS)}.",
                    config_path,
                )
