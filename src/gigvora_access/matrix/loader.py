"""JSON/YAML permission matrix loader.

MatrixLoader reads permission matrix documents and returns validated
:class:`PermissionMatrix` instances.  Structural problems, schema
validation failures and cross-reference inconsistencies all surface as
:class:`MatrixConfigError`.

Schema
------
::

    {
      "version": "1.0",
      "permissions": [
        {
          "key": "calendar:manage",
          "label": "Manage calendar",
          "category": "calendar",
          "surfaces": ["api:/api/company/calendar/events"],
          "implies": ["calendar:view"],
          "escalationPath": ["workspace_admin", "admin"]
        }
      ],
      "memberships": [
        {
          "key": "admin",
          "tier": "platform",
          "permissions": [],
          "grantAll": true,
          "aliases": ["platform_admin"]
        }
      ]
    }

Example
-------
::

    loader = MatrixLoader()
    matrix = loader.load("/etc/gigvora/permission_matrix.json")
    assert matrix.get_membership("platform_admin").grant_all
"""
from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from gigvora_access.matrix.schema import PermissionMatrix

logger = logging.getLogger(__name__)

_SUPPORTED_VERSIONS: frozenset[str] = frozenset(["1.0", "1"])
_YAML_SUFFIXES: frozenset[str] = frozenset([".yaml", ".yml"])


class MatrixConfigError(ValueError):
    """Raised when a permission matrix document is malformed or inconsistent.

    Attributes
    ----------
    config_path:
        The path to the document that caused the error, if known.
    """

    def __init__(self, message: str, config_path: str | None = None) -> None:
        self.config_path = config_path
        prefix = f"[{config_path}] " if config_path else ""
        super().__init__(f"{prefix}{message}")


class MatrixLoader:
    """Loads PermissionMatrix documents from files, strings or dicts.

    Parameters
    ----------
    strict:
        When ``True``, unknown top-level keys are treated as an error.
        Default ``False`` (unknown keys are ignored).
    """

    _KNOWN_TOP_KEYS: frozenset[str] = frozenset(
        ["version", "description", "permissions", "memberships", "metadata"]
    )

    def __init__(self, strict: bool = False) -> None:
        self._strict = strict

    def load(self, config_path: str | Path) -> PermissionMatrix:
        """Load a PermissionMatrix from a JSON or YAML file on disk.

        The format is chosen from the file suffix: ``.yaml``/``.yml`` are
        parsed as YAML, anything else as JSON.

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        MatrixConfigError
            If the file cannot be parsed or is invalid.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Permission matrix not found: {config_path}")

        fmt = "yaml" if config_path.suffix.lower() in _YAML_SUFFIXES else "json"
        text = config_path.read_text(encoding="utf-8")
        return self.load_from_string(text, fmt=fmt, config_path=str(config_path))

    def load_from_dict(
        self,
        config: dict[str, object],
        config_path: str | None = None,
    ) -> PermissionMatrix:
        """Load a PermissionMatrix from an already-parsed dictionary."""
        return self._build_matrix(config, config_path=config_path)

    def load_from_string(
        self,
        text: str,
        fmt: str = "json",
        config_path: str | None = None,
    ) -> PermissionMatrix:
        """Load a PermissionMatrix from a JSON or YAML string.

        Parameters
        ----------
        text:
            Document content.
        fmt:
            ``"json"`` or ``"yaml"``.
        config_path:
            Optional source identifier for error messages.
        """
        if fmt == "yaml":
            try:
                raw = yaml.safe_load(text) or {}
            except yaml.YAMLError as exc:
                raise MatrixConfigError(f"Failed to parse YAML: {exc}", config_path) from exc
        elif fmt == "json":
            try:
                raw = json.loads(text) if text.strip() else {}
            except json.JSONDecodeError as exc:
                raise MatrixConfigError(f"Failed to parse JSON: {exc}", config_path) from exc
        else:
            raise MatrixConfigError(f"Unsupported matrix format {fmt!r}.", config_path)
        return self._build_matrix(raw, config_path=config_path)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_matrix(
        self,
        raw: object,
        config_path: str | None = None,
    ) -> PermissionMatrix:
        """Validate and build a PermissionMatrix from a raw document."""
        self._validate_structure(raw, config_path)
        document: dict[str, object] = raw  # type: ignore[assignment]

        version = str(document.get("version", "1.0"))
        if version not in _SUPPORTED_VERSIONS:
            raise MatrixConfigError(
                f"Unsupported matrix version {version!r}. "
                f"Supported: {sorted(_SUPPORTED_VERSIONS)}.",
                config_path,
            )

        try:
            matrix = PermissionMatrix.from_dict(document)
        except ValidationError as exc:
            raise MatrixConfigError(f"Invalid permission matrix: {exc}", config_path) from exc

        problems = matrix.validate_matrix()
        if problems:
            raise MatrixConfigError(
                "Inconsistent permission matrix: " + "; ".join(problems),
                config_path,
            )

        logger.info(
            "Loaded %d permissions and %d memberships from %s",
            len(matrix.permissions),
            len(matrix.memberships),
            config_path or "<dict>",
        )
        return matrix

    def _validate_structure(self, raw: object, config_path: str | None) -> None:
        """Validate the top-level structure of the document."""
        if not isinstance(raw, dict):
            raise MatrixConfigError("Permission matrix must be a mapping.", config_path)

        for section in ("permissions", "memberships"):
            if section not in raw:
                raise MatrixConfigError(
                    f"Permission matrix must contain a '{section}' list.", config_path
                )
            if not isinstance(raw[section], list):
                raise MatrixConfigError(
                    f"Permission matrix '{section}' must be a list.", config_path
                )

        if self._strict:
            unknown_keys = set(raw.keys()) - self._KNOWN_TOP_KEYS
            if unknown_keys:
                raise MatrixConfigError(
                    f"Unknown top-level keys: {sorted(unknown_keys)}. "
                    f"Known keys: {sorted(self._KNOWN_TOP_KEYS)}.",
                    config_path,
                )
