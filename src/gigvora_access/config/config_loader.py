"""gigvora-access configuration loader with Pydantic v2 validation.

Loads ``gigvora_access.yaml`` into a typed :class:`AccessConfig`.  Unknown
keys are allowed so deployments can carry settings for neighbouring tools.
``GIGVORA_ACCESS_MATRIX_PATH`` and ``GIGVORA_ACCESS_API_KEY`` override the
file when set.

Example
-------
>>> loader = ConfigLoader()
>>> config = loader.load(Path("gigvora_access.yaml"))
>>> config.server.port
4010
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

import yaml
from pydantic import BaseModel, Field, field_validator

from gigvora_access.guard.request_guard import (
    DEFAULT_MANAGE_PERMISSIONS,
    DEFAULT_VIEW_PERMISSIONS,
)
from gigvora_access.registry.registry import MATRIX_PATH_ENV

API_KEY_ENV = "GIGVORA_ACCESS_API_KEY"
DEFAULT_CONFIG_PATH = Path("gigvora_access.yaml")


class AuditConfig(BaseModel):
    """Configuration for the authorization audit trail."""

    model_config = {"extra": "allow"}

    enabled: bool = Field(default=True)
    log_path: Path = Field(default=Path("./gigvora_access_audit.jsonl"))


class GuardConfig(BaseModel):
    """Configuration for the role-header request guard."""

    model_config = {"extra": "allow"}

    api_key: str | None = Field(default=None)
    view_permissions: list[str] = Field(default_factory=lambda: list(DEFAULT_VIEW_PERMISSIONS))
    manage_permissions: list[str] = Field(default_factory=lambda: list(DEFAULT_MANAGE_PERMISSIONS))

    @field_validator("api_key")
    @classmethod
    def blank_key_is_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value


class ServerConfig(BaseModel):
    """Configuration for the HTTP API."""

    model_config = {"extra": "allow"}

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=4010, ge=1024, le=65535)


class AccessConfig(BaseModel):
    """Top-level gigvora-access configuration.

    All sections are optional and fall back to defaults.
    """

    model_config = {"extra": "allow"}

    version: str = Field(default="1")
    matrix_path: Path | None = Field(default=None)
    audit: AuditConfig = Field(default_factory=AuditConfig)
    guard: GuardConfig = Field(default_factory=GuardConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


class ConfigLoader:
    """Loads and validates gigvora-access YAML configuration.

    Parameters
    ----------
    environ:
        Environment mapping consulted for overrides; ``os.environ`` when
        omitted.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def load(self, config_path: str | Path) -> AccessConfig:
        """Load and validate a YAML file.

        Raises
        ------
        FileNotFoundError:
            When the config file does not exist.
        pydantic.ValidationError:
            When the content fails validation.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"gigvora-access config not found: {config_path}")

        with config_path.open("r", encoding="utf-8") as fh:
            raw: dict[str, object] = yaml.safe_load(fh) or {}

        return self._apply_environment(AccessConfig.model_validate(raw))

    def load_string(self, yaml_content: str) -> AccessConfig:
        """Load and validate a YAML string."""
        raw: dict[str, object] = yaml.safe_load(yaml_content) or {}
        return self._apply_environment(AccessConfig.model_validate(raw))

    def defaults(self) -> AccessConfig:
        """Return the default configuration with environment overrides."""
        return self._apply_environment(AccessConfig())

    def load_or_defaults(self, config_path: str | Path = DEFAULT_CONFIG_PATH) -> AccessConfig:
        """Load *config_path* when it exists, otherwise return defaults."""
        config_path = Path(config_path)
        return self.load(config_path) if config_path.exists() else self.defaults()

    def _apply_environment(self, config: AccessConfig) -> AccessConfig:
        matrix_path = self._environ.get(MATRIX_PATH_ENV, "").strip()
        if matrix_path:
            config.matrix_path = Path(matrix_path)
        api_key = self._environ.get(API_KEY_ENV, "").strip()
        if api_key:
            config.guard.api_key = api_key
        return config
