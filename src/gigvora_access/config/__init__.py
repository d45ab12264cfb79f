"""Configuration models and loader."""
from __future__ import annotations

from gigvora_access.config.config_loader import (
    API_KEY_ENV,
    AccessConfig,
    AuditConfig,
    ConfigLoader,
    GuardConfig,
    ServerConfig,
)

__all__ = [
    "API_KEY_ENV",
    "AccessConfig",
    "AuditConfig",
    "ConfigLoader",
    "GuardConfig",
    "ServerConfig",
]
