"""Role-header request guard."""
from __future__ import annotations

from gigvora_access.guard.request_guard import (
    DEFAULT_MANAGE_PERMISSIONS,
    DEFAULT_VIEW_PERMISSIONS,
    GuardDecision,
    RequestGuard,
    parse_list,
)

__all__ = [
    "DEFAULT_MANAGE_PERMISSIONS",
    "DEFAULT_VIEW_PERMISSIONS",
    "GuardDecision",
    "RequestGuard",
    "parse_list",
]
