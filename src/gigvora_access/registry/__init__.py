"""Permission resolution registry.

Example
-------
::

    from gigvora_access.registry import get_registry

    state = get_registry().resolve(["freelancer"], explicit_permissions=["escrow:release"])
    assert state.has("escrow:view")
"""
from __future__ import annotations

from gigvora_access.registry.registry import (
    MATRIX_PATH_ENV,
    PermissionRegistry,
    get_registry,
    reset_registry,
)
from gigvora_access.registry.state import EXPLICIT_SOURCE, AuthorizationState

__all__ = [
    "AuthorizationState",
    "EXPLICIT_SOURCE",
    "MATRIX_PATH_ENV",
    "PermissionRegistry",
    "get_registry",
    "reset_registry",
]
