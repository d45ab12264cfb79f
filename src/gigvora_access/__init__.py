"""gigvora-access: membership and permission resolution for the Gigvora platform.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import gigvora_access as access
>>> access.__version__
'0.1.0'
>>> state = access.get_registry().resolve(["mentor"])
>>> state.has("calendar:view")
True
>>> sorted(state.sources_for("calendar:view"))
['mentor']
"""
from __future__ import annotations

__version__: str = "0.1.0"

from gigvora_access.convenience import AccessControl

# ---------------------------------------------------------------------------
# Matrix
# ---------------------------------------------------------------------------
from gigvora_access.matrix.schema import (
    MembershipDefinition,
    PermissionDefinition,
    PermissionMatrix,
    normalise_key,
)
from gigvora_access.matrix.loader import MatrixConfigError, MatrixLoader

# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------
from gigvora_access.registry.state import EXPLICIT_SOURCE, AuthorizationState
from gigvora_access.registry.registry import (
    PermissionRegistry,
    get_registry,
    reset_registry,
)

# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
from gigvora_access.routes.collections import ROUTE_COLLECTIONS
from gigvora_access.routes.registry import RouteAccess, RouteEntry, flatten_routes

# ---------------------------------------------------------------------------
# Guard and audit
# ---------------------------------------------------------------------------
from gigvora_access.guard.request_guard import GuardDecision, RequestGuard
from gigvora_access.audit.logger import AuditLogger

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
from gigvora_access.config.config_loader import AccessConfig, ConfigLoader

# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------
from gigvora_access.service.api import AccessApi
from gigvora_access.service.server import AccessServer

__all__ = [
    "__version__",
    # Convenience
    "AccessControl",
    # Matrix
    "MatrixConfigError",
    "MatrixLoader",
    "MembershipDefinition",
    "PermissionDefinition",
    "PermissionMatrix",
    "normalise_key",
    # Registry
    "AuthorizationState",
    "EXPLICIT_SOURCE",
    "PermissionRegistry",
    "get_registry",
    "reset_registry",
    # Routes
    "ROUTE_COLLECTIONS",
    "RouteAccess",
    "RouteEntry",
    "flatten_routes",
    # Guard and audit
    "AuditLogger",
    "GuardDecision",
    "RequestGuard",
    # Configuration
    "AccessConfig",
    "ConfigLoader",
    # Service
    "AccessApi",
    "AccessServer",
]
