"""JSON API layer for the access service.

AccessApi turns registry, route and guard answers into plain dicts ready
for JSON serialisation.  The HTTP server calls these methods to build
response bodies; each returns ``(status_code, payload)``.

Endpoints
---------
GET /health                     : liveness
GET /api/permissions            : permission catalogue (``category``/``surface`` filters)
GET /api/permissions/<key>      : single permission explanation
GET /api/memberships            : membership catalogue
GET /api/authorization          : resolve ``memberships`` and ``grants``
GET /api/routes                 : routes open to ``memberships``
GET /api/me                     : guard check over the request headers
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Mapping

from gigvora_access.guard.request_guard import RequestGuard, parse_list
from gigvora_access.routes.registry import RouteAccess

if TYPE_CHECKING:
    from gigvora_access.audit.logger import AuditLogger
    from gigvora_access.registry.registry import PermissionRegistry

logger = logging.getLogger(__name__)

ApiResponse = tuple[int, dict[str, object]]


class AccessApi:
    """Provides data for the access service endpoints.

    Parameters
    ----------
    registry:
        The permission registry to answer from.
    route_access:
        Route visibility helper; built over the platform routes when omitted.
    guard:
        Request guard for ``/api/me``; a default guard when omitted.
    audit_logger:
        Optional audit trail; resolutions and guard checks are recorded.
    """

    def __init__(
        self,
        registry: "PermissionRegistry",
        route_access: RouteAccess | None = None,
        guard: RequestGuard | None = None,
        audit_logger: "AuditLogger | None" = None,
    ) -> None:
        self._registry = registry
        self._routes = route_access or RouteAccess(registry)
        self._guard = guard or RequestGuard(registry)
        self._audit = audit_logger

    def get_health(self) -> ApiResponse:
        return 200, {
            "status": "ok",
            "timestamp": datetime.now(tz=timezone.utc).isoformat(),
        }

    def get_permissions(
        self,
        category: str | None = None,
        surface: str | None = None,
    ) -> ApiResponse:
        """Return the permission catalogue, optionally filtered."""
        if category:
            permissions = self._registry.permissions_by_category(category)
        elif surface:
            permissions = self._registry.permissions_for_surface(surface)
        else:
            permissions = self._registry.list_permissions()
        return 200, {
            "permissions": [p.model_dump(mode="json") for p in permissions],
            "count": len(permissions),
        }

    def get_permission(self, key: str) -> ApiResponse:
        description = self._registry.describe(key)
        if description is None:
            return 404, {"error": f"Unknown permission '{key}'"}
        return 200, description

    def get_memberships(self) -> ApiResponse:
        memberships = self._registry.list_memberships()
        return 200, {
            "memberships": [m.model_dump(mode="json") for m in memberships],
            "count": len(memberships),
        }

    def get_authorization(
        self,
        memberships: str | None,
        grants: str | None = None,
    ) -> ApiResponse:
        """Resolve comma-separated memberships and grants."""
        state = self._registry.resolve(parse_list(memberships), parse_list(grants))
        if self._audit is not None:
            self._audit.log(
                {
                    "event": "authorization_resolved",
                    "memberships": sorted(state.memberships),
                    "permission_count": len(state.permissions),
                    "grant_all": state.grant_all,
                    "ignored": sorted(state.ignored),
                }
            )
        return 200, state.to_dict()

    def get_routes(self, memberships: str | None) -> ApiResponse:
        state = self._registry.resolve(parse_list(memberships))
        routes = self._routes.accessible_routes(state)
        return 200, {
            "routes": [r.to_dict() for r in routes],
            "count": len(routes),
        }

    def get_me(self, headers: Mapping[str, str]) -> ApiResponse:
        """Run a ``view`` guard check over request headers."""
        decision = self._guard.authorize(headers, action="view")
        if self._audit is not None:
            self._audit.log(
                {
                    "event": "guard_check",
                    "actor_id": decision.user_id,
                    "allowed": decision.allowed,
                    "status_code": decision.status_code,
                    "roles": list(decision.roles),
                }
            )
        if not decision.allowed:
            return decision.status_code, {"message": decision.message}
        return 200, decision.to_dict()
