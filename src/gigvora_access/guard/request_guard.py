"""Role-header request guard.

Authorizes HTTP requests that carry their caller's roles in headers, the
way the calendar connector and its local stub do:

- ``x-api-key`` or ``Authorization: Bearer <key>`` when an API key is set
- ``x-roles`` (fallback ``x-user-roles``): comma-separated membership or
  permission keys
- ``x-user-id``: required for ``manage`` requests

Role tokens naming a membership (or alias) are treated as memberships, all
other tokens as explicit permission grants; the combination is resolved
through the permission registry, so implications and wildcard memberships
apply.

Example
-------
>>> guard = RequestGuard(get_registry())
>>> decision = guard.authorize({"x-roles": "freelancer"}, action="view")
>>> decision.allowed, decision.status_code
(True, 200)
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Literal, Mapping

from gigvora_access.matrix.schema import normalise_key

if TYPE_CHECKING:
    from gigvora_access.registry.registry import PermissionRegistry
    from gigvora_access.registry.state import AuthorizationState

logger = logging.getLogger(__name__)

GuardAction = Literal["view", "manage"]

DEFAULT_VIEW_PERMISSIONS: tuple[str, ...] = ("calendar:view", "platform:admin")
DEFAULT_MANAGE_PERMISSIONS: tuple[str, ...] = ("calendar:manage", "platform:admin")

_BEARER_PREFIX = re.compile(r"^Bearer\s+", re.IGNORECASE)


def parse_list(value: str | Iterable[str] | None) -> list[str]:
    """Split a comma-separated header value into trimmed, lower-cased tokens."""
    if not value:
        return []
    items = value.split(",") if isinstance(value, str) else list(value)
    return [token for token in (normalise_key(item) for item in items) if token]


@dataclass(frozen=True)
class GuardDecision:
    """Outcome of a guarded request.

    Attributes
    ----------
    allowed:
        Whether the request may proceed.
    status_code:
        HTTP status to answer with: 200, 400, 401 or 403.
    message:
        Human-readable reason for a refusal; empty when allowed.
    user_id:
        Value of ``x-user-id``, if supplied.
    roles:
        Role tokens parsed from the headers.
    state:
        Resolved authorization state, ``None`` when refused before resolution.
    """

    allowed: bool
    status_code: int
    message: str = ""
    user_id: str | None = None
    roles: tuple[str, ...] = ()
    state: "AuthorizationState | None" = None

    def __bool__(self) -> bool:
        return self.allowed

    def to_dict(self) -> dict[str, object]:
        return {
            "allowed": self.allowed,
            "status_code": self.status_code,
            "message": self.message,
            "user_id": self.user_id,
            "roles": list(self.roles),
            "permissions": sorted(self.state.permissions) if self.state else [],
        }


class RequestGuard:
    """Authorizes requests from role headers.

    Parameters
    ----------
    registry:
        Registry used to resolve role tokens.
    api_key:
        Shared secret required from every caller; ``None`` disables the check.
    view_permissions:
        Any one of these permissions allows ``view`` requests, as an iterable
        or a comma-separated string.  Empty means everyone may view.
    manage_permissions:
        Any one of these permissions allows ``manage`` requests.
    """

    def __init__(
        self,
        registry: "PermissionRegistry",
        api_key: str | None = None,
        view_permissions: str | Iterable[str] = DEFAULT_VIEW_PERMISSIONS,
        manage_permissions: str | Iterable[str] = DEFAULT_MANAGE_PERMISSIONS,
    ) -> None:
        self._registry = registry
        self._api_key = api_key.strip() if api_key and api_key.strip() else None
        self._view = frozenset(parse_list(view_permissions))
        self._manage = frozenset(parse_list(manage_permissions))

    def authorize(
        self,
        headers: Mapping[str, str],
        action: GuardAction = "view",
    ) -> GuardDecision:
        """Check *headers* for an ``action`` request and return a decision."""
        lowered = {str(k).lower(): str(v) for k, v in headers.items()}

        if self._api_key is not None:
            bearer = lowered.get("authorization")
            bearer_key = _BEARER_PREFIX.sub("", bearer).strip() if bearer else None
            provided = (lowered.get("x-api-key") or "").strip() or bearer_key
            if provided != self._api_key:
                logger.info("Rejected request with invalid or missing API key")
                return GuardDecision(False, 401, "Invalid or missing API key")

        roles = tuple(dict.fromkeys(parse_list(lowered.get("x-roles") or lowered.get("x-user-roles"))))
        memberships = [r for r in roles if self._registry.resolve_membership_key(r) is not None]
        grants = [r for r in roles if r not in memberships]
        state = self._registry.resolve(memberships, grants)

        required = self._manage if action == "manage" else self._view
        if required and not state.has_any(required):
            logger.info("Insufficient role grants for %s request: roles=%s", action, list(roles))
            return GuardDecision(False, 403, "Insufficient role grants", roles=roles, state=state)

        user_id = (lowered.get("x-user-id") or "").strip() or None
        if action == "manage" and user_id is None:
            return GuardDecision(
                False,
                400,
                "x-user-id header is required for write actions",
                roles=roles,
                state=state,
            )

        return GuardDecision(True, 200, user_id=user_id, roles=roles, state=state)
