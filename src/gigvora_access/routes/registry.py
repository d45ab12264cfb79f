"""Route access registry.

Flattens the nested route collections into :class:`RouteEntry` records and
decides which routes an :class:`AuthorizationState` may open.

Route fields are resolved route-first, then from the collection defaults:
persona, shell theme, icon, allowed memberships and allowed roles.

Example
-------
>>> entries = flatten_routes()
>>> access = RouteAccess(get_registry(), entries)
>>> state = get_registry().resolve(["mentor"])
>>> [e.absolute_path for e in access.accessible_routes(state) if e.persona == "mentor"]
['/dashboard/mentor']
"""
from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Iterable, Mapping

from gigvora_access.routes.collections import ROUTE_COLLECTIONS

if TYPE_CHECKING:
    from gigvora_access.registry.registry import PermissionRegistry
    from gigvora_access.registry.state import AuthorizationState

logger = logging.getLogger(__name__)

_ROUTE_ID_SEPARATORS = re.compile(r"[:/]+")
_WORD_START = re.compile(r"\b\w")


@dataclass(frozen=True)
class RouteEntry:
    """A single flattened route.

    Attributes
    ----------
    key:
        Route key, falling back to its path or module.
    collection:
        Name of the collection the route belongs to.
    path:
        Path as declared in the collection.
    absolute_path:
        Path with a single leading slash.
    module:
        Front-end module rendering the route.
    title:
        Declared or inferred page title.
    persona:
        Persona of the route or its collection.
    allowed_roles / allowed_memberships:
        Memberships allowed to open the route; both empty means open to all.
    route_id:
        Stable identifier derived from collection and path.
    """

    key: str
    collection: str
    path: str
    absolute_path: str
    module: str
    title: str
    icon: str | None
    persona: str | None
    feature_flag: str | None
    shell_theme: str | None
    index: bool
    relative_path: str | None
    allowed_roles: tuple[str, ...]
    allowed_memberships: tuple[str, ...]
    route_id: str

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        data["allowed_roles"] = list(self.allowed_roles)
        data["allowed_memberships"] = list(self.allowed_memberships)
        return data


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def _normalise_path(path: str | None) -> str:
    return (path or "").lstrip("/").rstrip("/")


def to_absolute_path(path: str | None = "") -> str:
    """Return *path* with exactly one leading slash and no trailing slash."""
    normalised = _normalise_path(path)
    return f"/{normalised}" if normalised else "/"


def create_route_id(collection: str | None, absolute_path: str | None) -> str:
    """Build a stable route id such as ``community.projects_projectId``."""
    cleaned_collection = collection or "route"
    cleaned_path = _ROUTE_ID_SEPARATORS.sub("_", (absolute_path or "/").replace("*", "wildcard"))
    cleaned_path = cleaned_path.strip("_")
    if cleaned_path:
        return f"{cleaned_collection}.{cleaned_path}"
    return f"{cleaned_collection}.root"


def infer_title_from_path(path: str | None = "") -> str:
    """Infer a page title from the last meaningful path segment."""
    normalised = _normalise_path(path)
    if not normalised:
        return "Home"
    segments = [s for s in normalised.split("/") if s]
    candidate = segments[-1] if segments else ""
    if candidate == "*" and len(segments) > 1:
        candidate = segments[-2]
    if candidate.startswith(":"):
        candidate = segments[-2] if len(segments) > 1 else candidate[1:]
    cleaned = re.sub(r"[-_]+", " ", candidate).strip()
    if not cleaned:
        return "Overview"
    return _WORD_START.sub(lambda match: match.group(0).upper(), cleaned)


# ---------------------------------------------------------------------------
# Flattening
# ---------------------------------------------------------------------------


def flatten_routes(
    collections: Mapping[str, Mapping[str, object]] | None = None,
) -> list[RouteEntry]:
    """Flatten route collections into a list of :class:`RouteEntry`.

    Parameters
    ----------
    collections:
        Collections to flatten; defaults to the platform route collections.
    """
    source = ROUTE_COLLECTIONS if collections is None else collections
    entries: list[RouteEntry] = []
    for collection_key, definition in source.items():
        routes: list[dict[str, object]] = list(definition.get("routes", []))  # type: ignore[arg-type]
        for route in routes:
            path = str(route.get("path", ""))
            if path.startswith("/") or path == "":
                absolute_path = path or "/"
            else:
                absolute_path = to_absolute_path(path)
            module = str(route.get("module", ""))
            entries.append(
                RouteEntry(
                    key=str(route.get("key") or path or module),
                    collection=collection_key,
                    path=path,
                    absolute_path=absolute_path,
                    module=module,
                    title=str(route.get("title") or infer_title_from_path(path)),
                    icon=_optional(route.get("icon") or definition.get("icon")),
                    persona=_optional(route.get("persona") or definition.get("persona")),
                    feature_flag=_optional(route.get("feature_flag")),
                    shell_theme=_optional(
                        route.get("shell_theme") or definition.get("default_shell_theme")
                    ),
                    index=bool(route.get("index", False)),
                    relative_path=_optional(route.get("relative_path")),
                    allowed_roles=_route_or_default(route, definition, "allowed_roles", "default_roles"),
                    allowed_memberships=_route_or_default(
                        route, definition, "allowed_memberships", "default_memberships"
                    ),
                    route_id=create_route_id(collection_key, absolute_path),
                )
            )
    return entries


def _optional(value: object) -> str | None:
    return str(value) if value else None


def _route_or_default(
    route: Mapping[str, object],
    definition: Mapping[str, object],
    route_field: str,
    default_field: str,
) -> tuple[str, ...]:
    # A route listing its own (even empty) memberships ignores the collection defaults.
    value = route[route_field] if route_field in route else definition.get(default_field)
    return tuple(value or ())  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Access decisions
# ---------------------------------------------------------------------------


class RouteAccess:
    """Decides route visibility for resolved authorization states.

    Parameters
    ----------
    registry:
        Registry used to canonicalise membership aliases listed on routes.
    routes:
        Flattened routes; defaults to :func:`flatten_routes`.
    """

    def __init__(
        self,
        registry: "PermissionRegistry",
        routes: Iterable[RouteEntry] | None = None,
    ) -> None:
        self._registry = registry
        self._routes: list[RouteEntry] = list(routes) if routes is not None else flatten_routes()
        self._by_id: dict[str, RouteEntry] = {r.route_id: r for r in self._routes}

    @property
    def routes(self) -> list[RouteEntry]:
        return list(self._routes)

    def find(self, route_id: str) -> RouteEntry | None:
        """Return the route with *route_id*, or ``None``."""
        return self._by_id.get(route_id)

    def allowed_memberships(self, route: RouteEntry) -> frozenset[str]:
        """Return canonical membership keys allowed on *route*."""
        allowed: set[str] = set()
        for key in (*route.allowed_memberships, *route.allowed_roles):
            allowed.add(self._registry.resolve_membership_key(key) or key)
        return frozenset(allowed)

    def can_access(self, route: RouteEntry, state: "AuthorizationState") -> bool:
        """Return True if *state* may open *route*.

        Routes declaring neither memberships nor roles are open to everyone.
        Wildcard memberships open every route.
        """
        allowed = self.allowed_memberships(route)
        if not allowed or state.grant_all:
            return True
        return bool(allowed & state.memberships)

    def accessible_routes(self, state: "AuthorizationState") -> list[RouteEntry]:
        """Return the routes *state* may open, in declaration order."""
        return [route for route in self._routes if self.can_access(route, state)]
