"""PermissionRegistry: read-only index over the permission matrix.

The registry is built once from a :class:`PermissionMatrix` and never
mutated afterwards.  At request time it resolves an actor's memberships and
explicit grants into an :class:`AuthorizationState`:

1. Seed the result with each membership's direct permissions (sourced by
   the membership key) and each explicit grant (sourced by ``"explicit"``).
2. Follow ``implies`` edges depth-first with a work stack.  A permission
   implied by P inherits every source of P, and is revisited whenever its
   source set grows, so attribution is complete even across cycles.
3. A ``grant_all`` membership short-circuits to the full permission
   universe, sourced by the wildcard membership key(s).

Unknown membership or permission keys are never errors at request time;
they are dropped and reported in ``AuthorizationState.ignored``.

Example
-------
>>> registry = PermissionRegistry(PermissionMatrix.default())
>>> state = registry.resolve(["mentor"])
>>> state.has("calendar:view")
True
>>> sorted(state.sources_for("calendar:view"))
['mentor']
"""
from __future__ import annotations

import functools
import logging
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Iterable

from gigvora_access.matrix.loader import MatrixLoader
from gigvora_access.matrix.schema import (
    MembershipDefinition,
    PermissionDefinition,
    PermissionMatrix,
    normalise_key,
)
from gigvora_access.registry.state import EXPLICIT_SOURCE, AuthorizationState

logger = logging.getLogger(__name__)

MATRIX_PATH_ENV = "GIGVORA_ACCESS_MATRIX_PATH"

_RESOLVE_CACHE_SIZE = 1024


def _as_key_set(values: Iterable[str] | str | None) -> frozenset[str]:
    """Normalise a single key or an iterable of keys into a frozenset."""
    if values is None:
        return frozenset()
    if isinstance(values, str):
        values = [values]
    return frozenset(key for key in (normalise_key(v) for v in values) if key)


class PermissionRegistry:
    """Resolves memberships and grants into closed permission sets.

    Parameters
    ----------
    matrix:
        The validated permission matrix to index.  It is not copied; callers
        must not mutate it after handing it over.
    """

    def __init__(self, matrix: PermissionMatrix) -> None:
        self._matrix = matrix
        self._permissions: dict[str, PermissionDefinition] = {
            p.key: p for p in matrix.permissions
        }
        self._memberships: dict[str, MembershipDefinition] = {
            m.key: m for m in matrix.memberships
        }
        self._aliases: dict[str, str] = {}
        for membership in matrix.memberships:
            self._aliases[membership.key] = membership.key
            for alias in membership.aliases:
                self._aliases.setdefault(alias, membership.key)

        self._implies: dict[str, tuple[str, ...]] = {
            p.key: tuple(i for i in p.implies if i in self._permissions)
            for p in matrix.permissions
        }
        self._universe: frozenset[str] = frozenset(self._permissions)
        self._grant_all: frozenset[str] = frozenset(
            m.key for m in matrix.memberships if m.grant_all
        )

        self._by_category: dict[str, list[str]] = {}
        self._by_surface: dict[str, list[str]] = {}
        for permission in matrix.permissions:
            self._by_category.setdefault(permission.category, []).append(permission.key)
            for surface in permission.surfaces:
                self._by_surface.setdefault(surface, []).append(permission.key)

        self._membership_closures: dict[str, frozenset[str]] = {
            key: self._membership_closure(key) for key in self._memberships
        }
        self._resolve_cached = functools.lru_cache(maxsize=_RESOLVE_CACHE_SIZE)(
            self._compute_state
        )

        logger.debug(
            "PermissionRegistry built: %d permissions, %d memberships, %d aliases",
            len(self._permissions),
            len(self._memberships),
            len(self._aliases) - len(self._memberships),
        )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @property
    def matrix(self) -> PermissionMatrix:
        """The matrix this registry was built from."""
        return self._matrix

    def resolve_membership_key(self, key: str) -> str | None:
        """Return the canonical membership key for *key* or an alias of it."""
        return self._aliases.get(normalise_key(key))

    def get_membership(self, key: str) -> MembershipDefinition | None:
        """Return the membership definition for *key* (aliases accepted)."""
        canonical = self.resolve_membership_key(key)
        return self._memberships.get(canonical) if canonical else None

    def get_permission(self, key: str) -> PermissionDefinition | None:
        """Return the permission definition for *key*, or ``None``."""
        return self._permissions.get(normalise_key(key))

    def is_known_permission(self, key: str) -> bool:
        return normalise_key(key) in self._permissions

    def list_permissions(self) -> list[PermissionDefinition]:
        """Return all permission definitions in matrix order."""
        return list(self._matrix.permissions)

    def list_memberships(self) -> list[MembershipDefinition]:
        """Return all membership definitions in matrix order."""
        return list(self._matrix.memberships)

    def categories(self) -> list[str]:
        """Return the distinct permission categories, sorted."""
        return sorted(self._by_category)

    def permissions_by_category(self, category: str) -> list[PermissionDefinition]:
        keys = self._by_category.get(normalise_key(category), [])
        return [self._permissions[k] for k in keys]

    def permissions_for_surface(self, surface: str) -> list[PermissionDefinition]:
        """Return the permissions gating *surface* (exact identifier match)."""
        keys = self._by_surface.get(surface.strip(), [])
        return [self._permissions[k] for k in keys]

    def describe(self, key: str) -> dict[str, object] | None:
        """Return a JSON-compatible description of a permission, or ``None``.

        The description carries the permission's own fields plus its full
        implication closure, canonical escalation path and the memberships
        that grant it.
        """
        definition = self.get_permission(key)
        if definition is None:
            return None
        return {
            "key": definition.key,
            "label": definition.label,
            "description": definition.description,
            "category": definition.category,
            "surfaces": list(definition.surfaces),
            "implies": sorted(self.implied_permissions(definition.key) or ()),
            "escalation_path": list(self.escalation_path(definition.key) or ()),
            "granted_by": list(self.memberships_granting(definition.key)),
        }

    def escalation_path(self, key: str) -> tuple[str, ...] | None:
        """Return the ordered memberships that can grant *key*, or ``None``."""
        permission = self.get_permission(key)
        if permission is None:
            return None
        return tuple(
            self._aliases.get(step, step) for step in permission.escalation_path
        )

    # ------------------------------------------------------------------
    # Closures
    # ------------------------------------------------------------------

    def membership_permissions(self, key: str) -> frozenset[str] | None:
        """Return the closed permission set of a single membership."""
        canonical = self.resolve_membership_key(key)
        if canonical is None:
            return None
        return self._membership_closures[canonical]

    def implied_permissions(self, key: str) -> frozenset[str] | None:
        """Return every permission reachable from *key*, excluding itself."""
        wanted = normalise_key(key)
        if wanted not in self._permissions:
            return None
        closed = self._close({wanted: {EXPLICIT_SOURCE}})
        return frozenset(closed) - {wanted}

    def memberships_granting(self, key: str) -> tuple[str, ...]:
        """Return canonical membership keys whose closure contains *key*."""
        wanted = normalise_key(key)
        if wanted not in self._permissions:
            return ()
        return tuple(
            m.key
            for m in self._matrix.memberships
            if wanted in self._membership_closures[m.key]
        )

    # ------------------------------------------------------------------
    # Request-time resolution
    # ------------------------------------------------------------------

    def resolve(
        self,
        memberships: Iterable[str] | str | None,
        explicit_permissions: Iterable[str] | str | None = (),
    ) -> AuthorizationState:
        """Resolve memberships and explicit grants into an AuthorizationState.

        Parameters
        ----------
        memberships:
            Membership keys or aliases held by the actor.
        explicit_permissions:
            Permission keys granted to the actor outside any membership.

        Returns
        -------
        AuthorizationState
            Results are memoised per normalised input and shared between
            callers; the state is immutable.
        """
        return self._resolve_cached(
            _as_key_set(memberships), _as_key_set(explicit_permissions)
        )

    def has_permission(
        self,
        memberships: Iterable[str] | str | None,
        permission: str,
        explicit_permissions: Iterable[str] | str | None = (),
    ) -> bool:
        """Return True if the actor holds *permission*; unknown keys give False."""
        if not self.is_known_permission(permission):
            return False
        return self.resolve(memberships, explicit_permissions).has(permission)

    def cache_info(self) -> functools._CacheInfo:
        """Return hit/miss statistics of the resolution cache."""
        return self._resolve_cached.cache_info()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _compute_state(
        self,
        memberships: frozenset[str],
        explicit_permissions: frozenset[str],
    ) -> AuthorizationState:
        ignored: set[str] = set()
        resolved: set[str] = set()
        for key in memberships:
            canonical = self._aliases.get(key)
            if canonical is None:
                ignored.add(key)
            else:
                resolved.add(canonical)

        wildcard = resolved & self._grant_all
        if wildcard:
            grant_sources = frozenset(wildcard)
            ignored.update(p for p in explicit_permissions if p not in self._permissions)
            return AuthorizationState(
                memberships=frozenset(resolved),
                permissions=self._universe,
                sources=MappingProxyType({key: grant_sources for key in self._universe}),
                grant_all=True,
                ignored=frozenset(ignored),
            )

        seeds: dict[str, set[str]] = {}
        for canonical in resolved:
            for granted in self._memberships[canonical].permissions:
                if granted in self._permissions:
                    seeds.setdefault(granted, set()).add(canonical)
        for granted in explicit_permissions:
            if granted in self._permissions:
                seeds.setdefault(granted, set()).add(EXPLICIT_SOURCE)
            else:
                ignored.add(granted)

        closed = self._close(seeds)
        if ignored:
            logger.debug("Ignoring unknown authorization keys: %s", sorted(ignored))
        return AuthorizationState(
            memberships=frozenset(resolved),
            permissions=frozenset(closed),
            sources=MappingProxyType({k: frozenset(v) for k, v in closed.items()}),
            grant_all=False,
            ignored=frozenset(ignored),
        )

    def _close(self, seeds: dict[str, set[str]]) -> dict[str, set[str]]:
        """Propagate sources along implication edges until nothing changes."""
        sources: dict[str, set[str]] = {k: set(v) for k, v in seeds.items()}
        stack = list(sources)
        while stack:
            current = stack.pop()
            inherited = sources[current]
            for implied in self._implies.get(current, ()):
                known = sources.setdefault(implied, set())
                if not inherited <= known:
                    known |= inherited
                    stack.append(implied)
        return sources

    def _membership_closure(self, key: str) -> frozenset[str]:
        membership = self._memberships[key]
        if membership.grant_all:
            return self._universe
        seeds = {p: {key} for p in membership.permissions if p in self._permissions}
        return frozenset(self._close(seeds))


# ---------------------------------------------------------------------------
# Process-wide default registry
# ---------------------------------------------------------------------------

_default_registry: PermissionRegistry | None = None
_default_lock = threading.Lock()


def get_registry(matrix_path: str | Path | None = None) -> PermissionRegistry:
    """Return the process-wide registry, building it on first use.

    The matrix is read from *matrix_path*, else from the configured path
    (``GIGVORA_ACCESS_MATRIX_PATH`` or ``matrix_path`` in
    ``gigvora_access.yaml``, environment first), else from the matrix
    shipped with the package.  Once built, later calls return the
    same instance regardless of *matrix_path*; call :func:`reset_registry`
    to rebuild.
    """
    global _default_registry
    if _default_registry is not None:
        return _default_registry
    with _default_lock:
        if _default_registry is None:
            source = matrix_path or _configured_matrix_path()
            if source:
                matrix = MatrixLoader().load(source)
            else:
                matrix = PermissionMatrix.default()
            _default_registry = PermissionRegistry(matrix)
            logger.info("Permission registry initialised from %s", source or "packaged matrix")
        return _default_registry


def _configured_matrix_path() -> Path | None:
    from gigvora_access.config.config_loader import ConfigLoader

    return ConfigLoader().load_or_defaults().matrix_path


def reset_registry() -> None:
    """Drop the process-wide registry so the next call rebuilds it."""
    global _default_registry
    with _default_lock:
        _default_registry = None
