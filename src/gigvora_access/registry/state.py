"""Per-request authorization state produced by the permission registry."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from gigvora_access.matrix.schema import normalise_key

#: Source label recorded for permissions granted directly rather than by membership.
EXPLICIT_SOURCE = "explicit"


@dataclass(frozen=True)
class AuthorizationState:
    """Immutable result of resolving an actor's memberships and grants.

    Attributes
    ----------
    memberships:
        Canonical keys of the memberships that were recognised.
    permissions:
        Transitively closed set of granted permission keys.
    sources:
        Maps each granted permission to the membership keys (or
        ``"explicit"``) that granted it, directly or through implication.
    grant_all:
        ``True`` when a wildcard membership granted the full universe.
    ignored:
        Membership or permission keys supplied by the caller that the
        matrix does not define.
    """

    memberships: frozenset[str] = frozenset()
    permissions: frozenset[str] = frozenset()
    sources: Mapping[str, frozenset[str]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    grant_all: bool = False
    ignored: frozenset[str] = frozenset()

    def has(self, permission: str) -> bool:
        """Return True if *permission* is in the resolved set."""
        return normalise_key(permission) in self.permissions

    def has_any(self, permissions: Iterable[str]) -> bool:
        """Return True if at least one of *permissions* is granted."""
        return any(self.has(p) for p in permissions)

    def has_all(self, permissions: Iterable[str]) -> bool:
        """Return True if every one of *permissions* is granted."""
        return all(self.has(p) for p in permissions)

    def sources_for(self, permission: str) -> frozenset[str]:
        """Return the sources that granted *permission* (empty if not granted)."""
        return self.sources.get(normalise_key(permission), frozenset())

    def to_dict(self) -> dict[str, object]:
        """Serialise to a JSON-compatible dict with sorted lists."""
        return {
            "memberships": sorted(self.memberships),
            "permissions": sorted(self.permissions),
            "sources": {key: sorted(self.sources[key]) for key in sorted(self.sources)},
            "grant_all": self.grant_all,
            "ignored": sorted(self.ignored),
        }

    def __bool__(self) -> bool:
        """Return True if any permission was granted."""
        return bool(self.permissions)
