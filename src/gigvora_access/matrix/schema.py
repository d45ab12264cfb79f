"""Permission matrix schema: Pydantic v2 models for Gigvora authorization.

Defines the static data the permission registry is built from: the
permission catalogue (with implication edges and escalation paths) and the
membership catalogue (with direct grants, aliases and wildcard memberships).

JSON documents exported by the platform use camelCase field names
(``grantAll``, ``escalationPath``); both spellings are accepted.

Example
-------
>>> from gigvora_access.matrix.schema import PermissionMatrix
>>> matrix = PermissionMatrix.default()
>>> matrix.get_membership("mentor").tier
'community'
>>> matrix.validate_matrix()
[]
"""
from __future__ import annotations

import importlib.resources
import json

import yaml
from pydantic import AliasChoices, BaseModel, Field, field_validator

_DEFAULT_MATRIX_PACKAGE = "gigvora_access.matrix.data"
_DEFAULT_MATRIX_FILE = "permission_matrix.json"


def normalise_key(value: object) -> str:
    """Return *value* as a trimmed, lower-cased key string."""
    return str(value).strip().lower()


def _normalise_key_list(values: list[str]) -> list[str]:
    normalised: list[str] = []
    for value in values:
        key = normalise_key(value)
        if key and key not in normalised:
            normalised.append(key)
    return normalised


# ---------------------------------------------------------------------------
# Permission definition
# ---------------------------------------------------------------------------


class PermissionDefinition(BaseModel):
    """An atomic authorization capability.

    Attributes
    ----------
    key:
        Unique identifier, e.g. ``calendar:manage``.
    label:
        Short human-readable name.
    description:
        What holding the permission allows.
    category:
        Grouping used by admin screens (``calendar``, ``finance``, ...).
    surfaces:
        Identifiers of the UI routes or API surfaces the permission gates.
    implies:
        Keys of permissions that holding this one also grants.
    escalation_path:
        Ordered membership keys that can grant this permission on request.
    """

    model_config = {"populate_by_name": True, "extra": "ignore"}

    key: str
    label: str = ""
    description: str = ""
    category: str = "general"
    surfaces: list[str] = Field(default_factory=list)
    implies: list[str] = Field(default_factory=list)
    escalation_path: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("escalation_path", "escalationPath"),
    )

    @field_validator("key")
    @classmethod
    def key_must_not_be_empty(cls, value: str) -> str:
        key = normalise_key(value)
        if not key:
            raise ValueError("permission key must not be empty")
        return key

    @field_validator("category")
    @classmethod
    def normalise_category(cls, value: str) -> str:
        return normalise_key(value) or "general"

    @field_validator("implies", "escalation_path")
    @classmethod
    def normalise_keys(cls, values: list[str]) -> list[str]:
        return _normalise_key_list(values)


# ---------------------------------------------------------------------------
# Membership definition
# ---------------------------------------------------------------------------


class MembershipDefinition(BaseModel):
    """A role-like grant bundle held by platform users.

    Attributes
    ----------
    key:
        Canonical membership identifier, e.g. ``workspace_admin``.
    label:
        Human-readable name.
    tier:
        Coarse grouping (``community``, ``workspace``, ``operations``,
        ``platform``).
    permissions:
        Keys of permissions granted directly by this membership.
    grant_all:
        Wildcard membership: holders receive every permission in the matrix.
    aliases:
        Alternative keys that resolve to this membership.
    """

    model_config = {"populate_by_name": True, "extra": "ignore"}

    key: str
    label: str = ""
    tier: str = "community"
    permissions: list[str] = Field(default_factory=list)
    grant_all: bool = Field(
        default=False,
        validation_alias=AliasChoices("grant_all", "grantAll"),
    )
    aliases: list[str] = Field(default_factory=list)

    @field_validator("key")
    @classmethod
    def key_must_not_be_empty(cls, value: str) -> str:
        key = normalise_key(value)
        if not key:
            raise ValueError("membership key must not be empty")
        return key

    @field_validator("permissions", "aliases")
    @classmethod
    def normalise_keys(cls, values: list[str]) -> list[str]:
        return _normalise_key_list(values)


# ---------------------------------------------------------------------------
# Matrix document
# ---------------------------------------------------------------------------


class PermissionMatrix(BaseModel):
    """The complete static permission matrix.

    Attributes
    ----------
    version:
        Schema version of the document.
    description:
        Free-text summary.
    permissions:
        Permission catalogue.
    memberships:
        Membership catalogue.
    metadata:
        Arbitrary document metadata (owner, generated-at, ...).
    """

    version: str = "1.0"
    description: str = ""
    permissions: list[PermissionDefinition] = Field(default_factory=list)
    memberships: list[MembershipDefinition] = Field(default_factory=list)
    metadata: dict[str, object] = Field(default_factory=dict)

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, value: object) -> str:
        return str(value)

    # ------------------------------------------------------------------
    # Convenience accessors
    # ------------------------------------------------------------------

    def get_permission(self, key: str) -> PermissionDefinition | None:
        """Return the permission with *key*, or ``None`` if absent."""
        wanted = normalise_key(key)
        for permission in self.permissions:
            if permission.key == wanted:
                return permission
        return None

    def get_membership(self, key: str) -> MembershipDefinition | None:
        """Return the membership whose key or alias is *key*, or ``None``."""
        wanted = normalise_key(key)
        for membership in self.memberships:
            if membership.key == wanted or wanted in membership.aliases:
                return membership
        return None

    # ------------------------------------------------------------------
    # Internal consistency validation
    # ------------------------------------------------------------------

    def validate_matrix(self) -> list[str]:
        """Check internal consistency and return a list of error messages.

        Checks performed
        ----------------
        - Permission keys are unique.
        - Membership keys are unique.
        - Aliases do not collide with membership keys or other aliases.
        - Memberships only grant known permissions.
        - Implication edges point at known, distinct permissions.
        - Escalation paths only name known memberships or aliases.

        Returns
        -------
        list[str]
            Empty list when the matrix is consistent.
        """
        errors: list[str] = []

        permission_keys: set[str] = set()
        for permission in self.permissions:
            if permission.key in permission_keys:
                errors.append(f"Duplicate permission key '{permission.key}'")
            permission_keys.add(permission.key)

        membership_keys: set[str] = set()
        for membership in self.memberships:
            if membership.key in membership_keys:
                errors.append(f"Duplicate membership key '{membership.key}'")
            membership_keys.add(membership.key)

        alias_owner: dict[str, str] = {}
        for membership in self.memberships:
            for alias in membership.aliases:
                if alias in membership_keys:
                    errors.append(
                        f"Membership '{membership.key}' alias '{alias}' collides with a membership key"
                    )
                elif alias in alias_owner and alias_owner[alias] != membership.key:
                    errors.append(
                        f"Alias '{alias}' is declared by both '{alias_owner[alias]}' and '{membership.key}'"
                    )
                alias_owner.setdefault(alias, membership.key)

        for membership in self.memberships:
            for granted in membership.permissions:
                if granted not in permission_keys:
                    errors.append(
                        f"Membership '{membership.key}' grants unknown permission '{granted}'"
                    )

        known_memberships = membership_keys | set(alias_owner)
        for permission in self.permissions:
            for implied in permission.implies:
                if implied == permission.key:
                    errors.append(f"Permission '{permission.key}' implies itself")
                elif implied not in permission_keys:
                    errors.append(
                        f"Permission '{permission.key}' implies unknown permission '{implied}'"
                    )
            for escalation in permission.escalation_path:
                if escalation not in known_memberships:
                    errors.append(
                        f"Permission '{permission.key}' escalation path names unknown membership '{escalation}'"
                    )

        return errors

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, object]:
        """Serialise to a plain Python dict (JSON-compatible)."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "PermissionMatrix":
        """Deserialise from a plain Python dict."""
        return cls.model_validate(data)

    def to_yaml(self) -> str:
        """Serialise to a YAML string."""
        return yaml.dump(
            self.to_dict(),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "PermissionMatrix":
        """Deserialise from a YAML string."""
        data: dict[str, object] = yaml.safe_load(yaml_str) or {}
        return cls.from_dict(data)

    @classmethod
    def default(cls) -> "PermissionMatrix":
        """Return the permission matrix shipped with the package."""
        ref = importlib.resources.files(_DEFAULT_MATRIX_PACKAGE).joinpath(_DEFAULT_MATRIX_FILE)
        data: dict[str, object] = json.loads(ref.read_text(encoding="utf-8"))
        return cls.from_dict(data)
