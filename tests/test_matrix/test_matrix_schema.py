"""Tests for the permission matrix schema models."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from gigvora_access.matrix.schema import (
    MembershipDefinition,
    PermissionDefinition,
    PermissionMatrix,
    normalise_key,
)


def _matrix(**overrides: object) -> PermissionMatrix:
    data: dict[str, object] = {
        "permissions": [
            {"key": "docs:view"},
            {"key": "docs:edit", "implies": ["docs:view"]},
        ],
        "memberships": [
            {"key": "reader", "permissions": ["docs:view"]},
            {"key": "editor", "permissions": ["docs:edit"], "aliases": ["writer"]},
        ],
    }
    data.update(overrides)
    return PermissionMatrix.from_dict(data)


# ---------------------------------------------------------------------------
# Key normalisation
# ---------------------------------------------------------------------------


class TestNormaliseKey:
    def test_strips_and_lowercases(self) -> None:
        assert normalise_key("  Calendar:Manage ") == "calendar:manage"

    def test_non_string_coerced(self) -> None:
        assert normalise_key(1) == "1"


# ---------------------------------------------------------------------------
# PermissionDefinition
# ---------------------------------------------------------------------------


class TestPermissionDefinition:
    def test_defaults(self) -> None:
        permission = PermissionDefinition(key="docs:view")
        assert permission.category == "general"
        assert permission.implies == []
        assert permission.escalation_path == []

    def test_camel_case_escalation_path_accepted(self) -> None:
        permission = PermissionDefinition.model_validate(
            {"key": "docs:edit", "escalationPath": ["Editor", "admin"]}
        )
        assert permission.escalation_path == ["editor", "admin"]

    def test_implies_normalised_and_deduplicated(self) -> None:
        permission = PermissionDefinition(key="docs:edit", implies=["Docs:View", "docs:view", " "])
        assert permission.implies == ["docs:view"]

    def test_key_lowercased(self) -> None:
        assert PermissionDefinition(key=" Docs:View ").key == "docs:view"

    def test_empty_key_raises(self) -> None:
        with pytest.raises(ValidationError):
            PermissionDefinition(key="   ")

    def test_blank_category_falls_back_to_general(self) -> None:
        assert PermissionDefinition(key="a", category=" ").category == "general"


# ---------------------------------------------------------------------------
# MembershipDefinition
# ---------------------------------------------------------------------------


class TestMembershipDefinition:
    def test_camel_case_grant_all_accepted(self) -> None:
        membership = MembershipDefinition.model_validate({"key": "root", "grantAll": True})
        assert membership.grant_all is True

    def test_snake_case_grant_all_accepted(self) -> None:
        membership = MembershipDefinition.model_validate({"key": "root", "grant_all": True})
        assert membership.grant_all is True

    def test_default_tier(self) -> None:
        assert MembershipDefinition(key="user").tier == "community"

    def test_aliases_normalised(self) -> None:
        membership = MembershipDefinition(key="admin", aliases=["Platform_Admin", "platform_admin"])
        assert membership.aliases == ["platform_admin"]

    def test_empty_key_raises(self) -> None:
        with pytest.raises(ValidationError):
            MembershipDefinition(key="")


# ---------------------------------------------------------------------------
# PermissionMatrix accessors
# ---------------------------------------------------------------------------


class TestPermissionMatrixAccessors:
    def test_version_coerced_to_string(self) -> None:
        assert _matrix(version=1).version == "1"

    def test_get_permission(self) -> None:
        matrix = _matrix()
        assert matrix.get_permission("DOCS:EDIT") is not None
        assert matrix.get_permission("docs:delete") is None

    def test_get_membership_by_alias(self) -> None:
        matrix = _matrix()
        membership = matrix.get_membership("writer")
        assert membership is not None
        assert membership.key == "editor"

    def test_get_membership_unknown(self) -> None:
        assert _matrix().get_membership("ghost") is None

    def test_yaml_roundtrip(self) -> None:
        matrix = _matrix()
        restored = PermissionMatrix.from_yaml(matrix.to_yaml())
        assert restored == matrix


# ---------------------------------------------------------------------------
# validate_matrix
# ---------------------------------------------------------------------------


class TestValidateMatrix:
    def test_consistent_matrix_has_no_errors(self) -> None:
        assert _matrix().validate_matrix() == []

    def test_duplicate_permission_key(self) -> None:
        matrix = _matrix(permissions=[{"key": "docs:view"}, {"key": "docs:view"}, {"key": "docs:edit"}])
        assert "Duplicate permission key 'docs:view'" in matrix.validate_matrix()

    def test_duplicate_membership_key(self) -> None:
        matrix = _matrix(memberships=[{"key": "reader"}, {"key": "reader"}])
        assert "Duplicate membership key 'reader'" in matrix.validate_matrix()

    def test_alias_collides_with_membership_key(self) -> None:
        matrix = _matrix(memberships=[{"key": "reader"}, {"key": "editor", "aliases": ["reader"]}])
        assert (
            "Membership 'editor' alias 'reader' collides with a membership key"
            in matrix.validate_matrix()
        )

    def test_alias_declared_twice(self) -> None:
        matrix = _matrix(
            memberships=[
                {"key": "reader", "aliases": ["guest"]},
                {"key": "editor", "aliases": ["guest"]},
            ]
        )
        assert "Alias 'guest' is declared by both 'reader' and 'editor'" in matrix.validate_matrix()

    def test_membership_grants_unknown_permission(self) -> None:
        matrix = _matrix(memberships=[{"key": "reader", "permissions": ["docs:print"]}])
        assert (
            "Membership 'reader' grants unknown permission 'docs:print'"
            in matrix.validate_matrix()
        )

    def test_self_implication(self) -> None:
        matrix = _matrix(permissions=[{"key": "docs:view", "implies": ["docs:view"]}, {"key": "docs:edit"}])
        assert "Permission 'docs:view' implies itself" in matrix.validate_matrix()

    def test_unknown_implication(self) -> None:
        matrix = _matrix(permissions=[{"key": "docs:view"}, {"key": "docs:edit", "implies": ["docs:print"]}])
        assert (
            "Permission 'docs:edit' implies unknown permission 'docs:print'"
            in matrix.validate_matrix()
        )

    def test_implication_cycle_is_allowed(self) -> None:
        matrix = _matrix(
            permissions=[
                {"key": "docs:view", "implies": ["docs:edit"]},
                {"key": "docs:edit", "implies": ["docs:view"]},
            ]
        )
        assert matrix.validate_matrix() == []

    def test_escalation_path_unknown_membership(self) -> None:
        matrix = _matrix(
            permissions=[{"key": "docs:view", "escalation_path": ["owner"]}, {"key": "docs:edit"}]
        )
        assert (
            "Permission 'docs:view' escalation path names unknown membership 'owner'"
            in matrix.validate_matrix()
        )

    def test_escalation_path_accepts_alias(self) -> None:
        matrix = _matrix(
            permissions=[{"key": "docs:view", "escalation_path": ["writer"]}, {"key": "docs:edit"}]
        )
        assert matrix.validate_matrix() == []


# ---------------------------------------------------------------------------
# Packaged matrix
# ---------------------------------------------------------------------------


class TestDefaultMatrix:
    def test_default_is_consistent(self) -> None:
        assert PermissionMatrix.default().validate_matrix() == []

    def test_default_catalogue_sizes(self) -> None:
        matrix = PermissionMatrix.default()
        assert len(matrix.permissions) == 28
        assert len(matrix.memberships) == 12

    def test_default_admin_is_wildcard(self) -> None:
        admin = PermissionMatrix.default().get_membership("platform_admin")
        assert admin is not None
        assert admin.key == "admin"
        assert admin.grant_all is True

    def test_default_escalation_paths_parsed(self) -> None:
        permission = PermissionMatrix.default().get_permission("escrow:release")
        assert permission is not None
        assert permission.escalation_path == ["agency_admin", "workspace_admin", "admin"]
