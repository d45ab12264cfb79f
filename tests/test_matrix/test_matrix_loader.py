"""Tests for MatrixLoader."""
from __future__ import annotations

import json
import pathlib

import pytest
import yaml

from gigvora_access.matrix.loader import MatrixConfigError, MatrixLoader
from gigvora_access.matrix.schema import PermissionMatrix


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

_VALID_CONFIG: dict[str, object] = {
    "version": "1.0",
    "description": "Docs workspace",
    "permissions": [
        {"key": "docs:view", "category": "docs"},
        {
            "key": "docs:edit",
            "category": "docs",
            "implies": ["docs:view"],
            "escalationPath": ["editor", "owner"],
        },
    ],
    "memberships": [
        {"key": "reader", "permissions": ["docs:view"]},
        {"key": "editor", "permissions": ["docs:edit"], "aliases": ["writer"]},
        {"key": "owner", "grantAll": True},
    ],
}


@pytest.fixture()
def loader() -> MatrixLoader:
    return MatrixLoader()


@pytest.fixture()
def strict_loader() -> MatrixLoader:
    return MatrixLoader(strict=True)


# ---------------------------------------------------------------------------
# load_from_dict
# ---------------------------------------------------------------------------


class TestMatrixLoaderFromDict:
    def test_returns_permission_matrix(self, loader: MatrixLoader) -> None:
        matrix = loader.load_from_dict(_VALID_CONFIG)
        assert isinstance(matrix, PermissionMatrix)

    def test_counts_correct(self, loader: MatrixLoader) -> None:
        matrix = loader.load_from_dict(_VALID_CONFIG)
        assert len(matrix.permissions) == 2
        assert len(matrix.memberships) == 3

    def test_grant_all_parsed(self, loader: MatrixLoader) -> None:
        matrix = loader.load_from_dict(_VALID_CONFIG)
        owner = matrix.get_membership("owner")
        assert owner is not None
        assert owner.grant_all is True

    def test_missing_permissions_raises(self, loader: MatrixLoader) -> None:
        with pytest.raises(MatrixConfigError, match="permissions"):
            loader.load_from_dict({"memberships": []})

    def test_missing_memberships_raises(self, loader: MatrixLoader) -> None:
        with pytest.raises(MatrixConfigError, match="memberships"):
            loader.load_from_dict({"permissions": []})

    def test_section_not_list_raises(self, loader: MatrixLoader) -> None:
        with pytest.raises(MatrixConfigError, match="must be a list"):
            loader.load_from_dict({"permissions": {}, "memberships": []})

    def test_non_dict_config_raises(self, loader: MatrixLoader) -> None:
        with pytest.raises(MatrixConfigError, match="mapping"):
            loader.load_from_dict([{"key": "docs:view"}])  # type: ignore[arg-type]

    def test_empty_catalogues_valid(self, loader: MatrixLoader) -> None:
        matrix = loader.load_from_dict({"permissions": [], "memberships": []})
        assert matrix.permissions == []

    def test_integer_version_accepted(self, loader: MatrixLoader) -> None:
        matrix = loader.load_from_dict({**_VALID_CONFIG, "version": 1})
        assert matrix.version == "1"

    def test_unsupported_version_raises(self, loader: MatrixLoader) -> None:
        with pytest.raises(MatrixConfigError, match="version"):
            loader.load_from_dict({**_VALID_CONFIG, "version": "99.0"})

    def test_invalid_permission_raises(self, loader: MatrixLoader) -> None:
        config = {"permissions": [{"label": "no key"}], "memberships": []}
        with pytest.raises(MatrixConfigError, match="Invalid permission matrix"):
            loader.load_from_dict(config)

    def test_inconsistent_matrix_raises(self, loader: MatrixLoader) -> None:
        config = {
            "permissions": [{"key": "docs:view", "implies": ["docs:print"]}],
            "memberships": [{"key": "reader", "permissions": ["docs:edit"]}],
        }
        with pytest.raises(MatrixConfigError) as exc_info:
            loader.load_from_dict(config)
        message = str(exc_info.value)
        assert "Inconsistent permission matrix" in message
        assert "docs:print" in message
        assert "docs:edit" in message

    def test_config_path_in_message(self, loader: MatrixLoader) -> None:
        with pytest.raises(MatrixConfigError, match=r"^\[matrix.json\]") as exc_info:
            loader.load_from_dict({"permissions": []}, config_path="matrix.json")
        assert exc_info.value.config_path == "matrix.json"


class TestMatrixLoaderStrict:
    def test_strict_mode_rejects_unknown_keys(self, strict_loader: MatrixLoader) -> None:
        config = {**_VALID_CONFIG, "unknown_key": "some_value"}
        with pytest.raises(MatrixConfigError, match="unknown_key"):
            strict_loader.load_from_dict(config)

    def test_strict_mode_accepts_known_keys(self, strict_loader: MatrixLoader) -> None:
        config = {**_VALID_CONFIG, "metadata": {"owner": "platform"}}
        matrix = strict_loader.load_from_dict(config)
        assert matrix.metadata == {"owner": "platform"}

    def test_lenient_mode_ignores_unknown_keys(self, loader: MatrixLoader) -> None:
        config = {**_VALID_CONFIG, "unknown_key": "some_value"}
        matrix = loader.load_from_dict(config)
        assert len(matrix.permissions) == 2


# ---------------------------------------------------------------------------
# load_from_string
# ---------------------------------------------------------------------------


class TestMatrixLoaderFromString:
    def test_json_string(self, loader: MatrixLoader) -> None:
        matrix = loader.load_from_string(json.dumps(_VALID_CONFIG))
        assert matrix.get_permission("docs:edit") is not None

    def test_yaml_string(self, loader: MatrixLoader) -> None:
        matrix = loader.load_from_string(yaml.safe_dump(_VALID_CONFIG), fmt="yaml")
        assert matrix.get_membership("writer") is not None

    def test_invalid_json_raises(self, loader: MatrixLoader) -> None:
        with pytest.raises(MatrixConfigError, match="Failed to parse JSON"):
            loader.load_from_string("{not json")

    def test_invalid_yaml_raises(self, loader: MatrixLoader) -> None:
        with pytest.raises(MatrixConfigError, match="Failed to parse YAML"):
            loader.load_from_string("permissions: [unclosed", fmt="yaml")

    def test_empty_string_raises_missing_sections(self, loader: MatrixLoader) -> None:
        with pytest.raises(MatrixConfigError, match="permissions"):
            loader.load_from_string("")

    def test_unsupported_format_raises(self, loader: MatrixLoader) -> None:
        with pytest.raises(MatrixConfigError, match="Unsupported matrix format"):
            loader.load_from_string("{}", fmt="toml")


# ---------------------------------------------------------------------------
# load (file)
# ---------------------------------------------------------------------------


class TestMatrixLoaderFile:
    def test_load_json_file(self, loader: MatrixLoader, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "matrix.json"
        path.write_text(json.dumps(_VALID_CONFIG), encoding="utf-8")
        matrix = loader.load(path)
        assert len(matrix.memberships) == 3

    def test_load_yaml_file(self, loader: MatrixLoader, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "matrix.yaml"
        path.write_text(yaml.safe_dump(_VALID_CONFIG), encoding="utf-8")
        matrix = loader.load(path)
        assert matrix.description == "Docs workspace"

    def test_load_yml_suffix(self, loader: MatrixLoader, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "matrix.yml"
        path.write_text(yaml.safe_dump(_VALID_CONFIG), encoding="utf-8")
        assert loader.load(str(path)).get_permission("docs:view") is not None

    def test_file_not_found_raises(self, loader: MatrixLoader, tmp_path: pathlib.Path) -> None:
        with pytest.raises(FileNotFoundError):
            loader.load(tmp_path / "missing.json")

    def test_error_carries_file_path(self, loader: MatrixLoader, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(MatrixConfigError) as exc_info:
            loader.load(path)
        assert exc_info.value.config_path == str(path)
