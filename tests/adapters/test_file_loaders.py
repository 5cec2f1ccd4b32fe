from __future__ import annotations

import json
from pathlib import Path

import pytest

from lib_cmdb.adapters.file_loaders.structured import JSONFileLoader, YAMLFileLoader, loader_for
from lib_cmdb.domain.errors import InvalidFormat, NotFound


def test_json_loader_valid(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    path.write_text(json.dumps({"feature": True}), encoding="utf-8")
    assert JSONFileLoader().load(str(path))["feature"] is True


def test_json_loader_invalid(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    path.write_text("{invalid}", encoding="utf-8")
    with pytest.raises(InvalidFormat):
        JSONFileLoader().load(str(path))


def test_json_loader_rejects_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "db.js"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(InvalidFormat, match="did not produce a mapping"):
        JSONFileLoader().load(str(path))


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(NotFound):
        JSONFileLoader().load(str(tmp_path / "missing.json"))


def test_yaml_loader_valid(tmp_path: Path) -> None:
    path = tmp_path / "db.yml"
    path.write_text("primary:\n  port: 5432\n", encoding="utf-8")
    assert YAMLFileLoader().load(str(path))["primary"]["port"] == 5432


def test_yaml_loader_handles_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "db.yaml"
    path.write_text("# empty file\n", encoding="utf-8")
    assert YAMLFileLoader().load(str(path)) == {}


def test_yaml_loader_invalid(tmp_path: Path) -> None:
    path = tmp_path / "db.yml"
    path.write_text("key: [unterminated\n", encoding="utf-8")
    with pytest.raises(InvalidFormat):
        YAMLFileLoader().load(str(path))


@pytest.mark.parametrize(
    ("name", "expected"),
    [("a.js", JSONFileLoader), ("a.json", JSONFileLoader), ("a.yml", YAMLFileLoader), ("a.yaml", YAMLFileLoader)],
)
def test_loader_for_known_suffixes(name: str, expected: type) -> None:
    assert isinstance(loader_for(name), expected)


def test_loader_for_unknown_suffix() -> None:
    assert loader_for("a.toml") is None


@pytest.mark.parametrize("name", ["a.JSON", "a.Js", "a.YML", "a.Yaml"])
def test_loader_for_ignores_other_suffix_casing(name: str) -> None:
    assert loader_for(name) is None
