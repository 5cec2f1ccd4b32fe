from __future__ import annotations

from pathlib import Path

import pytest

from lib_cmdb.adapters.file_loaders.structured import JSONFileLoader
from lib_cmdb.adapters.sources.file import FileSource
from lib_cmdb.domain.errors import BadValue, InvalidFormat


def _write(path: Path, content: str) -> str:
    path.write_text(content, encoding="utf-8")
    return str(path)


def test_keys_are_qualified_with_namespace(tmp_path: Path) -> None:
    source = FileSource(_write(tmp_path / "db.yml", "primary:\n  host: db1\nport: 5432\n"))
    assert source.namespace == "db"
    assert source.get("db.primary.host") == "db1"
    assert source.get("db.port") == 5432
    assert source.get("primary.host") is None
    assert source.get("db.primary") is None


def test_each_pair_is_restartable(tmp_path: Path) -> None:
    source = FileSource(_write(tmp_path / "web.json", '{"port": 80, "hosts": ["a", "b"]}'))
    first = list(source.each_pair())
    assert first == [("web.port", 80), ("web.hosts", ["a", "b"])]
    assert list(source.each_pair()) == first


def test_reroot_exposes_only_subtree(tmp_path: Path) -> None:
    path = _write(tmp_path / "db.yml", "production:\n  host: prod-db\nstaging:\n  host: stage-db\n")
    source = FileSource(path, root="production")
    assert dict(source.each_pair()) == {"db.host": "prod-db"}


def test_reroot_missing_root_contributes_nothing(tmp_path: Path) -> None:
    source = FileSource(_write(tmp_path / "db.yml", "host: db1\n"), root="production")
    assert list(source.each_pair()) == []


def test_reroot_scalar_root_is_invalid(tmp_path: Path) -> None:
    with pytest.raises(InvalidFormat):
        FileSource(_write(tmp_path / "db.yml", "production: yes\n"), root="production")


def test_parse_failure_propagates(tmp_path: Path) -> None:
    with pytest.raises(InvalidFormat):
        FileSource(_write(tmp_path / "db.json", "{not json"))


def test_mixed_list_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(BadValue):
        FileSource(_write(tmp_path / "db.json", '{"hosts": ["a", 1]}'))


def test_unknown_suffix_without_loader(tmp_path: Path) -> None:
    with pytest.raises(InvalidFormat):
        FileSource(_write(tmp_path / "db.toml", "a = 1"))


def test_explicit_loader_and_namespace(tmp_path: Path) -> None:
    path = _write(tmp_path / "settings.conf", '{"a": 1}')
    source = FileSource(path, namespace="app", loader=JSONFileLoader())
    assert source.get("app.a") == 1
