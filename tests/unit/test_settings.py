from __future__ import annotations

import dataclasses

import pytest

from lib_cmdb.domain.settings import DEFAULT_BASE_DIRECTORIES, Settings


def test_defaults() -> None:
    settings = Settings()
    assert settings.directories == DEFAULT_BASE_DIRECTORIES
    assert settings.development is False
    assert settings.consul_url is None
    assert settings.consul_prefixes == ()


def test_local_directory_only_in_development() -> None:
    strict = Settings(directories=("/a", "/b"), local_directory="/work/.cmdb")
    assert strict.search_directories() == ("/a", "/b")
    permissive = dataclasses.replace(strict, development=True)
    assert permissive.search_directories() == ("/a", "/b", "/work/.cmdb")


def test_settings_are_frozen() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        Settings().root = "x"  # type: ignore[misc]


def test_with_overrides_ignores_none() -> None:
    base = Settings(root="prod", consul_prefixes=("app",))
    updated = base.with_overrides(root=None, consul_prefixes=("app", "shared"), development=True)
    assert updated.root == "prod"
    assert updated.consul_prefixes == ("app", "shared")
    assert updated.development is True
    assert base.development is False
