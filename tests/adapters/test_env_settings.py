from __future__ import annotations

import os
from pathlib import Path

import pytest

from lib_cmdb.adapters.env.default import load_settings
from lib_cmdb.domain.errors import InvalidFormat
from lib_cmdb.domain.settings import DEFAULT_CONSUL_TIMEOUT


def test_empty_environment_is_strict_without_consul(tmp_path: Path) -> None:
    settings = load_settings({}, cwd=tmp_path)
    assert settings.development is False
    assert settings.root is None
    assert settings.consul_url is None
    assert settings.consul_prefixes == ()
    assert settings.consul_timeout == DEFAULT_CONSUL_TIMEOUT
    assert settings.local_directory == str(tmp_path / ".cmdb")
    assert str(tmp_path / ".cmdb") not in settings.search_directories()


@pytest.mark.parametrize(
    ("env", "expected"),
    [
        ({"LIB_CMDB_ENV": "development"}, True),
        ({"LIB_CMDB_ENV": "Test"}, True),
        ({"LIB_CMDB_ENV": "production"}, False),
        ({"LIB_CMDB_DEVELOPMENT": "1"}, True),
        ({"LIB_CMDB_DEVELOPMENT": "false", "LIB_CMDB_ENV": "development"}, False),
    ],
)
def test_development_mode(env: dict[str, str], expected: bool) -> None:
    assert load_settings(env).development is expected


def test_development_adds_local_directory_last(tmp_path: Path) -> None:
    env = {"LIB_CMDB_DIRS": os.pathsep.join(["/one", "/two"]), "LIB_CMDB_ENV": "development"}
    settings = load_settings(env, cwd=tmp_path)
    assert settings.search_directories() == ("/one", "/two", str(tmp_path / ".cmdb"))


def test_consul_settings() -> None:
    settings = load_settings(
        {
            "LIB_CMDB_CONSUL_URL": "http://consul:8500/",
            "LIB_CMDB_CONSUL_PREFIXES": "app,,shared ",
            "CONSUL_HTTP_TOKEN": "secret",
            "LIB_CMDB_CONSUL_TIMEOUT": "2.5",
            "LIB_CMDB_ROOT": "production",
        }
    )
    assert settings.consul_url == "http://consul:8500"
    assert settings.consul_prefixes == ("app", "shared")
    assert settings.consul_token == "secret"
    assert settings.consul_timeout == 2.5
    assert settings.root == "production"


def test_consul_http_addr_gets_scheme() -> None:
    assert load_settings({"CONSUL_HTTP_ADDR": "127.0.0.1:8500"}).consul_url == "http://127.0.0.1:8500"


def test_bad_timeout() -> None:
    with pytest.raises(InvalidFormat):
        load_settings({"LIB_CMDB_CONSUL_TIMEOUT": "soon"})
