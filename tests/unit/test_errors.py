from __future__ import annotations

from lib_cmdb.domain.errors import (
    BadKey,
    BadValue,
    ConfigError,
    InvalidFormat,
    MissingKey,
    NameConflict,
    NotFound,
    RemoteError,
    ValueConflict,
)


def test_error_hierarchy() -> None:
    for exc_type in (InvalidFormat, NotFound, BadKey, MissingKey, BadValue, ValueConflict, NameConflict, RemoteError):
        assert issubclass(exc_type, ConfigError)


def test_value_conflict_names_namespace_and_origins() -> None:
    exc = ValueConflict("db", ["/var/lib/cmdb/db.yml", "/work/.cmdb/db.json"])
    assert exc.namespace == "db"
    assert exc.origins == ("/var/lib/cmdb/db.yml", "/work/.cmdb/db.json")
    assert "'db'" in str(exc)
    assert "/work/.cmdb/db.json" in str(exc)


def test_name_conflict_names_both_keys() -> None:
    exc = NameConflict("APPLE_ORANGE_PEAR", ["apple.orange.pear", "apple.orange_pear"])
    assert exc.env_name == "APPLE_ORANGE_PEAR"
    assert "apple.orange.pear" in str(exc)
    assert "apple.orange_pear" in str(exc)


def test_key_errors_keep_the_key() -> None:
    assert BadKey("a b").key == "a b"
    assert MissingKey("db.host").key == "db.host"
    assert BadValue("db.hosts", [1, "a"], "/tmp/db.yml").path == "/tmp/db.yml"
