from __future__ import annotations

import json
import re
from datetime import date

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from lib_cmdb.domain.errors import BadKey
from lib_cmdb.domain.keys import is_valid_key, join_key, key_to_env, validate_key, value_to_env

SEGMENT = st.text(alphabet="abcXYZ019_-", min_size=1, max_size=6)
KEY = st.lists(SEGMENT, min_size=1, max_size=4).map(".".join)


@pytest.mark.parametrize("key", ["db", "db.host", "app-1.max_conn", "A.b.C"])
def test_valid_keys(key: str) -> None:
    assert validate_key(key) == key


@pytest.mark.parametrize("key", ["", ".db", "db.", "db..host", "db host", "db/host", "db.h*st", "db\n", None, 5])
def test_malformed_keys_raise(key: object) -> None:
    with pytest.raises(BadKey):
        validate_key(key)


def test_trailing_newline_is_rejected() -> None:
    assert not is_valid_key("db.host\n")


@settings(deadline=None)
@given(KEY)
def test_generated_keys_are_valid(key: str) -> None:
    assert is_valid_key(key)


@settings(deadline=None)
@given(KEY)
def test_env_names_are_safe(key: str) -> None:
    assert re.fullmatch(r"[A-Z0-9_]+", key_to_env(key))


def test_env_name_collapses_runs() -> None:
    assert key_to_env("a.-.b") == "A_B"
    assert key_to_env("apple.orange.pear") == key_to_env("apple.orange_pear")


@settings(deadline=None)
@given(st.one_of(st.integers(), st.booleans(), st.none(), st.lists(st.integers(), max_size=3)))
def test_non_string_values_are_json(value: object) -> None:
    assert json.loads(value_to_env(value)) == value


def test_string_values_pass_through() -> None:
    assert value_to_env("5432") == "5432"
    assert value_to_env("") == ""


def test_join_key_skips_empty_segments() -> None:
    assert join_key("", "db") == "db"
    assert join_key("app", "", "db") == "app.db"


def test_values_json_cannot_encode_use_their_text() -> None:
    assert value_to_env({"since": date(2024, 1, 1)}) == '{"since": "2024-01-01"}'
