"""Key grammar and environment-name normalisation.

Purpose
-------
Hold the pure rules that every query entry point and the environment exporter
share: what a well-formed key looks like, and how a key/value pair is made safe
for a process environment.

Contents
--------
* :data:`VALID_KEY` – compiled key grammar.
* :func:`validate_key` – raise :class:`BadKey` for malformed keys.
* :func:`key_to_env` / :func:`value_to_env` – environment export helpers.
* :func:`join_key` – dotted concatenation that skips empty segments.
"""

from __future__ import annotations

import json
import re
from typing import Final

from .errors import BadKey

VALID_KEY: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9_-]+(?:\.[A-Za-z0-9_-]+)*")
"""One or more dot-separated segments of letters, digits, underscore, hyphen."""

_ENV_UNSAFE: Final[re.Pattern[str]] = re.compile(r"[^A-Za-z0-9_]+")


def is_valid_key(key: object) -> bool:
    """Return ``True`` when *key* is a string matching :data:`VALID_KEY`.

    Examples
    --------
    >>> is_valid_key("db.primary-host"), is_valid_key(".db"), is_valid_key("db host")
    (True, False, False)
    """

    return isinstance(key, str) and VALID_KEY.fullmatch(key) is not None


def validate_key(key: object) -> str:
    """Return *key* unchanged or raise :class:`BadKey`.

    Examples
    --------
    >>> validate_key("app.timeout")
    'app.timeout'
    >>> validate_key("app..timeout")
    Traceback (most recent call last):
    ...
    lib_cmdb.domain.errors.BadKey: Malformed key 'app..timeout'
    """

    if not is_valid_key(key):
        raise BadKey(key)
    return key  # type: ignore[return-value]


def key_to_env(key: str) -> str:
    """Turn a dotted key into an upper-case environment variable name.

    Every run of characters outside ``[A-Za-z0-9_]`` collapses into a single
    underscore, so distinct keys may collide.

    Examples
    --------
    >>> key_to_env("apple.orange-pear")
    'APPLE_ORANGE_PEAR'
    >>> key_to_env("apple.orange_pear")
    'APPLE_ORANGE_PEAR'
    """

    return _ENV_UNSAFE.sub("_", key).upper()


def value_to_env(value: object) -> str:
    """Return strings unchanged and JSON text for everything else.

    Values JSON cannot represent are written as their ``str()`` text.

    Examples
    --------
    >>> value_to_env("plain"), value_to_env(5), value_to_env(["a", "b"]), value_to_env(None)
    ('plain', '5', '["a", "b"]', 'null')
    """

    if isinstance(value, str):
        return value
    return json.dumps(value, default=str)


def join_key(*segments: str) -> str:
    """Join *segments* with dots, skipping empties.

    Examples
    --------
    >>> join_key("", "db", "host")
    'db.host'
    """

    return ".".join(segment for segment in segments if segment)
