"""Flatten parsed configuration trees into dotted keys.

Purpose
-------
Convert the nested mapping produced by a file loader into the flat
``{dotted_key: value}`` view a file source answers from. Free of I/O so it can
be reused by any source that starts from a nested document.

Contents
    - ``flatten_tree``: public entry point.
    - ``_flatten_mapping``: recursive stanza descending into mappings.
    - ``_normalise_scalar``: YAML-only scalars to JSON-compatible values.
    - ``_check_list``: rejects lists that have no stable scalar representation.
"""

from __future__ import annotations

import base64
from collections.abc import Mapping
from datetime import date, datetime
from numbers import Number

from ..domain.errors import BadValue
from ..domain.keys import join_key


def flatten_tree(
    tree: Mapping[str, object],
    prefix: str = "",
    *,
    path: str | None = None,
) -> dict[str, object]:
    """Return a flat mapping of dotted keys to leaf values.

    Nested mappings become key segments; scalars and lists are leaves. Empty
    mappings contribute no keys. YAML dates, timestamps and binary values are
    stored as text and YAML sets as sorted lists, so every leaf is JSON
    serialisable.

    Parameters
    ----------
    tree:
        Parsed document (or re-rooted subtree).
    prefix:
        Qualification prepended to every key, usually the namespace.
    path:
        Originating file, used in :class:`BadValue` messages.

    Raises
    ------
    BadValue
        When a list mixes types or contains mappings or lists.

    Examples
    --------
    >>> flatten_tree({"primary": {"host": "db1", "port": 5432}, "replicas": ["db2", "db3"]}, "db")
    {'db.primary.host': 'db1', 'db.primary.port': 5432, 'db.replicas': ['db2', 'db3']}
    """

    flat: dict[str, object] = {}
    _flatten_mapping(flat, tree, prefix, path)
    return flat


def _flatten_mapping(
    target: dict[str, object],
    incoming: Mapping[str, object],
    prefix: str,
    path: str | None,
) -> None:
    for key, value in incoming.items():
        dotted = join_key(prefix, str(key))
        if isinstance(value, Mapping):
            _flatten_mapping(target, value, dotted, path)
        elif isinstance(value, (list, set, frozenset)):
            items = [_normalise_scalar(item) for item in _ordered(value)]
            _check_list(dotted, items, path)
            target[dotted] = items
        else:
            target[dotted] = _normalise_scalar(value)


def _ordered(items: list[object] | set[object] | frozenset[object]) -> list[object]:
    """Return list items unchanged and set members (``!!set``) in sorted order."""

    if isinstance(items, list):
        return items
    return sorted(items, key=str)


def _normalise_scalar(value: object) -> object:
    """Turn YAML-only scalar types into JSON-compatible values.

    Dates and timestamps become ISO 8601 text; ``!!binary`` payloads become
    base64 text.

    Examples
    --------
    >>> _normalise_scalar(date(2024, 1, 1))
    '2024-01-01'
    >>> _normalise_scalar(b"hi")
    'aGk='
    >>> _normalise_scalar(5)
    5
    """

    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return value


def _check_list(key: str, items: list[object], path: str | None) -> None:
    """Accept lists whose items are all strings, all numbers, or all booleans."""

    if not items:
        return
    if all(isinstance(item, str) for item in items):
        return
    if all(isinstance(item, bool) for item in items):
        return
    if all(isinstance(item, Number) and not isinstance(item, bool) for item in items):
        return
    raise BadValue(key, items, path)
