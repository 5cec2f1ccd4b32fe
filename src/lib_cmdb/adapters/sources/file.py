"""File-backed source.

Purpose
-------
Implement :class:`lib_cmdb.application.ports.NamespacedSource` for one parsed
JSON or YAML file. The file is read once at construction; lookups afterwards
are dictionary reads.

System Role
-----------
Built by :func:`lib_cmdb.core.load_file_sources` for every file found in the
search directories, then grouped by namespace.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Iterator

from ...application.flatten import flatten_tree
from ...application.ports import FileLoader
from ...domain.errors import InvalidFormat
from ..file_loaders.structured import loader_for


class FileSource:
    """Answer lookups from one configuration file.

    Keys are qualified with the namespace derived from the file's basename, so
    ``db.yml`` holding ``host: db1`` answers ``db.host``. When *root* is given
    only the subtree under that top-level key is visible; a file without it
    contributes no keys.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> path = Path(tmp.name) / "db.json"
    >>> _ = path.write_text('{"production": {"host": "db1"}}', encoding="utf-8")
    >>> source = FileSource(str(path), root="production")
    >>> source.namespace, source.get("db.host"), source.get("db.port")
    ('db', 'db1', None)
    >>> tmp.cleanup()
    """

    def __init__(
        self,
        path: str,
        root: str | None = None,
        *,
        namespace: str | None = None,
        loader: FileLoader | None = None,
    ) -> None:
        self.path = str(path)
        self.root = root
        self.namespace = namespace or Path(path).stem
        loader = loader or loader_for(self.path)
        if loader is None:
            raise InvalidFormat(f"Unrecognised configuration file type: {path}")
        tree = _reroot(loader.load(self.path), root, self.path)
        self._data = flatten_tree(tree, self.namespace, path=self.path)

    def get(self, key: str) -> object | None:
        return self._data.get(key)

    def each_pair(self) -> Iterator[tuple[str, object]]:
        yield from self._data.items()

    def __repr__(self) -> str:
        return f"FileSource(namespace={self.namespace!r}, path={self.path!r})"


def _reroot(tree: Mapping[str, object], root: str | None, path: str) -> Mapping[str, object]:
    """Return the subtree under *root*, an empty mapping when it is missing."""

    if root is None:
        return tree
    if root not in tree:
        return {}
    subtree = tree[root]
    if subtree is None:
        return {}
    if not isinstance(subtree, Mapping):
        raise InvalidFormat(f"Root key {root!r} in {path} does not hold a mapping")
    return subtree
