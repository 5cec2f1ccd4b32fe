"""Structured configuration file loaders.

Purpose
-------
Convert on-disk CMDB data files into Python mappings. Adapters are small
wrappers around ``json`` and ``yaml.safe_load`` so error handling and
observability live in one place.

Contents
--------
* :class:`BaseFileLoader` – shared helpers for reading files and validating
  mapping outputs.
* :class:`JSONFileLoader` – loader for the JSON family (``.js``, ``.json``).
* :class:`YAMLFileLoader` – loader for the YAML family (``.yml``, ``.yaml``).
* :data:`FILE_LOADERS` – suffix to loader mapping used during discovery.

System Role
-----------
Invoked by :class:`lib_cmdb.adapters.sources.file.FileSource` while the
resolution engine is being built. Every parse failure becomes
:class:`InvalidFormat`; nothing is skipped.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Final, Mapping

import yaml

from ...domain.errors import InvalidFormat, NotFound
from ...observability import log_debug, log_error


class BaseFileLoader:
    """Common utilities shared by the structured file loaders."""

    def _read(self, path: str) -> bytes:
        """Read *path* as bytes, raising :class:`NotFound` when the file is missing.

        Side Effects
        ------------
        Emits ``config_file_read`` debug events.
        """

        file_path = Path(path)
        if not file_path.is_file():
            raise NotFound(f"Configuration file not found: {path}")
        payload = file_path.read_bytes()
        log_debug("config_file_read", source="file", path=path, size=len(payload))
        return payload

    @staticmethod
    def _ensure_mapping(data: object, *, path: str) -> Mapping[str, object]:
        """Ensure *data* behaves like a mapping, otherwise raise ``InvalidFormat``.

        Examples
        --------
        >>> BaseFileLoader._ensure_mapping({"key": 1}, path="demo")
        {'key': 1}
        >>> BaseFileLoader._ensure_mapping([1, 2], path="demo")
        Traceback (most recent call last):
        ...
        lib_cmdb.domain.errors.InvalidFormat: File demo did not produce a mapping
        """

        if not isinstance(data, Mapping):
            raise InvalidFormat(f"File {path} did not produce a mapping")
        return data  # type: ignore[return-value]


class JSONFileLoader(BaseFileLoader):
    """Load JSON documents."""

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from JSON file at *path*.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile('w', suffix='.json', delete=False, encoding='utf-8')
        >>> _ = tmp.write('{"enabled": true}')
        >>> tmp.close()
        >>> JSONFileLoader().load(tmp.name)["enabled"]
        True
        >>> Path(tmp.name).unlink()
        """

        try:
            data = json.loads(self._read(path))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            log_error("config_file_invalid", source="file", path=path, format="json", error=str(exc))
            raise InvalidFormat(f"Invalid JSON in {path}: {exc}") from exc
        result = self._ensure_mapping(data, path=path)
        log_debug("config_file_loaded", source="file", path=path, format="json")
        return result


class YAMLFileLoader(BaseFileLoader):
    """Load YAML documents with ``yaml.safe_load``."""

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from YAML file at *path*.

        An empty document (or one holding only comments) is an empty mapping.
        """

        try:
            data = yaml.safe_load(self._read(path))
        except yaml.YAMLError as exc:
            log_error("config_file_invalid", source="file", path=path, format="yaml", error=str(exc))
            raise InvalidFormat(f"Invalid YAML in {path}: {exc}") from exc
        if data is None:
            data = {}
        result = self._ensure_mapping(data, path=path)
        log_debug("config_file_loaded", source="file", path=path, format="yaml")
        return result


JSON_SUFFIXES: Final[tuple[str, ...]] = (".js", ".json")
YAML_SUFFIXES: Final[tuple[str, ...]] = (".yml", ".yaml")

FILE_LOADERS: Final[dict[str, BaseFileLoader]] = {
    **{suffix: JSONFileLoader() for suffix in JSON_SUFFIXES},
    **{suffix: YAMLFileLoader() for suffix in YAML_SUFFIXES},
}
"""Recognised suffixes keyed to their loader; JSON family first, then YAML."""


def loader_for(path: str) -> BaseFileLoader | None:
    """Return the loader responsible for *path* or ``None`` for unknown suffixes.

    Suffixes match case-sensitively: ``db.YML`` is not a data file.

    Examples
    --------
    >>> type(loader_for("/var/lib/cmdb/db.yml")).__name__
    'YAMLFileLoader'
    >>> loader_for("/var/lib/cmdb/db.YML") is None
    True
    >>> loader_for("notes.txt") is None
    True
    """

    return FILE_LOADERS.get(Path(path).suffix)
