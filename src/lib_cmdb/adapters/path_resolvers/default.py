"""Filesystem discovery of CMDB data files.

Purpose
-------
Encapsulate where data files live and how a directory is enumerated, so the
composition root stays free of filesystem conventions.

Contents
--------
* :class:`DefaultPathResolver` – standard base directories and the local
  development override.
* :func:`collect_directory` – deterministic listing of recognised files.

System Role
-----------
Feeds ordered directory and file lists into
:func:`lib_cmdb.core.load_file_sources`. Honours ``LIB_CMDB_DIRS`` so tests
and deployments can relocate the base directories.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Mapping

from ...domain.settings import DEFAULT_BASE_DIRECTORIES
from ...observability import log_debug
from ..file_loaders.structured import JSON_SUFFIXES, YAML_SUFFIXES

LOCAL_DIRECTORY_NAME = ".cmdb"
"""Directory under the working directory consulted in development mode."""


class DefaultPathResolver:
    """Resolve the directories searched for data files.

    Why
    ----
    Keep directory order an explicit, testable value: base directories keep the
    order they were configured in and the local override always comes last.
    """

    def __init__(self, *, env: Mapping[str, str] | None = None, cwd: Path | None = None) -> None:
        """Store the environment mapping and working directory used for resolution.

        Parameters
        ----------
        env:
            Mapping read instead of :data:`os.environ` (useful for tests).
        cwd:
            Directory holding the development override; defaults to the
            process working directory.
        """

        self.env = dict(os.environ if env is None else env)
        self.cwd = cwd or Path.cwd()

    def base_directories(self) -> tuple[str, ...]:
        """Return the standard base directories in precedence order.

        Examples
        --------
        >>> DefaultPathResolver(env={"LIB_CMDB_DIRS": os.pathsep.join(["/a", "/b"])}).base_directories()
        ('/a', '/b')
        """

        configured = self.env.get("LIB_CMDB_DIRS")
        if configured:
            entries = [entry for entry in configured.split(os.pathsep) if entry]
        else:
            entries = list(DEFAULT_BASE_DIRECTORIES)
        return tuple(str(Path(entry).expanduser()) for entry in entries)

    def local_directory(self) -> str:
        """Return the working-directory override (``<cwd>/.cmdb``)."""

        return str(self.cwd / LOCAL_DIRECTORY_NAME)


def collect_directory(base: str | Path) -> Iterable[str]:
    """Return recognised data files in *base*: JSON family first, then YAML.

    Each family is sorted by filename so the result never depends on the
    filesystem's listing order. Suffixes match exactly, so ``DB.JSON`` is
    ignored. Missing directories yield nothing.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> root = Path(tmp.name)
    >>> for name in ("web.yml", "db.json", "cache.yaml", "notes.txt", "api.js"):
    ...     _ = (root / name).write_text("{}", encoding="utf-8")
    >>> [Path(p).name for p in collect_directory(root)]
    ['api.js', 'db.json', 'cache.yaml', 'web.yml']
    >>> tmp.cleanup()
    """

    directory = Path(base).expanduser()
    if not directory.is_dir():
        return []
    files = [path for path in directory.iterdir() if path.is_file()]
    json_files = sorted(str(p) for p in files if p.suffix in JSON_SUFFIXES)
    yaml_files = sorted(str(p) for p in files if p.suffix in YAML_SUFFIXES)
    found = json_files + yaml_files
    if found:
        log_debug("path_candidates", source="file", path=str(directory), count=len(found))
    return found
