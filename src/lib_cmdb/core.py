"""Composition root for ``lib_cmdb``.

Purpose
-------
Provide the resolution engine that wires directory discovery, file parsing,
namespace overlap policy, and Consul sources into one ordered source list and
serves every public query from it.

Contents
--------
* :class:`Interface` – the resolution engine (``get``, ``require``,
  ``each_pair``, ``as_env``, ``search``).
* :func:`load_file_sources` – parse every recognised file in the search
  directories, in order.
* :func:`build_remote_sources` – one Consul source per configured prefix.

System Role
-----------
This is the only module that knows about concrete adapters. Construction is
the only phase that can fail on configuration content; afterwards the engine is
read-only and only per-call errors (:class:`BadKey`, :class:`MissingKey`,
:class:`NameConflict`, :class:`RemoteError`) can surface.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, Sequence

from .adapters.env.default import load_settings
from .adapters.path_resolvers.default import collect_directory
from .adapters.sources.consul import ConsulClient, ConsulSource
from .adapters.sources.file import FileSource
from .application.namespaces import check_overlap, index_namespaces, select_contributors
from .application.ports import KeyValueClient, NamespacedSource, Source
from .domain.errors import MissingKey, NameConflict
from .domain.keys import key_to_env, validate_key, value_to_env
from .domain.settings import Settings
from .observability import bind_trace_id, log_debug, log_info, make_event

SourceFactory = Callable[[str, "str | None"], NamespacedSource]


class Interface:
    """Resolve dotted keys across Consul and file sources.

    Sources are consulted in a fixed order: Consul sources first, in the
    configured prefix order, then one file source per namespace. The first
    source that holds a key wins.

    Parameters
    ----------
    settings:
        Construction options; read from the environment via
        :func:`lib_cmdb.adapters.env.default.load_settings` when omitted.
    consul_client:
        Key/value client used for remote sources. Built from
        ``settings.consul_url`` when omitted; ignored when no URL is configured.
    source_factory:
        Callable ``(path, root) -> source`` used for every discovered file.

    Raises
    ------
    InvalidFormat
        A data file could not be parsed.
    BadValue
        A data file holds a list of mixed or nested values.
    ValueConflict
        Outside development mode, when a namespace is defined by several files.

    Examples
    --------
    >>> from pathlib import Path
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> _ = (Path(tmp.name) / "db.yml").write_text("host: db1\\nport: 5432\\n", encoding="utf-8")
    >>> cmdb = Interface(Settings(directories=(tmp.name,)))
    >>> cmdb.get("db.host"), cmdb.get("db.user")
    ('db1', None)
    >>> cmdb.as_env()
    {'DB_HOST': 'db1', 'DB_PORT': '5432'}
    >>> tmp.cleanup()
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        consul_client: KeyValueClient | None = None,
        source_factory: SourceFactory | None = None,
    ) -> None:
        self.settings = settings if settings is not None else load_settings()
        bind_trace_id(None)

        file_sources = load_file_sources(
            self.settings.search_directories(),
            root=self.settings.root,
            source_factory=source_factory,
        )
        namespaces = index_namespaces(file_sources)
        check_overlap(namespaces, development=self.settings.development)

        sources: list[Source] = []
        if self.settings.consul_url is not None:
            client = consul_client or ConsulClient(
                self.settings.consul_url,
                token=self.settings.consul_token,
                timeout=self.settings.consul_timeout,
            )
            sources.extend(build_remote_sources(self.settings.consul_prefixes, client))
        sources.extend(select_contributors(namespaces))
        self._sources: tuple[Source, ...] = tuple(sources)

        log_info(
            "sources_ready",
            **make_event("engine", None, {"sources": len(self._sources), "namespaces": len(namespaces)}),
        )

    @property
    def sources(self) -> tuple[Source, ...]:
        """Sources in precedence order."""

        return self._sources

    def get(self, key: str, default: Any = None) -> Any:
        """Return the first value any source holds for *key*, else *default*.

        Raises
        ------
        BadKey
            When *key* does not match the key grammar.
        """

        validate_key(key)
        for source in self._sources:
            value = source.get(key)
            if value is not None:
                return value
        return default

    def require(self, key: str) -> Any:
        """Like :meth:`get` but raise :class:`MissingKey` when no source has *key*."""

        value = self.get(key)
        if value is None:
            raise MissingKey(key)
        return value

    def each_pair(self) -> Iterator[tuple[str, Any]]:
        """Yield every source's pairs in precedence order, duplicates included."""

        for source in self._sources:
            yield from source.each_pair()

    def search(self, prefix: str) -> dict[str, Any]:
        """Return resolved values for *prefix* and every key below it.

        Each key keeps the value :meth:`get` would return for it.

        Examples
        --------
        >>> Interface(Settings(directories=())).search("db")
        {}
        """

        validate_key(prefix)
        found: dict[str, Any] = {}
        for key, value in self.each_pair():
            if key in found or value is None:
                continue
            if key == prefix or key.startswith(prefix + "."):
                found[key] = value
        return found

    def as_env(self) -> dict[str, str]:
        """Flatten the whole key space into environment-variable-safe pairs.

        Names are upper-cased with every run of characters outside
        ``[A-Za-z0-9_]`` collapsed into ``_``; non-string values become JSON
        text. A key repeated by a later source keeps its first value.

        Raises
        ------
        NameConflict
            When two distinct keys map to the same name, e.g.
            ``apple.orange.pear`` and ``apple.orange_pear``.
        """

        values: dict[str, str] = {}
        origins: dict[str, str] = {}
        for key, value in self.each_pair():
            env_name = key_to_env(key)
            previous = origins.get(env_name)
            if previous is None:
                origins[env_name] = key
                values[env_name] = value_to_env(value)
            elif previous != key:
                raise NameConflict(env_name, [previous, key])
        return values

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return self.each_pair()

    def __repr__(self) -> str:
        return f"Interface(sources={len(self._sources)}, development={self.settings.development})"


def load_file_sources(
    directories: Iterable[str],
    *,
    root: str | None = None,
    source_factory: SourceFactory | None = None,
) -> list[NamespacedSource]:
    """Build a source for every recognised file, in directory then file order.

    Parse failures propagate; a malformed file is never skipped.
    """

    factory = source_factory or FileSource
    loaded: list[NamespacedSource] = []
    for directory in directories:
        for path in collect_directory(directory):
            source = factory(path, root)
            log_debug("file_source_loaded", **make_event("file", path, {"namespace": source.namespace}))
            loaded.append(source)
    return loaded


def build_remote_sources(prefixes: Sequence[str], client: KeyValueClient) -> list[ConsulSource]:
    """Return one Consul source per prefix, or a single unscoped source."""

    if not prefixes:
        return [ConsulSource("", client)]
    return [ConsulSource(prefix, client) for prefix in prefixes]


__all__ = [
    "Interface",
    "Settings",
    "load_file_sources",
    "build_remote_sources",
]
