"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts the resolution engine relies on so it never
depends on a concrete file format or on the Consul HTTP client.

Contents
--------
* :class:`Source` – answers single-key lookups and full enumeration.
* :class:`NamespacedSource` – a :class:`Source` tied to one namespace and file.
* :class:`FileLoader` – parses one structured file into a mapping.
* :class:`KeyValueClient` – the remote key/value service seen by a source.

System Role
-----------
Adapters implement these protocols; :mod:`lib_cmdb.core` and the application
helpers only ever talk to the protocols.
"""

from __future__ import annotations

from typing import Iterator, Mapping, Protocol, runtime_checkable


@runtime_checkable
class Source(Protocol):
    """Anything that can answer key lookups for its slice of the key space.

    Methods
    -------
    :meth:`get`
        Return the value for a fully qualified key, or ``None`` when absent.
        Never raises for a well-formed missing key.
    :meth:`each_pair`
        Yield every ``(key, value)`` the source answers for. Restartable: a
        second call yields the same pairs while the data is unchanged.
    """

    def get(self, key: str) -> object | None:
        """Return the value stored under *key* or ``None``."""

    def each_pair(self) -> Iterator[tuple[str, object]]:
        """Yield fully qualified key/value pairs."""


@runtime_checkable
class NamespacedSource(Source, Protocol):
    """A file-backed source that claims exactly one namespace."""

    namespace: str
    path: str


@runtime_checkable
class FileLoader(Protocol):
    """Parse a structured configuration file into a mapping."""

    def load(self, path: str) -> Mapping[str, object]:
        """Read *path* and return a mapping or raise ``InvalidFormat``."""


@runtime_checkable
class KeyValueClient(Protocol):
    """Remote key/value service operations used by prefix sources.

    Paths use ``/`` separators as stored by the service; translating dotted
    keys to paths is the source's job.
    """

    def read(self, path: str) -> object | None:
        """Return the decoded value stored at *path*, or ``None`` when absent."""

    def list(self, prefix: str) -> Iterator[tuple[str, object]]:
        """Yield ``(path, decoded_value)`` for every leaf under *prefix*."""
