"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by sources, the namespace indexer, the
resolution engine, and consuming applications. The hierarchy lives in the
domain layer so adapters and the composition root can raise the same types
without depending on each other.

Contents
--------
* :class:`ConfigError` – umbrella base class for every CMDB failure.
* :class:`InvalidFormat` – a configuration file could not be parsed.
* :class:`NotFound` – a file disappeared between discovery and parsing.
* :class:`BadKey` – a key does not match :data:`lib_cmdb.domain.keys.VALID_KEY`.
* :class:`MissingKey` – :meth:`Interface.require` found no value.
* :class:`BadValue` – a file holds a list the flattener cannot represent.
* :class:`ValueConflict` – several files claim the same namespace.
* :class:`NameConflict` – two keys collapse onto one environment name.
* :class:`RemoteError` – the Consul key/value service failed.

System Role
-----------
Construction-time errors (:class:`InvalidFormat`, :class:`BadValue`,
:class:`ValueConflict`) prevent an :class:`~lib_cmdb.core.Interface` from
existing at all. Query-time errors (:class:`BadKey`, :class:`MissingKey`,
:class:`NameConflict`, :class:`RemoteError`) are local to the call. Callers
catch :class:`ConfigError` to handle all library failures uniformly.
"""

from __future__ import annotations

from typing import Iterable


class ConfigError(Exception):
    """Base type for all exceptions emitted by ``lib_cmdb``."""


class InvalidFormat(ConfigError):
    """Raised when a configuration file cannot be parsed into a mapping.

    Typical Sources
    ---------------
    The structured file loaders (:mod:`json`, :mod:`yaml`) and the re-rooting
    step of :class:`~lib_cmdb.adapters.sources.file.FileSource`.
    """


class NotFound(ConfigError):
    """Represents a file that vanished after directory discovery."""


class BadKey(ConfigError):
    """Raised when a key name is malformed.

    Examples
    --------
    >>> str(BadKey("foo..bar"))
    "Malformed key 'foo..bar'"
    """

    def __init__(self, key: object) -> None:
        self.key = key
        super().__init__(f"Malformed key {key!r}")


class MissingKey(ConfigError):
    """Raised by the required lookup when no source defines the key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Key {key!r} not found in any source")


class BadValue(ConfigError):
    """Raised when a file stores a list that is not a homogeneous list of scalars.

    Why
    ----
    Lists of mappings (or mixed-type lists) have no dotted-key representation
    and cannot be exported to the environment predictably.
    """

    def __init__(self, key: str, value: object, path: str | None = None) -> None:
        self.key = key
        self.value = value
        self.path = path
        location = f" in {path}" if path else ""
        super().__init__(f"Unsupported value for key {key!r}{location}: lists must hold scalars of one type")


class ValueConflict(ConfigError):
    """Raised when more than one file contributes the same namespace.

    Attributes
    ----------
    namespace:
        Namespace claimed by several files.
    origins:
        File paths of every contributor, in discovery order.

    Examples
    --------
    >>> str(ValueConflict("db", ["/var/lib/cmdb/db.yml", "/srv/.cmdb/db.json"]))
    "Namespace 'db' is defined by multiple files: /var/lib/cmdb/db.yml, /srv/.cmdb/db.json"
    """

    def __init__(self, namespace: str, origins: Iterable[str]) -> None:
        self.namespace = namespace
        self.origins = tuple(origins)
        super().__init__(f"Namespace {namespace!r} is defined by multiple files: {', '.join(self.origins)}")


class NameConflict(ConfigError):
    """Raised when distinct keys normalise to the same environment variable name.

    Examples
    --------
    >>> exc = NameConflict("APPLE_ORANGE_PEAR", ["apple.orange.pear", "apple.orange_pear"])
    >>> exc.keys
    ('apple.orange.pear', 'apple.orange_pear')
    """

    def __init__(self, env_name: str, keys: Iterable[str]) -> None:
        self.env_name = env_name
        self.keys = tuple(keys)
        super().__init__(f"Keys {', '.join(repr(k) for k in self.keys)} all map to environment name {env_name}")


class RemoteError(ConfigError):
    """Raised when the Consul key/value service cannot answer a request."""
