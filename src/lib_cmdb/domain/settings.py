"""Construction-time settings value object.

Purpose
-------
Carry every option the resolution engine needs as one immutable value, so the
development-mode switch and the directory search order are explicit inputs
rather than process-global state.

Contents
--------
* :data:`DEFAULT_BASE_DIRECTORIES` – standard search locations in fixed order.
* :class:`Settings` – frozen dataclass consumed by :class:`lib_cmdb.core.Interface`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Final

DEFAULT_BASE_DIRECTORIES: Final[tuple[str, ...]] = ("/var/lib/cmdb", "~/.cmdb")
"""Standard base directories, consulted in this order."""

DEFAULT_CONSUL_TIMEOUT: Final[float] = 10.0


@dataclass(frozen=True, slots=True)
class Settings:
    """Immutable options for building an :class:`~lib_cmdb.core.Interface`.

    Attributes
    ----------
    root:
        Top-level subkey every file source is re-rooted under, or ``None``.
    development:
        ``True`` selects the permissive overlap policy and enables
        :attr:`local_directory`.
    directories:
        Standard base directories in precedence order.
    local_directory:
        Working-directory override appended last in development mode.
    consul_url:
        Consul HTTP endpoint; ``None`` disables remote sources entirely.
    consul_prefixes:
        Key prefixes, one remote source each. Empty means one unscoped source.
    consul_token:
        Optional ACL token sent with every Consul request.
    consul_timeout:
        Per-request timeout in seconds.

    Examples
    --------
    >>> Settings(directories=("/etc/cmdb",), local_directory="/srv/.cmdb").search_directories()
    ('/etc/cmdb',)
    >>> Settings(directories=("/etc/cmdb",), local_directory="/srv/.cmdb", development=True).search_directories()
    ('/etc/cmdb', '/srv/.cmdb')
    """

    root: str | None = None
    development: bool = False
    directories: tuple[str, ...] = field(default=DEFAULT_BASE_DIRECTORIES)
    local_directory: str | None = None
    consul_url: str | None = None
    consul_prefixes: tuple[str, ...] = ()
    consul_token: str | None = None
    consul_timeout: float = DEFAULT_CONSUL_TIMEOUT

    def search_directories(self) -> tuple[str, ...]:
        """Return the directories to scan, with the local override last in development mode."""

        if self.development and self.local_directory:
            return (*self.directories, self.local_directory)
        return tuple(self.directories)

    def with_overrides(self, **overrides: Any) -> Settings:
        """Return a copy with *overrides* applied, ignoring ``None`` values.

        Examples
        --------
        >>> Settings(root="prod").with_overrides(root=None, development=True).root
        'prod'
        """

        changes = {name: value for name, value in overrides.items() if value is not None}
        return replace(self, **changes)
