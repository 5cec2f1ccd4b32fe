"""Public package surface for ``lib_cmdb``.

Exports the resolution engine, its settings value, the error taxonomy, and
the logging hooks applications use to attach handlers.
"""

from __future__ import annotations

from .adapters.env.default import load_settings
from .core import Interface
from .domain.errors import (
    BadKey,
    BadValue,
    ConfigError,
    InvalidFormat,
    MissingKey,
    NameConflict,
    NotFound,
    RemoteError,
    ValueConflict,
)
from .domain.keys import VALID_KEY, key_to_env
from .domain.settings import Settings
from .observability import bind_trace_id, get_logger

__all__ = [
    "Interface",
    "Settings",
    "load_settings",
    "VALID_KEY",
    "key_to_env",
    "ConfigError",
    "InvalidFormat",
    "NotFound",
    "BadKey",
    "MissingKey",
    "BadValue",
    "ValueConflict",
    "NameConflict",
    "RemoteError",
    "bind_trace_id",
    "get_logger",
]
