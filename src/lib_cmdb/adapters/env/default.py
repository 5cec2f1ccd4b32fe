"""Environment variable adapter for engine settings.

Purpose
-------
Translate ``LIB_CMDB_*`` process environment variables (plus the conventional
``CONSUL_HTTP_ADDR`` / ``CONSUL_HTTP_TOKEN``) into a
:class:`lib_cmdb.domain.settings.Settings` value.

Key behaviours
--------------
* Development mode comes from ``LIB_CMDB_DEVELOPMENT`` (boolean) or, when that
  is unset, from ``LIB_CMDB_ENV`` being ``development`` or ``test``.
* Prefixes are comma separated and keep their configured order.
* Performs light type coercion for booleans and numbers.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from ...domain.errors import InvalidFormat
from ...domain.settings import DEFAULT_CONSUL_TIMEOUT, Settings
from ...observability import log_debug
from ..path_resolvers.default import DefaultPathResolver

ENV_PREFIX = "LIB_CMDB"
DEVELOPMENT_ENVIRONMENTS = frozenset({"development", "test"})
_TRUTHY = frozenset({"1", "true", "yes", "on"})


def load_settings(environ: Mapping[str, str] | None = None, *, cwd: Path | None = None) -> Settings:
    """Return :class:`Settings` populated from *environ* (default :data:`os.environ`).

    Examples
    --------
    >>> settings = load_settings({
    ...     "LIB_CMDB_DIRS": "/srv/cmdb",
    ...     "LIB_CMDB_ENV": "development",
    ...     "CONSUL_HTTP_ADDR": "127.0.0.1:8500",
    ...     "LIB_CMDB_CONSUL_PREFIXES": "app, shared",
    ... }, cwd=Path("/work"))
    >>> settings.development, settings.consul_url, settings.consul_prefixes
    (True, 'http://127.0.0.1:8500', ('app', 'shared'))
    >>> settings.search_directories()
    ('/srv/cmdb', '/work/.cmdb')
    """

    env = dict(os.environ if environ is None else environ)
    resolver = DefaultPathResolver(env=env, cwd=cwd)
    settings = Settings(
        root=_get(env, "ROOT"),
        development=_development(env),
        directories=resolver.base_directories(),
        local_directory=resolver.local_directory(),
        consul_url=_consul_url(env),
        consul_prefixes=_split_list(_get(env, "CONSUL_PREFIXES")),
        consul_token=_get(env, "CONSUL_TOKEN") or env.get("CONSUL_HTTP_TOKEN") or None,
        consul_timeout=_timeout(_get(env, "CONSUL_TIMEOUT")),
    )
    log_debug(
        "settings_loaded",
        source="env",
        path=None,
        development=settings.development,
        directories=list(settings.search_directories()),
        consul=settings.consul_url is not None,
    )
    return settings


def _get(env: Mapping[str, str], name: str) -> str | None:
    value = env.get(f"{ENV_PREFIX}_{name}")
    if value is None or not value.strip():
        return None
    return value.strip()


def _development(env: Mapping[str, str]) -> bool:
    explicit = _get(env, "DEVELOPMENT")
    if explicit is not None:
        return explicit.lower() in _TRUTHY
    mode = (_get(env, "ENV") or "production").lower()
    return mode in DEVELOPMENT_ENVIRONMENTS


def _consul_url(env: Mapping[str, str]) -> str | None:
    """Return the Consul endpoint, adding ``http://`` when the scheme is missing.

    Examples
    --------
    >>> _consul_url({"CONSUL_HTTP_ADDR": "consul:8500"})
    'http://consul:8500'
    >>> _consul_url({"LIB_CMDB_CONSUL_URL": "https://kv.example", "CONSUL_HTTP_ADDR": "ignored"})
    'https://kv.example'
    >>> _consul_url({}) is None
    True
    """

    url = _get(env, "CONSUL_URL") or (env.get("CONSUL_HTTP_ADDR") or "").strip()
    if not url:
        return None
    if "://" not in url:
        url = f"http://{url}"
    return url.rstrip("/")


def _split_list(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _timeout(value: str | None) -> float:
    if value is None:
        return DEFAULT_CONSUL_TIMEOUT
    coerced = _coerce(value)
    if isinstance(coerced, bool) or not isinstance(coerced, (int, float)):
        raise InvalidFormat(f"{ENV_PREFIX}_CONSUL_TIMEOUT must be a number, got {value!r}")
    return float(coerced)


def _coerce(value: str) -> object:
    """Coerce textual environment values to Python primitives where possible.

    Examples
    --------
    >>> _coerce('true'), _coerce('10'), _coerce('3.5'), _coerce('hello')
    (True, 10, 3.5, 'hello')
    """

    lowered = value.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    if lowered in {"null", "none"}:
        return None
    try:
        if value.isdigit() or (value.startswith("-") and value[1:].isdigit()):
            return int(value)
        return float(value)
    except ValueError:
        return value
