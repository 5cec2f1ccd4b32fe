"""Consul key/value adapter.

Purpose
-------
Let Consul's KV store take part in resolution. :class:`ConsulClient`
implements :class:`lib_cmdb.application.ports.KeyValueClient` on top of a
``requests.Session`` with retry/backoff; :class:`ConsulSource` implements the
:class:`~lib_cmdb.application.ports.Source` port for one key prefix.

Contents
--------
* :func:`make_session` – session with retry defaults.
* :func:`decode_value` – base64 payload to Python value (JSON when possible).
* :class:`ConsulClient` – ``read`` / ``list`` against ``/v1/kv``.
* :class:`ConsulSource` – dotted-key view of one prefix.

System Role
-----------
Constructed by :class:`lib_cmdb.core.Interface` only when a Consul URL is
configured. Lookups are live HTTP calls; pooling and retries belong to the
session, not to the engine.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Iterator
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter, Retry

from ...application.ports import KeyValueClient
from ...domain.errors import RemoteError
from ...domain.settings import DEFAULT_CONSUL_TIMEOUT
from ...observability import log_debug, log_error


def make_session(token: str | None = None) -> requests.Session:
    """Create a ``requests.Session`` with retry/backoff for idempotent reads."""

    session = requests.Session()
    retries = Retry(
        total=3,
        backoff_factor=0.3,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    session.mount("http://", HTTPAdapter(max_retries=retries))
    session.mount("https://", HTTPAdapter(max_retries=retries))
    if token:
        session.headers.update({"X-Consul-Token": token})
    return session


def decode_value(raw: str | None) -> object | None:
    """Decode a Consul ``Value`` field.

    The payload is base64 text; decoded UTF-8 is parsed as JSON and returned
    unchanged when it is not JSON.

    Examples
    --------
    >>> decode_value("NTQzMg==")
    5432
    >>> decode_value("ZGIx")
    'db1'
    >>> decode_value(None) is None
    True
    """

    if raw is None:
        return None
    try:
        text = base64.b64decode(raw).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise RemoteError(f"Undecodable Consul value: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


class ConsulClient:
    """Minimal client for the Consul KV HTTP API."""

    def __init__(
        self,
        url: str,
        *,
        token: str | None = None,
        timeout: float = DEFAULT_CONSUL_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.url = url.rstrip("/")
        self.timeout = timeout
        self._session = session or make_session(token)

    def read(self, path: str) -> object | None:
        """Return the decoded value at *path* or ``None`` when Consul has no such key."""

        entries = self._request(path)
        if not entries:
            return None
        return decode_value(entries[0].get("Value"))

    def list(self, prefix: str) -> Iterator[tuple[str, object]]:
        """Yield ``(path, value)`` for every leaf stored under *prefix*.

        Folder placeholders (keys ending in ``/`` or holding no value) are
        skipped.
        """

        for entry in self._request(prefix, recurse=True) or []:
            key = entry.get("Key", "")
            raw = entry.get("Value")
            if not key or key.endswith("/") or raw is None:
                continue
            yield key, decode_value(raw)

    def _request(self, path: str, *, recurse: bool = False) -> list[dict[str, object]] | None:
        """Return the KV entries Consul holds at *path*, or ``None`` on 404.

        Raises
        ------
        RemoteError
            On transport failures, error statuses, and bodies that are not a
            JSON list of entry objects.
        """

        url = f"{self.url}/v1/kv/{quote(path)}"
        params = {"recurse": "true"} if recurse else None
        log_debug("consul_request", source="consul", path=url, recurse=recurse)
        try:
            response = self._session.get(url, params=params, timeout=self.timeout)
            if response.status_code == 404:
                return None
            response.raise_for_status()
            entries = response.json()
        except (requests.RequestException, ValueError) as exc:
            log_error("consul_request_failed", source="consul", path=url, error=str(exc))
            raise RemoteError(f"Consul request for {url} failed: {exc}") from exc
        if entries is None:
            return []
        if not isinstance(entries, list) or not all(isinstance(entry, dict) for entry in entries):
            log_error("consul_unexpected_body", source="consul", path=url)
            raise RemoteError(f"Consul response for {url} is not a list of KV entries")
        return entries

    def __repr__(self) -> str:
        return f"ConsulClient(url={self.url!r})"


class ConsulSource:
    """Dotted-key view of one Consul prefix.

    Consul paths map to keys by swapping ``/`` for ``.``; a source for prefix
    ``app`` answers ``app.db.host`` from ``app/db/host`` and never asks Consul
    about keys outside its prefix. The empty prefix sees the whole store.
    Paths with a ``.`` inside a segment (``app/db.host``) have no key that
    reads them back and are left out of ``each_pair``.
    """

    def __init__(self, prefix: str, client: KeyValueClient) -> None:
        self.prefix = prefix.strip("./")
        self._client = client

    def get(self, key: str) -> object | None:
        if not self._owns(key):
            return None
        return self._client.read(key.replace(".", "/"))

    def each_pair(self) -> Iterator[tuple[str, object]]:
        for path, value in self._client.list(self.prefix.replace(".", "/")):
            segments = path.strip("/").split("/")
            # ``get`` maps every dot to a slash, so dotted segments are unreachable.
            if any("." in segment for segment in segments):
                log_debug("consul_key_skipped", source="consul", path=path, reason="dot in path segment")
                continue
            key = ".".join(segments)
            if self._owns(key):
                yield key, value

    def _owns(self, key: str) -> bool:
        if not self.prefix:
            return True
        return key == self.prefix or key.startswith(self.prefix + ".")

    def __repr__(self) -> str:
        return f"ConsulSource(prefix={self.prefix!r}, client={self._client!r})"
