"""Client side of the snapshot: a key/value store and a caching loader.

``KeyValueStore`` keeps JSON-encoded values in any string mapping; the
default storage is an in-memory ``cachetools.LRUCache``.  ``SnapshotClient``
fetches ``xray-data.json`` over HTTP, caches the raw text in the store and
only refetches it when ``xray-timestamp.json`` reports a newer build.

``SnapshotClient`` performs a lazy import of ``httpx`` and ``tenacity``
inside ``__init__``, so importing this module on a base install does not
raise ``ImportError``.  Install the optional dependencies with::

    pip install site-xray[client]

Example::

    from site_xray.client import SnapshotClient

    with SnapshotClient("http://localhost:8080/_xray") as client:
        snapshot = client.load()
        html = client.render_global(snapshot)
"""

from __future__ import annotations

import json
import logging
from collections.abc import MutableMapping
from typing import Any

from cachetools import LRUCache

from site_xray.tree.nodes import Descriptor
from site_xray.tree.renderer import render

__all__ = ["DATA_KEY", "HIDE_KEY", "KeyValueStore", "SnapshotClient"]

logger = logging.getLogger(__name__)

DATA_KEY = "xray:data"
HIDE_KEY = "xray:hide"

_DATA_FILE = "xray-data.json"
_TIMESTAMP_FILE = "xray-timestamp.json"


class KeyValueStore:
    """JSON-encoding wrapper around a string storage.

    Args:
        storage: Any ``MutableMapping[str, str]``.  Defaults to a fresh
            ``LRUCache`` holding ``max_size`` entries; the least recently
            used entry is silently evicted.
        max_size: Capacity of the default storage.
    """

    def __init__(
        self,
        storage: MutableMapping[str, str] | None = None,
        max_size: int = 64,
    ) -> None:
        self._storage: MutableMapping[str, str] = (
            storage if storage is not None else LRUCache(maxsize=max_size)
        )

    def get(self, key: str, force: bool = False) -> Any:
        """Return the decoded value stored under ``key``.

        Returns:
            The decoded value; ``{}`` when absent and ``force`` is True;
            None when absent otherwise.

        Raises:
            json.JSONDecodeError: If the stored text is not valid JSON.
        """
        raw = self._storage.get(key)
        if raw is None:
            return {} if force else None
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        """Store ``value``; strings are stored as-is, anything else as JSON."""
        self._storage[key] = value if isinstance(value, str) else json.dumps(value)


class SnapshotClient:
    """Loads and caches the build snapshot served next to the site.

    Transport errors are retried with exponential backoff (3 attempts).
    HTTP and decoding failures are logged and never raised from ``load()``.

    Args:
        base_url: URL of the snapshot directory, e.g.
            ``"http://localhost:8080/_xray"``.
        store: Key/value store for the cached snapshot and the panel hide
            state.  Defaults to a fresh in-memory ``KeyValueStore``.
        http: An ``httpx.Client``.  When omitted, the client creates (and
            closes) its own.
        max_rendered: Number of rendered global-data trees kept in memory,
            keyed by snapshot timestamp.

    Raises:
        ImportError: If ``httpx`` or ``tenacity`` is not installed.  The
            message includes the install command.
    """

    def __init__(
        self,
        base_url: str,
        store: KeyValueStore | None = None,
        http: Any = None,
        max_rendered: int = 16,
    ) -> None:
        try:
            import httpx
            from tenacity import (
                retry,
                retry_if_exception_type,
                stop_after_attempt,
                wait_exponential,
            )
        except ImportError as exc:
            raise ImportError(
                "httpx and tenacity are required for SnapshotClient. "
                "Install with: pip install site-xray[client]"
            ) from exc

        self._base_url = base_url.rstrip("/")
        self.store: KeyValueStore = store if store is not None else KeyValueStore()
        self._owns_http = http is None
        # Use Any annotation: httpx is a lazy import.
        self._http: Any = http if http is not None else httpx.Client(timeout=10.0)
        self._fetch_errors: tuple[type[Exception], ...] = (httpx.HTTPError, ValueError)
        self._rendered: LRUCache[Any, str] = LRUCache(maxsize=max_rendered)

        _retry = retry(
            retry=retry_if_exception_type(httpx.TransportError),
            wait=wait_exponential(multiplier=0.1, max=2),
            stop=stop_after_attempt(3),
            reraise=True,
        )
        self._fetch = _retry(self._raw_fetch)

    def __repr__(self) -> str:
        return f"SnapshotClient(base_url={self._base_url!r})"

    def __enter__(self) -> SnapshotClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            self._http.close()

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def _raw_fetch(self, name: str) -> Any:
        """GET one file of the snapshot directory; retried via ``_fetch``."""
        response = self._http.get(f"{self._base_url}/{name}")
        response.raise_for_status()
        return response

    def load(self) -> dict[str, Any] | None:
        """Return the current snapshot, from the cache when it is up to date.

        Returns:
            The decoded snapshot, or None if it could not be fetched.
        """
        try:
            cached = self.store.get(DATA_KEY)
        except json.JSONDecodeError as exc:
            logger.warning("Abandoning the cache due to corrupted data: %s", exc)
            cached = None

        if cached:
            try:
                latest = self._fetch(_TIMESTAMP_FILE).json()
            except self._fetch_errors as exc:
                logger.error("Error while fetching %s: %s", _TIMESTAMP_FILE, exc)
                latest = None

            logger.debug(
                "Cached timestamp %s / latest timestamp %s",
                cached.get("timestamp"),
                latest.get("timestamp") if latest else None,
            )
            if latest is not None and latest.get("timestamp") == cached.get("timestamp"):
                logger.debug("Returning cached data")
                return cached

        logger.debug("Loading data from %s/%s", self._base_url, _DATA_FILE)
        try:
            response = self._fetch(_DATA_FILE)
            data: dict[str, Any] = response.json()
        except self._fetch_errors as exc:
            logger.error("Error while fetching/parsing %s: %s", _DATA_FILE, exc)
            return None

        logger.debug("Caching data")
        self.store.set(DATA_KEY, response.text)
        return data

    def render_global(self, snapshot: dict[str, Any] | None) -> str:
        """Return the rendered global-data tree of ``snapshot`` (``""`` if none)."""
        if not snapshot or not snapshot.get("globalData"):
            return ""
        timestamp = snapshot.get("timestamp")
        if timestamp is not None and timestamp in self._rendered:
            return self._rendered[timestamp]

        html = render(Descriptor.from_dict(snapshot["globalData"]))
        if timestamp is not None:
            self._rendered[timestamp] = html
        return html

    # ------------------------------------------------------------------
    # Panel state
    # ------------------------------------------------------------------

    def hide_state(self) -> dict[str, bool]:
        """Return the persisted hide flag of every panel (``{}`` when unset)."""
        try:
            state = self.store.get(HIDE_KEY, force=True)
        except json.JSONDecodeError as exc:
            logger.warning("Discarding corrupted panel state: %s", exc)
            return {}
        return state if isinstance(state, dict) else {}

    def set_hidden(self, panel: str, hidden: bool) -> None:
        """Persist whether ``panel`` is hidden."""
        state = self.hide_state()
        state[panel] = hidden
        self.store.set(HIDE_KEY, state)
