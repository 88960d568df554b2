"""State and offline-cache policy shared by :class:`Webber` and :class:`AsyncWebber`.

Everything that does not touch the network lives here: key derivation,
cache reads and writes, JSON decoding, and the conversion of raised
:class:`~webber.exceptions.WebberError` instances into
:class:`~webber.models.FetchResult` values. The facades only add the
blocking or non-blocking GET.
"""

from __future__ import annotations

from typing import Any, Optional

from webber.config import get_cache_dir
from webber.decode import decode_json_array
from webber.exceptions import DecodeError, InvalidURLError, NetworkError, WebberError
from webber.keys import offline_key
from webber.models import FetchResult, FetchStatus, JSONArray, OperationKind, WebberConfig
from webber.output import debug, warning
from webber.reachability import DefaultRouteProbe, ReachabilityProbe
from webber.store import DiskStore, KeyValueStore, MemoryStore

_ERROR_STATUS: dict[type[WebberError], FetchStatus] = {
    InvalidURLError: FetchStatus.INVALID_URL,
    NetworkError: FetchStatus.NETWORK_ERROR,
    DecodeError: FetchStatus.DECODE_ERROR,
}


def default_store(config: WebberConfig) -> KeyValueStore:
    """Build the store a client uses when none is injected."""
    if not config.cache.enabled:
        return MemoryStore()
    return DiskStore(config.cache.directory or get_cache_dir())


class BaseWebber:
    """Common constructor, properties, and cache policy.

    Args:
        config: Client configuration. Only ``server`` is consulted per call;
            the rest is read once here and by the subclass on enter.
        store: Offline store. When omitted, one is built from
            ``config.cache`` and closed together with the client.
        probe: Reachability probe. Defaults to a
            :class:`~webber.reachability.DefaultRouteProbe` built from
            ``config.reachability``.
    """

    def __init__(
        self,
        config: Optional[WebberConfig] = None,
        store: Optional[KeyValueStore] = None,
        probe: Optional[ReachabilityProbe] = None,
    ) -> None:
        self._config = config.model_copy(deep=True) if config is not None else WebberConfig()
        self._owns_store = store is None
        self._store = store if store is not None else default_store(self._config)
        self._probe = probe if probe is not None else DefaultRouteProbe.from_config(
            self._config.reachability
        )

    # ------------------------------------------------------------------ #
    # Properties
    # ------------------------------------------------------------------ #

    @property
    def server(self) -> str:
        """Base address prepended to every path.

        May be reassigned at any time; later calls then read and write a
        different set of cache entries.
        """
        return self._config.server

    @server.setter
    def server(self, value: str) -> None:
        self._config.server = value

    @property
    def config(self) -> WebberConfig:
        return self._config

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def probe(self) -> ReachabilityProbe:
        return self._probe

    def is_reachable(self) -> bool:
        return self._probe.is_reachable()

    # ------------------------------------------------------------------ #
    # Cache-only accessors
    # ------------------------------------------------------------------ #

    def cache_result(self, path: str, kind: OperationKind = OperationKind.RAW) -> FetchResult[Any]:
        """Read *path* from the offline store only, decoding JSON when *kind* asks for it."""
        return self._decode(kind, self._read_cache(kind, self.server, path))

    def cache_get_from_api(self, path: str) -> Optional[str]:
        """Return the cached raw text for *path*, or ``None``.

        Never checks reachability and never touches the network.
        """
        return self.cache_result(path, OperationKind.RAW).unwrap()

    def cache_get_json_array_from_api(self, path: str) -> Optional[JSONArray]:
        """Return the cached JSON array for *path*, or ``None``.

        ``None`` also covers cached text that does not decode to an array.
        """
        return self.cache_result(path, OperationKind.JSON_ARRAY).unwrap()

    # ------------------------------------------------------------------ #
    # Helpers for subclasses
    # ------------------------------------------------------------------ #

    def _read_cache(self, kind: OperationKind, server: str, path: str) -> FetchResult[str]:
        text = self._store.get(offline_key(kind, server, path))
        if text is None:
            return FetchResult(FetchStatus.CACHE_MISS, from_cache=True)
        debug(f"Cache hit: {kind.value} {server}/{path}")
        return FetchResult(FetchStatus.OK, value=text, from_cache=True)

    def _write_cache(self, kind: OperationKind, server: str, path: str, text: str) -> None:
        self._store.set(offline_key(kind, server, path), text)
        debug(f"Cached: {kind.value} {server}/{path}")

    def _offline(self, kind: OperationKind, server: str, path: str, cache: bool) -> FetchResult[str]:
        """Result used when the probe reports no network."""
        if not cache:
            return FetchResult(FetchStatus.CACHE_MISS)
        return self._read_cache(kind, server, path)

    def _fetched(self, kind: OperationKind, server: str, path: str, text: str, cache: bool) -> FetchResult[str]:
        """Record a successful network fetch."""
        if cache:
            self._write_cache(kind, server, path, text)
        return FetchResult(FetchStatus.OK, value=text)

    def _failure(self, exc: WebberError, from_cache: bool = False) -> FetchResult[Any]:
        warning(f"Webber Error: {exc}")
        status = _ERROR_STATUS.get(type(exc), FetchStatus.NETWORK_ERROR)
        return FetchResult(status, error=exc, from_cache=from_cache)

    def _decode(self, kind: OperationKind, result: FetchResult[str]) -> FetchResult[Any]:
        """Decode text results for the JSON-array kind; pass everything else through."""
        if kind is not OperationKind.JSON_ARRAY or not result.ok:
            return result
        assert result.value is not None
        try:
            array = decode_json_array(result.value)
        except DecodeError as exc:
            return self._failure(exc, from_cache=result.from_cache)
        return FetchResult(FetchStatus.OK, value=array, from_cache=result.from_cache)

    def _close_store(self) -> None:
        if self._owns_store:
            self._store.close()
