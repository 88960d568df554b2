"""Synchronous offline-first client.

:class:`Webber` wraps :class:`httpx.Client` and applies the offline policy
to every GET:

- **Reachable** -- always fetch. On success the text is written to the
  offline store (when ``cache`` is true) and returned. On failure the error
  is logged and the result is ``None``; the store is not consulted.
- **Unreachable** -- never touch the network. Return the stored text when
  ``cache`` is true, otherwise ``None``.

JSON-array variants follow the same flow with their own cache entries and
decode the text afterwards. The raw text is cached before decoding, so a
body that is not an array is still stored.

Calls block for the full round trip. Do not call them from an event loop;
use :class:`~webber.client.async_client.AsyncWebber` there.

See Also:
    :class:`~webber.client.async_client.AsyncWebber` for the non-blocking
    equivalent with offline-first delivery.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from webber.client.base import BaseWebber
from webber.client.fetcher import fetch_text
from webber.exceptions import WebberError
from webber.models import FetchResult, JSONArray, OperationKind, WebberConfig
from webber.reachability import ReachabilityProbe
from webber.store import KeyValueStore


class Webber(BaseWebber):
    """Blocking offline-first GET client.

    Must be used as a context manager so that the underlying transport is
    opened and closed.

    Args:
        config: Client configuration; ``server`` is required for any
            request to succeed.
        store: Offline store. Defaults to a disk store under the XDG cache
            directory.
        probe: Reachability probe. Defaults to
            :class:`~webber.reachability.DefaultRouteProbe`.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`.

    Example::

        with Webber(WebberConfig(server="https://api.example.com")) as webber:
            text = webber.get_from_api("status")
            users = webber.get_json_array_from_api("users")
    """

    def __init__(
        self,
        config: Optional[WebberConfig] = None,
        store: Optional[KeyValueStore] = None,
        probe: Optional[ReachabilityProbe] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        super().__init__(config, store, probe)
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> Webber:
        self._client = httpx.Client(
            timeout=self._config.request.timeout,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None
        self._close_store()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def fetch_result(
        self,
        path: str,
        kind: OperationKind = OperationKind.RAW,
        cache: bool = True,
    ) -> FetchResult[Any]:
        """Run the offline policy for *path* and return the tagged outcome.

        Args:
            path: Relative path, without a leading slash by convention.
            kind: ``RAW`` for text, ``JSON_ARRAY`` to decode a JSON array.
            cache: Write successful fetches to the store, and read from it
                when offline.

        Returns:
            A :class:`~webber.models.FetchResult`. Errors are logged and
            reported through ``status``; nothing is raised.
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        # Read once so the URL and the cache key agree even if server changes mid-call.
        server = self.server
        if not self._probe.is_reachable():
            result = self._offline(kind, server, path, cache)
        else:
            try:
                text = fetch_text(self._client, server, path)
            except WebberError as exc:
                return self._failure(exc)
            result = self._fetched(kind, server, path, text, cache)
        return self._decode(kind, result)

    def get_from_api(self, path: str, cache: bool = True) -> Optional[str]:
        """GET *path* as text, or ``None`` when offline without cache or on any error.

        Args:
            path: Relative path, without a leading slash by convention.
            cache: Store the result, and fall back to the stored value offline.
        """
        return self.fetch_result(path, OperationKind.RAW, cache).unwrap()

    def get_json_array_from_api(self, path: str, cache: bool = True) -> Optional[JSONArray]:
        """GET *path* and decode it as a JSON array.

        Returns ``None`` when no text is available, or when the text is not
        JSON or its top level is not an array.
        """
        return self.fetch_result(path, OperationKind.JSON_ARRAY, cache).unwrap()
