"""Asynchronous offline-first client -- mirrors :class:`~webber.client.sync_client.Webber`.

:class:`AsyncWebber` wraps :class:`httpx.AsyncClient` and adds the
offline-first delivery mode on top of the awaitable getters:

* :meth:`AsyncWebber.fetch` returns an :class:`OfflineFirst` handle with two
  explicit channels: :attr:`OfflineFirst.cached`, read synchronously before
  the call returns, and :attr:`OfflineFirst.fresh`, an awaitable that
  resolves after the network hop. Every :class:`~webber.models.Delivery` is
  tagged with its source.
* :meth:`AsyncWebber.async_get_from_api` keeps the callback contract: the
  result callback may run zero, one, or two times and is not told which
  delivery it is receiving; the finally callback runs exactly once.

The event loop is the primary execution context. Callbacks run on it, and
the only suspension point per call is the network fetch. Each call gets its
own :class:`asyncio.Task`; there is no concurrency limit and no
cancellation. Leaving the ``async with`` block waits for tasks still in
flight before closing the transport.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Generator
from typing import Any, Callable, Generic, Optional, TypeVar

import httpx

from webber.client.base import BaseWebber
from webber.client.fetcher import afetch_text
from webber.exceptions import InvalidUsageError, WebberError
from webber.models import (
    Delivery,
    DeliverySource,
    FetchResult,
    JSONArray,
    OperationKind,
    WebberConfig,
)
from webber.reachability import ReachabilityProbe
from webber.store import KeyValueStore

T = TypeVar("T")

ResultCallback = Callable[[Optional[T]], None]
FinallyCallback = Callable[[], None]


class OfflineFirst(Generic[T]):
    """Handle for one offline-first retrieval.

    Attributes:
        cached: The cache delivery made before the network hop, or ``None``
            when the call was made with ``offline=False``. Its ``value`` may
            itself be ``None`` on a cache miss.
        task: The :class:`asyncio.Task` running the network hop.

    Awaiting the handle (or :attr:`fresh`) yields the network delivery, or
    ``None`` when the device was unreachable once the fetch finished.

    Example::

        pending = webber.fetch("news")
        if pending.cached is not None:
            show(pending.cached.value)
        async for delivery in pending:
            print(delivery.source, delivery.value)
    """

    def __init__(
        self,
        cached: Optional[Delivery[T]],
        task: asyncio.Task[Optional[Delivery[T]]],
    ) -> None:
        self.cached = cached
        self.task = task

    @property
    def fresh(self) -> asyncio.Task[Optional[Delivery[T]]]:
        """Awaitable network delivery."""
        return self.task

    def done(self) -> bool:
        return self.task.done()

    def __await__(self) -> Generator[Any, None, Optional[Delivery[T]]]:
        return self.task.__await__()

    async def deliveries(self) -> AsyncIterator[Delivery[T]]:
        """Yield the cached delivery (if any), then the network one (if any)."""
        if self.cached is not None:
            yield self.cached
        fresh = await self.task
        if fresh is not None:
            yield fresh

    def __aiter__(self) -> AsyncIterator[Delivery[T]]:
        return self.deliveries()

    def add_callbacks(
        self,
        on_result: ResultCallback[T],
        on_finally: Optional[FinallyCallback] = None,
    ) -> None:
        """Attach callbacks using the untagged two-delivery contract.

        *on_result* is invoked immediately with the cached value when there
        is one, then again from the event loop with the network value if
        the device was reachable. *on_finally* runs once after the network
        hop, whatever its outcome, even if the cached delivery raised.
        """

        def _deliver(task: asyncio.Task[Optional[Delivery[T]]]) -> None:
            try:
                fresh = task.result()
                if fresh is not None:
                    on_result(fresh.value)
            finally:
                if on_finally is not None:
                    on_finally()

        self.task.add_done_callback(_deliver)
        if self.cached is not None:
            on_result(self.cached.value)


class AsyncWebber(BaseWebber):
    """Non-blocking offline-first GET client.

    Provides the same getters as :class:`~webber.client.sync_client.Webber`
    as coroutines, plus the offline-first delivery mode. Must be used as an
    async context manager.

    Args:
        config: Client configuration.
        store: Offline store. Defaults to a disk store under the XDG cache
            directory.
        probe: Reachability probe. Defaults to
            :class:`~webber.reachability.DefaultRouteProbe`.
        transport: Optional async httpx transport, e.g.
            :class:`httpx.MockTransport`.

    Example::

        async with AsyncWebber(WebberConfig(server="https://api.example.com")) as webber:
            users = await webber.get_json_array_from_api("users")
            webber.async_get_from_api("news", on_result=render, on_finally=stop_spinner)
    """

    def __init__(
        self,
        config: Optional[WebberConfig] = None,
        store: Optional[KeyValueStore] = None,
        probe: Optional[ReachabilityProbe] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(config, store, probe)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._pending: set[asyncio.Task[Any]] = set()

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> AsyncWebber:
        self._client = httpx.AsyncClient(
            timeout=self._config.request.timeout,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        if self._client:
            await self._client.aclose()
            self._client = None
        self._close_store()

    # ------------------------------------------------------------------ #
    # Awaitable getters
    # ------------------------------------------------------------------ #

    async def fetch_result(
        self,
        path: str,
        kind: OperationKind = OperationKind.RAW,
        cache: bool = True,
    ) -> FetchResult[Any]:
        """Non-blocking equivalent of :meth:`Webber.fetch_result`."""
        assert self._client is not None, "Client not initialised -- use as async context manager"

        server = self.server
        if not self._probe.is_reachable():
            result = self._offline(kind, server, path, cache)
        else:
            try:
                text = await afetch_text(self._client, server, path)
            except WebberError as exc:
                return self._failure(exc)
            result = self._fetched(kind, server, path, text, cache)
        return self._decode(kind, result)

    async def get_from_api(self, path: str, cache: bool = True) -> Optional[str]:
        """Awaitable :meth:`Webber.get_from_api`."""
        return (await self.fetch_result(path, OperationKind.RAW, cache)).unwrap()

    async def get_json_array_from_api(self, path: str, cache: bool = True) -> Optional[JSONArray]:
        """Awaitable :meth:`Webber.get_json_array_from_api`."""
        return (await self.fetch_result(path, OperationKind.JSON_ARRAY, cache)).unwrap()

    # ------------------------------------------------------------------ #
    # Offline-first delivery
    # ------------------------------------------------------------------ #

    def fetch(self, path: str, cache: bool = True, offline: bool = True) -> OfflineFirst[str]:
        """Start an offline-first retrieval of *path* as text.

        Must be called from a coroutine running on the event loop that
        should receive the deliveries.

        Args:
            path: Relative path, without a leading slash by convention.
            cache: Passed to the network hop (see :meth:`fetch_result`).
            offline: Read the cache synchronously into
                :attr:`OfflineFirst.cached` before scheduling the fetch.

        Raises:
            InvalidUsageError: If no event loop is running.
        """
        return self._start(OperationKind.RAW, path, cache, offline)

    def fetch_json_array(
        self, path: str, cache: bool = True, offline: bool = True
    ) -> OfflineFirst[JSONArray]:
        """JSON-array variant of :meth:`fetch`."""
        return self._start(OperationKind.JSON_ARRAY, path, cache, offline)

    def async_get_from_api(
        self,
        path: str,
        on_result: ResultCallback[str],
        on_finally: Optional[FinallyCallback] = None,
        cache: bool = True,
        offline: bool = True,
    ) -> asyncio.Task[Optional[Delivery[str]]]:
        """Callback form of :meth:`fetch`.

        With ``offline=True``, *on_result* is called before this method
        returns with the cached text (possibly ``None``). After the network
        hop it is called again with the fetched text, but only if the device
        is reachable at that moment. *on_finally* is then called exactly once.

        Returns:
            The task running the network hop.
        """
        pending = self.fetch(path, cache=cache, offline=offline)
        pending.add_callbacks(on_result, on_finally)
        return pending.task

    def async_get_json_array_from_api(
        self,
        path: str,
        on_result: ResultCallback[JSONArray],
        on_finally: Optional[FinallyCallback] = None,
        cache: bool = True,
        offline: bool = True,
    ) -> asyncio.Task[Optional[Delivery[JSONArray]]]:
        """JSON-array variant of :meth:`async_get_from_api`."""
        pending = self.fetch_json_array(path, cache=cache, offline=offline)
        pending.add_callbacks(on_result, on_finally)
        return pending.task

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _start(
        self, kind: OperationKind, path: str, cache: bool, offline: bool
    ) -> OfflineFirst[Any]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as exc:
            raise InvalidUsageError(
                "Offline-first fetches must be started from a running event loop"
            ) from exc

        cached: Optional[Delivery[Any]] = None
        if offline:
            cached = Delivery(self.cache_result(path, kind).unwrap(), DeliverySource.CACHE)

        task = loop.create_task(self._network_delivery(kind, path, cache))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return OfflineFirst(cached, task)

    async def _network_delivery(
        self, kind: OperationKind, path: str, cache: bool
    ) -> Optional[Delivery[Any]]:
        result = await self.fetch_result(path, kind, cache)
        if not self._probe.is_reachable():
            return None
        return Delivery(result.unwrap(), DeliverySource.NETWORK)
