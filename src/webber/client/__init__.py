"""Offline-first HTTP clients for webber.

Provides synchronous and asynchronous facades that wrap :mod:`httpx` with
reachability checks and a persistent offline cache.

Classes:
    :class:`Webber` -- blocking client backed by :class:`httpx.Client`.
    :class:`AsyncWebber` -- non-blocking client backed by :class:`httpx.AsyncClient`.
    :class:`OfflineFirst` -- handle returned by :meth:`AsyncWebber.fetch`.

Both clients are context managers and accept the same core parameters: a
:class:`~webber.models.WebberConfig`, an optional
:class:`~webber.store.KeyValueStore`, and an optional
:class:`~webber.reachability.ReachabilityProbe`.

Example::

    from webber.client import Webber

    with Webber(config) as webber:
        text = webber.get_from_api("users")
"""

from webber.client.async_client import AsyncWebber, OfflineFirst
from webber.client.sync_client import Webber

__all__ = ["AsyncWebber", "OfflineFirst", "Webber"]
