"""webber -- offline-first HTTP GET helper with a persistent response cache.

A client is pointed at a server base address and fetches relative paths as
raw text or as JSON arrays. Every successful fetch is written to a
persistent key-value store, and while the device has no usable network
route the cached text is served instead.

Typical usage::

    from webber import Webber, WebberConfig

    with Webber(WebberConfig(server="https://api.example.com")) as webber:
        users = webber.get_json_array_from_api("users")

Modules:
    client: Synchronous and asynchronous facades plus the raw fetcher.
    models: Pydantic configuration models and fetch result types.
    config: XDG-aware configuration loading and precedence resolution.
    store: Key-value stores used as the offline cache.
    reachability: Default-route reachability probes.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"

from webber.client import AsyncWebber, OfflineFirst, Webber  # noqa: E402
from webber.models import (  # noqa: E402
    Delivery,
    DeliverySource,
    FetchResult,
    FetchStatus,
    OperationKind,
    WebberConfig,
)

__all__ = [
    "AsyncWebber",
    "Delivery",
    "DeliverySource",
    "FetchResult",
    "FetchStatus",
    "OfflineFirst",
    "OperationKind",
    "Webber",
    "WebberConfig",
]
