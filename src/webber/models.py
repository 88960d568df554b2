"""Canonical models shared across all webber modules.

The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig`, :class:`CacheConfig`, :class:`ReachabilityConfig`,
    and the top-level :class:`WebberConfig`.

**Fetch models** -- produced by the facades in :mod:`webber.client`:
    :class:`OperationKind`, :class:`FetchStatus`, :class:`FetchResult`,
    :class:`DeliverySource`, and :class:`Delivery`.

Configuration models use Pydantic v2; fetch results are plain dataclasses
because they carry arbitrary decoded JSON and exception instances.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


# --- Configuration models ---


class RequestConfig(BaseModel):
    """HTTP settings applied to every GET issued by a client."""

    timeout: Optional[float] = Field(
        default=None,
        description="Request timeout in seconds; None waits indefinitely",
    )


class CacheConfig(BaseModel):
    """Offline cache settings.

    When ``enabled`` is false the client is given an in-memory store, so
    nothing outlives the process.
    """

    enabled: bool = Field(default=True, description="Persist responses to disk")
    directory: Optional[str] = Field(
        default=None,
        description="Cache root directory; defaults to the XDG cache dir",
    )


class ReachabilityConfig(BaseModel):
    """Target used by :class:`~webber.reachability.DefaultRouteProbe`.

    No traffic is sent to this address; it only selects which route the
    kernel is asked about.
    """

    host: str = Field(default="8.8.8.8", description="Address to route towards")
    port: int = Field(default=53, ge=0, le=65535, description="Port paired with host")


class WebberConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/webber/config.json``.

    Loaded and saved by :func:`~webber.config.load_global_config` and
    :func:`~webber.config.save_global_config`. See
    :func:`~webber.config.resolve_config` for the precedence chain that
    can override :attr:`server`.

    Example::

        WebberConfig(server="https://api.example.com")
    """

    server: str = Field(
        default="",
        description="Base address prepended to every path (no trailing slash)",
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    reachability: ReachabilityConfig = Field(default_factory=ReachabilityConfig)


# --- Fetch models ---


class OperationKind(str, enum.Enum):
    """Which kind of retrieval a cache entry belongs to.

    The values are part of the persisted key layout, so raw-text and
    JSON-array entries for the same path never collide.
    """

    RAW = "getFromAPI"
    JSON_ARRAY = "getJSONArrayFromAPI"


class FetchStatus(str, enum.Enum):
    """Outcome tag of a :class:`FetchResult`."""

    OK = "ok"
    CACHE_MISS = "cache_miss"
    INVALID_URL = "invalid_url"
    NETWORK_ERROR = "network_error"
    DECODE_ERROR = "decode_error"


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Tagged outcome of a single retrieval.

    Attributes:
        status: What happened.
        value: The text or decoded JSON array when ``status`` is ``OK``.
        error: The exception behind a failure status, if any.
        from_cache: ``True`` when the value was read from the store rather
            than the network.
    """

    status: FetchStatus
    value: Optional[T] = None
    error: Optional[Exception] = None
    from_cache: bool = False

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.OK

    def unwrap(self) -> Optional[T]:
        """Collapse to the legacy contract: the value, or ``None`` on any failure."""
        return self.value if self.ok else None


class DeliverySource(str, enum.Enum):
    """Where an async delivery came from."""

    CACHE = "cache"
    NETWORK = "network"


@dataclass(frozen=True)
class Delivery(Generic[T]):
    """One value handed to an async caller, tagged with its source."""

    value: Optional[T]
    source: DeliverySource


JSONArray = list[Any]
