"""Reachability probes.

A probe answers one question: does the device currently have a usable
network path? It does not promise that the configured server answers; a
reachable device can still see :class:`~webber.exceptions.NetworkError`.

* :class:`DefaultRouteProbe` -- asks the kernel whether a route towards a
  public address exists by ``connect()``-ing a UDP socket. Nothing is sent.
* :class:`StaticProbe` -- a fixed, settable answer for tests, for the CLI
  ``--offline`` flag, and for applications that track connectivity through
  their own platform APIs.

Probes never raise. Any failure, including failing to create the socket or
an out-of-range port, is reported as unreachable.
"""

from __future__ import annotations

import socket
from abc import ABC, abstractmethod

from webber.models import ReachabilityConfig
from webber.output import debug


class ReachabilityProbe(ABC):
    """Abstract reachability check consumed by the facades."""

    @abstractmethod
    def is_reachable(self) -> bool:
        """Return ``True`` only if a network path is usable right now."""


class DefaultRouteProbe(ReachabilityProbe):
    """Checks for a default route without sending any traffic.

    ``connect()`` on a UDP socket only performs a route lookup, so it fails
    fast with ``ENETUNREACH`` when no interface is up and succeeds as soon
    as one is, without needing a DNS lookup or a live peer.

    Args:
        host: IPv4 address to route towards.
        port: Port paired with *host*; irrelevant to routing but required
            by ``connect()``.
    """

    def __init__(self, host: str = "8.8.8.8", port: int = 53) -> None:
        self.host = host
        self.port = port

    @classmethod
    def from_config(cls, config: ReachabilityConfig) -> DefaultRouteProbe:
        return cls(host=config.host, port=config.port)

    def is_reachable(self) -> bool:
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
                sock.connect((self.host, self.port))
                local_addr = sock.getsockname()[0]
        except (OSError, OverflowError, ValueError) as exc:
            debug(f"No route to {self.host}:{self.port}: {exc}")
            return False
        # An unbound source address means the route lookup gave nothing usable.
        return local_addr != "0.0.0.0"


class StaticProbe(ReachabilityProbe):
    """Probe whose answer is set by the caller.

    Example::

        probe = StaticProbe(False)
        ...
        probe.reachable = True
    """

    def __init__(self, reachable: bool = True) -> None:
        self.reachable = reachable

    def is_reachable(self) -> bool:
        return self.reachable
