"""Cache key derivation.

Keys follow the persisted layout
``"__WEBBER_OFFLINE_<operation>_<server>/<path>"``. The operation segment
keeps raw-text and JSON-array entries apart, and embedding the server keeps
entries from different servers apart. Paths are used verbatim: ``"users"``
and ``"/users"`` are two different, equally valid keys.
"""

from __future__ import annotations

from webber.models import OperationKind

NAMESPACE = "__WEBBER_OFFLINE"


def build_key(
    namespace: str,
    operation_kind: OperationKind | str,
    server: str,
    path: str,
) -> str:
    """Return the store key for *path* on *server*.

    Example::

        >>> build_key(NAMESPACE, OperationKind.RAW, "https://api.example.com", "users")
        '__WEBBER_OFFLINE_getFromAPI_https://api.example.com/users'
    """
    kind = operation_kind.value if isinstance(operation_kind, OperationKind) else operation_kind
    return f"{namespace}_{kind}_{server}/{path}"


def offline_key(operation_kind: OperationKind, server: str, path: str) -> str:
    """Shortcut for :func:`build_key` with the default namespace."""
    return build_key(NAMESPACE, operation_kind, server, path)
