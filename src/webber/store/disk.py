"""Disk-backed offline store.

Uses :mod:`diskcache` so entries survive restarts and are safe to share
between threads and processes. Entries are written without an ``expire``
value and eviction is disabled: the offline cache is overwrite-only and
unbounded.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import diskcache

from webber.store.base import KeyValueStore


class DiskStore(KeyValueStore):
    """Persistent store under ``<cache_dir>/offline``.

    Args:
        cache_dir: Root directory. The ``offline/`` subdirectory is created
            on first use.

    Example::

        store = DiskStore("/tmp/webber-cache")
        store.set("__WEBBER_OFFLINE_getFromAPI_https://x/users", "[]")
    """

    def __init__(self, cache_dir: str | Path) -> None:
        self._directory = Path(cache_dir) / "offline"
        self._cache = diskcache.Cache(str(self._directory), eviction_policy="none")

    @property
    def directory(self) -> Path:
        return self._directory

    def get(self, key: str) -> Optional[str]:
        value = self._cache.get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        self._cache.set(key, value)

    def __len__(self) -> int:
        return len(self._cache)

    def stats(self) -> dict[str, Any]:
        return {
            "backend": "disk",
            "size": len(self._cache),
            "directory": str(self._directory),
            "volume_bytes": self._cache.volume(),
        }

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache`."""
        self._cache.close()
