"""In-process store used when disk caching is disabled, and in tests."""

from __future__ import annotations

import threading
from typing import Any, Optional

from webber.store.base import KeyValueStore


class MemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def stats(self) -> dict[str, Any]:
        return {"backend": "memory", "size": len(self)}
