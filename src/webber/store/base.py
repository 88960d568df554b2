"""Abstract key-value store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional


class KeyValueStore(ABC):
    """String-keyed, string-valued store used as the offline cache.

    Implementations must make each individual :meth:`get` and :meth:`set`
    atomic; callers do not coordinate concurrent access. Entries never
    expire and are only ever overwritten.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value stored under *key*, or ``None``."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""

    @abstractmethod
    def __len__(self) -> int: ...

    def stats(self) -> dict[str, Any]:
        """Return a small summary for ``webber cache stats``."""
        return {"backend": type(self).__name__, "size": len(self)}

    def close(self) -> None:
        """Release any resources held by the store."""

    def __enter__(self) -> KeyValueStore:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
