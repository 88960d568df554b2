"""Key-value stores backing the offline cache.

:class:`DiskStore` persists entries with :mod:`diskcache` and is the default
for every client. :class:`MemoryStore` keeps entries for the lifetime of the
process only.
"""

from webber.store.base import KeyValueStore
from webber.store.disk import DiskStore
from webber.store.memory import MemoryStore

__all__ = ["DiskStore", "KeyValueStore", "MemoryStore"]
