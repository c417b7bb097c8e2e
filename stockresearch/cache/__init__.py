"""Key-value storage for challenges and sessions (memory or Valkey)."""

from .client import ValkeyConnection
from .store import (
    KeyValueStore,
    MemoryStore,
    ValkeyStore,
    create_store,
    store_key,
)


__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "ValkeyConnection",
    "ValkeyStore",
    "create_store",
    "store_key",
]
