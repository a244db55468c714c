"""DualStore - Layered Key-Value Storage.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

A small asynchronous key-value storage layer with:
- An in-process cache backend
- A durable file backend (one JSON or text file per entry)
- A dual store that keeps both in sync with cache-aside reads
- Batch, predicate and read-modify-write helpers shared by every backend

Architecture:
    ┌─────────────────────────────────────────────────────────────────┐
    │                        DualStore System                         │
    ├─────────────────────────────────────────────────────────────────┤
    │  ┌───────────────────────────────────────────────┐             │
    │  │        Batch & Predicate Operations            │   SHARED    │
    │  │  has_all / ensure / expect / action / modify   │   LAYER     │
    │  └──────────────────────┬────────────────────────┘             │
    │                         │                                       │
    │  ┌──────────────────────┴────────────────────────┐             │
    │  │              Storage Backends                  │             │
    │  │   ┌────────┐  ┌────────┐  ┌──────────────┐   │   STORAGE   │
    │  │   │ Cache  │  │  File  │  │ Dual (both)  │   │   LAYER     │
    │  │   └────────┘  └────────┘  └──────────────┘   │             │
    │  └──────────────────────┬────────────────────────┘             │
    │                         │                                       │
    │  ┌──────────────────────┴────────────────────────┐             │
    │  │   Identifier Resolution  +  Serialization      │   PROTOCOL  │
    │  └───────────────────────────────────────────────┘             │
    └─────────────────────────────────────────────────────────────────┘

Example Usage:
    from dualstore_core import CacheStore, DualStore, StorageOptions

    store = DualStore("./data")
    await store.set("guilds/123", {"prefix": "!"})
    config = await store.get("guilds/123")

    # Initialize on first use
    count = await store.ensure("stats/count", 0)
    await store.modify("stats/count", lambda value, id, store: value + 1)

    # Plain text entries
    await store.set("notes/today", "hello", StorageOptions(extension="txt"))

    # Volatile values only
    cache = CacheStore()
    await cache.set("token", "secret")
"""

__version__ = "1.0.0"
__author__ = "BlackRoad OS"

from dualstore_core.store.options import StorageOptions
from dualstore_core.store.paths import (
    resolve_entry_location,
    resolve_directory_location,
)
from dualstore_core.store.backend import (
    StorageBackend,
    StorageConfig,
    StorageStats,
    DataAction,
    DataModifier,
    DataPredicate,
)
from dualstore_core.store.memory import CacheStore
from dualstore_core.store.file import FileStore
from dualstore_core.store.dual import DualStore
from dualstore_core.store.factory import create_store
from dualstore_core.protocol.serializer import (
    Serializer,
    JSONSerializer,
    TextSerializer,
    SerializerRegistry,
)

__all__ = [
    # Options
    "StorageOptions",
    "resolve_entry_location",
    "resolve_directory_location",
    # Storage
    "StorageBackend",
    "StorageConfig",
    "StorageStats",
    "DataAction",
    "DataModifier",
    "DataPredicate",
    "CacheStore",
    "FileStore",
    "DualStore",
    "create_store",
    # Protocol
    "Serializer",
    "JSONSerializer",
    "TextSerializer",
    "SerializerRegistry",
]
