"""Store module - Storage backends."""

from dualstore_core.store.backend import (
    StorageBackend,
    StorageStats,
    StorageConfig,
)
from dualstore_core.store.options import StorageOptions
from dualstore_core.store.memory import CacheStore
from dualstore_core.store.file import FileStore
from dualstore_core.store.dual import DualStore
from dualstore_core.store.factory import create_store

__all__ = [
    "StorageBackend",
    "StorageStats",
    "StorageConfig",
    "StorageOptions",
    "CacheStore",
    "FileStore",
    "DualStore",
    "create_store",
]
