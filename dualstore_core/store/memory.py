"""DualStore Cache Store - In-Memory Storage Backend.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional, Tuple

from dualstore_core.store.backend import StorageBackend, StorageConfig
from dualstore_core.store.options import StorageOptions

logger = logging.getLogger(__name__)


class CacheStore(StorageBackend):
    """In-memory storage backend.

    Keeps values in a dictionary keyed by resolved location. Contents are
    lost when the process exits. Every operation completes without
    suspending; the async signatures only keep the interface uniform with
    the file backend.

    Honors ``no_cache``: with it set, reads report absence, writes and
    deletes report failure, and nothing is touched.

    Example:
        cache = CacheStore()
        await cache.set("guild/settings", {"prefix": "!"})
        settings = await cache.get("guild/settings")
    """

    def __init__(self, config: Optional[StorageConfig] = None):
        """Initialize cache store.

        Args:
            config: Storage configuration
        """
        super().__init__(config)
        self._data: Dict[str, Any] = {}
        self._lock = threading.RLock()

    async def has(self, identifier: str, options: Optional[StorageOptions] = None) -> bool:
        options = self._options(options)
        if options.no_cache:
            return False
        with self._lock:
            return self._entry_location(identifier, options) in self._data

    async def get(self, identifier: str, options: Optional[StorageOptions] = None) -> Any:
        options = self._options(options)
        if options.no_cache:
            return None
        with self._lock:
            self._stats.reads += 1
            return self._data.get(self._entry_location(identifier, options))

    async def set(
        self,
        identifier: str,
        value: Any,
        options: Optional[StorageOptions] = None,
    ) -> bool:
        """Store value.

        Returns:
            True if the location is present afterward
        """
        options = self._options(options)
        if options.no_cache:
            return False
        location = self._entry_location(identifier, options)

        with self._lock:
            if self.config.max_size:
                if location not in self._data and len(self._data) >= self.config.max_size:
                    logger.debug(f"Cache full, rejected {location}")
                    return False

            self._data[location] = value
            self._stats.writes += 1
            return location in self._data

    async def delete(self, identifier: str, options: Optional[StorageOptions] = None) -> bool:
        options = self._options(options)
        if options.no_cache:
            return False
        location = self._entry_location(identifier, options)

        with self._lock:
            if location in self._data:
                del self._data[location]
                self._stats.deletes += 1
                return True
            return False

    async def list(
        self,
        directory: str,
        options: Optional[StorageOptions] = None,
    ) -> List[Tuple[str, Any]]:
        """List entries whose location starts with the resolved directory.

        Entries in nested directories are included.
        """
        options = self._options(options)
        if options.no_cache:
            return []
        prefix = self._directory_location(directory)

        with self._lock:
            return [(k, v) for k, v in self._data.items() if k.startswith(prefix)]

    def clear(self) -> int:
        """Clear all entries.

        Returns:
            Number cleared
        """
        with self._lock:
            count = len(self._data)
            self._data.clear()
            return count

    def size(self) -> int:
        """Get entry count."""
        with self._lock:
            return len(self._data)

    def __repr__(self) -> str:
        return f"CacheStore(entries={self.size()})"


__all__ = ["CacheStore"]
