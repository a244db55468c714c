"""DualStore Dual Store - Cache in Front of File Storage.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

from dualstore_core.store.backend import StorageBackend, StorageConfig
from dualstore_core.store.file import FileStore
from dualstore_core.store.memory import CacheStore
from dualstore_core.store.options import StorageOptions

logger = logging.getLogger(__name__)


class DualStore(StorageBackend):
    """Two-level storage: a cache backend over a file backend.

    The cache is a write-through accelerator, not a read-through one:
    reads prefer the cache and fall back to the file, but a file hit is
    never copied into the cache.

    Writes and deletes go to the cache first and reach the file only if
    the cache step succeeded. The two backends are updated independently;
    there is no rollback when the file step fails.

    Example:
        store = DualStore("./data")
        await store.set("users/1", {"name": "Ada"})   # cache + ./data/users/1.json
        user = await store.get("users/1")             # served from the cache
    """

    def __init__(
        self,
        root_path: Union[str, Path],
        config: Optional[StorageConfig] = None,
        cache: Optional[CacheStore] = None,
        file: Optional[FileStore] = None,
    ):
        """Initialize dual store.

        Args:
            root_path: Root directory of the file backend
            config: Storage configuration shared by both backends
            cache: Cache backend to use instead of a new one
            file: File backend to use instead of a new one
        """
        super().__init__(config)
        self._cache = cache or CacheStore(replace(self.config, name=f"{self.config.name}.cache"))
        self._file = file or FileStore(
            root_path, replace(self.config, name=f"{self.config.name}.file")
        )

    @property
    def cache(self) -> CacheStore:
        """Underlying cache backend."""
        return self._cache

    @property
    def file(self) -> FileStore:
        """Underlying file backend."""
        return self._file

    async def has(self, identifier: str, options: Optional[StorageOptions] = None) -> bool:
        """Check the cache, then the file if the cache misses."""
        if await self._cache.has(identifier, options):
            return True
        return await self._file.has(identifier, options)

    async def get(self, identifier: str, options: Optional[StorageOptions] = None) -> Any:
        """Get from the cache, falling back to the file."""
        self._stats.reads += 1
        value = await self._cache.get(identifier, options)
        if value is not None:
            return value
        return await self._file.get(identifier, options)

    async def set(
        self,
        identifier: str,
        value: Any,
        options: Optional[StorageOptions] = None,
    ) -> bool:
        """Write to the cache, then to the file.

        With ``no_cache`` set the cache step fails, so the file is not
        written either, unless ``write_file_without_cache`` is configured.

        Returns:
            True if both writes succeeded
        """
        self._stats.writes += 1
        options = self._options(options)
        if options.no_cache and self.config.write_file_without_cache:
            return await self._file.set(identifier, value, options)

        if not await self._cache.set(identifier, value, options):
            return False
        return await self._file.set(identifier, value, options)

    async def delete(self, identifier: str, options: Optional[StorageOptions] = None) -> bool:
        """Delete from the cache, then from the file.

        Subject to the same ``no_cache`` short-circuit as ``set``.

        Returns:
            True if both deletes succeeded
        """
        self._stats.deletes += 1
        options = self._options(options)
        if options.no_cache and self.config.write_file_without_cache:
            return await self._file.delete(identifier, options)

        if not await self._cache.delete(identifier, options):
            return False
        return await self._file.delete(identifier, options)

    async def list(
        self,
        directory: str,
        options: Optional[StorageOptions] = None,
    ) -> List[Tuple[str, Any]]:
        """List entries from both backends.

        Cache entries come first. File entries whose location the cache
        already listed are dropped.
        """
        result = await self._cache.list(directory, options)
        seen = {location for location, _ in result}
        for location, value in await self._file.list(directory, options):
            if location not in seen:
                seen.add(location)
                result.append((location, value))
        return result

    def __repr__(self) -> str:
        return f"DualStore(cache={self._cache!r}, file={self._file!r})"


__all__ = ["DualStore"]
