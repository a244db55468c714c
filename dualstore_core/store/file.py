"""DualStore File Store - File-Based Storage Backend.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

from dualstore_core.protocol.serializer import Serializer, SerializerRegistry
from dualstore_core.store.backend import StorageBackend, StorageConfig
from dualstore_core.store.options import StorageOptions
from dualstore_core.store.paths import has_traversal

logger = logging.getLogger(__name__)

# Errors that surface as a negative result instead of propagating.
STORAGE_ERRORS = (OSError, TypeError, ValueError)

_MISSING = object()


def _read_bytes(path: Path) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def _write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    # Temporary name is unique per writer.
    fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(temp_name, path)
    except OSError:
        if os.path.exists(temp_name):
            os.unlink(temp_name)
        raise


def _list_files(directory: Path) -> List[str]:
    return sorted(p.name for p in directory.iterdir() if p.is_file())


class FileStore(StorageBackend):
    """File-based storage backend.

    Persists each entry as one file at ``<root>/<location>``, where the
    location is the resolved identifier including its extension. Blocking
    filesystem calls run in a worker thread.

    Failures never raise: a missing file, a permission error and malformed
    content all read as absent, and failed writes or deletes return False.
    The error is counted in the store statistics and logged at debug level.

    Honors ``no_file``: with it set, every call returns a negative result
    without touching the filesystem.

    Example:
        store = FileStore("./data")
        await store.set("a/b", {"value": 123})   # writes ./data/a/b.json
        value = await store.get("a/b")
    """

    def __init__(
        self,
        root_path: Union[str, Path],
        config: Optional[StorageConfig] = None,
        serializers: Optional[SerializerRegistry] = None,
    ):
        """Initialize file store.

        Args:
            root_path: Root directory of all entries
            config: Storage configuration
            serializers: Serializers by extension
        """
        super().__init__(config)
        self.root_path = Path(root_path)
        self.serializers = serializers or SerializerRegistry(
            json_indent=self.config.json_indent,
            encoding=self.config.encoding,
        )

    def _get_path(self, location: str) -> Optional[Path]:
        """Get file path for a resolved location.

        Returns:
            File path, or None if the location is rejected
        """
        if self.config.reject_traversal and has_traversal(location):
            self._stats.record_error(f"Rejected traversal in {location}")
            logger.warning(f"Rejected identifier with parent segment: {location}")
            return None
        if Path(location).is_absolute() or Path(location).drive:
            self._stats.record_error(f"Rejected absolute location {location}")
            logger.warning(f"Rejected identifier outside the root: {location}")
            return None
        return self.root_path / location

    def _serializer(self, options: StorageOptions) -> Serializer:
        return self.serializers.get(self._extension(options))

    def _record(self, action: str, location: str, error: Exception) -> None:
        logger.debug(f"Error {action} {location}: {error}")
        self._stats.record_error(str(error))

    async def has(self, identifier: str, options: Optional[StorageOptions] = None) -> bool:
        """Check if the entry's file can be read.

        Content is not parsed, so a file with malformed content still counts
        as present.
        """
        options = self._options(options)
        if options.no_file:
            return False
        location = self._entry_location(identifier, options)
        path = self._get_path(location)
        if path is None:
            return False

        try:
            await asyncio.to_thread(_read_bytes, path)
            return True
        except STORAGE_ERRORS as e:
            self._record("reading", location, e)
            return False

    async def _read(self, identifier: str, options: StorageOptions) -> Any:
        """Read and parse an entry, returning _MISSING on any failure."""
        location = self._entry_location(identifier, options)
        path = self._get_path(location)
        if path is None:
            return _MISSING

        try:
            self._stats.reads += 1
            data = await asyncio.to_thread(_read_bytes, path)
            return self._serializer(options).deserialize(data)
        except STORAGE_ERRORS as e:
            self._record("reading", location, e)
            return _MISSING

    async def get(self, identifier: str, options: Optional[StorageOptions] = None) -> Any:
        options = self._options(options)
        if options.no_file:
            return None
        value = await self._read(identifier, options)
        return None if value is _MISSING else value

    async def set(
        self,
        identifier: str,
        value: Any,
        options: Optional[StorageOptions] = None,
    ) -> bool:
        """Store value, creating parent directories as needed.

        The file is written beside the target and renamed over it.

        Returns:
            True if successful
        """
        options = self._options(options)
        if options.no_file:
            return False
        location = self._entry_location(identifier, options)
        path = self._get_path(location)
        if path is None:
            return False

        try:
            data = self._serializer(options).serialize(value)
            await asyncio.to_thread(_write_bytes, path, data)
            self._stats.writes += 1
            return True
        except STORAGE_ERRORS as e:
            self._record("writing", location, e)
            return False

    async def delete(self, identifier: str, options: Optional[StorageOptions] = None) -> bool:
        options = self._options(options)
        if options.no_file:
            return False
        location = self._entry_location(identifier, options)
        path = self._get_path(location)
        if path is None:
            return False

        try:
            await asyncio.to_thread(path.unlink)
            self._stats.deletes += 1
            return True
        except STORAGE_ERRORS as e:
            self._record("deleting", location, e)
            return False

    async def list(
        self,
        directory: str,
        options: Optional[StorageOptions] = None,
    ) -> List[Tuple[str, Any]]:
        """List entries stored directly in a directory.

        Subdirectories are not descended into, and only files carrying the
        call's extension are read. Files that cannot be read or parsed are
        skipped.

        Returns:
            (location, value) pairs ordered by file name
        """
        options = self._options(options)
        if options.no_file:
            return []
        prefix = self._directory_location(directory)
        path = self._get_path(prefix)
        if path is None:
            return []

        try:
            names = await asyncio.to_thread(_list_files, path)
        except STORAGE_ERRORS as e:
            self._record("listing", prefix, e)
            return []

        suffix = f".{self._extension(options)}"
        result = []
        for name in names:
            if not name.endswith(suffix):
                continue
            location = prefix + name
            value = await self._read(location, options)
            if value is not _MISSING:
                result.append((location, value))
        return result

    def __repr__(self) -> str:
        return f"FileStore(path={self.root_path})"


__all__ = ["FileStore"]
