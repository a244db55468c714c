"""DualStore Storage Backend - Abstract Storage Interface.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import (
    Any,
    Awaitable,
    Callable,
    Iterable,
    List,
    Optional,
    Tuple,
    Union,
)

from dualstore_core.store.options import DEFAULT_OPTIONS, StorageOptions
from dualstore_core.store.paths import (
    DEFAULT_EXTENSION,
    resolve_directory_location,
    resolve_entry_location,
)

logger = logging.getLogger(__name__)

# Callables receive (value, identifier, store) and may be sync or async.
DataAction = Callable[[Any, str, "StorageBackend"], Union[None, Awaitable[None]]]
DataModifier = Callable[[Any, str, "StorageBackend"], Union[Any, Awaitable[Any]]]
DataPredicate = Callable[[Any, str, "StorageBackend"], Union[bool, Awaitable[bool]]]

HEALTH_CHECK_ID = "__health_check__"


@dataclass
class StorageConfig:
    """Storage backend configuration.

    Attributes:
        name: Backend name
        default_extension: Extension used when a call does not name one
        max_size: Maximum cache entries (cache backend only)
        reject_traversal: Treat identifiers with ``..`` segments as failures
            (file backend only)
        write_file_without_cache: On dual stores, still write/delete the file
            when ``no_cache`` is set
        encoding: Text encoding of stored files
        json_indent: Indent of stored JSON
    """

    name: str = "storage"
    default_extension: str = DEFAULT_EXTENSION
    max_size: Optional[int] = None
    reject_traversal: bool = False
    write_file_without_cache: bool = False
    encoding: str = "utf-8"
    json_indent: Any = "\t"


@dataclass
class StorageStats:
    """Storage backend statistics.

    Attributes:
        reads: Number of read operations
        writes: Number of write operations
        deletes: Number of delete operations
        errors: Number of swallowed errors
    """

    reads: int = 0
    writes: int = 0
    deletes: int = 0
    errors: int = 0
    last_error: Optional[str] = None
    last_error_at: Optional[datetime] = None

    def record_error(self, error: str) -> None:
        """Record an error."""
        self.errors += 1
        self.last_error = error
        self.last_error_at = datetime.now()


async def _call(fn: Callable[..., Any], *args: Any) -> Any:
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class StorageBackend(ABC):
    """Abstract storage backend.

    Implementations provide the primitives ``has``, ``get``, ``set``,
    ``delete`` and ``list``:
    - CacheStore: In-process dictionary
    - FileStore: One file per entry under a root directory
    - DualStore: Cache in front of a file store

    Every batch and predicate operation below is built from those
    primitives, so all backends share them. Batch operations run strictly
    in input order, awaiting each id before starting the next. None of
    them is atomic.
    """

    def __init__(self, config: Optional[StorageConfig] = None):
        """Initialize backend.

        Args:
            config: Storage configuration
        """
        self.config = config or StorageConfig()
        self._stats = StorageStats()

    def _options(self, options: Optional[StorageOptions]) -> StorageOptions:
        return options or DEFAULT_OPTIONS

    def _extension(self, options: StorageOptions) -> str:
        return options.extension or self.config.default_extension

    def _entry_location(self, identifier: str, options: StorageOptions) -> str:
        return resolve_entry_location(identifier, self._extension(options))

    def _directory_location(self, directory: str) -> str:
        return resolve_directory_location(directory)

    # Primitives

    @abstractmethod
    async def has(self, identifier: str, options: Optional[StorageOptions] = None) -> bool:
        """Check whether data exists at the identifier.

        Args:
            identifier: Entry identifier
            options: Call options

        Returns:
            True if present
        """
        pass

    @abstractmethod
    async def get(self, identifier: str, options: Optional[StorageOptions] = None) -> Any:
        """Fetch the data at the identifier.

        Args:
            identifier: Entry identifier
            options: Call options

        Returns:
            Stored value, or None if absent or unreadable
        """
        pass

    @abstractmethod
    async def set(
        self,
        identifier: str,
        value: Any,
        options: Optional[StorageOptions] = None,
    ) -> bool:
        """Store a value at the identifier.

        Args:
            identifier: Entry identifier
            value: Value to store
            options: Call options

        Returns:
            True if successful
        """
        pass

    @abstractmethod
    async def delete(self, identifier: str, options: Optional[StorageOptions] = None) -> bool:
        """Delete the data at the identifier.

        Args:
            identifier: Entry identifier
            options: Call options

        Returns:
            True if deleted
        """
        pass

    @abstractmethod
    async def list(
        self,
        directory: str,
        options: Optional[StorageOptions] = None,
    ) -> List[Tuple[str, Any]]:
        """Fetch all entries within a directory.

        Args:
            directory: Directory identifier
            options: Call options

        Returns:
            (location, value) pairs
        """
        pass

    # Batch operations

    async def has_all(
        self,
        identifiers: Iterable[str],
        options: Optional[StorageOptions] = None,
    ) -> bool:
        """Check whether data exists at all identifiers."""
        result = True
        for identifier in identifiers:
            result = await self.has(identifier, options) and result
        return result

    async def has_any(
        self,
        identifiers: Iterable[str],
        options: Optional[StorageOptions] = None,
    ) -> bool:
        """Check whether data exists at any identifier."""
        result = False
        for identifier in identifiers:
            result = await self.has(identifier, options) or result
        return result

    async def get_all(
        self,
        identifiers: Iterable[str],
        options: Optional[StorageOptions] = None,
    ) -> List[Tuple[str, Any]]:
        """Fetch the data at each identifier.

        Args:
            identifiers: Entry identifiers
            options: Call options

        Returns:
            (identifier, value or None) pairs in input order
        """
        result = []
        for identifier in identifiers:
            result.append((identifier, await self.get(identifier, options)))
        return result

    async def set_each(
        self,
        entries: Iterable[Tuple[str, Any]],
        options: Optional[StorageOptions] = None,
    ) -> List[Tuple[str, bool]]:
        """Store every entry and report each outcome.

        Args:
            entries: (identifier, value) pairs
            options: Call options

        Returns:
            (identifier, success) pairs in input order
        """
        outcomes = []
        for identifier, value in entries:
            outcomes.append((identifier, await self.set(identifier, value, options)))
        return outcomes

    async def set_all(
        self,
        entries: Iterable[Tuple[str, Any]],
        options: Optional[StorageOptions] = None,
    ) -> bool:
        """Store every entry.

        A failed write does not stop the remaining ones.

        Returns:
            True if every write succeeded
        """
        outcomes = await self.set_each(entries, options)
        return all(ok for _, ok in outcomes)

    async def delete_each(
        self,
        identifiers: Iterable[str],
        options: Optional[StorageOptions] = None,
    ) -> List[Tuple[str, bool]]:
        """Delete every identifier and report each outcome."""
        outcomes = []
        for identifier in identifiers:
            outcomes.append((identifier, await self.delete(identifier, options)))
        return outcomes

    async def delete_all(
        self,
        identifiers: Iterable[str],
        options: Optional[StorageOptions] = None,
    ) -> bool:
        """Delete every identifier.

        Returns:
            True if every delete succeeded
        """
        outcomes = await self.delete_each(identifiers, options)
        return all(ok for _, ok in outcomes)

    async def ids(self, directory: str, options: Optional[StorageOptions] = None) -> List[str]:
        """Fetch all locations within a directory."""
        return [location for location, _ in await self.list(directory, options)]

    async def values(self, directory: str, options: Optional[StorageOptions] = None) -> List[Any]:
        """Fetch all values within a directory."""
        return [value for _, value in await self.list(directory, options)]

    # Predicate operations

    async def ensure(
        self,
        identifier: str,
        fallback: Any,
        options: Optional[StorageOptions] = None,
    ) -> Any:
        """Fetch the data at the identifier, storing the fallback if absent.

        Args:
            identifier: Entry identifier
            fallback: Value stored and returned when nothing exists yet
            options: Call options

        Returns:
            The existing value, or the fallback
        """
        if await self.has(identifier, options):
            return await self.get(identifier, options)
        await self.set(identifier, fallback, options)
        return fallback

    async def expect(
        self,
        identifier: str,
        predicate: DataPredicate,
        options: Optional[StorageOptions] = None,
    ) -> bool:
        """Check that the data exists and matches the predicate.

        Args:
            identifier: Entry identifier
            predicate: Called as ``predicate(value, identifier, store)``
            options: Call options

        Returns:
            True if present and the predicate holds
        """
        if not await self.has(identifier, options):
            return False
        value = await self.get(identifier, options)
        return bool(await _call(predicate, value, identifier, self))

    async def expect_all(
        self,
        identifiers: Iterable[str],
        predicate: DataPredicate,
        options: Optional[StorageOptions] = None,
    ) -> bool:
        result = True
        for identifier in identifiers:
            result = await self.expect(identifier, predicate, options) and result
        return result

    async def expect_any(
        self,
        identifiers: Iterable[str],
        predicate: DataPredicate,
        options: Optional[StorageOptions] = None,
    ) -> bool:
        result = False
        for identifier in identifiers:
            result = await self.expect(identifier, predicate, options) or result
        return result

    async def action(
        self,
        identifier: str,
        action: DataAction,
        options: Optional[StorageOptions] = None,
    ) -> None:
        """Run an action on the data, if it exists.

        Exceptions raised by the action propagate.
        """
        if await self.has(identifier, options):
            value = await self.get(identifier, options)
            await _call(action, value, identifier, self)

    async def action_if(
        self,
        identifier: str,
        action: DataAction,
        predicate: DataPredicate,
        options: Optional[StorageOptions] = None,
    ) -> None:
        """Run an action on the data, if it exists and matches the predicate."""
        if await self.expect(identifier, predicate, options):
            value = await self.get(identifier, options)
            await _call(action, value, identifier, self)

    async def action_all(
        self,
        identifiers: Iterable[str],
        action: DataAction,
        options: Optional[StorageOptions] = None,
    ) -> None:
        for identifier in identifiers:
            await self.action(identifier, action, options)

    async def action_all_if(
        self,
        identifiers: Iterable[str],
        action: DataAction,
        predicate: DataPredicate,
        options: Optional[StorageOptions] = None,
    ) -> None:
        for identifier in identifiers:
            await self.action_if(identifier, action, predicate, options)

    async def modify(
        self,
        identifier: str,
        modifier: DataModifier,
        options: Optional[StorageOptions] = None,
    ) -> bool:
        """Replace the data with the modifier's result, if it exists.

        The read and the write are separate calls; a concurrent writer in
        between loses its update.

        Args:
            identifier: Entry identifier
            modifier: Called as ``modifier(value, identifier, store)``
            options: Call options

        Returns:
            Result of the write, or False if absent
        """
        if not await self.has(identifier, options):
            return False
        value = await self.get(identifier, options)
        updated = await _call(modifier, value, identifier, self)
        return await self.set(identifier, updated, options)

    async def modify_if(
        self,
        identifier: str,
        modifier: DataModifier,
        predicate: DataPredicate,
        options: Optional[StorageOptions] = None,
    ) -> bool:
        """Modify the data, if it exists and matches the predicate."""
        if not await self.expect(identifier, predicate, options):
            return False
        value = await self.get(identifier, options)
        updated = await _call(modifier, value, identifier, self)
        return await self.set(identifier, updated, options)

    async def modify_all(
        self,
        identifiers: Iterable[str],
        modifier: DataModifier,
        options: Optional[StorageOptions] = None,
    ) -> bool:
        result = True
        for identifier in identifiers:
            result = await self.modify(identifier, modifier, options) and result
        return result

    async def modify_all_if(
        self,
        identifiers: Iterable[str],
        modifier: DataModifier,
        predicate: DataPredicate,
        options: Optional[StorageOptions] = None,
    ) -> bool:
        result = True
        for identifier in identifiers:
            result = await self.modify_if(identifier, modifier, predicate, options) and result
        return result

    # Maintenance

    def get_stats(self) -> StorageStats:
        """Get storage statistics."""
        return self._stats

    def reset_stats(self) -> None:
        """Reset statistics."""
        self._stats = StorageStats()

    async def health_check(self) -> bool:
        """Check storage health.

        Returns:
            True if a probe entry could be written and read back
        """
        try:
            await self.set(HEALTH_CHECK_ID, "ok")
            result = await self.get(HEALTH_CHECK_ID)
            await self.delete(HEALTH_CHECK_ID)
            return result == "ok"
        except Exception as e:
            logger.error(f"Health check failed for {self.config.name}: {e}")
            return False


__all__ = [
    "StorageBackend",
    "StorageConfig",
    "StorageStats",
    "DataAction",
    "DataModifier",
    "DataPredicate",
]
