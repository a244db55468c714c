"""DualStore Paths - Identifier Resolution.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

Maps caller identifiers to storage locations. A location is relative to the
store root, so the same string serves as a cache key and as a file path
under the root directory.
"""

from __future__ import annotations

DEFAULT_EXTENSION = "json"
SEPARATOR = "/"


def _normalize(raw: str) -> str:
    return raw.replace("\\", SEPARATOR).lstrip(SEPARATOR)


def resolve_entry_location(identifier: str, extension: str = DEFAULT_EXTENSION) -> str:
    """Resolve an identifier to an entry location.

    Resolving an already resolved location returns it unchanged.

    Args:
        identifier: Raw identifier, optionally ``/``-separated
        extension: File extension without the leading dot

    Returns:
        Normalized location ending in ``.<extension>``
    """
    location = _normalize(identifier)
    suffix = f".{extension}"
    if location.endswith(suffix):
        return location
    return location + suffix


def resolve_directory_location(directory: str) -> str:
    """Resolve a directory to a prefix usable for scoping listings.

    Args:
        directory: Raw directory

    Returns:
        Normalized directory with exactly one trailing separator, or an
        empty string for the root scope
    """
    location = _normalize(directory).rstrip(SEPARATOR)
    if not location:
        return ""
    return location + SEPARATOR


def has_traversal(location: str) -> bool:
    """Check whether a location contains a parent-directory segment."""
    return ".." in _normalize(location).split(SEPARATOR)


__all__ = [
    "DEFAULT_EXTENSION",
    "resolve_entry_location",
    "resolve_directory_location",
    "has_traversal",
]
