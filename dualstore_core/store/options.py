"""DualStore Options - Per-Call Storage Options.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StorageOptions:
    """Options recognized by every storage call.

    Attributes:
        extension: File extension; the store default when None
        no_cache: Skip the cache backend
        no_file: Skip the file backend
    """

    extension: Optional[str] = None
    no_cache: bool = False
    no_file: bool = False


DEFAULT_OPTIONS = StorageOptions()


__all__ = ["StorageOptions", "DEFAULT_OPTIONS"]
