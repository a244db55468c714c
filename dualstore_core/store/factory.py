"""DualStore Factory - Storage Backend Instantiation.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from dualstore_core.store.backend import StorageBackend, StorageConfig

BACKENDS = ("cache", "file", "dual")


def create_store(
    backend: str = "dual",
    root_path: Union[str, Path] = "./data",
    config: Optional[StorageConfig] = None,
) -> StorageBackend:
    """Instantiate a storage backend by name.

    Args:
        backend: One of ``cache``, ``file`` or ``dual``
        root_path: Root directory for file-backed stores
        config: Storage configuration

    Returns:
        Configured StorageBackend implementation

    Raises:
        ValueError: If the backend name is unknown
    """
    if backend not in BACKENDS:
        raise ValueError(f"Unsupported storage backend: {backend!r}")

    if backend == "cache":
        from dualstore_core.store.memory import CacheStore
        return CacheStore(config)

    if backend == "file":
        from dualstore_core.store.file import FileStore
        return FileStore(root_path, config)

    from dualstore_core.store.dual import DualStore
    return DualStore(root_path, config)


__all__ = ["create_store", "BACKENDS"]
