"""Shared fixtures for storage tests.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

import pytest

from dualstore_core.store.dual import DualStore
from dualstore_core.store.file import FileStore
from dualstore_core.store.memory import CacheStore


@pytest.fixture
def cache_store():
    """Empty cache store."""
    return CacheStore()


@pytest.fixture
def file_store(tmp_path):
    """File store rooted at a temporary directory."""
    return FileStore(tmp_path)


@pytest.fixture
def dual_store(tmp_path):
    """Dual store rooted at a temporary directory."""
    return DualStore(tmp_path)


@pytest.fixture(params=["cache", "file", "dual"])
def store(request, tmp_path):
    """Each backend in turn."""
    if request.param == "cache":
        return CacheStore()
    if request.param == "file":
        return FileStore(tmp_path)
    return DualStore(tmp_path)
