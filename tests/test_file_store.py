"""Tests for the file store.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

import asyncio
import json

import pytest

from dualstore_core.store.backend import StorageConfig
from dualstore_core.store.file import FileStore
from dualstore_core.store.options import StorageOptions

TEXT = StorageOptions(extension="txt")
NO_FILE = StorageOptions(no_file=True)


class TestFileStore:
    """Tests for FileStore primitives."""

    @pytest.mark.asyncio
    async def test_end_to_end(self, tmp_path):
        """Test the on-disk layout of a JSON entry, then its removal."""
        store = FileStore(tmp_path)

        assert await store.set("a/b", {"value": 123})

        path = tmp_path / "a" / "b.json"
        assert path.is_file()
        assert path.read_text(encoding="utf-8") == '{\n\t"value": 123\n}'

        assert await store.delete("a/b")
        assert not path.exists()
        assert not await store.has("a/b")

    @pytest.mark.asyncio
    async def test_round_trip(self, file_store):
        """Test JSON values survive a write and read."""
        value = {"name": "Ada", "tags": ["x", "y"], "n": 1.5, "ok": True, "none": None}
        assert await file_store.set("users/1", value)
        assert await file_store.get("users/1") == value

    @pytest.mark.asyncio
    async def test_creates_nested_directories(self, tmp_path, file_store):
        """Test the parent directory chain is created on write."""
        assert await file_store.set("a/b/c/d", [1, 2, 3])
        assert (tmp_path / "a" / "b" / "c" / "d.json").is_file()

    @pytest.mark.asyncio
    async def test_no_temporary_file_left(self, tmp_path, file_store):
        """Test the write leaves only the target file behind."""
        await file_store.set("dir/entry", 1)
        assert [p.name for p in (tmp_path / "dir").iterdir()] == ["entry.json"]

    @pytest.mark.asyncio
    async def test_text_extension(self, tmp_path, file_store):
        """Test non-JSON extensions store and return raw text."""
        assert await file_store.set("notes/today", 42, TEXT)
        assert (tmp_path / "notes" / "today.txt").read_text(encoding="utf-8") == "42"
        assert await file_store.get("notes/today", TEXT) == "42"

    @pytest.mark.asyncio
    async def test_default_extension_from_config(self, tmp_path):
        """Test the configured default extension applies when none is given."""
        store = FileStore(tmp_path, StorageConfig(default_extension="txt"))
        await store.set("note", "hello")

        assert (tmp_path / "note.txt").read_text(encoding="utf-8") == "hello"
        assert await store.get("note") == "hello"

    @pytest.mark.asyncio
    async def test_missing_reads_absent(self, file_store):
        """Test a missing file is absent."""
        assert not await file_store.has("missing")
        assert await file_store.get("missing") is None

    @pytest.mark.asyncio
    async def test_malformed_json_reads_absent(self, tmp_path, file_store):
        """Test malformed content reads as absent but the file still exists."""
        (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")

        assert await file_store.get("broken") is None
        assert await file_store.has("broken")
        assert file_store.get_stats().errors == 1

    @pytest.mark.asyncio
    async def test_unserializable_value_fails(self, tmp_path, file_store):
        """Test a value JSON cannot encode fails without raising."""
        assert not await file_store.set("bad", {"obj": object()})
        assert not (tmp_path / "bad.json").exists()

    @pytest.mark.asyncio
    async def test_write_failure_returns_false(self, tmp_path, file_store):
        """Test a blocked parent directory turns into a failed write."""
        (tmp_path / "blocker").write_text("", encoding="utf-8")
        assert not await file_store.set("blocker/child", 1)
        assert file_store.get_stats().errors == 1

    @pytest.mark.asyncio
    async def test_delete_missing(self, file_store):
        """Test deleting a missing file fails without raising."""
        assert not await file_store.delete("missing")

    @pytest.mark.asyncio
    async def test_no_file(self, tmp_path, file_store):
        """Test no_file skips the filesystem entirely."""
        await file_store.set("key", 1)

        assert not await file_store.has("key", NO_FILE)
        assert await file_store.get("key", NO_FILE) is None
        assert not await file_store.set("other", 2, NO_FILE)
        assert not await file_store.delete("key", NO_FILE)
        assert await file_store.list("", NO_FILE) == []

        assert (tmp_path / "key.json").exists()
        assert not (tmp_path / "other.json").exists()

    @pytest.mark.asyncio
    async def test_survives_new_instance(self, tmp_path):
        """Test entries persist across store instances."""
        await FileStore(tmp_path).set("persisted", {"v": 1})
        assert await FileStore(tmp_path).get("persisted") == {"v": 1}

    @pytest.mark.asyncio
    async def test_concurrent_sets_last_write_wins(self, tmp_path, file_store):
        """Test concurrent writers to one id all succeed and leave one whole value."""
        values = ["x" * 5000, "y", {"z": list(range(100))}, 7]

        for _ in range(25):
            results = await asyncio.gather(*(file_store.set("k", v) for v in values))
            assert results == [True] * len(values)
            assert await file_store.get("k") in values

        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]


class TestFileStoreList:
    """Tests for FileStore.list."""

    @pytest.mark.asyncio
    async def test_directory_scope(self, file_store):
        """Test sibling directories sharing a name prefix are excluded."""
        await file_store.set("dir/a", 1)
        await file_store.set("dir/b", 2)
        await file_store.set("dir2/c", 3)

        assert await file_store.list("dir") == [("dir/a.json", 1), ("dir/b.json", 2)]

    @pytest.mark.asyncio
    async def test_not_recursive(self, file_store):
        """Test subdirectories are not descended into."""
        await file_store.set("dir/a", 1)
        await file_store.set("dir/sub/b", 2)

        assert await file_store.list("dir") == [("dir/a.json", 1)]

    @pytest.mark.asyncio
    async def test_filters_by_extension(self, file_store):
        """Test only files with the call's extension are listed."""
        await file_store.set("dir/a", 1)
        await file_store.set("dir/b", "text", TEXT)

        assert await file_store.list("dir") == [("dir/a.json", 1)]
        assert await file_store.list("dir", TEXT) == [("dir/b.txt", "text")]

    @pytest.mark.asyncio
    async def test_skips_unparseable(self, tmp_path, file_store):
        """Test malformed files are left out."""
        await file_store.set("dir/a", 1)
        (tmp_path / "dir" / "z.json").write_text("{oops", encoding="utf-8")

        assert await file_store.list("dir") == [("dir/a.json", 1)]

    @pytest.mark.asyncio
    async def test_includes_null_values(self, file_store):
        """Test a stored JSON null is listed like any other value."""
        await file_store.set("dir/a", None)
        await file_store.set("dir/b", 0)

        assert await file_store.has("dir/a")
        assert await file_store.list("dir") == [("dir/a.json", None), ("dir/b.json", 0)]

    @pytest.mark.asyncio
    async def test_missing_directory(self, file_store):
        """Test an absent directory lists as empty."""
        assert await file_store.list("nowhere") == []

    @pytest.mark.asyncio
    async def test_listed_locations_resolve(self, file_store):
        """Test listed locations can be passed back as identifiers."""
        await file_store.set("dir/a", {"x": 1})
        location, _ = (await file_store.list("dir"))[0]
        assert await file_store.get(location) == {"x": 1}

    @pytest.mark.asyncio
    async def test_root_listing(self, tmp_path, file_store):
        """Test listing the root scope."""
        await file_store.set("top", True)
        await file_store.set("dir/nested", False)

        assert await file_store.list("") == [("top.json", True)]


class TestFileStoreTraversal:
    """Tests for parent-directory identifiers."""

    @pytest.mark.asyncio
    async def test_traversal_allowed_by_default(self, tmp_path):
        """Test parent segments resolve outside the root unless rejected."""
        root = tmp_path / "root"
        root.mkdir()
        store = FileStore(root)

        assert await store.set("../outside", 1)
        assert json.loads((tmp_path / "outside.json").read_text(encoding="utf-8")) == 1

    @pytest.mark.asyncio
    async def test_traversal_rejected(self, tmp_path):
        """Test reject_traversal turns parent segments into failures."""
        store = FileStore(tmp_path / "root", StorageConfig(reject_traversal=True))

        assert not await store.set("../outside", 1)
        assert not await store.has("../outside")
        assert await store.get("../outside") is None
        assert not await store.delete("../outside")
        assert await store.list("..") == []
        assert not (tmp_path / "outside.json").exists()
        assert store.get_stats().errors >= 1

    @pytest.mark.parametrize("reject", [False, True])
    @pytest.mark.asyncio
    async def test_absolute_identifier_stays_under_root(self, tmp_path, reject):
        """Test identifiers with leading separators are written inside the root."""
        root = tmp_path / "root"
        store = FileStore(root, StorageConfig(reject_traversal=reject))
        outside = tmp_path / "escaped"

        assert await store.set("/" + str(outside), {"x": 1})
        assert await store.set("\\\\double", 2)

        assert not (tmp_path / "escaped.json").exists()
        assert (root / str(outside).lstrip("/")).with_suffix(".json").is_file()
        assert (root / "double.json").is_file()
        assert await store.get("//double") == 2

    def test_absolute_location_rejected(self, tmp_path):
        """Test a location that is still absolute never maps outside the root."""
        store = FileStore(tmp_path / "root")

        assert store._get_path("/etc/passwd.json") is None
        assert store.get_stats().errors == 1

    @pytest.mark.asyncio
    async def test_health_check(self, tmp_path, file_store):
        """Test the probe round-trips and cleans up."""
        assert await file_store.health_check()
        assert not (tmp_path / "__health_check__.json").exists()
