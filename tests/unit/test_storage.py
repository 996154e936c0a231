"""
Unit tests for the two-tier storage.
"""

from unittest.mock import patch

import pytest

from feedcache.cache.disk import DiskCache
from feedcache.cache.memory import MemoryCache
from feedcache.cache.storage import Storage
from feedcache.config import DiskCacheConfig, MemoryCacheConfig
from feedcache.document import Document


@pytest.mark.unit
class TestStorageReadWrite:
    """Tests for get/set."""

    def test_set_writes_both_tiers(self, storage: Storage):
        doc = Document({"videos": []})

        assert storage.set("k", doc) is True
        assert storage.memory.get("k") == doc
        assert storage.disk.get("k") == b'{"videos":[]}'

    def test_get_prefers_memory(self, storage: Storage):
        storage.set("k", Document({"v": 1}))

        with patch.object(storage.disk, "get") as disk_get:
            assert storage.get("k") == Document({"v": 1})
            disk_get.assert_not_called()

    def test_read_through_populates_memory(self, storage: Storage):
        storage.set("k", Document({"v": 1}))
        storage.memory.clear()

        assert storage.get("k") == Document({"v": 1})
        assert storage.memory.get("k") == Document({"v": 1})

    def test_miss_in_both_tiers(self, storage: Storage):
        assert storage.get("nothing") is None

    def test_survives_new_instance(self, disk_config: DiskCacheConfig):
        first = Storage(disk_config=disk_config)
        first.set("k", Document({"date": "2024-01-15T10:30:00Z"}))
        first.close()

        second = Storage(disk_config=disk_config)
        try:
            assert second.get("k")["date"].string() == "2024-01-15T10:30:00Z"
        finally:
            second.close()

    def test_corrupt_disk_payload_is_a_miss(self, storage: Storage):
        storage.disk.set("k", b"\x00not json")

        assert storage.get("k") is None
        assert storage.memory.get("k") is None

    def test_non_utf8_disk_payload_is_a_miss(self, storage: Storage):
        storage.disk.set("k", b"\xff\xfe\xfa")

        assert storage.get("k") is None

    def test_memory_entry_size_is_serialized_size(self, storage: Storage):
        storage.set("k", Document({"a": "b"}))

        assert storage.memory.get_entry_info("k")["size_bytes"] == len(b'{"a":"b"}')


@pytest.mark.unit
class TestStorageFaults:
    """Faults degrade to misses and False."""

    def test_disk_unavailable(self, temp_dir):
        blocker = temp_dir / "file"
        blocker.write_text("x")
        storage = Storage(disk_config=DiskCacheConfig(directory=str(blocker / "sub")))

        assert storage.set("k", Document(1)) is False
        # Memory still serves the value for this process
        assert storage.get("k") == Document(1)
        assert storage.total_size() == 0
        assert storage.remove_all() is False

    def test_unserializable_document(self, storage: Storage):
        with patch.object(storage.transformer, "to_data", side_effect=ValueError("boom")):
            assert storage.set("k", Document(1)) is False

        assert storage.get("k") is None

    @pytest.mark.parametrize(
        "payload",
        [b"[" * 200000 + b"]" * 200000, b"{\"a\":" * 5000 + b"1" + b"}" * 5000],
        ids=["arrays", "objects"],
    )
    def test_deeply_nested_payload_is_a_miss(self, storage: Storage, payload):
        storage.disk.set("k", payload)

        assert storage.get("k") is None
        assert storage.memory.exists("k") is False

    def test_lone_surrogate_payload_is_a_miss(self, storage: Storage):
        storage.disk.set("k", b'{"title":"\\ud800"}')

        assert storage.get("k") is None

    def test_disk_write_failure_reports_false(self, storage: Storage):
        with patch.object(storage.disk, "set", return_value=False):
            assert storage.set("k", Document(1)) is False


@pytest.mark.unit
class TestStorageMaintenance:
    """Tests for removal, sizing and stats."""

    def test_remove(self, storage: Storage):
        storage.set("k", Document(1))

        assert storage.remove("k") is True
        assert storage.get("k") is None
        assert storage.remove("k") is False

    def test_remove_all(self, storage: Storage):
        storage.set("a", Document(1))
        storage.set("b", Document(2))

        assert storage.remove_all() is True
        assert storage.get("a") is None
        assert storage.total_size() == 0

    def test_exists(self, storage: Storage):
        storage.set("a", Document(1))
        storage.memory.clear()

        assert storage.exists("a") is True
        assert storage.exists("b") is False

    def test_total_size_counts_disk_bytes(self, storage: Storage):
        storage.set("a", Document("xy"))  # '"xy"'

        assert storage.total_size() == 4

    def test_remove_expired(self, disk_config: DiskCacheConfig):
        storage = Storage(
            disk_config=disk_config.model_copy(update={"expiry_seconds": 5}),
            memory_config=MemoryCacheConfig(expiry_seconds=5),
        )
        try:
            with patch("time.time", return_value=100.0):
                storage.set("a", Document(1))
            with patch("time.time", return_value=200.0):
                assert storage.remove_expired() == 1
                assert storage.get("a") is None
        finally:
            storage.close()

    def test_stats(self, storage: Storage):
        storage.set("a", Document(1))
        storage.get("a")

        stats = storage.stats()

        assert stats["name"] == "feed"
        assert stats["disk_available"] is True
        assert stats["memory"]["hits"] == 1
        assert stats["disk"]["sets"] == 1
        assert stats["disk_path"].endswith("feed.sqlite3")

    def test_accepts_prebuilt_tiers(self, disk_config: DiskCacheConfig):
        memory = MemoryCache(MemoryCacheConfig(max_entries=1))
        disk = DiskCache(disk_config)
        storage = Storage(memory=memory, disk=disk)
        # Empty tiers are falsy; they must still be used as given
        assert len(memory) == 0
        assert storage.memory is memory
        assert storage.disk is disk
        try:
            storage.set("a", Document(1))
            storage.set("b", Document(2))

            assert memory.keys() == ["b"]
            assert storage.get("a") == Document(1)
        finally:
            storage.close()
