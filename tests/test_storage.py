"""
Unit Tests for Preference Storage

Covers the in-memory, JSON file and best-effort wrapper stores.
"""

# Standard library
import json

# Third-party
import pytest

# Local application
from editor.storage import (
    CONTENT_KEY,
    SCROLL_SYNC_KEY,
    THEME_KEY,
    JsonFileStore,
    MemoryStore,
    NullStore,
    SafeStore,
)


class _BrokenStore:
    """Store whose every operation fails like unavailable storage."""

    def get(self, key):
        raise OSError("storage disabled")

    def set(self, key, value):
        raise OSError("quota exceeded")


class TestKeys:
    def test_namespaced_keys(self):
        assert CONTENT_KEY == "com.md2pdf:last_state"
        assert SCROLL_SYNC_KEY == "com.md2pdf:scroll_sync"
        assert THEME_KEY == "com.md2pdf:theme"


class TestMemoryAndNullStores:
    def test_memory_store_round_trip(self):
        store = MemoryStore({"a": "1"})
        store.set("b", "2")

        assert store.get("a") == "1"
        assert store.get("b") == "2"
        assert store.get("missing") is None

    def test_null_store_keeps_nothing(self):
        store = NullStore()
        store.set("a", "1")

        assert store.get("a") is None


class TestJsonFileStore:
    """Tests for JsonFileStore."""

    def test_persists_between_instances(self, tmp_path):
        path = tmp_path / "prefs" / "state.json"
        JsonFileStore(str(path)).set(THEME_KEY, "githubLight")

        assert JsonFileStore(str(path)).get(THEME_KEY) == "githubLight"
        assert json.loads(path.read_text(encoding="utf-8")) == {THEME_KEY: "githubLight"}

    def test_missing_file_reads_as_empty(self, tmp_path):
        assert JsonFileStore(str(tmp_path / "none.json")).get(THEME_KEY) is None

    def test_non_object_file_raises(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(ValueError):
            JsonFileStore(str(path)).get(THEME_KEY)


class TestSafeStore:
    """Tests for the best-effort wrapper."""

    def test_failed_read_is_absent(self):
        assert SafeStore(_BrokenStore()).get(CONTENT_KEY) is None

    def test_failed_write_is_ignored(self):
        SafeStore(_BrokenStore()).set(CONTENT_KEY, "text")

    def test_corrupt_file_is_ignored(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")
        store = SafeStore(JsonFileStore(str(path)))

        assert store.get(CONTENT_KEY) is None
        store.set(CONTENT_KEY, "text")
