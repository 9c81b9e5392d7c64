"""
Preference Storage

Key-value stores for the editing session's content and preferences.
Persistence is best-effort: SafeStore turns every storage failure into
"nothing stored" so the editor keeps working without it.
"""

# Standard library
import json
import logging
import os
from typing import Dict, Optional, Protocol, runtime_checkable

# Configure logging
logger = logging.getLogger(__name__)

STORAGE_NAMESPACE = "com.md2pdf"
CONTENT_KEY = f"{STORAGE_NAMESPACE}:last_state"
SCROLL_SYNC_KEY = f"{STORAGE_NAMESPACE}:scroll_sync"
THEME_KEY = f"{STORAGE_NAMESPACE}:theme"

STORAGE_ERRORS = (OSError, ValueError, TypeError)


@runtime_checkable
class PreferenceStore(Protocol):
    """String key-value store."""

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None."""

    def set(self, key: str, value: str) -> None:
        """Store a value."""


class MemoryStore:
    """In-process store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class NullStore:
    """Store used when persistence is unavailable: keeps nothing."""

    def get(self, key: str) -> Optional[str]:
        return None

    def set(self, key: str, value: str) -> None:
        return None


class JsonFileStore:
    """
    Store backed by a single JSON object on disk.

    Raises OSError/ValueError like any real storage; wrap it in SafeStore
    for best-effort use.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        os.replace(tmp_path, self.path)


class SafeStore:
    """
    Wraps a store so that storage failures are ignored.

    A failed read behaves like an absent key; a failed write is a no-op.
    """

    def __init__(self, inner: PreferenceStore) -> None:
        self._inner = inner

    def get(self, key: str) -> Optional[str]:
        try:
            return self._inner.get(key)
        except STORAGE_ERRORS as e:
            logger.debug(f"Storage read ignored for {key}: {e}")
            return None

    def set(self, key: str, value: str) -> None:
        try:
            self._inner.set(key, value)
        except STORAGE_ERRORS as e:
            logger.debug(f"Storage write ignored for {key}: {e}")
