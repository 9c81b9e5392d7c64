"""Session state of one editing session and its load/save lifecycle."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from importlib import resources

from editor.storage import CONTENT_KEY, SCROLL_SYNC_KEY, THEME_KEY, PreferenceStore
from render_service.themes import DEFAULT_THEME, ThemeId, normalize_theme

logger = logging.getLogger(__name__)

DEFAULT_INPUT = """# Start typing your Markdown here...

## Features
- **Bold text**
- *Italic text*
- [Links](https://example.com)
- `Code`

### Tables
| Header 1 | Header 2 |
|----------|----------|
| Cell 1   | Cell 2   |

> Blockquotes work too!
"""


@dataclass
class SessionState:
    """Everything the editor remembers between events."""

    content: str = DEFAULT_INPUT
    scroll_sync: bool = False
    theme: ThemeId = DEFAULT_THEME
    has_edited: bool = False


def load_example_document() -> str | None:
    """Returns the bundled example document, or None if it cannot be read."""
    try:
        return resources.files("editor").joinpath("example.md").read_text(encoding="utf-8")
    except (OSError, ModuleNotFoundError) as e:
        logger.warning("Example load failed: %s", e)
        return None


def _load_scroll_sync(store: PreferenceStore) -> bool:
    raw = store.get(SCROLL_SYNC_KEY)
    if not raw:
        return False
    try:
        return bool(json.loads(raw))
    except ValueError:
        return False


def load_session(store: PreferenceStore) -> SessionState:
    """
    Restores a session from storage.

    Content comes from the last stored state, then the bundled example,
    then the default placeholder document.
    """
    content = store.get(CONTENT_KEY) or load_example_document() or DEFAULT_INPUT
    return SessionState(
        content=content,
        scroll_sync=_load_scroll_sync(store),
        theme=normalize_theme(store.get(THEME_KEY)),
    )


def save_content(store: PreferenceStore, content: str) -> None:
    store.set(CONTENT_KEY, content)


def save_scroll_sync(store: PreferenceStore, enabled: bool) -> None:
    store.set(SCROLL_SYNC_KEY, json.dumps(enabled))


def save_theme(store: PreferenceStore, theme: ThemeId) -> None:
    store.set(THEME_KEY, theme.value)
