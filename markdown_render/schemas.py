"""Data types produced by the Markdown renderer."""

from __future__ import annotations

from dataclasses import dataclass

from bs4 import BeautifulSoup

EMPTY_STATE_HTML = (
    '<p class="empty-state">No content to preview. Start typing in the editor.</p>'
)


@dataclass(frozen=True)
class RenderedFragment:
    """HTML fragment derived from one Markdown snapshot."""

    html: str
    math_count: int = 0
    math_errors: int = 0
    is_empty: bool = False

    def soup(self) -> BeautifulSoup:
        """Parses the fragment into a fresh, independently mutable tree."""
        return BeautifulSoup(self.html, "html.parser")


EMPTY_FRAGMENT = RenderedFragment(html=EMPTY_STATE_HTML, is_empty=True)
