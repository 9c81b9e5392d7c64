"""Anchor rewriting for rendered fragments."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Tag

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
_WHITESPACE = re.compile(r"\s+")


def _normalize_fragment(href: str) -> str:
    return href[1:].strip().lower().replace("-", " ")


def _normalize_heading(text: str) -> str:
    return _WHITESPACE.sub(" ", text.strip().lower())


def find_heading(soup: BeautifulSoup, href: str) -> Tag | None:
    """
    Finds the heading an in-document link points at.

    A heading matches when its normalized text equals or starts with the
    normalized fragment id (`#getting-started` matches "Getting Started!").

    Args:
        soup: Rendered fragment.
        href: Anchor href, including the leading `#`.

    Returns:
        The first matching heading, or None.
    """
    needle = _normalize_fragment(href)
    if not needle:
        return None

    for heading in soup.find_all(HEADING_TAGS):
        text = _normalize_heading(heading.get_text())
        if not text:
            continue
        if text == needle or text.startswith(needle):
            return heading
    return None


def enhance_links(soup: BeautifulSoup) -> None:
    """
    Rewrites anchors in place.

    Fragment links are pointed at the matching heading's id (assigning one
    if needed); external `http` links open in a new context without
    sending a referrer or exposing the opener.
    """
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        if not href:
            continue

        if href.startswith("#"):
            heading = find_heading(soup, href)
            if heading is None:
                continue
            if not heading.get("id"):
                heading["id"] = href[1:].strip()
            anchor["href"] = f"#{heading['id']}"
            anchor["data-scroll"] = "heading"
        elif href.startswith("http"):
            anchor["target"] = "_blank"
            anchor["rel"] = "noopener noreferrer"
