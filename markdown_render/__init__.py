"""
Markdown Render Module

Markdown → sanitized HTML fragment with typeset math and enhanced links.
"""

from markdown_render.links import enhance_links, find_heading
from markdown_render.renderer import render_markdown
from markdown_render.schemas import EMPTY_STATE_HTML, RenderedFragment

__all__ = [
    "EMPTY_STATE_HTML",
    "RenderedFragment",
    "enhance_links",
    "find_heading",
    "render_markdown",
]
