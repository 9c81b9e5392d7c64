"""
Render Service Module

Headless-browser PDF endpoint, its HTTP client, and the HTML document and
theme rules shared by both.
"""

from render_service.client import RemoteRenderClient
from render_service.document import build_html_document
from render_service.router import router
from render_service.themes import ThemeId, normalize_theme, theme_css

__all__ = [
    "RemoteRenderClient",
    "ThemeId",
    "build_html_document",
    "normalize_theme",
    "router",
    "theme_css",
]
