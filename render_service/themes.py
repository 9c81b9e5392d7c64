"""
Preview Themes

Theme-specific overrides on top of github-markdown-css. The same rules
style the live preview and the document sent for remote rendering.
"""

# Standard library
from enum import Enum
from typing import Dict, Optional


class ThemeId(str, Enum):
    """Supported theme identifiers."""

    LAETUS = "laetus"
    GITHUB_DARK = "githubDark"
    GITHUB_LIGHT = "githubLight"


DEFAULT_THEME = ThemeId.LAETUS

# Stored preferences from older builds used "github" for the dark theme.
_LEGACY_ALIASES = {"github": ThemeId.GITHUB_DARK}

_THEME_CSS: Dict[ThemeId, str] = {
    ThemeId.LAETUS: "\n".join([
        "body { background: #0a0a0a; color: #f8f8f0; }",
        ".markdown-body { background: #0a0a0a; color: #f8f8f0; padding-bottom: 2rem; }",
        ".markdown-body a { color: #40c4ff; }",
        ".markdown-body a:hover { text-decoration: underline; }",
        ".markdown-body h1, .markdown-body h2, .markdown-body h3, .markdown-body h4, "
        ".markdown-body h5, .markdown-body h6 { color: #ff5252; }",
        ".markdown-body blockquote { color: #b2ff59; border-left-color: #b2ff59; }",
        ".markdown-body pre { background-color: #141414; border-radius: 8px; }",
        ".markdown-body table { background: #0a0a0a; border-collapse: collapse; }",
        ".markdown-body table th, .markdown-body table td { border: 1px solid #2a2a2a; }",
        ".markdown-body table th { background: #050506; color: #f8f8f0; }",
        ".markdown-body table td { background: #0a0a0a; }",
        ".markdown-body code { color: #40c4ff; background-color: #141414; }",
        ".markdown-body pre code { color: #f8f8f0; }",
    ]),
    ThemeId.GITHUB_LIGHT: "\n".join([
        "body { background: #ffffff; color: #24292f; }",
        ".markdown-body { background: #ffffff; color: #24292f; padding-bottom: 2rem; }",
        ".markdown-body a { color: #0969da; }",
        ".markdown-body a:hover { text-decoration: underline; }",
        ".markdown-body h1, .markdown-body h2, .markdown-body h3, .markdown-body h4, "
        ".markdown-body h5, .markdown-body h6 { color: #1f2328; }",
        ".markdown-body blockquote { color: #57606a; border-left-color: #d0d7de; }",
        ".markdown-body pre { background-color: #f6f8fa; border-radius: 6px; }",
        ".markdown-body table { background: #ffffff; border-collapse: collapse; }",
        ".markdown-body table th, .markdown-body table td { border: 1px solid #d0d7de; }",
        ".markdown-body table th { background: #f6f8fa; }",
        ".markdown-body table td { background: #ffffff; }",
        ".markdown-body code { color: #24292f; background-color: rgba(175, 184, 193, 0.2); }",
    ]),
    ThemeId.GITHUB_DARK: "\n".join([
        "body { background: #0d1117; color: #c9d1d9; }",
        ".markdown-body { background: #0d1117; color: #c9d1d9; padding-bottom: 2rem; }",
        ".markdown-body a { color: #58a6ff; }",
        ".markdown-body a:hover { text-decoration: underline; }",
        ".markdown-body h1, .markdown-body h2, .markdown-body h3, .markdown-body h4, "
        ".markdown-body h5, .markdown-body h6 { color: #e6edf3; }",
        ".markdown-body blockquote { color: #8b949e; border-left-color: #30363d; }",
        ".markdown-body pre { background-color: #161b22; border-radius: 8px; }",
        ".markdown-body table { background: #0d1117; border-collapse: collapse; }",
        ".markdown-body table th, .markdown-body table td { border: 1px solid #30363d; }",
        ".markdown-body table th { background: #161b22; }",
        ".markdown-body table td { background: #0d1117; }",
        ".markdown-body code { color: #c9d1d9; background-color: #161b22; }",
    ]),
}


def parse_theme(value: Optional[str]) -> Optional[ThemeId]:
    """Returns the theme for a stored id, or None if unrecognized."""
    if not value:
        return None
    if value in _LEGACY_ALIASES:
        return _LEGACY_ALIASES[value]
    try:
        return ThemeId(value)
    except ValueError:
        return None


def normalize_theme(value: Optional[str]) -> ThemeId:
    """Like parse_theme, but unknown ids fall back to the default theme."""
    return parse_theme(value) or DEFAULT_THEME


def theme_css(theme: ThemeId) -> str:
    """Returns the override rules for a theme."""
    return _THEME_CSS[theme]
