"""Builds the standalone HTML document sent to the render service."""

from __future__ import annotations

from render_service.themes import ThemeId, theme_css

# Network-hosted so the headless browser can fetch them itself.
MARKDOWN_CSS_URL = "https://cdn.jsdelivr.net/npm/github-markdown-css@5.8.1/github-markdown.min.css"
KATEX_CSS_URL = "https://cdn.jsdelivr.net/npm/katex@0.16.9/dist/katex.min.css"

DOCUMENT_TITLE = "Markdown to PDF"

BASE_STYLE = "\n".join([
    "body { margin: 0; padding: 24px; line-height: 1.6; font-family: -apple-system, "
    "BlinkMacSystemFont, \"Segoe UI\", Roboto, Oxygen, Ubuntu, Cantarell, sans-serif; }",
    ".markdown-body { box-sizing: border-box; max-width: 800px; margin: 0 auto; }",
])


def build_html_document(fragment_html: str, theme: ThemeId) -> str:
    """
    Wraps a rendered fragment in a complete, self-describing HTML page.

    The active theme's rules are embedded as text; the shared Markdown and
    math stylesheets are referenced by absolute URL.
    """
    return "".join([
        "<!doctype html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="utf-8" />',
        f"<title>{DOCUMENT_TITLE}</title>",
        f'<link rel="stylesheet" href="{MARKDOWN_CSS_URL}" />',
        f'<link rel="stylesheet" href="{KATEX_CSS_URL}" />',
        "<style>",
        BASE_STYLE,
        "\n",
        theme_css(theme),
        "</style>",
        "</head>",
        "<body>",
        '<article class="markdown-body">',
        fragment_html,
        "</article>",
        "</body>",
        "</html>",
    ])
