"""
Markdown Renderer

Converts Markdown text into a sanitized HTML fragment with typeset math
and enhanced links. Pure function: same input, same fragment.
"""

# Standard library
import logging

# Third-party
from markdown_it import MarkdownIt
from markdown_it.rules_inline import StateInline

# Local application
from markdown_render.links import enhance_links
from markdown_render.math_typeset import typeset_math
from markdown_render.schemas import EMPTY_FRAGMENT, RenderedFragment

# Configure logging
logger = logging.getLogger(__name__)

# gfm-like: tables, strikethrough, linkify. Raw HTML is escaped rather than
# passed through, and single newlines become <br>.
_md = MarkdownIt("gfm-like", {"breaks": True, "html": False})

_BRACKET_CLOSERS = {"(": "\\)", "[": "\\]"}


def _math_brackets(state: StateInline, silent: bool) -> bool:
    """
    Keeps `\\(...\\)` and `\\[...\\]` spans as literal text.

    Runs before the escape rule, which would otherwise turn `\\(` into `(`
    and hide the delimiters from the math pass.
    """
    start = state.pos
    if state.src[start] != "\\" or start + 1 >= state.posMax:
        return False
    closer = _BRACKET_CLOSERS.get(state.src[start + 1])
    if closer is None:
        return False
    end = state.src.find(closer, start + 2, state.posMax)
    if end == -1:
        return False

    if not silent:
        token = state.push("text", "", 0)
        token.content = state.src[start:end + len(closer)]
    state.pos = end + len(closer)
    return True


_md.inline.ruler.before("escape", "math_brackets", _math_brackets)


def render_markdown(markdown_text: str) -> RenderedFragment:
    """
    Renders Markdown into a preview fragment.

    Args:
        markdown_text: Source document text.

    Returns:
        RenderedFragment. Empty or whitespace-only input yields the
        empty-state placeholder fragment.
    """
    if not markdown_text or not markdown_text.strip():
        return EMPTY_FRAGMENT

    html = _md.render(markdown_text)
    soup = RenderedFragment(html=html).soup()

    math_count, math_errors = typeset_math(soup)
    if math_errors:
        logger.info(f"{math_errors} math expression(s) left as literal text")

    enhance_links(soup)

    return RenderedFragment(
        html=str(soup),
        math_count=math_count,
        math_errors=math_errors,
    )
