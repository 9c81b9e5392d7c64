"""
Math Typesetting

Finds TeX delimiter pairs in the text of a rendered fragment and replaces
each span with MathML. A span that fails to convert keeps its literal text.
"""

# Standard library
import logging
import re
from dataclasses import dataclass
from typing import List, Tuple

# Third-party
from bs4 import BeautifulSoup, NavigableString
from latex2mathml.converter import convert as latex_to_mathml

# Configure logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Delimiter:
    """A left/right delimiter pair and whether it is display math."""

    left: str
    right: str
    display: bool


# Order matters: "$$" must be tried before "$".
DELIMITERS: Tuple[Delimiter, ...] = (
    Delimiter("$$", "$$", True),
    Delimiter("$", "$", False),
    Delimiter("\\(", "\\)", False),
    Delimiter("\\[", "\\]", True),
)

IGNORED_TAGS = frozenset(
    {"script", "noscript", "style", "textarea", "pre", "code", "option"}
)

_LEFT_PATTERN = re.compile("|".join(re.escape(d.left) for d in DELIMITERS))


@dataclass(frozen=True)
class Segment:
    """Piece of a text node: plain text, or math with its raw source."""

    text: str
    is_math: bool = False
    raw: str = ""
    display: bool = False


def _find_end_of_math(delimiter: str, text: str, start: int) -> int:
    """
    Returns the index of the closing delimiter, or -1.

    Braces must be balanced at the closing delimiter and a backslash
    escapes the character after it.
    """
    index = start
    brace_level = 0
    while index < len(text):
        char = text[index]
        if brace_level <= 0 and text.startswith(delimiter, index):
            return index
        if char == "\\":
            index += 1
        elif char == "{":
            brace_level += 1
        elif char == "}":
            brace_level -= 1
        index += 1
    return -1


def split_at_delimiters(text: str) -> List[Segment]:
    """
    Splits text into plain and math segments.

    An opening delimiter without a matching close leaves the rest of the
    text as plain text.

    Args:
        text: Raw text content of one node.

    Returns:
        Ordered segments covering the whole input.
    """
    segments: List[Segment] = []
    while True:
        match = _LEFT_PATTERN.search(text)
        if match is None:
            break
        if match.start() > 0:
            segments.append(Segment(text[: match.start()]))
            text = text[match.start():]

        delimiter = next(d for d in DELIMITERS if text.startswith(d.left))
        end = _find_end_of_math(delimiter.right, text, len(delimiter.left))
        if end == -1:
            break

        raw = text[: end + len(delimiter.right)]
        segments.append(
            Segment(
                text=text[len(delimiter.left):end],
                is_math=True,
                raw=raw,
                display=delimiter.display,
            )
        )
        text = text[end + len(delimiter.right):]

    if text:
        segments.append(Segment(text))
    return segments


def _build_math_node(soup: BeautifulSoup, segment: Segment):
    """Converts one math segment into a span wrapping MathML."""
    mathml = latex_to_mathml(
        segment.text.strip(), display="block" if segment.display else "inline"
    )
    css_class = "math math-display" if segment.display else "math math-inline"
    wrapper = soup.new_tag("span", attrs={"class": css_class, "data-tex": segment.text.strip()})
    for child in list(BeautifulSoup(mathml, "html.parser").contents):
        wrapper.append(child)
    return wrapper


def _is_ignored(node: NavigableString) -> bool:
    return any(parent.name in IGNORED_TAGS for parent in node.parents)


def typeset_math(soup: BeautifulSoup) -> Tuple[int, int]:
    """
    Replaces delimited TeX in every eligible text node with MathML.

    Args:
        soup: Parsed fragment, modified in place.

    Returns:
        Tuple of (typeset span count, failed span count).
    """
    rendered = 0
    failed = 0

    for text_node in list(soup.find_all(string=True)):
        # Comments, CDATA and doctypes are NavigableString subclasses.
        if type(text_node) is not NavigableString or _is_ignored(text_node):
            continue

        segments = split_at_delimiters(str(text_node))
        if not any(segment.is_math for segment in segments):
            continue

        replacements = []
        for segment in segments:
            if not segment.is_math:
                replacements.append(NavigableString(segment.text))
                continue
            try:
                replacements.append(_build_math_node(soup, segment))
                rendered += 1
            except Exception as e:  # noqa: BLE001
                # latex2mathml raises a zoo of error types on bad input.
                logger.debug(f"Leaving malformed math as text: {segment.raw!r} ({e})")
                replacements.append(NavigableString(segment.raw))
                failed += 1

        text_node.replace_with(*replacements)

    return rendered, failed
