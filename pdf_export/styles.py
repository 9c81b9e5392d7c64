"""
Page Styles

Fixed presentation table for the local PDF assembler. Each HTML element
type maps to one style; the values are a policy, not derived from CSS.
"""

# Standard library
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

PAGE_MARGINS: Tuple[float, float, float, float] = (50, 50, 50, 50)  # left, top, right, bottom
NESTING_INDENT = 15

DOCUMENT_TITLE = "Markdown Document"
DOCUMENT_PRODUCER = "md2pdf local assembler"


@dataclass(frozen=True)
class BlockStyle:
    """Font and spacing rules for one block type."""

    font_size: float
    margin_top: float = 0
    margin_bottom: float = 0
    bold: bool = False
    italic: bool = False
    monospace: bool = False
    color: str = "#000000"
    background: Optional[str] = None
    indent: float = 0


STYLE_TABLE: Dict[str, BlockStyle] = {
    "h1": BlockStyle(font_size=24, margin_top=20, margin_bottom=10, bold=True),
    "h2": BlockStyle(font_size=20, margin_top=18, margin_bottom=8, bold=True),
    "h3": BlockStyle(font_size=17, margin_top=16, margin_bottom=6, bold=True),
    "h4": BlockStyle(font_size=15, margin_top=14, margin_bottom=6, bold=True),
    "h5": BlockStyle(font_size=13, margin_top=12, margin_bottom=4, bold=True),
    "h6": BlockStyle(font_size=12, margin_top=10, margin_bottom=4, bold=True),
    "paragraph": BlockStyle(font_size=11, margin_bottom=8),
    "list": BlockStyle(font_size=11, margin_bottom=8, indent=NESTING_INDENT),
    "table": BlockStyle(font_size=10, margin_bottom=10, background="#eeeeee"),
    "code": BlockStyle(font_size=9, margin_bottom=10, monospace=True, background="#f5f5f5"),
    "blockquote": BlockStyle(
        font_size=11, margin_bottom=8, italic=True, color="#555555", indent=NESTING_INDENT
    ),
}


def heading_style(level: int) -> str:
    """Returns the style key for a heading level, clamped to 1–6."""
    return f"h{min(max(level, 1), 6)}"
