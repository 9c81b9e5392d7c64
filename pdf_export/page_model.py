"""
Page Model

Translates an HTML fragment (as produced by the Markdown renderer and the
asset inliner) into a flat, styled block structure that the PDF serializer
can lay out. Synchronous and free of I/O.
"""

# Standard library
import base64
import binascii
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

# Third-party
from bs4 import BeautifulSoup, NavigableString, Tag

# Local application
from asset_inliner.inliner import PLACEHOLDER_CLASS, EmbeddedAsset
from pdf_export.styles import (
    DOCUMENT_PRODUCER,
    DOCUMENT_TITLE,
    PAGE_MARGINS,
    heading_style,
)

# Configure logging
logger = logging.getLogger(__name__)

BLOCK_TAGS = frozenset(
    {"h1", "h2", "h3", "h4", "h5", "h6", "p", "ul", "ol", "table", "pre",
     "blockquote", "hr", "div", "section", "article"}
)


@dataclass(frozen=True)
class TextRun:
    """A span of inline text with its formatting flags."""

    text: str
    bold: bool = False
    italic: bool = False
    code: bool = False
    strike: bool = False
    math: bool = False
    link: Optional[str] = None


@dataclass
class Block:
    """
    One block of page content.

    Attributes:
        kind: heading, paragraph, list, table, code, blockquote, image,
            placeholder or rule.
        style: Key into the style table.
        runs: Inline content for heading, paragraph and placeholder blocks.
        items: List items, each a list of blocks.
        rows: Table cells as runs, header rows first.
        children: Blockquote content.
    """

    kind: str
    style: str = "paragraph"
    runs: List[TextRun] = field(default_factory=list)
    items: List[List["Block"]] = field(default_factory=list)
    rows: List[List[List[TextRun]]] = field(default_factory=list)
    header_rows: int = 0
    children: List["Block"] = field(default_factory=list)
    ordered: bool = False
    start: int = 1
    depth: int = 0
    text: str = ""
    image: Optional[EmbeddedAsset] = None

    @property
    def plain_text(self) -> str:
        return "".join(run.text for run in self.runs)


@dataclass
class PageModel:
    """Styled document ready for serialization."""

    content: List[Block]
    info: Dict[str, str]
    page_margins: Tuple[float, float, float, float] = PAGE_MARGINS


def decode_data_uri(src: str) -> Optional[EmbeddedAsset]:
    """
    Decodes a base64 data URI.

    Returns:
        EmbeddedAsset, or None if src is not a decodable base64 data URI.
    """
    if not src.startswith("data:") or "," not in src:
        return None
    header, _, data = src[5:].partition(",")
    parts = header.split(";")
    if "base64" not in parts[1:]:
        return None
    try:
        payload = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        return None
    return EmbeddedAsset(mime_type=parts[0] or "application/octet-stream", payload=payload)


class _Translator:
    """Walks a fragment tree and emits blocks."""

    def runs_for(self, node: Tag, base: TextRun) -> List[TextRun]:
        runs: List[TextRun] = []
        for child in node.children:
            runs.extend(self._runs_for_node(child, base))
        return runs

    def _runs_for_node(self, node, base: TextRun) -> List[TextRun]:
        if isinstance(node, NavigableString):
            if type(node) is not NavigableString:
                return []
            text = str(node)
            return [replace(base, text=text)] if text else []
        if not isinstance(node, Tag):
            return []

        name = node.name
        classes = node.get("class") or []
        if name == "br":
            return [replace(base, text="\n")]
        if name == "span" and "math" in classes:
            return [replace(base, text=node.get("data-tex", node.get_text()), math=True)]
        if name == "span" and PLACEHOLDER_CLASS in classes:
            return [replace(base, text=node.get_text(), italic=True)]
        if name == "img":
            return [replace(base, text=f"[Image: {node.get('alt') or node.get('src', '')}]")]
        if name in ("strong", "b"):
            return self.runs_for(node, replace(base, bold=True))
        if name in ("em", "i"):
            return self.runs_for(node, replace(base, italic=True))
        if name == "code":
            return self.runs_for(node, replace(base, code=True))
        if name in ("s", "del", "strike"):
            return self.runs_for(node, replace(base, strike=True))
        if name == "a":
            return self.runs_for(node, replace(base, link=node.get("href")))
        return self.runs_for(node, base)

    def flow(self, nodes, depth: int = 0, paragraph_style: str = "paragraph") -> List[Block]:
        """Converts a sequence of sibling nodes into blocks."""
        blocks: List[Block] = []
        pending: List[TextRun] = []

        def flush() -> None:
            if "".join(run.text for run in pending).strip():
                blocks.append(Block(kind="paragraph", style=paragraph_style, runs=_trim(pending)))
            pending.clear()

        for node in nodes:
            if isinstance(node, Tag) and self._is_block(node):
                flush()
                blocks.extend(self.block(node, depth, paragraph_style))
            else:
                pending.extend(self._runs_for_node(node, TextRun("")))
        flush()
        return blocks

    def _is_block(self, node: Tag) -> bool:
        if node.name in BLOCK_TAGS or node.name == "img":
            return True
        classes = node.get("class") or []
        return node.name == "span" and (
            "math-display" in classes or PLACEHOLDER_CLASS in classes
        )

    def block(self, node: Tag, depth: int, paragraph_style: str) -> List[Block]:
        name = node.name
        classes = node.get("class") or []

        if name in ("h1", "h2", "h3", "h4", "h5", "h6"):
            runs = _trim(self.runs_for(node, TextRun("", bold=True)))
            return [Block(kind="heading", style=heading_style(int(name[1])), runs=runs)]
        if name == "p":
            # Images and display math inside a paragraph break it into blocks.
            return self.flow(node.children, depth, paragraph_style)
        if name in ("ul", "ol"):
            return [self._list(node, depth)]
        if name == "table":
            return [self._table(node)]
        if name == "pre":
            return [Block(kind="code", style="code", text=node.get_text().rstrip("\n"))]
        if name == "blockquote":
            children = self.flow(node.children, depth, paragraph_style="blockquote")
            return [Block(kind="blockquote", style="blockquote", children=children)]
        if name == "hr":
            return [Block(kind="rule")]
        if name == "img":
            return [self._image(node)]
        if name == "span" and PLACEHOLDER_CLASS in classes:
            return [Block(kind="placeholder", style=paragraph_style,
                          runs=[TextRun(node.get_text(), italic=True)])]
        if name == "span" and "math-display" in classes:
            return [Block(kind="paragraph", style=paragraph_style,
                          runs=[TextRun(node.get("data-tex", ""), math=True)])]
        return self.flow(node.children, depth, paragraph_style)

    def _list(self, node: Tag, depth: int) -> Block:
        items = [
            self.flow(li.children, depth + 1)
            for li in node.find_all("li", recursive=False)
        ]
        start = 1
        if node.name == "ol" and node.get("start", "").isdigit():
            start = int(node["start"])
        return Block(kind="list", style="list", items=items,
                     ordered=node.name == "ol", start=start, depth=depth)

    def _table(self, node: Tag) -> Block:
        rows: List[List[List[TextRun]]] = []
        header_rows = 0
        for tr in node.find_all("tr"):
            cells = tr.find_all(["th", "td"], recursive=False)
            is_header = tr.parent is not None and tr.parent.name == "thead"
            base = TextRun("", bold=is_header)
            rows.append([_trim(self.runs_for(cell, base)) for cell in cells])
            if is_header:
                header_rows += 1
        return Block(kind="table", style="table", rows=rows, header_rows=header_rows)

    def _image(self, node: Tag) -> Block:
        src = node.get("src", "")
        asset = decode_data_uri(src)
        alt = node.get("alt") or src
        if asset is None:
            logger.debug(f"Image not embedded, using placeholder: {src[:80]}")
            return Block(kind="placeholder", runs=[TextRun(f"[Image: {alt}]", italic=True)])
        return Block(kind="image", image=asset, text=alt)


def _trim(runs: List[TextRun]) -> List[TextRun]:
    """Strips leading/trailing whitespace of the run sequence."""
    runs = list(runs)
    if runs:
        runs[0] = replace(runs[0], text=runs[0].text.lstrip())
    if runs:
        runs[-1] = replace(runs[-1], text=runs[-1].text.rstrip())
    return [run for run in runs if run.text]


def build_page_model(html: str, title: str = DOCUMENT_TITLE) -> PageModel:
    """
    Builds the page model for a fragment.

    Args:
        html: Fragment HTML, ideally with images already inlined.
        title: Document title for the PDF metadata.

    Returns:
        PageModel with fixed margins and title/producer metadata.
    """
    soup = BeautifulSoup(html, "html.parser")
    content = _Translator().flow(soup.children)
    logger.debug(f"Page model built with {len(content)} top-level blocks")
    return PageModel(
        content=content,
        info={"title": title, "producer": DOCUMENT_PRODUCER},
    )
