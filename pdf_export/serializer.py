"""
PDF Serializer

Lays out a PageModel with reportlab platypus and returns the PDF bytes.
This is a SYNCHRONOUS, CPU-bound function; call it through
run_in_threadpool from async code.
"""

# Standard library
import io
import logging
from typing import Dict, List
from xml.sax.saxutils import escape

# Third-party
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.utils import ImageReader
from reportlab.platypus import (
    Flowable,
    HRFlowable,
    Image,
    Indenter,
    ListFlowable,
    ListItem,
    Paragraph,
    Preformatted,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

# Local application
from pdf_export.page_model import Block, PageModel, TextRun
from pdf_export.styles import STYLE_TABLE, BlockStyle

# Configure logging
logger = logging.getLogger(__name__)

MAX_IMAGE_HEIGHT = 600
CODE_LINE_LENGTH = 90
EXTERNAL_LINK_PREFIXES = ("http://", "https://", "mailto:")


def _font_name(style: BlockStyle) -> str:
    if style.monospace:
        return "Courier"
    if style.bold and style.italic:
        return "Helvetica-BoldOblique"
    if style.bold:
        return "Helvetica-Bold"
    if style.italic:
        return "Helvetica-Oblique"
    return "Helvetica"


def build_paragraph_styles() -> Dict[str, ParagraphStyle]:
    """Creates one reportlab ParagraphStyle per entry of the style table."""
    styles: Dict[str, ParagraphStyle] = {}
    for name, style in STYLE_TABLE.items():
        styles[name] = ParagraphStyle(
            name=name,
            fontName=_font_name(style),
            fontSize=style.font_size,
            leading=style.font_size * 1.3,
            spaceBefore=style.margin_top,
            spaceAfter=style.margin_bottom,
            textColor=colors.HexColor(style.color),
            backColor=colors.HexColor(style.background)
            if style.background and style.monospace else None,
            borderPadding=4 if style.monospace else 0,
        )
    return styles


def runs_to_markup(runs: List[TextRun]) -> str:
    """
    Converts text runs into reportlab paragraph markup.

    Args:
        runs: Inline runs of one block.

    Returns:
        Markup string with escaped text.
    """
    parts: List[str] = []
    for run in runs:
        if run.text == "\n":
            parts.append("<br/>")
            continue
        text = escape(run.text).replace("\n", "<br/>")
        if run.code:
            text = f'<font face="Courier">{text}</font>'
        if run.math or run.italic:
            text = f"<i>{text}</i>"
        if run.bold:
            text = f"<b>{text}</b>"
        if run.strike:
            text = f"<strike>{text}</strike>"
        # reportlab rejects links to undefined in-document destinations.
        if run.link and run.link.startswith(EXTERNAL_LINK_PREFIXES):
            href = escape(run.link, {'"': "&quot;"})
            text = f'<a href="{href}" color="blue">{text}</a>'
        parts.append(text)
    return "".join(parts)


class _Serializer:
    """Converts blocks into flowables."""

    def __init__(self, available_width: float) -> None:
        self._styles = build_paragraph_styles()
        self._width = available_width

    def flowables(self, blocks: List[Block], paragraph_style: str = "paragraph") -> List[Flowable]:
        out: List[Flowable] = []
        for block in blocks:
            out.extend(self._block(block, paragraph_style))
        return out

    def _block(self, block: Block, paragraph_style: str) -> List[Flowable]:
        if block.kind in ("heading", "paragraph", "placeholder"):
            style_name = block.style if block.kind == "heading" else paragraph_style
            if not block.runs:
                return []
            return [Paragraph(runs_to_markup(block.runs), self._styles[style_name])]
        if block.kind == "list":
            return [self._list(block), Spacer(1, STYLE_TABLE["list"].margin_bottom)]
        if block.kind == "table":
            return [self._table(block), Spacer(1, STYLE_TABLE["table"].margin_bottom)]
        if block.kind == "code":
            return [
                Preformatted(block.text, self._styles["code"], maxLineLength=CODE_LINE_LENGTH),
                Spacer(1, STYLE_TABLE["code"].margin_bottom),
            ]
        if block.kind == "blockquote":
            indent = STYLE_TABLE["blockquote"].indent
            return [
                Indenter(left=indent),
                *self.flowables(block.children, paragraph_style="blockquote"),
                Indenter(left=-indent),
            ]
        if block.kind == "rule":
            return [HRFlowable(width="100%", thickness=0.5, color=colors.grey,
                               spaceBefore=6, spaceAfter=6)]
        if block.kind == "image":
            return [self._image(block, paragraph_style)]
        logger.warning(f"Unknown block kind skipped: {block.kind}")
        return []

    def _list(self, block: Block) -> ListFlowable:
        items = [ListItem(self.flowables(item) or [Spacer(1, 0)]) for item in block.items]
        kwargs = {"bulletType": "1", "start": block.start} if block.ordered else {"bulletType": "bullet"}
        return ListFlowable(
            items,
            leftIndent=STYLE_TABLE["list"].indent,
            bulletFontSize=STYLE_TABLE["list"].font_size,
            **kwargs,
        )

    def _table(self, block: Block) -> Table:
        column_count = max((len(row) for row in block.rows), default=1) or 1
        cell_style = ParagraphStyle(
            name="table-cell",
            parent=self._styles["paragraph"],
            fontSize=STYLE_TABLE["table"].font_size,
            leading=STYLE_TABLE["table"].font_size * 1.3,
            spaceBefore=0,
            spaceAfter=0,
        )
        data = []
        for row in block.rows:
            cells = [Paragraph(runs_to_markup(cell), cell_style) for cell in row]
            cells.extend([""] * (column_count - len(cells)))
            data.append(cells)

        # Rows taller than a page are split between pages.
        table = Table(data, colWidths=[self._width / column_count] * column_count,
                      repeatRows=block.header_rows, splitInRow=1)
        commands = [
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ]
        if block.header_rows:
            commands.append(
                ("BACKGROUND", (0, 0), (-1, block.header_rows - 1),
                 colors.HexColor(STYLE_TABLE["table"].background))
            )
        table.setStyle(TableStyle(commands))
        return table

    def _image(self, block: Block, paragraph_style: str) -> Flowable:
        payload = block.image.payload
        try:
            width, height = ImageReader(io.BytesIO(payload)).getSize()
        except (OSError, ValueError) as e:
            # SVG and other formats reportlab cannot rasterize.
            logger.warning(f"Cannot embed {block.image.mime_type} image: {e}")
            markup = runs_to_markup([TextRun(f"[Image: {block.text}]", italic=True)])
            return Paragraph(markup, self._styles[paragraph_style])

        scale = min(1.0, self._width / width, MAX_IMAGE_HEIGHT / height)
        return Image(io.BytesIO(payload), width=width * scale, height=height * scale)


def serialize_pdf(model: PageModel) -> bytes:
    """
    Serializes a page model to PDF bytes.

    Args:
        model: PageModel to lay out.

    Returns:
        PDF document bytes.
    """
    left, top, right, bottom = model.page_margins
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=left,
        topMargin=top,
        rightMargin=right,
        bottomMargin=bottom,
        title=model.info.get("title", ""),
        producer=model.info.get("producer", ""),
        creator=model.info.get("producer", ""),
    )
    story = _Serializer(doc.width).flowables(model.content)
    if not story:
        story = [Spacer(1, 0)]
    doc.build(story)
    logger.info(f"PDF serialized: {len(story)} flowables, {buffer.tell()} bytes")
    return buffer.getvalue()
