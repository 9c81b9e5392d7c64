"""
Local PDF Assembler

Markdown → rendered fragment → inlined images → page model → PDF bytes,
without any remote rendering service.
"""

# Standard library
import logging
from datetime import date
from typing import Optional

# Third-party
import httpx
from fastapi.concurrency import run_in_threadpool

# Local application
from asset_inliner.inliner import inline_images
from core.config import DEFAULT_IMAGE_FETCH_TIMEOUT
from core.errors import EmptyDocumentError
from markdown_render.renderer import render_markdown
from pdf_export.page_model import build_page_model
from pdf_export.schemas import PdfArtifact, pdf_filename
from pdf_export.serializer import serialize_pdf
from pdf_export.styles import DOCUMENT_TITLE

# Configure logging
logger = logging.getLogger(__name__)

EMPTY_DOCUMENT_NOTICE = "Nothing to export: the document is empty."


async def assemble_pdf(
    markdown_text: str,
    *,
    base_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
    title: str = DOCUMENT_TITLE,
    today: Optional[date] = None,
    image_timeout: float = DEFAULT_IMAGE_FETCH_TIMEOUT,
) -> PdfArtifact:
    """
    Assembles a PDF locally from Markdown.

    Args:
        markdown_text: Source document.
        base_url: Location of the document, for relative image sources.
        client: Optional httpx client for image retrieval.
        title: PDF metadata title.
        today: Generation date used in the filename (defaults to today).
        image_timeout: Per-image retrieval timeout in seconds.

    Returns:
        PdfArtifact carrying any image warnings. Warnings never prevent
        the artifact from being produced.

    Raises:
        EmptyDocumentError: If the document has no content.
    """
    if not markdown_text or not markdown_text.strip():
        raise EmptyDocumentError(EMPTY_DOCUMENT_NOTICE)

    fragment = render_markdown(markdown_text)
    outcome = await inline_images(
        fragment.html, base_url=base_url, client=client, timeout=image_timeout
    )
    if outcome.warnings:
        logger.warning(f"{len(outcome.warnings)} image(s) could not be embedded")

    model = build_page_model(outcome.html, title=title)
    content = await run_in_threadpool(serialize_pdf, model)

    artifact = PdfArtifact(
        content=content,
        filename=pdf_filename(today),
        warnings=tuple(outcome.warnings),
    )
    logger.info(f"Local PDF assembled: {artifact.filename} ({artifact.size} bytes)")
    return artifact
