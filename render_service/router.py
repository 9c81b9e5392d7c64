"""
PDF Render Router

Stateless endpoint that turns a complete HTML document into PDF bytes with
a headless browser. Served at both `/` and `/render-pdf`.
"""

# Standard library
import json
import logging
import time

# Third-party
from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from pydantic import ValidationError

# Local application
from core.config import MAX_HTML_BYTES, Settings
from core.errors import ServiceError
from render_service.browser import BrowserProvider, render_html_to_pdf
from render_service.schemas import RenderPdfRequest

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter()


def get_browser_provider(request: Request) -> BrowserProvider:
    """Returns the provider selected at startup."""
    return request.app.state.browser_provider


def get_render_settings(request: Request) -> Settings:
    """Returns the settings snapshot taken at startup."""
    return request.app.state.settings


def _check_declared_length(content_length: str | None) -> None:
    """
    Rejects oversize bodies from the Content-Length header alone.

    Raises:
        ServiceError: 413 if the declared length exceeds the ceiling.
    """
    if not content_length:
        return
    try:
        declared = int(content_length)
    except ValueError:
        return
    if declared > MAX_HTML_BYTES:
        raise ServiceError(
            status_code=413,
            message="Payload too large",
            details=f"Request body must be <= {MAX_HTML_BYTES} bytes",
        )


def parse_render_request(raw_body: bytes) -> RenderPdfRequest:
    """
    Parses and validates a render request body.

    The HTML byte length is re-checked here because Content-Length can be
    missing or wrong.

    Args:
        raw_body: Request body bytes.

    Returns:
        Validated RenderPdfRequest with a normalized filename.

    Raises:
        ServiceError: 400 for bad JSON or a missing/invalid `html` field,
            413 if the HTML exceeds the ceiling.
    """
    try:
        payload = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ServiceError(status_code=400, message="Invalid JSON body")

    try:
        request = RenderPdfRequest.model_validate(payload)
    except ValidationError:
        raise ServiceError(
            status_code=400,
            message="`html` field is required and must be a non-empty string",
        )

    if len(request.html.encode("utf-8")) > MAX_HTML_BYTES:
        raise ServiceError(
            status_code=413,
            message="HTML too large",
            details=f"Rendered HTML must be <= {MAX_HTML_BYTES} bytes",
        )
    return request


def _content_disposition(filename: str) -> str:
    """Builds an attachment header value that is safe to send as latin-1."""
    cleaned = "".join(ch for ch in filename if ch.isprintable() and ch != '"')
    cleaned = cleaned.encode("latin-1", "replace").decode("latin-1")
    return f'attachment; filename="{cleaned}"'


@router.options("/")
@router.options("/render-pdf")
async def render_pdf_preflight() -> Response:
    """CORS preflight: no body, CORS headers added by middleware."""
    return Response(status_code=204)


@router.post("/")
@router.post("/render-pdf")
async def render_pdf(
    request: Request,
    provider: BrowserProvider = Depends(get_browser_provider),
    settings: Settings = Depends(get_render_settings),
) -> Response:
    """
    Renders the posted HTML document to PDF.

    Pipeline:
    1. Reject by declared Content-Length before reading the body
    2. Parse JSON, validate `html`, re-check the decoded size
    3. Render in a fresh browser session (always released)

    Returns:
        PDF bytes as an attachment.

    Raises:
        ServiceError: 400/413 for invalid input, 500 if rendering fails.
    """
    _check_declared_length(request.headers.get("content-length"))

    raw_body = await request.body()
    render_request = parse_render_request(raw_body)

    start_time = time.perf_counter()
    try:
        pdf_bytes = await render_html_to_pdf(
            provider, render_request.html, timeout_ms=settings.render_timeout_ms
        )
    except Exception as e:
        logger.error(f"Render error: {e}", exc_info=True)
        raise ServiceError(status_code=500, message="Failed to render PDF")

    logger.info(
        f"Rendered {render_request.filename}: {len(pdf_bytes)} bytes "
        f"in {time.perf_counter() - start_time:.2f}s"
    )
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": _content_disposition(render_request.filename)},
    )
