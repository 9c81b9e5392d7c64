"""
Runtime Configuration

Loads config.env and exposes the settings shared by the render service,
the asset inliner and the editor export flow.
"""

# Standard library
import logging
import os
from dataclasses import dataclass
from typing import Optional

# Third-party
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# 2 MiB ceiling applied to render requests before and after reading the body.
MAX_HTML_BYTES = 2 * 1024 * 1024

# Sent with every render service response, errors included.
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

DEFAULT_RENDER_TIMEOUT_MS = 30_000
DEFAULT_IMAGE_FETCH_TIMEOUT = 15.0
DEFAULT_REMOTE_RENDER_TIMEOUT = 60.0


def _is_true(name: str, default: str = "false") -> bool:
    """Parse boolean-like env vars."""
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _get_float(name: str, default: float) -> float:
    """Parse a float env var, falling back to the default on bad input."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("%s=%r is not a number; using %s", name, raw, default)
        return default


def load_environment() -> None:
    """Load environment variables from config.env at the project root."""
    project_root = os.path.dirname(os.path.dirname(__file__))
    dotenv_path = os.path.join(project_root, "config.env")
    load_dotenv(dotenv_path=dotenv_path)


@dataclass(frozen=True)
class Settings:
    """Snapshot of environment-driven settings."""

    pdf_render_endpoint: Optional[str] = None
    browser_ws_endpoint: Optional[str] = None
    render_timeout_ms: float = DEFAULT_RENDER_TIMEOUT_MS
    image_fetch_timeout: float = DEFAULT_IMAGE_FETCH_TIMEOUT
    remote_render_timeout: float = DEFAULT_REMOTE_RENDER_TIMEOUT
    use_fake_providers: bool = False
    log_level: str = "INFO"


def get_settings() -> Settings:
    """
    Builds a Settings snapshot from the current environment.

    Empty strings are treated as unset, so `PDF_RENDER_ENDPOINT=` in
    config.env switches the editor back to native print.
    """
    return Settings(
        pdf_render_endpoint=os.getenv("PDF_RENDER_ENDPOINT", "").strip() or None,
        browser_ws_endpoint=os.getenv("BROWSER_WS_ENDPOINT", "").strip() or None,
        render_timeout_ms=_get_float("RENDER_TIMEOUT_MS", DEFAULT_RENDER_TIMEOUT_MS),
        image_fetch_timeout=_get_float("IMAGE_FETCH_TIMEOUT", DEFAULT_IMAGE_FETCH_TIMEOUT),
        remote_render_timeout=_get_float(
            "REMOTE_RENDER_TIMEOUT", DEFAULT_REMOTE_RENDER_TIMEOUT
        ),
        use_fake_providers=_is_true("TEST_MODE") or _is_true("USE_FAKE_PROVIDERS"),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
