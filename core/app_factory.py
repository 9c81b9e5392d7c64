"""
FastAPI application factory and lifecycle wiring.

Keeps app assembly separate from route/business modules for easier maintenance.
"""

# Standard library
import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

# Third-party
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from core.config import CORS_HEADERS, get_settings, load_environment
from core.errors import (
    ServiceError,
    http_exception_handler,
    service_error_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    """Configure application logging and key environment visibility."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _register_middlewares(app: FastAPI) -> None:
    """Register middleware components."""
    @app.middleware("http")
    async def cors_headers_middleware(
        request: Request, call_next
    ) -> Response:
        # Preflight must answer 204 with no body, so CORSMiddleware's
        # 200 "OK" preflight response does not fit here.
        response = await call_next(request)
        for name, value in CORS_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    @app.middleware("http")
    async def request_id_middleware(
        request: Request, call_next
    ) -> Response:
        request_id = request.headers.get("X-Request-Id", str(uuid.uuid4()))
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-Id"] = request_id
        return response


def _register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def _register_routers(app: FastAPI) -> None:
    """Register the render endpoint at `/` and `/render-pdf`."""
    from render_service.router import router as render_router

    app.include_router(render_router, tags=["PDF Rendering"])


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """FastAPI lifespan hook: pick the browser provider once per process."""
    from render_service.browser import get_browser_provider

    logger.info("=== Render service startup ===")
    settings = app.state.settings
    if getattr(app.state, "browser_provider", None) is None:
        app.state.browser_provider = get_browser_provider(settings)
    logger.info(
        "Browser provider: %s", type(app.state.browser_provider).__name__
    )
    yield
    logger.info("=== Render service shutdown ===")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    load_environment()
    settings = get_settings()
    _configure_logging(settings.log_level)
    logger.info("TEST_MODE/USE_FAKE_PROVIDERS: %s", settings.use_fake_providers)
    logger.info(
        "BROWSER_WS_ENDPOINT: %s",
        "Configured" if settings.browser_ws_endpoint else "Not set (local Chromium)",
    )

    app = FastAPI(
        title="Markdown PDF Render API",
        description="Renders complete HTML documents to PDF with headless Chromium",
        version="1.0.0",
        lifespan=app_lifespan,
        redirect_slashes=False,
        openapi_url=None,
        docs_url=None,
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.browser_provider = None
    _register_middlewares(app)
    _register_error_handlers(app)
    _register_routers(app)
    return app
