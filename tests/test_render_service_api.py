"""Contract tests for the PDF render endpoint."""

import json
from contextlib import contextmanager
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from core.app_factory import create_app
from core.config import MAX_HTML_BYTES
from render_service.browser import MINIMAL_PDF, FakeBrowserProvider
from render_service.router import get_browser_provider

HTML_DOC = "<!doctype html><html><body><h1>Hi</h1></body></html>"


@contextmanager
def _build_client(provider: Optional[FakeBrowserProvider] = None):
    """Builds a test client backed by a fake browser provider."""
    app = create_app()
    provider = provider or FakeBrowserProvider()
    app.dependency_overrides[get_browser_provider] = lambda: provider
    with TestClient(app) as client:
        yield client
    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
def _test_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEST_MODE", "true")


def _assert_cors(response) -> None:
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"
    assert response.headers["access-control-allow-headers"] == "Content-Type"


@pytest.mark.parametrize("path", ["/", "/render-pdf"])
def test_preflight_returns_204_without_body(path: str) -> None:
    with _build_client() as client:
        response = client.options(path)

        assert response.status_code == 204
        assert response.content == b""
        _assert_cors(response)


@pytest.mark.parametrize("path", ["/", "/render-pdf"])
def test_render_returns_pdf_attachment(path: str) -> None:
    """A valid document renders to PDF bytes with the requested filename."""
    provider = FakeBrowserProvider()
    with _build_client(provider) as client:
        response = client.post(path, json={"html": HTML_DOC, "filename": "report.pdf"})

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == 'attachment; filename="report.pdf"'
        assert response.content == MINIMAL_PDF
        assert response.content.startswith(b"%PDF")
        _assert_cors(response)

    assert provider.loaded_html == [HTML_DOC]
    assert provider.wait_until == "networkidle"
    assert provider.pdf_options == {"print_background": True, "prefer_css_page_size": True}
    assert provider.acquired == provider.released == 1
    assert provider.pages_opened == provider.pages_closed == 1


@pytest.mark.parametrize(
    "filename,expected",
    [(None, "document.pdf"), ("", "document.pdf"), ("  notes.pdf  ", "notes.pdf"), (42, "document.pdf")],
)
def test_filename_is_normalized(filename, expected) -> None:
    body = {"html": HTML_DOC}
    if filename is not None:
        body["filename"] = filename

    with _build_client() as client:
        response = client.post("/render-pdf", json=body)

        assert response.status_code == 200
        assert response.headers["content-disposition"] == f'attachment; filename="{expected}"'


def test_get_is_method_not_allowed() -> None:
    with _build_client() as client:
        response = client.get("/render-pdf")

        assert response.status_code == 405
        assert response.headers["allow"] == "POST"
        assert response.json() == {
            "error": "Method Not Allowed",
            "details": "Use POST for this endpoint",
        }
        _assert_cors(response)


def test_unknown_path_is_not_found() -> None:
    with _build_client() as client:
        response = client.post("/unknown", json={"html": HTML_DOC})

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found", "details": "Unsupported path"}


def test_docs_are_not_served() -> None:
    with _build_client() as client:
        assert client.get("/docs").status_code == 404
        assert client.get("/openapi.json").status_code == 404


def test_malformed_json_is_rejected() -> None:
    with _build_client() as client:
        response = client.post(
            "/render-pdf", content=b"{not json", headers={"content-type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON body"}


@pytest.mark.parametrize(
    "body",
    [{}, {"html": ""}, {"html": 123}, {"html": None}, [], "just a string"],
)
def test_missing_or_invalid_html_is_rejected(body) -> None:
    provider = FakeBrowserProvider()
    with _build_client(provider) as client:
        response = client.post("/render-pdf", json=body)

        assert response.status_code == 400
        assert response.json() == {
            "error": "`html` field is required and must be a non-empty string"
        }
    assert provider.acquired == 0


def test_oversize_body_is_rejected_before_rendering() -> None:
    """A 3 MiB document is refused without acquiring a browser."""
    provider = FakeBrowserProvider()
    html = "x" * (3 * 1024 * 1024)
    with _build_client(provider) as client:
        response = client.post("/render-pdf", json={"html": html})

        assert response.status_code == 413
        assert response.json() == {
            "error": "Payload too large",
            "details": f"Request body must be <= {MAX_HTML_BYTES} bytes",
        }
        _assert_cors(response)
    assert provider.acquired == 0


def test_under_reported_content_length_is_rechecked() -> None:
    """The decoded HTML size is checked even when Content-Length lies."""
    provider = FakeBrowserProvider()
    body = json.dumps({"html": "é" * (MAX_HTML_BYTES // 2 + 1)}).encode("utf-8")
    with _build_client(provider) as client:
        response = client.post(
            "/render-pdf",
            content=body,
            headers={"content-type": "application/json", "content-length": "10"},
        )

        assert response.status_code == 413
        assert response.json() == {
            "error": "HTML too large",
            "details": f"Rendered HTML must be <= {MAX_HTML_BYTES} bytes",
        }
    assert provider.acquired == 0


@pytest.mark.parametrize("fail_on", ["set_content", "pdf"])
def test_render_failure_releases_browser(fail_on: str) -> None:
    provider = FakeBrowserProvider(fail_on=fail_on)
    with _build_client(provider) as client:
        response = client.post("/render-pdf", json={"html": HTML_DOC})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to render PDF"}
        _assert_cors(response)
    assert provider.acquired == provider.released == 1
    assert provider.pages_opened == provider.pages_closed == 1


def test_browser_unavailable_is_a_render_failure() -> None:
    provider = FakeBrowserProvider(fail_on="acquire")
    with _build_client(provider) as client:
        response = client.post("/render-pdf", json={"html": HTML_DOC})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to render PDF"}
    assert provider.released == 0


def test_request_id_is_echoed() -> None:
    with _build_client() as client:
        response = client.post(
            "/render-pdf", json={"html": HTML_DOC}, headers={"X-Request-Id": "abc-123"}
        )

        assert response.headers["x-request-id"] == "abc-123"


def test_lifespan_selects_fake_provider_in_test_mode() -> None:
    app = create_app()
    with TestClient(app):
        assert isinstance(app.state.browser_provider, FakeBrowserProvider)


def test_trailing_slash_is_not_redirected() -> None:
    with _build_client() as client:
        response = client.post("/render-pdf/", json={"html": HTML_DOC}, follow_redirects=False)

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found", "details": "Unsupported path"}


def test_unhandled_error_keeps_cors_headers() -> None:
    """Errors raised outside the render handler still carry CORS headers."""
    def broken_provider():
        raise RuntimeError("provider wiring failed")

    app = create_app()
    app.dependency_overrides[get_browser_provider] = broken_provider
    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.post("/render-pdf", json={"html": HTML_DOC})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        _assert_cors(response)
    app.dependency_overrides = {}
