"""
Unit Tests for the Local PDF Assembler

Runs the whole local pipeline with mocked image retrieval.
"""

# Standard library
import base64
from datetime import date

# Third-party
import httpx
import pytest

# Local application
from core.errors import EmptyDocumentError
from markdown_render.renderer import render_markdown
from pdf_export.assembler import EMPTY_DOCUMENT_NOTICE, assemble_pdf
from pdf_export.page_model import build_page_model
from pdf_export.schemas import PdfArtifact, pdf_filename
from pdf_export.serializer import serialize_pdf


class TestPdfFilename:
    """Tests for the download filename."""

    def test_uses_iso_date(self):
        assert pdf_filename(date(2024, 1, 2)) == "markdown-2024-01-02.pdf"

    def test_defaults_to_today(self):
        assert pdf_filename() == f"markdown-{date.today().isoformat()}.pdf"


class TestSerializePdf:
    """Tests for the reportlab serializer."""

    def test_produces_pdf_bytes(self, sample_markdown):
        content = serialize_pdf(build_page_model(render_markdown(sample_markdown).html))

        assert content.startswith(b"%PDF")
        assert b"Markdown Document" in content

    def test_empty_model_still_serializes(self):
        assert serialize_pdf(build_page_model("")).startswith(b"%PDF")

    def test_undecodable_image_falls_back_to_text(self):
        svg = base64.b64encode(b"<svg xmlns='http://www.w3.org/2000/svg'/>").decode()
        html = f'<p><img src="data:image/svg+xml;base64,{svg}" alt="vector"></p>'

        assert serialize_pdf(build_page_model(html)).startswith(b"%PDF")


class TestAssemblePdf:
    """Tests for assemble_pdf."""

    @pytest.mark.asyncio
    async def test_assembles_document(self, sample_markdown):
        artifact = await assemble_pdf(sample_markdown, today=date(2024, 1, 2))

        assert isinstance(artifact, PdfArtifact)
        assert artifact.content.startswith(b"%PDF")
        assert artifact.filename == "markdown-2024-01-02.pdf"
        assert artifact.size == len(artifact.content)
        assert artifact.warnings == ()

    @pytest.mark.asyncio
    async def test_table_row_taller_than_a_page(self):
        """A table cell that overflows a page still produces a PDF."""
        markdown = "| a | b |\n|---|---|\n| " + "word " * 6000 + "| x |\n"

        artifact = await assemble_pdf(markdown)

        assert artifact.content.startswith(b"%PDF")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "  \n  "])
    async def test_empty_document_is_rejected(self, text):
        with pytest.raises(EmptyDocumentError) as exc_info:
            await assemble_pdf(text)

        assert str(exc_info.value) == EMPTY_DOCUMENT_NOTICE

    @pytest.mark.asyncio
    async def test_image_failures_become_warnings(self, png_bytes, image_client_factory):
        markdown = "# Pics\n\n![good](https://img.test/a.png)\n\n![bad](https://img.test/b.png)"
        client = image_client_factory({
            "https://img.test/a.png": lambda request: httpx.Response(
                200, content=png_bytes, headers={"content-type": "image/png"}
            ),
            "https://img.test/b.png": lambda request: httpx.Response(500),
        })

        async with client:
            artifact = await assemble_pdf(markdown, client=client)

        assert artifact.content.startswith(b"%PDF")
        assert artifact.warnings == ("Image could not be loaded: bad (HTTP 500)",)
