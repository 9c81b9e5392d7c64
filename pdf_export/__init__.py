"""
PDF Export Module

Local PDF assembly: page model, fixed styles and reportlab serialization.
"""

from pdf_export.assembler import EMPTY_DOCUMENT_NOTICE, assemble_pdf
from pdf_export.page_model import Block, PageModel, TextRun, build_page_model
from pdf_export.schemas import PdfArtifact, pdf_filename
from pdf_export.serializer import serialize_pdf

__all__ = [
    "Block",
    "EMPTY_DOCUMENT_NOTICE",
    "PageModel",
    "PdfArtifact",
    "TextRun",
    "assemble_pdf",
    "build_page_model",
    "pdf_filename",
    "serialize_pdf",
]
