"""Schemas for the PDF render endpoint."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, StrictStr, field_validator

DEFAULT_FILENAME = "document.pdf"


class RenderPdfRequest(BaseModel):
    """JSON body accepted by POST /render-pdf."""

    html: StrictStr = Field(..., min_length=1, description="Complete HTML document")
    filename: str = Field(
        default=DEFAULT_FILENAME, description="Download name for the PDF"
    )

    @field_validator("filename", mode="before")
    @classmethod
    def _default_filename(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return DEFAULT_FILENAME


class ErrorResponse(BaseModel):
    """Error envelope returned with every non-2xx response."""

    error: str
    details: str | None = None
