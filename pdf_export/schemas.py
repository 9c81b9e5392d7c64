"""Artifacts produced by the PDF export paths."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class PdfArtifact:
    """Finished PDF bytes plus the filename offered for download."""

    content: bytes
    filename: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def size(self) -> int:
        return len(self.content)


def pdf_filename(today: date | None = None) -> str:
    """Returns `markdown-<YYYY-MM-DD>.pdf` for the local generation date."""
    return f"markdown-{(today or date.today()).isoformat()}.pdf"
