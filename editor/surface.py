"""
Editor Surface

The UI capabilities the editor session drives. The conversion pipeline
never touches these directly; only EditorSession does.
"""

# Standard library
import logging
import os
import tempfile
import webbrowser
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

# Local application
from pdf_export.schemas import PdfArtifact

# Configure logging
logger = logging.getLogger(__name__)


class StatusKind(str, Enum):
    """Severity of a status message."""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@runtime_checkable
class EditorSurface(Protocol):
    """Capabilities an editor front end provides to the session."""

    def show_preview(self, html: str) -> None:
        """Replace the preview pane content."""

    def show_status(self, message: str, kind: StatusKind) -> None:
        """Show a short status message."""

    def offer_download(self, artifact: PdfArtifact) -> None:
        """Hand a finished PDF to the user."""

    def print_document(self, html: str) -> None:
        """Open the host's native print/export facility for a document."""


class DirectorySurface:
    """
    Headless surface that saves downloads into a directory.

    Printing writes the HTML document next to the downloads and opens it
    in the platform browser, whose print dialog does the rest.
    """

    def __init__(self, output_dir: str, open_browser: bool = True) -> None:
        self.output_dir = Path(output_dir)
        self.open_browser = open_browser
        self.preview_html: Optional[str] = None
        self.last_status: Optional[tuple] = None

    def show_preview(self, html: str) -> None:
        self.preview_html = html

    def show_status(self, message: str, kind: StatusKind) -> None:
        self.last_status = (message, kind)
        level = logging.ERROR if kind is StatusKind.ERROR else logging.INFO
        logger.log(level, message)

    def offer_download(self, artifact: PdfArtifact) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        target = self.output_dir / os.path.basename(artifact.filename)
        target.write_bytes(artifact.content)
        logger.info(f"Saved {artifact.filename} to {target}")
        return target

    def print_document(self, html: str) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        fd, path = tempfile.mkstemp(suffix=".html", prefix="print-", dir=self.output_dir)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(html)
        if self.open_browser:
            webbrowser.open(Path(path).resolve().as_uri())
        return Path(path)
