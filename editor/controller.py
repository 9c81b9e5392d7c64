"""
Editor Session Controller

Event handlers for one editing session: edits, preview, theme and scroll
preferences, reset, and the two export paths (remote render service with a
native-print fallback, or local PDF assembly).
"""

# Standard library
import logging
from html import escape
from typing import Callable, Optional

# Third-party
import httpx

# Local application
from core.config import Settings, get_settings
from core.errors import EmptyDocumentError, RemoteRenderError
from editor.session import (
    DEFAULT_INPUT,
    load_session,
    save_content,
    save_scroll_sync,
    save_theme,
)
from editor.storage import PreferenceStore, SafeStore
from editor.surface import EditorSurface, StatusKind
from markdown_render.renderer import render_markdown
from markdown_render.schemas import RenderedFragment
from pdf_export.assembler import assemble_pdf
from pdf_export.schemas import PdfArtifact, pdf_filename
from render_service.client import RemoteRenderClient
from render_service.document import build_html_document
from render_service.themes import ThemeId, normalize_theme

# Configure logging
logger = logging.getLogger(__name__)

RESET_CONFIRMATION = "Are you sure you want to reset? Your changes will be lost."


def error_state_html(message: str) -> str:
    """Preview content shown when rendering fails."""
    return f'<p class="error-state">Error: {escape(message)}</p>'


class EditorSession:
    """
    Drives the conversion pipeline from discrete editor events.

    Attributes:
        state: Current SessionState, loaded from the store at creation.
    """

    def __init__(
        self,
        surface: EditorSurface,
        store: PreferenceStore,
        settings: Optional[Settings] = None,
        render_client: Optional[RemoteRenderClient] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
    ) -> None:
        self._surface = surface
        self._store = SafeStore(store)
        self._settings = settings or get_settings()
        self._http_client = http_client
        self._base_url = base_url
        if render_client is None and self._settings.pdf_render_endpoint:
            render_client = RemoteRenderClient(
                self._settings.pdf_render_endpoint,
                timeout=self._settings.remote_render_timeout,
                client=http_client,
            )
        self._render_client = render_client
        self.state = load_session(self._store)
        self.fragment: Optional[RenderedFragment] = None

    def start(self) -> None:
        """Shows the loaded document without marking it edited."""
        self.state.has_edited = False
        self.render_preview(self.state.content)

    # --- Editing ---

    def render_preview(self, markdown_text: str) -> RenderedFragment:
        fragment = render_markdown(markdown_text)
        self._surface.show_preview(fragment.html)
        self.fragment = fragment
        return fragment

    def on_edit(self, markdown_text: str) -> None:
        """Handles a content change from the editor widget."""
        self.state.content = markdown_text
        if markdown_text != DEFAULT_INPUT:
            self.state.has_edited = True
        self.render_preview(markdown_text)
        save_content(self._store, markdown_text)

    def preview(self) -> None:
        """Explicit re-render; failures replace the pane with an error state."""
        try:
            self.render_preview(self.state.content)
            self._surface.show_status("Preview updated", StatusKind.SUCCESS)
        except Exception as e:
            logger.error(f"Preview error: {e}", exc_info=True)
            self._surface.show_status("Error generating preview", StatusKind.ERROR)
            self._surface.show_preview(error_state_html(str(e)))

    def reset(self, confirm: Callable[[str], bool]) -> bool:
        """
        Restores the default document.

        Args:
            confirm: Asked before discarding edits; returning False aborts.

        Returns:
            True if the document was reset.
        """
        changed = self.state.content != DEFAULT_INPUT
        if (self.state.has_edited or changed) and not confirm(RESET_CONFIRMATION):
            return False
        self.state.content = DEFAULT_INPUT
        self.start()
        save_content(self._store, DEFAULT_INPUT)
        return True

    # --- Preferences ---

    def on_theme_change(self, value: Optional[str]) -> ThemeId:
        self.state.theme = normalize_theme(value)
        save_theme(self._store, self.state.theme)
        return self.state.theme

    def on_scroll_sync_change(self, enabled: bool) -> None:
        self.state.scroll_sync = bool(enabled)
        save_scroll_sync(self._store, self.state.scroll_sync)

    def scroll_target(
        self,
        scroll_top: float,
        scroll_height: float,
        viewport_height: float,
        preview_scroll_height: float,
        preview_client_height: float,
    ) -> Optional[float]:
        """
        Maps an editor scroll position onto the preview pane.

        Returns:
            Target preview offset, or None when scroll sync is off.
        """
        if not self.state.scroll_sync:
            return None
        max_scroll_top = max(scroll_height - viewport_height, 1)
        ratio = scroll_top / max_scroll_top
        return (preview_scroll_height - preview_client_height) * ratio

    # --- Export ---

    async def export_remote(self) -> Optional[PdfArtifact]:
        """
        Exports through the render service, or native print if none is set.

        Returns:
            The downloaded artifact, or None when printing natively or on
            failure (reported through the status line).
        """
        try:
            fragment = self.render_preview(self.state.content)
            document = build_html_document(fragment.html, self.state.theme)

            if self._render_client is None:
                self._surface.show_status(
                    "Render service not configured, using native print…", StatusKind.INFO
                )
                self._surface.print_document(document)
                return None

            self._surface.show_status("Generating PDF…", StatusKind.INFO)
            artifact = await self._render_client.render(document, pdf_filename())
        except RemoteRenderError as e:
            logger.error(f"PDF generation error: {e}")
            self._surface.show_status(f"Unable to generate PDF: {e}", StatusKind.ERROR)
            return None
        except Exception as e:
            logger.error(f"PDF export failed: {e}", exc_info=True)
            self._surface.show_status(f"Unable to generate PDF: {e}", StatusKind.ERROR)
            return None

        self._surface.offer_download(artifact)
        self._surface.show_status("PDF downloaded", StatusKind.SUCCESS)
        return artifact

    async def export_local(self) -> Optional[PdfArtifact]:
        """
        Exports with the local assembler.

        Returns:
            The downloaded artifact, or None if the document is empty or
            assembly failed.
        """
        try:
            artifact = await assemble_pdf(
                self.state.content,
                base_url=self._base_url,
                client=self._http_client,
                image_timeout=self._settings.image_fetch_timeout,
            )
        except EmptyDocumentError as e:
            self._surface.show_status(str(e), StatusKind.INFO)
            return None
        except Exception as e:
            logger.error(f"Local PDF assembly failed: {e}", exc_info=True)
            self._surface.show_status(f"Unable to generate PDF: {e}", StatusKind.ERROR)
            return None

        self._surface.offer_download(artifact)
        if artifact.warnings:
            self._surface.show_status(
                f"PDF downloaded with {len(artifact.warnings)} warning(s): "
                + "; ".join(artifact.warnings),
                StatusKind.INFO,
            )
        else:
            self._surface.show_status("PDF downloaded", StatusKind.SUCCESS)
        return artifact
