"""
Remote Render Client

Posts a complete HTML document to the render service and returns the PDF.
"""

# Standard library
import logging
from typing import Optional

# Third-party
import httpx

# Local application
from core.config import DEFAULT_REMOTE_RENDER_TIMEOUT
from core.errors import RemoteRenderError
from pdf_export.schemas import PdfArtifact

# Configure logging
logger = logging.getLogger(__name__)

ERROR_BODY_PREVIEW = 200


class RemoteRenderClient:
    """
    HTTP client for the PDF render endpoint.

    Attributes:
        endpoint: Full URL of the render endpoint.
        _timeout: Request timeout in seconds.
        _client: Optional shared httpx client (left open).
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = DEFAULT_REMOTE_RENDER_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.endpoint = endpoint
        self._timeout = timeout
        self._client = client

    async def render(self, html: str, filename: str) -> PdfArtifact:
        """
        Requests a PDF rendering of an HTML document.

        Args:
            html: Complete HTML document.
            filename: Desired download filename.

        Returns:
            PdfArtifact with the returned bytes.

        Raises:
            RemoteRenderError: On transport failure, an invalid endpoint URL
                or a non-success status; the message includes the start of
                the response body.
        """
        logger.info(f"Requesting remote render of {filename} ({len(html)} chars)")
        try:
            if self._client is not None:
                response = await self._post(self._client, html, filename)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await self._post(client, html, filename)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Render service unreachable: {e}")
            raise RemoteRenderError(f"Render service request failed: {e}") from e

        if not response.is_success:
            text = response.text
            logger.error(f"Render service error response: {response.status_code} {text[:500]}")
            suffix = f": {text[:ERROR_BODY_PREVIEW]}" if text else ""
            raise RemoteRenderError(
                f"Render service returned HTTP {response.status_code}{suffix}",
                status_code=response.status_code,
            )

        return PdfArtifact(content=response.content, filename=filename)

    async def _post(
        self, client: httpx.AsyncClient, html: str, filename: str
    ) -> httpx.Response:
        return await client.post(
            self.endpoint,
            json={"html": html, "filename": filename},
            timeout=self._timeout,
        )
