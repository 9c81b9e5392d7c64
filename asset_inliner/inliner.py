"""
Asset Inliner

Replaces network-referenced images in an HTML fragment with self-contained
base64 data URIs. Every image is attempted exactly once, concurrently; a
failed image is swapped for an inline placeholder and reported as a
warning without affecting the others.
"""

# Standard library
import asyncio
import base64
import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from urllib.parse import urljoin, urlparse

# Third-party
import httpx
from bs4 import BeautifulSoup, Tag

# Local application
from core.config import DEFAULT_IMAGE_FETCH_TIMEOUT

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"
PLACEHOLDER_CLASS = "image-placeholder"

_EXTENSION_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
}


def guess_mime_type(url: str) -> str:
    """
    Guesses an image MIME type from the URL path extension.

    Args:
        url: Absolute or relative image URL.

    Returns:
        MIME type, or application/octet-stream for unknown extensions.
    """
    _, ext = os.path.splitext(urlparse(url).path)
    return _EXTENSION_MIME_TYPES.get(ext.lower(), DEFAULT_MIME_TYPE)


@dataclass(frozen=True)
class EmbeddedAsset:
    """Retrieved image payload tagged with its MIME type."""

    mime_type: str
    payload: bytes

    @property
    def data_uri(self) -> str:
        encoded = base64.b64encode(self.payload).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


@dataclass
class ImageReference:
    """An <img> node and the source it points at."""

    src: str
    alt: str
    node: Tag

    @property
    def is_embedded(self) -> bool:
        return self.src.startswith("data:")

    @property
    def label(self) -> str:
        return self.alt or self.src


@dataclass
class InliningOutcome:
    """Result of inlining one fragment's images."""

    html: str
    warnings: List[str] = field(default_factory=list)
    inlined: int = 0
    already_embedded: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.inlined + self.already_embedded + self.failed


class ImageRetrievalError(Exception):
    """Raised when one image cannot be fetched."""


def collect_image_references(soup: BeautifulSoup) -> List[ImageReference]:
    """Returns every <img> in document order."""
    return [
        ImageReference(src=(img.get("src") or "").strip(), alt=img.get("alt") or "", node=img)
        for img in soup.find_all("img")
    ]


def _build_placeholder(soup: BeautifulSoup, reference: ImageReference) -> Tag:
    placeholder = soup.new_tag(
        "span", attrs={"class": PLACEHOLDER_CLASS, "data-src": reference.src}
    )
    placeholder.string = f"[Image: {reference.label}]"
    return placeholder


class ImageInliner:
    """
    Fetches remote images and embeds them into a fragment.

    Attributes:
        _client: Optional shared httpx client. When omitted, one is opened
            for each batch and closed afterwards.
        _timeout: Per-retrieval timeout in seconds.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_IMAGE_FETCH_TIMEOUT,
    ) -> None:
        self._client = client
        self._timeout = timeout

    async def fetch_asset(
        self,
        client: httpx.AsyncClient,
        url: str,
    ) -> EmbeddedAsset:
        """
        Retrieves one image.

        Args:
            client: HTTP client to use.
            url: Absolute image URL.

        Returns:
            EmbeddedAsset with the declared or guessed MIME type.

        Raises:
            ImageRetrievalError: On transport errors, timeouts, invalid
                URLs and non-success statuses.
        """
        try:
            response = await client.get(url, timeout=self._timeout, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ImageRetrievalError(f"HTTP {e.response.status_code}") from e
        except httpx.TimeoutException as e:
            raise ImageRetrievalError("timed out") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ImageRetrievalError(str(e) or type(e).__name__) from e

        declared = response.headers.get("content-type", "").split(";")[0].strip()
        return EmbeddedAsset(
            mime_type=declared or guess_mime_type(url),
            payload=response.content,
        )

    async def _inline_one(
        self,
        client: httpx.AsyncClient,
        soup: BeautifulSoup,
        reference: ImageReference,
        base_url: Optional[str],
    ) -> Optional[str]:
        """Inlines one reference; returns a warning on failure."""
        url = urljoin(base_url or "", reference.src)
        try:
            asset = await self.fetch_asset(client, url)
        except ImageRetrievalError as e:
            logger.warning(f"Image retrieval failed for {url}: {e}")
            reference.node.replace_with(_build_placeholder(soup, reference))
            return f"Image could not be loaded: {reference.label} ({e})"

        reference.node["src"] = asset.data_uri
        logger.debug(f"Inlined {url} as {asset.mime_type} ({len(asset.payload)} bytes)")
        return None

    async def inline(
        self,
        html: str,
        base_url: Optional[str] = None,
    ) -> InliningOutcome:
        """
        Inlines every remote image in the fragment.

        Completes once each image has been attempted. Cancelling the caller
        cancels all outstanding retrievals.

        Args:
            html: HTML fragment.
            base_url: Location of the document, used to resolve relative
                image sources.

        Returns:
            InliningOutcome with the rewritten HTML and per-image warnings
            in document order.
        """
        soup = BeautifulSoup(html, "html.parser")
        references = collect_image_references(soup)
        embedded = [ref for ref in references if ref.is_embedded]
        remote = [ref for ref in references if not ref.is_embedded]

        if not remote:
            return InliningOutcome(html=html, already_embedded=len(embedded))

        logger.info(f"Inlining {len(remote)} remote image(s)...")

        if self._client is not None:
            results = await self._run_batch(self._client, soup, remote, base_url)
        else:
            async with httpx.AsyncClient() as client:
                results = await self._run_batch(client, soup, remote, base_url)

        warnings: List[str] = []
        for reference, result in zip(remote, results):
            if isinstance(result, BaseException):
                # _inline_one handles expected failures; anything else still
                # must not take the batch down.
                logger.error(f"Unexpected error inlining {reference.src}: {result}")
                reference.node.replace_with(_build_placeholder(soup, reference))
                warnings.append(f"Image could not be loaded: {reference.label}")
            elif result is not None:
                warnings.append(result)

        failed = len(warnings)
        logger.info(
            f"Image inlining complete: {len(remote) - failed}/{len(remote)} inlined"
        )
        return InliningOutcome(
            html=str(soup),
            warnings=warnings,
            inlined=len(remote) - failed,
            already_embedded=len(embedded),
            failed=failed,
        )

    async def _run_batch(
        self,
        client: httpx.AsyncClient,
        soup: BeautifulSoup,
        references: List[ImageReference],
        base_url: Optional[str],
    ) -> Tuple[object, ...]:
        tasks = [
            asyncio.create_task(self._inline_one(client, soup, reference, base_url))
            for reference in references
        ]
        return tuple(await asyncio.gather(*tasks, return_exceptions=True))


async def inline_images(
    html: str,
    base_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_IMAGE_FETCH_TIMEOUT,
) -> InliningOutcome:
    """
    Convenience function to inline a fragment's images.

    Args:
        html: HTML fragment.
        base_url: Location used to resolve relative image sources.
        client: Optional httpx client (left open).
        timeout: Per-retrieval timeout in seconds.

    Returns:
        InliningOutcome.
    """
    inliner = ImageInliner(client=client, timeout=timeout)
    return await inliner.inline(html, base_url=base_url)
