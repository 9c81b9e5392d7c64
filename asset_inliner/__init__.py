"""
Asset Inliner Module

Embeds remote images of a rendered fragment as base64 data URIs.
"""

from asset_inliner.inliner import (
    EmbeddedAsset,
    ImageInliner,
    ImageReference,
    InliningOutcome,
    guess_mime_type,
    inline_images,
)

__all__ = [
    "EmbeddedAsset",
    "ImageInliner",
    "ImageReference",
    "InliningOutcome",
    "guess_mime_type",
    "inline_images",
]
