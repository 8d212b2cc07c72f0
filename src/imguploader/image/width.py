"""Display-width hints for pasted images.

The pixel width is read with Pillow (header only, no full decode) and
mapped onto the configured :class:`~imguploader.config.WidthTiers`.
"""

from __future__ import annotations

import asyncio
import io

from PIL import Image, UnidentifiedImageError

from imguploader.config import WidthTiers


def classify_width(width: int, tiers: WidthTiers) -> int:
    """Map a pixel *width* to the display width to annotate.

    Thresholds are exclusive: an image exactly ``large_threshold`` wide falls
    into the medium tier.  Images no wider than ``small_threshold`` keep
    their own width.

    >>> classify_width(2000, WidthTiers())
    800
    >>> classify_width(1600, WidthTiers())
    600
    >>> classify_width(800, WidthTiers())
    800
    """
    if width > tiers.large_threshold:
        return tiers.large_width
    if width > tiers.medium_threshold:
        return tiers.medium_width
    if width > tiers.small_threshold:
        return tiers.small_width
    return width


def decode_pixel_width(data: bytes) -> int | None:
    """Return the pixel width of the image in *data*, or ``None`` if unreadable."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            width = img.size[0]
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError):
        return None
    return width if width > 0 else None


async def detect_display_width(data: bytes, tiers: WidthTiers) -> int | None:
    """Decode *data* off the event loop and classify its width.

    Returns ``None`` (no hint) when the image cannot be decoded.
    """
    loop = asyncio.get_running_loop()
    width = await loop.run_in_executor(None, decode_pixel_width, data)
    if width is None:
        return None
    return classify_width(width, tiers)


def build_image_markup(url: str, width: int | None = None) -> str:
    """Render an image link, with an optional ``|width`` size hint."""
    if width:
        return f"![|{width}]({url})"
    return f"![]({url})"
