"""Image helpers that run without network access.

Exports
-------
extract_image_references / find_image_at_cursor
    Locate ``![alt](url)`` links in a document or on a single line.
classify / is_blacklisted / is_already_uploaded / api_origin
    Policy checks applied before fetching.
filename_from_url / guess_mime_type
    Metadata inference for fetched images.
classify_width / decode_pixel_width / detect_display_width / build_image_markup
    Width hints for pasted images.
"""

from .detect import filename_from_url, guess_mime_type
from .extract import IMAGE_LINK_RE, extract_image_references, find_image_at_cursor
from .policy import api_origin, classify, is_already_uploaded, is_blacklisted
from .width import (
    build_image_markup,
    classify_width,
    decode_pixel_width,
    detect_display_width,
)

__all__ = [
    "IMAGE_LINK_RE",
    "api_origin",
    "build_image_markup",
    "classify",
    "classify_width",
    "decode_pixel_width",
    "detect_display_width",
    "extract_image_references",
    "filename_from_url",
    "find_image_at_cursor",
    "guess_mime_type",
    "is_already_uploaded",
    "is_blacklisted",
]
