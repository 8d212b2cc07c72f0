"""Filename and MIME-type inference for fetched images."""

from __future__ import annotations

from urllib.parse import urlsplit

DEFAULT_FILENAME = "image.jpg"
DEFAULT_MIME = "image/jpeg"

_EXTENSION_MIMES: dict[str, str] = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "bmp": "image/bmp",
}


def filename_from_url(url: str) -> str:
    """Return the last path segment of *url*, or :data:`DEFAULT_FILENAME`."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return DEFAULT_FILENAME
    if not parts.scheme or not parts.netloc:
        return DEFAULT_FILENAME
    name = parts.path.rpartition("/")[2]
    return name or DEFAULT_FILENAME


def guess_mime_type(url: str) -> str:
    """Infer an image MIME type from the extension at the end of *url*.

    Unknown or missing extensions map to :data:`DEFAULT_MIME`.
    """
    ext = url.rsplit(".", 1)[-1].lower() if "." in url else ""
    return _EXTENSION_MIMES.get(ext, DEFAULT_MIME)
