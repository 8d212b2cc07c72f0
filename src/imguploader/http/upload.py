"""Send image bytes to the configured upload endpoint.

The request is a multipart form with a single ``image`` field, sent with
the configured method and custom headers.  The resulting URL is read from
the JSON response by walking ``config.json_path`` one field at a time.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from imguploader.config import UploaderConfig
from imguploader.errors import ConfigurationError, NetworkError, UploadError
from imguploader.observability import get_logger

from .transport import AsyncHttpTransport

log = get_logger("imguploader.upload")

EMPTY_URL_MESSAGE = "empty upload URL"


# ---------------------------------------------------------------------------
# Headers
# ---------------------------------------------------------------------------

def parse_custom_headers(lines: Iterable[str]) -> dict[str, str]:
    """Turn ``"Key: Value"`` strings into a header dict.

    Each entry is split on its first ``:`` and both halves are trimmed;
    entries with an empty key or value are dropped.  Later duplicates win.
    """
    headers: dict[str, str] = {}
    for line in lines:
        key, sep, value = line.partition(":")
        key, value = key.strip(), value.strip()
        if sep and key and value:
            headers[key] = value
    return headers


# ---------------------------------------------------------------------------
# JSON path
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PathNotFound:
    """Returned by :func:`resolve_json_path` when a segment is missing."""

    path: tuple[str, ...]
    missing: str


def split_json_path(path: str) -> tuple[str, ...]:
    """Split a dot-separated path into its non-empty segments."""
    return tuple(seg.strip() for seg in path.split(".") if seg.strip())


def resolve_json_path(payload: Any, segments: Iterable[str]) -> Any:
    """Walk *segments* through nested objects in *payload*.

    Returns the value found, or a :class:`PathNotFound` naming the first
    segment that could not be followed.
    """
    segments = tuple(segments)
    current = payload
    for segment in segments:
        if not isinstance(current, dict) or segment not in current:
            return PathNotFound(path=segments, missing=segment)
        current = current[segment]
    return current


# ---------------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------------

def ensure_configured(config: UploaderConfig) -> None:
    """Raise :class:`ConfigurationError` while the endpoint is the placeholder."""
    if not config.is_configured:
        raise ConfigurationError(
            message="Upload API URL is not configured",
            context={"api_url": config.api_url},
        )


async def upload_image(
    transport: AsyncHttpTransport,
    config: UploaderConfig,
    data: bytes,
    filename: str,
    mime_type: str,
) -> str:
    """Upload *data* and return the URL reported by the endpoint.

    Raises
    ------
    ConfigurationError
        If ``config.api_url`` is the placeholder; no request is made.
    UploadError
        On a non-2xx status (``"HTTP <status>"``), a body that is not JSON,
        a transport failure, or when ``config.json_path`` does not lead to
        a non-empty string (``"empty upload URL"``).
    """
    ensure_configured(config)

    log.debug(
        "Uploading image",
        extra={
            "extra_fields": {
                "op": "upload",
                "filename": filename,
                "mime_type": mime_type,
                "size_bytes": len(data),
            }
        },
    )

    try:
        response = await transport.request(
            config.method,
            config.api_url,
            files={"image": (filename, data, mime_type)},
            headers=parse_custom_headers(config.custom_headers),
        )
    except NetworkError as exc:
        raise UploadError(
            message=exc.message,
            context={"api_url": config.api_url},
            cause=exc,
        ) from exc

    if not 200 <= response.status_code < 300:
        raise UploadError(
            message=f"HTTP {response.status_code}",
            context={"api_url": config.api_url, "status_code": response.status_code},
        )

    try:
        body = response.json()
    except ValueError as exc:
        raise UploadError(
            message="malformed JSON response",
            context={"api_url": config.api_url, "body": response.text[:200]},
            cause=exc,
        ) from exc

    value = resolve_json_path(body, split_json_path(config.json_path))
    if isinstance(value, PathNotFound) or not isinstance(value, str) or not value.strip():
        raise UploadError(
            message=EMPTY_URL_MESSAGE,
            context={"api_url": config.api_url, "json_path": config.json_path},
        )
    return value.strip()
