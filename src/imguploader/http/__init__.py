"""imguploader.http -- network side of the pipeline.

* :mod:`.retries` -- retry decision logic and exponential backoff.
* :mod:`.transport` -- async HTTP transport with timeouts and retries.
* :mod:`.fetch` -- download source images.
* :mod:`.upload` -- upload images to the configured endpoint.
"""

from __future__ import annotations

from .fetch import FetchedImage, fetch_image
from .retries import compute_backoff, parse_retry_after, should_retry
from .transport import AsyncHttpTransport
from .upload import (
    PathNotFound,
    ensure_configured,
    parse_custom_headers,
    resolve_json_path,
    split_json_path,
    upload_image,
)

__all__ = [
    "AsyncHttpTransport",
    "FetchedImage",
    "PathNotFound",
    "compute_backoff",
    "ensure_configured",
    "fetch_image",
    "parse_custom_headers",
    "parse_retry_after",
    "resolve_json_path",
    "should_retry",
    "split_json_path",
    "upload_image",
]
