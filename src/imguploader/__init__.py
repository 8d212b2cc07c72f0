"""imguploader: upload images linked from Markdown and rewrite the links.

Public re-exports
-----------------

* **Client:** :class:`AsyncImageUploader`
* **Configuration:** :class:`UploaderConfig`, :class:`WidthTiers`
* **Errors:** Every :class:`ImageUploaderError` subclass and :class:`ErrorCode`
* **Models:** References, outcomes, progress and result types

Usage::

    from imguploader import AsyncImageUploader, UploaderConfig

    config = UploaderConfig(api_url="https://img.example.com/upload")
    async with AsyncImageUploader(config) as uploader:
        result = await uploader.upload_all_images(markdown)
"""

from __future__ import annotations

# ── Client ──────────────────────────────────────────────────────────────
from imguploader.client import AsyncImageUploader

# ── Configuration ───────────────────────────────────────────────────────
from imguploader.config import (
    DEFAULT_API_URL,
    DEFAULT_JSON_PATH,
    UploaderConfig,
    WidthTiers,
)

# ── Errors ──────────────────────────────────────────────────────────────
from imguploader.errors import (
    ConfigurationError,
    ErrorCode,
    ExtractionError,
    FetchError,
    ImageUploaderError,
    NetworkError,
    UploadError,
)

# ── Models ──────────────────────────────────────────────────────────────
from imguploader.models import (
    BatchResult,
    CursorPosition,
    ImageReference,
    OutcomeStatus,
    UploadFailure,
    UploadOutcome,
    UploadProgress,
)

# ── Orchestrators ───────────────────────────────────────────────────────
from imguploader.pipeline import BatchUploader, LineEditor, SingleImageUploader

__all__ = [
    # Client
    "AsyncImageUploader",
    # Configuration
    "UploaderConfig",
    "WidthTiers",
    "DEFAULT_API_URL",
    "DEFAULT_JSON_PATH",
    # Errors
    "ImageUploaderError",
    "ErrorCode",
    "ConfigurationError",
    "ExtractionError",
    "NetworkError",
    "FetchError",
    "UploadError",
    # Models
    "ImageReference",
    "OutcomeStatus",
    "UploadOutcome",
    "UploadFailure",
    "UploadProgress",
    "BatchResult",
    "CursorPosition",
    # Orchestrators
    "BatchUploader",
    "SingleImageUploader",
    "LineEditor",
]
