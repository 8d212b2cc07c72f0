"""Error hierarchy for imguploader.

Every public error class inherits from :class:`ImageUploaderError`. Each
carries a machine-readable ``code`` (from :class:`ErrorCode`), a
human-readable ``message``, an optional structured ``context`` dict, and an
optional ``cause`` (chained exception).

Blacklisted and already-uploaded references are *not* errors; they are
reported as :class:`~imguploader.models.OutcomeStatus` values.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the package can raise."""

    NOT_CONFIGURED = "NOT_CONFIGURED"
    EXTRACTION_ERROR = "EXTRACTION_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    FETCH_ERROR = "FETCH_ERROR"
    UPLOAD_ERROR = "UPLOAD_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class ImageUploaderError(Exception):
    """Base exception for all imguploader errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A short description of what went wrong.  For per-item failures this
        is the detail shown in the final summary (e.g. ``"HTTP 404"``).
    context:
        Arbitrary structured data providing extra diagnostic detail.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Operation-level errors (abort the whole run)
# ---------------------------------------------------------------------------

class ConfigurationError(ImageUploaderError):
    """The upload endpoint has not been configured.

    Raised with :attr:`ErrorCode.NOT_CONFIGURED` when ``api_url`` is still
    the default placeholder.  No network request is issued.

    Context keys: ``api_url``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.NOT_CONFIGURED,
            message=message,
            context=context,
            cause=cause,
        )


class ExtractionError(ImageUploaderError):
    """No image reference could be identified where one was required.

    Context keys: ``line``, ``ch``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.EXTRACTION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Per-item errors (recorded as failed outcomes)
# ---------------------------------------------------------------------------

class NetworkError(ImageUploaderError):
    """A transport-level failure occurred (timeout, DNS, connection reset).

    Context keys: ``url``, ``attempt``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.NETWORK_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class FetchError(ImageUploaderError):
    """The source image could not be downloaded.

    Context keys: ``url``, ``status_code``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.FETCH_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class UploadError(ImageUploaderError):
    """The upload endpoint rejected the image or returned no usable URL.

    Context keys: ``api_url``, ``status_code``, ``json_path``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.UPLOAD_ERROR,
            message=message,
            context=context,
            cause=cause,
        )
