"""Configuration for imguploader.

:class:`UploaderConfig` captures every upload setting plus the HTTP knobs
of the transport.  An instance is treated as an immutable snapshot for the
duration of one pipeline run; persisting it is the host's job, helped by
:meth:`UploaderConfig.from_settings` and :meth:`UploaderConfig.to_settings`
which speak the host's camelCase settings format.

Two module-level constants matter to callers:

* :data:`DEFAULT_API_URL`: placeholder endpoint; uploading while it is
  still set raises :class:`~imguploader.errors.ConfigurationError`.
* :data:`DEFAULT_JSON_PATH`: where the result URL lives in the response.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

DEFAULT_API_URL = "http://your-api.com/upload"
"""Placeholder endpoint shipped with fresh settings."""

DEFAULT_JSON_PATH = "data.url"
"""Dot-separated path to the uploaded URL in the endpoint's JSON body."""

ALLOWED_METHODS: frozenset[str] = frozenset({"POST", "PUT"})


# ---------------------------------------------------------------------------
# Width tiers
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WidthTiers:
    """Three (threshold, display width) pairs used to annotate pasted images.

    An image wider than ``large_threshold`` gets ``large_width``, wider than
    ``medium_threshold`` gets ``medium_width``, wider than ``small_threshold``
    gets ``small_width``; anything narrower keeps its own width.
    """

    large_threshold: int = 1600
    medium_threshold: int = 1200
    small_threshold: int = 800
    large_width: int = 800
    medium_width: int = 600
    small_width: int = 400

    def __post_init__(self) -> None:
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if value <= 0:
                raise ValueError(f"{f.name} must be > 0, got {value}")
        if not (self.large_threshold > self.medium_threshold > self.small_threshold):
            raise ValueError(
                "width thresholds must be strictly descending "
                f"(large={self.large_threshold}, medium={self.medium_threshold}, "
                f"small={self.small_threshold})"
            )


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class UploaderConfig:
    """Complete configuration for an uploader run.

    Parameters
    ----------
    api_url:
        Upload endpoint.  Left at :data:`DEFAULT_API_URL`, every upload
        fails with a configuration error before touching the network.
    method:
        ``"POST"`` or ``"PUT"`` (case-insensitive, stored upper-case).
    json_path:
        Dot-separated path to the uploaded URL in the JSON response,
        e.g. ``"data.url"``.
    blacklist_domains:
        Domains (optionally with scheme and path prefix) whose images are
        never re-uploaded.  Matching is a case-insensitive prefix test.
    custom_headers:
        Extra request headers as ``"Key: Value"`` strings.  Entries with an
        empty key or value are ignored.
    width_tiers:
        Display-width tiers for pasted images.
    auto_upload_on_paste:
        Upload pasted images immediately.
    enable_auto_width:
        Annotate pasted images with a ``|width`` hint.
    max_concurrent:
        Size of each upload batch in whole-document mode.
    timeout_seconds:
        Per-request HTTP timeout.
    retry_max_attempts:
        Total attempts per request for network errors and ``429``/``5xx``
        responses.  ``1`` disables retries.
    retry_base_delay:
        Base delay (seconds) for exponential backoff.
    retry_max_delay:
        Upper cap (seconds) on computed backoff delay.
    retry_jitter:
        Scale backoff delays randomly to 50-100 %.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    metrics:
        A :class:`~imguploader.observability.MetricsHook` implementation.
    debug_dump_payload:
        Write a redacted dump of every request/response to *stderr*.
    """

    # ── Endpoint ────────────────────────────────────────────────────────
    api_url: str = DEFAULT_API_URL

    method: str = "POST"

    json_path: str = DEFAULT_JSON_PATH

    custom_headers: list[str] = field(default_factory=list)

    # ── Policy ──────────────────────────────────────────────────────────
    blacklist_domains: list[str] = field(default_factory=list)

    # ── Paste ───────────────────────────────────────────────────────────
    auto_upload_on_paste: bool = True

    enable_auto_width: bool = True

    width_tiers: WidthTiers = field(default_factory=WidthTiers)

    # ── Batch ───────────────────────────────────────────────────────────
    max_concurrent: int = 3

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    retry_max_attempts: int = 3

    retry_base_delay: float = 0.5

    retry_max_delay: float = 10.0

    retry_jitter: bool = True

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self.method = (self.method or "").strip().upper()
        if self.method not in ALLOWED_METHODS:
            raise ValueError(
                f"method must be one of {sorted(ALLOWED_METHODS)}, got {self.method!r}"
            )
        if not self.json_path or not self.json_path.strip():
            raise ValueError("json_path must not be empty")
        if self.max_concurrent < 1:
            raise ValueError(f"max_concurrent must be >= 1, got {self.max_concurrent}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if self.retry_max_attempts < 1:
            raise ValueError(f"retry_max_attempts must be >= 1, got {self.retry_max_attempts}")
        if self.retry_base_delay < 0:
            raise ValueError(f"retry_base_delay must be >= 0, got {self.retry_base_delay}")
        if self.retry_max_delay < 0:
            raise ValueError(f"retry_max_delay must be >= 0, got {self.retry_max_delay}")

    @property
    def is_configured(self) -> bool:
        """``False`` while ``api_url`` is still the shipped placeholder."""
        return self.api_url.strip() != DEFAULT_API_URL

    # -- host settings round-trip --------------------------------------------

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any], **overrides: Any) -> UploaderConfig:
        """Build a config from a persisted host settings mapping.

        Keys use the host's camelCase names (``apiUrl``, ``jsonPath``,
        ``defaultWidthLarge``, ...).  Missing keys keep their defaults and
        unknown keys are ignored.  *overrides* are applied last and use this
        class's field names.
        """
        kwargs: dict[str, Any] = {}
        for key, attr in _SETTINGS_KEYS.items():
            if key in settings and settings[key] is not None:
                kwargs[attr] = settings[key]
        for attr in ("blacklist_domains", "custom_headers"):
            if attr in kwargs:
                kwargs[attr] = [str(v) for v in kwargs[attr]]

        tier_kwargs = {
            attr: int(settings[key])
            for key, attr in _WIDTH_KEYS.items()
            if settings.get(key) is not None
        }
        if tier_kwargs:
            kwargs["width_tiers"] = WidthTiers(**tier_kwargs)

        kwargs.update(overrides)
        return cls(**kwargs)

    def to_settings(self) -> dict[str, Any]:
        """Return the camelCase settings mapping the host persists."""
        data: dict[str, Any] = {}
        for key, attr in _SETTINGS_KEYS.items():
            value = getattr(self, attr)
            data[key] = list(value) if isinstance(value, list) else value
        for key, attr in _WIDTH_KEYS.items():
            data[key] = getattr(self.width_tiers, attr)
        return data

    def __repr__(self) -> str:
        """Mask header values, which commonly carry API tokens."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "custom_headers":
                masked = [_mask_header(h) for h in val]
                parts.append(f"custom_headers={masked!r}")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"UploaderConfig({', '.join(parts)})"


# Host settings key -> UploaderConfig field.
_SETTINGS_KEYS: dict[str, str] = {
    "apiUrl": "api_url",
    "method": "method",
    "jsonPath": "json_path",
    "blacklistDomains": "blacklist_domains",
    "customHeaders": "custom_headers",
    "autoUploadOnPaste": "auto_upload_on_paste",
    "enableAutoWidth": "enable_auto_width",
}

# Host settings key -> WidthTiers field.
_WIDTH_KEYS: dict[str, str] = {
    "defaultWidthLarge": "large_width",
    "defaultWidthMedium": "medium_width",
    "defaultWidthSmall": "small_width",
}


def _mask_header(header: str) -> str:
    key, sep, value = header.partition(":")
    if not sep:
        return header
    value = value.strip()
    masked = f"...{value[-4:]}" if len(value) >= 8 else "****"
    return f"{key.strip()}: {masked}"
