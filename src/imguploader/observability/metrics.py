"""Metrics hook protocol and no-op default implementation.

imguploader emits counters and timings for HTTP traffic and per-image
outcomes.  A :class:`NoopMetricsHook` is used unless the caller passes
their own object satisfying :class:`MetricsHook` as
``UploaderConfig.metrics``.

Emitted metric names:

* ``imguploader.requests_total``            -- counter
* ``imguploader.retries_total``             -- counter
* ``imguploader.request_duration_ms``       -- timing
* ``imguploader.upload_success_total``      -- counter
* ``imguploader.upload_failure_total``      -- counter
* ``imguploader.upload_skipped_total``      -- counter
* ``imguploader.upload_blacklisted_total``  -- counter
* ``imguploader.batch_duration_ms``         -- timing
* ``imguploader.batch_in_flight``           -- gauge
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict of string keys and values.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric to an absolute value."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
