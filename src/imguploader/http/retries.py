"""Retry decision logic and exponential backoff computation.

Pure functions used by the transport:

* :func:`should_retry` -- decide whether a failed request is retryable.
* :func:`compute_backoff` -- compute the delay before the next attempt.
* :func:`parse_retry_after` -- read a server-requested delay.
"""

from __future__ import annotations

import math
import random
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

import httpx

# HTTP status codes that are safe to retry.
RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

# Network-level exceptions that warrant a retry.
RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
)


def should_retry(
    status_code: int | None,
    exception: Exception | None,
    attempt: int,
    max_attempts: int,
) -> bool:
    """Decide whether a request should be retried.

    Parameters
    ----------
    status_code:
        HTTP status of the response, or ``None`` if no response arrived.
    exception:
        The exception raised by the send, or ``None`` if a response arrived.
    attempt:
        The current attempt number (0-indexed).
    max_attempts:
        Maximum total attempts, including the first.
    """
    if attempt + 1 >= max_attempts:
        return False

    if exception is not None:
        return isinstance(exception, RETRYABLE_EXCEPTIONS)

    if status_code is not None:
        return status_code in RETRYABLE_STATUSES

    return False


def compute_backoff(
    attempt: int,
    base: float = 0.5,
    maximum: float = 10.0,
    jitter: bool = True,
    retry_after: float | None = None,
) -> float:
    """Compute the delay in seconds before the next attempt.

    A server-provided ``Retry-After`` value is used as-is (clamped to
    ``[0, maximum]``); otherwise the delay is ``base * 2**attempt`` capped at
    *maximum*.  With *jitter* the delay is scaled to 50-100 % of its value.
    """
    if retry_after is not None:
        delay = min(max(retry_after, 0.0), maximum)
    else:
        delay = min(base * (2 ** attempt), maximum)

    if jitter:
        delay *= 0.5 + random.random() * 0.5

    return delay


def parse_retry_after(value: str | None, now: datetime | None = None) -> float | None:
    """Return the delay in seconds requested by a ``Retry-After`` header.

    Both forms of the header are understood: delta-seconds (``"120"``) and
    an HTTP-date.  A date in the past gives ``0.0``.  A missing, malformed
    or non-finite value gives ``None``.
    """
    if value is None:
        return None
    value = value.strip()
    try:
        seconds = float(value)
    except ValueError:
        pass
    else:
        return max(seconds, 0.0) if math.isfinite(seconds) else None

    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return max((when - now).total_seconds(), 0.0)
