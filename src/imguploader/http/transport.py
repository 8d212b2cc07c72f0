"""Async HTTP transport shared by the fetcher and the uploader.

The transport owns one :class:`httpx.AsyncClient` and handles the request
lifecycle:

1. Send the request with the configured timeout.
2. On a network error -- exponential backoff and retry.
3. On ``429`` / ``5xx`` -- honour ``Retry-After`` (or back off) and retry.
4. Otherwise -- return the response; status interpretation belongs to the
   caller, which knows whether ``200`` or any ``2xx`` counts as success.
5. Network errors after the last attempt raise :class:`NetworkError`; a
   retryable status after the last attempt is returned as-is.
"""

from __future__ import annotations

import asyncio
import json as _json
import sys
import time
from typing import Any

import httpx

from imguploader.config import UploaderConfig
from imguploader.errors import NetworkError
from imguploader.observability import NoopMetricsHook, get_logger
from imguploader.utils.redact import redact

from .retries import compute_backoff, parse_retry_after, should_retry

log = get_logger("imguploader.transport")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _header_secrets(config: UploaderConfig) -> list[str]:
    """Configured header values, scrubbed from debug output."""
    secrets: list[str] = []
    for header in config.custom_headers:
        _, sep, value = header.partition(":")
        if sep and value.strip():
            secrets.append(value.strip())
    return secrets


def _dump_exchange(
    config: UploaderConfig,
    method: str,
    url: str,
    request_headers: dict[str, str] | None,
    response: httpx.Response,
) -> None:
    """Write a redacted debug dump of the request/response to stderr."""
    if not config.debug_dump_payload:
        return
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        try:
            body: Any = response.json()
        except ValueError:
            body = response.text[:1000]
    else:
        body = response.content
    dump = {
        "method": method,
        "url": url,
        "request_headers": dict(request_headers or {}),
        "response_status": response.status_code,
        "response_content_type": content_type,
        "response_body": body,
    }
    safe_dump = redact(dump, _header_secrets(config))
    print(_json.dumps(safe_dump, indent=2, default=str), file=sys.stderr)


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

class AsyncHttpTransport:
    """Asynchronous HTTP transport with timeouts, retries and metrics.

    Parameters
    ----------
    config:
        Controls timeout, retry policy, proxy, metrics and debug dumps.
    client:
        Pre-built :class:`httpx.AsyncClient` to use instead of creating one
        (tests pass a client backed by :class:`httpx.MockTransport`).  A
        supplied client is not closed by :meth:`close`.
    """

    def __init__(
        self,
        config: UploaderConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(
                timeout=httpx.Timeout(config.timeout_seconds),
                proxy=config.http_proxy,
                follow_redirects=True,
            )
        self._client = client

    # -- public API --------------------------------------------------------

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send *method* to the absolute *url*, retrying transient failures.

        Parameters
        ----------
        method:
            HTTP method.
        url:
            Absolute request URL.
        **kwargs:
            Forwarded to :meth:`httpx.AsyncClient.request` (``headers=``,
            ``files=``, ``content=``, ...).

        Returns
        -------
        httpx.Response
            The final response, whatever its status.

        Raises
        ------
        NetworkError
            When every attempt failed at the transport level.
        """
        config = self._config
        max_attempts = config.retry_max_attempts
        tags = {"method": method}

        for attempt in range(max_attempts):
            t0 = time.monotonic()
            try:
                response = await self._client.request(method, url, **kwargs)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                self._metrics.increment(
                    "imguploader.requests_total", tags={**tags, "status": "error"},
                )
                log.warning(
                    "Request network error",
                    extra={
                        "extra_fields": {
                            "op": "request",
                            "method": method,
                            "url": url,
                            "attempt": attempt + 1,
                            "error": str(exc),
                        }
                    },
                )
                if not should_retry(None, exc, attempt, max_attempts):
                    raise NetworkError(
                        message=f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__,
                        context={"url": url, "attempt": attempt + 1},
                        cause=exc,
                    ) from exc
                self._metrics.increment(
                    "imguploader.retries_total", tags={**tags, "reason": "network_error"},
                )
                await asyncio.sleep(
                    compute_backoff(
                        attempt,
                        base=config.retry_base_delay,
                        maximum=config.retry_max_delay,
                        jitter=config.retry_jitter,
                    )
                )
                continue

            elapsed_ms = (time.monotonic() - t0) * 1000
            status_tags = {**tags, "status": str(response.status_code)}
            self._metrics.increment("imguploader.requests_total", tags=status_tags)
            self._metrics.timing("imguploader.request_duration_ms", elapsed_ms, tags=status_tags)

            _dump_exchange(config, method, url, kwargs.get("headers"), response)

            if not should_retry(response.status_code, None, attempt, max_attempts):
                return response

            retry_after = (
                parse_retry_after(response.headers.get("retry-after"))
                if response.status_code == 429
                else None
            )
            log.warning(
                "Retryable HTTP status",
                extra={
                    "extra_fields": {
                        "op": "request",
                        "method": method,
                        "url": url,
                        "status_code": response.status_code,
                        "retry_after": retry_after,
                        "attempt": attempt + 1,
                    }
                },
            )
            self._metrics.increment(
                "imguploader.retries_total",
                tags={**tags, "reason": "rate_limited" if retry_after is not None else "server_error"},
            )
            await asyncio.sleep(
                compute_backoff(
                    attempt,
                    base=config.retry_base_delay,
                    maximum=config.retry_max_delay,
                    jitter=config.retry_jitter,
                    retry_after=retry_after,
                )
            )

        # Unreachable: the last attempt always returns or raises above.
        raise NetworkError(
            message=f"All {max_attempts} attempts exhausted for {method} {url}",
            context={"url": url, "attempt": max_attempts},
        )

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def close(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> AsyncHttpTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
