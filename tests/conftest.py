"""Shared test fixtures for the imguploader test suite."""

from __future__ import annotations

import asyncio
import io
import re
from collections.abc import Callable

import httpx
import pytest
from PIL import Image

from imguploader.config import UploaderConfig


@pytest.fixture
def config() -> UploaderConfig:
    """Configured endpoint, no retries, no backoff."""
    return UploaderConfig(
        api_url="http://api.test/upload",
        retry_max_attempts=1,
        retry_base_delay=0.0,
        retry_max_delay=0.0,
        retry_jitter=False,
    )


@pytest.fixture
def png_bytes() -> Callable[..., bytes]:
    """Factory producing a PNG of the requested size."""

    def _make(width: int, height: int = 1) -> bytes:
        buf = io.BytesIO()
        Image.new("RGB", (width, height), color=(200, 30, 30)).save(buf, format="PNG")
        return buf.getvalue()

    return _make


class FakeImageHost:
    """MockTransport handler playing both the image origin and the upload API.

    ``GET`` serves :attr:`image` (or 404 for URLs in :attr:`missing`);
    any other method is treated as an upload and answers with
    ``{"data": {"url": "http://api.test/<filename>"}}``.  A pipeline counts
    as in flight from its successful fetch until its upload is answered.
    URLs in :attr:`slow` take that many extra seconds to serve, and
    :attr:`events` logs ``("get", url)`` and ``("uploaded", filename)`` in
    the order requests arrive and uploads are answered.
    """

    def __init__(self, image: bytes, delay: float = 0.01) -> None:
        self.image = image
        self.delay = delay
        self.missing: set[str] = set()
        self.slow: dict[str, float] = {}
        self.events: list[tuple[str, str]] = []
        self.fetched: list[str] = []
        self.uploads: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(self.delay)
        if request.method == "GET":
            url = str(request.url)
            self.fetched.append(url)
            self.events.append(("get", url))
            if url in self.slow:
                await asyncio.sleep(self.slow[url])
            if url in self.missing:
                return httpx.Response(404)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            return httpx.Response(200, content=self.image, headers={"content-type": "image/png"})

        match = re.search(rb'filename="([^"]+)"', request.content)
        filename = match.group(1).decode() if match else "unnamed"
        self.uploads.append(filename)
        self.in_flight -= 1
        self.events.append(("uploaded", filename))
        return httpx.Response(200, json={"data": {"url": f"http://api.test/{filename}"}})

    @property
    def requests(self) -> int:
        return len(self.fetched) + len(self.uploads)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def image_host(png_bytes) -> FakeImageHost:
    return FakeImageHost(png_bytes(10))
