"""Host-facing asynchronous client.

:class:`AsyncImageUploader` bundles a settings snapshot, an HTTP transport
and a notification callback, and exposes the three entry points a host
editor needs: upload every image in a document, upload the image under the
cursor, and upload pasted image bytes.

Usage::

    import asyncio
    from imguploader import AsyncImageUploader, UploaderConfig

    async def main(document: str) -> str:
        config = UploaderConfig(api_url="https://img.example.com/upload")
        async with AsyncImageUploader(config, notify=print) as uploader:
            result = await uploader.upload_all_images(document)
            return result.text

    asyncio.run(main("![](https://elsewhere.example/cat.png)"))
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx

from imguploader.config import UploaderConfig
from imguploader.errors import ExtractionError, ImageUploaderError
from imguploader.http.transport import AsyncHttpTransport
from imguploader.http.upload import upload_image
from imguploader.image.width import build_image_markup, detect_display_width
from imguploader.models import BatchResult, UploadOutcome, UploadProgress
from imguploader.observability import get_logger
from imguploader.pipeline.batch import BatchUploader, TextSink
from imguploader.pipeline.report import (
    format_failure,
    format_outcome,
    format_progress,
    format_summary,
)
from imguploader.pipeline.single import LineEditor, SingleImageUploader

log = get_logger("imguploader.client")

Notifier = Callable[[str], None]


def _discard(message: str) -> None:
    pass


class AsyncImageUploader:
    """Asynchronous image uploader client.

    Parameters
    ----------
    config:
        Settings snapshot.  When omitted, one is built from *kwargs*.
    notify:
        Receives human-readable status messages (progress, summaries,
        failures).
    client:
        Optional pre-built :class:`httpx.AsyncClient`.
    **kwargs:
        Forwarded to :class:`UploaderConfig` when *config* is ``None``.
    """

    def __init__(
        self,
        config: UploaderConfig | None = None,
        *,
        notify: Notifier | None = None,
        client: httpx.AsyncClient | None = None,
        **kwargs: Any,
    ) -> None:
        if config is None:
            config = UploaderConfig(**kwargs)
        elif kwargs:
            raise TypeError("pass either config or keyword settings, not both")
        self._config = config
        self._notify: Notifier = notify or _discard
        self._transport = AsyncHttpTransport(config, client=client)

    @property
    def config(self) -> UploaderConfig:
        return self._config

    # ------------------------------------------------------------------
    # Whole document
    # ------------------------------------------------------------------

    async def upload_all_images(self, text: str, sink: TextSink | None = None) -> BatchResult:
        """Upload every image linked from *text*.

        *sink* receives the rewritten document when at least one upload
        succeeded.  A configuration error is reported through ``notify``
        and then re-raised.
        """
        def _on_start(count: int) -> None:
            self._notify(f"Processing {count} images...")

        def _on_progress(progress: UploadProgress) -> None:
            self._notify(format_progress(progress))

        batch = BatchUploader(
            self._config,
            self._transport,
            on_progress=_on_progress,
            on_start=_on_start,
        )
        try:
            result = await batch.run(text, sink=sink)
        except ImageUploaderError as exc:
            log.error(
                "Batch upload aborted",
                extra={"extra_fields": {"op": "batch", "code": str(exc.code), "error": exc.message}},
            )
            self._notify(f"Upload aborted: {exc.message}")
            raise

        if result.progress.total:
            self._notify(format_summary(result.progress))
        else:
            self._notify("No images found to upload")
        return result

    # ------------------------------------------------------------------
    # Image under the cursor
    # ------------------------------------------------------------------

    async def upload_image_at_cursor(self, editor: LineEditor) -> UploadOutcome | None:
        """Upload the image link under the editor cursor, if there is one."""
        single = SingleImageUploader(self._config, self._transport)
        try:
            outcome = await single.run_at_cursor(editor)
        except ExtractionError as exc:
            self._notify(exc.message)
            return None
        except ImageUploaderError as exc:
            self._notify(format_failure(exc.message))
            raise
        self._notify(format_outcome(outcome))
        return outcome

    # ------------------------------------------------------------------
    # Pasted images
    # ------------------------------------------------------------------

    async def upload_bytes(self, data: bytes, filename: str, mime_type: str) -> str:
        """Upload raw image bytes and return the hosted URL."""
        return await upload_image(self._transport, self._config, data, filename, mime_type)

    async def upload_pasted_image(
        self,
        data: bytes,
        filename: str = "image.png",
        mime_type: str = "image/png",
    ) -> str | None:
        """Upload a pasted image and return the markup to insert.

        Returns ``None`` when paste uploads are disabled or the clipboard
        content is not an image; the host then handles the paste itself.
        With ``enable_auto_width`` the markup carries a ``|width`` hint.
        """
        if not self._config.auto_upload_on_paste or not mime_type.startswith("image"):
            return None

        try:
            url = await self.upload_bytes(data, filename, mime_type)
        except ImageUploaderError as exc:
            self._notify(format_failure(exc.message))
            raise

        width = None
        if self._config.enable_auto_width:
            width = await detect_display_width(data, self._config.width_tiers)
        return build_image_markup(url, width)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> AsyncImageUploader:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
