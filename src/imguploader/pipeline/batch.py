"""Whole-document upload with bounded concurrency.

References are processed in consecutive batches of ``max_concurrent``
items.  Every item of a batch runs concurrently and the next batch starts
only once the whole batch has finished, so at most ``max_concurrent``
fetch+upload pipelines are ever in flight and progress advances batch by
batch.

After each batch the outcomes are merged into the working text by literal
first-occurrence substring replacement keyed on the original markup.  Two
references with byte-identical markup are therefore rewritten in the order
their outcomes are applied, not by position.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable

from imguploader.config import UploaderConfig
from imguploader.http.transport import AsyncHttpTransport
from imguploader.http.upload import ensure_configured
from imguploader.image.extract import extract_image_references
from imguploader.models import (
    BatchResult,
    ImageReference,
    OutcomeStatus,
    UploadOutcome,
    UploadProgress,
)
from imguploader.observability import NoopMetricsHook, get_logger
from imguploader.utils.chunk import chunked

from .item import process_reference

log = get_logger("imguploader.pipeline")

StartCallback = Callable[[int], None]
ProgressCallback = Callable[[UploadProgress], None]
TextSink = Callable[[str], None]

_OUTCOME_METRICS: dict[OutcomeStatus, str] = {
    OutcomeStatus.SUCCESS: "imguploader.upload_success_total",
    OutcomeStatus.FAILED: "imguploader.upload_failure_total",
    OutcomeStatus.SKIPPED: "imguploader.upload_skipped_total",
    OutcomeStatus.BLACKLISTED: "imguploader.upload_blacklisted_total",
}


def apply_outcomes(text: str, outcomes: list[UploadOutcome]) -> str:
    """Replace each outcome's original markup with its new markup in *text*."""
    for outcome in outcomes:
        if outcome.new_markup != outcome.original_markup:
            text = text.replace(outcome.original_markup, outcome.new_markup, 1)
    return text


def log_outcome(outcome: UploadOutcome, op: str) -> None:
    """Emit the diagnostic log line for one processed reference."""
    fields = {"op": op, "url": outcome.url, "status": outcome.status.value}
    if outcome.status is OutcomeStatus.SUCCESS:
        log.info("Image uploaded", extra={"extra_fields": {**fields, "new_markup": outcome.new_markup}})
    elif outcome.status is OutcomeStatus.FAILED:
        log.warning("Image upload failed", extra={"extra_fields": {**fields, "error": outcome.error_detail}})
    else:
        log.debug("Image left unchanged", extra={"extra_fields": fields})


class BatchUploader:
    """Upload every image referenced by a document.

    Parameters
    ----------
    config:
        Settings snapshot for this run.
    transport:
        Shared HTTP transport.
    on_progress:
        Called with the shared :class:`UploadProgress` after every item.
    on_start:
        Called once with the number of references, after the configuration
        check and before the first request.  Not called for documents
        without images.
    """

    def __init__(
        self,
        config: UploaderConfig,
        transport: AsyncHttpTransport,
        on_progress: ProgressCallback | None = None,
        on_start: StartCallback | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._on_progress = on_progress
        self._on_start = on_start
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._in_flight = 0

    async def run(self, text: str, sink: TextSink | None = None) -> BatchResult:
        """Upload all images in *text* and rewrite it.

        Parameters
        ----------
        text:
            The document.
        sink:
            Receives the rewritten text, only when at least one upload
            succeeded.

        Returns
        -------
        BatchResult
            Rewritten text, final progress and per-reference outcomes.  With
            no image references the text is returned unchanged and no
            counter moves.

        Raises
        ------
        ConfigurationError
            If the upload endpoint is not configured.  Raised before any
            network request.
        """
        refs = extract_image_references(text)
        progress = UploadProgress(total=len(refs))
        if not refs:
            log.info("No image references found", extra={"extra_fields": {"op": "batch"}})
            return BatchResult(text=text, progress=progress)

        ensure_configured(self._config)
        if self._on_start is not None:
            self._on_start(len(refs))

        t0 = time.monotonic()
        working = text
        outcomes: list[UploadOutcome] = []
        batches = chunked(refs, self._config.max_concurrent)
        for index, batch in enumerate(batches):
            results = await asyncio.gather(
                *(self._process_one(ref, progress) for ref in batch)
            )
            working = apply_outcomes(working, results)
            outcomes.extend(results)
            log.debug(
                "Batch finished",
                extra={
                    "extra_fields": {
                        "op": "batch",
                        "batch": index + 1,
                        "batches": len(batches),
                        "size": len(batch),
                    }
                },
            )

        self._metrics.timing("imguploader.batch_duration_ms", (time.monotonic() - t0) * 1000)

        applied = progress.success > 0
        if applied and sink is not None:
            sink(working)

        log.info(
            "Batch upload complete",
            extra={
                "extra_fields": {
                    "op": "batch",
                    "total": progress.total,
                    "success": progress.success,
                    "failed": progress.failed,
                    "skipped": progress.skipped,
                    "blacklisted": progress.blacklisted,
                }
            },
        )
        return BatchResult(text=working, progress=progress, outcomes=outcomes, applied=applied)

    async def _process_one(self, ref: ImageReference, progress: UploadProgress) -> UploadOutcome:
        self._in_flight += 1
        self._metrics.gauge("imguploader.batch_in_flight", self._in_flight)
        try:
            outcome = await process_reference(self._transport, self._config, ref)
        finally:
            self._in_flight -= 1

        # No await between here and the callback, so siblings never
        # observe a half-updated progress.
        progress.record(outcome)
        self._metrics.increment(_OUTCOME_METRICS[outcome.status])
        log_outcome(outcome, "batch")
        if self._on_progress is not None:
            self._on_progress(progress)
        return outcome
