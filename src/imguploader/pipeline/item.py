"""The per-reference pipeline shared by batch and single-item modes.

policy check -> fetch -> upload -> rewritten markup.  Fetch and upload
failures become ``failed`` outcomes here; configuration errors propagate.
"""

from __future__ import annotations

from imguploader.config import UploaderConfig
from imguploader.errors import FetchError, UploadError
from imguploader.http.fetch import fetch_image
from imguploader.http.transport import AsyncHttpTransport
from imguploader.http.upload import ensure_configured, upload_image
from imguploader.image.policy import classify
from imguploader.models import ImageReference, OutcomeStatus, UploadOutcome


async def process_reference(
    transport: AsyncHttpTransport,
    config: UploaderConfig,
    ref: ImageReference,
) -> UploadOutcome:
    """Run one reference through the pipeline and classify the result.

    Raises
    ------
    ConfigurationError
        If the reference is eligible but the endpoint is not configured.
    """
    status = classify(ref.url, config)
    if status is not None:
        return UploadOutcome.passthrough(ref, status)

    ensure_configured(config)

    try:
        fetched = await fetch_image(transport, ref.url)
        new_url = await upload_image(
            transport,
            config,
            fetched.data,
            fetched.filename,
            fetched.mime_type,
        )
    except (FetchError, UploadError) as exc:
        return UploadOutcome.passthrough(ref, OutcomeStatus.FAILED, exc.message)

    return UploadOutcome(
        url=ref.url,
        original_markup=ref.original_markup,
        new_markup=ref.original_markup.replace(ref.url, new_url, 1),
        status=OutcomeStatus.SUCCESS,
    )
