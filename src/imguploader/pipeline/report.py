"""Human-readable progress and summary text for host notifications."""

from __future__ import annotations

from imguploader.models import OutcomeStatus, UploadOutcome, UploadProgress

URL_PREVIEW_LENGTH = 20


def format_progress(progress: UploadProgress) -> str:
    lines = [f"Progress: {progress.current}/{progress.total} ({progress.percent}%)"]
    if progress.success:
        lines.append(f"✅ Uploaded: {progress.success}")
    if progress.failed:
        lines.append(f"❌ Failed: {progress.failed}")
    if progress.skipped:
        lines.append(f"⏭️ Already uploaded: {progress.skipped}")
    if progress.blacklisted:
        lines.append(f"⛔ Blacklisted: {progress.blacklisted}")
    return "\n".join(lines)


def format_summary(progress: UploadProgress) -> str:
    """Final report: counts per outcome kind, then one line per failure.

    Failed URLs are shortened to their first :data:`URL_PREVIEW_LENGTH`
    characters.
    """
    lines = ["Upload finished:"]
    if progress.success:
        lines.append(f"✅ {progress.success} uploaded")
    if progress.failed:
        lines.append(f"❌ {progress.failed} failed")
        for failure in progress.errors:
            lines.append(f"  • {failure.url[:URL_PREVIEW_LENGTH]}... : {failure.error}")
    if progress.skipped:
        lines.append(f"⏭️ {progress.skipped} already uploaded")
    if progress.blacklisted:
        lines.append(f"⛔ {progress.blacklisted} blacklisted")
    return "\n".join(lines)


def format_failure(detail: str | None) -> str:
    return f"❌ Upload failed: {detail}"


def format_outcome(outcome: UploadOutcome) -> str:
    """One-line notification for the single-image path."""
    if outcome.status is OutcomeStatus.SUCCESS:
        return "✅ Image uploaded"
    if outcome.status is OutcomeStatus.BLACKLISTED:
        return "This image's domain is blacklisted"
    if outcome.status is OutcomeStatus.SKIPPED:
        return "This image has already been uploaded"
    return format_failure(outcome.error_detail)
