"""Tests for notification text."""

from __future__ import annotations

from imguploader.models import (
    ImageReference,
    OutcomeStatus,
    UploadFailure,
    UploadOutcome,
    UploadProgress,
)
from imguploader.pipeline.report import (
    format_failure,
    format_outcome,
    format_progress,
    format_summary,
)


class TestFormatProgress:
    def test_only_non_zero_counters(self):
        progress = UploadProgress(total=4, current=2, success=1, failed=1)
        assert format_progress(progress) == "Progress: 2/4 (50%)\n✅ Uploaded: 1\n❌ Failed: 1"

    def test_rounding(self):
        progress = UploadProgress(total=3, current=1, skipped=1)
        assert format_progress(progress) == "Progress: 1/3 (33%)\n⏭️ Already uploaded: 1"

    def test_blacklisted(self):
        progress = UploadProgress(total=1, current=1, blacklisted=1)
        assert format_progress(progress).endswith("⛔ Blacklisted: 1")


class TestFormatSummary:
    def test_full_summary(self):
        progress = UploadProgress(
            total=5,
            current=5,
            success=2,
            failed=1,
            skipped=1,
            blacklisted=1,
            errors=[UploadFailure(url="http://img.example/very/long/path.png", error="HTTP 404")],
        )
        assert format_summary(progress).splitlines() == [
            "Upload finished:",
            "✅ 2 uploaded",
            "❌ 1 failed",
            "  • http://img.example/v... : HTTP 404",
            "⏭️ 1 already uploaded",
            "⛔ 1 blacklisted",
        ]

    def test_success_only(self):
        progress = UploadProgress(total=1, current=1, success=1)
        assert format_summary(progress) == "Upload finished:\n✅ 1 uploaded"


class TestFormatOutcome:
    ref = ImageReference(url="http://x.test/a.png", original_markup="![](http://x.test/a.png)")

    def test_each_status(self):
        assert format_outcome(UploadOutcome.passthrough(self.ref, OutcomeStatus.SUCCESS)) == "✅ Image uploaded"
        assert (
            format_outcome(UploadOutcome.passthrough(self.ref, OutcomeStatus.BLACKLISTED))
            == "This image's domain is blacklisted"
        )
        assert (
            format_outcome(UploadOutcome.passthrough(self.ref, OutcomeStatus.SKIPPED))
            == "This image has already been uploaded"
        )

    def test_failure_includes_detail(self):
        outcome = UploadOutcome.passthrough(self.ref, OutcomeStatus.FAILED, "HTTP 500")
        assert format_outcome(outcome) == "❌ Upload failed: HTTP 500"

    def test_failure_wording_shared(self):
        outcome = UploadOutcome.passthrough(self.ref, OutcomeStatus.FAILED, "HTTP 413")
        assert format_outcome(outcome) == format_failure("HTTP 413")
