"""Public data models for imguploader.

Plain dataclasses and enums describing image references, per-item
outcomes, and the progress aggregate of a batch run.  Only
:class:`UploadProgress` is mutable; it is owned by a single orchestrator
invocation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class OutcomeStatus(str, Enum):
    """Terminal classification of one reference's processing."""

    SUCCESS = "success"
    """The image was fetched and uploaded; the markup points at the new URL."""

    FAILED = "failed"
    """Fetching or uploading failed; the markup is left unchanged."""

    SKIPPED = "skipped"
    """The URL already lives on the upload endpoint's origin."""

    BLACKLISTED = "blacklisted"
    """The URL matches a configured blacklist domain."""


# ---------------------------------------------------------------------------
# References and outcomes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ImageReference:
    """A located image-link token and the URL embedded in it.

    ``original_markup`` is the exact substring of the document that is
    replaced on success; it always contains ``url``.  ``start`` and ``end``
    are the offsets of the match in the text it was extracted from.
    """

    url: str
    original_markup: str
    start: int = 0
    end: int = 0


@dataclass(frozen=True)
class UploadOutcome:
    """Result of running one :class:`ImageReference` through the pipeline."""

    url: str
    original_markup: str
    new_markup: str
    status: OutcomeStatus
    error_detail: str | None = None

    @classmethod
    def passthrough(
        cls,
        ref: ImageReference,
        status: OutcomeStatus,
        error_detail: str | None = None,
    ) -> UploadOutcome:
        """Build a no-op outcome (``new_markup == original_markup``)."""
        return cls(
            url=ref.url,
            original_markup=ref.original_markup,
            new_markup=ref.original_markup,
            status=status,
            error_detail=error_detail,
        )


@dataclass(frozen=True)
class UploadFailure:
    """One entry of :attr:`UploadProgress.errors`."""

    url: str
    error: str


# ---------------------------------------------------------------------------
# Progress aggregate
# ---------------------------------------------------------------------------

@dataclass
class UploadProgress:
    """Running counters for a batch run.

    Every call to :meth:`record` increments exactly one of the per-status
    counters and ``current``.
    """

    total: int = 0
    current: int = 0
    success: int = 0
    failed: int = 0
    skipped: int = 0
    blacklisted: int = 0
    errors: list[UploadFailure] = field(default_factory=list)

    def record(self, outcome: UploadOutcome) -> None:
        if outcome.status is OutcomeStatus.SUCCESS:
            self.success += 1
        elif outcome.status is OutcomeStatus.SKIPPED:
            self.skipped += 1
        elif outcome.status is OutcomeStatus.BLACKLISTED:
            self.blacklisted += 1
        else:
            self.failed += 1
            self.errors.append(
                UploadFailure(url=outcome.url, error=outcome.error_detail or "unknown error")
            )
        self.current += 1

    @property
    def percent(self) -> int:
        if self.total <= 0:
            return 0
        return round(self.current / self.total * 100)


@dataclass
class BatchResult:
    """Outcome of a whole-document run.

    Attributes
    ----------
    text:
        The rewritten document (identical to the input when nothing
        succeeded).
    progress:
        Final counters.
    outcomes:
        One :class:`UploadOutcome` per extracted reference, in document
        order.
    applied:
        ``True`` if the rewritten text was handed to the sink.
    """

    text: str
    progress: UploadProgress
    outcomes: list[UploadOutcome] = field(default_factory=list)
    applied: bool = False


@dataclass(frozen=True)
class CursorPosition:
    """Zero-based editor cursor position."""

    line: int
    ch: int
