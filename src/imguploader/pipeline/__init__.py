"""Upload orchestration.

* :mod:`.item` -- per-reference pipeline (policy, fetch, upload).
* :mod:`.batch` -- whole-document upload with bounded concurrency.
* :mod:`.single` -- upload of the image under the cursor.
* :mod:`.report` -- notification text.
"""

from __future__ import annotations

from .batch import BatchUploader, apply_outcomes
from .item import process_reference
from .report import format_failure, format_outcome, format_progress, format_summary
from .single import LineEditor, SingleImageUploader

__all__ = [
    "BatchUploader",
    "LineEditor",
    "SingleImageUploader",
    "apply_outcomes",
    "format_failure",
    "format_outcome",
    "format_progress",
    "format_summary",
    "process_reference",
]
