"""Upload the one image under the editor cursor.

Only the line holding the image is rewritten; the rest of the document is
not touched, and the cursor is put back where it was.
"""

from __future__ import annotations

from typing import Protocol

from imguploader.config import UploaderConfig
from imguploader.errors import ExtractionError
from imguploader.http.transport import AsyncHttpTransport
from imguploader.image.extract import find_image_at_cursor
from imguploader.models import CursorPosition, ImageReference, OutcomeStatus, UploadOutcome
from imguploader.observability import get_logger

from .batch import log_outcome
from .item import process_reference

log = get_logger("imguploader.pipeline")

LINE_CHANGED_MESSAGE = "image link is no longer on the line"


class LineEditor(Protocol):
    """Line-oriented view of the host editor."""

    def get_cursor(self) -> CursorPosition: ...

    def set_cursor(self, position: CursorPosition) -> None: ...

    def get_line(self, line: int) -> str: ...

    def replace_line(self, line: int, text: str) -> None: ...


class SingleImageUploader:
    """Single-reference variant of :class:`~imguploader.pipeline.batch.BatchUploader`."""

    def __init__(self, config: UploaderConfig, transport: AsyncHttpTransport) -> None:
        self._config = config
        self._transport = transport

    async def run(self, editor: LineEditor, ref: ImageReference, line: int) -> UploadOutcome:
        """Upload *ref* and rewrite it in place on *line*.

        Blacklisted, already-uploaded and failed references leave the editor
        untouched.  If the markup has left *line* while the upload ran, the
        editor is not written and a ``failed`` outcome is returned.

        Raises
        ------
        ConfigurationError
            If the reference is eligible but the endpoint is not configured.
        """
        outcome = await process_reference(self._transport, self._config, ref)
        log_outcome(outcome, "single")
        if outcome.status is not OutcomeStatus.SUCCESS:
            return outcome

        current = editor.get_line(line)
        if ref.original_markup not in current:
            log.warning(
                "Image markup no longer on line",
                extra={"extra_fields": {"op": "single", "line": line, "url": ref.url}},
            )
            return UploadOutcome.passthrough(ref, OutcomeStatus.FAILED, LINE_CHANGED_MESSAGE)
        cursor = editor.get_cursor()
        new_line = current.replace(ref.original_markup, outcome.new_markup, 1)
        editor.replace_line(line, new_line)
        editor.set_cursor(cursor)
        return outcome

    async def run_at_cursor(self, editor: LineEditor) -> UploadOutcome:
        """Locate the image link under the cursor and upload it.

        Raises
        ------
        ExtractionError
            If the cursor is not on an image link.
        """
        cursor = editor.get_cursor()
        ref = find_image_at_cursor(editor.get_line(cursor.line), cursor.ch)
        if ref is None:
            raise ExtractionError(
                message="No image link under the cursor",
                context={"line": cursor.line, "ch": cursor.ch},
            )
        return await self.run(editor, ref, cursor.line)
