"""Locate Markdown image links in text.

Only the ``![alt](target)`` form is recognised.  This is a plain regular
expression, not a Markdown parser: the target is matched non-greedily up to
the first ``)``, so targets containing parentheses are cut short.
"""

from __future__ import annotations

import re

from imguploader.models import ImageReference

IMAGE_LINK_RE = re.compile(r"!\[.*?\]\((.*?)\)")


def extract_image_references(text: str) -> list[ImageReference]:
    """Return one :class:`ImageReference` per image link in *text*.

    References are ordered by first occurrence and never overlap.  Text
    without image links yields an empty list.
    """
    return [
        ImageReference(
            url=match.group(1),
            original_markup=match.group(0),
            start=match.start(),
            end=match.end(),
        )
        for match in IMAGE_LINK_RE.finditer(text)
    ]


def find_image_at_cursor(line: str, ch: int) -> ImageReference | None:
    """Return the image link on *line* that contains column *ch*.

    Both ends are inclusive, so a cursor placed right after the closing
    parenthesis still selects the link.
    """
    for ref in extract_image_references(line):
        if ref.start <= ch <= ref.end:
            return ref
    return None
