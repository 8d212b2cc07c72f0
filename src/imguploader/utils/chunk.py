"""Partition a sequence into consecutive batches of bounded size."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> list[list[T]]:
    """Split *items* into batches of at most *size*, preserving order.

    An empty input returns an empty list (not ``[[]]``).

    Raises
    ------
    ValueError
        If *size* is less than 1.

    Examples
    --------
    >>> chunked([1, 2, 3, 4, 5, 6, 7], 3)
    [[1, 2, 3], [4, 5, 6], [7]]
    """
    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")

    if not items:
        return []

    return [list(items[i : i + size]) for i in range(0, len(items), size)]
