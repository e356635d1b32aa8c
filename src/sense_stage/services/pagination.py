"""Pagination clamping shared by every list use case."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from sense_stage.core.settings import settings

T = TypeVar("T")


@dataclass
class PageResult(Generic[T]):
    """A page of results with the clamped window that produced it."""

    items: list[T]
    total: int
    limit: int
    offset: int


def clamp_page(limit: int | None, offset: int | None) -> tuple[int, int]:
    """Clamp a requested window to ``[1, FEED_MAX_LIMIT]`` and a non-negative offset.

    A missing limit falls back to ``FEED_DEFAULT_LIMIT``.
    """
    if limit is None:
        limit = settings.feed_default_limit
    limit = max(1, min(limit, settings.feed_max_limit))
    offset = max(0, offset or 0)
    return limit, offset
