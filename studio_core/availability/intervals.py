"""
Interval algebra over ResolvedInterval values.

All functions are pure and return new lists. Intervals are half-open
[start, end) instants in UTC; two intervals of the same resource that
overlap or touch are one interval after merging. Intervals of different
resources never merge.
"""

from datetime import datetime
from typing import Iterable, Optional

from studio_core.schemas.availability_schema import ResolvedInterval


def clip(
    resource_id: str,
    start: datetime,
    end: datetime,
    window_start: datetime,
    window_end: datetime,
) -> Optional[ResolvedInterval]:
    """Clip [start, end) to the window. Returns None when nothing is left."""
    clipped_start = max(start, window_start)
    clipped_end = min(end, window_end)
    if clipped_start >= clipped_end:
        return None
    return ResolvedInterval(resource_id=resource_id, start=clipped_start, end=clipped_end)


def merge_intervals(intervals: Iterable[ResolvedInterval]) -> list[ResolvedInterval]:
    """
    Coalesce overlapping or touching intervals per resource.

    The result is minimal, non-overlapping and ordered by start time, so
    merge_intervals(merge_intervals(x)) == merge_intervals(x).
    """
    ordered = sorted(intervals, key=lambda iv: (iv.resource_id, iv.start, iv.end))
    merged: list[ResolvedInterval] = []
    for interval in ordered:
        if merged:
            last = merged[-1]
            if last.resource_id == interval.resource_id and last.end >= interval.start:
                if interval.end > last.end:
                    merged[-1] = last.model_copy(update={"end": interval.end})
                continue
        merged.append(interval)
    merged.sort(key=lambda iv: (iv.start, iv.end, iv.resource_id))
    return merged


def subtract_intervals(
    free: Iterable[ResolvedInterval],
    busy: Iterable[ResolvedInterval],
) -> list[ResolvedInterval]:
    """Remove every busy interval from the free intervals of the same resource."""
    busy_by_resource: dict[str, list[ResolvedInterval]] = {}
    for interval in merge_intervals(busy):
        busy_by_resource.setdefault(interval.resource_id, []).append(interval)

    remaining: list[ResolvedInterval] = []
    for interval in merge_intervals(free):
        pieces = [interval]
        for blocked in busy_by_resource.get(interval.resource_id, []):
            next_pieces = []
            for piece in pieces:
                if blocked.end <= piece.start or blocked.start >= piece.end:
                    next_pieces.append(piece)
                    continue
                if piece.start < blocked.start:
                    next_pieces.append(piece.model_copy(update={"end": blocked.start}))
                if blocked.end < piece.end:
                    next_pieces.append(piece.model_copy(update={"start": blocked.end}))
            pieces = next_pieces
        remaining.extend(pieces)
    return merge_intervals(remaining)


def covers(intervals: Iterable[ResolvedInterval], start: datetime, end: datetime) -> bool:
    """True if a single interval contains [start, end]."""
    return any(iv.start <= start and iv.end >= end for iv in intervals)
