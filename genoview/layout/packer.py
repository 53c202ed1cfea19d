"""
Interval packer - greedy pileup layout

Places pixel-space intervals into the fewest collision-free rows.

Algorithm:
1. Intervals are visited in ascending start order (ties keep insertion order)
2. Each interval takes the lowest row whose last end + min_gap <= start
3. Otherwise a new row is opened, unless max_rows is reached, in which
   case the interval is marked as overflow and left unplaced

Complexity is O(n * rows).
"""
from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Hashable, Sequence
import logging

from .types import PackInterval, PackResult

logger = logging.getLogger(__name__)


class IntervalPacker:
    """
    Greedy row assignment for overlapping intervals

    Args:
        min_gap: Minimum horizontal gap between intervals sharing a row (px)
        max_rows: Row limit; None or 0 for unlimited
    """

    def __init__(self, min_gap: float = 0.0, max_rows: Optional[int] = None) -> None:
        if min_gap < 0:
            raise ValueError(f"min_gap must be >= 0, got {min_gap}")
        if max_rows is not None and max_rows < 0:
            raise ValueError(f"max_rows must be >= 0, got {max_rows}")
        self.min_gap = min_gap
        self.max_rows = max_rows or None

    def pack(self, intervals: Iterable[PackInterval]) -> PackResult:
        """
        Assign rows to intervals

        Args:
            intervals: Intervals tagged with stable identifiers

        Returns:
            PackResult with row assignments and overflow identifiers
        """
        # sorted() is stable: equal starts keep their insertion order
        ordered = sorted(intervals, key=lambda iv: iv.start)

        row_ends: List[float] = []
        rows: Dict[Hashable, int] = {}
        overflow: List[Hashable] = []

        for interval in ordered:
            if interval.end < interval.start:
                raise ValueError(f"Interval {interval.key!r} ends before it starts: "
                                 f"{interval.start} > {interval.end}")
            row = self._first_free_row(row_ends, interval.start)
            if row is None:
                if self.max_rows is not None and len(row_ends) >= self.max_rows:
                    overflow.append(interval.key)
                    continue
                row_ends.append(interval.end)
                row = len(row_ends) - 1
            else:
                row_ends[row] = interval.end
            rows[interval.key] = row

        if overflow:
            logger.debug(f"Packed {len(rows)} intervals into {len(row_ends)} rows, "
                         f"{len(overflow)} overflowed (max_rows={self.max_rows})")

        return PackResult(rows=rows, overflow=overflow, row_count=len(row_ends))

    def _first_free_row(self, row_ends: Sequence[float], start: float) -> Optional[int]:
        """Lowest row index whose last interval ends at least min_gap before start"""
        for row, row_end in enumerate(row_ends):
            if row_end + self.min_gap <= start:
                return row
        return None


def pack_intervals(
    spans: Sequence[Sequence[float]],
    min_gap: float = 0.0,
    max_rows: Optional[int] = None
) -> List[Optional[int]]:
    """
    Pack plain (start, end) pairs and return one row per input

    Args:
        spans: (start, end) pixel pairs in input order
        min_gap: Minimum gap between intervals sharing a row (px)
        max_rows: Row limit; None for unlimited

    Returns:
        Row index per span, None for overflowed spans
    """
    packer = IntervalPacker(min_gap=min_gap, max_rows=max_rows)
    result = packer.pack(PackInterval(key=i, start=s, end=e) for i, (s, e) in enumerate(spans))
    return [result.rows.get(i) for i in range(len(spans))]


def rows_collide(a: PackInterval, b: PackInterval, min_gap: float) -> bool:
    """Whether two intervals would violate the gap tolerance on a shared row"""
    return a.start < b.end + min_gap and b.start < a.end + min_gap
