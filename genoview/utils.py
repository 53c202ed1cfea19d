"""
Utility functions

General-purpose helpers used across genoview modules.
"""

from __future__ import annotations
from typing import Union


Number = Union[int, float]


def clamp(value: Number, lower: Number, upper: Number) -> Number:
    """Clamp value into [lower, upper]"""
    return max(lower, min(upper, value))


def overlaps(start: Number, end: Number, view_start: Number, view_end: Number) -> bool:
    """
    Check whether [start, end] intersects the visible window

    Args:
        start: Feature start (bp)
        end: Feature end (bp)
        view_start: Window start (bp)
        view_end: Window end (bp)

    Returns:
        True if any part of the feature lies inside the window
    """
    return end >= view_start and start <= view_end


def linear_scale(value: Number, domain_min: Number, domain_max: Number,
                 range_min: Number, range_max: Number) -> float:
    """Map value linearly from a domain onto a range; degenerate domains map to range_min"""
    if domain_max == domain_min:
        return float(range_min)
    fraction = (value - domain_min) / (domain_max - domain_min)
    return range_min + fraction * (range_max - range_min)


def format_count(count: int) -> str:
    """Compact read count label: 1.2K, 3.4M"""
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M"
    if count >= 1000:
        return f"{count / 1000:.1f}K"
    return str(count)


def format_thousands(value: Number) -> str:
    """Integer with thousands separators"""
    return f"{int(value):,}"


def truncate_label(label: str, width: float, char_width: float = 7.0) -> str:
    """Shorten a label so it fits into width pixels, appending '..'"""
    max_chars = int(width // char_width)
    if len(label) <= max_chars:
        return label
    return label[:max(0, max_chars - 2)] + '..'
