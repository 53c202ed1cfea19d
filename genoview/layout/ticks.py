"""
Ruler tick generation

Nice-number tick intervals for a genomic span:

    raw = span / target
    magnitude = 10 ** floor(log10(raw))
    interval = 5 * magnitude if raw / magnitude > 5
               2 * magnitude if raw / magnitude > 2
               magnitude     otherwise
    minor = interval / 5

Major ticks fall on every multiple of interval inside [start, end]; minor ticks
on multiples of minor that are not majors. Labels scale by the magnitude of the
position itself (k / M suffix).
"""
from __future__ import annotations
from typing import Callable, List, Optional, Tuple
from math import ceil, floor, log10

from .types import Tick

MINOR_PER_MAJOR = 5


def nice_interval(span: float, target: int = 10) -> Tuple[float, float]:
    """
    Choose major and minor tick intervals

    Args:
        span: Region span (bp), must be > 0
        target: Target number of major ticks

    Returns:
        (interval, minor_interval)
    """
    if span <= 0:
        raise ValueError(f"span must be > 0, got {span}")
    if target <= 0:
        raise ValueError(f"target must be > 0, got {target}")

    raw_interval = span / target
    magnitude = 10 ** floor(log10(raw_interval))
    ratio = raw_interval / magnitude

    if ratio > 5:
        interval = 5 * magnitude
    elif ratio > 2:
        interval = 2 * magnitude
    else:
        interval = magnitude

    return interval, interval / MINOR_PER_MAJOR


def format_position(pos: float) -> str:
    """Tick label: 7.67M, 12.5k, 850"""
    if pos >= 1_000_000:
        return f"{pos / 1_000_000:.2f}M"
    if pos >= 1000:
        return f"{pos / 1000:.1f}k"
    if float(pos).is_integer():
        return str(int(pos))
    return f"{pos:g}"


def format_span(span: float) -> str:
    """Span summary for the ruler header: 1.20 Mb, 19.1 kb, 850 bp"""
    if span >= 1_000_000:
        return f"{span / 1_000_000:.2f} Mb"
    if span >= 1000:
        return f"{span / 1000:.1f} kb"
    return f"{int(span)} bp"


def nice_ceiling(value: float) -> float:
    """Smallest number of the form {1, 2, 5} * 10**k that is >= value"""
    if value <= 0:
        return 1.0
    magnitude = 10 ** floor(log10(value))
    for step in (1, 2, 5, 10):
        candidate = step * magnitude
        if candidate >= value:
            return float(candidate)
    return float(10 * magnitude)


def _decimals(step: float) -> int:
    """Digits needed to represent multiples of step without float noise"""
    if step >= 1:
        return 0
    return int(ceil(-log10(step))) + 1


class TickGenerator:
    """
    Computes ruler ticks for a region

    Args:
        target_ticks: Target number of major ticks
    """

    def __init__(self, target_ticks: int = 10) -> None:
        if target_ticks <= 0:
            raise ValueError(f"target_ticks must be > 0, got {target_ticks}")
        self.target_ticks = target_ticks

    def generate(
        self,
        start: float,
        end: float,
        to_pixel: Optional[Callable[[float], float]] = None
    ) -> List[Tick]:
        """
        Generate major then minor ticks for [start, end]

        Args:
            start: Region start (bp)
            end: Region end (bp)
            to_pixel: Genomic position -> pixel mapping (identity when None)

        Returns:
            Major ticks in ascending order followed by minor ticks
        """
        to_pixel = to_pixel or (lambda pos: pos)
        interval, minor = nice_interval(end - start, self.target_ticks)

        ticks: List[Tick] = []
        digits = _decimals(interval)
        for k in range(ceil(start / interval), floor(end / interval) + 1):
            pos = round(k * interval, digits) if digits else k * interval
            ticks.append(Tick(position=pos, pixel=to_pixel(pos), label=format_position(pos), major=True))

        digits = _decimals(minor)
        for j in range(ceil(start / minor), floor(end / minor) + 1):
            if j % MINOR_PER_MAJOR == 0:
                continue
            pos = round(j * minor, digits) if digits else j * minor
            ticks.append(Tick(position=pos, pixel=to_pixel(pos), label='', major=False))

        return ticks

    def major(self, start: float, end: float,
              to_pixel: Optional[Callable[[float], float]] = None) -> List[Tick]:
        """Major ticks only"""
        return [t for t in self.generate(start, end, to_pixel) if t.major]
