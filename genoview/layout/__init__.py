"""
Layout Module for genoview
Pure layout algorithms shared by every track

Public API:
    - IntervalPacker: Greedy pileup row assignment
    - FeatureGrouper: Adjacency grouping into aggregate glyphs
    - TickGenerator: Nice-number ruler ticks
    - DrawCommand, HitBox, Tick, PackInterval, PackResult, FeatureGroup
"""

from .packer import IntervalPacker, pack_intervals, rows_collide
from .grouper import FeatureGrouper
from .ticks import TickGenerator, nice_interval, nice_ceiling, format_position, format_span
from .types import (
    DrawCommand,
    HitBox,
    Tick,
    PackInterval,
    PackResult,
    FeatureGroup,
)

__all__ = [
    'IntervalPacker',
    'pack_intervals',
    'rows_collide',
    'FeatureGrouper',
    'TickGenerator',
    'nice_interval',
    'nice_ceiling',
    'format_position',
    'format_span',
    'DrawCommand',
    'HitBox',
    'Tick',
    'PackInterval',
    'PackResult',
    'FeatureGroup',
]
