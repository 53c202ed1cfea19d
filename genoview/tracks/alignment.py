"""
Alignment track

Aligned sequencing reads packed into a pileup, drawn op by op from their CIGAR
strings, with an optional strand-split coverage histogram computed from the
reads themselves.

Color schemes:
    strand            forward / reverse
    mapq              viridis over MAPQ 0-60
    insert_size       short / normal / long relative to insert_size_range
    pair_orientation  inter-chromosomal mates and inward-facing violations
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple
import logging
import re

import numpy as np
from matplotlib import colormaps
from matplotlib.colors import to_hex

from ..config import AlignmentTrackConfig
from ..layout.packer import IntervalPacker
from ..layout.types import DrawCommand, HitBox, PackInterval
from ..types import AlignedRead, Payload, TooltipFields
from ..utils import clamp, overlaps
from .base import RenderContext, Track

logger = logging.getLogger(__name__)

CIGAR_PATTERN = re.compile(r'(\d+)([MIDNSHP=X])')
REFERENCE_CONSUMING = frozenset('MDN=X')

STRAND_COLORS = {'+': '#4a90d9', '-': '#d94a4a'}
MISMATCH_COLOR = '#e74c3c'
INSERTION_COLOR = '#9b59b6'
DELETION_COLOR = '#e74c3c'
SKIP_COLOR = '#888'
SOFT_CLIP_COLOR = '#f39c12'
MAPQ_MAX = 60

SAM_FLAGS: List[Tuple[int, str]] = [
    (0x1, 'paired'),
    (0x2, 'proper pair'),
    (0x4, 'unmapped'),
    (0x8, 'mate unmapped'),
    (0x10, 'reverse'),
    (0x20, 'mate reverse'),
    (0x40, 'first in pair'),
    (0x80, 'second in pair'),
    (0x100, 'secondary'),
    (0x200, 'QC fail'),
    (0x400, 'duplicate'),
    (0x800, 'supplementary'),
]


@dataclass(frozen=True)
class CigarOp:
    """
    One CIGAR operation anchored on the reference

    Operations that do not consume the reference (I, S, H, P) have
    ref_start == ref_end.
    """
    op: str
    length: int
    ref_start: int
    ref_end: int


def parse_cigar(cigar: str, read_start: int) -> List[CigarOp]:
    """
    Parse a CIGAR string into reference-anchored operations

    Args:
        cigar: CIGAR string (e.g. '50M2I48M')
        read_start: Reference position of the first aligned base

    Returns:
        Operations in string order
    """
    ops: List[CigarOp] = []
    ref_pos = read_start
    for length_text, op in CIGAR_PATTERN.findall(cigar or ''):
        length = int(length_text)
        ref_end = ref_pos + length if op in REFERENCE_CONSUMING else ref_pos
        ops.append(CigarOp(op=op, length=length, ref_start=ref_pos, ref_end=ref_end))
        ref_pos = ref_end
    return ops


def describe_flags(flags: int) -> List[str]:
    """SAM flag bits -> descriptions"""
    return [description for bit, description in SAM_FLAGS if flags & bit]


def mapq_color(mapq: float) -> str:
    return to_hex(colormaps['viridis'](clamp(mapq, 0, MAPQ_MAX) / MAPQ_MAX))


def read_color(read: AlignedRead, color_by: str, insert_size_range: Tuple[int, int] = (150, 800)) -> str:
    """Color of a read under a color scheme"""
    strand_color = STRAND_COLORS.get(read.get('strand', '+'), STRAND_COLORS['+'])

    if color_by == 'strand':
        return strand_color

    if color_by == 'mapq':
        return mapq_color(read.get('mapq', 0))

    if color_by == 'insert_size':
        insert_size = abs(read.get('insert_size') or 0)
        if not insert_size:
            return '#888'
        low, high = insert_size_range
        if insert_size < low:
            return '#3498db'
        if insert_size > high:
            return '#e74c3c'
        return '#2ecc71'

    if color_by == 'pair_orientation':
        mate_chromosome = read.get('mate_chromosome')
        mate_start = read.get('mate_start')
        if mate_chromosome and mate_chromosome != read.get('chromosome'):
            return '#9b59b6'
        if mate_start is not None:
            if read.get('strand') == '+' and mate_start < read['start']:
                return '#e74c3c'
            if read.get('strand') == '-' and mate_start > read['start']:
                return '#e74c3c'
        return strand_color

    raise ValueError(f"Unknown color scheme: {color_by}")


def compute_coverage(reads: List[AlignedRead], start: int, end: int, bins: int) -> Dict[str, np.ndarray]:
    """
    Mean per-strand depth over equal-width bins

    Only reference-aligned bases (M, =, X) count toward depth.

    Returns:
        Dict with 'edges' (bins + 1), 'forward' and 'reverse' (bins each)
    """
    edges = np.linspace(start, end, bins + 1)
    left, right = edges[:-1], edges[1:]
    widths = np.maximum(right - left, 1e-9)
    depth = {'+': np.zeros(bins), '-': np.zeros(bins)}

    for read in reads:
        strand = '-' if read.get('strand') == '-' else '+'
        for op in parse_cigar(read.get('cigar') or f"{read['end'] - read['start']}M", read['start']):
            if op.op not in 'M=X':
                continue
            covered = np.minimum(op.ref_end, right) - np.maximum(op.ref_start, left)
            depth[strand] += np.clip(covered, 0, None)

    return {'edges': edges, 'forward': depth['+'] / widths, 'reverse': depth['-'] / widths}


class AlignmentTrack(Track):
    """Aligned reads in a pileup"""

    kind = 'alignment'
    config_class = AlignmentTrackConfig
    empty_message = 'No reads in this region'

    def parse(self, payload: Payload) -> List[AlignedRead]:
        reads = payload.get('reads', []) if isinstance(payload, dict) else payload
        return list(reads)

    def visible_features(self, context: RenderContext) -> List[AlignedRead]:
        region = context.region
        min_mapq = self.config.min_mapq
        return [
            r for r in self.data
            if r.get('mapq', 0) >= min_mapq
            and r.get('chromosome', region.chromosome) == region.chromosome
            and overlaps(r['start'], r['end'], region.start, region.end)
        ]

    def _reads_top(self) -> float:
        cfg = self.config
        return cfg.coverage_height + 10 if cfg.show_coverage else 0.0

    def max_rows(self, context: RenderContext) -> int:
        cfg = self.config
        if cfg.max_rows:
            return cfg.max_rows
        available = context.height - self._reads_top()
        return max(1, int((available + cfg.read_spacing) // (cfg.read_height + cfg.read_spacing)))

    def layout_content(self, context: RenderContext) -> List[DrawCommand]:
        cfg = self.config
        reads = self.visible_features(context)
        commands: List[DrawCommand] = []

        if cfg.show_coverage:
            commands.extend(self._coverage_commands(context, reads))

        max_rows = self.max_rows(context)
        packer = IntervalPacker(min_gap=cfg.read_gap, max_rows=max_rows)
        result = packer.pack(
            PackInterval(key=i, start=context.to_pixel(r['start']), end=context.to_pixel(r['end']))
            for i, r in enumerate(reads)
        )

        top = self._reads_top()
        for index, read in enumerate(reads):
            row = result.rows.get(index)
            if row is None:
                continue
            y = top + row * (cfg.read_height + cfg.read_spacing)
            commands.extend(self._read_commands(context, read, y))

        if result.has_overflow:
            commands.append(self._report_overflow(context, result.overflow_count, max_rows))

        logger.debug(f"Track {self.id}: {len(result.rows)} reads in {result.row_count} rows")
        return commands

    def _read_commands(self, context: RenderContext, read: AlignedRead, y: float) -> List[DrawCommand]:
        cfg = self.config
        height = cfg.read_height
        color = read_color(read, cfg.color_by, cfg.insert_size_range)
        ops = parse_cigar(read.get('cigar') or f"{read['end'] - read['start']}M", read['start'])
        read_id = read['id']
        commands: List[DrawCommand] = []

        for i, op in enumerate(ops):
            x1 = context.to_pixel(op.ref_start)
            x2 = context.to_pixel(op.ref_end)
            width = max(1.0, x2 - x1)

            if op.op in ('M', '='):
                commands.append(DrawCommand(kind='rect', x=x1, y=y, width=width, height=height,
                                            color=color, feature_id=read_id, role='read'))
            elif op.op == 'X':
                commands.append(DrawCommand(kind='rect', x=x1, y=y, width=width, height=height,
                                            color=MISMATCH_COLOR, feature_id=read_id, role='mismatch'))
            elif op.op == 'I':
                commands.append(DrawCommand(kind='line', x=x1, y=y - 2, x2=x1, y2=y + height + 2,
                                            stroke=INSERTION_COLOR, stroke_width=2.0,
                                            feature_id=read_id, role='insertion'))
            elif op.op in ('D', 'N'):
                commands.append(DrawCommand(
                    kind='line', x=x1, y=y + height / 2, x2=x2, y2=y + height / 2,
                    stroke=DELETION_COLOR if op.op == 'D' else SKIP_COLOR,
                    dashed=op.op == 'N', feature_id=read_id,
                    role='deletion' if op.op == 'D' else 'skip',
                ))
            elif op.op == 'S' and cfg.show_soft_clips:
                # leading clips extend left of the first aligned base
                clip_start = op.ref_start - op.length if i == 0 else op.ref_start
                cx1 = context.to_pixel(clip_start)
                cx2 = context.to_pixel(clip_start + op.length)
                commands.append(DrawCommand(kind='rect', x=cx1, y=y, width=max(1.0, cx2 - cx1),
                                            height=height, color=SOFT_CLIP_COLOR, opacity=0.5,
                                            feature_id=read_id, role='soft-clip'))

        commands.append(self._direction_marker(context, read, y))

        x0 = max(0.0, context.to_pixel(read['start']))
        x1 = min(context.width, context.to_pixel(read['end']))
        self._add_hit(HitBox(x0, y, max(x0 + 1.0, x1), y + height, feature=read))
        return commands

    def _direction_marker(self, context: RenderContext, read: AlignedRead, y: float) -> DrawCommand:
        mid_x = context.to_pixel((read['start'] + read['end']) / 2)
        mid_y = y + self.config.read_height / 2
        size = 3.0
        tip = mid_x + 2 * size if read.get('strand', '+') == '+' else mid_x - 2 * size
        return DrawCommand(
            kind='polygon',
            points=((mid_x, mid_y - size), (tip, mid_y), (mid_x, mid_y + size)),
            color='#ffffff', opacity=0.5, feature_id=read['id'], role='direction',
        )

    def _coverage_commands(self, context: RenderContext, reads: List[AlignedRead]) -> List[DrawCommand]:
        cfg = self.config
        region = context.region
        coverage = compute_coverage(reads, region.start, region.end, cfg.coverage_bins)
        forward, reverse = coverage['forward'], coverage['reverse']
        total = forward + reverse
        max_depth = float(total.max()) if total.size and total.max() > 0 else 1.0

        centers = (coverage['edges'][:-1] + coverage['edges'][1:]) / 2
        xs = [context.to_pixel(c) for c in centers]
        height = cfg.coverage_height

        def to_y(depth: float) -> float:
            return height - depth / max_depth * height

        forward_top = [(x, to_y(d)) for x, d in zip(xs, forward)]
        total_top = [(x, to_y(d)) for x, d in zip(xs, total)]

        commands = [
            DrawCommand(kind='polygon',
                        points=tuple([(xs[0], height)] + forward_top + [(xs[-1], height)]),
                        color=STRAND_COLORS['+'], opacity=0.7, feature_id=self.id, role='coverage-forward'),
            DrawCommand(kind='polygon',
                        points=tuple(total_top + list(reversed(forward_top))),
                        color=STRAND_COLORS['-'], opacity=0.7, feature_id=self.id, role='coverage-reverse'),
            DrawCommand(kind='text', x=2.0, y=10.0, text=f"Depth 0-{max_depth:.0f}",
                        color='#888', font_size=9.0, role='coverage-label'),
        ]
        return commands

    def tooltip_fields(self, feature: Any) -> TooltipFields:
        read: AlignedRead = feature
        fields = [
            ('Read', read['id']),
            ('Position', f"{read.get('chromosome', '')}:{read['start']:,}-{read['end']:,}"),
            ('Strand', read.get('strand', '+')),
            ('MAPQ', str(read.get('mapq', 0))),
            ('CIGAR', read.get('cigar', '')),
        ]
        if read.get('insert_size'):
            fields.append(('Insert Size', str(read['insert_size'])))
        if read.get('mate_chromosome'):
            fields.append(('Mate', f"{read['mate_chromosome']}:{read.get('mate_start', '')}"))
        fields.append(('Flags', ', '.join(describe_flags(read.get('flags', 0)))))
        return fields
