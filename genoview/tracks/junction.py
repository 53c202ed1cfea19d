"""
Junction track

Splice junctions drawn as quadratic arcs from donor to acceptor. Arcs for the
'+' and unstranded junctions rise above the center baseline, '-' junctions hang
below it. Arc height scales with read support (or with span), stroke width with
log2 of the read count.
"""

from __future__ import annotations
from math import log2
from typing import Any, Dict, List
import logging

from matplotlib import colormaps
from matplotlib.colors import to_hex

from ..config import JunctionTrackConfig
from ..layout.types import DrawCommand, HitBox
from ..types import Payload, SpliceJunction, TooltipFields
from ..utils import clamp, format_count, linear_scale, overlaps
from .base import RenderContext, Track

logger = logging.getLogger(__name__)

COLOR_SCHEMES: Dict[str, Dict[str, str]] = {
    'strand': {'+': '#4a90d9', '-': '#d94a4a', '.': '#888888'},
    'motif': {'GT-AG': '#27ae60', 'GC-AG': '#f39c12', 'AT-AC': '#9b59b6', 'other': '#e74c3c'},
    'annotated': {'known': '#3498db', 'novel': '#e74c3c'},
    'novel_type': {
        'exon_skip': '#e74c3c',
        'alt_donor': '#f39c12',
        'alt_acceptor': '#9b59b6',
        'novel_intron': '#16a085',
        'novel_exon': '#2c3e50',
    },
}

BASELINE_COLOR = '#444'


def stroke_width(read_count: int) -> float:
    """clamp(log2(reads + 1), 1, 6)"""
    return clamp(log2(read_count + 1), 1.0, 6.0)


class JunctionTrack(Track):
    """RNA-seq splice junction arcs"""

    kind = 'junction'
    config_class = JunctionTrackConfig
    empty_message = 'No junctions in this region'

    def parse(self, payload: Payload) -> List[SpliceJunction]:
        junctions = payload.get('junctions', []) if isinstance(payload, dict) else payload
        return list(junctions)

    def junctions(self) -> List[SpliceJunction]:
        """Loaded junctions passing the read-support filter"""
        if self.data is None:
            return []
        return [j for j in self.data if j.get('read_count', 0) >= self.config.min_reads]

    def visible_features(self, context: RenderContext) -> List[SpliceJunction]:
        region = context.region
        return [
            j for j in self.junctions()
            if j.get('chromosome', region.chromosome) == region.chromosome
            and overlaps(j['start'], j['end'], region.start, region.end)
        ]

    def junction_color(self, junction: SpliceJunction, max_reads: int = 100) -> str:
        color_by = self.config.color_by

        if color_by == 'strand':
            scheme = COLOR_SCHEMES['strand']
            return scheme.get(junction.get('strand', '.'), scheme['.'])
        if color_by == 'motif':
            scheme = COLOR_SCHEMES['motif']
            return scheme.get(junction.get('motif', 'other'), scheme['other'])
        if color_by == 'annotated':
            return COLOR_SCHEMES['annotated']['known' if junction.get('is_annotated') else 'novel']
        if color_by == 'novel_type':
            if not junction.get('is_annotated') and junction.get('novel_type'):
                return COLOR_SCHEMES['novel_type'].get(junction['novel_type'], '#888')
            return COLOR_SCHEMES['annotated']['known']
        if color_by == 'read_count':
            fraction = clamp(junction.get('read_count', 0) / max(max_reads, 1), 0.0, 1.0)
            return to_hex(colormaps['YlOrRd'](fraction))
        raise ValueError(f"Unknown color scheme: {color_by}")

    def arc_height(self, junction: SpliceJunction, max_reads: int) -> float:
        cfg = self.config
        if cfg.scale_arc_by_reads:
            return linear_scale(junction.get('read_count', 0), 1, max_reads,
                                cfg.min_arc_height, cfg.max_arc_height)
        span = junction['end'] - junction['start']
        return min(cfg.max_arc_height, cfg.min_arc_height + span / 500)

    def layout_content(self, context: RenderContext) -> List[DrawCommand]:
        cfg = self.config
        junctions = self.visible_features(context)
        max_reads = max((j.get('read_count', 0) for j in junctions), default=100) or 100
        baseline = context.height / 2

        commands = [DrawCommand(kind='line', x=0.0, y=baseline, x2=context.width, y2=baseline,
                                stroke=BASELINE_COLOR, stroke_width=2.0, role='baseline')]

        # minus-strand arcs are laid out after the rest so they sit on top
        ordered = [j for j in junctions if j.get('strand') != '-'] + \
                  [j for j in junctions if j.get('strand') == '-']
        for junction in ordered:
            commands.extend(self._junction_commands(context, junction, baseline, max_reads))

        return commands

    def _junction_commands(self, context: RenderContext, junction: SpliceJunction,
                           baseline: float, max_reads: int) -> List[DrawCommand]:
        cfg = self.config
        x1 = context.to_pixel(junction['start'])
        x2 = context.to_pixel(junction['end'])
        if x2 < 0 or x1 > context.width:
            return []

        above = junction.get('strand') != '-'
        offset = -self.arc_height(junction, max_reads) if above else self.arc_height(junction, max_reads)
        mid_x = (x1 + x2) / 2
        control = (mid_x, baseline + offset)
        color = self.junction_color(junction, max_reads)
        read_count = junction.get('read_count', 0)
        width = stroke_width(read_count)

        commands = [
            DrawCommand(
                kind='curve', points=((x1, baseline), control, (x2, baseline)),
                stroke=color, stroke_width=width, opacity=0.8,
                dashed=cfg.dashed_novel and not junction.get('is_annotated', False),
                feature_id=junction['id'], role='arc',
            ),
            DrawCommand(kind='circle', x=x1, y=baseline, radius=cfg.site_radius, color=color,
                        feature_id=junction['id'], role='donor'),
            DrawCommand(kind='circle', x=x2, y=baseline, radius=cfg.site_radius, color=color,
                        feature_id=junction['id'], role='acceptor'),
        ]

        if cfg.show_labels and read_count >= cfg.label_threshold:
            label_y = baseline + offset / 2 - 5 if above else baseline + offset / 2 + 12
            commands.append(DrawCommand(
                kind='text', x=mid_x, y=label_y, text=format_count(read_count),
                color='#333', font_size=9.0, anchor='middle', bold=True,
                feature_id=junction['id'], role='label',
            ))

        tolerance = cfg.hit_tolerance + width / 2
        peak = baseline + offset / 2
        self._add_hit(HitBox(
            min(x1, x2) - tolerance, min(baseline, peak) - tolerance,
            max(x1, x2) + tolerance, max(baseline, peak) + tolerance,
            feature=junction, shape='curve',
            params=((x1, baseline), control, (x2, baseline), tolerance),
        ))
        return commands

    def stats(self) -> Dict[str, Any]:
        """Summary counts over the loaded (filtered) junctions"""
        junctions = self.junctions()
        by_motif: Dict[str, int] = {}
        for junction in junctions:
            motif = junction.get('motif', 'other')
            by_motif[motif] = by_motif.get(motif, 0) + 1
        known = sum(1 for j in junctions if j.get('is_annotated'))
        return {
            'total': len(junctions),
            'known': known,
            'novel': len(junctions) - known,
            'total_reads': sum(j.get('read_count', 0) for j in junctions),
            'by_motif': by_motif,
        }

    def tooltip_fields(self, feature: Any) -> TooltipFields:
        junction: SpliceJunction = feature
        fields = [
            ('Junction', junction.get('gene_name') or 'Splice Junction'),
            ('Position', f"{junction.get('chromosome', '')}:{junction['start']:,}-{junction['end']:,}"),
            ('Strand', junction.get('strand', '.')),
            ('Read Count', f"{junction.get('read_count', 0):,}"),
        ]
        if junction.get('unique_reads'):
            fields.append(('Unique Reads', f"{junction['unique_reads']:,}"))
        fields.append(('Motif', junction.get('motif', 'other')))
        fields.append(('Status', 'Known' if junction.get('is_annotated') else 'Novel'))
        if junction.get('novel_type'):
            fields.append(('Novel Type', junction['novel_type'].replace('_', ' ')))
        fields.append(('Span', f"{junction['end'] - junction['start']:,} bp"))
        return fields
