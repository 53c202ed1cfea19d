"""
Mutation track

Lollipop plot of point mutations. Mutations closer than ``min_gap`` pixels are
merged into one glyph: a pie of wedges, one per member, colored by consequence
and weighted by sample count, labelled with the member count.
"""

from __future__ import annotations
from typing import Any, Dict, List
import logging

from ..config import MutationTrackConfig
from ..layout.grouper import FeatureGrouper
from ..layout.types import DrawCommand, FeatureGroup, HitBox
from ..types import MutationFeature, Payload, TooltipFields
from ..utils import clamp, linear_scale
from .base import RenderContext, Track

logger = logging.getLogger(__name__)

MUTATION_COLORS: Dict[str, str] = {
    'missense': '#E64A19',
    'nonsense': '#D32F2F',
    'frameshift': '#7B1FA2',
    'splice': '#1976D2',
    'inframe_indel': '#388E3C',
    'synonymous': '#757575',
    'intron': '#9E9E9E',
    'utr': '#78909C',
    'other': '#607D8B',
}

BASELINE_COLOR = '#ccc'
GROUP_STEM_COLOR = '#666'


def consequence_color(consequence: str) -> str:
    return MUTATION_COLORS.get(consequence, MUTATION_COLORS['other'])


def _position(mutation: MutationFeature) -> int:
    return mutation.get('position', mutation.get('start', 0))


def _samples(mutation: MutationFeature) -> int:
    return mutation.get('sample_count', 1)


class MutationTrack(Track):
    """Point mutations as lollipops, grouped when crowded"""

    kind = 'mutation'
    config_class = MutationTrackConfig
    empty_message = 'No mutations in this region'

    def parse(self, payload: Payload) -> List[MutationFeature]:
        mutations = payload.get('mutations', []) if isinstance(payload, dict) else payload
        return list(mutations)

    def visible_features(self, context: RenderContext) -> List[MutationFeature]:
        region = context.region
        return [
            m for m in self.data
            if m.get('chromosome', region.chromosome) == region.chromosome
            and region.start <= _position(m) < region.end
        ]

    def layout_content(self, context: RenderContext) -> List[DrawCommand]:
        cfg = self.config
        mutations = self.visible_features(context)
        max_count = max((_samples(m) for m in self.data), default=1) or 1
        baseline_y = context.height - cfg.baseline_offset

        commands = [DrawCommand(
            kind='line', x=0.0, y=baseline_y, x2=context.width, y2=baseline_y,
            stroke=BASELINE_COLOR, role='baseline',
        )]

        grouper = FeatureGrouper(
            min_gap=cfg.min_gap,
            position_of=_position,
            category_of=lambda m: m.get('consequence', 'other'),
            weight_of=_samples,
        )
        for group in grouper.group(mutations, context.to_pixel):
            if group.is_aggregate:
                commands.extend(self._group_commands(group, baseline_y, max_count))
            else:
                commands.extend(self._single_commands(group, baseline_y, max_count))

        return commands

    def _radius(self, samples: float, max_count: int) -> float:
        cfg = self.config
        radius = linear_scale(samples, 1, max_count, cfg.min_radius, cfg.max_radius)
        return clamp(radius, cfg.min_radius, cfg.max_radius)

    def _stem(self, samples: float, max_count: int) -> float:
        cfg = self.config
        return clamp(linear_scale(samples, 1, max_count, cfg.min_stem, cfg.max_stem),
                     cfg.min_stem, cfg.max_stem)

    def _single_commands(self, group: FeatureGroup, baseline_y: float,
                         max_count: int) -> List[DrawCommand]:
        cfg = self.config
        mutation = group.members[0]
        x = group.first_pixel
        samples = _samples(mutation)
        radius = self._radius(samples, max_count)
        head_y = baseline_y - self._stem(samples, max_count) - radius
        color = consequence_color(mutation.get('consequence', 'other'))

        commands = [
            DrawCommand(kind='line', x=x, y=baseline_y, x2=x, y2=head_y + radius,
                        stroke=color, stroke_width=1.5, feature_id=mutation['id'], role='stem'),
            DrawCommand(kind='circle', x=x, y=head_y, radius=radius, color=color,
                        stroke='#fff', feature_id=mutation['id'], role='head'),
        ]
        if cfg.show_labels and samples > cfg.label_min_samples and mutation.get('aa_change'):
            commands.append(DrawCommand(
                kind='text', x=x, y=head_y - radius - 4, text=mutation['aa_change'],
                color='#333', font_size=10.0, anchor='middle',
                feature_id=mutation['id'], role='label',
            ))

        self._add_hit(HitBox(x - radius, head_y - radius, x + radius, head_y + radius,
                             feature=mutation, shape='circle', params=(x, head_y, radius)))
        return commands

    def _group_commands(self, group: FeatureGroup, baseline_y: float,
                        max_count: int) -> List[DrawCommand]:
        cfg = self.config
        center_x = group.center
        radius = self._radius(group.weight, max_count)
        head_y = baseline_y - cfg.group_stem - radius
        group_id = ','.join(m['id'] for m in group.members)

        commands = [DrawCommand(
            kind='line', x=center_x, y=baseline_y, x2=center_x, y2=head_y + radius,
            stroke=GROUP_STEM_COLOR, stroke_width=2.0, feature_id=group_id, role='stem',
        )]

        wedges = []
        total = sum(_samples(m) for m in group.members) or 1
        theta = 0.0
        for mutation in group.members:
            sweep = 360.0 * _samples(mutation) / total
            commands.append(DrawCommand(
                kind='wedge', x=center_x, y=head_y, radius=radius,
                theta1=theta, theta2=theta + sweep,
                color=consequence_color(mutation.get('consequence', 'other')),
                stroke='#fff', feature_id=mutation['id'], role='wedge',
            ))
            wedges.append((theta, theta + sweep, mutation))
            theta += sweep

        commands.append(DrawCommand(
            kind='text', x=center_x, y=head_y, text=str(group.size), color='#fff',
            font_size=10.0, anchor='middle', bold=True, feature_id=group_id, role='count',
        ))

        self._add_hit(HitBox(center_x - radius, head_y - radius, center_x + radius, head_y + radius,
                             feature=group.members[0], shape='pie',
                             params=(center_x, head_y, radius, tuple(wedges))))
        return commands

    def tooltip_fields(self, feature: Any) -> TooltipFields:
        mutation: MutationFeature = feature
        change = mutation.get('aa_change') or f"{mutation.get('ref', '')}>{mutation.get('alt', '')}"
        fields = [
            ('Gene', mutation.get('gene') or 'Unknown Gene'),
            ('Change', change),
            ('Position', f"{mutation.get('chromosome', '')}:{_position(mutation):,}"),
            ('Type', mutation.get('consequence', 'other').replace('_', ' ')),
            ('Samples', str(_samples(mutation))),
        ]
        if mutation.get('vaf'):
            fields.append(('VAF', f"{mutation['vaf'] * 100:.1f}%"))
        return fields
