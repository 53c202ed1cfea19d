"""
Annotation track

Named intervals (enhancers, promoters, CpG islands) drawn as single-row bars.
"""

from __future__ import annotations
from typing import Any, List

from ..config import AnnotationTrackConfig
from ..layout.types import DrawCommand, HitBox
from ..types import AnnotationFeature, Payload, TooltipFields
from ..utils import overlaps, truncate_label
from .base import RenderContext, Track


class AnnotationTrack(Track):
    """Regulatory and region annotations"""

    kind = 'annotation'
    config_class = AnnotationTrackConfig
    empty_message = 'No annotations in this region'

    def parse(self, payload: Payload) -> List[AnnotationFeature]:
        annotations = payload.get('annotations', []) if isinstance(payload, dict) else payload
        return list(annotations)

    def visible_features(self, context: RenderContext) -> List[AnnotationFeature]:
        region = context.region
        return [
            a for a in self.data
            if a.get('chromosome', region.chromosome) == region.chromosome
            and overlaps(a['start'], a['end'], region.start, region.end)
        ]

    def layout_content(self, context: RenderContext) -> List[DrawCommand]:
        cfg = self.config
        y = (context.height - cfg.bar_height) / 2
        commands: List[DrawCommand] = []

        for annotation in self.visible_features(context):
            start_x = max(0.0, context.to_pixel(annotation['start']))
            end_x = min(context.width, context.to_pixel(annotation['end']))
            width = max(cfg.min_width, end_x - start_x)

            commands.append(DrawCommand(
                kind='rect', x=start_x, y=y, width=width, height=cfg.bar_height,
                color=annotation.get('color') or cfg.default_color, opacity=0.8,
                feature_id=annotation['id'], role='annotation',
            ))
            if cfg.show_labels and width > cfg.label_min_width:
                commands.append(DrawCommand(
                    kind='text', x=start_x + width / 2, y=y + cfg.bar_height / 2,
                    text=truncate_label(annotation.get('name', ''), width, cfg.char_width),
                    color='#fff', font_size=10.0, anchor='middle', bold=True,
                    feature_id=annotation['id'], role='label',
                ))
            self._add_hit(HitBox(start_x, y, start_x + width, y + cfg.bar_height, feature=annotation))

        return commands

    def tooltip_fields(self, feature: Any) -> TooltipFields:
        return [
            ('Name', feature.get('name', '')),
            ('Type', feature.get('type', '')),
            ('Location', f"{feature['chromosome']}:{feature['start']:,}-{feature['end']:,}"),
            ('Size', f"{feature['end'] - feature['start']:,} bp"),
        ]
