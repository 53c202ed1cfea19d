"""
Signal track

Point coverage values drawn as a filled area with a line on top, over a y-axis
rounded up to a nice number.
"""

from __future__ import annotations
from typing import Any, List
import logging

from ..config import SignalTrackConfig
from ..layout.ticks import nice_ceiling
from ..layout.types import DrawCommand, HitBox
from ..types import Payload, SignalPoint, SignalTrackData, TooltipFields
from ..utils import linear_scale
from .base import RenderContext, Track

logger = logging.getLogger(__name__)

GRID_COLOR = '#e0e0e0'
AXIS_TEXT_COLOR = '#666'


class SignalTrack(Track):
    """Coverage / signal values at discrete positions"""

    kind = 'signal'
    config_class = SignalTrackConfig
    empty_message = 'No signal data in this region'

    def parse(self, payload: Payload) -> SignalTrackData:
        meta = payload if isinstance(payload, dict) else {}
        points = payload.get('points', []) if isinstance(payload, dict) else payload
        points = sorted(points, key=lambda p: p['position'])
        values = [p['value'] for p in points]
        data: SignalTrackData = {
            'points': points,
            'min': meta.get('min', min(values, default=0.0)),
            'max': meta.get('max', max(values, default=0.0)),
        }
        return data

    def visible_features(self, context: RenderContext) -> List[SignalPoint]:
        region = context.region
        return [p for p in self.data['points'] if region.start <= p['position'] <= region.end]

    def plot_height(self, context: RenderContext) -> float:
        return max(1.0, context.height - self.config.padding_top - self.config.padding_bottom)

    def y_max(self) -> float:
        return nice_ceiling(self.data['max'])

    def layout_content(self, context: RenderContext) -> List[DrawCommand]:
        cfg = self.config
        points = self.visible_features(context)
        plot_height = self.plot_height(context)
        top = cfg.padding_top
        y_max = self.y_max()

        def to_y(value: float) -> float:
            return top + linear_scale(value, 0.0, y_max, plot_height, 0.0)

        coords = [(context.to_pixel(p['position']), to_y(p['value'])) for p in points]
        baseline = top + plot_height

        commands: List[DrawCommand] = []
        if cfg.show_axis:
            commands.extend(self._axis_commands(context, to_y, y_max))

        area = ((coords[0][0], baseline),) + tuple(coords) + ((coords[-1][0], baseline),)
        commands.append(DrawCommand(kind='area', points=area, color=cfg.color,
                                    opacity=cfg.fill_opacity, feature_id=self.id, role='signal-area'))
        commands.append(DrawCommand(kind='polyline', points=tuple(coords), stroke=cfg.color,
                                    stroke_width=1.5, feature_id=self.id, role='signal-line'))

        self._add_hit(HitBox(0.0, top, context.width, baseline, feature=None,
                             params=tuple(zip((x for x, _ in coords), points))))
        return commands

    def _axis_commands(self, context: RenderContext, to_y, y_max: float) -> List[DrawCommand]:
        commands: List[DrawCommand] = []
        steps = max(1, self.config.axis_ticks)
        for i in range(steps + 1):
            value = y_max * i / steps
            y = to_y(value)
            commands.append(DrawCommand(kind='line', x=0.0, y=y, x2=context.width, y2=y,
                                        stroke=GRID_COLOR, dashed=True, role='grid'))
            commands.append(DrawCommand(kind='text', x=2.0, y=y - 2, text=f"{value:g}",
                                        color=AXIS_TEXT_COLOR, font_size=9.0, role='axis-label'))
        return commands

    def hit_test(self, px: float, py: float) -> Any:
        """Nearest visible point by x inside the plot area"""
        for box in self._hits:
            if box.contains(px, py) and box.params:
                _, nearest = min(box.params, key=lambda entry: abs(entry[0] - px))
                return nearest
        return None

    def tooltip_fields(self, feature: Any) -> TooltipFields:
        return [
            ('Position', f"{feature['position']:,}"),
            ('Value', f"{feature['value']:.2f}"),
        ]
