"""
Continuous signal track

Binned genome-wide signal (bigWig-style ``{chromosome, start, end, value}``
records) with moving-average smoothing, four display modes and three y-scale
modes:

    auto   [min(0, min - pad), max + pad] with pad = 10% of the value range
    fixed  [fixed_min, fixed_max]
    log    log10 scale clamped at log_floor
"""

from __future__ import annotations
from math import log10
from typing import Any, Callable, List, Sequence, Tuple
import logging

import numpy as np
from matplotlib import colormaps
from matplotlib.colors import to_hex

from ..config import ContinuousSignalTrackConfig
from ..layout.types import DrawCommand, HitBox
from ..types import Payload, SignalBin, TooltipFields
from ..utils import clamp, linear_scale, overlaps
from .base import RenderContext, Track

logger = logging.getLogger(__name__)

DISPLAY_MODES = ('area', 'line', 'bar', 'heatmap')
SCALE_MODES = ('auto', 'fixed', 'log')
BASELINE_COLOR = '#666'


def smooth_values(values: Sequence[float], window: int) -> np.ndarray:
    """
    Centered moving average

    Each value is replaced by the mean over [i - window // 2, i + window // 2],
    truncated at the ends of the series.
    """
    values = np.asarray(values, dtype=float)
    if window <= 1 or values.size == 0:
        return values.copy()

    half = window // 2
    csum = np.concatenate(([0.0], np.cumsum(values)))
    idx = np.arange(values.size)
    lo = np.maximum(0, idx - half)
    hi = np.minimum(values.size - 1, idx + half) + 1
    return (csum[hi] - csum[lo]) / (hi - lo)


def y_domain(values: Sequence[float], config: ContinuousSignalTrackConfig) -> Tuple[float, float]:
    """Y-axis domain for a scale mode"""
    if config.scale_mode == 'fixed':
        return float(config.fixed_min), float(config.fixed_max)

    values = np.asarray(values, dtype=float)
    if values.size == 0:
        low, high = 0.0, 100.0
    else:
        low, high = float(values.min()), float(values.max())
        padding = (high - low) * 0.1
        low, high = min(0.0, low - padding), high + padding

    if config.scale_mode == 'log':
        low = max(config.log_floor, low)
        if high <= low:
            high = low * 10
        return low, high

    if high == low:
        high = low + 1.0
    return low, high


class ContinuousSignalTrack(Track):
    """Binned continuous signal (coverage, ChIP, conservation)"""

    kind = 'continuous_signal'
    config_class = ContinuousSignalTrackConfig
    empty_message = 'No signal data in this region'

    def parse(self, payload: Payload) -> List[SignalBin]:
        bins = payload.get('bins', []) if isinstance(payload, dict) else payload
        return sorted(bins, key=lambda b: b['start'])

    def visible_features(self, context: RenderContext) -> List[SignalBin]:
        region = context.region
        return [
            b for b in self.data
            if b.get('chromosome', region.chromosome) == region.chromosome
            and overlaps(b['start'], b['end'], region.start, region.end)
        ]

    def y_scale(self, domain: Tuple[float, float], context: RenderContext) -> Callable[[float], float]:
        """Value -> pixel y inside the plot area"""
        cfg = self.config
        top = cfg.padding_top
        plot_height = max(1.0, context.height - cfg.padding_top - cfg.padding_bottom)
        low, high = domain

        if cfg.scale_mode == 'log':
            log_low, log_high = log10(low), log10(high)

            def to_y(value: float) -> float:
                clamped = clamp(max(value, cfg.log_floor), low, high)
                return top + linear_scale(log10(clamped), log_low, log_high, plot_height, 0.0)
            return to_y

        def to_y(value: float) -> float:
            return top + linear_scale(value, low, high, plot_height, 0.0)
        return to_y

    def layout_content(self, context: RenderContext) -> List[DrawCommand]:
        cfg = self.config
        if cfg.display_mode not in DISPLAY_MODES:
            raise ValueError(f"Unknown display mode: {cfg.display_mode}")
        if cfg.scale_mode not in SCALE_MODES:
            raise ValueError(f"Unknown scale mode: {cfg.scale_mode}")

        bins = self.visible_features(context)
        values = smooth_values([b['value'] for b in bins], cfg.smooth)
        domain = y_domain(values, cfg)
        to_y = self.y_scale(domain, context)
        bottom = context.height - cfg.padding_bottom

        if cfg.display_mode == 'area':
            commands = self._area_commands(context, bins, values, to_y, bottom)
        elif cfg.display_mode == 'line':
            commands = [self._line_command(context, bins, values, to_y, stroke_width=2.0)]
        elif cfg.display_mode == 'bar':
            commands = self._bar_commands(context, bins, values, to_y, bottom)
        else:
            commands = self._heatmap_commands(context, bins, values, domain, bottom)

        low, high = domain
        if cfg.show_baseline and cfg.scale_mode != 'log' and low <= 0 <= high:
            y0 = to_y(0.0)
            commands.append(DrawCommand(kind='line', x=0.0, y=y0, x2=context.width, y2=y0,
                                        stroke=BASELINE_COLOR, dashed=True, role='baseline'))

        commands.append(DrawCommand(
            kind='text', x=context.width - 5, y=cfg.padding_top + 5,
            text=f"[{low:.1f} - {high:.1f}]", color='#888', font_size=10.0,
            anchor='end', role='scale-label',
        ))

        for b in bins:
            x0 = max(0.0, context.to_pixel(b['start']))
            x1 = min(context.width, context.to_pixel(b['end']))
            self._add_hit(HitBox(x0, cfg.padding_top, max(x0, x1), bottom, feature=b))

        return commands

    @staticmethod
    def _midpoints(context: RenderContext, bins: List[SignalBin]) -> List[float]:
        return [context.to_pixel((b['start'] + b['end']) / 2) for b in bins]

    def _line_command(self, context, bins, values, to_y, stroke_width: float = 1.5) -> DrawCommand:
        xs = self._midpoints(context, bins)
        return DrawCommand(
            kind='polyline', points=tuple((x, to_y(v)) for x, v in zip(xs, values)),
            stroke=self.config.color, stroke_width=stroke_width, opacity=self.config.opacity,
            feature_id=self.id, role='signal-line',
        )

    def _area_commands(self, context, bins, values, to_y, bottom: float) -> List[DrawCommand]:
        xs = self._midpoints(context, bins)
        top_edge = [(x, to_y(v)) for x, v in zip(xs, values)]
        area = DrawCommand(
            kind='area', points=tuple([(xs[0], bottom)] + top_edge + [(xs[-1], bottom)]),
            color=self.config.color, opacity=self.config.opacity * 0.5,
            feature_id=self.id, role='signal-area',
        )
        return [area, self._line_command(context, bins, values, to_y)]

    def _bar_commands(self, context, bins, values, to_y, bottom: float) -> List[DrawCommand]:
        commands: List[DrawCommand] = []
        for b, value in zip(bins, values):
            x = context.to_pixel(b['start'])
            width = max(1.0, context.to_pixel(b['end']) - x)
            y = to_y(max(0.0, value))
            commands.append(DrawCommand(
                kind='rect', x=x, y=y, width=width, height=max(0.0, bottom - y),
                color=self.config.color, opacity=self.config.opacity,
                feature_id=self.id, role='signal-bar',
            ))
        return commands

    def _heatmap_commands(self, context, bins, values, domain, bottom: float) -> List[DrawCommand]:
        cfg = self.config
        cmap = colormaps[cfg.heatmap_cmap]
        low, high = domain
        commands: List[DrawCommand] = []
        for b, value in zip(bins, values):
            x = context.to_pixel(b['start'])
            width = max(1.0, context.to_pixel(b['end']) - x)
            fraction = clamp(linear_scale(value, low, high, 0.0, 1.0), 0.0, 1.0)
            commands.append(DrawCommand(
                kind='rect', x=x, y=cfg.padding_top, width=width, height=bottom - cfg.padding_top,
                color=to_hex(cmap(fraction)), feature_id=self.id, role='signal-heat',
            ))
        return commands

    def tooltip_fields(self, feature: Any) -> TooltipFields:
        return [
            ('Location', f"{feature.get('chromosome', '')}:{feature['start']:,}-{feature['end']:,}"),
            ('Value', f"{feature['value']:.3f}"),
        ]
