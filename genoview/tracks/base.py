"""
Track base class

Every track variant shares the same skeleton: a lifecycle state, a visible and
collapsed flag, a background rect, a collapsed placeholder and an empty-state
message. Variants only implement ``parse``, ``visible_features``,
``layout_content`` and ``tooltip_fields``.

Lifecycle:
    UNLOADED --set_data--> DATA_LOADED --layout--> RENDERED
    any state --clear--> UNLOADED
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from math import atan2, degrees, hypot
from typing import Any, Callable, List, Optional, TYPE_CHECKING
import logging

import numpy as np

from ..errors import OverflowFeatureCount
from ..layout.types import DrawCommand, HitBox
from ..types import FeatureCallback, TooltipFields, Payload

if TYPE_CHECKING:
    from ..viewport import GenomicRegion, ViewportController

logger = logging.getLogger(__name__)

BACKGROUND_COLOR = '#fafafa'
BORDER_COLOR = '#e0e0e0'
MUTED_TEXT_COLOR = '#999'
LABEL_TEXT_COLOR = '#666'


class TrackState(Enum):
    UNLOADED = 'unloaded'
    DATA_LOADED = 'data_loaded'
    RENDERED = 'rendered'


@dataclass(frozen=True)
class RenderContext:
    """
    Per-pass view of the viewport handed to a track

    Attributes:
        region: Visible region
        width: Track area width (px)
        height: Effective track height (px)
        to_pixel: Genomic position -> pixel mapping
        to_position: Pixel -> genomic position mapping
    """
    region: 'GenomicRegion'
    width: float
    height: float
    to_pixel: Callable[[float], float]
    to_position: Callable[[float], float]

    @classmethod
    def from_viewport(cls, viewport: 'ViewportController', height: float) -> 'RenderContext':
        return cls(
            region=viewport.region,
            width=viewport.pixel_width,
            height=height,
            to_pixel=viewport.position_to_pixel,
            to_position=viewport.pixel_to_position,
        )


class Track:
    """
    Base class for all track kinds

    Args:
        track_id: Unique identifier within a composer
        name: Display name; defaults to track_id
        config: Per-kind layout configuration; defaults to config_class()
        visible: Initial visibility
        collapsed: Initial collapsed flag
        collapsed_height: Effective height while collapsed (px)
    """

    kind: str = ''
    config_class: Optional[type] = None
    empty_message: str = 'No data in this region'

    def __init__(
        self,
        track_id: str,
        name: Optional[str] = None,
        config: Any = None,
        visible: bool = True,
        collapsed: bool = False,
        collapsed_height: int = 20
    ) -> None:
        if config is None and self.config_class is not None:
            config = self.config_class()
        self.id = track_id
        self.name = name or track_id
        self.config = config
        self.visible = visible
        self.collapsed = collapsed
        self.collapsed_height = collapsed_height

        self.data: Any = None
        self.state: TrackState = TrackState.UNLOADED
        self.last_overflow: Optional[OverflowFeatureCount] = None
        self.on_overflow: Optional[Callable[[OverflowFeatureCount], None]] = None

        self._hits: List[HitBox] = []
        self._hover_callback: Optional[FeatureCallback] = None
        self._click_callback: Optional[FeatureCallback] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, state={self.state.value})"

    @property
    def height(self) -> int:
        """Effective height: collapsed_height while collapsed"""
        return self.collapsed_height if self.collapsed else self.config.height

    # ------------------------------------------------------------------
    # Data and flags
    # ------------------------------------------------------------------

    def set_data(self, payload: Payload) -> None:
        """Adopt a payload; UNLOADED/RENDERED -> DATA_LOADED"""
        self.data = self.parse(payload)
        self.state = TrackState.DATA_LOADED
        self._hits = []

    def clear(self) -> None:
        """Drop data and caches; back to UNLOADED"""
        self.data = None
        self.state = TrackState.UNLOADED
        self.last_overflow = None
        self._hits = []

    def set_visible(self, visible: bool) -> None:
        if visible != self.visible:
            self._invalidate()
        self.visible = visible

    def set_collapsed(self, collapsed: bool) -> None:
        """Change the collapsed flag; hit boxes of the previous layout are dropped"""
        if collapsed != self.collapsed:
            self._invalidate()
        self.collapsed = collapsed

    def _invalidate(self) -> None:
        self._hits = []
        if self.state is TrackState.RENDERED:
            self.state = TrackState.DATA_LOADED

    def set_hover_callback(self, callback: Optional[FeatureCallback]) -> None:
        self._hover_callback = callback

    def set_click_callback(self, callback: Optional[FeatureCallback]) -> None:
        self._click_callback = callback

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def layout(self, viewport: 'ViewportController') -> List[DrawCommand]:
        """
        Produce draw commands for the current viewport

        Deterministic for identical (data, viewport, config); only the track's
        own hit-box and overflow caches are rewritten.

        Returns:
            Draw commands in track-local pixel coordinates
        """
        self._hits = []
        self.last_overflow = None
        if not self.visible:
            return []

        context = RenderContext.from_viewport(viewport, self.height)
        commands = [self._background(context)]

        if self.collapsed:
            commands.append(self._centered_text(context, f"{self.name} (collapsed)",
                                                LABEL_TEXT_COLOR, 11.0, 'collapsed-label'))
        elif self.data is None or not self.visible_features(context):
            commands.append(self._centered_text(context, self.empty_message,
                                                MUTED_TEXT_COLOR, 12.0, 'empty'))
        else:
            commands.extend(self.layout_content(context))

        if self.state is not TrackState.UNLOADED:
            self.state = TrackState.RENDERED

        logger.debug(f"Track {self.id}: {len(commands)} commands, {len(self._hits)} hit boxes")
        return commands

    def parse(self, payload: Payload) -> Any:
        """Normalize a payload into the track's data representation"""
        return payload

    def visible_features(self, context: RenderContext) -> List[Any]:
        """Features that intersect the visible region"""
        raise NotImplementedError

    def layout_content(self, context: RenderContext) -> List[DrawCommand]:
        raise NotImplementedError

    def tooltip_fields(self, feature: Any) -> TooltipFields:
        """Ordered (key, value) pairs describing a feature"""
        if isinstance(feature, dict):
            return [('ID', str(feature.get('id', '')))]
        return [('Feature', str(feature))]

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------

    def hit_test(self, px: float, py: float) -> Any:
        """
        Feature under a track-local pixel, or None

        Uses the hit boxes recorded by the last layout; later (topmost)
        boxes win.
        """
        for box in reversed(self._hits):
            if not box.contains(px, py):
                continue
            feature = _resolve_shape(box, px, py)
            if feature is not None:
                return feature
        return None

    def notify_hover(self, px: float, py: float) -> Any:
        feature = self.hit_test(px, py)
        if feature is not None and self._hover_callback is not None:
            self._hover_callback(feature, px, py)
        return feature

    def notify_click(self, px: float, py: float) -> Any:
        feature = self.hit_test(px, py)
        if feature is not None and self._click_callback is not None:
            self._click_callback(feature, px, py)
        return feature

    # ------------------------------------------------------------------
    # Helpers for variants
    # ------------------------------------------------------------------

    def _add_hit(self, box: HitBox) -> None:
        self._hits.append(box)

    def _report_overflow(self, context: RenderContext, count: int, max_rows: int) -> DrawCommand:
        """Record an overflow and return the '+N more' indicator"""
        overflow = OverflowFeatureCount(self.id, count, max_rows)
        self.last_overflow = overflow
        logger.debug(str(overflow))
        if self.on_overflow is not None:
            self.on_overflow(overflow)
        return DrawCommand(
            kind='text',
            x=context.width - 4,
            y=context.height - 4,
            text=f"+{count} more",
            color=LABEL_TEXT_COLOR,
            font_size=10.0,
            anchor='end',
            role='overflow',
        )

    @staticmethod
    def _background(context: RenderContext) -> DrawCommand:
        return DrawCommand(
            kind='rect',
            width=context.width,
            height=context.height,
            color=BACKGROUND_COLOR,
            stroke=BORDER_COLOR,
            role='background',
        )

    @staticmethod
    def _centered_text(context: RenderContext, text: str, color: str,
                       font_size: float, role: str) -> DrawCommand:
        return DrawCommand(
            kind='text',
            x=context.width / 2,
            y=context.height / 2,
            text=text,
            color=color,
            font_size=font_size,
            anchor='middle',
            role=role,
        )


def _resolve_shape(box: HitBox, px: float, py: float) -> Any:
    """Refine a bounding-box hit by the box's shape"""
    if box.shape == 'circle':
        cx, cy, radius = box.params
        return box.feature if hypot(px - cx, py - cy) <= radius else None

    if box.shape == 'pie':
        cx, cy, radius, wedges = box.params
        if hypot(px - cx, py - cy) > radius:
            return None
        angle = degrees(atan2(py - cy, px - cx)) % 360.0
        for theta1, theta2, feature in wedges:
            if theta1 <= angle < theta2:
                return feature
        return box.feature

    if box.shape == 'curve':
        p0, control, p2, tolerance = box.params
        return box.feature if curve_distance(p0, control, p2, px, py) <= tolerance else None

    return box.feature


def curve_distance(p0, control, p2, px: float, py: float, samples: int = 64) -> float:
    """Approximate distance from a point to a quadratic bezier curve"""
    t = np.linspace(0.0, 1.0, samples + 1)
    u = 1.0 - t
    xs = u * u * p0[0] + 2 * u * t * control[0] + t * t * p2[0]
    ys = u * u * p0[1] + 2 * u * t * control[1] + t * t * p2[1]
    return float(np.min(np.hypot(xs - px, ys - py)))
