"""
Track composer

Keeps the ordered set of tracks, stacks the visible ones vertically and turns a
viewport into one composed frame: the coordinate ruler plus every visible
track's draw commands at its vertical offset.

Stacking:
    offset(track_i) = sum(height(track_j) + track_gap for visible j < i)
    canvas_height   = max(track_area_height, sum(heights) + track_gap * (n - 1))

Operations referencing an unknown track id are no-ops: they return False, log
a warning and pass TrackNotFound to the on_warning callback.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Any
import logging

from .config import BrowserConfig
from .errors import GenoviewError, OverflowFeatureCount, TrackNotFound
from .layout.ticks import TickGenerator, format_span
from .layout.types import DrawCommand
from .tracks.base import Track
from .types import BrowserState, TrackStateEntry
from .utils import format_thousands
from .viewport import GenomicRegion, ViewportController

logger = logging.getLogger(__name__)

WarningCallback = Callable[[GenoviewError], None]

RULER_BACKGROUND = '#f5f5f5'
RULER_TICK_COLOR = '#666'
RULER_TEXT_COLOR = '#333'


@dataclass(frozen=True)
class TrackFrame:
    """
    One visible track inside a composed frame

    Attributes:
        track_id: Track identifier
        name: Display name for the label column
        kind: Track kind
        y_offset: Offset from the top of the track area (px)
        height: Effective height (px)
        commands: Draw commands in track-local coordinates
    """
    track_id: str
    name: str
    kind: str
    y_offset: float
    height: float
    commands: Tuple[DrawCommand, ...]


@dataclass(frozen=True)
class ComposedFrame:
    """
    Everything a rendering backend needs for one pass

    Attributes:
        region: Region the frame was laid out for
        width: Track area width (px)
        label_width: Label column width (px)
        ruler_height: Ruler height (px)
        canvas_height: Track area height (px)
        ruler: Ruler draw commands
        tracks: Visible tracks in order
    """
    region: GenomicRegion
    width: float
    label_width: float
    ruler_height: float
    canvas_height: float
    ruler: Tuple[DrawCommand, ...]
    tracks: Tuple[TrackFrame, ...]

    @property
    def total_height(self) -> float:
        """Ruler plus track area (px)"""
        return self.ruler_height + self.canvas_height

    def flattened(self) -> List[DrawCommand]:
        """All commands in canvas coordinates (ruler on top, tracks below)"""
        commands = list(self.ruler)
        for frame in self.tracks:
            dy = self.ruler_height + frame.y_offset
            commands.extend(cmd.shifted(0.0, dy) for cmd in frame.commands)
        return commands


class TrackComposer:
    """
    Ordered track stack with visibility, collapse and reordering

    Args:
        config: Browser configuration (gaps, ruler, canvas size)
        on_warning: Receives TrackNotFound and OverflowFeatureCount reports

    Example:
        >>> composer = TrackComposer()
        >>> composer.add_track(GeneTrack('genes', name='Genes'))
        >>> frame = composer.layout(viewport)
    """

    def __init__(
        self,
        config: Optional[BrowserConfig] = None,
        on_warning: Optional[WarningCallback] = None
    ) -> None:
        self.config: BrowserConfig = config or BrowserConfig()
        self.on_warning = on_warning
        self.on_frame: Optional[Callable[[ComposedFrame], None]] = None
        self.last_frame: Optional[ComposedFrame] = None
        self.tick_generator = TickGenerator(self.config.target_ticks)

        self._tracks: Dict[str, Track] = {}
        self._order: List[str] = []
        self._viewport: Optional[ViewportController] = None

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, track_id: str) -> bool:
        return track_id in self._tracks

    # ------------------------------------------------------------------
    # Track management
    # ------------------------------------------------------------------

    def add_track(self, track: Track) -> None:
        """
        Append a track to the stack

        Raises:
            ValueError: If a track with the same id is already registered
        """
        if track.id in self._tracks:
            raise ValueError(f"Duplicate track id: {track.id}")
        track.collapsed_height = self.config.collapsed_height
        track.on_overflow = self._forward_overflow
        self._tracks[track.id] = track
        self._order.append(track.id)
        logger.info(f"Added {track.kind} track '{track.id}' ({len(self._order)} tracks)")
        self._relayout()

    def remove_track(self, track_id: str) -> bool:
        if not self._require(track_id):
            return False
        track = self._tracks.pop(track_id)
        track.on_overflow = None
        self._order.remove(track_id)
        logger.info(f"Removed track '{track_id}'")
        self._relayout()
        return True

    def get_track(self, track_id: str) -> Optional[Track]:
        if not self._require(track_id):
            return None
        return self._tracks[track_id]

    def track_list(self) -> List[Track]:
        """Tracks in display order, hidden ones included"""
        return [self._tracks[track_id] for track_id in self._order]

    def set_visible(self, track_id: str, visible: bool) -> bool:
        if not self._require(track_id):
            return False
        self._tracks[track_id].set_visible(visible)
        self._relayout()
        return True

    def toggle_visibility(self, track_id: str) -> bool:
        if not self._require(track_id):
            return False
        track = self._tracks[track_id]
        track.set_visible(not track.visible)
        self._relayout()
        return True

    def set_collapsed(self, track_id: str, collapsed: bool) -> bool:
        if not self._require(track_id):
            return False
        self._tracks[track_id].set_collapsed(collapsed)
        self._relayout()
        return True

    def set_order(self, track_ids: Iterable[str]) -> bool:
        """
        Reorder tracks

        Listed ids move to the front in the given order; unlisted tracks keep
        their relative order after them. Any unknown id aborts the reorder.
        """
        track_ids = list(track_ids)
        for track_id in track_ids:
            if not self._require(track_id):
                return False
        if len(set(track_ids)) != len(track_ids):
            raise ValueError(f"Duplicate ids in track order: {track_ids}")
        rest = [track_id for track_id in self._order if track_id not in track_ids]
        self._order = track_ids + rest
        logger.debug(f"Track order: {self._order}")
        self._relayout()
        return True

    # ------------------------------------------------------------------
    # Stacking
    # ------------------------------------------------------------------

    def visible_tracks(self) -> List[Track]:
        return [track for track in self.track_list() if track.visible]

    def offsets(self) -> Dict[str, float]:
        """Vertical offset of every visible track from the top of the track area"""
        offsets: Dict[str, float] = {}
        y = 0.0
        for track in self.visible_tracks():
            offsets[track.id] = y
            y += track.height + self.config.track_gap
        return offsets

    def stacked_height(self) -> float:
        """Sum of visible effective heights plus gaps between them"""
        visible = self.visible_tracks()
        if not visible:
            return 0.0
        return sum(t.height for t in visible) + self.config.track_gap * (len(visible) - 1)

    def canvas_height(self) -> float:
        return max(float(self.config.track_area_height), self.stacked_height())

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def layout(self, viewport: ViewportController) -> ComposedFrame:
        """Lay out the ruler and every visible track for the viewport"""
        offsets = self.offsets()
        frames = []
        for track in self.visible_tracks():
            commands = track.layout(viewport)
            frames.append(TrackFrame(
                track_id=track.id,
                name=track.name,
                kind=track.kind,
                y_offset=offsets[track.id],
                height=track.height,
                commands=tuple(commands),
            ))

        frame = ComposedFrame(
            region=viewport.region,
            width=viewport.pixel_width,
            label_width=self.config.label_width,
            ruler_height=self.config.ruler_height,
            canvas_height=self.canvas_height(),
            ruler=tuple(self.layout_ruler(viewport)),
            tracks=tuple(frames),
        )
        logger.debug(f"Composed {len(frames)} tracks for {viewport.region}")
        return frame

    def layout_ruler(self, viewport: ViewportController) -> List[DrawCommand]:
        """Ruler background, ticks, region label and span label"""
        cfg = self.config
        region = viewport.region
        height = cfg.ruler_height
        width = viewport.pixel_width

        commands = [DrawCommand(kind='rect', width=width, height=height,
                                color=RULER_BACKGROUND, role='ruler-background')]

        for tick in self.tick_generator.generate(region.start, region.end, viewport.position_to_pixel):
            length = cfg.major_tick_length if tick.major else cfg.minor_tick_length
            commands.append(DrawCommand(
                kind='line', x=tick.pixel, y=height - length, x2=tick.pixel, y2=height,
                stroke=RULER_TICK_COLOR, stroke_width=1.5 if tick.major else 1.0,
                role='major-tick' if tick.major else 'minor-tick',
            ))
            if tick.major:
                commands.append(DrawCommand(
                    kind='text', x=tick.pixel, y=height - 20, text=tick.label,
                    color=RULER_TEXT_COLOR, font_size=10.0, anchor='middle', role='tick-label',
                ))

        commands.append(DrawCommand(
            kind='text', x=5.0, y=15.0,
            text=f"{region.chromosome}:{format_thousands(region.start)}-{format_thousands(region.end)}",
            color=RULER_TEXT_COLOR, font_size=12.0, bold=True, role='region-label',
        ))
        commands.append(DrawCommand(
            kind='text', x=width - 5, y=15.0, text=format_span(region.span),
            color=RULER_TICK_COLOR, font_size=11.0, anchor='end', role='span-label',
        ))
        return commands

    def attach(self, viewport: ViewportController) -> None:
        """
        Re-lay out every track whenever the viewport region changes

        While attached, track-stack changes (add, remove, visibility,
        collapse, order) also produce a new frame.
        """
        if self._viewport is not None:
            self._viewport.unsubscribe(self._on_region_change)
        self._viewport = viewport
        viewport.subscribe(self._on_region_change)

    def detach(self) -> None:
        if self._viewport is not None:
            self._viewport.unsubscribe(self._on_region_change)
            self._viewport = None

    def _on_region_change(self, region: GenomicRegion) -> None:
        self._relayout()

    def _relayout(self) -> None:
        if self._viewport is None:
            return
        self.last_frame = self.layout(self._viewport)
        if self.on_frame is not None:
            self.on_frame(self.last_frame)

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------

    def track_at(self, y: float) -> Optional[Tuple[Track, float]]:
        """Visible track under a track-area y coordinate, with the local y"""
        offsets = self.offsets()
        for track in self.visible_tracks():
            top = offsets[track.id]
            if top <= y < top + track.height:
                return track, y - top
        return None

    def hit_test(self, px: float, y: float) -> Optional[Tuple[Track, Any]]:
        """
        Route a track-area point to the feature under it

        Args:
            px: Horizontal offset inside the track area (px)
            y: Vertical offset from the top of the track area (px)

        Returns:
            (track, feature), or None when nothing is hit
        """
        located = self.track_at(y)
        if located is None:
            return None
        track, local_y = located
        feature = track.hit_test(px, local_y)
        if feature is None:
            return None
        return track, feature

    # ------------------------------------------------------------------
    # Shareable state
    # ------------------------------------------------------------------

    def state_dict(self, viewport: Optional[ViewportController] = None) -> BrowserState:
        """Plain-data viewer state: region plus per-track display flags"""
        viewport = viewport or self._viewport
        if viewport is None:
            raise ValueError("state_dict needs a viewport (pass one or attach first)")
        region = viewport.region
        tracks: List[TrackStateEntry] = [
            {'id': track.id, 'visible': track.visible, 'collapsed': track.collapsed, 'order': index}
            for index, track in enumerate(self.track_list())
        ]
        return {'chromosome': region.chromosome, 'start': region.start, 'end': region.end, 'tracks': tracks}

    def load_state(self, state: BrowserState, viewport: Optional[ViewportController] = None) -> None:
        """
        Apply a state produced by state_dict

        The region is applied first; unknown track ids are reported and skipped.

        Raises:
            InvalidRegion: If the stored region is rejected by the viewport.
                Nothing is changed in that case.
        """
        viewport = viewport or self._viewport
        if viewport is not None and 'chromosome' in state:
            viewport.set_region(GenomicRegion(state['chromosome'], state['start'], state['end']))

        entries = sorted(state.get('tracks', []), key=lambda entry: entry.get('order', 0))
        known = []
        for entry in entries:
            if entry['id'] in known or not self._require(entry['id']):
                continue
            track = self._tracks[entry['id']]
            track.set_visible(entry.get('visible', True))
            track.set_collapsed(entry.get('collapsed', False))
            known.append(entry['id'])
        self._order = known + [track_id for track_id in self._order if track_id not in known]
        self._relayout()

    # ------------------------------------------------------------------
    # Warnings
    # ------------------------------------------------------------------

    def _require(self, track_id: str) -> bool:
        if track_id in self._tracks:
            return True
        error = TrackNotFound(track_id)
        logger.warning(str(error))
        if self.on_warning is not None:
            self.on_warning(error)
        return False

    def _forward_overflow(self, overflow: OverflowFeatureCount) -> None:
        if self.on_warning is not None:
            self.on_warning(overflow)
