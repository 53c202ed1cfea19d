"""
Viewport controller

Owns the visible genomic region, the zoom/pan bounds and the affine mapping
between genomic positions and pixels. Every successful region change bumps a
generation counter that data loaders use to discard stale responses.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple
from math import floor
import logging
import re

from .config import BrowserConfig
from .errors import InvalidRegion, GestureStateError

logger = logging.getLogger(__name__)

RegionListener = Callable[['GenomicRegion'], None]

_REGION_PATTERN = re.compile(r'^\s*([\w.]+)\s*:\s*(\d+)\s*-\s*(\d+)\s*$')


@dataclass(frozen=True)
class GenomicRegion:
    """
    Visible window on one chromosome

    Attributes:
        chromosome: Chromosome name (e.g. 'chr17')
        start: Start position (bp, inclusive)
        end: End position (bp, exclusive)
    """
    chromosome: str
    start: int
    end: int

    @property
    def span(self) -> int:
        """Window size in bp"""
        return self.end - self.start

    @property
    def center(self) -> float:
        """Midpoint position (bp)"""
        return self.start + self.span / 2

    def __str__(self) -> str:
        return f"{self.chromosome}:{self.start}-{self.end}"


@dataclass(frozen=True)
class ZoomState:
    """
    Transient gesture transform (d3-zoom style)

    Attributes:
        k: Scale factor relative to the gesture start
        x: Horizontal translation (px)
    """
    k: float = 1.0
    x: float = 0.0


class GestureState(Enum):
    IDLE = 'idle'
    ACTIVE = 'active'


def parse_region(text: str) -> GenomicRegion:
    """
    Parse 'chr17:7,668,402-7,687,550' into a GenomicRegion

    Raises:
        InvalidRegion: If the text is not of the form chrom:start-end
    """
    match = _REGION_PATTERN.match(text.replace(',', ''))
    if not match:
        raise InvalidRegion(f"Cannot parse region: {text!r}")
    chromosome, start, end = match.groups()
    return GenomicRegion(chromosome, int(start), int(end))


class ViewportController:
    """
    Current region, zoom bounds and position <-> pixel mapping

    Args:
        config: Browser configuration (zoom bounds, genome, width)
        region: Initial region; defaults to config.default_region
        pixel_width: Width of the track area; defaults to config.width

    Example:
        >>> viewport = ViewportController(region=GenomicRegion('chr17', 7668402, 7687550))
        >>> viewport.zoom_in()
    """

    def __init__(
        self,
        config: Optional[BrowserConfig] = None,
        region: Optional[GenomicRegion] = None,
        pixel_width: Optional[float] = None
    ) -> None:
        self.config: BrowserConfig = config or BrowserConfig()
        self.pixel_width: float = float(pixel_width or self.config.width)
        if self.pixel_width <= 0:
            raise ValueError(f"pixel_width must be > 0, got {self.pixel_width}")

        self.generation: int = 0
        self.gesture_state: GestureState = GestureState.IDLE
        self._gesture_origin: Optional[GenomicRegion] = None
        self._listeners: List[RegionListener] = []

        initial = region or GenomicRegion(*self.config.default_region)
        self._region: GenomicRegion = self._validated(initial)

        logger.info(f"Viewport initialized at {self._region} ({self.pixel_width:.0f} px)")

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def region(self) -> GenomicRegion:
        return self._region

    @property
    def scale(self) -> float:
        """Pixels per base pair"""
        return self.pixel_width / self._region.span

    @property
    def bp_per_pixel(self) -> float:
        return self._region.span / self.pixel_width

    def visible_range(self) -> Tuple[int, int]:
        return self._region.start, self._region.end

    def genome_length(self, chromosome: str) -> int:
        """
        Length of a chromosome

        Raises:
            InvalidRegion: If the chromosome is not part of the configured genome
        """
        try:
            return self.config.genome_lengths[chromosome]
        except KeyError:
            raise InvalidRegion(f"Unknown chromosome: {chromosome}") from None

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    def position_to_pixel(self, pos: float) -> float:
        """Genomic position -> horizontal pixel offset"""
        return (pos - self._region.start) * self.pixel_width / self._region.span

    def pixel_to_position(self, px: float) -> float:
        """Horizontal pixel offset -> genomic position"""
        return self._region.start + px * self._region.span / self.pixel_width

    # ------------------------------------------------------------------
    # Region changes
    # ------------------------------------------------------------------

    def set_region(self, region: GenomicRegion) -> GenomicRegion:
        """
        Validate, clamp and adopt a region

        Args:
            region: Requested region

        Returns:
            The adopted region (span clamped to [min_bp, max_bp])

        Raises:
            InvalidRegion: start >= end, bounds outside the chromosome, or
                unknown chromosome. The previous region is kept.
        """
        adopted = self._validated(region)
        self._adopt(adopted)
        return adopted

    def zoom_by(self, factor: float, pixel_center: Optional[float] = None) -> GenomicRegion:
        """
        Zoom around a pixel

        The genomic position under pixel_center becomes the center of the new
        region; factor > 1 zooms in.

        Args:
            factor: Span divisor
            pixel_center: Anchor pixel; defaults to the middle of the viewport
        """
        if factor <= 0:
            raise ValueError(f"Zoom factor must be > 0, got {factor}")
        if pixel_center is None:
            pixel_center = self.pixel_width / 2

        region = self._region
        length = self.genome_length(region.chromosome)
        anchor = self.pixel_to_position(pixel_center)
        new_span = self._clamped_span(round(region.span / factor), length)

        logger.debug(f"Zoom x{factor:g} at {anchor:.0f}: span {region.span} -> {new_span}")
        return self.set_region(self._window(region.chromosome, anchor, new_span, length))

    def zoom_in(self) -> GenomicRegion:
        return self.zoom_by(self.config.zoom_step)

    def zoom_out(self) -> GenomicRegion:
        return self.zoom_by(1 / self.config.zoom_step)

    def pan_by(self, delta_pixels: float) -> GenomicRegion:
        """
        Shift the region by a pixel delta

        Positive deltas move toward higher coordinates. The span is preserved
        and the window stays inside [0, chromosome length].
        """
        region = self._region
        length = self.genome_length(region.chromosome)
        delta_bp = delta_pixels * self.bp_per_pixel
        start = int(round(region.start + delta_bp))
        start = max(0, min(start, length - region.span))

        logger.debug(f"Pan {delta_pixels:+.1f} px ({delta_bp:+.0f} bp)")
        return self.set_region(GenomicRegion(region.chromosome, start, start + region.span))

    def pan_left(self) -> GenomicRegion:
        return self.pan_by(-self.config.pan_fraction * self.pixel_width)

    def pan_right(self) -> GenomicRegion:
        return self.pan_by(self.config.pan_fraction * self.pixel_width)

    def resize(self, pixel_width: float) -> None:
        """Change the pixel width; the region is kept and listeners re-run layout"""
        if pixel_width <= 0:
            raise ValueError(f"pixel_width must be > 0, got {pixel_width}")
        self.pixel_width = float(pixel_width)
        logger.debug(f"Viewport resized to {self.pixel_width:.0f} px")
        self._notify()

    # ------------------------------------------------------------------
    # Gestures
    # ------------------------------------------------------------------

    def begin_gesture(self) -> None:
        """Idle -> Active"""
        if self.gesture_state is GestureState.ACTIVE:
            raise GestureStateError("Gesture already active")
        self.gesture_state = GestureState.ACTIVE
        self._gesture_origin = self._region

    def update_gesture(self, zoom: ZoomState) -> GenomicRegion:
        """
        Apply a continuous gesture transform relative to the gesture start

        Intermediate regions are neither validated nor clamped.
        """
        if self.gesture_state is not GestureState.ACTIVE or self._gesture_origin is None:
            raise GestureStateError("update_gesture called without an active gesture")
        if zoom.k <= 0:
            raise ValueError(f"Gesture scale must be > 0, got {zoom.k}")

        origin = self._gesture_origin
        new_span = origin.span / zoom.k
        offset = (-zoom.x / self.pixel_width) * new_span
        new_start = floor(origin.center - new_span / 2 + offset)
        new_end = max(new_start + 1, floor(origin.center - new_span / 2 + offset + new_span))

        self._adopt(GenomicRegion(origin.chromosome, new_start, new_end))
        return self._region

    def end_gesture(self) -> GenomicRegion:
        """
        Active -> Idle; the final region is clamped and validated like set_region

        Raises:
            InvalidRegion: If the final region cannot be adopted; the gesture-start
                region is restored
        """
        if self.gesture_state is not GestureState.ACTIVE or self._gesture_origin is None:
            raise GestureStateError("end_gesture called without an active gesture")

        origin = self._gesture_origin
        self.gesture_state = GestureState.IDLE
        self._gesture_origin = None

        current = self._region
        try:
            length = self.genome_length(current.chromosome)
            span = self._clamped_span(current.span, length)
            return self.set_region(self._window(current.chromosome, current.center, span, length))
        except InvalidRegion:
            logger.warning(f"Gesture ended on invalid region {current}; restoring {origin}")
            self._adopt(origin)
            raise

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, callback: RegionListener) -> None:
        """Register a callback receiving the region after every change"""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def unsubscribe(self, callback: RegionListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _validated(self, region: GenomicRegion) -> GenomicRegion:
        """Reject invalid bounds, then clamp the span around the requested center"""
        length = self.genome_length(region.chromosome)
        if region.start >= region.end:
            raise InvalidRegion(f"Region start must be < end: {region}", region)
        if region.start < 0 or region.end > length:
            raise InvalidRegion(f"Region {region} outside {region.chromosome} (0-{length})", region)

        span = self._clamped_span(region.span, length)
        if span == region.span:
            return GenomicRegion(region.chromosome, int(region.start), int(region.end))
        return self._window(region.chromosome, region.center, span, length)

    def _clamped_span(self, span: float, length: int) -> int:
        upper = min(self.config.max_bp, length)
        lower = min(self.config.min_bp, upper)
        return int(max(lower, min(upper, span)))

    @staticmethod
    def _window(chromosome: str, center: float, span: int, length: int) -> GenomicRegion:
        """Region of the given span centered on center, shifted inside the chromosome"""
        start = floor(center - span / 2)
        start = max(0, min(start, length - span))
        return GenomicRegion(chromosome, start, start + span)

    def _adopt(self, region: GenomicRegion) -> None:
        self._region = region
        self.generation += 1
        logger.debug(f"Region -> {region} (generation {self.generation})")
        self._notify()

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback(self._region)
