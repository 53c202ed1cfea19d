"""
Layout types for genoview
Data structures passed between the layout algorithms, tracks and renderers

All types are immutable (frozen) for safety and testability.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import List, Dict, Tuple, Optional, Literal, Any, Hashable


DrawKind = Literal['rect', 'line', 'circle', 'polygon', 'polyline', 'area',
                   'curve', 'wedge', 'text']
"""Drawing primitive understood by rendering backends"""

Point = Tuple[float, float]


@dataclass(frozen=True)
class PackInterval:
    """
    Pixel-space interval handed to the packer

    Attributes:
        key: Stable feature identifier
        start: Left edge (px)
        end: Right edge (px)
    """
    key: Hashable
    start: float
    end: float


@dataclass(frozen=True)
class PackResult:
    """
    Row assignment produced by one packing pass

    Attributes:
        rows: Feature identifier -> row index (overflowed features absent)
        overflow: Identifiers that did not fit into max_rows, in input order
        row_count: Number of rows opened
    """
    rows: Dict[Hashable, int]
    overflow: List[Hashable]
    row_count: int

    @property
    def overflow_count(self) -> int:
        """Number of features excluded from the layout"""
        return len(self.overflow)

    @property
    def has_overflow(self) -> bool:
        return bool(self.overflow)

    def members_of_row(self, row: int) -> List[Hashable]:
        """Identifiers assigned to one row, in placement order"""
        return [key for key, r in self.rows.items() if r == row]


@dataclass(frozen=True)
class FeatureGroup:
    """
    Run of adjacent features merged into one glyph

    Attributes:
        members: Features in sorted order
        pixels: Pixel position of each member
        breakdown: Category -> member count
        weight: Summed member weight (e.g. sample counts)
    """
    members: Tuple[Any, ...]
    pixels: Tuple[float, ...]
    breakdown: Dict[str, int]
    weight: float

    @property
    def size(self) -> int:
        """Total member count"""
        return len(self.members)

    @property
    def is_aggregate(self) -> bool:
        """Whether the group renders as an aggregate glyph"""
        return len(self.members) > 1

    @property
    def center(self) -> float:
        """Mean pixel position of the members"""
        return sum(self.pixels) / len(self.pixels)

    @property
    def first_pixel(self) -> float:
        return self.pixels[0]

    @property
    def last_pixel(self) -> float:
        return self.pixels[-1]


@dataclass(frozen=True)
class Tick:
    """
    Ruler tick

    Attributes:
        position: Genomic position (bp)
        pixel: Horizontal pixel offset
        label: Text label (empty for minor ticks)
        major: Major or minor tick
    """
    position: float
    pixel: float
    label: str
    major: bool


@dataclass(frozen=True)
class DrawCommand:
    """
    One drawing primitive in track-local pixel coordinates

    Geometry by kind:
        rect: x, y, width, height
        line: x, y -> x2, y2
        circle: x, y center, radius
        polygon / polyline / area: points
        curve: quadratic bezier through points (start, control, end)
        wedge: x, y center, radius, theta1 -> theta2 (degrees from +x toward +y in
            y-down pixel space, so clockwise on screen)
        text: x, y anchor, text

    Attributes:
        kind: Primitive kind
        color: Fill color reference (None for no fill)
        stroke: Stroke color reference (None for no stroke)
        feature_id: Identifier of the feature this primitive belongs to
        role: Semantic tag for backends and tests ('exon', 'read', 'tick', ...)
    """
    kind: DrawKind
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    x2: float = 0.0
    y2: float = 0.0
    radius: float = 0.0
    theta1: float = 0.0
    theta2: float = 0.0
    points: Tuple[Point, ...] = ()
    text: str = ''
    color: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: float = 1.0
    opacity: float = 1.0
    dashed: bool = False
    font_size: float = 10.0
    anchor: Literal['start', 'middle', 'end'] = 'start'
    bold: bool = False
    feature_id: Optional[str] = None
    role: str = ''

    def shifted(self, dx: float = 0.0, dy: float = 0.0) -> 'DrawCommand':
        """Copy translated by (dx, dy)"""
        return replace(
            self,
            x=self.x + dx,
            y=self.y + dy,
            x2=self.x2 + dx,
            y2=self.y2 + dy,
            points=tuple((px + dx, py + dy) for px, py in self.points),
        )


@dataclass(frozen=True)
class HitBox:
    """
    Pointer target recorded during layout

    Attributes:
        x0, y0, x1, y1: Bounding box in track-local pixels
        feature: Feature returned by hit_test
        shape: 'box', 'circle' or 'curve' refinement inside the bounding box
        params: Extra geometry for refined shapes
    """
    x0: float
    y0: float
    x1: float
    y1: float
    feature: Any
    shape: Literal['box', 'circle', 'curve', 'pie'] = 'box'
    params: Tuple[Any, ...] = field(default=())

    def contains(self, px: float, py: float) -> bool:
        return self.x0 <= px <= self.x1 and self.y0 <= py <= self.y1
