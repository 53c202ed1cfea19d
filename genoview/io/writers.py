"""
I/O Writers

Writes composed frames as flat draw-command tables, one row per primitive,
for backends that live outside Python and for inspection.
"""

from __future__ import annotations
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List
import logging

import pandas as pd

from ..composer import ComposedFrame
from ..layout.types import DrawCommand
from ..types import PathLike

logger = logging.getLogger(__name__)

COLUMNS = [
    'layer', 'y_offset', 'kind', 'x', 'y', 'width', 'height', 'x2', 'y2', 'radius',
    'theta1', 'theta2', 'points', 'text', 'color', 'stroke', 'stroke_width', 'opacity',
    'dashed', 'font_size', 'anchor', 'bold', 'feature_id', 'role',
]

HEADER_LINES = 2


def format_points(points) -> str:
    """((x, y), ...) -> 'x,y x,y' (SVG points syntax)"""
    return ' '.join(f"{x:.2f},{y:.2f}" for x, y in points)


def command_row(command: DrawCommand, layer: str, y_offset: float) -> Dict[str, Any]:
    row = asdict(command)
    row['points'] = format_points(command.points)
    row['layer'] = layer
    row['y_offset'] = y_offset
    return row


class DrawCommandWriter:
    """Writes draw commands in TSV format"""

    def __init__(self, precision: int = 2):
        """
        Initialize draw-command writer

        Args:
            precision: Decimal places for pixel coordinates
        """
        self.precision = precision

    def to_frame(self, frame: ComposedFrame) -> pd.DataFrame:
        """Flatten a composed frame into a DataFrame; coordinates stay track-local"""
        rows: List[Dict[str, Any]] = [command_row(cmd, 'ruler', 0.0) for cmd in frame.ruler]
        for track_frame in frame.tracks:
            offset = frame.ruler_height + track_frame.y_offset
            rows.extend(command_row(cmd, track_frame.track_id, offset) for cmd in track_frame.commands)

        table = pd.DataFrame(rows, columns=COLUMNS)
        numeric = ['x', 'y', 'width', 'height', 'x2', 'y2', 'radius', 'theta1', 'theta2', 'y_offset']
        table[numeric] = table[numeric].astype(float).round(self.precision)
        return table

    def write(self, frame: ComposedFrame, output_file: PathLike) -> int:
        """
        Write a composed frame to TSV

        A header comment records the region and canvas geometry.

        Returns:
            Number of commands written
        """
        Path(output_file).parent.mkdir(parents=True, exist_ok=True)
        table = self.to_frame(frame)

        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(f"# region={frame.region}\n")
            f.write(f"# width={frame.width:g} label_width={frame.label_width:g} "
                    f"ruler_height={frame.ruler_height:g} canvas_height={frame.canvas_height:g}\n")
            table.to_csv(f, sep='\t', index=False)

        logger.info(f"Wrote {len(table)} draw commands to {output_file}")
        return len(table)


def read_commands(filepath: PathLike) -> pd.DataFrame:
    """Read a table written by DrawCommandWriter, skipping its header lines"""
    return pd.read_csv(filepath, sep='\t', skiprows=HEADER_LINES)
