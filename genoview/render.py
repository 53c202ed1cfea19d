"""
Matplotlib rendering backend

Reference backend that draws a ComposedFrame into a matplotlib Figure. The
axes use pixel units with y growing downward, so draw commands map 1:1 onto
data coordinates; the label column occupies negative x.
"""

from __future__ import annotations
from typing import Any, Dict, Optional
from pathlib import Path
import logging

import matplotlib.pyplot as plt
import matplotlib.patches as patches
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.path import Path as MplPath

from .composer import ComposedFrame
from .config import ViewerConfig
from .layout.types import DrawCommand
from .types import PathLike

logger = logging.getLogger(__name__)

# px -> pt at 72 pt per inch and the 96 px per inch of a browser canvas
FONT_SCALE = 0.75

_HALIGN = {'start': 'left', 'middle': 'center', 'end': 'right'}


class FramePlotter:
    """
    Draws composed frames with matplotlib

    Example:
        >>> plotter = FramePlotter(ViewerConfig())
        >>> fig = plotter.plot(composer.layout(viewport), output_file='region.png')
    """

    def __init__(self, config: Optional[ViewerConfig] = None) -> None:
        self.config: ViewerConfig = config or ViewerConfig()

    def plot(self, frame: ComposedFrame, output_file: Optional[PathLike] = None,
             show: bool = False) -> Figure:
        """
        Render a frame

        Args:
            frame: Composed frame from TrackComposer.layout
            output_file: PNG/SVG/PDF path; nothing is saved when None
            show: Open an interactive window

        Returns:
            matplotlib Figure object
        """
        dpi = self.config.dpi
        total_width = frame.label_width + frame.width
        total_height = frame.total_height

        fig = plt.figure(figsize=(total_width / dpi, total_height / dpi), dpi=dpi)
        fig.patch.set_facecolor(self.config.background_color)
        ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
        ax.set_xlim(-frame.label_width, frame.width)
        ax.set_ylim(total_height, 0)
        ax.axis('off')

        self._draw_labels(ax, frame)
        drawn = 0
        for command in frame.flattened():
            self.draw_command(ax, command)
            drawn += 1
        logger.debug(f"Rendered {drawn} commands for {frame.region}")

        if output_file is not None:
            Path(output_file).parent.mkdir(parents=True, exist_ok=True)
            fig.savefig(output_file, dpi=dpi, facecolor=self.config.background_color,
                        edgecolor='none')
            logger.info(f"Plot saved to {output_file}")

        if show:
            plt.show()

        return fig

    @staticmethod
    def _draw_labels(ax: Axes, frame: ComposedFrame) -> None:
        """Track names in the label column"""
        for track_frame in frame.tracks:
            y = frame.ruler_height + track_frame.y_offset + track_frame.height / 2
            ax.text(-frame.label_width + 5, y, track_frame.name, ha='left', va='center',
                    fontsize=11 * FONT_SCALE, fontweight='bold', color='#333', clip_on=True)

    @staticmethod
    def _style(command: DrawCommand) -> Dict[str, Any]:
        return {
            'facecolor': command.color or 'none',
            'edgecolor': command.stroke or 'none',
            'linewidth': command.stroke_width if command.stroke else 0.0,
            'alpha': command.opacity,
            'linestyle': '--' if command.dashed else '-',
        }

    def draw_command(self, ax: Axes, command: DrawCommand) -> None:
        """Draw one primitive onto pixel-unit axes"""
        kind = command.kind

        if kind == 'rect':
            ax.add_patch(patches.Rectangle((command.x, command.y), command.width, command.height,
                                           **self._style(command)))
        elif kind == 'circle':
            ax.add_patch(patches.Circle((command.x, command.y), command.radius, **self._style(command)))
        elif kind == 'wedge':
            ax.add_patch(patches.Wedge((command.x, command.y), command.radius,
                                       command.theta1, command.theta2, **self._style(command)))
        elif kind in ('polygon', 'area'):
            ax.add_patch(patches.Polygon(list(command.points), closed=True, **self._style(command)))
        elif kind == 'curve':
            start, control, end = command.points
            path = MplPath([start, control, end], [MplPath.MOVETO, MplPath.CURVE3, MplPath.CURVE3])
            style = self._style(command)
            style['facecolor'] = 'none'
            ax.add_patch(patches.PathPatch(path, **style))
        elif kind in ('line', 'polyline'):
            if kind == 'line':
                xs, ys = [command.x, command.x2], [command.y, command.y2]
            else:
                xs = [p[0] for p in command.points]
                ys = [p[1] for p in command.points]
            ax.plot(xs, ys, color=command.stroke or command.color or '#000',
                    linewidth=command.stroke_width, alpha=command.opacity,
                    linestyle='--' if command.dashed else '-')
        elif kind == 'text':
            ax.text(command.x, command.y, command.text, ha=_HALIGN[command.anchor], va='baseline',
                    fontsize=command.font_size * FONT_SCALE, color=command.color or '#000',
                    fontweight='bold' if command.bold else 'normal', alpha=command.opacity)
        else:
            raise ValueError(f"Unknown draw command kind: {kind}")


def plot_frame(frame: ComposedFrame, output_file: PathLike,
               config: Optional[ViewerConfig] = None) -> None:
    """Render a frame to a file and release the figure"""
    fig = FramePlotter(config).plot(frame, output_file=output_file)
    plt.close(fig)
