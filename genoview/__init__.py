"""genoview: Multi-track genome browser layout and rendering"""

from .config import BrowserConfig, ViewerConfig
from .errors import GenoviewError, InvalidRegion, TrackNotFound, OverflowFeatureCount, DataFetchFailure
from .viewport import GenomicRegion, ViewportController, ZoomState, parse_region
from .composer import TrackComposer, ComposedFrame
from .loader import RegionLoader
from .tracks import create_track
from .render import FramePlotter

__version__ = "0.1.0"
__all__ = [
    "BrowserConfig", "ViewerConfig",
    "GenoviewError", "InvalidRegion", "TrackNotFound", "OverflowFeatureCount", "DataFetchFailure",
    "GenomicRegion", "ViewportController", "ZoomState", "parse_region",
    "TrackComposer", "ComposedFrame", "RegionLoader", "create_track", "FramePlotter",
]
