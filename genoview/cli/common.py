"""Shared CLI plumbing: input arguments, logging setup, session assembly"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Optional
from argparse import ArgumentParser, Namespace
import logging

from ..composer import TrackComposer
from ..config import ViewerConfig
from ..errors import GenoviewError, OverflowFeatureCount
from ..io import (
    AnnotationReader,
    BedGraphReader,
    GeneReader,
    JunctionReader,
    MutationReader,
    ReadTableReader,
    SignalReader,
)
from ..loader import DataSource, RegionLoader
from ..tracks import create_track
from ..viewport import GenomicRegion, ViewportController, parse_region

logger = logging.getLogger(__name__)

PRESETS: Dict[str, Callable[[], ViewerConfig]] = {
    'default': ViewerConfig,
    'compact': ViewerConfig.compact,
    'presentation': ViewerConfig.presentation,
    'debug': ViewerConfig.debug,
}

# (argument dest, track kind, track id, display name, reader)
TRACK_INPUTS = [
    ('genes', 'gene', 'genes', 'Genes', GeneReader.read),
    ('mutations', 'mutation', 'mutations', 'Mutations', MutationReader.read),
    ('signal', 'signal', 'coverage', 'Coverage', SignalReader.read),
    ('annotations', 'annotation', 'annotations', 'Regulatory', AnnotationReader.read),
    ('reads', 'alignment', 'reads', 'Alignments', ReadTableReader.read),
    ('bins', 'continuous_signal', 'bins', 'Signal', BedGraphReader.read),
    ('junctions', 'junction', 'junctions', 'Junctions', JunctionReader.read),
]


@dataclass
class Session:
    """Everything assembled from the command line"""
    config: ViewerConfig
    viewport: ViewportController
    composer: TrackComposer
    loader: RegionLoader


def add_region_arguments(parser: ArgumentParser) -> None:
    parser.add_argument('--region',
                        help='Region chrom:start-end (default: chr17:7,560,000-7,730,000)')
    parser.add_argument('--width', type=int,
                        help='Track area width in pixels (default: 1000)')
    parser.add_argument('--preset', choices=sorted(PRESETS), default='default',
                        help='Configuration preset (default: default)')


def add_input_arguments(parser: ArgumentParser) -> None:
    """Track inputs and view manipulation shared by layout and plot"""
    add_region_arguments(parser)

    inputs = parser.add_argument_group('track inputs')
    inputs.add_argument('--genes', help='Gene model TSV')
    inputs.add_argument('--mutations', help='Mutation TSV')
    inputs.add_argument('--signal', help='Point signal TSV (position, value)')
    inputs.add_argument('--annotations', help='Annotation BED file')
    inputs.add_argument('--reads', help='Aligned read TSV')
    inputs.add_argument('--bins', help='Binned signal bedGraph')
    inputs.add_argument('--junctions', help='Splice junction TSV')

    view = parser.add_argument_group('view')
    view.add_argument('--zoom', type=float, default=1.0,
                      help='Zoom factor applied around the center after loading (>1 zooms in)')
    view.add_argument('--pan', type=float, default=0.0,
                      help='Pan by this many pixels after zooming (positive = right)')
    view.add_argument('--collapse', nargs='+', default=[], metavar='TRACK_ID',
                      help='Collapse tracks by id')
    view.add_argument('--hide', nargs='+', default=[], metavar='TRACK_ID',
                      help='Hide tracks by id')
    view.add_argument('--order', nargs='+', metavar='TRACK_ID',
                      help='Track display order')


def configure_logging(args: Namespace) -> None:
    """Configure logging as early as possible for a subcommand"""
    debug = getattr(args, 'debug', False)
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        force=True
    )

    # Silence very noisy third-party loggers (matplotlib font discovery etc.)
    for noisy in ("matplotlib", "matplotlib.font_manager", "PIL", "PIL.Image", "fontTools"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logging.getLogger("genoview").setLevel(logging.DEBUG if debug else logging.INFO)


def _report(error: GenoviewError) -> None:
    if isinstance(error, OverflowFeatureCount):
        logger.info(f"{error.track_id}: {error.count} features did not fit in {error.max_rows} rows")


def _source(records) -> DataSource:
    """Data source serving preloaded records for the requested chromosome"""
    def fetch(region: GenomicRegion):
        if isinstance(records, dict):
            return records
        return [r for r in records if r.get('chromosome', region.chromosome) == region.chromosome]
    return fetch


def build_session(args: Namespace) -> Session:
    """
    Assemble config, viewport, composer and loaded tracks from CLI arguments

    Raises:
        InvalidRegion: If --region is malformed or outside the genome
        FileNotFoundError: If an input table is missing
    """
    config = PRESETS[args.preset]()
    if args.width:
        config.browser.width = args.width

    region: Optional[GenomicRegion] = parse_region(args.region) if args.region else None
    viewport = ViewportController(config.browser, region)
    composer = TrackComposer(config.browser, on_warning=_report)

    sources: Dict[str, DataSource] = {}
    for dest, kind, track_id, name, reader in TRACK_INPUTS:
        path = getattr(args, dest, None)
        if not path:
            continue
        records = reader(path)
        composer.add_track(create_track(kind, track_id, name=name, config=config.for_kind(kind)))
        sources[track_id] = _source(records)

    if not sources:
        logger.warning("No track inputs given; only the ruler will be drawn")

    if args.order:
        composer.set_order(args.order)
    for track_id in args.collapse:
        composer.set_collapsed(track_id, True)
    for track_id in args.hide:
        composer.set_visible(track_id, False)

    if args.zoom != 1.0:
        viewport.zoom_by(args.zoom)
    if args.pan:
        viewport.pan_by(args.pan)

    loader = RegionLoader(composer, viewport)
    loader.load(sources)

    logger.info(f"Region: {viewport.region} ({len(composer)} tracks)")
    return Session(config=config, viewport=viewport, composer=composer, loader=loader)
