"""Ticks subcommand - print ruler ticks for a region"""

from __future__ import annotations
import logging
import sys
from argparse import ArgumentParser, Namespace, _SubParsersAction

import pandas as pd

from ..config import BrowserConfig
from ..layout import TickGenerator, format_span
from ..viewport import GenomicRegion, ViewportController, parse_region
from .common import configure_logging

logger = logging.getLogger(__name__)


def add_parser(subparsers: _SubParsersAction) -> ArgumentParser:
    """
    Add ticks subcommand parser

    Args:
        subparsers: Subparser action from main argument parser

    Returns:
        Configured ArgumentParser for ticks subcommand
    """
    parser = subparsers.add_parser(
        'ticks',
        help='Print ruler ticks (position, pixel, label) for a region'
    )
    parser.add_argument('--region', required=True,
                        help='Region chrom:start-end')
    parser.add_argument('--target', type=int, default=10,
                        help='Target number of major ticks (default: 10)')
    parser.add_argument('--width', type=int, default=1000,
                        help='Track area width in pixels (default: 1000)')
    parser.add_argument('--major-only', action='store_true',
                        help='Only print major ticks')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging for troubleshooting')
    return parser  # type: ignore[no-any-return]


def tick_table(region: GenomicRegion, target: int, width: int, major_only: bool = False) -> pd.DataFrame:
    """Ticks for a validated region as a DataFrame"""
    viewport = ViewportController(BrowserConfig(width=width), region)
    generator = TickGenerator(target)
    ticks = generator.generate(viewport.region.start, viewport.region.end, viewport.position_to_pixel)
    if major_only:
        ticks = [t for t in ticks if t.major]
    return pd.DataFrame(
        [(t.position, round(t.pixel, 2), t.label, t.major) for t in ticks],
        columns=['position', 'pixel', 'label', 'major'],
    )


def run(args: Namespace) -> None:
    """
    Execute ticks subcommand

    Args:
        args: Parsed command-line arguments from argparse
    """
    configure_logging(args)

    region = parse_region(args.region)
    table = tick_table(region, args.target, args.width, args.major_only)
    logger.info(f"{region} ({format_span(region.span)}): {int(table['major'].sum())} major ticks")
    table.to_csv(sys.stdout, sep='\t', index=False)
