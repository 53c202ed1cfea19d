"""Plot subcommand - render a region with matplotlib"""

from __future__ import annotations
from pathlib import Path
import logging
from argparse import ArgumentParser, Namespace, _SubParsersAction

from ..render import plot_frame
from .common import add_input_arguments, build_session, configure_logging

logger = logging.getLogger(__name__)


def add_parser(subparsers: _SubParsersAction) -> ArgumentParser:
    """
    Add plot subcommand parser

    Args:
        subparsers: Subparser action from main argument parser

    Returns:
        Configured ArgumentParser for plot subcommand
    """
    parser = subparsers.add_parser(
        'plot',
        help='Render a genome browser view to PNG/SVG/PDF'
    )
    add_input_arguments(parser)
    parser.add_argument('-o', '--output', required=True,
                        help='Output image path (format from extension)')
    parser.add_argument('--dpi', type=int,
                        help='Output DPI (default: from preset)')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging for troubleshooting')
    return parser  # type: ignore[no-any-return]


def run(args: Namespace) -> None:
    """
    Execute plot subcommand

    Args:
        args: Parsed command-line arguments from argparse
    """
    configure_logging(args)

    session = build_session(args)
    if args.dpi:
        session.config.dpi = args.dpi

    logger.info("Generating plot...")
    frame = session.composer.layout(session.viewport)
    output = Path(args.output)
    plot_frame(frame, output, session.config)

    logger.info(f"✓ Plot saved: {output}")
