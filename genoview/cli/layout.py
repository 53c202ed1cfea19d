"""Layout subcommand - draw commands for a region"""

from __future__ import annotations
from pathlib import Path
import logging
from argparse import ArgumentParser, Namespace, _SubParsersAction

from ..io import DrawCommandWriter
from .common import add_input_arguments, build_session, configure_logging

logger = logging.getLogger(__name__)


def add_parser(subparsers: _SubParsersAction) -> ArgumentParser:
    """
    Add layout subcommand parser

    Args:
        subparsers: Subparser action from main argument parser

    Returns:
        Configured ArgumentParser for layout subcommand
    """
    parser = subparsers.add_parser(
        'layout',
        help='Lay out tracks for a region and write draw commands as TSV'
    )
    add_input_arguments(parser)
    parser.add_argument('-o', '--output', required=True,
                        help='Output TSV path for draw commands')
    parser.add_argument('--precision', type=int, default=2,
                        help='Decimal places for pixel coordinates (default: 2)')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging for troubleshooting')
    return parser  # type: ignore[no-any-return]


def run(args: Namespace) -> None:
    """
    Execute layout subcommand

    Args:
        args: Parsed command-line arguments from argparse
    """
    configure_logging(args)

    session = build_session(args)
    frame = session.composer.layout(session.viewport)

    output = Path(args.output)
    count = DrawCommandWriter(precision=args.precision).write(frame, output)
    logger.info(f"✓ {count} draw commands for {frame.region} written to {output}")
