"""
genoview CLI

Command-line interface with subcommands for laying out and rendering regions.
"""

import argparse
import sys
from .cli import layout, plot, ticks


def main():
    parser = argparse.ArgumentParser(
        prog='genoview',
        description='genoview: Multi-track genome browser layout and rendering'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Add subcommand parsers
    layout.add_parser(subparsers)
    plot.add_parser(subparsers)
    ticks.add_parser(subparsers)

    # Parse arguments
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Execute the appropriate subcommand
    if args.command == 'layout':
        layout.run(args)
    elif args.command == 'plot':
        plot.run(args)
    elif args.command == 'ticks':
        ticks.run(args)


if __name__ == "__main__":
    main()
