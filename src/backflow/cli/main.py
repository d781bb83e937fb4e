"""Main CLI dispatcher for Backflow.

This module provides the ``backflow`` command-line interface, dispatching
subcommands to the modules that contribute them.
"""

import argparse
import sys

from backflow import __version__

from . import callgraph


def build_parser():
    parser = argparse.ArgumentParser(
        description="Backflow - backward call graphs for Python programs", prog="backflow"
    )

    parser.add_argument("--version", action="version", version=f"Backflow {__version__}")

    subparsers = parser.add_subparsers(
        dest="command", help="Available commands", required=True
    )

    callgraph.add_callgraph_parser(subparsers)
    return parser


def main(argv=None):
    """Main entry point for the Backflow CLI.

    Returns:
        int: Exit code (0 for success, non-zero for error).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    input_path = args.input
    if not input_path.exists():
        print(f"Error: Path '{input_path}' not found", file=sys.stderr)
        return 1

    return args.func(input_path, args)


if __name__ == "__main__":
    sys.exit(main())
