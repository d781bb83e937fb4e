"""
CLI functionality for call graph analysis.

``callgraph`` prints the full report; ``roots``, ``decls`` and ``calls`` print
one artifact each.
"""

import json
import logging
import sys
from pathlib import Path

from backflow.analysis.callgraph.extractor import CallGraphExtractor
from backflow.analysis.callgraph.formats import (
    GENERATORS,
    format_calls,
    format_declarations,
    format_roots,
)
from backflow.application.config import DEFAULT_MARKER_LABEL, TIE_BREAK_LAST, TIE_BREAKS, AnalysisConfig
from backflow.application.context import AnalysisContext
from backflow.application.errors import AnalysisError

LOG = logging.getLogger(__name__)

ARTIFACT_GRAPH = "callgraph"
ARTIFACT_ROOTS = "roots"
ARTIFACT_DECLS = "decls"
ARTIFACT_CALLS = "calls"


def configure_logging(args):
    level = logging.DEBUG if args.debug else logging.INFO if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def render(result, args):
    """Render the requested artifact of ``result`` in the requested format."""
    artifact = getattr(args, "artifact", ARTIFACT_GRAPH)
    fmt = getattr(args, "format", "text")

    if artifact == ARTIFACT_GRAPH:
        return GENERATORS[fmt](result, args)

    if fmt == "json":
        data = result.to_dict()
        key = {
            ARTIFACT_ROOTS: "root_functions",
            ARTIFACT_DECLS: "declarations",
            ARTIFACT_CALLS: "calls",
        }[artifact]
        return json.dumps({key: data[key]}, indent=2)

    formatter = {
        ARTIFACT_ROOTS: format_roots,
        ARTIFACT_DECLS: format_declarations,
        ARTIFACT_CALLS: format_calls,
    }[artifact]
    return "\n".join(formatter(result))


def run_callgraph(input_path, args):
    """Build the backward call graph of a program and print the requested artifact."""
    configure_logging(args)
    try:
        args.input = input_path
        config = AnalysisConfig.from_args(args)
        context = AnalysisContext(config)
        result = CallGraphExtractor(context).run()
        output = render(result, args)

        if args.output:
            with open(args.output, "w") as f:
                f.write(output)
                f.write("\n")
            if args.verbose:
                print(f"Call graph written to {args.output}", file=sys.stderr)
        else:
            print(output)

        return 0

    except (AnalysisError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


def _add_common_arguments(parser):
    parser.add_argument("input", type=Path, help="Python project directory or file to analyze")

    parser.add_argument(
        "--filter",
        default="",
        metavar="SUBSTR",
        help="Only analyze files whose path contains SUBSTR",
    )

    parser.add_argument(
        "--marker",
        default=DEFAULT_MARKER_LABEL,
        metavar="LABEL",
        help=f"Call name marking root functions (default: {DEFAULT_MARKER_LABEL})",
    )

    parser.add_argument(
        "--interface-tie-break",
        choices=TIE_BREAKS,
        default=TIE_BREAK_LAST,
        help="Interface used when a class satisfies several, by sorted name (default: last)",
    )

    parser.add_argument(
        "--output", "-o", type=Path, help="Output file (default: stdout)"
    )

    parser.add_argument(
        "--workers", "-j", type=int, help="Frontend worker threads"
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose output"
    )

    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )


def add_callgraph_parser(subparsers):
    """Add the call graph subcommands to the argument parser."""
    parser = subparsers.add_parser(
        ARTIFACT_GRAPH, help="Build the backward call graph of a Python program"
    )
    _add_common_arguments(parser)
    parser.add_argument(
        "--format",
        "-f",
        choices=sorted(GENERATORS),
        default="text",
        help="Output format (default: text)",
    )
    parser.set_defaults(func=run_callgraph, artifact=ARTIFACT_GRAPH)

    for name, help_text in (
        (ARTIFACT_ROOTS, "List functions that call the entry-point marker"),
        (ARTIFACT_DECLS, "List every declared function identity"),
        (ARTIFACT_CALLS, "List every resolved call site with its caller"),
    ):
        parser = subparsers.add_parser(name, help=help_text)
        _add_common_arguments(parser)
        parser.add_argument(
            "--format",
            "-f",
            choices=["text", "json"],
            default="text",
            help="Output format (default: text)",
        )
        parser.set_defaults(func=run_callgraph, artifact=name)
