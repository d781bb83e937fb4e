"""
Call graph extractor implementation.

Runs the phases of an analysis over a loaded program, each inside a timed
console scope:

1. interface registry
2. declaration indexing
3. root function detection
4. backward call graph construction
5. call site collection
"""

import logging

from backflow.application.config import AnalysisConfig
from backflow.application.context import AnalysisContext
from backflow.frontend import load_program

from .builder import build_call_graph, collect_calls
from .declarations import find_func_decls
from .interfaces import InterfaceRegistry
from .resolver import IdentityResolver
from .roots import find_root_functions
from .types import CallGraphResult

LOG = logging.getLogger(__name__)


class CallGraphExtractor:
    """Extracts the backward call graph and root functions of a program."""

    def __init__(self, context: AnalysisContext):
        self.context = context
        self.config = context.config
        self.console = context.console

    def load(self):
        with self.console.scope("load"):
            program = load_program(
                self.config.program_path, workers=self.config.workers, console=self.console
            )
        self.context.stats["load"]["units"] = len(program.units)
        return program

    def extract(self, program) -> CallGraphResult:
        """Run every analysis phase over an already loaded program."""
        config = self.config
        stats = self.context.stats

        with self.console.scope("callgraph"):
            with self.console.scope("interfaces"):
                registry = InterfaceRegistry.from_info(program.info)
                resolver = IdentityResolver(registry, config.interface_tie_break)
            stats["interfaces"]["count"] = len(registry)

            with self.console.scope("declarations"):
                declarations = find_func_decls(program, resolver, config)
            stats["declarations"]["count"] = len(declarations)

            with self.console.scope("roots"):
                roots = find_root_functions(program, resolver, config)
            stats["roots"]["count"] = len(roots)

            with self.console.scope("graph"):
                graph = build_call_graph(program, resolver, declarations, config)
            stats["graph"]["callees"] = len(graph)
            stats["graph"]["edges"] = sum(1 for _ in graph.edges())

            with self.console.scope("calls"):
                calls = collect_calls(program, resolver, config)
            stats["calls"]["count"] = len(calls)

        LOG.info(
            "%d declarations, %d root calls, %d callees",
            len(declarations), len(roots), len(graph),
        )
        return CallGraphResult(
            root_functions=roots,
            declarations=declarations,
            call_graph=graph,
            calls=calls,
        )

    def run(self) -> CallGraphResult:
        """Load the configured program and analyse it."""
        return self.extract(self.load())


def analyze(config=None, context=None, **options) -> CallGraphResult:
    """
    Analyse a program in one call.

    Either pass an AnalysisConfig/AnalysisContext or the config fields as
    keyword arguments: ``analyze(program_path="src", marker_label="Entry")``.
    """
    if context is None:
        if config is None:
            config = AnalysisConfig(**options)
        context = AnalysisContext(config)
    return CallGraphExtractor(context).run()
