"""
Backward call graph construction.

Each call whose target resolves to an identity of the Declaration Set adds
an edge from that callee to the enclosing declaration. Calls to anything
outside the Declaration Set (library code, filtered-out units, targets that
could not be typed) are dropped.
"""

import logging

from backflow.machinery.callgraph import BackwardCallGraph

from .walker import EnclosingDeclarationWalker, iter_units

LOG = logging.getLogger(__name__)


class GraphBuilder(EnclosingDeclarationWalker):
    def __init__(self, info, resolver, declarations, graph=None):
        super().__init__(info, resolver)
        self.declarations = declarations
        self.graph = graph if graph is not None else BackwardCallGraph()
        self.dropped = 0

    def handle_call(self, node, enclosing):
        callee = self.resolver.resolve_call(node, self.info, self.declarations)
        if callee is None:
            self.dropped += 1
            return
        self.graph.add_edge(callee, enclosing)


class CallCollector(EnclosingDeclarationWalker):
    """Every call site whose target has an identity, with its caller, in walk order."""

    def __init__(self, info, resolver):
        super().__init__(info, resolver)
        self.calls = []

    def handle_call(self, node, enclosing):
        callee = self.resolver.callee_identity(node, self.info)
        if callee is not None:
            self.calls.append((callee, enclosing))


def build_call_graph(program, resolver, declarations, config):
    """Backward call graph over the units passing the path filter."""
    builder = GraphBuilder(program.info, resolver, declarations)
    for unit in iter_units(program, config, "callgraph"):
        builder.walk(unit)
    LOG.debug(
        "%d callees, %d unresolved or external calls dropped",
        len(builder.graph), builder.dropped,
    )
    return builder.graph


def collect_calls(program, resolver, config):
    """Resolved call sites as ``(callee, caller)`` pairs."""
    collector = CallCollector(program.info, resolver)
    for unit in iter_units(program, config, "calls"):
        collector.walk(unit)
    return collector.calls
