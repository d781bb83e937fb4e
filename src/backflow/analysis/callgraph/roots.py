"""
Root function detection.

A root function is one whose body calls the marker, either as a bare name
(``AutotelEntryPoint()``) or as an attribute (``tracer.AutotelEntryPoint()``).
Marker calls need not resolve to anything in the program.
"""

import ast
import logging

from .walker import EnclosingDeclarationWalker, iter_units

LOG = logging.getLogger(__name__)


def is_marker_call(node, label):
    func = node.func
    if isinstance(func, ast.Attribute):
        return func.attr == label
    if isinstance(func, ast.Name):
        return func.id == label
    return False


class RootLocator(EnclosingDeclarationWalker):
    def __init__(self, info, resolver, label):
        super().__init__(info, resolver)
        self.label = label
        self.roots = []

    def handle_call(self, node, enclosing):
        if is_marker_call(node, self.label):
            if enclosing.is_zero:
                LOG.debug("marker call at line %d outside any function", node.lineno)
            self.roots.append(enclosing)


def find_root_functions(program, resolver, config):
    """
    Enclosing identity of every marker call, one entry per call site.

    Repeats are kept; a marker call at module or class-body level yields the
    zero identity.
    """
    locator = RootLocator(program.info, resolver, config.marker_label)
    for unit in iter_units(program, config, "roots"):
        locator.walk(unit)
    LOG.debug("%d marker calls", len(locator.roots))
    return locator.roots
