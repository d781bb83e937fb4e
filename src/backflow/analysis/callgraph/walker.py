"""
Walking compilation units with the enclosing declaration in view.
"""

import ast
import logging

from backflow.application.errors import InternalError

from .identity import FunctionIdentity

LOG = logging.getLogger(__name__)


def iter_units(program, config, phase):
    """Units of ``program`` that pass the path filter, in module order."""
    for unit in program.units:
        if config.accepts(unit.location):
            LOG.info("%s: %s", phase, unit.location)
            yield unit
        else:
            LOG.debug("%s: skipping %s", phase, unit.location)


class EnclosingDeclarationWalker(ast.NodeVisitor):
    """
    Visits every call of a unit, tracking the innermost enclosing declaration.

    The identity of a function is pushed when its body is entered and popped
    when it is left. Decorators, default values and annotations belong to
    the enclosing context. Outside any function the enclosing identity is
    the zero identity.

    Subclasses implement ``handle_call(node, enclosing)``.
    """

    def __init__(self, info, resolver):
        self.info = info
        self.resolver = resolver
        self.stack = []

    @property
    def enclosing(self):
        if self.stack:
            return self.stack[-1]
        return FunctionIdentity.zero()

    def walk(self, unit):
        self.visit(unit.tree)

    def visit_FunctionDef(self, node):
        for expr in node.decorator_list:
            self.visit(expr)
        self.visit(node.args)
        if node.returns is not None:
            self.visit(node.returns)

        func = self.info.defs.get(node)
        if func is None:
            raise InternalError("no definition recorded for %s at line %d" % (node.name, node.lineno))

        self.stack.append(self.resolver.enclosing_identity(func))
        try:
            for stmt in node.body:
                self.visit(stmt)
        finally:
            self.stack.pop()

    visit_AsyncFunctionDef = visit_FunctionDef

    def visit_Call(self, node):
        self.handle_call(node, self.enclosing)
        self.generic_visit(node)

    def handle_call(self, node, enclosing):
        raise NotImplementedError
