"""
Declaration indexing.

Every function and method definition of the walked units is recorded under
each of its identities: the concrete one and, for methods of classes that
satisfy a protocol, the interface-qualified one. Methods declared in a
protocol body are interface members, not declarations.
"""

import ast
import logging

from backflow.application.errors import InternalError

from .walker import iter_units

LOG = logging.getLogger(__name__)


def index_unit(unit, info, resolver, declarations):
    """Add the identities of every declaration in ``unit`` to ``declarations``."""
    for node in ast.walk(unit.tree):
        if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            continue
        func = info.defs.get(node)
        if func is None:
            raise InternalError("no definition recorded for %s at line %d" % (node.name, node.lineno))
        if func.owner is not None and func.owner.is_protocol:
            continue
        declarations.update(resolver.declaration_identities(func))


def find_func_decls(program, resolver, config):
    """The Declaration Set of ``program``, restricted to units passing the path filter."""
    declarations = set()
    for unit in iter_units(program, config, "declarations"):
        index_unit(unit, program.info, resolver, declarations)
    LOG.debug("%d declaration identities", len(declarations))
    return frozenset(declarations)
