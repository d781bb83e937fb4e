"""
Use resolution, the second frontend phase.

``UseResolver`` walks one compilation unit after the whole program has been
declared and linked, and resolves the target of every call expression:

- ``f()``, ``mod.f()`` and ``C()`` fill the ``uses`` table with the function
  or class they name;
- ``recv.m()`` on a receiver of known class fills the ``selections`` table.

Calls whose target cannot be typed are left out of both tables.
"""

import ast
import logging

from . import inference, objects
from .info import Selection, TypeInfo
from .inference import ClassRef, FunctionRef, Instance, ModuleRef, SuperRef
from .objects import ClassObject, FunctionObject

LOG = logging.getLogger(__name__)


class UseResolver(ast.NodeVisitor):
    def __init__(self, info, module, tree):
        self.info = info
        self.module = module
        self.tree = tree
        self.partial = TypeInfo()
        self.resolution = inference.ResolutionPass(info)
        self.env = self.resolution.module_environment(module)

    def resolve(self):
        """Walk the tree; returns the unit's partial ``uses``/``selections`` tables."""
        self.visit(self.tree)
        LOG.debug(
            "%s: %d uses, %d selections",
            self.module.name, len(self.partial.uses), len(self.partial.selections),
        )
        return self.partial

    # ---------------------------------------------------------------- scopes
    def _visit_all(self, nodes):
        for node in nodes:
            if node is not None:
                self.visit(node)

    def _visit_signature(self, args, returns):
        # Defaults and annotations run in the enclosing scope.
        self._visit_all(args.defaults)
        self._visit_all(args.kw_defaults)
        for arg in args.posonlyargs + args.args + args.kwonlyargs + [args.vararg, args.kwarg]:
            if arg is not None and arg.annotation is not None:
                self.visit(arg.annotation)
        if returns is not None:
            self.visit(returns)

    def visit_FunctionDef(self, node):
        self._visit_all(node.decorator_list)
        self._visit_signature(node.args, node.returns)

        func = self.info.defs.get(node)
        if not isinstance(func, FunctionObject):
            return
        outer = self.env
        self.env = inference.function_environment(func, outer)
        self._visit_all(node.body)
        self.env = outer

    visit_AsyncFunctionDef = visit_FunctionDef

    def visit_ClassDef(self, node):
        self._visit_all(node.decorator_list)
        self._visit_all(node.bases)
        self._visit_all([k.value for k in node.keywords])
        self._visit_all(node.body)

    def visit_Lambda(self, node):
        self._visit_signature(node.args, None)
        outer = self.env
        self.env = inference.lambda_environment(node, outer)
        self.visit(node.body)
        self.env = outer

    # ----------------------------------------------------------------- calls
    def visit_Call(self, node):
        self.resolve_target(node.func)
        self.generic_visit(node)

    def resolve_target(self, target):
        typer = inference.ExpressionTyper(self.env)
        if isinstance(target, ast.Attribute):
            base = typer(target.value)
            if isinstance(base, ModuleRef):
                self._record_use(target, self.info.module_member(base.module, target.attr))
                return
            if isinstance(base, (Instance, ClassRef, SuperRef)):
                method = base.cls.lookup(target.attr, skip_self=isinstance(base, SuperRef))
                if method is not None:
                    if method.kind != objects.PROPERTY:
                        self.partial.selections[target] = Selection(base.cls, method)
                    return
            value = typer.member(base, target.attr)
        else:
            value = typer(target)

        if isinstance(value, FunctionRef):
            if value.receiver is not None and value.func.owner is not None:
                self.partial.selections[target] = Selection(value.receiver, value.func)
            else:
                self._record_use(target, value.func)
        elif isinstance(value, ClassRef):
            self._record_use(target, value.cls)

    def _record_use(self, target, obj):
        if isinstance(obj, (FunctionObject, ClassObject)):
            self.partial.uses[target] = obj
