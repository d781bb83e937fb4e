"""
Declaration collection, the first frontend phase.

``DeclarationCollector`` walks the syntax tree of one compilation unit and
builds its ``ModuleObject`` plus a partial ``TypeInfo`` holding the ``defs``
table: every class and function statement, nested ones included, mapped to
the object describing it. Collectors for different units run in parallel;
they only read their own tree.

``link_program`` runs once all collectors have been merged: it resolves base
class expressions to in-program classes and computes MROs.
"""

import ast
import logging

from . import objects
from .info import TypeInfo
from .objects import ClassObject, FunctionObject, ImportBinding, ModuleObject

LOG = logging.getLogger(__name__)

_STATIC_DECORATORS = {"staticmethod"}
_CLASS_DECORATORS = {"classmethod"}
_PROPERTY_DECORATORS = {"property", "cached_property", "getter", "setter", "deleter"}


def _decorator_name(expr):
    if isinstance(expr, ast.Call):
        expr = expr.func
    if isinstance(expr, ast.Name):
        return expr.id
    if isinstance(expr, ast.Attribute):
        return expr.attr
    return None


def function_kind(node, in_class):
    """Classify a def statement from its position and decorators."""
    if not in_class:
        return objects.FUNCTION
    names = {_decorator_name(d) for d in node.decorator_list}
    if names & _STATIC_DECORATORS:
        return objects.STATIC_METHOD
    if names & _CLASS_DECORATORS:
        return objects.CLASS_METHOD
    if names & _PROPERTY_DECORATORS:
        return objects.PROPERTY
    return objects.METHOD


class DeclarationCollector(ast.NodeVisitor):
    """
    Builds the ModuleObject and the ``defs`` table of one unit.

    The collector keeps a stack of the classes and functions it is inside of
    to compute ``__qualname__``-style names and to attribute methods and
    ``self.attr`` assignments to their class.
    """

    def __init__(self, name, path, tree, is_package=False):
        self.tree = tree
        self.module = ModuleObject(name, path, is_package)
        self.info = TypeInfo()
        self.stack = []

    def collect(self):
        """Walk the tree; returns ``(module, partial_info)``."""
        self.visit(self.tree)
        self.info.modules[self.module.name] = self.module
        LOG.debug(
            "%s: %d declarations, %d imports",
            self.module.name, len(self.info.defs), len(self.module.imports),
        )
        return self.module, self.info

    # ---------------------------------------------------------------- naming
    def _qualname(self, name):
        if not self.stack:
            return name
        parent = self.stack[-1]
        if isinstance(parent, FunctionObject):
            return "%s.%s.%s" % (parent.qualname, objects.LOCALS_MARKER, name)
        return "%s.%s" % (parent.qualname, name)

    def _enclosing_class(self):
        if self.stack and isinstance(self.stack[-1], ClassObject):
            return self.stack[-1]
        return None

    def _enclosing_method(self):
        if self.stack and isinstance(self.stack[-1], FunctionObject):
            func = self.stack[-1]
            if func.owner is not None and func.receiver_param:
                return func
        return None

    def _register(self, node, obj):
        self.info.defs[node] = obj
        self.module.objects[obj.qualname] = obj
        if not self.stack:
            self.module.members[obj.name] = obj

    # ---------------------------------------------------------- declarations
    def visit_ClassDef(self, node):
        for expr in node.decorator_list + node.bases + [k.value for k in node.keywords]:
            self.visit(expr)

        cls = ClassObject(
            node.name,
            self._qualname(node.name),
            self.module,
            node,
            is_protocol=any(objects.is_protocol_base(b) for b in node.bases),
        )
        self._register(node, cls)

        self.stack.append(cls)
        for stmt in node.body:
            self.visit(stmt)
        self.stack.pop()

    def visit_FunctionDef(self, node):
        for expr in node.decorator_list:
            self.visit(expr)
        self.visit(node.args)
        if node.returns is not None:
            self.visit(node.returns)

        owner = self._enclosing_class()
        func = FunctionObject(
            node.name,
            self._qualname(node.name),
            self.module,
            node,
            owner=owner,
            kind=function_kind(node, owner is not None),
        )
        self._register(node, func)
        if owner is not None:
            # A setter or deleter keeps the getter registered.
            if not (func.kind == objects.PROPERTY and node.name in owner.methods):
                owner.methods[node.name] = func

        self.stack.append(func)
        for stmt in node.body:
            self.visit(stmt)
        self.stack.pop()

    visit_AsyncFunctionDef = visit_FunctionDef

    # ------------------------------------------------------------- bindings
    def visit_Import(self, node):
        if not self.stack:
            for alias in node.names:
                if alias.asname:
                    self.module.imports[alias.asname] = ImportBinding(alias.name)
                else:
                    top = alias.name.split(".")[0]
                    self.module.imports[top] = ImportBinding(top)

    def visit_ImportFrom(self, node):
        if self.stack:
            return
        module = self.module.absolute_import(node.module, node.level)
        for alias in node.names:
            if alias.name == "*":
                continue
            self.module.imports[alias.asname or alias.name] = ImportBinding(module, alias.name)

    def visit_AnnAssign(self, node):
        self._record_binding(node.target, node.annotation, None)
        self.generic_visit(node)

    def visit_Assign(self, node):
        for target in node.targets:
            self._record_binding(target, None, node.value)
        self.generic_visit(node)

    def _record_binding(self, target, annotation, value):
        cls = self._enclosing_class()
        if not self.stack:
            if isinstance(target, ast.Name):
                previous = self.module.variables.get(target.id, (None, None))
                self.module.variables[target.id] = (annotation or previous[0], value)
        elif cls is not None:
            if isinstance(target, ast.Name):
                self._record_attribute(cls, target.id, annotation, value)
        else:
            method = self._enclosing_method()
            if (
                method is not None
                and isinstance(target, ast.Attribute)
                and isinstance(target.value, ast.Name)
                and target.value.id == method.receiver_param
            ):
                if annotation is None and isinstance(value, ast.Name):
                    # self.x = x picks up the parameter annotation of x.
                    annotation = _param_annotation(method.node, value.id)
                self._record_attribute(method.owner, target.attr, annotation, value)

    def _record_attribute(self, cls, name, annotation, value):
        if annotation is not None:
            cls.attributes[name] = (objects.ANNOTATION, annotation)
        elif value is not None and name not in cls.attributes:
            if isinstance(value, (ast.Call, ast.Name, ast.Attribute)):
                cls.attributes[name] = (objects.VALUE, value)


def _param_annotation(node, name):
    args = node.args
    for arg in args.posonlyargs + args.args + args.kwonlyargs:
        if arg.arg == name:
            return arg.annotation
    return None


def _resolve_base(info, module, expr):
    if isinstance(expr, ast.Subscript):
        expr = expr.value
    if isinstance(expr, ast.Name):
        obj = info.module_member(module, expr.id)
        return obj if isinstance(obj, ClassObject) else None
    if isinstance(expr, ast.Attribute):
        owner = _resolve_base_owner(info, module, expr.value)
        if isinstance(owner, ModuleObject):
            obj = info.module_member(owner, expr.attr)
        elif isinstance(owner, ClassObject):
            obj = owner.module.objects.get("%s.%s" % (owner.qualname, expr.attr))
        else:
            obj = None
        return obj if isinstance(obj, ClassObject) else None
    return None


def _resolve_base_owner(info, module, expr):
    if isinstance(expr, ast.Name):
        return info.module_member(module, expr.id)
    if isinstance(expr, ast.Attribute):
        owner = _resolve_base_owner(info, module, expr.value)
        if isinstance(owner, ModuleObject):
            return info.module_member(owner, expr.attr)
    return None


def link_program(info):
    """
    Resolve base classes and compute MROs for every class in ``info``.

    Must run after every unit's declarations have been merged. Bases that
    are not classes of the program are dropped.
    """
    classes = info.classes()
    for cls in classes:
        cls.bases = []
        for expr in cls.base_exprs:
            if objects.is_protocol_base(expr):
                continue
            base = _resolve_base(info, cls.module, expr)
            if base is not None and base is not cls:
                cls.bases.append(base)
    for cls in classes:
        objects.linearize(cls)
    LOG.debug("linked %d classes", len(classes))
