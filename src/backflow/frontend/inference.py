"""
Lightweight type inference for call resolution.

Only as much typing as call resolution needs: the static type of a receiver
expression. Types are drawn from annotations (parameters, variables, class
attributes, return types), from ``self``/``cls`` and from constructor calls.
Inference is flow-insensitive: within a function the last binding of a name
wins.

Values are described by a closed set of kinds:

- ``Instance(cls)``: an instance of an in-program class
- ``ClassRef(cls)``: the class object itself
- ``FunctionRef(func)``: a function or method object
- ``ModuleRef(module)``: an imported in-program module
- ``SuperRef(cls)``: the proxy returned by ``super()`` inside ``cls``

Anything else (library types, builtins, containers) is unknown and
represented by None.
"""

import ast
from dataclasses import dataclass
from typing import Optional

from backflow.util.typedispatch import TypeDispatcher, defaultdispatch, dispatch

from . import objects
from .objects import ClassObject, FunctionObject, ModuleObject

_UNWRAP_SUBSCRIPTS = {"Optional", "ClassVar", "Final", "Annotated", "Required", "NotRequired"}
_TYPE_SUBSCRIPTS = {"type", "Type"}
_SELF_NAMES = {"Self"}


@dataclass(frozen=True)
class Instance:
    cls: ClassObject


@dataclass(frozen=True)
class ClassRef:
    cls: ClassObject


@dataclass(frozen=True)
class FunctionRef:
    func: FunctionObject
    receiver: Optional[ClassObject] = None


@dataclass(frozen=True)
class ModuleRef:
    module: ModuleObject


@dataclass(frozen=True)
class SuperRef:
    cls: ClassObject


def reference(obj):
    """Value kind describing a frontend object itself."""
    if isinstance(obj, FunctionObject):
        return FunctionRef(obj, obj.owner)
    if isinstance(obj, ClassObject):
        return ClassRef(obj)
    if isinstance(obj, ModuleObject):
        return ModuleRef(obj)
    return None


_PENDING = object()


class ResolutionPass(object):
    """
    Inference state shared by one use-resolution pass over a unit.

    Module environments are built once per module and data attribute types
    once per (class, name), so bindings that refer to each other across
    modules meet a pending entry and resolve to None.
    """

    def __init__(self, info):
        self.info = info
        self._modules = {}
        self._attributes = {}

    def module_environment(self, module):
        """Environment of a module's top level."""
        env = self._modules.get(module)
        if env is None:
            env = self._modules[module] = Environment(self, module)
            _bind_module(env, module)
        return env

    def return_type(self, func, receiver=None):
        """Type returned by calling ``func``, from its return annotation."""
        if func.node.returns is None:
            return None
        env = self.module_environment(func.module)
        self_type = receiver if receiver is not None else func.owner
        return AnnotationEvaluator(env, self_type)(func.node.returns)

    def attribute_type(self, cls, name):
        """Type of the data attribute ``name`` of instances of ``cls``."""
        key = (cls, name)
        if key in self._attributes:
            cached = self._attributes[key]
            return None if cached is _PENDING else cached

        self._attributes[key] = _PENDING
        result = self._attribute_type(cls, name)
        self._attributes[key] = result
        return result

    def _attribute_type(self, cls, name):
        entry, declaring = cls.attribute(name)
        if entry is None:
            return None
        kind, expr = entry
        env = self.module_environment(declaring.module)
        if kind == objects.VALUE:
            return ExpressionTyper(env)(expr)
        return AnnotationEvaluator(env, cls)(expr)


class Environment(object):
    """
    Names visible at some point of a module.

    A module environment holds the module's top-level members, imports and
    variables. A function environment adds the function's parameters and
    local bindings and chains to the environment of the enclosing function,
    or to the module environment. Class bodies are not part of the chain,
    as in Python itself.

    Bindings are stored unevaluated and typed on first lookup.
    """

    def __init__(self, resolution, module, function=None, parent=None):
        self.resolution = resolution
        self.info = resolution.info
        self.module = module
        self.function = function
        self.parent = parent
        self._bindings = {}
        self._previous = {}
        self._cache = {}
        self._falling_back = set()

    @property
    def current_class(self):
        """Class whose method this environment belongs to, if any."""
        env = self
        while env is not None:
            if env.function is not None and env.function.owner is not None:
                return env.function.owner
            env = env.parent
        return None

    def bind(self, name, kind, payload):
        """Record a binding; ``kind`` is "type", "value", "annotation", "object" or "import"."""
        if name in self._bindings:
            self._previous[name] = self._bindings[name]
        self._bindings[name] = (kind, payload)
        self._cache.pop(name, None)

    def bind_type(self, name, value):
        self.bind(name, "type", value)

    def __contains__(self, name):
        return name in self._bindings

    def lookup(self, name):
        """Type of ``name`` as seen from here, or None."""
        env = self
        while env is not None:
            if name in env._bindings:
                return env._evaluate(name)
            env = env.parent
        return None

    def _evaluate(self, name):
        cached = self._cache.get(name)
        if cached is _PENDING:
            # Self-referential binding such as ``x = x.next()``: the right
            # hand side sees the binding it replaces.
            previous = self._previous.get(name)
            if previous is None or name in self._falling_back:
                return None
            self._falling_back.add(name)
            try:
                return self._type_of(*previous)
            finally:
                self._falling_back.discard(name)
        if name in self._cache:
            return cached

        self._cache[name] = _PENDING
        result = self._type_of(*self._bindings[name])
        self._cache[name] = result
        return result

    def _type_of(self, kind, payload):
        if kind == "type":
            return payload
        if kind == "object":
            return reference(payload)
        if kind == "import":
            return reference(self.info.resolve_import(payload))
        if kind == "annotation":
            return AnnotationEvaluator(self)(payload)
        return ExpressionTyper(self)(payload)


def _bind_module(env, module):
    for name, (annotation, value) in module.variables.items():
        if annotation is not None:
            env.bind(name, "annotation", annotation)
        elif value is not None:
            env.bind(name, "value", value)
    for name, binding in module.imports.items():
        env.bind(name, "import", binding)
    for name, obj in module.members.items():
        env.bind(name, "object", obj)


def function_environment(func, parent):
    """
    Environment of a function body.

    Parameters come first, then every local binding found in the body
    (nested function and class bodies excluded) in source order.
    """
    env = Environment(parent.resolution, func.module, func, parent)
    node = func.node
    args = node.args
    receiver = func.receiver_param

    for arg in args.posonlyargs + args.args + args.kwonlyargs:
        if arg.arg == receiver:
            if func.kind == objects.CLASS_METHOD:
                env.bind_type(arg.arg, ClassRef(func.owner))
            else:
                env.bind_type(arg.arg, Instance(func.owner))
        elif arg.annotation is not None:
            env.bind(arg.arg, "annotation", arg.annotation)
        else:
            env.bind_type(arg.arg, None)
    for arg in (args.vararg, args.kwarg):
        if arg is not None:
            env.bind_type(arg.arg, None)

    _LocalBindings(env).collect(node.body)
    return env


def lambda_environment(node, parent):
    """Environment of a lambda body: its parameters shadow outer names."""
    env = Environment(parent.resolution, parent.module, parent.function, parent)
    args = node.args
    for arg in args.posonlyargs + args.args + args.kwonlyargs:
        env.bind_type(arg.arg, None)
    for arg in (args.vararg, args.kwarg):
        if arg is not None:
            env.bind_type(arg.arg, None)
    return env


class _LocalBindings(ast.NodeVisitor):
    """Collects the names a function body binds, without entering nested scopes."""

    def __init__(self, env):
        self.env = env

    def collect(self, body):
        for stmt in body:
            self.visit(stmt)

    def visit_FunctionDef(self, node):
        obj = self.env.info.defs.get(node)
        if obj is not None:
            self.env.bind(node.name, "object", obj)

    visit_AsyncFunctionDef = visit_FunctionDef
    visit_ClassDef = visit_FunctionDef

    def visit_Lambda(self, node):
        pass

    def visit_Assign(self, node):
        for target in node.targets:
            if isinstance(target, ast.Name):
                self.env.bind(target.id, "value", node.value)
            else:
                self._unknown(target)
        self.visit(node.value)

    def visit_AnnAssign(self, node):
        if isinstance(node.target, ast.Name):
            self.env.bind(node.target.id, "annotation", node.annotation)
        if node.value is not None:
            self.visit(node.value)

    def visit_NamedExpr(self, node):
        self.env.bind(node.target.id, "value", node.value)
        self.visit(node.value)

    def visit_For(self, node):
        self._unknown(node.target)
        self.generic_visit(node)

    visit_AsyncFor = visit_For

    def visit_withitem(self, node):
        if node.optional_vars is not None:
            self._unknown(node.optional_vars)
        self.visit(node.context_expr)

    def visit_ExceptHandler(self, node):
        if node.name:
            self.env.bind_type(node.name, None)
        self.generic_visit(node)

    def visit_Import(self, node):
        for alias in node.names:
            if alias.asname:
                self.env.bind(alias.asname, "import", objects.ImportBinding(alias.name))
            else:
                top = alias.name.split(".")[0]
                self.env.bind(top, "import", objects.ImportBinding(top))

    def visit_ImportFrom(self, node):
        module = self.env.module.absolute_import(node.module, node.level)
        for alias in node.names:
            if alias.name != "*":
                self.env.bind(
                    alias.asname or alias.name, "import", objects.ImportBinding(module, alias.name)
                )

    def _unknown(self, target):
        # Only names are bound; ``self.x = ...`` and ``d[k] = ...`` bind nothing.
        if isinstance(target, ast.Name):
            self.env.bind_type(target.id, None)
        elif isinstance(target, (ast.Tuple, ast.List)):
            for elt in target.elts:
                self._unknown(elt)
        elif isinstance(target, ast.Starred):
            self._unknown(target.value)


class AnnotationEvaluator(TypeDispatcher):
    """
    Type denoted by an annotation expression.

    ``T`` and ``mod.T`` give ``Instance(T)``; ``Optional[T]``, ``T | None``,
    ``ClassVar[T]``, ``Final[T]`` and ``Annotated[T, ...]`` unwrap to ``T``;
    ``type[T]`` gives ``ClassRef(T)``; string forward references are parsed.
    Everything else is unknown.
    """

    def __init__(self, env, self_type=None):
        self.env = env
        self.self_type = self_type

    @dispatch(ast.Name, ast.Attribute)
    def visitReference(self, node):
        if self.self_type is not None and _simple_name(node) in _SELF_NAMES:
            return Instance(self.self_type)
        value = ExpressionTyper(self.env)(node)
        if isinstance(value, ClassRef):
            return Instance(value.cls)
        return None

    @dispatch(ast.Constant)
    def visitConstant(self, node):
        if isinstance(node.value, str):
            try:
                return self(ast.parse(node.value, mode="eval").body)
            except SyntaxError:
                return None
        return None

    @dispatch(ast.Subscript)
    def visitSubscript(self, node):
        head = _simple_name(node.value)
        args = node.slice.elts if isinstance(node.slice, ast.Tuple) else [node.slice]
        if not args:
            return None
        if head in _UNWRAP_SUBSCRIPTS:
            return self(args[0])
        if head == "Union":
            return self._single(args)
        if head in _TYPE_SUBSCRIPTS:
            inner = self(args[0])
            return ClassRef(inner.cls) if isinstance(inner, Instance) else None
        return None

    @dispatch(ast.BinOp)
    def visitBinOp(self, node):
        if isinstance(node.op, ast.BitOr):
            return self._single([node.left, node.right])
        return None

    @defaultdispatch
    def visitOther(self, node):
        return None

    def _single(self, args):
        # Only unions of a single type with None narrow to that type.
        members = [a for a in args if not _is_none(a)]
        if len(members) == 1:
            return self(members[0])
        return None


def _simple_name(node):
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None


def _is_none(node):
    return isinstance(node, ast.Constant) and node.value is None


class ExpressionTyper(TypeDispatcher):
    """
    Static type of an expression, or None when it cannot be determined.

    Handles a closed set of expression kinds; anything else is
    unresolvable, which callers treat as "drop this call", never as an error.
    """

    def __init__(self, env):
        self.env = env
        self.info = env.info

    @dispatch(ast.Name)
    def visitName(self, node):
        return self.env.lookup(node.id)

    @dispatch(ast.Attribute)
    def visitAttribute(self, node):
        base = self(node.value)
        return self.member(base, node.attr)

    def member(self, base, name):
        """Type of attribute ``name`` on a value of type ``base``."""
        if isinstance(base, ModuleRef):
            obj = self.info.module_member(base.module, name)
            if obj is not None:
                return reference(obj)
            if name in base.module.variables:
                return self.env.resolution.module_environment(base.module).lookup(name)
            return None
        if isinstance(base, Instance):
            method = base.cls.lookup(name)
            if method is not None:
                if method.kind == objects.PROPERTY:
                    return self.env.resolution.return_type(method, base.cls)
                return FunctionRef(method, base.cls)
            return self.env.resolution.attribute_type(base.cls, name)
        if isinstance(base, ClassRef):
            method = base.cls.lookup(name)
            if method is not None:
                return FunctionRef(method, base.cls)
            nested = base.cls.module.objects.get("%s.%s" % (base.cls.qualname, name))
            if isinstance(nested, ClassObject):
                return ClassRef(nested)
            return None
        if isinstance(base, SuperRef):
            method = base.cls.lookup(name, skip_self=True)
            if method is not None:
                return FunctionRef(method, base.cls)
        return None

    @dispatch(ast.Call)
    def visitCall(self, node):
        if self.is_super_call(node):
            cls = self.env.current_class
            return SuperRef(cls) if cls is not None else None
        callee = self(node.func)
        if isinstance(callee, ClassRef):
            return Instance(callee.cls)
        if isinstance(callee, FunctionRef):
            return self.env.resolution.return_type(callee.func, callee.receiver)
        return None

    def is_super_call(self, node):
        return (
            isinstance(node, ast.Call)
            and isinstance(node.func, ast.Name)
            and node.func.id == "super"
            and self.env.lookup("super") is None
        )

    @dispatch(ast.Await)
    def visitAwait(self, node):
        return self(node.value)

    @dispatch(ast.NamedExpr)
    def visitNamedExpr(self, node):
        return self(node.value)

    @dispatch(ast.Subscript)
    def visitSubscript(self, node):
        # Foo[int]() instantiates Foo; element types are not tracked.
        base = self(node.value)
        return base if isinstance(base, ClassRef) else None

    @dispatch(ast.Starred)
    def visitStarred(self, node):
        return None

    @defaultdispatch
    def visitOther(self, node):
        return None
