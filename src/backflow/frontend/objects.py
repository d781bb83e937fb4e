"""
Typed objects produced by the frontend.

The frontend describes a program through a handful of object kinds:

- ``ModuleObject``: one compilation unit, its top-level members and imports.
- ``ClassObject``: a class statement, its methods, attribute annotations and
  (after linking) its in-program bases and MRO. Classes listing
  ``typing.Protocol`` as a direct base are interface-kind.
- ``FunctionObject``: a ``def``/``async def`` statement with its canonical
  ``Signature``.

Objects are created by the declaration collector in parallel workers and are
never mutated after the program has been linked.
"""

import ast
import copy
from typing import Dict, List, Optional, Tuple


# Function kinds
FUNCTION = "function"
METHOD = "method"
STATIC_METHOD = "staticmethod"
CLASS_METHOD = "classmethod"
PROPERTY = "property"

# Attribute entry kinds
ANNOTATION = "annotation"
VALUE = "value"

PROTOCOL_NAME = "Protocol"
LOCALS_MARKER = "<locals>"


class _UnquoteAnnotations(ast.NodeTransformer):
    """Replace string forward references by the expression they spell."""

    def visit_Constant(self, node):
        if isinstance(node.value, str):
            try:
                return ast.parse(node.value, mode="eval").body
            except SyntaxError:
                return node
        return node


def render_annotation(node):
    """Canonical text of an annotation expression, or None."""
    if node is None:
        return None
    node = _UnquoteAnnotations().visit(_copy(node))
    return ast.unparse(node)


def _copy(node):
    # NodeTransformer edits in place; never touch the tree we were given.
    return copy.deepcopy(node)


_MARKERS = ("/", "*")


class Param(object):
    """One rendered parameter: ``name``, ``*name`` or ``**name`` plus annotation."""

    __slots__ = "name", "annotation", "prefix"

    def __init__(self, name, annotation=None, prefix=""):
        self.name = name
        self.annotation = annotation
        self.prefix = prefix

    def __str__(self):
        text = self.prefix + self.name
        if self.annotation is not None:
            text += ": " + self.annotation
        return text


class Signature(object):
    """
    Canonical textual rendering of a function type.

    Renders as ``(a: int, b, /, c, *args: str, d: int, **kw) -> bool``.
    Default values are not part of the signature. For bound methods the
    receiver parameter (``self``/``cls``) is dropped, so a method and the
    protocol member it implements render identically.
    """

    __slots__ = "params", "returns", "_text"

    def __init__(self, params, returns=None):
        self.params = tuple(params)
        self.returns = returns
        self._text = self._render()

    @classmethod
    def from_node(cls, node, drop_first=False):
        """Build the signature of a FunctionDef/AsyncFunctionDef node."""
        args = node.args
        posonly = list(args.posonlyargs)
        regular = list(args.args)
        if drop_first:
            if posonly:
                posonly.pop(0)
            elif regular:
                regular.pop(0)

        params = []
        for arg in posonly:
            params.append(Param(arg.arg, render_annotation(arg.annotation)))
        if posonly:
            params.append(Param("/"))
        for arg in regular:
            params.append(Param(arg.arg, render_annotation(arg.annotation)))
        if args.vararg is not None:
            params.append(Param(args.vararg.arg, render_annotation(args.vararg.annotation), "*"))
        elif args.kwonlyargs:
            params.append(Param("*"))
        for arg in args.kwonlyargs:
            params.append(Param(arg.arg, render_annotation(arg.annotation)))
        if args.kwarg is not None:
            params.append(Param(args.kwarg.arg, render_annotation(args.kwarg.annotation), "**"))

        return cls(params, render_annotation(node.returns))

    def _render(self):
        text = "(%s)" % ", ".join(str(p) for p in self.params)
        if self.returns is not None:
            text += " -> " + self.returns
        return text

    def shape(self):
        """
        Rendering without the parameter names a positional caller never writes.

        Positional parameters and ``*args``/``**kwargs`` keep only their
        annotation (``_`` when there is none); keyword-only parameters keep
        their names. Protocol satisfaction compares shapes.
        """
        parts = []
        keyword_only = False
        for param in self.params:
            if param.prefix:
                keyword_only = keyword_only or param.prefix == "*"
                parts.append(param.prefix + (param.annotation or "_"))
            elif param.name in _MARKERS:
                keyword_only = keyword_only or param.name == "*"
                parts.append(param.name)
            elif keyword_only:
                parts.append(str(param))
            else:
                parts.append(param.annotation or "_")
        text = "(%s)" % ", ".join(parts)
        if self.returns is not None:
            text += " -> " + self.returns
        return text

    def __str__(self):
        return self._text

    def __repr__(self):
        return "Signature(%r)" % self._text

    def __eq__(self, other):
        return isinstance(other, Signature) and self._text == other._text

    def __hash__(self):
        return hash(self._text)


class ImportBinding(object):
    """A name bound by an import statement, with the module already made absolute."""

    __slots__ = "module", "member"

    def __init__(self, module, member=None):
        self.module = module
        self.member = member

    def __repr__(self):
        if self.member is None:
            return "ImportBinding(%s)" % self.module
        return "ImportBinding(%s:%s)" % (self.module, self.member)


class ModuleObject(object):
    """
    One compilation unit as seen by the frontend.

    Attributes:
        name: Qualified module name (``pkg.sub.mod``).
        path: Source file path.
        is_package: True for ``__init__.py`` units.
        members: Top-level functions and classes by name.
        objects: Every function and class in the module by qualname.
        imports: Module-level import bindings by bound name.
        variables: Module-level ``name -> (annotation, value)`` expressions.
    """

    def __init__(self, name, path, is_package=False):
        self.name = name
        self.path = path
        self.is_package = is_package
        self.members = {}
        self.objects = {}
        self.imports: Dict[str, ImportBinding] = {}
        self.variables = {}

    @property
    def package(self):
        """Package that relative imports in this module are resolved against."""
        if self.is_package:
            return self.name
        return self.name.rpartition(".")[0]

    def absolute_import(self, module, level):
        """Make an ``ImportFrom`` module absolute. Returns None if it escapes the root."""
        if not level:
            return module
        parts = self.package.split(".") if self.package else []
        if level - 1 > len(parts):
            return None
        if level > 1:
            parts = parts[: len(parts) - (level - 1)]
        base = ".".join(parts)
        if module:
            return base + "." + module if base else module
        return base or None

    def __repr__(self):
        return "<module %s>" % self.name


class FunctionObject(object):
    """
    A function or method declaration.

    Attributes:
        name: The ``def`` name.
        qualname: Module-relative qualified name, as ``__qualname__`` spells it.
        module: Declaring ModuleObject.
        node: The FunctionDef/AsyncFunctionDef node.
        owner: ClassObject for methods, None for free functions.
        kind: FUNCTION, METHOD, STATIC_METHOD, CLASS_METHOD or PROPERTY.
        signature: Canonical Signature.
    """

    __slots__ = "name", "qualname", "module", "node", "owner", "kind", "signature"

    def __init__(self, name, qualname, module, node, owner=None, kind=FUNCTION):
        self.name = name
        self.qualname = qualname
        self.module = module
        self.node = node
        self.owner = owner
        self.kind = kind
        self.signature = Signature.from_node(
            node, drop_first=kind in (METHOD, CLASS_METHOD, PROPERTY)
        )

    @property
    def qualified_name(self):
        return "%s.%s" % (self.module.name, self.qualname)

    @property
    def receiver_param(self):
        """Name of the bound first parameter, if the function has one."""
        if self.kind not in (METHOD, CLASS_METHOD, PROPERTY):
            return None
        args = self.node.args.posonlyargs + self.node.args.args
        return args[0].arg if args else None

    def __repr__(self):
        return "<function %s %s>" % (self.qualified_name, self.signature)


class ClassObject(object):
    """
    A class declaration.

    ``bases`` and the MRO only cover classes declared in the program; bases
    from outside the program (``object``, library classes) are dropped when
    the program is linked.
    """

    def __init__(self, name, qualname, module, node, is_protocol=False):
        self.name = name
        self.qualname = qualname
        self.module = module
        self.node = node
        self.is_protocol = is_protocol
        self.base_exprs: List[ast.expr] = list(node.bases)
        self.bases: List["ClassObject"] = []
        self.methods: Dict[str, FunctionObject] = {}
        self.attributes: Dict[str, Tuple[str, ast.expr]] = {}
        self._mro: Optional[List["ClassObject"]] = None

    @property
    def qualified_name(self):
        return "%s.%s" % (self.module.name, self.qualname)

    def mro(self):
        """In-program method resolution order, starting with the class itself."""
        if self._mro is None:
            return [self]
        return self._mro

    def lookup(self, name, skip_self=False):
        """Find the FunctionObject ``name`` resolves to along the MRO."""
        mro = self.mro()
        for cls in mro[1:] if skip_self else mro:
            method = cls.methods.get(name)
            if method is not None:
                return method
        return None

    def attribute(self, name):
        """Return ``((kind, expr), declaring_class)`` for a data attribute."""
        for cls in self.mro():
            entry = cls.attributes.get(name)
            if entry is not None:
                return entry, cls
        return None, None

    def method_set(self):
        """Callable members (name -> signature shape) provided along the MRO."""
        provided = {}
        for cls in reversed(self.mro()):
            for name, method in cls.methods.items():
                if method.kind == PROPERTY:
                    provided.pop(name, None)
                else:
                    provided[name] = method.signature.shape()
        return provided

    def protocol_methods(self):
        """Methods (name -> FunctionObject) required by this protocol, inherited ones included."""
        required = {}
        for cls in reversed(self.mro()):
            if not cls.is_protocol:
                continue
            for name, method in cls.methods.items():
                if method.kind == PROPERTY:
                    required.pop(name, None)
                else:
                    required[name] = method
        return required

    def __repr__(self):
        return "<class %s>" % self.qualified_name


def is_protocol_base(expr):
    """True for ``Protocol``, ``typing.Protocol`` and ``Protocol[T]`` base expressions."""
    if isinstance(expr, ast.Subscript):
        expr = expr.value
    if isinstance(expr, ast.Name):
        return expr.id == PROTOCOL_NAME
    if isinstance(expr, ast.Attribute):
        return expr.attr == PROTOCOL_NAME
    return False


def linearize(cls, _visiting=None):
    """
    Compute and store the C3 linearization of ``cls`` over in-program bases.

    Inconsistent hierarchies fall back to a depth-first order without
    duplicates; cyclic ones (only possible through name confusion) stop at
    the class already being visited.
    """
    if cls._mro is not None:
        return cls._mro
    if _visiting is None:
        _visiting = set()
    if cls in _visiting:
        return [cls]
    _visiting.add(cls)

    seqs = [list(linearize(base, _visiting)) for base in cls.bases]
    seqs.append(list(cls.bases))
    result = [cls]
    while True:
        seqs = [s for s in seqs if s]
        if not seqs:
            break
        for seq in seqs:
            head = seq[0]
            if not any(head in s[1:] for s in seqs):
                break
        else:
            result = _depth_first(cls)
            break
        result.append(head)
        for s in seqs:
            if s and s[0] is head:
                del s[0]

    _visiting.discard(cls)
    cls._mro = result
    return result


def _depth_first(cls):
    order = []
    stack = [cls]
    while stack:
        current = stack.pop(0)
        if current in order:
            continue
        order.append(current)
        stack.extend(current.bases)
    return order
