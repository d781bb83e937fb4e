"""
Symbol-resolution tables.

``TypeInfo`` is what the analyses query about a loaded program:

- ``defs``: FunctionDef/AsyncFunctionDef/ClassDef node -> FunctionObject/ClassObject
- ``uses``: call-target node -> FunctionObject/ClassObject it refers to
  (simple names, module-qualified names, constructor calls)
- ``selections``: ``ast.Attribute`` call target -> Selection of a method on a
  typed receiver
- ``modules``: qualified module name -> ModuleObject

Workers build partial tables for one compilation unit each.
``SharedTypeInfo`` is the store they are merged into: many producers, one
logical consumer. The lock is held per entry, never for a whole partial
table, so a slow merge never serializes the other workers.
"""

import threading

from .objects import ClassObject, FunctionObject, ModuleObject


class Selection(object):
    """
    A method selected on a receiver, as in ``recv.method(...)``.

    Attributes:
        recv: ClassObject of the statically known receiver.
        obj: FunctionObject the selection resolves to along ``recv``'s MRO.
    """

    __slots__ = "recv", "obj"

    def __init__(self, recv, obj):
        self.recv = recv
        self.obj = obj

    @property
    def name(self):
        return self.obj.name

    def __repr__(self):
        return "Selection(%s.%s -> %s)" % (self.recv.qualname, self.obj.name, self.obj.qualified_name)


class TypeInfo(object):
    """Symbol-resolution tables for a program or for one unit of it."""

    TABLES = ("defs", "uses", "selections", "modules")

    def __init__(self):
        self.defs = {}
        self.uses = {}
        self.selections = {}
        self.modules = {}

    def __len__(self):
        return sum(len(getattr(self, table)) for table in self.TABLES)

    # ------------------------------------------------------------ resolution
    def resolve_import(self, binding, _depth=0):
        """
        Object an import binding refers to, or None if it leaves the program.

        ``from pkg import name`` may name a member of ``pkg``, a name ``pkg``
        itself re-exports, or the submodule ``pkg.name``.
        """
        if binding is None or binding.module is None or _depth > 8:
            return None
        if binding.member is None:
            return self.modules.get(binding.module)
        return self.module_member(self.modules.get(binding.module), binding.member, _depth)

    def module_member(self, module, name, _depth=0):
        """Function, class or module bound to ``name`` at the top level of ``module``."""
        if module is None:
            return None
        obj = module.members.get(name)
        if obj is not None:
            return obj
        binding = module.imports.get(name)
        if binding is not None:
            return self.resolve_import(binding, _depth + 1)
        return self.modules.get("%s.%s" % (module.name, name))

    def functions(self):
        """Every FunctionObject, in no particular order."""
        return [obj for obj in self.defs.values() if isinstance(obj, FunctionObject)]

    def classes(self):
        """Every ClassObject, in no particular order."""
        return [obj for obj in self.defs.values() if isinstance(obj, ClassObject)]


class SharedTypeInfo(TypeInfo):
    """A TypeInfo that concurrent workers merge their partial tables into."""

    def __init__(self):
        super().__init__()
        self._lock = threading.Lock()

    def merge(self, partial):
        """Insert every entry of ``partial``, taking the lock per entry."""
        for table in self.TABLES:
            target = getattr(self, table)
            for key, value in getattr(partial, table).items():
                with self._lock:
                    target[key] = value

    def add_module(self, module):
        if not isinstance(module, ModuleObject):
            raise TypeError("expected a ModuleObject, got %r" % (module,))
        with self._lock:
            self.modules[module.name] = module
