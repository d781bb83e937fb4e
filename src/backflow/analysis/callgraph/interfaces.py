"""
Interface registry.

Interfaces are protocol classes (``class Named(Protocol): ...``). A class
satisfies an interface when its method set, computed along its in-program
MRO, provides every interface method with the identical canonical
signature. Protocols without methods play the role of the universal type:
everything satisfies them, so they never qualify an identity.
"""

import logging

from backflow.frontend.objects import ClassObject

LOG = logging.getLogger(__name__)


class InterfaceDescriptor(object):
    """
    A named, comparable interface type, immutable after construction.

    Attributes:
        name: Qualified name (``module.Qualname``); the sort and equality key.
        module: Name of the declaring module.
        qualname: Module-relative name, used as an identity qualifier.
        methods: Sorted tuple of (method name, signature shape).
    """

    __slots__ = "name", "module", "qualname", "methods", "_required", "_signatures"

    def __init__(self, module, qualname, methods, signatures=None):
        self.module = module
        self.qualname = qualname
        self.name = "%s.%s" % (module, qualname)
        self.methods = tuple(sorted(methods.items()))
        self._required = dict(self.methods)
        self._signatures = dict(signatures or {})

    @classmethod
    def from_class(cls, obj):
        required = obj.protocol_methods()
        return cls(
            obj.module.name,
            obj.qualname,
            {name: m.signature.shape() for name, m in required.items()},
            {name: str(m.signature) for name, m in required.items()},
        )

    def signature_of(self, name, default=None):
        """Signature text the interface declares for ``name``, or ``default``."""
        return self._signatures.get(name, default)

    @property
    def is_any(self):
        return not self.methods

    def satisfied_by(self, method_set):
        """True if ``method_set`` (name -> signature shape) provides every method."""
        for name, signature in self._required.items():
            if method_set.get(name) != signature:
                return False
        return True

    def __eq__(self, other):
        return isinstance(other, InterfaceDescriptor) and self.name == other.name

    def __lt__(self, other):
        return self.name < other.name

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return "<interface %s>" % self.name


def collect_interfaces(defs):
    """Every interface-kind class in a definitions table, sorted by name."""
    interfaces = [
        InterfaceDescriptor.from_class(obj)
        for obj in defs.values()
        if isinstance(obj, ClassObject) and obj.is_protocol
    ]
    interfaces.sort()
    return interfaces


class InterfaceRegistry(object):
    """All interfaces of a program, plus a cached satisfaction check."""

    def __init__(self, interfaces=()):
        self.interfaces = sorted(interfaces)
        self._satisfies = {}
        self._method_sets = {}

    @classmethod
    def from_info(cls, info):
        registry = cls(collect_interfaces(info.defs))
        LOG.debug("interface registry: %d interfaces", len(registry))
        return registry

    def __len__(self):
        return len(self.interfaces)

    def __iter__(self):
        return iter(self.interfaces)

    def get(self, name):
        for iface in self.interfaces:
            if iface.name == name:
                return iface
        return None

    def satisfies(self, cls, iface):
        """Does class ``cls`` satisfy ``iface``? Cached per pair."""
        key = (cls, iface.name)
        result = self._satisfies.get(key)
        if result is None:
            method_set = self._method_sets.get(cls)
            if method_set is None:
                method_set = self._method_sets[cls] = cls.method_set()
            result = self._satisfies[key] = iface.satisfied_by(method_set)
        return result

    def matching(self, cls):
        """Interfaces ``cls`` satisfies, sorted by name, universal ones excluded."""
        if cls.is_protocol:
            return []
        return [
            iface for iface in self.interfaces
            if not iface.is_any and self.satisfies(cls, iface)
        ]
