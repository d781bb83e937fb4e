"""Type-based dispatch for Backflow.

A TypeDispatcher selects one of its handler methods from the runtime type of
the first argument. Handlers are declared with ``@dispatch(SomeType, ...)``;
exactly one handler per class is declared with ``@defaultdispatch`` and
receives everything no other handler claims.

The frontend uses this to unwrap expressions over a closed set of ``ast``
node kinds without a chain of ``isinstance`` checks.
"""

__all__ = [
    "TypeDispatcher",
    "defaultdispatch",
    "dispatch",
    "TypeDispatchDeclarationError",
]

import inspect


class TypeDispatchDeclarationError(Exception):
    """Raised at class creation when handlers are declared inconsistently."""
    pass


def _flatten_types(types, result):
    for child in types:
        if isinstance(child, (list, tuple)):
            _flatten_types(child, result)
        elif isinstance(child, type):
            result.append(child)
        else:
            raise TypeDispatchDeclarationError(
                "Expected a type, got %r instead." % (child,)
            )


def dispatch(*types):
    """Mark a method as the handler for the given types."""
    def mark(f):
        f.__dispatch__ = []
        _flatten_types(types, f.__dispatch__)
        return f

    return mark


def defaultdispatch(f):
    """Mark a method as the fallback handler."""
    f.__dispatch__ = (None,)
    return f


def _dispatch_call(self, node, *args):
    t = type(node)
    table = self.__typeDispatchTable__

    func = table.get(t)
    if func is None:
        # First call for this type: search the MRO, then cache the answer.
        for supercls in t.mro():
            func = table.get(supercls)
            if func is not None:
                break
        else:
            func = table[None]
        table[t] = func

    return func(self, node, *args)


class typedispatcher(type):
    """Metaclass collecting ``@dispatch`` handlers into a lookup table."""

    def __new__(mcs, name, bases, d):
        lut = {}

        for key, value in d.items():
            for t in getattr(value, "__dispatch__", ()):
                if t in lut:
                    raise TypeDispatchDeclarationError(
                        "%s declares multiple handlers for %s"
                        % (name, "default" if t is None else t.__name__)
                    )
                lut[t] = value

        # Inherit handlers a subclass does not override.
        for base in bases:
            for ancestor in inspect.getmro(base):
                for t, func in getattr(ancestor, "__typeDispatchTable__", {}).items():
                    lut.setdefault(t, func)

        if None not in lut and name != "TypeDispatcher":
            raise TypeDispatchDeclarationError("%s has no default dispatch" % (name,))

        d["__typeDispatchTable__"] = lut
        return type.__new__(mcs, name, bases, d)


class TypeDispatcher(object, metaclass=typedispatcher):
    """Base class for objects that dispatch on the type of their argument.

    Example:
        >>> class Kind(TypeDispatcher):
        ...     @dispatch(int)
        ...     def visitInt(self, obj):
        ...         return "integer"
        ...     @defaultdispatch
        ...     def visitOther(self, obj):
        ...         return "other"
        >>> Kind()(3), Kind()("x")
        ('integer', 'other')

    The dispatch table is cached per concrete type, so subclasses of a
    handled type are resolved through their MRO only once.
    """

    __call__ = _dispatch_call
