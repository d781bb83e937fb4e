"""
Canonical identities of functions and methods.

A ``FunctionIdentity`` is the node key of the backward call graph. Two
declarations or call targets denote the same node exactly when all four
fields are equal.
"""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class FunctionIdentity:
    """
    Attributes:
        scope: Module declaring the function, or declaring the interface for
            interface-qualified identities.
        qualifier: Empty for free functions, otherwise the module-relative
            name of the receiver class or of a satisfied interface.
        name: Method name, or the module-relative qualified name of a free
            function.
        signature: Canonical signature text.
    """

    scope: str = ""
    qualifier: str = ""
    name: str = ""
    signature: str = ""

    @classmethod
    def zero(cls):
        """The identity used outside any declaration."""
        return _ZERO

    @property
    def is_zero(self):
        return self == _ZERO

    @property
    def id(self):
        return str(self)

    def __str__(self):
        if self.is_zero:
            return ""
        parts = [self.scope]
        if self.qualifier:
            parts.append(self.qualifier)
        parts.append(self.name)
        return "%s.%s" % (".".join(parts), self.signature)


_ZERO = FunctionIdentity()
