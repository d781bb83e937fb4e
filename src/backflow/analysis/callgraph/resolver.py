"""
Identity resolution for declarations and call sites.

A method has up to two identities: the concrete one, qualified by the class
declaring it, and an interface one, qualified by a protocol the declaring
class satisfies. When the class satisfies several protocols the tie-break is
explicit: candidates are sorted by qualified name and the last (or first)
one is used.

Call targets resolve through the same rules, applied to the method the
frontend selected, so a call probes exactly the identities its declaration
registered.
"""

import logging

from backflow.application.config import TIE_BREAK_FIRST, TIE_BREAK_LAST, TIE_BREAKS
from backflow.frontend.objects import ClassObject, FunctionObject

from .identity import FunctionIdentity

LOG = logging.getLogger(__name__)

CONSTRUCTOR = "__init__"


class IdentityResolver(object):
    def __init__(self, registry, tie_break=TIE_BREAK_LAST):
        if tie_break not in TIE_BREAKS:
            raise ValueError("unknown interface tie-break %r" % (tie_break,))
        self.registry = registry
        self.tie_break = tie_break
        self._identities = {}

    # ----------------------------------------------------------- identities
    def concrete_identity(self, func):
        """Identity qualified by the declaring class (empty for free functions)."""
        if func.owner is None:
            return FunctionIdentity(func.module.name, "", func.qualname, str(func.signature))
        return FunctionIdentity(
            func.module.name, func.owner.qualname, func.name, str(func.signature)
        )

    def interface_for(self, cls):
        """The protocol chosen to qualify methods of ``cls``, or None."""
        candidates = self.registry.matching(cls)
        if not candidates:
            return None
        if len(candidates) > 1:
            LOG.debug(
                "%s satisfies %d interfaces, tie-break %s",
                cls.qualified_name, len(candidates), self.tie_break,
            )
        if self.tie_break == TIE_BREAK_FIRST:
            return candidates[0]
        return candidates[-1]

    def interface_identity(self, func):
        """Identity qualified by an interface, or None if there is none."""
        owner = func.owner
        if owner is None:
            return None
        if owner.is_protocol:
            # Protocol members are interface identities by construction.
            return FunctionIdentity(owner.module.name, owner.qualname, func.name, str(func.signature))
        iface = self.interface_for(owner)
        if iface is None:
            return None
        # Parameter names may differ from the protocol's; the protocol's text wins.
        signature = iface.signature_of(func.name, str(func.signature))
        return FunctionIdentity(iface.module, iface.qualname, func.name, signature)

    def identities(self, func):
        """``(interface_identity_or_None, concrete_identity)``, cached per function."""
        result = self._identities.get(func)
        if result is None:
            result = self._identities[func] = (
                self.interface_identity(func),
                self.concrete_identity(func),
            )
        return result

    def declaration_identities(self, func):
        """Every identity a declaration registers: concrete, then interface."""
        iface, concrete = self.identities(func)
        if iface is None or iface == concrete:
            return [concrete]
        return [concrete, iface]

    def enclosing_identity(self, func):
        """Identity recorded for callers: interface-qualified when available."""
        iface, concrete = self.identities(func)
        return iface if iface is not None else concrete

    # ----------------------------------------------------------------- calls
    def callee_candidates(self, target):
        """
        Identities a call target may match, most preferred first.

        ``target`` is the FunctionObject or ClassObject the frontend
        resolved; a class stands for its constructor.
        """
        if isinstance(target, ClassObject):
            target = target.lookup(CONSTRUCTOR)
        if not isinstance(target, FunctionObject):
            return []
        iface, concrete = self.identities(target)
        if iface is None or iface == concrete:
            return [concrete]
        return [iface, concrete]

    def call_target(self, node, info):
        """The object a call expression resolves to, or None."""
        selection = info.selections.get(node.func)
        if selection is not None:
            return selection.obj
        return info.uses.get(node.func)

    def callee_identity(self, node, info):
        """Best identity of a call's target, ignoring the Declaration Set."""
        candidates = self.callee_candidates(self.call_target(node, info))
        return candidates[0] if candidates else None

    def resolve_call(self, node, info, declarations):
        """Identity of a call's target that is in ``declarations``, or None."""
        for identity in self.callee_candidates(self.call_target(node, info)):
            if identity in declarations:
                return identity
        return None
