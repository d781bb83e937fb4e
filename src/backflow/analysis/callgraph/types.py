"""
Call graph analysis result types.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Tuple

from ...machinery.callgraph import BackwardCallGraph
from .identity import FunctionIdentity


@dataclass
class CallGraphResult:
    """Everything one analysis run produces, handed whole to the reporting layer."""

    root_functions: List[FunctionIdentity] = field(default_factory=list)
    declarations: FrozenSet[FunctionIdentity] = frozenset()
    call_graph: BackwardCallGraph = field(default_factory=BackwardCallGraph)
    calls: List[Tuple[FunctionIdentity, FunctionIdentity]] = field(default_factory=list)

    def sorted_declarations(self) -> List[FunctionIdentity]:
        return sorted(self.declarations)

    def distinct_roots(self) -> List[FunctionIdentity]:
        """Root identities without repeats, in first-seen order."""
        seen = []
        for root in self.root_functions:
            if root not in seen:
                seen.append(root)
        return seen

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data rendering; identities become strings."""
        return {
            "root_functions": [str(r) for r in self.root_functions],
            "declarations": [str(d) for d in self.sorted_declarations()],
            "call_graph": self.call_graph.get(),
            "calls": [{"callee": str(callee), "caller": str(caller)} for callee, caller in self.calls],
        }
