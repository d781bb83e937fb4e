"""
Backward call graph.

Maps each callee identity to the ordered list of its callers. Edges are only
ever added; each caller appears at most once per callee.
"""

from __future__ import annotations

from typing import Dict, Hashable, Iterable, Iterator, List, Tuple


class CallGraphError(Exception):
    """Base error for call graph handling issues."""


class BackwardCallGraph:
    """
    Callee -> callers mapping with set semantics per callee.

    Keys are usually ``FunctionIdentity`` instances but any hashable works.
    Insertion order of callees and of each callee's callers is preserved.
    """

    def __init__(self) -> None:
        self._graph: Dict[Hashable, List[Hashable]] = {}

    # ------------------------------------------------------------------ edits
    def add_edge(self, callee: Hashable, caller: Hashable) -> bool:
        """
        Record that ``caller`` calls ``callee``.

        Returns True if the edge is new. Fan-in is small, a linear scan of the
        existing callers is enough for deduplication.
        """
        if callee is None or caller is None:
            raise CallGraphError("edge endpoints must not be None")
        callers = self._graph.setdefault(callee, [])
        if caller in callers:
            return False
        callers.append(caller)
        return True

    def merge(self, other: "BackwardCallGraph") -> None:
        """Merge another graph into this one."""
        for callee, callers in other._graph.items():
            for caller in callers:
                self.add_edge(callee, caller)

    # ---------------------------------------------------------------- queries
    def callers(self, callee: Hashable) -> List[Hashable]:
        """Callers of ``callee``; empty if it has none."""
        return list(self._graph.get(callee, ()))

    def items(self) -> Iterable[Tuple[Hashable, List[Hashable]]]:
        return ((callee, list(callers)) for callee, callers in self._graph.items())

    def edges(self) -> Iterator[Tuple[Hashable, Hashable]]:
        """Iterate over edges as (callee, caller) tuples."""
        for callee, callers in self._graph.items():
            for caller in callers:
                yield callee, caller

    def get(self) -> Dict[str, List[str]]:
        """Plain dictionary view with identities rendered as strings."""
        return {str(callee): [str(c) for c in callers] for callee, callers in self._graph.items()}

    def __len__(self) -> int:
        return len(self._graph)

    def __contains__(self, callee: object) -> bool:
        return callee in self._graph

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._graph)
