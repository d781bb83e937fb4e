import pytest

from backflow.analysis.callgraph.identity import FunctionIdentity
from backflow.machinery.callgraph import BackwardCallGraph, CallGraphError

A = FunctionIdentity("m", "", "a", "()")
B = FunctionIdentity("m", "", "b", "()")
C = FunctionIdentity("m", "", "c", "()")


def test_add_edge_deduplicates_callers():
    graph = BackwardCallGraph()
    assert graph.add_edge(B, A)
    assert not graph.add_edge(B, A)
    assert graph.add_edge(B, C)
    assert graph.callers(B) == [A, C]
    assert graph.callers(A) == []
    assert len(graph) == 1
    assert B in graph and A not in graph


def test_self_calls_are_kept():
    graph = BackwardCallGraph()
    graph.add_edge(A, A)
    assert graph.get() == {"m.a.()": ["m.a.()"]}


def test_zero_caller_is_rendered_empty():
    graph = BackwardCallGraph()
    graph.add_edge(A, FunctionIdentity.zero())
    assert graph.get() == {"m.a.()": [""]}


def test_edges_and_merge():
    first = BackwardCallGraph()
    first.add_edge(B, A)
    second = BackwardCallGraph()
    second.add_edge(B, A)
    second.add_edge(C, B)

    first.merge(second)
    assert list(first.edges()) == [(B, A), (C, B)]
    assert list(first) == [B, C]
    assert dict(first.items()) == {B: [A], C: [B]}


def test_none_endpoint_rejected():
    graph = BackwardCallGraph()
    with pytest.raises(CallGraphError):
        graph.add_edge(None, A)
