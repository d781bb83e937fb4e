"""Analysis modules for Backflow.

Currently a single analysis: the backward call graph (``callgraph``).
"""
