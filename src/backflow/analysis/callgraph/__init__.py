"""
Backward call graph extraction for Python code.

The module is organized into focused components:
- Function identities in identity
- Interface (protocol) registry in interfaces
- Identity resolution for declarations and calls in resolver
- Declaration Set, root functions and graph construction in declarations,
  roots and builder
- Orchestration in extractor, output formats in formats
"""

from .extractor import CallGraphExtractor, analyze
from .formats import generate_text_output, generate_dot_output, generate_json_output
from .identity import FunctionIdentity
from .interfaces import InterfaceDescriptor, InterfaceRegistry
from .resolver import IdentityResolver
from .types import CallGraphResult
from ...machinery.callgraph import BackwardCallGraph, CallGraphError

__all__ = [
    "analyze",
    "BackwardCallGraph",
    "CallGraphError",
    "CallGraphExtractor",
    "CallGraphResult",
    "FunctionIdentity",
    "IdentityResolver",
    "InterfaceDescriptor",
    "InterfaceRegistry",
    "generate_text_output",
    "generate_dot_output",
    "generate_json_output",
]
