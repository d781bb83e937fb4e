"""
Python frontend: turns source files into syntax trees plus symbol-resolution
tables (``TypeInfo``) that the call-graph analysis queries.
"""

from .info import Selection, SharedTypeInfo, TypeInfo
from .loader import CompilationUnit, Program, load_program, parse_file
from .objects import ClassObject, FunctionObject, ModuleObject, Signature
from .project import get_modules

__all__ = [
    "ClassObject",
    "CompilationUnit",
    "FunctionObject",
    "ModuleObject",
    "Program",
    "Selection",
    "SharedTypeInfo",
    "Signature",
    "TypeInfo",
    "get_modules",
    "load_program",
    "parse_file",
]
