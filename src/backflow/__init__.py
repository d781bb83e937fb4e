"""Backflow - backward call graphs for Python programs.
"""

__version__ = "0.1.0"

# Import main components for easy access
from .application.config import AnalysisConfig
from .application.context import AnalysisContext
from .analysis.callgraph import CallGraphExtractor, CallGraphResult, FunctionIdentity, analyze

__all__ = [
    "AnalysisConfig",
    "AnalysisContext",
    "CallGraphExtractor",
    "CallGraphResult",
    "FunctionIdentity",
    "analyze",
    "__version__",
]
