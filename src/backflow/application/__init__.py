"""Run-level plumbing: configuration, context and error types."""

from .config import AnalysisConfig, DEFAULT_MARKER_LABEL
from .context import AnalysisContext
from .errors import AnalysisError, FrontendLoadError, InternalError, AnalysisAbort

__all__ = [
    "AnalysisConfig",
    "AnalysisContext",
    "DEFAULT_MARKER_LABEL",
    "AnalysisError",
    "FrontendLoadError",
    "InternalError",
    "AnalysisAbort",
]
