"""
Context shared by the phases of one analysis run.

The context bundles the run configuration with the console used for timed
phase output and a small statistics store the phases fill in
(units walked, declarations, edges...).
"""

import collections

from backflow.util.application.console import Console

from .config import AnalysisConfig


class AnalysisContext(object):
    """
    State carried through a run.

    Attributes:
        config: AnalysisConfig of the run.
        console: Console for scoped, timed phase output.
        stats: Nested statistics, ``stats[phase][key] = value``.
    """
    __slots__ = "config", "console", "stats"

    def __init__(self, config=None, console=None):
        self.config = config if config is not None else AnalysisConfig()
        self.console = console if console is not None else Console(verbose=self.config.verbose)
        self.stats = collections.defaultdict(dict)
