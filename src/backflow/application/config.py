"""
Configuration for a Backflow analysis run.

All knobs of a run live in one ``AnalysisConfig``. The CLI builds it from
its parsed arguments; library users construct it directly.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union


DEFAULT_MARKER_LABEL = "AutotelEntryPoint"

TIE_BREAK_FIRST = "first"
TIE_BREAK_LAST = "last"
TIE_BREAKS = (TIE_BREAK_FIRST, TIE_BREAK_LAST)


@dataclass
class AnalysisConfig:
    """Inputs of a single analysis run.

    Attributes:
        program_path: Directory or ``.py`` file to load.
        path_filter: Only compilation units whose path contains this
            substring are walked. Empty means no filtering.
        marker_label: Call-target name that marks root functions.
        interface_tie_break: Which of several satisfied interfaces qualifies
            a method, after sorting them by qualified name.
        workers: Thread count for the frontend, None for the executor default.
        verbose: Show phase scopes and per-unit progress.
    """

    program_path: Union[str, Path] = "."
    path_filter: str = ""
    marker_label: str = DEFAULT_MARKER_LABEL
    interface_tie_break: str = TIE_BREAK_LAST
    workers: Optional[int] = None
    verbose: bool = False

    def __post_init__(self):
        self.program_path = Path(self.program_path)
        if self.path_filter is None:
            self.path_filter = ""
        if not self.marker_label:
            raise ValueError("marker label must not be empty")
        if self.interface_tie_break not in TIE_BREAKS:
            raise ValueError(
                "interface tie-break must be one of %s, got %r"
                % (", ".join(TIE_BREAKS), self.interface_tie_break)
            )
        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1, got %r" % (self.workers,))

    @classmethod
    def from_args(cls, args):
        """Build a config from an argparse namespace; missing options keep their defaults."""
        return cls(
            program_path=args.input,
            path_filter=getattr(args, "filter", None) or "",
            marker_label=getattr(args, "marker", None) or DEFAULT_MARKER_LABEL,
            interface_tie_break=getattr(args, "interface_tie_break", None) or TIE_BREAK_LAST,
            workers=getattr(args, "workers", None),
            verbose=bool(getattr(args, "verbose", False)),
        )

    def accepts(self, location):
        """True if a unit at ``location`` passes the path filter."""
        return not self.path_filter or self.path_filter in str(location)
