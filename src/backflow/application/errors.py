"""
Error handling for Backflow analysis runs.

Loading a program is fail-fast: any problem the frontend finds aborts the
run before a single graph structure is built. Everything after loading is
best-effort and does not raise for unresolvable calls or ambiguous
interfaces; those are excluded or tie-broken instead.
"""


class AnalysisError(Exception):
    """Base class for errors surfaced to the invoking context."""
    pass


class FrontendLoadError(AnalysisError):
    """
    The program could not be loaded.

    Raised for missing input paths, files that cannot be read or decoded and
    syntax errors. Problems found by concurrent workers are collected and
    reported together.

    Attributes:
        problems: List of (path, message) tuples.
    """

    def __init__(self, problems):
        self.problems = list(problems)
        super().__init__(self._describe())

    def _describe(self):
        if len(self.problems) == 1:
            path, message = self.problems[0]
            return "%s: %s" % (path, message)
        lines = ["%d files failed to load" % len(self.problems)]
        for path, message in self.problems:
            lines.append("  %s: %s" % (path, message))
        return "\n".join(lines)


class InternalError(AnalysisError):
    """
    Inconsistent internal state, as opposed to a problem in the analysed code.
    """
    pass


class AnalysisAbort(AnalysisError):
    """Raised to stop an analysis run deliberately."""
    pass


def abort(msg=None):
    """
    Abort the current run with an optional message.

    Raises:
        AnalysisAbort: Always.
    """
    raise AnalysisAbort(msg)
