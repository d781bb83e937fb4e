"""
Console output and timing for analysis phases.

Phases of a run (loading, interface registry, declarations, roots, graph)
are wrapped in nested, timed scopes. Scope boundaries are written to the
console stream in verbose mode; the elapsed time of every finished scope is
kept in ``Console.timings`` either way.
"""

import sys
import time

from backflow.util.io import formatting


class Scope(object):
    """A node in the tree of timed phases."""

    def __init__(self, parent, name):
        self.parent = parent
        self.name = name
        self._start = None
        self._end = None

    def begin(self):
        self._start = time.perf_counter()

    def end(self):
        self._end = time.perf_counter()

    @property
    def elapsed(self):
        """Seconds between begin() and end()."""
        return self._end - self._start

    def path(self):
        """Tuple of scope names from the root (excluded) down to this scope."""
        if self.parent is None:
            return ()
        else:
            return self.parent.path() + (self.name,)

    def child(self, name):
        return Scope(self, name)


class ConsoleScopeManager(object):
    """``with console.scope("name"):`` support."""

    __slots__ = "console", "name"

    def __init__(self, console, name):
        self.console = console
        self.name = name

    def __enter__(self):
        self.console.begin(self.name)

    def __exit__(self, type, value, tb):
        self.console.end()


class Console(object):
    """Hierarchical console output with timing and scoping.

    Attributes:
        out: Output stream (default: sys.stderr, so reports on stdout stay clean).
        root: Root scope of the hierarchy.
        current: Currently active scope.
        verbose: If True, scope boundaries and verbose messages are written.
        timings: Mapping of "a | b" scope paths to elapsed seconds.
    """

    def __init__(self, out=None, verbose=False):
        if out is None:
            out = sys.stderr
        self.out = out

        self.root = Scope(None, "root")
        self.current = self.root

        self.verbose = verbose
        self.timings = {}

    def path(self):
        """Formatted path of the current scope, e.g. ``[ load | parse ]``."""
        return "[ %s ]" % " | ".join(self.current.path())

    def begin(self, name):
        scope = self.current.child(name)
        scope.begin()
        self.current = scope

        self.verbose_output("begin %s" % self.path(), 0)

    def end(self):
        scope = self.current
        scope.end()
        self.timings[" | ".join(scope.path())] = scope.elapsed
        self.verbose_output(
            "end   %s %s" % (self.path(), formatting.elapsedTime(scope.elapsed)),
            0,
        )
        self.current = scope.parent

    def scope(self, name):
        """Context manager for a named, timed scope."""
        return ConsoleScopeManager(self, name)

    def output(self, s, tabs=1):
        if tabs:
            self.out.write("\t" * tabs)
        self.out.write(s)
        self.out.write("\n")

    def verbose_output(self, s, tabs=1):
        if self.verbose:
            self.output(s, tabs)
