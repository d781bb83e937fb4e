"""
Loading a program: discovery, parsing, declaration collection, linking and
use resolution.

Both per-unit phases run on a ``ThreadPoolExecutor``. Each worker produces a
partial ``TypeInfo`` that is merged into one ``SharedTypeInfo`` as soon as
the worker is done (the ``after_type_check`` hook runs right after each
merge). Shutting the executor down is the barrier between phases: linking
and use resolution only start once every declaration has been merged, and
``load_program`` only returns once every unit has been resolved.

Problems are collected from all workers and raised once, as a single
``FrontendLoadError``.
"""

import ast
import contextlib
import logging
import tokenize
from concurrent.futures import ThreadPoolExecutor

from backflow.application.errors import FrontendLoadError
from backflow.util.io import formatting

from .checker import UseResolver
from .declarations import DeclarationCollector, link_program
from .info import SharedTypeInfo
from .project import INIT_FILE, get_modules

LOG = logging.getLogger(__name__)


class CompilationUnit(object):
    """One parsed source file."""

    __slots__ = "name", "path", "tree", "module"

    def __init__(self, name, path, tree, module):
        self.name = name
        self.path = path
        self.tree = tree
        self.module = module

    @property
    def location(self):
        return str(self.path)

    def __repr__(self):
        return "<unit %s (%s)>" % (self.name, self.path)


class Program(object):
    """
    A loaded program.

    Attributes:
        units: CompilationUnits sorted by module name.
        info: The merged TypeInfo of the whole program.
    """

    def __init__(self, units, info):
        self.units = sorted(units, key=lambda unit: unit.name)
        self.info = info

    def unit(self, name):
        for unit in self.units:
            if unit.name == name:
                return unit
        raise KeyError(name)


def parse_file(path):
    """Parse a source file, honouring its encoding declaration."""
    with tokenize.open(path) as f:
        source = f.read()
    return ast.parse(source, filename=str(path))


def _declare(name, path, shared, after_type_check):
    tree = parse_file(path)
    collector = DeclarationCollector(name, path, tree, is_package=str(path).endswith(INIT_FILE))
    module, partial = collector.collect()
    shared.merge(partial)
    if after_type_check is not None:
        after_type_check(partial)
    return CompilationUnit(name, path, tree, module)


def _resolve(unit, shared, after_type_check):
    partial = UseResolver(shared, unit.module, unit.tree).resolve()
    shared.merge(partial)
    if after_type_check is not None:
        after_type_check(partial)
    return unit


def _describe(exc):
    if isinstance(exc, SyntaxError):
        return "syntax error at line %s: %s" % (exc.lineno, exc.msg)
    if isinstance(exc, UnicodeDecodeError):
        return "cannot decode source: %s" % exc
    if isinstance(exc, OSError):
        return exc.strerror or str(exc)
    return str(exc)


def load_program(path, workers=None, after_type_check=None, console=None):
    """
    Load and resolve every module under ``path``.

    Args:
        path: Directory or ``.py`` file.
        workers: Thread count; None lets the executor pick.
        after_type_check: Optional callable invoked with each partial
            TypeInfo right after it has been merged.
        console: Optional Console; phases are wrapped in timed scopes.

    Returns:
        Program

    Raises:
        FrontendLoadError: If the path holds no module or any unit fails to
            parse. No partial program is returned.
    """
    modules = get_modules(path)
    shared = SharedTypeInfo()

    with _scope(console, "declare"):
        units, problems = [], []
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                (file_path, executor.submit(_declare, name, file_path, shared, after_type_check))
                for name, file_path in modules
            ]
        for file_path, future in futures:
            exc = future.exception()
            if exc is None:
                units.append(future.result())
            elif isinstance(exc, (SyntaxError, UnicodeDecodeError, OSError)):
                LOG.debug("failed to load %s: %s", file_path, exc)
                problems.append((str(file_path), _describe(exc)))
            else:
                raise exc
        if problems:
            raise FrontendLoadError(problems)

    with _scope(console, "link"):
        link_program(shared)

    with _scope(console, "resolve"):
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(_resolve, unit, shared, after_type_check) for unit in units]
        for future in futures:
            future.result()

    LOG.info("loaded %s from %s", formatting.plural(len(units), "module"), path)
    return Program(units, shared)


def _scope(console, name):
    if console is None:
        return contextlib.nullcontext()
    return console.scope(name)
