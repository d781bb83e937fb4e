"""Discovering the Python modules of a program.

A program is given as a directory or a single ``.py`` file. Each Python file
becomes one compilation unit named by its qualified module name:

- ``pkg/sub/mod.py`` -> ``pkg.sub.mod``
- ``pkg/__init__.py`` -> ``pkg``

When the root directory is itself a package (it holds an ``__init__.py``)
its name is prepended, so ``from pkg import x`` resolves inside the program.
Hidden directories and ``__pycache__`` are skipped.
"""

import os

from backflow.application.errors import FrontendLoadError


INIT_FILE = "__init__.py"
_SKIPPED_DIRECTORIES = {"__pycache__"}


def _is_python_file(path):
    return os.path.splitext(path)[1] == ".py"


def _skip_directory(name):
    return name.startswith(".") or name in _SKIPPED_DIRECTORIES


def module_name(relative_path, root_package=None):
    """Qualified module name of a file path relative to the program root.

    Args:
        relative_path: e.g. ``sub/mod.py`` or ``sub/__init__.py``
        root_package: name prepended when the root is a package

    Returns:
        str: e.g. ``pkg.sub.mod``; the empty string for a root ``__init__.py``
            outside a package
    """
    parts = os.path.normpath(relative_path).split(os.sep)
    if parts[-1] == INIT_FILE:
        parts = parts[:-1]
    else:
        parts[-1] = os.path.splitext(parts[-1])[0]
    if root_package:
        parts.insert(0, root_package)
    return ".".join(parts)


def get_modules(path):
    """Discover all Python modules under ``path``.

    Returns:
        list: Sorted list of (qualified_module_name, absolute_file_path)
            tuples, e.g. ``[('shop.cart', '/work/shop/cart.py'), ...]``

    Raises:
        FrontendLoadError: If the path does not exist, is not a Python file
            or directory, or holds no Python file.
    """
    path = os.fspath(path)
    if not os.path.exists(path):
        raise FrontendLoadError([(path, "no such file or directory")])

    if os.path.isfile(path):
        if not _is_python_file(path):
            raise FrontendLoadError([(path, "not a Python source file")])
        return [(os.path.splitext(os.path.basename(path))[0], os.path.abspath(path))]

    root = os.path.abspath(path)
    root_package = None
    if os.path.isfile(os.path.join(root, INIT_FILE)):
        root_package = os.path.basename(root)

    modules = []
    for directory, directories, filenames in os.walk(root):
        directories[:] = sorted(d for d in directories if not _skip_directory(d))
        for filename in filenames:
            if not _is_python_file(filename):
                continue
            file_path = os.path.join(directory, filename)
            name = module_name(os.path.relpath(file_path, root), root_package)
            if name:
                modules.append((name, file_path))

    if not modules:
        raise FrontendLoadError([(path, "no Python source files found")])
    modules.sort()
    return modules
