"""Unit tests for module discovery."""

import os

import pytest

from backflow.application.errors import FrontendLoadError
from backflow.frontend.project import get_modules, module_name

from ..conftest import write_files


def _names(modules):
    return [name for name, path in modules]


def test_module_names():
    assert module_name(os.path.join("pkg", "sub", "mod.py")) == "pkg.sub.mod"
    assert module_name(os.path.join("pkg", "__init__.py")) == "pkg"
    assert module_name("mod.py", "root") == "root.mod"
    assert module_name("__init__.py") == ""


def test_directory_discovery_skips_hidden_and_cache(tmp_path):
    write_files(
        tmp_path,
        {
            "b.py": "",
            "pkg/__init__.py": "",
            "pkg/a.py": "",
            "pkg/notes.txt": "",
            ".hidden/x.py": "",
            "pkg/__pycache__/y.py": "",
        },
    )
    assert _names(get_modules(tmp_path)) == ["b", "pkg", "pkg.a"]


def test_package_root_is_prepended(tmp_path):
    write_files(tmp_path, {"pkg/__init__.py": "", "pkg/a.py": ""})
    modules = get_modules(tmp_path / "pkg")
    assert _names(modules) == ["pkg", "pkg.a"]
    assert modules[1][1].endswith("a.py")


def test_single_file(tmp_path):
    write_files(tmp_path, {"tool.py": ""})
    assert get_modules(tmp_path / "tool.py") == [("tool", str(tmp_path / "tool.py"))]


@pytest.mark.parametrize(
    "files, target, message",
    [
        ({}, "missing", "no such file or directory"),
        ({"notes.txt": ""}, "notes.txt", "not a Python source file"),
        ({"docs/readme.txt": ""}, "docs", "no Python source files found"),
    ],
)
def test_invalid_inputs(tmp_path, files, target, message):
    write_files(tmp_path, files)
    with pytest.raises(FrontendLoadError) as info:
        get_modules(tmp_path / target)
    assert info.value.problems == [(str(tmp_path / target), message)]


def test_relative_paths_are_resolved(tmp_path, monkeypatch):
    write_files(tmp_path, {"app/run.py": "", "tool.py": ""})
    monkeypatch.chdir(tmp_path)
    cwd = os.getcwd()
    assert get_modules("app") == [("run", os.path.join(cwd, "app", "run.py"))]
    assert get_modules("tool.py") == [("tool", os.path.join(cwd, "tool.py"))]
