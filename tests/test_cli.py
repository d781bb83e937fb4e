import json

import pytest

from backflow.cli.main import build_parser, main

from .conftest import write_files

PROGRAM = """
from typing import Protocol


class Alpha(Protocol):
    def close(self) -> None: ...


class Beta(Protocol):
    def close(self) -> None: ...


class Resource:
    def close(self) -> None:
        cleanup()


def cleanup() -> None:
    pass


def entry() -> None:
    AutotelEntryPoint()
    Resource().close()
"""


@pytest.fixture()
def program(tmp_path):
    return write_files(tmp_path / "app", {"main.py": PROGRAM})


def test_callgraph_json(program, capsys):
    assert main(["callgraph", str(program), "--format", "json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["root_functions"] == ["main.entry.() -> None"]
    assert data["call_graph"] == {
        "main.Beta.close.() -> None": ["main.entry.() -> None"],
        "main.cleanup.() -> None": ["main.Beta.close.() -> None"],
    }


def test_callgraph_text(program, capsys):
    assert main(["callgraph", str(program)]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Backward Call Graph Analysis")
    assert "Root functions (1):" in out
    assert "  main.cleanup.() -> None [main.Beta.close.() -> None]" in out


def test_interface_tie_break_first(program, capsys):
    assert main(["decls", str(program), "--interface-tie-break", "first", "-f", "json"]) == 0
    decls = json.loads(capsys.readouterr().out)["declarations"]
    assert "main.Alpha.close.() -> None" in decls
    assert "main.Beta.close.() -> None" not in decls


def test_roots_subcommand(program, capsys):
    assert main(["roots", str(program)]) == 0
    out = capsys.readouterr().out
    assert out.splitlines() == ["Root functions (1):", "  - main.entry.() -> None"]


def test_custom_marker_finds_no_roots(program, capsys):
    assert main(["roots", str(program), "--marker", "SomethingElse", "-f", "json"]) == 0
    assert json.loads(capsys.readouterr().out) == {"root_functions": []}


def test_calls_subcommand(program, capsys):
    assert main(["calls", str(program)]) == 0
    out = capsys.readouterr().out
    assert "  main.cleanup.() -> None <- main.Beta.close.() -> None" in out


def test_output_file(program, tmp_path, capsys):
    target = tmp_path / "graph.dot"
    assert main(["callgraph", str(program), "-f", "dot", "-o", str(target)]) == 0
    assert capsys.readouterr().out == ""
    text = target.read_text()
    assert text.startswith("digraph CallGraph {")
    assert text.endswith("}\n")


def test_filter_excludes_everything(program, capsys):
    assert main(["decls", str(program), "--filter", "does-not-match", "-f", "json"]) == 0
    assert json.loads(capsys.readouterr().out) == {"declarations": []}


def test_missing_path(tmp_path, capsys):
    assert main(["callgraph", str(tmp_path / "missing")]) == 1
    assert "Error: Path" in capsys.readouterr().err


def test_syntax_error(tmp_path, capsys):
    write_files(tmp_path, {"broken.py": "def f(:\n    pass\n"})
    assert main(["callgraph", str(tmp_path)]) == 1
    err = capsys.readouterr().err
    assert err.startswith("Error: ")
    assert "syntax error at line 1" in err


def test_bad_workers(program, capsys):
    assert main(["callgraph", str(program), "-j", "0"]) == 1
    assert "workers must be at least 1" in capsys.readouterr().err


def test_subcommand_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_dot_not_offered_for_artifacts():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["roots", ".", "-f", "dot"])
