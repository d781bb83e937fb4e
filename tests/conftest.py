from __future__ import annotations

import textwrap
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import pytest

from backflow.analysis.callgraph import CallGraphResult, analyze
from backflow.frontend import Program, load_program


def normalize_code(code: str) -> str:
    # Allow indented triple-quoted snippets in tests.
    code = textwrap.dedent(code).lstrip("\n")
    if code and not code.endswith("\n"):
        code += "\n"
    return code


def write_files(root: Path, files: Mapping[str, str]) -> Path:
    for rel_name, code in files.items():
        p = root / rel_name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(normalize_code(code), encoding="utf-8")
    return root


@dataclass(frozen=True)
class AnalysisRun:
    root: Path
    result: CallGraphResult

    def declarations(self) -> set[str]:
        return {str(d) for d in self.result.declarations}

    def graph(self) -> dict[str, list[str]]:
        return self.result.call_graph.get()

    def roots(self) -> list[str]:
        return [str(r) for r in self.result.root_functions]


class Analyzer:
    """
    Small harness around the call graph extractor that:
    - writes one or many temporary files
    - runs the real frontend and analysis phases
    - returns the result plus string views of it
    """

    def __init__(self, tmp_path: Path):
        self._tmp_path = tmp_path

    def run(self, code: str, *, filename: str = "main.py", **options: Any) -> AnalysisRun:
        return self.run_files({filename: code}, **options)

    def run_files(self, files: Mapping[str, str], **options: Any) -> AnalysisRun:
        root = write_files(self._tmp_path, files)
        return AnalysisRun(root=root, result=analyze(program_path=root, **options))

    def load(self, files: Mapping[str, str]) -> Program:
        return load_program(write_files(self._tmp_path, files))


@pytest.fixture()
def analyzer(tmp_path: Path) -> Analyzer:
    return Analyzer(tmp_path)
