import json
import os
from os.path import abspath, dirname
from unittest import TestCase, main

from backflow.analysis.callgraph import analyze

SCRIPT_DIR = dirname(abspath(__file__))


class TestBase(TestCase):
    """
    Snippet-based call graph tests.

    Each snippet is a directory holding a ``main.py`` program and a
    ``callgraph.json`` file with the expected backward call graph
    (callee -> ordered list of callers).
    """

    snippet_dir = ""

    def setUp(self):
        self.snippets_path = os.path.join(SCRIPT_DIR, "snippets")

    def validate_snippet(self, snippet_path):
        """Validate a code snippet against expected call graph output."""
        output = self.get_snippet_output_cg(snippet_path)
        expected = self.get_snippet_expected_cg(snippet_path)
        self.assertEqual(output, expected)

    def get_snippet_path(self, name):
        """Get the path to a snippet directory."""
        return os.path.join(self.snippets_path, self.snippet_dir, name)

    def get_snippet_output_cg(self, snippet_path):
        """Generate the backward call graph of a snippet."""
        main_path = os.path.join(snippet_path, "main.py")

        if not os.path.exists(main_path):
            self.fail(f"Main file not found: {main_path}")

        result = analyze(program_path=snippet_path)
        return result.call_graph.get()

    def get_snippet_expected_cg(self, snippet_path):
        """Load expected call graph from JSON file."""
        cg_path = os.path.join(snippet_path, "callgraph.json")
        if not os.path.exists(cg_path):
            self.fail(f"Expected call graph file not found: {cg_path}")

        with open(cg_path, "r") as f:
            return json.loads(f.read())


if __name__ == "__main__":
    main()
