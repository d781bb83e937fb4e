import json

from backflow.analysis.callgraph.formats import (
    generate_dot_output,
    generate_json_output,
    generate_text_output,
)

SOURCE = """
def entry():
    AutotelEntryPoint()
    work()

def work():
    pass
"""


def test_text_output(analyzer):
    text = generate_text_output(analyzer.run(SOURCE).result)
    assert "Root functions (1):" in text
    assert "  - main.entry.()" in text
    assert "Declarations (2):" in text
    assert "child parent" in text
    assert "  main.work.() [main.entry.()]" in text
    assert text.endswith("Call graph entries: 1")


def test_json_output(analyzer):
    data = json.loads(generate_json_output(analyzer.run(SOURCE).result))
    assert data["root_functions"] == ["main.entry.()"]
    assert data["declarations"] == ["main.entry.()", "main.work.()"]
    assert data["call_graph"] == {"main.work.()": ["main.entry.()"]}
    assert data["calls"] == [{"callee": "main.work.()", "caller": "main.entry.()"}]


def test_dot_output(analyzer):
    dot = generate_dot_output(analyzer.run(SOURCE).result)
    assert dot.startswith("digraph CallGraph {")
    assert '"main.entry.()" -> "main.work.()";' in dot
    assert '"main.entry.()" [label="main.entry.()", fillcolor=gold];' in dot
    assert dot.rstrip().endswith("}")
