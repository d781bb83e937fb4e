"""
Call graph output format generators.

This module renders a ``CallGraphResult`` as text, DOT (Graphviz) or JSON.
Identities are always emitted in their single-string form.
"""

import json


def format_roots(result) -> list:
    lines = ["Root functions (%d):" % len(result.root_functions)]
    for root in result.root_functions:
        lines.append("  - %s" % (str(root) or "<module level>"))
    return lines


def format_declarations(result) -> list:
    declarations = result.sorted_declarations()
    lines = ["Declarations (%d):" % len(declarations)]
    for decl in declarations:
        lines.append("  - %s" % decl)
    return lines


def format_graph(result) -> list:
    graph = result.call_graph
    lines = ["Backward call graph (child parent):"]
    for callee, callers in graph.items():
        rendered = ", ".join(str(c) or "<module level>" for c in callers)
        lines.append("  %s [%s]" % (callee, rendered))
    lines.append("")
    lines.append("Call graph entries: %d" % len(graph))
    return lines


def format_calls(result) -> list:
    lines = ["Calls (%d):" % len(result.calls)]
    for callee, caller in result.calls:
        lines.append("  %s <- %s" % (callee, str(caller) or "<module level>"))
    return lines


def generate_text_output(result, args=None) -> str:
    """Generate text output for the call graph."""
    output = []
    output.append("Backward Call Graph Analysis")
    output.append("=" * 50)
    output.append("")
    output.extend(format_roots(result))
    output.append("")
    output.extend(format_declarations(result))
    output.append("")
    output.extend(format_graph(result))
    return "\n".join(output)


def _dot_escape(name):
    return name.replace("\\", "\\\\").replace('"', '\\"')


def generate_dot_output(result, args=None) -> str:
    """Generate DOT format output; edges point from caller to callee."""
    lines = []
    lines.append("digraph CallGraph {")
    lines.append("    rankdir=TB;")
    lines.append("    node [shape=box, style=filled, fillcolor=lightblue];")
    lines.append("")

    roots = {str(r) for r in result.root_functions if not r.is_zero}
    nodes = []
    for callee, callers in result.call_graph.items():
        for name in [str(callee)] + [str(c) for c in callers]:
            if name not in nodes:
                nodes.append(name)
    for name in sorted(roots):
        if name not in nodes:
            nodes.append(name)

    for name in nodes:
        safe = _dot_escape(name or "<module>")
        if name in roots:
            lines.append(f'    "{safe}" [label="{safe}", fillcolor=gold];')
        else:
            lines.append(f'    "{safe}" [label="{safe}"];')

    lines.append("")

    for callee, caller in result.call_graph.edges():
        caller_safe = _dot_escape(str(caller) or "<module>")
        callee_safe = _dot_escape(str(callee))
        lines.append(f'    "{caller_safe}" -> "{callee_safe}";')

    lines.append("}")
    return "\n".join(lines)


def generate_json_output(result, args=None) -> str:
    """Generate JSON output for the call graph."""
    return json.dumps(result.to_dict(), indent=2)


GENERATORS = {
    "text": generate_text_output,
    "json": generate_json_output,
    "dot": generate_dot_output,
}
