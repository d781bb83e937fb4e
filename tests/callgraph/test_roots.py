import ast

from backflow.analysis.callgraph.roots import is_marker_call


def test_marker_call_makes_root(analyzer):
    run = analyzer.run(
        """
        def A():
            Marker()
        """,
        marker_label="Marker",
    )
    assert run.roots() == ["main.A.()"]
    assert run.graph() == {}


def test_every_marker_call_is_recorded(analyzer):
    run = analyzer.run(
        """
        import autotel

        def handler() -> None:
            autotel.AutotelEntryPoint()
            autotel.AutotelEntryPoint()

        def worker() -> None:
            if True:
                AutotelEntryPoint()

        AutotelEntryPoint()
        """
    )
    roots = run.roots()
    assert roots == [
        "main.handler.() -> None",
        "main.handler.() -> None",
        "main.worker.() -> None",
        "",
    ]
    assert len(run.result.distinct_roots()) == 3
    assert run.result.root_functions[-1].is_zero


def test_marker_in_method_uses_enclosing_identity(analyzer):
    run = analyzer.run(
        """
        from typing import Protocol

        class Handler(Protocol):
            def handle(self, request: str) -> None: ...

        class Echo:
            def handle(self, request: str) -> None:
                def inner():
                    tracer.AutotelEntryPoint()
                tracer.AutotelEntryPoint()
        """
    )
    assert run.roots() == [
        "main.Echo.handle.<locals>.inner.()",
        "main.Handler.handle.(request: str) -> None",
    ]


def test_default_marker_label_ignores_other_calls(analyzer):
    run = analyzer.run(
        """
        def A():
            Marker()
            EntryPoint()
        """
    )
    assert run.roots() == []


def test_is_marker_call():
    def call(source):
        return ast.parse(source, mode="eval").body

    assert is_marker_call(call("AutotelEntryPoint()"), "AutotelEntryPoint")
    assert is_marker_call(call("a.b.AutotelEntryPoint(1)"), "AutotelEntryPoint")
    assert not is_marker_call(call("AutotelEntryPoint.other()"), "AutotelEntryPoint")
    assert not is_marker_call(call("get()()"), "AutotelEntryPoint")
