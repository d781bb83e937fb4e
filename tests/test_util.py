import io
import unittest

from backflow.util.application.console import Console
from backflow.util.io.formatting import elapsedTime, plural
from backflow.util.typedispatch import *


class TestTypeDisbatch(unittest.TestCase):
    def testTD(self):
        def visitNumber(self, node):
            return "number"

        def visitDefault(self, node):
            return "default"

        class FooBar(TypeDispatcher):
            num = dispatch(int)(visitNumber)
            default = defaultdispatch(visitDefault)

        self.assertEqual(FooBar.__dict__["num"], visitNumber)
        self.assertEqual(FooBar.__dict__["default"], visitDefault)

        foo = FooBar()

        self.assertEqual(foo(1), "number")
        self.assertEqual(foo(2**70), "number")
        self.assertEqual(foo(True), "number")
        self.assertEqual(foo(1.0), "default")

    def testExtraArguments(self):
        class Adder(TypeDispatcher):
            @dispatch(int, float)
            def visitNumber(self, node, extra):
                return node + extra

            @defaultdispatch
            def visitOther(self, node, extra):
                return None

        self.assertEqual(Adder()(1, 2), 3)
        self.assertIsNone(Adder()("1", 2))

    def testInheritedHandlers(self):
        class Base(TypeDispatcher):
            @dispatch(str)
            def visitStr(self, node):
                return "str"

            @defaultdispatch
            def visitOther(self, node):
                return "other"

        class Derived(Base):
            @dispatch(int)
            def visitInt(self, node):
                return "int"

        d = Derived()
        self.assertEqual(d("x"), "str")
        self.assertEqual(d(1), "int")
        self.assertEqual(d(None), "other")

    def testMissingDefault(self):
        with self.assertRaises(TypeDispatchDeclarationError):

            class NoDefault(TypeDispatcher):
                @dispatch(int)
                def visitInt(self, node):
                    return node

    def testDuplicateHandler(self):
        with self.assertRaises(TypeDispatchDeclarationError):

            class Twice(TypeDispatcher):
                @dispatch(int)
                def a(self, node):
                    pass

                @dispatch(int)
                def b(self, node):
                    pass

                @defaultdispatch
                def c(self, node):
                    pass

    def testBadDeclaration(self):
        with self.assertRaises(TypeDispatchDeclarationError):
            dispatch("int")(lambda self, node: node)


class TestConsole(unittest.TestCase):
    def testScopesAreTimed(self):
        out = io.StringIO()
        console = Console(out, verbose=False)
        with console.scope("load"):
            with console.scope("parse"):
                pass
        self.assertEqual(set(console.timings), {"load", "load | parse"})
        self.assertEqual(out.getvalue(), "")
        self.assertIs(console.current, console.root)

    def testVerboseOutput(self):
        out = io.StringIO()
        console = Console(out, verbose=True)
        with console.scope("graph"):
            console.verbose_output("working")
        lines = out.getvalue().splitlines()
        self.assertEqual(lines[0], "begin [ graph ]")
        self.assertEqual(lines[1], "\tworking")
        self.assertTrue(lines[2].startswith("end   [ graph ]"))

    def testScopeEndsOnError(self):
        console = Console(io.StringIO())
        with self.assertRaises(ValueError):
            with console.scope("fail"):
                raise ValueError("boom")
        self.assertIs(console.current, console.root)
        self.assertIn("fail", console.timings)


class TestFormatting(unittest.TestCase):
    def testElapsedTime(self):
        self.assertEqual(elapsedTime(0.05), "   50 ms")
        self.assertEqual(elapsedTime(2.5), "  2.5 s")
        self.assertEqual(elapsedTime(125.5), "2.092 m")
        self.assertEqual(elapsedTime(7200.0), "    2 h")

    def testPlural(self):
        self.assertEqual(plural(1, "module"), "1 module")
        self.assertEqual(plural(3, "module"), "3 modules")
        self.assertEqual(plural(0, "edge"), "0 edges")


if __name__ == "__main__":
    unittest.main()
