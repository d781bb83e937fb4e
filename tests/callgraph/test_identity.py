import unittest

from backflow.analysis.callgraph.identity import FunctionIdentity


class TestFunctionIdentity(unittest.TestCase):
    def testFormatting(self):
        self.assertEqual(str(FunctionIdentity("pkg.mod", "", "helper", "(x: int) -> int")), "pkg.mod.helper.(x: int) -> int")
        self.assertEqual(str(FunctionIdentity("pkg.mod", "Outer.Inner", "run", "()")), "pkg.mod.Outer.Inner.run.()")
        self.assertEqual(FunctionIdentity("m", "", "f", "()").id, "m.f.()")

    def testZero(self):
        zero = FunctionIdentity.zero()
        self.assertTrue(zero.is_zero)
        self.assertEqual(str(zero), "")
        self.assertEqual(zero, FunctionIdentity())
        self.assertFalse(FunctionIdentity("m", "", "f", "()").is_zero)

    def testStructuralEquality(self):
        a = FunctionIdentity("m", "T", "run", "()")
        b = FunctionIdentity("m", "T", "run", "()")
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))
        self.assertEqual(len({a, b}), 1)
        self.assertNotEqual(a, FunctionIdentity("m", "I", "run", "()"))
        self.assertNotEqual(a, FunctionIdentity("m", "T", "run", "(x)"))

    def testOrdering(self):
        ids = [
            FunctionIdentity("b", "", "f", "()"),
            FunctionIdentity("a", "T", "g", "()"),
            FunctionIdentity("a", "", "z", "()"),
        ]
        self.assertEqual([str(i) for i in sorted(ids)], ["a.z.()", "a.T.g.()", "b.f.()"])

    def testImmutable(self):
        identity = FunctionIdentity("m", "", "f", "()")
        with self.assertRaises(AttributeError):
            identity.name = "g"
