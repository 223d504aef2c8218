"""
Arguments and parsers behavioral tests.

Scope
- Validate Argument construction, normalization and read-only exposure.
- Validate display helpers (label, placeholder) and default type labels.
- Validate the bundled parsers (string, integer, double, boolean) and their bounds.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Argument, string, integer, double, boolean, typename).
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from brigade import Argument, string, integer, double, boolean, typename


class TestArgument(TestCase):
    """Behavioral tests for Argument specifications."""

    def testRequiredByDefault(self):
        argument = Argument("model", string())
        self.assertTrue(argument.required)

    def testNameIsTrimmed(self):
        argument = Argument("  model ", string())
        self.assertEqual(argument.name, "model")

    def testEmptyNameRejected(self):
        with self.assertRaises(ValueError):
            Argument("   ", string())

    def testNameWithWhitespaceRejected(self):
        with self.assertRaises(ValueError):
            Argument("loop type", string())

    def testNonStringNameRejected(self):
        with self.assertRaises(TypeError):
            Argument(3, string())

    def testNonCallableParserRejected(self):
        with self.assertRaises(TypeError):
            Argument("model", "string")

    def testTypenameDefaultsToParserLabel(self):
        self.assertEqual(Argument("scale", double(0.0)).typename, "double")

    def testTypenameDefaultsToCallableName(self):
        self.assertEqual(Argument("count", int).typename, "int")

    def testExplicitTypename(self):
        argument = Argument("player", string(), typename="SINGLE_PLAYER_SELECTOR")
        self.assertEqual(argument.typename, "SINGLE_PLAYER_SELECTOR")

    def testEmptyTypenameRejected(self):
        with self.assertRaises(ValueError):
            Argument("player", string(), typename=" ")

    def testLabelLowercasesAndSpacesUnderscores(self):
        self.assertEqual(Argument("Loop_Type", string()).label, "loop type")

    def testPlaceholderShapes(self):
        self.assertEqual(Argument("loop_type", string()).placeholder, "<loop type>")
        self.assertEqual(Argument("loop_type", string(), required=False).placeholder, "[loop type]")

    def testFieldsAreReadOnly(self):
        argument = Argument("model", string())
        with self.assertRaises(AttributeError):
            argument.name = "other"  # type: ignore[misc]

    def testRepr(self):
        self.assertEqual(
            repr(Argument("model", string())),
            "argument(name='model', parser=string(), required=True, typename='string')",
        )

    def testEquality(self):
        self.assertEqual(Argument("model", string()), Argument("model", string()))
        self.assertNotEqual(Argument("model", string()), Argument("model", string(), required=False))


class TestParsers(TestCase):
    """Behavioral tests for the bundled parser references."""

    def testStringPassesThrough(self):
        self.assertEqual(string()(" zombie "), " zombie ")

    def testIntegerParses(self):
        self.assertEqual(integer()("42"), 42)

    def testIntegerRejectsGarbage(self):
        with self.assertRaises(ValueError):
            integer()("four")

    def testIntegerBoundsAreInclusive(self):
        parser = integer(1, 3)
        self.assertEqual(parser("1"), 1)
        self.assertEqual(parser("3"), 3)
        with self.assertRaises(ValueError):
            parser("0")
        with self.assertRaises(ValueError):
            parser("4")

    def testInvertedBoundsRejected(self):
        with self.assertRaises(ValueError):
            integer(5, 1)

    def testDoubleMinimum(self):
        parser = double(0.0)
        self.assertEqual(parser("2.5"), 2.5)
        with self.assertRaises(ValueError):
            parser("-0.5")

    def testDoubleRejectsNonFinite(self):
        with self.assertRaises(ValueError):
            double()("nan")
        with self.assertRaises(ValueError):
            double()("inf")

    def testBooleanWords(self):
        parser = boolean()
        self.assertIs(parser("Yes"), True)
        self.assertIs(parser("off"), False)
        with self.assertRaises(ValueError):
            parser("maybe")

    def testNonStringTokenRejected(self):
        with self.assertRaises(TypeError):
            integer()(4)  # type: ignore[arg-type]

    def testLabels(self):
        self.assertEqual(str(integer(1, 2)), "integer")
        self.assertEqual(repr(integer(1, 2)), "integer(min=1, max=2)")
        self.assertEqual(typename(boolean()), "boolean")
        self.assertEqual(typename(float), "float")

    def testParserEquality(self):
        self.assertEqual(integer(1, 2), integer(1, 2))
        self.assertNotEqual(integer(1, 2), integer(1, 3))


if __name__ == "__main__":
    unittest.main()
