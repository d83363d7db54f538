"""
Parameters module behavioral tests (construction, conversion, reset, introspection).

Scope
- Validate Named, Flag and Positional construction and metadata sanitization.
- Validate convert/reset semantics for scalar and list parameters.
- Validate read-only introspection and representations.

Conventions
- Test method names follow CamelCase per project convention.
- Never pass explicit None for any parameter; omit instead.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argbind import Parameter, Named, Flag, Positional, ConversionError, ScalarConverter, EnumConverter


class TestNamed(TestCase):
    """Behavioral tests for Named parameters."""

    def testDefaults(self):
        p = Named("name")
        self.assertEqual(p.name, "name")
        self.assertIsNone(p.short)
        self.assertIsNone(p.descr)
        self.assertIsNone(p.value)
        self.assertTrue(p.required)
        self.assertFalse(p.multiple)
        self.assertFalse(p.flag)
        self.assertFalse(p.parsed)
        self.assertEqual(p.index, 0)
        self.assertIsInstance(p.converter, ScalarConverter)

    def testDescrExplicitNoneRejected(self):
        with self.assertRaises(TypeError):
            Named("name", descr=None)

    def testDescrBlankRejected(self):
        with self.assertRaises(ValueError):
            Named("name", descr="   ")

    def testNameMustBeString(self):
        with self.assertRaises(TypeError):
            Named(42)

    def testNameBlankRejected(self):
        with self.assertRaises(ValueError):
            Named("  ")

    def testShortMustBeString(self):
        with self.assertRaises(TypeError):
            Named("name", 1)

    def testTypeAndChoicesAreExclusive(self):
        with self.assertRaises(TypeError):
            Named("mode", type=str, choices=["a", "b"])

    def testChoicesBuildEnumConverter(self):
        p = Named("mode", choices={"fast": 1, "slow": 2})
        self.assertIsInstance(p.converter, EnumConverter)
        self.assertEqual(dict(p.choices), {"fast": 1, "slow": 2})
        self.assertEqual(p.valid, "fast, slow")

    def testScalarHasNoValidListing(self):
        p = Named("count", type=int)
        self.assertIsNone(p.choices)
        self.assertIsNone(p.valid)

    def testScalarConvertReplacesValue(self):
        p = Named("count", type=int, default=1)
        self.assertEqual(p.value, 1)
        self.assertEqual(p.convert("7"), 7)
        self.assertEqual(p.value, 7)
        self.assertTrue(p.parsed)

    def testFailedConversionKeepsValue(self):
        p = Named("count", type=int, default=1)
        with self.assertRaises(ConversionError):
            p.convert("seven")
        self.assertEqual(p.value, 1)
        self.assertFalse(p.parsed)

    def testResetKeepsScalarValue(self):
        p = Named("count", type=int, default=1)
        p.convert("5")
        p.reset()
        self.assertFalse(p.parsed)
        self.assertEqual(p.value, 5)

    def testListDefaultMustBeIterable(self):
        with self.assertRaises(TypeError):
            Named("items", default="abc", multiple=True)
        with self.assertRaises(TypeError):
            Named("items", default=3, multiple=True)

    def testListDefaultsToEmptyList(self):
        p = Named("items", multiple=True)
        self.assertEqual(p.value, [])
        self.assertEqual(p.default, [])

    def testListFirstConversionReplacesDefault(self):
        p = Named("items", type=int, default=(9,), multiple=True)
        self.assertEqual(p.value, [9])
        p.convert("1")
        p.convert("2")
        self.assertEqual(p.value, [1, 2])

    def testListResetRestoresDefault(self):
        p = Named("items", default=["x"], multiple=True)
        p.convert("y")
        p.reset()
        self.assertEqual(p.value, ["x"])
        p.convert("z")
        self.assertEqual(p.value, ["z"])

    def testListValueIsACopy(self):
        p = Named("items", multiple=True)
        p.convert("a")
        p.value.append("b")
        self.assertEqual(p.value, ["a"])

    def testScalarValueKeepsConvertedType(self):
        p = Named("point", type=lambda token: tuple(token.split(",")))
        p.convert("1,2")
        self.assertIsInstance(p.value, tuple)
        self.assertEqual(p.value, ("1", "2"))

    def testEnumeratedValueKeepsMappedObject(self):
        origin = (0, 0)
        p = Named("corner", choices={"origin": origin}, default=frozenset({1}))
        self.assertIsInstance(p.default, frozenset)
        p.convert("origin")
        self.assertIs(p.value, origin)

    def testListElementsKeepConvertedType(self):
        p = Named("points", type=lambda token: tuple(token.split(",")), multiple=True)
        p.convert("1,2")
        p.convert("3,4")
        self.assertEqual(p.value, [("1", "2"), ("3", "4")])
        self.assertIsInstance(p.value[0], tuple)

    def testPropertiesAreReadOnly(self):
        p = Named("name")
        with self.assertRaises(AttributeError):
            p.name = "other"  # type: ignore[misc]

    def testRepeatable(self):
        self.assertFalse(Named("name").repeatable)
        self.assertTrue(Named("items", multiple=True).repeatable)

    def testLabel(self):
        self.assertEqual(Named("name").label, "--name")
        self.assertEqual(Named("name", "n").label, "-n/--name")
        self.assertEqual(str(Named("name", "n")), "-n/--name")

    def testBaseLabelFallsBackToName(self):
        self.assertEqual(Parameter.label.fget(Named("name")), "name")

    def testRepr(self):
        p = Named("level", "l", type=int, default=1, required=False)
        self.assertEqual(
            repr(p),
            "named(name='level', short='l', descr=None, required=False, multiple=False, value=1)"
        )


class TestFlag(TestCase):
    """Behavioral tests for Flag parameters."""

    def testFlagShape(self):
        f = Flag("verbose", "v", descr="Verbose output")
        self.assertTrue(f.flag)
        self.assertFalse(f.required)
        self.assertFalse(f.multiple)
        self.assertIs(f.value, False)
        self.assertTrue(f.repeatable)
        self.assertEqual(f.descr, "Verbose output")

    def testFlagConvertsBooleans(self):
        f = Flag("verbose")
        self.assertIs(f.convert("true"), True)
        self.assertIs(f.convert("off"), False)

    def testFlagIsNamed(self):
        self.assertIsInstance(Flag("verbose"), Named)

    def testTypename(self):
        self.assertEqual(Flag.__typename__, "flag")


class TestPositional(TestCase):
    """Behavioral tests for Positional parameters."""

    def testPositionalShape(self):
        p = Positional("file")
        self.assertTrue(p.positional)
        self.assertFalse(p.flag)
        self.assertEqual(p.index, 0)
        self.assertFalse(hasattr(p, "short"))

    def testUnregisteredLabel(self):
        self.assertEqual(Positional("file").label, "#0 <file>")

    def testListPositional(self):
        p = Positional("files", multiple=True)
        p.convert("a")
        p.convert("b")
        self.assertEqual(p.value, ["a", "b"])

    def testCannotBeAFlag(self):
        class Both(Positional, Flag):
            pass

        with self.assertRaises(TypeError):
            Both("both")


if __name__ == "__main__":
    unittest.main()
