"""
Help rendering behavioral tests (description, usage synopsis, parameter table).

Scope
- Validate the usage synopsis shapes and its wrapping at 80 columns.
- Validate the aligned parameter table, valid-value listings and hanging indents.
- Validate rendering of an empty registry.

Conventions
- Test method names follow CamelCase per project convention.
- Parsers are built with colorful=False and compared through Text.plain.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console

from argbind import Parser


def _sample():
    parser = Parser("Test program.", colorful=False)
    parser.add_named("name", "n", descr="A name")
    parser.add_flag("verbose", "v", descr="Verbose")
    parser.add_named("level", type=int, default=1, required=False)
    parser.add_named("mode", choices=["fast", "slow"], required=False, descr="Mode")
    parser.add_positional("files", multiple=True, descr="Input files")
    parser.parse(["/usr/bin/tool", "-n", "x", "file"])
    return parser


class TestUsage(TestCase):
    """Behavioral tests for Parser.format_usage()."""

    def testUsageShapesAndWrapping(self):
        lines = _sample().format_usage().plain.split("\n")
        self.assertEqual(lines, [
            "Usage: tool (-n <name> | --name <name>) [-v | --verbose] [--level <level>]",
            "            [--mode <mode>] <files> ...",
        ])

    def testUsageLinesFitWidth(self):
        parser = Parser(colorful=False)
        for index in range(12):
            parser.add_named("option%d" % index, required=False)
        parser.parse(["tool"])
        lines = parser.format_usage().plain.split("\n")
        self.assertGreater(len(lines), 1)
        for line in lines:
            self.assertLessEqual(len(line), 80)
        for line in lines[1:]:
            self.assertTrue(line.startswith(" " * 12 + "[--option"))

    def testRequiredWithoutShortNameIsBare(self):
        parser = Parser(colorful=False)
        parser.add_named("name")
        parser.add_named("items", "i", required=False, multiple=True)
        parser.add_positional("source")
        parser.add_positional("target", required=False)
        parser.parse(["tool", "--name", "x", "a"])
        self.assertEqual(
            parser.format_usage().plain,
            "Usage: tool --name <name> [-i <items> | --items <items> ...] <source> [<target>]"
        )

    def testEmptyRegistry(self):
        parser = Parser(colorful=False)
        parser.parse(["tool"])
        self.assertEqual(parser.format_usage().plain, "Usage: tool")
        self.assertEqual(parser.format_parameters().plain, "")
        self.assertEqual(parser.format_help().plain, "Usage: tool")


class TestParameters(TestCase):
    """Behavioral tests for Parser.format_parameters()."""

    def testAlignedRows(self):
        lines = _sample().format_parameters().plain.split("\n")
        self.assertEqual(lines, [
            "Options:",
            "    -n, --name <name> A name",
            "    -v, --verbose     Verbose",
            "    --level <level>",
            "    --mode <mode>     Mode. Valid values: fast, slow",
            "    <files>           Input files",
        ])

    def testValidValuesWithoutDescription(self):
        parser = Parser(colorful=False)
        parser.add_named("mode", choices={"a": 1, "b": 2})
        self.assertEqual(
            parser.format_parameters().plain.split("\n")[1],
            "    --mode <mode> Valid values: a, b"
        )

    def testLongDescriptionWrapsWithHangingIndent(self):
        parser = Parser(colorful=False)
        parser.add_named("name", descr=" ".join(["word"] * 40))
        lines = parser.format_parameters().plain.split("\n")[1:]
        self.assertGreater(len(lines), 1)
        self.assertTrue(lines[0].startswith("    --name <name> word"))
        for line in lines:
            self.assertLessEqual(len(line), 80)
            self.assertEqual(line, line.rstrip())
        for line in lines[1:]:
            self.assertTrue(line.startswith(" " * 18 + "word"))


class TestHelp(TestCase):
    """Behavioral tests for Parser.format_help() and the printers."""

    def testSectionsAreSeparatedByBlankLines(self):
        parser = _sample()
        help = parser.format_help().plain
        self.assertTrue(help.startswith("Test program.\n\nUsage: tool "))
        self.assertIn("\n\nOptions:\n", help)

    def testDescriptionIsStripped(self):
        self.assertEqual(Parser("  Spaced.  ").format_description().plain, "Spaced.")

    def testDescriptionMustBeString(self):
        with self.assertRaises(TypeError):
            Parser(42)

    def testPrintHelp(self):
        buffer = io.StringIO()
        _sample().print_help(Console(file=buffer, width=80))
        output = buffer.getvalue()
        self.assertIn("Test program.", output)
        self.assertIn("Usage: tool", output)
        self.assertIn("Valid values: fast, slow", output)

    def testPrintUsage(self):
        buffer = io.StringIO()
        _sample().print_usage(Console(file=buffer, width=80))
        self.assertTrue(buffer.getvalue().startswith("Usage: tool "))


if __name__ == "__main__":
    unittest.main()
