# python
"""
Parser module behavioral tests (end-to-end parsing, policies and faults).

Scope
- Validate the scan: options, values, positional boundary and defaults.
- Validate faults: missing values, invalid values, repeated, required, conflicts,
  missing positionals, unparsed input and the help signal.
- Validate runtime policies: overwrite, strict, exact and shell rendering.
- Validate prompt handling (token lists, shell-like strings, sys.argv).

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Parser, Schema, Option, Positional, faults).
"""

from __future__ import annotations

import io
import sys
import unittest
import warnings
from unittest import TestCase, mock

from rich.console import Console

from argot import (
    Option,
    Positional,
    Schema,
    Parser,
    FaultCode,
    ParseError,
    MissingOptionArgumentError,
    InvalidOptionArgumentError,
    RepeatedOptionError,
    MissingRequiredOptionError,
    ConflictingOptionsError,
    MissingPositionalError,
    UnparsedTokensWarning,
    HelpRequested,
)


def _console():
    return Console(file=io.StringIO(), width=200)


def _schema():
    return Schema(
        Option("foo", "-f"),
        Option("bar", "-b", nargs=1),
        Option("baz", "-z", nargs=2),
        Positional("cux"),
    )


class TestParse(TestCase):
    """Behavioral tests for successful parses."""

    def testEndToEnd(self):
        result = Parser(_schema(), name="tool")(["-z", "a", "b", "-b", "x", "alpha"])
        self.assertEqual(result.foo, False)
        self.assertEqual(result.bar, "x")
        self.assertEqual(result.baz, ("a", "b"))
        self.assertEqual(result.cux, "alpha")

    def testResultIsSchemaNamespace(self):
        schema = _schema()
        parser = Parser(schema, name="tool")
        result = parser(["alpha"])
        self.assertIsInstance(result, schema.namespace)
        self.assertIs(parser.namespace, schema.namespace)
        self.assertEqual(result._fields, ("foo", "bar", "baz", "cux"))

    def testDefaultsOnEmptyInput(self):
        parser = Parser(Schema(
            Option("flag", "-a"),
            Option("single", "-b", nargs=1, default="d"),
            Option("pair", "-c", nargs=2, default=("p", "q")),
            Option("bare", "-e", nargs=1),
            Option("triple", "-t", nargs=3),
        ), name="tool")
        self.assertEqual(tuple(parser([])), (False, "d", ("p", "q"), "", ("", "", "")))

    def testOptionOverridesDefault(self):
        parser = Parser(Schema(Option("single", "-b", nargs=1, default="d")), name="tool")
        self.assertEqual(parser(["-b", "v"]).single, "v")

    def testFlagBecomesTrue(self):
        self.assertTrue(Parser(_schema(), name="tool")(["-f", "alpha"]).foo)

    def testManyTakesExactCount(self):
        parser = Parser(Schema(Option("point", "-p", nargs=3), Positional("rest")), name="tool")
        result = parser(["-p", "1", "2", "3", "4"])
        self.assertEqual(result.point, ("1", "2", "3"))
        self.assertEqual(result.rest, "4")

    def testPositionalsLeftToRight(self):
        parser = Parser(Schema(Positional("first"), Positional("second")), name="tool")
        result = parser(["x", "y"])
        self.assertEqual((result.first, result.second), ("x", "y"))

    def testPositionalsStartAfterLastOption(self):
        parser = Parser(Schema(Option("foo", "-f"), Positional("first"), Positional("second")), name="tool")
        result = parser(["-f", "x", "y"])
        self.assertEqual((result.first, result.second), ("x", "y"))

    def testPrefixMatching(self):
        self.assertTrue(Parser(_schema(), name="tool")(["-fx", "alpha"]).foo)

    def testValueSlotsAreLenient(self):
        result = Parser(_schema(), name="tool")(["-b", "-f", "alpha"])
        self.assertEqual(result.bar, "-f")
        self.assertFalse(result.foo)

    def testHelpInValueSlotIsAValue(self):
        self.assertEqual(Parser(_schema(), name="tool")(["-b", "-h", "alpha"]).bar, "-h")

    def testPossibleValueAccepted(self):
        parser = Parser(Schema(Option("level", "-l", nargs=1, choices=("low", "high"))), name="tool")
        self.assertEqual(parser(["-l", "high"]).level, "high")

    def testConflictingOptionAlone(self):
        parser = Parser(Schema(Option("a", "-a", conflicts=("b",)), Option("b", "-b")), name="tool")
        self.assertTrue(parser(["-a"]).a)
        self.assertTrue(parser(["-b"]).b)

    def testRequiredPresent(self):
        parser = Parser(Schema(Option("token", "-t", nargs=1, required=True)), name="tool")
        self.assertEqual(parser(["-t", "secret"]).token, "secret")

    def testParseShellString(self):
        result = Parser(_schema(), name="tool").parse('-b "hello world" alpha')
        self.assertEqual(result.bar, "hello world")
        self.assertEqual(result.cux, "alpha")

    def testParseSysArgv(self):
        with mock.patch.object(sys, "argv", ["tool", "-f", "alpha"]):
            result = Parser(_schema()).parse()
        self.assertTrue(result.foo)
        self.assertEqual(result.cux, "alpha")

    def testParseRejectsBadPrompts(self):
        parser = Parser(_schema(), name="tool")
        with self.assertRaises(TypeError):
            parser.parse(5)
        with self.assertRaises(TypeError):
            parser.parse(["-f", 1])

    def testParserIsReusable(self):
        parser = Parser(_schema(), name="tool")
        self.assertEqual(parser(["-b", "1", "alpha"]).bar, "1")
        self.assertEqual(parser(["alpha"]).bar, "")


class TestFaults(TestCase):
    """Behavioral tests for parse faults."""

    def testMissingOptionArgument(self):
        parser = Parser(Schema(Option("point", "-p", nargs=3)), name="tool")
        with self.assertRaises(MissingOptionArgumentError) as context:
            parser(["-p", "a", "b"])
        self.assertEqual(context.exception.code, FaultCode.MISSING_OPTION_ARGUMENT)
        self.assertEqual(context.exception.options["prog"], "tool")

    def testInvalidOptionArgument(self):
        parser = Parser(Schema(Option("level", "-l", nargs=1, choices=("low", "high"))), name="tool")
        with self.assertRaises(InvalidOptionArgumentError) as context:
            parser(["-l", "mid"])
        self.assertEqual(context.exception.options["value"], "mid")

    def testRepeatedOption(self):
        parser = Parser(_schema(), name="tool")
        with self.assertRaises(RepeatedOptionError) as context:
            parser(["-b", "1", "-b", "2", "alpha"])
        self.assertEqual(context.exception.code, FaultCode.REPEATED_OPTION)
        self.assertIn("third position", context.exception.message)

    def testRepeatedFlag(self):
        with self.assertRaises(RepeatedOptionError):
            Parser(_schema(), name="tool")(["-f", "-f", "alpha"])

    def testMissingRequiredOption(self):
        parser = Parser(Schema(Option("token", "-t", "--token", nargs=1, required=True)), name="tool")
        with self.assertRaises(MissingRequiredOptionError) as context:
            parser([])
        self.assertIn("'--token'", context.exception.message)

    def testConflictingOptions(self):
        parser = Parser(Schema(Option("a", "-a", conflicts=("b",)), Option("b", "-b")), name="tool")
        with self.assertRaises(ConflictingOptionsError):
            parser(["-a", "-b"])
        with self.assertRaises(ConflictingOptionsError) as context:
            parser(["-b", "-a"])
        self.assertEqual(context.exception.options["other"].name, "b")

    def testMissingPositional(self):
        parser = Parser(Schema(Positional("first"), Positional("second")), name="tool")
        with self.assertRaises(MissingPositionalError) as context:
            parser(["x"])
        self.assertEqual(context.exception.options["positional"].name, "second")
        self.assertEqual(context.exception.code, FaultCode.MISSING_POSITIONAL)

    def testPositionalBeforeOptionIsNotTaken(self):
        with self.assertRaises(MissingPositionalError):
            Parser(_schema(), name="tool")(["alpha", "-f"])

    def testFaultsAreParseErrors(self):
        with self.assertRaises(ParseError):
            Parser(_schema(), name="tool")([])

    def testUnparsedTokensBeforeBoundary(self):
        with self.assertWarns(UnparsedTokensWarning) as context:
            result = Parser(_schema(), name="tool")(["stray", "-f", "alpha"])
        self.assertTrue(result.foo)
        self.assertEqual(result.cux, "alpha")
        self.assertEqual(context.warning.options["leftover"], ("stray",))

    def testUnparsedTokensAfterPositionals(self):
        with self.assertWarns(UnparsedTokensWarning) as context:
            result = Parser(_schema(), name="tool")(["alpha", "beta"])
        self.assertEqual(result.cux, "alpha")
        self.assertIn("second position", context.warning.message)

    def testNoWarningWhenEverythingIsConsumed(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            Parser(_schema(), name="tool")(["-f", "alpha"])
        self.assertEqual(caught, [])


class TestHelp(TestCase):
    """Behavioral tests for the help signal."""

    def testHelpRequested(self):
        parser = Parser(_schema(), name="tool", version=(1, 0, 0))
        with self.assertRaises(HelpRequested) as context:
            parser(["-b", "v", "--help"])
        self.assertTrue(context.exception.help.plain.startswith("tool 1.0.0"))
        self.assertEqual(context.exception.options["index"], 2)

    def testHelpShortCircuits(self):
        with self.assertRaises(HelpRequested):
            Parser(Schema(Positional("first"), Positional("second")), name="tool")(["-h"])

    def testHelpByPrefix(self):
        with self.assertRaises(HelpRequested):
            Parser(_schema(), name="tool")(["--helpme"])

    def testHelpExact(self):
        parser = Parser(_schema(), name="tool", exact=True)
        with self.assertWarns(UnparsedTokensWarning):
            parser(["--helpme", "-f", "alpha"])
        with self.assertRaises(HelpRequested):
            parser(["--help"])

    def testHelpIsNotParseError(self):
        try:
            Parser(_schema(), name="tool")(["-h"])
        except ParseError:
            self.fail("help must not be a parse error")
        except HelpRequested:
            pass

    def testPrintHelp(self):
        console = _console()
        Parser(_schema(), name="tool").print_help(console)
        self.assertIn("USAGE", console.file.getvalue())


class TestPolicies(TestCase):
    """Behavioral tests for runtime policies."""

    def testOverwrite(self):
        parser = Parser(_schema(), name="tool", overwrite=True)
        self.assertEqual(parser(["-b", "1", "-b", "2", "alpha"]).bar, "2")

    def testStrictRefusesFlagValues(self):
        parser = Parser(_schema(), name="tool", strict=True)
        with self.assertRaises(MissingOptionArgumentError):
            parser(["-b", "-f", "alpha"])
        self.assertEqual(parser(["-b", "v", "alpha"]).bar, "v")

    def testExactMatching(self):
        parser = Parser(_schema(), name="tool", exact=True)
        with self.assertWarns(UnparsedTokensWarning):
            result = parser(["-fx", "-f", "alpha"])
        self.assertTrue(result.foo)

    def testShellRendersErrors(self):
        stderr = _console()
        parser = Parser(_schema(), name="tool", shell=True, stderr=stderr)
        with self.assertRaises(RepeatedOptionError):
            parser(["-f", "-f", "alpha"])
        output = stderr.file.getvalue()
        self.assertIn("tool", output)
        self.assertIn("11113", output)
        self.assertIn("appears more than one time", output)
        self.assertIn("run 'tool --help' for more information", output)

    def testShellPrintsHelp(self):
        stdout = _console()
        parser = Parser(_schema(), name="tool", shell=True, stdout=stdout)
        with self.assertRaises(HelpRequested):
            parser(["-h"])
        self.assertIn("USAGE", stdout.file.getvalue())

    def testShellPrintsWarnings(self):
        stderr = _console()
        parser = Parser(_schema(), name="tool", shell=True, stderr=stderr)
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            parser(["alpha", "beta"])
        self.assertEqual(caught, [])
        self.assertIn("unparsed input", stderr.file.getvalue())


class TestParser(TestCase):
    """Behavioral tests for Parser construction."""

    def testParserFromEntries(self):
        parser = Parser([Option("foo", "-f"), Positional("cux")], name="tool")
        self.assertIsInstance(parser.schema, Schema)
        self.assertEqual(parser(["alpha"]).cux, "alpha")

    def testParserNameDefaultsToArgv(self):
        with mock.patch.object(sys, "argv", ["/usr/bin/tool"]):
            self.assertEqual(Parser(_schema()).name, "tool")

    def testParserDefaults(self):
        parser = Parser(_schema(), name="tool")
        self.assertEqual(parser.version, (0, 0, 0))
        self.assertIsNone(parser.descr)
        self.assertFalse(parser.shell)
        self.assertFalse(parser.strict)
        self.assertFalse(parser.exact)
        self.assertFalse(parser.overwrite)

    def testParserRejectsBadVersion(self):
        with self.assertRaises(TypeError):
            Parser(_schema(), name="tool", version=(1, 2))
        with self.assertRaises(TypeError):
            Parser(_schema(), name="tool", version="1.2.3")
        with self.assertRaises(ValueError):
            Parser(_schema(), name="tool", version=(1, -1, 0))

    def testParserRejectsEmptyName(self):
        with self.assertRaises(ValueError):
            Parser(_schema(), name="  ")

    def testParserRejectsBadSchema(self):
        with self.assertRaises(TypeError):
            Parser("schema", name="tool")

    def testParserReprShowsIdentity(self):
        text = repr(Parser(Schema(Option("foo", "-f")), name="tool"))
        self.assertTrue(text.startswith("parser(name='tool', version=(0, 0, 0), schema=schema("))
        self.assertNotIn("overwrite", text)

    def testParserIsSealed(self):
        with self.assertRaises(TypeError):
            class Derived(Parser):
                pass


if __name__ == "__main__":
    unittest.main()
