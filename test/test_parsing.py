"""
Parsing engine behavioral tests (global scan, command resolution, command scan).

Scope
- Validate order semantics before the command and permute semantics after it.
- Validate token shapes: long/short, inline values, clusters, terminator.
- Validate faults for unknown options, unknown commands and missing values.
- Validate default filling and alias propagation.

Conventions
- Test method names follow CamelCase per project convention.
- Every test builds a fresh Application; nothing is shared between tests.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from helmsman import (
    Application,
    MissingOptionValueError,
    NeedlessOptionValueError,
    Options,
    UnknownCommandArgumentError,
    UnknownCommandError,
    UnknownGlobalOptionError,
    propagate_aliases,
)


def build():
    app = Application("prog")
    app.switch("v", "verbose")
    app.flag("f", "file", default="a.txt")

    @app.command("push", "p")
    def push(global_options, options, arguments):
        pass

    push.switch("force")
    push.flag("t", "tag")

    @app.command("status", "st")
    def status(global_options, options, arguments):
        pass

    return app


class TestGlobalScan(TestCase):
    """Behavioral tests for options recognized before the command name."""

    def testDeclaredDefaultWithoutOverride(self):
        global_options, command, options, arguments = build().parse(["status"])
        self.assertEqual(global_options["f"], "a.txt")
        self.assertEqual(command.name, "status")

    def testExplicitValueWins(self):
        global_options, *_ = build().parse(["--file", "c.txt", "status"])
        self.assertEqual(global_options["f"], "c.txt")

    def testInlineValue(self):
        global_options, *_ = build().parse(["--file=c.txt", "status"])
        self.assertEqual(global_options["f"], "c.txt")

    def testAttachedShortValue(self):
        global_options, *_ = build().parse(["-fc.txt", "status"])
        self.assertEqual(global_options["f"], "c.txt")

    def testFlagValueMayLookLikeAnOption(self):
        global_options, command, *_ = build().parse(["-f", "-v", "status"])
        self.assertEqual(global_options["f"], "-v")
        self.assertNotIn("v", global_options)
        self.assertEqual(command.name, "status")

    def testSwitchPresence(self):
        global_options, *_ = build().parse(["-v", "status"])
        self.assertIs(global_options["v"], True)

    def testAbsentSwitchIsMissing(self):
        global_options, *_ = build().parse(["status"])
        self.assertNotIn("v", global_options)
        self.assertIsNone(global_options.verbose)

    def testShortCluster(self):
        global_options, *_ = build().parse(["-vf", "c.txt", "status"])
        self.assertIs(global_options["v"], True)
        self.assertEqual(global_options["f"], "c.txt")

    def testUnknownGlobalOptionStopsBeforeResolution(self):
        with self.assertRaises(UnknownGlobalOptionError) as context:
            build().parse(["-x", "nonexistent"])
        self.assertEqual(context.exception.options["token"], "-x")

    def testUnknownLongGlobalOption(self):
        with self.assertRaises(UnknownGlobalOptionError) as context:
            build().parse(["--nope", "status"])
        self.assertEqual(context.exception.message, "Unknown option --nope")

    def testUnknownOptionInClusterCarriesWholeToken(self):
        with self.assertRaises(UnknownGlobalOptionError) as context:
            build().parse(["-vx", "status"])
        self.assertEqual(context.exception.options["token"], "-vx")
        self.assertEqual(context.exception.options["switch"], "-x")
        self.assertEqual(context.exception.message, "Unknown option -x")

    def testGlobalScanStopsAtCommand(self):
        # -v after the command belongs to the command scope
        with self.assertRaises(UnknownCommandArgumentError):
            build().parse(["status", "-v"])

    def testMissingFlagValue(self):
        with self.assertRaises(MissingOptionValueError):
            build().parse(["--file"])

    def testNeedlessSwitchValue(self):
        with self.assertRaises(NeedlessOptionValueError):
            build().parse(["--verbose=yes", "status"])

    def testTerminatorBeforeCommand(self):
        global_options, command, *_ = build().parse(["-v", "--", "status"])
        self.assertEqual(command.name, "status")


class TestCommandResolution(TestCase):
    """Behavioral tests for picking the command."""

    def testBareInvocationResolvesHelp(self):
        _, command, _, arguments = build().parse([])
        self.assertEqual(command.name, "help")
        self.assertEqual(arguments, [])

    def testOnlyGlobalOptionsResolvesHelp(self):
        _, command, *_ = build().parse(["-v"])
        self.assertEqual(command.name, "help")

    def testAliasResolvesSameCommand(self):
        app = build()
        self.assertIs(app.parse(["st"]).command, app.parse(["status"]).command)

    def testUnknownCommand(self):
        with self.assertRaises(UnknownCommandError) as context:
            build().parse(["launch"])
        self.assertEqual(context.exception.options["name"], "launch")
        self.assertEqual(context.exception.message, "Unknown command 'launch'")

    def testNoPrefixMatching(self):
        with self.assertRaises(UnknownCommandError):
            build().parse(["pus"])


class TestCommandScan(TestCase):
    """Behavioral tests for options recognized after the command name."""

    def testOptionsInterleavedWithArguments(self):
        _, command, options, arguments = build().parse(["push", "arg1", "--force", "arg2"])
        self.assertIs(options["force"], True)
        self.assertEqual(arguments, ["arg1", "arg2"])

    def testFlagAfterArguments(self):
        _, _, options, arguments = build().parse(["push", "origin", "-t", "v1", "main"])
        self.assertEqual(options["t"], "v1")
        self.assertEqual(arguments, ["origin", "main"])

    def testTerminatorKeepsRestPositional(self):
        _, _, options, arguments = build().parse(["push", "--", "--force", "-"])
        self.assertNotIn("force", options)
        self.assertEqual(arguments, ["--force", "-"])

    def testLoneDashIsPositional(self):
        *_, arguments = build().parse(["push", "-"])
        self.assertEqual(arguments, ["-"])

    def testUnknownCommandArgumentCarriesCommand(self):
        app = build()
        with self.assertRaises(UnknownCommandArgumentError) as context:
            app.parse(["push", "--nope"])
        self.assertEqual(context.exception.options["token"], "--nope")
        self.assertIs(context.exception.options["command"], app.find_command("push"))

    def testUnknownCommandArgumentInClusterCarriesWholeToken(self):
        with self.assertRaises(UnknownCommandArgumentError) as context:
            build().parse(["push", "-zt", "v1"])
        self.assertEqual(context.exception.options["token"], "-zt")
        self.assertEqual(context.exception.options["switch"], "-z")

    def testCommandDefaults(self):
        app = Application("prog")

        @app.command("push")
        def push(global_options, options, arguments):
            pass

        push.flag("remote", default="origin")
        _, _, options, _ = app.parse(["push"])
        self.assertEqual(options["remote"], "origin")


class TestAliasPropagation(TestCase):
    """Behavioral tests for copying resolved values onto alias keys."""

    def testEveryAliasReadsTheValue(self):
        app = build()
        global_options, *_ = app.parse(["-f", "x", "status"])
        propagate_aliases(global_options, app.tokens)
        self.assertEqual(global_options["f"], "x")
        self.assertEqual(global_options["file"], "x")
        self.assertEqual(global_options.file, "x")

    def testDefaultsArePropagated(self):
        app = build()
        global_options, *_ = app.parse(["status"])
        propagate_aliases(global_options, app.tokens)
        self.assertEqual(global_options["file"], "a.txt")

    def testAbsentValuesAreNotPropagated(self):
        app = build()
        global_options, *_ = app.parse(["status"])
        propagate_aliases(global_options, app.tokens)
        self.assertNotIn("verbose", global_options)


class TestOptions(TestCase):
    """Behavioral tests for attribute access on resolved options."""

    def testUnderscoreReadsDashedKey(self):
        options = Options({"dry-run": True})
        self.assertIs(options.dry_run, True)
        self.assertIsNone(options.missing)

    def testUnderscoreWritesDashedKey(self):
        options = Options({"dry-run": True})
        options.dry_run = False
        self.assertEqual(options, {"dry-run": False})

    def testUnderscoreDeletesDashedKey(self):
        options = Options({"dry-run": True})
        del options.dry_run
        self.assertEqual(options, {})

    def testPlainAttributeWritesItsOwnKey(self):
        options = Options()
        options.dry_run = True
        self.assertEqual(options, {"dry_run": True})


if __name__ == "__main__":
    unittest.main()
