"""
Command declaration and dispatch tests.

Scope
- Validate the command variants and their factories (create_cli_command, @command).
- Validate dispatch: help short-circuit, args/rest split, rejected positionals.
- Validate unparse_flags against parse_argv.

Conventions
- Test method names follow CamelCase per project convention.
- Help output is captured by redirecting stdout.
"""

from __future__ import annotations

import contextlib
import io
import unittest
from unittest import IsolatedAsyncioTestCase, TestCase, mock

from flagship import (
    Arg,
    ArgsCommand,
    Command,
    Flag,
    FlagsCommand,
    UnexpectedArgumentsError,
    Unset,
    command,
    create_cli_command,
    create_default_false_flag,
    parse_argv,
    run_command,
    unparse_flags,
    validate,
    wants_help,
)


def greeter(run):
    return create_cli_command(
        description="Say hello",
        flags={
            "name": Flag("What name should we greet?", validate.string()),
            "exuberant": create_default_false_flag("Are we excited?"),
        },
        run=run,
    )


class TestCommandDeclaration(TestCase):
    """Behavioral tests for command construction."""

    def testFlagsOnlyBuildsFlagsCommand(self):
        cmd = greeter(lambda flags: None)
        self.assertIsInstance(cmd, FlagsCommand)
        self.assertIs(cmd.positional, False)

    def testArgsBuildsArgsCommand(self):
        cmd = create_cli_command(
            description="Copy files",
            args=[Arg("source", "Where from.", validate.string())],
            run=lambda flags, args, rest: None,
        )
        self.assertIsInstance(cmd, ArgsCommand)
        self.assertIs(cmd.positional, True)
        self.assertIs(cmd.rest, Unset)
        self.assertEqual(cmd.flags, {})

    def testBaseCommandIsAbstract(self):
        with self.assertRaises(TypeError):
            Command()

    def testRestMustBeArg(self):
        with self.assertRaises(TypeError):
            create_cli_command(description="Copy files", rest="files", run=lambda flags, args, rest: None)

    def testRunMustBeCallable(self):
        with self.assertRaises(TypeError):
            create_cli_command(description="Nothing", run=None)

    def testDecoratorUsesDocstring(self):
        @command(flags={"name": Flag("What name?", validate.string())})
        def hello(flags):
            """
            Say hello.
            """

        self.assertIsInstance(hello, FlagsCommand)
        self.assertEqual(hello.description, "Say hello.")

    def testBareDecorator(self):
        @command
        def ping(flags):
            """Ping."""

        self.assertIsInstance(ping, FlagsCommand)

    def testDecoratorNeedsDescription(self):
        with self.assertRaises(TypeError):
            @command
            def silent(flags):
                pass

    def testCommandIsReadOnly(self):
        cmd = greeter(lambda flags: None)
        with self.assertRaises(AttributeError):
            cmd.description = "Other"
        cmd.flags.clear()
        self.assertEqual(list(cmd.flags), ["name", "exuberant"])

    def testWantsHelp(self):
        self.assertTrue(wants_help({"_": [], "h": True}))
        self.assertTrue(wants_help({"_": [], "?": True}))
        self.assertFalse(wants_help({"_": [], "help": False}))


class TestRunCommand(IsolatedAsyncioTestCase):
    """Behavioral tests for dispatch."""

    async def testRunsWithResolvedFlags(self):
        run = mock.Mock(return_value="done")
        result = await run_command("hello", greeter(run), {"_": [], "name": "Ada"})
        self.assertEqual(result, "done")
        run.assert_called_once_with({"name": "Ada", "exuberant": False})

    async def testAsyncHandler(self):
        async def run(flags):
            return flags["name"].upper()

        self.assertEqual(await run_command("hello", greeter(run), {"_": [], "name": "ada"}), "ADA")

    async def testHelpShortCircuits(self):
        run = mock.Mock()
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            result = await run_command("hello", greeter(run), {"_": ["x"], "help": True, "bogus": 1})
        self.assertIsNone(result)
        run.assert_not_called()
        self.assertIn("Say hello", stdout.getvalue())
        self.assertIn("--exuberant", stdout.getvalue())

    async def testFlagsCommandRejectsPositionals(self):
        run = mock.Mock()
        with self.assertRaises(UnexpectedArgumentsError) as context:
            await run_command("hello", greeter(run), {"_": ["a", "b"], "name": "Ada"})
        self.assertEqual(context.exception.details, ["a", "b"])
        self.assertIn("expected 0 args, but given 2", context.exception.message)
        run.assert_not_called()

    async def testArgsAndRestSplit(self):
        run = mock.Mock(return_value=None)
        cmd = create_cli_command(
            description="Split",
            args=[Arg("a", "A", validate.string()), Arg("b", "B", validate.string())],
            rest=Arg("more", "More", validate.string()),
            run=run,
        )
        await run_command("split", cmd, {"_": ["1", "2", "3", "4"]})
        run.assert_called_once_with({}, ("1", "2"), ["3", "4"])

    async def testEmptyRest(self):
        run = mock.Mock(return_value=None)
        cmd = create_cli_command(
            description="Split",
            args=[Arg("a", "A", validate.string())],
            rest=Arg("more", "More", validate.string()),
            run=run,
        )
        await run_command("split", cmd, {"_": ["1"]})
        run.assert_called_once_with({}, ("1",), [])

    async def testExtraTokensWithoutRest(self):
        cmd = create_cli_command(
            description="One",
            args=[Arg("a", "A", validate.string())],
            run=lambda flags, args, rest: None,
        )
        with self.assertRaises(UnexpectedArgumentsError) as context:
            await run_command("one", cmd, {"_": ["1", "2"]})
        self.assertEqual(context.exception.details, ["2"])

    async def testHandlerErrorsPropagate(self):
        def run(flags):
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            await run_command("hello", greeter(run), {"_": [], "name": "Ada"})


class TestUnparseFlags(TestCase):
    """Behavioral tests for unparse_flags."""

    def setUp(self):
        self.flags = {
            "name": Flag("What name?", validate.string()),
            "count": Flag("How many?", validate.number()),
            "loud": create_default_false_flag("Loud?"),
            "quiet": create_default_false_flag("Quiet?"),
        }

    def testTokens(self):
        tokens = unparse_flags(self.flags, {"name": "Ada", "count": 3, "loud": True, "quiet": False})
        self.assertEqual(tokens, ["--name=Ada", "--count=3", "--loud"])

    def testRoundTrip(self):
        values = {"name": "Ada", "count": 3, "loud": True}
        argv = parse_argv(unparse_flags(self.flags, values))
        self.assertEqual(argv, {"_": [], **values})

    def testNonPrimitiveValuesAreJson(self):
        flags = {"tags": Flag("Tags.", lambda value: True)}
        self.assertEqual(unparse_flags(flags, {"tags": ["a", "b"]}), ['--tags=["a", "b"]'])


if __name__ == "__main__":
    unittest.main()
