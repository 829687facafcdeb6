"""
Prompting tests.

Scope
- Validate the default scalar coercion of typed answers.
- Validate ask(): re-asking on parse and validation failures, and pick-lists.
- Validate the choice-flag prompt hook.

Conventions
- Test method names follow CamelCase per project convention.
- The terminal is patched at rich.prompt.Prompt.ask; guidance output goes to a redirected stderr.
"""

from __future__ import annotations

import contextlib
import io
import unittest
from unittest import IsolatedAsyncioTestCase, TestCase, mock

from flagship import Question, ask, create_choice_flag, default_parser, resolve_flag, validate


def typed(*answers):
    return mock.patch("rich.prompt.Prompt.ask", side_effect=list(answers))


class TestDefaultParser(TestCase):
    """Behavioral tests for default_parser."""

    def testNumbers(self):
        self.assertEqual(default_parser("42"), 42)
        self.assertEqual(default_parser("1.5"), 1.5)
        self.assertEqual(default_parser("0x1F"), 31)

    def testBooleans(self):
        self.assertIs(default_parser("true"), True)
        self.assertIs(default_parser("false"), False)

    def testTextPassesThrough(self):
        self.assertEqual(default_parser("Ada"), "Ada")
        self.assertEqual(default_parser("True"), "True")


class TestAsk(IsolatedAsyncioTestCase):
    """Behavioral tests for ask()."""

    async def testAnswersByName(self):
        with typed("Ada", "3"):
            answers = await ask([Question("name", "Name?"), Question("count", "Count?")])
        self.assertEqual(answers, {"name": "Ada", "count": 3})

    async def testReasksUntilValid(self):
        def check(value):
            return True if validate.number()(value) else "a number, please"

        stderr = io.StringIO()
        with typed("many", "7") as prompt, contextlib.redirect_stderr(stderr):
            answers = await ask([Question("count", "Count?", validate=check)])
        self.assertEqual(answers, {"count": 7})
        self.assertEqual(prompt.call_count, 2)
        self.assertIn("a number, please", stderr.getvalue())

    async def testReasksWhenFilterFails(self):
        def parse(raw):
            return int(raw)

        with typed("x", "5"), contextlib.redirect_stderr(io.StringIO()):
            answers = await ask([Question("count", "Count?", filter=parse)])
        self.assertEqual(answers, {"count": 5})

    async def testChoicesMapBack(self):
        with typed("2") as prompt:
            answers = await ask([Question("level", "Level?", choices=(1, 2, 3))])
        self.assertEqual(answers, {"level": 2})
        self.assertEqual(prompt.call_args.kwargs["choices"], ["1", "2", "3"])

    async def testRejectsNonQuestions(self):
        with self.assertRaises(TypeError):
            await ask(["Name?"])

    async def testChoiceFlagPrompt(self):
        flag = create_choice_flag("Which environment?", ["dev", "prod"])
        with mock.patch("flagship.prompts.interactive", return_value=True), typed("prod") as prompt:
            self.assertEqual(await resolve_flag("env", flag, {"_": []}), "prod")
        self.assertEqual(str(prompt.call_args.args[0]), "Which environment?")


if __name__ == "__main__":
    unittest.main()
