"""
Interactive prompting (the question-asking collaborator).

The resolution pipeline only prompts when a required value is missing and the
process is attached to a terminal. Everything terminal-specific lives here, on
top of rich.prompt, so the pipeline can be tested by patching two seams:

- interactive(): whether prompting is possible at all.
- ask(questions): ask each Question and return {question.name: value}.

Questions
- message: text shown to the user ("--name: What name should we greet?").
- filter: converts the typed text (flag.parse, or default_parser).
- validate: receives the filtered value, returns True or a guidance string.
- choices: when given, the user picks one of them instead of typing freely.

A question is asked again until its filter succeeds and its validator returns
True; guidance is printed between attempts.
"""
import asyncio
import sys
from typing import NamedTuple

from rich.console import Console
from rich.prompt import Prompt
from rich.text import Text

from .argv import is_number, to_number
from .utils import settle

console = Console(stderr=True)


def interactive():
    """
    If interactive() returns False, don't try to prompt the user in any way.
    """
    return bool(sys.stderr.isatty())


def default_parser(value, /):
    """
    Best-effort scalar coercion for typed answers.

    - strict numeric literals (hexadecimal included) become int/float,
    - "true"/"false" become booleans,
    - anything else is passed through unchanged.
    """
    if is_number(value):
        return to_number(value) if isinstance(value, str) else value
    if value == "true":
        return True
    if value == "false":
        return False
    return value


def _accept(value, /):
    return True


class Question(NamedTuple):
    name: str
    message: str
    filter: object = default_parser
    validate: object = _accept
    choices: tuple = ()


class PromptArgs(NamedTuple):
    """
    What a custom `prompt` hook receives.

    - prompt: the ask() coroutine function; `await prompt([question])`.
    - question: the Question the framework would have asked by itself.
    - console: the rich console prompts are written to.
    """
    prompt: object
    question: Question
    console: Console


async def _ask(question, /):
    choices = {str(choice): choice for choice in question.choices}
    while True:
        answer = await asyncio.to_thread(
            Prompt.ask,
            Text(question.message),
            console=console,
            choices=list(choices) or None,
        )
        if choices:
            return choices[answer]
        try:
            value = await settle(question.filter(answer))
        except Exception as error:
            console.print(Text(f"cannot parse {answer!r}: {error}", "red"))
            continue
        verdict = await settle(question.validate(value))
        if verdict is True:
            return value
        console.print(Text(verdict if isinstance(verdict, str) else "invalid value, try again.", "red"))


async def ask(questions, /):
    """
    Ask every question in order and collect the answers by name.
    """
    answers = {}
    for question in questions:
        if not isinstance(question, Question):
            raise TypeError("ask() argument must be an iterable of questions")
        answers[question.name] = await _ask(question)
    return answers


__all__ = (
    "interactive",
    "default_parser",
    "Question",
    "PromptArgs",
    "ask",
)
