"""
Flagship faults (classified command-line errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing error.
  Codes are grouped by domain to keep copy consistent and logs searchable.
- CommandLineError: the single error kind surfaced at the process boundary. It
  carries a human-readable message, an opaque details payload (the offending
  raw value, the list of unknown names, ...) and a FaultCode. Every subclass is
  a sub-classification of that one kind.
- Outcome / attempt(): an explicit result type, so callers (tests, nested
  dispatch) can inspect a classified fault without catching it.
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Short, lowercased, technical messages that name the offending flag or arg first.
- One clear hint per fault, rendered with a gentle arrow.

Integration
- The resolution pipeline and the dispatcher raise CommandLineError subclasses.
- The entry helpers (flagship.entry) render them via rich without a traceback and
  map them to exit code 2; anything else is unclassified and maps to exit code 1.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType
from typing import NamedTuple

from rich.console import Console, Group
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the cli (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • UNKNOWN_COMMAND
    - flags (1111x)
      • UNKNOWN_FLAG
    - positionals (1112x)
      • UNEXPECTED_ARGUMENTS, INVALID_VALUE, MISSING_VALUE, UNPARSABLE_VALUE
    - contract violations (1113x)
      • INVALID_DEFAULT (declaration bug), INVALID_PROMPT_RESULT (prompter bug)

    invalid-value, missing-value and unparsable-value apply to flags as well as
    positionals; they live in the 1112x range because they are about values, not
    names.
    """
    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND             = 11101

    # --- flag errors (11xxx) ---
    UNKNOWN_FLAG                = 11112

    # --- value errors (11xxx) ---
    UNEXPECTED_ARGUMENTS        = 11121
    INVALID_VALUE               = 11124
    MISSING_VALUE               = 11125
    UNPARSABLE_VALUE            = 11126

    # --- contract violations (11xxx) ---
    INVALID_DEFAULT             = 11131
    INVALID_PROMPT_RESULT       = 11132

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(sys.modules["__main__"], "__codes__", {}).get(self, self.value))


class CommandLineError(Exception):
    """
    A classified, user-facing command-line error.

    Attributes
    - message: human-readable, one-line description.
    - details: opaque payload describing the offending input.
    - code: FaultCode of the sub-classification (class attribute).
    - title: short header label (class attribute).
    - hint: one actionable sentence, optional.

    The entry helpers print these without a traceback and exit with code 2.
    """
    code = Unset
    title = "command-line error"
    hint = None

    def __init__(self, message, details=None, /, *, hint=Unset):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__} message must be a string")
        super().__init__(message)
        self.message = message
        self.details = details
        if hint is not Unset:
            self.hint = hint

    def __rich__(self):
        main = sys.modules["__main__"]

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        prog = getattr(main, "__prog__", None)
        label = self.code.normalize() if isinstance(self.code, FaultCode) else "error"

        header = Text.assemble(
            "[ ",
            *((Text(prog, styles["prog-name"]), " — ") if prog else ()),
            Text(label, styles["code"]),
            " | ",
            Text(self.title.title(), styles["error-title"]),
            " ]",
        )
        renders = [header, Text(self.message, styles["error-message"])]
        if self.hint:
            renders.append(Text.assemble(Text(" → ", styles["hint-arrow"]), Text(self.hint, styles["hint"])))
        return Group(*renders)


class UnknownCommandError(CommandLineError):
    code = FaultCode.UNKNOWN_COMMAND
    title = "unknown command"
    hint = "run with 'help' to list the available commands"


class UnknownFlagError(CommandLineError):
    code = FaultCode.UNKNOWN_FLAG
    title = "unknown flag"
    hint = "run with --help to list the accepted flags"


class UnexpectedArgumentsError(CommandLineError):
    code = FaultCode.UNEXPECTED_ARGUMENTS
    title = "unexpected arguments"
    hint = "this command only takes flags; run with --help for details"


class InvalidValueError(CommandLineError):
    code = FaultCode.INVALID_VALUE
    title = "invalid value"


class MissingValueError(CommandLineError):
    code = FaultCode.MISSING_VALUE
    title = "missing value"
    hint = "pass it explicitly, or run from an interactive terminal to be prompted"


class UnparsableValueError(CommandLineError):
    code = FaultCode.UNPARSABLE_VALUE
    title = "unparsable value"


class InvalidDefaultError(CommandLineError):
    code = FaultCode.INVALID_DEFAULT
    title = "invalid default"
    hint = "this is a bug in the command declaration, not in your input"


class InvalidPromptResultError(CommandLineError):
    code = FaultCode.INVALID_PROMPT_RESULT
    title = "invalid prompt result"
    hint = "this is a bug in the prompt, not in your input"


class Outcome(NamedTuple):
    """
    Result of a resolution or dispatch step.

    Exactly one side is meaningful: `fault` is None on success, otherwise it is
    the classified CommandLineError and `value` is None.
    """
    value: object = None
    fault: CommandLineError | None = None

    @property
    def ok(self):
        return self.fault is None

    def unwrap(self):
        """
        Return the value, or raise the captured fault.
        """
        if self.fault is not None:
            raise self.fault
        return self.value


async def attempt(awaitable, /):
    """
    Await a pipeline step and capture a classified fault as a value.

    Only CommandLineError is captured; any other exception is unexpected and
    propagates unchanged.
    """
    try:
        return Outcome(await awaitable)
    except CommandLineError as fault:
        return Outcome(fault=fault)


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return MappingProxyType(getattr(sys.modules["__main__"], "__docs__", {})).get(code)


__all__ = (
    "FaultCode",
    "CommandLineError",
    "UnknownCommandError",
    "UnknownFlagError",
    "UnexpectedArgumentsError",
    "InvalidValueError",
    "MissingValueError",
    "UnparsableValueError",
    "InvalidDefaultError",
    "InvalidPromptResultError",
    "Outcome",
    "attempt",
    "getdoc",
)
