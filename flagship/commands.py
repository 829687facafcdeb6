"""
Flagship command layer: declare commands and dispatch raw arguments to them.

What this module provides
- Command variants (a tagged union, discriminated by `positional`):
  • FlagsCommand (positional=False): description, flags, run(flags).
  • ArgsCommand  (positional=True):  description, flags, args, rest,
    run(flags, args, rest).
- Factories:
  • create_cli_command(...): pick the variant from the given keywords.
  • @command(...): decorator form; the description defaults to the docstring.
- Dispatch:
  • run_command(name, command, argv): help, or resolve then run.
  • wants_help(argv), unparse_flags(flags, values).

Dispatch order
- A help flag (--help, -h, -?) prints the usage and stops: nothing is resolved
  and the handler is not called.
- ArgsCommand: positional args, then rest, then flags, then run. A prompt for a
  positional arg is therefore always shown before any flag prompt.
- FlagsCommand: positional tokens are rejected, then flags, then run.

Handlers may be plain functions or coroutine functions.

Quick start
    from flagship import command, Flag, validate, logger

    @command(flags={
        "name": Flag("What name should we greet?", validate.string()),
        "exuberant": Flag("Are we excited?", validate.boolean(), default=lambda: False),
    })
    async def hello(flags):
        \"\"\"Say hello\"\"\"
        logger.print(f"Hello, {flags['name']}{'!' if flags['exuberant'] else '.'}")
"""
import inspect

from rich.console import Console

from .argv import positionals
from .arguments import Arg, create_arg_array, create_flag_map
from .faults import *
from .resolution import resolve_arg_array, resolve_flag_map, resolve_rest
from .usage import get_command_usage
from .utils import *

# Output of commands and help (stdout); faults go to stderr.
logger = Console()

HELP_FLAGS = ("help", "h", "?")


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate the fields shared by both command variants.
    """
    if not isinstance(description := metadata["description"], str):
        raise TypeError(f"{cls.__typename__} 'description' must be a string")
    elif not (description := description.strip()):
        raise ValueError(f"{cls.__typename__} 'description' cannot be empty")
    metadata["description"] = description

    metadata["flags"] = create_flag_map(metadata["flags"])

    if not callable(metadata["run"]):
        raise TypeError(f"{cls.__typename__} 'run' must be callable")


class Command(metaclass=SpecType):
    """
    Common base of the command variants; not instantiated directly.

    Commands are immutable once built and can be dispatched any number of
    times; each dispatch resolves fresh values.
    """
    positional = Unset

    def __new__(cls, *args, **kwargs):
        if cls.positional is Unset:
            raise TypeError("use FlagsCommand or ArgsCommand (or create_cli_command)")
        return super().__new__(cls)


class FlagsCommand(Command):
    """
    A command with optional flags.
    """
    positional = False

    __introspectable__ = (
        "description",
        "flags",
        "run",
    )

    def __new__(cls, description, flags, run, /):
        metadata = {
            "description": description,
            "flags": flags,
            "run": run,
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self


class ArgsCommand(Command):
    """
    A command with positional arguments and optional flags.

    Use positional arguments when handling cases like multi file input.
    Otherwise, prefer using flags. Without a rest spec, extra positional tokens
    are rejected.
    """
    positional = True

    __introspectable__ = (
        "description",
        "flags",
        "args",
        "rest",
        "run",
    )

    def __new__(cls, description, flags, args, rest, run, /):
        metadata = {
            "description": description,
            "flags": flags,
            "args": create_arg_array(args),
            "rest": rest,
            "run": run,
        }
        _sanitize_metadata(cls, metadata)
        if rest is not Unset and not isinstance(rest, Arg):
            raise TypeError(f"{cls.__typename__} 'rest' must be declared with Arg(...)")

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self


def create_cli_command(*, description, run, flags=Unset, args=Unset, rest=Unset):
    """
    Create a command.

    With `args` or `rest`, an ArgsCommand is built; prefer flags unless you're
    handling variadic arguments, like one-or-more files. Otherwise a
    FlagsCommand is built.
    """
    flags = coalesce(flags, {})
    if args is Unset and rest is Unset:
        return FlagsCommand(description, flags, run)
    return ArgsCommand(description, flags, coalesce(args, ()), rest, run)


def command(run=Unset, /, **metadata):
    """
    Create a command from a handler, or return a decorator that will.

    Forms
    - command(handler, flags=..., args=..., rest=..., description=...)
    - @command(flags=..., ...) / @command

    The description defaults to the handler's docstring.
    """
    @rename("command")
    def wrapper(run, /):
        if not callable(run):
            raise TypeError("@command() must be applied to a callable")
        description = metadata.get("description", inspect.getdoc(run))
        if description is None:
            raise TypeError("@command() needs a description or a documented handler")
        return create_cli_command(**(metadata | {"description": description, "run": run}))

    return wrapper(run) if run is not Unset else wrapper


def wants_help(argv, /):
    return any(argv.get(name) for name in HELP_FLAGS)


async def run_command(name, command, argv, /):
    """
    Dispatch raw arguments to a command.

    Parameters
    - name: display name used in usage lines ("tool", "tool build").
    - command: FlagsCommand | ArgsCommand.
    - argv: the raw-arguments mapping (never modified).

    Returns
    - whatever the handler returns, or None when help was shown.

    Raises
    - CommandLineError subclasses for every classified failure; anything the
      handler raises propagates unchanged.
    """
    if not isinstance(command, Command):
        raise TypeError("run_command() argument must be a command")

    if wants_help(argv):
        logger.print(await get_command_usage(name, command))
        return None

    tokens = positionals(argv)

    if command.positional:
        args = command.args
        if command.rest is Unset and len(tokens) > len(args):
            extra = tokens[len(args):]
            raise UnexpectedArgumentsError(
                f"expected at most {len(args)} args, but given {len(tokens)}: {', '.join(map(represent, extra))}",
                extra,
            )
        values = await resolve_arg_array(args, argv)
        rest = await resolve_rest(command.rest, tokens[len(args):]) if command.rest is not Unset else []
        flags = await resolve_flag_map(command.flags, argv)
        return await settle(command.run(flags, values, rest))

    if tokens:
        raise UnexpectedArgumentsError(
            f"expected 0 args, but given {len(tokens)}: {', '.join(map(represent, tokens))}",
            tokens,
        )
    flags = await resolve_flag_map(command.flags, argv)
    return await settle(command.run(flags))


def unparse_flags(flags, values, /):
    """
    Turn resolved flag values back into command-line tokens.

    Best effort only, and lossy:
    - True becomes "--name";
    - other truthy str/int/float values become "--name=value";
    - anything else truthy becomes "--name=<json>";
    - falsy values (False, 0, "", None) are left out, so they only survive a
      round trip when they are also the flag's default;
    - a string that reads as a number comes back as a number from parse_argv().
    """
    results = []
    for name in flags:
        value = values.get(name)
        if value is True:
            results.append(f"--{name}")
        elif not value:
            continue
        elif isinstance(value, str | int | float):
            results.append(f"--{name}={value}")
        else:
            results.append(f"--{name}={represent(value)}")
    return results


__all__ = (
    "logger",
    "Command",
    "FlagsCommand",
    "ArgsCommand",
    "create_cli_command",
    "command",
    "wants_help",
    "run_command",
    "unparse_flags",
)
