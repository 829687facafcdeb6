"""
Subcommand loading and routing.

Command loaders
- A CommandLoaders mapping is {name: loader}, where a loader is a zero-argument
  callable returning a Command (or an awaitable of one). The caller owns the
  mapping; the router only reads it.
- create_command_loaders_from_directory(path): one loader per file named
  "^[a-z].*\\.py$", named by the file stem. Nothing is imported until the
  loader runs.
- create_command_loaders_from_modules(pattern): one loader per module matched by
  a module glob ("app.commands.*"), named by the module's last segment.

A command module exposes its command as a module-level `command`; failing
that, its only module-level Command instance is used.

Routing (run_loaders)
    tool                    → list every command
    tool help               → list every command
    tool help <command>     → help of <command>
    tool --help             → list every command
    tool <command> --help   → help of <command>
    tool <command> ...      → run <command> with the remaining tokens
"""
import asyncio
import functools
import importlib
import importlib.util
import inspect
import os
import re
import sys

from .argv import POSITIONALS, TERMINATED, merge, parse_argv, positionals
from .commands import Command, logger, run_command, wants_help
from .faults import *
from .usage import render_command_list
from .utils import *

COMMAND_FILE = re.compile(r"^[a-z].*\.py$")


def _command_of(module, /):
    """
    pick the command a module exposes.
    """
    if isinstance(object := getattr(module, "command", None), Command):
        return object
    candidates = [object for _, object in inspect.getmembers(module) if isinstance(object, Command)]
    if len(candidates) != 1:
        raise TypeError(f"module {module.__name__!r} must expose exactly one command (as 'command')")
    return candidates[0]


async def _load_path(name, path):
    specification = importlib.util.spec_from_file_location(f"flagship.loaded.{name}", path)
    if specification is None or specification.loader is None:
        raise TypeError(f"unable to import command file {path!r}")
    module = importlib.util.module_from_spec(specification)
    sys.modules[specification.name] = module
    try:
        specification.loader.exec_module(module)
    except BaseException:
        del sys.modules[specification.name]
        raise
    return _command_of(module)


async def _load_module(module):
    try:
        return _command_of(importlib.import_module(module))
    except ImportError:
        raise TypeError(f"unable to import module {module!r}") from None


def create_command_loaders_from_directory(path, /):
    """
    Build lazy loaders for every command file in a directory.
    """
    if not isinstance(path, str | os.PathLike):
        raise TypeError("create_command_loaders_from_directory() argument must be a path")
    loaders = {}
    for filename in sorted(os.listdir(path)):
        if not COMMAND_FILE.match(filename):
            continue
        name = os.path.splitext(filename)[0]
        loaders[name] = rename(functools.partial(_load_path, name, os.path.join(path, filename)), name)
    return loaders


def create_command_loaders_from_modules(pattern, /):
    """
    Build lazy loaders for every module matched by a module glob.

    The glob is expanded right away (which imports the packages leading to the
    matched modules); the matched modules themselves are imported lazily.
    """
    if not isinstance(pattern, str):
        raise TypeError("create_command_loaders_from_modules() argument must be a string")
    loaders = {}
    for module in mglob(pattern):
        name = module.rpartition(".")[2]
        loaders[name] = rename(functools.partial(_load_module, module), name)
    return loaders


async def load_command(name, loaders, /):
    """
    Load one command by name.

    Raises
    - UnknownCommandError when no loader is registered under `name`.
    """
    try:
        loader = loaders[name]
    except KeyError:
        raise UnknownCommandError(f"command not found: {name}", name) from None
    command = await settle(loader())
    if not isinstance(command, Command):
        raise TypeError(f"loader {name!r} must produce a command")
    return command


async def load_all_commands(loaders, /):
    """
    Load every command concurrently; return {name: Command} in loader order.
    """
    names = list(loaders)
    commands = await asyncio.gather(*(load_command(name, loaders) for name in names))
    return dict(zip(names, commands))


async def get_command_loaders_usage(name, loaders, /):
    """
    Render the overview of every command (loads them all).
    """
    return render_command_list(name, await load_all_commands(loaders))


async def run_loaders(name, loaders, argv, /):
    """
    Route raw arguments to the subcommand named by the first positional token.

    The subcommand is dispatched under the composite name "<name> <command>"
    with the remaining tokens. Remaining tokens written as flags
    ("--name=Ada") are tokenized again, so routers can be fed a plain token
    list under "_"; tokens that followed a "--" terminator are passed on
    verbatim.
    """
    tokens = positionals(argv)
    command_name, rest = (str(tokens[0]), tokens[1:]) if tokens else (None, [])

    if command_name is None or command_name == "help" or (wants_help(argv) and not command_name):
        if rest:
            about = str(rest[0])
            command = await load_command(about, loaders)
            return await run_command(f"{name} {about}", command, {POSITIONALS: [], "help": True})

        logger.print(await get_command_loaders_usage(name, loaders))
        return None

    command = await load_command(command_name, loaders)
    # Terminated tokens are always the last positionals.
    split = len(rest) - min(len(rest), len(argv.get(TERMINATED, ())))
    head = [str(token) for token in rest[:split]]
    tail = [str(token) for token in rest[split:]]
    child = merge(argv, parse_argv(head + ["--"] + tail if tail else head))
    return await run_command(f"{name} {command_name}", command, child)


__all__ = (
    "create_command_loaders_from_directory",
    "create_command_loaders_from_modules",
    "load_command",
    "load_all_commands",
    "get_command_loaders_usage",
    "run_loaders",
)
