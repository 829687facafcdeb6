"""
Process entrypoint helpers.

This is the only module that touches the process lifecycle: it reads
sys.argv, runs the event loop and calls sys.exit. Everything below it
(resolution, dispatch, routing) only raises, so it stays testable.

Exit codes
- 0: main completed.
- 2: main raised a CommandLineError; the fault is printed without a traceback.
- 1: main raised anything else; the traceback is printed.

Typical usage
    from flagship import run_then_exit_if_main, run_command

    run_then_exit_if_main(__name__, lambda name, argv: run_command(name, command, argv))
"""
import asyncio
import os
import sys

from .argv import parse_argv
from .faults import CommandLineError, console
from .utils import Unset, settle

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


async def execute(main, name, argv, /):
    """
    Run `main(name, argv)` and map its outcome to an exit code.

    Nothing is re-raised and the process is left alone; the exit code is
    returned. KeyboardInterrupt and SystemExit are not intercepted.
    """
    try:
        await settle(main(name, argv))
    except CommandLineError as fault:
        console.print(fault)
        return EXIT_USAGE
    except Exception:
        console.print_exception()
        return EXIT_FAILURE
    return EXIT_SUCCESS


def _program():
    return os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "(unknown command)"


def start_if_main(module, main, /, tokens=Unset):
    """
    If `module` is "__main__" (pass __name__): call `main` and exit on failure.

    Parameters
    - module: the caller's __name__.
    - main: callable(name, argv), sync or async.
    - tokens: command-line tokens; sys.argv[1:] when omitted.

    Returns
    - None once main completed (the process is not terminated on success), or
      immediately when `module` is not the entrypoint.
    """
    if module != "__main__":
        return None
    name = _program()
    argv = parse_argv(sys.argv[1:] if tokens is Unset else tokens, script=name)
    if code := asyncio.run(execute(main, name, argv)):
        sys.exit(code)
    return None


def run_then_exit_if_main(module, main, /, tokens=Unset):
    """
    If `module` is "__main__": run `main` to completion, then exit.

    Suited to commands that run to completion; the exit code follows
    execute(). For processes that must outlive `main`, see start_if_main().
    """
    if module != "__main__":
        return None
    name = _program()
    argv = parse_argv(sys.argv[1:] if tokens is Unset else tokens, script=name)
    sys.exit(asyncio.run(execute(main, name, argv)))


__all__ = (
    "EXIT_SUCCESS",
    "EXIT_FAILURE",
    "EXIT_USAGE",
    "execute",
    "start_if_main",
    "run_then_exit_if_main",
)
