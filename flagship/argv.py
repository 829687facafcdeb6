r"""
Raw arguments: the already-tokenized input consumed by the resolution pipeline.

Shape
- A mapping with the positional tokens, in order, under the reserved key "_"
  (POSITIONALS), the invoked script path under "$0" (SCRIPT), and every flag as
  a top-level key whose value is a str, int, float or bool.

    {"_": ["build", "src"], "$0": "tool", "jobs": 4, "verbose": True}

- The pipeline only reads this mapping; it never mutates it.

Tokenizer (parse_argv)
- "--name=value"  → {"name": value}     (numeric literals become int/float)
- "--name"        → {"name": True}
- "--no-name"     → {"name": False}
- "-abc"          → {"a": True, "b": True, "c": True}
- "-n=value"      → {"n": value}
- "--"            → every following token is positional, verbatim; those
                    tokens are also listed under "--" (TERMINATED), so a
                    router can tell them apart from the ones it may re-read
- anything else   → appended to "_" as a string
- a repeated flag keeps its last value.

Spaced values ("--name value") are deliberately not supported: without knowing
which flags are boolean, "value" would be ambiguous. Use "--name=value".
"""
import re
import shlex
from collections.abc import Iterable, Mapping

from .utils import Unset

POSITIONALS = "_"
SCRIPT = "$0"
TERMINATED = "--"
RESERVED = frozenset({POSITIONALS, SCRIPT, TERMINATED})

# Numeric literals, hexadecimal included.
_NUMBER = re.compile(r"0x[0-9a-f]+|[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:e[-+]?\d+)?", re.IGNORECASE)


def is_number(value, /):
    """
    tell whether a value is a number or a strict numeric literal.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int | float):
        return True
    return isinstance(value, str) and _NUMBER.fullmatch(value.strip()) is not None


def to_number(text, /):
    """
    convert a strict numeric literal into an int or a float.
    """
    text = text.strip()
    if text[:2].lower() == "0x":
        return int(text, 16)
    try:
        return int(text)
    except ValueError:
        return float(text)


def positionals(argv, /):
    """
    the positional tokens of a raw-arguments mapping (always a fresh list).
    """
    return list(argv.get(POSITIONALS, ()))


def given_flags(argv, /):
    """
    the flag names present in a raw-arguments mapping, reserved keys excluded.
    """
    return [name for name in argv if name not in RESERVED]


def parse_argv(tokens=(), /, *, script=Unset):
    """
    Tokenize command-line tokens into a raw-arguments mapping.

    Parameters
    - tokens: str | Iterable[str]
      • str: a shell-like string, split with shlex.split.
      • Iterable[str]: pre-tokenized sequence (e.g. sys.argv[1:]).
    - script: str (keyword-only)
      Stored under "$0" when given.

    Returns
    - dict: a fresh raw-arguments mapping (see module docstring).
    """
    if isinstance(tokens, str):
        tokens = shlex.split(tokens)
    elif not isinstance(tokens, Iterable):
        raise TypeError("parse_argv() argument must be a string or an iterable of strings")

    argv = {POSITIONALS: []}
    if script is not Unset:
        argv[SCRIPT] = script

    terminated = False
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("parse_argv() argument must be a string or an iterable of strings")
        if terminated:
            argv[POSITIONALS].append(token)
            argv[TERMINATED].append(token)
        elif token == "-" or not token.startswith("-"):
            argv[POSITIONALS].append(token)
        elif token == "--":
            terminated = True
            argv[TERMINATED] = []
        elif token.startswith("--"):
            name, equal, value = token[2:].partition("=")
            if equal:
                argv[name] = to_number(value) if is_number(value) else value
            elif name.startswith("no-") and len(name) > 3:
                argv[name[3:]] = False
            else:
                argv[name] = True
        else:
            letters, equal, value = token[1:].partition("=")
            if not letters:
                argv[POSITIONALS].append(token)
                continue
            if is_number(token) and not equal:
                # "-3" is a negative number, not three flags.
                argv[POSITIONALS].append(token)
                continue
            for letter in letters[:-1]:
                argv[letter] = True
            if equal:
                argv[letters[-1]] = to_number(value) if is_number(value) else value
            else:
                argv[letters[-1]] = True
    return argv


def merge(parent, child, /):
    """
    Overlay a child raw-arguments mapping onto a parent one.

    Flags present in either are kept (the child wins on conflict); the
    positional list and the terminated tokens are the child's. Neither input
    is modified.
    """
    if not isinstance(parent, Mapping) or not isinstance(child, Mapping):
        raise TypeError("merge() arguments must be raw-arguments mappings")
    merged = dict(parent) | dict(child) | {POSITIONALS: positionals(child)}
    if TERMINATED not in child:
        merged.pop(TERMINATED, None)
    return merged


__all__ = (
    "POSITIONALS",
    "SCRIPT",
    "TERMINATED",
    "RESERVED",
    "is_number",
    "to_number",
    "positionals",
    "given_flags",
    "parse_argv",
    "merge",
)
