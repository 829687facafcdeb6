"""
Flagship argument declarations.

Overview
- Specs
  • Flag[_T]: a named, optionally defaultable command-line option (--name=value).
  • Arg[_T]: a positional value, identified by its index and shown by its display
    name. Args have no default: a defaultable value belongs in a flag, so a
    missing arg is always prompted for (or reported when prompting is impossible).

- Helpers
  • create_flag_map / create_arg_array / create_arg: validate and freeze declarations.
  • create_choice_flag / create_choice_arg: one-of validation plus a pick-from-list prompt.
  • create_default_false_flag: a boolean flag defaulting to False.

Hooks (all optional except validate)
- validate(value) -> bool
  The resolved value must satisfy it, whatever path produced the value.
- default() -> T | Awaitable[T]                          (Flag only)
  Produces the value when the flag is not given. It must satisfy validate;
  otherwise resolution fails with InvalidDefaultError (a declaration bug).
- parse(raw) -> T | Awaitable[T]
  Converts raw input (str, int, float or bool). Raise, or return something that
  fails validate, when the input cannot be converted.
- prompt(PromptArgs) -> T | Awaitable[T]
  Replaces the question the framework would ask for a missing value.

Specs are immutable once built: every field is exposed through a read-only
property (see SpecType) and shared by every invocation of the command.

Quick example:
    >>> from flagship import Flag, validate
    >>> name = Flag("What name should we greet?", validate.string())
    >>> loud = Flag("Are we excited?", validate.boolean(), default=lambda: False)
"""
from collections.abc import Mapping, Sequence

from . import validate as validators
from .prompts import Question
from .utils import *


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the fields shared by Flag and Arg.

    Responsibilities
    - description: required string, trimmed. Multi-line descriptions are kept.
    - validate: required callable.
    - prompt/parse (and default, for flags): Unset or callable.

    Raises
    - TypeError: wrong field types.
    - ValueError: empty description after trimming.
    """
    if not isinstance(description := metadata["description"], str):
        raise TypeError(f"{cls.__typename__} 'description' must be a string")
    elif not (description := description.strip()):
        raise ValueError(f"{cls.__typename__} 'description' cannot be empty")
    metadata["description"] = description

    if not callable(metadata["validate"]):
        raise TypeError(f"{cls.__typename__} 'validate' must be a validator")

    for hook in ("default", "prompt", "parse"):
        if hook in metadata and metadata[hook] is not Unset and not callable(metadata[hook]):
            raise TypeError(f"{cls.__typename__} '{hook}' must be callable")


class Flag[_T](metaclass=SpecType):
    """
    Named command-line option specification.

    The flag's name is not stored on the flag: it is the key under which the flag
    is declared in a command's flag map, and the key looked up in the raw
    arguments.
    """

    __introspectable__ = (
        "description",
        "validate",
        "default",
        "prompt",
        "parse",
    )
    __displayable__ = (
        "description",
        "default",
    )

    def __new__(cls, description, validate, /, *, default=Unset, prompt=Unset, parse=Unset):
        metadata = {
            "description": description,
            "validate": validate,
            "default": default,
            "prompt": prompt,
            "parse": parse,
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def defaultable(self):
        """
        Whether a value is produced without the user when the flag is not given.
        """
        return self.default is not Unset

    @property
    def optional(self):
        """
        Whether the flag can be left out of a usage line (defaults or prompts).
        """
        return self.default is not Unset or self.prompt is not Unset


class Arg[_T](metaclass=SpecType):
    """
    Positional command-line argument specification.

    `name` is only a display name (usage lines, help tables, messages): args are
    matched by position.
    """

    __introspectable__ = (
        "name",
        "description",
        "validate",
        "prompt",
        "parse",
    )
    __displayable__ = (
        "name",
        "description",
    )

    def __new__(cls, name, description, validate, /, *, prompt=Unset, parse=Unset):
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} 'name' cannot be empty")

        metadata = {
            "name": name,
            "description": description,
            "validate": validate,
            "prompt": prompt,
            "parse": parse,
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self


def create_arg(name, description, validate, /, **hooks):
    return Arg(name, description, validate, **hooks)


def create_flag_map(flags, /):
    """
    Check a flag map ({name: Flag}) and return a read-only copy of it.

    Names are used verbatim as raw-argument keys: declare "dry-run" to accept
    --dry-run.
    """
    if not isinstance(flags, Mapping):
        raise TypeError("create_flag_map() argument must be a mapping of flags")
    for name, flag in flags.items():
        if not isinstance(name, str) or not name or name.startswith("-"):
            raise ValueError(f"flag name {name!r} must be a non-empty string without leading dashes")
        if not isinstance(flag, Flag):
            raise TypeError(f"flag {name!r} must be declared with Flag(...)")
    return dict(flags)


def create_arg_array(args, /):
    """
    Check an ordered sequence of Arg specs and return it as a tuple.
    """
    if not isinstance(args, Sequence) or isinstance(args, str):
        raise TypeError("create_arg_array() argument must be a sequence of args")
    for index, arg in enumerate(args):
        if not isinstance(arg, Arg):
            raise TypeError(f"arg {index + 1} must be declared with Arg(...)")
    return tuple(args)


def _choice_prompt(description, choices):
    @rename("prompt")
    async def prompt(args):
        # Keep the bare description: the choices are offered by the prompt itself.
        answers = await args.prompt([Question("value", description, choices=choices)])
        return answers["value"]

    return prompt


def _choice_description(description, choices):
    return "%s\nChoose from:\n%s" % (description.strip(), "\n".join(f"  {choice}" for choice in choices))


def create_choice_flag(description, choices, /):
    """
    Create a flag that must be one of `choices` and prompts with a pick-list.
    """
    if not (choices := tuple(choices)):
        raise ValueError("create_choice_flag() requires at least one choice")
    return Flag(
        _choice_description(description, choices),
        validators.one_of(*choices),
        prompt=_choice_prompt(description, choices),
    )


def create_choice_arg(name, description, choices, /):
    """
    Create a positional arg that must be one of `choices` and prompts with a pick-list.
    """
    if not (choices := tuple(choices)):
        raise ValueError("create_choice_arg() requires at least one choice")
    return Arg(
        name,
        _choice_description(description, choices),
        validators.one_of(*choices),
        prompt=_choice_prompt(description, choices),
    )


def create_default_false_flag(description, /, **overrides):
    """
    Shortcut to create a boolean flag that defaults to False.

    Any hook (validate, default, prompt, parse) can be overridden by keyword.
    """
    return Flag(
        description,
        overrides.pop("validate", validators.boolean()),
        **({"default": rename(lambda: False, "default")} | overrides),
    )


__all__ = (
    "Flag",
    "Arg",
    "create_arg",
    "create_flag_map",
    "create_arg_array",
    "create_choice_flag",
    "create_choice_arg",
    "create_default_false_flag",
)
