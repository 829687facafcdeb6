"""
The argument-resolution pipeline.

Turns raw arguments plus declarations into validated values, or into one
precise CommandLineError. Every step that may block (default producers,
parsers, prompts) is awaited; nothing runs concurrently.

Flags (resolve_flag)
1. given      → parse (if declared) → validate
2. defaulted  → default() → validate  (a failure here is a declaration bug)
3. otherwise  → prompt path

Flag maps (resolve_flag_map)
- Every undeclared flag is reported at once, before anything is resolved.
- Defaulted flags are resolved before the others, so a broken default
  surfaces before the user is made to answer a prompt for another flag.
- After the unknown-flag check, the first failure stops the resolution.

Prompt path (resolve_via_prompt)
- Non-interactive: MissingValueError.
- Interactive: the declared prompt hook, or a question built from the name
  and description. The answer is validated once more afterwards; a failure
  there means the prompter is broken (InvalidPromptResultError).

Positionals (resolve_arg, resolve_arg_array, resolve_rest)
- Declared args are matched by index: given → parse → validate, absent → prompt.
- Remaining tokens go through the rest spec, parse → validate only.
"""
from . import prompts
from .argv import given_flags, positionals
from .faults import *
from .utils import Unset, represent, settle


async def _resolve_given(name, spec, value):
    """
    parse then validate a value the user gave on the command line.
    """
    if spec.parse is not Unset:
        try:
            value = await settle(spec.parse(value))
        except Exception as error:
            raise UnparsableValueError(
                f"{name}: cannot parse {represent(value)}: {error}", value
            ) from error

    if not spec.validate(value):
        raise InvalidValueError(f"{name}: invalid value: {represent(value)}", value)

    return value


async def resolve_flag(name, flag, argv, /):
    """
    Resolve a single flag against raw arguments.

    Parameters
    - name: the flag's key (without dashes).
    - flag: its Flag spec.
    - argv: the raw-arguments mapping.
    """
    label = f"--{name}"

    if name in argv:
        return await _resolve_given(label, flag, argv[name])

    if flag.default is not Unset:
        value = await settle(flag.default())
        if not flag.validate(value):
            raise InvalidDefaultError(f"{label}: BUG: the default value was invalid: {represent(value)}", value)
        return value

    return await resolve_via_prompt(label, flag)


async def resolve_via_prompt(name, spec, /):
    """
    Obtain a missing value interactively, or fail when that is impossible.

    `name` is the display label used in the question and in messages
    ("--name", "arg 1 (file)").
    """
    if not prompts.interactive():
        raise MissingValueError(
            f"{name}: required but not given (and cannot prompt in non-interactive mode)", name
        )

    async def check(value):
        if spec.validate(value):
            return True
        return f"{name}: invalid value {represent(value)}, try again."

    question = prompts.Question(
        "value",
        f"{name}: {spec.description}",
        spec.parse if spec.parse is not Unset else prompts.default_parser,
        check,
    )

    if spec.prompt is not Unset:
        value = await settle(spec.prompt(prompts.PromptArgs(prompts.ask, question, prompts.console)))
    else:
        value = (await prompts.ask([question]))["value"]

    # The prompter validates as it goes; check once more rather than trust it.
    if not spec.validate(value):
        raise InvalidPromptResultError(f"{name}: prompting returned invalid value: {represent(value)}", value)

    return value


async def resolve_flag_map(flags, argv, /):
    """
    Resolve every declared flag; return {name: value} in declaration order.
    """
    unknown = [name for name in given_flags(argv) if name not in flags]
    if unknown:
        raise UnknownFlagError(
            "unknown flags given: %s" % ", ".join(f"--{name}" for name in unknown), unknown
        )

    results = {}

    # Defaults first: they should not fail, but if one does it is better
    # reported before the user is prompted for anything.
    for name, flag in flags.items():
        if flag.default is not Unset:
            results[name] = await resolve_flag(name, flag, argv)

    for name, flag in flags.items():
        if flag.default is Unset:
            results[name] = await resolve_flag(name, flag, argv)

    return {name: results[name] for name in flags}


async def resolve_arg(index, arg, tokens, /):
    """
    Resolve the positional arg declared at `index` (0-based) against `tokens`.
    """
    name = f"arg {index + 1} ({arg.name})"

    if index < len(tokens):
        return await _resolve_given(name, arg, tokens[index])

    return await resolve_via_prompt(name, arg)


async def resolve_arg_array(args, argv, /):
    """
    Resolve declared positional args, in order; return them as a tuple.

    Tokens beyond the declared args are left for resolve_rest().
    """
    tokens = positionals(argv)
    results = []
    for index, arg in enumerate(args):
        results.append(await resolve_arg(index, arg, tokens))
    return tuple(results)


async def resolve_rest(rest, tokens, /):
    """
    Resolve every remaining positional token against the rest spec.

    No defaulting and no prompting: an empty remainder is an empty list.
    """
    results = []
    for index, token in enumerate(tokens):
        results.append(await _resolve_given(f"rest arg {index + 1}", rest, token))
    return results


__all__ = (
    "resolve_flag",
    "resolve_via_prompt",
    "resolve_flag_map",
    "resolve_arg",
    "resolve_arg_array",
    "resolve_rest",
)
