"""
Extremely basic validation system.

A validator is a pure predicate: it receives a value and answers True or False.
Validators never raise and never convert; conversion is the job of a flag's or
arg's `parse` hook. They carry no introspectable shape, so help output cannot
describe what a validator accepts.

Factories
- string():           isinstance(value, str)
- number():           int or float, but not bool
- boolean():          isinstance(value, bool)
- one_of(*options):   value == one of options
- optional(fn):       value is None, or fn(value)

For anything richer, wrap a real schema library in a plain predicate.
"""
from .utils import rename


def string():
    return rename(lambda value: isinstance(value, str), "string")


def number():
    # bool is an int subclass; a flag declared as a number must not accept --flag.
    return rename(lambda value: isinstance(value, int | float) and not isinstance(value, bool), "number")


def boolean():
    return rename(lambda value: isinstance(value, bool), "boolean")


def one_of(*options):
    """
    Accept only values equal to one of the given options.

    Membership is tested with equality against the finite option set, in order,
    so unhashable options are fine.
    """
    @rename("one_of")
    def validator(value):
        return any(value == option for option in options)

    return validator


def optional(validator, /):
    """
    Accept the absent sentinel (None) and delegate everything else to `validator`.
    """
    if not callable(validator):
        raise TypeError("optional() argument must be a validator")

    @rename("optional")
    def wrapper(value):
        if value is None:
            return True
        return bool(validator(value))

    return wrapper


__all__ = (
    "string",
    "number",
    "boolean",
    "one_of",
    "optional",
)
