"""
Flagship utilities (internal helpers, carefully exposed)

Scope
- Building blocks shared by the declaration, resolution and routing layers.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- settle(value)
  • Await a value when it is awaitable, return it unchanged otherwise. Every contract point that
    may be synchronous or deferred (defaults, parsers, prompts, handlers, loaders) goes through it.

- represent(value)
  • Stable, JSON-like rendering of user values for messages ("abc" → '"abc"', True → 'true').

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated callables for clean tracebacks and reprs.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr).

- SpecType
  • Metaclass for declarative records (flags, args, commands): typename, repr, rich repr and
    read-only properties for every name listed in __introspectable__.

- mglob(pattern)
  • Module globbing support: expands "pkg.**.commands.*" style patterns into importable module names.

Stability and contract
- Names not in __all__ are internal and may change without notice.
"""
import builtins
import functools
import importlib
import inspect
import json
import operator
import pkgutil
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel: a falsy singleton that cannot be subclassed.

    Declarations use it where None is a legitimate value, e.g. an optional
    flag whose default producer returns None.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value but you still
need to distinguish “no input” from “explicitly passed None”.
"""


def coalesce(object, default=None, /):
    """
    Resolve an internal Unset sentinel to a concrete default.

    Falsey values like None, 0, "", or [] are preserved as-is; only Unset is replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


async def settle(object, /):
    """
    Return the final value of a possibly-deferred result.

    Contract points (default producers, parsers, custom prompts, handlers and
    loaders) may return either a plain value or an awaitable. This awaits the
    latter and passes the former through, so callers can treat both shapes as
    one suspension point.
    """
    if inspect.isawaitable(object):
        return await object
    return object


def represent(object, /):
    """
    Render a user value for messages, JSON style.

    - Strings are quoted ("abc"), booleans are lowercased (true/false), None is null.
    - Containers are rendered inline; anything not JSON-serializable falls back to repr().
    """
    try:
        return json.dumps(object, default=repr, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(object)


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - @rename(name)
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Recursively copy container values so callers never hold the backing storage.

    - Sequence (non-string): a new list.
    - Mapping: a new dict with the same keys, processed values.
    - Set: a new set.
    - Anything else: returned as-is.
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return set(map(_immortalize, object))
    else:
        return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The property reads "_{name}" from the instance and hands out copies of
    containers, so a declaration cannot be mutated through its public API.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


class SpecType(type):
    """
    Metaclass for declarative, immutable records.

    Responsibilities
    - Derive __typename__ from the class name ("ArgsCommand" → "args-command") for messages.
    - Expose every name listed in __introspectable__ as a read-only property (see mirror()).
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.

    Conventions
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    - Instances are frozen once built: public attributes are properties, and
      assigning a new public attribute raises AttributeError.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        @rename("__setattr__")
        def __setattr__(self, name, value, /):
            # Only private backing fields may be written, and only while building.
            if not name.startswith("_"):
                raise AttributeError(f"{type(self).__typename__} is read-only")
            object.__setattr__(self, name, value)
        self.__setattr__ = __setattr__

        return self


@functools.cache
def _resolve_segment(segment):
    """
    translate one pattern segment into a regex snippet (dots are never matched).
      *  → zero or more non-dot chars
      ?  → exactly one non-dot char
    """
    return "".join({"*": r"[^.]*", "?": r"[^.]"}.get(char, re.escape(char)) for char in segment)


@functools.cache
def _compile_regex(pattern):
    """
    compile a module glob; a whole "**" segment spans zero or more segments.
    """
    head, *tail = pattern.split(".")
    body = _resolve_segment(head)
    for segment in tail:
        body += r"(?:\.\w+)*" if segment == "**" else r"\." + _resolve_segment(segment)
    return re.compile(body)


def mglob(source, /):
    """
    expand a dot-separated module glob into fully-qualified module names.

    rules
    - must start with at least one concrete segment (no wildcard-only prefix).
    - matches are case-sensitive and returned in sorted order.
    - without wildcards, returns [source] unchanged.

    examples
    - "app.commands.*"     → direct children of app.commands
    - "app.**.commands.*"  → children of any commands package under app
    """
    if not isinstance(source, str):
        raise TypeError("mglob() argument must be a string")
    elif not (source := source.strip()):
        raise ValueError("mglob() argument must be a non-empty string")

    if re.fullmatch(r"(?!\d)\w+(\.(?!\d)\w+)*", source):
        return [source]

    prefixes = []
    for segment in source.split("."):
        if not re.fullmatch(r"(?!\d)\w+", segment):
            break
        prefixes.append(segment)

    if not prefixes:
        raise ValueError("mglob() pattern must start with a concrete package segment")

    try:
        package = importlib.import_module(prefix := ".".join(prefixes))
    except ImportError:
        return []

    pattern = _compile_regex(source)
    matches = {prefix} if pattern.fullmatch(prefix) else set()
    for metadata in pkgutil.walk_packages(getattr(package, "__path__", ()), prefix + "."):
        if pattern.fullmatch(metadata.name):
            matches.add(metadata.name)
    return sorted(matches)


__all__ = (
    # Functions
    "coalesce",
    "settle",
    "represent",
    "rename",
    "mirror",
    "mglob",

    # Types
    "UnsetType",
    "SpecType",

    # Constants
    "Unset",
)
