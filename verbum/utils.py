"""
Verbum utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the field model, the verb layer, the builder
  and the validation suite.

Overview
- UnsetType / Unset
  • Singleton sentinel for “value not provided” that does not conflate with None.
  • Falsey, printable as "Unset", non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, keep legitimate falsey values.

- rename(callable, name) / @rename("name")
  • Stable __name__/__qualname__ on generated wrappers (clean tracebacks).

- mirror("attr")
  • Read-only property exposing a private backing field (self._attr), copying
    containers so the public view cannot mutate declaration state.

- kebab(identifier)
  • Canonical flag name for a field identifier: "noCache" / "no_cache" → "no-cache".

- mglob(pattern)
  • Expand "pkg.**.verbs" style module globs into importable module names
    (used by Registry.discover).

Quick examples
    >>> kebab("RemoveIntermediateContainers")
    'remove-intermediate-containers'
    >>> coalesce(Unset, ",")
    ','
"""
import builtins
import functools
import importlib
import pkgutil
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Used where None is a meaningful value (a field default of None means
    "no default", a nullable-boolean of None means "unset") but the API still
    needs to know whether the caller passed anything at all.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    None, 0, "" and [] are preserved as-is; only Unset is replaced.

    Examples
    - coalesce("tag", "fallback")  -> "tag"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator
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
    Recursively copy container values (strings and non-containers pass through).
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return frozenset(map(_immortalize, object))
    else:
        return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private attribute "_{name}".

    Containers are returned as fresh tuples/dicts/frozensets so callers can
    iterate them freely without touching the declaration they came from.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def kebab(identifier, /):
    """
    Derive the canonical long flag name of a field from its identifier.

    Rules
    - Leading/trailing underscores and hyphens are dropped (no "--" + "-x").
    - Every uppercase letter not at position 0, and not already preceded by
      a separator, starts a new hyphenated segment.
    - Underscores become hyphens; the result is lowercased.

    The output contains no uppercase letters or underscores, so applying
    kebab() twice yields the same string.

    Examples
    - kebab("NoCache")        -> "no-cache"
    - kebab("no_cache")       -> "no-cache"
    - kebab("buildArgs")      -> "build-args"
    - kebab("log-file")       -> "log-file"
    """
    if not isinstance(identifier, str):
        raise TypeError("kebab() argument must be a string")
    text = re.sub(r"(?<!^)(?<![-_])(?=[A-Z])", "-", identifier.strip("_-"))
    return text.replace("_", "-").lower()


_WILDCARDS = frozenset("*?")


@functools.cache
def _compile_glob(pattern, /):
    """
    Compile a dotted module glob into a regex.

    Inside a segment "*" matches any run of non-dot characters and "?" exactly
    one; a segment that is exactly "**" spans zero or more whole segments.
    """
    parts = []
    for index, segment in enumerate(pattern.split(".")):
        if segment == "**":
            parts.append(r"(?:\.[A-Za-z_]\w*)*")
            continue
        body = re.escape(segment).replace(r"\*", r"[^.]*").replace(r"\?", r"[^.]")
        parts.append(body if index == 0 else r"\." + body)
    return re.compile("".join(parts))


def mglob(source, /):
    """
    Expand a dot-separated module glob into fully-qualified module names.

    rules
    - the pattern must start with at least one concrete segment.
    - a pattern without wildcards is returned as-is (single module).
    - matches are returned sorted; an unimportable prefix yields [].

    examples
    - "hostapp.verbs"        → ["hostapp.verbs"]
    - "hostapp.verbs.*"      → direct children of hostapp.verbs
    - "hostapp.**.verbs"     → every "verbs" module below hostapp
    """
    if not isinstance(source, str):
        raise TypeError("mglob() argument must be a string")
    elif not (source := source.strip()):
        raise ValueError("mglob() argument must be a non-empty string")

    if re.fullmatch(r"(?!\d)\w+(\.(?!\d)\w+)*", source):
        return [source]

    prefixes = []
    for segment in source.split("."):
        if _WILDCARDS & set(segment) or not re.fullmatch(r"(?!\d)\w+", segment):
            break
        prefixes.append(segment)

    if not prefixes:
        raise ValueError("mglob() pattern must start with a concrete package segment")

    try:
        package = importlib.import_module(prefix := ".".join(prefixes))
    except ImportError:
        return []

    pattern = _compile_glob(source)
    matches = {prefix} if pattern.fullmatch(prefix) else set()

    if hasattr(package, "__path__"):
        for metadata in pkgutil.walk_packages(package.__path__, prefix + "."):
            if pattern.fullmatch(metadata.name):
                matches.add(metadata.name)

    return sorted(matches)


Unset = UnsetType()
"""
Internal sentinel for “not provided”. Distinct from None, falsey, singleton.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "kebab",
    "mglob",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
