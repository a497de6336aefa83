r"""
Verbum field specifications.

Overview
- Kind: closed set of value shapes that drive serialization and pre-fill.
- PathType: descriptive hint for string fields holding filesystem paths.
- Option: named field, serialized as "--long-name [value]".
- Value: positional field, serialized bare after every option, ordered by index.

Both field specs are data descriptors. Declared on a verb class they learn
their identifier through __set_name__; on instances they read back the stored
value or, when nothing was assigned, the zero of their kind.

    >>> from verbum import verb, Option, Value, Kind
    >>> @verb("build")
    ... class Build:
    ...     tags = Option(Kind.LIST_OF_STRING, "-t", "--tag")
    ...     no_cache = Option(Kind.BOOLEAN)
    ...     context = Value(0, default=".")
    >>> Build.no_cache.long
    'no-cache'
    >>> Build().no_cache
    False

Metadata (sanitized on construction)
- Shared (Option and Value)
  • kind: Kind member (required).
  • required: bool, validation/hinting only.
  • default: any value; Unset/None means "no default".
  • help: Unset | str | Text, trimmed, non-empty when provided.
  • choices: Unset | Enum subclass, only for enum kinds.
  • path / filter: PathType hint and a file-dialog style filter string.
  • separator: one character used to join/split multi-valued strings.
- Option only
  • names: at most one short alias ("-t") and one long name ("--tag").
    The long name falls back to kebab(identifier).
- Value only
  • index: non-negative int, position among positional fields.

Validation highlights
- Short names must match r"-[^\W_]"; long names r"--[^\W\d_](-?[^\W_]+)*".
- Duplicated names and two names of the same form are rejected.
- Cross-field problems (two fields sharing a long name, ...) are *not* rejected
  here; they are reported by verbum.validation.
"""
import functools
import operator
import re
from enum import Enum, EnumType

from rich.text import Text

from .utils import *


class Kind(Enum):
    """
    Value shape of a field.

    The member value is the canonical kind name used in messages and help.
    """
    BOOLEAN = "boolean"
    NULLABLE_BOOLEAN = "nullable-boolean"
    INTEGER = "integer"
    NULLABLE_INTEGER = "nullable-integer"
    FLOATING_POINT = "floating-point"
    NULLABLE_FLOATING_POINT = "nullable-floating-point"
    STRING = "string"
    ENUM = "enum"
    NULLABLE_ENUM = "nullable-enum"
    LIST_OF_STRING = "list-of-string"
    LIST_OF_ENUM = "list-of-enum"
    NULLABLE_LIST_OF_ENUM = "nullable-list-of-enum"

    @property
    def zero(self):
        """
        Value held by a freshly constructed instance.
        """
        match self:
            case Kind.BOOLEAN:
                return False
            case Kind.INTEGER:
                return 0
            case Kind.FLOATING_POINT:
                return 0.0
            case _:
                return None

    @property
    def nullable(self):
        return self in (
            Kind.NULLABLE_BOOLEAN,
            Kind.NULLABLE_INTEGER,
            Kind.NULLABLE_FLOATING_POINT,
            Kind.NULLABLE_ENUM,
            Kind.NULLABLE_LIST_OF_ENUM,
        )

    @property
    def boolean(self):
        return self in (Kind.BOOLEAN, Kind.NULLABLE_BOOLEAN)

    @property
    def numeric(self):
        return self in (
            Kind.INTEGER,
            Kind.NULLABLE_INTEGER,
            Kind.FLOATING_POINT,
            Kind.NULLABLE_FLOATING_POINT,
        )

    @property
    def enumerated(self):
        return self in (Kind.ENUM, Kind.NULLABLE_ENUM, Kind.LIST_OF_ENUM, Kind.NULLABLE_LIST_OF_ENUM)

    @property
    def multiple(self):
        return self in (Kind.LIST_OF_STRING, Kind.LIST_OF_ENUM, Kind.NULLABLE_LIST_OF_ENUM)

    @property
    def rank(self):
        """
        Grouping used by Order.BY_KIND_THEN_NAME: booleans, enums, integers,
        floating points, strings, lists of enums, lists of strings.
        """
        match self:
            case Kind.BOOLEAN | Kind.NULLABLE_BOOLEAN:
                return 1
            case Kind.ENUM | Kind.NULLABLE_ENUM:
                return 2
            case Kind.INTEGER | Kind.NULLABLE_INTEGER:
                return 3
            case Kind.FLOATING_POINT | Kind.NULLABLE_FLOATING_POINT:
                return 4
            case Kind.STRING:
                return 5
            case Kind.LIST_OF_ENUM | Kind.NULLABLE_LIST_OF_ENUM:
                return 6
            case _:
                return 7


class PathType(Enum):
    """
    Kind of filesystem path a string field expects (descriptive only).
    """
    ANY = "any"
    FILE = "file"
    DIRECTORY = "directory"


class FieldType(type):
    """
    Metaclass that turns field specs into introspectable descriptors.

    Responsibilities
    - Expose the names listed in __introspectable__ as read-only properties
      backed by "_{name}" attributes (see mirror()).
    - Derive __typename__ from the class name ("Option" → "option") for
      messages.
    - Provide stable __repr__/__rich_repr__ implementations.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": kebab(name),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
                if name not in namespace
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
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate metadata shared by Option and Value.

    Mutates `metadata` in place.

    Raises
    - TypeError: wrong types (kind, help, choices, path, filter, separator).
    - ValueError: empty strings after trimming, multi-character separators.
    """
    if not isinstance(kind := metadata["kind"], Kind):
        raise TypeError(f"{cls.__typename__} 'kind' must be a Kind member")

    if not isinstance(help := metadata["help"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'help' must be a string")
    elif isinstance(help, str) and not (help := help.strip()):
        raise ValueError(f"{cls.__typename__} 'help' cannot be empty")
    metadata["help"] = coalesce(help)

    if not isinstance(choices := metadata["choices"], EnumType | Unset):
        raise TypeError(f"{cls.__typename__} 'choices' must be an enum type")
    elif choices is not Unset and not kind.enumerated:
        raise TypeError(f"{cls.__typename__} 'choices' requires an enum kind, not {kind.value!r}")
    metadata["choices"] = coalesce(choices)

    if not isinstance(path := metadata["path"], PathType | Unset):
        raise TypeError(f"{cls.__typename__} 'path' must be a PathType member")
    metadata["path"] = coalesce(path)

    if not isinstance(filter := metadata["filter"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'filter' must be a string")
    elif isinstance(filter, str) and not (filter := filter.strip()):
        raise ValueError(f"{cls.__typename__} 'filter' cannot be empty")
    # File dialogs need a filter; "All Files" is the conventional fallback.
    metadata["filter"] = coalesce(filter, "All Files|*.*" if path else None)

    if not isinstance(separator := metadata["separator"], str):
        raise TypeError(f"{cls.__typename__} 'separator' must be a string")
    elif len(separator) != 1:
        raise ValueError(f"{cls.__typename__} 'separator' must be a single character")

    metadata["default"] = coalesce(metadata["default"])


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate the names of an Option and split them into short/long.

    Accepted forms
    - short: "-t" (one letter or digit)
    - long:  "--tag", "--build-arg" (Unicode letters allowed, no underscores)

    Stores the bare names (without dashes) under 'short' and 'long'.
    """
    short = long = Unset
    seen = set()

    for name in metadata.pop("names"):
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif name in seen:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        seen.add(name)

        if re.fullmatch(r"-[^\W_]", name):
            if short is not Unset:
                raise ValueError(f"{cls.__typename__} accepts a single short name")
            short = name[1:]
        elif re.fullmatch(r"--[^\W\d_](-?[^\W_]+)*", name):
            if long is not Unset:
                raise ValueError(f"{cls.__typename__} accepts a single long name")
            long = name[2:]
        else:
            raise ValueError(f"{cls.__typename__} names must be valid shell-style option names (unicodes are allowed)")

    metadata["short"] = short
    metadata["long"] = long


def _sanitize_positional_metadata(cls, metadata, /):
    """
    Internal: validate the index of a Value.
    """
    if isinstance(index := metadata["index"], bool) or not isinstance(index, int):
        raise TypeError(f"{cls.__typename__} 'index' must be an integer")
    elif index < 0:
        raise ValueError(f"{cls.__typename__} 'index' must be a non-negative integer")


class Field(metaclass=FieldType):
    """
    Descriptor behavior shared by Option and Value.

    Storage lives in the owning instance's __dict__ under the identifier; a
    missing entry reads as the kind's zero, so a fresh instance is all-zero
    unless its own __init__ assigns something.
    """

    def __set_name__(self, owner, name):
        if self._identifier is not Unset and self._identifier != name:
            raise TypeError(
                f"{type(self).__typename__} already bound as {self._identifier!r}, cannot rebind as {name!r}"
            )
        self._identifier = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return instance.__dict__.get(self._identifier, self._kind.zero)

    def __set__(self, instance, value):
        instance.__dict__[self._identifier] = value

    def __delete__(self, instance):
        instance.__dict__.pop(self._identifier, None)

    @property
    def identifier(self):
        """
        Attribute name on the verb class (None until bound).
        """
        return coalesce(self._identifier)

    @property
    def positional(self):
        return False


class Option(Field):
    """
    Named field specification.

    Serialization always uses the long name ("--" + long); the short alias is
    descriptive metadata for help output and token parsing.

    Parameters
    - kind: Kind
      Value shape; selects the serialization and pre-fill branch.
    - names: zero or more str
      "-x" short alias and/or "--long-name". Without a long name the flag is
      derived from the identifier with kebab().
    - required: bool
      Hint for front-ends and the validation suite; never affects output.
    - default: Any
      Value omitted from output unless defaults are requested.
    - separator: str
      Single character joining list items ("," by default).
    - help: Unset | str | Text
      Short description.
    - choices: Unset | Enum subclass
      Members accepted by enum kinds (used by pre-fill and help).
    - path, filter:
      PathType hint and dialog filter for path-valued strings.
    """

    __introspectable__ = (
        "kind",
        "short",
        "long",
        "required",
        "default",
        "separator",
        "help",
        "choices",
        "path",
        "filter",
    )

    def __init__(
            self,
            kind,
            /,
            *names,
            required=False,
            default=Unset,
            separator=",",
            help=Unset,
            choices=Unset,
            path=Unset,
            filter=Unset,
    ):
        metadata = {
            "kind": kind,
            "names": names,
            "required": bool(required),
            "default": default,
            "separator": separator,
            "help": help,
            "choices": choices,
            "path": path,
            "filter": filter,
        }
        _sanitize_metadata(type(self), metadata)
        _sanitize_named_metadata(type(self), metadata)

        self._identifier = Unset
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def long(self):
        """
        Explicit long name, or kebab(identifier) when none was declared.
        """
        if self._long is not Unset:
            return self._long
        if self._identifier is Unset:
            return None
        return kebab(self._identifier)

    @property
    def short(self):
        return coalesce(self._short)

    @property
    def flag(self):
        """
        Token emitted for this option ("--" + long).
        """
        return None if self.long is None else "--" + self.long

    @property
    def key(self):
        """
        Pre-fill lookup key.
        """
        return self.long

    def __option__(self):
        """
        Introspection hook: identify this spec as an Option.
        """
        return self


class Value(Field):
    """
    Positional field specification.

    Positional values are emitted after every option, ordered by index, and
    never carry a flag. Their pre-fill key is kebab(identifier).

    Parameters
    - index: int
      Position among the verb's positional fields (0-based, unique per verb).
    - kind: Kind
      Value shape (STRING by default).
    - required, default, separator, help, choices, path, filter:
      as for Option.
    """

    __introspectable__ = (
        "index",
        "kind",
        "required",
        "default",
        "separator",
        "help",
        "choices",
        "path",
        "filter",
    )

    def __init__(
            self,
            index,
            /,
            kind=Kind.STRING,
            *,
            required=False,
            default=Unset,
            separator=",",
            help=Unset,
            choices=Unset,
            path=Unset,
            filter=Unset,
    ):
        metadata = {
            "index": index,
            "kind": kind,
            "required": bool(required),
            "default": default,
            "separator": separator,
            "help": help,
            "choices": choices,
            "path": path,
            "filter": filter,
        }
        _sanitize_metadata(type(self), metadata)
        _sanitize_positional_metadata(type(self), metadata)

        self._identifier = Unset
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def positional(self):
        return True

    @property
    def key(self):
        """
        Pre-fill lookup key (kebab form of the identifier).
        """
        return None if self._identifier is Unset else kebab(self._identifier)

    def __value__(self):
        """
        Introspection hook: identify this spec as a Value.
        """
        return self


__all__ = (
    # Enumerations
    "Kind",
    "PathType",

    # Classes (specifications)
    "Field",
    "Option",
    "Value",
)

# Not part of the public API.
del FieldType
