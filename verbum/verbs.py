"""
Verbum verb layer: declare verbs, resolve their fields, and hook host policies.

What this module provides
- @verb(name, help=...): class decorator that attaches a Verb descriptor as
  cls.__verb__. Fields are resolved once, at decoration time.
- Verb: the descriptor (name, help, ordered options, positional values) plus
  helpers to create, snapshot, order and render instances.
- Contracts:
  • DefaultSetter: verbs that fill host defaults into a fresh instance.
  • PostAction: verbs that react to the outcome of a command the host ran.
  Contract classes may declare fields of their own; every verb adopting the
  contract inherits them after its own fields.
- apply_defaults(instance, hook=None): pure default-value policy.
- run_post_action(instance, exit_code, output, error): post-action dispatch.
- Order: display orderings for front-ends (the builder ignores them).

Field resolution
- The MRO is walked from the decorated class outward, so the verb's own
  fields come first, then those of base verbs and contracts.
- An identifier is kept once; the most-derived declaration wins.

Quick start
    from verbum import verb, Option, Kind, build_command

    @verb("commit", help="Record changes to the repository")
    class Commit:
        message = Option(Kind.STRING, "-m", "--message", required=True)
        amend = Option(Kind.BOOLEAN)

    commit = Commit.__verb__.new(message="fix typo", amend=True)
    build_command(commit)  # 'commit --message "fix typo" --amend'
"""
import builtins
import copy
import re
from abc import ABC, abstractmethod
from collections import defaultdict
from enum import Enum

from rich.console import Group
from rich.table import Table
from rich.text import Text

from .faults import *
from .fields import Field
from .utils import *


class Order(Enum):
    """
    Display orderings of a verb's options.
    """
    DECLARATION = "declaration"
    BY_NAME = "by-name"
    BY_KIND_THEN_NAME = "by-kind-then-name"
    REQUIRED_FIRST = "required-first"
    REQUIRED_FIRST_THEN_NAME = "required-first-then-name"
    REQUIRED_FIRST_THEN_KIND = "required-first-then-kind"


def collect(cls, /):
    """
    Resolve the fields of a class: own fields first, then inherited ones,
    one entry per identifier.
    """
    if not isinstance(cls, type):
        raise TypeError("collect() argument must be a class")
    fields = {}
    for klass in cls.__mro__:
        for name, object in vars(klass).items():
            if isinstance(object, Field) and name not in fields:
                fields[name] = object
    return tuple(fields.values())


class Verb:
    """
    Descriptor of a named subcommand.

    Attributes
    - name: first emitted token and registry/pre-fill lookup key.
    - help: short description (or None).
    - type: the decorated class; calling it yields a zero-valued instance.
    - fields: every field in resolution order.
    - options: the named fields in resolution order (serialization order).
    - values: the positional fields, ascending by index.
    """

    name = mirror("name")
    help = mirror("help")
    type = mirror("type")
    fields = mirror("fields")
    options = mirror("options")
    values = mirror("values")

    def __init__(self, type, name, /, help=Unset):
        if not isinstance(type, builtins.type):
            raise TypeError("verb 'type' must be a class")
        if not isinstance(name, str):
            raise TypeError("verb 'name' must be a string")
        elif not re.fullmatch(r"[^\W_](-?[^\W_]+)*", name := name.strip()):
            raise ValueError("verb 'name' must be a shell-style word (letters, digits and single hyphens)")
        if not isinstance(help, str | Text | Unset):
            raise TypeError("verb 'help' must be a string")
        elif isinstance(help, str) and not (help := help.strip()):
            raise ValueError("verb 'help' cannot be empty")

        self._type = type
        self._name = name
        self._help = coalesce(help)
        self._fields = collect(type)
        self._options = tuple(field for field in self._fields if not field.positional)
        self._values = tuple(sorted((field for field in self._fields if field.positional), key=lambda x: x.index))
        self._identifiers = {field.identifier: field for field in self._fields}

    def field(self, identifier, /):
        """
        Return the field bound to `identifier` (KeyError when unknown).
        """
        return self._identifiers[identifier]

    def option(self, flag, /):
        """
        Return the option matching a flag token ("--tag", "-t", or "tag"),
        or None. Used when reading tokens back into raw values.
        """
        if flag.startswith("--"):
            flag = flag[2:]
            return next((option for option in self._options if option.long == flag), None)
        if flag.startswith("-"):
            flag = flag[1:]
            return next((option for option in self._options if option.short == flag), None)
        return next((option for option in self._options if option.long == flag), None)

    def new(self, /, **values):
        """
        Construct a zero-valued instance and assign the given field values.
        """
        instance = self._type()
        for identifier, value in values.items():
            if identifier not in self._identifiers:
                raise TypeError(f"verb {self._name!r} has no field {identifier!r}")
            setattr(instance, identifier, value)
        return instance

    def snapshot(self, instance, /):
        """
        Map every field identifier to the instance's current value.
        """
        return {field.identifier: getattr(instance, field.identifier) for field in self._fields}

    def sorted(self, order=Order.DECLARATION, /):
        """
        Return the options in a display order.

        BY_NAME sorts by long name; BY_KIND_THEN_NAME groups booleans, enums,
        integers, floats, strings, lists of enums and lists of strings.
        Every sort is stable, so ties keep declaration order.
        """
        if not isinstance(order, Order):
            raise TypeError("sorted() argument must be an Order member")
        options = list(self._options)
        match order:
            case Order.DECLARATION:
                return tuple(options)
            case Order.BY_NAME:
                key = lambda x: x.long
            case Order.BY_KIND_THEN_NAME:
                key = lambda x: (x.kind.rank, x.long)
            case Order.REQUIRED_FIRST:
                key = lambda x: not x.required
            case Order.REQUIRED_FIRST_THEN_NAME:
                key = lambda x: (not x.required, x.long)
            case Order.REQUIRED_FIRST_THEN_KIND:
                key = lambda x: (not x.required, x.kind.rank, x.long)
        return tuple(sorted(options, key=key))

    def __repr__(self):
        return f"verb(name={self._name!r}, help={self._help!r}, fields={[x.identifier for x in self._fields]!r})"

    def __rich_repr__(self):
        yield "name", self._name
        yield "help", self._help
        yield "options", self.options
        yield "values", self.values

    def __rich__(self):
        """
        Render a help table: one row per option, then positional values.

        Palette keys (override through __styles__ in __main__)
        - verb-name, verb-help, option-name, short-name, value-name,
          kind, required, default, help
        """
        styles = defaultdict(str, {
            "verb-name": "bold #FF4D94",
            "verb-help": "italic #A3A3A3",
            "option-name": "bold #00E6FF",
            "short-name": "#36C5F0",
            "value-name": "bold #FFD600",
            "kind": "#9CA3AF",
            "required": "bold #EF4444",
            "default": "#22C55E",
            "help": "#D1D5DB",
        } | getattr(__import__("__main__"), "__styles__", {}))

        table = Table(box=None, show_header=True, pad_edge=False)
        table.add_column("name")
        table.add_column("kind")
        table.add_column("default")
        table.add_column("help")

        for option in self._options:
            name = Text.assemble(
                (option.flag, styles["option-name"]),
                *((", ", ""), ("-" + option.short, styles["short-name"])) if option.short else (),
            )
            table.add_row(
                name,
                Text(option.kind.value, styles["kind"]),
                Text("" if option.default is None else str(option.default), styles["default"]),
                Text.assemble(("* " if option.required else "", styles["required"]), (str(option.help or ""), styles["help"])),
            )
        for value in self._values:
            table.add_row(
                Text(f"<{value.key}>", styles["value-name"]),
                Text(value.kind.value, styles["kind"]),
                Text("" if value.default is None else str(value.default), styles["default"]),
                Text.assemble(("* " if value.required else "", styles["required"]), (str(value.help or ""), styles["help"])),
            )

        header = Text.assemble((self._name, styles["verb-name"]), ("  " + (self._help or ""), styles["verb-help"]))
        return Group(header, table)


def verb(name, /, help=Unset):
    """
    Class decorator declaring a verb.

    Usage
        @verb("add", help="Add file contents to the index")
        class Add:
            files = Option(Kind.LIST_OF_STRING, required=True)

    Behavior
    - Builds a Verb over the class and stores it as cls.__verb__.
    - Enforces single application per class (subclasses of a verb must be
      decorated with their own name to become verbs themselves).
    """

    @rename("verb")
    def wrapper(cls, /):
        if not isinstance(cls, type):
            raise TypeError("@verb() must be applied to a class")
        if "__verb__" in vars(cls):
            raise TypeError("@verb() must be applied only once")
        cls.__verb__ = Verb(cls, name, help)
        return cls

    return wrapper


def getverb(object, /):
    """
    Resolve the Verb behind a descriptor, a verb class, or a verb instance.

    Returns None when the object carries no verb of its own (an undecorated
    subclass of a verb does not count).
    """
    if isinstance(object, Verb):
        return object
    cls = object if isinstance(object, type) else type(object)
    return vars(cls).get("__verb__")


class DefaultSetter(ABC):
    """
    Contract: the verb fills defaults into a freshly constructed instance.
    """

    @abstractmethod
    def update_defaults(self):
        raise NotImplementedError


class PostAction(ABC):
    """
    Contract: the verb reacts to the outcome of the command built from it.

    The host runs the command; verbum only dispatches the outcome.
    """

    @abstractmethod
    def post_action(self, exit_code, output, error):
        raise NotImplementedError


def apply_defaults(instance, hook=None, /):
    """
    Return a copy of `instance` with host defaults applied.

    Steps
    - deep-copy the instance (the input is never mutated);
    - call update_defaults() when the verb implements DefaultSetter;
    - call hook(copy) when a host hook is given.
    """
    if instance is None or getverb(instance) is None:
        trigger(InvalidInstanceError("apply_defaults() argument must be a verb instance"))
    if hook is not None and not callable(hook):
        raise TypeError("apply_defaults() hook must be callable")
    result = copy.deepcopy(instance)
    if isinstance(result, DefaultSetter):
        result.update_defaults()
    if hook is not None:
        hook(result)
    return result


def run_post_action(instance, exit_code, output="", error="", /):
    """
    Dispatch a command outcome to the verb's post_action().

    Returns True when the verb implements PostAction, False otherwise.
    """
    if instance is None:
        trigger(InvalidInstanceError("run_post_action() argument must be a verb instance"))
    if isinstance(exit_code, bool) or not isinstance(exit_code, int):
        raise TypeError("run_post_action() 'exit_code' must be an integer")
    if not isinstance(instance, PostAction):
        return False
    instance.post_action(exit_code, output, error)
    return True


__all__ = (
    # Classes
    "Verb",
    "Order",
    "DefaultSetter",
    "PostAction",

    # Decorators and functions
    "verb",
    "getverb",
    "collect",
    "apply_defaults",
    "run_post_action",
)
