"""
Verbum registry: the host-side table of verb descriptors, keyed by name.

    registry = Registry(Build, Run)
    registry.discover("hostapp.**.verbs")
    instance = registry.parse('build --tag a:latest --no-cache')

Name-driven entry points
- lookup(name) -> Verb (UnknownVerbError when missing)
- prefill(name, raw) -> instance
- parse(command) -> instance (split + parse_flags + prefill)
"""
import importlib
import inspect
from collections.abc import Iterable

from .builder import parse_flags, split
from .faults import *
from .resolver import prefill
from .utils import *
from .verbs import getverb


class Registry:
    """
    Ordered mapping of verb name → Verb.

    Iteration yields the descriptors in registration order.
    """

    def __init__(self, *verbs):
        self._verbs = {}
        for object in verbs:
            self.register(object)

    def register(self, object, /):
        """
        Add a verb (descriptor or decorated class) and return its descriptor.

        Raises
        - TypeError: object is not a verb.
        - DuplicateVerbError: another verb already uses the same name.
        """
        if (verb := getverb(object)) is None:
            raise TypeError("register() argument must be a verb or a verb class")
        if (other := self._verbs.get(verb.name)) is not None:
            if other is verb:
                return verb
            trigger(DuplicateVerbError(f"verb {verb.name!r} is already registered by {other.type.__qualname__}"))
        self._verbs[verb.name] = verb
        return verb

    def lookup(self, name, /):
        """
        Return the verb registered under `name`.

        Raises
        - UnknownVerbError: no verb uses that name.
        """
        if not isinstance(name, str):
            raise TypeError("lookup() argument must be a string")
        if (verb := self._verbs.get(name.strip())) is None:
            trigger(UnknownVerbError(f"unknown verb {name!r}"))
        return verb

    def discover(self, source, /):
        """
        Import every module matched by a module glob and register the verb
        classes they define.

        Only classes carrying their own __verb__ and defined in the scanned
        module count, so re-exported verbs are not registered twice.

        Returns
        - list[Verb]: the descriptors added by this call.

        Raises
        - TypeError: source is not a string, or a matched module fails to import.
        - DuplicateVerbError: a discovered verb reuses a registered name.
        """
        if not isinstance(source, str):
            raise TypeError("discover() argument must be a string")

        def imp(module):
            try:
                return importlib.import_module(module)
            except ImportError:
                raise TypeError(f"unable to import module {module!r}")

        added = []
        for module in map(imp, mglob(source)):
            for name, object in inspect.getmembers(module, inspect.isclass):
                if object.__module__ != module.__name__ or (verb := getverb(object)) is None:
                    continue
                if verb.name not in self._verbs:
                    added.append(verb)
                self.register(verb)
        return added

    def prefill(self, name, raw, /):
        """
        Pre-fill a fresh instance of the verb registered under `name`.
        """
        return prefill(self.lookup(name), raw)

    def parse(self, command, /):
        """
        Read a command line (str, or a token list as build_arguments returns
        it) back into a verb instance.

        The first token selects the verb; the remaining tokens are read with
        parse_flags and resolved with prefill.
        """
        if isinstance(command, str):
            head = split(command)[:1]
        elif isinstance(command, Iterable):
            command = list(command)
            head = command[:1]
        else:
            raise TypeError("parse() argument must be a string or an iterable of strings")
        if not head:
            raise ValueError("parse() argument must contain a verb name")
        # parse_flags unquotes the raw tokens itself.
        verb = self.lookup(head[0])
        return prefill(verb, parse_flags(command, verb))

    def __iter__(self):
        return iter(tuple(self._verbs.values()))

    def __len__(self):
        return len(self._verbs)

    def __contains__(self, object):
        if isinstance(object, str):
            return object in self._verbs
        return (verb := getverb(object)) is not None and self._verbs.get(verb.name) is verb

    def __repr__(self):
        return f"registry({", ".join(map(repr, self._verbs))})"

    def __rich_repr__(self):
        yield from self._verbs.values()


__all__ = (
    "Registry",
)
