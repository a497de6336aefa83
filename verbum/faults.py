"""
Verbum faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault the package
  can raise, warn about, or attach to a validation issue.
- VerbException / VerbWarning: base types that carry message + options and know
  how to render themselves with rich.
- trigger(): central entry point to surface a fault (raise, warn, or print).

Policy
- Programmer errors (a missing instance, an unknown verb name, two verbs
  registered under one name) are raised.
- Data-quality problems (malformed raw values, unrepresentable values) never
  reach this module: the builder and the pre-fill resolver degrade silently.
- Declaration inconsistencies across fields are reported by the validation
  suite as issue strings tagged with a FaultCode, never raised.
"""
import copy
import inspect
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - instance / lookup errors (211xx)
      • INVALID_INSTANCE, UNKNOWN_VERB
    - declaration errors (212xx), raised or reported by the validation suite
      • DUPLICATE_VERB, MISSING_METADATA, DUPLICATE_SHORT_NAME,
        DUPLICATE_LONG_NAME, DUPLICATE_INDEX, NONZERO_ON_CREATION,
        UNCONSTRUCTIBLE_VERB, NOT_A_VERB
    - advisory warnings (221xx)
      • NULLABLE_REQUIRED
    """
    # --- instance / lookup errors (211xx) ---
    INVALID_INSTANCE     = 21101
    UNKNOWN_VERB         = 21102

    # --- declaration errors (212xx) ---
    DUPLICATE_VERB       = 21201
    MISSING_METADATA     = 21202
    DUPLICATE_SHORT_NAME = 21203
    DUPLICATE_LONG_NAME  = 21204
    DUPLICATE_INDEX      = 21205
    NONZERO_ON_CREATION  = 21206
    UNCONSTRUCTIBLE_VERB = 21207
    NOT_A_VERB           = 21208

    # --- advisory warnings (221xx) ---
    NULLABLE_REQUIRED    = 22101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _palette(defaults, /):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


def _render(fault, styles, kind, /):
    colorful = fault.options.get("colorful", True)
    fancy = fault.options.get("fancy", False)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment if colorful else Text(fragment.plain)
        return Text(str(fragment), styles[style] if colorful else "")

    header = Text.assemble(
        "[ ",
        text("verbum", "prog-name"),
        " — ",
        text(fault.code.normalize(), "code"),
        " | ",
        text(fault.title.title(), kind + "-title"),
        " ]"
    )
    message = text(fault.message, kind + "-message")
    hint = Text.assemble(text(" → ", "hint-arrow"), text(fault.hint, "hint")) if fault.hint else Text("")

    if fancy:
        return Panel(Group(message, hint), title=header, title_align="left")
    return Group(header, message, hint)


class VerbException(Exception):
    """
    Base error of the package.

    Subclasses declare a default `code`, `title` and `hint`; any of them can be
    overridden per instance through keyword options.
    """
    code = Unset
    title = "error"
    hint = ""

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)
        for name in ("code", "title", "hint"):
            if name in options:
                setattr(self, name, options[name])

    def __str__(self):
        return self.message if self.message is not Unset else self.title

    def __rich__(self):
        return _render(self, _palette({
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        }), "error")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidInstanceError(VerbException, TypeError):
    code = FaultCode.INVALID_INSTANCE
    title = "invalid instance"
    hint = "pass an instance of a class decorated with @verb(...)"


class UnknownVerbError(VerbException, LookupError):
    code = FaultCode.UNKNOWN_VERB
    title = "unknown verb"
    hint = "register the verb class before looking it up by name"


class DuplicateVerbError(VerbException, ValueError):
    code = FaultCode.DUPLICATE_VERB
    title = "duplicate verb"
    hint = "every verb name must be unique within a registry"


class VerbWarning(ABC, Warning):
    """
    Base warning of the package (advisory, never fatal).
    """
    code = Unset
    title = "warning"
    hint = ""

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)
        for name in ("code", "title", "hint"):
            if name in options:
                setattr(self, name, options[name])

    def __str__(self):
        return self.message if self.message is not Unset else self.title

    def __rich__(self):
        return _render(self, _palette({
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "warning-title": "bold #FFC2E0",
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        }), "warning")

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class NullableRequiredWarning(VerbWarning):
    code = FaultCode.NULLABLE_REQUIRED
    title = "required nullable field"
    hint = "required fields of a nullable kind can still be left unset"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace before triggering.
    - exceptions are raised and warnings go through warnings.warn, unless
      shell=True, in which case both are printed to stderr with rich.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "VerbException",
    "InvalidInstanceError",
    "UnknownVerbError",
    "DuplicateVerbError",
    "VerbWarning",
    "NullableRequiredWarning",
    "trigger",
)
