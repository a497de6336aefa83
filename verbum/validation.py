"""
Verbum validation suite: offline consistency checks over verb declarations.

Every check takes verbs (an iterable of verb classes or Verb descriptors, a
Registry, or a single verb) and returns a list of Issue strings; an empty list
means the check passed. Checks never raise on a bad declaration.

Checks
- check_zero_on_creation: a fresh instance holds the zero of every field.
- check_attributes: every public settable member is an Option or a Value.
- check_short_names / check_long_names / check_indices: no duplicates inside
  one verb (check_duplicates runs all three).
- check_required_nullability: advisory; required fields of a nullable kind.

Aggregates
- validate_all(verbs) -> list[Issue] (advisory issues excluded)
- validate(verbs) -> ValidationResult
- report(result) prints a result to stderr with rich.

Typical use in a host test-suite:

    result = validate(registry)
    assert result.valid, str(result)
"""
import copy
import inspect
import re
import typing
from abc import ABC
from collections import defaultdict
from collections.abc import Iterable
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .faults import *
from .faults import console
from .fields import Field
from .utils import *
from .verbs import getverb, DefaultSetter, PostAction, Verb


class Issue(str):
    """
    Human-readable issue message tagged with its FaultCode and verb name.
    """

    def __new__(cls, message, code, verb=None, /):
        self = super().__new__(cls, message)
        self.code = code
        self.verb = verb
        return self

    def __rich__(self):
        return Text.assemble((f"[{self.code.normalize()}] ", "dim"), str(self))


def _resolve(verbs, /):
    """
    Split the input into Verb descriptors and classes that are not verbs.
    """
    if isinstance(verbs, Verb | type):
        verbs = (verbs,)
    elif not isinstance(verbs, Iterable) or isinstance(verbs, str):
        raise TypeError("validation checks take a verb, a verb class or an iterable of them")
    found, strays = [], []
    for object in verbs:
        if (verb := getverb(object)) is not None:
            found.append(verb)
        else:
            strays.append(object)
    return found, strays


def _label(verb, /):
    return verb.type.__name__


def _zero(kind, value, /):
    if kind.zero is None:
        return value is None
    return type(value) in (type(kind.zero), int) and value == kind.zero


def check_zero_on_creation(verbs, /):
    """
    Construct every verb class with no arguments and report fields that do not
    hold their kind's zero, plus public non-field attributes that are not None.
    A class whose constructor fails is reported instead.
    """
    issues = []
    for verb in _resolve(verbs)[0]:
        label = _label(verb)
        try:
            instance = verb.type()
        except Exception as error:
            issues.append(Issue(
                f"{label}: cannot be constructed without arguments ({type(error).__name__}: {error})",
                FaultCode.UNCONSTRUCTIBLE_VERB,
                verb.name,
            ))
            continue
        for field in verb.fields:
            value = getattr(instance, field.identifier)
            if _zero(field.kind, value):
                continue
            expected = "None" if field.kind.zero is None else "zero"
            issues.append(Issue(
                f"{label}.{field.identifier} is not {expected} on creation (was: {value!r})",
                FaultCode.NONZERO_ON_CREATION,
                verb.name,
            ))
        identifiers = {field.identifier for field in verb.fields}
        for name, value in vars(instance).items():
            if name.startswith("_") or name in identifiers or value is None:
                continue
            issues.append(Issue(
                f"{label}.{name} is not None on creation (was: {value!r})",
                FaultCode.NONZERO_ON_CREATION,
                verb.name,
            ))
    return issues


_CONTRACTS = (object, ABC, DefaultSetter, PostAction)


def _classvar(annotation, /):
    if isinstance(annotation, str):
        return re.match(r"(typing\.)?ClassVar\b", annotation.strip()) is not None
    return annotation is typing.ClassVar or typing.get_origin(annotation) is typing.ClassVar


def _settable(object, /):
    """
    Whether a class attribute looks like a public, assignable member.
    """
    if isinstance(object, property):
        return object.fset is not None
    if isinstance(object, Field | staticmethod | classmethod) or callable(object):
        return False
    return not hasattr(type(object), "__get__")


def check_attributes(verbs, /):
    """
    Report public settable members that carry neither Option nor Value
    metadata, and classes handed to the suite that were never declared
    with @verb(...).

    Candidates: annotated names (ClassVar excluded), plain public class
    attributes, properties with a setter, and public attributes assigned by
    the constructor.
    """
    found, strays = _resolve(verbs)
    issues = [
        Issue(
            f"{getattr(stray, "__name__", type(stray).__name__)}: is not a verb (missing @verb(...) declaration)",
            FaultCode.NOT_A_VERB,
        )
        for stray in strays
    ]

    for verb in found:
        identifiers = {field.identifier for field in verb.fields}
        members = {}
        classvars = set()
        for klass in verb.type.__mro__:
            if klass in _CONTRACTS:
                continue
            for name, annotation in inspect.get_annotations(klass).items():
                if _classvar(annotation):
                    classvars.add(name)
                else:
                    members.setdefault(name, None)
            for name, object in vars(klass).items():
                if _settable(object) and name not in classvars:
                    members.setdefault(name, None)
        try:
            members.update(dict.fromkeys(vars(verb.type())))
        except Exception:
            # Reported by check_zero_on_creation.
            pass

        for name in members:
            if name.startswith("_") or name in identifiers:
                continue
            issues.append(Issue(
                f"{_label(verb)}.{name} is missing Option or Value metadata",
                FaultCode.MISSING_METADATA,
                verb.name,
            ))
    return issues


def _duplicates(verbs, key, describe, code, /):
    issues = []
    for verb in _resolve(verbs)[0]:
        groups = defaultdict(list)
        for field in verb.fields:
            if (value := key(field)) is not None:
                groups[value].append(field.identifier)
        for value, identifiers in groups.items():
            if len(identifiers) > 1:
                issues.append(Issue(
                    f"{_label(verb)}: Duplicate {describe(value)} on fields: {", ".join(identifiers)}",
                    code,
                    verb.name,
                ))
    return issues


def check_short_names(verbs, /):
    return _duplicates(
        verbs,
        lambda x: None if x.positional else x.short,
        lambda x: f"short name '-{x}'",
        FaultCode.DUPLICATE_SHORT_NAME,
    )


def check_long_names(verbs, /):
    """
    Report resolved long names (explicit or derived) shared by two fields.
    """
    return _duplicates(
        verbs,
        lambda x: None if x.positional else x.long,
        lambda x: f"long name '--{x}'",
        FaultCode.DUPLICATE_LONG_NAME,
    )


def check_indices(verbs, /):
    return _duplicates(
        verbs,
        lambda x: x.index if x.positional else None,
        lambda x: f"value index {x}",
        FaultCode.DUPLICATE_INDEX,
    )


def check_duplicates(verbs, /):
    return check_short_names(verbs) + check_long_names(verbs) + check_indices(verbs)


def check_required_nullability(verbs, /, *, warn=True):
    """
    Advisory check: required fields whose kind is nullable.

    Each issue is also emitted as a NullableRequiredWarning unless warn=False.
    """
    issues = []
    for verb in _resolve(verbs)[0]:
        for field in verb.fields:
            if not (field.required and field.kind.nullable):
                continue
            issue = Issue(
                f"{_label(verb)}.{field.identifier} is required but its kind is nullable ({field.kind.value})",
                FaultCode.NULLABLE_REQUIRED,
                verb.name,
            )
            issues.append(issue)
            if warn:
                trigger(NullableRequiredWarning(str(issue)))
    return issues


def validate_all(verbs, /):
    """
    Run every blocking check and concatenate their issues.
    """
    return check_attributes(verbs) + check_duplicates(verbs) + check_zero_on_creation(verbs)


class ValidationResult:
    """
    Outcome of validate(): blocking issues plus advisory warnings.

    Options
    - fancy: render inside a panel.
    - colorful: apply the palette (override through __styles__ in __main__).
    """

    issues = mirror("issues")
    warnings = mirror("warnings")

    def __init__(self, issues=(), warnings=(), /, **options):
        self._issues = list(issues)
        self._warnings = list(warnings)
        self.options = MappingProxyType(options)

    @property
    def valid(self):
        return not self._issues

    def __bool__(self):
        return self.valid

    def __str__(self):
        if self._issues:
            lines = [f"Validation failed with {len(self._issues)} issue(s):"]
            lines += [f"  - {issue}" for issue in self._issues]
        else:
            lines = ["All validations passed"]
        if self._warnings:
            lines.append(f"{len(self._warnings)} warning(s):")
            lines += [f"  - {warning}" for warning in self._warnings]
        return "\n".join(lines)

    def __repr__(self):
        return f"validation-result(issues={len(self._issues)}, warnings={len(self._warnings)})"

    def __rich__(self):
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)
        styles = defaultdict(str, {
            "passed": "bold #22C55E",
            "failed": "bold #FF4DA6",
            "issue": "#C8C8D0",
            "warning": "#FFB400",
            "code": "dim",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def text(fragment, style=""):
            return Text(str(fragment), styles[style] if colorful else "")

        if self._issues:
            header = text(f"validation failed with {len(self._issues)} issue(s)", "failed")
        else:
            header = text("all validations passed", "passed")
        lines = [
            Text.assemble(text(f"[{issue.code.normalize()}] ", "code"), text(issue, "issue"))
            if isinstance(issue, Issue) else text(issue, "issue")
            for issue in self._issues
        ] + [
            Text.assemble(text("warning: ", "warning"), text(warning, "issue"))
            for warning in self._warnings
        ]

        if fancy:
            return Panel(Group(*lines) if lines else Text(""), title=header, title_align="left")
        return Group(header, *lines)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self._issues, self._warnings, **{**self.options, **overrides})


def validate(verbs, /, **options):
    """
    Run the blocking checks and collect advisory issues (without emitting
    warnings) into a ValidationResult.
    """
    return ValidationResult(validate_all(verbs), check_required_nullability(verbs, warn=False), **options)


def report(result, /, *, fancy=True, colorful=True):
    """
    Print a ValidationResult to stderr and return whether it is valid.
    """
    if not isinstance(result, ValidationResult):
        raise TypeError("report() argument must be a ValidationResult")
    console.print(copy.replace(result, fancy=fancy, colorful=colorful))
    return result.valid


__all__ = (
    # Classes
    "Issue",
    "ValidationResult",

    # Checks
    "check_zero_on_creation",
    "check_attributes",
    "check_short_names",
    "check_long_names",
    "check_indices",
    "check_duplicates",
    "check_required_nullability",

    # Aggregates
    "validate_all",
    "validate",
    "report",
)
