"""
Verbum pre-fill resolver: populate a fresh verb instance from raw flag values.

prefill(verb, raw) is the inverse of the builder. `raw` maps flag names
(long name for options, kebab(identifier) for positional values) to the raw
text captured from a previous invocation, typically the output of
verbum.builder.parse_flags.

Rules per kind
- boolean: "true"/"false" (case-insensitive, trimmed); anything else → False.
- nullable-boolean: blank → None; "true"/"false" → bool; anything else → None.
- integer / floating-point (+ nullable): parsed; malformed → the kind's zero.
- enum kinds: with `choices`, matched against member values then names,
  ignoring case, "-" and "_"; unmatched → the kind's zero. Without `choices`
  the raw string is kept.
- list kinds: split on the field separator, each segment one item, kept
  as-is; enum items are resolved one by one and unmatched items dropped; an
  empty string or nothing left → the kind's zero.
- string: the raw string as-is.

Keys absent from `raw` leave the field at its zero. Data problems never raise.
"""
import re
from collections.abc import Mapping

from .fields import Kind
from .verbs import getverb, Verb


def _boolean(text, fallback, /):
    match text.strip().lower():
        case "true":
            return True
        case "false":
            return False
        case _:
            return fallback


def _fold(text, /):
    return re.sub(r"[-_\s]", "", text).lower()


def _member(choices, text, /):
    """
    Resolve a raw string against an Enum subclass (None when nothing matches).
    """
    if not (folded := _fold(text)):
        return None
    for member in choices:
        if isinstance(member.value, str) and _fold(member.value) == folded:
            return member
    for member in choices:
        if _fold(member.name) == folded:
            return member
    return None


def resolve(field, text, /):
    """
    Convert one raw string into a value of the field's kind.

    Public so hosts can reuse the per-field rule (e.g. for a single form input).
    """
    if not isinstance(text, str):
        text = str(text)
    kind = field.kind

    match kind:
        case Kind.BOOLEAN:
            return _boolean(text, False)
        case Kind.NULLABLE_BOOLEAN:
            return _boolean(text, None)
        case Kind.INTEGER | Kind.NULLABLE_INTEGER:
            try:
                return int(text.strip())
            except ValueError:
                return kind.zero
        case Kind.FLOATING_POINT | Kind.NULLABLE_FLOATING_POINT:
            try:
                return float(text.strip())
            except ValueError:
                return kind.zero
        case Kind.ENUM | Kind.NULLABLE_ENUM:
            if field.choices is None:
                return text
            member = _member(field.choices, text)
            return kind.zero if member is None else member
        case Kind.LIST_OF_STRING | Kind.LIST_OF_ENUM | Kind.NULLABLE_LIST_OF_ENUM:
            if not text:
                return kind.zero
            items = text.split(field.separator)
            if kind.enumerated and field.choices is not None:
                items = [member for item in items if (member := _member(field.choices, item)) is not None]
            return items or kind.zero
        case _:
            return text


def prefill(verb, raw, /):
    """
    Build a fresh instance of `verb` populated from `raw`.

    Parameters
    - verb: Verb | verb class
      The descriptor (or the decorated class) to instantiate.
    - raw: Mapping[str, str]
      Flag name → raw value. Unknown keys are ignored.

    Returns
    - A new instance of the verb class; only fields whose key is present in
      `raw` differ from their zero.

    Raises
    - TypeError: `verb` is not a verb, or `raw` is not a mapping.
      (Look verbs up by name with Registry.prefill.)
    """
    if isinstance(verb, str) or not isinstance(verb, Verb | type) or (descriptor := getverb(verb)) is None:
        raise TypeError("prefill() first argument must be a verb or a verb class (use Registry.prefill() for names)")
    if not isinstance(raw, Mapping):
        raise TypeError("prefill() second argument must be a mapping")

    instance = descriptor.type()
    for field in descriptor.fields:
        if (text := raw.get(field.key)) is None:
            continue
        setattr(instance, field.identifier, resolve(field, text))
    return instance


__all__ = (
    "prefill",
    "resolve",
)
