"""
Verbum argument builder: turn a populated verb instance into command-line tokens.

Entry points
- build_arguments(instance, include_defaults=False) -> list[str]
- build_command(instance, include_defaults=False) -> str
- quote(token): the quoting rule applied to value tokens.
- split(command): quote-aware split that undoes quote().
- parse_flags(tokens, verb=None): read tokens back into a flat flag → raw value
  mapping, the input of verbum.resolver.

Algorithm (build_arguments)
1. The verb name is the first token (omitted when the instance's class is not
   a declared verb; its fields are still serialized).
2. Options are visited in resolution order: own fields, then inherited and
   contract fields, one entry per identifier.
3. A value is skipped when it is None, a blank string, an empty collection,
   the zero of a non-nullable numeric kind whose default is unset or zero,
   or, unless defaults are included, equal to the field's default.
4. By kind:
   • booleans emit "--flag" alone when true, nothing otherwise (so an unset
     nullable boolean and an explicit False look the same on the line);
   • scalar enums emit "--flag value", value lowercased;
   • lists emit "--flag a,b" joined by the field separator, each item in its
     natural string form (enum items are NOT lowercased);
   • everything else emits "--flag value" using str(value).
   A value that does not fit its kind falls back to the last branch.
5. Positional values follow all options, ascending by index, bare.
6. Value tokens go through quote().

The builder never mutates nor retains the instance.
"""
import re
from collections.abc import Iterable, Mapping
from enum import Enum

from .faults import *
from .fields import Kind
from .verbs import collect, getverb


def quote(token, /):
    """
    Wrap a token in double quotes when it contains a space, a double quote or
    a single quote; inner double quotes are escaped with a backslash.

    Examples
    - quote("nginx")      -> 'nginx'
    - quote("nginx 1.2")  -> '"nginx 1.2"'
    - quote('say "hi"')   -> '"say \\"hi\\""'
    """
    if not isinstance(token, str):
        raise TypeError("quote() argument must be a string")
    if any(char in token for char in " \"'"):
        return '"' + token.replace('"', '\\"') + '"'
    return token


def stringify(value, /):
    """
    Natural string form of a value.

    Enum members render as their value when it is a string, otherwise as
    their name; everything else goes through str().
    """
    if isinstance(value, Enum):
        return value.value if isinstance(value.value, str) else value.name
    return str(value)


def _iterable(value):
    return isinstance(value, Iterable) and not isinstance(value, str | bytes | Mapping)


def _fits(kind, value):
    if kind.boolean:
        return isinstance(value, bool)
    if kind.multiple:
        return _iterable(value)
    if kind.enumerated:
        return isinstance(value, Enum | str)
    if kind in (Kind.INTEGER, Kind.NULLABLE_INTEGER):
        return isinstance(value, int) and not isinstance(value, bool)
    if kind in (Kind.FLOATING_POINT, Kind.NULLABLE_FLOATING_POINT):
        return isinstance(value, int | float) and not isinstance(value, bool)
    return True


def _empty(field, value):
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if _iterable(value):
        return not value
    if field.kind in (Kind.INTEGER, Kind.FLOATING_POINT) and _fits(field.kind, value):
        # An explicit zero against a non-zero default must reach the line.
        return value == 0 and field.default in (None, 0)
    return False


def _defaulted(field, value):
    if field.default is None:
        return False
    if _iterable(value) and _iterable(field.default):
        return list(value) == list(field.default)
    return value == field.default


def build_arguments(instance, include_defaults=False, /):
    """
    Build the ordered token list for a verb instance.

    Parameters
    - instance: an instance of a class carrying Option/Value fields,
      normally one decorated with @verb(...).
    - include_defaults: bool
      When False, options equal to their declared default are omitted.

    Returns
    - list[str]: the verb name, then "--flag [value]" pairs, then positional
      values; value tokens are already quoted.

    Raises
    - InvalidInstanceError: instance is None.
    """
    if instance is None:
        trigger(InvalidInstanceError("build_arguments() argument must be a verb instance, not None"))

    verb = getverb(instance)
    tokens = [verb.name] if verb is not None else []
    fields = verb.fields if verb is not None else collect(type(instance))

    for field in fields:
        if field.positional:
            continue
        value = getattr(instance, field.identifier)

        if _empty(field, value):
            continue
        if not include_defaults and _defaulted(field, value):
            continue

        kind = field.kind if _fits(field.kind, value) else Kind.STRING

        if kind.boolean:
            if value:
                tokens.append(field.flag)
        elif kind.multiple:
            items = [stringify(item) for item in value if item is not None]
            if items:
                tokens.extend((field.flag, quote(field.separator.join(items))))
        elif kind.enumerated:
            tokens.extend((field.flag, quote(stringify(value).lower())))
        else:
            tokens.extend((field.flag, quote(str(value))))

    positionals = verb.values if verb is not None else sorted(
        (field for field in fields if field.positional), key=lambda x: x.index
    )
    for field in positionals:
        value = getattr(instance, field.identifier)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        if _iterable(value):
            tokens.extend(quote(stringify(item)) for item in value if item is not None)
        else:
            tokens.append(quote(stringify(value)))

    return tokens


def build_command(instance, include_defaults=False, /):
    """
    Build the command line for a verb instance (tokens joined by one space).

    Example
    - build_command(build) -> 'build --tag a:latest,a:v1 --no-cache'
    """
    return " ".join(build_arguments(instance, include_defaults))


def _delimits(text, at, /):
    return at == 0 or text[at - 1] != "\\" or at + 1 == len(text) or text[at + 1].isspace()


def _closes(command, at, /):
    """
    Whether the quote at `at`, preceded by a backslash inside a quoted token,
    closes the token (value ending in a backslash) rather than being escaped.
    """
    if at + 1 < len(command) and not command[at + 1].isspace():
        return False
    rest = command[at + 1:]
    return sum(_delimits(rest, index) for index, char in enumerate(rest) if char == '"') % 2 == 0


def _words(command, /):
    """
    Cut a command line into raw tokens, quotes kept.
    """
    words = []
    start = None
    quoted = False
    index = 0
    while index < len(command):
        char = command[index]
        if quoted:
            if char == "\\" and command.startswith('"', index + 1) and not _closes(command, index + 1):
                index += 1
            elif char == '"':
                quoted = False
        elif char.isspace():
            if start is not None:
                words.append(command[start:index])
                start = None
        else:
            if start is None:
                start = index
            quoted = char == '"'
        index += 1
    if start is not None:
        words.append(command[start:])
    return words


def _unquote(token, /):
    """
    Undo quote() on one token; tokens not wrapped in double quotes are kept.

    An unterminated quote keeps the rest of the token as the value.
    """
    if not token.startswith('"'):
        return token
    body = token[1:-1] if len(token) > 1 and token.endswith('"') else token[1:]
    return body.replace('\\"', '"')


def split(command, /):
    """
    Split a command line into tokens, undoing the quotes quote() adds.

    Backslashes are literal; inside a quoted token only \\" is unescaped. An
    unterminated quote takes the rest of the line.

    Examples
    - split('run --image "nginx 1.2"')      -> ['run', '--image', 'nginx 1.2']
    - split('build --file "C:\\My Dir\\"')  -> ['build', '--file', 'C:\\My Dir\\']
    """
    if not isinstance(command, str):
        raise TypeError("split() argument must be a string")
    return [_unquote(word) for word in _words(command)]


def _switch(token):
    # "-5" and "-0.5" are values, not switches.
    return len(token) > 1 and token.startswith("-") and not re.fullmatch(r"-\d+(\.\d+)?", token)


def parse_flags(tokens, verb=None, /):
    """
    Read tokens back into a flat mapping of long flag name → raw value.

    Behavior
    - "--name value" and "--name=value" map name to value.
    - A flag followed by another flag (or by nothing) maps to "true".
    - With a verb, a leading token equal to the verb name is skipped, boolean
      options never consume a value, short aliases map to the long name, and
      bare tokens fill positional fields by index under their kebab key (the
      last positional of a list kind takes the remaining tokens).
    - Without a verb, bare tokens are ignored.

    Parameters
    - tokens: str | Iterable[str]
      A command line or a token list as build_arguments() returns it; quoted
      value tokens are unquoted either way.
    - verb: optional Verb, verb class, or verb instance.
    """
    tokens = _words(tokens) if isinstance(tokens, str) else list(tokens)
    if verb is not None and (verb := getverb(verb)) is None:
        raise TypeError("parse_flags() 'verb' must be a verb, a verb class or a verb instance")

    if verb is not None and tokens and _unquote(tokens[0]) == verb.name:
        tokens = tokens[1:]

    values = {}
    positionals = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        if not _switch(token):
            positionals.append(_unquote(token))
            continue

        name, assigned, inline = token.partition("=")
        option = verb.option(name) if verb is not None else None
        key = option.long if option is not None else name.lstrip("-")

        if assigned:
            values[key] = _unquote(inline)
        elif option is not None and option.kind.boolean:
            values[key] = "true"
        elif index < len(tokens) and not _switch(tokens[index]):
            values[key] = _unquote(tokens[index])
            index += 1
        else:
            values[key] = "true"

    if verb is not None:
        fields = verb.values
        for position, field in enumerate(fields):
            if position >= len(positionals):
                break
            if position == len(fields) - 1 and field.kind.multiple:
                values[field.key] = field.separator.join(positionals[position:])
            else:
                values[field.key] = positionals[position]

    return values


__all__ = (
    "build_arguments",
    "build_command",
    "quote",
    "stringify",
    "split",
    "parse_flags",
)
