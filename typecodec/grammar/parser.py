"""Recursive-descent parser for Objective-C type encodings.

Compound rules (arrays, structs, pointers, ...) are written as generators
that yield whenever they need a nested type and receive it back through
send(). `_run` drives them from an explicit stack, so the nesting depth of
an encoding is limited by memory rather than by the interpreter's
recursion limit. C++ template types surfaced through the runtime can nest
very deeply.
"""

from collections.abc import Callable, Generator
from typing import cast

from .cursor import ASCII_DIGITS, Cursor, ParseError, ParseErrorKind
from .types import (
    EMPTY,
    ID,
    Array,
    Bitfield,
    Block,
    Field,
    Object,
    Pointer,
    Qualified,
    Qualifier,
    Scalar,
    ScalarKind,
    Struct,
    TypeEncoding,
    Union,
)

# A rule yields True when the nested type it asks for may be absent and
# False when it is required, and returns the finished type.
Rule = Generator[bool, TypeEncoding | None, TypeEncoding]

_OPTIONAL = True
_REQUIRED = False

# Characters that can follow a type inside a compound but never start one.
_NO_TYPE_FOLLOWS = frozenset("]})\",>") | ASCII_DIGITS

_SCALARS = {kind.value: Scalar(kind) for kind in ScalarKind if kind.value}
_QUALIFIERS = {q.value: q for q in Qualifier}


def _array(cursor: Cursor) -> Rule:
    count = cursor.read_int()
    element = yield _OPTIONAL
    cursor.expect("]")
    return Array(count, element)


def _pointer(cursor: Cursor) -> Rule:
    pointee = yield _OPTIONAL
    return Pointer(pointee)


def _qualified(qualifier: Qualifier) -> Rule:
    inner = yield _REQUIRED
    return Qualified(qualifier, cast(TypeEncoding, inner))


def _compound(cursor: Cursor, cls: type[Struct] | type[Union]) -> Rule:
    """Parse a struct or union after its opening delimiter.

    The body may be a bare name, a name followed by `=` and nothing, or a
    name followed by fields. Fields may have names, types or both:
    `{?="max""min"}`, `{CGPoint=dd}`, `{CGPoint="x"d"y"d}`.
    """
    name, match = cursor.read_until("=", cls.CLOSE)
    if match == cls.CLOSE:
        return cls(name)

    fields: list[Field] = []
    while True:
        field_name = cursor.read_quoted()
        field_type = yield _OPTIONAL
        if field_name is None and field_type is None:
            break
        fields.append(Field(field_name, field_type))

    cursor.expect(cls.CLOSE)
    return cls(name, tuple(fields))


def _block(cursor: Cursor) -> Rule:
    """Parse a block after `@?`, e.g. `@?<v@?@"NSURLRequest">`."""
    if not cursor.read_char("<"):
        return Block()

    params: list[TypeEncoding] = []
    while True:
        param = yield _OPTIONAL
        if param is None:
            break
        params.append(param)

    cursor.expect(">")
    return Block(tuple(params))


def _object_names(cursor: Cursor, names: str) -> Object:
    """Split `NSObject<NSCopying><NSCoding>` into a class and protocols."""
    parts = names.split("<")
    class_name: str | None = parts.pop(0)
    if class_name == "" and parts:
        class_name = None
    elif class_name.endswith(">"):
        # A protocol must follow a "<"
        raise cursor.error(ParseErrorKind.MALFORMED_NAME, f"Malformed object name: {names!r}")

    protocols = []
    for part in parts:
        if not part.endswith(">"):
            raise cursor.error(ParseErrorKind.MALFORMED_NAME, f"Malformed object name: {names!r}")
        protocols.append(part[:-1])

    return Object(class_name, tuple(protocols))


def _object(cursor: Cursor) -> TypeEncoding | Rule:
    if cursor.read_char("?"):
        return _block(cursor)

    names = cursor.read_quoted()
    if names is None:
        return ID
    return _object_names(cursor, names)


_RULES: dict[str, Callable[[Cursor], TypeEncoding | Rule]] = {
    "@": _object,
    "[": _array,
    "{": lambda cursor: _compound(cursor, Struct),
    "(": lambda cursor: _compound(cursor, Union),
    "b": lambda cursor: Bitfield(cursor.read_int()),
    "^": _pointer,
}


def _begin(cursor: Cursor, optional: bool) -> TypeEncoding | Rule | None:
    """Start parsing one type at the cursor.

    Returns a finished type for single-character encodings, a rule for
    compound ones, or None if the type is optional and none follows.
    """
    if optional:
        char = cursor.peek()
        if char is None or char in _NO_TYPE_FOLLOWS:
            return None

    start = cursor.pos
    char = cursor.next()

    if char in _SCALARS:
        return _SCALARS[char]
    if char in _QUALIFIERS:
        return _qualified(_QUALIFIERS[char])

    rule = _RULES.get(char)
    if rule is None:
        raise ParseError(ParseErrorKind.UNKNOWN_CHARACTER, f"Unknown type code {char!r}", start)
    return rule(cursor)


def _run(cursor: Cursor, optional: bool) -> TypeEncoding | None:
    stack: list[Rule] = []
    result = _begin(cursor, optional)

    while True:
        if isinstance(result, Generator):
            stack.append(result)
            sent = None
        elif stack:
            sent = result
        else:
            return result

        try:
            request = stack[-1].send(sent)
        except StopIteration as stop:
            stack.pop()
            result = stop.value
        else:
            result = _begin(cursor, request)


def parse_type_from(cursor: Cursor) -> TypeEncoding:
    """Parse one type at the cursor, leaving any remaining input unread."""
    return cast(TypeEncoding, _run(cursor, _REQUIRED))


def parse_optional_type(cursor: Cursor) -> TypeEncoding | None:
    """Parse one type at the cursor if one starts there.

    Returns None, consuming nothing, at the end of input or when the next
    character can only close or separate types (`]`, `}`, `)`, `"`, `,`,
    `>` or a digit).
    """
    return _run(cursor, _OPTIONAL)


def decode_type(text: str) -> TypeEncoding:
    """Parse a string holding exactly one type encoding.

    The empty string is the EMPTY type.

    Raises:
        ParseError: If the string is not a single valid type encoding.
    """
    if not text:
        return EMPTY

    cursor = Cursor(text)
    result = parse_type_from(cursor)
    if not cursor.at_end:
        raise cursor.error(ParseErrorKind.TRAILING_DATA, f"Unexpected data after type: {cursor.remaining!r}")
    return result


def parse_type(text: str) -> TypeEncoding | None:
    """Parse a string holding exactly one type encoding, None if it doesn't."""
    try:
        return decode_type(text)
    except ParseError:
        return None
