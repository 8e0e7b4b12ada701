"""Method type encodings: return type, receiver, selector and parameter types."""

import logging
from dataclasses import dataclass, field
from typing import Self

from dataclasses_json import DataClassJsonMixin, config

from typecodec.grammar import (
    ASCII_DIGITS,
    ID,
    SELECTOR,
    VOID,
    Cursor,
    ParseError,
    ParseErrorKind,
    TypeEncoding,
    decode_type,
    encode,
    parse_type_from,
)

logger = logging.getLogger(__name__)


def _encode_types(types: tuple[TypeEncoding, ...]) -> list[str]:
    return [encode(t) for t in types]


def _decode_types(encodings: list[str]) -> tuple[TypeEncoding, ...]:
    return tuple(decode_type(e) for e in encodings)


def _read_number(cursor: Cursor) -> int | None:
    if cursor.peek() not in ASCII_DIGITS:
        return None
    return cursor.read_int()


@dataclass(frozen=True)
class MethodTypeEncodings(DataClassJsonMixin):
    """The type encoding of a method.

    Runtime encodings usually carry a stack offset after each type, such as
    `@24@0:8^{_NSZone=}16`. Offsets, and the stray leading number some
    malformed encodings have (`68@0:8163248f64`), are kept only so the
    encoding can be reproduced exactly. They are ignored when comparing.
    """

    types: tuple[TypeEncoding, ...] = field(
        default=(), metadata=config(encoder=_encode_types, decoder=_decode_types)
    )
    offsets: tuple[int, ...] = field(default=(), compare=False)
    leading: int | None = field(default=None, compare=False)

    @classmethod
    def method(cls, *params: TypeEncoding, returning: TypeEncoding = VOID) -> Self:
        """Return the encoding of a method with the given return and parameter types."""
        return cls((returning, ID, SELECTOR, *params))

    @classmethod
    def getter(cls, t: TypeEncoding) -> Self:
        """Return the encoding of a getter for a property of type `t`."""
        return cls.method(returning=t)

    @classmethod
    def setter(cls, t: TypeEncoding) -> Self:
        """Return the encoding of a setter for a property of type `t`."""
        return cls.method(t)

    @classmethod
    def decode(cls, text: str) -> Self:
        """Parse a method type encoding.

        Raises:
            ParseError: If a type or number is invalid, or the offsets don't pair up with
                the types.
        """
        cursor = Cursor(text)
        types: list[TypeEncoding] = []
        offsets: list[int] = []

        leading = _read_number(cursor)

        while not cursor.at_end:
            types.append(parse_type_from(cursor))
            offset = _read_number(cursor)
            if offset is not None:
                offsets.append(offset)

        if offsets and len(offsets) != len(types):
            raise ParseError(
                ParseErrorKind.OFFSET_MISMATCH,
                f"Found {len(offsets)} offsets for {len(types)} types",
            )
        if not offsets and leading is not None:
            raise ParseError(ParseErrorKind.UNPAIRED_LEADING, "Leading number without offsets")

        return cls(tuple(types), tuple(offsets), leading)

    @classmethod
    def parse(cls, text: str) -> Self | None:
        """Parse a method type encoding, None if it is invalid."""
        try:
            return cls.decode(text)
        except ParseError as e:
            logger.debug("Rejected method encoding %r: %s", text, e)
            return None

    @property
    def return_type(self) -> TypeEncoding | None:
        return self.types[0] if self.types else None

    @property
    def parameters(self) -> tuple[TypeEncoding, ...]:
        """The parameter types, after the receiver and selector."""
        return self.types[3:]

    def encode(self) -> str:
        if not self.offsets:
            return "".join(encode(t) for t in self.types)

        leading = "" if self.leading is None else str(self.leading)
        return leading + "".join(f"{encode(t)}{offset}" for t, offset in zip(self.types, self.offsets))

    def __str__(self) -> str:
        return self.encode()
