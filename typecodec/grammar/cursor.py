"""Position-tracking reader over a type encoding string."""

from enum import StrEnum, auto

ASCII_DIGITS = frozenset("0123456789")


class ParseErrorKind(StrEnum):
    """Reason a type encoding could not be parsed."""

    UNKNOWN_CHARACTER = auto()
    UNTERMINATED = auto()
    EXPECTED_DIGIT = auto()
    MALFORMED_NAME = auto()
    TRAILING_DATA = auto()
    LEADING_ZERO = auto()
    OFFSET_MISMATCH = auto()
    UNPAIRED_LEADING = auto()


class ParseError(RuntimeError):
    """Raised when a type, method or attribute encoding cannot be parsed."""

    def __init__(self, kind: ParseErrorKind, message: str, position: int | None = None):
        super().__init__(message if position is None else f"{message} (at {position})")
        self.kind = kind
        self.position = position


class Cursor:
    """Reads an encoding string from left to right.

    Every read either consumes input or leaves the position unchanged;
    nothing ever moves backwards.
    """

    def __init__(self, text: str, pos: int = 0):
        self.text = text
        self.pos = pos

    def __repr__(self) -> str:
        return f"Cursor({self.remaining!r})"

    @property
    def remaining(self) -> str:
        return self.text[self.pos :]

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def error(self, kind: ParseErrorKind, message: str) -> ParseError:
        return ParseError(kind, message, self.pos)

    def peek(self) -> str | None:
        """Return the next character without consuming it, None at the end."""
        if self.at_end:
            return None
        return self.text[self.pos]

    def next(self) -> str:
        """Consume and return the next character."""
        if self.at_end:
            raise self.error(ParseErrorKind.UNTERMINATED, "Unexpected end of encoding")
        char = self.text[self.pos]
        self.pos += 1
        return char

    def read_char(self, char: str) -> bool:
        """Consume `char` if it is next. Returns whether it was consumed."""
        if self.peek() != char:
            return False
        self.pos += 1
        return True

    def expect(self, char: str) -> None:
        if not self.read_char(char):
            raise self.error(ParseErrorKind.UNTERMINATED, f"Expected {char!r}")

    def read_int(self) -> int:
        """Consume a run of ASCII digits and return its value.

        Only `0`-`9` count as digits; str.isdigit() would also accept
        characters such as superscripts and other scripts' numerals. A number
        may not start with `0` unless it is `0`, since the padding would be
        lost when it is written back.
        """
        start = self.pos
        while not self.at_end and self.text[self.pos] in ASCII_DIGITS:
            self.pos += 1
        if self.pos == start:
            raise self.error(ParseErrorKind.EXPECTED_DIGIT, "Expected a digit")
        digits = self.text[start : self.pos]
        if len(digits) > 1 and digits[0] == "0":
            raise ParseError(ParseErrorKind.LEADING_ZERO, f"Number with leading zero: {digits!r}", start)
        return int(digits)

    def read_quoted(self) -> str | None:
        """Consume a `"`-delimited string and return its contents.

        Returns None (consuming nothing) if the next character is not a quote.
        There is no escaping: the contents end at the next quote.
        """
        if self.peek() != '"':
            return None
        end = self.text.find('"', self.pos + 1)
        if end < 0:
            raise self.error(ParseErrorKind.UNTERMINATED, "Unterminated quoted name")
        value = self.text[self.pos + 1 : end]
        self.pos = end + 1
        return value

    def read_until(self, *chars: str) -> tuple[str, str]:
        """Consume up to and including the first of `chars`.

        Returns the text before the delimiter and the delimiter itself.
        """
        end = self.pos
        while end < len(self.text) and self.text[end] not in chars:
            end += 1
        if end == len(self.text):
            raise self.error(ParseErrorKind.UNTERMINATED, f"Expected one of {''.join(chars)!r}")
        value = self.text[self.pos : end]
        self.pos = end + 1
        return value, self.text[end]
