"""Value types for parsed type encodings.

Each variant of the grammar is a frozen dataclass deriving from
`TypeEncoding`. Values nest (pointers to structs of arrays, and so on) but
never share or cycle, so they compare and hash by value. Comparison walks
both values with an explicit stack, so deeply nested types compare like
shallow ones.

Optional collections use None for "not present in the encoding" and an
empty tuple for "present but empty", e.g. `{Foo}` vs `{Foo=}`.
"""

from dataclasses import dataclass
from dataclasses import fields as dataclass_fields
from enum import StrEnum
from typing import ClassVar

__all__ = [
    "ScalarKind",
    "Qualifier",
    "TypeEncoding",
    "Scalar",
    "Object",
    "Block",
    "Array",
    "Field",
    "Struct",
    "Union",
    "Bitfield",
    "Pointer",
    "Qualified",
    "CHAR",
    "INT",
    "SHORT",
    "LONG",
    "LONG_LONG",
    "UNSIGNED_CHAR",
    "UNSIGNED_INT",
    "UNSIGNED_SHORT",
    "UNSIGNED_LONG",
    "UNSIGNED_LONG_LONG",
    "FLOAT",
    "DOUBLE",
    "BOOL",
    "INT128",
    "LONG_DOUBLE",
    "VOID",
    "C_STRING",
    "CLASS",
    "SELECTOR",
    "UNKNOWN",
    "BLANK",
    "EMPTY",
    "ID",
    "NUMERIC_KINDS",
    "struct",
    "is_scalar",
    "without_qualifiers",
    "qualify",
]


class ScalarKind(StrEnum):
    """Payload-free types, valued by their encoding."""

    CHAR = "c"
    INT = "i"
    SHORT = "s"
    LONG = "l"  # 32 bits, 64-bit long encodes as "q"
    LONG_LONG = "q"
    UNSIGNED_CHAR = "C"
    UNSIGNED_INT = "I"
    UNSIGNED_SHORT = "S"
    UNSIGNED_LONG = "L"
    UNSIGNED_LONG_LONG = "Q"
    FLOAT = "f"
    DOUBLE = "d"
    BOOL = "B"
    INT128 = "t"
    LONG_DOUBLE = "D"
    VOID = "v"
    C_STRING = "*"
    CLASS = "#"
    SELECTOR = ":"
    UNKNOWN = "?"
    BLANK = " "
    EMPTY = ""


class Qualifier(StrEnum):
    """Type qualifiers, valued by their encoding."""

    CONST = "r"
    ATOMIC = "A"
    IN = "n"
    OUT = "o"
    IN_OUT = "N"
    ONE_WAY = "V"
    BY_COPY = "O"
    BY_REF = "R"


class _Value:
    """Equality and hashing by value for nested dataclasses."""

    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented

        pending: list[tuple[object, object]] = [(self, other)]
        while pending:
            a, b = pending.pop()
            if a is b:
                continue
            if type(a) is not type(b):
                return False
            if isinstance(a, tuple):
                if len(a) != len(b):
                    return False
                pending.extend(zip(a, b))
            elif isinstance(a, _Value):
                pending.extend((getattr(a, f.name), getattr(b, f.name)) for f in dataclass_fields(a))
            elif a != b:
                return False
        return True

    def __hash__(self) -> int:
        from .encoder import encode  # noqa: PLC0415

        return hash((type(self), encode(self)))


class TypeEncoding(_Value):
    """Base class of all parsed type encodings."""

    __slots__ = ()

    @property
    def encoded(self) -> str:
        from .encoder import encode  # noqa: PLC0415

        return encode(self)

    def __str__(self) -> str:
        return self.encoded


@dataclass(frozen=True, slots=True, eq=False)
class Scalar(TypeEncoding):
    kind: ScalarKind


@dataclass(frozen=True, slots=True, eq=False)
class Object(TypeEncoding):
    """An object type: `@`, `@"NSString"`, `@"<NSCopying>"`, `@"NSObject<A><B>"`."""

    name: str | None = None
    protocols: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True, eq=False)
class Block(TypeEncoding):
    """A block type: `@?`, or with a signature `@?<v@?i>`.

    The signature, when present, is the return type, the block itself and
    then the parameter types.
    """

    params: tuple[TypeEncoding, ...] | None = None


@dataclass(frozen=True, slots=True, eq=False)
class Array(TypeEncoding):
    """A C array. The element type may be missing, e.g. `[3]`."""

    count: int
    element: TypeEncoding | None = None


@dataclass(frozen=True, slots=True, eq=False)
class Field(_Value):
    """The name and/or type of a struct or union member."""

    name: str | None = None
    type: TypeEncoding | None = None

    def __post_init__(self) -> None:
        if self.name is None and self.type is None:
            raise ValueError("A field needs a name, a type or both")


@dataclass(frozen=True, slots=True, eq=False)
class Struct(TypeEncoding):
    """A struct: `{name}` (no field list) or `{name=fields}`."""

    OPEN: ClassVar[str] = "{"
    CLOSE: ClassVar[str] = "}"

    name: str
    fields: tuple[Field, ...] | None = None


@dataclass(frozen=True, slots=True, eq=False)
class Union(TypeEncoding):
    """A union: `(name)` (no field list) or `(name=fields)`."""

    OPEN: ClassVar[str] = "("
    CLOSE: ClassVar[str] = ")"

    name: str
    fields: tuple[Field, ...] | None = None


@dataclass(frozen=True, slots=True, eq=False)
class Bitfield(TypeEncoding):
    width: int


@dataclass(frozen=True, slots=True, eq=False)
class Pointer(TypeEncoding):
    """A pointer. A bare `^` has no pointee."""

    pointee: TypeEncoding | None = None


@dataclass(frozen=True, slots=True, eq=False)
class Qualified(TypeEncoding):
    """A type wrapped in one qualifier, e.g. `r*` for `const char *`."""

    qualifier: Qualifier
    type: TypeEncoding


CHAR = Scalar(ScalarKind.CHAR)
INT = Scalar(ScalarKind.INT)
SHORT = Scalar(ScalarKind.SHORT)
LONG = Scalar(ScalarKind.LONG)
LONG_LONG = Scalar(ScalarKind.LONG_LONG)
UNSIGNED_CHAR = Scalar(ScalarKind.UNSIGNED_CHAR)
UNSIGNED_INT = Scalar(ScalarKind.UNSIGNED_INT)
UNSIGNED_SHORT = Scalar(ScalarKind.UNSIGNED_SHORT)
UNSIGNED_LONG = Scalar(ScalarKind.UNSIGNED_LONG)
UNSIGNED_LONG_LONG = Scalar(ScalarKind.UNSIGNED_LONG_LONG)
FLOAT = Scalar(ScalarKind.FLOAT)
DOUBLE = Scalar(ScalarKind.DOUBLE)
BOOL = Scalar(ScalarKind.BOOL)
INT128 = Scalar(ScalarKind.INT128)
LONG_DOUBLE = Scalar(ScalarKind.LONG_DOUBLE)
VOID = Scalar(ScalarKind.VOID)
C_STRING = Scalar(ScalarKind.C_STRING)
CLASS = Scalar(ScalarKind.CLASS)
SELECTOR = Scalar(ScalarKind.SELECTOR)
UNKNOWN = Scalar(ScalarKind.UNKNOWN)
BLANK = Scalar(ScalarKind.BLANK)
EMPTY = Scalar(ScalarKind.EMPTY)

ID = Object()

NUMERIC_KINDS = frozenset(
    [
        ScalarKind.CHAR,
        ScalarKind.INT,
        ScalarKind.SHORT,
        ScalarKind.LONG,
        ScalarKind.LONG_LONG,
        ScalarKind.UNSIGNED_CHAR,
        ScalarKind.UNSIGNED_INT,
        ScalarKind.UNSIGNED_SHORT,
        ScalarKind.UNSIGNED_LONG,
        ScalarKind.UNSIGNED_LONG_LONG,
        ScalarKind.FLOAT,
        ScalarKind.DOUBLE,
        ScalarKind.BOOL,
        ScalarKind.INT128,
        ScalarKind.LONG_DOUBLE,
    ]
)


def struct(name: str, *types: TypeEncoding) -> Struct:
    """Build a struct with unnamed fields of the given types.

    The field list is always present, so `struct("_NSZone")` is `{_NSZone=}`.
    """
    return Struct(name, tuple(Field(type=t) for t in types))


def is_scalar(t: TypeEncoding) -> bool:
    """Check if a type is an integer, floating-point or boolean type."""
    return isinstance(t, Scalar) and t.kind in NUMERIC_KINDS


def without_qualifiers(t: TypeEncoding) -> TypeEncoding:
    """Strip all qualifiers, e.g. `rA*` becomes `*`."""
    while isinstance(t, Qualified):
        t = t.type
    return t


def qualify(t: TypeEncoding, *qualifiers: Qualifier) -> TypeEncoding:
    """Wrap a type in qualifiers, the first one outermost."""
    for qualifier in reversed(qualifiers):
        t = Qualified(qualifier, t)
    return t
