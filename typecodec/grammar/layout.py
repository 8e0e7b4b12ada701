"""Size and alignment of encoded types, as laid out by the host C ABI."""

import ctypes
from typing import Any

from .types import (
    Array,
    Bitfield,
    Block,
    Field,
    Object,
    Pointer,
    Scalar,
    ScalarKind,
    Struct,
    TypeEncoding,
    Union,
    without_qualifiers,
)

# Scalar C types. "l" and "L" are always 32 bits in type encodings.
SCALAR_CTYPES: dict[ScalarKind, Any] = {
    ScalarKind.CHAR: ctypes.c_char,
    ScalarKind.INT: ctypes.c_int,
    ScalarKind.SHORT: ctypes.c_short,
    ScalarKind.LONG: ctypes.c_int32,
    ScalarKind.LONG_LONG: ctypes.c_longlong,
    ScalarKind.UNSIGNED_CHAR: ctypes.c_ubyte,
    ScalarKind.UNSIGNED_INT: ctypes.c_uint,
    ScalarKind.UNSIGNED_SHORT: ctypes.c_ushort,
    ScalarKind.UNSIGNED_LONG: ctypes.c_uint32,
    ScalarKind.UNSIGNED_LONG_LONG: ctypes.c_ulonglong,
    ScalarKind.FLOAT: ctypes.c_float,
    ScalarKind.DOUBLE: ctypes.c_double,
    ScalarKind.BOOL: ctypes.c_bool,
    ScalarKind.LONG_DOUBLE: ctypes.c_longdouble,
    ScalarKind.C_STRING: ctypes.c_char_p,
    ScalarKind.CLASS: ctypes.c_void_p,
    ScalarKind.SELECTOR: ctypes.c_void_p,
}


class LayoutError(RuntimeError):
    """Raised when a type has no C layout."""


def _bitfield_ctype(width: int) -> Any:
    # Wider fields come from 64-bit integer types
    if 1 <= width <= 32:
        return ctypes.c_uint
    if 32 < width <= 64:
        return ctypes.c_ulonglong
    raise LayoutError(f"Bitfield width {width} has no layout")


def _nested(t: TypeEncoding) -> list[TypeEncoding]:
    """The types whose ctypes must be built before `t`'s."""
    if isinstance(t, Array) and t.element is not None:
        return [without_qualifiers(t.element)]
    if isinstance(t, (Struct, Union)) and t.fields is not None:
        nested = []
        for field in t.fields:
            if field.type is None:
                continue
            inner = without_qualifiers(field.type)
            if not isinstance(inner, Bitfield):
                nested.append(inner)
        return nested
    return []


def _field_members(fields: tuple[Field, ...], built: dict[int, Any]) -> list[tuple]:
    members: list[tuple] = []
    for i, field in enumerate(fields):
        if field.type is None:
            raise LayoutError(f"Field {field.name!r} has no type")
        inner = without_qualifiers(field.type)
        if isinstance(inner, Bitfield):
            # Adjacent bitfields share storage units, like in C
            members.append((f"f{i}", _bitfield_ctype(inner.width), inner.width))
        else:
            members.append((f"f{i}", built[id(inner)]))
    return members


def _build(t: TypeEncoding, built: dict[int, Any]) -> Any:
    """Build the ctype for `t`, whose nested types are already in `built`."""
    if isinstance(t, Scalar):
        if t.kind not in SCALAR_CTYPES:
            raise LayoutError(f"Type {t.encoded!r} has no size")
        return SCALAR_CTYPES[t.kind]

    if isinstance(t, (Object, Block, Pointer)):
        return ctypes.c_void_p

    if isinstance(t, Array):
        if t.element is None:
            raise LayoutError(f"Array {t.encoded!r} has no element type")
        return built[id(without_qualifiers(t.element))] * t.count

    if isinstance(t, (Struct, Union)):
        if t.fields is None:
            raise LayoutError(f"{t.encoded!r} has no fields")
        base = ctypes.Structure if isinstance(t, Struct) else ctypes.Union
        name = t.name if t.name.isidentifier() else "Anonymous"
        return type(name, (base,), {"_fields_": _field_members(t.fields, built)})

    if isinstance(t, Bitfield):
        raise LayoutError("Bitfields only have a size inside a struct or union")

    raise LayoutError(f"Unsupported type: {t!r}")


def to_ctype(t: TypeEncoding) -> Any:
    """Build the ctypes type matching an encoded type.

    Nested types are built first, from an explicit stack, so the nesting
    depth is not limited by the recursion limit.
    """
    root = without_qualifiers(t)
    built: dict[int, Any] = {}
    pending: list[tuple[TypeEncoding, bool]] = [(root, False)]

    while pending:
        item, expanded = pending.pop()
        if id(item) in built:
            continue
        if not expanded:
            nested = _nested(item)
            if nested:
                pending.append((item, True))
                pending.extend((inner, False) for inner in nested)
                continue
        built[id(item)] = _build(item, built)

    return built[id(root)]


def size_and_alignment(t: TypeEncoding) -> tuple[int, int]:
    """Return the size and alignment of a type in bytes.

    Raises:
        LayoutError: If the type has no size, such as `v`, `?`, `{Opaque}` or `[3]`,
            or if ctypes cannot represent it, such as an array too large for memory.
    """
    try:
        ctype = to_ctype(t)
        return ctypes.sizeof(ctype), ctypes.alignment(ctype)
    except (ValueError, OverflowError, MemoryError) as e:
        raise LayoutError(f"Type {t.encoded!r} cannot be laid out: {e}") from e
