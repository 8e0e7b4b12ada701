"""Encoding of parsed types back into type encoding strings."""

from .types import (
    Array,
    Bitfield,
    Block,
    Field,
    Object,
    Pointer,
    Qualified,
    Scalar,
    Struct,
    TypeEncoding,
    Union,
)

Part = str | TypeEncoding | Field | None


def _object(t: Object) -> str:
    if t.name is None and not t.protocols:
        return "@"
    protocols = "".join(f"<{name}>" for name in t.protocols)
    return f'@"{t.name or ""}{protocols}"'


def _parts(item: TypeEncoding | Field) -> list[Part]:
    """Split a value into literal text and nested values, in output order."""
    if isinstance(item, Scalar):
        return [item.kind.value]
    if isinstance(item, Object):
        return [_object(item)]
    if isinstance(item, Block):
        if item.params is None:
            return ["@?"]
        return ["@?<", *item.params, ">"]
    if isinstance(item, Array):
        return [f"[{item.count}", item.element, "]"]
    if isinstance(item, (Struct, Union)):
        if item.fields is None:
            return [f"{item.OPEN}{item.name}{item.CLOSE}"]
        return [f"{item.OPEN}{item.name}=", *item.fields, item.CLOSE]
    if isinstance(item, Field):
        name = f'"{item.name}"' if item.name is not None else None
        return [name, item.type]
    if isinstance(item, Bitfield):
        return [f"b{item.width}"]
    if isinstance(item, Pointer):
        return ["^", item.pointee]
    if isinstance(item, Qualified):
        return [item.qualifier.value, item.type]
    raise TypeError(f"Not a type encoding: {item!r}")


def encode(t: TypeEncoding | None) -> str:
    """Return the type encoding string for a type.

    None (a missing optional type) encodes to the empty string.
    """
    output: list[str] = []
    pending: list[Part] = [t]

    while pending:
        item = pending.pop()
        if item is None:
            continue
        if isinstance(item, str):
            output.append(item)
        else:
            pending.extend(reversed(_parts(item)))

    return "".join(output)
