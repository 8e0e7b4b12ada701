"""Property attribute strings, e.g. `T@"NSString",R,C,V_name`."""

import logging
from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import Any, Self

from dataclasses_json import DataClassJsonMixin, config

from typecodec.grammar import EMPTY, Cursor, ParseError, TypeEncoding, encode, parse_type, parse_type_from

logger = logging.getLogger(__name__)


class AttributeCode(StrEnum):
    """Attribute codes, valued by their leading character."""

    TYPE = "T"
    NON_ATOMIC = "N"
    READ_ONLY = "R"
    COPY = "C"
    RETAIN = "&"
    WEAK = "W"
    DYNAMIC = "D"
    GETTER = "G"
    SETTER = "S"
    IVAR = "V"


class SetterType(StrEnum):
    """How a property's setter stores the new value."""

    ASSIGN = auto()
    STRONG = auto()
    WEAK = auto()
    COPY = auto()


_SETTER_CODES = {
    AttributeCode.COPY: SetterType.COPY,
    AttributeCode.RETAIN: SetterType.STRONG,
    AttributeCode.WEAK: SetterType.WEAK,
}
_CODES = {code.value: code for code in AttributeCode}


@dataclass(frozen=True)
class Attribute:
    """A single entry of an attribute string: a one-character code and a value."""

    code: AttributeCode
    value: str = ""

    @classmethod
    def decode(cls, text: str) -> Self | None:
        """Split an entry into its code and value, None if the code is unknown."""
        code = _CODES.get(text[:1])
        if code is None:
            return None
        return cls(code, text[1:])

    def __str__(self) -> str:
        return f"{self.code}{self.value}"


def split_property_type(attributes: str) -> tuple[TypeEncoding, str] | None:
    """Parse the leading `T<type>,` entry of an attribute string.

    The type is read with the type grammar, so commas inside it (C++
    template arguments, for example) don't end it early.

    Returns:
        The type and the remaining attributes, or None if the string doesn't
        start with a type entry that parses.
    """
    if not attributes.startswith(AttributeCode.TYPE):
        return None
    if attributes.startswith(",", 1):
        return EMPTY, attributes[2:]

    cursor = Cursor(attributes, 1)
    try:
        t = parse_type_from(cursor)
    except ParseError:
        return None

    if not cursor.at_end and not cursor.read_char(","):
        return None
    return t, cursor.remaining


def split_attributes(attributes: str) -> list[Attribute]:
    """Split an attribute string on commas.

    A piece that doesn't start with an attribute code belongs to the value
    before it and was only split off because that value contains a comma.
    It is joined back on.
    """
    result: list[Attribute] = []
    if not attributes:
        return result

    for piece in attributes.split(","):
        attribute = Attribute.decode(piece)
        if attribute is not None:
            result.append(attribute)
        elif result:
            logger.debug("Joining %r onto attribute %s", piece, result[-1])
            result[-1] = Attribute(result[-1].code, f"{result[-1].value},{piece}")
        else:
            logger.debug("Dropping attribute with unknown code: %r", piece)
    return result


@dataclass(frozen=True)
class Attributes(DataClassJsonMixin):
    """The decoded attributes of a property."""

    encoding: TypeEncoding = field(metadata=config(encoder=encode, decoder=parse_type))
    non_atomic: bool = False
    read_only: bool = False
    dynamic: bool = False
    setter_type: SetterType = SetterType.ASSIGN
    custom_getter: str | None = None
    custom_setter: str | None = None
    ivar_name: str | None = None

    @classmethod
    def from_attribute_list(cls, attributes: list[Attribute], encoding: TypeEncoding = EMPTY) -> Self:
        """Fold a list of attributes. Later entries override earlier ones."""
        values: dict[str, Any] = {"encoding": encoding}
        for attribute in attributes:
            code, value = attribute.code, attribute.value
            if code == AttributeCode.TYPE:
                values["encoding"] = parse_type(value) or EMPTY
            elif code == AttributeCode.NON_ATOMIC:
                values["non_atomic"] = True
            elif code == AttributeCode.READ_ONLY:
                values["read_only"] = True
            elif code == AttributeCode.DYNAMIC:
                values["dynamic"] = True
            elif code in _SETTER_CODES:
                values["setter_type"] = _SETTER_CODES[code]
            elif not value:
                # Getter, setter and ivar entries need a name
                continue
            elif code == AttributeCode.GETTER:
                values["custom_getter"] = value
            elif code == AttributeCode.SETTER:
                values["custom_setter"] = value
            elif code == AttributeCode.IVAR:
                values["ivar_name"] = value
        return cls(**values)

    @classmethod
    def parse(cls, attributes: str) -> Self:
        """Parse a property attribute string, e.g. `Ti,R,GisEnabled,V_enabled`.

        Unrecognised entries are skipped, so this never fails.
        """
        encoding = EMPTY
        leading = split_property_type(attributes)
        if leading is not None:
            encoding, attributes = leading
        return cls.from_attribute_list(split_attributes(attributes), encoding)

    def attribute_list(self) -> list[Attribute]:
        """Return the attributes in their canonical order."""
        attributes = [Attribute(AttributeCode.TYPE, encode(self.encoding))]
        if self.read_only:
            attributes.append(Attribute(AttributeCode.READ_ONLY))
        if self.non_atomic:
            attributes.append(Attribute(AttributeCode.NON_ATOMIC))
        if self.dynamic:
            attributes.append(Attribute(AttributeCode.DYNAMIC))
        for code, setter_type in _SETTER_CODES.items():
            if self.setter_type == setter_type:
                attributes.append(Attribute(code))
        if self.custom_getter is not None:
            attributes.append(Attribute(AttributeCode.GETTER, self.custom_getter))
        if self.custom_setter is not None:
            attributes.append(Attribute(AttributeCode.SETTER, self.custom_setter))
        if self.ivar_name is not None:
            attributes.append(Attribute(AttributeCode.IVAR, self.ivar_name))
        return attributes

    def as_dict(self) -> dict[str, str]:
        """Return the attributes as a mapping of code to value."""
        return {str(a.code): a.value for a in self.attribute_list()}

    def encode(self) -> str:
        return ",".join(str(a) for a in self.attribute_list())

    def __str__(self) -> str:
        return self.encode()
