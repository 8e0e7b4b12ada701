"""Tests for the type encoding parser."""

import pytest

from typecodec.grammar import (
    BLANK,
    CHAR,
    DOUBLE,
    EMPTY,
    ID,
    INT,
    LONG_LONG,
    UNKNOWN,
    VOID,
    Array,
    Bitfield,
    Block,
    Cursor,
    Field,
    Object,
    ParseError,
    ParseErrorKind,
    Pointer,
    Qualified,
    Qualifier,
    Scalar,
    ScalarKind,
    Struct,
    Union,
    decode_type,
    encode,
    parse_optional_type,
    parse_type,
    parse_type_from,
)

SCALAR_CODES = "cislqCISLQfdBtDv*#:?"


def describe_scalars():
    @pytest.mark.parametrize("code", list(SCALAR_CODES))
    def round_trips(expect, code):
        t = decode_type(code)
        expect(t) == Scalar(ScalarKind(code))
        expect(encode(t)) == code

    def parses_blank(expect):
        expect(decode_type(" ")) == BLANK

    def empty_string_is_empty_type(expect):
        expect(decode_type("")) == EMPTY
        expect(encode(EMPTY)) == ""


def describe_objects():
    def parses_bare_id(expect):
        expect(decode_type("@")) == ID

    def parses_class_name(expect):
        expect(decode_type('@"NSString"')) == Object("NSString")

    def parses_protocols_in_order(expect):
        t = decode_type('@"NSObject<NSCopying><NSCoding>"')
        expect(t) == Object("NSObject", ("NSCopying", "NSCoding"))

    def parses_protocols_without_class(expect):
        expect(decode_type('@"<SomeProtocol>"')) == Object(None, ("SomeProtocol",))

    def keeps_empty_quoted_name(expect):
        t = decode_type('@""')
        expect(t) == Object("")
        expect(t) != ID
        expect(encode(t)) == '@""'

    def keeps_empty_protocol_name(expect):
        t = decode_type('@"A<>"')
        expect(t) == Object("A", ("",))
        expect(encode(t)) == '@"A<>"'

    @pytest.mark.parametrize("encoding", ['@"<P>Name"', '@"A<P>B"', '@"Name>"', '@"<<P>"'])
    def rejects_mixed_names(expect, encoding):
        with pytest.raises(ParseError) as exc:
            decode_type(encoding)
        expect(exc.value.kind) == ParseErrorKind.MALFORMED_NAME

    def rejects_unterminated_name(expect):
        with pytest.raises(ParseError) as exc:
            decode_type('@"NSString')
        expect(exc.value.kind) == ParseErrorKind.UNTERMINATED


def describe_blocks():
    def parses_block_without_signature(expect):
        t = decode_type("@?")
        expect(t) == Block()
        expect(t.params) == None

    def parses_block_signature(expect):
        t = decode_type('@?<v@?@"NSURLRequest">')
        expect(t) == Block((VOID, Block(), Object("NSURLRequest")))

    def empty_signature_differs_from_none(expect):
        t = decode_type("@?<>")
        expect(t) == Block(())
        expect(t) != Block()
        expect(encode(t)) == "@?<>"

    def parses_nested_block_signature(expect):
        t = decode_type("@?<v@?@?<v@?i>>")
        expect(t.params[2]) == Block((VOID, Block(), INT))

    def requires_closing_bracket(expect):
        with pytest.raises(ParseError) as exc:
            decode_type("@?<v@?")
        expect(exc.value.kind) == ParseErrorKind.UNTERMINATED

    def only_allows_missing_type_at_end(expect):
        with pytest.raises(ParseError):
            decode_type("@?<v]>")


def describe_arrays():
    def parses_count_and_type(expect):
        expect(decode_type("[12^f]")) == Array(12, Pointer(Scalar(ScalarKind.FLOAT)))

    def parses_array_without_type(expect):
        t = decode_type("[3]")
        expect(t) == Array(3)
        expect(encode(t)) == "[3]"

    def requires_count(expect):
        with pytest.raises(ParseError) as exc:
            decode_type("[i]")
        expect(exc.value.kind) == ParseErrorKind.EXPECTED_DIGIT

    def requires_closing_bracket(expect):
        with pytest.raises(ParseError) as exc:
            decode_type("[3i")
        expect(exc.value.kind) == ParseErrorKind.UNTERMINATED

    def accepts_zero_count(expect):
        expect(decode_type("[0C]")) == Array(0, Scalar(ScalarKind.UNSIGNED_CHAR))


def describe_structs_and_unions():
    def name_only_has_no_fields(expect):
        t = decode_type("{Foo}")
        expect(t) == Struct("Foo")
        expect(t.fields) == None

    def equals_sign_gives_empty_fields(expect):
        t = decode_type("{Foo=}")
        expect(t) == Struct("Foo", ())
        expect(t) != decode_type("{Foo}")
        expect(encode(t)) == "{Foo=}"

    def union_name_only_has_no_fields(expect):
        t = decode_type("(U)")
        expect(t) == Union("U")
        expect(t.fields) == None
        expect(encode(t)) == "(U)"

    def union_equals_sign_gives_empty_fields(expect):
        t = decode_type("(U=)")
        expect(t) == Union("U", ())
        expect(t) != decode_type("(U)")
        expect(encode(t)) == "(U=)"

    def parses_typed_fields(expect):
        t = decode_type("{CGPoint=dd}")
        expect(t) == Struct("CGPoint", (Field(type=DOUBLE), Field(type=DOUBLE)))

    def parses_named_fields(expect):
        t = decode_type('{YorkshireTeaStruct="pot"i"lady"c}')
        expect(t.fields) == (Field("pot", INT), Field("lady", CHAR))

    def parses_names_without_types(expect):
        t = decode_type('{?="max""min"}')
        expect(t) == Struct("?", (Field("max"), Field("min")))

    def parses_union(expect):
        t = decode_type('(MoneyUnion="alone"f"down"d)')
        expect(t) == Union("MoneyUnion", (Field("alone", Scalar(ScalarKind.FLOAT)), Field("down", DOUBLE)))
        expect(t) != Struct("MoneyUnion", t.fields)

    def keeps_commas_and_brackets_in_names(expect, vector_struct):
        t = decode_type(vector_struct)
        expect(t.name) == "vector<long long, std::allocator<long long>>"
        expect(len(t.fields)) == 3
        expect(t.fields[2].type.name) == "__compressed_pair<long long *, std::allocator<long long>>"
        expect(t.fields[2].type.fields) == (Field(type=Pointer(LONG_LONG)),)

    def parses_bitfields(expect, basic_string):
        t = decode_type(basic_string)
        rep = t.fields[0].type.fields[0].type
        long_layout = rep.fields[0].type.fields[0].type
        expect(long_layout.fields[2].type) == Bitfield(63)

    def requires_closing_brace(expect):
        with pytest.raises(ParseError) as exc:
            decode_type("{CGPoint=dd")
        expect(exc.value.kind) == ParseErrorKind.UNTERMINATED

    def requires_closing_brace_after_name(expect):
        with pytest.raises(ParseError) as exc:
            decode_type("{CGPoint")
        expect(exc.value.kind) == ParseErrorKind.UNTERMINATED


def describe_pointers():
    def parses_pointer_chain(expect):
        expect(decode_type("^^i")) == Pointer(Pointer(INT))

    def parses_pointer_to_empty_struct(expect):
        expect(decode_type("^{_NSZone=}")) == Pointer(Struct("_NSZone", ()))

    def parses_bare_pointer(expect):
        expect(decode_type("^")) == Pointer()

    def parses_function_pointer(expect):
        expect(decode_type("^?")) == Pointer(UNKNOWN)


def describe_qualifiers():
    @pytest.mark.parametrize("code", list("rAnoNVOR"))
    def wraps_inner_type(expect, code):
        expect(decode_type(f"{code}i")) == Qualified(Qualifier(code), INT)

    def nests_qualifiers(expect):
        t = decode_type("rA^v")
        expect(t) == Qualified(Qualifier.CONST, Qualified(Qualifier.ATOMIC, Pointer(VOID)))

    def requires_inner_type(expect):
        with pytest.raises(ParseError) as exc:
            decode_type("r")
        expect(exc.value.kind) == ParseErrorKind.UNTERMINATED

    def rejects_terminator_as_inner_type(expect):
        with pytest.raises(ParseError) as exc:
            decode_type("^r}")
        expect(exc.value.kind) == ParseErrorKind.UNKNOWN_CHARACTER


def describe_errors():
    def rejects_unknown_character(expect):
        with pytest.raises(ParseError) as exc:
            decode_type("{A=iz}")
        expect(exc.value.kind) == ParseErrorKind.UNKNOWN_CHARACTER
        expect(exc.value.position) == 4

    def rejects_trailing_data(expect):
        with pytest.raises(ParseError) as exc:
            decode_type("ii")
        expect(exc.value.kind) == ParseErrorKind.TRAILING_DATA

    @pytest.mark.parametrize("encoding", ["[03i]", "[00]", "b05", "{S=b007}", "^[010c]"])
    def rejects_zero_padded_numbers(expect, encoding):
        with pytest.raises(ParseError) as exc:
            decode_type(encoding)
        expect(exc.value.kind) == ParseErrorKind.LEADING_ZERO
        expect(parse_type(encoding)) == None

    def parse_type_returns_none(expect):
        expect(parse_type("ii")) == None
        expect(parse_type("{A")) == None
        expect(parse_type("i")) == INT


def describe_partial_parsing():
    def leaves_remaining_input(expect):
        cursor = Cursor("^{_NSZone=}16")
        expect(parse_type_from(cursor)) == Pointer(Struct("_NSZone", ()))
        expect(cursor.remaining) == "16"

    @pytest.mark.parametrize("remaining", ["", "]", "}", ")", '"x"', ",N", ">", "8"])
    def optional_type_stops_at_terminators(expect, remaining):
        cursor = Cursor(remaining)
        expect(parse_optional_type(cursor)) == None
        expect(cursor.pos) == 0

    def optional_type_parses_type(expect):
        cursor = Cursor("i]")
        expect(parse_optional_type(cursor)) == INT
        expect(cursor.remaining) == "]"


def describe_deep_nesting():
    def parses_thousands_of_pointers(expect):
        depth = 5000
        t = decode_type("^" * depth + "i")
        for _ in range(depth):
            t = t.pointee
        expect(t) == INT

    def parses_deeply_nested_structs(expect):
        depth = 3000
        encoding = "{S=" * depth + "i" + "}" * depth
        t = decode_type(encoding)
        expect(encode(t)) == encoding

    def compares_deep_values(expect):
        depth = 3000
        expect(decode_type("^" * depth + "i")) == decode_type("^" * depth + "i")
        expect(decode_type("^" * depth + "i")) != decode_type("^" * depth + "c")
        expect(hash(decode_type("^" * depth + "i"))) == hash(decode_type("^" * depth + "i"))

    def compares_deeply_nested_structs(expect):
        encoding = "{S=" * 3000 + "i" + "}" * 3000
        expect(decode_type(encoding)) == decode_type(encoding)
        expect(decode_type(encoding)) != decode_type("(S=" + encoding[3:-1] + ")")
