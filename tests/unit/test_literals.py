from __future__ import annotations

import math

import numpy as np
import pytest

from wfmt import Named, Rune, sprintf
from wfmt.errors import LiteralSyntaxError, UnsupportedValueError
from wfmt.literals import parse_arguments, parse_literal, parse_number, unescape


@pytest.mark.unit
@pytest.mark.parametrize(
    "text,expected",
    [
        ("42", 42),
        ("-7", -7),
        ("+3", 3),
        ("0x1f", 31),
        ("0o17", 15),
        ("0b101", 5),
        ("007", 7),
        ("3.5", 3.5),
        ("1e3", 1000.0),
        (".5", 0.5),
        ("2i", 2j),
        ("-1.5i", complex(0, -1.5)),
    ],
)
def test_parse_number(text: str, expected: object):
    value = parse_number(text)
    assert value == expected
    assert type(value) is type(expected)


@pytest.mark.unit
def test_special_floats():
    assert math.isinf(parse_literal("Inf"))
    assert parse_literal("-Inf") < 0
    assert math.isnan(parse_literal("NaN"))


@pytest.mark.unit
def test_scalars():
    assert parse_literal("nil") is None
    assert parse_literal("true") is True
    assert parse_literal("false") is False
    assert parse_literal("(1+2i)") == complex(1, 2)
    assert parse_literal("( 1.5 -0.5i )") == complex(1.5, -0.5)


@pytest.mark.unit
def test_strings_and_runes():
    assert parse_literal('"a\\tb"') == "a\tb"
    assert parse_literal('"\\u65e5\\U0001F600"') == "日\U0001F600"
    assert parse_literal('b"\\xff\\101"') == b"\xffA"
    assert parse_literal('"\\xff"').encode("utf-8", "surrogateescape") == b"\xff"
    assert parse_literal("'x'") == Rune("x")
    assert parse_literal("'\\n'") == Rune("\n")
    assert parse_literal("'\\xff'") == Rune(0xFF)
    assert isinstance(parse_literal("'日'"), Rune)


@pytest.mark.unit
def test_sequences_and_bytes():
    assert parse_literal('[1, "a", nil, [true]]') == [1, "a", None, [True]]
    assert parse_literal("[]") == []
    assert parse_literal("bytes[1, 0xff]") == b"\x01\xff"
    assert parse_literal("bytes[]") == b""


@pytest.mark.unit
def test_conversions():
    small = parse_literal("uint8(7)")
    assert isinstance(small, np.uint8) and small == 7
    assert isinstance(parse_literal("int16(-3)"), np.int16)
    assert parse_literal("byte(65)") == np.uint8(65)
    assert parse_literal("int(5)") == 5
    assert parse_literal("rune(65)") == Rune("A")
    unsigned = parse_literal("uint(5)")
    assert isinstance(unsigned, Named) and unsigned.type_name == "uint"
    assert isinstance(parse_literal("float32(0.1)"), np.float32)
    assert isinstance(parse_literal("complex64((1+2i))"), np.complex64)
    assert isinstance(parse_literal("int16(uint8(3))"), np.int16)


@pytest.mark.unit
@pytest.mark.parametrize(
    "text",
    ["int8(200)", "uint8(-1)", "bytes[256]", 'float64("x")', "uint8(1.5)", "uint(-1)"],
)
def test_unsupported_values(text: str):
    with pytest.raises(UnsupportedValueError):
        parse_literal(text)


@pytest.mark.unit
@pytest.mark.parametrize(
    "text",
    ["", "1 2", "[1,", "nope", "'ab'", '"\\q"', '"\\ud800"', '"\\x4"', "(1 2)"],
)
def test_syntax_errors(text: str):
    with pytest.raises(LiteralSyntaxError):
        parse_literal(text)


@pytest.mark.unit
def test_syntax_error_carries_position():
    with pytest.raises(LiteralSyntaxError) as exc:
        parse_literal("1 2")
    assert exc.value.position == "1:3"
    assert str(exc.value).endswith("at 1:3")


@pytest.mark.unit
def test_unescape_octal_range():
    assert unescape("\\101") == "A"
    with pytest.raises(LiteralSyntaxError):
        unescape("\\777")
    with pytest.raises(LiteralSyntaxError):
        unescape("trailing\\")


@pytest.mark.unit
def test_parsed_arguments_format_like_native_values():
    args = parse_arguments(['"日本"', "uint8(255)", "float32(0.1)", "'x'", "[1, nil]"])
    assert sprintf("%-6s|%x|%v|%c|%v", *args) == "日本  |ff|0.1|x|[1 <nil>]"
    assert sprintf("%T %T", *parse_arguments(["uint(1)", "int64(1)"])) == "uint int64"
