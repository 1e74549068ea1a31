"""
wfmt argument literals - typed values for the command line and the HTTP API

The engine itself takes Python values. Shell callers only have strings, so
each argument is written as a small literal (``42``, ``uint8(7)``, ``"hi"``,
``b"\\xff"``, ``'x'``, ``(1+2i)``, ``[1, "a", nil]``) and parsed here with Lark.
"""

from __future__ import annotations

import logging
from typing import Any, List, Sequence

import numpy as np
from lark import Lark, Transformer, v_args
from lark.exceptions import LarkError, UnexpectedInput, VisitError

from wfmt.errors import LiteralSyntaxError, UnsupportedValueError, WfmtError
from wfmt.value_model import Named, Rune

logger = logging.getLogger(__name__)

# Lark grammar for argument literals
grammar = r"""
    ?start: value

    ?value: "nil" -> nil
          | "true" -> true
          | "false" -> false
          | NUMBER -> number
          | "(" NUMBER NUMBER ")" -> complex_pair
          | STRING -> string
          | BYTE_STRING -> byte_string
          | RUNE -> rune
          | "[" (value ("," value)*)? "]" -> sequence
          | "bytes" "[" (NUMBER ("," NUMBER)*)? "]" -> byte_list
          | TYPE_NAME "(" value ")" -> conversion

    NUMBER: /[+-]?(?:0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|Inf|NaN)i?/
    STRING: /"(?:[^"\\]|\\.)*"/
    BYTE_STRING: /b"(?:[^"\\]|\\.)*"/
    RUNE: /'(?:[^'\\]|\\.)+'/
    TYPE_NAME: /(?:u?int(?:8|16|32|64)?|byte|rune|float(?:32|64)|complex(?:64|128))\b/

    %import common.WS
    %ignore WS
"""

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    "'": "'",
    '"': '"',
}

_HEX_ESCAPES = {"x": 2, "u": 4, "U": 8}

_SIZED_INTS = {
    "int8": np.int8,
    "int16": np.int16,
    "int32": np.int32,
    "int64": np.int64,
    "uint8": np.uint8,
    "byte": np.uint8,
    "uint16": np.uint16,
    "uint32": np.uint32,
    "uint64": np.uint64,
}
_FLOATS = {"float32": np.float32, "float64": np.float64}
_COMPLEXES = {"complex64": np.complex64, "complex128": np.complex128}

_INT64 = np.iinfo(np.int64)
_UINT64 = np.iinfo(np.uint64)
_INT32 = np.iinfo(np.int32)


def _byte_char(value: int) -> str:
    # raw bytes above ASCII survive in str as surrogate escapes
    return chr(value) if value < 0x80 else chr(0xDC00 + value)


def unescape(body: str, position: str = "") -> str:
    """Decode backslash escapes in the body of a quoted literal"""
    out: List[str] = []
    i = 0
    while i < len(body):
        char = body[i]
        if char != "\\":
            out.append(char)
            i += 1
            continue
        if i + 1 >= len(body):
            raise LiteralSyntaxError("unterminated escape", position)
        code = body[i + 1]
        if code in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[code])
            i += 2
        elif code in _HEX_ESCAPES:
            size = _HEX_ESCAPES[code]
            digits = body[i + 2 : i + 2 + size]
            if len(digits) != size or any(d not in "0123456789abcdefABCDEF" for d in digits):
                raise LiteralSyntaxError(f"invalid \\{code} escape", position)
            value = int(digits, 16)
            if code == "x":
                out.append(_byte_char(value))
            elif value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
                raise LiteralSyntaxError(f"escape is not a valid code point: {digits}", position)
            else:
                out.append(chr(value))
            i += 2 + size
        elif "0" <= code <= "7":
            digits = body[i + 1 : i + 4]
            if len(digits) != 3 or any(d not in "01234567" for d in digits):
                raise LiteralSyntaxError("invalid octal escape", position)
            value = int(digits, 8)
            if value > 0xFF:
                raise LiteralSyntaxError(f"octal escape out of range: {digits}", position)
            out.append(_byte_char(value))
            i += 4
        else:
            raise LiteralSyntaxError(f"unknown escape sequence \\{code}", position)
    return "".join(out)


def parse_number(text: str) -> int | float | complex:
    """Integer, float or imaginary number from a NUMBER token"""
    imaginary = text.endswith("i") and not text.endswith("Inf")
    body = text[:-1] if imaginary else text
    stripped = body.lstrip("+-")
    if stripped in ("Inf", "NaN"):
        value: int | float = float(body)
    elif "." in stripped or (
        not stripped.startswith(("0x", "0X")) and ("e" in stripped or "E" in stripped)
    ):
        value = float(body)
    else:
        try:
            value = int(body, 0)
        except ValueError:
            # leading zeros, e.g. 007
            value = int(body, 10)
    if imaginary:
        return complex(0, value)
    return value


def _is_integer(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_))


def _is_real(value: Any) -> bool:
    return _is_integer(value) or isinstance(value, (float, np.floating))


def convert(type_name: str, value: Any) -> Any:
    """Apply a typed conversion such as ``uint8(7)`` or ``float32(0.1)``"""
    if type_name in _SIZED_INTS or type_name in ("int", "uint", "rune"):
        if not _is_integer(value):
            raise UnsupportedValueError(f"cannot convert {value!r} to {type_name}")
        number = int(value)
        if type_name == "int":
            limits = _INT64
        elif type_name == "uint":
            limits = _UINT64
        elif type_name == "rune":
            limits = _INT32
        else:
            limits = np.iinfo(_SIZED_INTS[type_name])
        if not limits.min <= number <= limits.max:
            raise UnsupportedValueError(f"{number} overflows {type_name}")
        if type_name == "int":
            return number
        if type_name == "uint":
            return Named(np.uint64(number), "uint")
        if type_name == "rune":
            return Rune(number)
        return _SIZED_INTS[type_name](number)
    if type_name in _FLOATS:
        if not _is_real(value):
            raise UnsupportedValueError(f"cannot convert {value!r} to {type_name}")
        return _FLOATS[type_name](value)
    if type_name in _COMPLEXES:
        if not (_is_real(value) or isinstance(value, (complex, np.complexfloating))):
            raise UnsupportedValueError(f"cannot convert {value!r} to {type_name}")
        return _COMPLEXES[type_name](value)
    raise UnsupportedValueError(f"unknown type {type_name}")


def _position(token: Any) -> str:
    line = getattr(token, "line", None)
    column = getattr(token, "column", None)
    if line is None:
        return ""
    return f"{line}:{column}"


@v_args(inline=True)
class LiteralTransformer(Transformer):
    """Transform the parse tree into Python argument values"""

    def nil(self):
        return None

    def true(self):
        return True

    def false(self):
        return False

    def number(self, token):
        return parse_number(str(token))

    def complex_pair(self, real_token, imag_token):
        real = parse_number(str(real_token))
        imag = parse_number(str(imag_token))
        if isinstance(real, complex) or not isinstance(imag, complex):
            raise LiteralSyntaxError(
                "complex literal must be (real+imagi)", _position(real_token)
            )
        return complex(real, imag.imag)

    def string(self, token):
        return unescape(token[1:-1], _position(token))

    def byte_string(self, token):
        return unescape(token[2:-1], _position(token)).encode("utf-8", "surrogateescape")

    def rune(self, token):
        text = unescape(token[1:-1], _position(token))
        if len(text) != 1:
            raise LiteralSyntaxError("rune literal must hold one character", _position(token))
        code = ord(text)
        if 0xDC80 <= code <= 0xDCFF:
            code -= 0xDC00
        return Rune(code)

    def sequence(self, *items):
        return list(items)

    def byte_list(self, *tokens):
        values = [parse_number(str(token)) for token in tokens]
        for token, value in zip(tokens, values):
            if not _is_integer(value) or not 0 <= value <= 0xFF:
                raise UnsupportedValueError(f"byte out of range: {token}", _position(token))
        return bytes(values)

    def conversion(self, type_name, value):
        return convert(str(type_name), value)


# Create the parser
parser = Lark(grammar, start="start", parser="lalr")


def parse_literal(text: str) -> Any:
    """
    Parse one argument literal

    Args:
        text: literal source, e.g. ``uint8(7)`` or ``"héllo"``

    Returns:
        The Python value handed to the formatter
    """
    try:
        tree = parser.parse(text)
    except UnexpectedInput as exc:
        raise LiteralSyntaxError(
            f"invalid literal {text!r}", f"{exc.line}:{exc.column}"
        ) from exc
    except LarkError as exc:
        raise LiteralSyntaxError(f"invalid literal {text!r}: {exc}") from exc

    try:
        return LiteralTransformer().transform(tree)
    except VisitError as exc:
        if isinstance(exc.orig_exc, WfmtError):
            raise exc.orig_exc from None
        raise LiteralSyntaxError(f"invalid literal {text!r}: {exc.orig_exc}") from exc


def parse_arguments(texts: Sequence[str]) -> List[Any]:
    values = [parse_literal(text) for text in texts]
    logger.debug("parsed %d argument literals", len(values))
    return values
