"""Numeric bodies: integers in every base, floats, complex numbers, ``U+`` form."""

from __future__ import annotations

import math
import struct

import numpy as np

from wfmt.format_spec import FormatSpec
from wfmt.padding import Body, Fill, pad
from wfmt.quoting import valid_rune

# verb -> (float format, default precision); -1 asks for the shortest form
FLOAT_VERBS = {
    "v": ("g", -1),
    "b": ("b", -1),
    "g": ("g", -1),
    "G": ("G", -1),
    "e": ("e", 6),
    "E": ("E", 6),
    "f": ("f", 6),
    "F": ("f", 6),
}

_BASE_FORMATS = {2: "b", 8: "o", 10: "d", 16: "x"}

_UINT64_MASK = (1 << 64) - 1


def format_integer(
    number: int, base: int, spec: FormatSpec, *, upper: bool = False, verb: str = "d"
) -> Body:
    negative = number < 0
    magnitude = -number if negative else number

    precision = spec.precision
    if precision is not None:
        if precision == 0 and magnitude == 0:
            # only the padding survives
            return Body(" " * (spec.width or 0), Fill.NONE)
    elif spec.zero and spec.width is not None:
        precision = spec.width
        if negative or spec.plus or spec.space:
            precision -= 1

    digits = format(magnitude, _BASE_FORMATS[base])
    if upper:
        digits = digits.upper()
    if precision is not None and len(digits) < precision:
        digits = "0" * (precision - len(digits)) + digits

    prefix = ""
    if spec.sharp:
        if base == 2:
            prefix = "0b"
        elif base == 8:
            if digits[0] != "0":
                prefix = "0"
        elif base == 16:
            prefix = "0X" if upper else "0x"
    if verb == "O":
        prefix = "0o" + prefix

    sign = ""
    if negative:
        sign = "-"
    elif spec.plus:
        sign = "+"
    elif spec.space:
        sign = " "
    return Body(sign + prefix + digits, Fill.SPACES)


def format_hex64(number: int, leading0x: bool, spec: FormatSpec) -> Body:
    """Lower-case hex with the ``0x`` prefix toggled by ``leading0x``."""
    return format_integer(number, 16, spec.with_flags(sharp=leading0x), verb="v")


def format_unicode(number: int, spec: FormatSpec) -> Body:
    code = number & _UINT64_MASK
    precision = 4
    if spec.precision is not None and spec.precision > 4:
        precision = spec.precision
    text = "U+" + format(code, "X").rjust(precision, "0")
    if spec.sharp and valid_rune(code) and chr(code).isprintable():
        text += " '" + chr(code) + "'"
    return Body(text, Fill.SPACES)


def shortest_digits(value: float, size: int) -> tuple[str, int]:
    """Shortest decimal digits that round-trip at `size` bits.

    Returns ``(digits, decimal_point)`` where the value is
    ``0.digits * 10**decimal_point``; zero is ``("", 0)``.
    """
    scalar = np.float32(value) if size == 32 else np.float64(value)
    text = np.format_float_scientific(abs(scalar), unique=True, trim="-")
    mantissa, _, exponent = text.partition("e")
    digits = mantissa.replace(".", "").rstrip("0")
    if not digits:
        return "", 0
    return digits, int(exponent) + 1


def _exponent_form(
    negative: bool, digits: str, point: int, precision: int, exp_char: str
) -> str:
    out = ["-" if negative else "", digits[0] if digits else "0"]
    if precision > 0:
        fraction = digits[1 : 1 + precision]
        out.append("." + fraction + "0" * (precision - len(fraction)))
    exponent = point - 1 if digits else 0
    sign = "-" if exponent < 0 else "+"
    out.append(f"{exp_char}{sign}{abs(exponent):02d}")
    return "".join(out)


def _fixed_form(negative: bool, digits: str, point: int, precision: int) -> str:
    out = ["-" if negative else ""]
    if point > 0:
        whole = digits[:point]
        out.append(whole + "0" * (point - len(whole)))
    else:
        out.append("0")
    if precision > 0:
        out.append(".")
        for i in range(precision):
            j = point + i
            out.append(digits[j] if 0 <= j < len(digits) else "0")
    return "".join(out)


def _shortest_general(value: float, size: int, exp_char: str) -> str:
    negative = math.copysign(1.0, value) < 0
    digits, point = shortest_digits(value, size)
    exponent = point - 1
    if exponent < -4 or exponent >= 6:
        return _exponent_form(negative, digits, point, len(digits) - 1, exp_char)
    return _fixed_form(negative, digits, point, max(len(digits) - point, 0))


def _binary_exponent(value: float, size: int) -> str:
    if size == 32:
        (bits,) = struct.unpack(">I", struct.pack(">f", value))
        mant_bits, exp_bits, bias = 23, 8, 127
    else:
        (bits,) = struct.unpack(">Q", struct.pack(">d", value))
        mant_bits, exp_bits, bias = 52, 11, 1023
    negative = bits >> (mant_bits + exp_bits)
    exponent = (bits >> mant_bits) & ((1 << exp_bits) - 1)
    mantissa = bits & ((1 << mant_bits) - 1)
    if exponent == 0:
        exponent = 1  # denormal
    else:
        mantissa |= 1 << mant_bits
    exponent -= bias + mant_bits
    sign = "+" if exponent >= 0 else "-"
    return f"{'-' if negative else ''}{mantissa}p{sign}{abs(exponent)}"


def float_text(value: float, fmt: str, precision: int, size: int = 64) -> str:
    """Signed textual form of a float in one of the ``b e E f g G`` formats."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if fmt == "b":
        return _binary_exponent(value, size)
    if precision < 0:
        if fmt in "gG":
            return _shortest_general(value, size, "e" if fmt == "g" else "E")
        negative = math.copysign(1.0, value) < 0
        digits, point = shortest_digits(value, size)
        if fmt in "eE":
            return _exponent_form(negative, digits, point, max(len(digits) - 1, 0), fmt)
        return _fixed_form(negative, digits, point, max(len(digits) - point, 0))
    return format(value, f".{precision}{fmt}")


def _alternate_form(num: str, fmt: str, precision: int) -> str:
    """Apply ``#``: always keep the decimal point, keep trailing zeros for g."""
    digits = precision
    if fmt in "gG":
        if digits == -1:
            digits = 6
    else:
        digits = 0

    tail = ""
    has_point = False
    saw_nonzero = False
    for i in range(1, len(num)):
        char = num[i]
        if char == ".":
            has_point = True
        elif char in "eE":
            tail = num[i:]
            num = num[:i]
            break
        else:
            if char != "0":
                saw_nonzero = True
            if saw_nonzero:
                digits -= 1
    if not has_point:
        if len(num) == 2 and num[1] == "0":
            digits -= 1
        num += "."
    if digits > 0:
        num += "0" * digits
    return num + tail


def format_float(
    value: float, size: int, fmt: str, precision: int, spec: FormatSpec
) -> Body:
    if spec.precision is not None:
        precision = spec.precision
    num = float_text(value, fmt, precision, size)
    if num[0] not in "+-":
        num = "+" + num
    if spec.space and num[0] == "+" and not spec.plus:
        num = " " + num[1:]

    if num[1] in "IN":
        if num[1] == "N" and not spec.space and not spec.plus:
            num = num[1:]
        return Body(num, Fill.SPACES)

    if spec.sharp and fmt != "b":
        num = _alternate_form(num, fmt, precision)

    if spec.plus or num[0] != "+":
        return Body(num, Fill.AFTER_SIGN)
    return Body(num[1:], Fill.WHOLE)


def format_complex(
    value: complex, size: int, fmt: str, precision: int, spec: FormatSpec
) -> Body:
    """``(real+imagi)``, each part padded on its own; `size` covers both parts."""
    part_size = size // 2
    imag_spec = spec.with_flags(plus=True)
    real = format_float(value.real, part_size, fmt, precision, spec)
    imag = format_float(value.imag, part_size, fmt, precision, imag_spec)
    return Body("(" + pad(real, spec) + pad(imag, imag_spec) + "i)", Fill.NONE)
