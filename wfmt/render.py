"""Value renderer: (kind, verb) dispatch table producing unpadded bodies."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Set

from wfmt import errors
from wfmt.format_spec import FormatSpec
from wfmt.numeric import (
    FLOAT_VERBS,
    format_complex,
    format_float,
    format_hex64,
    format_integer,
    format_unicode,
)
from wfmt.padding import Body, Diagnostic, Fill, Rendered, finish, padding
from wfmt.quoting import RUNE_ERROR, can_backquote, quote, quote_rune, valid_rune
from wfmt.value_model import FmtValue, ValueKind, adapt_value

logger = logging.getLogger(__name__)

MAX_DEPTH = 64

_UINT64_MASK = (1 << 64) - 1

_INTEGER_BASES = {
    "b": (2, False),
    "o": (8, False),
    "O": (8, False),
    "d": (10, False),
    "x": (16, False),
    "X": (16, True),
}


@dataclass
class RenderContext:
    """Recursion state for one top-level argument."""

    depth: int = 0
    active: Set[int] = field(default_factory=set)


Renderer = Callable[[RenderContext, FmtValue, str, FormatSpec], Rendered]


def truncate(text: str, spec: FormatSpec) -> str:
    if spec.precision is not None and spec.precision < len(text):
        return text[: spec.precision]
    return text


# strings and bytes


def _string_body(text: str, spec: FormatSpec) -> Body:
    return Body(truncate(text, spec))


def _quoted_body(text: str, spec: FormatSpec) -> Body:
    text = truncate(text, spec)
    if spec.sharp and can_backquote(text):
        return Body("`" + text + "`")
    return Body(quote(text, ascii_only=spec.plus))


def hex_body(data: bytes, spec: FormatSpec, upper: bool) -> Body:
    """Hex encoding of `data`; precision limits the number of bytes encoded."""
    length = len(data)
    if spec.precision is not None and spec.precision < length:
        length = spec.precision
    if length <= 0:
        return Body(padding(spec.width or 0, spec), Fill.NONE)
    prefix = "0X" if upper else "0x"
    pair = "{:02X}" if upper else "{:02x}"
    out = [prefix] if spec.sharp else []
    for i, byte in enumerate(data[:length]):
        if spec.space and i > 0:
            out.append(" ")
            if spec.sharp:
                out.append(prefix)
        out.append(pair.format(byte))
    return Body("".join(out))


def _utf8(text: str) -> bytes:
    return text.encode("utf-8", "surrogateescape")


def render_string(ctx: RenderContext, value: FmtValue, verb: str, spec: FormatSpec) -> Rendered:
    text = value.raw
    if verb == "v":
        if spec.sharp_v:
            return _quoted_body(text, spec)
        return _string_body(text, spec)
    if verb == "s":
        return _string_body(text, spec)
    if verb == "q":
        return _quoted_body(text, spec)
    return hex_body(_utf8(text), spec, upper=verb == "X")


def render_bytes(ctx: RenderContext, value: FmtValue, verb: str, spec: FormatSpec) -> Rendered:
    data = value.raw
    if verb == "s":
        text = truncate(data.decode("utf-8", "surrogateescape"), spec)
        return Body(_utf8(text).decode("utf-8", "replace"))
    if verb == "q":
        return _quoted_body(data.decode("utf-8", "surrogateescape"), spec)
    return hex_body(data, spec, upper=verb == "X")


# numbers


def render_bool(ctx: RenderContext, value: FmtValue, verb: str, spec: FormatSpec) -> Rendered:
    return Body("true" if value.raw else "false")


def render_integer(ctx: RenderContext, value: FmtValue, verb: str, spec: FormatSpec) -> Rendered:
    number = value.raw
    if verb == "v":
        if spec.sharp_v and not value.is_signed:
            return format_hex64(number, True, spec)
        return format_integer(number, 10, spec, verb=verb)
    if verb in _INTEGER_BASES:
        base, upper = _INTEGER_BASES[verb]
        return format_integer(number, base, spec, upper=upper, verb=verb)
    code = number & _UINT64_MASK
    if verb == "c":
        return Body(chr(code if valid_rune(code) else RUNE_ERROR))
    if verb == "q":
        return Body(quote_rune(code, ascii_only=spec.plus))
    return format_unicode(number, spec)


def render_float(ctx: RenderContext, value: FmtValue, verb: str, spec: FormatSpec) -> Rendered:
    fmt, precision = FLOAT_VERBS[verb]
    return format_float(value.raw, value.size, fmt, precision, spec)


def render_complex(ctx: RenderContext, value: FmtValue, verb: str, spec: FormatSpec) -> Rendered:
    fmt, precision = FLOAT_VERBS[verb]
    return format_complex(value.raw, value.size, fmt, precision, spec)


# pointers


def _address(value: FmtValue) -> int:
    if value.kind is ValueKind.POINTER:
        return value.raw
    return id(value.source)


def _pointer_hex(address: int, leading0x: bool, spec: FormatSpec) -> Body:
    if spec.precision:
        # a precision shorter than the digits keeps the low-order digits
        address &= (1 << (4 * spec.precision)) - 1
    return format_hex64(address, leading0x, spec)


def render_pointer(ctx: RenderContext, value: FmtValue, verb: str, spec: FormatSpec) -> Rendered:
    address = _address(value)
    if verb == "v":
        if spec.sharp_v:
            if address == 0:
                inner = errors.NIL
            else:
                inner = finish(_pointer_hex(address, True, spec), spec)
            return Body(f"({value.type_name})({inner})", Fill.NONE)
        if address == 0:
            return Body(errors.NIL_ANGLE)
        return _pointer_hex(address, not spec.sharp, spec)
    if verb == "p":
        return _pointer_hex(address, not spec.sharp, spec)
    base, upper = _INTEGER_BASES[verb]
    return format_integer(address, base, spec, upper=upper, verb=verb)


# sequences


def render_elements(ctx: RenderContext, value: FmtValue, verb: str, spec: FormatSpec) -> Rendered:
    """Render each element with the directive's verb and flags."""
    if value.kind is ValueKind.BYTES:
        items = [FmtValue(ValueKind.UINT, byte, "uint8", size=8) for byte in value.raw]
    else:
        items = list(value.raw)

    key = id(value.source) if value.source is not None else None
    if key is not None and key in ctx.active:
        return Diagnostic(errors.bad_verb_token(verb, errors.CYCLE))
    if ctx.depth >= MAX_DEPTH:
        return Diagnostic(errors.bad_verb_token(verb, errors.DEPTH))

    if spec.sharp_v:
        head, separator, tail = value.label + "{", ", ", "}"
    else:
        head, separator, tail = "[", " ", "]"

    if key is not None:
        ctx.active.add(key)
    ctx.depth += 1
    try:
        parts = [finish(render_nested(ctx, item, verb, spec), spec) for item in items]
    finally:
        ctx.depth -= 1
        ctx.active.discard(key)
    return Body(head + separator.join(parts) + tail, Fill.NONE)


# objects


def _object_text(
    value: FmtValue, verb: str, method: Callable[[Any], str]
) -> str | Diagnostic:
    try:
        return method(value.raw)
    except Exception as exc:
        logger.debug("%s() of %s raised", method.__name__, value.type_name, exc_info=True)
        return Diagnostic(errors.panic_token(verb, f"String method: {exc}"))


def render_object(ctx: RenderContext, value: FmtValue, verb: str, spec: FormatSpec) -> Rendered:
    """Objects render through ``str()``, or ``repr()`` for ``%#v``."""
    if verb == "v" and spec.sharp_v:
        text = _object_text(value, verb, repr)
        if isinstance(text, Diagnostic):
            return text
        return Body(text, Fill.NONE)
    text = _object_text(value, verb, str)
    if isinstance(text, Diagnostic):
        return text
    return render_string(ctx, FmtValue(ValueKind.STRING, text, "string"), verb, spec)


_INTEGER_TABLE: Dict[str, Renderer] = {
    verb: render_integer for verb in ("v", "d", "b", "o", "O", "x", "X", "c", "q", "U")
}
_FLOAT_TABLE: Dict[str, Renderer] = {verb: render_float for verb in FLOAT_VERBS}
_COMPLEX_TABLE: Dict[str, Renderer] = {verb: render_complex for verb in FLOAT_VERBS}

DISPATCH: Dict[ValueKind, Dict[str, Renderer]] = {
    ValueKind.BOOL: {"t": render_bool, "v": render_bool},
    ValueKind.INT: _INTEGER_TABLE,
    ValueKind.UINT: _INTEGER_TABLE,
    ValueKind.CHAR: _INTEGER_TABLE,
    ValueKind.FLOAT: _FLOAT_TABLE,
    ValueKind.COMPLEX: _COMPLEX_TABLE,
    ValueKind.STRING: {verb: render_string for verb in ("v", "s", "q", "x", "X")},
    ValueKind.BYTES: {verb: render_bytes for verb in ("s", "q", "x", "X")},
    ValueKind.POINTER: {
        verb: render_pointer for verb in ("v", "p", "b", "o", "d", "x", "X")
    },
    ValueKind.COMPOSITE: {},
    ValueKind.OBJECT: {verb: render_object for verb in ("v", "s", "q", "x", "X")},
}

# used when the kind's table has no entry for the verb
FALLBACK: Dict[ValueKind, Renderer] = {
    ValueKind.BYTES: render_elements,
    ValueKind.COMPOSITE: render_elements,
}

_ADDRESSABLE = frozenset({ValueKind.POINTER, ValueKind.BYTES, ValueKind.COMPOSITE})


def bad_verb(ctx: RenderContext, value: FmtValue, verb: str, spec: FormatSpec) -> Diagnostic:
    """``%!verb(type=value)``, the value rendered with ``%v`` and the same flags."""
    if value.kind is ValueKind.NIL:
        return Diagnostic(errors.bad_verb_token(verb, errors.NIL_ANGLE))
    shown = finish(dispatch(ctx, value, "v", spec), spec)
    return Diagnostic(errors.bad_verb_token(verb, f"{value.type_name}={shown}"))


def dispatch(ctx: RenderContext, value: FmtValue, verb: str, spec: FormatSpec) -> Rendered:
    renderer = DISPATCH[value.kind].get(verb) or FALLBACK.get(value.kind)
    if renderer is None:
        logger.debug("no renderer for %s with verb %r", value.kind.name, verb)
        return bad_verb(ctx, value, verb, spec)
    return renderer(ctx, value, verb, spec)


def render_nested(ctx: RenderContext, item: Any, verb: str, spec: FormatSpec) -> Rendered:
    """Render an element inside a composite; nil elements print as ``<nil>``."""
    value = adapt_value(item)
    if value.kind is ValueKind.NIL:
        if spec.sharp_v:
            return Body("interface {}" + errors.NIL_PAREN, Fill.NONE)
        return Body(errors.NIL_ANGLE, Fill.NONE)
    return dispatch(ctx, value, verb, spec)


def render_value(arg: Any, verb: str, spec: FormatSpec) -> Rendered:
    """Render one top-level argument for a directive."""
    value = adapt_value(arg)
    ctx = RenderContext()
    if value.kind is ValueKind.NIL:
        if verb in ("T", "v"):
            return Body(errors.NIL_ANGLE)
        return bad_verb(ctx, value, verb, spec)
    if verb == "T":
        return _string_body(value.type_name, spec)
    if verb == "p":
        if value.kind in _ADDRESSABLE:
            return render_pointer(ctx, value, verb, spec)
        return bad_verb(ctx, value, verb, spec)
    return dispatch(ctx, value, verb, spec)
