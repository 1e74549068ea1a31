"""Quoted string and rune literals used by the ``q`` verb."""

from __future__ import annotations

MAX_RUNE = 0x10FFFF
RUNE_ERROR = 0xFFFD

_SIMPLE_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def _is_escaped_byte(code: int) -> bool:
    # Undecodable input bytes survive as lone surrogates (surrogateescape).
    return 0xDC80 <= code <= 0xDCFF


def _is_surrogate(code: int) -> bool:
    return 0xD800 <= code <= 0xDFFF


def valid_rune(code: int) -> bool:
    return 0 <= code <= MAX_RUNE and not _is_surrogate(code)


def _escape(char: str, quote: str, ascii_only: bool) -> str:
    if char == quote or char == "\\":
        return "\\" + char
    code = ord(char)
    if ascii_only:
        if code < 0x80 and char.isprintable():
            return char
    elif char.isprintable():
        return char
    simple = _SIMPLE_ESCAPES.get(char)
    if simple is not None:
        return simple
    if code < 0x20 or code == 0x7F:
        return f"\\x{code:02x}"
    if not valid_rune(code):
        code = RUNE_ERROR
    if code < 0x10000:
        return f"\\u{code:04x}"
    return f"\\U{code:08x}"


def quote(text: str, ascii_only: bool = False) -> str:
    """Double-quoted literal; ``ascii_only`` escapes everything non-ASCII."""
    out = ['"']
    for char in text:
        code = ord(char)
        if _is_escaped_byte(code):
            out.append(f"\\x{code - 0xDC00:02x}")
            continue
        out.append(_escape(char, '"', ascii_only))
    out.append('"')
    return "".join(out)


def quote_rune(code: int, ascii_only: bool = False) -> str:
    """Single-quoted character literal. Invalid code points quote as U+FFFD."""
    if not valid_rune(code):
        code = RUNE_ERROR
    return "'" + _escape(chr(code), "'", ascii_only) + "'"


def can_backquote(text: str) -> bool:
    """Whether `text` can be written as a raw backquoted literal unchanged."""
    for char in text:
        code = ord(char)
        if code >= 0x80:
            if code == 0xFEFF or _is_surrogate(code):
                return False
            continue
        if (code < 0x20 and char != "\t") or char == "`" or code == 0x7F:
            return False
    return True
