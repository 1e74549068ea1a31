"""Display width classification for padding.

Widths come from the East Asian Width and zero-width tables shipped with the
``wcwidth`` package. The Unicode version of those tables is selected with the
``WFMT_UNICODE_VERSION`` environment variable (default ``15.0.0``).

Emoji that default to text presentation (``☺``, ``❤``, ``©``) are narrow in
the East Asian Width data but are drawn as emoji by most terminals; they
count as 2 columns, taken from wcwidth's variation selector 16 table.
"""

from __future__ import annotations

import os
from bisect import bisect_right

import wcwidth
from wcwidth.table_vs16 import VS16_NARROW_TO_WIDE

UNICODE_VERSION_ENV = "WFMT_UNICODE_VERSION"
DEFAULT_UNICODE_VERSION = "15.0.0"

_EMOJI_RANGES = sorted(
    (start, end) for table in VS16_NARROW_TO_WIDE.values() for start, end in table
)
_EMOJI_STARTS = [start for start, _ in _EMOJI_RANGES]


def unicode_version() -> str:
    requested = os.environ.get(UNICODE_VERSION_ENV, "").strip()
    return requested or DEFAULT_UNICODE_VERSION


def is_text_emoji(char: str) -> bool:
    """True for emoji code points whose default presentation is text."""
    code = ord(char)
    i = bisect_right(_EMOJI_STARTS, code) - 1
    return i >= 0 and code <= _EMOJI_RANGES[i][1]


def _measure(char: str, version: str) -> int:
    if " " <= char < "\x7f":
        return 1
    if is_text_emoji(char):
        return 2
    width = wcwidth.wcwidth(char, version)
    if width < 0:
        return 1
    return width


def columns(char: str) -> int:
    """Return the number of terminal columns taken by a single code point.

    Wide and fullwidth characters and emoji take 2 columns, combining marks
    and zero-width format characters take 0. Control characters, which have
    no printable width, still occupy one cell of the output and count as 1.
    """
    return _measure(char, unicode_version())


def string_width(text: str) -> int:
    """Sum of `columns` over every code point of `text`."""
    if text.isascii() and text.isprintable():
        return len(text)
    version = unicode_version()
    return sum(_measure(char, version) for char in text)
