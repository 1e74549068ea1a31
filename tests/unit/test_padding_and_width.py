from __future__ import annotations

import pytest

from wfmt.format_spec import FormatSpec
from wfmt.padding import Body, Diagnostic, Fill, finish, pad, padding
from wfmt.width import (
    DEFAULT_UNICODE_VERSION,
    columns,
    is_text_emoji,
    string_width,
    unicode_version,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "char,expected",
    [
        ("a", 1),
        (" ", 1),
        ("日", 2),
        ("啊", 2),
        ("Ａ", 2),  # fullwidth latin
        ("\u0301", 0),  # combining acute accent
        ("\u200b", 0),  # zero width space
        ("\t", 1),
        ("\x1b", 1),
        ("\u263a", 2),  # emoji with text presentation
        ("\u00a9", 2),
        ("\u2764", 2),
        ("\u2318", 1),  # not an emoji
        ("\U0001f600", 2),
    ],
)
def test_columns(char: str, expected: int) -> None:
    assert columns(char) == expected


@pytest.mark.unit
def test_string_width() -> None:
    assert string_width("") == 0
    assert string_width("abc") == 3
    assert string_width("日本語") == 6
    assert string_width("é") == 1
    assert string_width("a\tb") == 3


@pytest.mark.unit
def test_unicode_version_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    assert unicode_version() == DEFAULT_UNICODE_VERSION
    monkeypatch.setenv("WFMT_UNICODE_VERSION", "9.0.0")
    assert unicode_version() == "9.0.0"
    monkeypatch.setenv("WFMT_UNICODE_VERSION", "  ")
    assert unicode_version() == DEFAULT_UNICODE_VERSION


@pytest.mark.unit
def test_pad_in_columns() -> None:
    spec = FormatSpec(width=6)
    assert pad(Body("日本"), spec) == "  日本"
    assert pad(Body("日本"), spec.with_flags(minus=True)) == "日本  "
    assert pad(Body("日本"), spec.with_flags(zero=True)) == "00日本"


@pytest.mark.unit
def test_pad_fill_modes() -> None:
    spec = FormatSpec(width=6, zero=True)
    assert pad(Body("-1.5", Fill.AFTER_SIGN), spec) == "-001.5"
    assert pad(Body(" 1.5", Fill.AFTER_SIGN), spec) == " 001.5"
    assert pad(Body("1.5", Fill.AFTER_SIGN), spec) == "0001.5"
    assert pad(Body("+Inf", Fill.SPACES), spec) == "  +Inf"
    assert pad(Body("[1 2]", Fill.NONE), spec) == "[1 2]"


@pytest.mark.unit
def test_pad_without_deficit_is_identity() -> None:
    assert pad(Body("abcdef"), FormatSpec(width=3)) == "abcdef"
    assert pad(Body("abc"), FormatSpec()) == "abc"
    assert pad(Body("abc"), FormatSpec(width=0)) == "abc"


@pytest.mark.unit
@pytest.mark.parametrize("text", ["a", "日", "éx", "abc日本"])
@pytest.mark.parametrize("width", [0, 1, 4, 9])
def test_padded_width_reaches_requested_width(text: str, width: int) -> None:
    out = pad(Body(text), FormatSpec(width=width))
    natural = string_width(text)
    assert string_width(out) == max(width, natural)


@pytest.mark.unit
def test_padding_and_finish() -> None:
    assert padding(3, FormatSpec()) == "   "
    assert padding(3, FormatSpec(zero=True)) == "000"
    assert padding(-1, FormatSpec()) == ""
    assert finish(Diagnostic("%!d(MISSING)"), FormatSpec(width=20)) == "%!d(MISSING)"


@pytest.mark.unit
def test_text_emoji_pad_as_wide():
    assert is_text_emoji("☺")
    assert not is_text_emoji("日")
    assert not is_text_emoji("a")
    assert string_width("a☺b") == 4
    assert pad(Body("☺"), FormatSpec(width=2)) == "☺"
    assert pad(Body("☺"), FormatSpec(width=3)) == " ☺"
