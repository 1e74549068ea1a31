"""Padding and alignment of rendered bodies, measured in display columns."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from wfmt.format_spec import FormatSpec
from wfmt.width import string_width

SIGN_CHARS = "+- "


class Fill(Enum):
    """How the ``0`` flag applies to a body."""

    WHOLE = "whole"  # zeros prepended to the whole body
    AFTER_SIGN = "after_sign"  # zeros inserted after a leading sign
    SPACES = "spaces"  # zero flag degrades to space padding
    NONE = "none"  # body is final, never padded


@dataclass(frozen=True)
class Body:
    """Unpadded renderer output."""

    text: str
    fill: Fill = Fill.WHOLE


@dataclass(frozen=True)
class Diagnostic:
    """Inline diagnostic text, written as is."""

    text: str


Rendered = Union[Body, Diagnostic]


def padding(count: int, spec: FormatSpec) -> str:
    """A bare run of pad characters, zeros when the zero flag is active."""
    if count <= 0:
        return ""
    return ("0" if spec.zero else " ") * count


def pad(body: Body, spec: FormatSpec) -> str:
    text = body.text
    if body.fill is Fill.NONE or not spec.width:
        return text
    deficit = spec.width - string_width(text)
    if deficit <= 0:
        return text
    if spec.minus:
        return text + " " * deficit
    if spec.zero:
        if body.fill is Fill.WHOLE:
            return "0" * deficit + text
        if body.fill is Fill.AFTER_SIGN:
            if text[:1] and text[0] in SIGN_CHARS:
                return text[0] + "0" * deficit + text[1:]
            return "0" * deficit + text
    return " " * deficit + text


def finish(result: Rendered, spec: FormatSpec) -> str:
    """Unify a renderer result into output text."""
    if isinstance(result, Diagnostic):
        return result.text
    return pad(result, spec)
