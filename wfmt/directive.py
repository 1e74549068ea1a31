"""Template scanner: splits a template into literal runs and directives.

A directive is ``%`` followed by flags (``#0+- ``), an optional ``[n]``
argument index, a width (digits or ``*``), an optional ``.`` precision (digits
or ``*``, each optionally preceded by ``[n]``), another optional ``[n]`` and
the verb, a single code point. The scanner is purely syntactic: argument
consumption and index range checks happen when the directive is executed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union

# widths and precisions above this are rejected as nonsense
MAX_NUMBER = 1_000_000

FLAG_CHARS = "#0+- "


@dataclass(frozen=True)
class ArgIndex:
    """An explicit ``[n]`` argument reference. ``position`` is 0-based."""

    position: int | None  # None when the brackets were malformed

    @property
    def well_formed(self) -> bool:
        return self.position is not None


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Directive:
    """One parsed conversion directive.

    ``verb`` is ``None`` when the template ended before a verb was found.
    ``bad_index`` is set when an index was followed by a literal number, which
    is never a valid reordering.
    """

    text: str
    verb: str | None
    minus: bool = False
    plus: bool = False
    sharp: bool = False
    space: bool = False
    zero: bool = False
    width_index: ArgIndex | None = None
    width_star: bool = False
    width: int | None = None
    has_precision: bool = False
    precision_index: ArgIndex | None = None
    precision_star: bool = False
    precision: int | None = None
    verb_index: ArgIndex | None = None
    bad_index: bool = False


Segment = Union[Literal, Directive]


def parse_number(template: str, start: int, end: int) -> tuple[int | None, int]:
    """Parse ASCII digits at `start`. An overflowing number consumes the rest."""
    if start >= end:
        return None, end
    number = 0
    found = False
    i = start
    while i < end and "0" <= template[i] <= "9":
        if number > MAX_NUMBER:
            return None, end
        number = number * 10 + ord(template[i]) - ord("0")
        found = True
        i += 1
    return (number if found else None), i


def parse_arg_index(template: str, start: int, end: int) -> tuple[ArgIndex, int]:
    """Parse ``[n]`` at `start`, returning the index and the next position."""
    if end - start < 3:
        return ArgIndex(None), start + 1
    close = template.find("]", start + 1, end)
    if close < 0:
        return ArgIndex(None), start + 1
    number, stop = parse_number(template, start + 1, close)
    if number is None or stop != close:
        return ArgIndex(None), close + 1
    return ArgIndex(number - 1), close + 1


def _maybe_index(template: str, i: int, end: int) -> tuple[ArgIndex | None, int, bool]:
    if i >= end or template[i] != "[":
        return None, i, False
    index, i = parse_arg_index(template, i, end)
    return index, i, index.well_formed


def _directive_at(template: str, start: int, end: int) -> tuple[Directive, int]:
    i = start + 1
    minus = plus = sharp = space = zero = False
    while i < end:
        char = template[i]
        if char == "#":
            sharp = True
        elif char == "0":
            zero = not minus
        elif char == "+":
            plus = True
        elif char == "-":
            minus = True
            zero = False
        elif char == " ":
            space = True
        else:
            break
        i += 1

    bad_index = False
    width_index, i, after_index = _maybe_index(template, i, end)
    width_star = False
    width = None
    if i < end and template[i] == "*":
        width_star = True
        after_index = False
        i += 1
    else:
        width, i = parse_number(template, i, end)
        if after_index and width is not None:
            bad_index = True

    has_precision = False
    precision_index = None
    precision_star = False
    precision = None
    if i + 1 < end and template[i] == ".":
        has_precision = True
        i += 1
        if after_index:
            bad_index = True
        precision_index, i, after_index = _maybe_index(template, i, end)
        if i < end and template[i] == "*":
            precision_star = True
            after_index = False
            i += 1
        else:
            precision, i = parse_number(template, i, end)
            if precision is None:
                precision = 0

    verb_index = None
    if not after_index:
        verb_index, i, after_index = _maybe_index(template, i, end)

    verb = None
    if i < end:
        verb = template[i]
        i += 1

    directive = Directive(
        text=template[start:i],
        verb=verb,
        minus=minus,
        plus=plus,
        sharp=sharp,
        space=space,
        zero=zero,
        width_index=width_index,
        width_star=width_star,
        width=width,
        has_precision=has_precision,
        precision_index=precision_index,
        precision_star=precision_star,
        precision=precision,
        verb_index=verb_index,
        bad_index=bad_index,
    )
    return directive, i


def scan(template: str) -> Iterator[Segment]:
    """Yield literal runs and directives in template order.

    Scanning stops after a directive without a verb.
    """
    end = len(template)
    i = 0
    while i < end:
        start = template.find("%", i)
        if start < 0:
            yield Literal(template[i:])
            return
        if start > i:
            yield Literal(template[i:start])
        directive, i = _directive_at(template, start, end)
        yield directive
        if directive.verb is None:
            return
