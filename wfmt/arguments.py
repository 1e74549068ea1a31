"""Argument cursor: sequential consumption plus explicit ``[n]`` reordering."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from wfmt.directive import MAX_NUMBER, ArgIndex
from wfmt.value_model import INTEGER_KINDS, adapt_value

logger = logging.getLogger(__name__)

_INT64_MAX = (1 << 63) - 1
_INT64_MIN = -(1 << 63)


class ArgumentCursor:
    """Tracks the next argument to consume for one formatting call."""

    def __init__(self, args: Sequence[Any]):
        self.args = list(args)
        self.position = 0
        self.reordered = False

    def __len__(self) -> int:
        return len(self.args)

    @property
    def exhausted(self) -> bool:
        return self.position >= len(self.args)

    def jump(self, index: ArgIndex) -> bool:
        """Move to an explicit index; False when malformed or out of range."""
        self.reordered = True
        if index.position is None or not 0 <= index.position < len(self.args):
            logger.debug("bad argument index %s for %d args", index, len(self.args))
            return False
        self.position = index.position
        return True

    def take(self) -> Any:
        arg = self.args[self.position]
        self.position += 1
        return arg

    def take_int(self) -> tuple[int, bool]:
        """Consume an integer width or precision argument.

        Returns ``(value, ok)``. Non-integer arguments are consumed but not
        ok; an exhausted cursor consumes nothing. Magnitudes above one
        million are rejected.
        """
        if self.exhausted:
            return 0, False
        value = adapt_value(self.take())
        if value.kind not in INTEGER_KINDS:
            return 0, False
        number = value.raw
        if not _INT64_MIN <= number <= _INT64_MAX:
            return 0, False
        if number > MAX_NUMBER or number < -MAX_NUMBER:
            return 0, False
        return number, True

    def remaining(self) -> list[Any]:
        return self.args[self.position :]
