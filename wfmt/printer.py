"""Formatter: drives scanner, argument cursor, renderer and padding."""

from __future__ import annotations

import logging
from typing import Any, List, Sequence

from wfmt import errors
from wfmt.arguments import ArgumentCursor
from wfmt.directive import Directive, Literal, scan
from wfmt.format_spec import PLAIN, FormatSpec
from wfmt.padding import finish
from wfmt.render import render_value
from wfmt.value_model import adapt_value

logger = logging.getLogger(__name__)


class Printer:
    """State of one formatting call: output buffer plus argument cursor."""

    def __init__(self, args: Sequence[Any]):
        self.cursor = ArgumentCursor(args)
        self.out: List[str] = []

    def write(self, text: str) -> None:
        self.out.append(text)

    def render(self, arg: Any, verb: str, spec: FormatSpec) -> str:
        try:
            return finish(render_value(arg, verb, spec), spec)
        except Exception as exc:
            logger.debug("rendering %%%s failed", verb, exc_info=True)
            detail = f"{type(exc).__name__}: {exc}"
            return errors.panic_token(verb, detail)

    def _width(self, directive: Directive, spec: FormatSpec) -> FormatSpec:
        if directive.width_star:
            width, ok = self.cursor.take_int()
            if not ok:
                self.write(errors.BAD_WIDTH)
                return spec
            if width < 0:
                return spec.with_flags(width=-width, minus=True, zero=False)
            return spec.with_flags(width=width)
        if directive.width is not None:
            return spec.with_flags(width=directive.width)
        return spec

    def _precision(self, directive: Directive, spec: FormatSpec) -> FormatSpec:
        if directive.precision_star:
            precision, ok = self.cursor.take_int()
            if not ok or precision < 0:
                self.write(errors.BAD_PREC)
                return spec
            return spec.with_flags(precision=precision)
        return spec.with_flags(precision=directive.precision)

    def directive(self, directive: Directive) -> bool:
        """Execute one directive; False once the template has run out."""
        good_index = not directive.bad_index
        spec = FormatSpec(
            minus=directive.minus,
            plus=directive.plus,
            sharp=directive.sharp,
            space=directive.space,
            zero=directive.zero,
        )

        if directive.width_index is not None:
            good_index = self.cursor.jump(directive.width_index) and good_index
        spec = self._width(directive, spec)

        if directive.has_precision:
            if directive.precision_index is not None:
                good_index = self.cursor.jump(directive.precision_index) and good_index
            spec = self._precision(directive, spec)

        if directive.verb_index is not None:
            good_index = self.cursor.jump(directive.verb_index) and good_index

        verb = directive.verb
        if verb is None:
            logger.debug("template ended inside %r", directive.text)
            self.write(errors.NO_VERB)
            return False
        if verb == "%":
            self.write("%")
        elif not good_index:
            self.write(errors.bad_verb_token(verb, errors.BAD_INDEX))
        elif self.cursor.exhausted:
            self.write(errors.bad_verb_token(verb, errors.MISSING))
        else:
            self.write(self.render(self.cursor.take(), verb, spec.for_verb(verb)))
        return True

    def extras(self) -> None:
        if self.cursor.reordered or self.cursor.exhausted:
            return
        shown = []
        for arg in self.cursor.remaining():
            if arg is None:
                shown.append(errors.NIL_ANGLE)
                continue
            type_name = adapt_value(arg).type_name
            shown.append(f"{type_name}={self.render(arg, 'v', PLAIN)}")
        logger.debug("%d unused arguments", len(shown))
        self.write(errors.EXTRA + ", ".join(shown) + ")")

    def run(self, template: str) -> str:
        for segment in scan(template):
            if isinstance(segment, Literal):
                self.write(segment.text)
            elif not self.directive(segment):
                break
        self.extras()
        return "".join(self.out)


def vsprintf(template: str, args: Sequence[Any]) -> str:
    """Format `args` according to `template`.

    Never raises for a malformed template or mismatched arguments; problems
    are written into the result as ``%!`` diagnostics.
    """
    return Printer(args).run(template)


def sprintf(template: str, *args: Any) -> str:
    return vsprintf(template, args)
