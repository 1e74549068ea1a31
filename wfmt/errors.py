"""
wfmt error types and inline diagnostic tokens
"""

from typing import Optional

# Inline diagnostic fragments. The engine never raises on a malformed template
# or a mismatched argument; it writes one of these into the output instead.
PERCENT_BANG = "%!"
NIL_ANGLE = "<nil>"
NIL_PAREN = "(nil)"
NIL = "nil"
NO_VERB = "%!(NOVERB)"
BAD_WIDTH = "%!(BADWIDTH)"
BAD_PREC = "%!(BADPREC)"
EXTRA = "%!(EXTRA "
BAD_INDEX = "BADINDEX"
MISSING = "MISSING"
CYCLE = "CYCLE"
DEPTH = "DEPTH"
PANIC = "PANIC="


class WfmtError(Exception):
    """wfmt specific exception with optional source position"""

    def __init__(self, msg: str, position: Optional[str] = None):
        self.msg = msg
        self.position = position
        super().__init__(self.format_message())

    def format_message(self) -> str:
        if not self.position:
            return self.msg
        return f"{self.msg} at {self.position}"


class LiteralSyntaxError(WfmtError):
    """Raised when an argument literal cannot be parsed"""


class UnsupportedValueError(WfmtError):
    """Raised when a literal cannot be converted to the requested value type"""

    code = "E_UNSUPPORTED_VALUE"


def bad_verb_token(verb: str, detail: str) -> str:
    """Return `%!<verb>(<detail>)`."""
    return f"{PERCENT_BANG}{verb}({detail})"


def panic_token(verb: str, detail: str) -> str:
    return bad_verb_token(verb, PANIC + detail)
