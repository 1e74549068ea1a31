"""wfmt: printf-style formatting with display-width-aware padding."""

from wfmt.printer import sprintf, vsprintf
from wfmt.value_model import Named, Pointer, Rune
from wfmt.version import __version__
from wfmt.width import columns, string_width

__all__ = [
    "sprintf",
    "vsprintf",
    "Named",
    "Pointer",
    "Rune",
    "columns",
    "string_width",
    "__version__",
]
