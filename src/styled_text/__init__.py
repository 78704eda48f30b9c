"""Rich text strings with per-character styles and style-preserving replaces."""

from .style import NO_COLOR, StyleFlags, StyleRun, StyleRunArray
from .text import CaseContinuation, StyledStreamError, StyledString

__all__ = [
    "NO_COLOR",
    "CaseContinuation",
    "StyleFlags",
    "StyleRun",
    "StyleRunArray",
    "StyledStreamError",
    "StyledString",
    "replace",
    "runtime",
    "style",
    "text",
]

__version__ = "0.1.0"
