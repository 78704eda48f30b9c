"""Styled strings plus their case, markup and stream helpers."""

from .casing import CaseContinuation
from .stream import StyledStreamError
from .styled_string import StyledString
from .validation import clamp_length, ensure_position, ensure_range

__all__ = [
    "CaseContinuation",
    "StyledStreamError",
    "StyledString",
    "clamp_length",
    "ensure_position",
    "ensure_range",
]
