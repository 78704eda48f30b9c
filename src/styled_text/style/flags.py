"""Per-character style attributes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag

NO_COLOR = 0


class StyleFlags(IntFlag):
    NONE = 0
    BOLD = 1
    ITALIC = 2
    UNDERLINE = 4
    STRIKE_THROUGH = 8
    COLOR = 16
    ALL_STYLES = BOLD | ITALIC | UNDERLINE | STRIKE_THROUGH | COLOR


@dataclass(frozen=True, slots=True, eq=False)
class StyleRun:
    """Style of a single character.

    ``color`` is a 32-bit ARGB value and only carries meaning while
    ``StyleFlags.COLOR`` is part of ``flags``; equality ignores it otherwise.
    """

    flags: int = 0
    color: int = NO_COLOR

    def has(self, flag: int) -> bool:
        return bool(self.flags & flag)

    @property
    def effective_color(self) -> int:
        return self.color if self.flags & StyleFlags.COLOR else NO_COLOR

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StyleRun):
            return NotImplemented
        return self.flags == other.flags and self.effective_color == other.effective_color

    def __hash__(self) -> int:
        return hash((self.flags, self.effective_color))


PLAIN = StyleRun()
