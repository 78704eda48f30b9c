"""Style attributes and the per-character style buffer."""

from .flags import NO_COLOR, PLAIN, StyleFlags, StyleRun
from .runs import SHRINK_THRESHOLD, StyleRunArray, next_capacity

__all__ = [
    "NO_COLOR",
    "PLAIN",
    "SHRINK_THRESHOLD",
    "StyleFlags",
    "StyleRun",
    "StyleRunArray",
    "next_capacity",
]
