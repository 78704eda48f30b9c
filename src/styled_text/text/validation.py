"""Range helpers shared by the StyledString mutation APIs."""

from __future__ import annotations

from typing import Optional


def clamp_length(total: int, index: int, length: int) -> int:
    """Number of characters ``[index, index + length)`` really covers.

    A negative ``length`` or one running past the end means "up to the end".
    """

    remaining = total - index
    if length < 0 or length > remaining:
        return max(remaining, 0)
    return length


def ensure_range(total: int, index: int, length: int) -> Optional[int]:
    """Clamped length for a range starting on an existing character.

    Returns ``None`` when ``index`` does not address a character; callers
    treat that as a no-op.
    """

    if index < 0 or index >= total:
        return None
    return clamp_length(total, index, length)


def ensure_position(total: int, index: int) -> bool:
    """Whether ``index`` is a valid insertion point (``0 <= index <= total``)."""

    return 0 <= index <= total
