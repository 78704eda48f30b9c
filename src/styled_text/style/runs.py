"""Growable per-character style buffer kept in lockstep with a text."""

from __future__ import annotations

import sys
from array import array
from typing import Iterator

from .flags import NO_COLOR, StyleFlags, StyleRun

SHRINK_THRESHOLD = 100


def next_capacity(length: int, capacity: int) -> int:
    """Capacity the buffers should have once they hold ``length`` runs.

    Grows to twice the required length, drops to zero when empty, and halves
    only once a capacity above ``SHRINK_THRESHOLD`` is less than half used.
    """

    if length > capacity:
        return length * 2
    if length == 0:
        return 0
    if capacity > SHRINK_THRESHOLD and length < capacity // 2:
        return capacity // 2
    return capacity


def _color_buffer(size: int) -> array:
    return array("I", bytes(size * 4)) if size else array("I")


class StyleRunArray:
    """Flags and colors for every character of the owning text.

    Both fields live in their own contiguous buffer (``bytearray`` for flags,
    ``array('I')`` for ARGB colors) sized by :func:`next_capacity`. Only the
    first ``len(self)`` slots are meaningful.
    """

    __slots__ = ("_flags", "_colors", "_length", "_capacity")

    def __init__(self, length: int = 0, flags: int = 0, color: int = NO_COLOR) -> None:
        if length < 0:
            raise ValueError("length cannot be negative")
        self._length = length
        self._capacity = next_capacity(length, 0)
        self._flags = bytearray(self._capacity)
        self._colors = _color_buffer(self._capacity)
        if length and (flags or color):
            self.fill(0, length, flags & StyleFlags.ALL_STYLES, color)

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return self._length

    def __iter__(self) -> Iterator[StyleRun]:
        for index in range(self._length):
            yield StyleRun(self._flags[index], self._colors[index])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StyleRunArray):
            return NotImplemented
        return len(self) == len(other) and all(a == b for a, b in zip(self, other))

    def __repr__(self) -> str:
        return f"StyleRunArray(length={self._length}, capacity={self._capacity})"

    def _check_range(self, index: int, length: int) -> None:
        if index < 0 or length < 0 or index + length > self._length:
            raise IndexError(
                f"range [{index}:{index + length}] outside style array of length {self._length}"
            )

    def run_at(self, index: int) -> StyleRun:
        self._check_range(index, 1)
        return StyleRun(self._flags[index], self._colors[index])

    def flags_at(self, index: int) -> int:
        self._check_range(index, 1)
        return self._flags[index]

    def color_at(self, index: int) -> int:
        self._check_range(index, 1)
        return self._colors[index]

    def set_flags_at(self, index: int, flags: int) -> None:
        self._check_range(index, 1)
        self._flags[index] = flags & StyleFlags.ALL_STYLES

    def set_color_at(self, index: int, color: int) -> None:
        self._check_range(index, 1)
        self._colors[index] = color & 0xFFFFFFFF

    def or_flags(self, index: int, length: int, flags: int) -> None:
        self._check_range(index, length)
        flags &= StyleFlags.ALL_STYLES
        for pos in range(index, index + length):
            self._flags[pos] |= flags

    def mask_flags(self, index: int, length: int, flags: int) -> None:
        """Clear ``flags`` over ``[index, index + length)``."""

        self._check_range(index, length)
        keep = ~flags & 0xFF
        for pos in range(index, index + length):
            self._flags[pos] &= keep

    def fill(self, index: int, length: int, flags: int, color: int) -> None:
        self._check_range(index, length)
        if not length:
            return
        self._flags[index : index + length] = bytes([flags & 0xFF]) * length
        self._colors[index : index + length] = array("I", [color & 0xFFFFFFFF]) * length

    def fill_run(self, index: int, length: int, run: StyleRun) -> None:
        self.fill(index, length, run.flags, run.color)

    def copy_from(
        self, index: int, length: int, src: "StyleRunArray", src_offset: int = 0
    ) -> None:
        self._check_range(index, length)
        src._check_range(src_offset, length)
        if not length:
            return
        # slicing the source first keeps self-copies with overlapping ranges intact
        flags = src._flags[src_offset : src_offset + length]
        colors = src._colors[src_offset : src_offset + length]
        self._flags[index : index + length] = flags
        self._colors[index : index + length] = colors

    def insert(self, index: int, length: int) -> None:
        self.resize(index, 0, length)

    def resize(self, index: int, remove: int, add: int) -> None:
        """Replace ``remove`` runs at ``index`` with ``add`` zeroed runs.

        The prefix before ``index`` stays in place, the tail that followed
        ``index + remove`` moves to ``index + add``.
        """

        self._check_range(index, remove)
        if add < 0:
            raise ValueError("add cannot be negative")
        if not remove and not add:
            return

        tail_start = index + remove
        tail_length = self._length - tail_start
        new_length = self._length - remove + add
        new_capacity = next_capacity(new_length, self._capacity)

        if new_capacity != self._capacity:
            old_flags, old_colors = self._flags, self._colors
            self._flags = bytearray(new_capacity)
            self._colors = _color_buffer(new_capacity)
            self._flags[:index] = old_flags[:index]
            self._colors[:index] = old_colors[:index]
            if tail_length:
                self._flags[index + add : new_length] = old_flags[tail_start : self._length]
                self._colors[index + add : new_length] = old_colors[tail_start : self._length]
            self._capacity = new_capacity
        else:
            if tail_length:
                flags_tail = self._flags[tail_start : self._length]
                colors_tail = self._colors[tail_start : self._length]
                self._flags[index + add : new_length] = flags_tail
                self._colors[index + add : new_length] = colors_tail
            if add:
                self._flags[index : index + add] = bytes(add)
                self._colors[index : index + add] = _color_buffer(add)

        self._length = new_length

    def truncate(self, length: int) -> None:
        if length < self._length:
            self.resize(length, self._length - length, 0)

    def clear(self) -> None:
        self._length = 0
        self._capacity = 0
        self._flags = bytearray()
        self._colors = array("I")

    def copy(self) -> "StyleRunArray":
        clone = StyleRunArray(self._length)
        clone.copy_from(0, self._length, self)
        return clone

    def swap(self, other: "StyleRunArray") -> None:
        self._flags, other._flags = other._flags, self._flags
        self._colors, other._colors = other._colors, self._colors
        self._length, other._length = other._length, self._length
        self._capacity, other._capacity = other._capacity, self._capacity

    def flags_bytes(self) -> bytes:
        return bytes(self._flags[: self._length])

    def colors_bytes(self) -> bytes:
        """Colors as little-endian 32-bit words, one per run."""

        colors = self._colors[: self._length]
        if colors.itemsize != 4:
            raise RuntimeError("array('I') must be 32 bits wide on this platform")
        if sys.byteorder == "big":
            colors.byteswap()
        return colors.tobytes()

    def load_bytes(self, flags: bytes, colors: bytes) -> None:
        """Overwrite every run from raw stream data of matching length."""

        if len(flags) != self._length or len(colors) != self._length * 4:
            raise ValueError("raw style data does not match the array length")
        if not self._length:
            return
        loaded = array("I")
        loaded.frombytes(colors)
        if sys.byteorder == "big":
            loaded.byteswap()
        self._flags[: self._length] = bytes(b & StyleFlags.ALL_STYLES for b in flags)
        self._colors[: self._length] = loaded
