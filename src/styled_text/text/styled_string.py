"""Text paired one-to-one with per-character styles."""

from __future__ import annotations

from typing import BinaryIO, Callable, Iterable, Iterator, List, Optional, Tuple, Union

import regex

from styled_text.replace import matcher, materializer
from styled_text.replace.matcher import PatternLike
from styled_text.replace.spans import PlainReplacement, as_replacement
from styled_text.runtime import telemetry
from styled_text.style import NO_COLOR, PLAIN, StyleFlags, StyleRun, StyleRunArray

from . import casing, markup, stream
from .casing import CaseContinuation
from .validation import clamp_length, ensure_position, ensure_range

LOGGER_NAME = "styled_text.replace"

TextLike = Union[str, "StyledString"]

TRIM_PATTERN = regex.compile(r"\A\s+|\s+\Z")
WHITESPACE_RUN_PATTERN = regex.compile(r"\s{2,}")


class StyledString:
    """A string whose every character carries a :class:`StyleRun`.

    Text and styles always have the same length once a public method
    returns. Out-of-range indices turn mutations into no-ops and style
    queries into :data:`PLAIN`.
    """

    __slots__ = ("_text", "_styles")

    def __init__(self, text: str = "", flags: int = 0, color: int = NO_COLOR) -> None:
        self._text = str(text)
        self._styles = StyleRunArray(len(self._text), flags, color)

    # -- construction -------------------------------------------------

    @classmethod
    def _from_parts(cls, text: str, styles: StyleRunArray) -> "StyledString":
        instance = cls.__new__(cls)
        instance._text = text
        instance._styles = styles
        return instance

    @classmethod
    def from_markup(cls, text: str) -> "StyledString":
        instance = cls()
        instance.set_markup(text)
        return instance

    @classmethod
    def from_bytes(cls, data: bytes) -> "StyledString":
        instance = cls()
        stream.decode_into(instance, data)
        return instance

    def set_text(self, text: str, flags: int = 0, color: int = NO_COLOR) -> None:
        text = str(text)
        self.swap_buffers(text, StyleRunArray(len(text), flags, color))

    def clear(self) -> None:
        self._text = ""
        self._styles.clear()

    def copy(self) -> "StyledString":
        return self._from_parts(self._text, self._styles.copy())

    @property
    def style_runs(self) -> StyleRunArray:
        """The live style buffer, read by the codec and the materializer.

        Writing to it directly can break the text/style length pairing.
        """

        return self._styles

    def swap_buffers(self, text: str, styles: StyleRunArray) -> None:
        """Install ``text`` and ``styles`` in one step.

        ``styles`` receives the previous style buffer.
        """

        if len(text) != len(styles):
            raise RuntimeError(
                f"text of length {len(text)} paired with {len(styles)} style runs"
            )
        self._text = text
        self._styles.swap(styles)

    # -- plain-string protocol ---------------------------------------

    @property
    def text(self) -> str:
        return self._text

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"StyledString({self._text!r})"

    def __len__(self) -> int:
        return len(self._text)

    def __iter__(self) -> Iterator[Tuple[str, StyleRun]]:
        return zip(self._text, self._styles)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StyledString):
            return NotImplemented
        return self._text == other._text and self._styles == other._styles

    __hash__ = None  # type: ignore[assignment]

    def __add__(self, other: TextLike) -> "StyledString":
        if not isinstance(other, (str, StyledString)):
            return NotImplemented
        result = self.copy()
        result.append(other)
        return result

    def __iadd__(self, other: TextLike) -> "StyledString":
        if not isinstance(other, (str, StyledString)):
            return NotImplemented
        self.append(other)
        return self

    def append(self, value: TextLike) -> None:
        self.insert(len(self._text), value)

    # -- style queries -------------------------------------------------

    def style_at(self, index: int) -> StyleRun:
        if not 0 <= index < len(self._text):
            return PLAIN
        return self._styles.run_at(index)

    def style_flags_at(self, index: int) -> int:
        return self.style_at(index).flags

    def style_color_at(self, index: int) -> int:
        return self.style_at(index).effective_color

    def cumulative_style_flags(self) -> int:
        combined = 0
        for run in self._styles:
            combined |= run.flags
        return combined

    def has_style_flags(self, flags: int) -> bool:
        return bool(self.cumulative_style_flags() & flags)

    # -- structural edits --------------------------------------------

    def insert_char(self, index: int, ch: str) -> None:
        """Insert one character styled like its left neighbour.

        At position zero the first existing character lends its style.
        """

        if len(ch) != 1:
            raise ValueError(f"expected a single character, got {ch!r}")
        if not ensure_position(len(self._text), index):
            return
        run = self.style_at(index - 1 if index else 0)
        self._text = self._text[:index] + ch + self._text[index:]
        self._styles.insert(index, 1)
        self._styles.fill_run(index, 1, run)

    def insert_text(self, index: int, text: str) -> None:
        """Insert plain text styled like the character before ``index``."""

        if not text or not ensure_position(len(self._text), index):
            return
        run = self.style_at(index - 1) if index else PLAIN
        self._text = self._text[:index] + text + self._text[index:]
        self._styles.insert(index, len(text))
        self._styles.fill_run(index, len(text), run)

    def insert_styled(self, index: int, other: "StyledString") -> None:
        if not len(other) or not ensure_position(len(self._text), index):
            return
        if other is self:
            other = self.copy()
        self._text = self._text[:index] + other._text + self._text[index:]
        self._styles.insert(index, len(other))
        self._styles.copy_from(index, len(other), other._styles)

    def insert(self, index: int, value: TextLike) -> None:
        if isinstance(value, StyledString):
            self.insert_styled(index, value)
        else:
            self.insert_text(index, value)

    def replace_range(self, index: int, length: int, replacement: TextLike) -> None:
        """Replace ``[index, index + length)`` with ``replacement``.

        Plain text takes the style of the first replaced character; a styled
        replacement keeps its own styles.
        """

        length = ensure_range(len(self._text), index, length)
        if length is None:
            return
        if isinstance(replacement, StyledString):
            self._replace_range_styled(index, length, replacement)
            return

        added = len(replacement)
        if not length and not added:
            return
        run = self._styles.run_at(index)
        self._text = self._text[:index] + replacement + self._text[index + length :]
        if length != added:
            self._styles.resize(index, length, added)
        elif length == 1:
            return
        self._styles.fill_run(index, added, run)

    def _replace_range_styled(self, index: int, length: int, other: "StyledString") -> None:
        if other is self:
            other = self.copy()
        added = len(other)
        self._text = self._text[:index] + other._text + self._text[index + length :]
        if length != added:
            self._styles.resize(index, length, added)
        self._styles.copy_from(index, added, other._styles)

    def remove(self, index: int, length: int) -> None:
        self.replace_range(index, length, "")

    # -- style edits ---------------------------------------------------

    def set_style_flags(
        self, index: int, length: int, flags: int, on: Optional[bool] = None
    ) -> None:
        """Overwrite (``on=None``), add (``True``) or clear (``False``) flags."""

        length = ensure_range(len(self._text), index, length)
        if length is None:
            return
        if on is None:
            for pos in range(index, index + length):
                self._styles.set_flags_at(pos, flags)
        elif on:
            self._styles.or_flags(index, length, flags)
        else:
            self._styles.mask_flags(index, length, flags)

    def set_style_color(self, index: int, length: int, color: int) -> None:
        """Color a range; ``NO_COLOR`` removes the color flag instead."""

        length = ensure_range(len(self._text), index, length)
        if length is None:
            return
        for pos in range(index, index + length):
            self._styles.set_color_at(pos, color)
        if color == NO_COLOR:
            self._styles.mask_flags(index, length, StyleFlags.COLOR)
        else:
            self._styles.or_flags(index, length, StyleFlags.COLOR)

    def set_style_flags_at(self, index: int, flags: int) -> None:
        self.set_style_flags(index, 1, flags)

    def set_style_color_at(self, index: int, color: int) -> None:
        self.set_style_color(index, 1, color)

    # -- slicing -------------------------------------------------------

    def mid(self, index: int, length: int = -1) -> "StyledString":
        size = len(self._text)
        if index < 0:
            if length >= 0:
                length = max(length + index, 0)
            index = 0
        if index >= size:
            return type(self)()
        length = clamp_length(size, index, length)
        styles = StyleRunArray(length)
        styles.copy_from(0, length, self._styles, index)
        return self._from_parts(self._text[index : index + length], styles)

    def left(self, count: int) -> "StyledString":
        return self.mid(0, clamp_length(len(self._text), 0, count))

    def right(self, count: int) -> "StyledString":
        count = clamp_length(len(self._text), 0, count)
        return self.mid(len(self._text) - count, count)

    def _separator_matches(
        self, separator: Union[str, PatternLike], case_sensitive: bool
    ) -> Iterator[Tuple[int, int]]:
        if isinstance(separator, str):
            if not separator:
                return
            yield from matcher.literal_matches(self._text, separator, case_sensitive)
            return
        compiled = matcher.compile_pattern(separator, case_sensitive)
        if compiled is None:
            return
        for match in compiled.finditer(self._text):
            if match.end() > match.start():
                yield match.span()

    def split(
        self,
        separator: Union[str, PatternLike],
        keep_empty: bool = True,
        case_sensitive: bool = True,
    ) -> List["StyledString"]:
        """Split on a literal string or a compiled pattern.

        Empty matches never split. With ``keep_empty=False`` empty pieces are
        dropped, so an empty string splits into an empty list.
        """

        pieces: List[StyledString] = []
        offset = 0
        for start, end in self._separator_matches(separator, case_sensitive):
            if keep_empty or start > offset:
                pieces.append(self.mid(offset, start - offset))
            offset = end
        if keep_empty or offset < len(self._text):
            pieces.append(self.mid(offset))
        return pieces

    def join(self, parts: Iterable[TextLike]) -> "StyledString":
        result = type(self)()
        for position, part in enumerate(parts):
            if position:
                result.append(self)
            result.append(part)
        return result

    # -- case transforms -----------------------------------------------

    def _with_chars(self, transform: Callable[[List[str]], None]) -> "StyledString":
        chars = list(self._text)
        transform(chars)
        return self._from_parts("".join(chars), self._styles.copy())

    def to_lower(self) -> "StyledString":
        return self._with_chars(casing.lower_chars)

    def to_upper(self) -> "StyledString":
        return self._with_chars(casing.upper_chars)

    def to_title_case(self, lower_first: bool = False) -> "StyledString":
        source = self.to_lower() if lower_first else self
        return source._with_chars(casing.title_case_chars)

    def to_sentence_case(
        self,
        lower_first: bool = False,
        continuation: Optional[CaseContinuation] = None,
    ) -> "StyledString":
        source = self.to_lower() if lower_first else self
        return source._with_chars(
            lambda chars: casing.sentence_case_chars(chars, continuation)
        )

    # -- whitespace ----------------------------------------------------

    def simplify_whitespace(self) -> None:
        """Collapse whitespace in place, carrying styles along.

        Tabs become spaces and carriage returns become newlines. Runs of
        spaces collapse to one, blank lines disappear, a space before a
        newline is dropped, and leading and trailing whitespace go away.
        """

        chars = list(self._text)
        styles = self._styles
        write = 0
        last_space = True
        last_newline = True
        for index, ch in enumerate(chars):
            if last_space and ch in " \t":
                continue
            if last_newline and ch in "\r\n":
                continue
            if last_space and ch in "\r\n":
                write -= 1
            if ch == "\t":
                ch = " "
            elif ch == "\r":
                ch = "\n"
            chars[write] = ch
            if write != index:
                styles.copy_from(write, 1, styles, index)
            last_newline = ch == "\n"
            last_space = last_newline or ch == " "
            write += 1
        if last_space and write:
            write -= 1
        styles.truncate(write)
        self._text = "".join(chars[:write])

    def trimmed(self) -> "StyledString":
        result = self.copy()
        result.remove_pattern(TRIM_PATTERN)
        return result

    def simplified(self) -> "StyledString":
        result = self.trimmed()
        result.replace_pattern(WHITESPACE_RUN_PATTERN, " ")
        return result

    # -- search and replace --------------------------------------------

    def _substitute_char(self, before: str, after: str, case_sensitive: bool) -> None:
        if case_sensitive:
            self._text = self._text.replace(before, after)
            return
        folded = casing.lower_char(before)
        self._text = "".join(
            after if casing.lower_char(ch) == folded else ch for ch in self._text
        )

    def replace_text(
        self, before: str, after: TextLike, case_sensitive: bool = True
    ) -> None:
        """Replace every occurrence of ``before``.

        An empty ``before`` matches at every boundary. Swapping one character
        for one plain character leaves all styles untouched.
        """

        replacement = as_replacement(after)
        if not before and not len(replacement):
            return
        if (
            len(before) == 1
            and isinstance(replacement, PlainReplacement)
            and len(replacement) == 1
        ):
            self._substitute_char(before, replacement.text, case_sensitive)
            return
        with telemetry.replace_span("text", len(self), logger_name=LOGGER_NAME) as stats:
            spans = matcher.match_text(self, before, replacement, case_sensitive)
            applied = materializer.apply_spans(spans, self, replacement)
            stats.record(len(spans), len(self) if applied else None)

    def replace_char(self, ch: str, after: TextLike, case_sensitive: bool = True) -> None:
        if len(ch) != 1:
            raise ValueError(f"expected a single character, got {ch!r}")
        self.replace_text(ch, after, case_sensitive)

    def replace_pattern(
        self, pattern: PatternLike, after: TextLike, case_sensitive: bool = True
    ) -> None:
        """Replace every match of ``pattern``; ``\\N`` in ``after`` inserts group N.

        Group text keeps the subject's styles. Invalid patterns leave the
        string unchanged and are reported as a ``pattern.invalid`` event.
        """

        replacement = as_replacement(after)
        with telemetry.replace_span("pattern", len(self), logger_name=LOGGER_NAME) as stats:
            spans = matcher.match_pattern(self, pattern, replacement, case_sensitive)
            applied = materializer.apply_spans(spans, self, replacement)
            stats.record(len(spans), len(self) if applied else None)

    def remove_text(self, before: str, case_sensitive: bool = True) -> None:
        self.replace_text(before, "", case_sensitive)

    def remove_pattern(self, pattern: PatternLike, case_sensitive: bool = True) -> None:
        self.replace_pattern(pattern, "", case_sensitive)

    # -- markup ----------------------------------------------------------

    def to_markup(self) -> str:
        return markup.render_markup(self)

    def set_markup(self, text: str) -> None:
        markup.parse_markup_into(self, text)

    # -- binary stream -------------------------------------------------

    def to_bytes(self) -> bytes:
        return stream.encode(self)

    def write_to(self, target: BinaryIO) -> None:
        stream.write_styled(target, self)

    def read_from(self, source: BinaryIO) -> None:
        stream.read_styled(source, self)
