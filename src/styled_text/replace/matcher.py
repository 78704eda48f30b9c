"""Reference-span computation for literal, character and regex replaces.

Every function here reads the subject and returns the list of spans the
materializer needs to build the replaced string; none of them mutates the
subject. An empty list means "nothing to do".
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Iterator, List, Optional, Tuple, Union

import regex

from styled_text.runtime import telemetry

from .spans import BackReference, ReferenceSpan, Replacement

if TYPE_CHECKING:
    from styled_text.text.styled_string import StyledString

LOGGER_NAME = "styled_text.replace"

PatternLike = Union[str, "regex.Pattern[str]", "re.Pattern[str]"]


class _SpanBuilder:
    __slots__ = ("spans", "new_length")

    def __init__(self) -> None:
        self.spans: List[ReferenceSpan] = []
        self.new_length = 0

    def subject(self, offset: int, length: int) -> None:
        if length > 0:
            self.spans.append(ReferenceSpan.subject(offset, length))
            self.new_length += length

    def replacement(self, offset: int, length: int) -> None:
        if length > 0:
            self.spans.append(ReferenceSpan.replacement(offset, length))
            self.new_length += length

    def finish(self, old_length: int) -> List[ReferenceSpan]:
        self.spans.append(ReferenceSpan.terminator(old_length, self.new_length))
        return self.spans


def literal_matches(
    text: str, before: str, case_sensitive: bool
) -> Iterator[Tuple[int, int]]:
    if case_sensitive:
        offset = 0
        while True:
            found = text.find(before, offset)
            if found < 0:
                return
            yield found, found + len(before)
            offset = found + len(before)
    else:
        finder = regex.compile(regex.escape(before), regex.IGNORECASE)
        for match in finder.finditer(text):
            yield match.span()


def match_text(
    subject: "StyledString",
    before: str,
    replacement: Replacement,
    case_sensitive: bool = True,
) -> List[ReferenceSpan]:
    text = subject.text
    size = len(text)
    rep_length = len(replacement)
    builder = _SpanBuilder()

    if not before:
        # an empty target matches at every boundary, both ends included
        if not rep_length:
            return []
        for index in range(size):
            builder.replacement(0, rep_length)
            builder.subject(index, 1)
        builder.replacement(0, rep_length)
        return builder.finish(size)

    offset = 0
    matched = False
    for start, end in literal_matches(text, before, case_sensitive):
        matched = True
        builder.subject(offset, start - offset)
        builder.replacement(0, rep_length)
        offset = end

    if not matched:
        return []
    builder.subject(offset, size - offset)
    return builder.finish(size)


def match_char(
    subject: "StyledString",
    ch: str,
    replacement: Replacement,
    case_sensitive: bool = True,
) -> List[ReferenceSpan]:
    if len(ch) != 1:
        raise ValueError(f"expected a single character, got {ch!r}")
    return match_text(subject, ch, replacement, case_sensitive)


def compile_pattern(pattern: PatternLike, case_sensitive: bool = True) -> Optional[Any]:
    """Compile ``pattern`` with the ``regex`` engine.

    Already compiled patterns are returned untouched and keep their own
    flags. Invalid patterns are reported through telemetry and yield ``None``.
    """

    if not isinstance(pattern, str):
        return pattern
    try:
        return regex.compile(pattern, 0 if case_sensitive else regex.IGNORECASE)
    except regex.error as exc:
        telemetry.record_event(
            "pattern.invalid",
            level="warning",
            data={"pattern": pattern, "error": str(exc), "offset": exc.pos},
            logger_name=LOGGER_NAME,
        )
        return None


def _digit(ch: str) -> Optional[int]:
    return ord(ch) - ord("0") if "0" <= ch <= "9" else None


def parse_backreferences(template: str, group_count: int) -> List[BackReference]:
    """Locate ``\\N`` escapes in ``template`` that name an existing group.

    A second digit is folded in while the two-digit number is still a valid
    group. A backslash always consumes the character after it.
    """

    refs: List[BackReference] = []
    size = len(template)
    index = 0
    while index < size:
        ch = template[index]
        index += 1
        if ch != "\\" or index >= size:
            continue
        group = _digit(template[index])
        index += 1
        if group is None or group > group_count:
            continue
        start = index - 2
        if index < size:
            second = _digit(template[index])
            if second is not None and group * 10 + second <= group_count:
                group = group * 10 + second
                index += 1
        refs.append(BackReference(group=group, start=start, end=index))
    return refs


def match_pattern(
    subject: "StyledString",
    pattern: PatternLike,
    replacement: Replacement,
    case_sensitive: bool = True,
) -> List[ReferenceSpan]:
    compiled = compile_pattern(pattern, case_sensitive)
    if compiled is None:
        return []

    template = replacement.text
    backrefs = parse_backreferences(template, compiled.groups)
    text = subject.text
    size = len(text)
    builder = _SpanBuilder()

    matched = False
    cursor = 0
    position = 0
    while position <= size:
        match = compiled.search(text, position)
        if match is None:
            break
        matched = True
        start, end = match.span()

        builder.subject(cursor, start - cursor)
        template_offset = 0
        for ref in backrefs:
            builder.replacement(template_offset, ref.start - template_offset)
            group_start, group_end = match.span(ref.group)
            if group_start >= 0:
                builder.subject(group_start, group_end - group_start)
            template_offset = ref.end
        builder.replacement(template_offset, len(template) - template_offset)

        if end == start:
            # step over one character so the scan always makes progress
            builder.subject(start, 1 if start < size else 0)
            cursor = min(start + 1, size)
            position = start + 1
        else:
            cursor = position = end

    if not matched:
        return []
    builder.subject(cursor, size - cursor)
    return builder.finish(size)
