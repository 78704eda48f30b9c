"""HTML-like markup rendering and parsing for styled strings.

Only ``<b>``, ``<i>``, ``<u>``, ``<s>`` and ``<font color=...>`` are
understood. Colors go through :class:`textual.color.Color`, so both
``#RRGGBB`` values and named colors are accepted on input; output always
uses lowercase ``#rrggbb``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Tuple

import regex
from textual.color import Color, ColorParseError

from styled_text.runtime import telemetry
from styled_text.style import NO_COLOR, PLAIN, StyleFlags, StyleRun

if TYPE_CHECKING:
    from .styled_string import StyledString

LOGGER_NAME = "styled_text.markup"

MARKUP_WHITESPACE = frozenset(" \t\r\n")
OPAQUE = 0xFF000000

TAG_PATTERN = regex.compile(
    r"""<(/?(?:[bius]|font))\b(?:[^>]*?\scolor\s*=\s*['"]?([#\w]+)['"]?)?[^>]*>""",
    regex.IGNORECASE,
)

OPEN_ORDER: Tuple[Tuple[StyleFlags, str], ...] = (
    (StyleFlags.ITALIC, "i"),
    (StyleFlags.BOLD, "b"),
    (StyleFlags.UNDERLINE, "u"),
    (StyleFlags.STRIKE_THROUGH, "s"),
)
CLOSE_ORDER: Tuple[Tuple[StyleFlags, str], ...] = (
    (StyleFlags.STRIKE_THROUGH, "s"),
    (StyleFlags.UNDERLINE, "u"),
    (StyleFlags.BOLD, "b"),
    (StyleFlags.ITALIC, "i"),
)

TAG_FLAGS = {tag: flag for flag, tag in OPEN_ORDER}


def escape(text: str) -> str:
    return text.replace("<", "&lt;").replace(">", "&gt;")


def unescape(text: str) -> str:
    return text.replace("&lt;", "<").replace("&gt;", ">")


def format_color(value: int) -> str:
    return Color((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF).hex.lower()


def parse_color(text: str) -> Optional[int]:
    try:
        color = Color.parse(text.lower())
    except ColorParseError:
        telemetry.record_event(
            "markup.bad_color",
            level="debug",
            data={"color": text},
            logger_name=LOGGER_NAME,
        )
        return None
    return OPAQUE | (color.r << 16) | (color.g << 8) | color.b


def _color_changes(prev: StyleRun, nxt: StyleRun) -> bool:
    return prev.effective_color != nxt.effective_color


def _closing_tags(prev: StyleRun, nxt: StyleRun) -> str:
    parts = [f"</{tag}>" for flag, tag in CLOSE_ORDER if prev.has(flag) and not nxt.has(flag)]
    if prev.has(StyleFlags.COLOR) and _color_changes(prev, nxt):
        parts.append("</font>")
    return "".join(parts)


def _opening_tags(prev: StyleRun, nxt: StyleRun) -> str:
    parts = [f"<{tag}>" for flag, tag in OPEN_ORDER if nxt.has(flag) and not prev.has(flag)]
    if nxt.has(StyleFlags.COLOR) and _color_changes(prev, nxt):
        parts.append(f"<font color={format_color(nxt.color)}>")
    return "".join(parts)


def render_markup(string: "StyledString") -> str:
    """Render ``string`` as markup.

    Closing tags go right after the last character of a style run. When
    whitespace separates two runs it is emitted between the closing and the
    opening tags, and whitespace alone never triggers a style change.
    """

    text = string.text
    size = len(text)
    if not size:
        return ""

    prev = string.style_at(0)
    out: List[str] = [_opening_tags(PLAIN, prev)]
    segment_start = 0
    index = 1
    while index < size:
        if string.style_at(index) == prev:
            index += 1
            continue
        visible = index
        while visible < size and text[visible] in MARKUP_WHITESPACE:
            visible += 1
        upcoming = string.style_at(visible) if visible < size else PLAIN
        if upcoming == prev:
            index = visible + 1
            continue
        out.append(escape(text[segment_start:index]))
        out.append(_closing_tags(prev, upcoming))
        out.append(text[index:visible])
        out.append(_opening_tags(prev, upcoming))
        prev = upcoming
        segment_start = visible
        index = visible + 1

    out.append(escape(text[segment_start:]))
    out.append(_closing_tags(prev, PLAIN))
    return "".join(out)


def _apply_tag(
    tag: str, color_text: Optional[str], flags: int, color: int
) -> Tuple[int, int]:
    if tag == "font":
        parsed = parse_color(color_text) if color_text else None
        if parsed is not None:
            return flags | StyleFlags.COLOR, parsed
        return flags, color
    if tag == "/font":
        return flags & ~StyleFlags.COLOR, NO_COLOR
    closing = tag.startswith("/")
    flag = TAG_FLAGS[tag.lstrip("/")]
    return (flags & ~flag if closing else flags | flag), color


def parse_markup_into(target: "StyledString", markup: str) -> None:
    """Replace the content of ``target`` with the parsed ``markup``.

    Tags outside the supported set stay in the text verbatim; tag state is
    flat, so a closing tag clears its flag regardless of nesting.
    """

    factory = type(target)
    target.clear()
    flags = 0
    color = NO_COLOR
    offset = 0
    for match in TAG_PATTERN.finditer(markup):
        segment = unescape(markup[offset : match.start()])
        if segment:
            target.append(factory(segment, flags, color))
        flags, color = _apply_tag(match.group(1).lower(), match.group(2), flags, color)
        offset = match.end()
    tail = unescape(markup[offset:])
    if tail:
        target.append(factory(tail, flags, color))
