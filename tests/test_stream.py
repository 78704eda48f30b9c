from __future__ import annotations

import io
from typing import Any, Dict, List, Tuple

import pytest

from styled_text import StyledStreamError, StyleFlags, StyledString
from styled_text.runtime import telemetry


def make_sample() -> StyledString:
    string = StyledString("héllo 😀 wörld")
    string.set_style_flags(0, 5, StyleFlags.BOLD)
    string.set_style_color(6, 3, 0xFF336699)
    string.set_style_flags(8, -1, StyleFlags.ITALIC | StyleFlags.UNDERLINE, on=True)
    return string


def test_round_trip_keeps_text_and_styles() -> None:
    original = make_sample()

    restored = StyledString.from_bytes(original.to_bytes())

    assert restored == original
    assert restored.style_color_at(6) == 0xFF336699


def test_byte_layout() -> None:
    data = StyledString("A", StyleFlags.BOLD).to_bytes()

    assert data == b"\x00\x00\x00\x02" + b"\x00A" + b"\x01" + b"\x00\x00\x00\x00"


def test_colors_are_little_endian() -> None:
    string = StyledString("A")
    string.set_style_color(0, 1, 0xFF112233)

    assert string.to_bytes()[-4:] == b"\x33\x22\x11\xff"


def test_empty_string_uses_marker() -> None:
    data = StyledString().to_bytes()

    assert data == b"\xff\xff\xff\xff"
    assert StyledString.from_bytes(data).text == ""


def test_sequential_records_on_one_stream() -> None:
    buffer = io.BytesIO()
    first = make_sample()
    second = StyledString("tail", StyleFlags.STRIKE_THROUGH)
    first.write_to(buffer)
    second.write_to(buffer)
    buffer.seek(0)

    a = StyledString()
    b = StyledString()
    a.read_from(buffer)
    b.read_from(buffer)

    assert a == first
    assert b == second


def test_truncated_stream_raises_with_offset() -> None:
    data = StyledString("A").to_bytes()[:-1]

    with pytest.raises(StyledStreamError) as excinfo:
        StyledString.from_bytes(data)

    assert excinfo.value.offset == 7


def test_failed_read_leaves_target_untouched() -> None:
    target = StyledString("keep", StyleFlags.BOLD)

    with pytest.raises(StyledStreamError):
        target.read_from(io.BytesIO(b"\x00\x00\x00\x04\x00"))

    assert target == StyledString("keep", StyleFlags.BOLD)


def test_odd_text_length_is_rejected() -> None:
    with pytest.raises(StyledStreamError):
        StyledString.from_bytes(b"\x00\x00\x00\x03abc")


def test_surrogate_code_points_are_rejected_on_write() -> None:
    string = StyledString(chr(0xD83D) + chr(0xDE00), StyleFlags.BOLD)
    buffer = io.BytesIO()

    with pytest.raises(StyledStreamError) as excinfo:
        string.write_to(buffer)

    assert excinfo.value.offset == 0
    assert buffer.getvalue() == b""


def test_non_bmp_character_keeps_one_style_run() -> None:
    original = StyledString("a\U0001F600b", StyleFlags.ITALIC)
    buffer = io.BytesIO()
    original.write_to(buffer)
    StyledString("next").write_to(buffer)
    buffer.seek(0)

    first = StyledString()
    second = StyledString()
    first.read_from(buffer)
    second.read_from(buffer)

    assert first == original
    assert len(first.style_runs) == 3
    assert second.text == "next"


def test_invalid_utf16_is_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    events: List[Tuple[str, Dict[str, Any]]] = []
    monkeypatch.setattr(
        telemetry, "record_event", lambda name, **kwargs: events.append((name, kwargs))
    )
    lone_high_surrogate = b"\x00\x00\x00\x02\xd8\x3d" + b"\x00" + b"\x00" * 4

    with pytest.raises(StyledStreamError) as excinfo:
        StyledString.from_bytes(lone_high_surrogate)

    assert excinfo.value.offset == 4
    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)
    assert [name for name, _ in events] == ["stream.corrupt"]
    assert events[0][1]["data"]["offset"] == 4
