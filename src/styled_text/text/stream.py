"""Binary serialization of styled strings.

Layout: a big-endian ``uint32`` byte count followed by the UTF-16BE text
(``0xFFFFFFFF`` marks an empty string), then one flag byte per character,
then one little-endian 32-bit ARGB color per character.
"""

from __future__ import annotations

import io
import struct
from typing import TYPE_CHECKING, BinaryIO, NoReturn, Optional

from styled_text.runtime import telemetry
from styled_text.style import StyleRunArray

if TYPE_CHECKING:
    from .styled_string import StyledString

LOGGER_NAME = "styled_text.stream"

EMPTY_MARKER = 0xFFFFFFFF
TEXT_CODEC = "utf-16-be"
HEADER = struct.Struct(">I")


class StyledStreamError(RuntimeError):
    """Raised when a styled string cannot be written or read.

    ``offset`` is a byte offset into the record when reading and a character
    index into the text when writing.
    """

    def __init__(self, message: str, *, offset: Optional[int] = None) -> None:
        super().__init__(message)
        self.offset = offset


class _Reader:
    __slots__ = ("source", "offset")

    def __init__(self, source: BinaryIO) -> None:
        self.source = source
        self.offset = 0

    def read(self, size: int, what: str) -> bytes:
        data = self.source.read(size) if size else b""
        if len(data) != size:
            _fail(
                "stream.corrupt",
                f"stream ended inside {what}: wanted {size} bytes, got {len(data)}",
                self.offset,
            )
        self.offset += size
        return data


def _fail(
    event: str, message: str, offset: int, cause: Optional[BaseException] = None
) -> NoReturn:
    telemetry.record_event(
        event,
        level="warning",
        data={"reason": message, "offset": offset},
        logger_name=LOGGER_NAME,
    )
    raise StyledStreamError(message, offset=offset) from cause


def write_styled(target: BinaryIO, string: "StyledString") -> None:
    """Append one record for ``string`` to ``target``.

    Surrogate code points cannot be stored: UTF-16 would merge a pair of them
    into one character on the way back and the style counts would drift.
    Nothing is written when that happens.
    """

    text = string.text
    try:
        encoded = text.encode(TEXT_CODEC)
    except UnicodeEncodeError as exc:
        _fail(
            "stream.unencodable",
            f"surrogate code point at index {exc.start}",
            exc.start,
            exc,
        )
    runs = string.style_runs
    header = HEADER.pack(len(encoded) if text else EMPTY_MARKER)
    target.write(header + encoded + runs.flags_bytes() + runs.colors_bytes())


def read_styled(source: BinaryIO, string: "StyledString") -> None:
    """Decode one record from ``source`` into ``string``.

    ``string`` is only modified once the whole record has been read.
    """

    reader = _Reader(source)
    (size,) = HEADER.unpack(reader.read(HEADER.size, "the text length"))
    if size == EMPTY_MARKER:
        text = ""
    else:
        if size % 2:
            _fail("stream.corrupt", f"odd UTF-16 byte count {size}", reader.offset)
        raw = reader.read(size, "the text")
        try:
            text = raw.decode(TEXT_CODEC)
        except UnicodeDecodeError as exc:
            _fail(
                "stream.corrupt",
                f"invalid UTF-16 text: {exc.reason}",
                reader.offset - size + exc.start,
                exc,
            )

    styles = StyleRunArray(len(text))
    flags = reader.read(len(text), "the style flags")
    colors = reader.read(len(text) * 4, "the style colors")
    styles.load_bytes(flags, colors)
    string.swap_buffers(text, styles)


def encode(string: "StyledString") -> bytes:
    buffer = io.BytesIO()
    write_styled(buffer, string)
    return buffer.getvalue()


def decode_into(string: "StyledString", data: bytes) -> None:
    read_styled(io.BytesIO(data), string)
