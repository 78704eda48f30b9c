"""Instructions exchanged between the pattern matcher and the materializer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Sequence, Union

if TYPE_CHECKING:
    from styled_text.text.styled_string import StyledString


class SpanSource(str, Enum):
    SUBJECT = "subject"
    REPLACEMENT = "replacement"
    TERMINATOR = "terminator"


@dataclass(frozen=True, slots=True)
class ReferenceSpan:
    """One contiguous slice of the output.

    For ``TERMINATOR`` spans ``offset`` holds the subject length before the
    replace and ``length`` the total length after it.
    """

    source: SpanSource
    offset: int
    length: int

    @classmethod
    def subject(cls, offset: int, length: int) -> "ReferenceSpan":
        return cls(SpanSource.SUBJECT, offset, length)

    @classmethod
    def replacement(cls, offset: int, length: int) -> "ReferenceSpan":
        return cls(SpanSource.REPLACEMENT, offset, length)

    @classmethod
    def terminator(cls, old_length: int, new_length: int) -> "ReferenceSpan":
        return cls(SpanSource.TERMINATOR, old_length, new_length)


@dataclass(frozen=True, slots=True)
class BackReference:
    group: int
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class PlainReplacement:
    text: str

    def __len__(self) -> int:
        return len(self.text)


@dataclass(frozen=True, slots=True)
class StyledReplacement:
    styled: "StyledString"

    @property
    def text(self) -> str:
        return self.styled.text

    def __len__(self) -> int:
        return len(self.styled)


Replacement = Union[PlainReplacement, StyledReplacement]


def as_replacement(value: Union[str, "StyledString", Replacement]) -> Replacement:
    if isinstance(value, (PlainReplacement, StyledReplacement)):
        return value
    if isinstance(value, str):
        return PlainReplacement(value)
    return StyledReplacement(value.copy())


def terminator_of(spans: Sequence[ReferenceSpan]) -> ReferenceSpan:
    if not spans or spans[-1].source is not SpanSource.TERMINATOR:
        raise ValueError("span list does not end with a terminator")
    return spans[-1]
