"""Title and sentence case rules working one character at a time."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

WORD_SEPARATORS = frozenset(" -_():,;/\\\t\n\"")
SENTENCE_TERMINATORS = frozenset(".?!")
ELLIPSIS_DOTS = 3


@dataclass(slots=True)
class CaseContinuation:
    """Sentence-case state carried between separately processed chunks.

    ``awaiting_capital`` is read before a chunk is processed and rewritten
    afterwards, so a chunk ending in ``"."`` makes the next one start with a
    capital while a chunk ending mid-sentence does not.
    """

    awaiting_capital: bool = True


def upper_char(ch: str) -> str:
    mapped = ch.upper()
    return mapped if len(mapped) == 1 else ch


def lower_char(ch: str) -> str:
    mapped = ch.lower()
    return mapped if len(mapped) == 1 else ch


def lower_chars(chars: List[str]) -> None:
    for index, ch in enumerate(chars):
        chars[index] = lower_char(ch)


def upper_chars(chars: List[str]) -> None:
    for index, ch in enumerate(chars):
        chars[index] = upper_char(ch)


def title_case_chars(chars: List[str]) -> None:
    word_start = True
    for index, ch in enumerate(chars):
        if ch in WORD_SEPARATORS:
            word_start = True
        elif word_start:
            chars[index] = upper_char(ch)
            word_start = False


def sentence_case_chars(
    chars: List[str], continuation: Optional[CaseContinuation] = None
) -> None:
    start_sentence = continuation.awaiting_capital if continuation else True
    dots = 0

    for index, ch in enumerate(chars):
        if ch in SENTENCE_TERMINATORS:
            if ch == ".":
                dots += 1
                start_sentence = dots < ELLIPSIS_DOTS
            else:
                dots = 0
                start_sentence = True
            continue

        if start_sentence and ch.isalnum():
            chars[index] = upper_char(ch)
            start_sentence = False
        if not ch.isspace():
            dots = 0

    if continuation is not None:
        continuation.awaiting_capital = start_sentence
