"""Pattern matching and materialization for styled replaces."""

from .matcher import (
    compile_pattern,
    match_char,
    match_pattern,
    match_text,
    parse_backreferences,
)
from .materializer import apply_spans, materialize
from .spans import (
    BackReference,
    PlainReplacement,
    ReferenceSpan,
    Replacement,
    SpanSource,
    StyledReplacement,
    as_replacement,
    terminator_of,
)

__all__ = [
    "BackReference",
    "PlainReplacement",
    "ReferenceSpan",
    "Replacement",
    "SpanSource",
    "StyledReplacement",
    "apply_spans",
    "as_replacement",
    "compile_pattern",
    "match_char",
    "match_pattern",
    "match_text",
    "materialize",
    "parse_backreferences",
    "terminator_of",
]
