"""Build the replaced text and styles from a reference-span list."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from styled_text.style import StyleRunArray

from .spans import ReferenceSpan, Replacement, SpanSource, StyledReplacement, terminator_of

if TYPE_CHECKING:
    from styled_text.text.styled_string import StyledString


def materialize(
    spans: Sequence[ReferenceSpan],
    subject: "StyledString",
    replacement: Replacement,
) -> Tuple[str, StyleRunArray]:
    """Return the new ``(text, styles)`` pair described by ``spans``.

    The subject is only read. Plain replacement text takes the style of the
    subject character right after the last copied subject span, or no style
    when no subject span was copied yet or that position is past the end.
    """

    new_length = terminator_of(spans).length
    pieces: List[str] = []
    styles = StyleRunArray(new_length)

    text = subject.text
    subject_styles = subject.style_runs
    template = replacement.text
    template_styles: Optional[StyleRunArray] = None
    if isinstance(replacement, StyledReplacement):
        template_styles = replacement.styled.style_runs

    written = 0
    context = -1
    for span in spans:
        if not span.length or span.source is SpanSource.TERMINATOR:
            continue
        end = span.offset + span.length
        if span.source is SpanSource.SUBJECT:
            pieces.append(text[span.offset : end])
            styles.copy_from(written, span.length, subject_styles, span.offset)
            context = end
        else:
            pieces.append(template[span.offset : end])
            if template_styles is not None:
                styles.copy_from(written, span.length, template_styles, span.offset)
            elif 0 <= context < len(text):
                styles.fill_run(written, span.length, subject_styles.run_at(context))
        written += span.length

    if written != new_length:
        raise RuntimeError(
            f"span list produced {written} characters, terminator announced {new_length}"
        )
    return "".join(pieces), styles


def apply_spans(
    spans: Sequence[ReferenceSpan],
    subject: "StyledString",
    replacement: Replacement,
) -> bool:
    """Materialize ``spans`` and swap the result into ``subject``.

    Returns ``False`` without touching the subject for an empty span list.
    """

    if not spans:
        return False
    text, styles = materialize(spans, subject, replacement)
    subject.swap_buffers(text, styles)
    return True
