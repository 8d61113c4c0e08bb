"""Per-file annotation scanning."""

from __future__ import annotations

from pathlib import Path

from ..models import Annotation, FileAnnotationSet
from .comments import comment_token_for
from .parser import split_lines, tokenize_line


def scan_text(text: str, language_id: str | None = None, path: Path | None = None) -> FileAnnotationSet:
    """Collect the annotations of a document in line order.

    Lines that do not parse simply contribute nothing.
    """
    token = comment_token_for(language_id)
    annotations: list[Annotation] = []

    for i, line in enumerate(split_lines(text)):
        spans = tokenize_line(line, token)
        if spans is None or spans.values is None:
            continue

        annotations.append(
            Annotation(
                line_number=i,
                comment_token=token,
                values=spans.values,
                current_value=spans.value_text,
                name=spans.name,
            )
        )

    return FileAnnotationSet(
        path=path,
        language_id=language_id or "plaintext",
        annotations=tuple(annotations),
    )
