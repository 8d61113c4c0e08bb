"""
Hover information for annotated lines.

Shows the declared values in cycle order and the value currently assigned.
"""

from __future__ import annotations

from ..display import hover_markdown
from ..syntax.comments import comment_token_for
from ..syntax.parser import tokenize_line
from ..syntax.scanner import scan_text


def get_hover_info(line: str, language_id: str | None, column: int | None = None) -> str | None:
    """
    Markdown hover content for a line, or None when it carries no annotation.

    When `column` is given the hover only applies from the annotation marker on.
    """
    spans = tokenize_line(line, comment_token_for(language_id))
    if spans is None or spans.values is None:
        return None

    if column is not None and column < spans.marker_start:
        return None

    annotation = scan_text(line, language_id).annotations[0]
    return hover_markdown(annotation)
