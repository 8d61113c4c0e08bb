"""Cycle semantics and line rewriting."""

from __future__ import annotations

from collections.abc import Sequence

from .parser import tokenize_line


def next_value(current: str | None, values: Sequence[str]) -> str:
    """Return the value after `current` in declared order, wrapping around.

    Unknown or missing current values restart at the first value. Binary
    annotations are the two-value case of the same rule.
    """
    if not values:
        raise ValueError("an annotation declares at least one value")

    if current is not None and current in values:
        i = list(values).index(current)
        if i < len(values) - 1:
            return values[i + 1]
    return values[0]


def rewrite_line(line: str, comment_token: str, new_value: str) -> str | None:
    """Replace the assigned value on a line, keeping everything else verbatim.

    Returns None when the line no longer carries both an assignment and an
    annotation with values.
    """
    spans = tokenize_line(line, comment_token)
    if spans is None or spans.values is None or not spans.has_assignment:
        return None

    return f"{spans.lhs}= {new_value} {spans.prefix}{spans.raw_values}{spans.suffix}"


def toggle_line(line: str, comment_token: str) -> str | None:
    """Advance the assigned value to the next declared value."""
    spans = tokenize_line(line, comment_token)
    if spans is None or spans.values is None or not spans.has_assignment:
        return None

    return rewrite_line(line, comment_token, next_value(spans.value_text, spans.values))


def set_line_value(line: str, comment_token: str, value: str) -> str | None:
    """Assign an explicit value on an annotated line."""
    return rewrite_line(line, comment_token, value)
