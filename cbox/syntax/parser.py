"""Line tokenizer for `[CB]:` annotations.

A line is split once into spans:

    <lhs>=<value> <token> [CB]: <v1>|<v2>|...<suffix>
    ^^^^^ ^^^^^^^ ^^^^^^^^^^^^^^ ^^^^^^^^^^^
    lhs   value   prefix         raw_values

Both the value list and the currently assigned value are derived from the
same spans. The first marker occurrence and the first `=` before it are
authoritative.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

from ..models import UNNAMED

# One non-empty segment followed by `|segment` repeats; stops at `||`
VALUE_LIST_PATTERN = re.compile(r"[^|]+(?:\|[^|]+)*")

LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> list[str]:
    """Split a document into lines the way files and LSP clients number them.

    Only `\\r\\n`, `\\r` and `\\n` end a line; form feeds and Unicode line
    separators stay inside the line, unlike `str.splitlines()`.
    """
    lines = LINE_BREAK_PATTERN.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


@lru_cache(maxsize=32)
def marker_pattern(comment_token: str) -> re.Pattern[str]:
    """Compile the `<token> [CB]:` pattern with the token taken literally."""
    return re.compile(rf"{re.escape(comment_token)}\s*\[CB\]:\s*")


@dataclass(frozen=True)
class LineSpans:
    """Spans of a line that carries an annotation marker."""

    text: str
    marker_start: int
    prefix: str  # comment token through marker and trailing whitespace
    raw_values: str  # verbatim value list, empty if none matched
    suffix: str  # anything after the value list
    values: tuple[str, ...] | None
    assign_index: int | None  # first `=` before the marker

    @property
    def has_assignment(self) -> bool:
        return self.assign_index is not None

    @property
    def lhs(self) -> str:
        """Text before the assignment `=` (verbatim)."""
        if self.assign_index is None:
            return ""
        return self.text[: self.assign_index]

    @property
    def name(self) -> str:
        return self.lhs.strip() or UNNAMED

    @property
    def value_text(self) -> str | None:
        if self.assign_index is None:
            return None
        return self.text[self.assign_index + 1 : self.marker_start].strip()

    @property
    def value_column(self) -> int | None:
        """Column where the trimmed assigned value starts."""
        if self.assign_index is None:
            return None
        segment = self.text[self.assign_index + 1 : self.marker_start]
        return self.assign_index + 1 + (len(segment) - len(segment.lstrip()))


def _split_values(raw: str) -> tuple[str, ...] | None:
    values = tuple(v.strip() for v in raw.split("|"))
    if not any(values):
        return None
    return values


def tokenize_line(line: str, comment_token: str) -> LineSpans | None:
    """Split a line into annotation spans, or None when no marker is present."""
    marker = marker_pattern(comment_token).search(line)
    if not marker:
        return None

    rest = line[marker.end() :]
    list_match = VALUE_LIST_PATTERN.match(rest)
    if list_match is not None:
        raw_values = list_match.group(0)
        suffix = rest[list_match.end() :]
        values = _split_values(raw_values)
    else:
        raw_values = ""
        suffix = rest
        values = None

    equals = line.find("=", 0, marker.start())
    return LineSpans(
        text=line,
        marker_start=marker.start(),
        prefix=marker.group(0),
        raw_values=raw_values,
        suffix=suffix,
        values=values,
        assign_index=equals if equals != -1 else None,
    )


def find_values(line: str, comment_token: str) -> tuple[str, ...] | None:
    """Return the declared values of the annotation on a line, if any."""
    spans = tokenize_line(line, comment_token)
    if spans is None:
        return None
    return spans.values


def extract_value(line: str, comment_token: str = "#") -> str | None:
    """Return the value assigned before the annotation marker.

    The result is the trimmed text between the first `=` and the marker,
    possibly empty. None when the line has no marker or no `=` before it.
    """
    spans = tokenize_line(line, comment_token)
    if spans is None:
        return None
    return spans.value_text
