"""Annotation parsing, validation and cycling."""

from .comments import comment_token_for, language_for_path
from .parser import LineSpans, extract_value, find_values, split_lines, tokenize_line
from .scanner import scan_text
from .toggle import next_value, rewrite_line, set_line_value, toggle_line
from .validate import validate_line, validate_text

__all__ = [
    "LineSpans",
    "comment_token_for",
    "extract_value",
    "find_values",
    "language_for_path",
    "next_value",
    "rewrite_line",
    "scan_text",
    "set_line_value",
    "split_lines",
    "toggle_line",
    "tokenize_line",
    "validate_line",
    "validate_text",
]
