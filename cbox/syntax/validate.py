"""Membership checks of assigned values against declared values."""

from __future__ import annotations

from ..models import LineDiagnostic, ValidationResult
from .comments import comment_token_for
from .parser import split_lines, tokenize_line


def format_mismatch(value: str, values: tuple[str, ...] | list[str]) -> str:
    return f'Variable value "{value}" does not match any carousel value ({", ".join(values)})'


def validate_line(line: str, comment_token: str = "#") -> ValidationResult:
    """Check that the value assigned on a line is one of its declared values.

    Lines without an assignment value or without an annotation are valid;
    there is nothing to check on them.
    """
    spans = tokenize_line(line, comment_token)
    if spans is None:
        return ValidationResult(is_valid=True)

    value = spans.value_text
    if not value:
        return ValidationResult(is_valid=True)

    if spans.values is None:
        return ValidationResult(is_valid=True)

    if value in spans.values:
        return ValidationResult(is_valid=True)

    return ValidationResult(is_valid=False, error_message=format_mismatch(value, spans.values))


def validate_text(text: str, language_id: str | None = None) -> list[LineDiagnostic]:
    """Validate every line of a document and locate the offending values."""
    token = comment_token_for(language_id)
    diagnostics: list[LineDiagnostic] = []

    for i, line in enumerate(split_lines(text)):
        spans = tokenize_line(line, token)
        if spans is None or spans.values is None:
            continue

        result = validate_line(line, token)
        if result.is_valid or result.error_message is None:
            continue

        value = spans.value_text or ""
        column = spans.value_column or 0
        diagnostics.append(
            LineDiagnostic(
                line=i,
                column=column,
                length=len(value),
                message=result.error_message,
            )
        )

    return diagnostics
