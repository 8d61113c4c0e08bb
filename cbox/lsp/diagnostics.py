"""
Convert annotation validation and scanning results to LSP structures.

Works on document text so open buffers are checked without touching disk.
"""

from __future__ import annotations

from lsprotocol import types as lsp

from ..display import code_lens_title
from ..models import LineDiagnostic
from ..syntax.comments import comment_token_for
from ..syntax.parser import split_lines
from ..syntax.scanner import scan_text
from ..syntax.toggle import set_line_value, toggle_line
from ..syntax.validate import validate_text

SOURCE = "cbox"

TOGGLE_COMMAND = "cbox.toggleAtLine"
SET_VALUE_COMMAND = "cbox.setValue"
LIST_COMMAND = "cbox.listAnnotations"
REFRESH_COMMAND = "cbox.refresh"

_SEVERITY = {
    "error": lsp.DiagnosticSeverity.Error,
    "warning": lsp.DiagnosticSeverity.Warning,
    "info": lsp.DiagnosticSeverity.Information,
}


def utf16_offset(line: str, index: int) -> int:
    """LSP positions count UTF-16 code units, not code points."""
    return len(line[:index].encode("utf-16-le")) // 2


def to_lsp_diagnostic(diag: LineDiagnostic, line_text: str = "") -> lsp.Diagnostic:
    start = utf16_offset(line_text, diag.column) if line_text else diag.column
    end = utf16_offset(line_text, diag.column + diag.length) if line_text else diag.column + diag.length
    return lsp.Diagnostic(
        range=lsp.Range(
            start=lsp.Position(line=diag.line, character=start),
            end=lsp.Position(line=diag.line, character=end),
        ),
        message=diag.message,
        severity=_SEVERITY.get(diag.severity, lsp.DiagnosticSeverity.Warning),
        source=SOURCE,
        code="invalid-value",
    )


def document_diagnostics(text: str, language_id: str | None) -> list[lsp.Diagnostic]:
    """Warnings for every annotated line whose value is not declared."""
    lines = split_lines(text)
    return [to_lsp_diagnostic(d, lines[d.line]) for d in validate_text(text, language_id)]


def document_code_lenses(uri: str, text: str, language_id: str | None) -> list[lsp.CodeLens]:
    """One toggle lens at the start of each annotated line."""
    lenses = []
    for annotation in scan_text(text, language_id):
        line = annotation.line_number
        lenses.append(
            lsp.CodeLens(
                range=lsp.Range(
                    start=lsp.Position(line=line, character=0),
                    end=lsp.Position(line=line, character=0),
                ),
                command=lsp.Command(
                    title=code_lens_title(annotation),
                    command=TOGGLE_COMMAND,
                    arguments=[uri, line],
                ),
            )
        )
    return lenses


def line_edit(
    uri: str,
    lines: list[str],
    line_number: int,
    language_id: str | None,
    value: str | None = None,
) -> lsp.WorkspaceEdit | None:
    """Workspace edit that toggles (or sets) the value on one line.

    Returns None when the line is out of range or no longer annotated.
    """
    if not 0 <= line_number < len(lines):
        return None

    original = lines[line_number].rstrip("\r\n")
    token = comment_token_for(language_id)
    if value is None:
        new_text = toggle_line(original, token)
    else:
        new_text = set_line_value(original, token, value)
    if new_text is None or new_text == original:
        return None

    edit = lsp.TextEdit(
        range=lsp.Range(
            start=lsp.Position(line=line_number, character=0),
            end=lsp.Position(line=line_number, character=utf16_offset(original, len(original))),
        ),
        new_text=new_text,
    )
    return lsp.WorkspaceEdit(changes={uri: [edit]})
