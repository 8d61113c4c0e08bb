"""Check command - validate assigned values across the workspace."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..config import IndexSettings
from ..models import LineDiagnostic
from ..syntax.validate import validate_text
from ..workspace.discovery import read_source_async
from ..workspace.index import WorkspaceIndex


@dataclass
class FileReport:
    path: Path
    annotations: int
    diagnostics: list[LineDiagnostic]


async def collect_reports(root: Path, settings: IndexSettings) -> list[FileReport]:
    """Validate every annotated file in the workspace."""
    index = WorkspaceIndex(root, settings)
    reports: list[FileReport] = []
    try:
        for annotated in await index.list_annotated_files():
            annotations = await index.annotations_for_file(annotated.path)
            text = await read_source_async(annotated.path)
            if text is None:
                continue
            diagnostics = validate_text(text, annotations.language_id)
            reports.append(FileReport(annotated.path, len(annotations), diagnostics))
    finally:
        index.close()
    return reports


def run_check(root: Path, settings: IndexSettings, output_json: bool = False) -> int:
    """Report annotated lines whose value is not one of the declared values.

    Returns:
        Exit code (0 = all values valid, 1 = invalid values found)
    """
    reports = asyncio.run(collect_reports(root, settings))
    invalid = sum(len(r.diagnostics) for r in reports)
    total = sum(r.annotations for r in reports)

    if output_json:
        output = {
            "files": [
                {
                    "path": str(r.path),
                    "annotations": r.annotations,
                    "invalid": [
                        {"line": d.line + 1, "column": d.column + 1, "message": d.message}
                        for d in r.diagnostics
                    ],
                }
                for r in reports
            ],
            "summary": {"files": len(reports), "annotations": total, "invalid": invalid},
        }
        print(json.dumps(output, indent=2, ensure_ascii=False))
        return 1 if invalid else 0

    console = Console(stderr=True)
    for report in reports:
        for diag in report.diagnostics:
            console.print(
                f"WARN: {report.path.name}:{diag.line + 1}:{diag.column + 1} - {diag.message}",
                style="yellow",
                highlight=False,
            )

    console.print()
    table = Table(title="Annotation Summary", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("Annotated files", str(len(reports)))
    table.add_row("Annotations", str(total))
    table.add_row("Invalid values", str(invalid))
    console.print(table)

    if invalid:
        console.print(f"\n✗ {invalid} invalid value(s)", style="bold red")
        return 1

    console.print("\n✓ All values valid", style="bold green")
    return 0
