"""Toggle and set-value commands - rewrite one annotated line on disk."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..edit import set_value_in_file, toggle_in_file
from ..syntax.comments import language_for_path
from ..syntax.scanner import scan_text
from ..workspace.discovery import read_source


def _describe(path: Path, line_number: int) -> str | None:
    text = read_source(path)
    if text is None:
        return None
    annotation = scan_text(text, language_for_path(path)).at_line(line_number)
    if annotation is None:
        return None
    return f"{annotation.name} = {annotation.current_value}"


def run_toggle(path: Path, line: int) -> int:
    """Cycle the value on a 1-based line.

    Returns:
        Exit code (0 = rewritten, 1 = line carries no assignment with annotation)
    """
    console = Console(stderr=True)
    if not toggle_in_file(path, line - 1):
        console.print(f"No annotated assignment at {path.name}:{line}", style="bold red")
        return 1

    console.print(f"{escape(path.name)}:{line} → {escape(_describe(path, line - 1) or '?')}", style="green")
    return 0


def run_set(path: Path, line: int, value: str, *, force: bool = False) -> int:
    """Assign a value on a 1-based line.

    Unless `force` is set, the value must be one of the declared values.

    Returns:
        Exit code (0 = rewritten, 1 = no change)
    """
    console = Console(stderr=True)

    if not force:
        text = read_source(path)
        annotation = None
        if text is not None:
            annotation = scan_text(text, language_for_path(path)).at_line(line - 1)
        if annotation is not None and value not in annotation.values:
            console.print(
                f"{escape(value)} is not one of: {escape(', '.join(annotation.values))}",
                style="bold red",
            )
            return 1

    if not set_value_in_file(path, line - 1, value):
        console.print(f"No change at {path.name}:{line}", style="bold red")
        return 1

    console.print(f"{escape(path.name)}:{line} → {escape(_describe(path, line - 1) or '?')}", style="green")
    return 0
