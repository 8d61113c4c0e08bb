"""Watch command - keep the annotation index fresh while files change."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from datetime import datetime
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape

from ..config import IndexSettings
from ..watcher import run_watch_loop
from ..workspace.index import WorkspaceIndex

logger = logging.getLogger(__name__)


def spawn_report(tasks: set[asyncio.Task], coro: Coroutine[Any, Any, None]) -> asyncio.Task:
    """Run a report in the background, logging its failure instead of losing it."""
    task = asyncio.ensure_future(coro)
    tasks.add(task)

    def done(finished: asyncio.Task) -> None:
        tasks.discard(finished)
        if finished.cancelled():
            return
        error = finished.exception()
        if error is not None:
            logger.error("Change report failed", exc_info=error)

    task.add_done_callback(done)
    return task


async def _watch(index: WorkspaceIndex, console: Console) -> None:
    refresh_tasks: set[asyncio.Task] = set()

    async def report(paths: frozenset[Path]) -> None:
        timestamp = datetime.now().strftime("%H:%M:%S")
        files = await index.list_annotated_files()
        for path in sorted(paths):
            annotations = await index.annotations_for_file(path)
            invalid = sum(1 for a in annotations if not a.is_valid)
            note = f" [yellow]{invalid} invalid[/yellow]" if invalid else ""
            console.print(
                f"[dim]{timestamp}[/dim] ~ {escape(path.name)}: {len(annotations)} annotation(s){note}"
            )
        console.print(f"[dim]{timestamp}[/dim] {len(files)} annotated file(s)")

    def on_changed(paths: frozenset[Path]) -> None:
        spawn_report(refresh_tasks, report(paths))

    index.subscribe(on_changed)
    files = await index.list_annotated_files()
    console.print(f"  Annotated files: {len(files)}")
    console.print()
    console.print("[dim]Press Ctrl+C to stop watching[/dim]")
    console.print()

    await run_watch_loop(index)


def run_watch(root: Path, settings: IndexSettings) -> None:
    """
    Watch the workspace and report annotation changes.

    This is a blocking command that runs until interrupted (Ctrl+C). Bursts
    of edits are reported once per debounce window.
    """
    console = Console(stderr=True)
    console.print(f"[bold]Watching[/bold] {escape(str(root))}")
    console.print(f"  Debounce: {settings.debounce:.2f}s")

    index = WorkspaceIndex(root, settings)
    try:
        asyncio.run(_watch(index, console))
    except KeyboardInterrupt:
        console.print()
        console.print("[bold]Stopped.[/bold]")
    finally:
        index.close()
