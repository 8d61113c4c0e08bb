"""
File system watcher feeding edit notifications into the workspace index.

This module provides:
- Watchdog-based file monitoring filtered to scanned source files
- Hand-off of notifications from the observer thread to the event loop
- A blocking watch loop that keeps the index fresh until interrupted
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from watchdog.events import (
    FileSystemEvent,
    FileSystemEventHandler,
    FileMovedEvent,
)
from watchdog.observers import Observer

from .config import IndexSettings
from .workspace.discovery import is_candidate
from .workspace.index import WorkspaceIndex

logger = logging.getLogger(__name__)


class AnnotationEventHandler(FileSystemEventHandler):
    """
    Forwards changes to relevant source files as path notifications.

    Debouncing is left to the receiver; this handler only filters by
    extension and excluded directories.
    """

    def __init__(
        self,
        root: Path,
        settings: IndexSettings,
        on_change: Callable[[Path], None],
    ):
        super().__init__()
        self.root = root
        self.settings = settings
        self.on_change = on_change

    def _is_relevant(self, path: str | bytes) -> bool:
        if isinstance(path, bytes):
            path = path.decode()
        return is_candidate(Path(path), self.root, self.settings)

    def _forward(self, path: str | bytes) -> None:
        if isinstance(path, bytes):
            path = path.decode()
        logger.debug("Change detected: %s", path)
        self.on_change(Path(path))

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self._is_relevant(event.src_path):
            self._forward(event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self._is_relevant(event.src_path):
            self._forward(event.src_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self._is_relevant(event.src_path):
            self._forward(event.src_path)

    def on_moved(self, event: FileMovedEvent) -> None:
        if event.is_directory:
            return
        if self._is_relevant(event.src_path):
            self._forward(event.src_path)
        if self._is_relevant(event.dest_path):
            self._forward(event.dest_path)


def watch_workspace(
    root: Path,
    settings: IndexSettings,
    on_change: Callable[[Path], None],
    recursive: bool = True,
) -> tuple[Observer, AnnotationEventHandler]:
    """
    Start watching a workspace for changes to annotated source files.

    Returns:
        Tuple of (observer, handler) - caller should call observer.stop() to stop watching
    """
    handler = AnnotationEventHandler(root=root, settings=settings, on_change=on_change)

    observer = Observer()
    observer.schedule(handler, str(root), recursive=recursive)
    observer.start()

    return observer, handler


def threadsafe_notifier(index: WorkspaceIndex, loop: asyncio.AbstractEventLoop) -> Callable[[Path], None]:
    """Wrap `index.notify` so it can be called from the observer thread."""

    def notify(path: Path) -> None:
        loop.call_soon_threadsafe(index.schedule_debounced_invalidate, path)

    return notify


async def run_watch_loop(index: WorkspaceIndex) -> None:
    """
    Keep the index fresh until the task is cancelled.

    Listeners registered with `index.subscribe` receive one signal per quiet
    period, however many raw file events arrived.
    """
    loop = asyncio.get_running_loop()
    observer, _ = watch_workspace(index.root, index.settings, threadsafe_notifier(index, loop))

    try:
        await asyncio.Event().wait()
    finally:
        observer.stop()
        await asyncio.to_thread(observer.join)
