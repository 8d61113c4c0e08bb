"""Tests for the file watcher hand-off."""

from __future__ import annotations

import asyncio
from pathlib import Path

from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from cbox.config import IndexSettings
from cbox.watcher import AnnotationEventHandler, threadsafe_notifier
from cbox.workspace.index import WorkspaceIndex


def _handler(root: Path) -> tuple[AnnotationEventHandler, list[Path]]:
    changes: list[Path] = []
    return AnnotationEventHandler(root, IndexSettings(), changes.append), changes


def test_relevant_events_are_forwarded(tmp_path: Path):
    handler, changes = _handler(tmp_path)

    handler.on_created(FileCreatedEvent(str(tmp_path / "a.py")))
    handler.on_modified(FileModifiedEvent(str(tmp_path / "src" / "b.ts")))
    handler.on_deleted(FileDeletedEvent(str(tmp_path / "c.go")))

    assert changes == [tmp_path / "a.py", tmp_path / "src" / "b.ts", tmp_path / "c.go"]


def test_irrelevant_events_are_dropped(tmp_path: Path):
    handler, changes = _handler(tmp_path)

    handler.on_modified(FileModifiedEvent(str(tmp_path / "notes.txt")))
    handler.on_modified(FileModifiedEvent(str(tmp_path / "node_modules" / "lib.js")))
    handler.on_modified(DirModifiedEvent(str(tmp_path / "src")))

    assert changes == []


def test_move_reports_both_ends(tmp_path: Path):
    handler, changes = _handler(tmp_path)

    handler.on_moved(FileMovedEvent(str(tmp_path / "old.py"), str(tmp_path / "new.py")))
    handler.on_moved(FileMovedEvent(str(tmp_path / "draft.txt"), str(tmp_path / "final.py")))

    assert changes == [tmp_path / "old.py", tmp_path / "new.py", tmp_path / "final.py"]


def test_notifications_from_other_threads_are_debounced(tmp_path: Path):
    index = WorkspaceIndex(tmp_path, IndexSettings(debounce=0.05))
    signals: list[frozenset[Path]] = []
    index.subscribe(signals.append)
    path = tmp_path / "a.py"

    async def scenario():
        notify = threadsafe_notifier(index, asyncio.get_running_loop())
        await asyncio.to_thread(notify, path)
        await asyncio.to_thread(notify, path)
        await asyncio.sleep(0.3)

    asyncio.run(scenario())

    assert signals == [frozenset({path.resolve()})]
