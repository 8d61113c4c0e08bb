"""
Cached workspace index of annotated files.

Two cache layers with independent lifetimes:
- the project-wide listing of files that contain a marker (`files_ttl`)
- the parsed annotation set of each file (`file_ttl`)

Both are dropped explicitly (`invalidate_file`, `invalidate_all`), after a
debounced burst of edit notifications, or lazily once their TTL has passed.
All methods run on one asyncio event loop; the only suspension points are
file reads and directory walks.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Generic, TypeVar

from ..config import IndexSettings
from ..models import AnnotatedFile, FileAnnotationSet, SortMode
from ..syntax.comments import language_for_path
from ..syntax.scanner import scan_text
from .discovery import discover_candidates, filter_annotated, read_source_async
from .sorting import apply_sort

logger = logging.getLogger(__name__)

T = TypeVar("T")

IndexChangedCallback = Callable[[frozenset[Path]], None]


@dataclass(frozen=True)
class _CacheEntry(Generic[T]):
    value: T
    timestamp: float


class WorkspaceIndex:
    """Directory-to-annotation index for one workspace root.

    The index is the session context: create it when a session starts and
    call `close()` when it ends.
    """

    def __init__(
        self,
        root: Path,
        settings: IndexSettings | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.root = Path(root).resolve()
        self.settings = settings or IndexSettings()
        self.sort_mode = self.settings.sort_mode
        self.scan_count = 0
        self._clock = clock

        self._files_cache: _CacheEntry[tuple[AnnotatedFile, ...]] | None = None
        self._file_cache: dict[Path, _CacheEntry[FileAnnotationSet]] = {}

        # Bumped on invalidation so results of reads that raced it are not stored
        self._generation = 0
        self._file_versions: dict[Path, int] = {}

        self._scan_task: asyncio.Task[tuple[AnnotatedFile, ...]] | None = None

        self._pending: set[Path] = set()
        self._timer: asyncio.TimerHandle | None = None
        self._subscribers: list[IndexChangedCallback] = []

    def _key(self, path: Path | str) -> Path:
        p = Path(path)
        if not p.is_absolute():
            p = self.root / p
        return p.resolve()

    def _is_fresh(self, entry: _CacheEntry, ttl: float) -> bool:
        return (self._clock() - entry.timestamp) < ttl

    # Reads

    async def list_annotated_files(self, sort_mode: SortMode | str | None = None) -> list[AnnotatedFile]:
        """Files under the root that contain at least one marker, sorted for display."""
        entry = self._files_cache
        if entry is not None and self._is_fresh(entry, self.settings.files_ttl):
            logger.debug("Annotated file listing served from cache")
            files = entry.value
        else:
            files = await self._shared_scan()
        return apply_sort(files, sort_mode or self.sort_mode)

    async def _shared_scan(self) -> tuple[AnnotatedFile, ...]:
        # Concurrent callers share one in-flight scan
        if self._scan_task is None or self._scan_task.done():
            self._scan_task = asyncio.ensure_future(self._scan())
        return await asyncio.shield(self._scan_task)

    async def _scan(self) -> tuple[AnnotatedFile, ...]:
        generation = self._generation
        started = self._clock()
        wall_start = time.perf_counter()

        candidates = await asyncio.to_thread(discover_candidates, self.root, self.settings)
        annotated = await filter_annotated(candidates, self.settings.batch_size)
        files = tuple(AnnotatedFile(path) for path in annotated)
        self.scan_count += 1

        if generation == self._generation:
            self._files_cache = _CacheEntry(files, started)
        else:
            logger.debug("Discarding scan result invalidated while in flight")

        logger.info(
            "Scanned %d candidate files under %s: %d annotated (%.2fs)",
            len(candidates),
            self.root,
            len(files),
            time.perf_counter() - wall_start,
        )
        return files

    async def annotations_for_file(self, path: Path | str) -> FileAnnotationSet:
        """Parsed annotations of one file; unreadable files yield an empty set."""
        key = self._key(path)
        language_id = language_for_path(key)

        entry = self._file_cache.get(key)
        if entry is not None and self._is_fresh(entry, self.settings.file_ttl):
            return entry.value

        version = (self._generation, self._file_versions.get(key, 0))
        now = self._clock()
        text = await read_source_async(key)
        if text is None:
            return FileAnnotationSet(path=key, language_id=language_id)

        result = scan_text(text, language_id, path=key)
        if version == (self._generation, self._file_versions.get(key, 0)):
            self._file_cache[key] = _CacheEntry(result, now)
        return result

    # Invalidation

    def invalidate_file(self, path: Path | str) -> None:
        key = self._key(path)
        self._file_cache.pop(key, None)
        self._file_versions[key] = self._file_versions.get(key, 0) + 1

    def invalidate_all(self) -> None:
        self._file_cache.clear()
        self._files_cache = None
        self._generation += 1

    def refresh(self) -> None:
        """User-triggered refresh: drop everything and signal listeners."""
        self.invalidate_all()
        self._emit(frozenset())

    def set_sort_mode(self, mode: SortMode | str) -> None:
        self.sort_mode = SortMode(mode)
        self.refresh()

    def schedule_debounced_invalidate(self, path: Path | str) -> None:
        """Queue a path for invalidation after a quiet period.

        Each call resets the single-shot timer; when it finally fires, every
        queued path is invalidated together and listeners are signalled once.
        Must be called from the event loop thread.
        """
        self._pending.add(self._key(path))
        if self._timer is not None:
            self._timer.cancel()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.settings.debounce, self._flush_pending)

    notify = schedule_debounced_invalidate

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def _flush_pending(self) -> None:
        self._timer = None
        paths = frozenset(self._pending)
        self._pending.clear()

        for path in paths:
            self.invalidate_file(path)
        # Edits can add or remove the last marker of a file
        self._files_cache = None
        self._generation += 1

        logger.debug("Debounced invalidation of %d file(s)", len(paths))
        self._emit(paths)

    # Change notification

    def subscribe(self, callback: IndexChangedCallback) -> Callable[[], None]:
        """Register an index-changed listener; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _emit(self, paths: frozenset[Path]) -> None:
        for callback in list(self._subscribers):
            try:
                callback(paths)
            except Exception:
                logger.exception("Index change listener failed")

    def close(self) -> None:
        """Tear down the session: cancel the timer and drop all state."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending.clear()
        self._subscribers.clear()
        self.invalidate_all()
