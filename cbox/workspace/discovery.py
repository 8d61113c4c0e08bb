"""Candidate file enumeration and cheap content pre-filtering."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Iterator
from pathlib import Path

from ..config import IndexSettings
from ..models import MARKER

logger = logging.getLogger(__name__)


def is_excluded(path: Path, root: Path, exclude_dirs: tuple[str, ...]) -> bool:
    """True when any directory between root and path is an excluded name."""
    try:
        parts = path.relative_to(root).parts[:-1]
    except ValueError:
        parts = path.parts[:-1]
    excluded = set(exclude_dirs)
    return any(part in excluded for part in parts)


def is_candidate(path: Path, root: Path, settings: IndexSettings) -> bool:
    return path.suffix.lower() in settings.include_extensions and not is_excluded(
        path, root, settings.exclude_dirs
    )


def iter_candidates(root: Path, settings: IndexSettings) -> Iterator[Path]:
    """Walk the workspace in sorted order, pruning excluded directories."""
    excluded = set(settings.exclude_dirs)
    extensions = set(settings.include_extensions)

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in excluded)
        for filename in sorted(filenames):
            if os.path.splitext(filename)[1].lower() in extensions:
                yield Path(dirpath) / filename


def discover_candidates(root: Path, settings: IndexSettings) -> list[Path]:
    """Return at most `max_files` candidate source files under root."""
    candidates: list[Path] = []
    for path in iter_candidates(root, settings):
        if len(candidates) >= settings.max_files:
            logger.info("Candidate limit of %d files reached under %s", settings.max_files, root)
            break
        candidates.append(path)
    return candidates


def read_source(path: Path) -> str | None:
    """Read a text file, returning None for binary or unreadable files."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Skipping unreadable file %s: %s", path, e)
        return None
    if "\x00" in text:
        logger.debug("Skipping binary file %s", path)
        return None
    return text


async def read_source_async(path: Path) -> str | None:
    return await asyncio.to_thread(read_source, path)


async def contains_marker(path: Path) -> bool:
    text = await read_source_async(path)
    return text is not None and MARKER in text


async def filter_annotated(paths: list[Path], batch_size: int) -> list[Path]:
    """Keep the paths whose text contains the marker.

    Files are read concurrently within a batch; batches run one after another
    so at most `batch_size` files are open at once. Input order is preserved.
    """
    if batch_size <= 0:
        raise ValueError("batch_size must be positive")

    annotated: list[Path] = []
    for start in range(0, len(paths), batch_size):
        batch = paths[start : start + batch_size]
        flags = await asyncio.gather(*(contains_marker(p) for p in batch))
        annotated.extend(p for p, flag in zip(batch, flags) if flag)
    return annotated
