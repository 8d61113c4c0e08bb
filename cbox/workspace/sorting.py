"""Presentation order of the annotated file listing."""

from __future__ import annotations

from collections.abc import Iterable

from ..models import AnnotatedFile, SortMode


def _mtime(item: AnnotatedFile) -> float:
    try:
        return item.path.stat().st_mtime
    except OSError:
        return 0.0


def apply_sort(files: Iterable[AnnotatedFile], mode: SortMode | str) -> list[AnnotatedFile]:
    """Return a sorted copy of `files`; the input is never reordered in place.

    - alphabetical: by basename, case-insensitive first, then exact
    - modified: most recently modified first; unreadable files sort as oldest
    - none: insertion order
    """
    mode = SortMode(mode)
    items = list(files)

    if mode is SortMode.ALPHABETICAL:
        return sorted(items, key=lambda f: (f.name.casefold(), f.name))
    if mode is SortMode.MODIFIED:
        return sorted(items, key=_mtime, reverse=True)
    return items
