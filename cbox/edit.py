"""Apply toggle / set-value rewrites to files on disk."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from .syntax.comments import comment_token_for, language_for_path
from .syntax.toggle import set_line_value, toggle_line

logger = logging.getLogger(__name__)


def _split_ending(line: str) -> tuple[str, str]:
    for ending in ("\r\n", "\n", "\r"):
        if line.endswith(ending):
            return line[: -len(ending)], ending
    return line, ""


def _edit_line(
    path: Path,
    line_number: int,
    rewrite: Callable[[str, str], str | None],
    language_id: str | None = None,
) -> bool:
    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            lines = f.readlines()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read %s: %s", path, e)
        return False

    if not 0 <= line_number < len(lines):
        return False

    token = comment_token_for(language_id or language_for_path(path))
    text, ending = _split_ending(lines[line_number])
    new_text = rewrite(text, token)
    if new_text is None or new_text == text:
        return False

    lines[line_number] = new_text + ending
    with path.open("w", encoding="utf-8", newline="") as f:
        f.writelines(lines)
    logger.debug("Rewrote %s:%d", path, line_number + 1)
    return True


def toggle_in_file(path: Path, line_number: int, language_id: str | None = None) -> bool:
    """Cycle the annotated value on a zero-based line; False when nothing changed."""
    return _edit_line(path, line_number, toggle_line, language_id)


def set_value_in_file(path: Path, line_number: int, value: str, language_id: str | None = None) -> bool:
    """Assign `value` on a zero-based annotated line; False when nothing changed."""
    return _edit_line(path, line_number, lambda text, token: set_line_value(text, token, value), language_id)
