"""Pytest configuration and fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest


class FakeClock:
    """Manually advanced monotonic clock for cache TTL tests."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a UTF-8 file below tmp_path, creating parent directories."""

    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def workspace(tmp_path: Path, write_file: Callable[[str, str], Path]) -> Path:
    """A small workspace with annotated, plain and excluded files."""
    write_file(
        "settings.py",
        "debug = True  # [CB]: True|False\nmode = two # [CB]: one|two|three\n",
    )
    write_file("src/app.ts", "const level = 2 // [CB]: 1|2|3\nlet plain = 1\n")
    write_file("src/broken.py", "env = staging # [CB]: dev|prod\n")
    write_file("notes.py", "x = 1\n")
    write_file("README.txt", "flag = on # [CB]: on|off\n")
    write_file("node_modules/lib.js", "let a = 1 // [CB]: 1|2\n")
    return tmp_path


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
