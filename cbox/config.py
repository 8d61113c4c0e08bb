"""Workspace settings loaded from `cbox.toml` or `[tool.cbox]`."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .models import SortMode
from .syntax.comments import EXTENSION_LANGUAGES

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE_DIRS = (
    ".git",
    "node_modules",
    "out",
    "dist",
    ".vscode-test",
    "build",
    "coverage",
    "__pycache__",
    ".pytest_cache",
)

DEFAULT_INCLUDE_EXTENSIONS = tuple(sorted(EXTENSION_LANGUAGES))


class ConfigError(ValueError):
    """Raised when a settings file is malformed."""


@dataclass(frozen=True)
class IndexSettings:
    file_ttl: float = 10.0  # seconds a per-file annotation set stays fresh
    files_ttl: float = 30.0  # seconds the annotated-file listing stays fresh
    debounce: float = 0.5
    batch_size: int = 20
    max_files: int = 500
    sort_mode: SortMode = SortMode.ALPHABETICAL
    include_extensions: tuple[str, ...] = DEFAULT_INCLUDE_EXTENSIONS
    exclude_dirs: tuple[str, ...] = DEFAULT_EXCLUDE_DIRS
    validate_values: bool = True
    show_code_lens: bool = True
    source: Path | None = field(default=None, compare=False)


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _positive_number(data: dict[str, Any], key: str, default: float) -> float:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{key} must be a number")
    if value <= 0:
        raise ConfigError(f"{key} must be positive")
    return float(value)


def _positive_int(data: dict[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer")
    if value <= 0:
        raise ConfigError(f"{key} must be positive")
    return value


def _flag(data: dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false")
    return value


def _string_list(data: dict[str, Any], key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{key} must be a list of strings")
    return tuple(v.strip() for v in value if v.strip())


def parse_sort_mode(value: str) -> SortMode:
    normalized = value.strip().lower().replace(" ", "_")
    aliases = {"last_modified": "modified", "mtime": "modified"}
    try:
        return SortMode(aliases.get(normalized, normalized))
    except ValueError:
        choices = ", ".join(m.value for m in SortMode)
        raise ConfigError(f"Unknown sort mode: {value!r} (expected one of {choices})") from None


def settings_from_dict(data: dict[str, Any], source: Path | None = None) -> IndexSettings:
    """Build settings from a parsed TOML table."""
    defaults = IndexSettings()

    sort_raw = data.get("sort_mode", defaults.sort_mode.value)
    if not isinstance(sort_raw, str):
        raise ConfigError("sort_mode must be a string")

    extensions = _string_list(data, "include_extensions", defaults.include_extensions)
    extensions = tuple(e if e.startswith(".") else f".{e}" for e in extensions)

    return IndexSettings(
        file_ttl=_positive_number(data, "file_ttl", defaults.file_ttl),
        files_ttl=_positive_number(data, "files_ttl", defaults.files_ttl),
        debounce=_positive_number(data, "debounce", defaults.debounce),
        batch_size=_positive_int(data, "batch_size", defaults.batch_size),
        max_files=_positive_int(data, "max_files", defaults.max_files),
        sort_mode=parse_sort_mode(sort_raw),
        include_extensions=tuple(e.lower() for e in extensions),
        exclude_dirs=_string_list(data, "exclude_dirs", defaults.exclude_dirs),
        validate_values=_flag(data, "validate_values", defaults.validate_values),
        show_code_lens=_flag(data, "show_code_lens", defaults.show_code_lens),
        source=source,
    )


def load_settings(root: Path) -> IndexSettings:
    """Load settings for a workspace root.

    `<root>/cbox.toml` wins over `[tool.cbox]` in `<root>/pyproject.toml`.
    Missing files yield the defaults.
    """
    import tomllib

    candidates = (
        (root / "cbox.toml", lambda d: d),
        (root / "pyproject.toml", lambda d: _coerce_dict(_coerce_dict(d.get("tool")).get("cbox"))),
    )

    for path, select in candidates:
        if not path.is_file():
            continue
        try:
            data = tomllib.loads(path.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to read {path}: {e}") from e

        table = select(data)
        if path.name == "pyproject.toml" and not table:
            continue

        logger.debug("Loaded settings from %s", path)
        return settings_from_dict(table, source=path)

    return IndexSettings()
