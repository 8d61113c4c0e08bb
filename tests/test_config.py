"""Tests for settings loading."""

from pathlib import Path

import pytest

from cbox.config import (
    DEFAULT_EXCLUDE_DIRS,
    ConfigError,
    IndexSettings,
    load_settings,
    parse_sort_mode,
    settings_from_dict,
)
from cbox.models import SortMode


def test_defaults_without_settings_file(tmp_path: Path):
    settings = load_settings(tmp_path)

    assert settings == IndexSettings()
    assert settings.source is None
    assert settings.file_ttl == 10.0
    assert settings.files_ttl == 30.0
    assert settings.batch_size == 20
    assert settings.max_files == 500
    assert settings.sort_mode is SortMode.ALPHABETICAL
    assert "node_modules" in settings.exclude_dirs
    assert ".py" in settings.include_extensions


def test_cbox_toml(tmp_path: Path):
    (tmp_path / "cbox.toml").write_text(
        'sort_mode = "modified"\nbatch_size = 5\ndebounce = 0.25\n', encoding="utf-8"
    )

    settings = load_settings(tmp_path)

    assert settings.sort_mode is SortMode.MODIFIED
    assert settings.batch_size == 5
    assert settings.debounce == 0.25
    assert settings.source == tmp_path / "cbox.toml"


def test_pyproject_tool_table(tmp_path: Path):
    (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "demo"\n\n[tool.cbox]\nmax_files = 50\nvalidate_values = false\n',
        encoding="utf-8",
    )

    settings = load_settings(tmp_path)

    assert settings.max_files == 50
    assert settings.validate_values is False


def test_cbox_toml_wins_over_pyproject(tmp_path: Path):
    (tmp_path / "cbox.toml").write_text("batch_size = 3\n", encoding="utf-8")
    (tmp_path / "pyproject.toml").write_text("[tool.cbox]\nbatch_size = 9\n", encoding="utf-8")

    assert load_settings(tmp_path).batch_size == 3


def test_pyproject_without_tool_table(tmp_path: Path):
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "demo"\n', encoding="utf-8")

    settings = load_settings(tmp_path)

    assert settings == IndexSettings()
    assert settings.source is None


def test_malformed_toml(tmp_path: Path):
    (tmp_path / "cbox.toml").write_text("batch_size = = 3\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to read"):
        load_settings(tmp_path)


@pytest.mark.parametrize(
    "data,message",
    [
        ({"batch_size": 0}, "batch_size must be positive"),
        ({"batch_size": 2.5}, "batch_size must be an integer"),
        ({"debounce": "slow"}, "debounce must be a number"),
        ({"file_ttl": True}, "file_ttl must be a number"),
        ({"show_code_lens": "yes"}, "show_code_lens must be true or false"),
        ({"exclude_dirs": "build"}, "exclude_dirs must be a list of strings"),
        ({"sort_mode": 3}, "sort_mode must be a string"),
        ({"sort_mode": "random"}, "Unknown sort mode"),
    ],
)
def test_invalid_values(data, message):
    with pytest.raises(ConfigError, match=message):
        settings_from_dict(data)


def test_extensions_are_normalized():
    settings = settings_from_dict({"include_extensions": ["PY", ".Ts", " go "]})

    assert settings.include_extensions == (".py", ".ts", ".go")


def test_exclude_dirs_replace_defaults():
    settings = settings_from_dict({"exclude_dirs": ["vendor"]})

    assert settings.exclude_dirs == ("vendor",)
    assert settings_from_dict({}).exclude_dirs == DEFAULT_EXCLUDE_DIRS


@pytest.mark.parametrize(
    "value,mode",
    [
        ("alphabetical", SortMode.ALPHABETICAL),
        ("Modified", SortMode.MODIFIED),
        ("last modified", SortMode.MODIFIED),
        ("mtime", SortMode.MODIFIED),
        ("none", SortMode.NONE),
    ],
)
def test_parse_sort_mode(value, mode):
    assert parse_sort_mode(value) is mode
