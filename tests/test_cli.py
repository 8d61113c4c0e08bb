"""Tests for the CLI commands."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

from click.testing import CliRunner

from cbox import __version__
from cbox.cli import cli
from cbox.commands.check_cmd import collect_reports, run_check
from cbox.commands.edit_cmd import run_set, run_toggle
from cbox.config import IndexSettings
from cbox.workspace.index import WorkspaceIndex


def _invoke(*args: str):
    return CliRunner().invoke(cli, list(args))


def test_version():
    result = _invoke("--version")

    assert result.exit_code == 0
    assert __version__ in result.output


def test_list_json(workspace: Path):
    result = _invoke("-r", str(workspace), "list", "--json")

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert [f["name"] for f in data] == ["app.ts", "broken.py", "settings.py"]
    assert [c["name"] for c in data[2]["children"]] == ["debug", "mode"]


def test_list_json_search(workspace: Path):
    result = _invoke("-r", str(workspace), "list", "--json", "--search", "^deb")

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert [f["name"] for f in data] == ["settings.py"]
    assert [c["name"] for c in data[0]["children"]] == ["debug"]


def test_list_tree(workspace: Path):
    result = _invoke("-r", str(workspace), "list")

    assert result.exit_code == 0
    assert "settings.py" in result.output
    assert "mode = two" in result.output
    assert "Line 2" in result.output


def test_list_empty(tmp_path: Path):
    result = _invoke("-r", str(tmp_path), "list")

    assert result.exit_code == 0
    assert "No annotations found." in result.output


def test_check_reports_invalid_values(workspace: Path):
    result = _invoke("-r", str(workspace), "check", "--json")

    assert result.exit_code == 1
    data = json.loads(result.output)
    assert data["summary"] == {"files": 3, "annotations": 4, "invalid": 1}
    broken = next(f for f in data["files"] if f["path"].endswith("broken.py"))
    assert broken["invalid"][0]["line"] == 1
    assert "staging" in broken["invalid"][0]["message"]


def test_check_passes_when_all_valid(tmp_path: Path, write_file):
    write_file("ok.py", "flag = on # [CB]: on|off\n")

    assert run_check(tmp_path, IndexSettings()) == 0


def test_invalid_settings_are_reported(tmp_path: Path, write_file):
    write_file("cbox.toml", "batch_size = 0\n")

    result = _invoke("-r", str(tmp_path), "list")

    assert result.exit_code == 1
    assert "batch_size must be positive" in result.output


def test_toggle_command(workspace: Path):
    path = workspace / "settings.py"

    result = _invoke("-r", str(workspace), "toggle", str(path), "2")

    assert result.exit_code == 0
    assert path.read_text(encoding="utf-8").splitlines()[1] == "mode = three # [CB]: one|two|three"


def test_toggle_rejects_line_zero(workspace: Path):
    result = _invoke("-r", str(workspace), "toggle", str(workspace / "settings.py"), "0")

    assert result.exit_code == 2


def test_run_toggle_without_annotation(workspace: Path):
    assert run_toggle(workspace / "notes.py", 1) == 1


def test_run_set_validates_value(workspace: Path):
    path = workspace / "src" / "broken.py"

    assert run_set(path, 1, "qa") == 1
    assert path.read_text(encoding="utf-8") == "env = staging # [CB]: dev|prod\n"

    assert run_set(path, 1, "prod") == 0
    assert path.read_text(encoding="utf-8") == "env = prod # [CB]: dev|prod\n"


def test_set_command_force(workspace: Path):
    path = workspace / "src" / "broken.py"

    result = _invoke("-r", str(workspace), "set", str(path), "1", "qa", "--force")

    assert result.exit_code == 0
    assert path.read_text(encoding="utf-8") == "env = qa # [CB]: dev|prod\n"


def test_check_counts_annotations_through_index(workspace: Path, monkeypatch):
    requested: list[str] = []
    original = WorkspaceIndex.annotations_for_file

    async def tracking(self, path):
        requested.append(Path(path).name)
        return await original(self, path)

    monkeypatch.setattr(WorkspaceIndex, "annotations_for_file", tracking)

    reports = asyncio.run(collect_reports(workspace, IndexSettings()))

    assert sorted(requested) == ["app.ts", "broken.py", "settings.py"]
    assert {r.path.name: r.annotations for r in reports} == {
        "app.ts": 1,
        "broken.py": 1,
        "settings.py": 2,
    }
    assert [len(r.diagnostics) for r in reports if r.path.name == "broken.py"] == [1]
