"""Tests for the explorer tree and search filter."""

import asyncio
from pathlib import Path

import pytest

from cbox.models import AnnotationFilter, AnnotationNode, FileNode, ValueNode
from cbox.workspace.index import WorkspaceIndex
from cbox.workspace.tree import build_tree, children, filter_from_query, matches_filter


@pytest.mark.parametrize(
    "query,use_regex",
    [
        ("debug", False),
        ("^debug", True),
        ("mode[0-9]", True),
        ("a.b", False),
    ],
)
def test_filter_from_query_detects_regex(query, use_regex):
    assert filter_from_query(query).use_regex is use_regex


def test_filter_from_query_explicit_override():
    assert filter_from_query("^debug", use_regex=False).use_regex is False
    assert filter_from_query("a.b", use_regex=True).use_regex is True


def test_substring_match():
    assert matches_filter("DEBUG_MODE", AnnotationFilter("debug"))
    assert not matches_filter("DEBUG_MODE", AnnotationFilter("debug", case_sensitive=True))
    assert matches_filter("anything", None)
    assert matches_filter("anything", AnnotationFilter(""))


def test_regex_match():
    assert matches_filter("debug_level", AnnotationFilter("^DEBUG", use_regex=True))
    assert not matches_filter("debug_level", AnnotationFilter("^DEBUG", case_sensitive=True, use_regex=True))
    assert not matches_filter("log_debug", AnnotationFilter("^debug", use_regex=True))


def test_invalid_regex_matches_nothing():
    assert not matches_filter("mode[", filter_from_query("mode["))


def test_children_levels(workspace: Path):
    index = WorkspaceIndex(workspace)

    async def scenario():
        files = await children(index)
        annotations = await children(index, files[-1])
        values = await children(index, annotations[1])
        leaves = await children(index, values[0])
        return files, annotations, values, leaves

    files, annotations, values, leaves = asyncio.run(scenario())

    assert all(isinstance(f, FileNode) for f in files)
    assert [f.name for f in files] == ["app.ts", "broken.py", "settings.py"]
    assert all(isinstance(a, AnnotationNode) for a in annotations)
    assert [a.annotation.name for a in annotations] == ["debug", "mode"]
    assert all(isinstance(v, ValueNode) for v in values)
    assert [(v.value, v.is_selected) for v in values] == [("one", False), ("two", True), ("three", False)]
    assert leaves == []


def test_build_tree(workspace: Path):
    index = WorkspaceIndex(workspace)
    branches = asyncio.run(build_tree(index))

    assert [b.node.name for b in branches] == ["app.ts", "broken.py", "settings.py"]
    settings_branch = branches[-1]
    assert len(settings_branch.children) == 2
    assert len(settings_branch.children[1].children) == 3


def test_build_tree_with_search_prunes_files(workspace: Path):
    index = WorkspaceIndex(workspace)
    branches = asyncio.run(build_tree(index, filter_from_query("MODE")))

    assert [b.node.name for b in branches] == ["settings.py"]
    assert [c.node.annotation.name for c in branches[0].children] == ["mode"]


def test_build_tree_regex_search(workspace: Path):
    index = WorkspaceIndex(workspace)
    branches = asyncio.run(build_tree(index, filter_from_query("^(env|const)")))

    assert [b.node.name for b in branches] == ["app.ts", "broken.py"]


def test_tree_to_dict(workspace: Path):
    index = WorkspaceIndex(workspace)
    branches = asyncio.run(build_tree(index, filter_from_query("env")))

    data = branches[0].to_dict()
    assert data["type"] == "file"
    assert data["name"] == "broken.py"
    checkbox = data["children"][0]
    assert checkbox["type"] == "checkbox"
    assert checkbox["name"] == "env"
    assert checkbox["valid"] is False
    assert [v["value"] for v in checkbox["children"]] == ["dev", "prod"]
    assert all(v["type"] == "value" and not v["selected"] for v in checkbox["children"])
    assert "children" not in checkbox["children"][0]
