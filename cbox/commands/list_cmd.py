"""List command - browse annotated files as an explorer tree."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from ..config import IndexSettings
from ..display import annotation_label, value_label
from ..models import AnnotationFilter, AnnotationNode, SortMode, ValueNode
from ..workspace.index import WorkspaceIndex
from ..workspace.tree import TreeBranch, build_tree


async def collect_tree(
    root: Path,
    settings: IndexSettings,
    *,
    sort_mode: SortMode | None = None,
    search: AnnotationFilter | None = None,
) -> list[TreeBranch]:
    index = WorkspaceIndex(root, settings)
    try:
        return await build_tree(index, search, sort_mode)
    finally:
        index.close()


def _render(root: Path, branches: list[TreeBranch]) -> Tree:
    tree = Tree(f"[bold]{escape(str(root))}[/bold]")
    for file_branch in branches:
        path = file_branch.node.path
        try:
            rel = path.relative_to(root)
        except ValueError:
            rel = path
        file_tree = tree.add(f"[bold cyan]{escape(path.name)}[/bold cyan] [dim]{escape(str(rel))}[/dim]")

        for annotation_branch in file_branch.children:
            node = annotation_branch.node
            assert isinstance(node, AnnotationNode)
            annotation = node.annotation
            style = "" if annotation.is_valid else "yellow"
            label = escape(annotation_label(annotation))
            if style:
                label = f"[{style}]{label}[/{style}]"
            branch = file_tree.add(f"{label} [dim]Line {annotation.line_number + 1}[/dim]")

            for value_branch in annotation_branch.children:
                value_node = value_branch.node
                assert isinstance(value_node, ValueNode)
                branch.add(escape(value_label(value_node.value, annotation)))
    return tree


def run_list(
    root: Path,
    settings: IndexSettings,
    *,
    sort_mode: SortMode | None = None,
    search: AnnotationFilter | None = None,
    output_json: bool = False,
) -> int:
    """Print every annotated file with its annotations and declared values.

    Returns:
        Exit code (0 = success)
    """
    branches = asyncio.run(collect_tree(root, settings, sort_mode=sort_mode, search=search))

    if output_json:
        print(json.dumps([b.to_dict() for b in branches], indent=2, ensure_ascii=False))
        return 0

    console = Console()
    if not branches:
        console.print("[dim]No annotations found.[/dim]")
        return 0

    console.print(_render(root, branches))
    return 0
