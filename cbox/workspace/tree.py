"""Explorer tree over the workspace index: files, annotations, values."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..models import (
    AnnotationFilter,
    AnnotationNode,
    FileNode,
    SortMode,
    TreeNode,
    ValueNode,
)
from .index import WorkspaceIndex


def filter_from_query(query: str, case_sensitive: bool = False, use_regex: bool | None = None) -> AnnotationFilter:
    """Build a filter; queries starting with `^` or holding `[` are treated as regexes."""
    if use_regex is None:
        use_regex = query.startswith("^") or "[" in query
    return AnnotationFilter(query=query, case_sensitive=case_sensitive, use_regex=use_regex)


def matches_filter(name: str, search: AnnotationFilter | None) -> bool:
    if search is None or not search.query:
        return True

    if search.use_regex:
        flags = 0 if search.case_sensitive else re.IGNORECASE
        try:
            return re.search(search.query, name, flags) is not None
        except re.error:
            return False

    if search.case_sensitive:
        return search.query in name
    return search.query.lower() in name.lower()


async def children(
    index: WorkspaceIndex,
    node: TreeNode | None = None,
    search: AnnotationFilter | None = None,
    sort_mode: SortMode | str | None = None,
) -> list[TreeNode]:
    """Children of a node; the root's children are the annotated files."""
    if node is None:
        files = await index.list_annotated_files(sort_mode)
        return [FileNode(f.path) for f in files]

    if isinstance(node, FileNode):
        annotations = await index.annotations_for_file(node.path)
        return [AnnotationNode(node.path, a) for a in annotations if matches_filter(a.name, search)]

    if isinstance(node, AnnotationNode):
        return [ValueNode(node.path, node.annotation, v) for v in node.annotation.values]

    return []


@dataclass
class TreeBranch:
    node: TreeNode
    children: list[TreeBranch] = field(default_factory=list)

    def to_dict(self) -> dict:
        d = self.node.to_dict()
        if self.children:
            d["children"] = [c.to_dict() for c in self.children]
        return d


async def build_tree(
    index: WorkspaceIndex,
    search: AnnotationFilter | None = None,
    sort_mode: SortMode | str | None = None,
) -> list[TreeBranch]:
    """Expand the whole explorer tree.

    With an active search, files without a matching annotation are left out.
    """
    branches: list[TreeBranch] = []
    for file_node in await children(index, None, search, sort_mode):
        annotation_nodes = await children(index, file_node, search)
        if search is not None and search.query and not annotation_nodes:
            continue

        branch = TreeBranch(file_node)
        for annotation_node in annotation_nodes:
            values = await children(index, annotation_node, search)
            branch.children.append(TreeBranch(annotation_node, [TreeBranch(v) for v in values]))
        branches.append(branch)
    return branches
