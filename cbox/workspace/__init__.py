"""Workspace discovery, caching and presentation order."""

from .index import WorkspaceIndex
from .sorting import apply_sort
from .tree import TreeBranch, build_tree, children, filter_from_query, matches_filter

__all__ = [
    "TreeBranch",
    "WorkspaceIndex",
    "apply_sort",
    "build_tree",
    "children",
    "filter_from_query",
    "matches_filter",
]
