"""Data models for annotations, workspace listings and explorer nodes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Literal, Union

# Marker that introduces an annotation after the comment token
MARKER = "[CB]:"

UNNAMED = "(unnamed)"

AnnotationKind = Literal["single", "binary", "carousel"]


class SortMode(str, Enum):
    """Presentation order for the annotated file listing."""

    ALPHABETICAL = "alphabetical"
    MODIFIED = "modified"
    NONE = "none"


@dataclass(frozen=True)
class Annotation:
    """One recognized `[CB]:` directive on a line."""

    line_number: int  # zero-based
    comment_token: str
    values: tuple[str, ...]
    current_value: str | None = None  # None when no assignment precedes the marker
    name: str = UNNAMED  # left-hand side of the assignment

    @property
    def kind(self) -> AnnotationKind:
        """Display category; cycling is identical for all kinds."""
        if len(self.values) == 1:
            return "single"
        if len(self.values) == 2:
            return "binary"
        return "carousel"

    @property
    def current_index(self) -> int | None:
        if self.current_value is None or self.current_value not in self.values:
            return None
        return self.values.index(self.current_value)

    @property
    def is_checked(self) -> bool:
        return self.current_value == self.values[0]

    @property
    def is_valid(self) -> bool:
        return not self.current_value or self.current_value in self.values

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.line_number,
            "name": self.name,
            "current_value": self.current_value,
            "values": list(self.values),
            "kind": self.kind,
            "valid": self.is_valid,
        }


@dataclass(frozen=True)
class FileAnnotationSet:
    """All annotations of one file, ordered by line number."""

    path: Path | None
    language_id: str
    annotations: tuple[Annotation, ...] = ()

    def __len__(self) -> int:
        return len(self.annotations)

    def __iter__(self):
        return iter(self.annotations)

    def at_line(self, line_number: int) -> Annotation | None:
        for annotation in self.annotations:
            if annotation.line_number == line_number:
                return annotation
        return None


@dataclass(frozen=True)
class AnnotatedFile:
    """A file reference in the project-wide listing."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of checking a line's current value against its declared values."""

    is_valid: bool
    error_message: str | None = None


@dataclass(frozen=True)
class LineDiagnostic:
    """A single validation finding located on a line."""

    line: int
    column: int
    length: int
    message: str
    severity: Literal["error", "warning", "info"] = "warning"


# Explorer tree nodes


@dataclass(frozen=True)
class FileNode:
    """A file that holds at least one annotation."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    def to_dict(self) -> dict[str, Any]:
        return {"type": "file", "path": str(self.path), "name": self.name}


@dataclass(frozen=True)
class AnnotationNode:
    """One annotation inside a file."""

    path: Path
    annotation: Annotation

    def to_dict(self) -> dict[str, Any]:
        return {"type": "checkbox", "path": str(self.path), **self.annotation.to_dict()}


@dataclass(frozen=True)
class ValueNode:
    """One declared value of an annotation."""

    path: Path
    annotation: Annotation
    value: str

    @property
    def is_selected(self) -> bool:
        return self.value == self.annotation.current_value

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "value",
            "path": str(self.path),
            "line": self.annotation.line_number,
            "value": self.value,
            "selected": self.is_selected,
        }


TreeNode = Union[FileNode, AnnotationNode, ValueNode]


@dataclass(frozen=True)
class AnnotationFilter:
    """Search filter applied to annotation names in the explorer."""

    query: str = ""
    case_sensitive: bool = False
    use_regex: bool = False
