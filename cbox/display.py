"""Glyphs and labels for annotations. Display only; cycling ignores them."""

from __future__ import annotations

from .models import Annotation

CHECKED = "☑"
UNCHECKED = "☐"
SELECTED = "✓"

# Carousel positions 1-20
CIRCLED_NUMBERS = "①②③④⑤⑥⑦⑧⑨⑩⑪⑫⑬⑭⑮⑯⑰⑱⑲⑳"


def glyph_for(annotation: Annotation) -> str | None:
    """Checkbox glyph for binary annotations, circled position for carousels."""
    if annotation.kind == "binary":
        return CHECKED if annotation.is_checked else UNCHECKED

    if annotation.kind == "carousel":
        index = annotation.current_index
        if index is not None and index < len(CIRCLED_NUMBERS):
            return CIRCLED_NUMBERS[index]
    return None


def annotation_label(annotation: Annotation) -> str:
    icon = CHECKED if annotation.is_checked else UNCHECKED
    return f"{icon} {annotation.name} = {annotation.current_value}"


def value_label(value: str, annotation: Annotation) -> str:
    icon = SELECTED if value == annotation.current_value else " "
    return f"{icon} {value}"


def hover_markdown(annotation: Annotation) -> str:
    return f"**Values:** {' → '.join(annotation.values)}\n\n**Current:** {annotation.current_value}"


def code_lens_title(annotation: Annotation) -> str:
    icon = CHECKED if annotation.is_checked else UNCHECKED
    return f"{icon} Click to toggle"
