"""Edits applied to the box list of the image being annotated."""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Sequence

from .labels import resolve_color
from .models import BoundingBox, Dataset


def replace_boxes_at(dataset: Dataset, index: int, new_boxes: Sequence[BoundingBox]) -> Dataset:
    """
    Return a dataset with the boxes of one image replaced.

    Images other than ``index`` are shared with the input dataset.

    Args:
        dataset: Current dataset
        index: Index of the image to update
        new_boxes: Box list for that image

    Returns:
        New Dataset

    Raises:
        IndexError: If index is out of range
    """
    if not 0 <= index < len(dataset.images):
        raise IndexError(f"Image index {index} out of range for {len(dataset.images)} images")

    images = list(dataset.images)
    images[index] = replace(images[index], bounding_boxes=list(new_boxes))
    return Dataset(images=images)


def find_box(boxes: Sequence[BoundingBox], box_id: str) -> Optional[BoundingBox]:
    """Get a box by id, or None."""
    for box in boxes:
        if box.id == box_id:
            return box
    return None


def add_box(boxes: Sequence[BoundingBox], box: BoundingBox) -> List[BoundingBox]:
    """Append a box."""
    return [*boxes, box]


def remove_box(boxes: Sequence[BoundingBox], box_id: str) -> List[BoundingBox]:
    """Drop the box with the given id. Unknown ids leave the list unchanged."""
    return [box for box in boxes if box.id != box_id]


def update_box(boxes: Sequence[BoundingBox], updated: BoundingBox) -> List[BoundingBox]:
    """Replace the box sharing ``updated``'s id."""
    return [updated if box.id == updated.id else box for box in boxes]


def relabel_box(boxes: Sequence[BoundingBox], box_id: str, label: str) -> List[BoundingBox]:
    """Change a box's label and recolor it to match."""
    return [
        box.with_changes(label=label, color=resolve_color(label)) if box.id == box_id else box
        for box in boxes
    ]
