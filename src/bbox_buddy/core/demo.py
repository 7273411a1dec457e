"""Built-in sample dataset."""

from __future__ import annotations

from .labels import resolve_color
from .models import BoundingBox, Dataset, ImageAnnotation


def _box(box_id: str, x: int, y: int, width: int, height: int, label: str) -> BoundingBox:
    return BoundingBox(
        id=box_id, x=x, y=y, width=width, height=height,
        label=label, color=resolve_color(label),
    )


def demo_dataset() -> Dataset:
    """Return a small dataset of three remote images for trying the editor."""
    return Dataset(images=[
        ImageAnnotation(
            filename="https://images.unsplash.com/photo-1566197341759-47f74d6caee1",
            bounding_boxes=[_box("box1", 100, 100, 200, 150, "cat")],
        ),
        ImageAnnotation(
            filename="https://images.unsplash.com/photo-1588943211346-0908a1fb0b01",
            bounding_boxes=[_box("box2", 150, 120, 180, 220, "dog")],
        ),
        ImageAnnotation(
            filename="https://images.unsplash.com/photo-1583511655857-d19b40a7a54e",
            bounding_boxes=[
                _box("box3", 120, 80, 240, 200, "dog"),
                _box("box4", 400, 120, 100, 80, "ball"),
            ],
        ),
    ])
