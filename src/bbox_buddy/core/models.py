"""Data models for BBox Buddy annotations."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

UNLABELED = "unlabeled"


def generate_unique_id() -> str:
    """Return a fresh opaque identifier for a bounding box."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class BoundingBox:
    """
    A single axis-aligned annotation rectangle.

    Coordinates are in image pixels with the origin at the top-left
    corner of the box. Instances are immutable; geometry helpers
    return updated copies.
    """

    id: str
    x: float
    y: float
    width: float
    height: float
    label: str = UNLABELED
    color: Optional[str] = None

    @property
    def right(self) -> float:
        """X coordinate of the right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> float:
        """Y coordinate of the bottom edge."""
        return self.y + self.height

    def with_changes(self, **changes: Any) -> BoundingBox:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the internal JSON shape."""
        data: Dict[str, Any] = {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "label": self.label,
        }
        if self.color is not None:
            data["color"] = self.color
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> BoundingBox:
        """
        Create a box from the internal JSON shape.

        Missing ids are generated; a missing color stays unset so the
        caller can resolve it from the label.
        """
        return cls(
            id=str(data.get("id") or generate_unique_id()),
            x=data.get("x", 0),
            y=data.get("y", 0),
            width=data.get("width", 0),
            height=data.get("height", 0),
            label=data.get("label", UNLABELED),
            color=data.get("color"),
        )


@dataclass(frozen=True)
class ImageAnnotation:
    """All bounding boxes drawn on one image."""

    filename: str
    bounding_boxes: List[BoundingBox] = field(default_factory=list)
    source_file: Optional[str] = None

    @property
    def box_count(self) -> int:
        """Number of boxes on the image."""
        return len(self.bounding_boxes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the internal JSON shape."""
        data: Dict[str, Any] = {
            "filename": self.filename,
            "boundingBoxes": [box.to_dict() for box in self.bounding_boxes],
        }
        if self.source_file is not None:
            data["sourceFile"] = self.source_file
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ImageAnnotation:
        """Create an image annotation from the internal JSON shape."""
        return cls(
            filename=data.get("filename", ""),
            bounding_boxes=[
                BoundingBox.from_dict(box) for box in data.get("boundingBoxes", [])
            ],
            source_file=data.get("sourceFile"),
        )


@dataclass(frozen=True)
class Dataset:
    """
    The whole working document: an ordered list of annotated images.

    The application holds exactly one Dataset at a time and replaces it
    wholesale on every import.
    """

    images: List[ImageAnnotation] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.images)

    @property
    def box_count(self) -> int:
        """Total number of boxes across all images."""
        return sum(image.box_count for image in self.images)

    def labels(self) -> List[str]:
        """Labels in use, deduplicated in first-seen order."""
        seen: Dict[str, None] = {}
        for image in self.images:
            for box in image.bounding_boxes:
                seen.setdefault(box.label, None)
        return list(seen)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the internal JSON shape."""
        return {"images": [image.to_dict() for image in self.images]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Dataset:
        """Create a dataset from the internal JSON shape."""
        return cls(images=[ImageAnnotation.from_dict(image) for image in data.get("images", [])])


@dataclass(frozen=True)
class RawAnnotationItem:
    """
    One image entry in the external corner-format JSON.

    JSON structure:
    {
        "file": "path/to/image.png",
        "annotation": {
            "bboxes": [[x1, y1, x2, y2], ...],
            "labels": ["cat", ...]
        }
    }
    """

    file: str
    bboxes: List[List[float]] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the external JSON shape."""
        return {
            "file": self.file,
            "annotation": {
                "bboxes": [list(bbox) for bbox in self.bboxes],
                "labels": list(self.labels),
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RawAnnotationItem:
        """Create a raw item from the external JSON shape."""
        annotation = data.get("annotation") or {}
        return cls(
            file=data.get("file", ""),
            bboxes=list(annotation.get("bboxes") or []),
            labels=list(annotation.get("labels") or []),
        )
