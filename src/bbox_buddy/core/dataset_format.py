"""Dataset JSON schemas accepted on import."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict

from .converter import is_finite_number, raw_to_internal
from .errors import MalformedBoxError, UnrecognizedStructureError
from .labels import resolve_color
from .models import UNLABELED, BoundingBox, Dataset, ImageAnnotation

_GEOMETRY_KEYS = ("x", "y", "width", "height")


class DatasetSchema(ABC):
    """
    Abstract base class for an importable dataset JSON schema.

    A schema decides whether parsed JSON has its shape and, if so,
    decodes it into the internal Dataset.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the schema name (e.g., 'raw', 'internal')."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Return a short human-readable description."""
        pass

    @abstractmethod
    def matches(self, data: Any) -> bool:
        """
        Check if parsed JSON has this schema's shape.

        Args:
            data: Result of ``json.loads``

        Returns:
            True if ``decode`` should be used for the data
        """
        pass

    @abstractmethod
    def decode(self, data: Any) -> Dataset:
        """
        Decode parsed JSON into a Dataset.

        Args:
            data: Parsed JSON for which ``matches`` returned True

        Returns:
            New Dataset
        """
        pass


class RawDatasetSchema(DatasetSchema):
    """
    Corner-format array, the on-disk and export format.

    [
        {
            "file": "images/img.png",
            "annotation": {"bboxes": [[x1, y1, x2, y2]], "labels": ["cat"]}
        }
    ]
    """

    @property
    def name(self) -> str:
        return "raw"

    @property
    def description(self) -> str:
        return "Array of {file, annotation: {bboxes, labels}} items"

    def matches(self, data: Any) -> bool:
        if not isinstance(data, list):
            return False
        return all(
            isinstance(item, dict)
            and isinstance(item.get("file"), str)
            and isinstance(item.get("annotation"), dict)
            and isinstance(item["annotation"].get("bboxes", []), list)
            and isinstance(item["annotation"].get("labels", []), list)
            for item in data
        )

    def decode(self, data: Any) -> Dataset:
        return raw_to_internal(data)


class InternalDatasetSchema(DatasetSchema):
    """
    Origin-and-extent object, the in-memory dataset shape.

    {
        "images": [
            {
                "filename": "img.png",
                "boundingBoxes": [{"id": "...", "x": 10, "y": 10, "width": 40, "height": 50, "label": "cat"}]
            }
        ]
    }
    """

    @property
    def name(self) -> str:
        return "internal"

    @property
    def description(self) -> str:
        return "Object with an images array of {filename, boundingBoxes}"

    def matches(self, data: Any) -> bool:
        return (
            isinstance(data, dict)
            and isinstance(data.get("images"), list)
            and all(isinstance(image, dict) for image in data["images"])
        )

    def decode(self, data: Any) -> Dataset:
        return Dataset(images=[
            self._decode_image(image, image_index)
            for image_index, image in enumerate(data["images"])
        ])

    def _decode_image(self, image: Dict[str, Any], image_index: int) -> ImageAnnotation:
        filename = image.get("filename", "")
        source_file = image.get("sourceFile")
        boxes = image.get("boundingBoxes", [])
        if not isinstance(filename, str) or not isinstance(source_file, (str, type(None))):
            raise UnrecognizedStructureError(
                f"Invalid JSON structure: image {image_index} has a non-string filename"
            )
        if not isinstance(boxes, list):
            raise UnrecognizedStructureError(
                f"Invalid JSON structure: boundingBoxes of image {image_index} is not an array"
            )

        return ImageAnnotation(
            filename=filename,
            bounding_boxes=[
                self._decode_box(box, image_index, box_index)
                for box_index, box in enumerate(boxes)
            ],
            source_file=source_file,
        )

    def _decode_box(self, box: Any, image_index: int, box_index: int) -> BoundingBox:
        if not isinstance(box, dict):
            raise MalformedBoxError(image_index, box_index, f"expected an object, got {box!r}")

        for key in _GEOMETRY_KEYS:
            if not is_finite_number(box.get(key, 0)):
                raise MalformedBoxError(
                    image_index, box_index, f"{key} must be a finite number, got {box[key]!r}"
                )

        label = box.get("label")
        color = box.get("color")
        if not isinstance(label, (str, type(None))) or not isinstance(color, (str, type(None))):
            raise MalformedBoxError(image_index, box_index, "label and color must be strings")
        if label is None:
            label = UNLABELED

        decoded = BoundingBox.from_dict({**box, "label": label})
        # Boxes saved without a color get the label's color
        return decoded if decoded.color else decoded.with_changes(color=resolve_color(label))
