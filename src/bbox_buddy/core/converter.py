"""Conversion between the corner-format raw dataset and the internal dataset."""

from __future__ import annotations

import json
import logging
import math
import numbers
import re
from typing import Any, Dict, List, Mapping, Sequence, Union

from .errors import MalformedBoxError
from .labels import resolve_color
from .models import (
    UNLABELED,
    BoundingBox,
    Dataset,
    ImageAnnotation,
    RawAnnotationItem,
    generate_unique_id,
)

logger = logging.getLogger(__name__)

EXPORT_INDENT = 2

_PATH_SEPARATORS = re.compile(r"[\\/]")

RawItemLike = Union[RawAnnotationItem, Mapping[str, Any]]


def basename(file: str) -> str:
    """Strip directory components from a slash or backslash separated path."""
    return _PATH_SEPARATORS.split(file)[-1]


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def is_finite_number(value: Any) -> bool:
    """Check for a real, finite, non-boolean number."""
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _validate_bbox(bbox: Any, item_index: int, box_index: int) -> Sequence[float]:
    if isinstance(bbox, (str, bytes)) or not isinstance(bbox, Sequence):
        raise MalformedBoxError(item_index, box_index, f"expected a list, got {bbox!r}")
    if len(bbox) != 4:
        raise MalformedBoxError(
            item_index, box_index, f"expected 4 coordinates, got {len(bbox)}"
        )
    if not all(is_finite_number(v) for v in bbox):
        raise MalformedBoxError(
            item_index, box_index, f"non-numeric or non-finite coordinate in {bbox!r}"
        )
    return bbox


def raw_to_internal(raw: Sequence[RawItemLike]) -> Dataset:
    """
    Convert a raw corner-format dataset to the internal dataset.

    Each item's filename is the last path segment of its ``file``. Box
    ``i`` takes ``labels[i]``, or "unlabeled" when the label list is
    shorter. Inverted corners give negative extents, kept as-is.

    Args:
        raw: Raw items, as dicts or RawAnnotationItem

    Returns:
        New Dataset with one image per raw item

    Raises:
        MalformedBoxError: If a bbox is not four numbers
    """
    images: List[ImageAnnotation] = []

    for item_index, entry in enumerate(raw):
        item = entry if isinstance(entry, RawAnnotationItem) else RawAnnotationItem.from_dict(entry)

        boxes: List[BoundingBox] = []
        for box_index, bbox in enumerate(item.bboxes):
            x1, y1, x2, y2 = _validate_bbox(bbox, item_index, box_index)
            label = item.labels[box_index] if box_index < len(item.labels) else UNLABELED
            if not isinstance(label, str):
                label = UNLABELED if label is None else str(label)
            boxes.append(BoundingBox(
                id=generate_unique_id(),
                x=x1,
                y=y1,
                width=x2 - x1,
                height=y2 - y1,
                label=label,
                color=resolve_color(label),
            ))

        if len(item.labels) < len(item.bboxes):
            logger.debug(
                f"{item.file}: {len(item.bboxes) - len(item.labels)} boxes without labels"
            )

        images.append(ImageAnnotation(
            filename=basename(item.file),
            bounding_boxes=boxes,
            source_file=item.file,
        ))

    dataset = Dataset(images=images)
    logger.info(f"Converted {len(images)} raw items with {dataset.box_count} boxes")
    return dataset


def internal_to_raw(dataset: Dataset, keep_source_paths: bool = False) -> List[Dict[str, Any]]:
    """
    Convert the internal dataset to the raw corner-format dataset.

    Coordinates are rounded half away from zero. By default ``file`` is
    the image filename, which drops any directory the raw import had;
    pass ``keep_source_paths`` to write back the original path where one
    was recorded.

    Args:
        dataset: Dataset to export
        keep_source_paths: Restore the imported ``file`` values

    Returns:
        List of raw items in their JSON shape
    """
    raw_items: List[Dict[str, Any]] = []

    for image in dataset.images:
        file = image.filename
        if keep_source_paths and image.source_file is not None:
            file = image.source_file

        item = RawAnnotationItem(
            file=file,
            bboxes=[
                [
                    round_half_away(box.x),
                    round_half_away(box.y),
                    round_half_away(box.x + box.width),
                    round_half_away(box.y + box.height),
                ]
                for box in image.bounding_boxes
            ],
            labels=[box.label for box in image.bounding_boxes],
        )
        raw_items.append(item.to_dict())

    return raw_items


def format_for_export(data: Any) -> str:
    """
    Serialize data to pretty-printed JSON with 2-space indentation.

    Dataset and RawAnnotationItem values are converted to their JSON
    shape first; anything else must already be JSON-compatible.
    """
    if isinstance(data, (Dataset, RawAnnotationItem)):
        data = data.to_dict()
    elif isinstance(data, list):
        data = [item.to_dict() if isinstance(item, RawAnnotationItem) else item for item in data]
    return json.dumps(data, indent=EXPORT_INDENT, ensure_ascii=False)
