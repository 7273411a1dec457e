"""Exceptions raised for malformed annotation data."""

from __future__ import annotations

from typing import Optional


class AnnotationDataError(ValueError):
    """Base class for annotation input that cannot be imported."""


class InvalidJSONError(AnnotationDataError):
    """The payload is not valid JSON."""


class UnrecognizedStructureError(AnnotationDataError):
    """The payload is valid JSON but matches no known dataset schema."""

    def __init__(self, message: str = "Invalid JSON structure") -> None:
        super().__init__(message)


class MalformedBoxError(AnnotationDataError):
    """
    A corner-format box is not a sequence of four numbers.

    Attributes:
        item_index: Index of the raw item holding the box
        box_index: Index of the box within the item's ``bboxes`` list
    """

    def __init__(self, item_index: int, box_index: int, detail: Optional[str] = None) -> None:
        self.item_index = item_index
        self.box_index = box_index
        message = f"Malformed bbox at item {item_index}, box {box_index}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
