"""Pointer-driven geometry for creating, moving and resizing boxes."""

from __future__ import annotations

from typing import Optional, Tuple

from .labels import resolve_color
from .models import UNLABELED, BoundingBox, generate_unique_id

MIN_BOX_SIZE = 20
DEFAULT_BOX_SIZE = 100

# Handle tokens, corners first so they win hit tests over edges
RESIZE_DIRECTIONS: Tuple[str, ...] = ("nw", "ne", "sw", "se", "n", "s", "e", "w")

_COMPASS = frozenset("nsew")


def create_box(x: float, y: float, label: str = UNLABELED) -> BoundingBox:
    """
    Create a default-sized box with its top-left corner at ``(x, y)``.

    Args:
        x: Left edge in image pixels
        y: Top edge in image pixels
        label: Label for the new box

    Returns:
        New BoundingBox with a fresh id
    """
    return BoundingBox(
        id=generate_unique_id(),
        x=x,
        y=y,
        width=DEFAULT_BOX_SIZE,
        height=DEFAULT_BOX_SIZE,
        label=label,
        color=resolve_color(label),
    )


def apply_drag(box: BoundingBox, delta_x: float, delta_y: float) -> BoundingBox:
    """Move a box by a pointer delta. Boxes may leave the image bounds."""
    return box.with_changes(x=box.x + delta_x, y=box.y + delta_y)


def apply_resize(
    box: BoundingBox,
    direction: str,
    delta_x: float,
    delta_y: float
) -> BoundingBox:
    """
    Resize a box by dragging one of its edge or corner handles.

    Each axis is handled independently. Dragging the west or north
    handle moves the origin together with the extent, and only when the
    clamped extent actually changes, so the opposite edge stays put once
    the box hits the minimum size.

    Args:
        box: Box being resized
        direction: Compass tokens of the dragged handle, e.g. "ne" or "s"
        delta_x: Horizontal pointer delta
        delta_y: Vertical pointer delta

    Returns:
        Resized copy of the box

    Raises:
        ValueError: If direction is empty or contains other characters
    """
    if not direction or not set(direction) <= _COMPASS:
        raise ValueError(f"Invalid resize direction: {direction!r}")

    x, y = box.x, box.y
    width, height = box.width, box.height

    if "e" in direction:
        width = max(MIN_BOX_SIZE, box.width + delta_x)
    if "w" in direction:
        possible_width = max(MIN_BOX_SIZE, box.width - delta_x)
        if possible_width != box.width:
            x = box.x + delta_x
            width = possible_width

    if "s" in direction:
        height = max(MIN_BOX_SIZE, box.height + delta_y)
    if "n" in direction:
        possible_height = max(MIN_BOX_SIZE, box.height - delta_y)
        if possible_height != box.height:
            y = box.y + delta_y
            height = possible_height

    return box.with_changes(x=x, y=y, width=width, height=height)


def finalize_created_box(
    origin_x: float,
    origin_y: float,
    raw_width: float,
    raw_height: float,
    label: str = UNLABELED
) -> BoundingBox:
    """
    Build a box drawn by dragging from an origin point.

    The drag may go up or left, giving negative raw extents; the
    result always has non-negative width and height and covers the
    same rectangle.
    """
    return BoundingBox(
        id=generate_unique_id(),
        x=origin_x if raw_width > 0 else origin_x + raw_width,
        y=origin_y if raw_height > 0 else origin_y + raw_height,
        width=abs(raw_width),
        height=abs(raw_height),
        label=label,
        color=resolve_color(label),
    )


def normalize_box(box: BoundingBox, image_width: float, image_height: float) -> BoundingBox:
    """
    Convert a box from pixel coordinates to 0-1 coordinates.

    Raises:
        ValueError: If either image dimension is not positive
    """
    _check_image_size(image_width, image_height)
    return box.with_changes(
        x=box.x / image_width,
        y=box.y / image_height,
        width=box.width / image_width,
        height=box.height / image_height,
    )


def denormalize_box(box: BoundingBox, image_width: float, image_height: float) -> BoundingBox:
    """
    Convert a box from 0-1 coordinates to pixel coordinates.

    Raises:
        ValueError: If either image dimension is not positive
    """
    _check_image_size(image_width, image_height)
    return box.with_changes(
        x=box.x * image_width,
        y=box.y * image_height,
        width=box.width * image_width,
        height=box.height * image_height,
    )


def _check_image_size(image_width: float, image_height: float) -> None:
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"Invalid image size: {image_width}x{image_height}")


def box_contains(box: BoundingBox, x: float, y: float) -> bool:
    """Check if a point lies inside the box, edges included."""
    return box.x <= x <= box.right and box.y <= y <= box.bottom


def handle_position(box: BoundingBox, direction: str) -> Tuple[float, float]:
    """Get the center point of a resize handle."""
    if "w" in direction:
        hx = box.x
    elif "e" in direction:
        hx = box.right
    else:
        hx = box.x + box.width / 2

    if "n" in direction:
        hy = box.y
    elif "s" in direction:
        hy = box.bottom
    else:
        hy = box.y + box.height / 2

    return hx, hy


def hit_test_handle(box: BoundingBox, x: float, y: float, radius: float) -> Optional[str]:
    """
    Find the resize handle under a point.

    Args:
        box: Box whose handles are tested
        x: Pointer x in image pixels
        y: Pointer y in image pixels
        radius: Half the handle size

    Returns:
        Direction of the handle, or None if no handle is hit
    """
    for direction in RESIZE_DIRECTIONS:
        hx, hy = handle_position(box, direction)
        if abs(hx - x) <= radius and abs(hy - y) <= radius:
            return direction
    return None
