"""Tests for box creation, drag and resize geometry."""

import pytest

from bbox_buddy.core.geometry import (
    DEFAULT_BOX_SIZE,
    MIN_BOX_SIZE,
    apply_drag,
    apply_resize,
    box_contains,
    create_box,
    denormalize_box,
    finalize_created_box,
    hit_test_handle,
    normalize_box,
)
from bbox_buddy.core.labels import LABEL_COLORS
from bbox_buddy.core.models import BoundingBox


def make_box(x=100, y=100, width=100, height=100, label="cat"):
    return BoundingBox(id="b1", x=x, y=y, width=width, height=height, label=label)


class TestCreateBox:
    """Tests for create_box."""

    def test_default_box(self):
        """Test creating a box with defaults."""
        box = create_box(15, 25)

        assert box.x == 15
        assert box.y == 25
        assert box.width == DEFAULT_BOX_SIZE
        assert box.height == DEFAULT_BOX_SIZE
        assert box.label == "unlabeled"
        assert box.color == LABEL_COLORS["unlabeled"]
        assert box.id

    def test_custom_label(self):
        """Test creating a box with a known label."""
        box = create_box(0, 0, "traffic signs")

        assert box.label == "traffic signs"
        assert box.color == "#0EA5E9"

    def test_ids_are_unique(self):
        """Test that every created box gets its own id."""
        ids = {create_box(0, 0).id for _ in range(50)}
        assert len(ids) == 50


class TestApplyDrag:
    """Tests for apply_drag."""

    def test_moves_origin(self):
        """Test that dragging moves the origin only."""
        box = make_box()
        moved = apply_drag(box, 12.5, -30)

        assert moved.x == 112.5
        assert moved.y == 70
        assert moved.width == box.width
        assert moved.height == box.height
        assert moved.id == box.id

    def test_no_clamping(self):
        """Test that boxes can be dragged outside the image."""
        moved = apply_drag(make_box(x=5, y=5), -500, -500)

        assert moved.x == -495
        assert moved.y == -495

    def test_input_unchanged(self):
        """Test that the original box is not modified."""
        box = make_box()
        apply_drag(box, 10, 10)

        assert box.x == 100
        assert box.y == 100


class TestApplyResize:
    """Tests for apply_resize."""

    def test_east(self):
        """Test resizing from the east edge."""
        resized = apply_resize(make_box(), "e", 30, 99)

        assert resized.width == 130
        assert resized.height == 100
        assert resized.x == 100

    def test_south(self):
        """Test resizing from the south edge."""
        resized = apply_resize(make_box(), "s", 99, -30)

        assert resized.height == 70
        assert resized.width == 100
        assert resized.y == 100

    def test_west_moves_origin(self):
        """Test that the west edge moves the origin with the width."""
        resized = apply_resize(make_box(), "w", -20, 0)

        assert resized.x == 80
        assert resized.width == 120
        assert resized.right == 200

    def test_north_moves_origin(self):
        """Test that the north edge moves the origin with the height."""
        resized = apply_resize(make_box(), "n", 0, 30)

        assert resized.y == 130
        assert resized.height == 70
        assert resized.bottom == 200

    def test_corner_combines_axes(self):
        """Test that a corner handle resizes both axes."""
        resized = apply_resize(make_box(), "ne", 10, 10)

        assert resized.width == 110
        assert resized.y == 110
        assert resized.height == 90
        assert resized.x == 100

    def test_southwest_corner(self):
        """Test the opposite corner."""
        resized = apply_resize(make_box(), "sw", 10, 10)

        assert resized.x == 110
        assert resized.width == 90
        assert resized.height == 110
        assert resized.y == 100

    @pytest.mark.parametrize("direction", ["n", "s", "e", "w", "ne", "nw", "se", "sw"])
    @pytest.mark.parametrize("delta", [-10000, 10000])
    def test_minimum_size(self, direction, delta):
        """Test that resizing never goes below the minimum size."""
        resized = apply_resize(make_box(), direction, delta, delta)

        assert resized.width >= MIN_BOX_SIZE
        assert resized.height >= MIN_BOX_SIZE

    def test_west_clamped_keeps_anchor(self):
        """Test that a clamped west resize at minimum width leaves x alone."""
        box = make_box(width=MIN_BOX_SIZE)
        resized = apply_resize(box, "w", 50, 0)

        assert resized.x == box.x
        assert resized.width == MIN_BOX_SIZE

    def test_north_clamped_keeps_anchor(self):
        """Test that a clamped north resize at minimum height leaves y alone."""
        box = make_box(height=MIN_BOX_SIZE)
        resized = apply_resize(box, "n", 0, 50)

        assert resized.y == box.y
        assert resized.height == MIN_BOX_SIZE

    def test_west_partial_clamp_moves_by_full_delta(self):
        """Test that a west resize reaching the minimum moves x by the full delta."""
        box = make_box(width=100)
        resized = apply_resize(box, "w", 90, 0)

        assert resized.width == MIN_BOX_SIZE
        assert resized.x == 190

    @pytest.mark.parametrize("direction", ["", "x", "north", "nq"])
    def test_invalid_direction(self, direction):
        """Test that unknown handle directions are rejected."""
        with pytest.raises(ValueError):
            apply_resize(make_box(), direction, 1, 1)


class TestFinalizeCreatedBox:
    """Tests for finalize_created_box."""

    def test_positive_drag(self):
        """Test drawing down and to the right."""
        box = finalize_created_box(10, 20, 30, 40)

        assert (box.x, box.y, box.width, box.height) == (10, 20, 30, 40)

    def test_negative_drag(self):
        """Test drawing up and to the left."""
        box = finalize_created_box(100, 100, -30, -40)

        assert (box.x, box.y, box.width, box.height) == (70, 60, 30, 40)

    @pytest.mark.parametrize("raw_width,raw_height", [
        (25, -15), (-25, 15), (0, 0), (-0.5, 3.25), (1e6, -1e6),
    ])
    def test_same_rectangle_non_negative(self, raw_width, raw_height):
        """Test that the result covers the dragged rectangle with non-negative extents."""
        origin_x, origin_y = 50, 60
        box = finalize_created_box(origin_x, origin_y, raw_width, raw_height)

        assert box.width >= 0
        assert box.height >= 0
        xs = sorted([origin_x, origin_x + raw_width])
        ys = sorted([origin_y, origin_y + raw_height])
        assert (box.x, box.right) == (xs[0], xs[1])
        assert (box.y, box.bottom) == (ys[0], ys[1])

    def test_label_and_color(self):
        """Test that the label color is resolved."""
        box = finalize_created_box(0, 0, 10, 10, "driving signs")

        assert box.label == "driving signs"
        assert box.color == "#F97316"


class TestNormalizedCoordinates:
    """Tests for normalize_box and denormalize_box."""

    def test_normalize(self):
        """Test converting pixels to 0-1 coordinates."""
        box = normalize_box(make_box(x=100, y=50, width=200, height=100), 1000, 500)

        assert box.x == 0.1
        assert box.y == 0.1
        assert box.width == 0.2
        assert box.height == 0.2

    def test_denormalize(self):
        """Test converting 0-1 coordinates to pixels."""
        box = denormalize_box(make_box(x=0.5, y=0.25, width=0.1, height=0.5), 1000, 400)

        assert box.x == 500
        assert box.y == 100
        assert box.width == 100
        assert box.height == 200

    def test_invalid_image_size(self):
        """Test that non-positive image sizes are rejected."""
        with pytest.raises(ValueError):
            normalize_box(make_box(), 0, 100)
        with pytest.raises(ValueError):
            denormalize_box(make_box(), 100, -1)


class TestHitTesting:
    """Tests for box_contains and hit_test_handle."""

    def test_box_contains(self):
        """Test point containment including edges."""
        box = make_box()

        assert box_contains(box, 150, 150)
        assert box_contains(box, 100, 200)
        assert not box_contains(box, 99, 150)
        assert not box_contains(box, 150, 201)

    def test_corner_handles(self):
        """Test hitting each corner handle."""
        box = make_box()

        assert hit_test_handle(box, 100, 100, 5) == "nw"
        assert hit_test_handle(box, 200, 100, 5) == "ne"
        assert hit_test_handle(box, 101, 199, 5) == "sw"
        assert hit_test_handle(box, 198, 202, 5) == "se"

    def test_edge_handles(self):
        """Test hitting the edge midpoint handles."""
        box = make_box()

        assert hit_test_handle(box, 150, 100, 5) == "n"
        assert hit_test_handle(box, 150, 200, 5) == "s"
        assert hit_test_handle(box, 200, 150, 5) == "e"
        assert hit_test_handle(box, 100, 150, 5) == "w"

    def test_no_handle(self):
        """Test a point away from all handles."""
        assert hit_test_handle(make_box(), 130, 130, 5) is None
