"""Tests for data models."""

import dataclasses

import pytest

from bbox_buddy.core.demo import demo_dataset
from bbox_buddy.core.models import (
    UNLABELED,
    BoundingBox,
    Dataset,
    ImageAnnotation,
    RawAnnotationItem,
    generate_unique_id,
)


class TestBoundingBox:
    """Tests for BoundingBox."""

    def test_create_box(self):
        """Test creating a bounding box."""
        box = BoundingBox(id="b1", x=10, y=20, width=30, height=40)

        assert box.label == UNLABELED
        assert box.color is None
        assert box.right == 40
        assert box.bottom == 60

    def test_immutable(self):
        """Test that boxes cannot be mutated in place."""
        box = BoundingBox(id="b1", x=0, y=0, width=1, height=1)

        with pytest.raises(dataclasses.FrozenInstanceError):
            box.x = 5

    def test_with_changes(self):
        """Test copying with replaced fields."""
        box = BoundingBox(id="b1", x=0, y=0, width=1, height=1, label="cat")

        moved = box.with_changes(x=5, y=6)

        assert (moved.x, moved.y) == (5, 6)
        assert moved.id == "b1"
        assert moved.label == "cat"
        assert box.x == 0

    def test_to_dict(self):
        """Test converting to dictionary."""
        box = BoundingBox(id="b1", x=1, y=2, width=3, height=4, label="cat", color="#FFFFFF")

        assert box.to_dict() == {
            "id": "b1", "x": 1, "y": 2, "width": 3, "height": 4,
            "label": "cat", "color": "#FFFFFF",
        }

    def test_to_dict_without_color(self):
        """Test that an unset color is omitted."""
        assert "color" not in BoundingBox(id="b1", x=0, y=0, width=1, height=1).to_dict()

    def test_from_dict(self):
        """Test creating from dictionary."""
        box = BoundingBox.from_dict({"id": "b1", "x": 1, "y": 2, "width": 3, "height": 4, "label": "dog"})

        assert box == BoundingBox(id="b1", x=1, y=2, width=3, height=4, label="dog")

    def test_from_dict_generates_id(self):
        """Test that missing ids are generated."""
        first = BoundingBox.from_dict({"x": 1, "y": 2, "width": 3, "height": 4})
        second = BoundingBox.from_dict({"x": 1, "y": 2, "width": 3, "height": 4})

        assert first.id
        assert first.id != second.id
        assert first.label == UNLABELED

    def test_unique_ids(self):
        """Test that generated ids do not repeat."""
        assert len({generate_unique_id() for _ in range(1000)}) == 1000


class TestImageAnnotation:
    """Tests for ImageAnnotation."""

    def test_box_count(self):
        """Test counting boxes."""
        image = ImageAnnotation("img.png", [
            BoundingBox(id="a", x=0, y=0, width=1, height=1),
            BoundingBox(id="b", x=0, y=0, width=1, height=1),
        ])
        assert image.box_count == 2

    def test_empty(self):
        """Test an image without boxes."""
        image = ImageAnnotation("img.png")

        assert image.bounding_boxes == []
        assert image.source_file is None

    def test_dict_round_trip(self):
        """Test converting to a dictionary and back."""
        image = ImageAnnotation(
            "img.png",
            [BoundingBox(id="a", x=1, y=2, width=3, height=4, label="cat", color="#000000")],
            source_file="dir/img.png",
        )

        data = image.to_dict()

        assert data["boundingBoxes"][0]["id"] == "a"
        assert data["sourceFile"] == "dir/img.png"
        assert ImageAnnotation.from_dict(data) == image

    def test_to_dict_without_source(self):
        """Test that an unset source path is omitted."""
        assert "sourceFile" not in ImageAnnotation("img.png").to_dict()


class TestDataset:
    """Tests for Dataset."""

    def test_counts(self):
        """Test image and box counts."""
        dataset = demo_dataset()

        assert len(dataset) == 3
        assert dataset.box_count == 4

    def test_labels(self):
        """Test that labels are deduplicated in first-seen order."""
        assert demo_dataset().labels() == ["cat", "dog", "ball"]

    def test_empty(self):
        """Test an empty dataset."""
        dataset = Dataset()

        assert len(dataset) == 0
        assert dataset.labels() == []
        assert dataset.to_dict() == {"images": []}

    def test_dict_round_trip(self):
        """Test converting to a dictionary and back."""
        dataset = demo_dataset()
        assert Dataset.from_dict(dataset.to_dict()) == dataset


class TestRawAnnotationItem:
    """Tests for RawAnnotationItem."""

    def test_to_dict(self):
        """Test converting to the corner format."""
        item = RawAnnotationItem("a/img.png", [[1, 2, 3, 4]], ["cat"])

        assert item.to_dict() == {
            "file": "a/img.png",
            "annotation": {"bboxes": [[1, 2, 3, 4]], "labels": ["cat"]},
        }

    def test_from_dict(self):
        """Test parsing the corner format."""
        item = RawAnnotationItem.from_dict({
            "file": "img.png",
            "annotation": {"bboxes": [[1, 2, 3, 4]], "labels": ["cat"]},
        })

        assert item.file == "img.png"
        assert item.bboxes == [[1, 2, 3, 4]]
        assert item.labels == ["cat"]

    def test_from_dict_missing_annotation(self):
        """Test that a missing annotation object yields no boxes."""
        item = RawAnnotationItem.from_dict({"file": "img.png"})

        assert item.bboxes == []
        assert item.labels == []


class TestDemoDataset:
    """Tests for the bundled demo dataset."""

    def test_fresh_copy(self):
        """Test that each call returns an independent dataset."""
        first = demo_dataset()
        second = demo_dataset()

        assert first == second
        assert first.images is not second.images

    def test_colors_set(self):
        """Test that every demo box carries a color."""
        for image in demo_dataset().images:
            for box in image.bounding_boxes:
                assert box.color
