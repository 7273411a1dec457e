"""Pytest configuration and fixtures."""

import os
import pytest
import sys
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Qt widgets must not need a display during tests
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session")
def qapp():
    """Create a QApplication for tests that need it."""
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])

    yield app


@pytest.fixture
def temp_dir(tmp_path):
    """Provide a temporary directory for tests."""
    return tmp_path


@pytest.fixture
def sample_raw_dataset():
    """Raw corner-format dataset with two images."""
    return [
        {
            "file": "a/b/img.png",
            "annotation": {
                "bboxes": [[10, 10, 50, 60], [100, 120, 180, 200]],
                "labels": ["cat", "road signs"],
            },
        },
        {
            "file": "other.jpg",
            "annotation": {"bboxes": [], "labels": []},
        },
    ]


@pytest.fixture
def sample_dataset_file(tmp_path, sample_raw_dataset):
    """Write the sample raw dataset to a JSON file."""
    import json

    json_path = tmp_path / "annotations.json"
    json_path.write_text(json.dumps(sample_raw_dataset, indent=2), encoding="utf-8")
    return json_path
