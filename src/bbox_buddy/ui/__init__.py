"""UI components for BBox Buddy."""

from .canvas_editor import CanvasEditor
from .file_dialogs import QtFileService
from .json_editor import JsonEditor
from .main_window import MainWindow
from .remote_images import RemoteImageLoader

__all__ = [
    "CanvasEditor",
    "QtFileService",
    "JsonEditor",
    "MainWindow",
    "RemoteImageLoader",
]
