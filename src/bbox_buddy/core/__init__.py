"""Core business logic modules for BBox Buddy."""

from .models import BoundingBox, Dataset, ImageAnnotation, RawAnnotationItem
from .config import AppConfig, ConfigManager
from .converter import format_for_export, internal_to_raw, raw_to_internal
from .dataset_ops import replace_boxes_at
from .file_service import FileResult, FileService, LocalFileService
from .format_registry import SchemaRegistry
from .geometry import apply_drag, apply_resize, create_box, finalize_created_box
from .labels import LABEL_COLORS, list_known_labels, resolve_color

__all__ = [
    "BoundingBox",
    "Dataset",
    "ImageAnnotation",
    "RawAnnotationItem",
    "AppConfig",
    "ConfigManager",
    "format_for_export",
    "internal_to_raw",
    "raw_to_internal",
    "replace_boxes_at",
    "FileResult",
    "FileService",
    "LocalFileService",
    "SchemaRegistry",
    "apply_drag",
    "apply_resize",
    "create_box",
    "finalize_created_box",
    "LABEL_COLORS",
    "list_known_labels",
    "resolve_color",
]
