"""Canvas widget for drawing and editing bounding boxes on an image."""

from __future__ import annotations

import logging
from typing import List, Optional

from PyQt6.QtCore import Qt, QPointF, QRectF, QSize, pyqtSignal
from PyQt6.QtGui import (
    QPainter, QColor, QPen, QFont, QFontMetrics, QPixmap, QMouseEvent, QKeyEvent
)
from PyQt6.QtWidgets import QWidget

from ..core.dataset_ops import add_box, find_box, relabel_box, remove_box, update_box
from ..core.geometry import (
    RESIZE_DIRECTIONS, apply_drag, apply_resize, box_contains, create_box,
    finalize_created_box, handle_position, hit_test_handle
)
from ..core.labels import resolve_color
from ..core.models import UNLABELED, BoundingBox

logger = logging.getLogger(__name__)

# Cursor shown over each resize handle
_HANDLE_CURSORS = {
    "n": Qt.CursorShape.SizeVerCursor,
    "s": Qt.CursorShape.SizeVerCursor,
    "e": Qt.CursorShape.SizeHorCursor,
    "w": Qt.CursorShape.SizeHorCursor,
    "nw": Qt.CursorShape.SizeFDiagCursor,
    "se": Qt.CursorShape.SizeFDiagCursor,
    "ne": Qt.CursorShape.SizeBDiagCursor,
    "sw": Qt.CursorShape.SizeBDiagCursor,
}


class CanvasEditor(QWidget):
    """
    Image canvas with interactive bounding boxes.

    Widget coordinates are image pixel coordinates. In "create" mode a
    click drops a default-sized box and a drag draws one; in "select"
    mode boxes are selected, dragged and resized by their handles.
    Every edit emits the full new box list.
    """

    # Signals
    boxes_changed = pyqtSignal(list)
    edit_finished = pyqtSignal()
    selection_changed = pyqtSignal(object)  # Emits BoundingBox or None
    mode_changed = pyqtSignal(str)

    # Constants
    CLICK_TOLERANCE = 3
    PLACEHOLDER_SIZE = QSize(800, 600)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        """Initialize the canvas."""
        super().__init__(parent)

        # Visual settings
        self.line_thickness = 2
        self.font_size = 10
        self.handle_size = 8
        self.default_label = UNLABELED

        self._pixmap: Optional[QPixmap] = None
        self._image_name = ""
        self._boxes: List[BoundingBox] = []
        self._selected_id: Optional[str] = None
        self._mode = "select"

        self._init_interaction()

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setFixedSize(self.PLACEHOLDER_SIZE)

    def _init_interaction(self) -> None:
        """Reset pointer interaction state."""
        self._dragging = False
        self._resize_direction: Optional[str] = None
        self._last_pos: Optional[QPointF] = None
        self._create_origin: Optional[QPointF] = None
        self._create_current: Optional[QPointF] = None
        self._edited = False

    # === Public API ===

    @property
    def boxes(self) -> List[BoundingBox]:
        """Current box list."""
        return list(self._boxes)

    @property
    def mode(self) -> str:
        """Current editor mode, "select" or "create"."""
        return self._mode

    @property
    def selected_box(self) -> Optional[BoundingBox]:
        """The selected box, if any."""
        if self._selected_id is None:
            return None
        return find_box(self._boxes, self._selected_id)

    def set_image(self, pixmap: Optional[QPixmap], name: str = "") -> None:
        """
        Show a new image.

        Args:
            pixmap: Image to show, or None/null to show a placeholder
            name: Image name for the placeholder text
        """
        self._pixmap = pixmap if pixmap is not None and not pixmap.isNull() else None
        self._image_name = name
        self.setFixedSize(self._pixmap.size() if self._pixmap else self.PLACEHOLDER_SIZE)
        self.update()

    def set_boxes(self, boxes: List[BoundingBox]) -> None:
        """Replace the box list without emitting boxes_changed."""
        self._boxes = list(boxes)
        if self._selected_id is not None and find_box(self._boxes, self._selected_id) is None:
            self._set_selected(None)
        self.update()

    def set_mode(self, mode: str) -> None:
        """Switch between "select" and "create" mode."""
        if mode not in ("select", "create"):
            raise ValueError(f"Unknown editor mode: {mode}")
        if mode != self._mode:
            self._mode = mode
            self.setCursor(
                Qt.CursorShape.CrossCursor if mode == "create" else Qt.CursorShape.ArrowCursor
            )
            self.mode_changed.emit(mode)

    def delete_selected(self) -> bool:
        """
        Delete the selected box.

        Returns:
            True if a box was deleted
        """
        if self._selected_id is None:
            return False
        self._commit(remove_box(self._boxes, self._selected_id))
        self._edited = False
        self._set_selected(None)
        self.edit_finished.emit()
        return True

    def set_selected_label(self, label: str) -> bool:
        """
        Change the label of the selected box.

        Returns:
            True if a box was relabeled
        """
        box = self.selected_box
        if box is None or not label or label == box.label:
            return False
        self._commit(relabel_box(self._boxes, box.id, label))
        self._edited = False
        self.selection_changed.emit(self.selected_box)
        self.edit_finished.emit()
        return True

    # === Internal helpers ===

    def _set_selected(self, box_id: Optional[str]) -> None:
        if box_id != self._selected_id:
            self._selected_id = box_id
            self.selection_changed.emit(self.selected_box)

    def _commit(self, boxes: List[BoundingBox]) -> None:
        self._boxes = boxes
        self._edited = True
        self.boxes_changed.emit(list(boxes))
        self.update()

    def _box_at(self, pos: QPointF) -> Optional[BoundingBox]:
        """Topmost box containing a point."""
        for box in reversed(self._boxes):
            if box_contains(box, pos.x(), pos.y()):
                return box
        return None

    def _handle_at(self, pos: QPointF) -> Optional[str]:
        box = self.selected_box
        if box is None:
            return None
        return hit_test_handle(box, pos.x(), pos.y(), self.handle_size / 2 + 2)

    # === Mouse and keyboard ===

    def mousePressEvent(self, event: QMouseEvent) -> None:
        """Start creating, dragging or resizing a box."""
        if event.button() != Qt.MouseButton.LeftButton:
            return

        self.setFocus()
        pos = event.position()
        self._last_pos = pos

        if self._mode == "create":
            self._create_origin = pos
            self._create_current = pos
            return

        direction = self._handle_at(pos)
        if direction:
            self._resize_direction = direction
            return

        box = self._box_at(pos)
        self._set_selected(box.id if box else None)
        self._dragging = box is not None
        self.update()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        """Apply the pointer delta to the active interaction."""
        pos = event.position()

        if self._create_origin is not None:
            self._create_current = pos
            self.update()
            return

        box = self.selected_box
        if self._last_pos is not None and box is not None and (self._dragging or self._resize_direction):
            delta_x = pos.x() - self._last_pos.x()
            delta_y = pos.y() - self._last_pos.y()
            if self._dragging:
                updated = apply_drag(box, delta_x, delta_y)
            else:
                updated = apply_resize(box, self._resize_direction, delta_x, delta_y)
            self._commit(update_box(self._boxes, updated))
            self._last_pos = pos
            return

        direction = self._handle_at(pos) if self._mode == "select" else None
        if direction:
            self.setCursor(_HANDLE_CURSORS[direction])
        elif self._mode == "select":
            self.setCursor(Qt.CursorShape.ArrowCursor)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        """Finish the active interaction."""
        if event.button() != Qt.MouseButton.LeftButton:
            return

        if self._create_origin is not None:
            self._finish_create(event.position())

        edited = self._edited
        self._init_interaction()
        if edited:
            self.edit_finished.emit()
        self.update()

    def _finish_create(self, pos: QPointF) -> None:
        """Add the box drawn from the create origin to ``pos``."""
        origin = self._create_origin
        raw_width = pos.x() - origin.x()
        raw_height = pos.y() - origin.y()

        if abs(raw_width) < self.CLICK_TOLERANCE and abs(raw_height) < self.CLICK_TOLERANCE:
            box = create_box(origin.x(), origin.y(), self.default_label)
        else:
            box = finalize_created_box(
                origin.x(), origin.y(), raw_width, raw_height, self.default_label
            )

        self._commit(add_box(self._boxes, box))
        self._set_selected(box.id)
        self.set_mode("select")
        logger.debug(f"Created box {box.id} at ({box.x}, {box.y})")

    def keyPressEvent(self, event: QKeyEvent) -> None:
        """Delete the selected box, or leave create mode on Escape."""
        if event.key() in (Qt.Key.Key_Delete, Qt.Key.Key_Backspace):
            self.delete_selected()
        elif event.key() == Qt.Key.Key_Escape:
            self.set_mode("select")
        else:
            super().keyPressEvent(event)

    # === Painting ===

    def paintEvent(self, event) -> None:
        """Draw the image, the boxes and any box being created."""
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        if self._pixmap is not None:
            painter.drawPixmap(0, 0, self._pixmap)
        else:
            self._draw_placeholder(painter)

        for box in self._boxes:
            self._draw_box(painter, box, box.id == self._selected_id)

        if self._create_origin is not None and self._create_current is not None:
            color = QColor(resolve_color(self.default_label))
            painter.setPen(QPen(color, self.line_thickness, Qt.PenStyle.DashLine))
            painter.setBrush(QColor(color.red(), color.green(), color.blue(), 40))
            painter.drawRect(QRectF(self._create_origin, self._create_current).normalized())

        painter.end()

    def _draw_placeholder(self, painter: QPainter) -> None:
        painter.fillRect(self.rect(), QColor("#F1F1F1"))
        painter.setPen(QColor("#8E9196"))
        painter.drawText(
            self.rect(),
            Qt.AlignmentFlag.AlignCenter | Qt.TextFlag.TextWordWrap,
            f"Image not available\n{self._image_name}"
        )

    def _draw_box(self, painter: QPainter, box: BoundingBox, selected: bool) -> None:
        """Draw a single box with its label and, if selected, its handles."""
        color = QColor(box.color or resolve_color(box.label))
        rect = QRectF(box.x, box.y, box.width, box.height).normalized()

        painter.setPen(QPen(color, self.line_thickness + (1 if selected else 0)))
        painter.setBrush(QColor(color.red(), color.green(), color.blue(), 64 if selected else 32))
        painter.drawRect(rect)

        self._draw_label(painter, box.label, rect.topLeft(), color)

        if selected:
            painter.setPen(QPen(color, 1))
            painter.setBrush(QColor("#FFFFFF"))
            half = self.handle_size / 2
            for direction in RESIZE_DIRECTIONS:
                hx, hy = handle_position(box, direction)
                painter.drawRect(QRectF(hx - half, hy - half, self.handle_size, self.handle_size))

    def _draw_label(self, painter: QPainter, label: str, point: QPointF, color: QColor) -> None:
        """Draw a label with background above the given point."""
        font = QFont("Arial", self.font_size)
        font_metrics = QFontMetrics(font)
        padding = 3
        background_rect = QRectF(
            point.x(),
            point.y() - font_metrics.height() - 2 * padding,
            font_metrics.horizontalAdvance(label) + 2 * padding,
            font_metrics.height() + 2 * padding
        )

        brightness = (color.red() * 299 + color.green() * 587 + color.blue() * 114) / 1000
        text_color = Qt.GlobalColor.black if brightness > 128 else Qt.GlobalColor.white

        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(color)
        painter.drawRect(background_rect)

        painter.setFont(font)
        painter.setPen(text_color)
        painter.drawText(background_rect, Qt.AlignmentFlag.AlignCenter, label)
