"""Main application window for BBox Buddy."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from PyQt6.QtCore import Qt, QMimeData
from PyQt6.QtGui import (
    QAction, QActionGroup, QKeySequence, QPixmap, QDragEnterEvent, QDropEvent
)
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QScrollArea, QLabel,
    QDockWidget, QToolBar, QListWidget, QPushButton, QComboBox, QMessageBox,
    QMenu
)

from ..core.config import ConfigManager, AppConfig
from ..core.dataset_ops import replace_boxes_at
from ..core.demo import demo_dataset
from ..core.errors import AnnotationDataError
from ..core.file_service import (
    FileService, OperationResult, OperationStatus, StaticPathFileService,
    load_dataset, resolve_image_path, save_dataset
)
from ..core.format_registry import SchemaRegistry
from ..core.labels import list_known_labels
from ..core.models import BoundingBox, Dataset
from .canvas_editor import CanvasEditor
from .file_dialogs import QtFileService
from .json_editor import JsonEditor
from .remote_images import RemoteImageLoader, is_remote_image

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """
    Main application window for BBox Buddy.

    Provides the complete UI for annotation:
    - Image list and navigation
    - Canvas for drawing, moving and resizing boxes
    - Label editing for the selected box
    - JSON view with import/export of the raw format
    """

    def __init__(
        self,
        file_service: Optional[FileService] = None,
        config_manager: Optional[ConfigManager] = None
    ) -> None:
        """
        Initialize the main window.

        Args:
            file_service: File access capability, Qt dialogs by default
            config_manager: Configuration manager, ``config.yaml`` by default
        """
        super().__init__()

        self.config_manager = config_manager or ConfigManager()
        self.file_service = file_service or QtFileService(self, self.config_manager)

        self.dataset: Optional[Dataset] = None
        self.current_index = 0
        self.dataset_dir: Optional[Path] = None
        self.remote_images = RemoteImageLoader(self)

        self._init_ui()
        self._apply_settings()
        self._update_recent_files_menu()
        self._update_actions()

    @property
    def config(self) -> AppConfig:
        """Get the current configuration."""
        return self.config_manager.config

    # === UI construction ===

    def _init_ui(self) -> None:
        """Initialize the user interface."""
        self.setWindowTitle("BBox Buddy")
        self.resize(1280, 800)
        self.setAcceptDrops(True)

        self.canvas = CanvasEditor()
        self.scroll_area = QScrollArea()
        self.scroll_area.setWidget(self.canvas)
        self.scroll_area.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setCentralWidget(self.scroll_area)

        self._create_dock_widgets()
        self._create_actions()
        self._create_toolbar()
        self._create_menus()
        self._setup_connections()

        self.statusBar().showMessage("Open a dataset or load the demo to start")

    def _create_dock_widgets(self) -> None:
        """Create the image list, label and JSON docks."""
        self.image_list = QListWidget()
        images_dock = QDockWidget("Images", self)
        images_dock.setObjectName("images_dock")
        images_dock.setWidget(self.image_list)
        self.addDockWidget(Qt.DockWidgetArea.LeftDockWidgetArea, images_dock)

        label_widget = QWidget()
        label_layout = QVBoxLayout(label_widget)
        label_layout.addWidget(QLabel("Selected box label:"))
        row = QHBoxLayout()
        self.label_combo = QComboBox()
        self.label_combo.setEditable(True)
        self.apply_label_button = QPushButton("Apply")
        row.addWidget(self.label_combo, 1)
        row.addWidget(self.apply_label_button)
        label_layout.addLayout(row)
        label_layout.addStretch()
        label_dock = QDockWidget("Label", self)
        label_dock.setObjectName("label_dock")
        label_dock.setWidget(label_widget)
        self.addDockWidget(Qt.DockWidgetArea.LeftDockWidgetArea, label_dock)

        self.json_editor = JsonEditor()
        json_dock = QDockWidget("JSON Editor", self)
        json_dock.setObjectName("json_dock")
        json_dock.setWidget(self.json_editor)
        self.addDockWidget(Qt.DockWidgetArea.RightDockWidgetArea, json_dock)

    def _create_actions(self) -> None:
        """Create the window actions."""
        self.open_action = QAction("&Open...", self)
        self.open_action.setShortcut(QKeySequence.StandardKey.Open)
        self.save_action = QAction("&Save...", self)
        self.save_action.setShortcut(QKeySequence.StandardKey.Save)
        self.demo_action = QAction("Load &Demo", self)
        self.quit_action = QAction("&Quit", self)
        self.quit_action.setShortcut(QKeySequence.StandardKey.Quit)

        self.select_action = QAction("Select", self)
        self.select_action.setCheckable(True)
        self.select_action.setChecked(True)
        self.select_action.setShortcut("V")
        self.create_action = QAction("Add Box", self)
        self.create_action.setCheckable(True)
        self.create_action.setShortcut("B")
        mode_group = QActionGroup(self)
        mode_group.addAction(self.select_action)
        mode_group.addAction(self.create_action)

        self.delete_action = QAction("Delete", self)
        self.prev_action = QAction("Previous", self)
        self.prev_action.setShortcut("A")
        self.next_action = QAction("Next", self)
        self.next_action.setShortcut("D")

    def _create_toolbar(self) -> None:
        """Create the main toolbar."""
        toolbar = QToolBar("Tools", self)
        toolbar.setObjectName("tools_toolbar")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        toolbar.addAction(self.open_action)
        toolbar.addAction(self.save_action)
        toolbar.addSeparator()
        toolbar.addAction(self.select_action)
        toolbar.addAction(self.create_action)
        toolbar.addAction(self.delete_action)
        toolbar.addSeparator()
        toolbar.addAction(self.prev_action)
        toolbar.addAction(self.next_action)

    def _create_menus(self) -> None:
        """Create the menu bar."""
        file_menu = self.menuBar().addMenu("&File")
        file_menu.addAction(self.open_action)
        self.recent_menu = QMenu("Open &Recent", self)
        file_menu.addMenu(self.recent_menu)
        file_menu.addAction(self.save_action)
        file_menu.addSeparator()
        file_menu.addAction(self.demo_action)
        file_menu.addSeparator()
        file_menu.addAction(self.quit_action)

        help_menu = self.menuBar().addMenu("&Help")
        about_action = QAction("&About", self)
        about_action.triggered.connect(self._show_about)
        help_menu.addAction(about_action)

    def _setup_connections(self) -> None:
        """Connect signals to handlers."""
        self.open_action.triggered.connect(self._open_dataset)
        self.save_action.triggered.connect(self._save_dataset)
        self.demo_action.triggered.connect(self._load_demo)
        self.quit_action.triggered.connect(self.close)
        self.select_action.triggered.connect(lambda: self.canvas.set_mode("select"))
        self.create_action.triggered.connect(lambda: self.canvas.set_mode("create"))
        self.delete_action.triggered.connect(self._delete_selected_box)
        self.prev_action.triggered.connect(lambda: self._step_image(-1))
        self.next_action.triggered.connect(lambda: self._step_image(1))

        self.image_list.currentRowChanged.connect(self._select_image)

        self.canvas.boxes_changed.connect(self._on_boxes_changed)
        self.canvas.edit_finished.connect(self._on_edit_finished)
        self.canvas.selection_changed.connect(self._on_selection_changed)
        self.canvas.mode_changed.connect(self._on_mode_changed)

        self.apply_label_button.clicked.connect(self._apply_label)
        self.label_combo.lineEdit().returnPressed.connect(self._apply_label)

        self.json_editor.update_requested.connect(self._update_dataset_from_json)
        self.json_editor.save_requested.connect(self._save_dataset)

        self.remote_images.image_loaded.connect(self._on_remote_image_loaded)
        self.remote_images.image_failed.connect(
            lambda url: self._show_status_message(f"Could not download image: {url}")
        )

    def _apply_settings(self) -> None:
        """Apply configuration to the canvas."""
        self.canvas.line_thickness = self.config.line_thickness
        self.canvas.font_size = self.config.font_size
        self.canvas.handle_size = self.config.handle_size
        self.canvas.default_label = self.config.default_label

    # === Dataset handling ===

    def _set_dataset(self, dataset: Dataset, dataset_dir: Optional[Path] = None) -> None:
        """Replace the working dataset and refresh every view."""
        self.dataset = dataset
        self.dataset_dir = dataset_dir
        self.current_index = min(self.current_index, max(len(dataset.images) - 1, 0))

        self.image_list.blockSignals(True)
        self.image_list.clear()
        for image in dataset.images:
            self.image_list.addItem(self._image_item_text(image.filename, image.box_count))
        if dataset.images:
            self.image_list.setCurrentRow(self.current_index)
        self.image_list.blockSignals(False)

        self._show_current_image()
        self.json_editor.show_dataset(dataset)
        self._update_label_suggestions()
        self._update_actions()

    @staticmethod
    def _image_item_text(filename: str, box_count: int) -> str:
        return f"{Path(filename).name or filename} ({box_count})"

    def _show_current_image(self) -> None:
        """Load the current image and its boxes into the canvas."""
        if self.dataset is None or not self.dataset.images:
            self.canvas.set_image(None)
            self.canvas.set_boxes([])
            return

        image = self.dataset.images[self.current_index]
        if is_remote_image(image.filename):
            # Shows the placeholder until the download finishes
            pixmap = self.remote_images.cached(image.filename)
            if pixmap is None:
                self.remote_images.request(image.filename)
        else:
            image_path = resolve_image_path(self.file_service, image.filename, self.dataset_dir)
            pixmap = QPixmap(image_path)
            if pixmap.isNull():
                logger.warning(f"Could not display image: {image.filename}")
        self.canvas.set_image(pixmap, image.filename)
        self.canvas.set_boxes(image.bounding_boxes)
        self.setWindowTitle(f"BBox Buddy - {image.filename}")

    def _on_remote_image_loaded(self, url: str, pixmap: QPixmap) -> None:
        """Show a downloaded image if it is still the current one."""
        if self.dataset is None or not self.dataset.images:
            return
        if self.dataset.images[self.current_index].filename == url:
            self.canvas.set_image(pixmap, url)

    def _select_image(self, row: int) -> None:
        if self.dataset is None or not 0 <= row < len(self.dataset.images):
            return
        self.current_index = row
        self._show_current_image()
        self._update_actions()

    def _step_image(self, step: int) -> None:
        if self.dataset is None or not self.dataset.images:
            return
        row = max(0, min(self.current_index + step, len(self.dataset.images) - 1))
        self.image_list.setCurrentRow(row)

    def _on_boxes_changed(self, boxes: List[BoundingBox]) -> None:
        """Splice the canvas boxes into the dataset."""
        if self.dataset is None or not self.dataset.images:
            return
        self.dataset = replace_boxes_at(self.dataset, self.current_index, boxes)
        item = self.image_list.item(self.current_index)
        if item is not None:
            image = self.dataset.images[self.current_index]
            item.setText(self._image_item_text(image.filename, image.box_count))

    def _on_edit_finished(self) -> None:
        self.json_editor.show_dataset(self.dataset)
        self._update_label_suggestions()

    def _on_selection_changed(self, box: Optional[BoundingBox]) -> None:
        has_box = box is not None
        self.label_combo.setEnabled(has_box)
        self.apply_label_button.setEnabled(has_box)
        self.delete_action.setEnabled(has_box)
        if has_box:
            self.label_combo.setCurrentText(box.label)

    def _on_mode_changed(self, mode: str) -> None:
        self.select_action.setChecked(mode == "select")
        self.create_action.setChecked(mode == "create")

    def _apply_label(self) -> None:
        label = self.label_combo.currentText().strip()
        if self.canvas.set_selected_label(label):
            self._show_status_message(f"Label set to '{label}'")

    def _delete_selected_box(self) -> None:
        if self.canvas.delete_selected():
            self._show_status_message("Bounding box deleted")

    def _update_label_suggestions(self) -> None:
        current = self.label_combo.currentText()
        self.label_combo.blockSignals(True)
        self.label_combo.clear()
        self.label_combo.addItems(list_known_labels(self.dataset))
        self.label_combo.setCurrentText(current)
        self.label_combo.blockSignals(False)

    def _update_actions(self) -> None:
        has_images = self.dataset is not None and bool(self.dataset.images)
        self.save_action.setEnabled(self.dataset is not None)
        self.json_editor.save_button.setEnabled(self.dataset is not None)
        self.select_action.setEnabled(has_images)
        self.create_action.setEnabled(has_images)
        self.prev_action.setEnabled(has_images and self.current_index > 0)
        self.next_action.setEnabled(
            has_images and self.current_index < len(self.dataset.images) - 1
        )
        self._on_selection_changed(self.canvas.selected_box)

    # === File operations ===

    def _open_dataset(self) -> None:
        self._handle_load_result(load_dataset(self.file_service))

    def _open_path(self, path: str) -> None:
        """Load a dataset from a known path, e.g. a recent or dropped file."""
        self._handle_load_result(load_dataset(StaticPathFileService(open_path=path)))

    @staticmethod
    def _dropped_json_path(mime_data: QMimeData) -> Optional[str]:
        """Get the first local .json file among dragged URLs."""
        if not mime_data.hasUrls():
            return None
        for url in mime_data.urls():
            if url.isLocalFile() and url.toLocalFile().lower().endswith(".json"):
                return url.toLocalFile()
        return None

    def dragEnterEvent(self, event: QDragEnterEvent) -> None:
        """Accept drags carrying a dataset file."""
        if self._dropped_json_path(event.mimeData()):
            event.acceptProposedAction()
        else:
            event.ignore()

    def dropEvent(self, event: QDropEvent) -> None:
        """Load a dropped dataset file."""
        path = self._dropped_json_path(event.mimeData())
        if path is None:
            event.ignore()
            return
        event.acceptProposedAction()
        self._open_path(path)

    def _handle_load_result(self, result: OperationResult) -> None:
        """Apply a load outcome; the current dataset is kept on any failure."""
        if result.status == OperationStatus.OK:
            self.current_index = 0
            dataset_dir = Path(result.path).parent if result.path else None
            self._set_dataset(result.dataset, dataset_dir)
            if result.path:
                self.config_manager.add_recent_file(result.path)
                self._update_recent_files_menu()
            self._show_status_message(
                f"Loaded {len(result.dataset.images)} images ({result.schema} format)"
            )
        elif result.status == OperationStatus.CANCELED:
            self._show_status_message("Open canceled")
        elif result.status == OperationStatus.INVALID:
            QMessageBox.warning(self, "Invalid JSON file", result.message)
        else:
            QMessageBox.warning(self, "Error", f"Failed to load dataset: {result.message}")

    def _save_dataset(self) -> None:
        if self.dataset is None:
            return

        result = save_dataset(self.file_service, self.dataset)
        if result.status == OperationStatus.OK:
            if result.path:
                self.config_manager.add_recent_file(result.path)
                self._update_recent_files_menu()
            self._show_status_message(f"Dataset saved to {result.path}")
        elif result.status == OperationStatus.CANCELED:
            self._show_status_message("Save canceled")
        else:
            QMessageBox.warning(self, "Error", f"Failed to save dataset to file: {result.message}")

    def _load_demo(self) -> None:
        self.current_index = 0
        self._set_dataset(demo_dataset())
        self._show_status_message("Demo dataset loaded")

    def _update_dataset_from_json(self, text: str) -> None:
        """Replace the dataset with the JSON editor's contents."""
        try:
            decoded = SchemaRegistry.decode(text)
        except AnnotationDataError as e:
            logger.error(f"Invalid JSON in editor: {e}")
            QMessageBox.warning(self, "Invalid JSON format", str(e))
            return

        self._set_dataset(decoded.dataset, self.dataset_dir)
        self._show_status_message("Dataset updated successfully")

    # === Recent files ===

    def _update_recent_files_menu(self) -> None:
        self.recent_menu.clear()
        recent = self.config.recent_files
        self.recent_menu.setEnabled(bool(recent))
        for path in recent:
            action = self.recent_menu.addAction(path)
            action.triggered.connect(lambda checked=False, p=path: self._open_path(p))

    # === Misc ===

    def _show_status_message(self, message: str) -> None:
        logger.info(message)
        self.statusBar().showMessage(message, 5000)

    def _show_about(self) -> None:
        QMessageBox.about(
            self,
            "About BBox Buddy",
            "BBox Buddy\n\nA minimalist tool for drawing, editing and exporting "
            "bounding box annotations."
        )

    def closeEvent(self, event) -> None:
        """Persist configuration on close."""
        self.config_manager.save()
        super().closeEvent(event)
