"""Editable JSON view of the dataset."""

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import QHBoxLayout, QPlainTextEdit, QPushButton, QVBoxLayout, QWidget

from ..core.converter import format_for_export, internal_to_raw
from ..core.models import Dataset


class JsonEditor(QWidget):
    """
    Text editor showing the dataset in the raw export format.

    Edits are only applied when the user presses "Update Dataset",
    which emits the text for the main window to decode.
    """

    update_requested = pyqtSignal(str)
    save_requested = pyqtSignal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)

        self.text_edit = QPlainTextEdit()
        font = QFont("Monospace")
        font.setStyleHint(QFont.StyleHint.TypeWriter)
        self.text_edit.setFont(font)
        layout.addWidget(self.text_edit)

        buttons = QHBoxLayout()
        self.update_button = QPushButton("Update Dataset")
        self.update_button.clicked.connect(
            lambda: self.update_requested.emit(self.text_edit.toPlainText())
        )
        self.save_button = QPushButton("Save to File")
        self.save_button.clicked.connect(self.save_requested.emit)
        buttons.addWidget(self.update_button)
        buttons.addStretch()
        buttons.addWidget(self.save_button)
        layout.addLayout(buttons)

    def show_dataset(self, dataset: Optional[Dataset]) -> None:
        """Replace the editor text with the dataset's export JSON."""
        if dataset is None:
            self.text_edit.clear()
            return
        self.text_edit.setPlainText(format_for_export(internal_to_raw(dataset)))
