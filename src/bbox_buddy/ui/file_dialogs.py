"""Qt file dialogs backing the file service."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtWidgets import QFileDialog, QWidget

from ..core.config import ConfigManager
from ..core.file_service import LocalFileService

logger = logging.getLogger(__name__)

JSON_FILTER = "JSON Files (*.json)"


class QtFileService(LocalFileService):
    """
    File service that asks for paths with native Qt file dialogs.

    The directory of the last chosen file is remembered in the
    configuration and used as the starting directory next time.
    """

    def __init__(
        self,
        parent: Optional[QWidget] = None,
        config_manager: Optional[ConfigManager] = None
    ) -> None:
        """
        Initialize the service.

        Args:
            parent: Parent widget for the dialogs
            config_manager: Configuration holding the last directory
        """
        self._parent = parent
        self._config_manager = config_manager

    def _start_directory(self) -> str:
        if self._config_manager is None:
            return ""
        return self._config_manager.config.last_directory

    def _remember_directory(self, file_path: str) -> None:
        if self._config_manager is not None:
            self._config_manager.update(last_directory=str(Path(file_path).parent))

    def choose_open_path(self) -> Optional[str]:
        file_path, _ = QFileDialog.getOpenFileName(
            self._parent, "Open Annotations", self._start_directory(), JSON_FILTER
        )
        if not file_path:
            return None
        self._remember_directory(file_path)
        return file_path

    def choose_save_path(self) -> Optional[str]:
        file_path, _ = QFileDialog.getSaveFileName(
            self._parent, "Save Annotations", self._start_directory(), JSON_FILTER
        )
        if not file_path:
            return None
        if not file_path.lower().endswith(".json"):
            file_path += ".json"
        self._remember_directory(file_path)
        return file_path
