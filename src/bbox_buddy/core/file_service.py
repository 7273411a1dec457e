"""File access capability and the dataset load/save workflows built on it."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .converter import format_for_export, internal_to_raw
from .errors import AnnotationDataError
from .format_registry import SchemaRegistry
from .models import Dataset

logger = logging.getLogger(__name__)

OPERATION_CANCELED = "Operation canceled"
IMAGE_NOT_FOUND = "Image not found"


@dataclass(frozen=True)
class FileResult:
    """Response to a single file service request."""

    success: bool
    path: Optional[str] = None
    data: Optional[str] = None
    error: Optional[str] = None

    @property
    def canceled(self) -> bool:
        """True if the user closed the dialog without choosing a file."""
        return not self.success and self.error == OPERATION_CANCELED

    @classmethod
    def cancel(cls) -> FileResult:
        """Result for a dialog closed without a selection."""
        return cls(success=False, error=OPERATION_CANCELED)

    @classmethod
    def failure(cls, error: str) -> FileResult:
        """Result for a failed request."""
        return cls(success=False, error=error)


class FileService(ABC):
    """
    Host capability for file dialogs and image lookups.

    Passed explicitly to whatever needs file access, so tests can
    substitute a double.
    """

    @abstractmethod
    def open_file(self) -> FileResult:
        """
        Let the user pick a JSON file and read it.

        Returns:
            Success with ``path`` and ``data``, or failure with ``error``
            (``"Operation canceled"`` when the user cancels)
        """
        pass

    @abstractmethod
    def save_file(self, data: str) -> FileResult:
        """
        Let the user pick a destination and write ``data`` there.

        Returns:
            Success with ``path``, or failure with ``error``
        """
        pass

    @abstractmethod
    def load_image(self, image_path: str) -> FileResult:
        """
        Check that an image exists.

        Returns:
            Success with ``path``, or failure with ``"Image not found"``
        """
        pass


class LocalFileService(FileService):
    """
    File service reading and writing the local filesystem.

    Subclasses provide the path pickers; returning None from a picker
    means the user canceled.
    """

    encoding = "utf-8"

    def choose_open_path(self) -> Optional[str]:
        """Get the path of the file to open, or None if canceled."""
        return None

    def choose_save_path(self) -> Optional[str]:
        """Get the path to save to, or None if canceled."""
        return None

    def open_file(self) -> FileResult:
        file_path = self.choose_open_path()
        if not file_path:
            logger.info("Open canceled")
            return FileResult.cancel()

        try:
            with open(file_path, "r", encoding=self.encoding) as f:
                data = f.read()
        except OSError as e:
            logger.error(f"Failed to read file {file_path}: {e}")
            return FileResult.failure("Failed to read file")

        logger.info(f"Read {len(data)} characters from {file_path}")
        return FileResult(success=True, path=file_path, data=data)

    def save_file(self, data: str) -> FileResult:
        file_path = self.choose_save_path()
        if not file_path:
            logger.info("Save canceled")
            return FileResult.cancel()

        try:
            with open(file_path, "w", encoding=self.encoding) as f:
                f.write(data)
        except OSError as e:
            logger.error(f"Failed to save file {file_path}: {e}")
            return FileResult.failure("Failed to save file")

        logger.info(f"Saved {file_path}")
        return FileResult(success=True, path=file_path)

    def load_image(self, image_path: str) -> FileResult:
        if image_path and Path(image_path).is_file():
            return FileResult(success=True, path=image_path)
        logger.debug(f"Image not found at path: {image_path}")
        return FileResult.failure(IMAGE_NOT_FOUND)


class StaticPathFileService(LocalFileService):
    """Local file service with fixed paths instead of dialogs, e.g. for recent files."""

    def __init__(self, open_path: Optional[str] = None, save_path: Optional[str] = None) -> None:
        self.open_path = open_path
        self.save_path = save_path

    def choose_open_path(self) -> Optional[str]:
        return self.open_path

    def choose_save_path(self) -> Optional[str]:
        return self.save_path


class OperationStatus(str, Enum):
    """Outcome of a load or save workflow."""

    OK = "ok"
    CANCELED = "canceled"
    FAILED = "failed"
    INVALID = "invalid"


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a dataset load or save.

    ``dataset`` and ``schema`` are set for successful loads; ``message``
    carries the error text for failures.
    """

    status: OperationStatus
    dataset: Optional[Dataset] = None
    schema: Optional[str] = None
    path: Optional[str] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == OperationStatus.OK


def _from_failed_request(result: FileResult) -> OperationResult:
    if result.canceled:
        return OperationResult(OperationStatus.CANCELED, message=OPERATION_CANCELED)
    return OperationResult(OperationStatus.FAILED, message=result.error or "Unknown error")


def load_dataset(service: FileService) -> OperationResult:
    """
    Ask the user for a dataset file and decode it.

    Both the raw corner format and the internal format are accepted.

    Args:
        service: File service to open the file with

    Returns:
        OperationResult with the new dataset on success
    """
    result = service.open_file()
    if not result.success:
        return _from_failed_request(result)

    try:
        decoded = SchemaRegistry.decode(result.data or "")
    except AnnotationDataError as e:
        logger.error(f"Failed to load dataset from {result.path}: {e}")
        return OperationResult(OperationStatus.INVALID, path=result.path, message=str(e))

    return OperationResult(
        OperationStatus.OK,
        dataset=decoded.dataset,
        schema=decoded.schema,
        path=result.path,
    )


def save_dataset(
    service: FileService,
    dataset: Dataset,
    keep_source_paths: bool = False
) -> OperationResult:
    """
    Export a dataset in the raw corner format and ask the user where to save it.

    Args:
        service: File service to save the file with
        dataset: Dataset to save
        keep_source_paths: Write back the paths recorded on raw import

    Returns:
        OperationResult with the saved path on success
    """
    text = format_for_export(internal_to_raw(dataset, keep_source_paths=keep_source_paths))
    result = service.save_file(text)
    if not result.success:
        return _from_failed_request(result)
    return OperationResult(OperationStatus.OK, path=result.path)


def resolve_image_path(
    service: FileService,
    filename: str,
    base_dir: Optional[Union[str, Path]] = None
) -> str:
    """
    Find the image file for a dataset entry.

    Tries ``filename`` as given, then relative to ``base_dir`` (usually
    the directory of the loaded dataset file).

    Returns:
        The first existing path, or ``filename`` unchanged if none exists
    """
    candidates = [filename]
    if base_dir is not None and not Path(filename).is_absolute():
        candidates.append(str(Path(base_dir) / filename))

    for candidate in candidates:
        result = service.load_image(candidate)
        if result.success and result.path:
            return result.path

    logger.warning(f"{IMAGE_NOT_FOUND}: {filename}")
    return filename
