"""Schema registry for decoding imported dataset JSON."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, List, Type

from .dataset_format import DatasetSchema, InternalDatasetSchema, RawDatasetSchema
from .errors import InvalidJSONError, UnrecognizedStructureError
from .models import Dataset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodeResult:
    """A decoded dataset tagged with the schema that matched."""

    schema: str
    dataset: Dataset


class SchemaRegistry:
    """
    Registry of importable dataset schemas.

    Decoding tries each schema in registration order; the first match
    wins:
    1. raw: array of corner-format items
    2. internal: object with an images array
    """

    _schemas: List[Type[DatasetSchema]] = [
        RawDatasetSchema,
        InternalDatasetSchema,
    ]

    @classmethod
    def get_schema_names(cls) -> List[str]:
        """Get names of the registered schemas in detection order."""
        return [schema_class().name for schema_class in cls._schemas]

    @classmethod
    def get_schema(cls, name: str) -> DatasetSchema:
        """
        Get an instance of a schema by name.

        Raises:
            ValueError: If the schema name is unknown
        """
        for schema_class in cls._schemas:
            schema = schema_class()
            if schema.name == name:
                return schema
        raise ValueError(f"Unknown schema: {name}")

    @classmethod
    def parse(cls, text: str) -> Any:
        """
        Parse JSON text.

        Raises:
            InvalidJSONError: If the text is not valid JSON
        """
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(f"Invalid JSON: {e}")
            raise InvalidJSONError(f"Invalid JSON: {e}") from e

    @classmethod
    def detect_schema(cls, data: Any) -> DatasetSchema:
        """
        Find the first schema matching parsed JSON.

        Raises:
            UnrecognizedStructureError: If no schema matches
        """
        for schema_class in cls._schemas:
            schema = schema_class()
            if schema.matches(data):
                logger.debug(f"Detected {schema.name} dataset schema")
                return schema

        logger.warning(f"No dataset schema matches JSON of type {type(data).__name__}")
        raise UnrecognizedStructureError(
            "Invalid JSON structure. Expected an array of annotation items "
            "or an object with an 'images' array."
        )

    @classmethod
    def decode(cls, payload: Any) -> DecodeResult:
        """
        Decode JSON text or parsed JSON into a Dataset.

        Args:
            payload: JSON text, or data already parsed with ``json.loads``

        Returns:
            DecodeResult naming the matched schema

        Raises:
            InvalidJSONError: If text payload is not valid JSON
            UnrecognizedStructureError: If no schema matches
            MalformedBoxError: If a raw bbox is not four numbers
        """
        data = cls.parse(payload) if isinstance(payload, (str, bytes)) else payload
        schema = cls.detect_schema(data)
        dataset = schema.decode(data)
        logger.info(
            f"Decoded {schema.name} dataset: {len(dataset.images)} images, "
            f"{dataset.box_count} boxes"
        )
        return DecodeResult(schema=schema.name, dataset=dataset)
