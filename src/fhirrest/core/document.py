"""Loading of local JSON documents that declare a FHIR resource.

A document is a schema-less JSON object. The only key validated on load is
``resourceType``, which must be a non-empty string without "/". Every
other key is passed through untouched. Field access goes through
``get_string`` and ``set_string`` so each read has an explicit presence and type check.

Documents are read fresh on every call and are never cached.
"""

import copy
import json
from pathlib import Path
from typing import Any

import structlog

from ..constants import RESOURCE_TYPE_KEY
from ..utils.exceptions import FileError, MissingFieldError, ParseError, SchemaError
from .identifier import SEPARATOR

logger = structlog.get_logger(__name__)


class RecordDocument:
    """
    Local declared content of a remote record.

    Attributes:
        source: Where the document came from (file path or "<memory>")
        raw: Exact bytes read from storage, None once a field was changed
    """

    def __init__(
        self, fields: dict[str, Any], raw: bytes | None = None, source: str = "<memory>"
    ) -> None:
        self._fields = fields
        self.raw = raw
        self.source = source

    @classmethod
    def from_bytes(cls, content: bytes, source: str = "<memory>") -> "RecordDocument":
        """
        Parse and validate document bytes.

        Args:
            content: Raw JSON bytes
            source: Label used in error messages

        Returns:
            RecordDocument keeping the original bytes

        Raises:
            ParseError: If content is not valid JSON or not an object
            SchemaError: If resourceType is absent, empty, not a string or contains "/"
        """
        try:
            data = json.loads(content)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ParseError(source, str(e)) from e

        if not isinstance(data, dict):
            raise ParseError(source, f"expected a JSON object, got {type(data).__name__}")

        return cls(data, raw=content, source=source).validate()

    def validate(self) -> "RecordDocument":
        """Check the document can be written and return it."""
        self._checked_resource_type()
        return self

    @property
    def resource_type(self) -> str:
        """Declared record type."""
        return self._checked_resource_type()

    def _checked_resource_type(self) -> str:
        """
        Raises:
            SchemaError: If resourceType is absent, empty, not a string or contains "/"
        """
        try:
            resource_type = self.get_string(RESOURCE_TYPE_KEY)
        except MissingFieldError as e:
            raise SchemaError(self.source, RESOURCE_TYPE_KEY, e.detail) from e
        if SEPARATOR in resource_type:
            raise SchemaError(
                self.source,
                RESOURCE_TYPE_KEY,
                f"value {resource_type!r} must not contain '/'",
                problem="is invalid",
            )
        return resource_type

    def get_string(self, key: str) -> str:
        """
        Return a non-empty string field.

        Raises:
            MissingFieldError: If the key is absent, not a string, or empty
        """
        if key not in self._fields:
            raise MissingFieldError(key, self.source, "key is absent")
        value = self._fields[key]
        if not isinstance(value, str):
            raise MissingFieldError(
                key, self.source, f"expected a string, got {type(value).__name__}"
            )
        if not value:
            raise MissingFieldError(key, self.source, "value is empty")
        return value

    def set_string(self, key: str, value: str) -> None:
        """Set a string field, overwriting any prior value."""
        self._fields[key] = value
        self.raw = None

    def copy(self) -> "RecordDocument":
        """Return an independent copy keeping the original bytes."""
        return RecordDocument(copy.deepcopy(self._fields), raw=self.raw, source=self.source)

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._fields)

    def serialize(self) -> bytes:
        """Serialize the current fields as compact UTF-8 JSON."""
        return json.dumps(self._fields, separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    def body(self) -> bytes:
        """
        Return the request body for this document.

        Unchanged documents are sent byte for byte as read from storage.
        """
        if self.raw is not None:
            return self.raw
        return self.serialize()


def load_document(path: str | Path) -> RecordDocument:
    """
    Read and validate a document file.

    Args:
        path: Path to the JSON document

    Returns:
        RecordDocument with the file bytes attached

    Raises:
        FileError: If the file cannot be opened or read
        ParseError: If the file is not a JSON object
        SchemaError: If resourceType is missing
    """
    source = str(path)
    try:
        with open(path, "rb") as f:
            content = f.read()
    except OSError as e:
        raise FileError(source, str(e)) from e

    document = RecordDocument.from_bytes(content, source=source)
    logger.debug("Loaded document", path=source, resource_type=document.resource_type)
    return document
