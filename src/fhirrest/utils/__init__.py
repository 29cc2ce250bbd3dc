"""Utility functions and exceptions."""

from .exceptions import (
    DocumentError,
    FhirRestError,
    FileError,
    FormatError,
    MissingFieldError,
    ParseError,
    RemoteError,
    ResponseParseError,
    SchemaError,
    TransportError,
)

__all__ = [
    "FhirRestError",
    "DocumentError",
    "FileError",
    "ParseError",
    "SchemaError",
    "FormatError",
    "TransportError",
    "RemoteError",
    "ResponseParseError",
    "MissingFieldError",
]
