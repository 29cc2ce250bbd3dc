"""Core components of the FHIR REST reconciliation engine.

This package contains document loading, identifier handling and
response fingerprinting.
"""

from .document import RecordDocument, load_document
from .fingerprint import file_sha256, fingerprint
from .identifier import build_identifier, parse_identifier

__all__ = [
    "RecordDocument",
    "build_identifier",
    "file_sha256",
    "fingerprint",
    "load_document",
    "parse_identifier",
]
