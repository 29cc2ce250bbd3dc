"""FHIR REST reconciliation - create, read, update and delete FHIR resources from JSON documents."""

__version__ = "0.1.0"

from .cli import app  # noqa: E402
from .config import FhirRestConfig  # noqa: E402

__all__ = ["app", "FhirRestConfig"]
