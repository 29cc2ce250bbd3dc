"""Data models for the FHIR REST reconciliation engine."""

from .results import Diagnostic, ReconcileResult, ResourceState

__all__ = [
    "Diagnostic",
    "ReconcileResult",
    "ResourceState",
]
