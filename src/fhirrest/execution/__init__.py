"""Execution layer: the reconciliation engine and its host adapter."""

from .engine import ReconciliationEngine
from .handlers import FhirResourceHandler

__all__ = ["ReconciliationEngine", "FhirResourceHandler"]
