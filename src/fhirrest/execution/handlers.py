"""Host-facing adapter mapping stored resource attributes onto the engine.

The host stores a ResourceState per declared resource and sequences the
calls below. Every call returns a new state and leaves its arguments alone.
Documents are loaded from ``file_path`` on each create and update.
"""

import structlog

from ..core.document import load_document
from ..core.identifier import parse_identifier
from ..models.results import ResourceState
from ..utils.exceptions import MissingFieldError
from .engine import ReconciliationEngine

logger = structlog.get_logger(__name__)


def _require(value: str | None, field: str) -> str:
    if not value:
        raise MissingFieldError(field, "resource state", "attribute is not set")
    return value


class FhirResourceHandler:
    """Create, read, update, delete and import for one resource kind."""

    def __init__(self, engine: ReconciliationEngine) -> None:
        self.engine = engine

    def create(self, plan: ResourceState) -> ResourceState:
        """Create the record declared by ``plan.file_path``."""
        document = load_document(_require(plan.file_path, "file_path"))
        result = self.engine.create(document, base_url=plan.fhir_base_url)
        return plan.with_result(result)

    def read(self, state: ResourceState) -> ResourceState:
        """Refresh identifier and fingerprint from the server."""
        resource_id = _require(state.resource_id, "resource_id")
        result = self.engine.read(resource_id, base_url=state.fhir_base_url)
        return state.with_result(result)

    def update(self, state: ResourceState, plan: ResourceState) -> ResourceState:
        """
        Push the planned document over the stored record.

        The identifier comes from the prior state. File path, declared file
        hash and base URL override come from the plan.
        """
        resource_id = _require(state.resource_id, "resource_id")
        document = load_document(_require(plan.file_path, "file_path"))
        result = self.engine.update(document, resource_id, base_url=plan.fhir_base_url)
        return plan.with_result(result)

    def delete(self, state: ResourceState) -> None:
        resource_id = _require(state.resource_id, "resource_id")
        self.engine.delete(resource_id, base_url=state.fhir_base_url)

    def import_state(self, resource_id: str) -> ResourceState:
        """
        Adopt an existing record by identifier.

        Only the identifier format is checked, no request is sent. The host
        is expected to follow up with ``read``.
        """
        parse_identifier(resource_id)
        logger.info("Imported resource", resource_id=resource_id)
        return ResourceState(resource_id=resource_id)
