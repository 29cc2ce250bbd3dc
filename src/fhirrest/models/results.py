"""Result and state types for reconciliation operations."""

from dataclasses import asdict, dataclass, replace
from typing import Any


@dataclass(frozen=True)
class Diagnostic:
    """
    Structured description of a failed operation.

    Attributes:
        summary: Short description of what failed
        detail: Original cause or raw server body
        severity: Always "error" for failures raised by the engine
    """

    summary: str
    detail: str = ""
    severity: str = "error"

    def __str__(self) -> str:
        if self.detail:
            return f"{self.summary}: {self.detail}"
        return self.summary


@dataclass(frozen=True)
class ReconcileResult:
    """
    Outcome of a successful create, read or update.

    Attributes:
        resource_id: Composite "{type}/{id}" identifier of the record
        response_sha256: Fingerprint of the raw response bytes
    """

    resource_id: str
    response_sha256: str


@dataclass(frozen=True)
class ResourceState:
    """
    Attributes the host stores for one declared FHIR resource.

    Attributes:
        file_path: Path of the JSON document declaring the resource
        file_sha256: Declared hash of the document, carried but never compared
        fhir_base_url: Per-resource base URL override
        resource_id: Composite identifier assigned by the server
        response_sha256: Fingerprint of the last server response
    """

    file_path: str | None = None
    file_sha256: str | None = None
    fhir_base_url: str | None = None
    resource_id: str | None = None
    response_sha256: str | None = None

    def with_result(self, result: ReconcileResult) -> "ResourceState":
        """
        Return a copy carrying the identifier and fingerprint of a result.

        Args:
            result: Successful reconciliation result.

        Returns:
            ResourceState: New state, the receiver is left unchanged.
        """
        return replace(
            self, resource_id=result.resource_id, response_sha256=result.response_sha256
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary."""
        return asdict(self)
