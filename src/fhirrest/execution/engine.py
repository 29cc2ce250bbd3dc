"""Reconciliation engine: how create, read, update and delete reach the server.

Overview:
--------
The engine is invoked by an external host that has already decided which of
the four operations to run. Each operation issues exactly one request,
blocks until it completes, and either returns a result or raises. Nothing
is retried, cached, or compared against previous state here.

Flow per operation:
1. Resolve the base URL (per-call override, else configured default)
2. Build the target URL from the document type or composite identifier
3. Execute one request through the RemoteTransport
4. Reject non-2xx statuses with RemoteError (status and body verbatim)
5. Parse and check the response, fingerprint the raw bytes

| Operation | Method | URL                 | Body                     |
|-----------|--------|---------------------|--------------------------|
| create    | POST   | /{resourceType}     | document as read         |
| read      | GET    | /{type}/{id}        | none                     |
| update    | PUT    | /{type}/{id}        | document with id = bare  |
| delete    | DELETE | /{type}/{id}        | none                     |
"""

import structlog

from ..constants import ID_KEY
from ..core.document import RecordDocument
from ..core.fingerprint import fingerprint
from ..core.identifier import build_identifier, parse_identifier
from ..fhir.endpoints import instance_url, resolve_base_url, type_url
from ..fhir.response_models import ResourceReadResponse, ResourceResponse, validate_response
from ..fhir.transport import RemoteResponse, RemoteTransport
from ..models.results import ReconcileResult
from ..observability.logger import LogContext
from ..utils.exceptions import RemoteError

logger = structlog.get_logger(__name__)


class ReconciliationEngine:
    """
    Stateless executor of the four CRUD operations.

    The only state held is the transport, whose configuration is immutable,
    so one engine can serve concurrent calls for different identifiers.
    """

    def __init__(self, transport: RemoteTransport) -> None:
        self.transport = transport

    def _base_url(self, override: str | None) -> str:
        return resolve_base_url(override, self.transport.config.base_url)

    def _execute(self, method: str, url: str, body: bytes | None = None) -> RemoteResponse:
        """Run one request and reject non-success statuses."""
        response = self.transport.execute(method, url, body)
        if not response.success:
            logger.warning(
                "Server returned an invalid status",
                method=method,
                url=url,
                status=response.status,
            )
            raise RemoteError(method, url, response.status_code, response.status, response.text)
        return response

    def create(self, document: RecordDocument, base_url: str | None = None) -> ReconcileResult:
        """
        POST a new record.

        Args:
            document: Declared document, sent as read from storage
            base_url: Optional per-call base URL override

        Returns:
            ReconcileResult with "{resourceType}/{id}" and the response fingerprint

        Raises:
            SchemaError: If the document has no resourceType (no request is sent)
            TransportError, RemoteError, ResponseParseError, MissingFieldError
        """
        resource_type = document.resource_type
        url = type_url(self._base_url(base_url), resource_type)

        with LogContext(operation="create", resource_type=resource_type):
            response = self._execute("POST", url, document.body())
            payload = validate_response(response.json(), ResourceResponse, url)
            result = ReconcileResult(
                resource_id=build_identifier(resource_type, payload.id),
                response_sha256=fingerprint(response.content),
            )
            logger.debug(
                "Persisted the resource", resource_id=result.resource_id, response=response.text
            )
            logger.info("Created resource", resource_id=result.resource_id)
        return result

    def update(
        self, document: RecordDocument, identifier: str, base_url: str | None = None
    ) -> ReconcileResult:
        """
        PUT the document over an existing record.

        The bare id from ``identifier`` is written into the body as ``id``,
        overwriting any value the document had. The caller's document is not
        modified.

        Args:
            document: Declared document
            identifier: Composite identifier of the existing record
            base_url: Optional per-call base URL override

        Returns:
            ReconcileResult rebuilt from the response type and id

        Raises:
            FormatError: If identifier is malformed (no request is sent)
            SchemaError: If the document has no resourceType (no request is sent)
            TransportError, RemoteError, ResponseParseError, MissingFieldError
        """
        _, bare_id = parse_identifier(identifier)
        declared_type = document.resource_type

        payload_document = document.copy()
        payload_document.set_string(ID_KEY, bare_id)
        url = instance_url(self._base_url(base_url), identifier)

        with LogContext(operation="update", resource_id=identifier):
            response = self._execute("PUT", url, payload_document.serialize())
            payload = validate_response(response.json(), ResourceResponse, url)
            result = ReconcileResult(
                resource_id=build_identifier(payload.resourceType or declared_type, payload.id),
                response_sha256=fingerprint(response.content),
            )
            logger.debug(
                "Persisted the resource", resource_id=result.resource_id, response=response.text
            )
            logger.info("Updated resource", resource_id=result.resource_id)
        return result

    def read(self, identifier: str, base_url: str | None = None) -> ReconcileResult:
        """
        GET a record and re-derive its identifier.

        Purely observational, never changes remote state.

        Raises:
            FormatError: If identifier is malformed (no request is sent)
            TransportError, RemoteError, ResponseParseError, MissingFieldError
        """
        parse_identifier(identifier)
        url = instance_url(self._base_url(base_url), identifier)

        with LogContext(operation="read", resource_id=identifier):
            response = self._execute("GET", url)
            payload = validate_response(response.json(), ResourceReadResponse, url)
            result = ReconcileResult(
                resource_id=build_identifier(payload.resourceType, payload.id),
                response_sha256=fingerprint(response.content),
            )
            logger.debug("Read resource", resource_id=result.resource_id)
        return result

    def delete(self, identifier: str, base_url: str | None = None) -> None:
        """
        DELETE a record.

        The success body is ignored, empty or non-JSON bodies are fine.

        Raises:
            FormatError: If identifier is malformed (no request is sent)
            TransportError, RemoteError
        """
        parse_identifier(identifier)
        url = instance_url(self._base_url(base_url), identifier)

        with LogContext(operation="delete", resource_id=identifier):
            self._execute("DELETE", url)
            logger.info("Deleted resource", resource_id=identifier)

    def fetch(self, identifier: str, base_url: str | None = None) -> str:
        """
        GET a record and return the raw body text, unparsed.

        Raises:
            FormatError: If identifier is malformed (no request is sent)
            TransportError, RemoteError
        """
        parse_identifier(identifier)
        url = instance_url(self._base_url(base_url), identifier)

        with LogContext(operation="fetch", resource_id=identifier):
            response = self._execute("GET", url)
        return response.text
