"""Custom exceptions for the FHIR REST reconciliation engine.

Exception Hierarchy:
-------------------
FhirRestError (base)
├── DocumentError
│   ├── FileError               # Document file cannot be opened or read
│   ├── ParseError              # Document is not a JSON object
│   └── SchemaError             # resourceType missing, empty or not a string
├── FormatError                 # Identifier is not "{type}/{id}"
├── TransportError              # Request could not be built or sent
├── RemoteError                 # Server answered with a non-2xx status
├── ResponseParseError          # Response body is not a JSON object
└── MissingFieldError           # Expected key absent from a JSON object

Usage Guidelines:
----------------
1. Every error aborts the current operation. Nothing is retried.

2. Each exception carries a short ``summary`` and a ``detail`` string holding
   the original cause or the raw server body. ``to_diagnostic()`` turns it
   into a Diagnostic the caller can aggregate however it likes.

3. Wrap lower level errors with ``raise ... from e`` so the cause stays
   attached.
"""

from ..models.results import Diagnostic


class FhirRestError(Exception):
    """Base exception for all engine errors."""

    def __init__(self, summary: str, detail: str = "") -> None:
        """
        Initialize FhirRestError.

        Args:
            summary: Short, human readable description of the failure.
            detail: Original cause or raw payload for diagnosis.
        """
        super().__init__(summary)
        self.summary = summary
        self.detail = detail

    def to_diagnostic(self) -> Diagnostic:
        """
        Convert the error into a structured diagnostic.

        Returns:
            Diagnostic: Error-severity diagnostic with summary and detail.
        """
        return Diagnostic(summary=self.summary, detail=self.detail)


class DocumentError(FhirRestError):
    """Raised when a local document cannot be loaded."""

    def __init__(self, summary: str, path: str, detail: str = "") -> None:
        super().__init__(summary, detail)
        self.path = path


class FileError(DocumentError):
    """Raised when the document file cannot be opened or read."""

    def __init__(self, path: str, detail: str = "") -> None:
        super().__init__(f"failed to read file {path}", path, detail)


class ParseError(DocumentError):
    """Raised when the document is not a JSON object."""

    def __init__(self, path: str, detail: str = "") -> None:
        super().__init__(f"failed to unmarshal JSON file {path}", path, detail)


class SchemaError(DocumentError):
    """Raised when the document has no usable resourceType."""

    def __init__(
        self, path: str, key: str = "resourceType", detail: str = "", problem: str = "not found"
    ) -> None:
        super().__init__(f"property {key} {problem} in json file {path}", path, detail)
        self.key = key


class FormatError(FhirRestError):
    """Raised when a composite identifier is malformed."""

    def __init__(self, value: str, detail: str = "") -> None:
        super().__init__(
            f"invalid resource identifier {value!r}, expected '{{type}}/{{id}}'", detail
        )
        self.value = value


class TransportError(FhirRestError):
    """Raised when a request cannot be built or the network call fails."""

    def __init__(self, method: str, url: str, detail: str = "") -> None:
        super().__init__(f"could not send {method} request to {url}", detail)
        self.method = method
        self.url = url


class RemoteError(FhirRestError):
    """
    Raised when the server answers with a non-success status.

    The status line and the raw response body are kept verbatim.
    """

    def __init__(self, method: str, url: str, status_code: int, status: str, body: str) -> None:
        """
        Initialize RemoteError.

        Args:
            method: HTTP method of the failed request.
            url: Target URL of the failed request.
            status_code: Numeric HTTP status.
            status: Full status line, e.g. "404 Not Found".
            body: Raw response body text.
        """
        super().__init__(
            f"the server returned an invalid status for {method} {url}: {status}",
            f"Error code {status}. Response: {body}",
        )
        self.method = method
        self.url = url
        self.status_code = status_code
        self.status = status
        self.body = body


class ResponseParseError(FhirRestError):
    """Raised when a success response body is not a JSON object."""

    def __init__(self, url: str, detail: str = "") -> None:
        super().__init__(f"failed to unmarshal response JSON from {url}", detail)
        self.url = url


class MissingFieldError(FhirRestError):
    """Raised when an expected string field is absent from a JSON object."""

    def __init__(self, field: str, source: str = "response", detail: str = "") -> None:
        super().__init__(f"property {field} not found in {source}", detail)
        self.field = field
        self.source = source
