"""Single request/response cycle against the FHIR REST API.

The transport merges headers, sends exactly one request through the
configured httpx client and returns the full response body. It never
retries and never interprets the status; classification is left to the
caller via ``RemoteResponse.success``.

Header precedence, lowest first:
1. Configured default headers
2. Headers passed to ``execute``
3. ``Content-Type: application/json``, always forced
"""

import json
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import httpx
import structlog

from ..config import ServerConfig
from ..constants import CONTENT_TYPE_HEADER, CONTENT_TYPE_JSON, SUCCESS_STATUS_PREFIX
from ..observability.metrics import MetricsCollector
from ..utils.exceptions import ResponseParseError, TransportError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TransportConfig:
    """
    Immutable connection settings for one reconciliation call.

    Attributes:
        base_url: Default base URL of the FHIR server
        default_headers: Headers sent with every request
        client: HTTP client handle, safe for concurrent read-only use
    """

    base_url: str
    default_headers: Mapping[str, str] = field(default_factory=dict)
    client: httpx.Client = field(default_factory=httpx.Client)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "default_headers", MappingProxyType(dict(self.default_headers))
        )

    @classmethod
    def from_server_config(cls, server: ServerConfig) -> "TransportConfig":
        """Build transport settings and an httpx client from server configuration."""
        client = httpx.Client(timeout=server.timeout, verify=server.verify_ssl)
        return cls(
            base_url=server.base_url,
            default_headers=server.default_headers,
            client=client,
        )


@dataclass(frozen=True)
class RemoteResponse:
    """
    Raw response of one request.

    Attributes:
        url: Request URL
        status_code: Numeric HTTP status
        reason: Reason phrase, may be empty
        content: Exact response bytes
    """

    url: str
    status_code: int
    reason: str
    content: bytes

    @property
    def status(self) -> str:
        """Status line, e.g. "404 Not Found"."""
        return f"{self.status_code} {self.reason}".strip()

    @property
    def success(self) -> bool:
        """True when the status starts with 2."""
        return self.status.startswith(SUCCESS_STATUS_PREFIX)

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> dict[str, Any]:
        """
        Parse the body as a JSON object on demand.

        Raises:
            ResponseParseError: If the body is not valid JSON or not an object
        """
        try:
            data = json.loads(self.content)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ResponseParseError(self.url, str(e)) from e
        if not isinstance(data, dict):
            raise ResponseParseError(
                self.url, f"expected a JSON object, got {type(data).__name__}"
            )
        return data


class RemoteTransport:
    """
    Executes single HTTP requests with merged headers.

    Usage:
        with RemoteTransport(TransportConfig.from_server_config(server)) as transport:
            response = transport.execute("GET", url)
    """

    def __init__(self, config: TransportConfig, collector: MetricsCollector | None = None):
        self.config = config
        self.collector = collector or MetricsCollector()

    def __enter__(self) -> "RemoteTransport":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self.config.client.close()

    def merge_headers(self, headers: Mapping[str, str] | None = None) -> httpx.Headers:
        """Merge caller headers over the defaults and force the JSON content type."""
        merged = httpx.Headers(dict(self.config.default_headers))
        if headers:
            merged.update(headers)
        merged[CONTENT_TYPE_HEADER] = CONTENT_TYPE_JSON
        return merged

    def execute(
        self,
        method: str,
        url: str,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> RemoteResponse:
        """
        Send one request and read the whole response.

        Args:
            method: HTTP method
            url: Absolute request URL
            body: Request body, None for no body
            headers: Extra headers merged over the defaults

        Returns:
            RemoteResponse with the raw body and status

        Raises:
            TransportError: If the request cannot be built or no response is obtained
        """
        try:
            request = self.config.client.build_request(
                method, url, content=body, headers=self.merge_headers(headers)
            )
        except (httpx.InvalidURL, httpx.HTTPError, ValueError, TypeError) as e:
            logger.error("Failed to build request", method=method, url=url, error=str(e))
            raise TransportError(method, url, str(e)) from e

        logger.debug("Sending request", method=method, url=url)
        start_time = time.perf_counter()
        try:
            response = self.config.client.send(request)
        except httpx.HTTPError as e:
            self.collector.count_request(method, "error")
            logger.error("Request failed", method=method, url=url, error=str(e))
            raise TransportError(method, url, str(e)) from e

        duration = (time.perf_counter() - start_time) * 1000
        self.collector.record_latency(method, duration)
        self.collector.count_request(method, str(response.status_code))
        logger.debug("Received response", method=method, url=url, status=response.status_code)

        return RemoteResponse(
            url=url,
            status_code=response.status_code,
            reason=response.reason_phrase,
            content=response.content,
        )
