"""FHIR REST API access: transport, URLs and response models."""

from .endpoints import instance_url, resolve_base_url, type_url
from .transport import RemoteResponse, RemoteTransport, TransportConfig

__all__ = [
    "RemoteResponse",
    "RemoteTransport",
    "TransportConfig",
    "instance_url",
    "resolve_base_url",
    "type_url",
]
