"""URL construction for the FHIR REST API.

Endpoints relative to the resolved base URL:
- POST   /{resourceType}   create
- GET    /{type}/{id}      read, fetch
- PUT    /{type}/{id}      update
- DELETE /{type}/{id}      delete
"""


def resolve_base_url(override: str | None, default: str) -> str:
    """
    Pick the base URL for one call.

    Args:
        override: Per-call base URL, used when present and non-empty
        default: Configured base URL

    Returns:
        The base URL to use
    """
    if override:
        return override
    return default


def _join(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path}"


def type_url(base_url: str, resource_type: str) -> str:
    """URL of the collection a new record of ``resource_type`` is posted to."""
    return _join(base_url, resource_type)


def instance_url(base_url: str, identifier: str) -> str:
    """URL of the record addressed by a composite identifier."""
    return _join(base_url, identifier)
