"""Composite "{type}/{id}" identifiers used to address remote records.

The split point is always the leftmost "/": the type never contains a slash,
the id is the remainder and may contain further slashes, kept verbatim.
"""

from ..utils.exceptions import FormatError

SEPARATOR = "/"


def parse_identifier(value: str) -> tuple[str, str]:
    """
    Split a composite identifier into type and bare id.

    Args:
        value: Identifier such as "Patient/08146022-932a-4001-9fe4-928382855ddf"

    Returns:
        Tuple of (type, id)

    Raises:
        FormatError: If there is no "/" or either segment is empty
    """
    resource_type, sep, resource_id = value.partition(SEPARATOR)
    if not sep:
        raise FormatError(value, "no '/' separator found")
    if not resource_type or not resource_id:
        raise FormatError(value, "type and id must both be non-empty")
    return resource_type, resource_id


def build_identifier(resource_type: str, resource_id: str) -> str:
    """
    Build a composite identifier from its parts.

    Raises:
        FormatError: If the type is empty or contains "/", or the id is empty
    """
    value = f"{resource_type}{SEPARATOR}{resource_id}"
    if not resource_type or SEPARATOR in resource_type:
        raise FormatError(value, "type must be non-empty and must not contain '/'")
    if not resource_id:
        raise FormatError(value, "id must be non-empty")
    return value
