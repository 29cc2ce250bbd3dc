"""Pydantic models for FHIR server responses.

Only the fields the engine relies on are declared. Everything else in a
resource is allowed through untouched.

Usage:
    payload = validate_response(response.json(), ResourceReadResponse, url)
    identifier = build_identifier(payload.resourceType, payload.id)
"""

from typing import Any, TypeVar

from pydantic import BaseModel, Field, StrictStr, ValidationError

from ..utils.exceptions import MissingFieldError


class ResourceResponse(BaseModel):
    """Response to a create or update.

    Attributes:
        id: Bare id assigned by the server
        resourceType: Record type, optional on writes
    """

    id: StrictStr = Field(..., min_length=1, description="Server assigned id")
    resourceType: StrictStr | None = Field(None, min_length=1, description="Record type")

    model_config = {"extra": "allow"}


class ResourceReadResponse(ResourceResponse):
    """Response to a read, where the record type is mandatory."""

    resourceType: StrictStr = Field(..., min_length=1, description="Record type")


ResponseModel = TypeVar("ResponseModel", bound=ResourceResponse)


def validate_response(
    data: dict[str, Any], model: type[ResponseModel], url: str
) -> ResponseModel:
    """
    Validate a parsed response body against a response model.

    Args:
        data: Parsed JSON object
        model: Model declaring the required fields
        url: Request URL, used in error messages

    Returns:
        Validated model instance

    Raises:
        MissingFieldError: If a required field is absent or not a non-empty string
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "<root>"
        raise MissingFieldError(field, f"response from {url}", first["msg"]) from e
