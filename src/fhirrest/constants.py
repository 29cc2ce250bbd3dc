"""Named constants for the FHIR REST reconciliation engine."""

# -----------------------------------------------------------------------------
# HTTP
# -----------------------------------------------------------------------------

# Forced on every request, after default and caller headers are merged
CONTENT_TYPE_HEADER: str = "Content-Type"
CONTENT_TYPE_JSON: str = "application/json"

# A status whose first digit is this character denotes success
SUCCESS_STATUS_PREFIX: str = "2"


# -----------------------------------------------------------------------------
# Document keys
# -----------------------------------------------------------------------------

RESOURCE_TYPE_KEY: str = "resourceType"
ID_KEY: str = "id"
