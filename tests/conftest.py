"""Pytest configuration and shared fixtures.

Fixtures are organized by category:
- Config fixtures: transport settings
- Transport fixtures: RemoteTransport and engine over a real httpx.Client
- Document fixtures: sample FHIR documents written to tmp_path
"""

import json
from pathlib import Path
from typing import Any

import httpx
import pytest
import respx

from fhirrest.execution.engine import ReconciliationEngine
from fhirrest.execution.handlers import FhirResourceHandler
from fhirrest.fhir.transport import RemoteTransport, TransportConfig
from fhirrest.observability.metrics import MetricsCollector

BASE_URL = "https://fhir.example.com/fhir"


@pytest.fixture(autouse=True)
def _reset_global_respx_routes():
    """Keep routes added to the global respx router from leaking between tests."""
    yield
    respx.mock.clear()

# =============================================================================
# Config Fixtures
# =============================================================================


@pytest.fixture
def transport_config() -> TransportConfig:
    """Transport settings with one default header."""
    return TransportConfig(
        base_url=BASE_URL,
        default_headers={"Authorization": "Bearer test-token"},
        client=httpx.Client(),
    )


# =============================================================================
# Transport / Engine Fixtures
# =============================================================================


@pytest.fixture
def collector() -> MetricsCollector:
    return MetricsCollector()


@pytest.fixture
def transport(transport_config: TransportConfig, collector: MetricsCollector):
    transport = RemoteTransport(transport_config, collector=collector)
    yield transport
    transport.close()


@pytest.fixture
def engine(transport: RemoteTransport) -> ReconciliationEngine:
    return ReconciliationEngine(transport)


@pytest.fixture
def handler(engine: ReconciliationEngine) -> FhirResourceHandler:
    return FhirResourceHandler(engine)


# =============================================================================
# Document Fixtures
# =============================================================================


@pytest.fixture
def patient_data() -> dict[str, Any]:
    return {
        "resourceType": "Patient",
        "active": True,
        "name": [{"family": "Chalmers", "given": ["Peter", "James"]}],
        "gender": "male",
        "birthDate": "1974-12-25",
    }


@pytest.fixture
def patient_file(tmp_path: Path, patient_data: dict[str, Any]) -> Path:
    """Patient document written with indentation, as a user would."""
    path = tmp_path / "patient.json"
    path.write_text(json.dumps(patient_data, indent=2))
    return path
