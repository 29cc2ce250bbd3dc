"""Unit tests for the host-facing FhirResourceHandler."""

import pytest
import respx
from httpx import Response

from fhirrest.core.fingerprint import file_sha256
from fhirrest.models.results import ResourceState
from fhirrest.utils.exceptions import FileError, FormatError, MissingFieldError

BASE = "https://fhir.example.com/fhir"


class TestCreate:
    """Test FhirResourceHandler.create."""

    @respx.mock
    def test_create_fills_computed_attributes(self, handler, patient_file):
        respx.post(f"{BASE}/Patient").mock(return_value=Response(201, json={"id": "p1"}))
        plan = ResourceState(file_path=str(patient_file), file_sha256=file_sha256(patient_file))

        state = handler.create(plan)

        assert state.resource_id == "Patient/p1"
        assert state.response_sha256
        assert state.file_path == plan.file_path
        assert state.file_sha256 == plan.file_sha256
        assert plan.resource_id is None

    @respx.mock
    def test_create_uses_plan_base_url(self, handler, patient_file):
        route = respx.post("https://override.example.com/Patient").mock(
            return_value=Response(201, json={"id": "p1"})
        )

        handler.create(
            ResourceState(file_path=str(patient_file), fhir_base_url="https://override.example.com")
        )

        assert route.called

    def test_create_requires_file_path(self, handler):
        with pytest.raises(MissingFieldError) as excinfo:
            handler.create(ResourceState())

        assert excinfo.value.field == "file_path"

    def test_create_unreadable_file(self, handler, tmp_path):
        with pytest.raises(FileError):
            handler.create(ResourceState(file_path=str(tmp_path / "missing.json")))


class TestReadUpdateDelete:
    """Test read, update and delete through the handler."""

    @respx.mock
    def test_read_refreshes_fingerprint(self, handler):
        respx.get(f"{BASE}/Patient/p1").mock(
            return_value=Response(200, json={"resourceType": "Patient", "id": "p1"})
        )
        prior = ResourceState(file_path="patient.json", resource_id="Patient/p1")

        state = handler.read(prior)

        assert state.resource_id == "Patient/p1"
        assert state.response_sha256 is not None
        assert state.file_path == "patient.json"

    def test_read_requires_resource_id(self, handler):
        with pytest.raises(MissingFieldError):
            handler.read(ResourceState(file_path="patient.json"))

    @respx.mock
    def test_update_takes_identifier_from_state_and_file_from_plan(self, handler, patient_file):
        route = respx.put(f"{BASE}/Patient/p1").mock(
            return_value=Response(200, json={"resourceType": "Patient", "id": "p1"})
        )
        prior = ResourceState(
            file_path="old.json", file_sha256="old", resource_id="Patient/p1", response_sha256="x"
        )
        plan = ResourceState(file_path=str(patient_file), file_sha256="new")

        state = handler.update(prior, plan)

        assert route.called
        assert state.resource_id == "Patient/p1"
        assert state.file_path == str(patient_file)
        assert state.file_sha256 == "new"
        assert state.response_sha256 != "x"

    @respx.mock
    def test_delete(self, handler):
        route = respx.delete(f"{BASE}/Patient/p1").mock(return_value=Response(204))

        assert handler.delete(ResourceState(resource_id="Patient/p1")) is None
        assert route.called


class TestImportState:
    """Test FhirResourceHandler.import_state."""

    @respx.mock(assert_all_called=False)
    def test_import_sends_nothing(self, handler):
        route = respx.route().mock(return_value=Response(200))

        state = handler.import_state("Medication/08146022-932a-4001-9fe4-928382855ddf")

        assert state == ResourceState(resource_id="Medication/08146022-932a-4001-9fe4-928382855ddf")
        assert not route.called

    def test_import_rejects_malformed_identifier(self, handler):
        with pytest.raises(FormatError):
            handler.import_state("Medication")
