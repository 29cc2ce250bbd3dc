"""Unit tests for RemoteTransport and RemoteResponse."""

import httpx
import pytest
import respx
from httpx import Response

from fhirrest.config import ServerConfig
from fhirrest.fhir.transport import RemoteResponse, RemoteTransport, TransportConfig
from fhirrest.utils.exceptions import ResponseParseError, TransportError

URL = "https://fhir.example.com/fhir/Patient"


class TestTransportConfig:
    """Test TransportConfig."""

    def test_default_headers_are_read_only(self):
        config = TransportConfig(base_url="https://x", default_headers={"A": "1"})

        with pytest.raises(TypeError):
            config.default_headers["B"] = "2"  # type: ignore[index]

        config.client.close()

    def test_copies_caller_mapping(self):
        headers = {"A": "1"}
        config = TransportConfig(base_url="https://x", default_headers=headers)
        headers["A"] = "2"

        assert config.default_headers["A"] == "1"
        config.client.close()

    def test_from_server_config(self):
        server = ServerConfig(
            base_url="https://fhir.example.com/fhir",
            default_headers={"X-Tenant": "t1"},
            timeout=5,
            verify_ssl=False,
        )

        config = TransportConfig.from_server_config(server)

        assert config.base_url == "https://fhir.example.com/fhir"
        assert dict(config.default_headers) == {"X-Tenant": "t1"}
        assert isinstance(config.client, httpx.Client)
        assert config.client.timeout.read == 5
        config.client.close()


class TestHeaderMerge:
    """Test header precedence."""

    def test_caller_headers_override_defaults(self, transport):
        merged = transport.merge_headers({"Authorization": "Bearer other"})

        assert merged["Authorization"] == "Bearer other"

    def test_content_type_always_forced(self, transport):
        merged = transport.merge_headers({"content-type": "text/plain"})

        assert merged["Content-Type"] == "application/json"
        assert merged.get_list("content-type") == ["application/json"]

    def test_defaults_kept(self, transport):
        merged = transport.merge_headers()

        assert merged["Authorization"] == "Bearer test-token"
        assert merged["Content-Type"] == "application/json"


class TestExecute:
    """Test RemoteTransport.execute."""

    @respx.mock
    def test_sends_body_and_headers(self, transport):
        route = respx.post(URL).mock(return_value=Response(201, json={"id": "1"}))

        response = transport.execute(
            "POST", URL, b'{"resourceType":"Patient"}', headers={"X-Request": "abc"}
        )

        assert route.called
        request = route.calls.last.request
        assert request.content == b'{"resourceType":"Patient"}'
        assert request.headers["Authorization"] == "Bearer test-token"
        assert request.headers["X-Request"] == "abc"
        assert request.headers["Content-Type"] == "application/json"
        assert response.status_code == 201
        assert response.success is True

    @respx.mock
    def test_returns_exact_bytes(self, transport):
        raw = b'{ "id" : "1",\n  "resourceType": "Patient" }'
        respx.get(URL).mock(return_value=Response(200, content=raw))

        response = transport.execute("GET", URL)

        assert response.content == raw

    @respx.mock
    def test_non_success_is_returned_not_raised(self, transport):
        respx.get(URL).mock(return_value=Response(500, text="boom"))

        response = transport.execute("GET", URL)

        assert response.success is False
        assert response.status == "500 Internal Server Error"
        assert response.text == "boom"

    @respx.mock
    def test_network_failure(self, transport, collector):
        respx.get(URL).mock(side_effect=httpx.ConnectError("Connection refused"))

        with pytest.raises(TransportError) as excinfo:
            transport.execute("GET", URL)

        assert excinfo.value.method == "GET"
        assert excinfo.value.url == URL
        assert "Connection refused" in excinfo.value.detail
        assert isinstance(excinfo.value.__cause__, httpx.ConnectError)
        counters = collector.get_summary()["counters"]
        assert counters["fhir_api_requests_total[method=GET,status=error]"] == 1

    @respx.mock
    def test_no_retry(self, transport):
        route = respx.get(URL).mock(side_effect=httpx.ReadTimeout("timed out"))

        with pytest.raises(TransportError):
            transport.execute("GET", URL)

        assert route.call_count == 1

    def test_invalid_url(self, transport):
        with pytest.raises(TransportError):
            transport.execute("GET", "ftp://fhir.example.com/Patient")

    @respx.mock
    def test_records_metrics(self, transport, collector):
        respx.delete(URL + "/1").mock(return_value=Response(204))

        transport.execute("DELETE", URL + "/1")

        summary = collector.get_summary()
        assert summary["counters"]["fhir_api_requests_total[method=DELETE,status=204]"] == 1
        assert summary["timings"]["fhir_api_latency_ms[method=DELETE]"]["count"] == 1


class TestRemoteResponse:
    """Test RemoteResponse derived fields."""

    @pytest.mark.parametrize(
        ("status_code", "success"),
        [(200, True), (201, True), (204, True), (299, True), (301, False), (404, False)],
    )
    def test_success_by_first_digit(self, status_code, success):
        response = RemoteResponse(url=URL, status_code=status_code, reason="", content=b"")

        assert response.success is success

    def test_json_object(self):
        response = RemoteResponse(url=URL, status_code=200, reason="OK", content=b'{"id":"1"}')

        assert response.json() == {"id": "1"}

    @pytest.mark.parametrize("content", [b"", b"not json", b"[1,2]", b"\xff\xfe"])
    def test_json_rejects_non_objects(self, content):
        response = RemoteResponse(url=URL, status_code=200, reason="OK", content=content)

        with pytest.raises(ResponseParseError) as excinfo:
            response.json()

        assert excinfo.value.url == URL

    def test_status_without_reason(self):
        response = RemoteResponse(url=URL, status_code=299, reason="", content=b"")

        assert response.status == "299"
