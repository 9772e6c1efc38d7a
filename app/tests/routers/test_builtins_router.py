import httpx
import pytest
from fastapi.testclient import TestClient

from app_factory import create_app
from dependencies.http_builtin import get_http_builtin


@pytest.fixture
def client_for(make_builtin):
    def factory(handler):
        builtin, transport = make_builtin(handler)
        app = create_app()
        app.dependency_overrides[get_http_builtin] = lambda: builtin
        return TestClient(app), transport

    return factory


def _json_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, headers={"content-type": "application/json"}, text='{"ok": true}')


def test_send_returns_result(client_for):
    client, transport = client_for(_json_handler)

    response = client.post(
        "/builtins/http/send",
        json={"url": "https://api.example.com/status", "method": "get"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["code"] == 0
    data = payload["data"]
    assert data["status"] == "200 OK"
    assert data["statusCode"] == 200
    assert data["body"] == {"Json": {"ok": True}}
    assert data["rawBody"] == '{"ok": true}'
    assert data["headers"]["content-type"] == "application/json"
    assert data["error"] == {}
    assert len(transport.requests) == 1


def test_unsupported_option_is_a_bad_request(client_for):
    client, transport = client_for(_json_handler)

    response = client.post(
        "/builtins/http/send",
        json={"url": "https://api.example.com", "method": "GET", "tlsServerName": "example.com"},
    )

    assert response.status_code == 400
    payload = response.json()
    assert payload["data"]["error"] == {"UnsupportedOptionError": 1002}
    assert payload["data"]["stage"] == "validate"
    assert transport.requests == []


def test_unknown_field_is_a_bad_request(client_for):
    client, _ = client_for(_json_handler)

    response = client.post(
        "/builtins/http/send",
        json={"url": "https://api.example.com", "method": "GET", "verbose": True},
    )

    assert response.status_code == 400
    assert response.json()["data"]["error"] == {"InvalidRequestSpecError": 1001}


def test_non_object_payload_is_rejected(client_for):
    client, _ = client_for(_json_handler)

    response = client.post("/builtins/http/send", json=["https://api.example.com"])

    assert response.status_code == 422
    assert response.json()["data"]["error"] == {"InvalidRequestSpecError": 1001}


def test_network_failure_is_a_bad_gateway(client_for):
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client, _ = client_for(refuse)

    response = client.post(
        "/builtins/http/send",
        json={"url": "https://api.example.com", "method": "GET"},
    )

    assert response.status_code == 502
    assert response.json()["data"]["error"] == {"NetworkError": 1005}


def test_health():
    client = TestClient(create_app())

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "ok"
    assert "x-trace-id" in response.headers


def test_invalid_json_upstream_is_a_bad_gateway(client_for):
    client, _ = client_for(
        lambda request: httpx.Response(200, headers={"content-type": "application/json"}, text="NaN")
    )

    response = client.post(
        "/builtins/http/send",
        json={"url": "https://api.example.com", "method": "GET"},
    )

    assert response.status_code == 502
    assert response.json()["data"]["error"] == {"DecodeError": 1006}
    assert response.json()["data"]["stage"] == "decode"
