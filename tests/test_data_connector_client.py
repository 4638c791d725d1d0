from __future__ import annotations

import base64
from typing import Any, Mapping

import pytest
import requests

from app.models import DataConnector, DataConnectorEndpoint
from app.services.data_connector_client import DataConnectorClient, DataConnectorError


class DummyResponse:
    def __init__(self, status_code: int = 200, *, payload: Any = None, text: str | None = None, reason: str | None = None):
        self.status_code = status_code
        self._payload = payload
        self.text = text or ""
        self.reason = reason or ""
        self.headers = {"Content-Type": "application/json"}

    def json(self) -> Mapping[str, Any] | None:
        if self._payload is None:
            raise ValueError("no json payload")
        return self._payload


def _connector(**overrides) -> DataConnector:
    values = {
        "name": "CRM",
        "base_url": "https://crm.example.com/api/",
        "auth_type": "none",
        "credentials": None,
        "headers": {"X-Tenant": "acme"},
    }
    values.update(overrides)
    return DataConnector(**values)


def _build_client(record: list[dict[str, Any]], connector: DataConnector, *, response: DummyResponse | Exception) -> DataConnectorClient:
    def _request(method: str, url: str, headers: dict[str, str], params, body, timeout: int):
        record.append(
            {
                "method": method,
                "url": url,
                "headers": headers,
                "params": params,
                "body": body,
                "timeout": timeout,
            }
        )
        if isinstance(response, Exception):
            raise response
        return response

    return DataConnectorClient(connector, timeout_seconds=15, request_func=_request)


def test_client_requires_base_url():
    with pytest.raises(ValueError):
        DataConnectorClient(_connector(base_url=" "))


def test_execute_renders_endpoint_and_applies_headers():
    calls: list[dict[str, Any]] = []
    client = _build_client(calls, _connector(), response=DummyResponse(payload={"id": 42, "name": "ACME"}))
    endpoint = DataConnectorEndpoint(
        name="getCustomer",
        method="post",
        path="/customers/{{ customerId }}",
        query={"expand": "{{ expand }}"},
        body={"requestedBy": "{{ user.name }}"},
    )

    result = client.execute(endpoint, {"customerId": 42, "expand": "orders", "user": {"name": "jdoe"}})

    assert result.status == 200
    assert result.payload == {"id": 42, "name": "ACME"}
    assert calls == [
        {
            "method": "POST",
            "url": "https://crm.example.com/api/customers/42",
            "headers": {"Accept": "application/json", "X-Tenant": "acme"},
            "params": {"expand": "orders"},
            "body": {"requestedBy": "jdoe"},
            "timeout": 15,
        }
    ]


def test_execute_with_bearer_token():
    calls: list[dict[str, Any]] = []
    connector = _connector(auth_type="bearer", credentials={"token": "secret"})
    client = _build_client(calls, connector, response=DummyResponse(payload=[]))

    client.execute(DataConnectorEndpoint(name="list", method="GET", path=""))

    assert calls[0]["headers"]["Authorization"] == "Bearer secret"
    assert calls[0]["url"] == "https://crm.example.com/api"
    assert calls[0]["params"] is None
    assert calls[0]["body"] is None


def test_execute_with_basic_auth():
    calls: list[dict[str, Any]] = []
    connector = _connector(auth_type="basic", credentials={"username": "svc", "password": "pw"})
    client = _build_client(calls, connector, response=DummyResponse(payload={}))

    client.execute(DataConnectorEndpoint(name="ping", method="GET", path="ping"))

    expected = base64.b64encode(b"svc:pw").decode("ascii")
    assert calls[0]["headers"]["Authorization"] == f"Basic {expected}"


def test_execute_raises_on_error_status():
    calls: list[dict[str, Any]] = []
    client = _build_client(calls, _connector(), response=DummyResponse(404, payload={"message": "Unknown customer"}))

    with pytest.raises(DataConnectorError) as excinfo:
        client.execute(DataConnectorEndpoint(name="getCustomer", method="GET", path="customers/1"))

    assert "404" in str(excinfo.value)
    assert "Unknown customer" in str(excinfo.value)


def test_execute_wraps_transport_errors():
    calls: list[dict[str, Any]] = []
    client = _build_client(calls, _connector(), response=requests.ConnectionError("connection refused"))

    with pytest.raises(DataConnectorError) as excinfo:
        client.execute(DataConnectorEndpoint(name="ping", method="GET", path="ping"))

    assert "connection refused" in str(excinfo.value)


def test_execute_returns_text_when_body_is_not_json():
    calls: list[dict[str, Any]] = []
    client = _build_client(calls, _connector(), response=DummyResponse(200, text="pong"))

    result = client.execute(DataConnectorEndpoint(name="ping", method="GET", path="ping"))

    assert result.payload == "pong"
