from http import HTTPStatus
from typing import Any

import pytest

from app.main import app
from app.models import ProcessRequest
from app.routers.data_connector import get_client_factory
from app.services.data_connector_client import DataConnectorError, DataConnectorResponse


class FakeClient:
    def __init__(self, calls: list[dict[str, Any]], payload: Any, error: Exception | None = None):
        self._calls = calls
        self._payload = payload
        self._error = error

    def execute(self, endpoint, data=None):
        self._calls.append({"endpoint": endpoint.name, "data": dict(data or {})})
        if self._error is not None:
            raise self._error
        return DataConnectorResponse(status=200, payload=self._payload)


@pytest.fixture()
def connector_calls():
    calls: list[dict[str, Any]] = []
    state: dict[str, Any] = {"payload": {"customer": {"id": 7, "tier": "gold"}}, "error": None}

    def _factory():
        return lambda connector: FakeClient(calls, state["payload"], state["error"])

    app.dependency_overrides[get_client_factory] = _factory
    try:
        yield calls, state
    finally:
        app.dependency_overrides.pop(get_client_factory, None)


def _create_connector(client, **overrides):
    payload = {"name": "CRM", "base_url": "https://crm.example.com/api"}
    payload.update(overrides)
    response = client.post("/data-connectors", json=payload)
    assert response.status_code == HTTPStatus.CREATED, response.json()
    return response.json()


def _create_endpoint(client, connector, **overrides):
    payload = {"name": "getCustomer", "method": "GET", "path": "customers/{{ customerId }}"}
    payload.update(overrides)
    response = client.post(f"/data-connectors/{connector['uuid']}/endpoints", json=payload)
    assert response.status_code == HTTPStatus.CREATED, response.json()
    return response.json()


def test_connector_crud_flow(client):
    connector = _create_connector(
        client, auth_type="bearer", credentials={"token": "secret"}, headers={"X-Tenant": "acme"}
    )
    assert connector["auth_type"] == "bearer"
    assert "credentials" not in connector

    duplicate = client.post("/data-connectors", json={"name": "CRM", "base_url": "https://other.example.com"})
    assert duplicate.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    assert duplicate.json()["message"] == "The name has already been taken."

    listing = client.get("/data-connectors").json()
    assert listing["meta"]["total"] == 1

    update_resp = client.put(f"/data-connectors/{connector['uuid']}", json={"description": "Customer records"})
    assert update_resp.status_code == HTTPStatus.OK
    assert update_resp.json()["description"] == "Customer records"

    assert client.delete(f"/data-connectors/{connector['uuid']}").status_code == HTTPStatus.NO_CONTENT
    assert client.get(f"/data-connectors/{connector['uuid']}").status_code == HTTPStatus.NOT_FOUND


def test_connector_validation(client):
    bad_url = client.post("/data-connectors", json={"name": "Bad", "base_url": "ftp://files"})
    assert bad_url.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    assert "base_url" in bad_url.json()["errors"]

    missing_token = client.post(
        "/data-connectors",
        json={"name": "NoToken", "base_url": "https://api.example.com", "auth_type": "bearer"},
    )
    assert missing_token.status_code == HTTPStatus.UNPROCESSABLE_ENTITY

    connector = _create_connector(client)
    switch_auth = client.put(f"/data-connectors/{connector['uuid']}", json={"auth_type": "basic"})
    assert switch_auth.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    assert switch_auth.json()["message"] == "Basic authentication requires a username credential."


def test_endpoint_crud_flow(client):
    connector = _create_connector(client)
    endpoint = _create_endpoint(client, connector)
    assert endpoint["method"] == "GET"

    duplicate = client.post(
        f"/data-connectors/{connector['uuid']}/endpoints", json={"name": "getCustomer"}
    )
    assert duplicate.status_code == HTTPStatus.UNPROCESSABLE_ENTITY

    update_resp = client.put(
        f"/data-connectors/{connector['uuid']}/endpoints/{endpoint['id']}", json={"method": "POST"}
    )
    assert update_resp.status_code == HTTPStatus.OK
    assert update_resp.json()["method"] == "POST"

    listing = client.get(f"/data-connectors/{connector['uuid']}/endpoints").json()
    assert [item["name"] for item in listing] == ["getCustomer"]

    delete_resp = client.delete(f"/data-connectors/{connector['uuid']}/endpoints/{endpoint['id']}")
    assert delete_resp.status_code == HTTPStatus.NO_CONTENT
    assert (
        client.get(f"/data-connectors/{connector['uuid']}/endpoints/{endpoint['id']}").status_code
        == HTTPStatus.NOT_FOUND
    )


def test_execute_endpoint(client, connector_calls):
    calls, _ = connector_calls
    connector = _create_connector(client)
    _create_endpoint(client, connector)

    response = client.post(
        f"/data-connectors/{connector['uuid']}/endpoints/getCustomer/execute",
        json={"data": {"customerId": 7}},
    )
    assert response.status_code == HTTPStatus.OK
    assert response.json() == {"status": 200, "response": {"customer": {"id": 7, "tier": "gold"}}}
    assert calls == [{"endpoint": "getCustomer", "data": {"customerId": 7}}]


def test_execute_unknown_endpoint(client, connector_calls):
    connector = _create_connector(client)

    response = client.post(f"/data-connectors/{connector['uuid']}/endpoints/missing/execute", json={})
    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    assert "missing" in response.json()["message"]


def test_execute_upstream_failure(client, connector_calls):
    _, state = connector_calls
    state["error"] = DataConnectorError("responded with 500")
    connector = _create_connector(client)
    _create_endpoint(client, connector)

    response = client.post(f"/data-connectors/{connector['uuid']}/endpoints/getCustomer/execute", json={})
    assert response.status_code == HTTPStatus.BAD_GATEWAY
    assert response.json() == {"message": "responded with 500"}


def test_data_connector_element_merges_mapping_into_request(client, db_session, connector_calls, user, process):
    calls, _ = connector_calls
    connector = _create_connector(client)
    _create_endpoint(client, connector)
    started = client.post(
        "/requests",
        json={
            "process_uuid": str(process.uuid),
            "user_uuid": str(user.uuid),
            "data": {"customerId": 7, "tier": "unknown"},
        },
    ).json()

    response = client.post(
        f"/requests/{started['uuid']}/data-connector",
        json={
            "name": "Load customer",
            "connector": connector["uuid"],
            "endpoint": "getCustomer",
            "data_mapping": [
                {"key": "tier", "value": "customer.tier"},
                {"key": "customerRecord", "value": "customer"},
            ],
        },
    )
    assert response.status_code == HTTPStatus.OK
    merged = response.json()
    assert merged == {
        "customerId": 7,
        "tier": "gold",
        "customerRecord": {"id": 7, "tier": "gold"},
    }
    assert list(merged) == ["customerId", "tier", "customerRecord"]
    assert calls[0]["data"] == {"customerId": 7, "tier": "unknown"}

    stored = db_session.query(ProcessRequest).one()
    db_session.refresh(stored)
    assert stored.data == merged


def test_data_connector_element_with_unknown_connector(client, connector_calls, user, process):
    started = client.post(
        "/requests",
        json={"process_uuid": str(process.uuid), "user_uuid": str(user.uuid)},
    ).json()

    response = client.post(
        f"/requests/{started['uuid']}/data-connector",
        json={
            "name": "Load customer",
            "connector": "00000000-0000-0000-0000-000000000000",
            "endpoint": "getCustomer",
        },
    )
    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    assert response.json()["message"] == "The selected data connector does not exist."


def test_data_connector_element_on_canceled_request(client, connector_calls, user, process):
    connector = _create_connector(client)
    _create_endpoint(client, connector)
    started = client.post(
        "/requests",
        json={"process_uuid": str(process.uuid), "user_uuid": str(user.uuid)},
    ).json()
    client.post(f"/requests/{started['uuid']}/cancel")

    response = client.post(
        f"/requests/{started['uuid']}/data-connector",
        json={"name": "Load customer", "connector": connector["uuid"], "endpoint": "getCustomer"},
    )
    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    assert not connector_calls[0]


def test_connector_update_rejects_null_for_required_columns(client):
    connector = _create_connector(client)

    for field in ("name", "base_url", "auth_type", "status"):
        response = client.put(f"/data-connectors/{connector['uuid']}", json={field: None})
        assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
        assert response.json()["errors"][field] == [f"The {field} field may not be null."]


def test_endpoint_update_rejects_null_for_required_columns(client):
    connector = _create_connector(client)
    endpoint = _create_endpoint(client, connector)

    for field in ("name", "method", "path"):
        response = client.put(
            f"/data-connectors/{connector['uuid']}/endpoints/{endpoint['id']}", json={field: None}
        )
        assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
        assert field in response.json()["errors"]

    description = client.put(
        f"/data-connectors/{connector['uuid']}/endpoints/{endpoint['id']}", json={"description": None}
    )
    assert description.status_code == HTTPStatus.OK
