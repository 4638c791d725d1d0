from __future__ import annotations

import logging
from typing import Any, Callable

from sqlalchemy.orm import Session

from app.models import DataConnector, DataConnectorEndpoint, ProcessRequest
from app.schemas import DataConnectorElementConfig
from app.services.data_connector_client import DataConnectorClient, DataConnectorResponse
from app.services.data_mapping import map_response, merge_request_data
from app.services.request_lifecycle import STATUS_ACTIVE, RequestStateError

logger = logging.getLogger(__name__)

ClientFactory = Callable[[DataConnector], DataConnectorClient]


class DataConnectorConfigurationError(ValueError):
    """Raised when a connector or endpoint cannot be used as configured."""


def resolve_endpoint(connector: DataConnector, endpoint_name: str) -> DataConnectorEndpoint:
    if connector.status != "ACTIVE":
        raise DataConnectorConfigurationError(f"Data connector '{connector.name}' is inactive.")
    for endpoint in connector.endpoints:
        if endpoint.name == endpoint_name:
            return endpoint
    raise DataConnectorConfigurationError(
        f"Data connector '{connector.name}' has no endpoint named '{endpoint_name}'."
    )


def execute_endpoint(
    connector: DataConnector,
    endpoint_name: str,
    data: dict[str, Any] | None,
    *,
    client_factory: ClientFactory = DataConnectorClient,
) -> DataConnectorResponse:
    endpoint = resolve_endpoint(connector, endpoint_name)
    client = client_factory(connector)
    return client.execute(endpoint, data)


def run_data_connector_element(
    db: Session,
    request: ProcessRequest,
    config: DataConnectorElementConfig,
    *,
    client_factory: ClientFactory = DataConnectorClient,
) -> dict[str, Any]:
    """Call the configured endpoint and merge the mapped response into the request data."""

    if request.status != STATUS_ACTIVE:
        raise RequestStateError(
            f"Request #{request.id} is {request.status.lower()} and cannot run data connectors."
        )

    connector = db.query(DataConnector).filter(DataConnector.uuid == config.connector).one_or_none()
    if connector is None:
        raise DataConnectorConfigurationError("The selected data connector does not exist.")

    response = execute_endpoint(
        connector, config.endpoint, request.data, client_factory=client_factory
    )
    updates = map_response(response.payload, config.data_mapping)
    request.data = merge_request_data(request.data, updates)
    db.flush()

    logger.info(
        "Data connector element '%s' merged %s key(s) into request #%s",
        config.name,
        len(updates),
        request.id,
    )
    return request.data
