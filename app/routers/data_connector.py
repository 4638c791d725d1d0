from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import DataConnector, DataConnectorEndpoint
from app.schemas import (
    DataConnectorCreate,
    DataConnectorList,
    DataConnectorRead,
    DataConnectorUpdate,
    EndpointCreate,
    EndpointExecuteRequest,
    EndpointExecuteResult,
    EndpointRead,
    EndpointUpdate,
)
from app.schemas.data_connector import check_credentials
from app.services.data_connector_client import DataConnectorClient, DataConnectorError
from app.services.data_connector_runner import (
    ClientFactory,
    DataConnectorConfigurationError,
    execute_endpoint,
)
from app.services.pagination import ListParams, list_params, paginate

router = APIRouter(prefix="/data-connectors", tags=["Data Connectors"])

_SORTABLE = {
    "name": DataConnector.name,
    "status": DataConnector.status,
    "created_at": DataConnector.created_at,
    "updated_at": DataConnector.updated_at,
}


def get_client_factory() -> ClientFactory:
    return DataConnectorClient


def _get_connector_or_404(connector_uuid: UUID, db: Session) -> DataConnector:
    connector = db.query(DataConnector).filter(DataConnector.uuid == connector_uuid).one_or_none()
    if not connector:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Data connector not found")
    return connector


def _get_endpoint_or_404(connector: DataConnector, endpoint_id: int, db: Session) -> DataConnectorEndpoint:
    endpoint = db.get(DataConnectorEndpoint, endpoint_id)
    if not endpoint or endpoint.connector_id != connector.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Endpoint not found")
    return endpoint


def _ensure_unique_name(name: str, db: Session, connector_id: int | None = None) -> None:
    query = db.query(DataConnector).filter(DataConnector.name == name)
    if connector_id is not None:
        query = query.filter(DataConnector.id != connector_id)
    if db.query(query.exists()).scalar():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="The name has already been taken.",
        )


def _ensure_unique_endpoint_name(
    connector: DataConnector, name: str, endpoint_id: int | None = None
) -> None:
    for endpoint in connector.endpoints:
        if endpoint.name == name and endpoint.id != endpoint_id:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Endpoint '{name}' already exists on this connector.",
            )


@router.post("", response_model=DataConnectorRead, status_code=status.HTTP_201_CREATED)
def create_connector(payload: DataConnectorCreate, db: Session = Depends(get_db)) -> DataConnectorRead:
    _ensure_unique_name(payload.name, db)

    connector = DataConnector(**payload.dict())
    db.add(connector)
    db.commit()
    db.refresh(connector)
    return connector


@router.get("", response_model=DataConnectorList)
def list_connectors(
    params: ListParams = Depends(list_params), db: Session = Depends(get_db)
) -> DataConnectorList:
    items, meta = paginate(
        db.query(DataConnector),
        params,
        sortable=_SORTABLE,
        default_sort="name",
        searchable=(DataConnector.name, DataConnector.description, DataConnector.base_url),
        tiebreaker=DataConnector.id,
    )
    return DataConnectorList(data=[DataConnectorRead.from_orm(item) for item in items], meta=meta)


@router.get("/{connector_uuid}", response_model=DataConnectorRead)
def get_connector(connector_uuid: UUID, db: Session = Depends(get_db)) -> DataConnectorRead:
    return _get_connector_or_404(connector_uuid, db)


@router.put("/{connector_uuid}", response_model=DataConnectorRead)
def update_connector(
    connector_uuid: UUID, payload: DataConnectorUpdate, db: Session = Depends(get_db)
) -> DataConnectorRead:
    connector = _get_connector_or_404(connector_uuid, db)

    update_data = payload.dict(exclude_unset=True)
    if "name" in update_data:
        _ensure_unique_name(update_data["name"], db, connector_id=connector.id)

    try:
        check_credentials(
            update_data.get("auth_type", connector.auth_type),
            update_data.get("credentials", connector.credentials),
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    for field, value in update_data.items():
        setattr(connector, field, value)

    db.commit()
    db.refresh(connector)
    return connector


@router.delete("/{connector_uuid}", status_code=status.HTTP_204_NO_CONTENT)
def delete_connector(connector_uuid: UUID, db: Session = Depends(get_db)) -> None:
    connector = _get_connector_or_404(connector_uuid, db)
    db.delete(connector)
    db.commit()


@router.post(
    "/{connector_uuid}/endpoints",
    response_model=EndpointRead,
    status_code=status.HTTP_201_CREATED,
)
def create_endpoint(
    connector_uuid: UUID, payload: EndpointCreate, db: Session = Depends(get_db)
) -> EndpointRead:
    connector = _get_connector_or_404(connector_uuid, db)
    _ensure_unique_endpoint_name(connector, payload.name)

    endpoint = DataConnectorEndpoint(**payload.dict(), connector=connector)
    db.add(endpoint)
    db.commit()
    db.refresh(endpoint)
    return endpoint


@router.get("/{connector_uuid}/endpoints", response_model=list[EndpointRead])
def list_endpoints(connector_uuid: UUID, db: Session = Depends(get_db)) -> list[EndpointRead]:
    return _get_connector_or_404(connector_uuid, db).endpoints


@router.get("/{connector_uuid}/endpoints/{endpoint_id}", response_model=EndpointRead)
def get_endpoint(
    connector_uuid: UUID, endpoint_id: int, db: Session = Depends(get_db)
) -> EndpointRead:
    connector = _get_connector_or_404(connector_uuid, db)
    return _get_endpoint_or_404(connector, endpoint_id, db)


@router.put("/{connector_uuid}/endpoints/{endpoint_id}", response_model=EndpointRead)
def update_endpoint(
    connector_uuid: UUID,
    endpoint_id: int,
    payload: EndpointUpdate,
    db: Session = Depends(get_db),
) -> EndpointRead:
    connector = _get_connector_or_404(connector_uuid, db)
    endpoint = _get_endpoint_or_404(connector, endpoint_id, db)

    update_data = payload.dict(exclude_unset=True)
    if "name" in update_data:
        _ensure_unique_endpoint_name(connector, update_data["name"], endpoint_id=endpoint.id)

    for field, value in update_data.items():
        setattr(endpoint, field, value)

    db.commit()
    db.refresh(endpoint)
    return endpoint


@router.delete("/{connector_uuid}/endpoints/{endpoint_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_endpoint(connector_uuid: UUID, endpoint_id: int, db: Session = Depends(get_db)) -> None:
    connector = _get_connector_or_404(connector_uuid, db)
    endpoint = _get_endpoint_or_404(connector, endpoint_id, db)
    db.delete(endpoint)
    db.commit()


@router.post("/{connector_uuid}/endpoints/{endpoint_name}/execute", response_model=EndpointExecuteResult)
def execute(
    connector_uuid: UUID,
    endpoint_name: str,
    payload: EndpointExecuteRequest,
    db: Session = Depends(get_db),
    client_factory: ClientFactory = Depends(get_client_factory),
) -> EndpointExecuteResult:
    connector = _get_connector_or_404(connector_uuid, db)
    try:
        response = execute_endpoint(connector, endpoint_name, payload.data, client_factory=client_factory)
    except DataConnectorConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except DataConnectorError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    return EndpointExecuteResult(status=response.status, response=response.payload)
