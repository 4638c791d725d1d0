from typing import Any, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import ProcessRequest
from app.routers.data_connector import get_client_factory
from app.routers.process import get_process_or_404
from app.routers.user import get_user_or_404
from app.schemas import (
    DataConnectorElementConfig,
    RequestCreate,
    RequestDelegate,
    RequestDetail,
    RequestList,
    RequestRead,
    RequestStatus,
)
from app.services.data_connector_client import DataConnectorError
from app.services.data_connector_runner import (
    ClientFactory,
    DataConnectorConfigurationError,
    run_data_connector_element,
)
from app.services.pagination import ListParams, list_params, paginate
from app.services.request_lifecycle import (
    RequestStateError,
    cancel_request,
    complete_request,
    delegate_request,
    start_request,
)

router = APIRouter(prefix="/requests", tags=["Requests"])

_SORTABLE = {
    "id": ProcessRequest.id,
    "title": ProcessRequest.title,
    "status": ProcessRequest.status,
    "initiated_at": ProcessRequest.initiated_at,
    "completed_at": ProcessRequest.completed_at,
    "canceled_at": ProcessRequest.canceled_at,
}


def _get_request_or_404(request_uuid: UUID, db: Session) -> ProcessRequest:
    request = db.query(ProcessRequest).filter(ProcessRequest.uuid == request_uuid).one_or_none()
    if not request:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Request not found")
    return request


def _unprocessable(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))


@router.post("", response_model=RequestDetail, status_code=status.HTTP_201_CREATED)
def create_request(payload: RequestCreate, db: Session = Depends(get_db)) -> RequestDetail:
    process = get_process_or_404(payload.process_uuid, db)
    user = get_user_or_404(payload.user_uuid, db)

    try:
        request = start_request(
            db,
            process=process,
            user=user,
            title=payload.title,
            data=payload.data,
            priority=payload.priority,
        )
    except RequestStateError as exc:
        db.rollback()
        raise _unprocessable(exc) from exc

    db.commit()
    db.refresh(request)
    return request


@router.get("", response_model=RequestList)
def list_requests(
    params: ListParams = Depends(list_params),
    request_status: Optional[RequestStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
) -> RequestList:
    query = db.query(ProcessRequest)
    if request_status is not None:
        query = query.filter(ProcessRequest.status == request_status.value)
    items, meta = paginate(
        query,
        params,
        sortable=_SORTABLE,
        default_sort="id",
        default_direction="DESC",
        searchable=(ProcessRequest.title,),
    )
    return RequestList(data=[RequestRead.from_orm(item) for item in items], meta=meta)


@router.get("/{request_uuid}", response_model=RequestDetail)
def get_request(request_uuid: UUID, db: Session = Depends(get_db)) -> RequestDetail:
    return _get_request_or_404(request_uuid, db)


@router.post("/{request_uuid}/delegate", response_model=RequestDetail)
def delegate(
    request_uuid: UUID, payload: RequestDelegate, db: Session = Depends(get_db)
) -> RequestDetail:
    request = _get_request_or_404(request_uuid, db)
    user = get_user_or_404(payload.user_uuid, db)
    task = next((item for item in request.process.tasks if item.uuid == payload.task_uuid), None)
    if task is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="The task does not belong to the request's process.",
        )

    try:
        delegate_request(db, request, task=task, user=user, priority=payload.priority)
    except RequestStateError as exc:
        db.rollback()
        raise _unprocessable(exc) from exc

    db.commit()
    db.refresh(request)
    return request


@router.post("/{request_uuid}/complete", response_model=RequestDetail)
def complete(request_uuid: UUID, db: Session = Depends(get_db)) -> RequestDetail:
    request = _get_request_or_404(request_uuid, db)
    try:
        complete_request(db, request)
    except RequestStateError as exc:
        db.rollback()
        raise _unprocessable(exc) from exc

    db.commit()
    db.refresh(request)
    return request


@router.post("/{request_uuid}/cancel", response_model=RequestDetail)
def cancel(request_uuid: UUID, db: Session = Depends(get_db)) -> RequestDetail:
    request = _get_request_or_404(request_uuid, db)
    try:
        cancel_request(db, request)
    except RequestStateError as exc:
        db.rollback()
        raise _unprocessable(exc) from exc

    db.commit()
    db.refresh(request)
    return request


@router.post("/{request_uuid}/data-connector", response_model=dict[str, Any])
def run_data_connector(
    request_uuid: UUID,
    config: DataConnectorElementConfig,
    db: Session = Depends(get_db),
    client_factory: ClientFactory = Depends(get_client_factory),
) -> dict[str, Any]:
    request = _get_request_or_404(request_uuid, db)
    try:
        data = run_data_connector_element(db, request, config, client_factory=client_factory)
    except (RequestStateError, DataConnectorConfigurationError) as exc:
        db.rollback()
        raise _unprocessable(exc) from exc
    except DataConnectorError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    db.commit()
    return data
