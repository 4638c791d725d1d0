from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import ListCanceled
from app.schemas import (
    CanceledListPurgeRequest,
    CanceledListPurgeResult,
    ListCanceledList,
    ListCanceledRead,
)
from app.services.canceled_list_retention import purge_canceled_before
from app.services.pagination import ListParams, list_params, paginate

router = APIRouter(prefix="/canceled-requests", tags=["Canceled Requests"])

_SORTABLE = {
    "app_number": ListCanceled.app_number,
    "app_title": ListCanceled.app_title,
    "app_canceled_date": ListCanceled.app_canceled_date,
    "del_delegate_date": ListCanceled.del_delegate_date,
    "del_priority": ListCanceled.del_priority,
}
_SEARCHABLE = (ListCanceled.app_title, ListCanceled.app_pro_title, ListCanceled.app_tas_title)


@router.get("", response_model=ListCanceledList)
def list_canceled_requests(
    params: ListParams = Depends(list_params),
    user_uid: Optional[str] = Query(None, max_length=32),
    process_uid: Optional[str] = Query(None, max_length=32),
    task_uid: Optional[str] = Query(None, max_length=32),
    db: Session = Depends(get_db),
) -> ListCanceledList:
    query = db.query(ListCanceled)
    if user_uid:
        query = query.filter(ListCanceled.usr_uid == user_uid)
    if process_uid:
        query = query.filter(ListCanceled.pro_uid == process_uid)
    if task_uid:
        query = query.filter(ListCanceled.tas_uid == task_uid)

    items, meta = paginate(
        query,
        params,
        sortable=_SORTABLE,
        default_sort="app_canceled_date",
        default_direction="DESC",
        searchable=_SEARCHABLE,
        tiebreaker=ListCanceled.app_uid,
    )
    return ListCanceledList(data=[ListCanceledRead.from_orm(item) for item in items], meta=meta)


@router.get("/{app_uid}", response_model=ListCanceledRead)
def get_canceled_request(app_uid: str, db: Session = Depends(get_db)) -> ListCanceledRead:
    row = db.get(ListCanceled, app_uid)
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Canceled request not found")
    return row


@router.post("/purge", response_model=CanceledListPurgeResult)
def purge_canceled_requests(
    payload: CanceledListPurgeRequest, db: Session = Depends(get_db)
) -> CanceledListPurgeResult:
    deleted = purge_canceled_before(db, payload.canceled_before)
    db.commit()
    return CanceledListPurgeResult(deleted=deleted)
