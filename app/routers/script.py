from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import Process, Script
from app.routers.process import get_process_or_404
from app.schemas import ScriptCreate, ScriptList, ScriptRead, ScriptUpdate
from app.services.pagination import ListParams, list_params, paginate

router = APIRouter(tags=["Scripts"])

_SORTABLE = {
    "title": Script.title,
    "description": Script.description,
    "language": Script.language,
    "created_at": Script.created_at,
    "updated_at": Script.updated_at,
}
_SEARCHABLE = (Script.title, Script.description, Script.language)


def _get_script_or_404(script_uuid: UUID, db: Session, process: Optional[Process] = None) -> Script:
    """Unscoped lookups reach every script; with ``process`` the script must belong to it."""
    script = db.query(Script).filter(Script.uuid == script_uuid).one_or_none()
    if not script:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Script not found")
    if process is not None and script.process_id != process.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="The script does not belong to this process",
        )
    return script


def _ensure_unique_title(title: str, db: Session, script_id: int | None = None) -> None:
    query = db.query(Script).filter(Script.title == title)
    if script_id is not None:
        query = query.filter(Script.id != script_id)
    if db.query(query.exists()).scalar():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="The title has already been taken.",
        )


def _create_script(payload: ScriptCreate, db: Session, process: Optional[Process] = None) -> Script:
    _ensure_unique_title(payload.title, db)

    script = Script(**payload.dict(), process=process)
    db.add(script)
    db.commit()
    db.refresh(script)
    return script


def _list_scripts(params: ListParams, db: Session, process: Optional[Process] = None) -> ScriptList:
    query = db.query(Script)
    if process is not None:
        query = query.filter(Script.process_id == process.id)
    items, meta = paginate(
        query,
        params,
        sortable=_SORTABLE,
        default_sort="title",
        searchable=_SEARCHABLE,
        tiebreaker=Script.id,
    )
    return ScriptList(data=[ScriptRead.from_orm(item) for item in items], meta=meta)


def _update_script(script: Script, payload: ScriptUpdate, db: Session) -> None:
    update_data = payload.dict(exclude_unset=True)
    if "title" in update_data:
        _ensure_unique_title(update_data["title"], db, script_id=script.id)

    for field, value in update_data.items():
        setattr(script, field, value)

    db.commit()


def _delete_script(script: Script, db: Session) -> None:
    db.delete(script)
    db.commit()


@router.post("/scripts", response_model=ScriptRead, status_code=status.HTTP_201_CREATED)
def create_script(payload: ScriptCreate, db: Session = Depends(get_db)) -> ScriptRead:
    return _create_script(payload, db)


@router.get("/scripts", response_model=ScriptList)
def list_scripts(
    params: ListParams = Depends(list_params), db: Session = Depends(get_db)
) -> ScriptList:
    return _list_scripts(params, db)


@router.get("/scripts/{script_uuid}", response_model=ScriptRead)
def get_script(script_uuid: UUID, db: Session = Depends(get_db)) -> ScriptRead:
    return _get_script_or_404(script_uuid, db)


@router.put("/scripts/{script_uuid}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def update_script(
    script_uuid: UUID, payload: ScriptUpdate, db: Session = Depends(get_db)
) -> None:
    script = _get_script_or_404(script_uuid, db)
    _update_script(script, payload, db)


@router.delete("/scripts/{script_uuid}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_script(script_uuid: UUID, db: Session = Depends(get_db)) -> None:
    _delete_script(_get_script_or_404(script_uuid, db), db)


@router.post(
    "/processes/{process_uuid}/scripts",
    response_model=ScriptRead,
    status_code=status.HTTP_201_CREATED,
)
def create_process_script(
    process_uuid: UUID, payload: ScriptCreate, db: Session = Depends(get_db)
) -> ScriptRead:
    process = get_process_or_404(process_uuid, db)
    return _create_script(payload, db, process=process)


@router.get("/processes/{process_uuid}/scripts", response_model=ScriptList)
def list_process_scripts(
    process_uuid: UUID,
    params: ListParams = Depends(list_params),
    db: Session = Depends(get_db),
) -> ScriptList:
    process = get_process_or_404(process_uuid, db)
    return _list_scripts(params, db, process=process)


@router.get("/processes/{process_uuid}/scripts/{script_uuid}", response_model=ScriptRead)
def get_process_script(
    process_uuid: UUID, script_uuid: UUID, db: Session = Depends(get_db)
) -> ScriptRead:
    process = get_process_or_404(process_uuid, db)
    return _get_script_or_404(script_uuid, db, process=process)


@router.put(
    "/processes/{process_uuid}/scripts/{script_uuid}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def update_process_script(
    process_uuid: UUID, script_uuid: UUID, payload: ScriptUpdate, db: Session = Depends(get_db)
) -> None:
    process = get_process_or_404(process_uuid, db)
    script = _get_script_or_404(script_uuid, db, process=process)
    _update_script(script, payload, db)


@router.delete(
    "/processes/{process_uuid}/scripts/{script_uuid}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def delete_process_script(
    process_uuid: UUID, script_uuid: UUID, db: Session = Depends(get_db)
) -> None:
    process = get_process_or_404(process_uuid, db)
    _delete_script(_get_script_or_404(script_uuid, db, process=process), db)
