from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import Delegation, Process, Task
from app.schemas import (
    ProcessCreate,
    ProcessList,
    ProcessRead,
    ProcessUpdate,
    TaskCreate,
    TaskList,
    TaskRead,
    TaskUpdate,
)
from app.services.pagination import ListParams, list_params, paginate

router = APIRouter(prefix="/processes", tags=["Processes"])

_SORTABLE = {
    "name": Process.name,
    "status": Process.status,
    "created_at": Process.created_at,
    "updated_at": Process.updated_at,
}
_TASK_SORTABLE = {
    "position": Task.position,
    "name": Task.name,
    "due_in_hours": Task.due_in_hours,
    "created_at": Task.created_at,
}


def get_process_or_404(process_uuid: UUID, db: Session) -> Process:
    process = db.query(Process).filter(Process.uuid == process_uuid).one_or_none()
    if not process:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Process not found")
    return process


def _get_task_or_404(process: Process, task_uuid: UUID, db: Session) -> Task:
    task = (
        db.query(Task)
        .filter(Task.uuid == task_uuid, Task.process_id == process.id)
        .one_or_none()
    )
    if not task:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return task


def _ensure_unique_name(name: str, db: Session, process_id: int | None = None) -> None:
    query = db.query(Process).filter(Process.name == name)
    if process_id is not None:
        query = query.filter(Process.id != process_id)
    if db.query(query.exists()).scalar():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="The name has already been taken.",
        )


@router.post("", response_model=ProcessRead, status_code=status.HTTP_201_CREATED)
def create_process(payload: ProcessCreate, db: Session = Depends(get_db)) -> ProcessRead:
    _ensure_unique_name(payload.name, db)

    process = Process(**payload.dict())
    db.add(process)
    db.commit()
    db.refresh(process)
    return process


@router.get("", response_model=ProcessList)
def list_processes(
    params: ListParams = Depends(list_params), db: Session = Depends(get_db)
) -> ProcessList:
    items, meta = paginate(
        db.query(Process),
        params,
        sortable=_SORTABLE,
        default_sort="name",
        searchable=(Process.name, Process.description),
        tiebreaker=Process.id,
    )
    return ProcessList(data=[ProcessRead.from_orm(item) for item in items], meta=meta)


@router.get("/{process_uuid}", response_model=ProcessRead)
def get_process(process_uuid: UUID, db: Session = Depends(get_db)) -> ProcessRead:
    return get_process_or_404(process_uuid, db)


@router.put("/{process_uuid}", response_model=ProcessRead)
def update_process(
    process_uuid: UUID, payload: ProcessUpdate, db: Session = Depends(get_db)
) -> ProcessRead:
    process = get_process_or_404(process_uuid, db)

    update_data = payload.dict(exclude_unset=True)
    if "name" in update_data:
        _ensure_unique_name(update_data["name"], db, process_id=process.id)

    for field, value in update_data.items():
        setattr(process, field, value)

    db.commit()
    db.refresh(process)
    return process


@router.delete("/{process_uuid}", status_code=status.HTTP_204_NO_CONTENT)
def delete_process(process_uuid: UUID, db: Session = Depends(get_db)) -> None:
    process = get_process_or_404(process_uuid, db)
    db.delete(process)
    db.commit()


@router.post("/{process_uuid}/tasks", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_task(
    process_uuid: UUID, payload: TaskCreate, db: Session = Depends(get_db)
) -> TaskRead:
    process = get_process_or_404(process_uuid, db)

    task = Task(**payload.dict(), process=process)
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


@router.get("/{process_uuid}/tasks", response_model=TaskList)
def list_tasks(
    process_uuid: UUID,
    params: ListParams = Depends(list_params),
    db: Session = Depends(get_db),
) -> TaskList:
    process = get_process_or_404(process_uuid, db)
    items, meta = paginate(
        db.query(Task).filter(Task.process_id == process.id),
        params,
        sortable=_TASK_SORTABLE,
        default_sort="position",
        searchable=(Task.name, Task.description),
        tiebreaker=Task.id,
    )
    return TaskList(data=[TaskRead.from_orm(item) for item in items], meta=meta)


@router.get("/{process_uuid}/tasks/{task_uuid}", response_model=TaskRead)
def get_task(process_uuid: UUID, task_uuid: UUID, db: Session = Depends(get_db)) -> TaskRead:
    process = get_process_or_404(process_uuid, db)
    return _get_task_or_404(process, task_uuid, db)


@router.put("/{process_uuid}/tasks/{task_uuid}", response_model=TaskRead)
def update_task(
    process_uuid: UUID, task_uuid: UUID, payload: TaskUpdate, db: Session = Depends(get_db)
) -> TaskRead:
    process = get_process_or_404(process_uuid, db)
    task = _get_task_or_404(process, task_uuid, db)

    for field, value in payload.dict(exclude_unset=True).items():
        setattr(task, field, value)

    db.commit()
    db.refresh(task)
    return task


@router.delete("/{process_uuid}/tasks/{task_uuid}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(process_uuid: UUID, task_uuid: UUID, db: Session = Depends(get_db)) -> None:
    process = get_process_or_404(process_uuid, db)
    task = _get_task_or_404(process, task_uuid, db)

    if db.query(db.query(Delegation).filter(Delegation.task_id == task.id).exists()).scalar():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="The task has delegations and cannot be deleted.",
        )

    db.delete(task)
    db.commit()
