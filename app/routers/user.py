from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import Delegation, ProcessRequest, User
from app.schemas import UserCreate, UserList, UserRead, UserUpdate
from app.services.pagination import ListParams, list_params, paginate

router = APIRouter(prefix="/users", tags=["Users"])

_SORTABLE = {
    "username": User.username,
    "firstname": User.firstname,
    "lastname": User.lastname,
    "email": User.email,
    "status": User.status,
    "created_at": User.created_at,
}


def get_user_or_404(user_uuid: UUID, db: Session) -> User:
    user = db.query(User).filter(User.uuid == user_uuid).one_or_none()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def _ensure_unique(field, value: str | None, label: str, db: Session, user_id: int | None = None) -> None:
    if not value:
        return
    query = db.query(User).filter(field == value)
    if user_id:
        query = query.filter(User.id != user_id)
    if db.query(query.exists()).scalar():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"The {label} has already been taken.",
        )


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: Session = Depends(get_db)) -> UserRead:
    _ensure_unique(User.username, payload.username, "username", db)
    _ensure_unique(User.email, payload.email, "email", db)

    user = User(**payload.dict())
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@router.get("", response_model=UserList)
def list_users(
    params: ListParams = Depends(list_params), db: Session = Depends(get_db)
) -> UserList:
    items, meta = paginate(
        db.query(User),
        params,
        sortable=_SORTABLE,
        default_sort="username",
        searchable=(User.username, User.firstname, User.lastname, User.email),
        tiebreaker=User.id,
    )
    return UserList(data=[UserRead.from_orm(item) for item in items], meta=meta)


@router.get("/{user_uuid}", response_model=UserRead)
def get_user(user_uuid: UUID, db: Session = Depends(get_db)) -> UserRead:
    return get_user_or_404(user_uuid, db)


@router.put("/{user_uuid}", response_model=UserRead)
def update_user(user_uuid: UUID, payload: UserUpdate, db: Session = Depends(get_db)) -> UserRead:
    user = get_user_or_404(user_uuid, db)

    update_data = payload.dict(exclude_unset=True)
    if "username" in update_data:
        _ensure_unique(User.username, update_data["username"], "username", db, user_id=user.id)
    if "email" in update_data:
        _ensure_unique(User.email, update_data["email"], "email", db, user_id=user.id)

    for field, value in update_data.items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)
    return user


@router.delete("/{user_uuid}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_uuid: UUID, db: Session = Depends(get_db)) -> None:
    user = get_user_or_404(user_uuid, db)

    in_use = db.query(
        db.query(Delegation)
        .filter(or_(Delegation.user_id == user.id, Delegation.previous_user_id == user.id))
        .exists()
    ).scalar() or db.query(db.query(ProcessRequest).filter(ProcessRequest.user_id == user.id).exists()).scalar()
    if in_use:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="The user participates in requests and cannot be deleted.",
        )

    db.delete(user)
    db.commit()
