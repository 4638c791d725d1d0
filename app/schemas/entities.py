from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, validator
from pydantic.fields import ModelField

from app.schemas.pagination import ListMeta


def _require_text(value: Any, label: str) -> str:
    if value is None or not str(value).strip():
        raise ValueError(f"The {label} field is required.")
    return str(value).strip()


def reject_null(value: Any, field: ModelField) -> Any:
    """Partial updates may omit a field but may not clear a non-nullable column."""
    if value is None:
        raise ValueError(f"The {field.name} field may not be null.")
    return value


class InputSchema(BaseModel):
    class Config:
        use_enum_values = True


class TimestampSchema(BaseModel):
    created_at: datetime
    updated_at: datetime

    class Config:
        orm_mode = True


class ActivityStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class UserBase(InputSchema):
    username: str = Field(..., min_length=1, max_length=100)
    firstname: str = Field("", max_length=50)
    lastname: str = Field("", max_length=50)
    email: Optional[EmailStr] = None
    status: ActivityStatus = ActivityStatus.ACTIVE.value


class UserCreate(UserBase):
    pass


class UserUpdate(InputSchema):
    username: Optional[str] = Field(None, min_length=1, max_length=100)
    firstname: Optional[str] = Field(None, max_length=50)
    lastname: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    status: Optional[ActivityStatus] = None

    _not_null = validator("username", "firstname", "lastname", "status", pre=True, allow_reuse=True)(reject_null)


class UserRead(UserBase, TimestampSchema):
    id: int
    uuid: UUID


class UserList(BaseModel):
    data: list[UserRead]
    meta: ListMeta


class ProcessBase(InputSchema):
    name: str = Field(..., max_length=200)
    description: Optional[str] = None
    status: ActivityStatus = ActivityStatus.ACTIVE.value

    @validator("name", pre=True)
    def name_not_blank(cls, value):
        return _require_text(value, "name")


class ProcessCreate(ProcessBase):
    pass


class ProcessUpdate(InputSchema):
    name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    status: Optional[ActivityStatus] = None

    _not_null = validator("status", pre=True, allow_reuse=True)(reject_null)

    @validator("name", pre=True)
    def name_not_blank(cls, value):
        return _require_text(value, "name")


class ProcessRead(ProcessBase, TimestampSchema):
    id: int
    uuid: UUID


class ProcessList(BaseModel):
    data: list[ProcessRead]
    meta: ListMeta


class TaskBase(InputSchema):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    due_in_hours: int = Field(72, ge=0)
    position: int = Field(0, ge=0)


class TaskCreate(TaskBase):
    pass


class TaskUpdate(InputSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    due_in_hours: Optional[int] = Field(None, ge=0)
    position: Optional[int] = Field(None, ge=0)

    _not_null = validator("name", "due_in_hours", "position", pre=True, allow_reuse=True)(reject_null)


class TaskRead(TaskBase, TimestampSchema):
    id: int
    uuid: UUID
    process_uuid: UUID


class TaskList(BaseModel):
    data: list[TaskRead]
    meta: ListMeta


class ScriptLanguage(str, Enum):
    PHP = "php"
    LUA = "lua"
    JAVASCRIPT = "javascript"
    PYTHON = "python"


class ScriptBase(InputSchema):
    title: str = Field(..., max_length=255)
    description: str
    language: ScriptLanguage
    code: str = ""

    @validator("title", pre=True)
    def title_not_blank(cls, value):
        return _require_text(value, "title")

    @validator("description", pre=True)
    def description_not_blank(cls, value):
        return _require_text(value, "description")


class ScriptCreate(ScriptBase):
    pass


class ScriptUpdate(InputSchema):
    """Partial update; only the fields present in the payload are applied."""

    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    language: Optional[ScriptLanguage] = None
    code: Optional[str] = None

    _not_null = validator("description", "language", "code", pre=True, allow_reuse=True)(reject_null)

    @validator("title", pre=True)
    def title_not_blank(cls, value):
        return _require_text(value, "title")


class ScriptRead(TimestampSchema):
    uuid: UUID
    title: str
    description: Optional[str] = None
    language: ScriptLanguage
    code: str
    process_uuid: Optional[UUID] = None


class ScriptList(BaseModel):
    data: list[ScriptRead]
    meta: ListMeta


class RequestStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"


class DelegationPriority(str, Enum):
    VERY_LOW = "1"
    LOW = "2"
    NORMAL = "3"
    HIGH = "4"
    VERY_HIGH = "5"


class RequestCreate(InputSchema):
    process_uuid: UUID
    user_uuid: UUID
    title: Optional[str] = None
    data: dict[str, Any] = Field(default_factory=dict)
    priority: DelegationPriority = DelegationPriority.NORMAL.value


class RequestDelegate(InputSchema):
    task_uuid: UUID
    user_uuid: UUID
    priority: Optional[DelegationPriority] = None


class DelegationRead(BaseModel):
    index: int
    task_uuid: UUID
    user_uuid: UUID
    previous_user_uuid: Optional[UUID] = None
    delegated_at: datetime
    initiated_at: Optional[datetime] = None
    due_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    priority: str
    thread_status: str

    class Config:
        orm_mode = True


class RequestRead(TimestampSchema):
    id: int
    uuid: UUID
    number: int
    process_uuid: UUID
    user_uuid: UUID
    title: Optional[str] = None
    status: RequestStatus
    data: dict[str, Any]
    initiated_at: datetime
    completed_at: Optional[datetime] = None
    canceled_at: Optional[datetime] = None


class RequestDetail(RequestRead):
    delegations: list[DelegationRead] = Field(default_factory=list)


class RequestList(BaseModel):
    data: list[RequestRead]
    meta: ListMeta
