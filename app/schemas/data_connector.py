from enum import Enum
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field, root_validator, validator

from app.schemas.entities import ActivityStatus, InputSchema, TimestampSchema, reject_null
from app.schemas.pagination import ListMeta


class ConnectorAuthType(str, Enum):
    NONE = "none"
    BEARER = "bearer"
    BASIC = "basic"


class EndpointMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


def _normalize_base_url(value: str) -> str:
    stripped = value.strip()
    if not stripped.startswith(("http://", "https://")):
        raise ValueError("Base URL must start with http:// or https://")
    return stripped


def check_credentials(auth_type: Optional[ConnectorAuthType], credentials: Optional[dict[str, Any]]) -> None:
    credentials = credentials or {}
    if auth_type == ConnectorAuthType.BEARER and not credentials.get("token"):
        raise ValueError("Bearer authentication requires a token credential.")
    if auth_type == ConnectorAuthType.BASIC and not credentials.get("username"):
        raise ValueError("Basic authentication requires a username credential.")


class DataConnectorBase(InputSchema):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    base_url: str = Field(..., max_length=500)
    auth_type: ConnectorAuthType = ConnectorAuthType.NONE.value
    credentials: Optional[dict[str, Any]] = None
    headers: Optional[dict[str, str]] = None
    status: ActivityStatus = ActivityStatus.ACTIVE.value

    @validator("base_url")
    def base_url_is_http(cls, value: str) -> str:
        return _normalize_base_url(value)


class DataConnectorCreate(DataConnectorBase):
    @root_validator(skip_on_failure=True)
    def validate_credentials(cls, values):
        check_credentials(values.get("auth_type"), values.get("credentials"))
        return values


class DataConnectorUpdate(InputSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    base_url: Optional[str] = Field(None, max_length=500)
    auth_type: Optional[ConnectorAuthType] = None
    credentials: Optional[dict[str, Any]] = None
    headers: Optional[dict[str, str]] = None
    status: Optional[ActivityStatus] = None

    _not_null = validator("name", "base_url", "auth_type", "status", pre=True, allow_reuse=True)(reject_null)

    @validator("base_url")
    def base_url_is_http(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _normalize_base_url(value)


class DataConnectorRead(TimestampSchema):
    id: int
    uuid: UUID
    name: str
    description: Optional[str] = None
    base_url: str
    auth_type: ConnectorAuthType
    headers: Optional[dict[str, str]] = None
    status: ActivityStatus


class DataConnectorList(BaseModel):
    data: list[DataConnectorRead]
    meta: ListMeta


class EndpointBase(InputSchema):
    name: str = Field(..., min_length=1, max_length=100)
    method: EndpointMethod = EndpointMethod.GET.value
    path: str = Field("", max_length=500)
    query: Optional[dict[str, Any]] = None
    body: Optional[Any] = None
    description: Optional[str] = None


class EndpointCreate(EndpointBase):
    pass


class EndpointUpdate(InputSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    method: Optional[EndpointMethod] = None
    path: Optional[str] = Field(None, max_length=500)
    query: Optional[dict[str, Any]] = None
    body: Optional[Any] = None
    description: Optional[str] = None

    _not_null = validator("name", "method", "path", pre=True, allow_reuse=True)(reject_null)


class EndpointRead(EndpointBase, TimestampSchema):
    id: int


class EndpointExecuteRequest(BaseModel):
    data: dict[str, Any] = Field(default_factory=dict)


class EndpointExecuteResult(BaseModel):
    status: int
    response: Any = None


class DataMappingEntry(BaseModel):
    key: str = Field(..., min_length=1)
    value: str = ""


class DataConnectorElementConfig(BaseModel):
    """Settings of a Data Connector element placed in a process model."""

    name: str = Field(..., min_length=1)
    connector: UUID
    endpoint: str = Field(..., min_length=1)
    data_mapping: list[DataMappingEntry] = Field(default_factory=list)
