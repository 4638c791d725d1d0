from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.pagination import ListMeta


class ListCanceledRead(BaseModel):
    app_uid: str = Field(..., alias="APP_UID")
    usr_uid: str = Field(..., alias="USR_UID")
    tas_uid: str = Field(..., alias="TAS_UID")
    pro_uid: str = Field(..., alias="PRO_UID")
    app_number: int = Field(..., alias="APP_NUMBER")
    app_title: Optional[str] = Field(None, alias="APP_TITLE")
    app_pro_title: Optional[str] = Field(None, alias="APP_PRO_TITLE")
    app_tas_title: Optional[str] = Field(None, alias="APP_TAS_TITLE")
    app_canceled_date: Optional[datetime] = Field(None, alias="APP_CANCELED_DATE")
    del_index: int = Field(..., alias="DEL_INDEX")
    del_previous_usr_uid: Optional[str] = Field(None, alias="DEL_PREVIOUS_USR_UID")
    del_current_usr_username: Optional[str] = Field(None, alias="DEL_CURRENT_USR_USERNAME")
    del_current_usr_firstname: Optional[str] = Field(None, alias="DEL_CURRENT_USR_FIRSTNAME")
    del_current_usr_lastname: Optional[str] = Field(None, alias="DEL_CURRENT_USR_LASTNAME")
    del_delegate_date: datetime = Field(..., alias="DEL_DELEGATE_DATE")
    del_init_date: Optional[datetime] = Field(None, alias="DEL_INIT_DATE")
    del_due_date: Optional[datetime] = Field(None, alias="DEL_DUE_DATE")
    del_priority: str = Field(..., alias="DEL_PRIORITY")
    pro_id: Optional[int] = Field(None, alias="PRO_ID")
    usr_id: Optional[int] = Field(None, alias="USR_ID")
    tas_id: Optional[int] = Field(None, alias="TAS_ID")

    class Config:
        orm_mode = True
        allow_population_by_field_name = True


class ListCanceledList(BaseModel):
    data: list[ListCanceledRead]
    meta: ListMeta


class CanceledListPurgeRequest(BaseModel):
    canceled_before: datetime


class CanceledListPurgeResult(BaseModel):
    deleted: int
