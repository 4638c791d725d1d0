from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

MEDIUMTEXT_LENGTH = 16777215


class ListCanceled(Base):
    """Denormalized, append-only row written when a running request is canceled.

    Column names follow the legacy ``LIST_CANCELED`` reporting table so existing
    reports keep working against it.
    """

    __tablename__ = "LIST_CANCELED"

    app_uid: Mapped[str] = mapped_column("APP_UID", String(32), primary_key=True, default="")
    usr_uid: Mapped[str] = mapped_column("USR_UID", String(32), nullable=False, default="")
    tas_uid: Mapped[str] = mapped_column("TAS_UID", String(32), nullable=False, default="")
    pro_uid: Mapped[str] = mapped_column("PRO_UID", String(32), nullable=False, default="")
    app_number: Mapped[int] = mapped_column("APP_NUMBER", Integer, nullable=False, default=0)
    app_title: Mapped[Optional[str]] = mapped_column("APP_TITLE", Text(MEDIUMTEXT_LENGTH), nullable=True)
    app_pro_title: Mapped[Optional[str]] = mapped_column(
        "APP_PRO_TITLE", Text(MEDIUMTEXT_LENGTH), nullable=True
    )
    app_tas_title: Mapped[Optional[str]] = mapped_column(
        "APP_TAS_TITLE", Text(MEDIUMTEXT_LENGTH), nullable=True
    )
    app_canceled_date: Mapped[Optional[datetime]] = mapped_column(
        "APP_CANCELED_DATE", DateTime(), nullable=True
    )
    del_index: Mapped[int] = mapped_column("DEL_INDEX", Integer, nullable=False, default=0)
    del_previous_usr_uid: Mapped[Optional[str]] = mapped_column(
        "DEL_PREVIOUS_USR_UID", String(32), nullable=True, default=""
    )
    del_current_usr_username: Mapped[Optional[str]] = mapped_column(
        "DEL_CURRENT_USR_USERNAME", String(100), nullable=True, default=""
    )
    del_current_usr_firstname: Mapped[Optional[str]] = mapped_column(
        "DEL_CURRENT_USR_FIRSTNAME", String(50), nullable=True, default=""
    )
    del_current_usr_lastname: Mapped[Optional[str]] = mapped_column(
        "DEL_CURRENT_USR_LASTNAME", String(50), nullable=True, default=""
    )
    del_delegate_date: Mapped[datetime] = mapped_column("DEL_DELEGATE_DATE", DateTime(), nullable=False)
    del_init_date: Mapped[Optional[datetime]] = mapped_column("DEL_INIT_DATE", DateTime(), nullable=True)
    del_due_date: Mapped[Optional[datetime]] = mapped_column("DEL_DUE_DATE", DateTime(), nullable=True)
    del_priority: Mapped[str] = mapped_column("DEL_PRIORITY", String(32), nullable=False, default="3")
    pro_id: Mapped[Optional[int]] = mapped_column("PRO_ID", Integer, nullable=True, default=0)
    usr_id: Mapped[Optional[int]] = mapped_column("USR_ID", Integer, nullable=True, default=0)
    tas_id: Mapped[Optional[int]] = mapped_column("TAS_ID", Integer, nullable=True, default=0)


Index("indexCanceledUser", ListCanceled.usr_uid)
Index("INDEX_PRO_ID", ListCanceled.pro_id)
Index("INDEX_USR_ID", ListCanceled.usr_id)
Index("INDEX_TAS_ID", ListCanceled.tas_id)
