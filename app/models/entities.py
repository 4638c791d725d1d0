from datetime import datetime
from typing import Optional
from uuid import UUID as UUIDType, uuid4

from sqlalchemy import DateTime, ForeignKey, Integer, JSON, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class IdentityMixin:
    """Integer surrogate key plus the public UUID exposed through the API."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[UUIDType] = mapped_column(
        UUID(as_uuid=True), unique=True, nullable=False, default=uuid4
    )

    @property
    def uid(self) -> str:
        # 32 character form used by the legacy list tables
        return self.uuid.hex if self.uuid else ""


class User(Base, IdentityMixin, TimestampMixin):
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    firstname: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    lastname: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    email: Mapped[str | None] = mapped_column(String(200), nullable=True, unique=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="ACTIVE")


class Process(Base, IdentityMixin, TimestampMixin):
    __tablename__ = "processes"

    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="ACTIVE")

    tasks: Mapped[list["Task"]] = relationship(
        "Task",
        back_populates="process",
        cascade="all, delete-orphan",
        order_by="Task.position",
    )
    scripts: Mapped[list["Script"]] = relationship(
        "Script",
        back_populates="process",
        cascade="all, delete-orphan",
    )
    requests: Mapped[list["ProcessRequest"]] = relationship(
        "ProcessRequest",
        back_populates="process",
        cascade="all, delete-orphan",
    )


class Task(Base, IdentityMixin, TimestampMixin):
    __tablename__ = "tasks"

    process_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("processes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    due_in_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=72)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    process: Mapped[Process] = relationship("Process", back_populates="tasks")

    @property
    def process_uuid(self) -> Optional[UUIDType]:
        return self.process.uuid if self.process else None


class Script(Base, IdentityMixin, TimestampMixin):
    __tablename__ = "scripts"

    process_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("processes.id", ondelete="CASCADE"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    language: Mapped[str] = mapped_column(String(20), nullable=False, default="php")
    code: Mapped[str] = mapped_column(Text, nullable=False, default="")

    process: Mapped[Optional[Process]] = relationship("Process", back_populates="scripts")

    @property
    def process_uuid(self) -> Optional[UUIDType]:
        return self.process.uuid if self.process else None


class ProcessRequest(Base, IdentityMixin, TimestampMixin):
    """A running (or finished) instance of a process; ``id`` doubles as the request number."""

    __tablename__ = "requests"

    process_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("processes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="ACTIVE")
    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    initiated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=datetime.utcnow
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    canceled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    process: Mapped[Process] = relationship("Process", back_populates="requests")
    user: Mapped[User] = relationship("User")
    delegations: Mapped[list["Delegation"]] = relationship(
        "Delegation",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="Delegation.index",
    )

    @property
    def number(self) -> int:
        return self.id

    @property
    def process_uuid(self) -> Optional[UUIDType]:
        return self.process.uuid if self.process else None

    @property
    def user_uuid(self) -> Optional[UUIDType]:
        return self.user.uuid if self.user else None

    @property
    def open_delegation(self) -> Optional["Delegation"]:
        for delegation in self.delegations:
            if delegation.thread_status == "OPEN":
                return delegation
        return None


class Delegation(Base, TimestampMixin):
    __tablename__ = "delegations"
    __table_args__ = (UniqueConstraint("request_id", "index", name="uq_delegations_request_index"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    request_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("requests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    index: Mapped[int] = mapped_column(Integer, nullable=False)
    task_id: Mapped[int] = mapped_column(Integer, ForeignKey("tasks.id"), nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    previous_user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )
    delegated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=datetime.utcnow
    )
    initiated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    due_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    finished_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    priority: Mapped[str] = mapped_column(String(32), nullable=False, default="3")
    thread_status: Mapped[str] = mapped_column(String(20), nullable=False, default="OPEN")

    request: Mapped[ProcessRequest] = relationship("ProcessRequest", back_populates="delegations")
    task: Mapped[Task] = relationship("Task")
    user: Mapped[User] = relationship("User", foreign_keys=[user_id])
    previous_user: Mapped[Optional[User]] = relationship("User", foreign_keys=[previous_user_id])

    @property
    def task_uuid(self) -> Optional[UUIDType]:
        return self.task.uuid if self.task else None

    @property
    def user_uuid(self) -> Optional[UUIDType]:
        return self.user.uuid if self.user else None

    @property
    def previous_user_uuid(self) -> Optional[UUIDType]:
        return self.previous_user.uuid if self.previous_user else None


class DataConnector(Base, IdentityMixin, TimestampMixin):
    __tablename__ = "data_connectors"

    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    base_url: Mapped[str] = mapped_column(String(500), nullable=False)
    auth_type: Mapped[str] = mapped_column(String(20), nullable=False, default="none")
    credentials: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    headers: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="ACTIVE")

    endpoints: Mapped[list["DataConnectorEndpoint"]] = relationship(
        "DataConnectorEndpoint",
        back_populates="connector",
        cascade="all, delete-orphan",
        order_by="DataConnectorEndpoint.name",
    )


class DataConnectorEndpoint(Base, TimestampMixin):
    __tablename__ = "data_connector_endpoints"
    __table_args__ = (
        UniqueConstraint("connector_id", "name", name="uq_data_connector_endpoints_connector_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    connector_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("data_connectors.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    method: Mapped[str] = mapped_column(String(10), nullable=False, default="GET")
    path: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    query: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    body: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    connector: Mapped[DataConnector] = relationship("DataConnector", back_populates="endpoints")
