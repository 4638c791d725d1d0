from app.models.entities import (
    DataConnector,
    DataConnectorEndpoint,
    Delegation,
    Process,
    ProcessRequest,
    Script,
    Task,
    TimestampMixin,
    User,
)
from app.models.lists import ListCanceled

__all__ = [
    "DataConnector",
    "DataConnectorEndpoint",
    "Delegation",
    "ListCanceled",
    "Process",
    "ProcessRequest",
    "Script",
    "Task",
    "TimestampMixin",
    "User",
]
