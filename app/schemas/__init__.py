from app.schemas.data_connector import (
    ConnectorAuthType,
    DataConnectorCreate,
    DataConnectorElementConfig,
    DataConnectorList,
    DataConnectorRead,
    DataConnectorUpdate,
    DataMappingEntry,
    EndpointCreate,
    EndpointExecuteRequest,
    EndpointExecuteResult,
    EndpointMethod,
    EndpointRead,
    EndpointUpdate,
)
from app.schemas.entities import (
    ActivityStatus,
    DelegationPriority,
    DelegationRead,
    ProcessCreate,
    ProcessList,
    ProcessRead,
    ProcessUpdate,
    RequestCreate,
    RequestDelegate,
    RequestDetail,
    RequestList,
    RequestRead,
    RequestStatus,
    ScriptCreate,
    ScriptLanguage,
    ScriptList,
    ScriptRead,
    ScriptUpdate,
    TaskCreate,
    TaskList,
    TaskRead,
    TaskUpdate,
    UserCreate,
    UserList,
    UserRead,
    UserUpdate,
)
from app.schemas.lists import (
    CanceledListPurgeRequest,
    CanceledListPurgeResult,
    ListCanceledList,
    ListCanceledRead,
)
from app.schemas.pagination import ListMeta

__all__ = [
    "ActivityStatus",
    "CanceledListPurgeRequest",
    "CanceledListPurgeResult",
    "ConnectorAuthType",
    "DataConnectorCreate",
    "DataConnectorElementConfig",
    "DataConnectorList",
    "DataConnectorRead",
    "DataConnectorUpdate",
    "DataMappingEntry",
    "DelegationPriority",
    "DelegationRead",
    "EndpointCreate",
    "EndpointExecuteRequest",
    "EndpointExecuteResult",
    "EndpointMethod",
    "EndpointRead",
    "EndpointUpdate",
    "ListCanceledList",
    "ListCanceledRead",
    "ListMeta",
    "ProcessCreate",
    "ProcessList",
    "ProcessRead",
    "ProcessUpdate",
    "RequestCreate",
    "RequestDelegate",
    "RequestDetail",
    "RequestList",
    "RequestRead",
    "RequestStatus",
    "ScriptCreate",
    "ScriptLanguage",
    "ScriptList",
    "ScriptRead",
    "ScriptUpdate",
    "TaskCreate",
    "TaskList",
    "TaskRead",
    "TaskUpdate",
    "UserCreate",
    "UserList",
    "UserRead",
    "UserUpdate",
]
