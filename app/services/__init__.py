from app.services.canceled_list_retention import (
    CanceledListRetentionEngine,
    canceled_list_retention_engine,
    purge_canceled_before,
)
from app.services.data_connector_client import DataConnectorClient, DataConnectorError
from app.services.request_lifecycle import RequestStateError

__all__ = [
	"CanceledListRetentionEngine",
	"DataConnectorClient",
	"DataConnectorError",
	"RequestStateError",
	"canceled_list_retention_engine",
	"purge_canceled_before",
]
