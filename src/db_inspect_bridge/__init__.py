"""
db_inspect_bridge - Database inspector bridge

Exposes relational-database introspection (table listing, statement
execution) over a JSON-RPC "Database" domain to remote inspector clients,
backed by pluggable database providers.
"""

__version__ = "1.0.0"

from .core import DatabaseModule, OutcomeDispatcher, PeerManager, ProviderRegistry, flatten_rows
from .errors import DatabaseError, DatabaseNotFoundError, ErrorCode, JsonRpcError, JsonRpcException
from .models.config import DatabaseConfig, InspectorConfig
from .models.outcome import InsertResult, MutationResult, Outcome, RawStatement, SelectResult
from .models.protocol import ExecuteSQLResponse, GetDatabaseTableNamesResponse, SqlError
from .providers import DatabaseProvider, Peer, SQLAlchemyProvider

__all__ = [
    "DatabaseModule",
    "OutcomeDispatcher",
    "PeerManager",
    "ProviderRegistry",
    "flatten_rows",
    "DatabaseError",
    "DatabaseNotFoundError",
    "ErrorCode",
    "JsonRpcError",
    "JsonRpcException",
    "DatabaseConfig",
    "InspectorConfig",
    "Outcome",
    "RawStatement",
    "SelectResult",
    "InsertResult",
    "MutationResult",
    "ExecuteSQLResponse",
    "GetDatabaseTableNamesResponse",
    "SqlError",
    "DatabaseProvider",
    "Peer",
    "SQLAlchemyProvider",
]
