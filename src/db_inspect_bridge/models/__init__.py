"""Pydantic models for inspector configuration, outcomes and wire shapes."""

from .config import DatabaseConfig, InspectorConfig
from .outcome import InsertResult, MutationResult, Outcome, RawStatement, SelectResult
from .protocol import (
    AddDatabaseEvent,
    DatabaseObject,
    ExecuteSQLRequest,
    ExecuteSQLResponse,
    FlattenedRows,
    GetDatabaseTableNamesRequest,
    GetDatabaseTableNamesResponse,
    SqlError,
)

__all__ = [
    "DatabaseConfig",
    "InspectorConfig",
    "Outcome",
    "RawStatement",
    "SelectResult",
    "InsertResult",
    "MutationResult",
    "SqlError",
    "GetDatabaseTableNamesRequest",
    "GetDatabaseTableNamesResponse",
    "ExecuteSQLRequest",
    "ExecuteSQLResponse",
    "DatabaseObject",
    "AddDatabaseEvent",
    "FlattenedRows",
]
