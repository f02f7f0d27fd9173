"""Core components of the Database inspector domain."""

from .database import DOMAIN_NAME, DatabaseModule
from .dispatcher import SQL_ERROR_CODE, OutcomeDispatcher
from .flattener import TRUNCATED_MARKER, convert_cell, flatten_rows
from .peers import PeerManager
from .registry import ProviderRegistry

__all__ = [
    "DOMAIN_NAME",
    "DatabaseModule",
    "OutcomeDispatcher",
    "PeerManager",
    "ProviderRegistry",
    "SQL_ERROR_CODE",
    "TRUNCATED_MARKER",
    "convert_cell",
    "flatten_rows",
]
