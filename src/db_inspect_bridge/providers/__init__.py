"""Database providers for the inspector Database domain."""

from .base import DatabaseProvider, Peer
from .sqlalchemy_provider import ADD_DATABASE_EVENT, CursorRows, SQLAlchemyProvider

__all__ = [
    "ADD_DATABASE_EVENT",
    "CursorRows",
    "DatabaseProvider",
    "Peer",
    "SQLAlchemyProvider",
]
