"""Structural interfaces for database providers and connected peers.

Providers do not inherit from anything; any object with the methods below can
be registered with the Database domain.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from db_inspect_bridge.models.outcome import Outcome


@runtime_checkable
class Peer(Protocol):
    """One connected remote inspector client."""

    def send_notification(
        self, method: str, params: Optional[dict[str, Any]] = None
    ) -> None: ...


@runtime_checkable
class DatabaseProvider(Protocol):
    """A data source owning a set of database ids."""

    def owns_database(self, database_id: str) -> bool:
        """Whether this provider is responsible for ``database_id``."""
        ...

    def get_database_table_names(self, database_id: str) -> list[str]:
        """
        List table names of a database.

        Raises:
            DatabaseError: If the engine fails to list tables
        """
        ...

    def execute_sql(self, database_id: str, query: str) -> Outcome:
        """
        Execute one statement and classify what it produced.

        Raises:
            DatabaseError: If the engine cannot execute the statement
        """
        ...

    def on_peer_registered(self, peer: Peer) -> None: ...

    def on_peer_unregistered(self, peer: Peer) -> None: ...
