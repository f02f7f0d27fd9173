"""Database provider backed by SQLAlchemy engines."""

import logging
import re
from typing import Any, Mapping

from sqlalchemy import Connection, CursorResult, Engine, create_engine, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from db_inspect_bridge.errors import DatabaseError
from db_inspect_bridge.models.config import DatabaseConfig
from db_inspect_bridge.models.outcome import (
    InsertResult,
    MutationResult,
    Outcome,
    RawStatement,
    SelectResult,
)
from db_inspect_bridge.models.protocol import AddDatabaseEvent, DatabaseObject
from db_inspect_bridge.providers.base import Peer

logger = logging.getLogger(__name__)

ADD_DATABASE_EVENT = "Database.addDatabase"

# Quoted text, parentheses and bare words of a statement
_TOKEN_PATTERN = re.compile(r"""'(?:[^']|'')*'|"(?:[^"]|"")*"|[()]|[A-Za-z_]+""")


def _to_database_error(error: Exception) -> DatabaseError:
    """Convert a SQLAlchemy error into an engine-level fault."""
    # DBAPI errors wrap the driver exception, which has the cleaner message
    orig = getattr(error, "orig", None)
    return DatabaseError(str(orig) if orig is not None else str(error))


class CursorRows:
    """Forward-only row iterator that owns its connection.

    The connection is released once the rows are exhausted, a fetch fails, or
    ``close()`` is called, whichever happens first.
    """

    def __init__(self, connection: Connection, result: CursorResult):
        self._connection = connection
        self._result = result
        self._closed = False

    def __iter__(self) -> "CursorRows":
        return self

    def __next__(self) -> tuple[Any, ...]:
        if self._closed:
            raise StopIteration
        try:
            row = self._result.fetchone()
        except SQLAlchemyError as e:
            self.close()
            raise _to_database_error(e) from e
        if row is None:
            self.close()
            raise StopIteration
        return tuple(row)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._result.close()
        finally:
            self._connection.close()


class SQLAlchemyProvider:
    """Exposes one or more SQLAlchemy databases to inspector clients."""

    SELECT_KEYWORDS = {"SELECT", "PRAGMA", "EXPLAIN", "SHOW", "VALUES"}
    INSERT_KEYWORDS = {"INSERT", "REPLACE"}
    MUTATION_KEYWORDS = {"UPDATE", "DELETE"}

    DOMAIN = "db-inspect-bridge"

    def __init__(self, databases: Mapping[str, DatabaseConfig]):
        """
        Initialize provider.

        Args:
            databases: Database configurations keyed by the id exposed to peers
        """
        self.databases = dict(databases)
        self._engines: dict[str, Engine] = {}

    @classmethod
    def from_urls(cls, urls: Mapping[str, str]) -> "SQLAlchemyProvider":
        """Build a provider from plain ``id -> url`` pairs."""
        return cls({db_id: DatabaseConfig(url=url) for db_id, url in urls.items()})

    def owns_database(self, database_id: str) -> bool:
        return database_id in self.databases

    @property
    def database_ids(self) -> list[str]:
        return list(self.databases)

    def get_engine(self, database_id: str) -> Engine:
        """
        Get (and lazily create) the engine for a database.

        Raises:
            KeyError: If the database id is not owned by this provider
            DatabaseError: If the dialect or its DBAPI driver cannot be loaded
        """
        engine = self._engines.get(database_id)
        if engine is None:
            try:
                engine = self._create_engine(self.databases[database_id])
            except (SQLAlchemyError, ImportError) as e:
                raise _to_database_error(e) from e
            self._engines[database_id] = engine
        return engine

    def _create_engine(self, config: DatabaseConfig) -> Engine:
        kwargs: dict[str, Any] = {
            "echo": config.echo_sql,
            "pool_pre_ping": config.pool_pre_ping,
        }
        # In-memory SQLite lives inside one connection; share it
        if config.is_memory:
            kwargs["poolclass"] = StaticPool
            kwargs["connect_args"] = {"check_same_thread": False}
        return create_engine(config.url, **kwargs)

    def get_database_table_names(self, database_id: str) -> list[str]:
        try:
            inspector = inspect(self.get_engine(database_id))
            return list(inspector.get_table_names()) + list(
                inspector.get_view_names()
            )
        except SQLAlchemyError as e:
            raise _to_database_error(e) from e

    @staticmethod
    def _strip_comments(query: str) -> str:
        normalized = re.sub(r"/\*.*?\*/", " ", query, flags=re.DOTALL)
        return re.sub(r"--[^\n]*", " ", normalized)

    @classmethod
    def get_first_keyword(cls, query: str) -> str:
        """Uppercased first keyword of a statement, ignoring leading comments."""
        match = re.match(r"\s*([A-Za-z]+)", cls._strip_comments(query))
        return match.group(1).upper() if match else ""

    @classmethod
    def get_statement_keyword(cls, query: str) -> str:
        """
        Keyword deciding how a statement is executed.

        For ``WITH`` statements this is the main verb following the CTE list,
        found by skipping parenthesised CTE bodies and quoted text.

        Args:
            query: SQL statement

        Returns:
            Uppercased keyword, or ``WITH`` if no main verb was found
        """
        keyword = cls.get_first_keyword(query)
        if keyword != "WITH":
            return keyword

        verbs = cls.SELECT_KEYWORDS | cls.INSERT_KEYWORDS | cls.MUTATION_KEYWORDS
        depth = 0
        for token in _TOKEN_PATTERN.findall(cls._strip_comments(query)):
            if token == "(":
                depth += 1
            elif token == ")":
                depth -= 1
            elif depth == 0 and token.upper() in verbs:
                return token.upper()
        return keyword

    def execute_sql(self, database_id: str, query: str) -> Outcome:
        keyword = self.get_statement_keyword(query)
        logger.debug(f"Executing {keyword or 'raw'} statement on {database_id}")

        try:
            engine = self.get_engine(database_id)
            if keyword in self.SELECT_KEYWORDS:
                return self._execute_select(engine, query)
            with engine.begin() as conn:
                result = conn.exec_driver_sql(query)
                if keyword in self.INSERT_KEYWORDS:
                    row_id = result.lastrowid
                    # Drivers without lastrowid support report None
                    return InsertResult(row_id=row_id if row_id is not None else -1)
                if keyword in self.MUTATION_KEYWORDS:
                    return MutationResult(count=result.rowcount)
                result.close()
                return RawStatement()
        except SQLAlchemyError as e:
            raise _to_database_error(e) from e

    def _execute_select(self, engine: Engine, query: str) -> Outcome:
        conn = engine.connect()
        try:
            result = conn.exec_driver_sql(query)
        except BaseException:
            conn.close()
            raise

        if not result.returns_rows:
            result.close()
            conn.commit()
            conn.close()
            return RawStatement()

        return SelectResult(
            columns=list(result.keys()), rows=CursorRows(conn, result)
        )

    def database_object(self, database_id: str) -> DatabaseObject:
        return DatabaseObject(
            id=database_id,
            domain=self.DOMAIN,
            name=database_id,
            version=self.databases[database_id].dialect,
        )

    def on_peer_registered(self, peer: Peer) -> None:
        """Advertise every owned database to the new peer."""
        for database_id in self.databases:
            event = AddDatabaseEvent(database=self.database_object(database_id))
            peer.send_notification(ADD_DATABASE_EVENT, event.to_wire())

    def on_peer_unregistered(self, peer: Peer) -> None:
        logger.debug(f"Peer {peer!r} unregistered from {len(self.databases)} databases")

    def dispose(self) -> None:
        """Dispose of all engines and their pools."""
        for engine in self._engines.values():
            engine.dispose()
        self._engines.clear()

    def __repr__(self) -> str:
        return f"SQLAlchemyProvider(databases={self.database_ids!r})"
