"""Pytest configuration and shared fixtures for inspector bridge tests"""

from typing import Any, Callable, Iterator, Optional

import pytest

from db_inspect_bridge.errors import DatabaseError
from db_inspect_bridge.models.outcome import Outcome, SelectResult
from db_inspect_bridge.providers import SQLAlchemyProvider


class RecordingPeer:
    """Peer that keeps every notification it receives."""

    def __init__(self, name: str = "peer"):
        self.name = name
        self.notifications: list[tuple[str, Optional[dict[str, Any]]]] = []

    def send_notification(
        self, method: str, params: Optional[dict[str, Any]] = None
    ) -> None:
        self.notifications.append((method, params))

    def __repr__(self) -> str:
        return f"RecordingPeer({self.name!r})"


class FakeProvider:
    """In-memory provider with canned tables and outcomes.

    Lifecycle calls are appended to ``events`` (shared between providers when
    the same list is passed in) as ``(provider name, hook, peer)``.
    """

    def __init__(
        self,
        name: str,
        database_ids: set[str],
        tables: Optional[dict[str, list[str]]] = None,
        outcome: Optional[Callable[[str], Outcome]] = None,
        events: Optional[list[tuple[str, str, Any]]] = None,
        fail_hooks: bool = False,
    ):
        self.name = name
        self.database_ids = database_ids
        self.tables = tables or {}
        self.outcome = outcome
        self.events = events if events is not None else []
        self.fail_hooks = fail_hooks
        self.executed: list[tuple[str, str]] = []

    def owns_database(self, database_id: str) -> bool:
        return database_id in self.database_ids

    def get_database_table_names(self, database_id: str) -> list[str]:
        if database_id not in self.tables:
            raise DatabaseError(f"no such database: {database_id}")
        return list(self.tables[database_id])

    def execute_sql(self, database_id: str, query: str) -> Outcome:
        self.executed.append((database_id, query))
        if self.outcome is None:
            raise DatabaseError(f"near \"{query}\": syntax error")
        return self.outcome(query)

    def on_peer_registered(self, peer: Any) -> None:
        self.events.append((self.name, "connect", peer))
        if self.fail_hooks:
            raise RuntimeError(f"{self.name} connect hook failed")

    def on_peer_unregistered(self, peer: Any) -> None:
        self.events.append((self.name, "disconnect", peer))
        if self.fail_hooks:
            raise RuntimeError(f"{self.name} disconnect hook failed")

    def __repr__(self) -> str:
        return f"FakeProvider({self.name!r})"


class TrackingRows:
    """Row iterator that records how far it was consumed and whether it was closed."""

    def __init__(self, rows: list[tuple[Any, ...]], fail_at: Optional[int] = None):
        self._rows = rows
        self._fail_at = fail_at
        self.position = 0
        self.closed = False

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        return self

    def __next__(self) -> tuple[Any, ...]:
        if self._fail_at is not None and self.position == self._fail_at:
            raise DatabaseError("disk I/O error")
        if self.position >= len(self._rows):
            raise StopIteration
        row = self._rows[self.position]
        self.position += 1
        return row

    def close(self) -> None:
        self.closed = True


def make_select(
    columns: list[str], rows: list[tuple[Any, ...]], fail_at: Optional[int] = None
) -> SelectResult:
    return SelectResult(columns=columns, rows=TrackingRows(rows, fail_at=fail_at))


# ==================== Fixtures ====================


@pytest.fixture
def peer() -> RecordingPeer:
    return RecordingPeer("inspector")


@pytest.fixture
def peer_factory() -> Callable[[str], RecordingPeer]:
    return RecordingPeer


@pytest.fixture
def provider_factory() -> Callable[..., FakeProvider]:
    return FakeProvider


@pytest.fixture
def select_factory() -> Callable[..., SelectResult]:
    return make_select


@pytest.fixture
def sqlite_provider() -> Iterator[SQLAlchemyProvider]:
    """In-memory SQLite database ``db1`` with a populated ``users`` table"""
    provider = SQLAlchemyProvider.from_urls({"db1": "sqlite://"})
    provider.execute_sql(
        "db1",
        "CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT, score REAL, avatar BLOB)",
    )
    provider.execute_sql(
        "db1",
        "INSERT INTO users (name, score, avatar) VALUES ('alice', 9.5, X'00FF10')",
    )
    provider.execute_sql(
        "db1", "INSERT INTO users (name, score, avatar) VALUES ('bob', NULL, NULL)"
    )
    try:
        yield provider
    finally:
        provider.dispose()


# ==================== Pytest Configuration ====================


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "integration: Tests running the MCP server layer")
    config.addinivalue_line("markers", "sqlite: Tests running against in-memory SQLite")
