"""The Database protocol domain.

Exposes ``enable``, ``disable``, ``getDatabaseTableNames`` and ``executeSQL``
to remote inspector peers and routes each request to the provider owning the
requested database id.
"""

import logging
from typing import Any, Callable, Iterable, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from db_inspect_bridge.core.dispatcher import OutcomeDispatcher, sql_error_response
from db_inspect_bridge.core.peers import PeerManager
from db_inspect_bridge.core.registry import ProviderRegistry
from db_inspect_bridge.errors import (
    DatabaseError,
    ErrorCode,
    JsonRpcError,
    JsonRpcException,
)
from db_inspect_bridge.models.config import InspectorConfig
from db_inspect_bridge.models.protocol import (
    ExecuteSQLRequest,
    ExecuteSQLResponse,
    GetDatabaseTableNamesRequest,
    GetDatabaseTableNamesResponse,
)
from db_inspect_bridge.providers.base import DatabaseProvider, Peer

logger = logging.getLogger(__name__)

DOMAIN_NAME = "Database"

RequestT = TypeVar("RequestT", bound=BaseModel)


def parse_params(model: type[RequestT], params: Optional[dict[str, Any]]) -> RequestT:
    """
    Validate request parameters.

    Raises:
        JsonRpcException: INVALID_PARAMS if required fields are missing or mistyped
    """
    try:
        return model.model_validate(params or {})
    except ValidationError as e:
        raise JsonRpcException(
            JsonRpcError(
                code=ErrorCode.INVALID_PARAMS,
                message=f"Invalid params for {model.__name__}",
                data=e.errors(include_url=False),
            )
        ) from e


class DatabaseModule:
    """Database domain bound to one transport session."""

    def __init__(
        self,
        providers: Optional[Iterable[DatabaseProvider]] = None,
        config: Optional[InspectorConfig] = None,
    ):
        """
        Initialize the domain.

        Args:
            providers: Providers to register, in priority order
            config: Inspector configuration (defaults apply when omitted)
        """
        self.config = config or InspectorConfig()
        self.registry = ProviderRegistry()
        self.peer_manager = PeerManager(listener=self.registry)
        self.dispatcher = OutcomeDispatcher(self.config.max_execute_results)
        for provider in providers or ():
            self.add(provider)

    def add(self, provider: DatabaseProvider) -> None:
        """Register a provider. Call before serving requests."""
        self.registry.register(provider)

    def enable(self, peer: Peer, params: Optional[dict[str, Any]] = None) -> None:
        self.peer_manager.add_peer(peer)

    def disable(self, peer: Peer, params: Optional[dict[str, Any]] = None) -> None:
        self.peer_manager.remove_peer(peer)

    def is_enabled(self, peer: Peer) -> bool:
        return self.peer_manager.has_peer(peer)

    def get_database_table_names(
        self, peer: Peer, params: Optional[dict[str, Any]]
    ) -> GetDatabaseTableNamesResponse:
        """
        List the tables of one database.

        Raises:
            DatabaseNotFoundError: If no provider owns the database id
            JsonRpcException: INVALID_REQUEST if the engine fails
        """
        request = parse_params(GetDatabaseTableNamesRequest, params)
        provider = self.registry.require(request.database_id)

        try:
            table_names = provider.get_database_table_names(request.database_id)
        except DatabaseError as e:
            raise JsonRpcException(
                JsonRpcError(
                    code=ErrorCode.INVALID_REQUEST,
                    message=f"{type(e).__name__}: {e}",
                )
            ) from e

        return GetDatabaseTableNamesResponse(table_names=table_names)

    def execute_sql(
        self, peer: Peer, params: Optional[dict[str, Any]]
    ) -> ExecuteSQLResponse:
        """
        Execute one statement.

        Engine faults do not fail the request; they come back as ``sqlError``
        so the client can tell SQL errors from protocol errors.

        Raises:
            DatabaseNotFoundError: If no provider owns the database id
        """
        request = parse_params(ExecuteSQLRequest, params)
        provider = self.registry.require(request.database_id)

        try:
            outcome = provider.execute_sql(request.database_id, request.query)
        except DatabaseError as e:
            logger.info(f"Statement failed on {request.database_id}: {e}")
            return sql_error_response(e)

        return self.dispatcher.dispatch(outcome)

    def methods(self) -> dict[str, Callable[..., Any]]:
        """Protocol method table keyed by ``Domain.method``."""
        return {
            f"{DOMAIN_NAME}.enable": self.enable,
            f"{DOMAIN_NAME}.disable": self.disable,
            f"{DOMAIN_NAME}.getDatabaseTableNames": self.get_database_table_names,
            f"{DOMAIN_NAME}.executeSQL": self.execute_sql,
        }

    def close(self) -> None:
        """Tear down the session: disable all peers, then drop providers."""
        self.peer_manager.clear()
        self.registry.clear()
        logger.info("Database domain closed")
