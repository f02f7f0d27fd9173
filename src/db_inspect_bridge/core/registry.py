"""Provider registry and peer lifecycle broadcasting."""

import logging
from typing import Optional

from db_inspect_bridge.errors import DatabaseNotFoundError
from db_inspect_bridge.providers.base import DatabaseProvider, Peer

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Ordered list of database providers.

    Registration is expected to happen once at startup, before any request is
    served. Nothing here is synchronised.
    """

    def __init__(self) -> None:
        self._providers: list[DatabaseProvider] = []

    def register(self, provider: DatabaseProvider) -> None:
        """Append a provider. Duplicates are not checked."""
        self._providers.append(provider)
        logger.debug(f"Registered database provider {provider!r}")

    def resolve(self, database_id: str) -> Optional[DatabaseProvider]:
        """
        Find the provider owning a database id.

        Args:
            database_id: Database id sent by the client

        Returns:
            First provider, in registration order, that owns the id, or None
        """
        for provider in self._providers:
            if provider.owns_database(database_id):
                return provider
        return None

    def require(self, database_id: str) -> DatabaseProvider:
        """
        Like ``resolve`` but fails when no provider owns the id.

        Raises:
            DatabaseNotFoundError: If no provider owns the id
        """
        provider = self.resolve(database_id)
        if provider is None:
            raise DatabaseNotFoundError(database_id)
        return provider

    def on_connect(self, peer: Peer) -> None:
        """Tell every provider, in registration order, that a peer connected."""
        for provider in list(self._providers):
            try:
                provider.on_peer_registered(peer)
            except Exception:
                logger.exception(f"Provider {provider!r} failed handling connect")

    def on_disconnect(self, peer: Peer) -> None:
        """Tell every provider, in registration order, that a peer disconnected."""
        for provider in list(self._providers):
            try:
                provider.on_peer_unregistered(peer)
            except Exception:
                logger.exception(f"Provider {provider!r} failed handling disconnect")

    @property
    def providers(self) -> list[DatabaseProvider]:
        return list(self._providers)

    def clear(self) -> None:
        """Drop all providers (session teardown)."""
        self._providers.clear()

    def __len__(self) -> int:
        return len(self._providers)
