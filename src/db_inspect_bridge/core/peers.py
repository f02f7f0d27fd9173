"""Tracking of peers that enabled a protocol domain."""

import logging
from typing import Any, Optional, Protocol

from db_inspect_bridge.providers.base import Peer

logger = logging.getLogger(__name__)


class PeerRegistrationListener(Protocol):
    def on_connect(self, peer: Peer) -> None: ...

    def on_disconnect(self, peer: Peer) -> None: ...


class PeerManager:
    """Set of enabled peers, in enable order.

    The listener hears about a peer once when it is first enabled and once when
    it is disabled. Listener callbacks must not re-enter this manager.
    """

    def __init__(self, listener: Optional[PeerRegistrationListener] = None):
        self._peers: list[Peer] = []
        self.listener = listener

    def add_peer(self, peer: Peer) -> bool:
        """
        Enable a peer.

        Returns:
            False if the peer was already enabled
        """
        if peer in self._peers:
            return False
        self._peers.append(peer)
        logger.info(f"Peer enabled: {peer!r}")
        if self.listener is not None:
            self.listener.on_connect(peer)
        return True

    def remove_peer(self, peer: Peer) -> bool:
        """
        Disable a peer. Unknown peers are ignored.

        Returns:
            False if the peer was not enabled
        """
        if peer not in self._peers:
            return False
        self._peers.remove(peer)
        logger.info(f"Peer disabled: {peer!r}")
        if self.listener is not None:
            self.listener.on_disconnect(peer)
        return True

    def has_peer(self, peer: Peer) -> bool:
        return peer in self._peers

    def has_registered_peers(self) -> bool:
        return bool(self._peers)

    @property
    def peers(self) -> list[Peer]:
        return list(self._peers)

    def send_notification_to_peers(
        self, method: str, params: Optional[dict[str, Any]] = None
    ) -> None:
        """Send a notification to every enabled peer, skipping failing ones."""
        for peer in list(self._peers):
            try:
                peer.send_notification(method, params)
            except Exception:
                logger.exception(f"Failed sending {method} to {peer!r}")

    def clear(self) -> None:
        """Disable every peer, notifying the listener for each."""
        for peer in list(self._peers):
            self.remove_peer(peer)
