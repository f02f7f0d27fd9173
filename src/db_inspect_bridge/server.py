"""Database inspector MCP Server

Serves the Database inspector domain over MCP (JSON-RPC 2.0 on stdio). Each
MCP session is one inspector peer; databases come from ``DATABASE_URLS``.
"""

import asyncio
import logging
import os
import weakref
from typing import Any, Optional

from mcp.server import Server
from mcp.types import TextContent, Tool

from db_inspect_bridge.core import DOMAIN_NAME, DatabaseModule
from db_inspect_bridge.models.config import InspectorConfig
from db_inspect_bridge.providers import SQLAlchemyProvider
from db_inspect_bridge.utils import dumps

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# MCP tool name -> Database domain method
TOOL_METHODS = {
    "database_enable": "Database.enable",
    "database_disable": "Database.disable",
    "database_get_table_names": "Database.getDatabaseTableNames",
    "database_execute_sql": "Database.executeSQL",
}


class McpPeer:
    """Inspector peer backed by an MCP server session.

    Notifications are delivered as MCP log messages carrying the protocol
    method and params.
    """

    def __init__(self, session: Any):
        self._session = weakref.ref(session)
        self._session_id = id(session)
        self._pending: set[asyncio.Task] = set()

    @property
    def session(self) -> Optional[Any]:
        """The MCP session, or None once it has been closed and collected."""
        return self._session()

    def send_notification(
        self, method: str, params: Optional[dict[str, Any]] = None
    ) -> None:
        # Called synchronously from protocol handlers running on the loop
        loop = asyncio.get_running_loop()
        session = self.session
        if session is None:
            logger.debug(f"Dropping {method} for closed session of {self!r}")
            return
        task = loop.create_task(
            session.send_log_message(
                level="info",
                data={"method": method, "params": params or {}},
                logger=DOMAIN_NAME,
            )
        )
        self._pending.add(task)
        task.add_done_callback(self._on_sent)

    def _on_sent(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                f"Failed to deliver notification to {self!r}: {error}",
                exc_info=error,
            )

    async def drain(self) -> None:
        """Wait for notifications still being delivered."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def __repr__(self) -> str:
        return f"McpPeer(session={self._session_id:#x})"


def _text(payload: Any) -> list[TextContent]:
    return [TextContent(type="text", text=dumps(payload, indent=True))]


class InspectorMCPServer:
    """MCP server exposing the Database inspector domain."""

    def __init__(self, config: InspectorConfig):
        """
        Initialize inspector MCP server.

        Args:
            config: Inspector configuration
        """
        self.config = config
        self.provider = SQLAlchemyProvider(config.databases)
        self.module = DatabaseModule([self.provider], config)
        self.server = Server("db-inspect-bridge")
        # Entries go away with their session
        self._peers: "weakref.WeakKeyDictionary[Any, McpPeer]" = (
            weakref.WeakKeyDictionary()
        )

    def peer_for(self, session: Any) -> McpPeer:
        """Get the peer wrapping an MCP session, creating it on first use."""
        peer = self._peers.get(session)
        if peer is None:
            peer = McpPeer(session)
            self._peers[session] = peer
            # A session that goes away without database_disable still disconnects
            weakref.finalize(session, self.module.disable, peer)
        return peer

    def _create_enable_tool(self) -> Tool:
        """Create database_enable tool."""
        return Tool(
            name="database_enable",
            description="Enable the Database domain; available databases are announced as Database.addDatabase notifications",
            inputSchema={"type": "object", "properties": {}, "required": []},
        )

    def _create_disable_tool(self) -> Tool:
        """Create database_disable tool."""
        return Tool(
            name="database_disable",
            description="Disable the Database domain for this session",
            inputSchema={"type": "object", "properties": {}, "required": []},
        )

    def _create_get_table_names_tool(self) -> Tool:
        """Create database_get_table_names tool."""
        return Tool(
            name="database_get_table_names",
            description="List table and view names of a database",
            inputSchema={
                "type": "object",
                "properties": {
                    "databaseId": {"type": "string", "description": "Database id"},
                },
                "required": ["databaseId"],
            },
        )

    def _create_execute_sql_tool(self) -> Tool:
        """Create database_execute_sql tool."""
        return Tool(
            name="database_execute_sql",
            description=(
                "Execute one SQL statement. Returns columnNames and a flattened "
                f"values list (at most {self.config.max_execute_results} rows), "
                "or sqlError when the statement fails"
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "databaseId": {"type": "string", "description": "Database id"},
                    "query": {
                        "type": "string",
                        "description": "SQL statement to execute",
                    },
                },
                "required": ["databaseId", "query"],
            },
        )

    def list_tools(self) -> list[Tool]:
        return [
            self._create_enable_tool(),
            self._create_disable_tool(),
            self._create_get_table_names_tool(),
            self._create_execute_sql_tool(),
        ]

    async def call_tool(
        self, peer: McpPeer, name: str, arguments: Optional[dict[str, Any]]
    ) -> list[TextContent]:
        """
        Route a tool call to the Database domain method it maps to.

        Raises:
            ValueError: If the tool name is unknown
        """
        method = TOOL_METHODS.get(name)
        if method is None:
            raise ValueError(f"Unknown tool: {name}")
        result = self.module.methods()[method](peer, arguments or {})
        # enable/disable return nothing; reply with an empty object
        return _text(result if result is not None else {})

    def register_handlers(self) -> None:
        """Register MCP list_tools/call_tool handlers on the SDK server."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            return self.list_tools()

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            session = self.server.request_context.session
            return await self.call_tool(self.peer_for(session), name, arguments)

    async def cleanup(self) -> None:
        """Cleanup resources."""
        self.module.close()
        self.provider.dispose()
        for peer in list(self._peers.values()):
            await peer.drain()
        self._peers.clear()
        logger.info("Inspector MCP server cleaned up")


async def main() -> None:
    """Main entry point for the MCP server."""
    config = InspectorConfig.from_env()
    logging.getLogger().setLevel(config.log_level)
    if not config.databases:
        raise ValueError("DATABASE_URLS environment variable must be set")

    mcp_server = InspectorMCPServer(config)
    mcp_server.register_handlers()
    logger.info(f"Serving {len(config.databases)} databases: {', '.join(config.databases)}")

    try:
        from mcp.server.stdio import stdio_server

        async with stdio_server() as (read_stream, write_stream):
            await mcp_server.server.run(
                read_stream,
                write_stream,
                mcp_server.server.create_initialization_options(),
            )
    finally:
        await mcp_server.cleanup()


def cli_entry() -> None:
    """
    Synchronous entry point for console script.

    This function is called by the 'db-inspect-bridge' console script.
    It sets up the event loop and runs the async main() function.
    """
    # Windows-specific event loop policy
    if os.name == "nt":
        asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())  # type: ignore[attr-defined]

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Server error: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    cli_entry()
