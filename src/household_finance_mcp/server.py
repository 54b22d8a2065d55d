"""
MCP server for household finance data.

Exposes accounts, transactions, asset history and zakat through the Model
Context Protocol.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from household_finance_mcp.core.database import FinanceDatabase
from household_finance_mcp.core.exceptions import HouseholdFinanceError
from household_finance_mcp.core.identity import IdentityProvider
from household_finance_mcp.core.market import GoldPriceFeed
from household_finance_mcp.core.store import DocumentStore
from household_finance_mcp.tools.tools import HouseholdFinanceTools, create_tool_schemas

logger = logging.getLogger(__name__)

# Tools that still answer when no data document exists yet
_NO_DATA_TOOLS = {"get_session", "get_notifications"}


class HouseholdFinanceServer:
    """MCP server for household finance data."""

    def __init__(
        self,
        data_path: Optional[Path] = None,
        store: Optional[DocumentStore] = None,
        gold_feed: Optional[GoldPriceFeed] = None,
        identity: Optional[IdentityProvider] = None,
    ):
        """
        Initialize the MCP server.

        Args:
            data_path: Optional path to the JSON data document.
                    If None, uses ~/.household-finance/data.json.
            store: Explicit document store (overrides data_path)
            gold_feed: Gold price source for zakat assessments
            identity: Signed-in user provider
        """
        self.db = FinanceDatabase(data_path, store=store)
        self.tools = HouseholdFinanceTools(self.db, gold_feed=gold_feed, identity=identity)
        self.server = Server("household-finance-mcp")

        self._register_handlers()

    def _register_handlers(self) -> None:
        """Register MCP protocol handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            """List available tools."""
            return self.list_tools()

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            """Handle tool calls."""
            return await self.handle_tool_call(name, arguments)

    def list_tools(self) -> list[Tool]:
        return [
            Tool(
                name=schema["name"],
                description=schema["description"],
                inputSchema=schema["inputSchema"],
            )
            for schema in create_tool_schemas()
        ]

    async def handle_tool_call(
        self, name: str, arguments: Optional[dict[str, Any]]
    ) -> list[TextContent]:
        """
        Route a tool call to its handler and format the result as JSON text.

        Args:
            name: Tool name
            arguments: Tool arguments

        Returns:
            Single text content with JSON or an error message
        """
        arguments = arguments or {}

        if name not in _NO_DATA_TOOLS and not self.db.is_available():
            error_msg = (
                "Data not available. Please create the household data document "
                "(see scripts/seed_demo_data.py) or provide a custom data path."
            )
            return [TextContent(type="text", text=error_msg)]

        handler = getattr(self.tools, name, None)
        if handler is None or name not in self._tool_names():
            return [TextContent(type="text", text=f"Unknown tool: {name}")]

        try:
            result = handler(**arguments)
            return [TextContent(type="text", text=json.dumps(result, indent=2))]

        except (HouseholdFinanceError, ValueError) as e:
            # Validation errors and domain errors (e.g., account not found)
            return [TextContent(type="text", text=f"Error: {str(e)}")]
        except Exception as e:
            logger.exception(f"Error executing tool {name}")
            return [
                TextContent(
                    type="text",
                    text=f"Error executing tool: {str(e)}",
                )
            ]

    @staticmethod
    def _tool_names() -> set[str]:
        return {schema["name"] for schema in create_tool_schemas()}

    async def run(self) -> None:  # pragma: no cover
        """Run the MCP server using stdio transport."""
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


async def run_server(
    data_path: Optional[Path] = None,
    gold_feed: Optional[GoldPriceFeed] = None,
    identity: Optional[IdentityProvider] = None,
) -> None:  # pragma: no cover
    """
    Run the household finance MCP server.

    Args:
        data_path: Optional path to the JSON data document.
        gold_feed: Gold price source
        identity: Signed-in user provider
    """
    server = HouseholdFinanceServer(data_path, gold_feed=gold_feed, identity=identity)
    await server.run()
