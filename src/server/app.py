"""MCP stdio server exposing the Gmail tool catalog."""

import logging

import anyio
import mcp.server.stdio
import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions

from src.server.config import ServerConfig
from src.server.toolbox import GmailToolbox
from src.server.tools import TOOL_DEFINITIONS

logger = logging.getLogger(__name__)


def build_server(toolbox: GmailToolbox, config: ServerConfig) -> Server:
    """Create an MCP server whose tools are served by `toolbox`.

    Schema validation is left to the toolbox so argument errors come back
    in the ``Error executing <tool>: ...`` form.
    """
    server: Server = Server(config.server_name)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return list(TOOL_DEFINITIONS)

    @server.call_tool(validate_input=False)
    async def handle_call_tool(
        name: str, arguments: dict | None
    ) -> list[types.TextContent]:
        return await call_tool(toolbox, name, arguments)

    return server


async def call_tool(
    toolbox: GmailToolbox, name: str, arguments: dict | None
) -> list[types.TextContent]:
    text = await toolbox.call(name, arguments or {})
    return [types.TextContent(type="text", text=text)]


async def serve(config: ServerConfig) -> None:
    """Run the server over stdin/stdout until the client disconnects."""
    toolbox = GmailToolbox(config)
    server = build_server(toolbox, config)
    async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
        logger.info("%s running on stdio", config.server_name)
        await server.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name=config.server_name,
                server_version=config.server_version,
                capabilities=server.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )


def run_server(config: ServerConfig) -> None:
    """Blocking entry point used by the CLI."""
    anyio.run(serve, config)
