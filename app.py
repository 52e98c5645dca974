"""Dear Baby MCP server - Solid Start recipe tools.

Single entry point for the MCP server:
- Validates configuration (fail fast on missing SOLIDSTART_BASE_URL)
- Verifies the Solid Start API is reachable, with retries (VERIFY_CONNECTION=true)
- Registers the recipe tools on a FastMCP server
- Serves them over MCP_TRANSPORT (streamable-http by default)
- Closes the Solid Start client when the server stops

Run with: python app.py
"""

import asyncio

from mcp.server.fastmcp import FastMCP

from src.mcp_tools.recipe_tools import RecipeTools
from src.mcp_tools.solidstart import SolidStartClient
from src.server.mcp_server import create_mcp_server
from src.utils.config import config
from src.utils.logger import logger

# MCP_TRANSPORT -> FastMCP coroutine serving it
TRANSPORT_RUNNERS = {
    "stdio": "run_stdio_async",
    "sse": "run_sse_async",
    "streamable-http": "run_streamable_http_async",
}


async def _verify_connection() -> None:
    # Probe with a short-lived client; the server's client opens its own session on the server loop
    async with SolidStartClient.from_config(config) as probe:
        await probe.verify_connection()


def build_server() -> tuple[FastMCP, SolidStartClient]:
    """Validate configuration and build the MCP server.

    Returns:
        Tuple of (FastMCP server, SolidStartClient). run_server() closes the client.

    Raises:
        SystemExit: If configuration is invalid or the API is unreachable.
    """
    try:
        config.validate()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        raise SystemExit(1) from e

    if config.VERIFY_CONNECTION:
        try:
            asyncio.run(_verify_connection())
        except ConnectionError as e:
            logger.error(f"✗ Solid Start API check failed: {e}")
            raise SystemExit(1) from e
    else:
        logger.info("Skipping Solid Start connection check (VERIFY_CONNECTION=false)")

    client = SolidStartClient.from_config(config)
    recipe_tools = RecipeTools.from_config(client, config)
    return create_mcp_server(recipe_tools, host=config.HOST, port=config.PORT), client


async def run_server(server: FastMCP, client: SolidStartClient, transport: str) -> None:
    """Serve until the transport shuts down, then close the Solid Start client."""
    try:
        await getattr(server, TRANSPORT_RUNNERS[transport])()
    finally:
        await client.close()
        logger.info("Solid Start client closed")


if __name__ == "__main__":
    server, client = build_server()
    if config.MCP_TRANSPORT == "stdio":
        logger.info("Starting Dear Baby MCP server on stdio")
    else:
        logger.info(f"Starting Dear Baby MCP server ({config.MCP_TRANSPORT}) on {config.HOST}:{config.PORT}")
    asyncio.run(run_server(server, client, config.MCP_TRANSPORT))
