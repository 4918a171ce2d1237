"""FastMCP server initialization for Delaycoach MCP."""

import logging

from mcp.server.fastmcp import FastMCP

from delaycoach_mcp.config import get_settings
from delaycoach_mcp.log import configure_logging

logger = logging.getLogger(__name__)

# Initialize the MCP server
mcp = FastMCP("delaycoach_mcp")


def run() -> None:
    """Run the MCP server."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting delaycoach_mcp with data file %s", settings.data_file)

    mcp.run()

