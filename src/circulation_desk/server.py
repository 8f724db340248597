"""Circulation Desk MCP Server

Exposes the library to MCP clients over the stdio transport:
- Tools: add books, register members, borrow, return, pay fines
- Resources: available books, most borrowed books, members with fines,
  per-member loan history
"""

import logging

from fastmcp import FastMCP

from .config import LibrarySettings, get_config
from .library import Library, set_library
from .resources import all_resources
from .tools import all_tools

logger = logging.getLogger(__name__)

INSTRUCTIONS = (
    "Circulation Desk - a small library lending service. Use the tools to add "
    "books, register members, lend and take back books and record fine "
    "payments. Use the resources to see what is on the shelf, who owes fines, "
    "which books are most borrowed and each member's loan history."
)


def create_server(library: Library, config: LibrarySettings | None = None) -> FastMCP:
    """Build a FastMCP server whose handlers operate on ``library``."""
    config = config or get_config()
    set_library(library)

    mcp = FastMCP(name=config.server_name, instructions=INSTRUCTIONS)

    for resource in all_resources:
        uri = resource.get("uri_template", resource.get("uri"))
        logger.debug("Registering resource: %s with URI: %s", resource["name"], uri)
        mcp.resource(
            uri,
            name=resource["name"],
            description=resource["description"],
            mime_type=resource["mime_type"],
        )(resource["handler"])

    logger.info("Registered %d resources", len(all_resources))

    for tool in all_tools:
        logger.debug("Registering tool: %s", tool["name"])
        mcp.tool(name=tool["name"], description=tool["description"])(tool["handler"])

    logger.info("Registered %d tools", len(all_tools))
    return mcp


def serve(library: Library, config: LibrarySettings | None = None) -> None:
    """Run the MCP server on stdio until the client disconnects."""
    config = config or get_config()
    mcp = create_server(library, config)
    logger.info(
        "Starting %s v%s on stdio", config.server_name, config.server_version
    )
    try:
        mcp.run()
    except KeyboardInterrupt:
        logger.info("Server interrupted, shutting down")
