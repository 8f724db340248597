"""Tests for MCP server assembly."""

from circulation_desk.config import LibrarySettings
from circulation_desk.library import get_library
from circulation_desk.server import create_server


def test_server_uses_configured_name(library, clean_env):
    mcp = create_server(library, LibrarySettings(_env_file=None, server_name="branch-desk"))
    assert mcp.name == "branch-desk"


def test_handlers_see_the_served_library(library):
    create_server(library, library.config)
    assert get_library() is library
