"""Circulation Desk MCP Tools

Tools perform actions that change library state (lending, returns, payments).
Read-only views live in the resources package.
"""

from .circulation import circulation_tools

all_tools = circulation_tools

__all__ = [
    "all_tools",
    "circulation_tools",
]
