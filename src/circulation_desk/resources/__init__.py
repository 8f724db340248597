"""Circulation Desk MCP Resources

Resources are read-only views of the library: what is on the shelf, who owes
fines, which books are most popular and each member's loan history.
"""

from .catalog import catalog_resources
from .members import member_resources

all_resources = catalog_resources + member_resources

__all__ = [
    "all_resources",
    "catalog_resources",
    "member_resources",
]
