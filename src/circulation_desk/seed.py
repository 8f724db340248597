"""
Sample data for the Circulation Desk.

Loads a small catalog and two members so the console and the MCP server
have something to lend right after startup.
"""

import logging

from .library import Library
from .models.book import Book

logger = logging.getLogger(__name__)

SAMPLE_BOOKS = [
    {
        "isbn": "9780306406157",
        "title": "The Wizard's Adventures",
        "author": "Rodrigo Alfonso",
        "publication_year": 1980,
        "total_copies": 300,
    },
    {
        "isbn": "9783161484100",
        "title": "Before Dying",
        "author": "Jorge Salamar",
        "publication_year": 2000,
        "total_copies": 600,
    },
]

SAMPLE_MEMBERS = [
    {"name": "Felipe", "email": "felipe@gmail.com"},
    {"name": "Tatiana", "email": "tatiana@gmail.com"},
]


def preload_sample_data(library: Library) -> None:
    """Add the sample books and members to ``library``."""
    for data in SAMPLE_BOOKS:
        library.add_book(Book(**data))
    for data in SAMPLE_MEMBERS:
        library.new_member(data["name"], data["email"])

    logger.info(
        "Loaded %d sample books and %d sample members", len(SAMPLE_BOOKS), len(SAMPLE_MEMBERS)
    )
