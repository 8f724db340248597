"""Catalog Resources - Shelf and Popularity Reports

Resources:
- library://books/available - Books with at least one copy on the shelf
- library://stats/top-borrowed - Most borrowed books, highest count first
"""

import logging
from typing import Any

from fastmcp.exceptions import ResourceError
from pydantic import BaseModel, Field

from ..library import get_library
from ..models.book import Book

logger = logging.getLogger(__name__)


class BookListResponse(BaseModel):
    """Response schema for book listings."""

    books: list[Book] = Field(..., description="Books in report order")
    total: int = Field(..., description="Number of books listed")


class RankedBook(BaseModel):
    """A book together with how many times it has been lent."""

    rank: int = Field(..., ge=1)
    borrow_count: int = Field(..., ge=0)
    book: Book


async def available_books_handler() -> dict[str, Any]:
    """Returns every book that can be borrowed right now."""
    try:
        books = get_library().available_books()
        logger.debug("MCP Resource Request - books/available: %d books", len(books))
        return BookListResponse(books=books, total=len(books)).model_dump(mode="json")
    except Exception as e:
        logger.exception("Error in books/available resource")
        raise ResourceError(f"Failed to retrieve available books: {e!s}") from e


async def top_borrowed_handler() -> dict[str, Any]:
    """Returns the most borrowed books, limited by ``top_books_limit``."""
    try:
        library = get_library()
        limit = library.config.top_books_limit
        ranking = [
            RankedBook(rank=position, borrow_count=library.borrow_count(book.isbn), book=book)
            for position, book in enumerate(library.top_borrowed_books(limit), start=1)
        ]
        return {
            "limit": limit,
            "ranking": [entry.model_dump(mode="json") for entry in ranking],
        }
    except Exception as e:
        logger.exception("Error in stats/top-borrowed resource")
        raise ResourceError(f"Failed to retrieve borrowing ranking: {e!s}") from e


catalog_resources: list[dict[str, Any]] = [
    {
        "uri": "library://books/available",
        "name": "Available Books",
        "description": "Books with at least one copy on the shelf",
        "mime_type": "application/json",
        "handler": available_books_handler,
    },
    {
        "uri": "library://stats/top-borrowed",
        "name": "Most Borrowed Books",
        "description": "Books ranked by number of loans, ties ordered by ISBN",
        "mime_type": "application/json",
        "handler": top_borrowed_handler,
    },
]
