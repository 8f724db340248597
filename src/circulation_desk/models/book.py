"""
Book model for the Circulation Desk.

A book is a catalog entry identified by a 13-digit ISBN. The library owns a
fixed number of copies; ``available_copies`` moves down on every loan and
back up on every return, never leaving the ``[0, total_copies]`` range.
"""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..errors import NotAvailableError


class Book(BaseModel):
    """
    Represents a book in the library catalog.

    Loans refer to books by ISBN only, so the catalog entry is the single
    place where copy counts live.
    """

    isbn: str = Field(
        ...,
        description="ISBN-13, digits only",
        pattern=r"^\d{13}$",
        frozen=True,
        examples=["9780306406157", "9783161484100"],
    )

    title: str = Field(
        ...,
        description="The title of the book",
        max_length=500,
        examples=["The Great Gatsby"],
    )

    author: str = Field(
        ...,
        description="Author name as printed on the cover",
        max_length=200,
        examples=["F. Scott Fitzgerald"],
    )

    publication_year: int = Field(
        ...,
        description="Year the book was published",
        examples=[1925, 1980],
    )

    total_copies: int = Field(
        ...,
        description="Total number of copies owned by the library",
        ge=0,
        frozen=True,
        examples=[1, 3, 300],
    )

    available_copies: int = Field(
        ...,
        description="Number of copies currently on the shelf",
        ge=0,
        examples=[0, 1, 5],
    )

    @model_validator(mode="before")
    @classmethod
    def default_available_copies(cls, data: Any) -> Any:
        """A new book starts with every copy on the shelf."""
        if isinstance(data, dict) and data.get("available_copies") is None:
            data = {**data, "available_copies": data.get("total_copies")}
        return data

    @field_validator("publication_year")
    @classmethod
    def validate_publication_year(cls, v: int) -> int:
        """Publication year must be positive and not in the future."""
        if v <= 0 or v > date.today().year:
            raise ValueError(f"Publication year must be between 1 and {date.today().year}")
        return v

    @model_validator(mode="after")
    def validate_copies(self) -> "Book":
        """Ensure available copies doesn't exceed total copies."""
        if self.available_copies > self.total_copies:
            raise ValueError("Available copies cannot exceed total copies")
        return self

    @property
    def checked_out_copies(self) -> int:
        """Calculate number of copies currently on loan."""
        return self.total_copies - self.available_copies

    def is_available(self) -> bool:
        """Check if the book has any copy on the shelf."""
        return self.available_copies > 0

    def borrow(self) -> None:
        """
        Take one copy off the shelf.

        Raises:
            NotAvailableError: If no copies are available
        """
        if not self.is_available():
            raise NotAvailableError(f"No copies of '{self.title}' are available")
        self.available_copies -= 1

    def return_copy(self) -> None:
        """Put one copy back on the shelf; extra returns are ignored."""
        if self.available_copies < self.total_copies:
            self.available_copies += 1

    model_config = ConfigDict(
        validate_assignment=True,
        str_strip_whitespace=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "isbn": "9780306406157",
                "title": "The Wizard's Adventures",
                "author": "Rodrigo Alfonso",
                "publication_year": 1980,
                "total_copies": 3,
                "available_copies": 2,
            }
        },
    )
