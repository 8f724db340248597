"""Domain errors raised by the Circulation Desk.

Malformed input at construction time surfaces as ``pydantic.ValidationError``
from the models themselves; everything below is raised by lending operations.
"""


class LibraryError(Exception):
    """Base exception for library operations."""


class NotFoundError(LibraryError):
    """Raised when a member or book identifier does not exist."""


class NotAvailableError(LibraryError):
    """Raised when no copies of a book are free to lend."""


class QuotaExceededError(LibraryError):
    """Raised when a member is at the loan limit or the fine cap."""


class LoanAlreadyClosedError(LibraryError):
    """Raised when returning a loan that is no longer active."""
