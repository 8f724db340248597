"""
Circulation Desk Package.

An in-memory library lending service: books with copy counts, members with
loan quotas and fines, and loans with due dates and late fees.

Key Components:
- models: Pydantic models for books, members and loans
- library: The coordinator enforcing lending rules
- config: Lending policy and settings with pydantic-settings
- console: Menu-driven text interface
- tools / resources / server: MCP interface over stdio
"""

__version__ = "0.1.0"

from .clock import FixedClock, SystemClock
from .errors import (
    LibraryError,
    LoanAlreadyClosedError,
    NotAvailableError,
    NotFoundError,
    QuotaExceededError,
)
from .library import Library, MemberIdAllocator
from .models import Book, Loan, LoanStatus, Member

__all__ = [
    "Book",
    "FixedClock",
    "Library",
    "LibraryError",
    "Loan",
    "LoanAlreadyClosedError",
    "LoanStatus",
    "Member",
    "MemberIdAllocator",
    "NotAvailableError",
    "NotFoundError",
    "QuotaExceededError",
    "SystemClock",
    "__version__",
]
