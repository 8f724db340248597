"""
Circulation Desk Models.

Pydantic models for the lending domain:
- Book: Catalog entries with copy counts
- Member: Borrowers with a loan quota and a fine balance
- Loan: Borrowing transactions with due dates and late fines
"""

from .book import Book
from .loan import Loan, LoanStatus
from .member import Member

__all__ = [
    "Book",
    "Loan",
    "LoanStatus",
    "Member",
]
