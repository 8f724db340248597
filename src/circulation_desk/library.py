"""
Library coordinator for the Circulation Desk.

The Library owns every book, member and loan and is the only place where
operations touching more than one of them happen:

1. **Borrowing**: quota check, copy checkout, loan creation, popularity count
2. **Returning**: loan closing, fine assessment, copy return
3. **Fines**: payments against a member's balance
4. **Reports**: available books, members with fines, most borrowed books

Every public operation runs under one re-entrant lock, so each is atomic
with respect to the others. Books and members are plain models without
locks of their own.
"""

import logging
import threading
from collections import Counter
from datetime import date
from decimal import Decimal
from typing import Callable, TypeVar

from .clock import Clock, SystemClock
from .config import LibrarySettings, get_config
from .errors import NotFoundError, QuotaExceededError
from .models.book import Book
from .models.loan import Loan
from .models.member import Member, as_money

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MemberIdAllocator:
    """Hands out sequential member numbers, starting at 1."""

    def __init__(self, start: int = 1):
        self._next = start
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            member_id = self._next
            self._next += 1
            return member_id

    def observe(self, member_id: int) -> None:
        """Make sure ids handed out later never collide with ``member_id``."""
        with self._lock:
            self._next = max(self._next, member_id + 1)

    def allocate(self, build: Callable[[int], T]) -> T:
        """
        Build an object with the next id, consuming the id only if ``build`` succeeds.

        The id is reserved for the whole call, so two libraries sharing an
        allocator never build with the same number.
        """
        with self._lock:
            result = build(self._next)
            self._next += 1
            return result

    @property
    def peek(self) -> int:
        """The id the next call to ``next_id`` will return."""
        with self._lock:
            return self._next


class Library:
    """In-memory library holding the catalog, the members and the loan ledger."""

    def __init__(
        self,
        config: LibrarySettings | None = None,
        clock: Clock | None = None,
        id_allocator: MemberIdAllocator | None = None,
    ):
        self.config = config or get_config()
        self.clock = clock or SystemClock()
        self.id_allocator = id_allocator or MemberIdAllocator()

        self._books: dict[str, Book] = {}
        self._members: dict[int, Member] = {}
        self._loans: list[Loan] = []
        self._borrow_counts: Counter[str] = Counter()
        self._lock = threading.RLock()

    # =========================================================================
    # CATALOG AND MEMBERSHIP
    # =========================================================================

    def add_book(self, book: Book) -> Book:
        """Add a book to the catalog, replacing any entry with the same ISBN."""
        with self._lock:
            if book.isbn in self._books:
                logger.info("Replacing catalog entry %s", book.isbn)
            self._books[book.isbn] = book
            logger.debug("Catalog now holds %d books", len(self._books))
            return book

    def register_member(self, member: Member) -> Member:
        """Register a member, replacing any member with the same id."""
        with self._lock:
            self.id_allocator.observe(member.id)
            self._members[member.id] = member
            logger.info("Registered member %d (%s)", member.id, member.name)
            return member

    def new_member(self, name: str, email: str) -> Member:
        """
        Create and register a member with the next free id.

        The member gets the configured loan quota and fine cap.

        Raises:
            pydantic.ValidationError: If the name or email is malformed
        """
        with self._lock:
            member = self.id_allocator.allocate(
                lambda member_id: Member(
                    id=member_id,
                    name=name,
                    email=email,
                    max_active_loans=self.config.max_active_loans,
                    max_fine=self.config.max_fine,
                )
            )
            return self.register_member(member)

    def get_book(self, isbn: str) -> Book:
        with self._lock:
            book = self._books.get(isbn)
            if book is None:
                raise NotFoundError(f"Book {isbn} not found")
            return book

    def get_member(self, member_id: int) -> Member:
        with self._lock:
            member = self._members.get(member_id)
            if member is None:
                raise NotFoundError(f"Member {member_id} not found")
            return member

    def books(self) -> list[Book]:
        with self._lock:
            return list(self._books.values())

    def members(self) -> list[Member]:
        with self._lock:
            return list(self._members.values())

    # =========================================================================
    # CIRCULATION
    # =========================================================================

    def borrow(self, member_id: int, isbn: str) -> Loan:
        """
        Lend a copy of a book to a member.

        Every check runs before any state changes, so a failed borrow leaves
        the book, the member and the ledger untouched.

        Raises:
            NotFoundError: If the member or the book does not exist
            QuotaExceededError: If the member is at the loan limit or fine cap
            NotAvailableError: If every copy is out
        """
        with self._lock:
            member, book = self._lookup(member_id, isbn)

            if not member.can_borrow():
                logger.info(
                    "Borrow denied for member %d: %d books held, balance %s",
                    member_id,
                    member.borrowed_count,
                    member.fine_balance,
                )
                raise QuotaExceededError(
                    f"Member {member_id} cannot borrow more books "
                    f"(holding {member.borrowed_count}/{member.max_active_loans}, "
                    f"fines {member.fine_balance}/{member.max_fine})"
                )

            book.borrow()

            loan = Loan(
                book_isbn=isbn,
                member_id=member_id,
                start_date=self.clock.today(),
                loan_period_days=self.config.loan_period_days,
                daily_fine_rate=self.config.daily_fine_rate,
            )
            self._loans.append(loan)
            member.add_borrowed(isbn)
            self._borrow_counts[isbn] += 1

            logger.info(
                "Member %d borrowed %s, due %s", member_id, isbn, loan.due_date.isoformat()
            )
            return loan

    def return_book(self, member_id: int, isbn: str) -> Decimal:
        """
        Take back a book and assess the late fine.

        Returns:
            The fine charged for this return; zero when the return was on
            time or the member had no active loan of the book

        Raises:
            NotFoundError: If the member or the book does not exist
        """
        with self._lock:
            member, book = self._lookup(member_id, isbn)

            loan = self._find_active_loan(member_id, isbn)
            if loan is None:
                logger.info("No active loan of %s for member %d", isbn, member_id)
                return Decimal("0")

            loan.mark_returned(self.clock.today())
            fine = loan.current_fine(self.clock.today())
            if fine > 0:
                member.add_fine(fine)
            book.return_copy()
            member.remove_borrowed(isbn)

            logger.info(
                "Member %d returned %s (%s), fine %s", member_id, isbn, loan.status, fine
            )
            return fine

    def pay_fine(self, member_id: int, amount: Decimal | int | str) -> Decimal:
        """
        Apply a payment to a member's fine balance.

        Returns:
            The balance left after the payment
        """
        with self._lock:
            member = self.get_member(member_id)
            member.pay_fine(as_money(amount))
            logger.info("Member %d paid %s, balance %s", member_id, amount, member.fine_balance)
            return member.fine_balance

    # =========================================================================
    # REPORTS
    # =========================================================================

    def available_books(self) -> list[Book]:
        with self._lock:
            return [book for book in self._books.values() if book.is_available()]

    def members_with_fines(self) -> list[Member]:
        with self._lock:
            return [member for member in self._members.values() if member.fine_balance > 0]

    def top_borrowed_books(self, n: int) -> list[Book]:
        """
        Most borrowed books, highest count first.

        Ties are ordered by ISBN. ISBNs no longer in the catalog are skipped.
        """
        with self._lock:
            if n <= 0:
                return []
            ranked = sorted(self._borrow_counts.items(), key=lambda item: (-item[1], item[0]))
            top: list[Book] = []
            for isbn, _count in ranked:
                book = self._books.get(isbn)
                if book is None:
                    continue
                top.append(book)
                if len(top) == n:
                    break
            return top

    def borrow_count(self, isbn: str) -> int:
        with self._lock:
            return self._borrow_counts[isbn]

    def loans_for_member(self, member_id: int) -> list[Loan]:
        with self._lock:
            return [loan for loan in self._loans if loan.member_id == member_id]

    def today(self) -> date:
        return self.clock.today()

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _lookup(self, member_id: int, isbn: str) -> tuple[Member, Book]:
        member = self._members.get(member_id)
        book = self._books.get(isbn)
        if member is None:
            raise NotFoundError(f"Member {member_id} not found")
        if book is None:
            raise NotFoundError(f"Book {isbn} not found")
        return member, book

    def _find_active_loan(self, member_id: int, isbn: str) -> Loan | None:
        return next(
            (
                loan
                for loan in self._loans
                if loan.member_id == member_id and loan.book_isbn == isbn and loan.is_active
            ),
            None,
        )


class _LibraryStore:
    """Internal storage for the library served by the tool and resource handlers."""

    _instance: Library | None = None


def get_library() -> Library:
    """Get or create the library the handlers operate on."""
    if _LibraryStore._instance is None:  # type: ignore[reportPrivateUsage]
        _LibraryStore._instance = Library()  # type: ignore[reportPrivateUsage]
    return _LibraryStore._instance  # type: ignore[reportPrivateUsage]


def set_library(library: Library) -> None:
    _LibraryStore._instance = library  # type: ignore[reportPrivateUsage]


def reset_library() -> None:
    """Drop the shared library (useful for testing)."""
    _LibraryStore._instance = None  # type: ignore[reportPrivateUsage]
