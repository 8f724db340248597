"""
Menu-driven text console for the Circulation Desk.

The console reads raw input, parses it into the primitive arguments the
Library expects and prints results one entity per line. Domain failures are
shown as ``Error: ...`` and the menu comes back; only option 0 or the end of
input leaves the loop.
"""

import logging
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import TextIO

from pydantic import ValidationError

from .errors import LibraryError
from .library import Library
from .models.book import Book
from .models.loan import Loan
from .models.member import Member

logger = logging.getLogger(__name__)

MENU = """
=== CIRCULATION DESK ===
1. Add book
2. Register member
3. Borrow book
4. Return book
5. List available books
6. Loans for member
7. Members with fines
8. Top {limit} most borrowed books
9. Pay fine
0. Exit"""


def format_book(book: Book) -> str:
    return (
        f"ISBN:{book.isbn} | {book.title} - {book.author} ({book.publication_year}) "
        f"[{book.available_copies}/{book.total_copies} available]"
    )


def format_member(member: Member) -> str:
    return (
        f"Member[{member.id}] {member.name} | email: {member.email} | "
        f"Borrowed: {member.borrowed_count} | Fines: ${member.fine_balance}"
    )


def format_loan(loan: Loan, today: date) -> str:
    return (
        f"Loan{{member={loan.member_id}, isbn={loan.book_isbn}, start={loan.start_date}, "
        f"due={loan.due_date}, status={loan.status}, current fine=${loan.current_fine(today)}}}"
    )


def describe_error(error: Exception) -> str:
    """One-line message for a failure the user can correct."""
    if isinstance(error, ValidationError):
        return "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'input'}: {err['msg']}"
            for err in error.errors()
        )
    return str(error)


class LibraryConsole:
    """Interactive menu over a Library."""

    def __init__(self, library: Library, stdin: TextIO | None = None, stdout: TextIO | None = None):
        self.library = library
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.actions = {
            1: self.add_book,
            2: self.register_member,
            3: self.borrow,
            4: self.return_book,
            5: self.list_available,
            6: self.member_loans,
            7: self.members_with_fines,
            8: self.top_books,
            9: self.pay_fine,
        }

    def run(self) -> None:
        """Show the menu until the user exits or input runs out."""
        while True:
            self.write(MENU.format(limit=self.library.config.top_books_limit))
            try:
                option = self.read_int("Option: ")
            except EOFError:
                self.write("")
                break

            if option == 0:
                self.write("Goodbye.")
                break

            action = self.actions.get(option)
            if action is None:
                self.write("Invalid option.")
                continue

            try:
                action()
            except EOFError:
                self.write("")
                break
            except (LibraryError, ValidationError) as e:
                logger.debug("Console action %d failed: %s", option, e)
                self.write(f"Error: {describe_error(e)}")

    # =========================================================================
    # INPUT / OUTPUT
    # =========================================================================

    def write(self, text: str) -> None:
        print(text, file=self.stdout)

    def read_text(self, prompt: str) -> str:
        """Prompt and read one line. Raises EOFError at end of input."""
        self.stdout.write(prompt)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise EOFError
        return line.strip()

    def read_int(self, prompt: str) -> int:
        """Prompt until the user types a whole number."""
        text = self.read_text(prompt)
        while True:
            try:
                return int(text)
            except ValueError:
                text = self.read_text("Enter a number: ")

    def read_amount(self, prompt: str) -> Decimal:
        """Prompt until the user types a decimal amount."""
        text = self.read_text(prompt)
        while True:
            try:
                amount = Decimal(text)
            except InvalidOperation:
                amount = None
            if amount is not None and amount.is_finite():
                return amount
            text = self.read_text("Enter an amount: ")

    # =========================================================================
    # MENU ACTIONS
    # =========================================================================

    def add_book(self) -> None:
        self.write("== Add book ==")
        isbn = self.read_text("ISBN (13 digits): ")
        title = self.read_text("Title: ")
        author = self.read_text("Author: ")
        year = self.read_int("Year: ")
        total = self.read_int("Total copies: ")
        book = self.library.add_book(
            Book(
                isbn=isbn,
                title=title,
                author=author,
                publication_year=year,
                total_copies=total,
            )
        )
        self.write(f"Book added: {format_book(book)}")

    def register_member(self) -> None:
        self.write("== Register member ==")
        name = self.read_text("Name: ")
        email = self.read_text("Email: ")
        member = self.library.new_member(name, email)
        self.write(f"Member created: {format_member(member)}")

    def borrow(self) -> None:
        self.write("== Borrow book ==")
        member_id = self.read_int("Member ID: ")
        isbn = self.read_text("ISBN: ")
        loan = self.library.borrow(member_id, isbn)
        self.write(f"Loan granted: {format_loan(loan, self.library.today())}")

    def return_book(self) -> None:
        self.write("== Return book ==")
        member_id = self.read_int("Member ID: ")
        isbn = self.read_text("ISBN: ")
        fine = self.library.return_book(member_id, isbn)
        if fine > 0:
            self.write(f"Book returned with a fine of ${fine}")
        else:
            self.write("Book returned with no fine.")

    def list_available(self) -> None:
        self.write("== Available books ==")
        for book in self.library.available_books():
            self.write(format_book(book))

    def member_loans(self) -> None:
        member_id = self.read_int("Member ID: ")
        today = self.library.today()
        for loan in self.library.loans_for_member(member_id):
            self.write(format_loan(loan, today))

    def members_with_fines(self) -> None:
        self.write("== Members with fines ==")
        for member in self.library.members_with_fines():
            self.write(format_member(member))

    def top_books(self) -> None:
        limit = self.library.config.top_books_limit
        self.write(f"== Top {limit} most borrowed books ==")
        for book in self.library.top_borrowed_books(limit):
            self.write(format_book(book))

    def pay_fine(self) -> None:
        self.write("== Pay fine ==")
        member_id = self.read_int("Member ID: ")
        amount = self.read_amount("Amount: ")
        balance = self.library.pay_fine(member_id, amount)
        self.write(f"Payment recorded. Remaining balance: ${balance}")
