"""
Circulation tools for the Circulation Desk MCP server.

Tools are the operations with side effects:
1. add_book: Put a title in the catalog
2. register_member: Enroll a new member
3. borrow_book: Lend a copy to a member
4. return_book: Take a copy back and assess the late fine
5. pay_fine: Apply a payment to a member's balance

Each handler validates its arguments with a Pydantic schema, calls the
shared Library, and answers with MCP content. Domain failures come back as
``isError`` responses instead of exceptions so the client can read them.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from ..errors import LibraryError, NotFoundError
from ..library import get_library
from ..models.book import Book
from ..models.loan import Loan

logger = logging.getLogger(__name__)


def _error_response(text: str) -> dict[str, Any]:
    return {"isError": True, "content": [{"type": "text", "text": text}]}


def _text_response(text: str, data: dict[str, Any]) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": text}], "data": data}


def loan_data(loan: Loan, today: date) -> dict[str, Any]:
    """Structured view of a loan, including the fine as of ``today``."""
    return {
        "member_id": loan.member_id,
        "book_isbn": loan.book_isbn,
        "start_date": loan.start_date.isoformat(),
        "due_date": loan.due_date.isoformat(),
        "return_date": loan.return_date.isoformat() if loan.return_date else None,
        "status": loan.status,
        "days_late": loan.days_late(today),
        "current_fine": str(loan.current_fine(today)),
    }


# =============================================================================
# CATALOG AND MEMBERSHIP TOOLS
# =============================================================================


class AddBookInput(BaseModel):
    """Input schema for the add_book tool."""

    isbn: str = Field(
        ...,
        description="ISBN-13 of the book, digits only",
        examples=["9780306406157"],
    )
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Author name")
    publication_year: int = Field(..., description="Year of publication")
    total_copies: int = Field(..., description="Number of copies the library owns")


async def add_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Handler for the add_book tool."""
    try:
        params = AddBookInput.model_validate(arguments)
        book = Book(**params.model_dump())
    except ValidationError as e:
        logger.warning("Invalid book parameters: %s", e)
        return _error_response(f"Invalid book parameters: {e}")

    try:
        get_library().add_book(book)
    except Exception as e:
        logger.exception("Unexpected error in add_book tool")
        return _error_response(f"An unexpected error occurred: {e!s}")

    return _text_response(
        f"Added '{book.title}' ({book.isbn}) with {book.total_copies} copies.",
        {"book": book.model_dump(mode="json")},
    )


class RegisterMemberInput(BaseModel):
    """Input schema for the register_member tool."""

    name: str = Field(..., description="Full name of the new member")
    email: str = Field(..., description="Contact email address")


async def register_member_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Handler for the register_member tool.

    The library assigns the member number; clients never choose it.
    """
    try:
        params = RegisterMemberInput.model_validate(arguments)
        member = get_library().new_member(params.name, params.email)
    except ValidationError as e:
        logger.warning("Invalid member parameters: %s", e)
        return _error_response(f"Invalid member parameters: {e}")
    except Exception as e:
        logger.exception("Unexpected error in register_member tool")
        return _error_response(f"An unexpected error occurred: {e!s}")

    return _text_response(
        f"Registered member {member.id}: {member.name}.",
        {"member": member.model_dump(mode="json")},
    )


# =============================================================================
# BORROW / RETURN TOOLS
# =============================================================================


class BorrowBookInput(BaseModel):
    """Input schema for the borrow_book and return_book tools."""

    member_id: int = Field(
        ...,
        description="Member number of the borrower",
        ge=1,
        examples=[1, 2],
    )
    book_isbn: str = Field(
        ...,
        description="ISBN-13 of the book",
        pattern=r"^\d{13}$",
        examples=["9780306406157"],
    )


async def borrow_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """
    Handler for the borrow_book tool.

    Rejections (unknown member or book, quota reached, no copies left) are
    reported back to the client; nothing changes in the library when they
    happen.
    """
    try:
        params = BorrowBookInput.model_validate(arguments)
    except ValidationError as e:
        logger.warning("Invalid borrow parameters: %s", e)
        return _error_response(f"Invalid borrow parameters: {e}")

    library = get_library()
    try:
        loan = library.borrow(params.member_id, params.book_isbn)
    except NotFoundError as e:
        logger.info("Borrow failed - entity not found: %s", e)
        return _error_response(str(e))
    except LibraryError as e:
        logger.info("Borrow failed - business rule: %s", e)
        return _error_response(str(e))
    except Exception as e:
        logger.exception("Unexpected error in borrow_book tool")
        return _error_response(f"An unexpected error occurred: {e!s}")

    message = (
        f"Member {loan.member_id} borrowed '{loan.book_isbn}'. "
        f"Due date: {loan.due_date.strftime('%B %d, %Y')} "
        f"({loan.loan_period_days}-day loan)"
    )
    return _text_response(message, {"loan": loan_data(loan, library.today())})


async def return_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """
    Handler for the return_book tool.

    Returning a book the member does not hold is not an error; it simply
    charges nothing.
    """
    try:
        params = BorrowBookInput.model_validate(arguments)
    except ValidationError as e:
        logger.warning("Invalid return parameters: %s", e)
        return _error_response(f"Invalid return parameters: {e}")

    library = get_library()
    try:
        fine = library.return_book(params.member_id, params.book_isbn)
        balance = library.get_member(params.member_id).fine_balance
    except NotFoundError as e:
        logger.info("Return failed - entity not found: %s", e)
        return _error_response(str(e))
    except LibraryError as e:
        logger.info("Return failed - business rule: %s", e)
        return _error_response(str(e))
    except Exception as e:
        logger.exception("Unexpected error in return_book tool")
        return _error_response(f"An unexpected error occurred: {e!s}")

    if fine > 0:
        message = f"Book '{params.book_isbn}' returned late. Fine assessed: {fine}"
    else:
        message = f"Book '{params.book_isbn}' returned with no fine."

    return _text_response(
        message,
        {
            "return": {
                "member_id": params.member_id,
                "book_isbn": params.book_isbn,
                "fine": str(fine),
                "fine_balance": str(balance),
            }
        },
    )


# =============================================================================
# FINE PAYMENT TOOL
# =============================================================================


class PayFineInput(BaseModel):
    """Input schema for the pay_fine tool."""

    member_id: int = Field(..., description="Member number", ge=1)
    amount: Decimal = Field(..., description="Amount paid", gt=0, examples=["500", "1000"])


async def pay_fine_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Handler for the pay_fine tool."""
    try:
        params = PayFineInput.model_validate(arguments)
    except ValidationError as e:
        logger.warning("Invalid payment parameters: %s", e)
        return _error_response(f"Invalid payment parameters: {e}")

    try:
        balance = get_library().pay_fine(params.member_id, params.amount)
    except NotFoundError as e:
        logger.info("Payment failed - member not found: %s", e)
        return _error_response(str(e))
    except Exception as e:
        logger.exception("Unexpected error in pay_fine tool")
        return _error_response(f"An unexpected error occurred: {e!s}")

    return _text_response(
        f"Payment of {params.amount} recorded for member {params.member_id}. "
        f"Remaining balance: {balance}",
        {
            "payment": {
                "member_id": params.member_id,
                "amount": str(params.amount),
                "fine_balance": str(balance),
            }
        },
    )


circulation_tools: list[dict[str, Any]] = [
    {
        "name": "add_book",
        "description": "Add a book to the catalog (replaces an existing entry with the same ISBN)",
        "handler": add_book_handler,
    },
    {
        "name": "register_member",
        "description": "Register a new member; the library assigns the member number",
        "handler": register_member_handler,
    },
    {
        "name": "borrow_book",
        "description": (
            "Lend a copy of a book to a member. Fails when the member is at the "
            "loan limit or fine cap, or when no copies are available."
        ),
        "handler": borrow_book_handler,
    },
    {
        "name": "return_book",
        "description": "Return a borrowed book and charge any late fine",
        "handler": return_book_handler,
    },
    {
        "name": "pay_fine",
        "description": "Record a payment against a member's fine balance",
        "handler": pay_fine_handler,
    },
]
