"""
Tests for circulation tools (add, register, borrow, return, pay).

These tests demonstrate testing of MCP tools:
1. Input validation
2. Success scenarios
3. Error handling
4. Business rule enforcement
5. State modifications
"""

from decimal import Decimal

import pytest

from circulation_desk.tools import all_tools
from circulation_desk.tools.circulation import (
    add_book_handler,
    borrow_book_handler,
    pay_fine_handler,
    register_member_handler,
    return_book_handler,
)

from conftest import MULTI_COPY_ISBN, SINGLE_COPY_ISBN


def _text(result) -> str:
    return result["content"][0]["text"]


class TestAddBookTool:
    """Test the add_book MCP tool."""

    async def test_add_book_success(self, installed_library):
        result = await add_book_handler(
            {
                "isbn": "9780134685479",
                "title": "Effective Reading",
                "author": "Ana Ruiz",
                "publication_year": 2018,
                "total_copies": 2,
            }
        )

        assert not result.get("isError")
        assert "Effective Reading" in _text(result)
        assert result["data"]["book"]["available_copies"] == 2
        assert installed_library.get_book("9780134685479").total_copies == 2

    async def test_add_book_invalid_isbn(self, installed_library):
        result = await add_book_handler(
            {
                "isbn": "123",
                "title": "Bad",
                "author": "Nobody",
                "publication_year": 2018,
                "total_copies": 1,
            }
        )

        assert result["isError"] is True
        assert "Invalid book parameters" in _text(result)
        assert installed_library.books() == []

    async def test_add_book_missing_fields(self, installed_library):
        result = await add_book_handler({"isbn": "9780134685479"})
        assert result["isError"] is True


class TestRegisterMemberTool:
    """Test the register_member MCP tool."""

    async def test_register_assigns_ids(self, installed_library):
        first = await register_member_handler({"name": "Felipe", "email": "felipe@gmail.com"})
        second = await register_member_handler({"name": "Tatiana", "email": "tatiana@gmail.com"})

        assert first["data"]["member"]["id"] == 1
        assert second["data"]["member"]["id"] == 2
        assert "Registered member 2" in _text(second)

    async def test_register_invalid_email(self, installed_library):
        result = await register_member_handler({"name": "Felipe", "email": "not-an-email"})

        assert result["isError"] is True
        assert "Invalid member parameters" in _text(result)
        assert installed_library.members() == []


class TestBorrowBookTool:
    """Test the borrow_book MCP tool."""

    async def test_borrow_success(self, installed_library, member_a, multi_copy_book):
        result = await borrow_book_handler(
            {"member_id": member_a.id, "book_isbn": MULTI_COPY_ISBN}
        )

        assert not result.get("isError")
        assert "Due date: January 19, 2026" in _text(result)
        assert "(14-day loan)" in _text(result)

        loan = result["data"]["loan"]
        assert loan["member_id"] == member_a.id
        assert loan["book_isbn"] == MULTI_COPY_ISBN
        assert loan["status"] == "active"
        assert loan["start_date"] == "2026-01-05"
        assert loan["due_date"] == "2026-01-19"
        assert loan["return_date"] is None
        assert loan["current_fine"] == "0"

        assert multi_copy_book.available_copies == 4

    async def test_borrow_unknown_member(self, installed_library, single_copy_book):
        result = await borrow_book_handler({"member_id": 99, "book_isbn": SINGLE_COPY_ISBN})

        assert result["isError"] is True
        assert "Member 99 not found" in _text(result)

    async def test_borrow_unavailable(self, installed_library, member_a, member_b, single_copy_book):
        await borrow_book_handler({"member_id": member_a.id, "book_isbn": SINGLE_COPY_ISBN})
        result = await borrow_book_handler(
            {"member_id": member_b.id, "book_isbn": SINGLE_COPY_ISBN}
        )

        assert result["isError"] is True
        assert "No copies" in _text(result)
        assert member_b.borrowed_count == 0

    async def test_borrow_blocked_by_fines(self, installed_library, member_a, multi_copy_book):
        member_a.add_fine(Decimal("5000"))

        result = await borrow_book_handler(
            {"member_id": member_a.id, "book_isbn": MULTI_COPY_ISBN}
        )

        assert result["isError"] is True
        assert "cannot borrow" in _text(result)

    @pytest.mark.parametrize(
        "arguments",
        [
            {"member_id": 0, "book_isbn": SINGLE_COPY_ISBN},
            {"member_id": 1, "book_isbn": "978-0306406157"},
            {"member_id": 1},
        ],
    )
    async def test_borrow_invalid_input(self, installed_library, arguments):
        result = await borrow_book_handler(arguments)

        assert result["isError"] is True
        assert "Invalid borrow parameters" in _text(result)


class TestReturnBookTool:
    """Test the return_book MCP tool."""

    async def test_return_on_time(self, installed_library, clock, member_a, single_copy_book):
        installed_library.borrow(member_a.id, SINGLE_COPY_ISBN)
        clock.advance(7)

        result = await return_book_handler(
            {"member_id": member_a.id, "book_isbn": SINGLE_COPY_ISBN}
        )

        assert not result.get("isError")
        assert "returned with no fine" in _text(result)
        assert result["data"]["return"]["fine"] == "0"
        assert single_copy_book.available_copies == 1

    async def test_return_late(self, installed_library, clock, member_a, single_copy_book):
        installed_library.borrow(member_a.id, SINGLE_COPY_ISBN)
        clock.advance(16)

        result = await return_book_handler(
            {"member_id": member_a.id, "book_isbn": SINGLE_COPY_ISBN}
        )

        assert "returned late" in _text(result)
        assert Decimal(result["data"]["return"]["fine"]) == Decimal("1000")
        assert Decimal(result["data"]["return"]["fine_balance"]) == Decimal("1000")

    async def test_return_without_loan(self, installed_library, member_a, single_copy_book):
        result = await return_book_handler(
            {"member_id": member_a.id, "book_isbn": SINGLE_COPY_ISBN}
        )

        assert not result.get("isError")
        assert result["data"]["return"]["fine"] == "0"

    async def test_return_unknown_book(self, installed_library, member_a):
        result = await return_book_handler(
            {"member_id": member_a.id, "book_isbn": "9780000000000"}
        )

        assert result["isError"] is True
        assert "not found" in _text(result)


class TestPayFineTool:
    """Test the pay_fine MCP tool."""

    async def test_pay_fine(self, installed_library, member_a):
        member_a.add_fine(Decimal("1500"))

        result = await pay_fine_handler({"member_id": member_a.id, "amount": "500"})

        assert not result.get("isError")
        assert result["data"]["payment"]["fine_balance"] == "1000"
        assert member_a.fine_balance == Decimal("1000")

    async def test_pay_fine_rejects_non_positive(self, installed_library, member_a):
        result = await pay_fine_handler({"member_id": member_a.id, "amount": "0"})

        assert result["isError"] is True
        assert "Invalid payment parameters" in _text(result)

    async def test_pay_fine_unknown_member(self, installed_library):
        result = await pay_fine_handler({"member_id": 7, "amount": "10"})

        assert result["isError"] is True
        assert "Member 7 not found" in _text(result)


def test_tool_registry():
    names = [tool["name"] for tool in all_tools]
    assert names == ["add_book", "register_member", "borrow_book", "return_book", "pay_fine"]
    assert all(callable(tool["handler"]) for tool in all_tools)
