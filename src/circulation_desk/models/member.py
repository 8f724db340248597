"""
Member model for the Circulation Desk.

A member borrows books up to a quota and accumulates late fines up to a cap.
Either limit blocks further borrowing until the member returns a book or pays
down the balance.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..errors import QuotaExceededError

MAX_ACTIVE_LOANS = 3
MAX_FINE = Decimal("5000")

EMAIL_PATTERN = r"^[A-Za-z0-9+_.-]+@[A-Za-z0-9.-]+$"


def as_money(amount: Decimal | int | float | str) -> Decimal:
    """Convert an amount to Decimal without float artifacts."""
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


class Member(BaseModel):
    """
    Represents a library member who can borrow books.

    The member tracks which ISBNs it currently holds; the loans themselves
    live in the library.
    """

    id: int = Field(
        ...,
        description="Sequential member number assigned by the library",
        ge=1,
        frozen=True,
        examples=[1, 42],
    )

    name: str = Field(
        ...,
        description="Full name of the member",
        min_length=1,
        max_length=200,
        examples=["Felipe", "Tatiana"],
    )

    email: str = Field(
        ...,
        description="Contact email address",
        pattern=EMAIL_PATTERN,
        examples=["felipe@gmail.com"],
    )

    borrowed_isbns: set[str] = Field(
        default_factory=set,
        description="ISBNs of the books the member currently holds",
    )

    fine_balance: Decimal = Field(
        default=Decimal("0"),
        description="Outstanding fines",
        ge=0,
    )

    max_active_loans: int = Field(
        default=MAX_ACTIVE_LOANS,
        description="Maximum number of books held at once",
        ge=1,
        frozen=True,
    )

    max_fine: Decimal = Field(
        default=MAX_FINE,
        description="Fine balance cap",
        gt=0,
        frozen=True,
    )

    @model_validator(mode="after")
    def validate_limits(self) -> "Member":
        """Held books and fines must stay within the member's limits."""
        if len(self.borrowed_isbns) > self.max_active_loans:
            raise ValueError("Borrowed books cannot exceed the loan limit")
        if self.fine_balance > self.max_fine:
            raise ValueError("Fine balance cannot exceed the fine cap")
        return self

    @property
    def borrowed_count(self) -> int:
        return len(self.borrowed_isbns)

    def can_borrow(self) -> bool:
        """Check if the member is under both the loan quota and the fine cap."""
        return self.borrowed_count < self.max_active_loans and self.fine_balance < self.max_fine

    def add_borrowed(self, isbn: str) -> None:
        """
        Record a held book. Adding an ISBN already held is a no-op.

        Raises:
            QuotaExceededError: If a new ISBN would exceed the loan limit
        """
        if isbn in self.borrowed_isbns:
            return
        if self.borrowed_count >= self.max_active_loans:
            raise QuotaExceededError(f"Loan limit of {self.max_active_loans} reached")
        self.borrowed_isbns.add(isbn)

    def remove_borrowed(self, isbn: str) -> None:
        self.borrowed_isbns.discard(isbn)

    def add_fine(self, amount: Decimal | int | str) -> None:
        """Add a fine, capped at ``max_fine``. Non-positive amounts are ignored."""
        amount = as_money(amount)
        if amount <= 0:
            return
        self.fine_balance = min(self.fine_balance + amount, self.max_fine)

    def pay_fine(self, amount: Decimal | int | str) -> None:
        """Pay down the balance, never below zero. Non-positive amounts are ignored."""
        amount = as_money(amount)
        if amount <= 0:
            return
        self.fine_balance = max(self.fine_balance - amount, Decimal("0"))

    model_config = ConfigDict(
        validate_assignment=True,
        str_strip_whitespace=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Felipe",
                "email": "felipe@gmail.com",
                "borrowed_isbns": ["9780306406157"],
                "fine_balance": "0",
            }
        },
    )
