"""
Loan model for the Circulation Desk.

A loan links one member to one book from the day it is granted until it is
returned. The due date is always derived from the start date and the loan
period, and the fine is recomputed on every call.
"""

from datetime import date, timedelta
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ..errors import LoanAlreadyClosedError

LOAN_PERIOD_DAYS = 14
DAILY_FINE_RATE = Decimal("500")


class LoanStatus(str, Enum):
    """Status of a loan.

    ACTIVE loans are still out. A returned loan is RETURNED when it came back
    on or before the due date and OVERDUE when it came back later.
    """

    ACTIVE = "active"
    RETURNED = "returned"
    OVERDUE = "overdue"


class Loan(BaseModel):
    """Represents a single borrowing transaction."""

    book_isbn: str = Field(
        ...,
        description="ISBN of the borrowed book",
        pattern=r"^\d{13}$",
        frozen=True,
    )

    member_id: int = Field(
        ...,
        description="Member number of the borrower",
        ge=1,
        frozen=True,
    )

    start_date: date = Field(
        ...,
        description="Date the loan was granted",
        frozen=True,
    )

    loan_period_days: int = Field(
        default=LOAN_PERIOD_DAYS,
        description="Days until the loan is due",
        ge=1,
        frozen=True,
    )

    daily_fine_rate: Decimal = Field(
        default=DAILY_FINE_RATE,
        description="Fine per day late",
        ge=0,
        frozen=True,
    )

    return_date: date | None = Field(
        None,
        description="Date the book came back",
    )

    status: LoanStatus = Field(
        default=LoanStatus.ACTIVE,
        description="Current status of the loan",
    )

    @property
    def due_date(self) -> date:
        return self.start_date + timedelta(days=self.loan_period_days)

    @property
    def is_active(self) -> bool:
        return self.status == LoanStatus.ACTIVE

    def days_late(self, today: date | None = None) -> int:
        """
        Days past the due date.

        A loan returned on time counts up to its return date. Active and overdue
        loans count up to ``today``, so an overdue loan keeps accruing.
        """
        if self.status == LoanStatus.RETURNED and self.return_date is not None:
            end = self.return_date
        else:
            end = today or date.today()
        return max(0, (end - self.due_date).days)

    def current_fine(self, today: date | None = None) -> Decimal:
        """
        Calculate the fine owed for this loan.

        Args:
            today: Reference date for loans that are still out

        Returns:
            Days late multiplied by the daily rate, zero when on time
        """
        return self.daily_fine_rate * self.days_late(today)

    def mark_returned(self, on: date | None = None) -> None:
        """
        Close the loan.

        Raises:
            LoanAlreadyClosedError: If the loan was already returned
        """
        if not self.is_active:
            raise LoanAlreadyClosedError(
                f"Loan of {self.book_isbn} for member {self.member_id} is already closed"
            )

        return_date = on or date.today()
        self.return_date = return_date
        self.status = LoanStatus.OVERDUE if return_date > self.due_date else LoanStatus.RETURNED

    model_config = ConfigDict(
        validate_assignment=True,
        validate_default=True,
        use_enum_values=True,
        json_schema_extra={
            "example": {
                "book_isbn": "9780306406157",
                "member_id": 1,
                "start_date": "2026-01-05",
                "loan_period_days": 14,
                "daily_fine_rate": "500",
                "return_date": None,
                "status": "active",
            }
        },
    )
