"""Debt entity and its type vocabulary."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from .transaction import Transaction
    from .user import User


class DebtType(str, Enum):
    """Kinds of debt a user can track."""

    LOAN = "loan"
    CREDIT_CARD = "credit_card"
    MORTGAGE = "mortgage"
    PERSONAL = "personal"
    AUTO = "auto"
    STUDENT = "student"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Debt(SQLModel, table=True):
    """Installment or revolving debt owned by a single user."""

    __tablename__: ClassVar[str] = "debt"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=100)
    debt_type: str = Field(nullable=False, max_length=32, description="DebtType value")

    principal: Decimal = Field(max_digits=12, decimal_places=2)
    balance: Decimal = Field(max_digits=12, decimal_places=2)
    interest_rate: Decimal = Field(
        max_digits=7, decimal_places=4, description="Nominal APR in percent (0-100)"
    )
    minimum_payment: Decimal = Field(max_digits=12, decimal_places=2)

    start_date: date = Field(nullable=False)
    due_date: Optional[date] = Field(default=None, index=True)
    term_months: Optional[int] = Field(default=None)
    payments_made: int = Field(default=0, nullable=False)
    is_active: bool = Field(default=True, nullable=False, index=True)

    lender: Optional[str] = Field(default=None, max_length=100)
    account_number: Optional[str] = Field(default=None, max_length=64)
    notes: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)

    transactions: list["Transaction"] = Relationship(
        back_populates="debt",
        sa_relationship=relationship("Transaction", back_populates="debt"),
    )
    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="debts"))

    def touch(self) -> None:
        """Refresh ``updated_at`` after an in-place change."""
        self.updated_at = _utcnow()
