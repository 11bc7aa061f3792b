"""SQLModel definitions for ledger transactions."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover - import guard for circular dependency
    from .account import Account
    from .debt import Debt
    from .user import User

DEBT_PAYMENT_CATEGORY = "Debt Payment"


class Transaction(SQLModel, table=True):
    """A single ledger entry; debt payments are recorded as negative amounts."""

    __tablename__: ClassVar[str] = "transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    occurred_at: datetime = Field(nullable=False, index=True)
    amount: Decimal = Field(
        max_digits=14,
        decimal_places=2,
        description="Positive for inflow, negative for outflow",
    )
    category: str = Field(default="", max_length=64, index=True)
    description: str = Field(default="", max_length=255)

    account_id: int = Field(foreign_key="account.id", nullable=False, index=True)
    account: "Account" = Relationship(
        back_populates="transactions",
        sa_relationship=relationship("Account", back_populates="transactions"),
    )

    debt_id: Optional[int] = Field(default=None, foreign_key="debt.id", index=True)
    debt: "Debt | None" = Relationship(
        back_populates="transactions",
        sa_relationship=relationship("Debt", back_populates="transactions"),
    )
    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="transactions"))
