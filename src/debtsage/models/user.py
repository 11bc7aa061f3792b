"""User model owning debts, accounts and ledger entries."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel


class User(SQLModel, table=True):
    """Owner of financial records. Authentication lives outside the engine."""

    __tablename__: ClassVar[str] = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(nullable=False, unique=True, index=True, max_length=64)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    accounts = Relationship(
        back_populates="user",
        sa_relationship=relationship("Account", back_populates="user"),
    )
    debts = Relationship(
        back_populates="user",
        sa_relationship=relationship("Debt", back_populates="user"),
    )
    transactions = Relationship(
        back_populates="user",
        sa_relationship=relationship("Transaction", back_populates="user"),
    )
