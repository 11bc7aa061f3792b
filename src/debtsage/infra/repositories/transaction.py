"""SQLModel implementation of the ledger Transaction repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session, select

from ...models.transaction import Transaction
from ..database import SessionFactory


class SQLModelTransactionRepository:
    """Append-only ledger access."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        with self.session_factory() as session:
            return session.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
            ).first()

    def filter_by_account(self, account_id: int, *, user_id: int) -> list[Transaction]:
        """Get all transactions for a specific account."""
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .where(Transaction.account_id == account_id)
                .order_by(Transaction.occurred_at.desc(), Transaction.id.desc())  # type: ignore
            )
            return list(session.exec(statement).all())

    def filter_by_debt(self, debt_id: int, *, user_id: int) -> list[Transaction]:
        """Get the payment history of a debt, newest first."""
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .where(Transaction.debt_id == debt_id)
                .order_by(Transaction.occurred_at.desc(), Transaction.id.desc())  # type: ignore
            )
            return list(session.exec(statement).all())

    @staticmethod
    def append(session: Session, transaction: Transaction) -> Transaction:
        """Add a ledger entry within the caller's session."""
        session.add(transaction)
        session.flush()
        return transaction
