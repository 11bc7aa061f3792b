"""Ledger transaction repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from sqlmodel import Session

from ...models.transaction import Transaction


class TransactionRepository(Protocol):
    """Append-only ledger store."""

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve a ledger entry by ID."""
        ...

    def filter_by_account(self, account_id: int, *, user_id: int) -> list[Transaction]:
        """Entries recorded against an account."""
        ...

    def filter_by_debt(self, debt_id: int, *, user_id: int) -> list[Transaction]:
        """Payment history for a debt."""
        ...

    def append(self, session: Session, transaction: Transaction) -> Transaction:
        """Record a ledger entry inside a caller-owned transaction."""
        ...
