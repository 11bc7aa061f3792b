"""Account repository protocol."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol

from sqlmodel import Session

from ...models.account import Account


class AccountRepository(Protocol):
    """Repository for the accounts that fund debt payments."""

    def get_by_id(self, account_id: int, *, user_id: int) -> Optional[Account]:
        """Retrieve an account by ID."""
        ...

    def get_for_update(
        self, session: Session, account_id: int, *, user_id: int, lock: bool = True
    ) -> Optional[Account]:
        """Load an account inside a caller-owned transaction."""
        ...

    def get_balance(self, account_id: int, *, user_id: int) -> Optional[Decimal]:
        """Read the current balance."""
        ...

    def decrement_balance(self, session: Session, account: Account, amount: Decimal) -> Account:
        """Subtract an amount from the balance."""
        ...
