"""SQLModel implementation of the Account repository."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlmodel import Session, select

from ...models.account import Account
from ..database import SessionFactory


class SQLModelAccountRepository:
    """SQLModel-based account repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, account_id: int, *, user_id: int) -> Optional[Account]:
        """Retrieve an account by ID."""
        with self.session_factory() as session:
            return self.get_for_update(session, account_id, user_id=user_id, lock=False)

    @staticmethod
    def get_for_update(
        session: Session, account_id: int, *, user_id: int, lock: bool = True
    ) -> Optional[Account]:
        """Load an account inside an existing session, row-locked when supported."""
        statement = select(Account).where(Account.id == account_id, Account.user_id == user_id)
        if lock:
            statement = statement.with_for_update()
        return session.exec(statement).first()

    def list_all(self, *, user_id: int) -> list[Account]:
        """List all accounts."""
        with self.session_factory() as session:
            statement = (
                select(Account).where(Account.user_id == user_id).order_by(Account.name)  # type: ignore
            )
            return list(session.exec(statement).all())

    def create(self, account: Account, *, user_id: int) -> Account:
        """Create a new account."""
        with self.session_factory() as session:
            account.user_id = user_id
            session.add(account)
            session.flush()
            session.refresh(account)
            return account

    def get_balance(self, account_id: int, *, user_id: int) -> Optional[Decimal]:
        """Current balance, or None when the account is unknown."""
        account = self.get_by_id(account_id, user_id=user_id)
        return account.balance if account else None

    @staticmethod
    def decrement_balance(session: Session, account: Account, amount: Decimal) -> Account:
        """Subtract *amount* from the account within the caller's session."""
        account.balance = Decimal(account.balance) - amount
        session.add(account)
        return account
