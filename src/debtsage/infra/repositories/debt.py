"""SQLModel implementation of the Debt repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from ...models.debt import Debt
from ...models.transaction import Transaction
from ..database import SessionFactory


class SQLModelDebtRepository:
    """SQLModel-based debt repository implementation.

    All lookups are scoped by ``user_id``; a debt owned by someone else is
    indistinguishable from a missing one.
    """

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, debt_id: int, *, user_id: int) -> Optional[Debt]:
        """Retrieve a debt by ID."""
        with self.session_factory() as session:
            return self.get_for_update(session, debt_id, user_id=user_id, lock=False)

    @staticmethod
    def get_for_update(
        session: Session, debt_id: int, *, user_id: int, lock: bool = True
    ) -> Optional[Debt]:
        """Load a debt inside an existing session, row-locked when supported."""
        statement = select(Debt).where(Debt.id == debt_id, Debt.user_id == user_id)
        if lock:
            statement = statement.with_for_update()
        return session.exec(statement).first()

    def list_all(self, *, user_id: int) -> list[Debt]:
        """List all debts, earliest due date first and undated debts last."""
        with self.session_factory() as session:
            statement = (
                select(Debt)
                .where(Debt.user_id == user_id)
                .order_by(Debt.due_date.is_(None), Debt.due_date, Debt.id)  # type: ignore
            )
            return list(session.exec(statement).all())

    def list_active(self, *, user_id: int) -> list[Debt]:
        """List debts flagged active."""
        with self.session_factory() as session:
            statement = (
                select(Debt)
                .where(Debt.user_id == user_id)
                .where(Debt.is_active == True)  # noqa: E712
                .order_by(Debt.id)  # type: ignore
            )
            return list(session.exec(statement).all())

    def create(self, debt: Debt, *, user_id: int) -> Debt:
        """Create a new debt."""
        with self.session_factory() as session:
            debt.user_id = user_id
            session.add(debt)
            session.flush()
            session.refresh(debt)
            return debt

    def update(self, debt: Debt, *, user_id: int) -> Debt:
        """Persist changes to an existing debt."""
        with self.session_factory() as session:
            debt.user_id = user_id
            debt.touch()
            merged = session.merge(debt)
            session.flush()
            session.refresh(merged)
            return merged

    def count_payments(self, debt_id: int, *, user_id: int) -> int:
        """Number of ledger entries linked to the debt."""
        with self.session_factory() as session:
            statement = (
                select(func.count())
                .select_from(Transaction)
                .where(Transaction.debt_id == debt_id, Transaction.user_id == user_id)
            )
            return int(session.exec(statement).one())

    def delete(self, debt_id: int, *, user_id: int, detach_payments: bool = False) -> bool:
        """Delete a debt by ID; returns False when nothing matched.

        With ``detach_payments`` the linked ledger entries survive with their
        ``debt_id`` cleared.
        """
        with self.session_factory() as session:
            debt = self.get_for_update(session, debt_id, user_id=user_id, lock=False)
            if debt is None:
                return False
            if detach_payments:
                linked = session.exec(
                    select(Transaction).where(Transaction.debt_id == debt_id)
                ).all()
                for txn in linked:
                    txn.debt_id = None
                    session.add(txn)
                session.flush()
            session.delete(debt)
            return True
