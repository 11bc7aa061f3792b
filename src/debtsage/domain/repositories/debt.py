"""Debt repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from sqlmodel import Session

from ...models.debt import Debt


class DebtRepository(Protocol):
    """Repository for managing debt entities, keyed by (id, user_id)."""

    def get_by_id(self, debt_id: int, *, user_id: int) -> Optional[Debt]:
        """Retrieve a debt by ID."""
        ...

    def get_for_update(
        self, session: Session, debt_id: int, *, user_id: int, lock: bool = True
    ) -> Optional[Debt]:
        """Load a debt inside a caller-owned transaction."""
        ...

    def list_all(self, *, user_id: int) -> list[Debt]:
        """List all debts."""
        ...

    def list_active(self, *, user_id: int) -> list[Debt]:
        """List debts that still carry a balance."""
        ...

    def create(self, debt: Debt, *, user_id: int) -> Debt:
        """Create a new debt."""
        ...

    def update(self, debt: Debt, *, user_id: int) -> Debt:
        """Update an existing debt."""
        ...

    def count_payments(self, debt_id: int, *, user_id: int) -> int:
        """Count ledger entries linked to the debt."""
        ...

    def delete(self, debt_id: int, *, user_id: int, detach_payments: bool = False) -> bool:
        """Delete a debt by ID."""
        ...
