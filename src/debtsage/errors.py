"""Exception hierarchy raised by the debt engine.

Each error carries a ``status_code`` hint so an HTTP layer can map it without
knowing the engine's internals.
"""

from __future__ import annotations

from typing import Mapping, Sequence


class DebtSageError(Exception):
    """Base error with an HTTP-style status hint."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidInputError(DebtSageError):
    """Non-numeric or out-of-range amount, rate, id or date."""

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid input",
        errors: Mapping[str, Sequence[str]] | None = None,
    ):
        super().__init__(message)
        self.errors: dict[str, list[str]] = {k: list(v) for k, v in (errors or {}).items()}


class NotFoundError(DebtSageError):
    """Debt or account missing, or owned by another user."""

    status_code = 404

    def __init__(self, entity: str, entity_id: object):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class DebtHasPaymentsError(DebtSageError):
    """Debt deletion refused because ledger payments still reference it."""

    status_code = 409

    def __init__(self, debt_id: int, payment_count: int):
        super().__init__("Cannot delete debt with recorded payments")
        self.debt_id = debt_id
        self.payment_count = payment_count


class NonAmortizingError(DebtSageError):
    """Minimum payment does not cover the interest accruing each month."""

    status_code = 422


class NotComputableError(NonAmortizingError):
    """Savings comparison is undefined because one side never amortizes."""


class UnresolvableBudgetError(DebtSageError):
    """Strategy simulation hit its month cap before clearing every debt."""

    status_code = 422

    def __init__(self, strategy: str, months: int):
        super().__init__(
            f"{strategy} payoff did not finish within {months} months under the current budget"
        )
        self.strategy = strategy
        self.months = months


class PaymentTransactionError(DebtSageError):
    """Atomic payment failed part-way and was rolled back."""

    status_code = 500
