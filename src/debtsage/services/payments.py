"""Atomic debt payments.

A payment touches three records: the debt, the funding account and a new
ledger entry. All three change inside one session transaction while the debt
and account locks are held; any failure rolls the whole set back.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from ..domain.repositories import AccountRepository, DebtRepository, TransactionRepository
from ..errors import DebtSageError, InvalidInputError, NotFoundError, PaymentTransactionError
from ..infra.database import SessionFactory
from ..infra.repositories import (
    SQLModelAccountRepository,
    SQLModelDebtRepository,
    SQLModelTransactionRepository,
)
from ..logging_config import get_logger
from ..models.debt import Debt
from ..models.transaction import DEBT_PAYMENT_CATEGORY, Transaction
from ..money import ZERO, Amount, add_months, to_cents, to_date, to_decimal
from .locks import LockRegistry
from .metrics import DebtMetrics, compute_metrics

logger = get_logger("services.payments")


@dataclass(frozen=True)
class PaymentResult:
    """Outcome of a committed payment."""

    debt: Debt
    transaction: Transaction
    metrics: DebtMetrics
    payment_applied: Decimal
    previous_balance: Decimal

    @property
    def new_balance(self) -> Decimal:
        return self.debt.balance


def _parse_id(value: object, field: str) -> int:
    if isinstance(value, bool):
        raise InvalidInputError(f"Invalid {field}", {field: ["Enter a valid id."]})
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidInputError(f"Invalid {field}", {field: ["Enter a valid id."]}) from None


class PaymentProcessor:
    """Applies real payments to debts."""

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        debt_repo: DebtRepository | None = None,
        account_repo: AccountRepository | None = None,
        transaction_repo: TransactionRepository | None = None,
        locks: LockRegistry | None = None,
    ):
        self.session_factory = session_factory
        self.debt_repo = debt_repo or SQLModelDebtRepository(session_factory)
        self.account_repo = account_repo or SQLModelAccountRepository(session_factory)
        self.transaction_repo = transaction_repo or SQLModelTransactionRepository(session_factory)
        self.locks = locks or LockRegistry()

    def make_payment(
        self,
        debt_id: int | str,
        amount: Amount,
        payment_date: date | datetime | str,
        account_id: int | str,
        user_id: int,
        description: Optional[str] = None,
    ) -> PaymentResult:
        """Pay *amount* from an account towards a debt, all-or-nothing."""

        debt_pk = _parse_id(debt_id, "debt_id")
        account_pk = _parse_id(account_id, "account_id")
        paid_on = to_date(payment_date, field="payment_date")
        payment = to_cents(to_decimal(amount, field="amount"))
        if payment <= 0:
            logger.warning(
                "Invalid payment amount",
                extra={"debt_id": debt_pk, "user_id": user_id, "amount": str(amount)},
            )
            raise InvalidInputError(
                "Invalid payment parameters", {"amount": ["Amount must be greater than zero."]}
            )

        try:
            with self.locks.hold(("debt", debt_pk), ("account", account_pk)):
                with self.session_factory() as session:
                    debt = self.debt_repo.get_for_update(session, debt_pk, user_id=user_id)
                    if debt is None:
                        logger.warning(
                            "Debt not found for payment",
                            extra={"debt_id": debt_pk, "user_id": user_id},
                        )
                        raise NotFoundError("Debt", debt_pk)
                    account = self.account_repo.get_for_update(
                        session, account_pk, user_id=user_id
                    )
                    if account is None:
                        logger.warning(
                            "Account not found for payment",
                            extra={"account_id": account_pk, "user_id": user_id},
                        )
                        raise NotFoundError("Account", account_pk)

                    previous_balance = Decimal(debt.balance)
                    new_balance = max(ZERO, previous_balance - payment)
                    debt.balance = new_balance
                    debt.due_date = add_months(paid_on, 1)
                    debt.payments_made += 1
                    debt.is_active = new_balance > 0
                    debt.touch()
                    session.add(debt)

                    ledger_entry = self.transaction_repo.append(
                        session,
                        Transaction(
                            user_id=user_id,
                            account_id=account_pk,
                            debt_id=debt_pk,
                            amount=-payment,
                            category=DEBT_PAYMENT_CATEGORY,
                            occurred_at=datetime.combine(paid_on, time.min),
                            description=description or f"Payment for {debt.name}",
                        ),
                    )
                    self.account_repo.decrement_balance(session, account, payment)
                    session.flush()
                    session.refresh(debt)
                    session.refresh(ledger_entry)
        except DebtSageError:
            raise
        except Exception as exc:
            logger.error(
                "Debt payment rolled back",
                exc_info=True,
                extra={"debt_id": debt_pk, "account_id": account_pk, "user_id": user_id},
            )
            raise PaymentTransactionError(f"Payment could not be applied: {exc}") from exc

        logger.info(
            "Debt payment processed successfully",
            extra={
                "user_id": user_id,
                "debt_id": debt_pk,
                "amount": str(payment),
                "new_balance": str(debt.balance),
            },
        )
        return PaymentResult(
            debt=debt,
            transaction=ledger_entry,
            metrics=compute_metrics(debt),
            payment_applied=payment,
            previous_balance=previous_balance,
        )
