"""Debt management, planning and payment operations.

``DebtService`` is the engine's public surface: CRUD over debts, the pure
calculators applied to stored debts, and payments routed through the
``PaymentProcessor``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..config import BaseConfig
from ..domain.repositories import AccountRepository, DebtRepository, TransactionRepository
from ..domain.snapshot import DebtLike
from ..errors import DebtHasPaymentsError, InvalidInputError, NotFoundError
from ..forms import DebtForm
from ..infra.database import SessionFactory
from ..infra.repositories import (
    SQLModelAccountRepository,
    SQLModelDebtRepository,
    SQLModelTransactionRepository,
)
from ..logging_config import get_logger
from ..models.debt import Debt
from ..models.transaction import Transaction
from ..money import Amount
from .locks import LockRegistry
from .metrics import DebtMetrics, compute_metrics
from .payments import PaymentProcessor, PaymentResult
from .savings import Savings, compute_savings
from .schedule import Schedule, generate_schedule
from .strategy import Strategy, Timeline, simulate_strategy
from .summary import DebtSummary, summarize

logger = get_logger("services.debts")

# Fields a caller may edit directly. Payment bookkeeping is owned by the
# payment processor.
_UPDATABLE = {
    "name", "debt_type", "balance", "interest_rate", "minimum_payment", "start_date",
    "due_date", "term_months", "lender", "account_number", "notes", "is_active",
}
_CREATABLE = (_UPDATABLE - {"is_active"}) | {"principal"}


@dataclass(frozen=True)
class DebtWithMetrics:
    """A stored debt paired with its read-time metrics."""

    debt: Debt
    metrics: DebtMetrics


class DebtService:
    """Operations over a user's debts."""

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        config: BaseConfig | None = None,
        debt_repo: DebtRepository | None = None,
        account_repo: AccountRepository | None = None,
        transaction_repo: TransactionRepository | None = None,
        locks: LockRegistry | None = None,
    ):
        self.config = config or BaseConfig()
        self.debt_repo: DebtRepository = debt_repo or SQLModelDebtRepository(session_factory)
        self.account_repo: AccountRepository = account_repo or SQLModelAccountRepository(
            session_factory
        )
        self.transaction_repo: TransactionRepository = (
            transaction_repo or SQLModelTransactionRepository(session_factory)
        )
        self.payments = PaymentProcessor(
            session_factory,
            debt_repo=self.debt_repo,
            account_repo=self.account_repo,
            transaction_repo=self.transaction_repo,
            locks=locks,
        )

    # -- CRUD -------------------------------------------------------------

    def create_debt(self, user_id: int, **fields: Any) -> DebtWithMetrics:
        """Validate and store a new debt. Balance defaults to the principal."""

        unknown = set(fields) - _CREATABLE
        if unknown:
            raise InvalidInputError(
                "Invalid debt data", {name: ["Unknown field."] for name in sorted(unknown)}
            )
        try:
            form = DebtForm(**fields).validate_or_raise()
        except InvalidInputError as exc:
            logger.warning(
                "Invalid debt data on create",
                extra={"user_id": user_id, "fields": sorted(exc.errors)},
            )
            raise

        values = form.supplied()
        values.setdefault("balance", values["principal"])
        debt = Debt(
            user_id=user_id,
            payments_made=0,
            is_active=values["balance"] > 0,
            **values,
        )
        debt = self.debt_repo.create(debt, user_id=user_id)
        logger.info(
            "Debt created successfully",
            extra={"user_id": user_id, "debt_id": debt.id, "balance": str(debt.balance)},
        )
        return DebtWithMetrics(debt=debt, metrics=compute_metrics(debt))

    def get_debt(self, debt_id: int, user_id: int) -> Debt:
        """Load a debt owned by *user_id* or raise NotFoundError."""

        debt = self.debt_repo.get_by_id(debt_id, user_id=user_id)
        if debt is None:
            logger.warning("Debt not found", extra={"debt_id": debt_id, "user_id": user_id})
            raise NotFoundError("Debt", debt_id)
        return debt

    def get_debt_with_metrics(self, debt_id: int, user_id: int) -> DebtWithMetrics:
        debt = self.get_debt(debt_id, user_id)
        return DebtWithMetrics(debt=debt, metrics=compute_metrics(debt))

    def list_debts(self, user_id: int, *, include_inactive: bool = True) -> list[DebtWithMetrics]:
        """All debts for a user, earliest due date first, with metrics."""

        debts = (
            self.debt_repo.list_all(user_id=user_id)
            if include_inactive
            else self.debt_repo.list_active(user_id=user_id)
        )
        logger.debug("User debts retrieved", extra={"user_id": user_id, "debt_count": len(debts)})
        return [DebtWithMetrics(debt=d, metrics=compute_metrics(d)) for d in debts]

    def update_debt(self, debt_id: int, user_id: int, **changes: Any) -> DebtWithMetrics:
        """Apply a partial update.

        ``principal`` is fixed at creation. A corrective ``balance`` change
        re-derives ``is_active`` unless the caller sets it explicitly.
        """
        if "principal" in changes:
            raise InvalidInputError(
                "Invalid debt data", {"principal": ["Principal cannot be changed after creation."]}
            )
        unknown = set(changes) - _UPDATABLE
        if unknown:
            raise InvalidInputError(
                "Invalid debt data", {name: ["Field cannot be updated."] for name in sorted(unknown)}
            )

        debt = self.get_debt(debt_id, user_id)
        is_active = changes.pop("is_active", None)
        values = DebtForm(**changes).validate_or_raise(partial=True).supplied()
        if "balance" in values and values["balance"] > Decimal(debt.principal):
            raise InvalidInputError(
                "Invalid debt data", {"balance": ["Balance cannot exceed the principal."]}
            )

        for name, value in values.items():
            setattr(debt, name, value)
        if is_active is not None:
            debt.is_active = bool(is_active)
        elif "balance" in values:
            debt.is_active = values["balance"] > 0

        debt = self.debt_repo.update(debt, user_id=user_id)
        logger.info(
            "Debt updated successfully",
            extra={
                "user_id": user_id,
                "debt_id": debt_id,
                "updated_fields": sorted(values) + (["is_active"] if is_active is not None else []),
            },
        )
        return DebtWithMetrics(debt=debt, metrics=compute_metrics(debt))

    def delete_debt(self, debt_id: int, user_id: int, *, force: bool = False) -> Debt:
        """Delete a debt.

        Refused while ledger payments reference the debt unless ``force`` is
        set, in which case those payments are kept and detached.
        """
        debt = self.get_debt(debt_id, user_id)
        payment_count = self.debt_repo.count_payments(debt_id, user_id=user_id)
        if payment_count and not force:
            logger.warning(
                "Attempted to delete debt with payments",
                extra={"debt_id": debt_id, "payment_count": payment_count},
            )
            raise DebtHasPaymentsError(debt_id, payment_count)

        self.debt_repo.delete(debt_id, user_id=user_id, detach_payments=bool(payment_count))
        logger.info(
            "Debt deleted successfully",
            extra={"user_id": user_id, "debt_id": debt_id, "detached_payments": payment_count},
        )
        return debt

    # -- planning -----------------------------------------------------------

    @staticmethod
    def compute_metrics(debt: DebtLike) -> DebtMetrics:
        return compute_metrics(debt)

    @staticmethod
    def compute_savings(debt: DebtLike, extra_payment: Amount) -> Savings:
        return compute_savings(debt, extra_payment)

    def generate_schedule(
        self,
        debt_id: int,
        user_id: int,
        extra_payment: Amount = 0,
        *,
        start: date | None = None,
    ) -> Schedule:
        """Amortization table for a stored debt."""

        debt = self.get_debt(debt_id, user_id)
        schedule = generate_schedule(
            debt, extra_payment, start=start, max_months=self.config.SCHEDULE_MAX_MONTHS
        )
        log = logger.debug if schedule.fully_amortized else logger.warning
        log(
            "Payment schedule generated",
            extra={
                "debt_id": debt_id,
                "user_id": user_id,
                "schedule_length": schedule.total_months,
                "fully_amortized": schedule.fully_amortized,
            },
        )
        return schedule

    def simulate_strategy(
        self,
        debts: Sequence[DebtLike],
        strategy: Strategy | str,
        monthly_budget: Amount | None = None,
        *,
        start: date | None = None,
    ) -> Timeline:
        return simulate_strategy(
            debts,
            strategy,
            self.config.MONTHLY_EXTRA_BUDGET if monthly_budget is None else monthly_budget,
            start=start,
            max_months=self.config.SIMULATION_MAX_MONTHS,
            cascade_extra=self.config.CASCADE_EXTRA_BUDGET,
        )

    def get_summary(
        self,
        user_id: int,
        *,
        monthly_budget: Amount | None = None,
        start: date | None = None,
    ) -> DebtSummary:
        """Totals and both payoff timelines over the user's active debts."""

        debts = self.debt_repo.list_active(user_id=user_id)
        summary = summarize(
            debts,
            self.config.MONTHLY_EXTRA_BUDGET if monthly_budget is None else monthly_budget,
            start=start,
            max_months=self.config.SIMULATION_MAX_MONTHS,
            cascade_extra=self.config.CASCADE_EXTRA_BUDGET,
        )
        logger.debug(
            "Debt summary generated",
            extra={
                "user_id": user_id,
                "debt_count": summary.debt_count,
                "total_debt": str(summary.total_debt),
                "suggested_strategy": summary.suggested_strategy.value,
            },
        )
        return summary

    # -- payments -----------------------------------------------------------

    def make_payment(
        self,
        debt_id: int | str,
        amount: Amount,
        payment_date: date | datetime | str,
        account_id: int | str,
        user_id: int,
        description: Optional[str] = None,
    ) -> PaymentResult:
        return self.payments.make_payment(
            debt_id, amount, payment_date, account_id, user_id, description
        )

    def payment_history(self, debt_id: int, user_id: int) -> list[Transaction]:
        """Ledger entries recorded against a debt, newest first."""

        self.get_debt(debt_id, user_id)
        return self.transaction_repo.filter_by_debt(debt_id, user_id=user_id)
