"""Month-by-month amortization schedule for a single debt."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..domain.snapshot import DebtLike, snapshot_of
from ..errors import InvalidInputError, NotComputableError
from ..money import ZERO, Amount, add_months, monthly_rate, to_cents, to_decimal
from .savings import Savings, compute_savings

DEFAULT_MAX_MONTHS = 360


@dataclass(frozen=True, slots=True)
class ScheduleRow:
    """One projected payment."""

    month: int
    payment_date: date
    interest: Decimal
    principal: Decimal
    total_payment: Decimal
    remaining_balance: Decimal
    cumulative_interest: Decimal


@dataclass(frozen=True, slots=True)
class Schedule:
    """Projected payments plus the totals the planning view needs.

    ``fully_amortized`` is False when the month cap was reached with a balance
    still outstanding; the rows are then a truncated projection, not a payoff
    plan.
    """

    debt_id: Optional[int]
    extra_payment: Decimal
    rows: tuple[ScheduleRow, ...]
    fully_amortized: bool
    max_months: int
    savings: Optional[Savings] = None

    @property
    def total_months(self) -> int:
        return len(self.rows)

    @property
    def total_interest(self) -> Decimal:
        return self.rows[-1].cumulative_interest if self.rows else ZERO

    @property
    def total_principal(self) -> Decimal:
        return sum((row.principal for row in self.rows), ZERO)

    @property
    def total_paid(self) -> Decimal:
        return sum((row.total_payment for row in self.rows), ZERO)


def generate_schedule(
    debt: DebtLike,
    extra_payment: Amount = ZERO,
    *,
    start: date | None = None,
    max_months: int = DEFAULT_MAX_MONTHS,
) -> Schedule:
    """Project monthly payments until the balance clears or *max_months* pass.

    Interest is rounded to cents once per month. The last row's principal is
    capped at the remaining balance, so the principal column sums to the
    starting balance whenever the schedule converges.
    """
    extra = to_decimal(extra_payment, field="extra_payment")
    if extra < 0:
        raise InvalidInputError(
            "Invalid extra payment", {"extra_payment": ["Amount must be at least zero."]}
        )
    if max_months <= 0:
        raise InvalidInputError("Invalid schedule cap", {"max_months": ["Must be positive."]})

    snap = snapshot_of(debt)
    first_date = start or date.today()
    rate = monthly_rate(snap.interest_rate)
    payment = snap.minimum_payment + extra

    rows: list[ScheduleRow] = []
    remaining = snap.balance
    cumulative = ZERO
    month = 0

    while remaining > 0 and month < max_months:
        month += 1
        interest = to_cents(remaining * rate)
        principal = min(payment - interest, remaining)
        cumulative += interest
        remaining -= principal
        rows.append(
            ScheduleRow(
                month=month,
                payment_date=add_months(first_date, month),
                interest=interest,
                principal=principal,
                total_payment=interest + principal,
                remaining_balance=max(ZERO, remaining),
                cumulative_interest=cumulative,
            )
        )

    savings: Optional[Savings] = None
    if extra > 0:
        try:
            savings = compute_savings(snap, extra)
        except NotComputableError:
            savings = None

    return Schedule(
        debt_id=snap.id,
        extra_payment=extra,
        rows=tuple(rows),
        fully_amortized=remaining <= 0,
        max_months=max_months,
        savings=savings,
    )
