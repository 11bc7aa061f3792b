"""Compare minimum-only payoff against paying extra every month."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..domain.snapshot import DebtLike, snapshot_of
from ..errors import InvalidInputError, NotComputableError
from ..money import HUNDRED, ZERO, Amount, to_cents, to_decimal
from .metrics import estimate_payoff


@dataclass(frozen=True, slots=True)
class Savings:
    """Effect of an extra monthly payment on one debt."""

    extra_payment: Decimal
    baseline_months: int
    accelerated_months: int
    baseline_interest: Decimal
    accelerated_interest: Decimal

    @property
    def months_saved(self) -> int:
        return self.baseline_months - self.accelerated_months

    @property
    def interest_saved(self) -> Decimal:
        return self.baseline_interest - self.accelerated_interest

    @property
    def payoff_time_reduction_percent(self) -> Decimal:
        if self.baseline_months == 0:
            return ZERO
        return to_cents(Decimal(self.months_saved) / Decimal(self.baseline_months) * HUNDRED)


def compute_savings(debt: DebtLike, extra_payment: Amount) -> Savings:
    """Evaluate the closed-form payoff with and without *extra_payment*.

    Raises NotComputableError when either side does not amortize.
    """
    extra = to_decimal(extra_payment, field="extra_payment")
    if extra <= 0:
        raise InvalidInputError(
            "Invalid extra payment", {"extra_payment": ["Amount must be greater than zero."]}
        )

    snap = snapshot_of(debt)
    baseline = estimate_payoff(snap.balance, snap.interest_rate, snap.minimum_payment)
    accelerated = estimate_payoff(snap.balance, snap.interest_rate, snap.minimum_payment + extra)

    if not baseline.amortizing or not accelerated.amortizing:
        raise NotComputableError(
            "Savings not computable: minimum payment does not cover monthly interest"
        )

    return Savings(
        extra_payment=extra,
        baseline_months=baseline.months,
        accelerated_months=accelerated.months,
        baseline_interest=baseline.total_interest,
        accelerated_interest=accelerated.total_interest,
    )
