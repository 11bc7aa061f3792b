"""Derived metrics for a single debt.

Payoff time uses the closed-form amortization count

    n = ceil( ln(P / (P - B*r)) / ln(1 + r) )

for payment ``P``, balance ``B`` and monthly rate ``r``. The formula is only
defined when the payment exceeds the interest-only amount ``B*r``; otherwise
the debt is non-amortizing and the metrics carry a sentinel instead of a
number.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..domain.snapshot import DebtLike, snapshot_of
from ..money import HUNDRED, ZERO, ceil_int, daily_rate, monthly_rate, to_cents


@dataclass(frozen=True, slots=True)
class PayoffEstimate:
    """Closed-form payoff estimate for one payment level."""

    months: Optional[int]
    total_interest: Optional[Decimal]

    @property
    def amortizing(self) -> bool:
        return self.months is not None


@dataclass(frozen=True, slots=True)
class DebtMetrics:
    """Read-time metrics; never persisted."""

    estimated_payoff_months: Optional[int]
    total_interest: Optional[Decimal]
    progress_percentage: Decimal
    monthly_interest: Decimal
    daily_interest: Decimal
    total_paid: Decimal
    is_on_track: bool
    amortizing: bool

    def as_dict(self) -> dict[str, object]:
        return {
            "estimated_payoff_months": self.estimated_payoff_months,
            "total_interest": self.total_interest,
            "progress_percentage": self.progress_percentage,
            "monthly_interest": self.monthly_interest,
            "daily_interest": self.daily_interest,
            "total_paid": self.total_paid,
            "is_on_track": self.is_on_track,
            "amortizing": self.amortizing,
        }


NON_AMORTIZING = PayoffEstimate(months=None, total_interest=None)


def estimate_payoff(balance: Decimal, annual_rate: Decimal, payment: Decimal) -> PayoffEstimate:
    """Months and interest to clear *balance* paying *payment* each month.

    Returns ``NON_AMORTIZING`` when the payment never outpaces interest.
    """
    if balance <= 0:
        return PayoffEstimate(months=0, total_interest=ZERO)
    if payment <= 0:
        return NON_AMORTIZING

    rate = monthly_rate(annual_rate)
    if rate <= 0:
        return PayoffEstimate(months=ceil_int(balance / payment), total_interest=ZERO)

    interest_only = balance * rate
    if payment <= interest_only:
        return NON_AMORTIZING

    ratio = payment / (payment - interest_only)
    months = ceil_int(ratio.ln() / (1 + rate).ln())
    total_interest = max(ZERO, to_cents(payment * months - balance))
    return PayoffEstimate(months=months, total_interest=total_interest)


def compute_metrics(debt: DebtLike) -> DebtMetrics:
    """Compute derived metrics for one debt snapshot. Pure and deterministic."""

    snap = snapshot_of(debt)
    balance = snap.balance
    rate = monthly_rate(snap.interest_rate)
    interest_only = balance * rate

    estimate = estimate_payoff(balance, snap.interest_rate, snap.minimum_payment)

    if snap.principal > 0:
        progress = (snap.principal - balance) / snap.principal * HUNDRED
        progress = min(HUNDRED, max(ZERO, progress))
    else:
        progress = ZERO

    return DebtMetrics(
        estimated_payoff_months=estimate.months,
        total_interest=estimate.total_interest,
        progress_percentage=to_cents(progress),
        monthly_interest=to_cents(interest_only),
        daily_interest=to_cents(balance * daily_rate(snap.interest_rate)),
        total_paid=to_cents(max(ZERO, snap.principal - balance)),
        is_on_track=estimate.amortizing and snap.minimum_payment > interest_only,
        amortizing=estimate.amortizing,
    )
