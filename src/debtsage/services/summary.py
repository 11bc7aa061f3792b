"""Portfolio totals and the snowball-vs-avalanche recommendation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..domain.snapshot import DebtLike, DebtSnapshot, snapshot_of
from ..money import ZERO, Amount, monthly_rate, to_cents
from .strategy import (
    DEFAULT_MAX_MONTHS,
    Strategy,
    Timeline,
    priority_order,
    simulate_strategy,
)


@dataclass(frozen=True, slots=True)
class DebtSummary:
    """Everything the planning view shows about a user's active debts."""

    total_debt: Decimal
    total_minimum_payments: Decimal
    total_monthly_interest: Decimal
    debt_count: int
    debt_by_type: dict[str, Decimal]
    highest_interest_debt: Optional[DebtSnapshot]
    snowball_order: tuple[Optional[int], ...]
    avalanche_order: tuple[Optional[int], ...]
    snowball_timeline: Timeline
    avalanche_timeline: Timeline
    suggested_strategy: Strategy

    @property
    def totals(self) -> dict[str, object]:
        return {
            "total_debt": self.total_debt,
            "total_minimum_payments": self.total_minimum_payments,
            "total_monthly_interest": self.total_monthly_interest,
            "debt_count": self.debt_count,
        }


def suggest_strategy(snowball: Timeline, avalanche: Timeline) -> Strategy:
    """Pick the cheaper strategy; ties and double failures go to avalanche."""

    if snowball.converged and not avalanche.converged:
        return Strategy.SNOWBALL
    if avalanche.converged and not snowball.converged:
        return Strategy.AVALANCHE
    if not avalanche.converged:
        return Strategy.AVALANCHE
    if snowball.total_interest < avalanche.total_interest:
        return Strategy.SNOWBALL
    return Strategy.AVALANCHE


def summarize(
    debts: Sequence[DebtLike],
    monthly_budget: Amount | None = None,
    *,
    start: date | None = None,
    max_months: int = DEFAULT_MAX_MONTHS,
    cascade_extra: bool = False,
) -> DebtSummary:
    """Aggregate active debts and run both payoff strategies over them."""

    snaps = [snapshot_of(debt) for debt in debts]
    start = start or date.today()

    by_type: dict[str, Decimal] = {}
    for snap in snaps:
        by_type[snap.debt_type] = by_type.get(snap.debt_type, ZERO) + snap.balance

    highest: Optional[DebtSnapshot] = None
    for snap in snaps:
        if highest is None or snap.interest_rate > highest.interest_rate:
            highest = snap

    options = {"start": start, "max_months": max_months, "cascade_extra": cascade_extra}
    snowball = simulate_strategy(snaps, Strategy.SNOWBALL, monthly_budget, **options)
    avalanche = simulate_strategy(snaps, Strategy.AVALANCHE, monthly_budget, **options)

    return DebtSummary(
        total_debt=sum((s.balance for s in snaps), ZERO),
        total_minimum_payments=sum((s.minimum_payment for s in snaps), ZERO),
        total_monthly_interest=to_cents(
            sum((s.balance * monthly_rate(s.interest_rate) for s in snaps), ZERO)
        ),
        debt_count=len(snaps),
        debt_by_type=by_type,
        highest_interest_debt=highest,
        snowball_order=tuple(priority_order(snaps, Strategy.SNOWBALL)),
        avalanche_order=tuple(priority_order(snaps, Strategy.AVALANCHE)),
        snowball_timeline=snowball,
        avalanche_timeline=avalanche,
        suggested_strategy=suggest_strategy(snowball, avalanche),
    )
