"""Portfolio payoff simulation under snowball or avalanche prioritization.

The simulation is a bounded fold over immutable month states: each step takes
the previous state and returns a new one plus a ``MonthSnapshot``. Debts are
never mutated, and a portfolio that cannot be cleared within the cap comes
back as an ``UnresolvableTimeline`` rather than looping forever.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional, Sequence, Union

from ..domain.snapshot import DebtLike, snapshot_of
from ..errors import InvalidInputError, UnresolvableBudgetError
from ..logging_config import get_logger
from ..money import ZERO, Amount, add_months, monthly_rate, to_cents, to_decimal

logger = get_logger("services.strategy")

DEFAULT_MONTHLY_BUDGET = Decimal("500.00")
DEFAULT_MAX_MONTHS = 600


class Strategy(str, Enum):
    """Payoff prioritization."""

    SNOWBALL = "snowball"  # smallest balance first
    AVALANCHE = "avalanche"  # highest rate first

    @classmethod
    def parse(cls, value: "Strategy | str") -> "Strategy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidInputError(
                "Invalid debt payoff strategy.",
                {"strategy": [f"Choose one of: {', '.join(s.value for s in cls)}."]},
            ) from None


@dataclass(frozen=True, slots=True)
class _Position:
    index: int
    debt_id: Optional[int]
    balance: Decimal
    annual_rate: Decimal
    minimum_payment: Decimal


@dataclass(frozen=True, slots=True)
class _State:
    month: int
    positions: tuple[_Position, ...]
    cumulative_interest: Decimal
    payoff_order: tuple[Optional[int], ...]


@dataclass(frozen=True, slots=True)
class MonthSnapshot:
    """Aggregate portfolio position at the end of a simulated month."""

    month: int
    as_of: date
    remaining_debts: int
    total_remaining: Decimal
    interest_paid: Decimal
    cumulative_interest: Decimal
    extra_applied: Decimal
    target_debt_id: Optional[int]
    paid_off: tuple[Optional[int], ...]


@dataclass(frozen=True, slots=True)
class PayoffTimeline:
    """Every debt cleared within the cap."""

    strategy: Strategy
    monthly_budget: Decimal
    total_months: int
    total_interest: Decimal
    estimated_payoff_date: date
    payoff_order: tuple[Optional[int], ...]
    timeline: tuple[MonthSnapshot, ...]

    @property
    def converged(self) -> bool:
        return True

    def require_converged(self) -> "PayoffTimeline":
        return self


@dataclass(frozen=True, slots=True)
class UnresolvableTimeline:
    """The cap was reached with debts still outstanding."""

    strategy: Strategy
    monthly_budget: Decimal
    months_simulated: int
    total_interest: Decimal
    remaining_balance: Decimal
    remaining_debt_ids: tuple[Optional[int], ...]
    payoff_order: tuple[Optional[int], ...]
    timeline: tuple[MonthSnapshot, ...]

    @property
    def converged(self) -> bool:
        return False

    @property
    def estimated_payoff_date(self) -> None:
        return None

    def require_converged(self) -> PayoffTimeline:
        raise UnresolvableBudgetError(self.strategy.value, self.months_simulated)


Timeline = Union[PayoffTimeline, UnresolvableTimeline]


def _priority(strategy: Strategy):
    if strategy is Strategy.SNOWBALL:
        return lambda p: (p.balance, p.index)
    return lambda p: (-p.annual_rate, p.index)


def priority_order(debts: Iterable[DebtLike], strategy: Strategy | str) -> list[Optional[int]]:
    """Debt ids in the order the strategy would target them today."""

    positions = _positions(debts)
    key = _priority(Strategy.parse(strategy))
    return [p.debt_id for p in sorted(positions, key=key)]


def _positions(debts: Iterable[DebtLike]) -> tuple[_Position, ...]:
    positions = []
    for index, debt in enumerate(debts):
        snap = snapshot_of(debt)
        if snap.balance <= 0:
            continue
        positions.append(
            _Position(
                index=index,
                debt_id=snap.id,
                balance=snap.balance,
                annual_rate=snap.interest_rate,
                minimum_payment=snap.minimum_payment,
            )
        )
    return tuple(positions)


def _step(
    state: _State,
    *,
    strategy: Strategy,
    budget: Decimal,
    cascade: bool,
    start: date,
) -> tuple[_State, MonthSnapshot]:
    """Advance the portfolio by one month."""

    month = state.month + 1
    ordered = sorted(state.positions, key=_priority(strategy))

    interest_paid = ZERO
    minimums = ZERO
    accrued: list[_Position] = []
    for position in ordered:
        interest = to_cents(position.balance * monthly_rate(position.annual_rate))
        minimum = min(position.minimum_payment, position.balance)
        interest_paid += interest
        minimums += minimum
        accrued.append(replace(position, balance=position.balance + interest - minimum))

    extra = budget - minimums
    extra_applied = ZERO
    target_id: Optional[int] = None
    if extra > 0 and accrued and not cascade:
        # Only the top-priority debt takes the extra, even if its minimum cleared it.
        target = accrued[0]
        extra_applied = min(extra, target.balance)
        accrued[0] = replace(target, balance=target.balance - extra_applied)
        target_id = target.debt_id
    elif extra > 0:
        for i, position in enumerate(accrued):
            if position.balance <= 0:
                continue
            applied = min(extra, position.balance)
            accrued[i] = replace(position, balance=position.balance - applied)
            if target_id is None:
                target_id = position.debt_id
            extra -= applied
            extra_applied += applied
            if extra <= 0:
                break

    paid_off = tuple(p.debt_id for p in accrued if p.balance <= 0)
    remaining = tuple(p for p in accrued if p.balance > 0)
    cumulative = state.cumulative_interest + interest_paid

    snapshot = MonthSnapshot(
        month=month,
        as_of=add_months(start, month),
        remaining_debts=len(remaining),
        total_remaining=sum((p.balance for p in remaining), ZERO),
        interest_paid=interest_paid,
        cumulative_interest=cumulative,
        extra_applied=extra_applied,
        target_debt_id=target_id,
        paid_off=paid_off,
    )
    next_state = _State(
        month=month,
        positions=remaining,
        cumulative_interest=cumulative,
        payoff_order=state.payoff_order + paid_off,
    )
    return next_state, snapshot


def simulate_strategy(
    debts: Sequence[DebtLike],
    strategy: Strategy | str,
    monthly_budget: Amount | None = None,
    *,
    start: date | None = None,
    max_months: int = DEFAULT_MAX_MONTHS,
    cascade_extra: bool = False,
) -> Timeline:
    """Simulate paying down *debts* with a fixed monthly budget.

    Every month each debt accrues interest and receives its own minimum
    payment; whatever is left of ``monthly_budget`` after the minimums goes to
    the highest-priority debt. With ``cascade_extra`` any leftover after that
    debt clears rolls on to the next one in the same month.
    """
    chosen = Strategy.parse(strategy)
    budget = to_decimal(
        DEFAULT_MONTHLY_BUDGET if monthly_budget is None else monthly_budget,
        field="monthly_budget",
    )
    if budget < 0:
        raise InvalidInputError(
            "Invalid monthly budget", {"monthly_budget": ["Amount must be at least zero."]}
        )
    if max_months <= 0:
        raise InvalidInputError("Invalid simulation cap", {"max_months": ["Must be positive."]})

    first_date = start or date.today()
    state = _State(month=0, positions=_positions(debts), cumulative_interest=ZERO, payoff_order=())
    snapshots: list[MonthSnapshot] = []

    while state.positions and state.month < max_months:
        state, snapshot = _step(
            state, strategy=chosen, budget=budget, cascade=cascade_extra, start=first_date
        )
        snapshots.append(snapshot)

    if state.positions:
        logger.warning(
            "Payoff simulation hit month cap",
            extra={
                "strategy": chosen.value,
                "max_months": max_months,
                "remaining_debts": len(state.positions),
            },
        )
        return UnresolvableTimeline(
            strategy=chosen,
            monthly_budget=budget,
            months_simulated=state.month,
            total_interest=state.cumulative_interest,
            remaining_balance=sum((p.balance for p in state.positions), ZERO),
            remaining_debt_ids=tuple(p.debt_id for p in state.positions),
            payoff_order=state.payoff_order,
            timeline=tuple(snapshots),
        )

    return PayoffTimeline(
        strategy=chosen,
        monthly_budget=budget,
        total_months=state.month,
        total_interest=state.cumulative_interest,
        estimated_payoff_date=add_months(first_date, state.month),
        payoff_order=state.payoff_order,
        timeline=tuple(snapshots),
    )
