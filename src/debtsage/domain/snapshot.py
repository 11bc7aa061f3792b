"""Immutable point-in-time view of a debt.

The pure calculators only ever see snapshots, so a row mutated by a payment
on another thread cannot change a computation half-way through.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Protocol, Union

from ..money import to_decimal


class DebtLike(Protocol):
    """Anything exposing the numeric fields of a debt."""

    balance: Decimal
    interest_rate: Decimal
    minimum_payment: Decimal


@dataclass(frozen=True, slots=True)
class DebtSnapshot:
    """Numeric and identifying fields of a debt at one instant."""

    balance: Decimal
    interest_rate: Decimal
    minimum_payment: Decimal
    principal: Decimal = Decimal("0")
    id: Optional[int] = None
    name: str = ""
    debt_type: str = ""

    @classmethod
    def of(
        cls,
        *,
        balance: Union[Decimal, int, float, str],
        interest_rate: Union[Decimal, int, float, str],
        minimum_payment: Union[Decimal, int, float, str],
        principal: Union[Decimal, int, float, str, None] = None,
        id: Optional[int] = None,
        name: str = "",
        debt_type: str = "",
    ) -> "DebtSnapshot":
        """Build a snapshot from loosely typed numbers; principal defaults to balance."""
        balance_dec = to_decimal(balance, field="balance")
        return cls(
            balance=balance_dec,
            interest_rate=to_decimal(interest_rate, field="interest_rate"),
            minimum_payment=to_decimal(minimum_payment, field="minimum_payment"),
            principal=(
                balance_dec if principal is None else to_decimal(principal, field="principal")
            ),
            id=id,
            name=name,
            debt_type=debt_type,
        )


def snapshot_of(debt: DebtLike) -> DebtSnapshot:
    """Freeze a Debt row (or another snapshot) into a DebtSnapshot."""

    if isinstance(debt, DebtSnapshot):
        return debt
    principal = getattr(debt, "principal", None)
    return DebtSnapshot.of(
        balance=debt.balance,
        interest_rate=debt.interest_rate,
        minimum_payment=debt.minimum_payment,
        principal=principal,
        id=getattr(debt, "id", None),
        name=getattr(debt, "name", "") or "",
        debt_type=getattr(debt, "debt_type", "") or "",
    )
