"""Decimal money helpers shared by the calculators and the payment processor."""

from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime
from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from .errors import InvalidInputError

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")

Amount = Union[Decimal, int, float, str]


def to_cents(value: Decimal) -> Decimal:
    """Round to 2 decimal places, half-up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_decimal(value: Amount | None, *, field: str = "amount") -> Decimal:
    """Parse *value* into a finite Decimal or raise InvalidInputError.

    Floats go through ``str`` so 0.1 becomes Decimal("0.1") rather than its
    binary expansion.
    """
    if value is None or isinstance(value, bool):
        raise InvalidInputError(f"Invalid {field}", {field: ["Enter a valid number."]})
    if isinstance(value, Decimal):
        parsed = value
    else:
        try:
            parsed = Decimal(str(value).strip())
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidInputError(
                f"Invalid {field}", {field: ["Enter a valid number."]}
            ) from None
    if not parsed.is_finite():
        raise InvalidInputError(f"Invalid {field}", {field: ["Enter a finite number."]})
    return parsed


def monthly_rate(annual_percent: Decimal) -> Decimal:
    """Nominal APR in percent to a per-month fraction."""
    return annual_percent / HUNDRED / 12


def daily_rate(annual_percent: Decimal) -> Decimal:
    return annual_percent / HUNDRED / 365


def ceil_int(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_CEILING))


def add_months(value: date, months: int) -> date:
    """Return *value* shifted by *months*, clamping the day to the target month."""

    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def to_date(value: date | datetime | str | None, *, field: str = "date") -> date:
    """Coerce a date, datetime or ISO-8601 string into a ``date``."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            pass
    raise InvalidInputError(f"Invalid {field}", {field: ["Enter a valid ISO-8601 date."]})
