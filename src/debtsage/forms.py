"""Debt input validation helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

from .errors import InvalidInputError
from .models.debt import DebtType
from .money import to_date

MAX_NAME_LENGTH = 100
MAX_LENDER_LENGTH = 100


@dataclass(slots=True)
class DebtForm:
    """Represents debt inputs and associated validation errors.

    ``None`` means "not supplied". Full validation (creation) requires the
    core fields; partial validation (updates) only checks what was supplied.
    """

    name: str | None = None
    debt_type: DebtType | str | None = None
    principal: Decimal | str | float | int | None = None
    balance: Decimal | str | float | int | None = None
    interest_rate: Decimal | str | float | int | None = None
    minimum_payment: Decimal | str | float | int | None = None
    start_date: date | datetime | str | None = None
    due_date: date | datetime | str | None = None
    term_months: int | str | None = None
    lender: str | None = None
    account_number: str | None = None
    notes: str | None = None
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    REQUIRED = ("name", "debt_type", "principal", "interest_rate", "minimum_payment", "start_date")

    def validate(self, *, partial: bool = False) -> bool:
        """Validate inputs returning True when all supplied values are acceptable."""

        self.errors.clear()

        if not partial:
            for name in self.REQUIRED:
                if getattr(self, name) in (None, ""):
                    self._error(name, "This field is required.")

        if self.name is not None:
            self.name = self.name.strip()
            if not self.name or len(self.name) > MAX_NAME_LENGTH:
                self._error("name", f"Name must be between 1-{MAX_NAME_LENGTH} characters.")

        if self.debt_type not in (None, ""):
            try:
                self.debt_type = DebtType(str(getattr(self.debt_type, "value", self.debt_type)))
            except ValueError:
                self._error("debt_type", "Invalid debt type.")

        self.principal = self._parse_amount("principal", self.principal, minimum=Decimal("0.01"))
        self.balance = self._parse_amount("balance", self.balance, minimum=Decimal("0"))
        self.interest_rate = self._parse_amount(
            "interest_rate", self.interest_rate, minimum=Decimal("0")
        )
        self.minimum_payment = self._parse_amount(
            "minimum_payment", self.minimum_payment, minimum=Decimal("0.01")
        )

        if isinstance(self.interest_rate, Decimal) and self.interest_rate > Decimal("100"):
            self._error("interest_rate", "Interest rate must be 0-100.")

        if isinstance(self.principal, Decimal) and isinstance(self.balance, Decimal):
            if self.balance > self.principal:
                self._error("balance", "Balance cannot exceed the principal.")

        self.start_date = self._parse_date("start_date", self.start_date)
        self.due_date = self._parse_date("due_date", self.due_date)

        if self.term_months not in (None, ""):
            try:
                self.term_months = int(self.term_months)
            except (TypeError, ValueError):
                self._error("term_months", "Term must be a whole number of months.")
            else:
                if self.term_months < 1:
                    self._error("term_months", "Term must be positive.")

        if self.lender is not None:
            self.lender = self.lender.strip()
            if len(self.lender) > MAX_LENDER_LENGTH:
                self._error("lender", "Lender name too long.")

        return not self.errors

    def validate_or_raise(self, *, partial: bool = False) -> "DebtForm":
        if not self.validate(partial=partial):
            raise InvalidInputError("Invalid debt data", self.errors)
        return self

    def supplied(self) -> dict[str, Any]:
        """Parsed values that were supplied, ready to set on a Debt."""

        values: dict[str, Any] = {}
        for name in (
            "name", "debt_type", "principal", "balance", "interest_rate", "minimum_payment",
            "start_date", "due_date", "term_months", "lender", "account_number", "notes",
        ):
            value = getattr(self, name)
            if value is None or value == "":
                continue
            values[name] = value.value if isinstance(value, DebtType) else value
        return values

    def _error(self, field_name: str, message: str) -> None:
        self.errors.setdefault(field_name, []).append(message)

    def _parse_amount(
        self,
        field_name: str,
        value: Decimal | str | float | int | None,
        *,
        minimum: Decimal,
    ) -> Decimal | None:
        """Parse and validate numeric input, storing errors when parsing fails."""

        if value is None or value == "":
            return None
        if isinstance(value, bool):
            self._error(field_name, "Enter a valid number.")
            return None

        if not isinstance(value, Decimal):
            try:
                value = Decimal(str(value).strip())
            except (InvalidOperation, TypeError, ValueError):
                self._error(field_name, "Enter a valid number.")
                return None

        if not value.is_finite():
            self._error(field_name, "Enter a valid number.")
            return None

        if value < minimum:
            message = (
                "Amount must be greater than zero."
                if minimum > 0
                else "Amount must be at least zero."
            )
            self._error(field_name, message)
        return value

    def _parse_date(self, field_name: str, value: date | datetime | str | None) -> date | None:
        if value is None or value == "":
            return None
        try:
            return to_date(value, field=field_name)
        except InvalidInputError:
            self._error(field_name, "Enter a valid ISO-8601 date.")
            return None
