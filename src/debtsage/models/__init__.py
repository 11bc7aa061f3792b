"""SQLModel table exports."""

from .account import Account
from .debt import Debt, DebtType
from .transaction import DEBT_PAYMENT_CATEGORY, Transaction
from .user import User

__all__ = [
    "Account",
    "Debt",
    "DebtType",
    "DEBT_PAYMENT_CATEGORY",
    "Transaction",
    "User",
]
