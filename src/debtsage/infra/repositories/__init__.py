"""Concrete repository implementations using SQLModel."""

from .account import SQLModelAccountRepository
from .debt import SQLModelDebtRepository
from .transaction import SQLModelTransactionRepository

__all__ = [
    "SQLModelAccountRepository",
    "SQLModelDebtRepository",
    "SQLModelTransactionRepository",
]
