"""Repository interfaces (protocols) for the engine's external stores."""

from .account import AccountRepository
from .debt import DebtRepository
from .transaction import TransactionRepository

__all__ = ["AccountRepository", "DebtRepository", "TransactionRepository"]
