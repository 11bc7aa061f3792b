"""Service module exports."""

from . import debts, locks, metrics, payments, savings, schedule, strategy, summary

__all__ = [
    "debts",
    "locks",
    "metrics",
    "payments",
    "savings",
    "schedule",
    "strategy",
    "summary",
]
