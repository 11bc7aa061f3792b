"""DebtSage debt payoff and amortization engine."""

from __future__ import annotations

from .config import BaseConfig, DevConfig, TestConfig
from .context import AppContext, create_app_context

__version__ = "0.1.0"

__all__ = ["AppContext", "BaseConfig", "DevConfig", "TestConfig", "create_app_context"]
