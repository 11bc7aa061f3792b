"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, create_db_engine, create_session_factory, init_database
from .infra.repositories import (
    SQLModelAccountRepository,
    SQLModelDebtRepository,
    SQLModelTransactionRepository,
)
from .logging_config import setup_logging
from .services.debts import DebtService
from .services.locks import LockRegistry


@dataclass
class AppContext:
    """Centralized application context with repositories and services."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory

    debt_repo: SQLModelDebtRepository
    account_repo: SQLModelAccountRepository
    transaction_repo: SQLModelTransactionRepository

    debt_service: DebtService

    def dispose(self) -> None:
        self.engine.dispose()


def create_app_context(
    config: Optional[BaseConfig] = None, *, configure_logging: bool = True
) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()
    if configure_logging:
        setup_logging(config)

    engine = create_db_engine(config)
    init_database(engine)
    session_factory = create_session_factory(engine)

    debt_repo = SQLModelDebtRepository(session_factory)
    account_repo = SQLModelAccountRepository(session_factory)
    transaction_repo = SQLModelTransactionRepository(session_factory)

    # One lock registry per process so every payment path shares it.
    debt_service = DebtService(
        session_factory,
        config=config,
        debt_repo=debt_repo,
        account_repo=account_repo,
        transaction_repo=transaction_repo,
        locks=LockRegistry(),
    )

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        debt_repo=debt_repo,
        account_repo=account_repo,
        transaction_repo=transaction_repo,
        debt_service=debt_service,
    )
