"""Pytest configuration and shared fixtures for DebtSage tests.

This module provides database fixtures, test data factories, and helper utilities
for testing the calculators, repositories, and services without touching a real
data directory.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

import pytest
from sqlmodel import select

from debtsage.config import TestConfig
from debtsage.context import create_app_context
from debtsage.domain.snapshot import DebtSnapshot
from debtsage.logging_config import ROOT_LOGGER_NAME
from debtsage.models import Account, Debt, User

ENV_KEYS = (
    "DEBTSAGE_DATA_DIR",
    "DEBTSAGE_DATABASE_URL",
    "DEBTSAGE_DEV_MODE",
    "DEBTSAGE_LOG_LEVEL",
    "DEBTSAGE_LOG_TO_FILE",
    "DEBTSAGE_MONTHLY_EXTRA_BUDGET",
    "DEBTSAGE_SCHEDULE_MAX_MONTHS",
    "DEBTSAGE_SIMULATION_MAX_MONTHS",
    "DEBTSAGE_CASCADE_EXTRA_BUDGET",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer shells and .env files from leaking into tests."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo any handlers or level set by setup_logging during a test."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def test_config(tmp_path):
    """Test configuration rooted in a throwaway data directory."""
    return TestConfig(data_dir=tmp_path)


@pytest.fixture(scope="function")
def app_context(test_config):
    """Application context backed by a temp-file SQLite database.

    Yields:
        AppContext: engine, repositories and services for one test
    """
    ctx = create_app_context(test_config, configure_logging=False)
    yield ctx
    ctx.dispose()


@pytest.fixture(scope="function")
def db_engine(app_context):
    return app_context.engine


@pytest.fixture(scope="function")
def session_factory(app_context):
    """Session factory whose blocks commit on success and roll back on error."""
    return app_context.session_factory


@pytest.fixture
def debt_service(app_context):
    return app_context.debt_service


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(session_factory):
    """Factory for creating users.

    Returns:
        Callable: Function that creates and persists User instances
    """

    def _create_user(username: str = "tester") -> User:
        with session_factory() as session:
            existing = session.exec(select(User).where(User.username == username)).first()
            if existing is not None:
                return existing
            user = User(username=username)
            session.add(user)
            session.flush()
            session.refresh(user)
            return user

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    """Default user for scoping data."""
    return user_factory()


@pytest.fixture
def account_factory(session_factory, user):
    """Factory for creating funding accounts.

    Returns:
        Callable: Function that creates and persists Account instances
    """

    def _create_account(
        name: str = "Checking",
        balance: Decimal | str = "5000.00",
        currency: str = "USD",
        owner: User | None = None,
    ) -> Account:
        owner = owner or user
        with session_factory() as session:
            account = Account(
                user_id=owner.id,
                name=name,
                currency=currency,
                balance=Decimal(str(balance)),
            )
            session.add(account)
            session.flush()
            session.refresh(account)
            return account

    return _create_account


@pytest.fixture
def debt_factory(debt_service, user):
    """Factory for creating debts through the service layer.

    Returns:
        Callable: Function that validates, persists and returns Debt instances
    """

    def _create_debt(
        name: str = "Test Debt",
        principal: Decimal | str = "1000.00",
        balance: Decimal | str | None = None,
        interest_rate: Decimal | str = "18.0",
        minimum_payment: Decimal | str = "25.00",
        debt_type: str = "credit_card",
        start_date: date = date(2024, 1, 1),
        due_date: date | None = None,
        owner: User | None = None,
        **extra,
    ) -> Debt:
        owner = owner or user
        fields = dict(
            name=name,
            principal=principal,
            interest_rate=interest_rate,
            minimum_payment=minimum_payment,
            debt_type=debt_type,
            start_date=start_date,
            due_date=due_date,
            **extra,
        )
        if balance is not None:
            fields["balance"] = balance
        return debt_service.create_debt(owner.id, **fields).debt

    return _create_debt


def snapshot(
    balance: str,
    interest_rate: str,
    minimum_payment: str,
    *,
    principal: str | None = None,
    id: int | None = None,
    debt_type: str = "loan",
) -> DebtSnapshot:
    """Shorthand for building an in-memory debt."""
    return DebtSnapshot.of(
        balance=balance,
        interest_rate=interest_rate,
        minimum_payment=minimum_payment,
        principal=principal,
        id=id,
        name=f"debt-{id}" if id is not None else "",
        debt_type=debt_type,
    )


# =============================================================================
# Helper Utilities
# =============================================================================


def assert_decimal_equal(actual, expected, tolerance: str = "0.01"):
    """Assert that two amounts are equal within a tolerance.

    Args:
        actual: Actual value
        expected: Expected value
        tolerance: Maximum allowed difference (default 0.01 = 1 cent)

    Raises:
        AssertionError: If values differ by more than tolerance
    """
    actual_dec = Decimal(str(actual))
    expected_dec = Decimal(str(expected))
    diff = abs(actual_dec - expected_dec)
    assert diff <= Decimal(tolerance), f"Expected {expected_dec}, got {actual_dec} (diff: {diff})"
