"""Unit tests for repository implementations."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from debtsage.infra.repositories import (
    SQLModelAccountRepository,
    SQLModelDebtRepository,
    SQLModelTransactionRepository,
)
from debtsage.models import Account, Debt, Transaction


@pytest.fixture
def account_repo(session_factory):
    return SQLModelAccountRepository(session_factory)


@pytest.fixture
def debt_repo(session_factory):
    return SQLModelDebtRepository(session_factory)


@pytest.fixture
def transaction_repo(session_factory):
    return SQLModelTransactionRepository(session_factory)


def make_debt(**overrides) -> Debt:
    values = dict(
        user_id=0,
        name="Loan",
        debt_type="loan",
        principal=Decimal("1000.00"),
        balance=Decimal("1000.00"),
        interest_rate=Decimal("7.5"),
        minimum_payment=Decimal("50.00"),
        start_date=date(2024, 1, 1),
    )
    values.update(overrides)
    return Debt(**values)


class TestAccountRepository:
    def test_create_and_list(self, account_repo, user):
        account_repo.create(Account(user_id=0, name="Savings"), user_id=user.id)
        account_repo.create(
            Account(user_id=0, name="Checking", balance=Decimal("10.00")), user_id=user.id
        )

        accounts = account_repo.list_all(user_id=user.id)

        assert [a.name for a in accounts] == ["Checking", "Savings"]
        assert all(a.user_id == user.id for a in accounts)

    def test_balance_scoped_by_user(self, account_repo, account_factory, user, user_factory):
        account = account_factory(balance="42.00")
        stranger = user_factory("stranger")

        assert account_repo.get_balance(account.id, user_id=user.id) == Decimal("42.00")
        assert account_repo.get_balance(account.id, user_id=stranger.id) is None

    def test_decrement_within_session(self, account_repo, account_factory, session_factory, user):
        account = account_factory(balance="100.00")

        with session_factory() as session:
            locked = account_repo.get_for_update(session, account.id, user_id=user.id)
            account_repo.decrement_balance(session, locked, Decimal("30.00"))

        assert account_repo.get_balance(account.id, user_id=user.id) == Decimal("70.00")


class TestDebtRepository:
    def test_create_assigns_owner(self, debt_repo, user):
        debt = debt_repo.create(make_debt(), user_id=user.id)

        assert debt.id is not None
        assert debt_repo.get_by_id(debt.id, user_id=user.id).user_id == user.id

    def test_update_touches_timestamp(self, debt_repo, user):
        debt = debt_repo.create(make_debt(), user_id=user.id)
        before = debt.updated_at

        debt.name = "Renamed"
        updated = debt_repo.update(debt, user_id=user.id)

        assert updated.name == "Renamed"
        assert updated.updated_at >= before

    def test_list_active_excludes_closed(self, debt_repo, user):
        open_debt = debt_repo.create(make_debt(name="Open"), user_id=user.id)
        debt_repo.create(
            make_debt(name="Closed", balance=Decimal("0"), is_active=False), user_id=user.id
        )

        assert [d.id for d in debt_repo.list_active(user_id=user.id)] == [open_debt.id]
        assert len(debt_repo.list_all(user_id=user.id)) == 2

    def test_delete_missing_returns_false(self, debt_repo, user):
        assert debt_repo.delete(999, user_id=user.id) is False


class TestTransactionRepository:
    def test_append_and_filter(
        self, transaction_repo, debt_repo, account_factory, session_factory, user
    ):
        account = account_factory()
        debt = debt_repo.create(make_debt(), user_id=user.id)

        with session_factory() as session:
            for day in (1, 2):
                transaction_repo.append(
                    session,
                    Transaction(
                        user_id=user.id,
                        account_id=account.id,
                        debt_id=debt.id,
                        amount=Decimal("-10.00"),
                        occurred_at=datetime(2024, 1, day),
                    ),
                )

        by_debt = transaction_repo.filter_by_debt(debt.id, user_id=user.id)
        by_account = transaction_repo.filter_by_account(account.id, user_id=user.id)

        assert [t.occurred_at.day for t in by_debt] == [2, 1]
        assert [t.id for t in by_account] == [t.id for t in by_debt]
        assert transaction_repo.get_by_id(by_debt[0].id, user_id=user.id) is not None
        assert debt_repo.count_payments(debt.id, user_id=user.id) == 2
