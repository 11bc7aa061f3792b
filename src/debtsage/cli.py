"""Command line interface for the debt engine.

Every command prints JSON so the output can be piped into other tools.
"""

from __future__ import annotations

import dataclasses
import json
from datetime import date
from decimal import Decimal
from typing import Any

import click
from sqlmodel import select

from .config import BaseConfig
from .context import AppContext, create_app_context
from .errors import DebtSageError, InvalidInputError
from .models import Account, Debt, Transaction, User
from .services.debts import DebtWithMetrics
from .services.metrics import DebtMetrics
from .services.payments import PaymentResult
from .services.schedule import Schedule
from .services.strategy import Strategy
from .services.summary import DebtSummary

DEMO_USERNAME = "demo"

DEMO_DEBTS = (
    {
        "name": "Visa Platinum",
        "debt_type": "credit_card",
        "principal": "4200.00",
        "balance": "3850.00",
        "interest_rate": "22.99",
        "minimum_payment": "115.00",
        "lender": "First Card Bank",
    },
    {
        "name": "Car Loan",
        "debt_type": "auto",
        "principal": "18000.00",
        "balance": "12400.00",
        "interest_rate": "6.25",
        "minimum_payment": "365.00",
        "term_months": 60,
        "lender": "Metro Credit Union",
    },
    {
        "name": "Student Loan",
        "debt_type": "student",
        "principal": "26000.00",
        "balance": "21750.00",
        "interest_rate": "4.50",
        "minimum_payment": "270.00",
        "term_months": 120,
    },
)


def _jsonable(value: Any) -> Any:
    """Convert engine results into plain JSON-friendly structures."""

    if isinstance(value, DebtWithMetrics):
        return {**_jsonable(value.debt), "metrics": _jsonable(value.metrics)}
    if isinstance(value, DebtMetrics):
        return _jsonable(value.as_dict())
    if isinstance(value, (Debt, Account, Transaction)):
        return _jsonable(value.model_dump())
    if isinstance(value, Schedule):
        return {
            **_jsonable(dataclasses.asdict(value)),
            "total_months": value.total_months,
            "total_interest": value.total_interest,
            "total_paid": value.total_paid,
        }
    if isinstance(value, DebtSummary):
        return {
            **_jsonable(dataclasses.asdict(value)),
            "snowball_timeline": _jsonable(value.snowball_timeline),
            "avalanche_timeline": _jsonable(value.avalanche_timeline),
            "totals": _jsonable(value.totals),
        }
    if isinstance(value, PaymentResult):
        return {
            "payment_applied": value.payment_applied,
            "previous_balance": value.previous_balance,
            "new_balance": value.new_balance,
            "debt": _jsonable(value.debt),
            "transaction": _jsonable(value.transaction),
            "metrics": _jsonable(value.metrics),
        }
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        data = _jsonable(dataclasses.asdict(value))
        data["converged"] = getattr(value, "converged", None)
        return data
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, Strategy):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    return value


def _emit(value: Any) -> None:
    click.echo(json.dumps(_jsonable(value), indent=2, default=str))


def _app(ctx: click.Context) -> AppContext:
    """Build the application context on first use and dispose it on exit."""

    root = ctx.find_root()
    app = root.meta.get("debtsage.app")
    if app is None:
        config = BaseConfig(data_dir=root.params.get("data_dir"))
        app = create_app_context(config)
        root.meta["debtsage.app"] = app
        root.call_on_close(app.dispose)
    return app


def _fail(exc: DebtSageError) -> click.ClickException:
    message = exc.message
    if isinstance(exc, InvalidInputError) and exc.errors:
        details = "; ".join(
            f"{name}: {' '.join(messages)}" for name, messages in sorted(exc.errors.items())
        )
        message = f"{message} ({details})"
    return click.ClickException(message)


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding the SQLite database and logs.",
)
@click.pass_context
def main(ctx: click.Context, data_dir: str | None) -> None:
    """Plan and record debt payoff."""


@main.command("init-db")
@click.pass_context
def init_db(ctx: click.Context) -> None:
    """Create the database schema."""

    app = _app(ctx)
    click.echo(f"Database ready: {app.config.DATABASE_URL}")


@main.command("seed-demo")
@click.pass_context
def seed_demo(ctx: click.Context) -> None:
    """Create a demo user with a checking account and three debts."""

    app = _app(ctx)
    with app.session_factory() as session:
        user = session.exec(select(User).where(User.username == DEMO_USERNAME)).first()
        if user is not None:
            click.echo(f"Demo data already present for user {user.id}")
            return
        user = User(username=DEMO_USERNAME)
        session.add(user)
        session.flush()
        session.refresh(user)
        user_id = user.id

    account = app.account_repo.create(
        Account(user_id=user_id, name="Checking", balance=Decimal("5000.00")),
        user_id=user_id,
    )
    today = date.today()
    debt_ids = [
        app.debt_service.create_debt(user_id, start_date=today, due_date=today, **fields).debt.id
        for fields in DEMO_DEBTS
    ]
    _emit({"user_id": user_id, "account_id": account.id, "debt_ids": debt_ids})


@main.command("list")
@click.option("--user-id", type=int, required=True)
@click.option("--active-only", is_flag=True, default=False)
@click.pass_context
def list_debts(ctx: click.Context, user_id: int, active_only: bool) -> None:
    """List debts with their metrics."""

    app = _app(ctx)
    _emit(app.debt_service.list_debts(user_id, include_inactive=not active_only))


@main.command("summary")
@click.option("--user-id", type=int, required=True)
@click.option("--budget", default=None, help="Total monthly budget for debt payments.")
@click.pass_context
def summary(ctx: click.Context, user_id: int, budget: str | None) -> None:
    """Totals plus snowball and avalanche timelines."""

    app = _app(ctx)
    try:
        result = app.debt_service.get_summary(user_id, monthly_budget=budget)
    except DebtSageError as exc:
        raise _fail(exc) from exc
    _emit(result)


@main.command("schedule")
@click.argument("debt_id", type=int)
@click.option("--user-id", type=int, required=True)
@click.option("--extra", default="0", show_default=True, help="Extra amount paid every month.")
@click.pass_context
def schedule(ctx: click.Context, debt_id: int, user_id: int, extra: str) -> None:
    """Amortization schedule for one debt."""

    app = _app(ctx)
    try:
        result = app.debt_service.generate_schedule(debt_id, user_id, extra)
    except DebtSageError as exc:
        raise _fail(exc) from exc
    _emit(result)


@main.command("simulate")
@click.option("--user-id", type=int, required=True)
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in Strategy]),
    default=Strategy.AVALANCHE.value,
    show_default=True,
)
@click.option("--budget", default=None, help="Total monthly budget for debt payments.")
@click.pass_context
def simulate(ctx: click.Context, user_id: int, strategy: str, budget: str | None) -> None:
    """Simulate paying off all active debts."""

    app = _app(ctx)
    try:
        debts = app.debt_repo.list_active(user_id=user_id)
        result = app.debt_service.simulate_strategy(debts, strategy, budget)
    except DebtSageError as exc:
        raise _fail(exc) from exc
    _emit(result)


@main.command("pay")
@click.argument("debt_id", type=int)
@click.option("--user-id", type=int, required=True)
@click.option("--account-id", type=int, required=True)
@click.option("--amount", required=True)
@click.option("--date", "payment_date", default=None, help="ISO-8601 date, defaults to today.")
@click.option("--description", default=None)
@click.pass_context
def pay(
    ctx: click.Context,
    debt_id: int,
    user_id: int,
    account_id: int,
    amount: str,
    payment_date: str | None,
    description: str | None,
) -> None:
    """Record a payment from an account towards a debt."""

    app = _app(ctx)
    try:
        result = app.debt_service.make_payment(
            debt_id,
            amount,
            payment_date or date.today(),
            account_id,
            user_id,
            description,
        )
    except DebtSageError as exc:
        raise _fail(exc) from exc
    _emit(result)


if __name__ == "__main__":  # pragma: no cover
    main()
