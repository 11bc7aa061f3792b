"""Command line interface tests."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from debtsage.cli import main


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.setenv("DEBTSAGE_LOG_LEVEL", "ERROR")
    monkeypatch.setenv("DEBTSAGE_LOG_TO_FILE", "false")
    return CliRunner()


@pytest.fixture
def invoke(runner, tmp_path):
    def _invoke(*args):
        return runner.invoke(main, ["--data-dir", str(tmp_path), *map(str, args)])

    return _invoke


@pytest.fixture
def seeded(invoke):
    result = invoke("seed-demo")
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


def test_init_db_creates_database(invoke, tmp_path):
    result = invoke("init-db")

    assert result.exit_code == 0, result.output
    assert "Database ready" in result.output
    assert (tmp_path / "debtsage.db").exists()


def test_seed_demo_is_idempotent(invoke, seeded):
    assert len(seeded["debt_ids"]) == 3

    again = invoke("seed-demo")

    assert again.exit_code == 0
    assert "already present" in again.output


def test_list_includes_metrics(invoke, seeded):
    result = invoke("list", "--user-id", seeded["user_id"])

    assert result.exit_code == 0, result.output
    debts = json.loads(result.output)
    assert {d["id"] for d in debts} == set(seeded["debt_ids"])
    assert all("estimated_payoff_months" in d["metrics"] for d in debts)


def test_summary_reports_both_strategies(invoke, seeded):
    result = invoke("summary", "--user-id", seeded["user_id"], "--budget", "1200")

    assert result.exit_code == 0, result.output
    summary = json.loads(result.output)
    assert summary["debt_count"] == 3
    assert summary["suggested_strategy"] in {"snowball", "avalanche"}
    assert summary["avalanche_timeline"]["converged"] is True
    assert summary["totals"]["total_debt"] == "38000.00"


def test_schedule_with_extra_payment(invoke, seeded):
    debt_id = seeded["debt_ids"][0]

    result = invoke("schedule", debt_id, "--user-id", seeded["user_id"], "--extra", "100")

    assert result.exit_code == 0, result.output
    schedule = json.loads(result.output)
    assert schedule["fully_amortized"] is True
    assert schedule["savings"]["extra_payment"] == "100"
    assert schedule["rows"][0]["month"] == 1


def test_simulate_avalanche(invoke, seeded):
    result = invoke(
        "simulate", "--user-id", seeded["user_id"], "--strategy", "avalanche", "--budget", "1200"
    )

    assert result.exit_code == 0, result.output
    timeline = json.loads(result.output)
    assert timeline["strategy"] == "avalanche"
    assert timeline["converged"] is True
    assert sorted(timeline["payoff_order"]) == sorted(seeded["debt_ids"])


def test_pay_records_payment(invoke, seeded):
    debt_id = seeded["debt_ids"][0]

    result = invoke(
        "pay",
        debt_id,
        "--user-id",
        seeded["user_id"],
        "--account-id",
        seeded["account_id"],
        "--amount",
        "250",
        "--date",
        "2024-05-01",
    )

    assert result.exit_code == 0, result.output
    payment = json.loads(result.output)
    assert payment["new_balance"] == "3600.00"
    assert payment["transaction"]["amount"] == "-250.00"
    assert payment["debt"]["due_date"] == "2024-06-01"


def test_pay_rejects_bad_amount(invoke, seeded):
    result = invoke(
        "pay",
        seeded["debt_ids"][0],
        "--user-id",
        seeded["user_id"],
        "--account-id",
        seeded["account_id"],
        "--amount",
        "-10",
    )

    assert result.exit_code == 1
    assert "Invalid payment parameters" in result.output


def test_schedule_unknown_debt(invoke, seeded):
    result = invoke("schedule", 999, "--user-id", seeded["user_id"])

    assert result.exit_code == 1
    assert "Debt not found" in result.output
