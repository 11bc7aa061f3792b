"""Tests for per-debt metrics and the closed-form payoff estimate."""

from __future__ import annotations

from decimal import Decimal

from debtsage.models import Debt
from debtsage.services.metrics import NON_AMORTIZING, compute_metrics, estimate_payoff
from tests.conftest import snapshot


class TestPayoffEstimate:
    """Closed-form months and interest."""

    def test_amortizing_debt_has_finite_payoff(self):
        """5000 at 18.5% paying 150 clears in 48 months."""
        metrics = compute_metrics(snapshot("5000", "18.5", "150", principal="5000"))

        assert metrics.estimated_payoff_months == 48
        assert metrics.total_interest == Decimal("2200.00")
        assert metrics.is_on_track is True
        assert metrics.amortizing is True

    def test_payment_below_interest_is_non_amortizing(self):
        """1000 at 30% accrues 25/month, so a 10 payment never clears it."""
        metrics = compute_metrics(snapshot("1000", "30", "10"))

        assert metrics.estimated_payoff_months is None
        assert metrics.total_interest is None
        assert metrics.is_on_track is False
        assert metrics.amortizing is False
        assert metrics.monthly_interest == Decimal("25.00")

    def test_payment_equal_to_interest_is_non_amortizing(self):
        assert estimate_payoff(Decimal("1200"), Decimal("12"), Decimal("12")) == NON_AMORTIZING

    def test_zero_rate_amortizes_linearly(self):
        estimate = estimate_payoff(Decimal("1000"), Decimal("0"), Decimal("300"))

        assert estimate.months == 4
        assert estimate.total_interest == Decimal("0")

    def test_zero_balance_needs_no_months(self):
        estimate = estimate_payoff(Decimal("0"), Decimal("18"), Decimal("25"))

        assert estimate.months == 0
        assert estimate.total_interest == Decimal("0")
        assert estimate.amortizing is True

    def test_zero_payment_is_non_amortizing(self):
        assert not estimate_payoff(Decimal("100"), Decimal("0"), Decimal("0")).amortizing


class TestDebtMetrics:
    """Derived read-time fields."""

    def test_interest_and_paid_amounts(self):
        metrics = compute_metrics(snapshot("2500", "18.5", "150", principal="5000"))

        assert metrics.progress_percentage == Decimal("50.00")
        assert metrics.total_paid == Decimal("2500.00")
        assert metrics.monthly_interest == Decimal("38.54")
        assert metrics.daily_interest == Decimal("1.27")

    def test_paid_off_debt_reports_full_progress(self):
        metrics = compute_metrics(snapshot("0", "18.5", "150", principal="5000"))

        assert metrics.progress_percentage == Decimal("100.00")
        assert metrics.estimated_payoff_months == 0
        assert metrics.total_interest == Decimal("0")
        assert metrics.is_on_track is True

    def test_progress_is_zero_for_new_debt(self):
        metrics = compute_metrics(snapshot("800", "10", "50", principal="800"))
        assert metrics.progress_percentage == Decimal("0.00")

    def test_progress_is_bounded_by_zero_and_hundred(self):
        # Balance above principal can happen through capitalised interest.
        metrics = compute_metrics(snapshot("1200", "10", "50", principal="1000"))
        assert metrics.progress_percentage == Decimal("0.00")
        assert metrics.total_paid == Decimal("0.00")

    def test_metrics_are_deterministic(self):
        debt = snapshot("3210.55", "21.99", "95", principal="4000")
        assert compute_metrics(debt) == compute_metrics(debt)

    def test_accepts_unsaved_debt_rows(self):
        debt = Debt(
            user_id=1,
            name="Car",
            debt_type="auto",
            principal=Decimal("5000.00"),
            balance=Decimal("5000.00"),
            interest_rate=Decimal("18.5"),
            minimum_payment=Decimal("150.00"),
        )

        metrics = compute_metrics(debt)

        assert metrics.estimated_payoff_months == 48
        assert debt.balance == Decimal("5000.00")

    def test_as_dict_exposes_every_field(self):
        data = compute_metrics(snapshot("1000", "30", "10")).as_dict()

        assert set(data) == {
            "estimated_payoff_months",
            "total_interest",
            "progress_percentage",
            "monthly_interest",
            "daily_interest",
            "total_paid",
            "is_on_track",
            "amortizing",
        }
        assert data["estimated_payoff_months"] is None
