"""Unit tests for financial formulas and rounding."""
from decimal import Decimal

import pytest

from analytics_engine.calculators.metric_formulas import (
    average_cost_rate,
    billable_hours,
    cost,
    hours_by_status,
    margin_percent,
    mean,
    profit,
    revenue,
    round_currency,
    round_hours,
    round_percent,
    safe_ratio,
    total_hours,
    utilization_percent,
)
from analytics_engine.models import BillingStatus


class TestRounding:
    """Test the half-away-from-zero rounding policy."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("7.25", "7.3"),
            ("7.24", "7.2"),
            ("-7.25", "-7.3"),
            ("0.05", "0.1"),
        ],
    )
    def test_round_hours(self, value, expected):
        """Test hours rounding to one decimal."""
        assert round_hours(Decimal(value)) == Decimal(expected)

    def test_round_percent_negative(self):
        """Test that negative percentages round away from zero."""
        assert round_percent(Decimal("-12.35")) == Decimal("-12.4")

    def test_round_currency(self):
        """Test currency rounding to cents."""
        assert round_currency(Decimal("1234.565")) == Decimal("1234.57")
        assert round_currency(Decimal("2.675")) == Decimal("2.68")
        assert str(round_currency(Decimal("5"))) == "5.00"


class TestRevenueAndCost:
    """Test revenue, cost and profit."""

    def test_revenue_counts_billable_only(self, make_entry):
        """Test that non-billable hours earn nothing."""
        entries = [make_entry(10), make_entry(5, "internal"), make_entry(2, "included")]
        assert revenue(entries) == Decimal("1000")

    def test_revenue_with_override_rate(self, make_entry):
        """Test revenue at an explicit rate."""
        entries = [make_entry(10, hourly_rate="80")]
        assert revenue(entries, Decimal("100")) == Decimal("1000")

    def test_cost_counts_all_hours(self, make_entry):
        """Test that every hour accrues cost."""
        entries = [make_entry(10), make_entry(5, "internal")]
        assert cost(entries) == Decimal("750")

    def test_cost_with_override_rate(self, make_entry):
        """Test cost at an explicit rate."""
        entries = [make_entry(4, cost_rate="10")]
        assert cost(entries, Decimal("25")) == Decimal("100")

    def test_empty_inputs_are_zero(self):
        """Test that empty inputs produce zero, not errors."""
        assert revenue([]) == 0
        assert cost([]) == 0
        assert total_hours([]) == 0
        assert billable_hours([]) == 0

    def test_profit(self):
        """Test profit as revenue minus cost."""
        assert profit(Decimal("1000"), Decimal("750")) == Decimal("250")


class TestRatios:
    """Test guarded ratio formulas."""

    def test_utilization(self):
        """Test utilization percentage."""
        assert utilization_percent(Decimal("30"), Decimal("40")) == Decimal("75")

    def test_utilization_zero_expected(self):
        """Test that zero expected hours give zero utilization."""
        assert utilization_percent(Decimal("10"), Decimal("0")) == 0

    def test_margin_without_revenue(self):
        """Test that margin is 0 when there is no revenue."""
        assert margin_percent(Decimal("-50"), Decimal("0")) == 0

    def test_margin(self):
        """Test margin percentage."""
        assert margin_percent(Decimal("250"), Decimal("1000")) == Decimal("25")

    def test_safe_ratio_negative_denominator(self):
        """Test that negative denominators are guarded too."""
        assert safe_ratio(Decimal("1"), Decimal("-1")) == 0

    def test_mean_and_average_cost_rate(self, make_entry):
        """Test means, including the empty case."""
        assert mean([]) == 0
        assert mean([Decimal("1000"), Decimal("1200"), Decimal("1100")]) == 1100
        entries = [make_entry(1, cost_rate="40"), make_entry(9, cost_rate="60")]
        assert average_cost_rate(entries) == Decimal("50")
        assert average_cost_rate([]) == 0


class TestHoursByStatus:
    """Test status breakdowns."""

    def test_include_empty_lists_every_status(self, make_entry):
        """Test the zero-filled breakdown."""
        totals = hours_by_status([make_entry(3, "presales")])
        assert list(totals) == list(BillingStatus)
        assert totals[BillingStatus.PRESALES] == 3
        assert totals[BillingStatus.BILLABLE] == 0

    def test_sparse_breakdown_in_first_seen_order(self, make_entry):
        """Test the sparse breakdown."""
        totals = hours_by_status(
            [make_entry(3, "internal"), make_entry(2, "billable"), make_entry(1, "internal")],
            include_empty=False,
        )
        assert list(totals) == [BillingStatus.INTERNAL, BillingStatus.BILLABLE]
        assert totals[BillingStatus.INTERNAL] == 4
