"""Unit tests for the revenue bridge."""
import datetime as dt
from decimal import Decimal

from analytics_engine.aggregators.results import CompanyPeriodPoint, MonthlyRevenue
from analytics_engine.forecast.revenue_bridge import (
    compute_monthly_breakeven,
    compute_revenue_bridge,
    historical_monthly_costs,
    monthly_actual_revenue,
)
from analytics_engine.models import ResourceAllocation


class TestMonthlyActualRevenue:
    """Test actual revenue per month."""

    def test_billable_revenue_per_month(self, make_entry):
        """Test that only billable revenue is summed."""
        entries = [
            make_entry(10, date=dt.date(2024, 1, 5)),
            make_entry(5, "internal", date=dt.date(2024, 1, 6)),
            make_entry(2, date=dt.date(2024, 3, 1)),
        ]

        rows = monthly_actual_revenue(entries)

        assert rows == [
            MonthlyRevenue(period_key="2024-01", revenue=Decimal("1000.00")),
            MonthlyRevenue(period_key="2024-03", revenue=Decimal("200.00")),
        ]


class TestMonthlyBreakeven:
    """Test the breakeven line."""

    def test_average_cost(self):
        """Test the mean of monthly costs."""
        assert compute_monthly_breakeven([Decimal("900"), Decimal("1100")]) == Decimal("1000.00")

    def test_no_months(self):
        """Test that no history gives 0."""
        assert compute_monthly_breakeven([]) == Decimal("0.00")

    def test_history_skips_empty_and_future_months(self):
        """Test that only costed months up to today are kept."""

        def point(key, cost):
            return CompanyPeriodPoint(
                period=key,
                period_key=key,
                revenue=Decimal("0"),
                overhead=Decimal("0"),
                total_cost=Decimal(cost),
                contribution_margin=-Decimal(cost),
                project_expenses=Decimal("0"),
                company_expenses=Decimal("0"),
            )

        points = [
            point("2024-01", "500"),
            point("2024-02", "0"),
            point("2024-03", "700"),
            point("2024-04", "900"),
            point("2024-05", "0"),
        ]

        costs = historical_monthly_costs(points, dt.date(2024, 3, 31))

        assert costs == [Decimal("500"), Decimal("700")]
        assert compute_monthly_breakeven(costs) == Decimal("600.00")


class TestComputeRevenueBridge:
    """Test the bridge around the current month."""

    def _allocation(self):
        return ResourceAllocation(
            user_id="u1",
            project_id="p1",
            start_date=dt.date(2024, 3, 1),
            end_date=dt.date(2024, 4, 30),
            hours_per_day=4,
            bill_rate=100,
        )

    def test_bridge_shape(self):
        """Test actual, forecast and breakeven per month."""
        actuals = [MonthlyRevenue(period_key="2024-01", revenue=Decimal("1000.00"))]

        points = compute_revenue_bridge(
            [self._allocation()],
            actuals,
            Decimal("500"),
            dt.date(2024, 3, 15),
            months_back=2,
            months_forward=1,
        )

        assert [p.period_key for p in points] == ["2024-01", "2024-02", "2024-03", "2024-04"]
        assert points[0].period == "January 2024"
        assert points[0].actual == Decimal("1000.00")
        assert points[0].forecast is None
        # missing month counts as zero
        assert points[1].actual == Decimal("0.00")
        assert points[2].actual == Decimal("0.00")
        assert points[2].forecast == Decimal("8400.00")
        assert points[3].actual is None
        assert points[3].forecast == Decimal("8800.00")
        assert all(p.breakeven == Decimal("500.00") for p in points)

    def test_default_window(self):
        """Test five months back and three forward."""
        points = compute_revenue_bridge([], [], 0, dt.date(2024, 6, 10))

        assert len(points) == 9
        assert points[0].period_key == "2024-01"
        assert points[-1].period_key == "2024-09"
