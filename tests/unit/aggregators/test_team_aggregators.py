"""Unit tests for team-level aggregations."""
import datetime as dt
from decimal import Decimal

import pytest

from analytics_engine.aggregators.team import (
    aggregate_team_profitability,
    aggregate_team_time_mix,
    aggregate_team_utilization,
)
from analytics_engine.errors import InvalidGranularityError
from analytics_engine.models import Member


@pytest.fixture
def members():
    """Three members in display order, the last without contracted hours."""
    return [
        Member(id="u2", email="b@example.com", hourly_rate=120, cost_rate=60, weekly_target=40),
        Member(id="u1", first_name="Ada", hourly_rate=100, cost_rate=50, weekly_target=20),
        Member(id="u3", email="c@example.com", hourly_rate=90, cost_rate=45, weekly_target=0),
    ]


class TestTeamUtilization:
    """Test one utilization row per member."""

    def test_rows_follow_member_order(self, make_entry, members):
        """Test order and zero rows for idle members."""
        entries = [make_entry(10, user_id="u1", date=dt.date(2024, 1, 8))]

        rows = aggregate_team_utilization(
            entries, members, dt.date(2024, 1, 8), dt.date(2024, 1, 14), "weekly"
        )

        assert [r.member_id for r in rows] == ["u2", "u1", "u3"]
        assert rows[0].total_hours == 0
        assert rows[0].total_util == 0
        assert rows[1].expected_hours == Decimal("20.0")
        assert rows[1].billable_util == Decimal("50.0")
        assert rows[1].name == "Ada"

    def test_zero_weekly_target_gives_zero_utilization(self, make_entry, members):
        """Test that hours against no expected hours give 0% utilization."""
        entries = [make_entry(8, user_id="u3", date=dt.date(2024, 1, 9))]

        rows = aggregate_team_utilization(
            entries, members, dt.date(2024, 1, 8), dt.date(2024, 1, 14), "weekly"
        )

        zero_target = rows[2]
        assert zero_target.member_id == "u3"
        assert zero_target.expected_hours == 0
        assert zero_target.total_hours == Decimal("8.0")
        assert zero_target.billable_util == 0
        assert zero_target.total_util == 0

    def test_unknown_members_ignored(self, make_entry, members):
        """Test that entries of other members are skipped."""
        entries = [make_entry(10, user_id="ghost")]

        rows = aggregate_team_utilization(
            entries, members, dt.date(2024, 1, 1), dt.date(2024, 1, 31), "monthly"
        )

        assert all(r.total_hours == 0 for r in rows)

    def test_invalid_granularity_rejected(self, members):
        """Test that the granularity is validated."""
        with pytest.raises(InvalidGranularityError):
            aggregate_team_utilization(
                [], members, dt.date(2024, 1, 1), dt.date(2024, 1, 31), "hourly"
            )


class TestTeamProfitability:
    """Test revenue, cost and margin per member."""

    def test_margin_percentage(self, make_entry, members):
        """Test margin at member rates."""
        entries = [
            make_entry(10, user_id="u1"),
            make_entry(5, "internal", user_id="u1"),
        ]

        rows = aggregate_team_profitability(entries, members)

        ada = rows[1]
        assert ada.revenue == Decimal("1000.00")
        assert ada.cost == Decimal("750.00")
        assert ada.margin == Decimal("25.0")

    def test_no_revenue_means_zero_margin(self, make_entry, members):
        """Test the guarded margin."""
        rows = aggregate_team_profitability([make_entry(4, "internal", user_id="u2")], members)
        assert rows[0].cost == Decimal("240.00")
        assert rows[0].margin == 0


class TestTeamTimeMix:
    """Test status columns per member."""

    def test_every_status_column(self, make_entry, members):
        """Test the five status columns and total."""
        entries = [
            make_entry(6, user_id="u1"),
            make_entry(2, "included", user_id="u1"),
            make_entry(1, "presales", user_id="u1"),
        ]

        rows = aggregate_team_time_mix(entries, members)

        ada = rows[1]
        assert (ada.billable, ada.included, ada.presales) == (
            Decimal("6.0"),
            Decimal("2.0"),
            Decimal("1.0"),
        )
        assert ada.internal == 0
        assert ada.total == Decimal("9.0")
        assert rows[0].total == 0
