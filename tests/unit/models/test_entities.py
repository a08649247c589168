"""Unit tests for the entity models and enums."""
import datetime as dt
from decimal import Decimal

import pytest
from pydantic import ValidationError

from analytics_engine.errors import InvalidGranularityError
from analytics_engine.models import (
    AllocationStatus,
    BillingStatus,
    CompanyExpense,
    Granularity,
    Invoice,
    Member,
    Project,
    ResourceAllocation,
    TimeEntry,
)
from analytics_engine.models.enums import (
    APPROVAL_FILTER_STATUSES,
    BUDGET_CONSUMING,
    ApprovalFilter,
    ApprovalStatus,
)


class TestTimeEntryModel:
    """Test TimeEntry creation and validation."""

    def test_create_from_exported_row(self):
        """Test validating a camelCase storage row."""
        entry = TimeEntry.model_validate(
            {
                "id": "e1",
                "hours": 7.5,
                "date": "2024-01-15",
                "billingStatus": "billable",
                "approvalStatus": "approved",
                "userId": "u1",
                "projectId": "p1",
                "user": {"hourlyRate": 100, "costRate": 50},
                "project": {"name": "Website", "budgetHours": 120},
            }
        )

        assert entry.hours == Decimal("7.5")
        assert entry.billing_status == BillingStatus.BILLABLE
        assert entry.user.hourly_rate == Decimal("100")
        assert entry.project.budget_hours == Decimal("120")
        assert entry.is_billable
        assert not entry.is_invoiced

    def test_negative_hours_rejected(self):
        """Test that negative hours fail validation."""
        with pytest.raises(ValidationError):
            TimeEntry(
                id="e1",
                hours=-1,
                date=dt.date(2024, 1, 1),
                billing_status="billable",
                user_id="u1",
                project_id="p1",
            )

    def test_unknown_billing_status_rejected(self):
        """Test that billing status is a closed set."""
        with pytest.raises(ValidationError):
            TimeEntry(
                id="e1",
                hours=1,
                date=dt.date(2024, 1, 1),
                billing_status="overtime",
                user_id="u1",
                project_id="p1",
            )

    def test_default_approval_is_draft(self):
        """Test the default approval status."""
        entry = TimeEntry(
            id="e1",
            hours=1,
            date=dt.date(2024, 1, 1),
            billing_status="internal",
            user_id="u1",
            project_id="p1",
        )
        assert entry.approval_status == ApprovalStatus.DRAFT
        assert entry.user.hourly_rate == Decimal("0")


class TestMemberModel:
    """Test Member display name and capacity fields."""

    def test_display_name_from_names(self, sample_member):
        """Test full name as display name."""
        assert sample_member.display_name == "Ada Lovelace"

    def test_display_name_falls_back_to_email(self):
        """Test email fallback when no name is set."""
        member = Member(id="u2", email="grace@example.com")
        assert member.display_name == "grace@example.com"

    def test_weekly_target_unset_vs_zero(self):
        """Test that an explicit 0 target is kept distinct from None."""
        assert Member(id="u1").weekly_target is None
        assert Member(id="u1", weekly_target=0).weekly_target == Decimal("0")


class TestProjectModel:
    """Test Project validation."""

    def test_has_budget(self, sample_project):
        """Test budget detection."""
        assert sample_project.has_budget
        assert not Project(id="p2", name="No budget").has_budget
        assert not Project(id="p3", name="Zero", budget_hours=0).has_budget

    def test_reversed_schedule_rejected(self):
        """Test that end before start is rejected."""
        with pytest.raises(ValidationError, match="must not be before"):
            Project(
                id="p1",
                name="Backwards",
                start_date=dt.date(2024, 3, 1),
                end_date=dt.date(2024, 1, 1),
            )

    def test_estimated_percent_bounds(self):
        """Test that the non-billable estimate is a percentage."""
        with pytest.raises(ValidationError):
            Project(id="p1", name="Too much", estimated_non_billable_percent=150)


class TestOtherModels:
    """Test allocation, expense and invoice models."""

    def test_allocation_interval_validated(self):
        """Test that a reversed allocation is rejected."""
        with pytest.raises(ValidationError):
            ResourceAllocation(
                user_id="u1",
                project_id="p1",
                start_date=dt.date(2024, 2, 1),
                end_date=dt.date(2024, 1, 1),
                hours_per_day=8,
            )

    def test_allocation_defaults_to_confirmed(self):
        """Test the default allocation status."""
        allocation = ResourceAllocation(
            user_id="u1",
            project_id="p1",
            start_date=dt.date(2024, 1, 1),
            end_date=dt.date(2024, 1, 31),
            hours_per_day="7.5",
        )
        assert allocation.status == AllocationStatus.CONFIRMED
        assert allocation.bill_rate is None
        assert allocation.hours_per_day == Decimal("7.5")

    def test_company_expense_frequency_optional(self):
        """Test that a recurring expense may omit its frequency."""
        expense = CompanyExpense(amount=300, date=dt.date(2024, 1, 1), recurring=True)
        assert expense.frequency is None
        assert expense.amount == Decimal("300")

    def test_invoice_total_not_negative(self):
        """Test that invoice totals are not negative."""
        with pytest.raises(ValidationError):
            Invoice(id="i1", status="sent", total=-5, invoice_date=dt.date(2024, 1, 1))


class TestEnums:
    """Test enum parsing and total mappings."""

    def test_granularity_parse(self):
        """Test parsing of granularity tokens."""
        assert Granularity.parse("weekly") == Granularity.WEEKLY
        assert Granularity.parse(" Monthly ") == Granularity.MONTHLY
        assert Granularity.parse(Granularity.WEEKLY) is Granularity.WEEKLY

    def test_granularity_parse_rejects_unknown(self):
        """Test that unknown granularities fail fast."""
        with pytest.raises(InvalidGranularityError) as exc_info:
            Granularity.parse("daily")
        assert exc_info.value.field == "granularity"

    def test_mappings_cover_every_member(self):
        """Test that status mappings are total."""
        assert set(BUDGET_CONSUMING) == set(BillingStatus)
        assert set(APPROVAL_FILTER_STATUSES) == set(ApprovalFilter)

    def test_approved_only_keeps_locked(self):
        """Test the statuses kept by approved_only."""
        assert APPROVAL_FILTER_STATUSES[ApprovalFilter.APPROVED_ONLY] == {
            ApprovalStatus.APPROVED,
            ApprovalStatus.LOCKED,
        }
