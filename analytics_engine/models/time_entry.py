"""Time entry data model.

A time entry is the atomic unit of every hour, revenue and cost figure. It
carries snapshots of the member's rates and the project's budget fields as
they were when the row was fetched.
"""

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from analytics_engine.models.base import BaseDataModel, NumericInput, convert_to_decimal
from analytics_engine.models.enums import ApprovalStatus, BillingStatus


class EntryUser(BaseDataModel):
    """Rate snapshot of the member who logged an entry.

    Attributes:
        hourly_rate: Bill rate per hour
        cost_rate: Cost per hour
        weekly_target: Weekly target hours (None when unset)
    """

    hourly_rate: Decimal = Field(Decimal("0"), ge=0)
    cost_rate: Decimal = Field(Decimal("0"), ge=0)
    weekly_target: Optional[Decimal] = Field(None, ge=0)

    @field_validator("hourly_rate", "cost_rate", "weekly_target", mode="before")
    @classmethod
    def convert_numbers(cls, v: Optional[NumericInput]) -> Optional[Decimal]:
        """Convert numeric values to Decimal for precision."""
        return convert_to_decimal(v)


class EntryProject(BaseDataModel):
    """Snapshot of the project an entry was logged against.

    Attributes:
        name: Project name
        client: Client name
        billable: Whether the project is billable
        budget_hours: Hour budget (None when not configured)
    """

    name: str = Field(..., min_length=1)
    client: Optional[str] = None
    billable: bool = True
    budget_hours: Optional[Decimal] = Field(None, ge=0)

    @field_validator("budget_hours", mode="before")
    @classmethod
    def convert_numbers(cls, v: Optional[NumericInput]) -> Optional[Decimal]:
        """Convert numeric values to Decimal for precision."""
        return convert_to_decimal(v)


class TimeEntry(BaseDataModel):
    """Represents hours a member logged on a project for one day.

    Attributes:
        id: Unique entry identifier
        hours: Hours worked (never negative)
        date: Day the work happened
        billing_status: Invoiceability of the hours
        approval_status: Workflow state of the entry
        user_id: Member who logged the hours
        project_id: Project the hours were logged against
        phase_name: Optional project phase
        invoice_id: Invoice the entry is attached to, if any
        invoiced_at: When the entry was invoiced
        user: Rate snapshot of the member
        project: Snapshot of the project, when the row was joined

    Example:
        >>> entry = TimeEntry(
        ...     id="e1",
        ...     hours=Decimal("7.5"),
        ...     date=dt.date(2024, 1, 15),
        ...     billing_status="billable",
        ...     approval_status="approved",
        ...     user_id="u1",
        ...     project_id="p1",
        ...     user=EntryUser(hourly_rate=100, cost_rate=50),
        ... )
        >>> entry.is_billable
        True
    """

    id: str = Field(..., min_length=1, description="Entry identifier")
    hours: Decimal = Field(..., ge=0, description="Hours worked")
    date: dt.date = Field(..., description="Date of work")
    billing_status: BillingStatus = Field(..., description="Billing status")
    approval_status: ApprovalStatus = Field(
        ApprovalStatus.DRAFT, description="Approval status"
    )
    user_id: str = Field(..., min_length=1, description="Member identifier")
    project_id: str = Field(..., min_length=1, description="Project identifier")
    phase_name: Optional[str] = Field(None, description="Project phase")
    invoice_id: Optional[str] = Field(None, description="Attached invoice")
    invoiced_at: Optional[dt.datetime] = Field(None, description="Invoiced at")
    user: EntryUser = Field(default_factory=EntryUser)
    project: Optional[EntryProject] = Field(None)

    @field_validator("hours", mode="before")
    @classmethod
    def convert_hours(cls, v: NumericInput) -> Decimal:
        """Convert hours to Decimal for precision."""
        return convert_to_decimal(v)

    @property
    def is_billable(self) -> bool:
        """True when the hours are billed at the member's rate."""
        return self.billing_status == BillingStatus.BILLABLE

    @property
    def is_invoiced(self) -> bool:
        """True when the entry is attached to an invoice."""
        return self.invoice_id is not None
