"""Closed enumerations used across the analytics models.

Each enum is a ``str`` subclass so values compare and serialize as their
wire tokens. Code that branches on an enum uses a mapping keyed by every
member, never an open-ended ``else``.
"""

from enum import Enum
from typing import Union

from analytics_engine.errors import InvalidGranularityError


class BillingStatus(str, Enum):
    """Invoiceability of a time entry."""

    BILLABLE = "billable"
    INCLUDED = "included"
    NON_BILLABLE = "non_billable"
    INTERNAL = "internal"
    PRESALES = "presales"


class ApprovalStatus(str, Enum):
    """Workflow state of a time entry or expense."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    LOCKED = "locked"
    REJECTED = "rejected"


class Granularity(str, Enum):
    """Period bucketing resolution."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: Union[str, "Granularity"]) -> "Granularity":
        """Parse a granularity token, failing fast on anything unknown.

        Args:
            value: Token such as ``"monthly"`` or an existing Granularity

        Returns:
            The matching Granularity member

        Raises:
            InvalidGranularityError: If the token is not supported

        Example:
            >>> Granularity.parse("weekly")
            <Granularity.WEEKLY: 'weekly'>
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise InvalidGranularityError(
                f"Invalid granularity: {value!r}. Must be one of: {valid}",
                field="granularity",
            )


class RateMode(str, Enum):
    """How a project's bill rate is resolved."""

    EMPLOYEE_RATES = "employee_rates"
    PROJECT_RATE = "project_rate"


class AllocationStatus(str, Enum):
    """Resource allocation lifecycle state."""

    TENTATIVE = "tentative"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"


class InvoiceStatus(str, Enum):
    """Invoice lifecycle state."""

    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    VOID = "void"


class ExpenseFrequency(str, Enum):
    """Recurrence of a company expense."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class VacationTrackingUnit(str, Enum):
    """Unit a member's vacation balance is tracked in."""

    DAYS = "days"
    HOURS = "hours"


class ApprovalFilter(str, Enum):
    """Row filter applied by the reporting layer before aggregation."""

    APPROVED_ONLY = "approved_only"
    ALL = "all"


# Statuses whose hours count against a project's hour budget
BUDGET_CONSUMING = {
    BillingStatus.BILLABLE: True,
    BillingStatus.INCLUDED: True,
    BillingStatus.NON_BILLABLE: False,
    BillingStatus.INTERNAL: False,
    BillingStatus.PRESALES: False,
}

# Breakdown bucket of each status in the non-billable trend (None = billable side)
NON_BILLABLE_CATEGORY = {
    BillingStatus.BILLABLE: None,
    BillingStatus.INCLUDED: None,
    BillingStatus.NON_BILLABLE: "non_billable",
    BillingStatus.INTERNAL: "internal",
    BillingStatus.PRESALES: "presales",
}

# Whether an allocation still contributes to forward-looking forecasts
ALLOCATION_COUNTS_FORWARD = {
    AllocationStatus.TENTATIVE: True,
    AllocationStatus.CONFIRMED: True,
    AllocationStatus.COMPLETED: False,
}

# Invoice statuses that represent money actually billed to a client
INVOICE_IS_BILLED = {
    InvoiceStatus.DRAFT: False,
    InvoiceStatus.SENT: True,
    InvoiceStatus.PAID: True,
    InvoiceStatus.VOID: False,
}

# Approval statuses kept by each approval filter
APPROVAL_FILTER_STATUSES = {
    ApprovalFilter.APPROVED_ONLY: frozenset(
        {ApprovalStatus.APPROVED, ApprovalStatus.LOCKED}
    ),
    ApprovalFilter.ALL: frozenset(ApprovalStatus),
}

# Monthly amortization divisor for recurring company expenses
MONTHLY_AMORTIZATION = {
    ExpenseFrequency.MONTHLY: 1,
    ExpenseFrequency.QUARTERLY: 3,
    ExpenseFrequency.YEARLY: 12,
}
