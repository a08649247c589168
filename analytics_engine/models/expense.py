"""Expense data models.

Project expenses are one-off costs booked against a project. Company
expenses are overhead that may recur; recurring ones are materialized into
dated occurrences before they reach the company aggregators.
"""

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from analytics_engine.models.base import BaseDataModel, NumericInput, convert_to_decimal
from analytics_engine.models.enums import ApprovalStatus, ExpenseFrequency

PROJECT_EXPENSE_CATEGORIES = ("travel", "materials", "software", "meals", "other")

COMPANY_EXPENSE_CATEGORIES = (
    "rent",
    "insurance",
    "utilities",
    "software",
    "salaries",
    "other",
)

# Category columns of the expense breakdown report, in display order
EXPENSE_BREAKDOWN_CATEGORIES = (
    "travel",
    "materials",
    "software",
    "meals",
    "rent",
    "insurance",
    "utilities",
    "salaries",
    "other",
)


class _AmountModel(BaseDataModel):
    """Shared amount handling for expense records."""

    amount: Decimal = Field(..., description="Expense amount")

    @field_validator("amount", mode="before")
    @classmethod
    def convert_amount(cls, v: NumericInput) -> Decimal:
        """Convert the amount to Decimal for precision."""
        return convert_to_decimal(v)


class ProjectExpense(_AmountModel):
    """An expense booked against a project.

    Attributes:
        project_id: Project the expense belongs to
        amount: Expense amount
        date: Date the expense occurred
        category: Expense category (see PROJECT_EXPENSE_CATEGORIES)
        description: Free-text description
        approval_status: Workflow state of the expense
    """

    project_id: Optional[str] = None
    date: dt.date
    category: str = "other"
    description: str = ""
    approval_status: ApprovalStatus = ApprovalStatus.APPROVED


class CompanyExpense(_AmountModel):
    """A company overhead expense, optionally recurring.

    Attributes:
        amount: Amount per occurrence at the expense's own frequency
        date: First occurrence (recurring) or the only occurrence
        category: Expense category (see COMPANY_EXPENSE_CATEGORIES)
        description: Free-text description
        recurring: Whether the expense repeats
        frequency: Recurrence; None on a recurring expense means monthly
    """

    date: dt.date
    category: str = "other"
    description: str = ""
    recurring: bool = False
    frequency: Optional[ExpenseFrequency] = None


class MaterializedExpense(_AmountModel):
    """One dated expense occurrence consumed directly by the aggregators.

    Attributes:
        amount: Amount attributed to this occurrence
        date: Date of the occurrence
        category: Expense category
        description: Free-text description
    """

    date: dt.date
    category: str = "other"
    description: str = ""
