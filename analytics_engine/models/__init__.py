"""Data models for the analytics engine.

This package contains Pydantic models for all business entities:
- BaseDataModel: Base class with common configuration
- TimeEntry: Hours logged by a member on a project
- Member: Team member rates and capacity
- Project: Project budget, schedule and rate settings
- ProjectExpense, CompanyExpense, MaterializedExpense: Expense records
- ResourceAllocation: Planned staffing
- Invoice: Billed amounts
"""

from analytics_engine.models.allocation import ResourceAllocation
from analytics_engine.models.base import BaseDataModel
from analytics_engine.models.enums import (
    AllocationStatus,
    ApprovalFilter,
    ApprovalStatus,
    BillingStatus,
    ExpenseFrequency,
    Granularity,
    InvoiceStatus,
    RateMode,
    VacationTrackingUnit,
)
from analytics_engine.models.expense import (
    CompanyExpense,
    MaterializedExpense,
    ProjectExpense,
)
from analytics_engine.models.invoice import Invoice
from analytics_engine.models.member import Member
from analytics_engine.models.project import Project
from analytics_engine.models.time_entry import EntryProject, EntryUser, TimeEntry

__all__ = [
    "BaseDataModel",
    "TimeEntry",
    "EntryUser",
    "EntryProject",
    "Member",
    "Project",
    "ProjectExpense",
    "CompanyExpense",
    "MaterializedExpense",
    "ResourceAllocation",
    "Invoice",
    "AllocationStatus",
    "ApprovalFilter",
    "ApprovalStatus",
    "BillingStatus",
    "ExpenseFrequency",
    "Granularity",
    "InvoiceStatus",
    "RateMode",
    "VacationTrackingUnit",
]
