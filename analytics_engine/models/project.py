"""Project data model for the analytics engine.

This module defines the Project model which carries the budget, schedule and
rate settings used by the project reports, risk detectors and forecasts.
"""

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator, model_validator

from analytics_engine.models.base import BaseDataModel, NumericInput, convert_to_decimal
from analytics_engine.models.enums import RateMode


class Project(BaseDataModel):
    """Represents a client or internal project.

    Attributes:
        id: Unique project identifier
        name: Project name
        client: Optional client name
        color: Display color token
        billable: Whether the project is billed to a client
        budget_hours: Hour budget; None means no budget is configured
        active: Whether the project is still active
        estimated_non_billable_percent: Expected non-billable overhead as a
            percentage of billable hours (0-100)
        start_date: Planned start date
        end_date: Planned end date
        rate_mode: Whether to bill at member rates or a flat project rate
        project_rate: Flat hourly rate used in project-rate mode
        system_type: Optional marker for system projects (e.g. absence)

    Example:
        >>> project = Project(id="p1", name="Website Redesign", budget_hours=120)
        >>> project.has_budget
        True
    """

    id: str = Field(..., min_length=1, description="Project identifier")
    name: str = Field(..., min_length=1, description="Project name")
    client: Optional[str] = Field(None, description="Client name")
    color: str = Field("#3B82F6", description="Display color")
    billable: bool = Field(True, description="Billed to a client")
    budget_hours: Optional[Decimal] = Field(None, ge=0, description="Hour budget")
    active: bool = Field(True, description="Project is active")
    estimated_non_billable_percent: Optional[Decimal] = Field(None, ge=0, le=100)
    start_date: Optional[dt.date] = Field(None, description="Planned start")
    end_date: Optional[dt.date] = Field(None, description="Planned end")
    rate_mode: RateMode = Field(RateMode.EMPLOYEE_RATES)
    project_rate: Optional[Decimal] = Field(None, ge=0)
    system_type: Optional[str] = Field(None)

    @field_validator(
        "budget_hours", "estimated_non_billable_percent", "project_rate", mode="before"
    )
    @classmethod
    def convert_numbers(cls, v: Optional[NumericInput]) -> Optional[Decimal]:
        """Convert numeric values to Decimal for precision."""
        return convert_to_decimal(v)

    @model_validator(mode="after")
    def validate_schedule(self) -> "Project":
        """Validate that the planned end does not precede the planned start.

        Returns:
            The validated model instance

        Raises:
            ValueError: If end_date is before start_date
        """
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError(
                f"end_date ({self.end_date}) must not be before "
                f"start_date ({self.start_date})"
            )
        return self

    @property
    def has_budget(self) -> bool:
        """True when a positive hour budget is configured."""
        return self.budget_hours is not None and self.budget_hours > 0
