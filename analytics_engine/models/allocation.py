"""Resource allocation data model used by the staffing forecasts."""

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator, model_validator

from analytics_engine.models.base import BaseDataModel, NumericInput, convert_to_decimal
from analytics_engine.models.enums import AllocationStatus


class ResourceAllocation(BaseDataModel):
    """Planned hours per day for a member on a project over a date interval.

    Attributes:
        user_id: Allocated member
        project_id: Project the member is allocated to
        start_date: First allocated day (inclusive)
        end_date: Last allocated day (inclusive)
        hours_per_day: Planned hours per working day
        status: Tentative, confirmed or completed
        bill_rate: Resolved bill rate; None until resolved from the project
            or the member
    """

    user_id: str = Field(..., min_length=1)
    project_id: str = Field(..., min_length=1)
    start_date: dt.date
    end_date: dt.date
    hours_per_day: Decimal = Field(..., ge=0)
    status: AllocationStatus = AllocationStatus.CONFIRMED
    bill_rate: Optional[Decimal] = Field(None, ge=0)

    @field_validator("hours_per_day", "bill_rate", mode="before")
    @classmethod
    def convert_numbers(cls, v: Optional[NumericInput]) -> Optional[Decimal]:
        """Convert numeric values to Decimal for precision."""
        return convert_to_decimal(v)

    @model_validator(mode="after")
    def validate_interval(self) -> "ResourceAllocation":
        """Validate that the allocation interval is not reversed.

        Raises:
            ValueError: If end_date is before start_date
        """
        if self.end_date < self.start_date:
            raise ValueError(
                f"end_date ({self.end_date}) must not be before "
                f"start_date ({self.start_date})"
            )
        return self
